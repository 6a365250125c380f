# File: clinic_agenda/models/resource.py

from dataclasses import dataclass
from typing import Optional

from .common import coerce_enum
from .enums import ResourceKind, RESOURCE_KIND_ALIASES


@dataclass(frozen=True)
class Resource:
    """A professional or a room an event may occupy."""
    id: str
    kind: ResourceKind
    name: Optional[str] = None
    color: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'kind', coerce_enum(ResourceKind, self.kind, RESOURCE_KIND_ALIASES))


def resource_from_dict(data: dict) -> Resource:
    """Create Resource from dictionary."""
    return Resource(
        id=str(data['id']),
        kind=data.get('kind') or data.get('tipo') or ResourceKind.PROFESSIONAL,
        name=data.get('name') or data.get('nombre'),
        color=data.get('color'),
    )
