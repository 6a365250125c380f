# File: clinic_agenda/models/conflict.py

from dataclasses import dataclass
from typing import Tuple

from .enums import ConflictKind, ResourceKind, Severity


@dataclass(frozen=True)
class Conflict:
    """Two events whose times overlap. Derived and never persisted."""
    event_id_a: str
    event_id_b: str
    kind: ConflictKind
    severity: Severity

    @property
    def event_ids(self) -> Tuple[str, str]:
        return self.event_id_a, self.event_id_b

    @property
    def is_blocking(self) -> bool:
        return self.severity == Severity.ERROR

    def involves(self, event_id: str) -> bool:
        return event_id in (self.event_id_a, self.event_id_b)

    def to_dict(self) -> dict:
        return {
            'event_id_a': self.event_id_a,
            'event_id_b': self.event_id_b,
            'kind': self.kind.value,
            'severity': self.severity.value,
        }


@dataclass(frozen=True)
class ResourceClash:
    """
    The first booked event a proposed change would collide with, and which
    resource they share. Always blocking.
    """
    event_id: str
    title: str
    resource_kind: ResourceKind
    resource_id: str

    @property
    def severity(self) -> Severity:
        return Severity.ERROR

    def to_dict(self) -> dict:
        return {
            'event_id': self.event_id,
            'title': self.title,
            'resource_kind': self.resource_kind.value,
            'resource_id': self.resource_id,
            'severity': self.severity.value,
        }
