# File: clinic_agenda/models/proposals.py
"""
Changes proposed by the interaction layer. The engine only proposes;
persisting them is the caller's job.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class MoveProposal:
    event_id: str
    new_start: datetime
    new_resource_id: Optional[str] = None


@dataclass(frozen=True)
class ResizeProposal:
    event_id: str
    new_duration_minutes: int


@dataclass(frozen=True)
class CreateProposal:
    start: datetime
    resource_id: Optional[str] = None
