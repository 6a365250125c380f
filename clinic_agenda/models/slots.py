# File: clinic_agenda/models/slots.py
"""
Grid-derived value types: slots, free windows and rendered positions.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TimeSlot:
    """A (hour, minute) row on the time grid."""
    hour: int
    minute: int

    @property
    def label(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"

    @property
    def minute_of_day(self) -> int:
        return self.hour * 60 + self.minute


@dataclass(frozen=True)
class FreeWindow:
    """An unoccupied interval inside the working window."""
    start: datetime
    end: datetime

    def duration_minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60

    def to_dict(self) -> dict:
        return {'start': self.start.isoformat(), 'end': self.end.isoformat()}


@dataclass(frozen=True)
class EventPosition:
    """Vertical placement of an event card, in grid units (pixels)."""
    top: float
    height: float
