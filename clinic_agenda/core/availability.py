# File: clinic_agenda/core/availability.py
"""
Availability search.

Generates candidate starts every slot across the working window (or the
preferred hours), drops those clashing with a professional's active events,
scores the rest and returns the best ones.

Scoring (0-100), only when preferences are given:
    base 50
    +30 preferred professional
    +20 start inside the preferred hours
    -10 start before 08:00 or after 19:59
    +10 start in 09-12 or 16-19
"""

import datetime
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from clinic_agenda.core.config_manager import Config
from clinic_agenda.core.occupancy import events_for_day
from clinic_agenda.core.time_grid import DayLike, TimeGrid
from clinic_agenda.models.enums import EventState
from clinic_agenda.models.event import AgendaEvent
from clinic_agenda.models.resource import Resource
from clinic_agenda.utils.logger import setup_logger

logger = setup_logger(__name__)

BASE_SCORE = 50

# Only these states hold a slot for availability purposes
BLOCKING_STATES = frozenset({EventState.SCHEDULED, EventState.CONFIRMED})


def parse_hhmm(value: str) -> int:
    """'13:30' -> minutes since midnight."""
    hours, minutes = value.split(':')
    return int(hours) * 60 + int(minutes)


@dataclass(frozen=True)
class SlotPreferences:
    """Optional hints from whoever is booking."""
    start_time: Optional[str] = None  # "09:00"
    end_time: Optional[str] = None  # "18:00"
    exclude_lunch: bool = False
    preferred_professional_id: Optional[str] = None


@dataclass(frozen=True)
class AvailableSlot:
    start: datetime.datetime
    end: datetime.datetime
    professional_id: str
    professional_name: Optional[str] = None
    room_id: Optional[str] = None
    score: int = BASE_SCORE
    reason: str = "Slot available"

    def to_dict(self) -> dict:
        return {
            'start': self.start.isoformat(),
            'end': self.end.isoformat(),
            'professional_id': self.professional_id,
            'professional_name': self.professional_name,
            'room_id': self.room_id,
            'score': self.score,
            'reason': self.reason,
        }


def score_slot(start: datetime.datetime, professional_id: str,
               preferences: Optional[SlotPreferences]) -> Tuple[int, str]:
    """Score a candidate start. Returns (score, human readable reason)."""
    if preferences is None:
        return BASE_SCORE, "Slot available"

    score = BASE_SCORE
    reasons = []

    if preferences.preferred_professional_id and professional_id == preferences.preferred_professional_id:
        score += 30
        reasons.append("Preferred professional")

    if preferences.start_time and preferences.end_time:
        minute = start.hour * 60 + start.minute
        if parse_hhmm(preferences.start_time) <= minute <= parse_hhmm(preferences.end_time):
            score += 20
            reasons.append("Within preferred hours")

    hour = start.hour
    if hour < 8 or hour > 19:
        score -= 10
        reasons.append("Off-peak hour")

    if 9 <= hour < 12 or 16 <= hour < 19:
        score += 10
        reasons.append("Prime hour")

    return max(0, min(100, score)), ", ".join(reasons) or "Slot available"


def candidate_starts(
    day: DayLike,
    duration_minutes: int,
    preferences: Optional[SlotPreferences] = None,
    grid: Optional[TimeGrid] = None,
    lunch: Optional[Tuple[str, str]] = None,
) -> List[datetime.datetime]:
    """
    Slot-aligned starts whose whole duration fits the search window. The
    preferred hours narrow the working window but never widen it.
    """
    grid = grid or TimeGrid()
    first = grid.window_start_minute
    last = grid.config.end_hour * 60
    if preferences and preferences.start_time:
        first = max(first, parse_hhmm(preferences.start_time))
    if preferences and preferences.end_time:
        last = min(last, parse_hhmm(preferences.end_time))

    lunch_range = None
    if preferences and preferences.exclude_lunch:
        lunch_start, lunch_end = lunch or (Config.LUNCH_START, Config.LUNCH_END)
        lunch_range = (parse_hhmm(lunch_start), parse_hhmm(lunch_end))

    starts = []
    minute = first
    while minute + duration_minutes <= last:
        if lunch_range and not (minute + duration_minutes <= lunch_range[0] or minute >= lunch_range[1]):
            minute += grid.slot_minutes
            continue
        starts.append(grid.at(day, minute))
        minute += grid.slot_minutes
    return starts


def _blocks(event: AgendaEvent, professional_id: Optional[str], room_id: Optional[str]) -> bool:
    if event.state not in BLOCKING_STATES:
        return False
    if professional_id is not None and event.professional_id == professional_id:
        return True
    return room_id is not None and event.room_id == room_id


def _clashes(start, end, event: AgendaEvent, grid: TimeGrid) -> bool:
    return start < grid.local(event.end) and end > grid.local(event.start)


def find_available_slots(
    events: Iterable[AgendaEvent],
    day: DayLike,
    duration_minutes: int,
    professionals: Iterable[Resource],
    room_id: Optional[str] = None,
    preferences: Optional[SlotPreferences] = None,
    max_results: Optional[int] = None,
    grid: Optional[TimeGrid] = None,
    lunch: Optional[Tuple[str, str]] = None,
) -> List[AvailableSlot]:
    """
    Best free slots on ``day`` across the given professionals.

    A candidate is rejected when it overlaps a scheduled or confirmed event
    of the professional, or of ``room_id`` when a room is requested. Results
    are sorted by score, highest first; ties keep professional order, then
    time order.
    """
    if duration_minutes <= 0:
        raise ValueError(f"Duration must be positive: {duration_minutes}")

    grid = grid or TimeGrid()
    max_results = Config.MAX_AVAILABILITY_RESULTS if max_results is None else max_results
    day_events = events_for_day(events, day, grid)
    starts = candidate_starts(day, duration_minutes, preferences, grid, lunch)
    length = datetime.timedelta(minutes=duration_minutes)

    found: List[AvailableSlot] = []
    for professional in professionals:
        blocking = [e for e in day_events if _blocks(e, professional.id, room_id)]
        for start in starts:
            end = start + length
            if any(_clashes(start, end, e, grid) for e in blocking):
                continue
            score, reason = score_slot(start, professional.id, preferences)
            found.append(AvailableSlot(
                start=start,
                end=end,
                professional_id=professional.id,
                professional_name=professional.name,
                room_id=room_id,
                score=score,
                reason=reason,
            ))

    found.sort(key=lambda slot: slot.score, reverse=True)
    logger.debug(f"{len(found)} free slots of {duration_minutes} min on {grid.local_day(day)}")
    return found[:max_results]


def is_slot_available(
    events: Iterable[AgendaEvent],
    professional_id: str,
    start: datetime.datetime,
    end: datetime.datetime,
    exclude_event_id: Optional[str] = None,
    grid: Optional[TimeGrid] = None,
) -> bool:
    """
    True when ``professional_id`` has no active event overlapping
    [start, end). ``exclude_event_id`` lets a reschedule ignore the event
    being moved.
    """
    grid = grid or TimeGrid()
    start, end = grid.local(start), grid.local(end)
    for event in events:
        if event.id == exclude_event_id:
            continue
        if _blocks(event, professional_id, None) and _clashes(start, end, event, grid):
            return False
    return True
