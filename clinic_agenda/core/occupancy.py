# File: clinic_agenda/core/occupancy.py
"""
Occupancy and free-time analysis for a single day, optionally scoped to one
resource (professional or room).
"""

import datetime
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from clinic_agenda.core.conflicts import conflicts_for
from clinic_agenda.core.time_grid import DayLike, TimeGrid
from clinic_agenda.models.common import round_half_up
from clinic_agenda.models.enums import EventState
from clinic_agenda.models.event import AgendaEvent
from clinic_agenda.models.slots import FreeWindow
from clinic_agenda.utils.logger import setup_logger

logger = setup_logger(__name__)


def events_for_day(
    events: Iterable[AgendaEvent],
    day: DayLike,
    grid: Optional[TimeGrid] = None,
) -> List[AgendaEvent]:
    """Events starting on ``day`` (grid wall-clock), input order kept."""
    grid = grid or TimeGrid()
    target = grid.local_day(day)
    return [e for e in events if grid.local_day(e.start) == target]


def _relevant(events, day, resource_id, grid, include_cancelled) -> List[AgendaEvent]:
    selected = []
    for event in events_for_day(events, day, grid):
        if event.is_cancelled and not include_cancelled:
            continue
        if resource_id is not None and not event.uses_resource(resource_id):
            continue
        selected.append(event)
    return selected


def occupancy_rate(
    events: Iterable[AgendaEvent],
    day: DayLike,
    resource_id: Optional[str] = None,
    grid: Optional[TimeGrid] = None,
    include_cancelled: bool = False,
) -> int:
    """
    Percentage of the working window consumed by the day's events.

    Durations are summed without removing overlaps, so double-booked time
    counts twice and the rate can exceed 100. Anything over 100 means the
    day (or resource) is overloaded.
    """
    grid = grid or TimeGrid()
    selected = _relevant(events, day, resource_id, grid, include_cancelled)
    total_minutes = sum(e.duration_minutes() for e in selected)
    return round_half_up(100 * total_minutes / grid.window_minutes)


def free_windows(
    events: Iterable[AgendaEvent],
    day: DayLike,
    resource_id: Optional[str] = None,
    grid: Optional[TimeGrid] = None,
    include_cancelled: bool = False,
) -> List[FreeWindow]:
    """
    Unoccupied intervals of the working window on ``day``.

    Walks the events in start order with a cursor that only moves forward,
    so overlapping events are absorbed. Gaps are clipped to the window.
    Output is sorted, non-overlapping and every window has positive length.
    """
    grid = grid or TimeGrid()
    window_start = grid.window_start(day)
    window_end = grid.window_end(day)

    selected = [
        grid.localize_event(e)
        for e in _relevant(events, day, resource_id, grid, include_cancelled)
        if not e.is_degenerate
    ]
    selected.sort(key=lambda e: e.start)

    windows: List[FreeWindow] = []
    cursor = window_start
    for event in selected:
        if cursor >= window_end:
            break
        gap_end = min(event.start, window_end)
        if gap_end > cursor:
            windows.append(FreeWindow(start=cursor, end=gap_end))
        cursor = max(cursor, event.end)

    if cursor < window_end:
        windows.append(FreeWindow(start=cursor, end=window_end))

    return windows


@dataclass
class DaySummary:
    """Header figures of the day view."""
    day: datetime.date
    total: int = 0
    by_state: Dict[str, int] = field(default_factory=dict)
    occupancy: int = 0
    free_window_count: int = 0
    free_minutes: float = 0.0
    conflict_count: int = 0
    double_booking_count: int = 0

    @property
    def confirmed(self) -> int:
        return self.by_state.get(EventState.CONFIRMED.value, 0)

    @property
    def pending(self) -> int:
        return self.by_state.get(EventState.SCHEDULED.value, 0)

    def to_dict(self) -> dict:
        return {
            'day': self.day.isoformat(),
            'total': self.total,
            'by_state': dict(self.by_state),
            'occupancy': self.occupancy,
            'free_window_count': self.free_window_count,
            'free_minutes': self.free_minutes,
            'conflict_count': self.conflict_count,
            'double_booking_count': self.double_booking_count,
        }


def summarize_day(
    events: Iterable[AgendaEvent],
    day: DayLike,
    grid: Optional[TimeGrid] = None,
    include_cancelled: bool = False,
) -> DaySummary:
    """Counts, occupancy, free time and conflicts for one day."""
    grid = grid or TimeGrid()
    day_events = events_for_day(events, day, grid)

    by_state = {state.value: 0 for state in EventState}
    for event in day_events:
        by_state[event.state.value] += 1

    windows = free_windows(day_events, day, grid=grid, include_cancelled=include_cancelled)
    conflicts = conflicts_for(day_events, grid=grid, include_cancelled=include_cancelled)

    summary = DaySummary(
        day=grid.local_day(day),
        total=len(day_events),
        by_state=by_state,
        occupancy=occupancy_rate(day_events, day, grid=grid, include_cancelled=include_cancelled),
        free_window_count=len(windows),
        free_minutes=sum(w.duration_minutes() for w in windows),
        conflict_count=len(conflicts),
        double_booking_count=sum(1 for c in conflicts if c.is_blocking),
    )
    logger.debug(f"Day {summary.day}: {summary.total} events, {summary.occupancy}% occupied")
    return summary
