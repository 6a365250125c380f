# File: clinic_agenda/core/conflicts.py
"""
Conflict detection.

Finds every pair of same-day events whose times overlap (half-open, so
back-to-back events never conflict) and classifies it:

    shared professional or room -> double_booking / error
    anything else               -> overlap / warning

The scan is isolated behind ``ConflictDetector`` so the O(n^2) pairwise
pass can be swapped for the sweep-line pass without changing callers. Both
report each pair once, as (earlier in input, later in input), in the same
order.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from clinic_agenda.core.time_grid import TimeGrid
from clinic_agenda.models.conflict import Conflict, ResourceClash
from clinic_agenda.models.enums import ConflictKind, ResourceKind, Severity
from clinic_agenda.models.event import AgendaEvent
from clinic_agenda.utils.logger import setup_logger

logger = setup_logger(__name__)


def classify_pair(a: AgendaEvent, b: AgendaEvent) -> Conflict:
    """Build the Conflict for two overlapping events."""
    if a.shares_resource_with(b):
        return Conflict(a.id, b.id, ConflictKind.DOUBLE_BOOKING, Severity.ERROR)
    return Conflict(a.id, b.id, ConflictKind.OVERLAP, Severity.WARNING)


class ConflictDetector(ABC):
    """Strategy interface for the overlap scan."""

    @abstractmethod
    def overlapping_pairs(self, events: Sequence[AgendaEvent], grid: TimeGrid) -> List[Tuple[int, int]]:
        """
        Return index pairs (i, j), i < j, of same-day overlapping events,
        sorted ascending. Events are already in the grid's wall-clock.
        """

    def detect(self, events: Sequence[AgendaEvent], grid: TimeGrid) -> List[Conflict]:
        return [classify_pair(events[i], events[j]) for i, j in self.overlapping_pairs(events, grid)]


class PairwiseConflictDetector(ConflictDetector):
    """Compare every pair. Fine for a day's worth of appointments."""

    def overlapping_pairs(self, events, grid):
        days = [grid.local_day(e.start) for e in events]
        pairs = []
        for i in range(len(events)):
            for j in range(i + 1, len(events)):
                if days[i] != days[j]:
                    continue
                if events[i].overlaps_with(events[j]):
                    pairs.append((i, j))
        return pairs


class SweepLineConflictDetector(ConflictDetector):
    """Sweep over start times keeping only events still running."""

    def overlapping_pairs(self, events, grid):
        order = sorted(range(len(events)), key=lambda idx: events[idx].start)
        days = [grid.local_day(e.start) for e in events]
        active: List[int] = []
        pairs = []

        for idx in order:
            current = events[idx]
            # Anything finished by now cannot overlap this or any later start
            active = [k for k in active if events[k].end > current.start]
            for k in active:
                if days[k] == days[idx] and events[k].overlaps_with(current):
                    pairs.append((min(k, idx), max(k, idx)))
            active.append(idx)

        pairs.sort()
        return pairs


DEFAULT_DETECTOR: ConflictDetector = PairwiseConflictDetector()


def conflicts_for(
    events: Iterable[AgendaEvent],
    grid: Optional[TimeGrid] = None,
    include_cancelled: bool = False,
    detector: Optional[ConflictDetector] = None,
) -> List[Conflict]:
    """
    All conflicts among the given events.

    Recomputed from scratch on every call. Cancelled events release their
    slot and are skipped unless ``include_cancelled`` is set. Degenerate
    events (end <= start) occupy no time and never conflict.
    """
    grid = grid or TimeGrid()
    detector = detector or DEFAULT_DETECTOR

    candidates = [
        grid.localize_event(e) for e in events
        if not e.is_degenerate and (include_cancelled or not e.is_cancelled)
    ]
    conflicts = detector.detect(candidates, grid)

    if conflicts:
        errors = sum(1 for c in conflicts if c.is_blocking)
        logger.debug(
            f"{len(conflicts)} conflicts among {len(candidates)} events "
            f"({errors} double-bookings)"
        )
    return conflicts


def conflict_event_ids(conflicts: Iterable[Conflict]) -> Set[str]:
    """Ids of every event involved in at least one conflict."""
    ids: Set[str] = set()
    for conflict in conflicts:
        ids.update(conflict.event_ids)
    return ids


def conflicts_involving(event_id: str, conflicts: Iterable[Conflict]) -> List[Conflict]:
    return [c for c in conflicts if c.involves(event_id)]


def check_event_conflicts(
    candidate: AgendaEvent,
    events: Iterable[AgendaEvent],
    exclude_event_id: Optional[str] = None,
    grid: Optional[TimeGrid] = None,
) -> Optional[ResourceClash]:
    """
    Check a proposed event against the booked ones before it is saved.

    The candidate's own id (and ``exclude_event_id``, for an edit that
    changed the id) is skipped, as are cancelled events and events on other
    days. Returns the first clash in input order, the professional checked
    before the room, or None. Soft overlaps without a shared resource are
    allowed and not reported.
    """
    grid = grid or TimeGrid()
    if candidate.is_degenerate:
        return None

    proposed = grid.localize_event(candidate)
    skip = {candidate.id, exclude_event_id}
    day = grid.local_day(proposed.start)

    for event in events:
        if event.id in skip or event.is_cancelled or event.is_degenerate:
            continue
        existing = grid.localize_event(event)
        if grid.local_day(existing.start) != day or not proposed.overlaps_with(existing):
            continue

        if proposed.professional_id is not None and proposed.professional_id == existing.professional_id:
            clash = ResourceClash(existing.id, existing.title, ResourceKind.PROFESSIONAL, existing.professional_id)
        elif proposed.room_id is not None and proposed.room_id == existing.room_id:
            clash = ResourceClash(existing.id, existing.title, ResourceKind.ROOM, existing.room_id)
        else:
            continue

        logger.debug(f"Event {candidate.id} clashes with {existing.id} on {clash.resource_kind.value}")
        return clash

    return None
