# File: clinic_agenda/core/resources.py
"""
Multi-resource grouping for side-by-side lane rendering.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from clinic_agenda.core.occupancy import events_for_day, occupancy_rate
from clinic_agenda.core.time_grid import DayLike, TimeGrid
from clinic_agenda.models.enums import EventState
from clinic_agenda.models.event import AgendaEvent
from clinic_agenda.models.resource import Resource
from clinic_agenda.utils.logger import setup_logger

logger = setup_logger(__name__)


@dataclass
class ResourceLane:
    """
    One column of the resource view.

    ``resource`` is None only for the optional unassigned lane.
    """
    resource: Optional[Resource]
    events: List[AgendaEvent] = field(default_factory=list)
    occupancy: int = 0

    @property
    def total(self) -> int:
        return len(self.events)

    @property
    def confirmed(self) -> int:
        return sum(1 for e in self.events if e.state == EventState.CONFIRMED)

    @property
    def is_unassigned(self) -> bool:
        return self.resource is None


def group_by_resource(
    events: Iterable[AgendaEvent],
    resources: Iterable[Resource],
    day: Optional[DayLike] = None,
    grid: Optional[TimeGrid] = None,
    include_unassigned: bool = False,
    include_cancelled: bool = False,
) -> List[ResourceLane]:
    """
    Partition events into one lane per resource, in resource order.

    An event lands in a lane when its reference for that resource's kind
    matches the resource id. Events matching no configured resource show up
    in no lane unless ``include_unassigned`` adds a trailing lane for them.
    Lanes list cancelled events too; occupancy follows ``include_cancelled``.

    Occupancy needs a day, so without ``day`` every lane reports 0.
    """
    grid = grid or TimeGrid()
    events = list(events)
    if day is not None:
        events = events_for_day(events, day, grid)

    lanes = []
    placed = set()
    for resource in resources:
        lane_events = [e for e in events if e.resource_ref(resource.kind) == resource.id]
        placed.update(e.id for e in lane_events)
        lanes.append(ResourceLane(resource=resource, events=lane_events))

    if include_unassigned:
        lanes.append(ResourceLane(resource=None, events=[e for e in events if e.id not in placed]))

    if day is not None:
        for lane in lanes:
            lane.occupancy = occupancy_rate(lane.events, day, grid=grid, include_cancelled=include_cancelled)

    logger.debug(f"Grouped {len(events)} events into {len(lanes)} lanes")
    return lanes
