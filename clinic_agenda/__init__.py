"""
Clinic agenda scheduling engine.

Places appointments on a time grid, detects conflicts, computes occupancy
and free time, and turns drag gestures into move/resize/create proposals.
"""

from clinic_agenda.core.time_grid import TimeGrid
from clinic_agenda.core.position import position_for, current_time_position
from clinic_agenda.core.conflicts import (
    ConflictDetector,
    PairwiseConflictDetector,
    SweepLineConflictDetector,
    conflicts_for,
    conflict_event_ids,
    check_event_conflicts,
)
from clinic_agenda.core.occupancy import occupancy_rate, free_windows, summarize_day
from clinic_agenda.core.drag import DragController, DragStateError, DropTarget
from clinic_agenda.core.resources import group_by_resource
from clinic_agenda.core.availability import find_available_slots, is_slot_available
from clinic_agenda.models import AgendaEvent, Resource, Conflict, GridConfig, event_from_dict

__version__ = "1.0.0"

__all__ = [
    "TimeGrid",
    "position_for",
    "current_time_position",
    "ConflictDetector",
    "PairwiseConflictDetector",
    "SweepLineConflictDetector",
    "conflicts_for",
    "conflict_event_ids",
    "check_event_conflicts",
    "occupancy_rate",
    "free_windows",
    "summarize_day",
    "DragController",
    "DragStateError",
    "DropTarget",
    "group_by_resource",
    "find_available_slots",
    "is_slot_available",
    "AgendaEvent",
    "Resource",
    "Conflict",
    "GridConfig",
    "event_from_dict",
]
