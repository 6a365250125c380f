from .enums import EventState, EventKind, Priority, ResourceKind, ConflictKind, Severity, TERMINAL_STATES
from .common import parse_iso_datetime, coerce_enum, round_half_up
from .event import AgendaEvent, event_from_dict, check_event_range, MIN_DURATION_MINUTES, MAX_DURATION_MINUTES
from .resource import Resource, resource_from_dict
from .conflict import Conflict, ResourceClash
from .slots import TimeSlot, FreeWindow, EventPosition
from .proposals import MoveProposal, ResizeProposal, CreateProposal
from .config import GridConfig
from .api import ValidationError

__all__ = [
    "EventState",
    "EventKind",
    "Priority",
    "ResourceKind",
    "ConflictKind",
    "Severity",
    "TERMINAL_STATES",
    "parse_iso_datetime",
    "coerce_enum",
    "round_half_up",
    "AgendaEvent",
    "event_from_dict",
    "check_event_range",
    "MIN_DURATION_MINUTES",
    "MAX_DURATION_MINUTES",
    "Resource",
    "resource_from_dict",
    "Conflict",
    "ResourceClash",
    "TimeSlot",
    "FreeWindow",
    "EventPosition",
    "MoveProposal",
    "ResizeProposal",
    "CreateProposal",
    "GridConfig",
    "ValidationError"
]
