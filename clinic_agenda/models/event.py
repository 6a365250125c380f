# File: clinic_agenda/models/event.py

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from .common import coerce_enum, parse_iso_datetime
from .enums import (
    EventKind,
    EventState,
    Priority,
    ResourceKind,
    KIND_ALIASES,
    PRIORITY_ALIASES,
    STATE_ALIASES,
    TERMINAL_STATES,
)

# Accepted appointment length at the intake boundary
MIN_DURATION_MINUTES = 5
MAX_DURATION_MINUTES = 8 * 60


@dataclass(frozen=True)
class AgendaEvent:
    """
    A time-boxed appointment on the agenda.

    The scheduling core never mutates an event; derived values are computed
    and changes come back as new instances via ``with_changes``. The
    ``end > start`` rule and the accepted length are enforced at the intake
    boundary (``check_event_range``), so a degenerate range reaching the
    core is treated as an event of zero duration.
    """
    id: str
    start: datetime
    end: datetime
    state: EventState = EventState.SCHEDULED
    kind: EventKind = EventKind.CONSULTATION
    professional_id: Optional[str] = None
    room_id: Optional[str] = None
    priority: Optional[Priority] = None

    # Descriptive fields carried through untouched
    title: str = ""
    patient_id: Optional[str] = None
    patient_name: Optional[str] = None
    professional_name: Optional[str] = None
    room_name: Optional[str] = None
    notes: Optional[str] = None

    def __post_init__(self):
        """Auto-convert string enums."""
        object.__setattr__(self, 'state', coerce_enum(EventState, self.state, STATE_ALIASES))
        object.__setattr__(self, 'kind', coerce_enum(EventKind, self.kind, KIND_ALIASES))
        object.__setattr__(self, 'priority', coerce_enum(Priority, self.priority, PRIORITY_ALIASES))

    def duration_minutes(self) -> float:
        """True duration in minutes; never negative."""
        return max(0.0, (self.end - self.start).total_seconds() / 60)

    @property
    def is_degenerate(self) -> bool:
        return self.end <= self.start

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def is_cancelled(self) -> bool:
        return self.state == EventState.CANCELLED

    def overlaps_with(self, other: 'AgendaEvent') -> bool:
        """Half-open overlap: back-to-back events do not overlap."""
        return self.start < other.end and other.start < self.end

    def shares_resource_with(self, other: 'AgendaEvent') -> bool:
        """True when both events hold the same professional or the same room."""
        same_professional = self.professional_id is not None and self.professional_id == other.professional_id
        same_room = self.room_id is not None and self.room_id == other.room_id
        return same_professional or same_room

    def resource_ref(self, kind: ResourceKind) -> Optional[str]:
        """Return the reference this event holds for the given resource kind."""
        if kind == ResourceKind.PROFESSIONAL:
            return self.professional_id
        return self.room_id

    def uses_resource(self, resource_id: str) -> bool:
        return resource_id is not None and resource_id in (self.professional_id, self.room_id)

    def with_changes(self, **changes) -> 'AgendaEvent':
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'title': self.title,
            'start': self.start.isoformat(),
            'end': self.end.isoformat(),
            'state': self.state.value,
            'kind': self.kind.value,
            'professional_id': self.professional_id,
            'room_id': self.room_id,
            'priority': self.priority.value if self.priority else None,
            'patient_id': self.patient_id,
            'patient_name': self.patient_name,
            'professional_name': self.professional_name,
            'room_name': self.room_name,
            'notes': self.notes,
        }


def check_event_range(event_id: str, start: datetime, end: datetime):
    """Raise ValueError unless end follows start within the accepted length."""
    if end <= start:
        raise ValueError(f"Event end time must be after start time: {event_id}")

    minutes = (end - start).total_seconds() / 60
    if minutes < MIN_DURATION_MINUTES:
        raise ValueError(f"Event {event_id} lasts {minutes:g} min, minimum is {MIN_DURATION_MINUTES}")
    if minutes > MAX_DURATION_MINUTES:
        raise ValueError(f"Event {event_id} lasts {minutes:g} min, maximum is {MAX_DURATION_MINUTES}")


def _first(data: dict, *keys, default=None):
    for key in keys:
        value = data.get(key)
        if value not in (None, ""):
            return value
    return default


def event_from_dict(data: dict) -> AgendaEvent:
    """
    Create an AgendaEvent from a raw record. This is the intake boundary:
    bad records raise ValueError here instead of reaching the core.

    Accepts both the engine's own keys and the clinic store's keys
    (``fechaInicio``, ``profesionalId``, ``salaId``, ...).
    """
    event_id = _first(data, 'id')
    if event_id is None:
        raise ValueError("Event id is required")

    raw_start = _first(data, 'start', 'fechaInicio')
    raw_end = _first(data, 'end', 'fechaFin')
    start = parse_iso_datetime(raw_start)
    end = parse_iso_datetime(raw_end)
    if start is None or end is None:
        raise ValueError(f"Event {event_id} has missing or unparseable start/end: {raw_start!r} - {raw_end!r}")
    check_event_range(str(event_id), start, end)

    return AgendaEvent(
        id=str(event_id),
        start=start,
        end=end,
        state=_first(data, 'state', 'estado', default=EventState.SCHEDULED),
        kind=_first(data, 'kind', 'tipo', default=EventKind.CONSULTATION),
        professional_id=_first(data, 'professional_id', 'profesionalId'),
        room_id=_first(data, 'room_id', 'salaId'),
        priority=_first(data, 'priority', 'prioridad'),
        title=str(_first(data, 'title', 'titulo', default='')),
        patient_id=_first(data, 'patient_id', 'pacienteId'),
        patient_name=_first(data, 'patient_name', 'pacienteNombre'),
        professional_name=_first(data, 'professional_name', 'profesionalNombre'),
        room_name=_first(data, 'room_name', 'salaNombre'),
        notes=_first(data, 'notes', 'notas'),
    )
