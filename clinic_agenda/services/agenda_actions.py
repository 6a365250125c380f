# File: clinic_agenda/services/agenda_actions.py
"""
Optimistic agenda actions.

Applies proposals from the interaction layer to the local event snapshot
immediately, then forwards the change to the external store. If the store
fails the snapshot is rolled back. Each successful change can be undone.
"""

import datetime
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Protocol, Tuple

from clinic_agenda.core.conflicts import check_event_conflicts
from clinic_agenda.models import (
    AgendaEvent,
    EventState,
    MoveProposal,
    ResizeProposal,
    ResourceClash,
    ResourceKind,
)
from clinic_agenda.utils.logger import setup_logger

logger = setup_logger(__name__)

QUICK_ACTIONS = {
    "confirm": (EventState.CONFIRMED, "Appointment confirmed"),
    "complete": (EventState.COMPLETED, "Appointment completed"),
    "cancel": (EventState.CANCELLED, "Appointment cancelled"),
}


class EventStore(Protocol):
    """The persistence collaborator. Raises on failure."""

    def update_event(self, event_id: str, changes: Dict[str, Any]) -> Any:
        ...


def serialize_changes(changes: Dict[str, Any]) -> Dict[str, Any]:
    """Make a change set JSON friendly: datetimes to ISO strings, enums to values."""
    payload = {}
    for key, value in changes.items():
        if isinstance(value, datetime.datetime):
            value = value.isoformat()
        elif isinstance(value, Enum):
            value = value.value
        payload[key] = value
    return payload


@dataclass(frozen=True)
class UndoEntry:
    event_id: str
    description: str
    previous: Dict[str, Any]


class AgendaActions:
    """Holds the current event snapshot and applies changes to it."""

    def __init__(self, store: EventStore, events: Iterable[AgendaEvent] = ()):
        """
        Args:
            store: Persistence collaborator with ``update_event(event_id, changes)``
            events: Initial snapshot
        """
        self.store = store
        self._events: Tuple[AgendaEvent, ...] = tuple(events)
        self._undo_stack: List[UndoEntry] = []

    @property
    def events(self) -> Tuple[AgendaEvent, ...]:
        return self._events

    @property
    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    def replace_events(self, events: Iterable[AgendaEvent]):
        """Swap in a fresh snapshot, e.g. after reloading from the store."""
        self._events = tuple(events)

    def find(self, event_id: str) -> Optional[AgendaEvent]:
        for event in self._events:
            if event.id == event_id:
                return event
        return None

    # --------------------------------------------------------------- actions

    def apply_move(self, proposal: MoveProposal, resource_kind: ResourceKind = ResourceKind.PROFESSIONAL) -> bool:
        """
        Move an event to ``proposal.new_start`` keeping its duration. A new
        resource id reassigns the professional (or room, per ``resource_kind``).
        """
        event = self._require(proposal.event_id)
        if event is None:
            return False
        return self._apply(event, self._move_changes(event, proposal, resource_kind), "Event moved")

    def check_move(
        self,
        proposal: MoveProposal,
        resource_kind: ResourceKind = ResourceKind.PROFESSIONAL,
    ) -> Optional[ResourceClash]:
        """
        The booked event a move would double-book, or None. Nothing is
        changed; callers decide whether to go ahead with ``apply_move``.
        """
        event = self._require(proposal.event_id)
        if event is None:
            return None
        moved = event.with_changes(**self._move_changes(event, proposal, resource_kind))
        return check_event_conflicts(moved, self._events)

    @staticmethod
    def _move_changes(event: AgendaEvent, proposal: MoveProposal, resource_kind: ResourceKind) -> Dict[str, Any]:
        changes: Dict[str, Any] = {
            'start': proposal.new_start,
            'end': proposal.new_start + (event.end - event.start),
        }
        if proposal.new_resource_id and proposal.new_resource_id != event.resource_ref(resource_kind):
            field_name = 'professional_id' if resource_kind == ResourceKind.PROFESSIONAL else 'room_id'
            changes[field_name] = proposal.new_resource_id
        return changes

    def apply_resize(self, proposal: ResizeProposal) -> bool:
        """Change an event's duration; the start stays put."""
        event = self._require(proposal.event_id)
        if event is None:
            return False
        if proposal.new_duration_minutes <= 0:
            logger.warning(f"Ignoring resize of {event.id} to {proposal.new_duration_minutes} minutes")
            return False

        new_end = event.start + datetime.timedelta(minutes=proposal.new_duration_minutes)
        return self._apply(event, {'end': new_end}, "Duration updated")

    def reassign_professional(self, event_id: str, professional_id: Optional[str]) -> bool:
        event = self._require(event_id)
        if event is None:
            return False
        return self._apply(event, {'professional_id': professional_id or None}, "Professional updated")

    def quick_action(self, event_id: str, action: str) -> bool:
        """
        Confirm, complete or cancel an event.

        Raises:
            ValueError: for an unknown action
        """
        if action not in QUICK_ACTIONS:
            raise ValueError(f"Unknown quick action: {action!r}")

        event = self._require(event_id)
        if event is None:
            return False
        if event.is_terminal:
            logger.warning(f"Event {event_id} is already {event.state.value}; '{action}' refused")
            return False

        state, description = QUICK_ACTIONS[action]
        return self._apply(event, {"state": state}, description)

    def undo(self) -> bool:
        """Revert the most recent successful change."""
        if not self._undo_stack:
            logger.info("Nothing to undo")
            return False

        entry = self._undo_stack.pop()
        event = self._require(entry.event_id)
        if event is None:
            return False

        if not self._apply(event, entry.previous, f"Undo: {entry.description}", record=False):
            # Keep it so the caller can retry
            self._undo_stack.append(entry)
            return False
        return True

    # -------------------------------------------------------------- plumbing

    def _require(self, event_id: str) -> Optional[AgendaEvent]:
        event = self.find(event_id)
        if event is None:
            logger.warning(f"Event {event_id} is not in the current snapshot")
        return event

    def _replace(self, event_id: str, replacement: AgendaEvent):
        self._events = tuple(replacement if e.id == event_id else e for e in self._events)

    def _apply(self, event: AgendaEvent, changes: Dict[str, Any], description: str, record: bool = True) -> bool:
        """
        Update the snapshot first, then the store. Roll back on failure.

        Returns:
            True if the store accepted the change, False otherwise
        """
        previous = {key: getattr(event, key) for key in changes}
        try:
            updated = event.with_changes(**changes)
        except (TypeError, ValueError) as e:
            logger.error(f"Invalid change for event {event.id}: {e}")
            return False

        self._replace(event.id, updated)

        try:
            self.store.update_event(event.id, serialize_changes(changes))
        except Exception as e:
            logger.error(f"Store rejected change to event {event.id}, rolling back: {e}", exc_info=True)
            self._replace(event.id, event)
            return False

        if record:
            self._undo_stack.append(UndoEntry(event_id=event.id, description=description, previous=previous))
        logger.info(f"{description}: {event.id}")
        return True
