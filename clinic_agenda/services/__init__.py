from .agenda_actions import AgendaActions, EventStore, serialize_changes

__all__ = ["AgendaActions", "EventStore", "serialize_changes"]
