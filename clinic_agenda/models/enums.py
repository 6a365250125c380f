# File: clinic_agenda/models/enums.py

from enum import Enum


class EventState(Enum):
    """Lifecycle state of an agenda event."""
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"  # terminal
    CANCELLED = "cancelled"  # terminal


class EventKind(Enum):
    """Appointment category. Styling and statistics only."""
    CONSULTATION = "consultation"
    FOLLOW_UP = "follow_up"
    REVIEW = "review"
    TREATMENT = "treatment"
    URGENT = "urgent"
    ADMINISTRATIVE = "administrative"


class Priority(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ResourceKind(Enum):
    """What an event can occupy besides the patient's time."""
    PROFESSIONAL = "professional"
    ROOM = "room"


class ConflictKind(Enum):
    OVERLAP = "overlap"
    DOUBLE_BOOKING = "double_booking"


class Severity(Enum):
    WARNING = "warning"
    ERROR = "error"


TERMINAL_STATES = frozenset({EventState.COMPLETED, EventState.CANCELLED})

# Values used by the clinic's stored records
STATE_ALIASES = {
    "programada": EventState.SCHEDULED,
    "confirmada": EventState.CONFIRMED,
    "realizada": EventState.COMPLETED,
    "cancelada": EventState.CANCELLED,
}

KIND_ALIASES = {
    "consulta": EventKind.CONSULTATION,
    "seguimiento": EventKind.FOLLOW_UP,
    "follow-up": EventKind.FOLLOW_UP,
    "revision": EventKind.REVIEW,
    "tratamiento": EventKind.TREATMENT,
    "urgencia": EventKind.URGENT,
    "administrativo": EventKind.ADMINISTRATIVE,
}

PRIORITY_ALIASES = {
    "alta": Priority.HIGH,
    "media": Priority.MEDIUM,
    "baja": Priority.LOW,
}

RESOURCE_KIND_ALIASES = {
    "profesional": ResourceKind.PROFESSIONAL,
    "sala": ResourceKind.ROOM,
}
