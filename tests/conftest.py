# File: tests/conftest.py
"""
Pytest configuration and shared fixtures.
Provides reusable events, resources, grids and mocks for all tests.
"""

import json
import os
import sys
from datetime import date, datetime
from pathlib import Path
from unittest.mock import Mock

import pytest

# Keep test runs from writing dated log files
os.environ.setdefault("AGENDA_LOG_TO_FILE", "0")

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from clinic_agenda.core.time_grid import TimeGrid
from clinic_agenda.models import (
    AgendaEvent,
    EventKind,
    EventState,
    GridConfig,
    Resource,
    ResourceKind,
)


DAY = date(2024, 3, 4)  # a Monday


def at(hour: int, minute: int = 0, day: date = DAY) -> datetime:
    """Naive wall-clock timestamp on the test day."""
    return datetime(day.year, day.month, day.day, hour, minute)


# ==================== Grid Fixtures ====================

@pytest.fixture
def day():
    return DAY


@pytest.fixture
def grid():
    """Default 07:00-21:00 grid, 15 min slots, 80 px/h, naive wall-clock."""
    return TimeGrid()


@pytest.fixture
def pixel_grid():
    """One pixel per minute, which keeps pointer arithmetic exact."""
    return TimeGrid(GridConfig(pixels_per_hour=60, min_visual_height=15))


# ==================== Event Fixtures ====================

@pytest.fixture
def make_event():
    """Factory for events on the test day: make_event('a', (9, 0), (9, 30), professional_id='p1')."""
    def _make(event_id, start, end, day=DAY, **kwargs):
        return AgendaEvent(
            id=event_id,
            start=at(*start, day=day),
            end=at(*end, day=day),
            **kwargs
        )
    return _make


@pytest.fixture
def morning_event(make_event):
    """09:00-09:30 consultation with professional p1 in room r1."""
    return make_event("morning", (9, 0), (9, 30), professional_id="p1", room_id="r1", title="Check-up")


@pytest.fixture
def sample_events(make_event):
    """A small realistic day: a double booking, a soft overlap and a cancellation."""
    return [
        make_event("e1", (9, 0), (9, 30), professional_id="p1", room_id="r1",
                   state=EventState.CONFIRMED),
        make_event("e2", (9, 15), (9, 45), professional_id="p1", room_id="r2"),
        make_event("e3", (10, 0), (11, 0), professional_id="p2", room_id="r2",
                   kind=EventKind.TREATMENT),
        make_event("e4", (10, 30), (11, 0), professional_id="p3", room_id="r3",
                   kind=EventKind.REVIEW, state=EventState.CONFIRMED),
        make_event("e5", (16, 0), (16, 45), professional_id="p2", room_id="r1",
                   state=EventState.CANCELLED),
    ]


# ==================== Resource Fixtures ====================

@pytest.fixture
def professionals():
    return [
        Resource(id="p1", kind=ResourceKind.PROFESSIONAL, name="Dr. Vega"),
        Resource(id="p2", kind=ResourceKind.PROFESSIONAL, name="Dr. Ruiz"),
        Resource(id="p9", kind=ResourceKind.PROFESSIONAL, name="Dr. Nadie"),
    ]


@pytest.fixture
def rooms():
    return [
        Resource(id="r1", kind=ResourceKind.ROOM, name="Room 1"),
        Resource(id="r2", kind=ResourceKind.ROOM, name="Room 2"),
    ]


# ==================== Mock Fixtures ====================

@pytest.fixture
def mock_store():
    """Event store that accepts every update."""
    store = Mock()
    store.update_event.return_value = None
    return store


@pytest.fixture
def failing_store():
    """Event store whose updates always fail."""
    store = Mock()
    store.update_event.side_effect = ConnectionError("store unavailable")
    return store


@pytest.fixture
def pointer_source():
    """Fake pointer device: subscribe() hands back a Mock unsubscribe."""
    source = Mock()
    source.listeners = []

    def subscribe(callback):
        source.listeners.append(callback)
        unsubscribe = Mock(side_effect=lambda: source.listeners.remove(callback))
        source.last_unsubscribe = unsubscribe
        return unsubscribe

    source.subscribe.side_effect = subscribe

    def emit(y):
        for listener in list(source.listeners):
            listener(y)

    source.emit = emit
    return source


@pytest.fixture
def events_json(tmp_path, sample_events):
    """Events file in the clinic store's export format."""
    records = [event.to_dict() for event in sample_events]
    # One record in the store's own key style, and one broken record
    records.append({
        "id": "legacy",
        "fechaInicio": "2024-03-04T18:00:00",
        "fechaFin": "2024-03-04T18:30:00",
        "estado": "programada",
        "tipo": "seguimiento",
        "profesionalId": "p3",
    })
    records.append({"id": "broken", "start": "2024-03-04T12:00:00", "end": "2024-03-04T11:00:00"})

    path = tmp_path / "events.json"
    path.write_text(json.dumps(records), encoding="utf-8")
    return path

