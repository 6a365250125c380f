# File: clinic_agenda/processors/event_processor.py
"""
Event intake.

The data-entry boundary of the engine: raw records (dicts from the clinic
store or a JSON export) become validated AgendaEvent objects here, so the
scheduling core only ever sees well-formed events.
"""

import datetime
import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from clinic_agenda.core.time_grid import DayLike, TimeGrid
from clinic_agenda.models import AgendaEvent, ValidationError, check_event_range, event_from_dict
from clinic_agenda.utils.logger import setup_logger

RawEvent = Union[Dict[str, Any], AgendaEvent]


class EventProcessor:
    """Validates raw event records and slices event lists by day and week."""

    def __init__(self, grid: Optional[TimeGrid] = None):
        self.grid = grid or TimeGrid()
        self.logger = setup_logger(__name__)

    def validate_events(self, raw_events: Iterable[RawEvent]) -> Tuple[List[AgendaEvent], List[ValidationError]]:
        """
        Validate raw records and return the valid events, along with a list
        of errors for the rejected ones. One bad record never fails the batch.
        """
        raw_events = list(raw_events)
        valid_events: List[AgendaEvent] = []
        errors: List[ValidationError] = []
        seen_ids = set()

        self.logger.info(f"Validating {len(raw_events)} raw events")

        for i, raw in enumerate(raw_events):
            try:
                if isinstance(raw, AgendaEvent):
                    check_event_range(raw.id, raw.start, raw.end)
                    event = raw
                else:
                    event = event_from_dict(raw)
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                error = ValidationError(field="event", message=str(e), entry_index=i)
                errors.append(error)
                self.logger.warning(f"Skipping invalid event: {error}")
                continue

            if event.id in seen_ids:
                error = ValidationError(field="id", message=f"Duplicate event id {event.id!r}", entry_index=i)
                errors.append(error)
                self.logger.warning(f"Skipping duplicate event: {error}")
                continue

            seen_ids.add(event.id)
            valid_events.append(event)

        self.logger.info(
            f"Validation complete: {len(valid_events)} valid events "
            f"({len(errors)} errors)"
        )
        return valid_events, errors

    def load_events(self, filepath: Path) -> Tuple[List[AgendaEvent], List[ValidationError]]:
        """
        Load and validate events from a JSON file holding either a list of
        records or an object with an ``events`` list.
        """
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)

        if isinstance(data, dict):
            data = data.get('events', [])
        if not isinstance(data, list):
            raise ValueError(f"Expected a list of events in {filepath}")

        self.logger.debug(f"Read {len(data)} records from {filepath}")
        return self.validate_events(data)

    def events_on(self, events: Iterable[AgendaEvent], day: DayLike) -> List[AgendaEvent]:
        """Events starting on ``day``, sorted by start."""
        target = self.grid.local_day(day)
        selected = [e for e in events if self.grid.local_day(e.start) == target]
        return sorted(selected, key=lambda e: self.grid.local(e.start))

    def week_days(self, week_start: DayLike) -> List[datetime.date]:
        first = self.grid.local_day(week_start)
        return [first + datetime.timedelta(days=offset) for offset in range(7)]

    def events_in_week(self, events: Iterable[AgendaEvent], week_start: DayLike) -> Dict[datetime.date, List[AgendaEvent]]:
        """Group the week's events by day; every day of the week is present."""
        days = self.week_days(week_start)
        by_day: Dict[datetime.date, List[AgendaEvent]] = {day: [] for day in days}

        for event in sorted(events, key=lambda e: self.grid.local(e.start)):
            day = self.grid.local_day(event.start)
            if day in by_day:
                by_day[day].append(event)

        return by_day
