# File: clinic_agenda/core/time_grid.py
"""
Time grid model.

Single source of truth for the working-hours window and the slot
granularity. Converts between wall-clock time, minute offsets from the
window start, and pixel offsets on the rendered grid.

Two modes:
    - naive (no timezone): every timestamp is read as its own wall-clock
      time; tzinfo, if present, is dropped.
    - clinic timezone (pytz): aware timestamps are converted into the
      clinic zone and naive ones are localized to it. Grid-produced
      timestamps are aware.
"""

import datetime
from typing import List, Optional, Union

import pytz

from clinic_agenda.models.common import round_half_up
from clinic_agenda.models.config import GridConfig
from clinic_agenda.models.slots import TimeSlot

DayLike = Union[datetime.date, datetime.datetime]


class TimeGrid:
    """Working window, slot size and the conversions built on them."""

    def __init__(self, config: Optional[GridConfig] = None, timezone=None):
        """
        Args:
            config: Grid configuration (defaults: 07:00-21:00, 15 min slots)
            timezone: pytz timezone or zone name; None for naive wall-clock
        """
        self.config = config or GridConfig()
        if isinstance(timezone, str):
            timezone = pytz.timezone(timezone)
        self.timezone = timezone

    def __repr__(self) -> str:
        c = self.config
        return f"TimeGrid({c.start_hour:02d}:00-{c.end_hour:02d}:00, {c.slot_minutes}min)"

    # ---------------------------------------------------------------- window

    @property
    def window_minutes(self) -> int:
        return self.config.window_minutes

    @property
    def slot_minutes(self) -> int:
        return self.config.slot_minutes

    @property
    def pixels_per_hour(self) -> float:
        return self.config.pixels_per_hour

    @property
    def window_start_minute(self) -> int:
        """Minute of day at which the window opens."""
        return self.config.start_hour * 60

    def local(self, moment: datetime.datetime) -> datetime.datetime:
        """Bring a timestamp into the grid's wall-clock."""
        if self.timezone is None:
            return moment.replace(tzinfo=None) if moment.tzinfo else moment
        if moment.tzinfo is None:
            return self.timezone.localize(moment)
        return moment.astimezone(self.timezone)

    def localize_event(self, event):
        """Copy of an event with start/end in the grid's wall-clock."""
        return event.with_changes(start=self.local(event.start), end=self.local(event.end))

    def local_day(self, moment: DayLike) -> datetime.date:
        """Calendar day of a timestamp in the grid's wall-clock."""
        if isinstance(moment, datetime.datetime):
            return self.local(moment).date()
        return moment

    def same_day(self, a: DayLike, b: DayLike) -> bool:
        return self.local_day(a) == self.local_day(b)

    def at(self, day: DayLike, minute_of_day: float) -> datetime.datetime:
        """Timestamp for a (possibly fractional) minute of the given day."""
        naive = datetime.datetime.combine(self.local_day(day), datetime.time.min)
        naive += datetime.timedelta(minutes=minute_of_day)
        if self.timezone is not None:
            return self.timezone.localize(naive)
        return naive

    def window_start(self, day: DayLike) -> datetime.datetime:
        return self.at(day, self.window_start_minute)

    def window_end(self, day: DayLike) -> datetime.datetime:
        return self.at(day, self.config.end_hour * 60)

    def is_within_working_hours(self, hour: int) -> bool:
        return self.config.start_hour <= hour < self.config.end_hour

    def slots(self) -> List[TimeSlot]:
        """Enumerate the slot rows covering [start_hour, end_hour)."""
        return [
            TimeSlot(hour=minute // 60, minute=minute % 60)
            for minute in range(self.window_start_minute, self.config.end_hour * 60, self.slot_minutes)
        ]

    # ----------------------------------------------------------- conversions

    @staticmethod
    def _minute_of_day(moment: datetime.datetime) -> float:
        return (
            moment.hour * 60
            + moment.minute
            + moment.second / 60
            + moment.microsecond / 60_000_000
        )

    def offset_for_time(self, moment: datetime.datetime) -> float:
        """
        Minutes since the window start on the timestamp's own day.

        Not clamped: times before the window are negative and times after it
        exceed ``window_minutes``. Callers must check.
        """
        return self._minute_of_day(self.local(moment)) - self.window_start_minute

    def time_for_offset(self, day: DayLike, offset_minutes: float) -> datetime.datetime:
        """Inverse of offset_for_time: window start on ``day`` plus the offset."""
        return self.at(day, self.window_start_minute + offset_minutes)

    def minutes_for_pixels(self, pixels: float) -> float:
        return pixels / self.pixels_per_hour * 60

    def pixels_for_minutes(self, minutes: float) -> float:
        return minutes / 60 * self.pixels_per_hour

    def clamp_offset(self, offset_minutes: float) -> float:
        return min(max(offset_minutes, 0), self.window_minutes)

    # -------------------------------------------------------------- rounding

    def round_to_nearest_slot(self, moment: datetime.datetime) -> datetime.datetime:
        """
        Snap a timestamp to the nearest slot boundary of its day.

        ``round(minutes_since_midnight / slot) * slot`` with halves going up;
        seconds and microseconds end up zeroed. Idempotent on aligned input.
        """
        local = self.local(moment)
        slots = round_half_up(self._minute_of_day(local) / self.slot_minutes)
        return self.at(local.date(), slots * self.slot_minutes)

    def floor_to_slot(self, moment: datetime.datetime) -> datetime.datetime:
        """Snap a timestamp down to the boundary of the slot containing it."""
        local = self.local(moment)
        slots = int(self._minute_of_day(local) // self.slot_minutes)
        return self.at(local.date(), slots * self.slot_minutes)

    def is_slot_aligned(self, moment: datetime.datetime) -> bool:
        return self.round_to_nearest_slot(moment) == self.local(moment)
