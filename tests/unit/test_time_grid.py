# File: tests/unit/test_time_grid.py
"""
Unit tests for the time grid: window, conversions and slot rounding.
"""

import pytest
from datetime import date, datetime, timezone

import pytz

from clinic_agenda.core.time_grid import TimeGrid
from clinic_agenda.models import GridConfig


class TestWindow:

    def test_default_window(self, grid, day):
        assert grid.window_minutes == 840
        assert grid.window_start(day) == datetime(2024, 3, 4, 7, 0)
        assert grid.window_end(day) == datetime(2024, 3, 4, 21, 0)

    def test_slots_cover_the_window(self, grid):
        slots = grid.slots()

        assert len(slots) == 56
        assert slots[0].label == "07:00"
        assert slots[1].label == "07:15"
        assert slots[-1].label == "20:45"

    def test_custom_config_changes_everything(self, day):
        grid = TimeGrid(GridConfig(start_hour=8, end_hour=14, slot_minutes=30))

        assert grid.window_minutes == 360
        assert [s.label for s in grid.slots()][:3] == ["08:00", "08:30", "09:00"]
        assert grid.offset_for_time(datetime(2024, 3, 4, 9, 0)) == 60

    def test_is_within_working_hours(self, grid):
        assert grid.is_within_working_hours(7) is True
        assert grid.is_within_working_hours(20) is True
        assert grid.is_within_working_hours(21) is False
        assert grid.is_within_working_hours(6) is False


class TestConversions:

    def test_offset_for_time(self, grid):
        assert grid.offset_for_time(datetime(2024, 3, 4, 7, 0)) == 0
        assert grid.offset_for_time(datetime(2024, 3, 4, 9, 30)) == 150
        assert grid.offset_for_time(datetime(2024, 3, 4, 9, 0, 30)) == 120.5

    def test_offset_is_not_clamped(self, grid):
        assert grid.offset_for_time(datetime(2024, 3, 4, 6, 0)) == -60
        assert grid.offset_for_time(datetime(2024, 3, 4, 22, 0)) == 900

    def test_time_for_offset_is_inverse(self, grid, day):
        moment = grid.time_for_offset(day, 135)

        assert moment == datetime(2024, 3, 4, 9, 15)
        assert grid.offset_for_time(moment) == 135

    def test_pixels_and_minutes(self, grid):
        assert grid.pixels_for_minutes(60) == 80
        assert grid.minutes_for_pixels(80) == 60
        assert grid.minutes_for_pixels(40) == 30

    def test_clamp_offset(self, grid):
        assert grid.clamp_offset(-5) == 0
        assert grid.clamp_offset(900) == 840
        assert grid.clamp_offset(100) == 100

    def test_naive_grid_ignores_tzinfo(self, grid):
        aware = datetime(2024, 3, 4, 9, 0, tzinfo=timezone.utc)

        assert grid.local(aware) == datetime(2024, 3, 4, 9, 0)
        assert grid.offset_for_time(aware) == 120


class TestClinicTimezone:

    def test_aware_timestamps_are_converted(self):
        grid = TimeGrid(timezone="Europe/Madrid")
        # 08:00 UTC is 09:00 in Madrid (CET, winter)
        utc = datetime(2024, 3, 4, 8, 0, tzinfo=pytz.utc)

        assert grid.offset_for_time(utc) == 120
        assert grid.local_day(utc) == date(2024, 3, 4)

    def test_naive_timestamps_are_localized(self):
        grid = TimeGrid(timezone=pytz.timezone("Europe/Madrid"))
        local = grid.local(datetime(2024, 3, 4, 9, 0))

        assert local.tzinfo is not None
        assert local.hour == 9

    def test_grid_timestamps_are_aware(self):
        grid = TimeGrid(timezone="Europe/Madrid")
        start = grid.window_start(date(2024, 3, 4))

        assert start.tzinfo is not None
        assert start.utcoffset().total_seconds() == 3600

    def test_late_utc_event_belongs_to_next_local_day(self):
        grid = TimeGrid(timezone="Europe/Madrid")
        late = datetime(2024, 3, 4, 23, 30, tzinfo=pytz.utc)

        assert grid.local_day(late) == date(2024, 3, 5)


class TestRounding:

    @pytest.mark.parametrize("minute, expected", [
        (0, (9, 0)),
        (7, (9, 0)),
        (8, (9, 15)),
        (22, (9, 15)),
        (23, (9, 30)),
        (52, (9, 45)),
    ])
    def test_round_to_nearest_slot(self, grid, minute, expected):
        rounded = grid.round_to_nearest_slot(datetime(2024, 3, 4, 9, minute))

        assert (rounded.hour, rounded.minute) == expected

    def test_exact_half_rounds_up(self, grid):
        # 09:07:30 is exactly halfway between 09:00 and 09:15
        assert grid.round_to_nearest_slot(datetime(2024, 3, 4, 9, 7, 30)) == datetime(2024, 3, 4, 9, 15)
        assert grid.round_to_nearest_slot(datetime(2024, 3, 4, 9, 7, 29)) == datetime(2024, 3, 4, 9, 0)

    def test_rounding_zeroes_seconds(self, grid):
        rounded = grid.round_to_nearest_slot(datetime(2024, 3, 4, 9, 1, 42, 1234))

        assert rounded == datetime(2024, 3, 4, 9, 0)

    def test_rounding_is_idempotent(self, grid):
        once = grid.round_to_nearest_slot(datetime(2024, 3, 4, 14, 38, 10))

        assert grid.round_to_nearest_slot(once) == once
        assert grid.is_slot_aligned(once) is True

    def test_rounding_can_cross_the_hour(self, grid):
        assert grid.round_to_nearest_slot(datetime(2024, 3, 4, 9, 55)) == datetime(2024, 3, 4, 10, 0)

    def test_floor_to_slot(self, grid):
        assert grid.floor_to_slot(datetime(2024, 3, 4, 9, 14, 59)) == datetime(2024, 3, 4, 9, 0)
        assert grid.floor_to_slot(datetime(2024, 3, 4, 9, 15)) == datetime(2024, 3, 4, 9, 15)
