# File: tests/unit/test_availability.py
"""
Unit tests for the availability finder and slot scoring.
"""

from datetime import datetime, time

import pytest

from clinic_agenda.core.availability import (
    SlotPreferences,
    candidate_starts,
    find_available_slots,
    is_slot_available,
    parse_hhmm,
    score_slot,
)


def _times(slots):
    return [(s.professional_id, s.start.strftime("%H:%M")) for s in slots]


class TestScoring:

    def test_no_preferences_is_base_score(self):
        assert score_slot(datetime(2024, 3, 4, 7, 0), "p1", None) == (50, "Slot available")

    def test_preferred_professional_and_hours(self):
        prefs = SlotPreferences(start_time="09:00", end_time="12:00", preferred_professional_id="p1")

        score, reason = score_slot(datetime(2024, 3, 4, 13, 0), "p1", prefs)

        assert score == 80
        assert reason == "Preferred professional"

    def test_prime_hours_bonus(self):
        prefs = SlotPreferences()

        assert score_slot(datetime(2024, 3, 4, 9, 0), "p1", prefs)[0] == 60
        assert score_slot(datetime(2024, 3, 4, 18, 45), "p1", prefs)[0] == 60
        assert score_slot(datetime(2024, 3, 4, 12, 0), "p1", prefs)[0] == 50

    def test_off_peak_penalty(self):
        prefs = SlotPreferences()

        assert score_slot(datetime(2024, 3, 4, 7, 30), "p1", prefs)[0] == 40
        assert score_slot(datetime(2024, 3, 4, 20, 0), "p1", prefs)[0] == 40
        assert score_slot(datetime(2024, 3, 4, 19, 30), "p1", prefs)[0] == 50

    def test_score_is_capped(self):
        prefs = SlotPreferences(start_time="09:00", end_time="11:00", preferred_professional_id="p1")

        score, reason = score_slot(datetime(2024, 3, 4, 10, 0), "p1", prefs)

        assert score == 100
        assert reason == "Preferred professional, Within preferred hours, Prime hour"

    def test_parse_hhmm(self):
        assert parse_hhmm("13:30") == 810


class TestCandidates:

    def test_whole_duration_must_fit(self, grid, day):
        starts = candidate_starts(day, 60, grid=grid)

        assert starts[0] == datetime(2024, 3, 4, 7, 0)
        assert starts[-1] == datetime(2024, 3, 4, 20, 0)

    def test_preferred_hours_bound_candidates(self, grid, day):
        starts = candidate_starts(day, 30, SlotPreferences(start_time="10:00", end_time="11:00"), grid)

        assert [s.strftime("%H:%M") for s in starts] == ["10:00", "10:15", "10:30"]

    def test_preferred_hours_never_leave_the_window(self, grid, day):
        starts = candidate_starts(day, 30, SlotPreferences(start_time="05:00", end_time="23:30"), grid)

        assert starts[0] == datetime(2024, 3, 4, 7, 0)
        assert starts[-1] == datetime(2024, 3, 4, 20, 30)

    def test_lunch_exclusion(self, grid, day):
        starts = candidate_starts(day, 60, SlotPreferences(exclude_lunch=True), grid, lunch=("13:00", "15:00"))
        times = {s.time() for s in starts}

        assert time(12, 0) in times
        assert time(12, 15) not in times
        assert time(14, 45) not in times
        assert time(15, 0) in times


class TestFindAvailableSlots:

    def test_without_preferences_keeps_professional_then_time_order(self, sample_events, professionals, day):
        slots = find_available_slots(sample_events, day, 30, professionals)

        assert _times(slots) == [
            ("p1", "07:00"), ("p1", "07:15"), ("p1", "07:30"), ("p1", "07:45"), ("p1", "08:00"),
        ]
        assert all(s.score == 50 for s in slots)

    def test_busy_times_are_skipped(self, sample_events, professionals, day):
        slots = find_available_slots(sample_events, day, 30, professionals[:1], max_results=100)
        starts = {s.start.strftime("%H:%M") for s in slots}

        # p1 is busy 09:00-09:45
        assert {"08:30", "09:45"} <= starts
        assert not {"08:45", "09:00", "09:15", "09:30"} & starts

    def test_preferences_rank_results(self, sample_events, professionals, day):
        prefs = SlotPreferences(start_time="09:00", end_time="12:00", preferred_professional_id="p2")

        slots = find_available_slots(sample_events, day, 30, professionals, preferences=prefs)

        assert _times(slots) == [
            ("p2", "09:00"), ("p2", "09:15"), ("p2", "09:30"), ("p2", "11:00"), ("p2", "11:15"),
        ]
        assert all(s.score == 100 for s in slots)
        assert slots[0].professional_name == "Dr. Ruiz"

    def test_cancelled_events_do_not_block(self, sample_events, professionals, day):
        slots = find_available_slots(sample_events, day, 45, professionals[1:2], max_results=100)

        assert "16:00" in {s.start.strftime("%H:%M") for s in slots}

    def test_room_blocks_every_professional(self, sample_events, professionals, day):
        slots = find_available_slots(sample_events, day, 30, professionals[2:], room_id="r1", max_results=100)
        starts = {s.start.strftime("%H:%M") for s in slots}

        # e1 holds r1 09:00-09:30
        assert "09:00" not in starts
        assert "09:30" in starts
        assert all(s.room_id == "r1" for s in slots)

    def test_max_results(self, professionals, day):
        assert len(find_available_slots([], day, 30, professionals, max_results=2)) == 2

    def test_no_professionals(self, sample_events, day):
        assert find_available_slots(sample_events, day, 30, []) == []

    def test_duration_must_be_positive(self, professionals, day):
        with pytest.raises(ValueError):
            find_available_slots([], day, 0, professionals)

    def test_to_dict(self, professionals, day):
        data = find_available_slots([], day, 30, professionals, max_results=1)[0].to_dict()

        assert data["start"] == "2024-03-04T07:00:00"
        assert data["end"] == "2024-03-04T07:30:00"
        assert data["professional_id"] == "p1"


class TestIsSlotAvailable:

    def test_clash(self, sample_events):
        assert is_slot_available(sample_events, "p1", datetime(2024, 3, 4, 9, 30), datetime(2024, 3, 4, 10, 0)) is False

    def test_exclude_event_being_moved(self, sample_events):
        assert is_slot_available(
            sample_events, "p1",
            datetime(2024, 3, 4, 9, 30), datetime(2024, 3, 4, 10, 0),
            exclude_event_id="e2",
        ) is True

    def test_back_to_back_is_free(self, sample_events):
        assert is_slot_available(sample_events, "p2", datetime(2024, 3, 4, 11, 0), datetime(2024, 3, 4, 11, 30)) is True

    def test_cancelled_slot_is_free(self, sample_events):
        assert is_slot_available(sample_events, "p2", datetime(2024, 3, 4, 16, 0), datetime(2024, 3, 4, 16, 45)) is True
