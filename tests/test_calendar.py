"""Tests for the slot calendar and month helpers."""

from datetime import date, datetime, time

import pytest

from pitboss.domain.calendar import TimeSlotCalendar, days_in_month, month_bounds
from pitboss.domain.models import DisplaySettings, ShiftType


def elapsed(slot_minutes: int, shift_start: int) -> int:
    """Minutes since shift start, across midnight."""
    return (slot_minutes - shift_start) % (24 * 60)


class TestGenerate:
    """Tests for TimeSlotCalendar.generate."""

    @pytest.fixture
    def calendar(self):
        return TimeSlotCalendar()

    def test_day_shift_bounds(self, calendar):
        """Day shift runs 08:00 to the last slot before 20:00."""
        slots = calendar.generate(ShiftType.DAY)
        assert len(slots) == 24
        assert slots[0].time == "08:00"
        assert slots[-1].time == "19:30"

    def test_night_shift_wraps_midnight(self, calendar):
        """Night shift starts at 20:00 and ends at 07:30 the next morning."""
        times = [s.time for s in calendar.generate(ShiftType.NIGHT)]
        assert len(times) == 24
        assert times[0] == "20:00"
        assert times[-1] == "07:30"
        assert times.index("00:00") == times.index("23:30") + 1

    @pytest.mark.parametrize("shift_type", list(ShiftType))
    def test_strictly_increasing_without_duplicates(self, calendar, shift_type):
        """Slots advance by exactly one slot length and never repeat."""
        slots = calendar.generate(shift_type)
        start = slots[0].minutes
        offsets = [elapsed(s.minutes, start) for s in slots]
        assert offsets == [i * 30 for i in range(24)]
        assert len({s.time for s in slots}) == len(slots)

    @pytest.mark.parametrize("shift_type", list(ShiftType))
    def test_deterministic(self, calendar, shift_type):
        """Generating twice yields identical sequences."""
        assert calendar.generate(shift_type) == calendar.generate(shift_type)
        assert TimeSlotCalendar().generate(shift_type) == calendar.generate(shift_type)

    def test_formatted_time_matches_time(self, calendar):
        for slot in calendar.generate(ShiftType.DAY):
            assert slot.formatted_time == slot.time

    def test_accepts_shift_type_value(self, calendar):
        """Plain shift strings are accepted."""
        assert calendar.generate("night") == calendar.generate(ShiftType.NIGHT)

    def test_unknown_shift_type_raises(self, calendar):
        with pytest.raises(ValueError):
            calendar.generate("dusk")

    def test_hourly_slots(self):
        """A 60-minute cadence yields 12 slots."""
        times = TimeSlotCalendar(slot_minutes=60).slot_times(ShiftType.DAY)
        assert times == [f"{h:02d}:00" for h in range(8, 20)]

    @pytest.mark.parametrize("slot_minutes", [0, -30, 7, 25])
    def test_slot_length_must_divide_shift(self, slot_minutes):
        with pytest.raises(ValueError):
            TimeSlotCalendar(slot_minutes=slot_minutes)

    def test_index_of(self, calendar):
        assert calendar.index_of(ShiftType.NIGHT, "20:00") == 0
        assert calendar.index_of(ShiftType.NIGHT, "00:30") == 9
        assert calendar.index_of(ShiftType.DAY, "21:00") is None


class TestMonthHelpers:
    """Tests for month arithmetic."""

    def test_leap_february(self):
        assert days_in_month(2024, 2) == 29
        assert days_in_month(2023, 2) == 28
        assert days_in_month(1900, 2) == 28
        assert days_in_month(2000, 2) == 29

    def test_thirty_day_month(self):
        assert days_in_month(2024, 4) == 30

    def test_month_bounds(self):
        assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
        assert month_bounds(2024, 12) == (date(2024, 12, 1), date(2024, 12, 31))

    @pytest.mark.parametrize("month", [0, 13])
    def test_invalid_month_raises(self, month):
        with pytest.raises(ValueError):
            days_in_month(2024, month)


class TestUpcomingSlots:
    """Tests for live-view slot selection."""

    @pytest.fixture
    def calendar(self):
        return TimeSlotCalendar()

    def times(self, slots):
        return [s.time for s in slots]

    def test_day_shift_looks_ahead(self, calendar):
        """13:10 plus 15 minutes shows the slots from 13:30."""
        slots = calendar.upcoming_slots(ShiftType.DAY, time(13, 10), DisplaySettings(15, 3))
        assert self.times(slots) == ["13:30", "14:00", "14:30"]

    def test_exact_slot_start_is_included(self, calendar):
        slots = calendar.upcoming_slots(ShiftType.DAY, time(13, 15), DisplaySettings(15, 2))
        assert self.times(slots) == ["13:30", "14:00"]

    def test_day_shift_before_start(self, calendar):
        slots = calendar.upcoming_slots(ShiftType.DAY, time(6, 0), DisplaySettings(0, 1))
        assert self.times(slots) == ["08:00"]

    def test_day_shift_over(self, calendar):
        """Nothing is shown after the last day slot."""
        assert calendar.upcoming_slots(ShiftType.DAY, time(19, 50), DisplaySettings(15, 3)) == []

    def test_truncated_at_shift_end(self, calendar):
        slots = calendar.upcoming_slots(ShiftType.DAY, time(19, 20), DisplaySettings(0, 3))
        assert self.times(slots) == ["19:30"]

    def test_night_shift_after_midnight(self, calendar):
        slots = calendar.upcoming_slots(ShiftType.NIGHT, time(1, 10), DisplaySettings(15, 2))
        assert self.times(slots) == ["01:30", "02:00"]

    def test_night_shift_across_midnight(self, calendar):
        """23:50 plus 15 minutes is 00:05; the next slot is 00:30."""
        slots = calendar.upcoming_slots(ShiftType.NIGHT, time(23, 50), DisplaySettings(15, 1))
        assert self.times(slots) == ["00:30"]

    def test_night_shift_before_start(self, calendar):
        slots = calendar.upcoming_slots(ShiftType.NIGHT, time(19, 0), DisplaySettings(0, 1))
        assert self.times(slots) == ["20:00"]

    def test_night_shift_falls_back_to_start(self, calendar):
        """Past the last night slot the view restarts at 20:00."""
        slots = calendar.upcoming_slots(ShiftType.NIGHT, time(7, 50), DisplaySettings(15, 2))
        assert self.times(slots) == ["20:00", "20:30"]

    def test_accepts_datetime(self, calendar):
        slots = calendar.upcoming_slots(ShiftType.DAY, datetime(2024, 3, 1, 9, 0))
        assert self.times(slots) == ["09:30", "10:00", "10:30"]


class TestDisplaySettings:
    """Tests for DisplaySettings bounds."""

    def test_defaults(self):
        settings = DisplaySettings()
        assert settings.advance_minutes == 15
        assert settings.slots_to_show == 3

    @pytest.mark.parametrize("slots_to_show", [0, 11])
    def test_slots_to_show_bounds(self, slots_to_show):
        with pytest.raises(ValueError):
            DisplaySettings(advance_minutes=0, slots_to_show=slots_to_show)

    def test_negative_advance(self):
        with pytest.raises(ValueError):
            DisplaySettings(advance_minutes=-1)

    def test_from_dict(self):
        settings = DisplaySettings.from_dict({"advance_minutes": 5, "slots_to_show": 10})
        assert settings == DisplaySettings(5, 10)
