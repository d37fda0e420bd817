"""Tests for monthly dealer statistics."""

import logging
import random
from datetime import date

import pytest

from pitboss.domain.grid import AssignmentGrid
from pitboss.domain.models import DealerMonthStats, ScheduleRecord, ShiftType
from pitboss.domain.policies import PayPolicy
from pitboss.stats.dealer_stats import DealerStatsAggregator


def record(day: date, shift: ShiftType, data) -> ScheduleRecord:
    return ScheduleRecord(schedule_date=day, shift_type=shift, schedule_data=data)


def worked_day(day: date, shift: ShiftType, dealer_id: str = "d1", code: str = "BJ1"):
    """A schedule where the dealer works one slot at the shift start."""
    start = "08:00" if shift is ShiftType.DAY else "20:00"
    return record(day, shift, {start: {dealer_id: code}})


@pytest.fixture
def aggregator():
    return DealerStatsAggregator()


@pytest.fixture
def march_records():
    """March 2024: days 1-10 on day shift, days 11-18 on night shift."""
    records = [worked_day(date(2024, 3, d), ShiftType.DAY) for d in range(1, 11)]
    records += [worked_day(date(2024, 3, d), ShiftType.NIGHT) for d in range(11, 19)]
    return records


class TestAggregate:
    """Tests for DealerStatsAggregator.aggregate."""

    def test_base_tier_month(self, aggregator, march_records):
        stats = aggregator.aggregate("d1", 3, 2024, march_records)
        assert stats.day_shifts == 10
        assert stats.night_shifts == 8
        assert stats.total_shifts == 18
        assert stats.days_off == 31 - 18
        assert stats.salary == 1600
        assert stats.tables_worked == 18

    def test_high_tier_month(self, aggregator, march_records):
        """A 19th shift moves the whole month to the high rates."""
        march_records.append(worked_day(date(2024, 3, 19), ShiftType.NIGHT))
        stats = aggregator.aggregate("d1", 3, 2024, march_records)
        assert stats.total_shifts == 19
        assert stats.salary == 10 * 100 + 9 * 120

    def test_days_off_in_thirty_day_month(self, aggregator):
        records = [worked_day(date(2024, 4, d), ShiftType.DAY) for d in range(1, 21)]
        stats = aggregator.aggregate("d1", 4, 2024, records)
        assert stats.days_off == 10

    def test_leap_february(self, aggregator):
        stats = aggregator.aggregate("d1", 2, 2024, [])
        assert stats.days_off == 29

    def test_no_schedules(self, aggregator):
        stats = aggregator.aggregate("d1", 3, 2024, [])
        assert stats == DealerMonthStats(days_off=31)

    def test_tables_worked_counts_slots(self, aggregator):
        data = {
            "08:00": {"d1": "BJ1"},
            "08:30": {"d1": "ROU2"},
            "09:00": {"d1": "BREAK"},
            "09:30": {"d1": "PT1"},
        }
        stats = aggregator.aggregate("d1", 3, 2024, [record(date(2024, 3, 5), ShiftType.DAY, data)])
        assert stats.tables_worked == 3
        assert stats.day_shifts == 1
        assert stats.days_with_breaks == 1

    def test_break_only_day_is_not_worked(self, aggregator):
        """A day of nothing but rest counts as a break day and a day off."""
        data = {"08:00": {"d1": "BREAK"}, "08:30": {"d1": "ПОЧИВКА"}}
        stats = aggregator.aggregate("d1", 3, 2024, [record(date(2024, 3, 5), ShiftType.DAY, data)])
        assert stats.total_shifts == 0
        assert stats.days_with_breaks == 1
        assert stats.days_off == 31
        assert stats.salary == 0

    def test_idle_slots_are_ignored(self, aggregator):
        data = {"08:00": {"d1": "-"}, "08:30": {"d1": ""}}
        stats = aggregator.aggregate("d1", 3, 2024, [record(date(2024, 3, 5), ShiftType.DAY, data)])
        assert stats.total_shifts == 0
        assert stats.tables_worked == 0
        assert stats.days_with_breaks == 0

    def test_other_dealers_ignored(self, aggregator):
        records = [worked_day(date(2024, 3, 1), ShiftType.DAY, dealer_id="d2")]
        stats = aggregator.aggregate("d1", 3, 2024, records)
        assert stats.total_shifts == 0

    def test_records_outside_month_ignored(self, aggregator):
        records = [
            worked_day(date(2024, 2, 29), ShiftType.DAY),
            worked_day(date(2024, 3, 31), ShiftType.NIGHT),
            worked_day(date(2024, 4, 1), ShiftType.DAY),
        ]
        stats = aggregator.aggregate("d1", 3, 2024, records)
        assert stats.total_shifts == 1
        assert stats.night_shifts == 1

    def test_day_and_night_on_same_date(self, aggregator):
        """Two shifts on one date are two shifts but one worked date."""
        records = [
            worked_day(date(2024, 3, 1), ShiftType.DAY),
            worked_day(date(2024, 3, 1), ShiftType.NIGHT),
        ]
        stats = aggregator.aggregate("d1", 3, 2024, records)
        assert stats.total_shifts == 2
        assert stats.days_off == 30

    def test_break_days_counted_once_per_date(self, aggregator):
        records = [
            record(date(2024, 3, 1), ShiftType.DAY, {"08:00": {"d1": "BREAK"}}),
            record(date(2024, 3, 1), ShiftType.NIGHT, {"20:00": {"d1": "BREAK"}}),
        ]
        stats = aggregator.aggregate("d1", 3, 2024, records)
        assert stats.days_with_breaks == 1

    def test_malformed_records_skipped(self, aggregator, caplog):
        records = [
            worked_day(date(2024, 3, 1), ShiftType.DAY),
            record(date(2024, 3, 2), ShiftType.DAY, None),
            record(date(2024, 3, 3), ShiftType.DAY, ["not", "a", "grid"]),
            record(date(2024, 3, 4), ShiftType.DAY, {"08:00": "BJ1"}),
        ]
        with caplog.at_level(logging.WARNING, logger="pitboss.stats.dealer_stats"):
            stats = aggregator.aggregate("d1", 3, 2024, records)
        assert stats.total_shifts == 1
        assert len(caplog.records) == 3
        assert "2024-03-02" in caplog.records[0].getMessage()

    def test_idempotent(self, aggregator, march_records):
        first = aggregator.aggregate("d1", 3, 2024, march_records)
        second = aggregator.aggregate("d1", 3, 2024, march_records)
        assert first == second

    def test_order_independent(self, aggregator, march_records):
        expected = aggregator.aggregate("d1", 3, 2024, march_records)
        shuffled = list(march_records)
        random.Random(7).shuffle(shuffled)
        assert aggregator.aggregate("d1", 3, 2024, shuffled) == expected
        assert aggregator.aggregate("d1", 3, 2024, reversed(march_records)) == expected

    def test_accepts_grids(self, aggregator, march_records):
        grids = [AssignmentGrid.from_record(r) for r in march_records]
        assert aggregator.aggregate("d1", 3, 2024, grids) == aggregator.aggregate(
            "d1", 3, 2024, march_records
        )

    def test_undated_grid_skipped(self, aggregator, caplog):
        grid = AssignmentGrid.wrap({"08:00": {"d1": "BJ1"}}, ShiftType.DAY)
        with caplog.at_level(logging.WARNING):
            stats = aggregator.aggregate("d1", 3, 2024, [grid])
        assert stats.total_shifts == 0
        assert "undated" in caplog.text

    def test_invalid_month(self, aggregator):
        with pytest.raises(ValueError):
            aggregator.aggregate("d1", 13, 2024, [])


class TestAggregateRoster:
    """Tests for aggregating several dealers at once."""

    def test_matches_single_dealer(self, aggregator):
        data = {"08:00": {"d1": "BJ1", "d2": "BREAK"}, "08:30": {"d1": "BREAK", "d2": "ROU1"}}
        records = [record(date(2024, 3, 1), ShiftType.DAY, data)]
        roster = aggregator.aggregate_roster(["d1", "d2", "d3"], 3, 2024, records)
        assert set(roster) == {"d1", "d2", "d3"}
        for dealer_id, stats in roster.items():
            assert stats == aggregator.aggregate(dealer_id, 3, 2024, records)
        assert roster["d3"].days_off == 31


class FlatPolicy(PayPolicy):
    def salary(self, day_shifts, night_shifts):
        return 50 * (day_shifts + night_shifts)


class TestCustomPolicy:
    """Tests for swapping the pay policy."""

    def test_policy_is_used(self, march_records):
        aggregator = DealerStatsAggregator(pay_policy=FlatPolicy())
        assert aggregator.aggregate("d1", 3, 2024, march_records).salary == 18 * 50
