"""Smoke tests for the end-to-end statistics flow."""

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from pitboss.domain.calendar import TimeSlotCalendar
from pitboss.domain.grid import AssignmentGrid
from pitboss.domain.models import (
    Dealer,
    IncidentRecord,
    ScheduleRecord,
    ShiftType,
)
from pitboss.output.text_export import TextExporter
from pitboss.stats.day_stats import DayStatistics
from pitboss.stats.dealer_stats import DealerStatsAggregator
from pitboss.stats.fines import FineLedgerAggregator
from pitboss.stats.reports import IncidentStatistics

TABLES = ["BJ1", "BJ2", "ROU1", "PT1"]


class TestSmoke:
    """End-to-end smoke tests over a generated month."""

    @pytest.fixture
    def dealers(self):
        return [Dealer(f"d{i}", f"Dealer {i}") for i in range(8)]

    def _rotation(self, shift_type: ShiftType, dealers: list[Dealer], offset: int) -> dict:
        """Rotate dealers over the tables, one of them resting each slot."""
        data = {}
        for i, slot in enumerate(TimeSlotCalendar().slot_times(shift_type)):
            assignments = {}
            for j, dealer in enumerate(dealers):
                position = (i + j + offset) % (len(TABLES) + 1)
                assignments[dealer.id] = "BREAK" if position == len(TABLES) else TABLES[position]
            data[slot] = assignments
        return data

    @pytest.fixture
    def month(self, dealers):
        """April 2024: day shift for d0-d4, night shift for d5-d7, every day."""
        records = []
        day = date(2024, 4, 1)
        while day.month == 4:
            records.append(ScheduleRecord(day, ShiftType.DAY, self._rotation(ShiftType.DAY, dealers[:5], day.day)))
            records.append(ScheduleRecord(day, ShiftType.NIGHT, self._rotation(ShiftType.NIGHT, dealers[5:], day.day)))
            day += timedelta(days=1)
        return records

    def test_month_aggregation(self, dealers, month):
        stats = DealerStatsAggregator().aggregate_roster([d.id for d in dealers], 4, 2024, month)

        for dealer_id in ("d0", "d1", "d2", "d3", "d4"):
            assert stats[dealer_id].day_shifts == 30
            assert stats[dealer_id].night_shifts == 0
            assert stats[dealer_id].days_off == 0
            assert stats[dealer_id].salary == 30 * 100
        for dealer_id in ("d5", "d6", "d7"):
            assert stats[dealer_id].night_shifts == 30
            assert stats[dealer_id].salary == 30 * 120

        for s in stats.values():
            assert s.total_shifts == s.day_shifts + s.night_shifts
            assert s.tables_worked <= s.total_shifts * 24
            assert s.days_with_breaks == 30

    def test_day_statistics(self, dealers, month):
        grid = AssignmentGrid.from_record(month[0])
        summary = DayStatistics().summary(grid)
        assert summary.dealer_count == 5
        assert summary.total_work_slots + summary.total_breaks == 5 * 24
        assert summary.total_tables == len(TABLES)

        text = TextExporter().dealer_stats_table(grid, dealers)
        assert "Total Dealers: 5" in text

    def test_reports_and_fines(self, dealers, month):
        incidents = [
            IncidentRecord(f"r{n}", f"d{n % 3}", datetime(2024, 4, 1 + n, 21, 0),
                           incident_type="dealing_error", table_name=TABLES[n % 4],
                           fine_amount=Decimal("15.00"), fine_applied=n % 2 == 0,
                           fine_status="approved")
            for n in range(9)
        ]

        statistics = IncidentStatistics()
        top = statistics.top_dealers_by_reports(dealers, incidents, date(2024, 4, 1), date(2024, 4, 30))
        assert [t.report_count for t in top[:3]] == [3, 3, 3]

        ratios = statistics.dealer_shifts_and_reports(
            dealers, month, incidents, date(2024, 4, 1), date(2024, 4, 30)
        )
        assert {r.dealer_id: r.shift_count for r in ratios}["d0"] == 30

        ledger = FineLedgerAggregator().aggregate(
            "d0", [i.to_fine_record() for i in incidents if i.dealer_id == "d0"]
        )
        assert ledger.stats.total_fines == 3
        assert ledger.stats.total_fine_amount == Decimal("45.00")
        assert ledger.stats.applied_fines + ledger.stats.pending_fines == 3
