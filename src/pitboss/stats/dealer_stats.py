"""Monthly work statistics and salary for dealers.

This module folds a month of daily schedules into one ``DealerMonthStats``
per dealer. The fold is order-independent; schedules can be supplied in any
order and re-aggregating the same input always gives the same result.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional, Union

from pitboss.domain.calendar import TimeSlotCalendar, days_in_month, month_bounds
from pitboss.domain.classifier import ActivityClassifier, ActivityFamily
from pitboss.domain.grid import AssignmentGrid
from pitboss.domain.models import DealerMonthStats, ScheduleRecord, ShiftType
from pitboss.domain.policies import PayPolicy, TieredPayPolicy
from pitboss.validation.validator import ValidationError

logger = logging.getLogger(__name__)

ScheduleInput = Union[ScheduleRecord, AssignmentGrid]


@dataclass
class _MonthTally:
    """Running totals for one dealer while scanning a month."""

    tables_worked: int = 0
    day_shifts: int = 0
    night_shifts: int = 0
    worked_dates: set[date] = field(default_factory=set)
    break_dates: set[date] = field(default_factory=set)


class DealerStatsAggregator:
    """Aggregates schedules into dealer-month statistics.

    Example:
        >>> aggregator = DealerStatsAggregator()
        >>> stats = aggregator.aggregate("d1", 3, 2024, records)
        >>> stats.salary
        1600
    """

    def __init__(
        self,
        classifier: Optional[ActivityClassifier] = None,
        pay_policy: Optional[PayPolicy] = None,
        calendar: Optional[TimeSlotCalendar] = None,
    ):
        self.classifier = classifier or ActivityClassifier()
        self.pay_policy = pay_policy or TieredPayPolicy()
        self.calendar = calendar or TimeSlotCalendar()

    def aggregate(
        self,
        dealer_id: str,
        month: int,
        year: int,
        schedules: Iterable[ScheduleInput],
    ) -> DealerMonthStats:
        """Compute one dealer's statistics for a month.

        Args:
            dealer_id: Dealer to aggregate.
            month: Month number (1-12).
            year: Four-digit year.
            schedules: Schedule records or already wrapped grids. Records
                with missing or malformed data are skipped.

        Returns:
            DealerMonthStats for the month.
        """
        return self.aggregate_roster([dealer_id], month, year, schedules)[dealer_id]

    def aggregate_roster(
        self,
        dealer_ids: Iterable[str],
        month: int,
        year: int,
        schedules: Iterable[ScheduleInput],
    ) -> dict[str, DealerMonthStats]:
        """Compute statistics for several dealers in one pass over the month.

        Each schedule is validated once, no matter how many dealers are
        aggregated.

        Returns:
            Dict mapping dealer IDs to their DealerMonthStats.
        """
        first, last = month_bounds(year, month)
        tallies = {dealer_id: _MonthTally() for dealer_id in dealer_ids}

        for grid in self._month_grids(schedules, first, last):
            for dealer_id, tally in tallies.items():
                self._scan_day(grid, dealer_id, tally)

        month_days = days_in_month(year, month)
        return {
            dealer_id: self._finish(tally, month_days)
            for dealer_id, tally in tallies.items()
        }

    def _month_grids(
        self,
        schedules: Iterable[ScheduleInput],
        first: date,
        last: date,
    ) -> Iterable[AssignmentGrid]:
        """Valid grids dated within [first, last]."""
        for item in schedules:
            if isinstance(item, AssignmentGrid):
                grid_date = item.schedule_date
                if grid_date is None:
                    logger.warning("Skipping undated grid %r", item)
                    continue
                if first <= grid_date <= last:
                    yield item
                continue

            if not first <= item.schedule_date <= last:
                continue
            try:
                yield AssignmentGrid.from_record(item, calendar=self.calendar)
            except ValidationError as e:
                logger.warning(
                    "Skipping %s %s schedule: %s",
                    item.schedule_date.isoformat(),
                    item.shift_type.value,
                    e,
                )

    def _scan_day(self, grid: AssignmentGrid, dealer_id: str, tally: _MonthTally) -> None:
        """Fold one day's entries for a dealer into the tally."""
        worked = False
        for _, code in grid.entries_for(dealer_id):
            family = self.classifier.family(code)
            if family is ActivityFamily.REST:
                tally.break_dates.add(grid.schedule_date)
            elif family.is_worked:
                tally.tables_worked += 1
                worked = True

        if not worked:
            return

        tally.worked_dates.add(grid.schedule_date)
        if grid.shift_type is ShiftType.DAY:
            tally.day_shifts += 1
        else:
            tally.night_shifts += 1

    def _finish(self, tally: _MonthTally, month_days: int) -> DealerMonthStats:
        return DealerMonthStats(
            tables_worked=tally.tables_worked,
            days_off=month_days - len(tally.worked_dates),
            total_shifts=tally.day_shifts + tally.night_shifts,
            day_shifts=tally.day_shifts,
            night_shifts=tally.night_shifts,
            salary=self.pay_policy.salary(tally.day_shifts, tally.night_shifts),
            days_with_breaks=len(tally.break_dates),
        )
