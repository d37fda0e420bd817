"""Per-dealer statistics for a single schedule day."""

from dataclasses import dataclass, field
from typing import Optional

from pitboss.domain.classifier import ActivityClassifier, ActivityFamily
from pitboss.domain.grid import AssignmentGrid


@dataclass
class DealerDayStats:
    """One dealer's rotations and breaks on a day.

    Attributes:
        dealer_id: The dealer.
        work_slots: Slots spent at a table (rotations).
        break_count: Rest slots.
        table_assignments: Dict mapping table code to slots worked there.
        break_times: Slot labels of the breaks, in shift order.
    """

    dealer_id: str
    work_slots: int = 0
    break_count: int = 0
    table_assignments: dict[str, int] = field(default_factory=dict)
    break_times: list[str] = field(default_factory=list)

    @property
    def unique_tables(self) -> int:
        return len(self.table_assignments)


@dataclass
class DaySummary:
    """Summary across all dealers on a day."""

    dealer_count: int = 0
    total_work_slots: int = 0
    total_breaks: int = 0
    avg_work_slots: float = 0.0
    avg_breaks: float = 0.0
    min_work_slots: int = 0
    max_work_slots: int = 0
    min_breaks: int = 0
    max_breaks: int = 0
    total_tables: int = 0


class DayStatistics:
    """Computes rotation and break statistics for a grid."""

    def __init__(self, classifier: Optional[ActivityClassifier] = None):
        self.classifier = classifier or ActivityClassifier()

    def dealer_stats(self, grid: AssignmentGrid) -> list[DealerDayStats]:
        """Statistics for every dealer present, sorted by dealer id."""
        return [self.for_dealer(grid, d) for d in sorted(grid.dealers_present())]

    def for_dealer(self, grid: AssignmentGrid, dealer_id: str) -> DealerDayStats:
        stats = DealerDayStats(dealer_id=dealer_id)
        for slot, code in grid.entries_for(dealer_id):
            family = self.classifier.family(code)
            if family is ActivityFamily.REST:
                stats.break_count += 1
                stats.break_times.append(slot)
            elif family.is_worked:
                stats.work_slots += 1
                table = code.strip()
                stats.table_assignments[table] = stats.table_assignments.get(table, 0) + 1
        return stats

    def summary(self, grid: AssignmentGrid) -> DaySummary:
        """Totals, averages and ranges across the day's dealers."""
        all_stats = self.dealer_stats(grid)
        if not all_stats:
            return DaySummary()

        work = [s.work_slots for s in all_stats]
        breaks = [s.break_count for s in all_stats]
        tables = {table for s in all_stats for table in s.table_assignments}

        return DaySummary(
            dealer_count=len(all_stats),
            total_work_slots=sum(work),
            total_breaks=sum(breaks),
            avg_work_slots=sum(work) / len(all_stats),
            avg_breaks=sum(breaks) / len(all_stats),
            min_work_slots=min(work),
            max_work_slots=max(work),
            min_breaks=min(breaks),
            max_breaks=max(breaks),
            total_tables=len(tables),
        )
