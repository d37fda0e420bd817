"""Plain-text exports of schedules and statistics.

This module creates text output for:
- Per-dealer rotation statistics for a day (copied into chat or email)
- Tab-separated schedule grids for pasting into a spreadsheet
- Monthly dealer statements
"""

from pathlib import Path
from typing import Iterable, Optional, Union

from pitboss.domain import catalog
from pitboss.domain.classifier import ActivityClassifier, ActivityFamily, IDLE_SENTINEL
from pitboss.domain.grid import AssignmentGrid
from pitboss.domain.models import Absence, Dealer, DealerMonthStats, FineLedger
from pitboss.stats.day_stats import DayStatistics


class TextExporter:
    """Generates text exports of grids and statistics.

    Example:
        >>> exporter = TextExporter()
        >>> print(exporter.dealer_stats_table(grid, dealers))
    """

    def __init__(self, classifier: Optional[ActivityClassifier] = None):
        self.classifier = classifier or ActivityClassifier()
        self.day_statistics = DayStatistics(self.classifier)

    def dealer_stats_table(self, grid: AssignmentGrid, dealers: Iterable[Dealer]) -> str:
        """Rotations, breaks and tables per dealer, with summary lines.

        Args:
            grid: The day's schedule.
            dealers: Roster; only dealers present in the grid are listed.

        Returns:
            The formatted table.
        """
        roster = grid.filter_roster(dealers)
        lines = ["NAME | ROTATIONS | BREAKS | UNIQUE TABLES", "-" * 50]

        all_stats = []
        for dealer in roster:
            stats = self.day_statistics.for_dealer(grid, dealer.id)
            all_stats.append(stats)
            lines.append(
                f"{dealer.display_name} | {stats.work_slots} | "
                f"{stats.break_count} | {stats.unique_tables}"
            )
            lines.append(f"  Tables: {', '.join(stats.table_assignments)}")
            lines.append(f"  Breaks at: {', '.join(stats.break_times)}")
            lines.append("-" * 25)

        lines.append("")
        lines.append("Summary Statistics:")
        lines.append(f"Total Dealers: {len(all_stats)}")
        if all_stats:
            total_rotations = sum(s.work_slots for s in all_stats)
            total_breaks = sum(s.break_count for s in all_stats)
            tables = {t for s in all_stats for t in s.table_assignments}
            lines.append(f"Average Rotations: {total_rotations / len(all_stats):.2f}")
            lines.append(f"Average Breaks: {total_breaks / len(all_stats):.2f}")
            lines.append(f"Total Tables: {len(tables)}")
        return "\n".join(lines) + "\n"

    def sheet_export(
        self,
        grid: AssignmentGrid,
        dealers: Iterable[Dealer],
        absences: Iterable[Absence] = (),
    ) -> str:
        """Tab-separated grid for spreadsheets.

        One column per dealer present (sorted by display name), one row per
        slot of the shift. Rest codes print as the localized rest label.
        """
        dealer_list = list(dealers)
        roster = sorted(grid.filter_roster(dealer_list), key=lambda d: d.display_name)
        rows = ["\t".join([catalog.TIME_HEADER] + [d.display_name for d in roster])]

        for slot in grid.calendar.generate(grid.shift_type):
            cells = [slot.formatted_time]
            for dealer in roster:
                code = grid.activity_at(slot.time, dealer.id)
                family = self.classifier.family(code)
                if family is ActivityFamily.REST:
                    cells.append(catalog.REST_LABEL)
                elif family is ActivityFamily.IDLE:
                    cells.append(IDLE_SENTINEL)
                else:
                    cells.append(code)
            rows.append("\t".join(cells))

        output = "\n".join(rows) + "\n"

        absences = list(absences)
        if absences:
            names = {d.id: d.display_name for d in dealer_list}
            output += "\n\nОтсъстващи дилъри:\n"
            output += "Дилър\tОт час\tПричина\n"
            for absence in absences:
                name = names.get(absence.dealer_id, catalog.UNKNOWN_DEALER)
                reason = catalog.label(catalog.ABSENCE_REASONS, absence.reason)
                output += f"{name}\t{absence.start_time}\t{reason}\n"

        return output

    def month_report(
        self,
        dealer: Dealer,
        month: int,
        year: int,
        stats: DealerMonthStats,
        ledger: Optional[FineLedger] = None,
    ) -> str:
        """Monthly statement for one dealer."""
        lines = [
            "=" * 60,
            f"DEALER STATEMENT - {dealer.display_name} - {month:02d}/{year}",
            "=" * 60,
            f"Tables worked:   {stats.tables_worked}",
            f"Day shifts:      {stats.day_shifts}",
            f"Night shifts:    {stats.night_shifts}",
            f"Total shifts:    {stats.total_shifts}",
            f"Days off:        {stats.days_off}",
            f"Days with break: {stats.days_with_breaks}",
            f"Salary:          {stats.salary}",
        ]

        if ledger is not None:
            lines.append("-" * 60)
            if not ledger.fines_enabled:
                lines.append("Fines: tracking not enabled")
            else:
                fines = ledger.stats
                lines.append(f"Fines:           {fines.total_fines} ({fines.total_fine_amount})")
                lines.append(f"  Applied:       {fines.applied_fines} ({fines.applied_fine_amount})")
                lines.append(f"  Pending:       {fines.pending_fines} ({fines.pending_fine_amount})")

        return "\n".join(lines) + "\n"

    def write(self, content: str, output_path: Union[str, Path]) -> str:
        """Save exported text to a file and return it."""
        Path(output_path).write_text(content, encoding="utf-8")
        return content
