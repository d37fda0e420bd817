"""PDF generation for schedules and dealer statements.

This module creates printable PDFs showing:
- The day's grid, one row per dealer and one column per slot
- Per-dealer rotation and break statistics for the day
- Monthly dealer statements with shifts, salary and fines
"""

from io import BytesIO
from pathlib import Path
from typing import Iterable, Optional, Union

from pitboss.domain.classifier import ActivityClassifier, ActivityFamily
from pitboss.domain.grid import AssignmentGrid
from pitboss.domain.models import Dealer, DealerMonthStats, FineLedger
from pitboss.stats.day_stats import DayStatistics

# Color definitions (RGB tuples, 0-1 scale)
COLORS = {
    ActivityFamily.REST: (1.0, 0.95, 0.7),  # Yellow
    ActivityFamily.BLACKJACK: (0.75, 0.85, 1.0),  # Blue
    ActivityFamily.ROULETTE: (0.75, 0.95, 0.75),  # Green
    ActivityFamily.OTHER: (0.9, 0.9, 0.9),  # Gray
    ActivityFamily.IDLE: (1.0, 1.0, 1.0),  # White
}


def _canvas(target):
    try:
        from reportlab.lib.pagesizes import landscape, letter
        from reportlab.pdfgen import canvas
    except ImportError:
        raise ImportError(
            "reportlab is required for PDF generation. "
            "Install with: pip install reportlab"
        )
    return canvas.Canvas(target, pagesize=landscape(letter))


class PDFGenerator:
    """Generates printable schedule and statement PDFs.

    Example:
        >>> generator = PDFGenerator()
        >>> generator.generate_day(grid, dealers, "schedule.pdf")
    """

    def __init__(
        self,
        page_width: float = 792,  # Letter landscape width (11")
        page_height: float = 612,  # Letter landscape height (8.5")
        margin: float = 36,  # 0.5 inch margins
        classifier: Optional[ActivityClassifier] = None,
    ):
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin
        self.classifier = classifier or ActivityClassifier()

    def generate_day(
        self,
        grid: AssignmentGrid,
        dealers: Iterable[Dealer],
        output_path: Union[str, Path],
        include_summary: bool = True,
    ) -> None:
        """Generate the day's schedule PDF and save to file.

        Args:
            grid: The day schedule to render.
            dealers: Roster; only dealers present in the grid are drawn.
            output_path: Path to save the PDF.
            include_summary: Whether to include the statistics page.
        """
        c = _canvas(str(output_path))
        self._draw_day(c, grid, list(dealers), include_summary)
        c.save()

    def generate_day_to_buffer(
        self,
        grid: AssignmentGrid,
        dealers: Iterable[Dealer],
        include_summary: bool = True,
    ) -> BytesIO:
        """Generate the day's schedule PDF and return as bytes buffer."""
        buffer = BytesIO()
        c = _canvas(buffer)
        self._draw_day(c, grid, list(dealers), include_summary)
        c.save()
        buffer.seek(0)
        return buffer

    def generate_dealer_month(
        self,
        dealer: Dealer,
        month: int,
        year: int,
        stats: DealerMonthStats,
        output_path: Union[str, Path],
        ledger: Optional[FineLedger] = None,
    ) -> None:
        """Generate a dealer's monthly statement and save to file."""
        c = _canvas(str(output_path))
        self._draw_statement(c, dealer, month, year, stats, ledger)
        c.save()

    def generate_dealer_month_to_buffer(
        self,
        dealer: Dealer,
        month: int,
        year: int,
        stats: DealerMonthStats,
        ledger: Optional[FineLedger] = None,
    ) -> BytesIO:
        """Generate a dealer's monthly statement and return as bytes buffer."""
        buffer = BytesIO()
        c = _canvas(buffer)
        self._draw_statement(c, dealer, month, year, stats, ledger)
        c.save()
        buffer.seek(0)
        return buffer

    def _draw_day(
        self,
        c,
        grid: AssignmentGrid,
        dealers: list[Dealer],
        include_summary: bool,
    ) -> None:
        roster = grid.filter_roster(dealers)
        if not roster:
            self._draw_title(c, grid)
            c.setFont("Helvetica", 11)
            c.drawString(
                self.margin,
                self.page_height - self.margin - 60,
                "No dealers found in this schedule.",
            )
            c.showPage()
            return

        self._draw_grid_pages(c, grid, roster)
        if include_summary:
            self._draw_summary_page(c, grid, roster)

    def _draw_title(self, c, grid: AssignmentGrid) -> None:
        """Draw page header with date and shift."""
        when = grid.schedule_date.strftime("%A, %B %d, %Y") if grid.schedule_date else "Undated"
        c.setFont("Helvetica-Bold", 16)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 20,
            f"{grid.shift_type.value.title()} Shift - {when}",
        )

    def _draw_grid_pages(self, c, grid: AssignmentGrid, roster: list[Dealer]) -> None:
        """Draw the grid, paginated by dealer rows."""
        slots = grid.calendar.generate(grid.shift_type)

        row_height = 16
        header_height = 60
        footer_height = 40
        usable_height = self.page_height - 2 * self.margin - header_height - footer_height
        rows_per_page = int(usable_height / row_height) - 1

        name_width = 100
        cell_width = (self.page_width - 2 * self.margin - name_width) / len(slots)
        total_pages = (len(roster) + rows_per_page - 1) // rows_per_page

        for page_start in range(0, len(roster), rows_per_page):
            page_dealers = roster[page_start : page_start + rows_per_page]
            self._draw_title(c, grid)

            c.setFont("Helvetica", 10)
            c.drawString(
                self.margin,
                self.page_height - self.margin - 35,
                f"Dealers Scheduled: {len(roster)}",
            )

            # Slot header row
            y = self.page_height - self.margin - header_height
            c.setFont("Helvetica-Bold", 6)
            c.setFillColorRGB(0, 0, 0)
            for i, slot in enumerate(slots):
                x = self.margin + name_width + i * cell_width
                c.drawCentredString(x + cell_width / 2, y + 4, slot.formatted_time)

            for dealer in page_dealers:
                y -= row_height
                self._draw_dealer_row(c, grid, dealer, slots, y, row_height, name_width, cell_width)

            self._draw_legend(c, self.margin, self.margin + 10)

            page_num = (page_start // rows_per_page) + 1
            c.setFont("Helvetica", 9)
            c.drawCentredString(
                self.page_width / 2,
                self.margin - 10,
                f"Page {page_num} of {total_pages}",
            )
            c.showPage()

    def _draw_dealer_row(
        self,
        c,
        grid: AssignmentGrid,
        dealer: Dealer,
        slots,
        y: float,
        height: float,
        name_width: float,
        cell_width: float,
    ) -> None:
        """Draw a single dealer's row of cells."""
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica", 8)
        c.drawString(self.margin, y + 4, dealer.display_name[:20])

        c.setStrokeColorRGB(0.7, 0.7, 0.7)
        c.setLineWidth(0.5)
        for i, slot in enumerate(slots):
            code = grid.activity_at(slot.time, dealer.id)
            family = self.classifier.family(code)
            x = self.margin + name_width + i * cell_width

            c.setFillColorRGB(*COLORS[family])
            c.rect(x, y, cell_width, height, fill=1, stroke=1)

            c.setFillColorRGB(0, 0, 0)
            c.setFont("Helvetica", 5)
            c.drawCentredString(x + cell_width / 2, y + 5, code[:6])

    def _draw_legend(self, c, x: float, y: float) -> None:
        """Draw legend for colors."""
        c.setFont("Helvetica-Bold", 8)
        c.setFillColorRGB(0, 0, 0)
        c.drawString(x, y, "Legend:")

        items = [
            (ActivityFamily.BLACKJACK, "Blackjack"),
            (ActivityFamily.ROULETTE, "Roulette"),
            (ActivityFamily.OTHER, "Other table"),
            (ActivityFamily.REST, "Break"),
        ]

        c.setFont("Helvetica", 7)
        current_x = x + 45

        for family, label in items:
            c.setFillColorRGB(*COLORS[family])
            c.rect(current_x, y - 2, 12, 10, fill=1, stroke=1)
            c.setFillColorRGB(0, 0, 0)
            c.drawString(current_x + 15, y, label)
            current_x += 80

    def _draw_summary_page(self, c, grid: AssignmentGrid, roster: list[Dealer]) -> None:
        """Draw rotation and break statistics for the day."""
        day_statistics = DayStatistics(self.classifier)
        summary = day_statistics.summary(grid)

        self._draw_title(c, grid)
        y = self.page_height - self.margin - 60

        c.setFont("Helvetica-Bold", 12)
        c.drawString(self.margin, y, "Overview")
        y -= 20

        c.setFont("Helvetica", 10)
        overview = [
            f"Dealers: {summary.dealer_count}",
            f"Rotations: {summary.total_work_slots} "
            f"(avg {summary.avg_work_slots:.2f}, range {summary.min_work_slots}-{summary.max_work_slots})",
            f"Breaks: {summary.total_breaks} "
            f"(avg {summary.avg_breaks:.2f}, range {summary.min_breaks}-{summary.max_breaks})",
            f"Tables in use: {summary.total_tables}",
        ]
        for line in overview:
            c.drawString(self.margin + 20, y, line)
            y -= 15

        y -= 15
        c.setFont("Helvetica-Bold", 12)
        c.drawString(self.margin, y, "Per Dealer")
        y -= 18

        c.setFont("Helvetica", 9)
        for dealer in roster:
            if y < self.margin + 20:
                c.showPage()
                y = self.page_height - self.margin - 20
                c.setFont("Helvetica", 9)
            stats = day_statistics.for_dealer(grid, dealer.id)
            c.drawString(
                self.margin + 20,
                y,
                f"{dealer.display_name[:24]}: {stats.work_slots} rotations, "
                f"{stats.break_count} breaks, {stats.unique_tables} tables"
                f" - breaks at {', '.join(stats.break_times) or 'none'}",
            )
            y -= 13

        c.showPage()

    def _draw_statement(
        self,
        c,
        dealer: Dealer,
        month: int,
        year: int,
        stats: DealerMonthStats,
        ledger: Optional[FineLedger],
    ) -> None:
        """Draw a one-page monthly statement."""
        c.setFont("Helvetica-Bold", 16)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 20,
            f"Dealer Statement - {dealer.display_name} - {month:02d}/{year}",
        )

        y = self.page_height - self.margin - 60
        c.setFont("Helvetica", 11)
        rows = [
            ("Tables worked", stats.tables_worked),
            ("Day shifts", stats.day_shifts),
            ("Night shifts", stats.night_shifts),
            ("Total shifts", stats.total_shifts),
            ("Days off", stats.days_off),
            ("Days with a break", stats.days_with_breaks),
            ("Salary", stats.salary),
        ]

        if ledger is not None and ledger.fines_enabled:
            fines = ledger.stats
            rows.extend([
                ("Fines", f"{fines.total_fines} ({fines.total_fine_amount})"),
                ("Applied fines", f"{fines.applied_fines} ({fines.applied_fine_amount})"),
                ("Pending fines", f"{fines.pending_fines} ({fines.pending_fine_amount})"),
            ])

        for label, value in rows:
            c.drawString(self.margin + 20, y, label)
            c.drawRightString(self.margin + 300, y, str(value))
            y -= 18

        if ledger is not None and not ledger.fines_enabled:
            c.setFont("Helvetica-Oblique", 10)
            c.drawString(self.margin + 20, y - 10, "Fine tracking is not enabled.")

        c.showPage()
