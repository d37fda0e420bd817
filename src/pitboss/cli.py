"""Command-line interface for the pitboss schedule statistics tool.

Input files are JSON exports of the data-store tables: a list of schedule
rows, a list of dealer rows and a list of dealer report rows.
"""

import argparse
import json
import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Optional

from pitboss.domain.calendar import TimeSlotCalendar
from pitboss.domain.grid import AssignmentGrid
from pitboss.domain.models import (
    Dealer,
    DisplaySettings,
    FineRecord,
    ScheduleRecord,
    ShiftType,
)
from pitboss.output.pdf_generator import PDFGenerator
from pitboss.output.text_export import TextExporter
from pitboss.stats.dealer_stats import DealerStatsAggregator
from pitboss.stats.fines import FineLedgerAggregator, SchemaUnavailableError
from pitboss.validation.validator import ValidationError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_INVALID_SCHEDULE = 2
EXIT_NOT_FOUND = 3


def load_rows(path: str) -> list[dict]:
    """Load a JSON list of rows from a file."""
    rows = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(rows, list):
        raise ValueError(f"{path}: expected a JSON list of rows")
    return rows


def load_schedules(path: str) -> list[ScheduleRecord]:
    return [ScheduleRecord.from_dict(row) for row in load_rows(path)]


def load_dealers(path: Optional[str]) -> list[Dealer]:
    if not path:
        return []
    return [Dealer.from_dict(row) for row in load_rows(path)]


def fine_fetcher(path: str):
    """Build a fetch callable over a report export.

    An export whose rows carry no ``fine_amount`` column behaves like a
    store without fine tracking.
    """
    rows = load_rows(path)

    def fetch(dealer_id: str) -> list[FineRecord]:
        if rows and not any("fine_amount" in row for row in rows):
            raise SchemaUnavailableError("column fine_amount does not exist")
        return [
            FineRecord.from_dict(row)
            for row in rows
            if str(row.get("dealer_id")) == dealer_id
        ]

    return fetch


def find_schedule(
    records: list[ScheduleRecord],
    schedule_date: date,
    shift_type: Optional[ShiftType],
) -> Optional[ScheduleRecord]:
    for record in records:
        if record.schedule_date != schedule_date:
            continue
        if shift_type is None or record.shift_type is shift_type:
            return record
    return None


def roster_for(dealers: list[Dealer], grid: AssignmentGrid) -> list[Dealer]:
    """Roster dealers, with bare entries for ids missing from the roster."""
    known = {d.id for d in dealers}
    extra = [Dealer(id=d, name=d) for d in sorted(grid.dealers_present() - known)]
    return dealers + extra


def run_slots(shift: str) -> int:
    """Print the slot axis for a shift."""
    calendar = TimeSlotCalendar()
    for slot in calendar.generate(ShiftType(shift)):
        print(slot.formatted_time)
    return EXIT_OK


def run_grid(args: argparse.Namespace) -> int:
    """Print or render one day's schedule."""
    records = load_schedules(args.schedules)
    shift_type = ShiftType(args.shift) if args.shift else None
    record = find_schedule(records, date.fromisoformat(args.date), shift_type)
    if record is None:
        print(f"No schedule found for {args.date}", file=sys.stderr)
        return EXIT_NOT_FOUND

    try:
        grid = AssignmentGrid.from_record(record)
    except ValidationError as e:
        print(f"Schedule data is missing or corrupt: {e}", file=sys.stderr)
        return EXIT_INVALID_SCHEDULE

    if args.apply_absences:
        grid = grid.with_absences(record.absent_dealers)

    if grid.is_empty:
        print("No dealers found in this schedule. The schedule may be empty.")
        return EXIT_OK

    dealers = roster_for(load_dealers(args.dealers), grid)
    exporter = TextExporter()
    if args.format == "sheet":
        print(exporter.sheet_export(grid, dealers, record.absent_dealers), end="")
    else:
        print(exporter.dealer_stats_table(grid, dealers), end="")

    if args.pdf:
        PDFGenerator().generate_day(grid, dealers, args.pdf)
        print(f"PDF created: {args.pdf}")
    return EXIT_OK


def run_dealer_stats(args: argparse.Namespace) -> int:
    """Print a dealer's monthly statement."""
    records = load_schedules(args.schedules)
    dealers = {d.id: d for d in load_dealers(args.dealers)}
    dealer = dealers.get(args.dealer, Dealer(id=args.dealer, name=args.dealer))

    stats = DealerStatsAggregator().aggregate(args.dealer, args.month, args.year, records)
    ledger = None
    if args.incidents:
        ledger = FineLedgerAggregator().aggregate_from(args.dealer, fine_fetcher(args.incidents))

    print(TextExporter().month_report(dealer, args.month, args.year, stats, ledger), end="")

    if args.pdf:
        PDFGenerator().generate_dealer_month(
            dealer, args.month, args.year, stats, args.pdf, ledger=ledger
        )
        print(f"PDF created: {args.pdf}")
    return EXIT_OK


def run_fines(args: argparse.Namespace) -> int:
    """Print a dealer's fine totals."""
    ledger = FineLedgerAggregator().aggregate_from(args.dealer, fine_fetcher(args.incidents))
    if not ledger.fines_enabled:
        print("Fine tracking is not enabled.")
        return EXIT_OK

    stats = ledger.stats
    print(f"Fines:   {stats.total_fines} ({stats.total_fine_amount})")
    print(f"Applied: {stats.applied_fines} ({stats.applied_fine_amount})")
    print(f"Pending: {stats.pending_fines} ({stats.pending_fine_amount})")
    return EXIT_OK


def run_live(args: argparse.Namespace) -> int:
    """Print the upcoming slots for the live view."""
    records = load_schedules(args.schedules)
    record = find_schedule(records, date.fromisoformat(args.date), ShiftType(args.shift))
    if record is None:
        print(f"No schedule found for {args.date}", file=sys.stderr)
        return EXIT_NOT_FOUND

    try:
        grid = AssignmentGrid.from_record(record).with_absences(record.absent_dealers)
    except ValidationError as e:
        print(f"Schedule data is missing or corrupt: {e}", file=sys.stderr)
        return EXIT_INVALID_SCHEDULE

    settings = DisplaySettings(advance_minutes=args.advance, slots_to_show=args.slots)
    now = datetime.strptime(args.time, "%H:%M").time()
    slots = grid.calendar.upcoming_slots(grid.shift_type, now, settings)
    if not slots:
        print("Shift is over.")
        return EXIT_OK

    dealers = roster_for(load_dealers(args.dealers), grid)
    roster = grid.filter_roster(dealers)
    print("\t".join(["Dealer"] + [s.formatted_time for s in slots]))
    for dealer in roster:
        cells = [grid.activity_at(s.time, dealer.id) for s in slots]
        print("\t".join([dealer.display_name] + cells))
    return EXIT_OK


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="pitboss - Dealer Schedule Statistics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s slots --shift night
  %(prog)s grid -s schedules.json --date 2024-03-01 --dealers dealers.json
  %(prog)s grid -s schedules.json --date 2024-03-01 --format sheet
  %(prog)s dealer-stats -s schedules.json --dealer d1 --month 3 --year 2024
  %(prog)s fines --incidents reports.json --dealer d1
  %(prog)s live -s schedules.json --date 2024-03-01 --shift day --time 13:10
        """,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    slots_parser = subparsers.add_parser("slots", help="List the slots of a shift")
    slots_parser.add_argument(
        "--shift",
        type=str,
        default="day",
        choices=[s.value for s in ShiftType],
        help="Shift type (default: day)",
    )

    grid_parser = subparsers.add_parser("grid", help="Show one day's schedule")
    grid_parser.add_argument("--schedules", "-s", required=True, help="Schedules JSON file")
    grid_parser.add_argument("--date", required=True, help="Schedule date (YYYY-MM-DD)")
    grid_parser.add_argument(
        "--shift",
        type=str,
        choices=[s.value for s in ShiftType],
        help="Shift type (default: first schedule on the date)",
    )
    grid_parser.add_argument("--dealers", "-d", help="Dealers JSON file")
    grid_parser.add_argument(
        "--format", "-f",
        type=str,
        default="stats",
        choices=["stats", "sheet"],
        help="Output format (default: stats)",
    )
    grid_parser.add_argument(
        "--apply-absences",
        action="store_true",
        help="Mark absent dealers as on break from their start slot",
    )
    grid_parser.add_argument("--pdf", type=str, help="Output PDF file path")

    stats_parser = subparsers.add_parser("dealer-stats", help="Monthly dealer statement")
    stats_parser.add_argument("--schedules", "-s", required=True, help="Schedules JSON file")
    stats_parser.add_argument("--dealer", required=True, help="Dealer ID")
    stats_parser.add_argument("--month", "-m", type=int, required=True, help="Month (1-12)")
    stats_parser.add_argument("--year", "-y", type=int, required=True, help="Year")
    stats_parser.add_argument("--dealers", "-d", help="Dealers JSON file")
    stats_parser.add_argument("--incidents", "-i", help="Dealer reports JSON file")
    stats_parser.add_argument("--pdf", type=str, help="Output PDF file path")

    fines_parser = subparsers.add_parser("fines", help="Dealer fine totals")
    fines_parser.add_argument("--incidents", "-i", required=True, help="Dealer reports JSON file")
    fines_parser.add_argument("--dealer", required=True, help="Dealer ID")

    live_parser = subparsers.add_parser("live", help="Upcoming slots for the live view")
    live_parser.add_argument("--schedules", "-s", required=True, help="Schedules JSON file")
    live_parser.add_argument("--date", required=True, help="Schedule date (YYYY-MM-DD)")
    live_parser.add_argument(
        "--shift",
        type=str,
        required=True,
        choices=[s.value for s in ShiftType],
        help="Shift type",
    )
    live_parser.add_argument("--time", "-t", required=True, help="Clock time (HH:MM)")
    live_parser.add_argument("--dealers", "-d", help="Dealers JSON file")
    live_parser.add_argument(
        "--advance", "-a",
        type=int,
        default=15,
        help="Minutes to look ahead (default: 15)",
    )
    live_parser.add_argument(
        "--slots", "-n",
        type=int,
        default=3,
        help="Slots to show, 1-10 (default: 3)",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "slots":
            return run_slots(args.shift)
        elif args.command == "grid":
            return run_grid(args)
        elif args.command == "dealer-stats":
            return run_dealer_stats(args)
        elif args.command == "fines":
            return run_fines(args)
        elif args.command == "live":
            return run_live(args)
        else:
            parser.print_help()
            return EXIT_USAGE
    except (KeyError, OSError, ValueError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
