"""Incident report statistics over a date range.

All functions take the date range as inclusive calendar days and only count
reports filed within it.
"""

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from pitboss.domain import catalog
from pitboss.domain.calendar import TimeSlotCalendar
from pitboss.domain.classifier import ActivityClassifier
from pitboss.domain.grid import AssignmentGrid
from pitboss.domain.models import Dealer, IncidentRecord, ScheduleRecord
from pitboss.validation.validator import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DealerReportCount:
    dealer_id: str
    dealer_name: str
    dealer_nickname: str
    report_count: int


@dataclass(frozen=True)
class TableReportCount:
    table_name: str
    report_count: int


@dataclass(frozen=True)
class DealerShiftReports:
    """Shifts worked and reports received by a dealer."""

    dealer_id: str
    dealer_name: str
    dealer_nickname: str
    shift_count: int
    report_count: int

    @property
    def reports_per_shift(self) -> float:
        return self.report_count / self.shift_count if self.shift_count else 0.0


@dataclass(frozen=True)
class DealerIncidentTypeCount:
    dealer_id: str
    dealer_name: str
    dealer_nickname: str
    incident_type: str
    incident_type_label: str
    count: int


@dataclass(frozen=True)
class DistributionItem:
    """One slice of a distribution (pie chart)."""

    name: str
    value: int


class IncidentStatistics:
    """Statistics over dealer reports and the schedules they relate to.

    Example:
        >>> stats = IncidentStatistics()
        >>> stats.top_dealers_by_reports(dealers, incidents, start, end)[0].report_count
        7
    """

    def __init__(
        self,
        classifier: Optional[ActivityClassifier] = None,
        calendar: Optional[TimeSlotCalendar] = None,
    ):
        self.classifier = classifier or ActivityClassifier()
        self.calendar = calendar or TimeSlotCalendar()

    def top_dealers_by_reports(
        self,
        dealers: Iterable[Dealer],
        incidents: Iterable[IncidentRecord],
        start: date,
        end: date,
        order: str = "desc",
        limit: int = 5,
    ) -> list[DealerReportCount]:
        """Dealers with the most (``desc``) or fewest (``asc``) reports.

        Ties are broken by dealer name.
        """
        if order not in ("asc", "desc"):
            raise ValueError(f"order must be 'asc' or 'desc', got {order!r}")
        counts = self._reports_per_dealer(incidents, start, end)
        stats = [
            DealerReportCount(d.id, d.name, d.nickname, counts.get(d.id, 0))
            for d in dealers
        ]
        sign = 1 if order == "asc" else -1
        stats.sort(key=lambda s: (sign * s.report_count, s.dealer_name))
        return stats[:limit]

    def reports_by_table(
        self,
        incidents: Iterable[IncidentRecord],
        start: date,
        end: date,
        limit: int = 10,
    ) -> list[TableReportCount]:
        """Tables with the most reports."""
        counts = Counter(
            i.table_name for i in _in_range(incidents, start, end) if i.table_name
        )
        return [TableReportCount(name, n) for name, n in counts.most_common(limit)]

    def dealer_shifts_and_reports(
        self,
        dealers: Iterable[Dealer],
        schedules: Iterable[ScheduleRecord],
        incidents: Iterable[IncidentRecord],
        start: date,
        end: date,
    ) -> list[DealerShiftReports]:
        """Shifts worked against reports received, worst ratio first.

        A dealer is counted once per schedule in which they have at least one
        worked slot. Schedules with missing or malformed data are skipped.
        """
        shift_counts: Counter = Counter()
        for record in schedules:
            if not start <= record.schedule_date <= end:
                continue
            try:
                grid = AssignmentGrid.from_record(record, calendar=self.calendar)
            except ValidationError as e:
                logger.warning(
                    "Skipping %s schedule in shift count: %s",
                    record.schedule_date.isoformat(),
                    e,
                )
                continue
            for dealer_id in grid.dealers_present():
                if any(self.classifier.is_worked(code) for _, code in grid.entries_for(dealer_id)):
                    shift_counts[dealer_id] += 1

        report_counts = self._reports_per_dealer(incidents, start, end)
        result = [
            DealerShiftReports(
                dealer_id=d.id,
                dealer_name=d.name,
                dealer_nickname=d.nickname,
                shift_count=shift_counts.get(d.id, 0),
                report_count=report_counts.get(d.id, 0),
            )
            for d in dealers
        ]
        result.sort(key=lambda s: s.reports_per_shift, reverse=True)
        return result

    def incident_types_by_dealer(
        self,
        dealers: Iterable[Dealer],
        incidents: Iterable[IncidentRecord],
        start: date,
        end: date,
    ) -> list[DealerIncidentTypeCount]:
        """Incident type counts per known dealer, by name then count."""
        roster = {d.id: d for d in dealers}
        counts: dict[str, Counter] = defaultdict(Counter)
        for incident in _in_range(incidents, start, end):
            if incident.dealer_id in roster:
                counts[incident.dealer_id][incident.incident_type] += 1

        result = [
            DealerIncidentTypeCount(
                dealer_id=dealer_id,
                dealer_name=roster[dealer_id].name,
                dealer_nickname=roster[dealer_id].nickname,
                incident_type=incident_type,
                incident_type_label=catalog.label(catalog.INCIDENT_TYPES, incident_type),
                count=n,
            )
            for dealer_id, by_type in counts.items()
            for incident_type, n in by_type.items()
        ]
        result.sort(key=lambda s: (s.dealer_name, -s.count))
        return result

    def incident_type_distribution(
        self,
        incidents: Iterable[IncidentRecord],
        start: date,
        end: date,
    ) -> list[DistributionItem]:
        counts = Counter(i.incident_type for i in _in_range(incidents, start, end))
        return _distribution(counts, catalog.INCIDENT_TYPES)

    def report_status_distribution(
        self,
        incidents: Iterable[IncidentRecord],
        start: date,
        end: date,
    ) -> list[DistributionItem]:
        counts = Counter(i.status for i in _in_range(incidents, start, end) if i.status)
        return _distribution(counts, catalog.REPORT_STATUS)

    def fine_status_distribution(
        self,
        incidents: Iterable[IncidentRecord],
        start: date,
        end: date,
    ) -> list[DistributionItem]:
        """Fine workflow statuses among reports that carry a fine amount."""
        counts = Counter(
            i.fine_status
            for i in _in_range(incidents, start, end)
            if i.fine_amount is not None and i.fine_status
        )
        return _distribution(counts, catalog.FINE_STATUS)

    def _reports_per_dealer(
        self,
        incidents: Iterable[IncidentRecord],
        start: date,
        end: date,
    ) -> Counter:
        return Counter(i.dealer_id for i in _in_range(incidents, start, end) if i.dealer_id)


def _in_range(
    incidents: Iterable[IncidentRecord],
    start: date,
    end: date,
) -> Iterable[IncidentRecord]:
    for incident in incidents:
        if start <= incident.reported_at.date() <= end:
            yield incident


def _distribution(counts: Counter, labels: dict[str, str]) -> list[DistributionItem]:
    return [
        DistributionItem(name=catalog.label(labels, code), value=n)
        for code, n in counts.most_common()
    ]
