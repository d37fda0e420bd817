"""Statistics derived from schedules and dealer reports."""

from pitboss.stats.day_stats import DayStatistics, DaySummary, DealerDayStats
from pitboss.stats.dealer_stats import DealerStatsAggregator
from pitboss.stats.fines import FineLedgerAggregator, SchemaUnavailableError
from pitboss.stats.reports import IncidentStatistics

__all__ = [
    "DealerStatsAggregator",
    "FineLedgerAggregator",
    "SchemaUnavailableError",
    "DayStatistics",
    "DaySummary",
    "DealerDayStats",
    "IncidentStatistics",
]
