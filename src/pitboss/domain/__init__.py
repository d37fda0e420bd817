"""Domain models and business rules for dealer schedules."""

from pitboss.domain.calendar import (
    TimeSlotCalendar,
    days_in_month,
    month_bounds,
)
from pitboss.domain.classifier import (
    ActivityClassifier,
    ActivityFamily,
    Classification,
)
from pitboss.domain.models import (
    Absence,
    Dealer,
    DealerMonthStats,
    DisplaySettings,
    FineLedger,
    FineRecord,
    FineStats,
    IncidentRecord,
    ScheduleRecord,
    ShiftType,
    TimeSlot,
)
from pitboss.domain.policies import PayPolicy, TieredPayPolicy

__all__ = [
    # Models
    "Absence",
    "Dealer",
    "DealerMonthStats",
    "DisplaySettings",
    "FineLedger",
    "FineRecord",
    "FineStats",
    "IncidentRecord",
    "ScheduleRecord",
    "ShiftType",
    "TimeSlot",
    # Slots
    "TimeSlotCalendar",
    "days_in_month",
    "month_bounds",
    # Classification
    "ActivityClassifier",
    "ActivityFamily",
    "Classification",
    # Policies
    "PayPolicy",
    "TieredPayPolicy",
]
