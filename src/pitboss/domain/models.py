"""Domain models for the dealer schedule engine.

This module contains the value types shared by every component: shift types,
time slots, the schedule and incident records delivered by the data store,
and the statistics objects produced by the aggregators.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

CENTS = Decimal("0.01")


def to_amount(value: Any) -> Optional[Decimal]:
    """Convert a stored fine amount to a two-decimal Decimal.

    Floats go through ``str`` so that ``12.1`` becomes ``Decimal("12.10")``
    rather than its binary expansion.
    """
    if value is None:
        return None
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(CENTS)


class ShiftType(Enum):
    """Shift covered by a schedule.

    The day shift runs 08:00-20:00, the night shift 20:00-08:00 and wraps
    midnight.
    """

    DAY = "day"
    NIGHT = "night"


@dataclass(frozen=True)
class TimeSlot:
    """A slot on the shift axis.

    Attributes:
        time: Canonical "HH:MM" label, used as the key in schedule data.
        formatted_time: Label shown to users.
    """

    time: str
    formatted_time: str

    @property
    def minutes(self) -> int:
        """Minutes from midnight when this slot starts."""
        hours, mins = self.time.split(":")
        return int(hours) * 60 + int(mins)

    def __repr__(self) -> str:
        return f"TimeSlot({self.time})"


@dataclass(frozen=True)
class Dealer:
    """Roster entry for a dealer."""

    id: str
    name: str
    nickname: str = ""

    @property
    def display_name(self) -> str:
        return self.nickname or self.name

    @classmethod
    def from_dict(cls, data: dict) -> "Dealer":
        return cls(
            id=str(data["id"]),
            name=data.get("name") or "",
            nickname=data.get("nickname") or "",
        )


@dataclass(frozen=True)
class Absence:
    """A dealer leaving the floor part-way through a shift.

    Attributes:
        dealer_id: The absent dealer.
        start_time: Slot label ("HH:MM") from which the dealer is away.
        reason: Reason code (sick, injured, unauthorized, voluntary, break).
    """

    dealer_id: str
    start_time: str
    reason: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Absence":
        return cls(
            dealer_id=str(data["dealerId"]),
            start_time=data["startTime"],
            reason=data.get("reason", ""),
        )


@dataclass
class ScheduleRecord:
    """One stored schedule: a single date and shift.

    ``schedule_data`` is kept exactly as delivered; it is only trusted once
    it has been wrapped in an ``AssignmentGrid``.

    Attributes:
        schedule_date: Date the schedule applies to.
        shift_type: Day or night shift.
        schedule_data: Raw slot -> dealer -> activity mapping, or None.
        absent_dealers: Dealers who left during the shift.
        id: Store identifier, if any.
    """

    schedule_date: date
    shift_type: ShiftType
    schedule_data: Any = None
    absent_dealers: list[Absence] = field(default_factory=list)
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "ScheduleRecord":
        """Build a record from a data-store row.

        Raises:
            ValueError: If the date or shift type is not recognised.
        """
        raw_date = data["date"]
        schedule_date = (
            raw_date if isinstance(raw_date, date) else date.fromisoformat(raw_date[:10])
        )
        return cls(
            schedule_date=schedule_date,
            shift_type=ShiftType(data["shift_type"]),
            schedule_data=data.get("schedule_data"),
            absent_dealers=[
                Absence.from_dict(a) for a in (data.get("absent_dealers") or [])
            ],
            id=data.get("id"),
        )


@dataclass(frozen=True)
class DealerMonthStats:
    """Monthly work pattern and pay for one dealer.

    Attributes:
        tables_worked: Slots spent at a table.
        days_off: Days of the month without a worked slot.
        total_shifts: Day plus night shifts.
        day_shifts: Worked day shifts.
        night_shifts: Worked night shifts.
        salary: Pay for the month under the pay policy.
        days_with_breaks: Dates on which the dealer had a rest slot.
    """

    tables_worked: int = 0
    days_off: int = 0
    total_shifts: int = 0
    day_shifts: int = 0
    night_shifts: int = 0
    salary: int = 0
    days_with_breaks: int = 0


@dataclass(frozen=True)
class FineRecord:
    """A fine attached to a dealer report."""

    dealer_id: str
    fine_amount: Optional[Decimal]
    fine_applied: bool = False
    fine_status: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "FineRecord":
        dealer_id = data.get("dealer_id")
        return cls(
            dealer_id=str(dealer_id) if dealer_id is not None else "",
            fine_amount=to_amount(data.get("fine_amount")),
            fine_applied=bool(data.get("fine_applied")),
            fine_status=data.get("fine_status"),
        )


@dataclass(frozen=True)
class FineStats:
    """Fine totals for a dealer, split into applied and pending."""

    total_fines: int = 0
    total_fine_amount: Decimal = Decimal("0.00")
    applied_fines: int = 0
    applied_fine_amount: Decimal = Decimal("0.00")
    pending_fines: int = 0
    pending_fine_amount: Decimal = Decimal("0.00")


@dataclass(frozen=True)
class FineLedger:
    """Fine statistics plus whether fine tracking exists at all.

    ``fines_enabled`` separates "this dealer has no fines" from "the store
    has no fine columns"; the two are rendered differently.
    """

    stats: FineStats = field(default_factory=FineStats)
    fines_enabled: bool = True

    @classmethod
    def unavailable(cls) -> "FineLedger":
        return cls(stats=FineStats(), fines_enabled=False)


@dataclass(frozen=True)
class IncidentRecord:
    """A dealer report (incident), optionally carrying a fine.

    Attributes:
        id: Report identifier.
        dealer_id: Reported dealer.
        reported_at: When the report was filed.
        incident_type: Incident type code (see ``catalog.INCIDENT_TYPES``).
        status: Report status code (active, resolved, dismissed).
        table_name: Table the incident happened at, if known.
        fine_amount: Fine in currency units, if any.
        fine_applied: Whether the fine has been applied.
        fine_status: Fine workflow status (pending, approved, rejected, paid).
    """

    id: str
    dealer_id: Optional[str]
    reported_at: datetime
    incident_type: str = "other"
    status: Optional[str] = None
    table_name: Optional[str] = None
    fine_amount: Optional[Decimal] = None
    fine_applied: bool = False
    fine_status: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "IncidentRecord":
        reported_at = data["reported_at"]
        if not isinstance(reported_at, datetime):
            reported_at = datetime.fromisoformat(reported_at.replace("Z", "+00:00"))
        dealer_id = data.get("dealer_id")
        return cls(
            id=str(data.get("id", "")),
            dealer_id=str(dealer_id) if dealer_id is not None else None,
            reported_at=reported_at,
            incident_type=data.get("incident_type") or "other",
            status=data.get("status"),
            table_name=data.get("table_name") or (data.get("tables") or {}).get("name"),
            fine_amount=to_amount(data.get("fine_amount")),
            fine_applied=bool(data.get("fine_applied")),
            fine_status=data.get("fine_status"),
        )

    def to_fine_record(self) -> FineRecord:
        return FineRecord(
            dealer_id=self.dealer_id or "",
            fine_amount=self.fine_amount,
            fine_applied=self.fine_applied,
            fine_status=self.fine_status,
        )


@dataclass(frozen=True)
class DisplaySettings:
    """System settings for the live schedule view.

    Attributes:
        advance_minutes: How far ahead of the clock the view looks.
        slots_to_show: Number of upcoming slots to surface (1-10).
    """

    advance_minutes: int = 15
    slots_to_show: int = 3

    def __post_init__(self):
        if self.advance_minutes < 0:
            raise ValueError(f"advance_minutes must be >= 0, got {self.advance_minutes}")
        if not 1 <= self.slots_to_show <= 10:
            raise ValueError(f"slots_to_show must be within 1..10, got {self.slots_to_show}")

    @classmethod
    def from_dict(cls, data: dict) -> "DisplaySettings":
        return cls(
            advance_minutes=int(data.get("advance_minutes", 15)),
            slots_to_show=int(data.get("slots_to_show", 3)),
        )
