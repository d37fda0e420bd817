"""Validated view over one day's assignment grid.

Raw schedule data is an untyped ``slot -> dealer -> activity`` mapping.
``AssignmentGrid.wrap`` validates it once; afterwards the grid is the only
way the rest of the package reads assignments.
"""

import copy
import logging
from collections.abc import Mapping
from datetime import date
from typing import Any, Iterable, Iterator, Optional

from pitboss.domain.calendar import TimeSlotCalendar
from pitboss.domain.classifier import IDLE_SENTINEL
from pitboss.domain.models import Absence, Dealer, ScheduleRecord, ShiftType
from pitboss.validation.validator import GridValidator, is_metadata_key

logger = logging.getLogger(__name__)

REST_TOKEN = "BREAK"


class AssignmentGrid:
    """A day's slot-by-dealer assignment table.

    Instances are built with ``wrap`` (or ``from_record``) and are never
    modified afterwards; operations that change assignments return a new
    grid.

    Example:
        >>> grid = AssignmentGrid.wrap(raw, ShiftType.DAY, date(2024, 3, 1))
        >>> grid.activity_at("08:00", "d1")
        'BJ1'
    """

    def __init__(
        self,
        slots: dict[str, dict[str, str]],
        shift_type: ShiftType,
        schedule_date: Optional[date] = None,
        metadata: Optional[dict[str, Any]] = None,
        calendar: Optional[TimeSlotCalendar] = None,
    ):
        self._slots = slots
        self.shift_type = shift_type
        self.schedule_date = schedule_date
        self._metadata = metadata or {}
        self.calendar = calendar or TimeSlotCalendar()

    @classmethod
    def wrap(
        cls,
        raw: Any,
        shift_type: ShiftType,
        schedule_date: Optional[date] = None,
        calendar: Optional[TimeSlotCalendar] = None,
    ) -> "AssignmentGrid":
        """Validate raw schedule data and wrap it.

        Args:
            raw: The ``schedule_data`` payload.
            shift_type: Shift the schedule belongs to.
            schedule_date: Date of the schedule, needed for aggregation.
            calendar: Slot calendar (default 30-minute slots).

        Returns:
            The validated grid.

        Raises:
            ValidationError: If the payload is missing or malformed.
        """
        shift_type = ShiftType(shift_type)
        calendar = calendar or TimeSlotCalendar()
        GridValidator(calendar).check(raw, shift_type)

        order = {t: i for i, t in enumerate(calendar.slot_times(shift_type))}
        slots: dict[str, dict[str, str]] = {}
        metadata: dict[str, Any] = {}
        for key in sorted(
            (k for k in raw if not is_metadata_key(k)), key=order.__getitem__
        ):
            slots[key] = {
                str(dealer_id): code
                for dealer_id, code in raw[key].items()
                if code is not None
            }
        for key in raw:
            if is_metadata_key(key):
                metadata[key] = copy.deepcopy(raw[key])

        return cls(slots, shift_type, schedule_date, metadata, calendar)

    @classmethod
    def from_record(
        cls,
        record: ScheduleRecord,
        calendar: Optional[TimeSlotCalendar] = None,
    ) -> "AssignmentGrid":
        """Wrap the data of a stored schedule record.

        Raises:
            ValidationError: If the record's data is missing or malformed.
        """
        return cls.wrap(
            record.schedule_data,
            record.shift_type,
            schedule_date=record.schedule_date,
            calendar=calendar,
        )

    @property
    def metadata(self) -> Mapping[str, Any]:
        """Underscore-prefixed entries (``_preferences``, ``_absences``)."""
        return copy.deepcopy(self._metadata)

    def slots(self) -> list[str]:
        """Slot keys present in the grid, in shift order."""
        return list(self._slots)

    def activity_at(self, slot: str, dealer_id: str) -> str:
        """Activity code at a slot, or ``"-"`` when there is no entry."""
        return self._slots.get(slot, {}).get(dealer_id) or IDLE_SENTINEL

    def dealers_present(self) -> frozenset[str]:
        """Dealer ids that appear in at least one slot."""
        return frozenset(d for assignments in self._slots.values() for d in assignments)

    @property
    def is_empty(self) -> bool:
        """True when no dealer appears anywhere in the grid."""
        return not self.dealers_present()

    def filter_roster(self, dealers: Iterable[Dealer]) -> list[Dealer]:
        """Roster dealers that appear in this grid, in roster order."""
        present = self.dealers_present()
        return [dealer for dealer in dealers if dealer.id in present]

    def entries_for(self, dealer_id: str) -> Iterator[tuple[str, str]]:
        """(slot, code) for every slot the dealer has an entry in."""
        for slot, assignments in self._slots.items():
            if dealer_id in assignments:
                yield slot, assignments[dealer_id]

    def with_absences(
        self,
        absences: Iterable[Absence],
        rest_token: str = REST_TOKEN,
    ) -> "AssignmentGrid":
        """New grid with absent dealers resting from their start slot on.

        Absences whose start time is not a slot of the shift are skipped.
        """
        slot_times = self.calendar.slot_times(self.shift_type)
        slots = {slot: dict(assignments) for slot, assignments in self._slots.items()}

        for absence in absences:
            start = self.calendar.index_of(self.shift_type, absence.start_time)
            if start is None:
                logger.debug(
                    "Skipping absence of %s: %s is not a %s slot",
                    absence.dealer_id,
                    absence.start_time,
                    self.shift_type.value,
                )
                continue
            for slot in slot_times[start:]:
                slots.setdefault(slot, {})[absence.dealer_id] = rest_token

        ordered = {t: slots[t] for t in slot_times if t in slots}
        return AssignmentGrid(
            ordered,
            self.shift_type,
            self.schedule_date,
            copy.deepcopy(self._metadata),
            self.calendar,
        )

    def to_dict(self) -> dict[str, dict[str, str]]:
        """Plain copy of the slot data, metadata included."""
        data: dict[str, Any] = {slot: dict(a) for slot, a in self._slots.items()}
        data.update(copy.deepcopy(self._metadata))
        return data

    def __repr__(self) -> str:
        when = self.schedule_date.isoformat() if self.schedule_date else "undated"
        return (
            f"AssignmentGrid({when}, {self.shift_type.value}, "
            f"{len(self._slots)} slots, {len(self.dealers_present())} dealers)"
        )
