"""Shift time axis and month arithmetic.

The ``TimeSlotCalendar`` is the single source of the slot sequence for a
shift. Every grid key, every rendered column and every live-view lookup
goes through it.
"""

import calendar as _calendar
from datetime import date, datetime, time
from typing import Optional, Union

from pitboss.domain.models import DisplaySettings, ShiftType, TimeSlot

SHIFT_START_HOURS = {
    ShiftType.DAY: 8,
    ShiftType.NIGHT: 20,
}
SHIFT_HOURS = 12
DEFAULT_SLOT_MINUTES = 30

MINUTES_PER_DAY = 24 * 60


def days_in_month(year: int, month: int) -> int:
    """Number of days in a month, leap years included."""
    if not 1 <= month <= 12:
        raise ValueError(f"month must be within 1..12, got {month}")
    return _calendar.monthrange(year, month)[1]


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last date of a month (both inclusive)."""
    return date(year, month, 1), date(year, month, days_in_month(year, month))


class TimeSlotCalendar:
    """Generates the ordered slot sequence for a shift.

    Example:
        >>> calendar = TimeSlotCalendar()
        >>> [s.time for s in calendar.generate(ShiftType.NIGHT)][:3]
        ['20:00', '20:30', '21:00']
    """

    def __init__(self, slot_minutes: int = DEFAULT_SLOT_MINUTES):
        if slot_minutes <= 0 or (SHIFT_HOURS * 60) % slot_minutes:
            raise ValueError(
                f"slot_minutes must divide a {SHIFT_HOURS}h shift, got {slot_minutes}"
            )
        self.slot_minutes = slot_minutes

    @property
    def slots_per_shift(self) -> int:
        return SHIFT_HOURS * 60 // self.slot_minutes

    def generate(self, shift_type: ShiftType) -> list[TimeSlot]:
        """Ordered slots from shift start to the last slot before shift end."""
        start = SHIFT_START_HOURS[ShiftType(shift_type)] * 60
        slots = []
        for i in range(self.slots_per_shift):
            hours, mins = divmod((start + i * self.slot_minutes) % MINUTES_PER_DAY, 60)
            label = f"{hours:02d}:{mins:02d}"
            slots.append(TimeSlot(time=label, formatted_time=label))
        return slots

    def slot_times(self, shift_type: ShiftType) -> list[str]:
        return [slot.time for slot in self.generate(shift_type)]

    def index_of(self, shift_type: ShiftType, slot_time: str) -> Optional[int]:
        """Position of a slot label within the shift, or None."""
        try:
            return self.slot_times(shift_type).index(slot_time)
        except ValueError:
            return None

    def upcoming_slots(
        self,
        shift_type: ShiftType,
        now: Union[datetime, time],
        settings: Optional[DisplaySettings] = None,
    ) -> list[TimeSlot]:
        """Slots to surface on the live view.

        The view looks ``advance_minutes`` ahead of ``now`` and shows up to
        ``slots_to_show`` slots starting at the first slot at or after that
        time. On the night shift early-morning times are compared as if they
        belonged to the next day, and the view falls back to the start of
        the shift when nothing matches. On the day shift nothing is shown
        once the shift is over.

        Args:
            shift_type: Shift of the schedule on display.
            now: Current clock time.
            settings: Display settings (defaults apply when None).

        Returns:
            The relevant slots, possibly empty.
        """
        settings = settings or DisplaySettings()
        slots = self.generate(shift_type)
        if isinstance(now, datetime):
            now = now.time()
        display = (now.hour * 60 + now.minute + settings.advance_minutes) % MINUTES_PER_DAY

        if ShiftType(shift_type) is ShiftType.NIGHT:
            display = _wrap_morning(display)
            start_index = next(
                (i for i, s in enumerate(slots) if _wrap_morning(s.minutes) >= display),
                0,
            )
        else:
            start_index = next(
                (i for i, s in enumerate(slots) if s.minutes >= display),
                None,
            )
            if start_index is None:
                return []

        return slots[start_index : start_index + settings.slots_to_show]


def _wrap_morning(minutes: int) -> int:
    # Night shift runs past midnight: 01:00 sorts after 23:30.
    return minutes + MINUTES_PER_DAY if minutes < 12 * 60 else minutes
