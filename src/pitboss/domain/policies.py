"""Pay policies for dealer salaries.

Policies are kept separate from the aggregators so the pay rule can be
tested and swapped on its own.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class PayPolicy(ABC):
    """Abstract base class for monthly salary rules."""

    @abstractmethod
    def salary(self, day_shifts: int, night_shifts: int) -> int:
        """Pay for a month given the worked shifts.

        Args:
            day_shifts: Worked day shifts in the month.
            night_shifts: Worked night shifts in the month.

        Returns:
            Salary for the month.
        """
        pass


@dataclass
class TieredPayPolicy(PayPolicy):
    """Two flat rate pairs selected by the monthly shift total.

    Up to ``threshold`` total shifts every shift is paid at the base rates.
    Above it, every shift of the month is paid at the high rates, not just
    the shifts past the threshold.

    Default rates:
    - Base: 80 per day shift, 100 per night shift
    - High (more than 18 shifts): 100 per day shift, 120 per night shift
    """

    threshold: int = 18
    base_day_rate: int = 80
    base_night_rate: int = 100
    high_day_rate: int = 100
    high_night_rate: int = 120

    def is_high_tier(self, total_shifts: int) -> bool:
        return total_shifts > self.threshold

    def salary(self, day_shifts: int, night_shifts: int) -> int:
        if self.is_high_tier(day_shifts + night_shifts):
            return day_shifts * self.high_day_rate + night_shifts * self.high_night_rate
        return day_shifts * self.base_day_rate + night_shifts * self.base_night_rate
