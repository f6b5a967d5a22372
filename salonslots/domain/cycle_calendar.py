"""
Default day classification from the repeating work cycle.
"""

from datetime import date


class CycleCalendar:
    """
    Classifies dates as working or non-working by a fixed rotation.

    The default is a "2 days on, 2 days off" cycle: day 0 of the cycle is the
    anchor date, days ``0 .. working_days - 1`` are working days and the rest
    of the cycle is off.
    """

    def __init__(self, cycle_length: int = 4, working_days: int = 2):
        if cycle_length <= 0:
            raise ValueError(f"cycle_length must be positive, got {cycle_length}")
        if not 0 <= working_days <= cycle_length:
            raise ValueError(
                f"working_days must be between 0 and {cycle_length}, got {working_days}"
            )
        self.cycle_length = cycle_length
        self.working_days = working_days

    def cycle_day(self, day: date, anchor: date) -> int:
        """
        Position of ``day`` within the cycle, always in ``[0, cycle_length)``.

        Python's ``%`` is a floor modulo, so dates before the anchor land in
        the same phase as their counterparts after it.
        """
        days_diff = day.toordinal() - anchor.toordinal()
        return days_diff % self.cycle_length

    def is_default_working_day(self, day: date, anchor: date) -> bool:
        return self.cycle_day(day, anchor) < self.working_days
