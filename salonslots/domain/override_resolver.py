"""
Resolution of schedule overrides for a single date.
"""

from datetime import date
from typing import Iterable, List, Optional, Sequence

from .models import DayOverride, ScheduleOverride, as_date


class OverrideResolver:
    """
    Picks the override that applies to a date.

    Precedence:
    1. Permanent overrides (seeded blackout dates)
    2. Ascending ``date_from``
    3. Insertion order for equal ``date_from``

    The first override covering the date wins in full; any other override
    covering the same date is ignored for that date.
    """

    def __init__(self, blackout_dates: Iterable[date] = ()):
        self.seeded: List[ScheduleOverride] = [
            ScheduleOverride.blackout(day) for day in blackout_dates
        ]

    def ordered(self, overrides: Sequence[ScheduleOverride]) -> List[ScheduleOverride]:
        """
        Merge the seeded blackout dates into ``overrides`` in evaluation order.

        ``sorted`` is stable, which keeps insertion order for ties.
        """
        return sorted(
            [*self.seeded, *overrides],
            key=lambda o: (not o.permanent, o.date_from)
        )

    def find_match(
        self,
        day: date,
        overrides: Sequence[ScheduleOverride]
    ) -> Optional[ScheduleOverride]:
        """Return the winning override for ``day`` or None."""
        day = as_date(day)
        for override in self.ordered(overrides):
            if override.covers(day):
                return override
        return None

    def resolve(
        self,
        day: date,
        overrides: Sequence[ScheduleOverride]
    ) -> Optional[DayOverride]:
        """
        Resolve the override effect for ``day``.

        Returns None when no override matches, meaning the cycle default
        applies. A windowed override leaves ``is_working`` unset and carries
        the blocked window instead.
        """
        match = self.find_match(day, overrides)
        if match is None:
            return None

        if match.has_time_window:
            return DayOverride(
                source=match,
                is_working=None,
                blocked_window=match.blocked_window
            )

        return DayOverride(source=match, is_working=match.is_working)
