"""
Candidate slot grid within business hours.
"""

from datetime import date
from typing import List, Optional

from pendulum import DateTime

from .models import BusinessHours


class SlotGenerator:
    """
    Enumerates every slot start on a fixed grid in ``[open, close)``.
    """

    def __init__(self, business_hours: Optional[BusinessHours] = None):
        self.business_hours = business_hours or BusinessHours()

    def generate(self, day: date) -> List[DateTime]:
        """
        Generate candidate slot starts for ``day`` in ascending order.

        Example (Monday, 15-minute step):
        09:00, 09:15, ..., 19:30, 19:45
        """
        hours = self.business_hours.get_hours_for_day(day)
        step = self.business_hours.slot_minutes

        slots: List[DateTime] = []
        current = hours.start

        while current < hours.end:
            slots.append(current)
            current = current.add(minutes=step)

        return slots
