"""
Conflict detection between candidate slots and occupied intervals.

Pure domain logic: no I/O, inputs are never mutated.
"""

import logging
from typing import List, Mapping, Optional, Sequence

from pendulum import DateTime

from .exceptions import UnknownServiceError
from .models import Booking, Service, TimeRange, TimeWindow

logger = logging.getLogger(__name__)


class ConflictChecker:
    """
    Filters candidate slots against existing bookings and a blocked window.

    Algorithm:
    1. Drop cancelled bookings, they do not occupy time
    2. Turn each remaining booking into ``[time, time + total duration)``,
       skipping bookings whose services are missing from the catalog
    3. Add the blocked window, if any, as one more occupied interval
    4. Keep each slot whose ``[start, start + requested duration)`` overlaps
       none of them
    """

    def occupied_ranges(
        self,
        bookings: Sequence[Booking],
        services: Mapping[str, Service]
    ) -> List[TimeRange]:
        """
        Occupied intervals of all pending and confirmed bookings.

        A booking that references a service missing from the catalog cannot
        be sized; it is logged and skipped.
        """
        ranges: List[TimeRange] = []

        for booking in bookings:
            if not booking.occupies_time:
                continue
            try:
                ranges.append(booking.time_range(services))
            except UnknownServiceError as exc:
                logger.warning("Skipping booking at %s %s: %s", booking.date, booking.time, exc)

        return ranges

    def filter_available(
        self,
        slots: Sequence[DateTime],
        existing_bookings: Sequence[Booking],
        requested_duration_minutes: int,
        services: Mapping[str, Service],
        blocked_window: Optional[TimeWindow] = None
    ) -> List[DateTime]:
        """
        Remove slots that would collide with an occupied interval.

        Args:
            slots: Candidate slot starts, all on the same day
            existing_bookings: Bookings of that day, any status
            requested_duration_minutes: Total duration of the services being booked
            services: Service catalog used to size existing bookings
            blocked_window: Optional partial-day block from an override

        Returns:
            The surviving slots in their input order
        """
        busy = self.occupied_ranges(existing_bookings, services)

        if blocked_window is not None and slots:
            busy.append(blocked_window.on(slots[0]))

        available: List[DateTime] = []

        for slot in slots:
            candidate = TimeRange(
                start=slot,
                end=slot.add(minutes=requested_duration_minutes)
            )
            if not any(candidate.overlaps(occupied) for occupied in busy):
                available.append(slot)

        return available
