"""
Availability engine - the two public availability queries.

The engine is stateless: settings, overrides, bookings and the service
catalog are passed in on every call as snapshots fetched by the caller.
"""

from datetime import date
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from .conflict_checker import ConflictChecker
from .cycle_calendar import CycleCalendar
from .models import (
    Booking,
    ScheduleOverride,
    Service,
    TimeWindow,
    WorkCycleSettings,
    as_date,
    total_duration,
)
from .override_resolver import OverrideResolver
from .slot_generator import SlotGenerator

DEFAULT_BOOKING_HORIZON_DAYS = 60


class AvailabilityEngine:
    """
    Combines the cycle calendar, override resolution, slot grid and conflict
    filtering.

    Algorithm for ``get_available_slots``:
    1. Decide whether the day is open (override first, cycle default otherwise)
    2. Sum the durations of the selected services
    3. Build the slot grid for the day
    4. Drop slots overlapping a blocked window or an occupying booking
    """

    def __init__(
        self,
        cycle_calendar: Optional[CycleCalendar] = None,
        override_resolver: Optional[OverrideResolver] = None,
        slot_generator: Optional[SlotGenerator] = None,
        conflict_checker: Optional[ConflictChecker] = None,
        booking_horizon_days: int = DEFAULT_BOOKING_HORIZON_DAYS
    ):
        self.cycle_calendar = cycle_calendar or CycleCalendar()
        self.override_resolver = override_resolver or OverrideResolver()
        self.slot_generator = slot_generator or SlotGenerator()
        self.conflict_checker = conflict_checker or ConflictChecker()
        self.booking_horizon_days = booking_horizon_days

    def _day_status(
        self,
        day: date,
        settings: WorkCycleSettings,
        overrides: Sequence[ScheduleOverride]
    ) -> Tuple[bool, Optional[TimeWindow]]:
        """Return whether ``day`` is open and the window blocked on it, if any."""
        resolved = self.override_resolver.resolve(day, overrides)

        if resolved is not None and resolved.is_full_day:
            return resolved.is_working, None

        is_open = self.cycle_calendar.is_default_working_day(day, settings.anchor_date)
        blocked_window = resolved.blocked_window if resolved is not None else None
        return is_open, blocked_window

    def is_working_day(
        self,
        day: date,
        settings: WorkCycleSettings,
        overrides: Sequence[ScheduleOverride] = ()
    ) -> bool:
        """Check whether the business is open on ``day``."""
        is_open, _ = self._day_status(as_date(day), settings, overrides)
        return is_open

    @staticmethod
    def requested_duration(
        service_ids: Iterable[str],
        services: Mapping[str, Service]
    ) -> int:
        """Total duration in minutes of the selected services (0 for none)."""
        return total_duration(list(service_ids), services)

    def get_available_slots(
        self,
        day: date,
        selected_service_ids: Iterable[str],
        settings: WorkCycleSettings,
        overrides: Sequence[ScheduleOverride],
        existing_bookings: Sequence[Booking],
        services: Mapping[str, Service]
    ) -> List[str]:
        """
        List the free slot start times for ``day`` as ``"HH:MM"`` strings.

        Callers must reject an empty service selection before calling this:
        with no services the requested duration is 0, which overlaps nothing,
        so every slot outside a blocked window is reported free.

        Args:
            day: Calendar date to query
            selected_service_ids: Services the customer wants to book
            settings: Work cycle settings snapshot
            overrides: Schedule override snapshot
            existing_bookings: Booking snapshot; other days and cancelled
                bookings are ignored
            services: Service catalog keyed by id

        Returns:
            Ordered list of free slot start times, empty on a closed day

        Raises:
            UnknownServiceError: If a selected service is not in the catalog
        """
        day = as_date(day)
        is_open, blocked_window = self._day_status(day, settings, overrides)

        if not is_open:
            return []

        duration = self.requested_duration(selected_service_ids, services)
        day_bookings = [booking for booking in existing_bookings if booking.date == day]

        slots = self.conflict_checker.filter_available(
            slots=self.slot_generator.generate(day),
            existing_bookings=day_bookings,
            requested_duration_minutes=duration,
            services=services,
            blocked_window=blocked_window
        )

        return [slot.format("HH:mm") for slot in slots]

    def is_bookable_date(
        self,
        day: date,
        today: date,
        settings: WorkCycleSettings,
        overrides: Sequence[ScheduleOverride] = ()
    ) -> bool:
        """
        Check whether a customer may pick ``day`` in the booking calendar.

        Past dates and dates beyond the booking horizon are never bookable.
        """
        day = as_date(day)
        today = as_date(today)

        if day < today or day > today.add(days=self.booking_horizon_days):
            return False

        return self.is_working_day(day, settings, overrides)

    def working_days(
        self,
        start: date,
        end: date,
        settings: WorkCycleSettings,
        overrides: Sequence[ScheduleOverride] = ()
    ) -> List[date]:
        """Return every open day in the inclusive range ``[start, end]``."""
        days: List[date] = []
        current = as_date(start)
        last = as_date(end)

        while current <= last:
            if self.is_working_day(current, settings, overrides):
                days.append(current)
            current = current.add(days=1)

        return days
