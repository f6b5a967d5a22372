"""
Domain layer - Pure availability logic without external dependencies.
"""

from .availability_engine import AvailabilityEngine
from .conflict_checker import ConflictChecker
from .cycle_calendar import CycleCalendar
from .models import (
    Booking,
    BookingStatus,
    BusinessHours,
    DayOverride,
    ScheduleOverride,
    Service,
    TimeRange,
    TimeWindow,
    WorkCycleSettings,
)
from .override_resolver import OverrideResolver
from .slot_generator import SlotGenerator

__all__ = [
    "AvailabilityEngine",
    "Booking",
    "BookingStatus",
    "BusinessHours",
    "ConflictChecker",
    "CycleCalendar",
    "DayOverride",
    "OverrideResolver",
    "ScheduleOverride",
    "Service",
    "SlotGenerator",
    "TimeRange",
    "TimeWindow",
    "WorkCycleSettings",
]
