"""
Domain models for schedule overrides, bookings and slot calculations.
"""

from dataclasses import dataclass, field
from datetime import date, time
from decimal import Decimal
from enum import Enum
from typing import FrozenSet, Mapping, Optional

import pendulum
from pendulum import Date, DateTime

from .exceptions import ScheduleOverrideError, UnknownServiceError


def as_date(value: date) -> Date:
    """Coerce any ``datetime.date`` into a pendulum ``Date``."""
    if isinstance(value, Date):
        return value
    return pendulum.date(value.year, value.month, value.day)


def at_time(day: date, moment: time) -> DateTime:
    """Combine a calendar date and a time of day into a naive local DateTime."""
    return pendulum.naive(
        day.year, day.month, day.day,
        moment.hour, moment.minute, moment.second
    )


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable half-open time range ``[start, end)``.

    Invariant: start must not be after end. A range with start == end is
    empty and overlaps nothing.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Start time {self.start} must not be after end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def is_empty(self) -> bool:
        return self.start == self.end

    def overlaps(self, other: "TimeRange") -> bool:
        """
        Check if this range overlaps with another.

        Touching boundaries (``self.end == other.start``) do not overlap, so
        back-to-back bookings are allowed.
        """
        if self.is_empty() or other.is_empty():
            return False
        return self.start < other.end and other.start < self.end

    def __str__(self) -> str:
        return f"{self.start.format('DD.MM.YYYY HH:mm')} - {self.end.format('HH:mm')}"


@dataclass(frozen=True)
class TimeWindow:
    """A half-open time-of-day window ``[start, end)`` blocked on a single day."""
    start: time
    end: time

    def on(self, day: date) -> TimeRange:
        """
        Anchor the window to a calendar date.

        An inverted window collapses to an empty range instead of raising.
        """
        start = at_time(day, self.start)
        end = at_time(day, self.end)
        if end < start:
            end = start
        return TimeRange(start=start, end=end)

    def __str__(self) -> str:
        return f"{self.start.strftime('%H:%M')}-{self.end.strftime('%H:%M')}"


@dataclass(frozen=True)
class WorkCycleSettings:
    """Day 0 of the repeating work cycle."""
    anchor_date: Date


@dataclass(frozen=True)
class ScheduleOverride:
    """
    A manually configured exception to the work cycle.

    Either a full-day override (no time window) that decides the day's status,
    or a windowed override that keeps the day's default status and blocks
    ``[time_from, time_to)``. ``permanent`` marks seeded blackout dates, which
    are evaluated before any other override.
    """
    date_from: Date
    date_to: Date
    is_working: bool
    time_from: Optional[time] = None
    time_to: Optional[time] = None
    reason: Optional[str] = None
    permanent: bool = False

    @property
    def has_time_window(self) -> bool:
        return self.time_from is not None and self.time_to is not None

    @property
    def blocked_window(self) -> Optional[TimeWindow]:
        if not self.has_time_window:
            return None
        return TimeWindow(start=self.time_from, end=self.time_to)

    def covers(self, day: date) -> bool:
        """Check whether ``day`` lies within ``[date_from, date_to]``."""
        return self.date_from <= day <= self.date_to

    def validate(self) -> "ScheduleOverride":
        """
        Validate the override bounds at authoring time.

        Raises:
            ScheduleOverrideError: If the date range or time window is inverted
        """
        if self.date_from > self.date_to:
            raise ScheduleOverrideError(
                f"date_from {self.date_from} must not be after date_to {self.date_to}"
            )
        if (self.time_from is None) != (self.time_to is None):
            raise ScheduleOverrideError("time_from and time_to must be given together")
        if self.has_time_window and self.time_from >= self.time_to:
            raise ScheduleOverrideError(
                f"time_to {self.time_to} must be later than time_from {self.time_from}"
            )
        return self

    @classmethod
    def vacation(cls, date_from: date, date_to: date, reason: Optional[str] = None) -> "ScheduleOverride":
        """Close every day in an inclusive date range."""
        return cls(
            date_from=as_date(date_from),
            date_to=as_date(date_to),
            is_working=False,
            reason=reason or "Отпуск",
        ).validate()

    @classmethod
    def day_off(cls, day: date, reason: Optional[str] = None) -> "ScheduleOverride":
        """Close a single day."""
        day = as_date(day)
        return cls(date_from=day, date_to=day, is_working=False, reason=reason or "Выходной день")

    @classmethod
    def extra_working_day(cls, day: date, reason: Optional[str] = None) -> "ScheduleOverride":
        """Open a single day the cycle would otherwise keep closed."""
        day = as_date(day)
        return cls(date_from=day, date_to=day, is_working=True, reason=reason or "Рабочий день")

    @classmethod
    def time_block(
        cls,
        day: date,
        time_from: time,
        time_to: time,
        reason: Optional[str] = None
    ) -> "ScheduleOverride":
        """Block a time window on an otherwise open day."""
        day = as_date(day)
        return cls(
            date_from=day,
            date_to=day,
            is_working=False,
            time_from=time_from,
            time_to=time_to,
            reason=reason or "Временной интервал заблокирован",
        ).validate()

    @classmethod
    def blackout(cls, day: date, reason: Optional[str] = None) -> "ScheduleOverride":
        """A permanent non-working date that outranks every other override."""
        day = as_date(day)
        return cls(
            date_from=day,
            date_to=day,
            is_working=False,
            reason=reason or "Blackout date",
            permanent=True,
        )


@dataclass(frozen=True)
class DayOverride:
    """
    The effect of the override that won for a given date.

    ``is_working`` is None for windowed overrides: the day keeps its cycle
    default and only ``blocked_window`` is excluded.
    """
    source: ScheduleOverride
    is_working: Optional[bool]
    blocked_window: Optional[TimeWindow] = None

    @property
    def is_full_day(self) -> bool:
        return self.is_working is not None


@dataclass(frozen=True)
class Service:
    """Immutable catalog entry for a bookable service."""
    id: str
    duration_minutes: int
    price: Decimal = Decimal("0")
    category: str = ""
    name: str = ""


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"

    @property
    def occupies_time(self) -> bool:
        return self is not BookingStatus.CANCELLED


def total_duration(service_ids, services: Mapping[str, Service]) -> int:
    """
    Sum the durations of the given services.

    Raises:
        UnknownServiceError: If an id is missing from the catalog
    """
    missing = sorted(sid for sid in service_ids if sid not in services)
    if missing:
        raise UnknownServiceError(f"Unknown service id(s): {', '.join(missing)}")
    return sum(services[sid].duration_minutes for sid in service_ids)


@dataclass(frozen=True)
class Booking:
    """
    An existing booking. Pending and confirmed bookings occupy
    ``[time, time + sum of service durations)``.
    """
    date: Date
    time: time
    service_ids: FrozenSet[str] = field(default_factory=frozenset)
    status: BookingStatus = BookingStatus.PENDING

    @property
    def occupies_time(self) -> bool:
        return self.status.occupies_time

    def time_range(self, services: Mapping[str, Service]) -> TimeRange:
        """Return the occupied interval for this booking."""
        start = at_time(self.date, self.time)
        return TimeRange(
            start=start,
            end=start.add(minutes=total_duration(self.service_ids, services))
        )


@dataclass
class BusinessHours:
    """
    Opening hours and slot granularity.
    """
    open_time: time = time(9, 0)
    close_time: time = time(20, 0)
    sunday_close_time: time = time(18, 0)
    slot_minutes: int = 15

    def __post_init__(self):
        if self.slot_minutes <= 0:
            raise ValueError(f"slot_minutes must be positive, got {self.slot_minutes}")

    def closing_time_for(self, day: date) -> time:
        if as_date(day).day_of_week == pendulum.SUNDAY:
            return self.sunday_close_time
        return self.close_time

    def get_hours_for_day(self, day: date) -> TimeRange:
        """Get the opening hours range for a specific day."""
        return TimeRange(
            start=at_time(day, self.open_time),
            end=at_time(day, self.closing_time_for(day))
        )
