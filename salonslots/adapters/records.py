"""
Parsing of raw data store records into domain models.

Record shapes follow the tables of the booking front end:
``admin_settings``, ``schedule_overrides``, ``services`` and ``bookings``.
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, TypeVar

import pendulum
from pendulum import Date

from ..domain.models import (
    Booking,
    BookingStatus,
    ScheduleOverride,
    Service,
    WorkCycleSettings,
    as_date,
)

logger = logging.getLogger(__name__)

WORK_CYCLE_SETTING_KEY = "work_cycle_start"

Record = Mapping[str, Any]
T = TypeVar("T")


def parse_date(value: Any) -> Date:
    """
    Parse a ``YYYY-MM-DD`` string (or a full ISO datetime) into a Date.

    Raises:
        ValueError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        return as_date(value.date())
    if isinstance(value, date):
        return as_date(value)
    if not isinstance(value, str):
        raise ValueError(f"Expected a date string, got {value!r}")

    parsed = pendulum.parse(value.strip(), exact=True)

    if isinstance(parsed, datetime):
        return as_date(parsed.date())
    if isinstance(parsed, date):
        return as_date(parsed)

    raise ValueError(f"Could not parse date: {value}")


def parse_time(value: Any) -> time:
    """
    Parse an ``HH:MM`` or ``HH:MM:SS`` string into a time of day.

    Raises:
        ValueError: If the value cannot be parsed
    """
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Expected a time string, got {value!r}")

    text = value.strip()
    if text.count(":") == 1:
        text = f"{text}:00"

    parsed = pendulum.parse(text, exact=True)

    if isinstance(parsed, time):
        return parsed

    raise ValueError(f"Could not parse time: {value}")


def _optional_time(value: Any) -> Optional[time]:
    if value in (None, ""):
        return None
    return parse_time(value)


def parse_bool(value: Any) -> bool:
    """
    Parse a boolean column. Hand-written snapshots may carry ``"true"`` or
    ``"false"`` strings.

    Raises:
        ValueError: If the value is not a recognised boolean
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("true", "t", "yes", "1"):
            return True
        if text in ("false", "f", "no", "0"):
            return False
    if isinstance(value, int) and value in (0, 1):
        return bool(value)

    raise ValueError(f"Expected a boolean, got {value!r}")


def parse_work_cycle_setting(value: Any, default_anchor: date) -> WorkCycleSettings:
    """
    Parse the ``work_cycle_start`` setting value.

    The admin screen stores the value JSON-encoded (``"\\"2025-10-25\\""``);
    plain date strings are accepted as well. A missing or unparsable value
    falls back to ``default_anchor``.
    """
    if value is None:
        logger.warning("No %s setting found, using default anchor %s",
                       WORK_CYCLE_SETTING_KEY, default_anchor)
        return WorkCycleSettings(anchor_date=as_date(default_anchor))

    try:
        if isinstance(value, str) and value.strip().startswith('"'):
            value = json.loads(value)
        anchor = parse_date(value)
    except ValueError as exc:
        logger.warning("Could not parse %s=%r (%s), using default anchor %s",
                       WORK_CYCLE_SETTING_KEY, value, exc, default_anchor)
        return WorkCycleSettings(anchor_date=as_date(default_anchor))

    return WorkCycleSettings(anchor_date=anchor)


def find_setting(records: Iterable[Record], key: str = WORK_CYCLE_SETTING_KEY) -> Any:
    """Return the value of ``key`` from ``admin_settings`` rows, or None."""
    for record in records:
        if record.get("key") == key:
            return record.get("value")
    return None


def parse_override(record: Record) -> ScheduleOverride:
    """Parse a ``schedule_overrides`` row."""
    return ScheduleOverride(
        date_from=parse_date(record["date_from"]),
        date_to=parse_date(record["date_to"]),
        is_working=parse_bool(record.get("is_working") or False),
        time_from=_optional_time(record.get("time_from")),
        time_to=_optional_time(record.get("time_to")),
        reason=record.get("reason"),
    )


def parse_service(record: Record) -> Service:
    """Parse a ``services`` row."""
    duration = record.get("duration", record.get("duration_minutes"))
    if duration is None:
        raise KeyError("duration")

    duration_minutes = int(duration)
    if duration_minutes < 0:
        raise ValueError(f"Service duration must not be negative, got {duration_minutes}")

    return Service(
        id=str(record["id"]),
        duration_minutes=duration_minutes,
        price=Decimal(str(record.get("price", 0))),
        category=record.get("category") or "",
        name=record.get("name") or "",
    )


def parse_booking(record: Record) -> Booking:
    """
    Parse a ``bookings`` row.

    Rows created by the single-service booking form carry ``service_id``
    instead of ``service_ids``; both are accepted.
    """
    service_ids = record.get("service_ids")
    if service_ids is None:
        single = record.get("service_id")
        service_ids = [] if single is None else [single]

    return Booking(
        date=parse_date(record["booking_date"]),
        time=parse_time(record["booking_time"]),
        service_ids=frozenset(str(sid) for sid in service_ids),
        status=BookingStatus(str(record.get("status") or "pending").lower()),
    )


def parse_many(records: Iterable[Record], parser: Callable[[Record], T], kind: str) -> List[T]:
    """
    Parse each record, skipping (and logging) the malformed ones.
    """
    parsed: List[T] = []

    for record in records:
        try:
            parsed.append(parser(record))
        except (KeyError, TypeError, ValueError, ArithmeticError) as exc:
            logger.warning("Skipping malformed %s record %r: %s", kind, record, exc)
            continue

    return parsed


def services_by_id(services: Iterable[Service]) -> Dict[str, Service]:
    """Index the catalog by service id."""
    return {service.id: service for service in services}
