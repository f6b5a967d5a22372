"""
Snapshot source backed by a local JSON or YAML file.

Useful for working without data store credentials. The file mirrors the
data store tables:

    admin_settings:
      - key: work_cycle_start
        value: '"2025-10-25"'
    schedule_overrides:
      - {date_from: "2025-11-01", date_to: "2025-11-05", is_working: false}
    services:
      - {id: manicure, duration: 60, price: 350, category: nails}
    bookings:
      - {booking_date: "2025-11-10", booking_time: "10:00",
         service_ids: [manicure], status: confirmed}
"""

import json
from datetime import date
from pathlib import Path
from typing import Any, Dict, List

import yaml

from ..domain.exceptions import SnapshotError
from ..domain.models import Booking, ScheduleOverride, Service, WorkCycleSettings, as_date
from .records import (
    find_setting,
    parse_booking,
    parse_many,
    parse_override,
    parse_service,
    parse_work_cycle_setting,
)

TABLES = ("admin_settings", "schedule_overrides", "services", "bookings")


class SnapshotFile:
    """
    Loads settings, overrides, services and bookings from a snapshot file.
    """

    def __init__(self, path: Path):
        self.path = path
        self.tables = self._load()

    def _load(self) -> Dict[str, List[Dict[str, Any]]]:
        """Read the snapshot file; sections that are absent become empty lists."""
        if not self.path.exists():
            raise SnapshotError(f"Snapshot file not found: {self.path}")

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                if self.path.suffix.lower() == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise SnapshotError(f"Invalid snapshot file {self.path}: {exc}") from exc

        data = data or {}
        if not isinstance(data, dict):
            raise SnapshotError("Snapshot file must contain a mapping at the root level.")

        tables: Dict[str, List[Dict[str, Any]]] = {}
        for table in TABLES:
            rows = data.get(table) or []
            if not isinstance(rows, list):
                raise SnapshotError(f"Section '{table}' must be a list of records.")
            tables[table] = rows

        return tables

    def get_settings(self, default_anchor: date) -> WorkCycleSettings:
        value = find_setting(self.tables["admin_settings"])
        return parse_work_cycle_setting(value, default_anchor)

    def get_overrides(self) -> List[ScheduleOverride]:
        return parse_many(self.tables["schedule_overrides"], parse_override, "schedule override")

    def get_services(self) -> List[Service]:
        return parse_many(self.tables["services"], parse_service, "service")

    def get_bookings(self, day: date) -> List[Booking]:
        """Bookings on ``day``, all statuses included."""
        day = as_date(day)
        bookings = parse_many(self.tables["bookings"], parse_booking, "booking")
        return [booking for booking in bookings if booking.date == day]
