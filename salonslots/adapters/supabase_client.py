"""
Read-only client for the hosted data store (Supabase PostgREST API).
"""

from datetime import date
from typing import Any, Dict, List, Optional

import requests

from ..domain.exceptions import DataStoreError
from ..domain.models import Booking, ScheduleOverride, Service, WorkCycleSettings, as_date
from .records import (
    WORK_CYCLE_SETTING_KEY,
    find_setting,
    parse_booking,
    parse_many,
    parse_override,
    parse_service,
    parse_work_cycle_setting,
)


class SupabaseClient:
    """
    Fetches availability snapshots from the booking database.

    Only reads are performed. Writes, and the uniqueness check that stops two
    customers from booking the same slot, belong to the data store.
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        timeout_seconds: int = 30,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the client.

        Args:
            url: Project URL, e.g. https://xyz.supabase.co
            api_key: Anonymous or service API key
            timeout_seconds: Per-request timeout
            session: Optional session (injected in tests)
        """
        self.rest_url = f"{url.rstrip('/')}/rest/v1"
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()
        self.headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json"
        }

    def _get(self, table: str, params: Dict[str, str]) -> List[Dict[str, Any]]:
        """
        Select rows from a table.

        Raises:
            DataStoreError: If the request fails or the payload is not a list
        """
        url = f"{self.rest_url}/{table}"

        try:
            response = self.session.get(
                url,
                headers=self.headers,
                params=params,
                timeout=self.timeout_seconds
            )
            response.raise_for_status()
            data = response.json()

        except requests.exceptions.RequestException as e:
            raise DataStoreError(f"Failed to fetch {table} from the data store: {e}") from e
        except ValueError as e:
            raise DataStoreError(f"Invalid JSON in {table} response: {e}") from e

        if not isinstance(data, list):
            raise DataStoreError(f"Unexpected {table} response: expected a list of rows")

        return data

    def get_settings(self, default_anchor: date) -> WorkCycleSettings:
        rows = self._get("admin_settings", {
            "select": "key,value",
            "key": f"eq.{WORK_CYCLE_SETTING_KEY}"
        })
        return parse_work_cycle_setting(find_setting(rows), default_anchor)

    def get_overrides(self) -> List[ScheduleOverride]:
        rows = self._get("schedule_overrides", {
            "select": "*",
            "order": "date_from.asc"
        })
        return parse_many(rows, parse_override, "schedule override")

    def get_services(self) -> List[Service]:
        rows = self._get("services", {
            "select": "*",
            "order": "category.asc,name.asc"
        })
        return parse_many(rows, parse_service, "service")

    def get_bookings(self, day: date) -> List[Booking]:
        """Occupying (pending and confirmed) bookings on ``day``."""
        rows = self._get("bookings", {
            "select": "*",
            "booking_date": f"eq.{as_date(day).isoformat()}",
            "status": "in.(pending,confirmed)"
        })
        return parse_many(rows, parse_booking, "booking")
