"""
Tests for the data store client using a fake HTTP session.
"""

from datetime import date, time

import pendulum
import pytest
import requests

from salonslots.adapters.supabase_client import SupabaseClient
from salonslots.domain.exceptions import DataStoreError


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Records requests and answers from a table -> response mapping."""

    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def get(self, url, headers=None, params=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "params": params, "timeout": timeout})
        table = url.rsplit("/", 1)[-1]
        response = self.responses[table]
        if isinstance(response, Exception):
            raise response
        return response


def _client(responses) -> SupabaseClient:
    return SupabaseClient(
        url="https://demo.supabase.co/",
        api_key="anon-key",
        timeout_seconds=5,
        session=FakeSession(responses),
    )


def test_get_settings_parses_json_encoded_anchor():
    client = _client({"admin_settings": FakeResponse([{"key": "work_cycle_start", "value": '"2025-11-01"'}])})

    settings = client.get_settings(date(2025, 10, 25))

    call = client.session.calls[0]
    assert call["url"] == "https://demo.supabase.co/rest/v1/admin_settings"
    assert call["params"]["key"] == "eq.work_cycle_start"
    assert call["headers"]["apikey"] == "anon-key"
    assert call["headers"]["Authorization"] == "Bearer anon-key"
    assert call["timeout"] == 5
    assert settings.anchor_date == pendulum.date(2025, 11, 1)


def test_get_settings_without_row_uses_default():
    client = _client({"admin_settings": FakeResponse([])})

    assert client.get_settings(date(2025, 10, 25)).anchor_date == pendulum.date(2025, 10, 25)


def test_get_overrides_orders_by_date_from():
    client = _client({"schedule_overrides": FakeResponse([
        {"date_from": "2025-11-01", "date_to": "2025-11-05", "is_working": False, "reason": "Отпуск"},
        {"date_from": "2025-11-10", "date_to": "2025-11-10", "is_working": False,
         "time_from": "12:00:00", "time_to": "13:00:00"},
    ])})

    overrides = client.get_overrides()

    assert client.session.calls[0]["params"]["order"] == "date_from.asc"
    assert len(overrides) == 2
    assert overrides[1].time_from == time(12, 0)


def test_get_bookings_filters_day_and_status():
    client = _client({"bookings": FakeResponse([
        {"booking_date": "2025-11-10", "booking_time": "10:00:00", "service_id": "manicure", "status": "confirmed"},
    ])})

    bookings = client.get_bookings(pendulum.date(2025, 11, 10))

    params = client.session.calls[0]["params"]
    assert params["booking_date"] == "eq.2025-11-10"
    assert params["status"] == "in.(pending,confirmed)"
    assert bookings[0].service_ids == frozenset({"manicure"})


def test_get_services():
    client = _client({"services": FakeResponse([
        {"id": "manicure", "name": "Маникюр", "duration": 60, "price": 350, "category": "nails"},
        {"id": "broken", "name": "No duration", "price": 1},
    ])})

    services = client.get_services()

    assert [service.id for service in services] == ["manicure"]


def test_http_errors_become_data_store_errors():
    client = _client({"services": FakeResponse({"message": "denied"}, status_code=401)})

    with pytest.raises(DataStoreError, match="services"):
        client.get_services()


def test_connection_errors_become_data_store_errors():
    client = _client({"schedule_overrides": requests.exceptions.ConnectionError("offline")})

    with pytest.raises(DataStoreError, match="offline"):
        client.get_overrides()


def test_non_list_payload_is_rejected():
    client = _client({"bookings": FakeResponse({"rows": []})})

    with pytest.raises(DataStoreError, match="expected a list"):
        client.get_bookings(date(2025, 11, 10))


def test_invalid_json_is_rejected():
    client = _client({"services": FakeResponse(ValueError("Expecting value"))})

    with pytest.raises(DataStoreError, match="Invalid JSON"):
        client.get_services()
