"""
Tests for configuration loading and validation.
"""

from datetime import date, time

import pytest

from salonslots.config import AppConfig, BusinessHoursConfig


def test_defaults_match_salon_hours():
    config = AppConfig()
    hours = config.business_hours.to_business_hours()

    assert hours.open_time == time(9, 0)
    assert hours.close_time == time(20, 0)
    assert hours.sunday_close_time == time(18, 0)
    assert hours.slot_minutes == 15
    assert config.work_cycle.default_anchor == date(2025, 10, 25)
    assert config.blackout_dates == [date(2026, 1, 1)]
    assert config.booking_horizon_days == 60


def test_load_from_yaml(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "business_hours:\n"
        "  close_hour: 19\n"
        "work_cycle:\n"
        "  default_anchor: 2025-11-01\n"
        "blackout_dates:\n"
        "  - 2025-12-31\n"
        "  - 2025-12-31\n"
        "supabase:\n"
        "  url: https://demo.supabase.co/\n"
        "  api_key: anon\n",
        encoding="utf-8",
    )

    config = AppConfig.load_from_yaml(config_file)

    assert config.business_hours.close_hour == 19
    assert config.work_cycle.default_anchor == date(2025, 11, 1)
    assert config.blackout_dates == [date(2025, 12, 31)]
    assert config.supabase.url == "https://demo.supabase.co"


def test_missing_file_raises_error(tmp_path):
    with pytest.raises(FileNotFoundError):
        AppConfig.load_from_yaml(tmp_path / "missing.yaml")


def test_load_or_default_without_file(tmp_path):
    assert AppConfig.load_or_default(tmp_path / "missing.yaml") == AppConfig()


def test_invalid_yaml_raises_value_error(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("business_hours: [unclosed\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid YAML"):
        AppConfig.load_from_yaml(config_file)


def test_root_must_be_mapping(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("- 1\n- 2\n", encoding="utf-8")

    with pytest.raises(ValueError, match="mapping"):
        AppConfig.load_from_yaml(config_file)


def test_hours_must_be_ordered():
    with pytest.raises(ValueError, match="close_hour"):
        BusinessHoursConfig(open_hour=10, close_hour=9)

    with pytest.raises(ValueError, match="sunday_close_hour"):
        BusinessHoursConfig(open_hour=10, sunday_close_hour=10)


def test_invalid_hour_and_step():
    with pytest.raises(ValueError, match="Hour must be between"):
        BusinessHoursConfig(close_hour=24)

    with pytest.raises(ValueError, match="slot_minutes"):
        BusinessHoursConfig(slot_minutes=0)


def test_invalid_cycle_shape():
    with pytest.raises(ValueError, match="working_days"):
        AppConfig(work_cycle={"cycle_length": 4, "working_days": 5})
