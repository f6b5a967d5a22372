"""
Configuration management using Pydantic models loaded from YAML.
"""

from datetime import date, time
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import BusinessHours

DEFAULT_CYCLE_ANCHOR = date(2025, 10, 25)
DEFAULT_BLACKOUT_DATES = [date(2026, 1, 1)]


class BusinessHoursConfig(BaseModel):
    """Opening hours and slot granularity."""
    open_hour: int = 9
    close_hour: int = 20
    sunday_close_hour: int = 18
    slot_minutes: int = 15

    @field_validator("open_hour", "close_hour", "sunday_close_hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 23."""
        if not 0 <= v <= 23:
            raise ValueError(f"Hour must be between 0 and 23, got {v}")
        return v

    @field_validator("slot_minutes")
    @classmethod
    def validate_slot_minutes(cls, value: int) -> int:
        """Ensure the grid step is positive and fits in an hour."""
        if not 0 < value <= 60:
            raise ValueError(f"slot_minutes must be between 1 and 60, got {value}")
        return value

    @model_validator(mode="after")
    def validate_hours_order(self) -> "BusinessHoursConfig":
        """Ensure the salon opens before it closes, Sundays included."""
        if self.close_hour <= self.open_hour:
            raise ValueError("close_hour must be later than open_hour")
        if self.sunday_close_hour <= self.open_hour:
            raise ValueError("sunday_close_hour must be later than open_hour")
        return self

    def to_business_hours(self) -> BusinessHours:
        return BusinessHours(
            open_time=time(hour=self.open_hour),
            close_time=time(hour=self.close_hour),
            sunday_close_time=time(hour=self.sunday_close_hour),
            slot_minutes=self.slot_minutes,
        )


class WorkCycleConfig(BaseModel):
    """Shape of the repeating work cycle."""
    default_anchor: date = DEFAULT_CYCLE_ANCHOR  # Used when the store has no usable setting
    cycle_length: int = 4
    working_days: int = 2

    @model_validator(mode="after")
    def validate_cycle(self) -> "WorkCycleConfig":
        if self.cycle_length <= 0:
            raise ValueError("cycle_length must be greater than zero")
        if not 0 <= self.working_days <= self.cycle_length:
            raise ValueError("working_days must be between 0 and cycle_length")
        return self


class SupabaseConfig(BaseModel):
    """Connection details for the hosted data store."""
    url: str
    api_key: str
    timeout_seconds: int = 30

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class AppConfig(BaseModel):
    """Application configuration."""
    business_hours: BusinessHoursConfig = Field(default_factory=BusinessHoursConfig)
    work_cycle: WorkCycleConfig = Field(default_factory=WorkCycleConfig)
    blackout_dates: List[date] = Field(default_factory=lambda: list(DEFAULT_BLACKOUT_DATES))
    booking_horizon_days: int = 60
    data_file: Optional[Path] = None
    supabase: Optional[SupabaseConfig] = None

    @field_validator("blackout_dates")
    @classmethod
    def dedupe_blackout_dates(cls, value: List[date]) -> List[date]:
        """Preserve order while removing duplicates."""
        seen: set[date] = set()
        deduped: List[date] = []
        for day in value:
            if day not in seen:
                deduped.append(day)
                seen.add(day)
        return deduped

    @field_validator("booking_horizon_days")
    @classmethod
    def validate_horizon(cls, value: int) -> int:
        if value < 0:
            raise ValueError("booking_horizon_days must not be negative")
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)

    @classmethod
    def load_or_default(cls, config_path: Optional[Path]) -> "AppConfig":
        """Load ``config_path`` if it exists, otherwise use built-in defaults."""
        if config_path is None or not config_path.exists():
            return cls()
        return cls.load_from_yaml(config_path)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
