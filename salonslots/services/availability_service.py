"""
Application service answering availability queries from fetched snapshots.

The service coordinates fetching settings, overrides, services and bookings
via a snapshot source adapter and delegates the actual availability decision
to the domain-level ``AvailabilityEngine``. Snapshot sources are described by
a simple protocol so tests can plug in a stub.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Protocol, Sequence

import pendulum

from ..adapters.records import services_by_id
from ..config import AppConfig
from ..domain.availability_engine import AvailabilityEngine
from ..domain.conflict_checker import ConflictChecker
from ..domain.cycle_calendar import CycleCalendar
from ..domain.exceptions import EmptySelectionError, SalonSlotsError
from ..domain.models import Booking, ScheduleOverride, Service, WorkCycleSettings, as_date
from ..domain.override_resolver import OverrideResolver
from ..domain.slot_generator import SlotGenerator

logger = logging.getLogger(__name__)


class SnapshotSourceProtocol(Protocol):
    """Protocol describing the data access needed by the service."""

    def get_settings(self, default_anchor: date) -> WorkCycleSettings:
        """Return the work cycle settings."""

    def get_overrides(self) -> List[ScheduleOverride]:
        """Return all schedule overrides."""

    def get_services(self) -> List[Service]:
        """Return the service catalog."""

    def get_bookings(self, day: date) -> List[Booking]:
        """Return bookings on ``day``."""


class Degradable:
    """Results carrying the fallbacks taken while fetching snapshots."""
    warnings: List[str]

    @property
    def degraded(self) -> bool:
        """True when some snapshot was unavailable and replaced by a fallback."""
        return bool(self.warnings)


@dataclass
class DaySnapshot(Degradable):
    """Settings and overrides, enough to decide whether a day is open."""
    settings: WorkCycleSettings
    overrides: List[ScheduleOverride]
    warnings: List[str] = field(default_factory=list)


@dataclass
class AvailabilitySnapshot(Degradable):
    """Everything the engine needs for one slot query."""
    settings: WorkCycleSettings
    overrides: List[ScheduleOverride]
    services: Dict[str, Service]
    bookings: List[Booking]
    warnings: List[str] = field(default_factory=list)


@dataclass
class DayStatus(Degradable):
    """Whether a date is open and can be picked in the booking calendar."""
    day: date
    is_working_day: bool
    is_bookable: bool
    override: Optional[ScheduleOverride] = None
    warnings: List[str] = field(default_factory=list)


@dataclass
class OpenDays(Degradable):
    """Open days in ``[start, end]``."""
    start: date
    end: date
    days: List[date]
    warnings: List[str] = field(default_factory=list)


@dataclass
class AvailabilityResult(Degradable):
    """Free slots for a date, plus any degradation the user should see."""
    day: date
    is_working_day: bool
    slots: List[str]
    warnings: List[str] = field(default_factory=list)


def build_engine(config: AppConfig) -> AvailabilityEngine:
    """Assemble an AvailabilityEngine from application configuration."""
    return AvailabilityEngine(
        cycle_calendar=CycleCalendar(
            cycle_length=config.work_cycle.cycle_length,
            working_days=config.work_cycle.working_days
        ),
        override_resolver=OverrideResolver(blackout_dates=config.blackout_dates),
        slot_generator=SlotGenerator(config.business_hours.to_business_hours()),
        conflict_checker=ConflictChecker(),
        booking_horizon_days=config.booking_horizon_days
    )


class AvailabilityService:
    """
    Orchestrates snapshot retrieval and availability calculation.

    Missing overrides or bookings degrade to empty lists, which makes the
    answer more permissive; every result reports the degradation in
    ``warnings``. A missing service catalog only matters to slot queries,
    where it propagates.
    """

    def __init__(
        self,
        source: SnapshotSourceProtocol,
        engine: AvailabilityEngine,
        default_anchor: date
    ) -> None:
        self._source = source
        self._engine = engine
        self._default_anchor = as_date(default_anchor)

    @classmethod
    def from_config(cls, config: AppConfig, source: SnapshotSourceProtocol) -> "AvailabilityService":
        return cls(
            source=source,
            engine=build_engine(config),
            default_anchor=config.work_cycle.default_anchor
        )

    @property
    def engine(self) -> AvailabilityEngine:
        return self._engine

    def _fetch_settings(self, warnings: List[str]) -> WorkCycleSettings:
        try:
            return self._source.get_settings(self._default_anchor)
        except SalonSlotsError as exc:
            message = f"Work cycle settings unavailable, using default anchor {self._default_anchor}: {exc}"
            logger.warning("%s", message)
            warnings.append(message)
            return WorkCycleSettings(anchor_date=self._default_anchor)

    def _fetch_overrides(self, warnings: List[str]) -> List[ScheduleOverride]:
        try:
            return self._source.get_overrides()
        except SalonSlotsError as exc:
            message = f"Schedule overrides unavailable, using the work cycle only: {exc}"
            logger.warning("%s", message)
            warnings.append(message)
            return []

    def _fetch_bookings(self, day: date, warnings: List[str]) -> List[Booking]:
        try:
            return self._source.get_bookings(day)
        except SalonSlotsError as exc:
            message = f"Bookings unavailable, existing bookings are not excluded: {exc}"
            logger.warning("%s", message)
            warnings.append(message)
            return []

    def load_day_snapshot(self) -> DaySnapshot:
        """
        Fetch settings and overrides only. Day-level queries use this so a
        service catalog or bookings outage does not affect them.
        """
        warnings: List[str] = []

        settings = self._fetch_settings(warnings)
        overrides = self._fetch_overrides(warnings)

        return DaySnapshot(settings=settings, overrides=overrides, warnings=warnings)

    def list_services(self) -> Dict[str, Service]:
        """
        The service catalog keyed by id.

        Raises:
            SalonSlotsError: If the catalog cannot be fetched
        """
        return services_by_id(self._source.get_services())

    def load_snapshot(self, day: Optional[date] = None) -> AvailabilitySnapshot:
        """
        Fetch a snapshot for one slot query. Bookings are only fetched when
        ``day`` is given.
        """
        day_snapshot = self.load_day_snapshot()
        warnings = list(day_snapshot.warnings)

        services = self.list_services()
        bookings = self._fetch_bookings(day, warnings) if day is not None else []

        return AvailabilitySnapshot(
            settings=day_snapshot.settings,
            overrides=day_snapshot.overrides,
            services=services,
            bookings=bookings,
            warnings=warnings
        )

    def day_status(self, day: date, today: Optional[date] = None) -> DayStatus:
        """
        Open/closed status of ``day``, the override deciding it (if any) and
        whether it lies inside the booking horizon counted from ``today``.
        """
        day = as_date(day)
        today = as_date(today) if today is not None else pendulum.today().date()
        snapshot = self.load_day_snapshot()

        return DayStatus(
            day=day,
            is_working_day=self._engine.is_working_day(day, snapshot.settings, snapshot.overrides),
            is_bookable=self._engine.is_bookable_date(day, today, snapshot.settings, snapshot.overrides),
            override=self._engine.override_resolver.find_match(day, snapshot.overrides),
            warnings=snapshot.warnings
        )

    def find_slots(self, day: date, service_ids: Sequence[str]) -> AvailabilityResult:
        """
        Free slots on ``day`` for the selected services.

        Raises:
            EmptySelectionError: If no service is selected
            UnknownServiceError: If a selected service is not in the catalog
        """
        if not service_ids:
            raise EmptySelectionError("Select at least one service before choosing a time.")

        day = as_date(day)
        snapshot = self.load_snapshot(day)
        is_open = self._engine.is_working_day(day, snapshot.settings, snapshot.overrides)

        slots = self._engine.get_available_slots(
            day,
            service_ids,
            snapshot.settings,
            snapshot.overrides,
            snapshot.bookings,
            snapshot.services
        )

        return AvailabilityResult(
            day=day,
            is_working_day=is_open,
            slots=slots,
            warnings=snapshot.warnings
        )

    def working_days(self, start: date, end: date) -> OpenDays:
        start, end = as_date(start), as_date(end)
        snapshot = self.load_day_snapshot()

        return OpenDays(
            start=start,
            end=end,
            days=self._engine.working_days(start, end, snapshot.settings, snapshot.overrides),
            warnings=snapshot.warnings
        )
