"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability_service import (
    AvailabilityResult,
    AvailabilityService,
    AvailabilitySnapshot,
    DaySnapshot,
    DayStatus,
    OpenDays,
    SnapshotSourceProtocol,
    build_engine,
)

__all__ = [
    "AvailabilityResult",
    "AvailabilityService",
    "AvailabilitySnapshot",
    "DaySnapshot",
    "DayStatus",
    "OpenDays",
    "SnapshotSourceProtocol",
    "build_engine",
]
