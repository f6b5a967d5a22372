"""
Domain-specific exception hierarchy for the salonslots application.
"""


class SalonSlotsError(Exception):
    """Base class for all application-level errors."""


class ScheduleOverrideError(SalonSlotsError):
    """Raised when a schedule override is authored with invalid bounds."""


class UnknownServiceError(SalonSlotsError):
    """Raised when a booking or selection references a service not in the catalog."""


class EmptySelectionError(SalonSlotsError):
    """Raised when slots are requested without selecting any service."""


class DataStoreError(SalonSlotsError):
    """Raised when records cannot be fetched from the data store."""


class SnapshotError(SalonSlotsError):
    """Raised when a snapshot file cannot be read or parsed."""
