"""
Domain-specific exception hierarchy for the slot availability application.
"""


class SlotFinderError(Exception):
    """Base class for all application-level errors."""


class SlotValidationError(SlotFinderError, ValueError):
    """Raised when a caller passes durations, intervals or times that make no sense."""


class ScheduleFormatError(SlotValidationError):
    """Raised when a stored schedule record cannot be read."""


class BookingSourceError(SlotFinderError):
    """Raised when booking data cannot be fetched or parsed."""
