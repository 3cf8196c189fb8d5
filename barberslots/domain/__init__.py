"""
Domain layer - Pure business logic without external dependencies.
"""

from .exceptions import BookingSourceError, ScheduleFormatError, SlotFinderError, SlotValidationError
from .models import (
    BlockedPeriod,
    ExistingBooking,
    ScheduleConfig,
    SlotRequest,
    TimeRange,
    TimeWindow,
    WeeklySchedule,
)
from .slot_calculator import SlotCalculator, compute_available_slots

__all__ = [
    "BlockedPeriod",
    "BookingSourceError",
    "ExistingBooking",
    "ScheduleConfig",
    "ScheduleFormatError",
    "SlotCalculator",
    "SlotFinderError",
    "SlotRequest",
    "SlotValidationError",
    "TimeRange",
    "TimeWindow",
    "WeeklySchedule",
    "compute_available_slots",
]
