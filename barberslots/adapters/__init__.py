"""
Adapters layer - Booking data sources and stored-record conversion.
"""

from .json_booking_source import JsonBookingSource
from .rest_booking_source import RestBookingSource
from .schedule_records import schedule_from_record, weekly_schedule_from_record

__all__ = ["JsonBookingSource", "RestBookingSource", "schedule_from_record", "weekly_schedule_from_record"]
