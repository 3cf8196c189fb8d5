"""
File-backed booking source for offline use, demos and tests.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from pendulum import Date

from ..domain.exceptions import BookingSourceError, SlotValidationError
from ..domain.models import BlockedPeriod, ExistingBooking, WeeklySchedule
from .schedule_records import weekly_schedule_from_record

logger = logging.getLogger(__name__)


class JsonBookingSource:
    """
    Booking source reading barbers, bookings and overrides from a JSON file.

    Expected document::

        {
          "barbers":   [{"id": "b1", "name": "Joao", "work_days": [1, 2, 3, 4, 5, 6],
                         "schedule_config": {"workHours": {...}, "lunchBreak": {...}}}],
          "bookings":  [{"barber_id": "b1", "date": "2026-10-20",
                         "start_time": "10:00:00", "duration": 45, "status": "confirmado"}],
          "overrides": [{"barber_id": "b1", "date": "2026-10-21", "type": "full_day"},
                        {"barber_id": "b1", "date": "2026-10-22", "type": "custom_slot",
                         "start_time": "15:00", "end_time": "16:30"}]
        }

    Override timestamps are read in ``timezone``. Malformed bookings and
    overrides are skipped with a warning.
    """

    def __init__(self, data_file: Path, timezone: Optional[str] = None):
        self.data_file = Path(data_file)
        self.timezone = timezone
        self._data = self._load_data()

    def _load_data(self) -> Dict[str, Any]:
        if not self.data_file.exists():
            raise BookingSourceError(f"Booking data file not found: {self.data_file}")

        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise BookingSourceError(f"Could not read booking data from {self.data_file}: {exc}") from exc

        if not isinstance(data, dict):
            raise BookingSourceError("Booking data file must contain an object at the root level.")

        return data

    def _entries(self, key: str, barber_id: str, day: Date) -> List[Dict[str, Any]]:
        day_str = day.isoformat()
        return [
            entry for entry in self._data.get(key, [])
            if isinstance(entry, dict)
            and str(entry.get("barber_id")) == str(barber_id)
            and entry.get("date") == day_str
        ]

    def get_barber(self, barber_id: str) -> Dict[str, Any]:
        for barber in self._data.get("barbers", []):
            if str(barber.get("id")) == str(barber_id):
                return barber
        raise BookingSourceError(f"Unknown barber: {barber_id}")

    def get_schedule(self, barber_id: str) -> WeeklySchedule:
        """Weekly schedule of a barber, defaults when the row carries none."""
        return weekly_schedule_from_record(self.get_barber(barber_id))

    def get_bookings(self, barber_id: str, day: Date) -> List[ExistingBooking]:
        """Bookings of a barber on a day, cancelled ones included."""
        bookings: List[ExistingBooking] = []

        for entry in self._entries("bookings", barber_id, day):
            try:
                bookings.append(ExistingBooking.from_record(entry))
            except SlotValidationError as exc:
                logger.warning("Skipping invalid booking %s: %s", entry, exc)

        return bookings

    def get_blocked_periods(self, barber_id: str, day: Date) -> List[BlockedPeriod]:
        periods: List[BlockedPeriod] = []

        for entry in self._entries("overrides", barber_id, day):
            try:
                periods.append(BlockedPeriod.from_record(entry, timezone=self.timezone))
            except SlotValidationError as exc:
                logger.warning("Skipping invalid override %s: %s", entry, exc)

        return periods
