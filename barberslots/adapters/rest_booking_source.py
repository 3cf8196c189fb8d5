"""
Booking source backed by a PostgREST-style HTTP API.
"""

import logging
from typing import Any, List, Optional

import pendulum
import requests
from pendulum import Date

from ..domain.exceptions import BookingSourceError, SlotValidationError
from ..domain.models import BlockedPeriod, ExistingBooking, WeeklySchedule
from .schedule_records import weekly_schedule_from_record

logger = logging.getLogger(__name__)


class RestBookingSource:
    """
    Client for the hosted database's REST interface.

    Uses:
    - ``POST /rpc/get_barber_appointments`` for the day's bookings
    - ``GET /barbeiros`` for the barber's schedule columns
    - ``GET /schedule_overrides`` for blocked time
    """

    SCHEDULE_COLUMNS = "id,work_days,work_hours_start,work_hours_end,schedule_config"

    def __init__(
        self,
        base_url: str,
        api_key: str,
        session: Optional[requests.Session] = None,
        timeout: float = 10,
        timezone: str = "UTC",
    ):
        """
        Initialize the REST client.

        Args:
            base_url: REST endpoint root, e.g. ``https://xyz.example.co/rest/v1``
            api_key: Key sent as ``apikey`` and bearer token
            session: Optional pre-configured session (tests inject a fake)
            timeout: Per-request timeout in seconds
            timezone: Barbershop time zone; override timestamps are read in it
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.timezone = timezone
        self.session = session or requests.Session()
        self.headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}/{path}"

        try:
            response = self.session.request(
                method,
                url,
                headers=self.headers,
                timeout=self.timeout,
                **kwargs,
            )
            response.raise_for_status()
            return response.json()
        except requests.exceptions.JSONDecodeError as exc:
            raise BookingSourceError(f"Invalid JSON returned by {url}: {exc}") from exc
        except requests.exceptions.RequestException as exc:
            raise BookingSourceError(f"Request to {url} failed: {exc}") from exc

    def get_bookings(self, barber_id: str, day: Date) -> List[ExistingBooking]:
        """
        Fetch the day's bookings of a barber.

        Raises:
            BookingSourceError: If the call fails or the payload is unusable
        """
        rows = self._request(
            "POST",
            "rpc/get_barber_appointments",
            json={"p_barber_id": barber_id, "p_date": day.isoformat()},
        )
        if not isinstance(rows, list):
            raise BookingSourceError("Expected a list of appointments from get_barber_appointments")

        bookings: List[ExistingBooking] = []
        for row in rows:
            try:
                bookings.append(ExistingBooking.from_record(row))
            except (AttributeError, SlotValidationError) as exc:
                logger.warning("Skipping invalid appointment row %s: %s", row, exc)

        return bookings

    def get_schedule(self, barber_id: str) -> WeeklySchedule:
        rows = self._request(
            "GET",
            "barbeiros",
            params={"id": f"eq.{barber_id}", "select": self.SCHEDULE_COLUMNS},
        )
        if not rows:
            raise BookingSourceError(f"Unknown barber: {barber_id}")

        return weekly_schedule_from_record(rows[0])

    def get_blocked_periods(self, barber_id: str, day: Date) -> List[BlockedPeriod]:
        """Blocked time of a barber; an API without the overrides table yields none."""
        day_start = pendulum.datetime(day.year, day.month, day.day, tz=self.timezone)
        day_end = day_start.add(days=1)
        params = [
            ("barber_id", f"eq.{barber_id}"),
            ("start_time", f"gte.{day_start.isoformat()}"),
            ("end_time", f"lte.{day_end.isoformat()}"),
            ("select", "start_time,end_time,type,reason"),
        ]

        try:
            rows = self._request("GET", "schedule_overrides", params=params)
        except BookingSourceError as exc:
            cause = exc.__cause__
            if isinstance(cause, requests.exceptions.HTTPError) and _status_code(cause) == 404:
                logger.warning("Schedule overrides unavailable, ignoring blocked time: %s", exc)
                return []
            raise

        periods: List[BlockedPeriod] = []
        for row in rows or []:
            try:
                periods.append(BlockedPeriod.from_record(row, timezone=self.timezone))
            except (AttributeError, SlotValidationError) as exc:
                logger.warning("Skipping invalid override row %s: %s", row, exc)

        return periods


def _status_code(error: requests.exceptions.HTTPError) -> Optional[int]:
    response = getattr(error, "response", None)
    return getattr(response, "status_code", None)
