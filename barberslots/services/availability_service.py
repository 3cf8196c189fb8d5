"""
Application services for finding bookable appointment slots.

The service coordinates fetching a barber's day via a booking source adapter
and delegates the actual availability calculation to the domain-level
``SlotCalculator``. This keeps the CLI thin and improves testability by
allowing the data source to be replaced via a simple protocol.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from pendulum import Date, DateTime

from ..domain.models import (
    DEFAULT_SLOT_INTERVAL_MINUTES,
    BlockedPeriod,
    ExistingBooking,
    ScheduleConfig,
    SlotRequest,
    WeeklySchedule,
    parse_time_of_day,
)
from ..domain.slot_calculator import SlotCalculator

logger = logging.getLogger(__name__)


class BookingSourceProtocol(Protocol):
    """Protocol describing the data access needed by the service."""

    def get_bookings(self, barber_id: str, day: Date) -> List[ExistingBooking]:
        """Return the barber's bookings on ``day``."""

    def get_schedule(self, barber_id: str) -> WeeklySchedule:
        """Return the barber's weekly schedule."""

    def get_blocked_periods(self, barber_id: str, day: Date) -> List[BlockedPeriod]:
        """Return the time the barber blocked on ``day``."""


@dataclass
class DayContext:
    """Everything the calculator needs about one barber's day."""
    day: Date
    schedule: ScheduleConfig
    bookings: List[ExistingBooking] = field(default_factory=list)
    blocked_periods: List[BlockedPeriod] = field(default_factory=list)


class AvailabilityService:
    """
    Orchestrates data retrieval and slot calculation for one barbershop.
    """

    def __init__(
        self,
        source: BookingSourceProtocol,
        timezone: str = "America/Sao_Paulo",
        slot_interval_minutes: int = DEFAULT_SLOT_INTERVAL_MINUTES,
    ) -> None:
        self._source = source
        self.timezone = timezone
        self.slot_interval_minutes = slot_interval_minutes

    def fetch_day(self, barber_id: str, day: Date) -> DayContext:
        """
        Fetch schedule, active bookings and blocked time for a barber's day.

        Cancelled bookings are dropped here so the calculator receives only
        bookings that occupy the agenda.
        """
        schedule = self._source.get_schedule(barber_id).for_date(day)

        if not schedule.active:
            logger.debug("Barber %s does not work on %s", barber_id, day)
            return DayContext(day=day, schedule=schedule)

        bookings = [
            booking for booking in self._source.get_bookings(barber_id, day)
            if not booking.is_cancelled()
        ]
        blocked = self._source.get_blocked_periods(barber_id, day)

        return DayContext(day=day, schedule=schedule, bookings=bookings, blocked_periods=blocked)

    def available_slots(
        self,
        barber_id: str,
        day: Date,
        service_duration_minutes: int,
        *,
        slot_interval_minutes: Optional[int] = None,
        now: Optional[DateTime] = None,
    ) -> List[str]:
        """Retrieve the barber's day and compute bookable ``HH:mm`` start times."""
        interval = self.slot_interval_minutes if slot_interval_minutes is None else slot_interval_minutes
        if now is None:
            request = SlotRequest(
                date=day,
                service_duration_minutes=service_duration_minutes,
                slot_interval_minutes=interval,
            )
        else:
            request = SlotRequest(
                date=day,
                service_duration_minutes=service_duration_minutes,
                slot_interval_minutes=interval,
                now=now,
            )

        context = self.fetch_day(barber_id, day)
        return self.calculate_slots(context, request)

    def calculate_slots(self, context: DayContext, request: SlotRequest) -> List[str]:
        """Calculate available slots from already fetched data."""
        calculator = SlotCalculator(schedule=context.schedule, timezone=self.timezone)
        return calculator.find_available_slots(
            context.bookings,
            request,
            blocked_periods=context.blocked_periods,
        )

    def is_slot_available(
        self,
        barber_id: str,
        day: Date,
        start,
        service_duration_minutes: int,
        *,
        now: Optional[DateTime] = None,
    ) -> bool:
        """
        Re-check a chosen start time against live data before committing a booking.

        Slots shown earlier may be stale; this recomputes from the source.
        """
        wanted = parse_time_of_day(start).strftime("%H:%M")
        slots = self.available_slots(
            barber_id,
            day,
            service_duration_minutes,
            now=now,
        )
        return wanted in slots
