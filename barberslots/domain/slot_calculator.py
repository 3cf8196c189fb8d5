"""
Core business logic for calculating bookable appointment slots.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O, no clock reads).
"""

import logging
from typing import Iterable, List, Optional, Sequence

from .models import (
    SAME_DAY_BUFFER_MINUTES,
    BlockedPeriod,
    ExistingBooking,
    ScheduleConfig,
    SlotRequest,
    TimeRange,
    format_slot,
)

logger = logging.getLogger(__name__)


class SlotCalculator:
    """
    Calculates the start times at which a service of a given duration fits.

    Algorithm (single pass over the working day):
    1. Start at the opening time
    2. Stop as soon as a service starting at the candidate would end after closing
    3. Skip candidates too close to "now" on the current day
    4. Skip candidates overlapping the lunch break
    5. Skip candidates overlapping an existing booking or a blocked period
    6. Emit the rest and advance by the slot interval

    The output is chronological by construction; it is never re-sorted.
    """

    def __init__(self, schedule: Optional[ScheduleConfig] = None, timezone: Optional[str] = None):
        self.schedule = schedule if schedule is not None else ScheduleConfig.default()
        self.timezone = timezone

    def find_available_slots(
        self,
        bookings: Iterable[ExistingBooking],
        request: SlotRequest,
        blocked_periods: Iterable[BlockedPeriod] = (),
    ) -> List[str]:
        """
        Find all bookable start times for the requested day.

        Args:
            bookings: Bookings of the same barber on ``request.date``
            request: Service duration, slot interval, date and "now"
            blocked_periods: Time the barber blocked on that day

        Returns:
            Start times formatted ``HH:mm``, in chronological order
        """
        if not self.schedule.active:
            return []

        working_day = self.schedule.work_hours.on(request.date)
        if working_day is None:
            return []

        busy_ranges = self._busy_ranges(bookings, blocked_periods, request)
        lunch = self._lunch_range(request)
        earliest = self._earliest_start(request)

        slots: List[str] = []
        candidate = working_day.start

        while candidate < working_day.end:
            candidate_end = candidate.add(minutes=request.service_duration_minutes)

            # Later candidates only end later, nothing else can fit.
            if candidate_end > working_day.end:
                break

            if earliest is not None and candidate < earliest:
                candidate = candidate.add(minutes=request.slot_interval_minutes)
                continue

            service = TimeRange(start=candidate, end=candidate_end)

            if lunch is not None and service.overlaps(lunch):
                candidate = candidate.add(minutes=request.slot_interval_minutes)
                continue

            if not self._collides(service, busy_ranges):
                slots.append(format_slot(candidate))

            candidate = candidate.add(minutes=request.slot_interval_minutes)

        logger.debug(
            "Computed %d slot(s) for %s (%d min service, %d min interval)",
            len(slots),
            request.date,
            request.service_duration_minutes,
            request.slot_interval_minutes,
        )
        return slots

    def _lunch_range(self, request: SlotRequest) -> TimeRange | None:
        if self.schedule.lunch_break is None:
            return None
        return self.schedule.lunch_break.on(request.date)

    def _earliest_start(self, request: SlotRequest):
        """Earliest allowed start on the current day, None for any other day."""
        if not request.is_today(self.timezone):
            return None
        return request.local_now(self.timezone).add(minutes=SAME_DAY_BUFFER_MINUTES)

    @staticmethod
    def _busy_ranges(
        bookings: Iterable[ExistingBooking],
        blocked_periods: Iterable[BlockedPeriod],
        request: SlotRequest,
    ) -> List[TimeRange]:
        ranges = [
            booking.on(request.date)
            for booking in bookings
            if not booking.is_cancelled()
        ]
        ranges.extend(period.on(request.date) for period in blocked_periods)
        return ranges

    @staticmethod
    def _collides(service: TimeRange, busy_ranges: Sequence[TimeRange]) -> bool:
        for busy in busy_ranges:
            if service.overlaps(busy):
                return True
        return False


def compute_available_slots(
    bookings: Iterable[ExistingBooking],
    schedule: Optional[ScheduleConfig],
    request: SlotRequest,
    *,
    blocked_periods: Iterable[BlockedPeriod] = (),
    timezone: Optional[str] = None,
) -> List[str]:
    """
    Functional entry point: bookable ``HH:mm`` start times for one barber and day.

    ``schedule=None`` applies the default 09:00-19:00 day with a 12:00-13:00 lunch.
    """
    calculator = SlotCalculator(schedule=schedule, timezone=timezone)
    return calculator.find_available_slots(bookings, request, blocked_periods=blocked_periods)
