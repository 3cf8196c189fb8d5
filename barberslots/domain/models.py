"""
Domain models for schedules, bookings and slot requests.

All time-of-day arithmetic happens on naive pendulum DateTimes anchored on the
requested calendar day, so slots are computed in barbershop wall-clock time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, time
from typing import Mapping, Optional

import pendulum
from pendulum import Date, DateTime

from .exceptions import SlotValidationError

logger = logging.getLogger(__name__)

SAME_DAY_BUFFER_MINUTES = 15
DEFAULT_SLOT_INTERVAL_MINUTES = 30
SECONDS_PER_DAY = 24 * 60 * 60

CANCELLED_STATUSES = frozenset({"cancelado", "cancelled", "canceled"})


def parse_time_of_day(value) -> time:
    """
    Parse ``HH:mm`` or ``HH:mm:ss`` into a ``datetime.time``.

    Raises:
        SlotValidationError: If the value is not a well-formed time of day
    """
    if isinstance(value, time):
        return time(hour=value.hour, minute=value.minute, second=value.second)

    if not isinstance(value, str):
        raise SlotValidationError(f"Expected a time string, got {value!r}")

    parts = value.strip().split(":")
    if len(parts) not in (2, 3) or not all(len(p) == 2 and p.isdigit() for p in parts):
        raise SlotValidationError(f"Malformed time '{value}', expected HH:mm or HH:mm:ss")

    hour, minute = int(parts[0]), int(parts[1])
    second = int(parts[2]) if len(parts) == 3 else 0

    if hour > 23 or minute > 59 or second > 59:
        raise SlotValidationError(f"Time out of range: '{value}'")

    return time(hour=hour, minute=minute, second=second)


def require_positive_minutes(name: str, value) -> int:
    """Fail fast on zero, negative or non-integer minute values."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise SlotValidationError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise SlotValidationError(f"{name} must be greater than zero, got {value}")
    return value


def anchor_day(day: Date) -> DateTime:
    """Midnight of ``day`` as a naive DateTime."""
    return pendulum.naive(day.year, day.month, day.day)


def at_time(day: Date, moment: time) -> DateTime:
    """Combine a calendar day and a time of day."""
    return anchor_day(day).set(
        hour=moment.hour,
        minute=moment.minute,
        second=moment.second,
        microsecond=0,
    )


def format_slot(moment: DateTime) -> str:
    return moment.format("HH:mm")


def _wall_clock_time(value, timezone: str | None = None) -> time:
    """
    Time of day of an override boundary.

    ISO timestamps are converted into ``timezone`` first; timestamps without
    an offset are read as already being in ``timezone``.
    """
    if isinstance(value, str) and "T" in value:
        try:
            parsed = pendulum.parse(value, tz=timezone or "UTC")
        except ValueError as exc:
            raise SlotValidationError(f"Malformed timestamp '{value}'") from exc
        if timezone:
            parsed = parsed.in_timezone(timezone)
        return parse_time_of_day(parsed.time())
    return parse_time_of_day(value)


def _first_present(record: Mapping, *keys):
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable time range with start and end datetime.

    Invariant: start must be before end. Ranges are half-open ``[start, end)``.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another. Touching ranges do not overlap."""
        return self.start < other.end and self.end > other.start

    def __str__(self) -> str:
        return f"{self.start.format('DD/MM/YYYY HH:mm')} - {self.end.format('HH:mm')}"


@dataclass(frozen=True)
class TimeWindow:
    """
    A daily time-of-day window such as working hours or a lunch break.

    ``start < end`` is not enforced: an empty window is a legitimate
    "nothing available" configuration rather than an error.
    """
    start: time
    end: time

    @classmethod
    def parse(cls, start, end) -> "TimeWindow":
        return cls(start=parse_time_of_day(start), end=parse_time_of_day(end))

    def is_empty(self) -> bool:
        return self.end <= self.start

    def on(self, day: Date) -> TimeRange | None:
        """Anchor the window on a calendar day. Returns None for an empty window."""
        if self.is_empty():
            return None
        return TimeRange(start=at_time(day, self.start), end=at_time(day, self.end))

    def __str__(self) -> str:
        return f"{self.start.strftime('%H:%M')}-{self.end.strftime('%H:%M')}"


DEFAULT_WORK_HOURS = TimeWindow(start=time(9, 0), end=time(19, 0))
DEFAULT_LUNCH_BREAK = TimeWindow(start=time(12, 0), end=time(13, 0))


@dataclass(frozen=True)
class ScheduleConfig:
    """
    Working hours and lunch break of one barber for one day.

    A lunch break outside the working window is accepted; it simply never
    excludes a slot.
    """
    work_hours: TimeWindow = DEFAULT_WORK_HOURS
    lunch_break: Optional[TimeWindow] = DEFAULT_LUNCH_BREAK
    active: bool = True

    @classmethod
    def default(cls) -> "ScheduleConfig":
        return cls()

    @classmethod
    def day_off(cls) -> "ScheduleConfig":
        return cls(active=False)


@dataclass(frozen=True)
class WeeklySchedule:
    """
    Per-weekday schedule configuration.

    Weekdays follow Python numbering: 0=Monday, 6=Sunday. Days missing from
    ``days`` use ``default``.
    """
    days: Mapping[int, ScheduleConfig] = field(default_factory=dict)
    default: ScheduleConfig = field(default_factory=ScheduleConfig.default)

    def __post_init__(self):
        invalid = [day for day in self.days if day not in range(7)]
        if invalid:
            raise SlotValidationError(f"Weekdays must be between 0 and 6, got {invalid}")

    @classmethod
    def uniform(cls, schedule: ScheduleConfig) -> "WeeklySchedule":
        return cls(days={}, default=schedule)

    def for_date(self, day: Date) -> ScheduleConfig:
        return self.days.get(day.weekday(), self.default)

    def is_working_day(self, day: Date) -> bool:
        return self.for_date(day).active


@dataclass(frozen=True)
class ExistingBooking:
    """
    A booking already on the barber's agenda for the requested day.

    Only start and duration matter for collision checks. Bookings running
    past midnight are not supported.
    """
    start_time: time
    duration_minutes: int
    status: str = "confirmed"

    def __post_init__(self):
        object.__setattr__(self, "start_time", parse_time_of_day(self.start_time))
        require_positive_minutes("duration_minutes", self.duration_minutes)

        start_seconds = self.start_time.hour * 3600 + self.start_time.minute * 60 + self.start_time.second
        if start_seconds + self.duration_minutes * 60 > SECONDS_PER_DAY:
            raise SlotValidationError(
                f"Booking at {self.start_time.strftime('%H:%M')} lasting "
                f"{self.duration_minutes} minutes crosses midnight"
            )

    @classmethod
    def from_record(cls, record: Mapping) -> "ExistingBooking":
        """
        Build a booking from a storage row.

        Accepts ``start_time``/``horario`` and ``duration``/``duration_minutes``/
        ``duracao_minutos`` keys. A row without a duration (no service joined)
        still occupies the agenda for ``DEFAULT_SLOT_INTERVAL_MINUTES``.
        """
        start = _first_present(record, "start_time", "horario")
        if start is None:
            raise SlotValidationError(f"Booking record is missing a start time: {dict(record)}")

        duration = _first_present(record, "duration_minutes", "duration", "duracao_minutos")
        if duration is None:
            logger.warning(
                "Booking at %s has no duration, assuming %d minutes",
                start,
                DEFAULT_SLOT_INTERVAL_MINUTES,
            )
            duration = DEFAULT_SLOT_INTERVAL_MINUTES

        return cls(
            start_time=parse_time_of_day(start),
            duration_minutes=duration,
            status=str(record.get("status") or "confirmed"),
        )

    def is_cancelled(self) -> bool:
        return self.status.lower() in CANCELLED_STATUSES

    def on(self, day: Date) -> TimeRange:
        start = at_time(day, self.start_time)
        return TimeRange(start=start, end=start.add(minutes=self.duration_minutes))


@dataclass(frozen=True)
class BlockedPeriod:
    """
    Time a barber blocked on their agenda (day off, appointment, errand).

    A period with neither start nor end blocks the whole day.
    """
    start: Optional[time] = None
    end: Optional[time] = None
    reason: str = ""

    def __post_init__(self):
        if (self.start is None) != (self.end is None):
            raise SlotValidationError("A blocked period needs both start and end, or neither")

        if self.start is not None:
            object.__setattr__(self, "start", parse_time_of_day(self.start))
            object.__setattr__(self, "end", parse_time_of_day(self.end))
            if self.end <= self.start:
                raise SlotValidationError(
                    f"Blocked period end {self.end} must be after start {self.start}"
                )

    @classmethod
    def full_day(cls, reason: str = "") -> "BlockedPeriod":
        return cls(start=None, end=None, reason=reason)

    @classmethod
    def from_record(cls, record: Mapping, timezone: str | None = None) -> "BlockedPeriod":
        """
        Build a blocked period from a schedule override row.

        ``type == "full_day"`` blocks the day; anything else needs
        ``start_time`` and ``end_time``. ISO timestamps are converted to the
        barbershop ``timezone`` before their time of day is taken.
        """
        reason = record.get("reason") or ""
        if record.get("type") == "full_day":
            return cls.full_day(reason=reason)

        start, end = record.get("start_time"), record.get("end_time")
        if start is None or end is None:
            raise SlotValidationError(f"Override record is missing start or end: {dict(record)}")

        return cls(
            start=_wall_clock_time(start, timezone),
            end=_wall_clock_time(end, timezone),
            reason=reason,
        )

    def is_full_day(self) -> bool:
        return self.start is None

    def on(self, day: Date) -> TimeRange:
        if self.is_full_day():
            midnight = anchor_day(day)
            return TimeRange(start=midnight, end=midnight.add(days=1))
        return TimeRange(start=at_time(day, self.start), end=at_time(day, self.end))


@dataclass(frozen=True)
class SlotRequest:
    """
    Input of one availability computation.

    ``now`` is captured when the request is built, never inside the calculator.
    A naive ``now`` is barbershop wall-clock time; an aware one is converted
    into the barbershop time zone.
    """
    date: Date
    service_duration_minutes: int
    slot_interval_minutes: int = DEFAULT_SLOT_INTERVAL_MINUTES
    now: DateTime = field(default_factory=pendulum.now)

    def __post_init__(self):
        if isinstance(self.date, datetime):
            object.__setattr__(self, "date", self.date.date())

        require_positive_minutes("service_duration_minutes", self.service_duration_minutes)
        require_positive_minutes("slot_interval_minutes", self.slot_interval_minutes)

        if not isinstance(self.now, DateTime):
            if self.now.tzinfo is None:
                now = pendulum.naive(
                    self.now.year,
                    self.now.month,
                    self.now.day,
                    self.now.hour,
                    self.now.minute,
                    self.now.second,
                    self.now.microsecond,
                )
            else:
                now = pendulum.instance(self.now)
            object.__setattr__(self, "now", now)

    def local_now(self, timezone: str | None = None) -> DateTime:
        """``now`` as naive wall-clock time in ``timezone`` (or its own zone)."""
        if self.now.tzinfo is None:
            return self.now
        now = self.now.in_timezone(timezone) if timezone else self.now
        return now.naive()

    def is_today(self, timezone: str | None = None) -> bool:
        return self.local_now(timezone).date() == self.date
