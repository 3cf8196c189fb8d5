"""
Tests for domain models.
"""

from datetime import datetime, time, timezone

import pendulum
import pytest

from barberslots.domain.exceptions import SlotValidationError
from barberslots.domain.models import (
    BlockedPeriod,
    ExistingBooking,
    ScheduleConfig,
    SlotRequest,
    TimeRange,
    TimeWindow,
    WeeklySchedule,
    parse_time_of_day,
)


class TestParseTimeOfDay:
    """Tests for time-of-day parsing."""

    def test_parses_hours_and_minutes(self):
        assert parse_time_of_day("09:30") == time(9, 30)

    def test_parses_seconds(self):
        """Bookings arrive as HH:mm:ss."""
        assert parse_time_of_day("10:00:15") == time(10, 0, 15)

    def test_passes_through_time_objects(self):
        assert parse_time_of_day(time(8, 45)) == time(8, 45)

    @pytest.mark.parametrize("value", ["", "9:00", "25:00", "12:60", "noon", "12-00", None, 900])
    def test_rejects_malformed_values(self, value):
        with pytest.raises(SlotValidationError):
            parse_time_of_day(value)


class TestTimeRange:
    """Tests for TimeRange model."""

    def test_create_valid_time_range(self):
        """Test creating a valid time range."""
        start = pendulum.naive(2026, 11, 25, 9, 0)
        end = pendulum.naive(2026, 11, 25, 19, 0)

        tr = TimeRange(start=start, end=end)

        assert tr.start == start
        assert tr.end == end

    def test_invalid_time_range_raises_error(self):
        """Test that creating an invalid time range raises ValueError."""
        start = pendulum.naive(2026, 11, 25, 17, 0)
        end = pendulum.naive(2026, 11, 25, 9, 0)

        with pytest.raises(ValueError, match="Start time .* must be before end time"):
            TimeRange(start=start, end=end)

    def test_overlaps(self):
        """Test overlap detection."""
        tr1 = TimeRange(start=pendulum.naive(2026, 11, 25, 9), end=pendulum.naive(2026, 11, 25, 12))
        tr2 = TimeRange(start=pendulum.naive(2026, 11, 25, 11), end=pendulum.naive(2026, 11, 25, 14))
        tr3 = TimeRange(start=pendulum.naive(2026, 11, 25, 14), end=pendulum.naive(2026, 11, 25, 17))

        assert tr1.overlaps(tr2)
        assert tr2.overlaps(tr1)
        assert not tr1.overlaps(tr3)

    def test_touching_ranges_do_not_overlap(self):
        """A range ending exactly when another begins is not a collision."""
        first = TimeRange(start=pendulum.naive(2026, 11, 25, 10), end=pendulum.naive(2026, 11, 25, 11))
        second = TimeRange(start=pendulum.naive(2026, 11, 25, 11), end=pendulum.naive(2026, 11, 25, 12))

        assert not first.overlaps(second)
        assert not second.overlaps(first)


class TestTimeWindow:
    """Tests for daily time windows."""

    def test_anchors_on_day(self):
        window = TimeWindow.parse("09:30", "17:00")

        work_range = window.on(pendulum.date(2026, 11, 25))

        assert work_range is not None
        assert work_range.start == pendulum.naive(2026, 11, 25, 9, 30)
        assert work_range.end == pendulum.naive(2026, 11, 25, 17, 0)

    def test_empty_window_has_no_range(self):
        """An inverted window is allowed and simply covers nothing."""
        window = TimeWindow.parse("10:00", "09:00")

        assert window.is_empty()
        assert window.on(pendulum.date(2026, 11, 25)) is None

    def test_str(self):
        assert str(TimeWindow.parse("12:00", "13:00")) == "12:00-13:00"


class TestWeeklySchedule:
    """Tests for per-weekday schedules."""

    def test_uses_weekday_entry_then_default(self):
        saturday = ScheduleConfig(work_hours=TimeWindow.parse("08:00", "14:00"), lunch_break=None)
        schedule = WeeklySchedule(days={5: saturday, 6: ScheduleConfig.day_off()})

        assert schedule.for_date(pendulum.date(2026, 10, 24)) == saturday  # Saturday
        assert not schedule.is_working_day(pendulum.date(2026, 10, 25))  # Sunday
        assert schedule.for_date(pendulum.date(2026, 10, 19)) == ScheduleConfig.default()  # Monday

    def test_rejects_invalid_weekdays(self):
        with pytest.raises(SlotValidationError):
            WeeklySchedule(days={7: ScheduleConfig.default()})


class TestExistingBooking:
    """Tests for ExistingBooking model."""

    def test_from_storage_record(self):
        booking = ExistingBooking.from_record({"horario": "10:00:00", "duracao_minutos": 45, "status": "confirmado"})

        assert booking.start_time == time(10, 0)
        assert booking.duration_minutes == 45
        assert not booking.is_cancelled()

    def test_from_rpc_record(self):
        booking = ExistingBooking.from_record({"start_time": "15:30:00", "duration": 30})

        assert booking.start_time == time(15, 30)
        assert booking.status == "confirmed"

    def test_cancelled_status(self):
        assert ExistingBooking(start_time=time(9, 0), duration_minutes=30, status="cancelado").is_cancelled()
        assert ExistingBooking(start_time=time(9, 0), duration_minutes=30, status="Cancelled").is_cancelled()

    @pytest.mark.parametrize("duration", [0, -15, True, 30.5])
    def test_rejects_invalid_duration(self, duration):
        with pytest.raises(SlotValidationError):
            ExistingBooking(start_time=time(9, 0), duration_minutes=duration)

    def test_rejects_cross_midnight_booking(self):
        with pytest.raises(SlotValidationError, match="crosses midnight"):
            ExistingBooking(start_time=time(23, 30), duration_minutes=60)

    def test_rejects_cross_midnight_by_seconds(self):
        with pytest.raises(SlotValidationError, match="crosses midnight"):
            ExistingBooking(start_time="23:30:30", duration_minutes=30)

    def test_booking_ending_at_midnight(self):
        assert ExistingBooking(start_time="23:30:00", duration_minutes=30).duration_minutes == 30

    def test_missing_start(self):
        with pytest.raises(SlotValidationError, match="missing a start time"):
            ExistingBooking.from_record({"duracao_minutos": 30})

    @pytest.mark.parametrize("record", [
        {"horario": "10:00:00"},
        {"start_time": "10:00:00", "duration": None},
        {"start_time": "10:00:00", "duration_minutes": None, "duracao_minutos": None},
    ])
    def test_missing_duration_occupies_default_interval(self, record, caplog):
        """A row without a joined service still blocks its time."""
        with caplog.at_level("WARNING"):
            booking = ExistingBooking.from_record(record)

        assert booking.start_time == time(10, 0)
        assert booking.duration_minutes == 30
        assert "has no duration" in caplog.text

    def test_first_non_null_duration_key_wins(self):
        booking = ExistingBooking.from_record({"start_time": "10:00:00", "duration_minutes": None, "duration": 45})

        assert booking.duration_minutes == 45


class TestBlockedPeriod:
    """Tests for blocked time."""

    def test_full_day_covers_whole_day(self):
        blocked = BlockedPeriod.full_day(reason="Dia Bloqueado").on(pendulum.date(2026, 10, 20))

        assert blocked.start == pendulum.naive(2026, 10, 20)
        assert blocked.end == pendulum.naive(2026, 10, 21)

    def test_from_record_with_timestamps(self):
        period = BlockedPeriod.from_record(
            {"type": "custom_slot", "start_time": "2026-10-20T15:00:00", "end_time": "2026-10-20T16:30:00"}
        )

        assert period.start == time(15, 0)
        assert period.end == time(16, 30)

    def test_utc_timestamps_are_read_in_barbershop_timezone(self):
        period = BlockedPeriod.from_record(
            {"start_time": "2026-10-20T18:00:00+00:00", "end_time": "2026-10-20T19:00:00+00:00"},
            timezone="America/Sao_Paulo",
        )

        assert period.start == time(15, 0)
        assert period.end == time(16, 0)

    def test_timestamps_without_offset_are_local(self):
        period = BlockedPeriod.from_record(
            {"start_time": "2026-10-20T15:00:00", "end_time": "2026-10-20T16:00:00"},
            timezone="America/Sao_Paulo",
        )

        assert period.start == time(15, 0)
        assert period.end == time(16, 0)

    def test_custom_block_requires_both_ends(self):
        with pytest.raises(SlotValidationError):
            BlockedPeriod.from_record({"type": "custom_slot", "start_time": "15:00"})

    def test_custom_block_requires_order(self):
        with pytest.raises(SlotValidationError):
            BlockedPeriod(start=time(16, 0), end=time(15, 0))


class TestSlotRequest:
    """Tests for SlotRequest validation."""

    @pytest.mark.parametrize("duration", [0, -30, False])
    def test_rejects_non_positive_duration(self, duration):
        with pytest.raises(SlotValidationError, match="service_duration_minutes"):
            SlotRequest(date=pendulum.date(2026, 10, 20), service_duration_minutes=duration)

    @pytest.mark.parametrize("interval", [0, -10])
    def test_rejects_non_positive_interval(self, interval):
        with pytest.raises(SlotValidationError, match="slot_interval_minutes"):
            SlotRequest(date=pendulum.date(2026, 10, 20), service_duration_minutes=30, slot_interval_minutes=interval)

    def test_now_defaults_to_wall_clock(self):
        request = SlotRequest(date=pendulum.date(2026, 10, 20), service_duration_minutes=30)

        assert isinstance(request.now, pendulum.DateTime)

    def test_is_today_in_timezone(self):
        """01:00 UTC on the 21st is still the 20th in Sao Paulo."""
        request = SlotRequest(
            date=pendulum.date(2026, 10, 20),
            service_duration_minutes=30,
            now=pendulum.datetime(2026, 10, 21, 1, 0, tz="UTC"),
        )

        assert request.is_today("America/Sao_Paulo")
        assert not request.is_today()

    def test_naive_datetime_now_is_wall_clock_time(self):
        """A naive stdlib datetime and a naive pendulum value mean the same moment."""
        stdlib = SlotRequest(
            date=pendulum.date(2026, 10, 20),
            service_duration_minutes=30,
            now=datetime(2026, 10, 20, 14, 0),
        )
        naive = SlotRequest(
            date=pendulum.date(2026, 10, 20),
            service_duration_minutes=30,
            now=pendulum.naive(2026, 10, 20, 14, 0),
        )

        assert stdlib.local_now("America/Sao_Paulo") == pendulum.naive(2026, 10, 20, 14, 0)
        assert naive.local_now("America/Sao_Paulo") == pendulum.naive(2026, 10, 20, 14, 0)

    def test_aware_datetime_now_is_converted(self):
        request = SlotRequest(
            date=pendulum.date(2026, 10, 20),
            service_duration_minutes=30,
            now=datetime(2026, 10, 20, 17, 0, tzinfo=timezone.utc),
        )

        assert request.local_now("America/Sao_Paulo") == pendulum.naive(2026, 10, 20, 14, 0)
