"""
Conversion of stored schedule records into domain schedules.

Barber rows have carried their schedule in several shapes over time:

* nested ``{"workHours": {...}, "lunchBreak": {...}}`` (``schedule_config``)
* flat ``work_hours_start`` / ``work_hours_end`` columns on the barber row
* per-weekday ``{"days": {"monday": {...}, ...}}``
* a ``work_days`` list using storage numbering (0=Sunday, 6=Saturday)

All of them are normalised here, once, so the slot calculator only ever sees
``ScheduleConfig`` / ``WeeklySchedule``.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, Iterable, Mapping, Optional

from ..domain.exceptions import ScheduleFormatError, SlotValidationError
from ..domain.models import (
    DEFAULT_LUNCH_BREAK,
    DEFAULT_WORK_HOURS,
    ScheduleConfig,
    TimeWindow,
    WeeklySchedule,
)

WEEKDAY_NAMES = {
    "monday": 0, "segunda": 0,
    "tuesday": 1, "terca": 1, "terça": 1,
    "wednesday": 2, "quarta": 2,
    "thursday": 3, "quinta": 3,
    "friday": 4, "sexta": 4,
    "saturday": 5, "sabado": 5, "sábado": 5,
    "sunday": 6, "domingo": 6,
}


def storage_day_to_weekday(day: int) -> int:
    """Convert storage numbering (0=Sunday) to Python numbering (0=Monday)."""
    if isinstance(day, bool) or not isinstance(day, int) or day not in range(7):
        raise ScheduleFormatError(f"work_days entries must be between 0 and 6, got {day!r}")
    return (day - 1) % 7


def _window(data: Any, field_name: str) -> TimeWindow:
    if not isinstance(data, Mapping):
        raise ScheduleFormatError(f"'{field_name}' must be an object with start and end")
    try:
        return TimeWindow.parse(data.get("start"), data.get("end"))
    except SlotValidationError as exc:
        raise ScheduleFormatError(f"Invalid '{field_name}': {exc}") from exc


def _flat_window(record: Mapping, start_key: str, end_key: str, default: TimeWindow) -> TimeWindow:
    start = record.get(start_key) or default.start
    end = record.get(end_key) or default.end
    try:
        return TimeWindow.parse(start, end)
    except SlotValidationError as exc:
        raise ScheduleFormatError(f"Invalid '{start_key}'/'{end_key}': {exc}") from exc


def schedule_from_record(record: Optional[Mapping]) -> ScheduleConfig:
    """
    Build a single-day schedule from a nested or flat record.

    Missing pieces fall back to 09:00-19:00 with a 12:00-13:00 lunch break.
    An explicit ``"lunchBreak": null`` means no lunch break at all.

    Raises:
        ScheduleFormatError: If the record cannot be read
    """
    if not record:
        return ScheduleConfig.default()

    if not isinstance(record, Mapping):
        raise ScheduleFormatError(f"Schedule record must be an object, got {type(record).__name__}")

    if "workHours" in record:
        work_hours = _window(record["workHours"], "workHours")
    else:
        work_hours = _flat_window(record, "work_hours_start", "work_hours_end", DEFAULT_WORK_HOURS)

    if "lunchBreak" in record:
        lunch_break = None if record["lunchBreak"] is None else _window(record["lunchBreak"], "lunchBreak")
    elif "lunch_start" in record or "lunch_end" in record:
        lunch_break = _flat_window(record, "lunch_start", "lunch_end", DEFAULT_LUNCH_BREAK)
    else:
        lunch_break = DEFAULT_LUNCH_BREAK

    active = record.get("active", True)
    if not isinstance(active, bool):
        raise ScheduleFormatError(f"'active' must be true or false, got {active!r}")

    return ScheduleConfig(work_hours=work_hours, lunch_break=lunch_break, active=active)


def _weekday_key(key: Any) -> int:
    if isinstance(key, str):
        name = key.strip().lower()
        if name in WEEKDAY_NAMES:
            return WEEKDAY_NAMES[name]
        if name.isdigit():
            return storage_day_to_weekday(int(name))
        raise ScheduleFormatError(f"Unknown weekday '{key}'")
    return storage_day_to_weekday(key)


def _apply_work_days(schedule: WeeklySchedule, work_days: Iterable[int]) -> WeeklySchedule:
    if isinstance(work_days, (str, bytes)) or not isinstance(work_days, Iterable):
        raise ScheduleFormatError("work_days must be a list of day numbers")

    working = {storage_day_to_weekday(day) for day in work_days}
    days: Dict[int, ScheduleConfig] = {}

    for weekday in range(7):
        config = schedule.days.get(weekday, schedule.default)
        days[weekday] = config if weekday in working else replace(config, active=False)

    return WeeklySchedule(days=days, default=schedule.default)


def weekly_schedule_from_record(record: Optional[Mapping]) -> WeeklySchedule:
    """
    Build a weekly schedule from a barber row or a stored schedule config.

    Raises:
        ScheduleFormatError: If the record cannot be read
    """
    if not record:
        return WeeklySchedule()

    if not isinstance(record, Mapping):
        raise ScheduleFormatError(f"Schedule record must be an object, got {type(record).__name__}")

    if "days" in record:
        per_day = record["days"]
        if not isinstance(per_day, Mapping):
            raise ScheduleFormatError("'days' must map weekdays to schedules")

        default = schedule_from_record(record.get("default"))
        days = {_weekday_key(key): schedule_from_record(value) for key, value in per_day.items()}
        schedule = WeeklySchedule(days=days, default=default)
    elif record.get("schedule_config"):
        nested = record["schedule_config"]
        if isinstance(nested, Mapping) and "days" in nested:
            schedule = weekly_schedule_from_record(nested)
        else:
            schedule = WeeklySchedule.uniform(schedule_from_record(nested))
    else:
        schedule = WeeklySchedule.uniform(schedule_from_record(record))

    work_days = record.get("work_days")
    if work_days is not None:
        schedule = _apply_work_days(schedule, work_days)

    return schedule
