"""Cron presets — build, decode and summarize hourly/daily/weekly schedules.

Only three cron shapes are understood (all UTC):

    hourly   ``M * * * *``
    daily    ``M H * * *``
    weekly   ``M H * * d1,d2,...``

Anything else is kept verbatim by the codec but cannot be decoded here;
callers must treat "present but undecodable" separately from "absent".
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from tender.core.errors import ScheduleError
from tender.core.schedule.types import ScheduleMode, ScheduleSpec, TimePreset, WeekdayPreset

_NUMBER = re.compile(r"[0-9]+")

WEEKDAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

HOURLY_MINUTES = (0, 15, 30, 45)

DAILY_TIME_PRESETS: tuple[TimePreset, ...] = (
    TimePreset(label="00:00", hour=0, minute=0),
    TimePreset(label="06:00", hour=6, minute=0),
    TimePreset(label="09:00", hour=9, minute=0),
    TimePreset(label="12:00", hour=12, minute=0),
    TimePreset(label="18:00", hour=18, minute=0),
    TimePreset(label="21:00", hour=21, minute=0),
)
DEFAULT_TIME_PRESET_INDEX = 2  # 09:00

WEEKDAY_PRESETS: tuple[WeekdayPreset, ...] = (
    WeekdayPreset(label="Mon-Fri", days=[1, 2, 3, 4, 5]),
    WeekdayPreset(label="Sat-Sun", days=[0, 6]),
    WeekdayPreset(label="Every day", days=[0, 1, 2, 3, 4, 5, 6]),
    WeekdayPreset(label="Monday", days=[1]),
    WeekdayPreset(label="Tuesday", days=[2]),
    WeekdayPreset(label="Wednesday", days=[3]),
    WeekdayPreset(label="Thursday", days=[4]),
    WeekdayPreset(label="Friday", days=[5]),
    WeekdayPreset(label="Saturday", days=[6]),
    WeekdayPreset(label="Sunday", days=[0]),
)


# ════════════════════════════════════════════════════════════
# BUILD
# ════════════════════════════════════════════════════════════


def build_hourly_cron(minute: int | str) -> str:
    """``"M * * * *"`` for a minute in 0-59."""
    value = _parse_int(str(minute))
    if value is None or not 0 <= value <= 59:
        raise ScheduleError("minute must be 0-59")
    return f"{value} * * * *"


def build_daily_cron(time_input: str) -> str:
    """``"M H * * *"`` for an ``HH:MM`` time."""
    hour, minute = parse_time_hhmm(time_input)
    return f"{minute} {hour} * * *"


def build_weekly_cron(days: str | Iterable[int], time_input: str) -> str:
    """``"M H * * d1,d2,..."`` with days deduplicated and sorted."""
    parsed = parse_days(days)
    hour, minute = parse_time_hhmm(time_input)
    return f"{minute} {hour} * * {','.join(str(d) for d in parsed)}"


def parse_time_hhmm(value: str) -> tuple[int, int]:
    """Parse ``HH:MM`` into (hour, minute)."""
    parts = value.strip().split(":")
    if len(parts) != 2:
        raise ScheduleError("time must be HH:MM")
    hour = _parse_int(parts[0])
    if hour is None or not 0 <= hour <= 23:
        raise ScheduleError("hour must be 0-23")
    minute = _parse_int(parts[1])
    if minute is None or not 0 <= minute <= 59:
        raise ScheduleError("minute must be 0-59")
    return hour, minute


def parse_days(days: str | Iterable[int]) -> list[int]:
    """Validate weekdays (0=Sun .. 6=Sat); returns a sorted, deduplicated list."""
    if isinstance(days, str):
        raw = days.split(",") if days.strip() else []
        values: list[int] = []
        for part in raw:
            value = _parse_int(part)
            if value is None:
                raise ScheduleError("days must be 0-6")
            values.append(value)
    else:
        values = list(days)

    if not values:
        raise ScheduleError("at least one day is required")
    if any(not 0 <= d <= 6 for d in values):
        raise ScheduleError("days must be 0-6")
    return sorted(set(values))


# ════════════════════════════════════════════════════════════
# DECODE
# ════════════════════════════════════════════════════════════


def decode_preset(cron: str) -> ScheduleSpec | None:
    """Decode a cron string into a preset, or None if it has another shape."""
    fields = cron.split()
    if len(fields) != 5:
        return None
    minute_f, hour_f, dom_f, month_f, dow_f = fields

    minute = _parse_int(minute_f)
    if minute is None or not 0 <= minute <= 59:
        return None
    if dom_f != "*" or month_f != "*":
        return None

    if hour_f == "*" and dow_f == "*":
        return ScheduleSpec(mode=ScheduleMode.HOURLY, minute=minute)

    hour = _parse_int(hour_f)
    if hour is None or not 0 <= hour <= 23:
        return None

    if dow_f == "*":
        return ScheduleSpec(mode=ScheduleMode.DAILY, hour=hour, minute=minute)

    try:
        days = parse_days(dow_f)
    except ScheduleError:
        return None
    return ScheduleSpec(mode=ScheduleMode.WEEKLY, hour=hour, minute=minute, days=days)


def weekday_name(day: int) -> str:
    if 0 <= day <= 6:
        return WEEKDAY_NAMES[day]
    return str(day)


def format_time(hour: int, minute: int) -> str:
    return f"{hour:02d}:{minute:02d}"


def describe_schedule(cron: str) -> str:
    """Human phrase for a cron string: preset text, ``"scheduled"``, or ``""``."""
    if not cron.strip():
        return ""
    spec = decode_preset(cron)
    if spec is None:
        return "scheduled"
    if spec.mode is ScheduleMode.HOURLY:
        return f"every hour at :{spec.minute:02d} UTC"
    if spec.mode is ScheduleMode.DAILY:
        return f"daily at {format_time(spec.hour, spec.minute)} UTC"
    days = ",".join(weekday_name(d) for d in spec.days)
    return f"weekly {days} at {format_time(spec.hour, spec.minute)} UTC"


def summarize_triggers(cron: str, manual: bool, push: bool) -> str:
    """One-line trigger summary, e.g. ``"daily at 09:30 UTC + on-demand"``."""
    parts: list[str] = []
    schedule = describe_schedule(cron)
    if schedule:
        parts.append(schedule)
    if push:
        parts.append("on-push(main)")
    if manual:
        parts.append("on-demand")
    return " + ".join(parts) if parts else "none"


# ════════════════════════════════════════════════════════════
# CATALOG DEFAULTS (UI only)
# ════════════════════════════════════════════════════════════


def time_preset_labels() -> list[str]:
    return [p.label for p in DAILY_TIME_PRESETS]


def weekday_preset_labels() -> list[str]:
    return [p.label for p in WEEKDAY_PRESETS]


def hourly_minute_labels() -> list[str]:
    return [f":{m:02d}" for m in HOURLY_MINUTES]


def nearest_quarter_index(minute: int) -> int:
    """Index into HOURLY_MINUTES closest to ``minute``; ties keep the earlier quarter."""
    best_idx, best_diff = 0, 60
    for i, quarter in enumerate(HOURLY_MINUTES):
        diff = abs(minute - quarter)
        if diff < best_diff:
            best_idx, best_diff = i, diff
    return best_idx


def default_time_preset_index(hour: int, minute: int) -> int:
    """Exact catalog match, else the 09:00 entry."""
    for i, preset in enumerate(DAILY_TIME_PRESETS):
        if preset.hour == hour and preset.minute == minute:
            return i
    return DEFAULT_TIME_PRESET_INDEX


def default_weekday_preset_index(days: list[int]) -> int:
    """Exact day-set match, else the first grouping (Mon-Fri)."""
    for i, preset in enumerate(WEEKDAY_PRESETS):
        if preset.days == list(days):
            return i
    return 0


def _parse_int(value: str) -> int | None:
    value = value.strip()
    if not _NUMBER.fullmatch(value):
        return None
    return int(value)
