"""Schedule engine — cron presets (hourly/daily/weekly)."""

from tender.core.schedule.presets import (
    build_daily_cron,
    build_hourly_cron,
    build_weekly_cron,
    decode_preset,
    summarize_triggers,
)
from tender.core.schedule.types import ScheduleMode, ScheduleSpec

__all__ = [
    "ScheduleMode",
    "ScheduleSpec",
    "build_daily_cron",
    "build_hourly_cron",
    "build_weekly_cron",
    "decode_preset",
    "summarize_triggers",
]
