"""Schedule preset types."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class ScheduleMode(str, Enum):
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"


class ScheduleSpec(BaseModel):
    """Decoded form of a preset-shaped cron string — derived, never stored."""

    mode: ScheduleMode
    minute: int = 0
    hour: int = 0
    days: list[int] = Field(default_factory=list)  # 0=Sun .. 6=Sat, weekly only


class TimePreset(BaseModel):
    label: str
    hour: int
    minute: int


class WeekdayPreset(BaseModel):
    label: str
    days: list[int]
