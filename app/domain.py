"""Domain vocabulary and strict schemas for the lawn season engine.

This module defines the stable contract between the deterministic scheduling /
advisory functions and anything that renders them (the HTTP API, a UI): enums,
Pydantic models for tasks, weather snapshots, advisories and logged activities.
No interpretation logic lives here beyond construction-time validation.
"""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class _StrictBaseModel(BaseModel):
    """Base model with strict extra handling."""

    model_config = ConfigDict(extra="forbid")


class _FrozenBaseModel(BaseModel):
    """Immutable variant for statically defined configuration."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class GrowthPhase(str, Enum):
    """Coarse seasonal state of turf growth."""
    DORMANT = "dormant"
    GREEN_UP = "green-up"
    PEAK_GROWTH = "peak-growth"
    TRANSITION = "transition"


class ActivityType(str, Enum):
    """Categories a user can log."""
    MOW = "mow"
    SCALP = "scalp"
    FERTILIZE = "fertilize"
    PRE_EMERGENT = "pre-emergent"
    WATER = "water"
    AERATE = "aerate"


class TaskState(str, Enum):
    """Where a seasonal task stands relative to today and the user's completions."""
    COMPLETED = "completed"
    ACTIVE = "active"
    PAST = "past"
    UPCOMING = "upcoming"


class GrowthPhaseInfo(_FrozenBaseModel):
    """Display metadata for a growth phase."""
    phase: GrowthPhase
    label: str
    description: str
    emoji: str = ""


class SeasonalTask(_FrozenBaseModel):
    """A yearly maintenance task with an inclusive date window."""
    key: str = Field(min_length=1)
    label: str
    description: str = ""
    start_date: dt.date
    end_date: dt.date
    urgency_window_days: int = Field(default=14, ge=0)
    color: str | None = None

    @model_validator(mode="after")
    def check_window(self) -> "SeasonalTask":
        """Reject windows that end before they start."""
        if self.start_date > self.end_date:
            raise ValueError(
                f"task '{self.key}' starts {self.start_date} after it ends {self.end_date}"
            )
        return self


class NextStep(_StrictBaseModel):
    """Result of the first-match next-step scan."""
    task: SeasonalTask | None = None
    is_urgent: bool = False
    days_until_start: int = 0


class TaskStatus(_StrictBaseModel):
    """Schedule row for one task: state, badge label and timeline position."""
    task: SeasonalTask
    state: TaskState
    label: str
    days_until_start: int | None = None
    is_soon: bool = False
    timeline_start_percent: float
    timeline_end_percent: float


class WeatherSnapshot(_StrictBaseModel):
    """Current conditions plus short-range rain totals (F, mph, inches)."""
    current_temperature_f: float
    current_wind_speed_mph: float = Field(ge=0.0)
    is_raining_now: bool = False
    rain_today_inches: float = Field(default=0.0, ge=0.0)
    rain_next_48h_inches: float = Field(default=0.0, ge=0.0)
    high_today_f: float | None = None
    low_today_f: float | None = None
    conditions_label: str = "Unknown"
    soil_temperature_f: float | None = None
    observed_at: dt.datetime | None = None


class Advisory(_StrictBaseModel):
    """Go/no-go decision for one activity with the reason that decided it."""
    allowed: bool
    reason: str


class AdvisoryResult(_StrictBaseModel):
    """Independent advisories for mowing, watering and fertilizing."""
    mow: Advisory
    water: Advisory
    fertilize: Advisory


class LoggedActivity(_StrictBaseModel):
    """A maintenance activity recorded by the user."""
    category: ActivityType
    date: dt.date
    id: str | None = None
    notes: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def truncate_to_day(cls, v):
        """Accept datetimes and ISO timestamps; keep only the calendar day."""
        if isinstance(v, dt.datetime):
            return v.date()
        if isinstance(v, str) and len(v) > 10:
            return v[:10]
        return v


class CalendarDay(_StrictBaseModel):
    """One cell of a month view."""
    date: dt.date
    categories: List[ActivityType] = Field(default_factory=list)
    badges: List[ActivityType] = Field(default_factory=list)


class MonthGrid(_StrictBaseModel):
    """Month view of the day index, with the weekday offset of the 1st (Sunday = 0)."""
    year: int
    month: int = Field(ge=1, le=12)
    leading_blank_days: int = Field(ge=0, le=6)
    days: List[CalendarDay] = Field(default_factory=list)


class DashboardPayload(_StrictBaseModel):
    """Everything the home screen shows for one day."""
    date: dt.date
    growth_phase: GrowthPhaseInfo
    quick_tip: str
    next_step: NextStep
    weather: WeatherSnapshot | None = None
    advisory: AdvisoryResult | None = None
    schedule: List[TaskStatus] = Field(default_factory=list)
    completed_count: int = 0
    days_since_last_mow: int | None = None
