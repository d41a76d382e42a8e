"""
Compose the deterministic components into the home-screen payload.

Nothing here fetches or persists: the caller supplies the day, an optional
weather snapshot, the activity history and the completed task keys.
"""

from __future__ import annotations

import datetime as dt
from typing import AbstractSet, Iterable, Optional, Sequence

from .activity_calendar import days_since_last
from .advisory_engine import evaluate_advisory
from .domain import ActivityType, DashboardPayload, LoggedActivity, SeasonalTask, WeatherSnapshot
from .growth_phase import classify_growth_phase, quick_tip
from .season_calendar import SEASON_TASKS, completed_count, season_schedule, select_next_step


def build_dashboard(
    today: dt.date,
    *,
    weather: Optional[WeatherSnapshot] = None,
    activities: Iterable[LoggedActivity] = (),
    completed: AbstractSet[str] = frozenset(),
    tasks: Sequence[SeasonalTask] = SEASON_TASKS,
) -> DashboardPayload:
    """Build the dashboard for `today`; advisories are omitted when weather is unavailable."""
    activities = list(activities)
    return DashboardPayload(
        date=today,
        growth_phase=classify_growth_phase(today),
        quick_tip=quick_tip(today),
        next_step=select_next_step(tasks, today),
        weather=weather,
        advisory=evaluate_advisory(weather) if weather is not None else None,
        schedule=season_schedule(tasks, today, completed),
        completed_count=completed_count(tasks, completed),
        days_since_last_mow=days_since_last(activities, ActivityType.MOW, today),
    )
