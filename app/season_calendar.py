"""Fixed yearly task calendar and first-match next-step selection.

The season is a declared, ordered list of `SeasonalTask` windows. Selection
scans the list in that order and stops at the first task that is active,
urgent, or merely upcoming. It is not a global "most urgent" search: a task
earlier in the list that is still upcoming wins over a later task that is
already urgent.
"""

from __future__ import annotations

import datetime as dt
from math import ceil
from typing import AbstractSet, Iterable, Sequence

from app.domain import NextStep, SeasonalTask, TaskState, TaskStatus
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="app/season_calendar")

SEASON_YEAR = 2026
SOON_THRESHOLD_DAYS = 21

_ONE_DAY = dt.timedelta(days=1)


def build_task_list(tasks: Iterable[SeasonalTask]) -> tuple[SeasonalTask, ...]:
    """
    Validate a season's task list once, at construction.

    Raises ValueError on duplicate keys. Start dates that go backwards are
    allowed (declared order still decides selection) but logged.
    """
    validated = tuple(tasks)
    seen: set[str] = set()
    for task in validated:
        if task.key in seen:
            raise ValueError(f"duplicate task key '{task.key}'")
        seen.add(task.key)

    for prev, curr in zip(validated, validated[1:]):
        if curr.start_date < prev.start_date:
            logger.warning(
                "Task list is not ordered by start date",
                extra={"task": curr.key, "previous": prev.key},
            )
    return validated


SEASON_TASKS: tuple[SeasonalTask, ...] = build_task_list([
    SeasonalTask(
        key="pre-emergent-2026",
        label="Pre-Emergent",
        description="Apply Prodiamine/Barricade before soil hits 55°F",
        start_date=dt.date(SEASON_YEAR, 2, 1),
        end_date=dt.date(SEASON_YEAR, 3, 15),
        urgency_window_days=21,
        color="orange",
    ),
    SeasonalTask(
        key="spring-scalp-2026",
        label="Spring Scalp",
        description="Scalp lawn to remove dormant thatch, promote growth",
        start_date=dt.date(SEASON_YEAR, 3, 1),
        end_date=dt.date(SEASON_YEAR, 3, 20),
        urgency_window_days=14,
        color="yellow",
    ),
    SeasonalTask(
        key="first-fert-2026",
        label="First Fertilization",
        description="9-0-24 or similar — 2 weeks after scalp",
        start_date=dt.date(SEASON_YEAR, 3, 15),
        end_date=dt.date(SEASON_YEAR, 4, 15),
        urgency_window_days=14,
        color="blue",
    ),
    SeasonalTask(
        key="aeration-2026",
        label="Aeration",
        description="Core aerate to reduce compaction",
        start_date=dt.date(SEASON_YEAR, 5, 1),
        end_date=dt.date(SEASON_YEAR, 6, 30),
        urgency_window_days=14,
        color="purple",
    ),
    SeasonalTask(
        key="second-fert-2026",
        label="2nd Fertilization",
        description="Continue 4-6 week cycle",
        start_date=dt.date(SEASON_YEAR, 5, 1),
        end_date=dt.date(SEASON_YEAR, 5, 31),
        urgency_window_days=14,
        color="blue",
    ),
    SeasonalTask(
        key="third-fert-2026",
        label="3rd Fertilization",
        description="Mid-summer push",
        start_date=dt.date(SEASON_YEAR, 6, 15),
        end_date=dt.date(SEASON_YEAR, 7, 15),
        urgency_window_days=14,
        color="blue",
    ),
    SeasonalTask(
        key="fourth-fert-2026",
        label="4th Fertilization",
        description="Late summer — light K-heavy formula",
        start_date=dt.date(SEASON_YEAR, 8, 1),
        end_date=dt.date(SEASON_YEAR, 9, 1),
        urgency_window_days=14,
        color="blue",
    ),
])


def _as_date(value: dt.date | dt.datetime) -> dt.date:
    """Drop the time component, if any."""
    if isinstance(value, dt.datetime):
        return value.date()
    return value


def days_until(target: dt.date, today: dt.date | dt.datetime) -> int:
    """
    Whole days from `today` to the start of `target`, rounding partial days up.

    A plain date gives the exact day difference. A datetime is measured against
    midnight of `target` in the same tzinfo, so 10:00 on Jan 15 is 17 days
    (16.6 rounded up) from Feb 1.
    """
    if isinstance(today, dt.datetime):
        target_start = dt.datetime.combine(target, dt.time.min, tzinfo=today.tzinfo)
        return ceil((target_start - today) / _ONE_DAY)
    return (target - today).days


def select_next_step(tasks: Sequence[SeasonalTask], today: dt.date | dt.datetime) -> NextStep:
    """Pure function: return the first task in list order that is active, urgent or upcoming."""
    for task in tasks:
        days_until_start = days_until(task.start_date, today)
        days_until_end = days_until(task.end_date, today)

        # window currently open
        if days_until_start <= 0 and days_until_end > 0:
            return NextStep(task=task, is_urgent=True, days_until_start=0)

        # inside the urgency lead time
        if 0 < days_until_start <= task.urgency_window_days:
            return NextStep(task=task, is_urgent=True, days_until_start=days_until_start)

        # upcoming; stops the scan even if a later task is more pressing
        if days_until_start > 0:
            return NextStep(task=task, is_urgent=False, days_until_start=days_until_start)

    return NextStep(task=None, is_urgent=False, days_until_start=0)


def is_task_active(task: SeasonalTask, today: dt.date | dt.datetime) -> bool:
    """Inclusive window membership: start <= today <= end."""
    day = _as_date(today)
    return task.start_date <= day <= task.end_date


def timeline_percent(day: dt.date, year: int = SEASON_YEAR) -> float:
    """Position of `day` between Jan 1 and Dec 31 of `year`, clamped to 0-100."""
    year_start = dt.date(year, 1, 1)
    year_end = dt.date(year, 12, 31)
    pct = (day - year_start) / (year_end - year_start) * 100.0
    return max(0.0, min(100.0, pct))


def task_status(
    task: SeasonalTask,
    today: dt.date | dt.datetime,
    completed: AbstractSet[str] = frozenset(),
) -> TaskStatus:
    """Classify one task as completed, active, past or upcoming (in that precedence)."""
    day = _as_date(today)
    common = {
        "task": task,
        "timeline_start_percent": timeline_percent(task.start_date, task.start_date.year),
        "timeline_end_percent": timeline_percent(task.end_date, task.start_date.year),
    }

    if task.key in completed:
        return TaskStatus(state=TaskState.COMPLETED, label="Completed", **common)
    if is_task_active(task, day):
        return TaskStatus(state=TaskState.ACTIVE, label="Active Now", **common)
    if day > task.end_date:
        return TaskStatus(state=TaskState.PAST, label="Past Window", **common)

    days_away = days_until(task.start_date, today)
    return TaskStatus(
        state=TaskState.UPCOMING,
        label=f"In {days_away} days",
        days_until_start=days_away,
        is_soon=days_away <= SOON_THRESHOLD_DAYS,
        **common,
    )


def season_schedule(
    tasks: Sequence[SeasonalTask],
    today: dt.date | dt.datetime,
    completed: AbstractSet[str] = frozenset(),
) -> list[TaskStatus]:
    """Status rows for every task, in declared order."""
    return [task_status(task, today, completed) for task in tasks]


def completed_count(tasks: Sequence[SeasonalTask], completed: AbstractSet[str]) -> int:
    """Count listed tasks marked done; unknown keys are ignored."""
    return sum(1 for task in tasks if task.key in completed)


def toggle_completion(completed: AbstractSet[str], key: str) -> frozenset[str]:
    """Return a new completion set with `key` flipped. The input is left untouched."""
    if key in completed:
        return frozenset(k for k in completed if k != key)
    return frozenset(completed) | {key}
