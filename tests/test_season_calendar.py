import datetime as dt

import pytest

from app.domain import SeasonalTask, TaskState
from app.season_calendar import (
    SEASON_TASKS,
    build_task_list,
    completed_count,
    days_until,
    is_task_active,
    season_schedule,
    select_next_step,
    task_status,
    timeline_percent,
    toggle_completion,
)


def make_task(key="pre-emergent", start=(2026, 2, 1), end=(2026, 3, 15), urgency=21):
    return SeasonalTask(
        key=key,
        label=key.title(),
        start_date=dt.date(*start),
        end_date=dt.date(*end),
        urgency_window_days=urgency,
    )


def test_inside_urgency_window_is_urgent():
    step = select_next_step([make_task()], dt.date(2026, 1, 15))
    assert step.task.key == "pre-emergent"
    assert step.is_urgent is True
    assert step.days_until_start == 17


def test_outside_urgency_window_is_upcoming_only():
    step = select_next_step([make_task()], dt.date(2026, 1, 1))
    assert step.task.key == "pre-emergent"
    assert step.is_urgent is False
    assert step.days_until_start == 31


def test_active_window_reports_zero_days():
    step = select_next_step([make_task()], dt.date(2026, 2, 20))
    assert step.is_urgent is True
    assert step.days_until_start == 0


def test_urgency_boundary_is_inclusive():
    task = make_task(urgency=21)
    at_edge = select_next_step([task], task.start_date - dt.timedelta(days=21))
    assert at_edge.is_urgent is True
    assert at_edge.days_until_start == 21

    one_further = select_next_step([task], task.start_date - dt.timedelta(days=22))
    assert one_further.is_urgent is False
    assert one_further.days_until_start == 22


def test_first_match_wins_over_later_urgent_task():
    upcoming = make_task(key="summer", start=(2026, 6, 1), end=(2026, 6, 30), urgency=7)
    active = make_task(key="spring", start=(2026, 3, 1), end=(2026, 6, 1), urgency=7)
    step = select_next_step([upcoming, active], dt.date(2026, 5, 1))
    assert step.task.key == "summer"
    assert step.is_urgent is False
    assert step.days_until_start == 31


def test_passed_tasks_are_skipped():
    step = select_next_step(SEASON_TASKS, dt.date(2026, 3, 16))
    assert step.task.key == "spring-scalp-2026"
    assert step.is_urgent is True
    assert step.days_until_start == 0


def test_last_day_counts_as_passed_for_selection_but_active_for_status():
    task = make_task()
    step = select_next_step([task], task.end_date)
    assert step.task is None
    assert is_task_active(task, task.end_date)


def test_nothing_left_in_season():
    step = select_next_step(SEASON_TASKS, dt.date(2026, 10, 19))
    assert step.task is None
    assert step.is_urgent is False
    assert step.days_until_start == 0


def test_default_season_after_spring_points_at_aeration():
    step = select_next_step(SEASON_TASKS, dt.date(2026, 4, 20))
    assert step.task.key == "aeration-2026"
    assert step.is_urgent is True
    assert step.days_until_start == 11


def test_partial_days_round_up_for_datetimes():
    assert days_until(dt.date(2026, 2, 1), dt.datetime(2026, 1, 15, 10, 0)) == 17
    assert days_until(dt.date(2026, 2, 1), dt.date(2026, 1, 15)) == 17
    step = select_next_step([make_task()], dt.datetime(2026, 1, 15, 10, 0))
    assert step.days_until_start == 17


def test_selection_is_idempotent():
    today = dt.date(2026, 1, 15)
    assert select_next_step(SEASON_TASKS, today) == select_next_step(SEASON_TASKS, today)


def test_is_task_active_inclusive_bounds():
    task = make_task()
    assert is_task_active(task, dt.date(2026, 2, 1))
    assert is_task_active(task, dt.date(2026, 3, 15))
    assert not is_task_active(task, dt.date(2026, 1, 31))
    assert not is_task_active(task, dt.date(2026, 3, 16))


def test_task_status_precedence():
    task = make_task()
    done = task_status(task, dt.date(2026, 2, 10), {"pre-emergent"})
    assert done.state == TaskState.COMPLETED
    assert done.label == "Completed"

    active = task_status(task, dt.date(2026, 2, 10))
    assert active.state == TaskState.ACTIVE
    assert active.label == "Active Now"

    past = task_status(task, dt.date(2026, 3, 16))
    assert past.state == TaskState.PAST
    assert past.label == "Past Window"


def test_upcoming_status_flags_soon_within_three_weeks():
    task = make_task()
    soon = task_status(task, dt.date(2026, 1, 15))
    assert soon.state == TaskState.UPCOMING
    assert soon.label == "In 17 days"
    assert soon.days_until_start == 17
    assert soon.is_soon is True

    later = task_status(task, dt.date(2026, 1, 1))
    assert later.is_soon is False
    assert later.label == "In 31 days"


def test_season_schedule_keeps_declared_order():
    rows = season_schedule(SEASON_TASKS, dt.date(2026, 3, 5), {"pre-emergent-2026"})
    assert [r.task.key for r in rows] == [t.key for t in SEASON_TASKS]
    assert rows[0].state == TaskState.COMPLETED
    assert rows[1].state == TaskState.ACTIVE
    assert rows[-1].state == TaskState.UPCOMING


def test_timeline_percent_is_clamped():
    assert timeline_percent(dt.date(2026, 1, 1), 2026) == 0.0
    assert timeline_percent(dt.date(2026, 12, 31), 2026) == 100.0
    assert timeline_percent(dt.date(2027, 3, 1), 2026) == 100.0
    assert timeline_percent(dt.date(2025, 12, 1), 2026) == 0.0
    assert 0.0 < timeline_percent(dt.date(2026, 7, 1), 2026) < 100.0


def test_toggle_completion_returns_new_set():
    original = frozenset({"a"})
    added = toggle_completion(original, "b")
    removed = toggle_completion(added, "a")
    assert added == {"a", "b"}
    assert removed == {"b"}
    assert original == {"a"}


def test_completed_count_ignores_unknown_keys():
    assert completed_count(SEASON_TASKS, {"aeration-2026", "not-a-task"}) == 1


def test_season_tasks_are_well_formed():
    assert len(SEASON_TASKS) == 7
    assert len({t.key for t in SEASON_TASKS}) == 7
    assert all(t.start_date <= t.end_date for t in SEASON_TASKS)
    assert SEASON_TASKS[0].key == "pre-emergent-2026"


def test_build_task_list_rejects_duplicate_keys():
    with pytest.raises(ValueError):
        build_task_list([make_task(key="x"), make_task(key="x")])


def test_task_window_must_not_be_inverted():
    with pytest.raises(ValueError):
        make_task(start=(2026, 4, 1), end=(2026, 3, 1))


def test_negative_urgency_is_rejected():
    with pytest.raises(ValueError):
        make_task(urgency=-1)
