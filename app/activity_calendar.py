"""Per-day aggregation of logged activities for calendar and badge views."""

from __future__ import annotations

import calendar
import datetime as dt
from typing import Dict, Iterable, List, Mapping, Optional

from app.domain import ActivityType, CalendarDay, LoggedActivity, MonthGrid

DEFAULT_BADGE_LIMIT = 3

# dict keys keep first-logged order and drop repeats
DayCategories = Dict[ActivityType, None]
CalendarDayIndex = Dict[dt.date, DayCategories]


def build_day_index(activities: Iterable[LoggedActivity]) -> CalendarDayIndex:
    """
    Group activities by calendar day, collapsing repeated categories.

    Logging "mow" twice on one day still yields a single mow entry, and each
    day keeps its categories in the order they were first logged. Nothing is
    dropped and the input is not modified.
    """
    index: CalendarDayIndex = {}
    for activity in activities:
        index.setdefault(activity.date, {}).setdefault(activity.category, None)
    return index


def day_categories(index: Mapping[dt.date, DayCategories], day: dt.date) -> List[ActivityType]:
    """All distinct categories logged on `day`, in first-logged order."""
    return list(index.get(day, ()))


def day_badges(
    index: Mapping[dt.date, DayCategories],
    day: dt.date,
    limit: int = DEFAULT_BADGE_LIMIT,
) -> List[ActivityType]:
    """Capped sample of `day_categories` for compact badge rendering."""
    return day_categories(index, day)[:max(0, limit)]


def filter_activities(
    activities: Iterable[LoggedActivity],
    category: Optional[ActivityType] = None,
) -> List[LoggedActivity]:
    """Return activities of one category; `None` keeps everything."""
    if category is None:
        return list(activities)
    return [a for a in activities if a.category == category]


def month_grid(
    index: Mapping[dt.date, DayCategories],
    year: int,
    month: int,
    *,
    badge_limit: int = DEFAULT_BADGE_LIMIT,
) -> MonthGrid:
    """Lay the index out as a Sunday-first month view."""
    first = dt.date(year, month, 1)
    _, n_days = calendar.monthrange(year, month)
    # date.weekday() is Monday=0; the grid starts on Sunday
    leading = (first.weekday() + 1) % 7

    days = []
    for offset in range(n_days):
        day = first + dt.timedelta(days=offset)
        days.append(
            CalendarDay(
                date=day,
                categories=day_categories(index, day),
                badges=day_badges(index, day, badge_limit),
            )
        )
    return MonthGrid(year=year, month=month, leading_blank_days=leading, days=days)


def days_since_last(
    activities: Iterable[LoggedActivity],
    category: ActivityType,
    today: dt.date,
) -> int | None:
    """Whole days since the most recent activity of `category`, or None if never logged."""
    dates = [a.date for a in activities if a.category == category]
    if not dates:
        return None
    return (today - max(dates)).days
