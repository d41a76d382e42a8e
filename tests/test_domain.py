import datetime as dt

import pytest
from pydantic import ValidationError

from app.domain import ActivityType, LoggedActivity, SeasonalTask, WeatherSnapshot


def test_seasonal_task_is_frozen():
    task = SeasonalTask(key="k", label="K", start_date=dt.date(2026, 1, 1), end_date=dt.date(2026, 1, 2))
    with pytest.raises(ValidationError):
        task.label = "changed"


def test_seasonal_task_requires_key():
    with pytest.raises(ValidationError):
        SeasonalTask(key="", label="K", start_date=dt.date(2026, 1, 1), end_date=dt.date(2026, 1, 2))


def test_single_day_window_is_allowed():
    day = dt.date(2026, 4, 1)
    assert SeasonalTask(key="k", label="K", start_date=day, end_date=day).urgency_window_days == 14


def test_weather_snapshot_rejects_negative_rain():
    with pytest.raises(ValidationError):
        WeatherSnapshot(current_temperature_f=70.0, current_wind_speed_mph=0.0, rain_today_inches=-0.1)


def test_weather_snapshot_rejects_unknown_fields():
    with pytest.raises(ValidationError):
        WeatherSnapshot(current_temperature_f=70.0, current_wind_speed_mph=0.0, humidity=40)


def test_logged_activity_rejects_unknown_category():
    with pytest.raises(ValidationError):
        LoggedActivity(category="weed", date="2026-05-01")


def test_logged_activity_keeps_plain_dates():
    a = LoggedActivity(category="water", date=dt.date(2026, 5, 1), notes="front yard")
    assert a.date == dt.date(2026, 5, 1)
    assert a.category == ActivityType.WATER
