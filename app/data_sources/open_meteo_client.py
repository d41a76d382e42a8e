"""Fetch current conditions and short-range rain totals from the Open-Meteo API."""
from __future__ import annotations

import datetime as dt
import math
from typing import Any, Optional, Sequence

import requests

from app.domain import WeatherSnapshot
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag='open_meteo_client')

try:
    import requests_cache
    from retry_requests import retry
    logger.info("Using requests_cache and retry_requests")
except ImportError:
    logger.warning("Failed to import requests_cache and retry_requests.  Proceeding without caching.")
    requests_cache = None
    retry = None

if requests_cache and retry:
    cache_session = requests_cache.CachedSession('.cache', expire_after=900)
    session = retry(cache_session, retries=5, backoff_factor=0.2)
else:
    session = requests.Session()

OPEN_METEO_WEATHER_URL = "https://api.open-meteo.com/v1/forecast"

CURRENT_VARS = ["temperature_2m", "wind_speed_10m", "rain", "weather_code"]
DAILY_VARS = ["temperature_2m_max", "temperature_2m_min", "precipitation_sum"]

EXPECTED_UNITS = {
    "temperature_2m": "°F",
    "wind_speed_10m": "mph",
    "rain": "inch",
    "temperature_2m_max": "°F",
    "temperature_2m_min": "°F",
    "precipitation_sum": "inch",
}

# WMO weather interpretation codes, checked in order against the upper bound.
_WEATHER_CODE_LABELS: Sequence[tuple[int, str]] = (
    (0, "Clear"),
    (3, "Partly Cloudy"),
    (48, "Foggy"),
    (57, "Drizzle"),
    (65, "Rain"),
    (67, "Freezing Rain"),
    (77, "Snow"),
    (82, "Rain Showers"),
    (86, "Snow Showers"),
)


def weather_code_to_text(code: Optional[int]) -> str:
    """Translate a WMO weather code into a short label."""
    if code is None:
        return "Unknown"
    for upper, label in _WEATHER_CODE_LABELS:
        if code <= upper:
            return label
    if code >= 95:
        return "Thunderstorm"
    return "Unknown"


def _warn_on_unexpected_units(units: dict, *, context: str):
    """Log a warning if Open-Meteo returns units we did not request."""
    if not units:
        return
    for field, expected in EXPECTED_UNITS.items():
        actual = units.get(field)
        if actual and actual != expected:
            logger.warning(
                "Unexpected Open-Meteo unit",
                extra={"context": context, "field": field, "unit": actual, "expected": expected},
            )


def _daily_value(values: Sequence[Any] | None, idx: int) -> float:
    """Return a daily series entry, treating missing or null values as 0."""
    if not values or idx >= len(values):
        return 0.0
    return float(values[idx] or 0.0)


def round_half_up(value: float) -> int:
    """Round to the nearest whole number with .5 going up, as the app displays readings."""
    return math.floor(value + 0.5)


def _parse_time(value: Optional[str]) -> Optional[dt.datetime]:
    """Parse Open-Meteo's local ISO timestamp; None when absent or malformed."""
    if not value:
        return None
    try:
        return dt.datetime.fromisoformat(value)
    except ValueError:
        logger.debug(f"Could not parse Open-Meteo time {value!r}")
        return None


def snapshot_from_payload(data: dict) -> WeatherSnapshot:
    """Map a raw Open-Meteo forecast response onto a WeatherSnapshot."""
    current = data["current"]
    daily = data["daily"]
    _warn_on_unexpected_units(data.get("current_units") or {}, context="current")
    _warn_on_unexpected_units(data.get("daily_units") or {}, context="daily")

    precip = daily.get("precipitation_sum")
    rain_today = _daily_value(precip, 0)
    rain_next_48h = rain_today + _daily_value(precip, 1)

    return WeatherSnapshot(
        current_temperature_f=round_half_up(current["temperature_2m"]),
        current_wind_speed_mph=round_half_up(current.get("wind_speed_10m") or 0.0),
        is_raining_now=(current.get("rain") or 0.0) > 0,
        rain_today_inches=rain_today,
        rain_next_48h_inches=rain_next_48h,
        high_today_f=round_half_up(_daily_value(daily.get("temperature_2m_max"), 0)),
        low_today_f=round_half_up(_daily_value(daily.get("temperature_2m_min"), 0)),
        conditions_label=weather_code_to_text(current.get("weather_code")),
        soil_temperature_f=None,
        observed_at=_parse_time(current.get("time")),
    )


def fetch_weather_snapshot(latitude: float,
                           longitude: float,
                           *,
                           timezone: str = "auto",
                           forecast_days: int = 3,
                           ) -> WeatherSnapshot:
    """Fetch today's conditions and the next two days of rain for the given coordinates."""
    params = {
        "latitude": latitude,
        "longitude": longitude,
        "current": ",".join(CURRENT_VARS),
        "daily": ",".join(DAILY_VARS),
        "temperature_unit": "fahrenheit",
        "wind_speed_unit": "mph",
        "precipitation_unit": "inch",
        "timezone": timezone,
        "forecast_days": forecast_days,
    }

    logger.debug(f"Requesting Open-Meteo forecast for ({latitude}, {longitude})")
    resp = session.get(OPEN_METEO_WEATHER_URL, params=params, timeout=10)
    resp.raise_for_status()
    return snapshot_from_payload(resp.json())
