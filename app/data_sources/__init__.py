"""Data source factories for plugging different weather backends."""

from .base import CallableWeatherDataSource, WeatherDataSource
from .factory import build_data_source
from .open_meteo_client import fetch_weather_snapshot, snapshot_from_payload, weather_code_to_text

__all__ = [
    "build_data_source",
    "WeatherDataSource",
    "CallableWeatherDataSource",
    "fetch_weather_snapshot",
    "snapshot_from_payload",
    "weather_code_to_text",
]
