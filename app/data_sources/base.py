"""Interfaces and helpers for weather data sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol

from app.domain import WeatherSnapshot


class WeatherDataSource(Protocol):
    """Interface for anything that can produce a WeatherSnapshot for a location."""

    def fetch_weather_snapshot(
        self,
        latitude: float,
        longitude: float,
        *,
        timezone: str = "auto",
        forecast_days: int = 3,
    ) -> WeatherSnapshot:
        """Return current conditions plus short-range rain totals."""
        ...


@dataclass
class CallableWeatherDataSource(WeatherDataSource):
    """Wrap a callable so backends (or test doubles) can be swapped in."""

    snapshot: Callable[..., WeatherSnapshot]

    def fetch_weather_snapshot(self, *args, **kwargs) -> WeatherSnapshot:
        """Delegate to the configured snapshot callable."""
        return self.snapshot(*args, **kwargs)
