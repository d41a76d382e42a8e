"""Shared dataclasses and lightweight types used across modules."""

from dataclasses import dataclass
from datetime import datetime

from app.domain import WeatherSnapshot


@dataclass
class CachedWeather:
    """WeatherSnapshot payload with the timestamp it was fetched."""
    data: WeatherSnapshot
    fetched_at: datetime
