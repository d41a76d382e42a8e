"""Weather snapshot cache backends."""

from .base import WeatherCache
from .memory import InMemoryWeatherCache
from .redis import RedisWeatherCache

__all__ = [
    "WeatherCache",
    "InMemoryWeatherCache",
    "RedisWeatherCache",
]
