"""In-memory weather cache with TTL, intended for development and tests."""

import threading
import time
from typing import Optional

from app.app_types import CachedWeather
from app.weather_cache.base import WeatherCache

from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="weather_cache/in_memory_weather_cache")


class InMemoryWeatherCache(WeatherCache):
    """Thread-safe, TTL-aware in-memory cache. Reads do not extend the TTL."""

    def __init__(self, ttl_seconds: int = 1800) -> None:
        """Initialize the cache with a TTL in seconds."""
        logger.debug("Initializing InMemoryWeatherCache")
        self.ttl = ttl_seconds
        self._entries: dict[str, tuple[CachedWeather, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[CachedWeather]:
        """Return the cached snapshot, or None if missing/expired."""
        with self._lock:
            entry = self._entries.get(key)
            if not entry:
                return None
            value, exp = entry
            if exp < time.monotonic():
                self._entries.pop(key, None)
                return None
            return value

    def put(self, key: str, value: CachedWeather) -> None:
        """Store a snapshot, replacing any previous entry for the key."""
        with self._lock:
            self._entries[key] = (value, time.monotonic() + self.ttl)

    def delete(self, key: str) -> None:
        """Remove an entry if it exists."""
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        """Clear all entries."""
        with self._lock:
            self._entries.clear()
