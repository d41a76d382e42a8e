"""Shared protocol for weather snapshot caches."""

from typing import Optional, Protocol

from app.app_types import CachedWeather


class WeatherCache(Protocol):
    """Protocol for weather cache backends keyed by a location string."""
    def get(self, key: str) -> Optional[CachedWeather]:
        """Return the cached snapshot, or None if missing or expired."""

    def put(self, key: str, value: CachedWeather) -> None:
        """Store a snapshot for the configured TTL."""

    def delete(self, key: str) -> None:
        """Delete an entry without raising if it is absent."""

    def clear(self) -> None:
        """Clear all cached snapshots."""
