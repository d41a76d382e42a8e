"""Redis-backed weather cache with TTL."""

import json
from datetime import datetime
from typing import Optional

from app.app_types import CachedWeather
from app.domain import WeatherSnapshot
from app.weather_cache.base import WeatherCache
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="weather_cache/redis_weather_cache")


class RedisWeatherCache(WeatherCache):
    """Redis-backed snapshots stored as JSON; expiry is left to Redis."""

    def __init__(self, client, ttl_seconds: int = 1800, prefix: str = "weather:") -> None:
        """Initialize with a Redis client, TTL and key prefix."""
        logger.debug("Initializing RedisWeatherCache")
        self.client = client
        self.ttl = ttl_seconds
        self.prefix = prefix

    def _key(self, key: str) -> str:
        """Return the Redis key for a location key."""
        return f"{self.prefix}{key}"

    @staticmethod
    def _dump(value: CachedWeather) -> bytes:
        """Serialize a cached snapshot to JSON bytes."""
        data = {
            "fetched_at": value.fetched_at.isoformat(),
            "data": value.data.model_dump(mode="json"),
        }
        return json.dumps(data).encode("utf-8")

    @staticmethod
    def _load(raw: bytes) -> Optional[CachedWeather]:
        """Deserialize JSON bytes; None if the payload is unreadable."""
        try:
            data = json.loads(raw.decode("utf-8"))
            return CachedWeather(
                data=WeatherSnapshot.model_validate(data["data"]),
                fetched_at=datetime.fromisoformat(data["fetched_at"]),
            )
        except Exception as exc:
            logger.error("Failed to deserialize cached weather: %s", exc)
            return None

    def get(self, key: str) -> Optional[CachedWeather]:
        """Fetch a cached snapshot, or None if missing/invalid/unreachable."""
        try:
            raw = self.client.get(self._key(key))
        except Exception as exc:  # pragma: no cover - defensive
            logger.error("Failed to read weather from Redis: %s", exc)
            return None
        if not raw:
            return None
        return self._load(raw)

    def put(self, key: str, value: CachedWeather) -> None:
        """Write a snapshot with the configured TTL; failures are logged, not raised."""
        try:
            self.client.setex(self._key(key), self.ttl, self._dump(value))
        except Exception as exc:  # pragma: no cover - defensive
            logger.error("Failed to write weather to Redis: %s", exc)

    def delete(self, key: str) -> None:
        """Delete an entry if present."""
        try:
            self.client.delete(self._key(key))
        except Exception as exc:  # pragma: no cover - defensive
            logger.error("Failed to delete weather from Redis: %s", exc)

    def clear(self) -> None:
        """Best-effort clear for all entries under the configured prefix."""
        try:
            for key in self.client.scan_iter(f"{self.prefix}*"):
                self.client.delete(key)
        except Exception as exc:  # pragma: no cover - defensive
            logger.error("Failed to clear weather from Redis: %s", exc)
