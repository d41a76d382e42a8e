"""Weather lookup facade: serve cached snapshots, fetch on miss."""
from datetime import datetime, timezone
from typing import Optional

try:
    import redis  # type: ignore
except ImportError:  # pragma: no cover - optional dependency
    redis = None

from app.app_types import CachedWeather
from app.config import settings
from app.data_sources import WeatherDataSource
from app.weather_cache import InMemoryWeatherCache, RedisWeatherCache, WeatherCache
from utils.logging_utils import get_tagged_logger, mask_url

logger = get_tagged_logger(__name__, tag="weather_manager")

# two decimals is roughly 1 km, close enough to share a forecast
LOCATION_PRECISION = 2


def _init_cache() -> WeatherCache:
    """Initialize the backing cache based on configuration."""
    redis_url = settings.weather_redis_url
    logger.debug(f"Initializing weather cache: redis_url='{mask_url(redis_url) if redis_url else 'None'}', "
                 f"redis package present: {'yes' if redis else 'no'}")
    if redis_url and redis:
        try:
            client = redis.Redis.from_url(redis_url)
            client.ping()
            logger.info("Using RedisWeatherCache", extra={"redis_url": mask_url(redis_url)})
            return RedisWeatherCache(client, ttl_seconds=settings.weather_ttl_seconds)
        except Exception as exc:  # pragma: no cover - defensive
            logger.warning("Falling back to InMemoryWeatherCache (Redis unavailable)", extra={"error": str(exc)})
    return InMemoryWeatherCache(ttl_seconds=settings.weather_ttl_seconds)


_cache: WeatherCache = _init_cache()


def use_in_memory_cache_for_tests(ttl_seconds: int = 1800) -> None:
    """Override the cache for tests to ensure isolation and determinism."""
    global _cache
    _cache = InMemoryWeatherCache(ttl_seconds=ttl_seconds)


def location_key(latitude: float, longitude: float) -> str:
    """Cache key for a coordinate pair, rounded so nearby requests share an entry."""
    return f"{round(latitude, LOCATION_PRECISION):.{LOCATION_PRECISION}f},{round(longitude, LOCATION_PRECISION):.{LOCATION_PRECISION}f}"


def get_weather(
    latitude: float,
    longitude: float,
    data_source: WeatherDataSource,
    *,
    force_refresh: bool = False,
) -> CachedWeather:
    """
    Return the snapshot for a location, fetching through `data_source` on a miss.

    Upstream errors (requests exceptions, HTTP errors) propagate to the caller.
    """
    key = location_key(latitude, longitude)
    if not force_refresh:
        cached = _cache.get(key)
        if cached is not None:
            logger.debug(f"Weather cache hit for {key}")
            return cached

    logger.info(f"Fetching weather for {key}")
    snapshot = data_source.fetch_weather_snapshot(
        latitude,
        longitude,
        forecast_days=settings.forecast_days,
    )
    fresh = CachedWeather(data=snapshot, fetched_at=datetime.now(timezone.utc))
    _cache.put(key, fresh)
    return fresh


def peek_weather(latitude: float, longitude: float) -> Optional[CachedWeather]:
    """Return a cached snapshot without fetching."""
    return _cache.get(location_key(latitude, longitude))


def clear_weather_cache():
    """Clear all cached snapshots (dev/testing)."""
    return _cache.clear()
