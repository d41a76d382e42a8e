import json
import unittest
from datetime import datetime, timezone

from app.app_types import CachedWeather
from app.domain import WeatherSnapshot
from app.weather_cache.redis import RedisWeatherCache


class FakeRedis:
    def __init__(self):
        self.store = {}
        self.expires = {}

    def setex(self, key, ttl, value):
        self.store[key] = value
        self.expires[key] = ttl

    def get(self, key):
        return self.store.get(key)

    def delete(self, key):
        self.store.pop(key, None)
        self.expires.pop(key, None)

    def scan_iter(self, pattern):
        prefix = pattern.rstrip("*")
        return [k for k in list(self.store.keys()) if k.startswith(prefix)]


def _sample():
    snap = WeatherSnapshot(
        current_temperature_f=88.0,
        current_wind_speed_mph=12.0,
        is_raining_now=False,
        rain_today_inches=0.1,
        rain_next_48h_inches=0.6,
        high_today_f=94.0,
        low_today_f=72.0,
        conditions_label="Partly Cloudy",
        observed_at=datetime(2026, 6, 20, 15, 0),
    )
    return CachedWeather(data=snap, fetched_at=datetime(2026, 6, 20, 20, 5, tzinfo=timezone.utc))


class TestRedisWeatherCache(unittest.TestCase):
    def test_put_get_delete_round_trip(self):
        client = FakeRedis()
        cache = RedisWeatherCache(client, ttl_seconds=900, prefix="weather:")
        value = _sample()

        cache.put("32.78,-96.80", value)
        key = "weather:32.78,-96.80"
        self.assertIn(key, client.store)
        self.assertEqual(client.expires[key], 900)
        stored = json.loads(client.store[key].decode("utf-8"))
        self.assertEqual(stored["data"]["conditions_label"], "Partly Cloudy")

        fetched = cache.get("32.78,-96.80")
        self.assertIsInstance(fetched, CachedWeather)
        self.assertEqual(fetched.data, value.data)
        self.assertEqual(fetched.fetched_at, value.fetched_at)

        cache.delete("32.78,-96.80")
        self.assertIsNone(cache.get("32.78,-96.80"))

    def test_clear_removes_only_prefixed_keys(self):
        client = FakeRedis()
        cache = RedisWeatherCache(client, prefix="weather:")
        client.store["other:key"] = b"keep"
        cache.put("a", _sample())
        cache.put("b", _sample())

        cache.clear()

        self.assertEqual(client.store, {"other:key": b"keep"})

    def test_corrupt_payload_reads_as_miss(self):
        client = FakeRedis()
        cache = RedisWeatherCache(client, prefix="weather:")
        client.store["weather:bad"] = b"not-json"
        self.assertIsNone(cache.get("bad"))

    def test_missing_key_is_none(self):
        self.assertIsNone(RedisWeatherCache(FakeRedis()).get("nowhere"))


if __name__ == "__main__":
    unittest.main()
