import unittest

from app.data_sources.base import CallableWeatherDataSource
from app.data_sources.factory import DEFAULT_SOURCE_NAME, build_data_source
from app.domain import WeatherSnapshot


class DummySettings:
    def __init__(self, **kwargs):
        for k, v in kwargs.items():
            setattr(self, k, v)
        self.weather_source = getattr(self, "weather_source", DEFAULT_SOURCE_NAME)


class TestDataSourceFactory(unittest.TestCase):
    def test_build_open_meteo_default(self):
        ds = build_data_source(DummySettings(weather_source="open_meteo"))
        self.assertIsInstance(ds, CallableWeatherDataSource)

    def test_source_name_is_case_insensitive(self):
        ds = build_data_source(DummySettings(weather_source="Open_Meteo"))
        self.assertIsInstance(ds, CallableWeatherDataSource)

    def test_empty_source_uses_default(self):
        ds = build_data_source(DummySettings(weather_source=""))
        self.assertIsInstance(ds, CallableWeatherDataSource)

    def test_unknown_source_raises(self):
        with self.assertRaises(ValueError):
            build_data_source(DummySettings(weather_source="unknown-source"))

    def test_callable_source_delegates(self):
        snap = WeatherSnapshot(current_temperature_f=70.0, current_wind_speed_mph=3.0)
        calls = []

        def fake(lat, lon, **kwargs):
            calls.append((lat, lon, kwargs))
            return snap

        ds = CallableWeatherDataSource(snapshot=fake)
        self.assertIs(ds.fetch_weather_snapshot(1.0, 2.0, forecast_days=3), snap)
        self.assertEqual(calls, [(1.0, 2.0, {"forecast_days": 3})])


if __name__ == "__main__":
    unittest.main()
