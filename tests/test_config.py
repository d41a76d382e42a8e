import os
import unittest

from app.config import Settings


class TestConfig(unittest.TestCase):
    def _with_env(self, name, value):
        previous = os.environ.get(name)
        os.environ[name] = value

        def restore():
            if previous is None:
                os.environ.pop(name, None)
            else:
                os.environ[name] = previous

        self.addCleanup(restore)

    def test_settings_defaults(self):
        previous = os.environ.pop("LAWN_FORECAST_DAYS", None)
        try:
            s = Settings()
            self.assertEqual(s.forecast_days, 3)
            self.assertEqual(s.weather_source, "open_meteo")
            self.assertEqual(s.weather_ttl_seconds, 1800)
        finally:
            if previous is not None:
                os.environ["LAWN_FORECAST_DAYS"] = previous

    def test_location_override(self):
        self._with_env("LAWN_DEFAULT_LATITUDE", "30.27")
        self._with_env("LAWN_DEFAULT_LONGITUDE", "-97.74")
        s = Settings()
        self.assertEqual(s.default_latitude, 30.27)
        self.assertEqual(s.default_longitude, -97.74)

    def test_log_level_is_uppercased(self):
        self._with_env("LAWN_LOG_LEVEL", "debug")
        self.assertEqual(Settings().log_level, "DEBUG")

    def test_unrelated_env_is_ignored(self):
        self._with_env("LAWN_NOT_A_SETTING", "whatever")
        self.assertFalse(hasattr(Settings(), "not_a_setting"))


if __name__ == "__main__":
    unittest.main()
