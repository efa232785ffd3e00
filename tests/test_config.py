import os
import unittest

from agriconnect.config import Settings


class _EnvPatch:
    """Temporarily set (or clear, with None) environment variables."""

    def __init__(self, **values):
        self.values = values
        self.previous = {}

    def __enter__(self):
        for key, value in self.values.items():
            self.previous[key] = os.environ.get(key)
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        return self

    def __exit__(self, *exc):
        for key, value in self.previous.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value


class TestConfig(unittest.TestCase):
    def test_settings_defaults(self):
        with _EnvPatch(AGRICONNECT_WEATHER_CACHE_TTL_SECONDS=None, AGRICONNECT_FORECAST_DAYS=None,
                       AGRICONNECT_ENVIRONMENT=None):
            s = Settings()
            self.assertEqual(s.weather_cache_ttl_seconds, 1800)
            self.assertEqual(s.forecast_days, 7)
            self.assertEqual(s.default_region, "Gaborone")
            self.assertFalse(s.is_production)

    def test_prefixed_env_override(self):
        with _EnvPatch(AGRICONNECT_FORECAST_DAYS="3", AGRICONNECT_ENVIRONMENT="production"):
            s = Settings()
            self.assertEqual(s.forecast_days, 3)
            self.assertTrue(s.is_production)

    def test_bare_provider_key_names_are_accepted(self):
        with _EnvPatch(OPENAI_API_KEY="sk-from-env", AGRICONNECT_OPENAI_API_KEY=None,
                       AGRICONNECT_GROQ_API_KEY="gsk-prefixed"):
            s = Settings()
            self.assertEqual(s.openai_api_key, "sk-from-env")
            self.assertEqual(s.groq_api_key, "gsk-prefixed")

    def test_base_urls_strip_trailing_slash(self):
        s = Settings(openai_base_url="https://api.openai.com/v1/", open_meteo_url="https://example.com/forecast/")
        self.assertEqual(s.openai_base_url, "https://api.openai.com/v1")
        self.assertEqual(s.open_meteo_url, "https://example.com/forecast")


if __name__ == "__main__":
    unittest.main()
