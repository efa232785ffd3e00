import datetime as dt
import unittest

from fastapi.testclient import TestClient

from agriconnect.assistant import ChatService, FarmingTipsService
from agriconnect.cache import TTLCache
from agriconnect.config import Settings
from agriconnect.data_sources import CallableWeatherDataSource
from agriconnect.domain import CurrentWeather, DailyForecast, WeatherForecast
from agriconnect.llm_client import LLMClient
from agriconnect.main import create_app
from agriconnect.services import Services
from agriconnect.weather_service import WeatherService


class FailingLLM(LLMClient):
    def __init__(self, name):
        super().__init__(name, base_url="https://llm.invalid/v1", api_key="sk-test", model="test")

    def chat(self, messages, *, temperature=0.7, max_tokens=300):
        raise RuntimeError(f"{self.name} POST failed with status 503")


def _settings(**overrides):
    values = {"openai_api_key": None, "groq_api_key": None, "anthropic_api_key": None,
              "openweather_api_key": None, "environment": "development"}
    values.update(overrides)
    return Settings(**values)


class TestApi(unittest.TestCase):
    def setUp(self):
        self.current_calls = []
        self.fail_weather = False

        def current(lat, lon, *, region=None):
            self.current_calls.append((lat, lon))
            if self.fail_weather:
                raise ConnectionError("open_meteo timed out")
            return CurrentWeather(region=region, latitude=lat, longitude=lon, temperature=37.0, humidity=25.0,
                                  description="Clear sky", wind_speed=4.0, rain_chance=5.0,
                                  updated_at=dt.datetime(2024, 1, 15, 12, tzinfo=dt.timezone.utc))

        def forecast(lat, lon, *, region=None, days=7):
            rows = [DailyForecast(date=dt.date(2024, 1, 15) + dt.timedelta(days=i), temp_min=19.0, temp_max=33.0,
                                  description="Clear sky") for i in range(days)]
            return WeatherForecast(region=region, latitude=lat, longitude=lon, forecast=rows,
                                   updated_at=dt.datetime(2024, 1, 15, tzinfo=dt.timezone.utc))

        self.sources = [CallableWeatherDataSource(name="open_meteo", current=current, forecast=forecast)]

    def _client(self, settings=None, llm_clients=()):
        settings = settings or _settings()
        cache = TTLCache(ttl_seconds=settings.weather_cache_ttl_seconds)
        services = Services(
            settings=settings,
            cache=cache,
            weather=WeatherService(self.sources, cache, forecast_days=settings.forecast_days),
            chat=ChatService(list(llm_clients)),
            tips=FarmingTipsService(list(llm_clients)),
        )
        return TestClient(create_app(settings=settings, services=services))

    def test_chat_without_providers_returns_static_reply(self):
        resp = self._client().post("/api/chat", json={"message": "I want to sell tomatoes"})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["source"], "static")
        self.assertEqual(body["intent"], "sell_product")
        self.assertIn("/farmer/create-listing", body["reply"])
        self.assertNotIn("error", body)

    def test_chat_failing_providers_still_answer(self):
        client = self._client(llm_clients=[FailingLLM("openai"), FailingLLM("groq")])
        body = client.post("/api/chat", json={"message": "hello"}).json()
        self.assertEqual(body["source"], "static")
        self.assertTrue(body["reply"])
        self.assertIn("groq", body["error"])

    def test_chat_hides_provider_error_in_production(self):
        client = self._client(settings=_settings(environment="production"), llm_clients=[FailingLLM("openai")])
        body = client.post("/api/chat", json={"message": "hello"}).json()
        self.assertNotIn("error", body)

    def test_chat_requires_message(self):
        client = self._client()
        for payload in ({}, {"message": "   "}):
            resp = client.post("/api/chat", json=payload)
            self.assertEqual(resp.status_code, 400)
            self.assertEqual(resp.json(), {"success": False, "message": "Message is required"})

    def test_chat_message_too_long(self):
        client = self._client(settings=_settings(max_user_message_chars=10))
        resp = client.post("/api/chat", json={"message": "x" * 11})
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(resp.json()["success"])

    def test_chat_accepts_weather_context(self):
        payload = {"message": "weather tips?", "context": {"weather": {"temperature": 35, "rainChance": 70}}}
        body = self._client().post("/api/chat", json=payload).json()
        self.assertIn("Rain expected", body["reply"])

    def test_weather_defaults_to_gaborone_and_is_cached(self):
        client = self._client()
        first = client.get("/api/weather").json()
        second = client.get("/api/weather").json()

        self.assertEqual(first["source"], "open_meteo")
        self.assertFalse(first["cached"])
        self.assertTrue(second["cached"])
        self.assertEqual(self.current_calls, [(-24.6282, 25.9231)])
        self.assertEqual(first["data"]["temperature"], second["data"]["temperature"])

    def test_weather_default_follows_configured_region(self):
        body = self._client(settings=_settings(default_region="Maun")).get("/api/weather").json()
        self.assertEqual(self.current_calls, [(-20.0, 23.4167)])
        self.assertEqual(body["data"]["region"], "Maun")

    def test_unknown_default_region_uses_gaborone(self):
        body = self._client(settings=_settings(default_region="Atlantis")).get("/api/weather").json()
        self.assertEqual(self.current_calls, [(-24.6282, 25.9231)])
        self.assertEqual(body["source"], "open_meteo")

    def test_weather_by_coordinates(self):
        body = self._client().get("/api/weather", params={"lat": -21.17, "lon": 27.51}).json()
        self.assertEqual(body["data"]["latitude"], -21.17)

    def test_weather_requires_both_coordinates(self):
        resp = self._client().get("/api/weather", params={"lat": -21.17})
        self.assertEqual(resp.status_code, 400)

    def test_weather_falls_back_to_mock(self):
        self.fail_weather = True
        body = self._client().get("/api/weather/region/maun").json()
        self.assertEqual(body["source"], "mock")
        self.assertTrue(body["data"]["is_mock"])
        self.assertEqual(body["data"]["region"], "Maun")
        self.assertEqual(body["error"], "open_meteo timed out")

    def test_unknown_region(self):
        resp = self._client().get("/api/weather/region/atlantis")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"success": False, "message": "Region not found"})

    def test_regions(self):
        body = self._client().get("/api/weather/regions").json()
        names = [r["name"] for r in body["data"]]
        self.assertIn("Gaborone", names)
        self.assertEqual(names, sorted(names))

    def test_forecast_by_region(self):
        body = self._client().get("/api/weather/forecast/North-East").json()
        self.assertEqual(body["source"], "open_meteo")
        self.assertEqual(len(body["data"]["forecast"]), 7)
        self.assertEqual(body["data"]["region"], "North-East")

    def test_alerts_without_keyed_source(self):
        body = self._client().get("/api/weather/alerts/chobe").json()
        self.assertEqual(body["data"], [])

    def test_advice_for_hot_dry_weather(self):
        body = self._client().get("/api/weather/advice/ghanzi").json()
        advice = body["data"]["advice"]
        self.assertEqual(len(advice), 2)
        self.assertTrue(advice[0].startswith("High temperature warning"))

    def test_farming_tips_static_fallback(self):
        payload = {"weather": {"temperature": 22, "precipitationChance": 60, "windspeed": 12},
                   "location": "Kanye", "cropType": "maize"}
        body = self._client(llm_clients=[FailingLLM("openai")]).post("/api/ai/farming-tips", json=payload).json()
        self.assertTrue(body["success"])
        self.assertEqual(body["source"], "static")
        self.assertGreaterEqual(len(body["tips"]), 4)

    def test_farming_tips_requires_weather_and_location(self):
        client = self._client()
        for payload in ({"location": "Kanye"}, {"weather": {"temperature": 22}}, {"weather": {}, "location": " "}):
            resp = client.post("/api/ai/farming-tips", json=payload)
            self.assertEqual(resp.status_code, 400)
            self.assertEqual(resp.json()["message"], "Weather data and location are required")

    def test_invalid_body_gets_error_envelope(self):
        resp = self._client().post("/api/ai/farming-tips", json={"weather": {"temperature": "hot"}, "location": "x"})
        self.assertEqual(resp.status_code, 422)
        self.assertFalse(resp.json()["success"])

    def test_health(self):
        body = self._client().get("/api/health").json()
        self.assertEqual(body["data"]["weather_sources"], ["open_meteo", "mock"])
        self.assertEqual(body["data"]["ai_configured"], [])
        self.assertEqual(body["data"]["cache"]["entries"], 0)

    def test_unknown_route_uses_envelope(self):
        resp = self._client().get("/api/nope")
        self.assertEqual(resp.status_code, 404)
        self.assertFalse(resp.json()["success"])


if __name__ == "__main__":
    unittest.main()
