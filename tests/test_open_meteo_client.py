import datetime as dt
import unittest

from agriconnect.data_sources import open_meteo_client


class DummyResp:
    def __init__(self, payload):
        self._payload = payload

    def raise_for_status(self):
        pass

    def json(self):
        return self._payload


class RecordingSession:
    def __init__(self, payload):
        self.payload = payload
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params))
        return DummyResp(self.payload)


def _make_payload():
    return {
        "latitude": -24.625,
        "longitude": 25.875,
        "current_weather": {
            "temperature": 29.6,
            "windspeed": 11.2,
            "weathercode": 2,
            "is_day": 1,
        },
        "daily": {
            "time": ["2024-01-15", "2024-01-16", "2024-01-17"],
            "temperature_2m_max": [32.4, 30.1, None],
            "temperature_2m_min": [19.2, 18.7, 18.0],
            "precipitation_probability_max": [10, 65, 40],
            "weathercode": [2, 61, 3],
        },
    }


class TestOpenMeteoClient(unittest.TestCase):
    def setUp(self):
        self._orig_session = open_meteo_client.session

    def tearDown(self):
        open_meteo_client.session = self._orig_session

    def test_fetch_current(self):
        session = RecordingSession(_make_payload())
        open_meteo_client.session = session

        current = open_meteo_client.fetch_current(-24.6282, 25.9231, region="Gaborone")
        self.assertEqual(current.temperature, 30)
        self.assertEqual(current.wind_speed, 11)
        self.assertEqual(current.description, "Partly cloudy")
        self.assertEqual(current.high_temp, 32)
        self.assertEqual(current.low_temp, 19)
        self.assertEqual(current.rain_chance, 10)
        self.assertTrue(current.is_day)
        self.assertFalse(current.is_mock)
        self.assertEqual(current.region, "Gaborone")

        _url, params = session.calls[0]
        self.assertEqual(params["current_weather"], "true")
        self.assertEqual(params["forecast_days"], 1)

    def test_fetch_forecast_skips_incomplete_days(self):
        open_meteo_client.session = RecordingSession(_make_payload())

        forecast = open_meteo_client.fetch_forecast(-24.6282, 25.9231, days=7)
        self.assertEqual(len(forecast.forecast), 2)
        second = forecast.forecast[1]
        self.assertEqual(second.date, dt.date(2024, 1, 16))
        self.assertEqual(second.description, "Slight rain")
        self.assertEqual(second.precipitation_chance, 65)

    def test_fetch_forecast_without_rows_raises(self):
        payload = _make_payload()
        payload["daily"] = {}
        open_meteo_client.session = RecordingSession(payload)
        with self.assertRaises(ValueError):
            open_meteo_client.fetch_forecast(0, 0)

    def test_describe_weather_code(self):
        self.assertEqual(open_meteo_client.describe_weather_code(95), "Thunderstorm")
        self.assertEqual(open_meteo_client.describe_weather_code(None), "Unknown")
        self.assertEqual(open_meteo_client.describe_weather_code(42), "Unknown")


if __name__ == "__main__":
    unittest.main()
