import datetime as dt
import unittest

from agriconnect.data_sources import openweather_client

JAN_15_UTC = 1705276800


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


def _reading(ts, temp, humidity, description, rain=None):
    item = {"dt": ts, "main": {"temp": temp, "humidity": humidity}, "weather": [{"description": description}]}
    if rain is not None:
        item["rain"] = {"3h": rain}
    return item


class TestOpenWeatherClient(unittest.TestCase):
    def setUp(self):
        self._orig_session = openweather_client.session

    def tearDown(self):
        openweather_client.session = self._orig_session

    def test_fetch_current_sends_key_and_metric_units(self):
        payload = {
            "main": {"temp": 27.6, "feels_like": 28.4, "humidity": 40, "temp_max": 31, "temp_min": 18,
                     "pressure": 1012},
            "weather": [{"description": "scattered clouds", "icon": "03d"}],
            "wind": {"speed": 4.1},
            "clouds": {"all": 35},
            "visibility": 10000,
            "sys": {"sunrise": JAN_15_UTC + 4 * 3600, "sunset": JAN_15_UTC + 17 * 3600},
        }
        session = RecordingSession(payload)
        openweather_client.session = session

        current = openweather_client.fetch_current(-24.6, 25.9, api_key="ow-key", region="Gaborone")
        self.assertEqual(current.temperature, 28)
        self.assertEqual(current.feels_like, 28)
        self.assertEqual(current.description, "scattered clouds")
        self.assertEqual(current.rain_chance, 35)
        self.assertEqual(current.sunrise, dt.datetime(2024, 1, 15, 4, tzinfo=dt.timezone.utc))

        url, params = session.calls[0]
        self.assertTrue(url.endswith("/weather"))
        self.assertEqual(params["appid"], "ow-key")
        self.assertEqual(params["units"], "metric")

    def test_format_forecast_groups_readings_by_day(self):
        data = {
            "list": [
                _reading(JAN_15_UTC, 20.2, 50, "clear sky"),
                _reading(JAN_15_UTC + 12 * 3600, 31.4, 30, "few clouds", rain=1.5),
                _reading(JAN_15_UTC + 86400, 19.0, 60, "light rain", rain=2.0),
                _reading(JAN_15_UTC + 86400 + 12 * 3600, 29.8, 40, "overcast clouds"),
            ]
        }
        forecast = openweather_client.format_forecast(data, latitude=-24.6, longitude=25.9)
        self.assertEqual([d.date for d in forecast.forecast], [dt.date(2024, 1, 15), dt.date(2024, 1, 16)])
        first = forecast.forecast[0]
        self.assertEqual((first.temp_min, first.temp_max), (20, 31))
        self.assertEqual(first.humidity, 40)
        self.assertEqual(first.rain_mm, 1.5)
        self.assertEqual(first.description, "few clouds")

    def test_format_forecast_caps_days(self):
        data = {"list": [_reading(JAN_15_UTC + i * 86400, 25, 40, "sunny") for i in range(5)]}
        forecast = openweather_client.format_forecast(data, latitude=0, longitude=0, days=3)
        self.assertEqual(len(forecast.forecast), 3)

    def test_format_forecast_without_readings_raises(self):
        with self.assertRaises(ValueError):
            openweather_client.format_forecast({"list": []}, latitude=0, longitude=0)

    def test_fetch_alerts(self):
        payload = {
            "alerts": [
                {"sender_name": "Department of Meteorological Services", "event": "Heavy rain",
                 "start": JAN_15_UTC, "end": JAN_15_UTC + 86400, "description": "Flooding possible",
                 "tags": ["Rain"]},
            ]
        }
        openweather_client.session = RecordingSession(payload)
        alerts = openweather_client.fetch_alerts(-24.6, 25.9, api_key="ow-key")
        self.assertEqual(len(alerts), 1)
        self.assertEqual(alerts[0].event, "Heavy rain")
        self.assertEqual(alerts[0].tags, ["Rain"])

    def test_fetch_alerts_without_alert_block(self):
        openweather_client.session = RecordingSession({"lat": -24.6})
        self.assertEqual(openweather_client.fetch_alerts(0, 0, api_key="k"), [])


if __name__ == "__main__":
    unittest.main()
