import datetime as dt
import unittest

from agriconnect.data_sources import mock_current, mock_forecast


class TestMockWeather(unittest.TestCase):
    def test_current_is_flagged_and_deterministic(self):
        now = dt.datetime(2024, 1, 15, 9, 30, tzinfo=dt.timezone.utc)
        first = mock_current(-24.6, 25.9, region="Maun", now=now)
        second = mock_current(-24.6, 25.9, region="Maun", now=now)
        self.assertTrue(first.is_mock)
        self.assertEqual(first.region, "Maun")
        self.assertEqual(first.model_dump(), second.model_dump())
        self.assertEqual(first.sunrise.date(), now.date())

    def test_region_defaults_to_gaborone(self):
        self.assertEqual(mock_current(0, 0).region, "Gaborone")

    def test_forecast_length_and_dates(self):
        today = dt.date(2024, 1, 15)
        forecast = mock_forecast(-24.6, 25.9, days=5, today=today)
        self.assertTrue(forecast.is_mock)
        self.assertEqual(len(forecast.forecast), 5)
        self.assertEqual(forecast.forecast[0].date, today)
        self.assertEqual(forecast.forecast[4].date, dt.date(2024, 1, 19))

    def test_forecast_depends_only_on_date(self):
        today = dt.date(2024, 3, 1)
        a = mock_forecast(-24.6, 25.9, today=today)
        b = mock_forecast(-19.98, 23.42, today=today)
        self.assertEqual([d.model_dump() for d in a.forecast], [d.model_dump() for d in b.forecast])
        for day in a.forecast:
            self.assertLessEqual(day.temp_min, day.temp_max)


if __name__ == "__main__":
    unittest.main()
