"""Deterministic stand-in weather used when no provider can answer.

Values are typical for a Botswana summer day and depend only on the date, so
the same request always yields the same payload.
"""
from __future__ import annotations

import datetime as dt

from agriconnect.domain import CurrentWeather, DailyForecast, WeatherForecast

_PATTERN = (
    # (temp_min, temp_max, humidity, description, rain_mm)
    (19, 31, 42, "sunny", 0.0),
    (20, 32, 45, "partly cloudy", 0.0),
    (19, 30, 55, "cloudy", 0.0),
    (18, 28, 65, "light rain", 4.0),
    (18, 29, 58, "partly cloudy", 0.0),
    (20, 33, 40, "sunny", 0.0),
    (21, 34, 38, "sunny", 0.0),
)


def mock_current(latitude: float, longitude: float, *, region: str | None = None,
                 now: dt.datetime | None = None) -> CurrentWeather:
    """Return fixed current conditions stamped with ``now``."""
    now = now or dt.datetime.now(dt.timezone.utc)
    day = now.date()
    return CurrentWeather(
        region=region or "Gaborone",
        latitude=latitude,
        longitude=longitude,
        temperature=28,
        feels_like=30,
        humidity=45,
        description="partly cloudy",
        icon="02d",
        wind_speed=3.5,
        rain_chance=20,
        high_temp=31,
        low_temp=19,
        pressure=1015,
        visibility=10000,
        sunrise=dt.datetime.combine(day, dt.time(6, 0), tzinfo=now.tzinfo),
        sunset=dt.datetime.combine(day, dt.time(18, 30), tzinfo=now.tzinfo),
        is_day=True,
        updated_at=now,
        is_mock=True,
    )


def mock_forecast(latitude: float, longitude: float, *, region: str | None = None, days: int = 7,
                  today: dt.date | None = None) -> WeatherForecast:
    """Return a ``days``-long forecast that cycles through a fixed weekly pattern."""
    today = today or dt.datetime.now(dt.timezone.utc).date()
    rows = []
    for i in range(days):
        day = today + dt.timedelta(days=i)
        temp_min, temp_max, humidity, description, rain = _PATTERN[day.toordinal() % len(_PATTERN)]
        rows.append(
            DailyForecast(
                date=day,
                temp_min=temp_min,
                temp_max=temp_max,
                humidity=humidity,
                description=description,
                rain_mm=rain,
                precipitation_chance=60 if rain else 10,
            )
        )
    return WeatherForecast(
        region=region or "Gaborone",
        latitude=latitude,
        longitude=longitude,
        forecast=rows,
        updated_at=dt.datetime.now(dt.timezone.utc),
        is_mock=True,
    )
