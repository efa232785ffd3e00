"""Helpers for fetching current weather and daily forecasts from Open-Meteo (no API key)."""
from __future__ import annotations

import datetime as dt
from typing import Optional

import requests
from retry_requests import retry

from agriconnect.config import settings
from agriconnect.domain import CurrentWeather, DailyForecast, WeatherForecast
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="open_meteo_client")

session = retry(requests.Session(), retries=settings.weather_retries, backoff_factor=0.2)

DAILY_VARS = ["temperature_2m_max", "temperature_2m_min", "precipitation_probability_max", "weathercode"]

# WMO code table 4677, as used by Open-Meteo
WEATHER_CODE_DESCRIPTIONS = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Foggy",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snow",
    73: "Moderate snow",
    75: "Heavy snow",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}


def describe_weather_code(code: Optional[int]) -> str:
    """Return a human-readable description for a WMO weather code."""
    if code is None:
        return "Unknown"
    return WEATHER_CODE_DESCRIPTIONS.get(int(code), "Unknown")


def _fetch_raw(latitude: float, longitude: float, *, forecast_days: int) -> dict:
    """GET the combined current+daily payload and return the decoded JSON."""
    params = {
        "latitude": latitude,
        "longitude": longitude,
        "current_weather": "true",
        "daily": ",".join(DAILY_VARS),
        "timezone": "auto",
        "forecast_days": forecast_days,
    }
    resp = session.get(settings.open_meteo_url, params=params, timeout=settings.weather_timeout_seconds)
    resp.raise_for_status()
    return resp.json()


def _daily_rows(daily: dict) -> list[DailyForecast]:
    """Zip Open-Meteo's column-oriented daily block into per-day rows."""
    times = daily.get("time") or []
    highs = daily.get("temperature_2m_max") or []
    lows = daily.get("temperature_2m_min") or []
    precip = daily.get("precipitation_probability_max") or []
    codes = daily.get("weathercode") or []

    rows: list[DailyForecast] = []
    for idx, day in enumerate(times):
        if idx >= len(highs) or idx >= len(lows) or highs[idx] is None or lows[idx] is None:
            continue
        code = codes[idx] if idx < len(codes) else None
        chance = precip[idx] if idx < len(precip) else None
        rows.append(
            DailyForecast(
                date=dt.date.fromisoformat(day),
                temp_max=round(highs[idx]),
                temp_min=round(lows[idx]),
                precipitation_chance=chance or 0,
                weather_code=code,
                description=describe_weather_code(code),
            )
        )
    return rows


def fetch_current(latitude: float, longitude: float, *, region: str | None = None) -> CurrentWeather:
    """Fetch current conditions plus today's high/low and rain chance."""
    data = _fetch_raw(latitude, longitude, forecast_days=1)
    current = data["current_weather"]
    days = _daily_rows(data.get("daily") or {})
    today = days[0] if days else None
    code = current.get("weathercode")

    return CurrentWeather(
        region=region,
        latitude=data.get("latitude", latitude),
        longitude=data.get("longitude", longitude),
        temperature=round(current["temperature"]),
        wind_speed=round(current.get("windspeed") or 0),
        weather_code=code,
        description=describe_weather_code(code),
        is_day=current.get("is_day") == 1,
        high_temp=today.temp_max if today else None,
        low_temp=today.temp_min if today else None,
        rain_chance=today.precipitation_chance if today else 0,
        updated_at=dt.datetime.now(dt.timezone.utc),
    )


def fetch_forecast(latitude: float, longitude: float, *, region: str | None = None,
                   days: int = 7) -> WeatherForecast:
    """Fetch a daily forecast for up to ``days`` days."""
    data = _fetch_raw(latitude, longitude, forecast_days=days)
    rows = _daily_rows(data.get("daily") or {})
    if not rows:
        raise ValueError("Open-Meteo returned no daily forecast rows")
    return WeatherForecast(
        region=region,
        latitude=data.get("latitude", latitude),
        longitude=data.get("longitude", longitude),
        forecast=rows[:days],
        updated_at=dt.datetime.now(dt.timezone.utc),
    )
