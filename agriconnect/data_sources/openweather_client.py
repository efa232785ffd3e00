"""Helpers for the key-gated OpenWeather current, forecast and One Call alert APIs."""
from __future__ import annotations

import datetime as dt
from collections import OrderedDict

import requests
from retry_requests import retry

from agriconnect.config import settings
from agriconnect.domain import CurrentWeather, DailyForecast, WeatherAlert, WeatherForecast
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="openweather_client")

session = retry(requests.Session(), retries=settings.weather_retries, backoff_factor=0.2)

# 5 days of 3-hour readings
FORECAST_READINGS = 40


def _get(url: str, params: dict, api_key: str) -> dict:
    """GET an OpenWeather endpoint in metric units and return the decoded JSON."""
    resp = session.get(
        url,
        params={**params, "appid": api_key, "units": "metric"},
        timeout=settings.weather_timeout_seconds,
    )
    resp.raise_for_status()
    return resp.json()


def _from_unix(ts: int | None) -> dt.datetime | None:
    """Convert a unix timestamp to an aware UTC datetime."""
    if ts is None:
        return None
    return dt.datetime.fromtimestamp(ts, tz=dt.timezone.utc)


def format_current(data: dict, *, latitude: float, longitude: float, region: str | None = None) -> CurrentWeather:
    """Normalize an OpenWeather ``/weather`` payload."""
    main = data["main"]
    conditions = (data.get("weather") or [{}])[0]
    sys_block = data.get("sys") or {}
    return CurrentWeather(
        region=region,
        latitude=latitude,
        longitude=longitude,
        temperature=round(main["temp"]),
        feels_like=round(main["feels_like"]) if main.get("feels_like") is not None else None,
        humidity=main.get("humidity"),
        description=conditions.get("description", "Unknown"),
        icon=conditions.get("icon"),
        wind_speed=(data.get("wind") or {}).get("speed"),
        # OpenWeather's current endpoint has no precipitation probability; cloud cover stands in.
        rain_chance=(data.get("clouds") or {}).get("all") or 0,
        high_temp=main.get("temp_max"),
        low_temp=main.get("temp_min"),
        pressure=main.get("pressure"),
        visibility=data.get("visibility"),
        sunrise=_from_unix(sys_block.get("sunrise")),
        sunset=_from_unix(sys_block.get("sunset")),
        updated_at=dt.datetime.now(dt.timezone.utc),
    )


def format_forecast(data: dict, *, latitude: float, longitude: float, region: str | None = None,
                    days: int = 7) -> WeatherForecast:
    """Group 3-hourly ``/forecast`` readings into daily min/max/humidity/rain rows."""
    grouped: "OrderedDict[str, dict]" = OrderedDict()
    for item in data.get("list") or []:
        day = _from_unix(item["dt"]).date().isoformat()
        bucket = grouped.setdefault(day, {"temps": [], "humidity": [], "descriptions": [], "rain": 0.0})
        bucket["temps"].append(item["main"]["temp"])
        bucket["humidity"].append(item["main"].get("humidity", 0))
        bucket["descriptions"].append((item.get("weather") or [{}])[0].get("description", "Unknown"))
        bucket["rain"] += (item.get("rain") or {}).get("3h", 0)

    rows = [
        DailyForecast(
            date=dt.date.fromisoformat(day),
            temp_min=round(min(b["temps"])),
            temp_max=round(max(b["temps"])),
            humidity=round(sum(b["humidity"]) / len(b["humidity"])),
            description=b["descriptions"][len(b["descriptions"]) // 2],
            rain_mm=round(b["rain"], 1),
        )
        for day, b in grouped.items()
    ]
    if not rows:
        raise ValueError("OpenWeather returned no forecast readings")
    return WeatherForecast(
        region=region,
        latitude=latitude,
        longitude=longitude,
        forecast=rows[:days],
        updated_at=dt.datetime.now(dt.timezone.utc),
    )


def fetch_current(latitude: float, longitude: float, *, api_key: str, region: str | None = None) -> CurrentWeather:
    """Fetch current conditions."""
    data = _get(f"{settings.openweather_base_url}/weather", {"lat": latitude, "lon": longitude}, api_key)
    return format_current(data, latitude=latitude, longitude=longitude, region=region)


def fetch_forecast(latitude: float, longitude: float, *, api_key: str, region: str | None = None,
                   days: int = 7) -> WeatherForecast:
    """Fetch the 5-day/3-hour forecast grouped by day."""
    data = _get(
        f"{settings.openweather_base_url}/forecast",
        {"lat": latitude, "lon": longitude, "cnt": FORECAST_READINGS},
        api_key,
    )
    return format_forecast(data, latitude=latitude, longitude=longitude, region=region, days=days)


def fetch_alerts(latitude: float, longitude: float, *, api_key: str) -> list[WeatherAlert]:
    """Fetch active alerts from the One Call 3.0 API."""
    data = _get(
        settings.openweather_onecall_url,
        {"lat": latitude, "lon": longitude, "exclude": "minutely,hourly,daily"},
        api_key,
    )
    return [
        WeatherAlert(
            sender_name=a.get("sender_name"),
            event=a.get("event", "Weather alert"),
            start=_from_unix(a.get("start")),
            end=_from_unix(a.get("end")),
            description=a.get("description", ""),
            tags=a.get("tags") or [],
        )
        for a in data.get("alerts") or []
    ]
