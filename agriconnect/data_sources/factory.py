"""Factory helpers for assembling the ordered list of weather sources at startup."""

from __future__ import annotations

from functools import partial

from agriconnect import config
from agriconnect.data_sources import open_meteo_client, openweather_client
from agriconnect.data_sources.base import CallableWeatherDataSource, WeatherDataSource
from utils.logging_utils import get_tagged_logger, mask_secret

logger = get_tagged_logger(__name__, tag="data_sources/factory")


def build_weather_sources(settings: config.Settings | None = None) -> list[WeatherDataSource]:
    """Return weather sources in priority order: OpenWeather (keyed), then Open-Meteo."""
    settings = settings or config.settings
    sources: list[WeatherDataSource] = []

    api_key = settings.openweather_api_key
    if api_key:
        logger.info("OpenWeather source enabled", extra={"api_key": mask_secret(api_key)})
        sources.append(
            CallableWeatherDataSource(
                name="openweather",
                current=partial(openweather_client.fetch_current, api_key=api_key),
                forecast=partial(openweather_client.fetch_forecast, api_key=api_key),
                alerts=partial(openweather_client.fetch_alerts, api_key=api_key),
            )
        )
    else:
        logger.info("No OpenWeather API key; skipping OpenWeather source")
        sources.append(
            CallableWeatherDataSource(
                name="openweather",
                current=openweather_client.fetch_current,
                forecast=openweather_client.fetch_forecast,
                alerts=openweather_client.fetch_alerts,
                configured=False,
            )
        )

    sources.append(
        CallableWeatherDataSource(
            name="open_meteo",
            current=open_meteo_client.fetch_current,
            forecast=open_meteo_client.fetch_forecast,
        )
    )
    return sources
