"""Weather data sources and the factory that orders them."""

from .base import CallableWeatherDataSource, WeatherDataSource
from .factory import build_weather_sources
from .mock_weather import mock_current, mock_forecast

__all__ = [
    "build_weather_sources",
    "CallableWeatherDataSource",
    "WeatherDataSource",
    "mock_current",
    "mock_forecast",
]
