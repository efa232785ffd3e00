"""Interfaces and helpers for weather data sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol

from agriconnect.domain import CurrentWeather, WeatherAlert, WeatherForecast


class WeatherDataSource(Protocol):
    """Interface for anything that can provide current weather, forecasts and alerts."""
    name: str

    def is_configured(self) -> bool:
        """Return False when the source lacks credentials."""
        ...

    def fetch_current(self, latitude: float, longitude: float, *, region: str | None = None) -> CurrentWeather:
        """Return current conditions."""
        ...

    def fetch_forecast(self, latitude: float, longitude: float, *, region: str | None = None,
                       days: int = 7) -> WeatherForecast:
        """Return a daily forecast."""
        ...

    def has_alerts(self) -> bool:
        """Return True when the source has an alert feed."""
        ...

    def fetch_alerts(self, latitude: float, longitude: float) -> Optional[List[WeatherAlert]]:
        """Return active alerts, or None if the source has no alert feed."""
        ...


@dataclass
class CallableWeatherDataSource(WeatherDataSource):
    """Wrap plain callables so different weather backends share one shape."""

    name: str
    current: Callable[..., CurrentWeather]
    forecast: Callable[..., WeatherForecast]
    alerts: Optional[Callable[..., List[WeatherAlert]]] = None
    configured: bool = True

    def is_configured(self) -> bool:
        """Report whether the backend can be called."""
        return self.configured

    def has_alerts(self) -> bool:
        """Report whether an alerts callable was supplied."""
        return self.alerts is not None

    def fetch_current(self, *args, **kwargs) -> CurrentWeather:
        """Delegate to the configured current-weather callable."""
        return self.current(*args, **kwargs)

    def fetch_forecast(self, *args, **kwargs) -> WeatherForecast:
        """Delegate to the configured forecast callable."""
        return self.forecast(*args, **kwargs)

    def fetch_alerts(self, *args, **kwargs) -> Optional[List[WeatherAlert]]:
        """Delegate to the alerts callable when the backend has one."""
        if self.alerts is None:
            return None
        return self.alerts(*args, **kwargs)
