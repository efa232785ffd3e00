"""Cached, always-answering weather lookups for Botswana regions and coordinates."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from agriconnect.cache import TTLCache
from agriconnect.data_sources import WeatherDataSource, mock_current, mock_forecast
from agriconnect.domain import Source
from agriconnect.fallback import FallbackChain, FunctionProvider, Resolution, StaticProvider
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="weather_service")


@dataclass(frozen=True)
class WeatherQuery:
    """Coordinates (and optional display name) for one lookup."""
    latitude: float
    longitude: float
    region: Optional[str] = None
    days: int = 7


@dataclass
class WeatherResult:
    """Payload plus the name of the source that produced it."""
    data: object
    source: str
    cached: bool = False
    error: Optional[str] = None


def cache_key(kind: str, latitude: float, longitude: float, *extra: object) -> str:
    """Fingerprint for a lookup, e.g. ``weather_-24.65_25.9`` or ``forecast_-24.65_25.9_7``."""
    return "_".join(str(part) for part in (kind, latitude, longitude, *extra))


def _with_region(data, region: Optional[str]):
    """Label a cached payload with the region name of the current request."""
    if region is None or getattr(data, "region", region) == region:
        return data
    return data.model_copy(update={"region": region})


class WeatherService:
    """
    Serve weather from the TTL cache, refetching through a fallback chain on a miss.

    Only answers from real providers are cached; the mock answer is recomputed on
    every miss so a provider that recovers is picked up on the next request.
    """

    def __init__(self, sources: Sequence[WeatherDataSource], cache: TTLCache, *, forecast_days: int = 7) -> None:
        """Build one chain per capability over the ordered ``sources``."""
        self.cache = cache
        self.forecast_days = forecast_days
        self.sources = list(sources)

        self.current_chain = FallbackChain(
            [FunctionProvider(s.name, self._current_fn(s), s.is_configured) for s in self.sources],
            StaticProvider(Source.MOCK.value, lambda q: mock_current(q.latitude, q.longitude, region=q.region)),
            name="weather/current",
        )
        self.forecast_chain = FallbackChain(
            [FunctionProvider(s.name, self._forecast_fn(s), s.is_configured) for s in self.sources],
            StaticProvider(
                Source.MOCK.value,
                lambda q: mock_forecast(q.latitude, q.longitude, region=q.region, days=q.days),
            ),
            name="weather/forecast",
        )
        # only sources with an alert feed; an empty list from one is a real answer
        self.alerts_chain = FallbackChain(
            [FunctionProvider(s.name, self._alerts_fn(s), s.is_configured, accept_empty=True)
             for s in self.sources if s.has_alerts()],
            StaticProvider(Source.STATIC.value, lambda q: []),
            name="weather/alerts",
        )

    @staticmethod
    def _current_fn(source: WeatherDataSource):
        return lambda q: source.fetch_current(q.latitude, q.longitude, region=q.region)

    @staticmethod
    def _forecast_fn(source: WeatherDataSource):
        return lambda q: source.fetch_forecast(q.latitude, q.longitude, region=q.region, days=q.days)

    @staticmethod
    def _alerts_fn(source: WeatherDataSource):
        return lambda q: source.fetch_alerts(q.latitude, q.longitude)

    def _cached_lookup(self, key: str, chain: FallbackChain, query: WeatherQuery) -> WeatherResult:
        """Return a fresh cached result or resolve the chain and cache real answers."""
        hit = self.cache.get(key)
        if hit is not None:
            logger.debug("Weather cache hit", extra={"key": key})
            return WeatherResult(data=_with_region(hit.data, query.region), source=hit.source, cached=True)

        logger.info("Weather cache miss; fetching", extra={"key": key})
        resolution: Resolution = chain.resolve(query)
        result = WeatherResult(data=resolution.value, source=resolution.source, error=resolution.last_error)
        if resolution.source != chain.terminal.name:
            self.cache.put(key, WeatherResult(data=resolution.value, source=resolution.source))
        return result

    def get_weather(self, latitude: float, longitude: float, region: str | None = None) -> WeatherResult:
        """Current conditions for a coordinate pair."""
        query = WeatherQuery(latitude=latitude, longitude=longitude, region=region)
        return self._cached_lookup(cache_key("weather", latitude, longitude), self.current_chain, query)

    def get_forecast(self, latitude: float, longitude: float, region: str | None = None,
                     days: int | None = None) -> WeatherResult:
        """Daily forecast for a coordinate pair."""
        query = WeatherQuery(latitude=latitude, longitude=longitude, region=region,
                             days=days or self.forecast_days)
        key = cache_key("forecast", latitude, longitude, query.days)
        return self._cached_lookup(key, self.forecast_chain, query)

    def get_alerts(self, latitude: float, longitude: float) -> WeatherResult:
        """Active alerts; an empty list when no keyed source is available. Not cached."""
        resolution = self.alerts_chain.resolve(WeatherQuery(latitude=latitude, longitude=longitude))
        return WeatherResult(data=resolution.value, source=resolution.source, error=resolution.last_error)

    def configured_sources(self) -> list[str]:
        """Names of sources that currently have credentials."""
        return self.current_chain.configured_providers()
