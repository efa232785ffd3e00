"""Process-wide service wiring: one cache, one set of provider chains per app."""

from dataclasses import dataclass
from typing import Any, Dict

from agriconnect import config
from agriconnect.assistant import ChatService, FarmingTipsService
from agriconnect.cache import TTLCache
from agriconnect.data_sources import build_weather_sources
from agriconnect.llm_client import build_llm_clients
from agriconnect.weather_service import WeatherService
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="services")


@dataclass
class Services:
    """Everything the HTTP layer needs, built once at startup."""
    settings: config.Settings
    cache: TTLCache
    weather: WeatherService
    chat: ChatService
    tips: FarmingTipsService

    def status(self) -> Dict[str, Any]:
        """Non-secret summary of configured providers and cache usage."""
        return {
            "environment": self.settings.environment,
            "weather_sources": self.weather.current_chain.provider_names,
            "weather_configured": self.weather.configured_sources(),
            "ai_providers": self.chat.chain.provider_names,
            "ai_configured": self.chat.chain.configured_providers(),
            "cache": self.cache.stats(),
        }


def build_services(settings: config.Settings | None = None) -> Services:
    """Construct the shared cache and inject it into the weather service."""
    settings = settings or config.settings
    cache = TTLCache(ttl_seconds=settings.weather_cache_ttl_seconds)
    clients = build_llm_clients(settings)

    services = Services(
        settings=settings,
        cache=cache,
        weather=WeatherService(build_weather_sources(settings), cache, forecast_days=settings.forecast_days),
        chat=ChatService(clients, temperature=settings.llm_temperature, max_tokens=settings.chat_max_tokens),
        tips=FarmingTipsService(clients, temperature=settings.llm_temperature, max_tokens=settings.tips_max_tokens),
    )
    status = services.status()
    if not status["ai_configured"]:
        logger.warning("No AI provider configured; chat and tips will use static responses")
    logger.info("Services ready", extra={"status": status})
    return services
