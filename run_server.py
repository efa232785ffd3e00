import os

import uvicorn

from agriconnect import config
from utils.logging_utils import get_tagged_logger, setup_logging

logger = get_tagged_logger(__name__, tag="server")


def log_provider_preflight(settings: config.Settings | None = None) -> dict:
    """
    Log which external providers are usable before serving traffic.

    Missing keys are not fatal: weather falls back to Open-Meteo then mock
    data, and chat/tips fall back to static replies.
    """
    settings = settings or config.settings
    keys = {
        "openweather": settings.openweather_api_key,
        "openai": settings.openai_api_key,
        "groq": settings.groq_api_key,
        "anthropic": settings.anthropic_api_key,
    }
    configured = [name for name, key in keys.items() if key]
    missing = [name for name, key in keys.items() if not key]
    logger.info("Configured providers: %s", ", ".join(configured) or "none")
    if missing:
        logger.info("Providers without credentials (will be skipped): %s", ", ".join(missing))
    if not any(keys[name] for name in ("openai", "groq", "anthropic")):
        logger.warning("No AI provider configured; chat and farming tips will use static responses")
    return {"configured": configured, "missing": missing}


if __name__ == "__main__":
    setup_logging(level=config.settings.log_level, job_name="agriconnect-assist")
    log_provider_preflight()

    uvicorn.run(
        "agriconnect.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        reload=False,
    )
