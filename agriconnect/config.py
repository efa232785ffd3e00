"""Application configuration pulled from environment variables via pydantic."""
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.logging_utils import get_tagged_logger, mask_secret
logger = get_tagged_logger(__name__, tag="config")


def _env(name: str) -> AliasChoices:
    """Accept both the prefixed variable and the bare provider name."""
    return AliasChoices(f"AGRICONNECT_{name}", name)


class Settings(BaseSettings):
    """Environment-driven configuration for the AgriConnect assist service."""
    model_config = SettingsConfigDict(env_prefix="AGRICONNECT_", extra="ignore", populate_by_name=True)

    environment: str = "development"  # "production" hides provider errors in responses
    log_level: str = "INFO"

    # weather
    weather_cache_ttl_seconds: int = 1800
    weather_timeout_seconds: float = 10.0
    weather_retries: int = 2
    forecast_days: int = 7
    default_region: str = "Gaborone"
    open_meteo_url: str = "https://api.open-meteo.com/v1/forecast"
    openweather_base_url: str = "https://api.openweathermap.org/data/2.5"
    openweather_onecall_url: str = "https://api.openweathermap.org/data/3.0/onecall"
    openweather_api_key: str | None = Field(default=None, validation_alias=_env("OPENWEATHER_API_KEY"))

    # LLM providers, in priority order: openai > groq > anthropic
    openai_api_key: str | None = Field(default=None, validation_alias=_env("OPENAI_API_KEY"))
    openai_model: str = Field(default="gpt-4o-mini", validation_alias=_env("OPENAI_MODEL"))
    openai_base_url: str = "https://api.openai.com/v1"
    groq_api_key: str | None = Field(default=None, validation_alias=_env("GROQ_API_KEY"))
    groq_model: str = Field(default="llama-3.1-70b-versatile", validation_alias=_env("GROQ_MODEL"))
    groq_base_url: str = "https://api.groq.com/openai/v1"
    anthropic_api_key: str | None = Field(default=None, validation_alias=_env("ANTHROPIC_API_KEY"))
    anthropic_model: str = Field(default="claude-3-haiku-20240307", validation_alias=_env("ANTHROPIC_MODEL"))
    anthropic_base_url: str = "https://api.anthropic.com/v1"

    llm_temperature: float = 0.7
    llm_timeout_seconds: float = 60.0
    llm_retries: int = 1
    llm_retry_backoff_seconds: float = 0.5
    chat_max_tokens: int = 300
    tips_max_tokens: int = 500
    max_user_message_chars: int = 2000

    @field_validator("open_meteo_url", "openweather_base_url", "openweather_onecall_url",
                     "openai_base_url", "groq_base_url", "anthropic_base_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs to avoid double slashes."""
        return str(v).rstrip("/")

    @property
    def is_production(self) -> bool:
        """True when provider errors must not be echoed to clients."""
        return self.environment.lower() == "production"


settings = Settings()


if __name__ == "__main__":
    logger.setLevel("DEBUG")
    dump = settings.model_dump()
    for key in list(dump):
        if key.endswith("_api_key"):
            dump[key] = mask_secret(dump[key])
    logger.debug(f"Loaded settings: {dump}")
