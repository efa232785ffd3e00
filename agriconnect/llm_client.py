"""Thin clients for OpenAI-compatible chat-completions APIs (OpenAI, Groq, Anthropic)."""

import time
from typing import Optional

import requests

from agriconnect import config
from utils.logging_utils import get_tagged_logger, mask_secret

logger = get_tagged_logger(__name__, tag="llm_client")


class LLMClient:
    """Minimal client for one provider's ``/chat/completions`` endpoint."""

    def __init__(
        self,
        name: str,
        *,
        base_url: str,
        api_key: Optional[str],
        model: str,
        timeout: float = 60.0,
        max_retries: int = 1,
        retry_backoff_sec: float = 0.5,
    ):
        """Store endpoint and credentials; nothing is sent until ``chat``."""
        self.name = name
        self.url = f"{base_url.rstrip('/')}/chat/completions"
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_backoff_sec = retry_backoff_sec

    def is_configured(self) -> bool:
        """True when an API key is set."""
        return bool(self.api_key)

    def chat(self, messages: list[dict], *, temperature: float = 0.7, max_tokens: int = 300) -> str:
        """Send a chat request and return the trimmed assistant content (may be empty)."""
        if not self.api_key:
            raise RuntimeError(f"{self.name} API key is not configured")

        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        for attempt in range(self.max_retries + 1):
            try:
                logger.debug("%s POST model=%s key=%s", self.name, self.model, mask_secret(self.api_key))
                r = requests.post(self.url, json=payload, headers=headers, timeout=self.timeout)
                logger.info("%s POST took %.2fs, status %s", self.name, r.elapsed.total_seconds(), r.status_code)
            except requests.exceptions.RequestException as exc:
                logger.warning("%s POST failed on attempt %d: %s", self.name, attempt + 1, exc)
                if attempt < self.max_retries:
                    time.sleep(self.retry_backoff_sec)
                    continue
                raise

            if r.status_code == 200:
                break

            error_text = (r.text or "")[:200]
            if (r.status_code == 429 or r.status_code >= 500) and attempt < self.max_retries:
                logger.warning("%s returned %s; retrying (attempt %d/%d).",
                               self.name, r.status_code, attempt + 1, self.max_retries + 1)
                time.sleep(self.retry_backoff_sec)
                continue
            raise RuntimeError(
                f"{self.name} POST failed with status {r.status_code}: {error_text} "
                f"(model={self.model}, url={self.url})"
            )

        try:
            data = r.json()
        except ValueError as exc:
            raise RuntimeError(f"{self.name} returned non-JSON response: {r.text[:200]}") from exc

        choices = data.get("choices") or []
        if not choices:
            return ""
        content = (choices[0].get("message") or {}).get("content") or ""
        # Normalize non-string content to string
        if isinstance(content, (dict, list)):
            content = str(content)
        return content.strip()


def build_llm_clients(settings: config.Settings | None = None) -> list[LLMClient]:
    """Return clients in priority order: OpenAI, Groq, Anthropic."""
    settings = settings or config.settings
    common = {
        "timeout": settings.llm_timeout_seconds,
        "max_retries": settings.llm_retries,
        "retry_backoff_sec": settings.llm_retry_backoff_seconds,
    }
    return [
        LLMClient("openai", base_url=settings.openai_base_url, api_key=settings.openai_api_key,
                  model=settings.openai_model, **common),
        LLMClient("groq", base_url=settings.groq_base_url, api_key=settings.groq_api_key,
                  model=settings.groq_model, **common),
        LLMClient("anthropic", base_url=settings.anthropic_base_url, api_key=settings.anthropic_api_key,
                  model=settings.anthropic_model, **common),
    ]
