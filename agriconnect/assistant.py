"""
Chat assistant and farming-tips services.

Both walk the configured LLM providers in priority order and fall back to the
rule-based replies in ``intents``/``advice``, so callers always get an answer.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from agriconnect.advice import static_farming_tips
from agriconnect.domain import ChatContext, FarmingTipsRequest, Source
from agriconnect.fallback import FallbackChain, FunctionProvider, StaticProvider
from agriconnect.intents import Intent, classify_intent, static_reply
from agriconnect.llm_client import LLMClient
from agriconnect.prompts import TIPS_SYSTEM_PROMPT, build_chat_messages, build_farming_prompt, parse_tips
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="assistant")


@dataclass(frozen=True)
class ChatTurn:
    """One user message with optional client context."""
    message: str
    context: Optional[ChatContext] = None


@dataclass
class ChatReply:
    """Assistant reply and where it came from."""
    reply: str
    source: str
    intent: Intent
    error: Optional[str] = None


@dataclass
class TipsResult:
    """Farming tips and where they came from."""
    tips: list[str]
    source: str
    error: Optional[str] = None


def _with_weather_context(turn: ChatTurn) -> str:
    """Append client-supplied weather to the user message sent to the LLM."""
    weather = turn.context.weather if turn.context else None
    if weather is None:
        return turn.message
    return (
        f"{turn.message}\n\n(Current local weather: temperature {weather.temperature}°C, "
        f"rain chance {weather.rain_chance}%, wind {weather.wind_speed} km/h)"
    )


class ChatService:
    """Answer chat messages via the first working LLM provider, else canned replies."""

    def __init__(self, clients: Sequence[LLMClient], *, temperature: float = 0.7, max_tokens: int = 300,
                 today: Callable[[], dt.date] = dt.date.today) -> None:
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._today = today
        self.chain = FallbackChain(
            [FunctionProvider(c.name, self._llm_fn(c), c.is_configured) for c in clients],
            StaticProvider(Source.STATIC.value, self._static),
            name="chat",
        )

    def _llm_fn(self, client: LLMClient):
        def ask(turn: ChatTurn) -> str:
            messages = build_chat_messages(_with_weather_context(turn))
            return client.chat(messages, temperature=self.temperature, max_tokens=self.max_tokens)
        return ask

    def _static(self, turn: ChatTurn) -> str:
        _intent, reply = static_reply(turn.message, turn.context, today=self._today())
        return reply

    def send_message(self, message: str, context: Optional[ChatContext] = None) -> ChatReply:
        """Reply to ``message``; never raises for provider problems."""
        turn = ChatTurn(message=message.strip(), context=context)
        resolution = self.chain.resolve(turn)
        if resolution.source == Source.STATIC.value and not self.chain.configured_providers():
            logger.warning("No AI provider configured. Using static responses.")
        return ChatReply(
            reply=resolution.value,
            source=resolution.source,
            intent=classify_intent(turn.message),
            error=resolution.last_error,
        )


class FarmingTipsService:
    """Produce 3-5 farming tips from an LLM, else from weather rules."""

    def __init__(self, clients: Sequence[LLMClient], *, temperature: float = 0.7, max_tokens: int = 500) -> None:
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.chain = FallbackChain(
            [FunctionProvider(c.name, self._llm_fn(c), c.is_configured) for c in clients],
            StaticProvider(Source.STATIC.value, lambda req: static_farming_tips(req.weather)),
            name="farming_tips",
        )

    def _llm_fn(self, client: LLMClient):
        def ask(req: FarmingTipsRequest) -> list[str]:
            prompt = build_farming_prompt(req.weather, req.location, req.forecast, req.crop_type)
            raw = client.chat(
                build_chat_messages(prompt, system_prompt=TIPS_SYSTEM_PROMPT),
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
            tips = parse_tips(raw)
            if not tips:
                logger.warning("Failed to parse AI tips response", extra={"provider": client.name})
            return tips
        return ask

    def get_tips(self, request: FarmingTipsRequest) -> TipsResult:
        """Return tips for validated ``request`` (weather and location present)."""
        resolution = self.chain.resolve(request)
        return TipsResult(tips=resolution.value, source=resolution.source, error=resolution.last_error)
