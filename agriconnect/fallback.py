"""Ordered provider chains that always end in a local, non-failing provider.

Each provider answers with an explicit result: ``Success`` carries a value,
``Decline`` says why the provider could not answer (no credentials, an error,
or an empty/unusable payload). ``FallbackChain.resolve`` walks the providers in
priority order and returns the first success; if all of them decline, the
terminal provider's output is returned unconditionally.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Generic, List, Optional, Protocol, Sequence, Tuple, TypeVar, Union

from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="fallback_chain")

T = TypeVar("T")


class DeclineReason(str, Enum):
    """Why a provider did not produce a result."""
    NOT_CONFIGURED = "not_configured"
    ERROR = "error"
    EMPTY = "empty"


@dataclass(frozen=True)
class Success(Generic[T]):
    """A usable provider result."""
    value: T


@dataclass(frozen=True)
class Decline:
    """A provider's signal that the chain should move on."""
    reason: DeclineReason
    detail: str = ""


ProviderResult = Union[Success, Decline]


class Provider(Protocol):
    """Anything that can be placed in a fallback chain."""
    name: str

    def is_configured(self) -> bool:
        """Return False when credentials or settings are missing."""

    def fetch(self, request: Any) -> ProviderResult:
        """Produce a result for ``request`` or decline."""


def _is_empty(value: Any) -> bool:
    """Return True for None and empty strings/collections."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


@dataclass
class FunctionProvider:
    """Wrap a plain callable; exceptions and empty values become declines.

    With ``accept_empty`` only ``None`` declines, so an empty collection (e.g. no
    active alerts) is a valid answer.
    """
    name: str
    fn: Callable[[Any], Any]
    configured: Union[bool, Callable[[], bool]] = True
    accept_empty: bool = False

    def is_configured(self) -> bool:
        """Evaluate the configured flag (or predicate)."""
        return bool(self.configured()) if callable(self.configured) else bool(self.configured)

    def fetch(self, request: Any) -> ProviderResult:
        """Call ``fn`` and classify its outcome."""
        try:
            value = self.fn(request)
        except Exception as exc:
            return Decline(DeclineReason.ERROR, str(exc) or exc.__class__.__name__)
        if value is None or (not self.accept_empty and _is_empty(value)):
            return Decline(DeclineReason.EMPTY, "provider returned no data")
        return Success(value)


@dataclass
class StaticProvider:
    """Terminal provider backed by a deterministic local generator."""
    name: str
    fn: Callable[[Any], Any]

    def is_configured(self) -> bool:
        return True

    def fetch(self, request: Any) -> ProviderResult:
        return Success(self.fn(request))


@dataclass
class Resolution(Generic[T]):
    """Value returned by a chain plus which provider produced it."""
    value: T
    source: str
    declines: List[Tuple[str, Decline]] = field(default_factory=list)

    @property
    def is_fallback(self) -> bool:
        """True when at least one provider declined before this answer."""
        return bool(self.declines)

    @property
    def last_error(self) -> Optional[str]:
        """Detail of the most recent ERROR decline, if any."""
        for _name, decline in reversed(self.declines):
            if decline.reason is DeclineReason.ERROR:
                return decline.detail
        return None


class FallbackChain:
    """Try providers strictly in order; fall through to a terminal provider."""

    def __init__(self, providers: Sequence[Provider], terminal: StaticProvider, *, name: str = "chain") -> None:
        """Store the ordered providers and the terminal provider."""
        self.providers = list(providers)
        self.terminal = terminal
        self.name = name

    @property
    def provider_names(self) -> list[str]:
        """Names of all providers including the terminal one, in order."""
        return [p.name for p in self.providers] + [self.terminal.name]

    def configured_providers(self) -> list[str]:
        """Names of the non-terminal providers that currently have credentials."""
        return [p.name for p in self.providers if p.is_configured()]

    def resolve(self, request: Any) -> Resolution:
        """Return the first successful result, or the terminal provider's output."""
        declines: List[Tuple[str, Decline]] = []
        for provider in self.providers:
            outcome = self._attempt(provider, request)
            if isinstance(outcome, Success):
                logger.debug("Provider answered", extra={"chain": self.name, "provider": provider.name})
                return Resolution(value=outcome.value, source=provider.name, declines=declines)
            declines.append((provider.name, outcome))

        if declines and any(d.reason is not DeclineReason.NOT_CONFIGURED for _n, d in declines):
            logger.info(
                "All providers declined; using terminal provider",
                extra={"chain": self.name, "provider": self.terminal.name,
                       "declined": [(n, d.reason.value) for n, d in declines]},
            )
        result = self.terminal.fetch(request)
        return Resolution(value=result.value, source=self.terminal.name, declines=declines)

    def _attempt(self, provider: Provider, request: Any) -> ProviderResult:
        """Run one provider, turning missing config and stray exceptions into declines."""
        if not provider.is_configured():
            logger.debug("Provider not configured", extra={"chain": self.name, "provider": provider.name})
            return Decline(DeclineReason.NOT_CONFIGURED, "no credentials configured")
        try:
            outcome = provider.fetch(request)
        except Exception as exc:
            logger.warning(
                "Provider raised; moving to next provider",
                extra={"chain": self.name, "provider": provider.name, "error": str(exc)},
            )
            return Decline(DeclineReason.ERROR, str(exc))
        if isinstance(outcome, Decline) and outcome.reason is not DeclineReason.NOT_CONFIGURED:
            logger.warning(
                "Provider declined",
                extra={"chain": self.name, "provider": provider.name,
                       "reason": outcome.reason.value, "detail": outcome.detail},
            )
        return outcome
