# src/taskdeck/auth/callback.py

from __future__ import annotations

"""
OAuth redirect-callback resolution.

Given the redirect URL delivered after an external OAuth round trip, pick the
first applicable strategy and turn it into a CallbackOutcome:

1. code exchange      - query has `code` or `state`
2. implicit URL flow  - fragment non-empty, or "access_token=" anywhere in the URL
3. manual tokens      - fragment carries `access_token` (+ optional `refresh_token`)
4. nothing matched    - failure

A strategy only applies if the identity backend exposes the matching
capability. Exactly one strategy runs per call; there is no retry and no
fallback after a strategy has been attempted.

Errors never escape resolve(): backend errors become failures carrying the
backend message, anything unexpected (a URL that is not absolute included)
becomes a generic failure.
"""

import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any
from urllib.parse import parse_qs, urlsplit

from ..core.ports import IdentityProvider, Session, SessionResponse

logger = logging.getLogger(__name__)

NO_SESSION_IN_URL = "no session found in URL"
GENERIC_FAILURE = "Failed to handle auth callback"
EMPTY_SESSION = "identity provider returned no session"

_NETWORK_SCHEMES = frozenset({"http", "https"})


class ResolutionStrategy(StrEnum):
    CODE_EXCHANGE = "code_exchange"
    URL_SESSION = "url_session"
    MANUAL_TOKENS = "manual_tokens"


@dataclass(frozen=True, slots=True)
class CallbackOutcome:
    success: bool
    session: Session | None = None
    error: str | None = None
    strategy: ResolutionStrategy | None = None

    @classmethod
    def ok(cls, session: Session, strategy: ResolutionStrategy | None = None) -> CallbackOutcome:
        return cls(success=True, session=session, strategy=strategy)

    @classmethod
    def fail(cls, error: str, strategy: ResolutionStrategy | None = None) -> CallbackOutcome:
        return cls(success=False, error=error, strategy=strategy)


@dataclass(frozen=True, slots=True)
class IdentityCapabilities:
    """Which optional identity-backend methods are available (bound methods or None)."""

    exchange_code_for_session: Callable[[str], Any] | None = None
    get_session_from_url: Callable[[str], Any] | None = None
    set_session: Callable[[str, str | None], Any] | None = None

    @classmethod
    def probe(cls, provider: IdentityProvider) -> IdentityCapabilities:
        def cap(name: str) -> Callable[..., Any] | None:
            fn = getattr(provider, name, None)
            return fn if callable(fn) else None

        return cls(
            exchange_code_for_session=cap("exchange_code_for_session"),
            get_session_from_url=cap("get_session_from_url"),
            set_session=cap("set_session"),
        )


@dataclass(frozen=True, slots=True)
class CallbackUrl:
    """Parsed view of a redirect URL."""

    raw: str
    query: dict[str, list[str]]
    fragment: str
    fragment_params: dict[str, list[str]]

    @classmethod
    def parse(cls, url: str) -> CallbackUrl:
        """Raises ValueError for anything that is not an absolute URL."""
        parts = urlsplit(url)
        if not parts.scheme:
            raise ValueError(f"callback URL has no scheme: {url!r}")
        if parts.scheme in _NETWORK_SCHEMES and not parts.netloc:
            raise ValueError(f"callback URL has no host: {url!r}")
        return cls(
            raw=url,
            query=parse_qs(parts.query),
            fragment=parts.fragment,
            fragment_params=parse_qs(parts.fragment),
        )

    def query_value(self, name: str) -> str | None:
        values = self.query.get(name)
        return values[0] if values else None

    def fragment_value(self, name: str) -> str | None:
        values = self.fragment_params.get(name)
        return values[0] if values else None

    @property
    def has_code_or_state(self) -> bool:
        return bool(self.query_value("code") or self.query_value("state"))

    @property
    def looks_implicit(self) -> bool:
        return bool(self.fragment) or "access_token=" in self.raw


async def _call(fn: Callable[..., Any], *args: Any) -> SessionResponse:
    result = fn(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


def _to_outcome(response: SessionResponse | None, strategy: ResolutionStrategy) -> CallbackOutcome:
    if response is None:
        return CallbackOutcome.fail(EMPTY_SESSION, strategy)
    if response.error:
        return CallbackOutcome.fail(str(response.error), strategy)
    if response.session is None:
        return CallbackOutcome.fail(EMPTY_SESSION, strategy)
    return CallbackOutcome.ok(response.session, strategy)


class AuthCallbackResolver:
    def __init__(self, provider: IdentityProvider) -> None:
        self._caps = IdentityCapabilities.probe(provider)
        logger.debug(
            "AuthCallbackResolver capabilities exchange=%s url_session=%s set_session=%s",
            self._caps.exchange_code_for_session is not None,
            self._caps.get_session_from_url is not None,
            self._caps.set_session is not None,
        )

    @property
    def capabilities(self) -> IdentityCapabilities:
        return self._caps

    def select_strategy(self, url: CallbackUrl) -> ResolutionStrategy | None:
        """First applicable strategy for this URL, or None."""
        caps = self._caps
        if caps.exchange_code_for_session is not None and url.has_code_or_state:
            return ResolutionStrategy.CODE_EXCHANGE
        if caps.get_session_from_url is not None and url.looks_implicit:
            return ResolutionStrategy.URL_SESSION
        if caps.set_session is not None and url.fragment_value("access_token"):
            return ResolutionStrategy.MANUAL_TOKENS
        return None

    async def resolve(self, url: str) -> CallbackOutcome:
        try:
            parsed = CallbackUrl.parse(url)
            strategy = self.select_strategy(parsed)
            logger.debug("Auth callback strategy=%s", strategy)

            if strategy is ResolutionStrategy.CODE_EXCHANGE:
                response = await _call(self._caps.exchange_code_for_session, url)  # type: ignore[arg-type]
            elif strategy is ResolutionStrategy.URL_SESSION:
                response = await _call(self._caps.get_session_from_url, url)  # type: ignore[arg-type]
            elif strategy is ResolutionStrategy.MANUAL_TOKENS:
                response = await _call(
                    self._caps.set_session,  # type: ignore[arg-type]
                    parsed.fragment_value("access_token"),
                    parsed.fragment_value("refresh_token"),
                )
            else:
                return CallbackOutcome.fail(NO_SESSION_IN_URL)

            outcome = _to_outcome(response, strategy)
        except Exception:
            logger.exception("Auth callback resolution crashed")
            return CallbackOutcome.fail(GENERIC_FAILURE)

        if outcome.success:
            logger.info("Auth callback resolved via %s", strategy)
        else:
            logger.info("Auth callback failed via %s: %s", strategy, outcome.error)
        return outcome
