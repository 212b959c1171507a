# src/taskdeck/auth/callback_flow.py

from __future__ import annotations

"""
Callback-screen flow around AuthCallbackResolver.

The URL can arrive two ways: as the initial URL the app was opened with, or
as a live URL event while the callback screen is listening. Both paths feed
offer(); the first resolution to finish wins, every other in-flight
resolution is cancelled and later offers are ignored.

The listen window is time-boxed. Timeout and failure route the same way:
back to the sign-in entry point.
"""

import asyncio
import logging
from enum import StrEnum

from ..core.ports import Notifier
from .callback import AuthCallbackResolver, CallbackOutcome

logger = logging.getLogger(__name__)

TIMED_OUT = "timed out waiting for callback URL"


class CallbackRoute(StrEnum):
    HOME = "home"
    SIGN_IN = "sign_in"


def route_for(outcome: CallbackOutcome) -> CallbackRoute:
    return CallbackRoute.HOME if outcome.success else CallbackRoute.SIGN_IN


class CallbackListener:
    """
    Single-resolution race over callback URLs.

    Must be used from a running event loop. wait() may be awaited once.
    """

    def __init__(self, resolver: AuthCallbackResolver, *, timeout_seconds: float = 5.0) -> None:
        self._resolver = resolver
        self._timeout = max(0.0, float(timeout_seconds))
        self._result: asyncio.Future[CallbackOutcome] = asyncio.get_running_loop().create_future()
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def settled(self) -> bool:
        return self._result.done()

    def offer(self, url: str | None) -> bool:
        """
        Hand a callback URL to the listener.

        Returns False if the URL was ignored (empty, or an outcome already won).
        """
        if not url:
            return False
        if self._result.done():
            logger.debug("Callback URL ignored, outcome already settled")
            return False

        task = asyncio.create_task(self._resolve(url))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return True

    async def _resolve(self, url: str) -> None:
        outcome = await self._resolver.resolve(url)
        self._settle(outcome)

    def _settle(self, outcome: CallbackOutcome) -> None:
        if self._result.done():
            return
        self._result.set_result(outcome)
        current = asyncio.current_task()
        for task in list(self._pending):
            if task is not current and not task.done():
                task.cancel()

    def close(self) -> None:
        """Stop listening: cancel in-flight resolutions and settle as timed out."""
        self._settle(CallbackOutcome.fail(TIMED_OUT))

    async def wait(self) -> CallbackOutcome:
        try:
            return await asyncio.wait_for(asyncio.shield(self._result), timeout=self._timeout)
        except TimeoutError:
            logger.info("No callback URL resolved within %.1fs", self._timeout)
            self.close()
            return self._result.result()


async def complete_auth_callback(
    resolver: AuthCallbackResolver,
    initial_url: str | None,
    *,
    timeout_seconds: float = 5.0,
    notifier: Notifier | None = None,
) -> tuple[CallbackOutcome, CallbackRoute]:
    """
    Resolve the initial URL (if any) within the listen window and pick the
    next route.

    Callers that also receive live URL events should build a CallbackListener
    themselves and offer() each event to it.
    """
    listener = CallbackListener(resolver, timeout_seconds=timeout_seconds)
    listener.offer(initial_url)
    outcome = await listener.wait()
    route = route_for(outcome)

    if notifier is not None:
        if outcome.success:
            notifier.notify("success", "Signed in")
        else:
            notifier.notify("error", "Sign-in failed", outcome.error or "")

    return outcome, route
