# tests/test_callback_flow.py

from __future__ import annotations

import asyncio

import pytest

from taskdeck.auth.callback import GENERIC_FAILURE, AuthCallbackResolver, CallbackOutcome
from taskdeck.auth.callback_flow import (
    TIMED_OUT,
    CallbackListener,
    CallbackRoute,
    complete_auth_callback,
    route_for,
)

from .fakes import ExplodingProvider, FakeIdentityProvider, FakeNotifier, SlowCodeProvider


async def _drain() -> None:
    for _ in range(5):
        await asyncio.sleep(0)


def test_route_for_outcome() -> None:
    assert route_for(CallbackOutcome(success=True)) is CallbackRoute.HOME
    assert route_for(CallbackOutcome.fail("x")) is CallbackRoute.SIGN_IN


@pytest.mark.asyncio
async def test_initial_url_success_routes_home(notifier: FakeNotifier) -> None:
    resolver = AuthCallbackResolver(FakeIdentityProvider())

    outcome, route = await complete_auth_callback(
        resolver, "myapp://cb?code=abc", timeout_seconds=1.0, notifier=notifier
    )

    assert outcome.success
    assert route is CallbackRoute.HOME
    assert [(n.level, n.title) for n in notifier.sent] == [("success", "Signed in")]


@pytest.mark.asyncio
async def test_no_url_times_out_to_sign_in(notifier: FakeNotifier) -> None:
    resolver = AuthCallbackResolver(FakeIdentityProvider())

    outcome, route = await complete_auth_callback(
        resolver, None, timeout_seconds=0.05, notifier=notifier
    )

    assert not outcome.success
    assert outcome.error == TIMED_OUT
    assert route is CallbackRoute.SIGN_IN
    assert notifier.sent[0].level == "error"
    assert notifier.sent[0].message == TIMED_OUT


@pytest.mark.asyncio
async def test_failure_routes_to_sign_in_with_message(notifier: FakeNotifier) -> None:
    resolver = AuthCallbackResolver(ExplodingProvider())

    outcome, route = await complete_auth_callback(
        resolver, "myapp://cb?code=abc", timeout_seconds=1.0, notifier=notifier
    )

    assert outcome.error == GENERIC_FAILURE
    assert route is CallbackRoute.SIGN_IN
    assert notifier.sent[0].message == GENERIC_FAILURE


@pytest.mark.asyncio
async def test_first_resolution_wins_and_cancels_the_rest() -> None:
    provider = SlowCodeProvider()
    listener = CallbackListener(AuthCallbackResolver(provider), timeout_seconds=1.0)

    assert listener.offer("myapp://cb?code=slow-initial")
    assert listener.offer("myapp://cb?code=live")

    outcome = await listener.wait()
    await _drain()

    assert outcome.success
    assert outcome.session is not None and outcome.session.access_token == "live"
    assert provider.cancelled == ["slow-initial"]
    assert listener.settled
    assert not listener.offer("myapp://cb?code=late")


@pytest.mark.asyncio
async def test_timeout_cancels_in_flight_resolution() -> None:
    provider = SlowCodeProvider()
    listener = CallbackListener(AuthCallbackResolver(provider), timeout_seconds=0.05)
    listener.offer("myapp://cb?code=slow")

    outcome = await listener.wait()
    await _drain()

    assert outcome.error == TIMED_OUT
    assert provider.cancelled == ["slow"]


@pytest.mark.asyncio
async def test_empty_offer_is_ignored() -> None:
    listener = CallbackListener(AuthCallbackResolver(FakeIdentityProvider()), timeout_seconds=0.05)

    assert not listener.offer("")
    assert not listener.offer(None)
    assert not listener.settled


@pytest.mark.asyncio
async def test_close_settles_as_timed_out() -> None:
    listener = CallbackListener(AuthCallbackResolver(FakeIdentityProvider()), timeout_seconds=1.0)

    listener.close()
    outcome = await listener.wait()

    assert outcome.error == TIMED_OUT
    assert not listener.offer("myapp://cb?code=abc")
