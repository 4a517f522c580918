"""Tests for provider health checks and the health cache."""

import asyncio
import time

import pytest

from conftest import FakeProvider
from repokeeper.ai_agent.health import HealthCache, HealthChecker, HealthStatus
from repokeeper.ai_agent.providers.base import ProviderFamily


def test_cache_entry_expires_after_ttl(clock):
    cache = HealthCache(ttl=120, clock=clock)
    cache.set("claude", True)

    clock.advance(119)
    assert cache.get("claude").is_healthy is True

    clock.advance(1)
    assert cache.get("claude") is None


def test_cache_last_writer_wins(clock):
    cache = HealthCache(ttl=120, clock=clock)
    cache.set("openai", True)
    clock.advance(5)
    cache.set("openai", False)

    status = cache.get("openai")
    assert status.is_healthy is False
    assert status.last_checked_at == clock.now
    assert cache.is_unhealthy("openai")


def test_cache_unknown_provider_is_not_unhealthy(clock):
    cache = HealthCache(clock=clock)
    assert cache.get("nobody") is None
    assert not cache.is_unhealthy("nobody")


@pytest.mark.asyncio
async def test_check_pings_once_within_ttl(clock):
    provider = FakeProvider("claude", ProviderFamily.CLAUDE)
    checker = HealthChecker(HealthCache(ttl=120, clock=clock), timeout=1.0)

    assert await checker.check(provider) is True
    clock.advance(60)
    assert await checker.check(provider) is True
    assert len(provider.calls) == 1

    clock.advance(60)
    assert await checker.check(provider) is True
    assert len(provider.calls) == 2


@pytest.mark.asyncio
async def test_timeout_marks_provider_unhealthy(clock):
    provider = FakeProvider("gemini", ProviderFamily.GEMINI, delay=0.2)
    cache = HealthCache(clock=clock)
    checker = HealthChecker(cache, timeout=0.05)

    assert await checker.check(provider) is False
    assert cache.is_unhealthy("gemini")
    recorded = cache.get("gemini")

    # the answer would have arrived by now; it must not overwrite the verdict
    clock.advance(10)
    await asyncio.sleep(0.3)

    assert cache.is_unhealthy("gemini")
    assert cache.get("gemini") == recorded
    assert cache.get("gemini").last_checked_at == recorded.last_checked_at


class SequencedProvider(FakeProvider):
    """Answers each call with the next (delay, error) step and moves the clock."""

    def __init__(self, name, family, steps, clock):
        super().__init__(name, family)
        self.steps = list(steps)
        self.clock = clock

    async def execute_prompt(self, prompt: str) -> str:
        self.calls.append(prompt)
        delay, error = self.steps.pop(0)
        await asyncio.sleep(delay)
        self.clock.advance(1)
        if error is not None:
            raise error
        return "pong"


@pytest.mark.asyncio
async def test_concurrent_checks_leave_one_consistent_entry(clock):
    # the first (failing) check finishes last, so it is the last writer
    provider = SequencedProvider(
        "claude", ProviderFamily.CLAUDE,
        steps=[(0.1, RuntimeError("overloaded")), (0.0, None)],
        clock=clock,
    )
    cache = HealthCache(ttl=120, clock=clock)
    checker = HealthChecker(cache, timeout=1.0)

    results = await asyncio.gather(checker.check(provider), checker.check(provider))

    assert results == [False, True]
    assert len(provider.calls) == 2
    snapshot = cache.snapshot()
    assert list(snapshot) == ["claude"]
    status = snapshot["claude"]
    assert isinstance(status, HealthStatus)
    assert status.is_healthy is False
    assert status.last_checked_at == clock.now


@pytest.mark.asyncio
async def test_ping_exception_is_contained(clock):
    provider = FakeProvider("openai", ProviderFamily.OPENAI, error=RuntimeError("401 Unauthorized"))
    cache = HealthCache(clock=clock)
    checker = HealthChecker(cache, timeout=1.0)

    assert await checker.check(provider) is False
    assert cache.get("openai").is_healthy is False


@pytest.mark.asyncio
async def test_empty_response_is_unhealthy(clock):
    provider = FakeProvider("deepseek", ProviderFamily.DEEPSEEK, response="   ")
    checker = HealthChecker(HealthCache(clock=clock), timeout=1.0)

    assert await checker.check(provider) is False


@pytest.mark.asyncio
async def test_unconfigured_provider_is_not_pinged(clock):
    provider = FakeProvider("ollama", ProviderFamily.OLLAMA, available=False)
    checker = HealthChecker(HealthCache(clock=clock), timeout=1.0)

    assert await checker.check(provider) is False
    assert provider.calls == []


@pytest.mark.asyncio
async def test_unknown_family_uses_configuration(clock):
    configured = FakeProvider("custom", ProviderFamily.UNKNOWN, error=RuntimeError("never called"))
    missing = FakeProvider("other", ProviderFamily.UNKNOWN, available=False)
    checker = HealthChecker(HealthCache(clock=clock), timeout=1.0)

    assert await checker.check(configured) is True
    assert await checker.check(missing) is False
    assert configured.calls == []


@pytest.mark.asyncio
async def test_hung_provider_does_not_block_others(clock):
    slow = FakeProvider("gemini", ProviderFamily.GEMINI, delay=10.0)
    fast = FakeProvider("claude", ProviderFamily.CLAUDE)
    checker = HealthChecker(HealthCache(clock=clock), timeout=0.2)

    started = time.monotonic()
    results = await checker.check_all([slow, fast])
    elapsed = time.monotonic() - started

    assert results == {"gemini": False, "claude": True}
    assert elapsed < 2.0
