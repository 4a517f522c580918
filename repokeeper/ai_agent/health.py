"""
Provider health checks.

A health check sends a minimal "ping" prompt to a provider and waits at most
``timeout`` seconds for a non-empty answer. Verdicts are kept in a
``HealthCache`` for ``ttl`` seconds so hot paths do not pay the ping latency
on every request.
"""

import asyncio
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .providers.base import AIProvider, ProviderFamily

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 3.0  # seconds
DEFAULT_TTL = 120.0  # seconds
PING_PROMPT = "ping"


@dataclass(frozen=True)
class HealthStatus:
    """Last known reachability of one provider."""
    is_healthy: bool
    last_checked_at: float


class HealthCache:
    """
    Time-bounded record of provider reachability, keyed by provider name.

    Entries are replaced as a whole under a lock, so concurrent writers for
    the same provider can never leave a mismatched flag/timestamp pair; the
    last writer wins.
    """

    def __init__(self, ttl: float = DEFAULT_TTL, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self.clock = clock
        self._entries: Dict[str, HealthStatus] = {}
        self._lock = threading.Lock()

    def get(self, name: str) -> Optional[HealthStatus]:
        """Return the entry for ``name`` if it is younger than the TTL."""
        with self._lock:
            status = self._entries.get(name)
        if status is None:
            return None
        if self.clock() - status.last_checked_at >= self.ttl:
            return None
        return status

    def set(self, name: str, is_healthy: bool) -> HealthStatus:
        status = HealthStatus(is_healthy=is_healthy, last_checked_at=self.clock())
        with self._lock:
            self._entries[name] = status
        return status

    def is_unhealthy(self, name: str) -> bool:
        """True only when a fresh entry says the provider failed its check."""
        status = self.get(name)
        return status is not None and not status.is_healthy

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def snapshot(self) -> Dict[str, HealthStatus]:
        with self._lock:
            return dict(self._entries)


class HealthChecker:
    """Pings providers with a bounded timeout and records the verdicts."""

    def __init__(self, cache: HealthCache, timeout: float = DEFAULT_TIMEOUT):
        """
        Args:
            cache: Shared cache the verdicts are written to
            timeout: Seconds to wait for a ping before declaring it unhealthy
        """
        self.cache = cache
        self.timeout = timeout

    async def check(self, provider: AIProvider) -> bool:
        """Return whether ``provider`` is healthy, probing only on a cache miss."""
        cached = self.cache.get(provider.name)
        if cached is not None:
            logger.debug(f"Using cached health for {provider.name}: {cached.is_healthy}")
            return cached.is_healthy

        try:
            healthy = await self._perform_check(provider)
        except Exception as e:
            logger.warning(f"{provider.name} health check fault: {e}")
            healthy = False

        self.cache.set(provider.name, healthy)
        return healthy

    async def check_all(self, providers: List[AIProvider]) -> Dict[str, bool]:
        """Check every provider concurrently; each ping has its own timeout."""
        results = await asyncio.gather(*(self.check(p) for p in providers))
        return {p.name: ok for p, ok in zip(providers, results)}

    async def _perform_check(self, provider: AIProvider) -> bool:
        family = provider.family
        if family is ProviderFamily.OLLAMA:
            # Ollama is often configured but not running
            return await self._ping(provider, "server may not be running")
        elif family in (ProviderFamily.OPENAI, ProviderFamily.CHATGPT):
            return await self._ping(provider, "OpenAI API")
        elif family is ProviderFamily.CLAUDE:
            return await self._ping(provider, "Anthropic API")
        elif family is ProviderFamily.DEEPSEEK:
            return await self._ping(provider, "DeepSeek API")
        elif family is ProviderFamily.GEMINI:
            return await self._ping(provider, "may be slow or unavailable")
        # Unknown providers are assumed reachable when configured
        return provider.is_available()

    async def _ping(self, provider: AIProvider, hint: str) -> bool:
        if not provider.is_available():
            logger.debug(f"{provider.name} provider not available (not configured)")
            return False

        try:
            # wait_for cancels the ping on timeout, so a late answer is dropped
            response = await asyncio.wait_for(provider.execute_prompt(PING_PROMPT), self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"{provider.name} health check timeout ({hint})")
            return False
        except Exception as e:
            logger.warning(f"{provider.name} health check failed ({hint}): {e}")
            return False

        if not response or not response.strip():
            logger.warning(f"{provider.name} {provider.version} health check failed: empty response")
            return False

        logger.debug(f"{provider.name} {provider.version} health check passed")
        return True
