"""
Provider selection: health-check, score, and pick one provider per request.
"""

import logging
from typing import FrozenSet, List, Optional

from .health import HealthCache, HealthChecker
from .providers.base import AIProvider, ProviderFamily
from .scoring import ProviderScore, ProviderScorer, RequiredCapabilities

logger = logging.getLogger(__name__)

# Local/offline models are never picked by the last-resort fallback
DEPRIORITIZED_FAMILIES: FrozenSet[ProviderFamily] = frozenset({ProviderFamily.OLLAMA})


class ProviderSelector:
    """Chooses the best reachable provider for a prompt."""

    def __init__(
        self,
        checker: Optional[HealthChecker] = None,
        scorer: Optional[ProviderScorer] = None,
        deprioritized: FrozenSet[ProviderFamily] = DEPRIORITIZED_FAMILIES
    ):
        if checker is None:
            checker = HealthChecker(HealthCache())
        self.checker = checker
        self.scorer = scorer or ProviderScorer(checker.cache)
        self.deprioritized = deprioritized

    @property
    def cache(self) -> HealthCache:
        return self.checker.cache

    def _supports(self, provider: AIProvider, required: RequiredCapabilities) -> bool:
        caps = provider.capabilities
        if required.batch and not caps.supports_batch:
            return False
        if required.streaming and not caps.supports_streaming:
            return False
        return True

    async def rank(
        self,
        providers: List[AIProvider],
        required: RequiredCapabilities,
        prompt: str
    ) -> List[ProviderScore]:
        """
        Score every provider that passes the pre-checks, best first.

        Pre-checks are availability, context capacity and required features.
        The sort is stable, so equal scores keep their input order.
        """
        candidates = [
            p for p in providers
            if p.is_available() and self.scorer.fits(p, required, prompt) and self._supports(p, required)
        ]
        if not candidates:
            return []

        await self.checker.check_all(candidates)
        scores = [self.scorer.evaluate(p, required, prompt) for p in candidates]
        return sorted(scores, key=lambda s: s.score, reverse=True)

    async def select(
        self,
        providers: List[AIProvider],
        required: Optional[RequiredCapabilities] = None,
        prompt: str = ""
    ) -> Optional[AIProvider]:
        """
        Pick one provider for ``prompt``, or None when nothing is usable.

        Returning None is not an error; callers fall back to their
        "AI unavailable" output.
        """
        required = required or RequiredCapabilities()
        ranked = await self.rank(providers, required, prompt)
        if ranked:
            chosen = ranked[0]
            logger.info(f"Selected provider {chosen.provider.name} (score={chosen.score:.1f}: {chosen.reason})")
            return chosen.provider

        fallback = self._fallback(providers, required, prompt)
        if fallback is not None:
            logger.warning(f"No provider met all requirements, falling back to {fallback.name}")
            return fallback

        logger.warning("No AI provider available for this request")
        return None

    def _fallback(
        self,
        providers: List[AIProvider],
        required: RequiredCapabilities,
        prompt: str
    ) -> Optional[AIProvider]:
        # Feature requirements are relaxed here, context capacity is not
        for provider in providers:
            if provider.family in self.deprioritized:
                continue
            if provider.is_available() and self.scorer.fits(provider, required, prompt):
                return provider
        return None
