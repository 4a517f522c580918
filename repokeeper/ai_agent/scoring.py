"""
Provider scoring.

A provider's score is the sum of independent components:

1. availability base (50) when the provider is configured
2. model-quality weight per family (``QUALITY_WEIGHTS``)
3. token headroom: prompt tokens / ``max_tokens`` below 25% -> 15,
   below 50% -> 10, otherwise 5
4. capability match: +10 each for batch / streaming when required and offered
5. model diversity: +1 per exposed model, at most 5
6. task affinity: per-family bonuses for "code", "security" and
   "json"/"format" found in the prompt (``KEYWORD_BONUSES``)

A provider whose last health check failed gets ``UNHEALTHY_SCORE`` and
nothing else, which keeps it selectable only as a last resort.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

from .health import HealthCache
from .providers.base import AIProvider, ProviderFamily

UNHEALTHY_SCORE = 5.0
AVAILABILITY_SCORE = 50.0

QUALITY_WEIGHTS: Dict[ProviderFamily, float] = {
    ProviderFamily.CLAUDE: 25.0,
    ProviderFamily.OPENAI: 22.0,
    ProviderFamily.GEMINI: 20.0,
    ProviderFamily.CHATGPT: 20.0,
    ProviderFamily.DEEPSEEK: 18.0,
    ProviderFamily.OLLAMA: 10.0,
}
UNKNOWN_QUALITY_WEIGHT = 5.0

HEADROOM_TIERS: Tuple[Tuple[float, float], ...] = (
    (0.25, 15.0),
    (0.50, 10.0),
)
HEADROOM_MIN_SCORE = 5.0

CAPABILITY_BONUS = 10.0
MODEL_DIVERSITY_BONUS = 1.0
MODEL_DIVERSITY_CAP = 5

KEYWORD_BONUSES: Dict[str, Dict[ProviderFamily, float]] = {
    "code": {
        ProviderFamily.CLAUDE: 8.0,
        ProviderFamily.DEEPSEEK: 6.0,
        ProviderFamily.OPENAI: 4.0,
    },
    "security": {
        ProviderFamily.CLAUDE: 6.0,
        ProviderFamily.OPENAI: 5.0,
    },
    "format": {
        ProviderFamily.OPENAI: 6.0,
        ProviderFamily.CHATGPT: 6.0,
        ProviderFamily.GEMINI: 4.0,
    },
}
# Keywords that trigger the same bonus table
KEYWORD_ALIASES = {"json": "format"}

CHARS_PER_TOKEN = 4


def estimate_tokens(prompt: str) -> int:
    """Rough token count for a prompt (about four characters per token)."""
    return max(1, len(prompt) // CHARS_PER_TOKEN)


@dataclass(frozen=True)
class RequiredCapabilities:
    """What the caller needs from a provider for one request."""
    min_tokens: int = 0
    batch: bool = False
    streaming: bool = False

    def required_tokens(self, prompt: str) -> int:
        return max(self.min_tokens, estimate_tokens(prompt))


@dataclass(frozen=True)
class ProviderScore:
    """Ephemeral ranking entry for one selection request."""
    provider: AIProvider
    score: float
    reason: str


class ProviderScorer:
    """Ranks providers against a prompt's requirements."""

    def __init__(self, cache: HealthCache):
        self.cache = cache

    def fits(self, provider: AIProvider, required: RequiredCapabilities, prompt: str) -> bool:
        """True when the prompt fits in the provider's context window."""
        return required.required_tokens(prompt) <= provider.capabilities.max_tokens

    def score(self, provider: AIProvider, required: RequiredCapabilities, prompt: str) -> float:
        return self.evaluate(provider, required, prompt).score

    def evaluate(self, provider: AIProvider, required: RequiredCapabilities, prompt: str) -> ProviderScore:
        """Score a provider and explain how the score was built."""
        if self.cache.is_unhealthy(provider.name):
            return ProviderScore(provider, UNHEALTHY_SCORE, "failed health check")

        caps = provider.capabilities
        parts = []
        total = 0.0

        if provider.is_available():
            total += AVAILABILITY_SCORE
            parts.append(f"available={AVAILABILITY_SCORE:g}")

        quality = QUALITY_WEIGHTS.get(provider.family, UNKNOWN_QUALITY_WEIGHT)
        total += quality
        parts.append(f"quality={quality:g}")

        headroom = self._headroom_score(required.required_tokens(prompt), caps.max_tokens)
        total += headroom
        parts.append(f"headroom={headroom:g}")

        capability = 0.0
        if required.batch and caps.supports_batch:
            capability += CAPABILITY_BONUS
        if required.streaming and caps.supports_streaming:
            capability += CAPABILITY_BONUS
        if capability:
            total += capability
            parts.append(f"capabilities={capability:g}")

        diversity = min(len(set(caps.models)), MODEL_DIVERSITY_CAP) * MODEL_DIVERSITY_BONUS
        if diversity:
            total += diversity
            parts.append(f"models={diversity:g}")

        affinity = self._keyword_score(provider.family, prompt)
        if affinity:
            total += affinity
            parts.append(f"affinity={affinity:g}")

        return ProviderScore(provider, total, ", ".join(parts))

    @staticmethod
    def _headroom_score(tokens: int, max_tokens: int) -> float:
        if max_tokens <= 0:
            return 0.0
        ratio = tokens / max_tokens
        for limit, points in HEADROOM_TIERS:
            if ratio < limit:
                return points
        return HEADROOM_MIN_SCORE

    @staticmethod
    def _keyword_score(family: ProviderFamily, prompt: str) -> float:
        text = prompt.lower()
        matched = set()
        for keyword in list(KEYWORD_BONUSES) + list(KEYWORD_ALIASES):
            if keyword in text:
                matched.add(KEYWORD_ALIASES.get(keyword, keyword))
        return sum(KEYWORD_BONUSES[k].get(family, 0.0) for k in matched)

