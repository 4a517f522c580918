"""
Base abstract class for AI providers.

Defines the capability contract that every backend (Claude, OpenAI, Gemini,
Ollama, ...) implements so the selector can treat them interchangeably.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class ProviderFamily(str, Enum):
    """Closed set of backend families known to the selector."""
    CLAUDE = "claude"
    OPENAI = "openai"
    CHATGPT = "chatgpt"
    DEEPSEEK = "deepseek"
    GEMINI = "gemini"
    OLLAMA = "ollama"
    UNKNOWN = "unknown"

    @classmethod
    def from_name(cls, name: str) -> "ProviderFamily":
        try:
            return cls(name.lower())
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class Capabilities:
    """What a provider can handle."""
    max_tokens: int
    supports_batch: bool = False
    supports_streaming: bool = False
    models: List[str] = field(default_factory=list)


class AIProvider(ABC):
    """Abstract base class for AI providers."""

    family: ProviderFamily = ProviderFamily.UNKNOWN
    version: str = "v1"

    # Pricing per 1M tokens, keyed by model name
    PRICING: dict = {}

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        capabilities: Capabilities,
        max_tokens: int = 2000,
        name: Optional[str] = None
    ):
        """
        Initialize the AI provider.

        Args:
            api_key: API key for the provider (empty when not configured)
            model: Model name to use
            capabilities: Context size and feature support of the backend
            max_tokens: Maximum tokens for responses
            name: Display name, defaults to the family name
        """
        self.api_key = api_key or ""
        self.model = model
        self.capabilities = capabilities
        self.max_tokens = max_tokens
        self.name = name or self.family.value
        self._total_cost = 0.0
        self._total_tokens = 0

    def is_available(self) -> bool:
        """True when the provider is configured (credential present)."""
        return bool(self.api_key)

    @abstractmethod
    async def execute_prompt(self, prompt: str) -> str:
        """
        Execute a raw text prompt against the AI model.

        Args:
            prompt: User prompt

        Returns:
            AI response as text

        Raises:
            Exception: any transport or API error from the backend client
        """
        pass

    def estimate_cost(self, input_tokens: int, output_tokens: int) -> float:
        """Estimate the cost of an API call in USD."""
        pricing = self.PRICING.get(self.model)
        if not pricing:
            return 0.0
        return (input_tokens * pricing["input"] + output_tokens * pricing["output"]) / 1_000_000

    def _track_usage(self, input_tokens: int, output_tokens: int) -> None:
        self._total_cost += self.estimate_cost(input_tokens, output_tokens)
        self._total_tokens += input_tokens + output_tokens

    def get_total_cost(self) -> float:
        """Get total cost of all API calls made by this provider."""
        return self._total_cost

    def get_total_tokens(self) -> int:
        """Get total tokens used by this provider."""
        return self._total_tokens

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, model={self.model!r})"
