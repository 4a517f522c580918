"""
Claude (Anthropic) provider implementation.
"""

import logging
from typing import Optional

from anthropic import AsyncAnthropic

from .base import AIProvider, Capabilities, ProviderFamily

logger = logging.getLogger(__name__)


class ClaudeProvider(AIProvider):
    """Anthropic Claude provider."""

    family = ProviderFamily.CLAUDE
    version = "2023-06-01"

    # Pricing per 1M tokens
    PRICING = {
        "claude-sonnet-4-20250514": {"input": 3.00, "output": 15.00},
        "claude-3-5-haiku-latest": {"input": 0.80, "output": 4.00},
        "claude-3-opus-20240229": {"input": 15.00, "output": 75.00},
    }

    CAPABILITIES = Capabilities(
        max_tokens=200_000,
        supports_batch=True,
        supports_streaming=True,
        models=list(PRICING),
    )

    def __init__(self, api_key: Optional[str], model: str = "claude-sonnet-4-20250514", max_tokens: int = 2000):
        """
        Initialize Claude provider.

        Args:
            api_key: Anthropic API key
            model: Model name
            max_tokens: Maximum tokens for responses
        """
        super().__init__(api_key, model, self.CAPABILITIES, max_tokens)
        self._client: Optional[AsyncAnthropic] = None

    @property
    def client(self) -> AsyncAnthropic:
        if self._client is None:
            self._client = AsyncAnthropic(api_key=self.api_key)
            logger.info(f"Initialized Claude provider with model: {self.model}")
        return self._client

    async def execute_prompt(self, prompt: str) -> str:
        """Execute a raw prompt against Claude."""
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=0.3,
                system="You are a senior DevOps consultant and GitHub repository expert.",
                messages=[{"role": "user", "content": prompt}]
            )

            content = response.content[0].text if response.content else ""
            self._track_usage(response.usage.input_tokens, response.usage.output_tokens)

            return content

        except Exception as e:
            logger.error(f"Claude execute_prompt failed: {e}")
            raise
