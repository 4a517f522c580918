"""
Ollama provider implementation for local LLM support.
"""
import logging
from typing import Optional

from openai import AsyncOpenAI

from .base import AIProvider, Capabilities, ProviderFamily

logger = logging.getLogger(__name__)


class OllamaProvider(AIProvider):
    """Ollama provider for local LLM analysis."""

    family = ProviderFamily.OLLAMA

    CAPABILITIES = Capabilities(
        max_tokens=8192,
        supports_batch=False,
        supports_streaming=True,
        models=["llama3"],
    )

    def __init__(self, base_url: Optional[str], model: str = "llama3", max_tokens: int = 2000):
        """
        Initialize Ollama provider.

        Args:
            base_url: Ollama API base URL (e.g., http://localhost:11434), empty when not configured
            model: Model name to use
            max_tokens: Maximum tokens for responses
        """
        # API Key is not needed for Ollama, the endpoint is what makes it available
        capabilities = Capabilities(
            max_tokens=self.CAPABILITIES.max_tokens,
            supports_batch=self.CAPABILITIES.supports_batch,
            supports_streaming=self.CAPABILITIES.supports_streaming,
            models=[model],
        )
        super().__init__("ollama", model, capabilities, max_tokens)

        # Ensure base_url ends with /v1 for OpenAI compatibility if not present
        if base_url and not base_url.endswith("/v1"):
            base_url = f"{base_url.rstrip('/')}/v1"
        self.base_url = base_url or ""
        self._client: Optional[AsyncOpenAI] = None

    def is_available(self) -> bool:
        return bool(self.base_url)

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                base_url=self.base_url,
                api_key="ollama"  # Dummy key
            )
            logger.info(f"Initialized Ollama provider with model: {self.model} at {self.base_url}")
        return self._client

    async def execute_prompt(self, prompt: str) -> str:
        """Execute a raw prompt using Ollama."""
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self.max_tokens
            )
            return response.choices[0].message.content or ""
        except Exception as e:
            logger.error(f"Ollama execute_prompt failed (server may not be running): {e}")
            raise
