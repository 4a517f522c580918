"""
OpenAI provider implementation, plus the OpenAI-compatible backends
(ChatGPT, DeepSeek, Gemini) that share the same client.
"""

import logging
from typing import Optional

from openai import AsyncOpenAI

from .base import AIProvider, Capabilities, ProviderFamily

logger = logging.getLogger(__name__)


class OpenAIProvider(AIProvider):
    """OpenAI GPT provider."""

    family = ProviderFamily.OPENAI
    version = "v1"
    base_url: Optional[str] = None

    # Pricing per 1M tokens
    PRICING = {
        "gpt-4o": {"input": 2.50, "output": 10.00},
        "gpt-4o-mini": {"input": 0.15, "output": 0.60},
        "gpt-4.1": {"input": 2.00, "output": 8.00},
    }

    CAPABILITIES = Capabilities(
        max_tokens=128_000,
        supports_batch=True,
        supports_streaming=True,
        models=list(PRICING),
    )

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gpt-4o-mini",
        max_tokens: int = 2000,
        base_url: Optional[str] = None
    ):
        """
        Initialize an OpenAI-compatible provider.

        Args:
            api_key: API key
            model: Model name
            max_tokens: Maximum tokens for responses
            base_url: Override for OpenAI-compatible endpoints
        """
        super().__init__(api_key, model, self.CAPABILITIES, max_tokens)
        if base_url:
            self.base_url = base_url
        self._client: Optional[AsyncOpenAI] = None

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self.api_key, base_url=self.base_url)
            logger.info(f"Initialized {self.name} provider with model: {self.model}")
        return self._client

    def _is_reasoning_model(self) -> bool:
        model = self.model.lower()
        return "gpt-5" in model or model.startswith(("o1", "o3"))

    async def execute_prompt(self, prompt: str) -> str:
        """Execute a raw prompt against the chat completions API."""
        try:
            if self._is_reasoning_model():
                # Reasoning models often don't support 'system' role
                api_params = {
                    "model": self.model,
                    "messages": [{"role": "user", "content": prompt}],
                    "max_completion_tokens": self.max_tokens
                }
            else:
                api_params = {
                    "model": self.model,
                    "messages": [
                        {"role": "system", "content": "You are a senior DevOps consultant and GitHub repository expert."},
                        {"role": "user", "content": prompt}
                    ],
                    "max_tokens": self.max_tokens,
                    "temperature": 0.3
                }

            logger.debug(f"Calling {self.name} with model={self.model}")
            response = await self.client.chat.completions.create(**api_params)
            content = response.choices[0].message.content or ""

            if not content:
                logger.warning(f"{self.name} returned empty content. Finish reason: {response.choices[0].finish_reason}")

            if response.usage is not None:
                self._track_usage(response.usage.prompt_tokens, response.usage.completion_tokens)

            return content

        except Exception as e:
            logger.error(f"{self.name} execute_prompt failed: {e}")
            raise


class ChatGPTProvider(OpenAIProvider):
    """ChatGPT models served through the OpenAI API with a separate key."""

    family = ProviderFamily.CHATGPT

    CAPABILITIES = Capabilities(
        max_tokens=128_000,
        supports_batch=False,
        supports_streaming=True,
        models=["gpt-4o", "chatgpt-4o-latest"],
    )


class DeepSeekProvider(OpenAIProvider):
    """DeepSeek via its OpenAI-compatible endpoint."""

    family = ProviderFamily.DEEPSEEK
    base_url = "https://api.deepseek.com"

    PRICING = {
        "deepseek-chat": {"input": 0.27, "output": 1.10},
        "deepseek-reasoner": {"input": 0.55, "output": 2.19},
    }

    CAPABILITIES = Capabilities(
        max_tokens=64_000,
        supports_batch=False,
        supports_streaming=True,
        models=list(PRICING),
    )


class GeminiProvider(OpenAIProvider):
    """Google Gemini via the OpenAI compatibility layer."""

    family = ProviderFamily.GEMINI
    version = "v1beta"
    base_url = "https://generativelanguage.googleapis.com/v1beta/openai/"

    PRICING = {
        "gemini-2.5-flash": {"input": 0.30, "output": 2.50},
        "gemini-2.5-pro": {"input": 1.25, "output": 10.00},
    }

    CAPABILITIES = Capabilities(
        max_tokens=1_000_000,
        supports_batch=True,
        supports_streaming=True,
        models=list(PRICING),
    )
