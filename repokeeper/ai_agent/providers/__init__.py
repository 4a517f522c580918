"""AI provider module initialization."""

from typing import List

from .base import AIProvider, Capabilities, ProviderFamily
from .claude import ClaudeProvider
from .ollama import OllamaProvider
from .openai import ChatGPTProvider, DeepSeekProvider, GeminiProvider, OpenAIProvider


def build_providers(settings) -> List[AIProvider]:
    """
    Build every known provider from settings.

    Providers without credentials are still returned; they simply report
    ``is_available() == False`` and are skipped by the selector.
    """
    return [
        ClaudeProvider(api_key=settings.ANTHROPIC_API_KEY, model=settings.ANTHROPIC_MODEL),
        OpenAIProvider(api_key=settings.OPENAI_API_KEY, model=settings.OPENAI_MODEL),
        GeminiProvider(
            api_key=settings.GEMINI_API_KEY,
            model=settings.GEMINI_MODEL,
            base_url=settings.GEMINI_BASE_URL
        ),
        DeepSeekProvider(
            api_key=settings.DEEPSEEK_API_KEY,
            model=settings.DEEPSEEK_MODEL,
            base_url=settings.DEEPSEEK_BASE_URL
        ),
        ChatGPTProvider(api_key=settings.CHATGPT_API_KEY, model=settings.CHATGPT_MODEL),
        OllamaProvider(base_url=settings.OLLAMA_BASE_URL, model=settings.OLLAMA_MODEL),
    ]


__all__ = [
    "AIProvider",
    "Capabilities",
    "ProviderFamily",
    "ClaudeProvider",
    "OpenAIProvider",
    "ChatGPTProvider",
    "DeepSeekProvider",
    "GeminiProvider",
    "OllamaProvider",
    "build_providers",
]
