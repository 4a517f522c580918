"""Tests for the concrete AI providers using stubbed SDK clients."""

from types import SimpleNamespace

import pytest

from repokeeper.ai_agent.providers import build_providers
from repokeeper.ai_agent.providers.base import ProviderFamily
from repokeeper.ai_agent.providers.claude import ClaudeProvider
from repokeeper.ai_agent.providers.ollama import OllamaProvider
from repokeeper.ai_agent.providers.openai import GeminiProvider, OpenAIProvider
from repokeeper.config import Settings


class FakeCompletions:
    def __init__(self, content="pong", error=None):
        self.content = content
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=self.content), finish_reason="stop")],
            usage=SimpleNamespace(prompt_tokens=1000, completion_tokens=500),
        )


def openai_client(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


@pytest.mark.asyncio
async def test_openai_execute_prompt_tracks_usage():
    provider = OpenAIProvider("sk-test", model="gpt-4o-mini")
    completions = FakeCompletions("hello")
    provider._client = openai_client(completions)

    assert await provider.execute_prompt("hi") == "hello"
    assert completions.calls[0]["messages"][-1] == {"role": "user", "content": "hi"}
    assert completions.calls[0]["max_tokens"] == 2000
    assert provider.get_total_tokens() == 1500
    assert provider.get_total_cost() == pytest.approx((1000 * 0.15 + 500 * 0.60) / 1_000_000)


@pytest.mark.asyncio
async def test_reasoning_models_use_completion_tokens():
    provider = OpenAIProvider("sk-test", model="o3-mini")
    completions = FakeCompletions()
    provider._client = openai_client(completions)

    await provider.execute_prompt("hi")

    assert "max_completion_tokens" in completions.calls[0]
    assert completions.calls[0]["messages"] == [{"role": "user", "content": "hi"}]


@pytest.mark.asyncio
async def test_openai_errors_propagate():
    provider = OpenAIProvider("sk-test")
    provider._client = openai_client(FakeCompletions(error=RuntimeError("quota exceeded")))

    with pytest.raises(RuntimeError):
        await provider.execute_prompt("hi")


@pytest.mark.asyncio
async def test_claude_execute_prompt():
    provider = ClaudeProvider("sk-ant-test")
    calls = []

    async def create(**kwargs):
        calls.append(kwargs)
        return SimpleNamespace(
            content=[SimpleNamespace(text="pong")],
            usage=SimpleNamespace(input_tokens=10, output_tokens=5),
        )

    provider._client = SimpleNamespace(messages=SimpleNamespace(create=create))

    assert await provider.execute_prompt("ping") == "pong"
    assert calls[0]["model"] == "claude-sonnet-4-20250514"
    assert provider.get_total_tokens() == 15


def test_ollama_availability_follows_base_url():
    assert not OllamaProvider("").is_available()
    provider = OllamaProvider("http://localhost:11434/", model="mistral")
    assert provider.is_available()
    assert provider.base_url == "http://localhost:11434/v1"
    assert provider.capabilities.models == ["mistral"]


def test_provider_without_key_is_unavailable():
    assert not OpenAIProvider("").is_available()
    assert GeminiProvider("key").is_available()
    assert GeminiProvider("key").base_url.startswith("https://generativelanguage.googleapis.com")


def test_build_providers_from_settings(monkeypatch):
    for var in ("OPENAI_API_KEY", "CHATGPT_API_KEY", "DEEPSEEK_API_KEY", "GEMINI_API_KEY"):
        monkeypatch.delenv(var, raising=False)
    settings = Settings(
        _env_file=None,
        ANTHROPIC_API_KEY="sk-ant",
        OLLAMA_BASE_URL="http://localhost:11434",
    )

    providers = build_providers(settings)

    assert [p.family for p in providers] == [
        ProviderFamily.CLAUDE,
        ProviderFamily.OPENAI,
        ProviderFamily.GEMINI,
        ProviderFamily.DEEPSEEK,
        ProviderFamily.CHATGPT,
        ProviderFamily.OLLAMA,
    ]
    assert [p.name for p in providers if p.is_available()] == ["claude", "ollama"]


def test_family_from_name():
    assert ProviderFamily.from_name("Claude") is ProviderFamily.CLAUDE
    assert ProviderFamily.from_name("mystery") is ProviderFamily.UNKNOWN
