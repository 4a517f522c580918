"""
AI Agent for repository assessments.

This module selects a healthy AI provider per request (Claude, OpenAI,
Gemini, DeepSeek, ChatGPT or Ollama) and turns its answers into insights,
falling back to a clearly marked "unavailable" result when none can answer.
"""

from .agent import AIAgent
from .health import HealthCache, HealthChecker, HealthStatus
from .insights import AI_UNAVAILABLE, RepositoryInsight, SmartRecommendation
from .scoring import ProviderScore, ProviderScorer, RequiredCapabilities
from .selector import ProviderSelector

__all__ = [
    "AIAgent",
    "AI_UNAVAILABLE",
    "HealthCache",
    "HealthChecker",
    "HealthStatus",
    "ProviderScore",
    "ProviderScorer",
    "ProviderSelector",
    "RepositoryInsight",
    "RequiredCapabilities",
    "SmartRecommendation",
]
