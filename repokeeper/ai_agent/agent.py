"""
Main AI Agent class for AI-assisted repository assessments.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from ..github.models import Issue, Repository
from .insights import (
    RepositoryInsight,
    SmartRecommendation,
    STATUS_OK,
    fallback_insight,
    fallback_recommendations,
    health_icon,
    identify_opportunity,
    main_tag,
    risk_level,
)
from .parsing import AIResponseParseError, parse_assessment, parse_json
from .providers.base import AIProvider
from .scoring import RequiredCapabilities
from .selector import ProviderSelector

logger = logging.getLogger(__name__)


class AIAgent:
    """
    Picks a provider per request and turns its answers into insights.

    Every public method returns a usable result: when no provider is usable
    or the answer cannot be parsed, the documented fallback is returned.
    """

    def __init__(
        self,
        providers: List[AIProvider],
        selector: Optional[ProviderSelector] = None,
        required: Optional[RequiredCapabilities] = None
    ):
        """
        Initialize the AI Agent.

        Args:
            providers: Candidate providers, in preference order for ties
            selector: Provider selector (a default one with its own health cache is created otherwise)
            required: Capabilities every request needs
        """
        self.providers = list(providers)
        self.selector = selector or ProviderSelector()
        self.required = required or RequiredCapabilities()
        logger.info(
            f"AI Agent initialized with {sum(p.is_available() for p in self.providers)}"
            f"/{len(self.providers)} configured providers"
        )

    async def _run_prompt(self, prompt: str) -> Optional[tuple]:
        """Execute ``prompt`` on the selected provider; None when nothing answered."""
        provider = await self.selector.select(self.providers, self.required, prompt)
        if provider is None:
            return None
        try:
            response = await provider.execute_prompt(prompt)
        except Exception as e:
            logger.error(f"AI request to {provider.name} failed: {e}")
            return None
        return provider, response

    async def generate_quick_insight(self, repo: Repository) -> RepositoryInsight:
        """Ask the selected provider for a 0-100 score and a one-line assessment."""
        logger.info(f"Generating quick insight for {repo.full_name}")

        result = await self._run_prompt(build_insight_prompt(repo))
        if result is None:
            logger.warning(f"Using fallback insight for {repo.full_name} - AI analysis not available")
            return fallback_insight(repo.full_name)

        provider, response = result
        try:
            parsed = parse_assessment(response)
        except AIResponseParseError as e:
            logger.error(f"Failed to parse AI response from {provider.name}: {e}")
            return fallback_insight(repo.full_name)

        score = parsed['score']
        return RepositoryInsight(
            repository_name=repo.full_name,
            ai_score=score,
            quick_assessment=parsed['assessment'],
            health_icon=health_icon(score),
            main_tag=main_tag(repo),
            risk_level=risk_level(repo, score),
            opportunity=identify_opportunity(repo),
            last_analyzed=datetime.now(timezone.utc),
            provider=provider.name,
            status=STATUS_OK,
        )

    async def generate_smart_recommendations(
        self,
        repo: Repository,
        issues: Optional[List[Issue]] = None
    ) -> List[SmartRecommendation]:
        """Ask the selected provider for three actionable recommendations."""
        logger.info(f"Generating smart recommendations for {repo.full_name}")

        result = await self._run_prompt(build_recommendations_prompt(repo, issues or []))
        if result is None:
            return fallback_recommendations(repo.name)

        provider, response = result
        try:
            data = parse_json(response)
        except AIResponseParseError as e:
            logger.error(f"Failed to parse recommendations from {provider.name}: {e}")
            return fallback_recommendations(repo.name)

        if isinstance(data, dict):
            data = data.get('recommendations', [])
        if not isinstance(data, list):
            return fallback_recommendations(repo.name)

        now = datetime.now(timezone.utc)
        recommendations = []
        for i, item in enumerate(data, start=1):
            if not isinstance(item, dict) or not item.get('title'):
                logger.warning(f"Skipping invalid recommendation: {item!r}")
                continue
            recommendations.append(SmartRecommendation(
                id=f"{repo.name}-{i}",
                type=str(item.get('type', 'maintenance')),
                title=str(item['title']),
                description=str(item.get('description', '')),
                impact=str(item.get('impact', 'medium')),
                effort=str(item.get('effort', 'medium')),
                urgency=str(item.get('urgency', 'medium')),
                generated_at=now,
            ))

        return recommendations or fallback_recommendations(repo.name)


def build_insight_prompt(repo: Repository) -> str:
    return f"""
Analyze this GitHub repository and provide a quick assessment:

Repository: {repo.full_name}
Description: {repo.description or ''}
Language: {repo.language or 'unknown'}
Stars: {repo.stargazers_count}
Forks: {repo.forks_count}
Open Issues: {repo.open_issues_count}
Created: {(repo.created_at or '')[:10]}
Last Updated: {(repo.updated_at or '')[:10]}

Please provide:
1. A score from 0-100 based on repository health and activity
2. A brief 1-sentence assessment focusing on the most important aspect

Format your response as JSON:
{{
    "score": 85.5,
    "assessment": "Active Go project with good community engagement and recent updates"
}}
"""


def build_recommendations_prompt(repo: Repository, issues: List[Issue]) -> str:
    issues_context = ""
    if issues:
        issues_context = f"Recent issues: {repo.open_issues_count} open, latest: '{issues[0].title}'"

    return f"""
Analyze this repository and suggest 3 specific, actionable recommendations:

Repository: {repo.full_name} ({repo.language or 'unknown'})
{issues_context}

Consider:
- Security improvements
- Performance optimizations
- Maintenance tasks
- Feature enhancements

Provide recommendations as JSON array:
[
    {{
        "type": "security",
        "title": "Enable Dependabot",
        "description": "Automatically scan for vulnerable dependencies",
        "impact": "high",
        "effort": "low",
        "urgency": "medium"
    }}
]
"""
