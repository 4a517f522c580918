"""
Maintenance service: sanitize a repository and attach the AI assessment.
"""
import asyncio
import logging
from typing import Optional

import requests

from .ai_agent.agent import AIAgent
from .ai_agent.insights import fallback_insight
from .github.api import GitHubAPI
from .reports.generator import MaintenanceReport, ReportAggregator
from .sanitize.engine import SanitizationPolicyEngine

logger = logging.getLogger(__name__)


class MaintenanceService:
    """Runs the policy engine and the AI agent for one repository."""

    def __init__(
        self,
        api: GitHubAPI,
        engine: SanitizationPolicyEngine,
        agent: Optional[AIAgent] = None,
        aggregator: Optional[ReportAggregator] = None
    ):
        self.api = api
        self.engine = engine
        self.agent = agent
        self.aggregator = aggregator or ReportAggregator()

    async def run(self, owner: str, repo: str) -> MaintenanceReport:
        full_name = f"{owner}/{repo}"
        # The engine uses blocking HTTP calls
        sanitization = await asyncio.to_thread(self.engine.run, owner, repo)

        if self.agent is None:
            return self.aggregator.aggregate(sanitization, fallback_insight(full_name))

        try:
            repository = await asyncio.to_thread(self.api.get_repository, owner, repo)
        except (requests.RequestException, KeyError, ValueError) as e:
            logger.warning(f"Could not load {full_name} metadata for AI assessment: {e}")
            return self.aggregator.aggregate(sanitization, fallback_insight(full_name))

        try:
            issues = await asyncio.to_thread(self.api.list_issues, owner, repo)
        except (requests.RequestException, KeyError, ValueError) as e:
            logger.warning(f"Failed to get issues for {full_name}: {e}")
            issues = []

        insight = await self.agent.generate_quick_insight(repository)
        recommendations = await self.agent.generate_smart_recommendations(repository, issues)
        return self.aggregator.aggregate(sanitization, insight, recommendations)
