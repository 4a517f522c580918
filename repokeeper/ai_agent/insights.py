"""
AI insight data structures and the deterministic fallbacks used when no
provider can answer.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from ..github.models import Repository

AI_UNAVAILABLE = "AI analysis unavailable"
STATUS_OK = "ok"
STATUS_UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class RepositoryInsight:
    """Quick AI insight for one repository."""
    repository_name: str
    ai_score: float
    quick_assessment: str
    health_icon: str
    main_tag: str
    risk_level: str
    opportunity: str
    last_analyzed: datetime
    provider: Optional[str] = None
    status: str = STATUS_OK

    @property
    def is_available(self) -> bool:
        return self.status == STATUS_OK


@dataclass(frozen=True)
class SmartRecommendation:
    """Contextual recommendation produced by a model."""
    id: str
    type: str  # "security", "performance", "maintenance", "enhancement"
    title: str
    description: str
    impact: str
    effort: str
    urgency: str
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def fallback_insight(repository_name: str) -> RepositoryInsight:
    """Insight used when AI is unavailable; the zero score marks it as not real."""
    return RepositoryInsight(
        repository_name=repository_name,
        ai_score=0.0,
        quick_assessment=AI_UNAVAILABLE,
        health_icon="⚠️",
        main_tag="UNAVAILABLE",
        risk_level="unknown",
        opportunity="Enable AI analysis for real insights",
        last_analyzed=datetime.now(timezone.utc),
        provider=None,
        status=STATUS_UNAVAILABLE,
    )


def fallback_recommendations(repo_name: str) -> List[SmartRecommendation]:
    now = datetime.now(timezone.utc)
    return [
        SmartRecommendation(
            id=f"UNAVAILABLE-{repo_name}-1",
            type="warning",
            title=f"{AI_UNAVAILABLE} - configure a provider",
            description="No AI provider answered. Configure Claude, OpenAI, Gemini, DeepSeek or Ollama for real recommendations.",
            impact="none",
            effort="none",
            urgency="none",
            generated_at=now,
        ),
    ]


def health_icon(score: float) -> str:
    if score >= 90:
        return "🟢"
    elif score >= 70:
        return "🟡"
    return "🔴"


def main_tag(repo: Repository, now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    updated = repo.last_updated
    if repo.stargazers_count > 100:
        return "Popular"
    elif updated is not None and updated > now - timedelta(days=7):
        return "Active"
    elif repo.language:
        return repo.language
    return "Project"


def risk_level(repo: Repository, ai_score: float) -> str:
    if ai_score < 60 or repo.open_issues_count > 50:
        return "high"
    elif ai_score < 80 or repo.open_issues_count > 20:
        return "medium"
    return "low"


LANGUAGE_OPPORTUNITIES = {
    "javascript": "Security Hardening - dependency auditing and security linting",
    "typescript": "Security Hardening - dependency auditing and security linting",
    "python": "Test Coverage Expansion - pytest, coverage analysis and automated testing",
    "go": "Go Module Optimization - dependency management and build optimization",
    "java": "Performance Tuning - JVM optimization and memory profiling",
    "rust": "Memory Safety Validation - unsafe code review, fuzzing and benchmarking",
}


def identify_opportunity(repo: Repository) -> str:
    """Pick the most relevant improvement area from repository characteristics."""
    stars, forks = repo.stargazers_count, repo.forks_count

    if stars > 100 or forks > 50:
        if stars > forks * 3:
            return "Community Engagement - contributor guides, issue templates and community events"
        return "Performance Optimization - speed, scalability and resource efficiency"

    if repo.has_issues and repo.open_issues_count > 10:
        if repo.open_issues_count > 50:
            return "Issue Management - better triage, automation and contributor onboarding"
        return "Documentation Enhancement - better docs, examples and troubleshooting guides"

    if repo.size > 10000:  # KB
        return "Architecture Modernization - refactoring, modularization and technical debt reduction"

    opportunity = LANGUAGE_OPPORTUNITIES.get((repo.language or "").lower())
    if opportunity:
        return opportunity

    if stars < 10 and forks < 5:
        return "Project Foundation - README improvement, CI/CD setup and development workflow"

    return "Code Quality Boost - linting setup, automated testing and workflow improvements"
