"""
Report aggregation and rendering for maintenance runs.
"""
import json
import logging
import os
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import yaml
from jinja2 import Environment, FileSystemLoader

from ..ai_agent.insights import RepositoryInsight, SmartRecommendation, fallback_insight
from ..sanitize.models import SanitizationReport


class ReportFormat(str, Enum):
    """Supported report formats."""
    MARKDOWN = "markdown"
    JSON = "json"
    YAML = "yaml"


@dataclass(frozen=True)
class MaintenanceReport:
    """Sanitization results merged with the AI assessment."""
    sanitization: SanitizationReport
    insight: RepositoryInsight
    ai_recommendations: Tuple[SmartRecommendation, ...] = ()
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def repository(self) -> str:
        return self.sanitization.repository

    @property
    def ai_status(self) -> str:
        return self.insight.status

    def to_dict(self) -> Dict[str, Any]:
        insight = asdict(self.insight)
        insight['last_analyzed'] = self.insight.last_analyzed.isoformat()
        recommendations = []
        for rec in self.ai_recommendations:
            item = asdict(rec)
            item['generated_at'] = rec.generated_at.isoformat()
            recommendations.append(item)

        return {
            'repository': self.repository,
            'generated_at': self.generated_at.isoformat(),
            'sanitization': self.sanitization.to_dict(),
            'ai_assessment': insight,
            'ai_recommendations': recommendations,
        }


class ReportAggregator:
    """Merges the policy engine's output with the AI assessment."""

    def aggregate(
        self,
        sanitization: SanitizationReport,
        insight: Optional[RepositoryInsight] = None,
        recommendations: Optional[List[SmartRecommendation]] = None
    ) -> MaintenanceReport:
        """Build the final report; a missing insight becomes the unavailable fallback."""
        if insight is None:
            insight = fallback_insight(sanitization.repository)
        return MaintenanceReport(
            sanitization=sanitization,
            insight=insight,
            ai_recommendations=tuple(recommendations or ()),
        )


def _percent(part: float, whole: float) -> float:
    if not whole:
        return 0.0
    return round(100.0 * part / whole, 1)


class ReportGenerator:
    """Render maintenance reports and write them to disk."""

    def __init__(self, output_dir: str, format: ReportFormat = ReportFormat.MARKDOWN):
        """Initialize the report generator.

        Args:
            output_dir: Directory to save reports
            format: Output format for reports
        """
        self.output_dir = output_dir
        self.format = format
        self.template_dir = os.path.join(os.path.dirname(__file__), 'templates')
        self.env = Environment(
            loader=FileSystemLoader(self.template_dir),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True
        )
        self.logger = logging.getLogger(__name__)

    def render(self, report: MaintenanceReport) -> str:
        if self.format == ReportFormat.JSON:
            return self.to_json(report)
        elif self.format == ReportFormat.YAML:
            return self.to_yaml(report)
        return self.to_markdown(report)

    def to_json(self, report: MaintenanceReport) -> str:
        return json.dumps(report.to_dict(), indent=2, ensure_ascii=False)

    def to_yaml(self, report: MaintenanceReport) -> str:
        return yaml.safe_dump(report.to_dict(), sort_keys=False, allow_unicode=True)

    def to_markdown(self, report: MaintenanceReport) -> str:
        sanitization = report.sanitization
        total_items = sum(a.items_count for a in sanitization.actions_performed)
        actions = [
            {
                'type': a.type.value,
                'description': a.description,
                'impact': a.impact,
                'items_count': a.items_count,
                'share': _percent(a.items_count, total_items),
                'savings': a.savings,
                'success': a.success,
            }
            for a in sanitization.actions_performed
        ]
        template = self.env.get_template('report.md.j2')
        return template.render(
            report=report,
            sanitization=sanitization,
            insight=report.insight,
            actions=actions,
            total_items=total_items,
            health_pct=_percent(sanitization.overall_health, 100.0),
        )

    def save(self, report: MaintenanceReport) -> List[str]:
        """Write JSON and the configured format under ``output_dir/<date>/``.

        Returns:
            Paths of the written files
        """
        day_dir = os.path.join(self.output_dir, report.generated_at.strftime('%Y-%m-%d'))
        os.makedirs(day_dir, exist_ok=True)
        base = report.repository.replace('/', '_')

        outputs = {'json': self.to_json(report)}
        if self.format == ReportFormat.MARKDOWN:
            outputs['md'] = self.to_markdown(report)
        elif self.format == ReportFormat.YAML:
            outputs['yaml'] = self.to_yaml(report)

        paths = []
        for ext, content in outputs.items():
            path = os.path.join(day_dir, f"{base}.{ext}")
            with open(path, 'w', encoding='utf-8') as f:
                f.write(content)
            paths.append(path)

        self.logger.info(f"Report for {report.repository} written to {day_dir}")
        return paths
