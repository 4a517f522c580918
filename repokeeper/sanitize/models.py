"""
Sanitization report structures.

Actions and reports are frozen: an action is appended once per category and
never changed, and a report is assembled once per run.
"""
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class ActionType(str, Enum):
    WORKFLOW_RUNS = "workflow_runs_cleanup"
    ARTIFACTS = "artifacts_cleanup"
    RELEASES = "releases_cleanup"
    SECURITY_AUDIT = "security_audit"
    OPTIMIZATION = "optimization"


@dataclass(frozen=True)
class SanitizationAction:
    """One recorded unit of cleanup work against a resource category.

    ``items_count`` is the number of resources identified by the rule, the
    same in dry-run and live mode.
    """
    type: ActionType
    description: str
    impact: str
    items_count: int
    savings: str
    timestamp: datetime
    success: bool = True


@dataclass(frozen=True)
class ResourceSavings:
    storage_mb: float = 0.0
    compute_minutes: int = 0
    security_risk_reduction: str = "none"
    maintenance_hours_saved: float = 0.0


@dataclass(frozen=True)
class SecurityImprovement:
    area: str
    description: str
    severity: str
    status: str


@dataclass(frozen=True)
class QualityImprovement:
    metric: str
    before: float
    after: float

    @property
    def improvement(self) -> float:
        return round(self.after - self.before, 2)


@dataclass(frozen=True)
class SanitizationReport:
    repository: str
    timestamp: datetime
    dry_run: bool
    overall_health: float
    actions_performed: Tuple[SanitizationAction, ...] = ()
    recommendations: Tuple[str, ...] = ()
    savings: ResourceSavings = field(default_factory=ResourceSavings)
    security_impacts: Tuple[SecurityImprovement, ...] = ()
    quality_impacts: Tuple[QualityImprovement, ...] = ()
    notes: Tuple[str, ...] = ()

    def action(self, action_type: ActionType) -> Optional[SanitizationAction]:
        for action in self.actions_performed:
            if action.type == action_type:
                return action
        return None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['timestamp'] = self.timestamp.isoformat()
        data['actions_performed'] = [
            dict(a, type=a['type'].value, timestamp=a['timestamp'].isoformat())
            for a in data['actions_performed']
        ]
        data['quality_impacts'] = [
            dict(q, improvement=impact.improvement)
            for q, impact in zip(data['quality_impacts'], self.quality_impacts)
        ]
        for key in ('recommendations', 'security_impacts', 'notes'):
            data[key] = list(data[key])
        return data
