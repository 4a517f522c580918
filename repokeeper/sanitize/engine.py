"""
Sanitization policy engine.

Runs the cleanup stages for one repository in a fixed order and assembles a
``SanitizationReport``. Each stage is independent: a failing API call skips
that stage and the remaining stages still run.
"""
import concurrent.futures
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

import requests

from ..github.api import GitHubAPI
from .health import BASE_HEALTH, RELEASE_BASE, calculate_health_score, calculate_improvement, calculate_release_health
from .models import (
    ActionType,
    QualityImprovement,
    ResourceSavings,
    SanitizationAction,
    SanitizationReport,
    SecurityImprovement,
)
from .rules import Rules

logger = logging.getLogger(__name__)

STANDARD_FILES = {
    "README.md": "Add a README.md describing the project, setup and usage",
    "LICENSE": "Add a LICENSE file so the terms of use are explicit",
    ".gitignore": "Add a .gitignore to keep build output and secrets out of the repository",
    "CONTRIBUTING.md": "Add a CONTRIBUTING.md with contribution guidelines and development workflow",
}

INACTIVE_DAYS = 180
ISSUE_BACKLOG_LIMIT = 50
MAINTENANCE_HOURS_PER_ITEM = 0.05
POINTS_PER_STANDARD_FILE = 100.0 / len(STANDARD_FILES)


@dataclass
class StageResult:
    """What a single stage produced."""
    action: Optional[SanitizationAction] = None
    recommendations: List[str] = field(default_factory=list)
    security_impacts: List[SecurityImprovement] = field(default_factory=list)
    quality_impacts: List[QualityImprovement] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)
    storage_bytes: int = 0
    compute_minutes: float = 0.0


class SanitizationPolicyEngine:
    """Applies age/count-based cleanup rules to one repository."""

    def __init__(
        self,
        api: GitHubAPI,
        rules: Optional[Rules] = None,
        dry_run: bool = True,
        max_workers: int = 1,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc)
    ):
        """
        Args:
            api: Hosting API client
            rules: Cleanup thresholds, defaults to ``Rules()``
            dry_run: When True no delete calls are issued
            max_workers: Run stages in a thread pool when greater than 1
            now: Clock used for age thresholds and timestamps
        """
        self.api = api
        self.rules = rules or Rules()
        self.dry_run = dry_run
        self.max_workers = max_workers
        self.now = now

    def run(self, owner: str, repo: str) -> SanitizationReport:
        """Run every stage and assemble the report."""
        full_name = f"{owner}/{repo}"
        logger.info(f"Sanitizing {full_name} (dry_run={self.dry_run})")

        stages = [
            ("runs", self.cleanup_workflow_runs),
            ("artifacts", self.cleanup_artifacts),
            ("releases", self.cleanup_releases),
            ("security", self.audit_security),
            ("optimization", self.recommend_optimizations),
        ]

        if self.max_workers > 1:
            with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = [executor.submit(self._run_stage, name, fn, owner, repo) for name, fn in stages]
                # Collected in declaration order so the report stays deterministic
                results = [f.result() for f in futures]
        else:
            results = [self._run_stage(name, fn, owner, repo) for name, fn in stages]

        return self._assemble(full_name, results)

    def _run_stage(self, name: str, stage, owner: str, repo: str) -> StageResult:
        try:
            return stage(owner, repo)
        except requests.RequestException as e:
            logger.warning(f"Skipping {name} for {owner}/{repo}: {e}")
            return StageResult(notes=[f"{name}: {e}"])
        except Exception as e:
            # Malformed payloads (bad timestamps, missing fields) only cost this stage
            logger.exception("Error running %s stage on %s/%s", name, owner, repo)
            return StageResult(notes=[f"{name}: {e}"])

    def _cutoff(self, days: int) -> Optional[datetime]:
        if days <= 0:
            return None
        return self.now() - timedelta(days=days)

    def _delete_all(self, label: str, ids: List[int], delete: Callable[[int], None]) -> List[int]:
        """Issue deletions unless in dry-run mode; return the ids that failed."""
        if self.dry_run:
            return []
        failed = []
        for item_id in ids:
            try:
                delete(item_id)
            except requests.RequestException as e:
                logger.warning(f"Failed to delete {label} {item_id}: {e}")
                failed.append(item_id)
        return failed

    def _action(self, action_type: ActionType, description: str, impact: str,
                count: int, savings: str, success: bool = True) -> SanitizationAction:
        return SanitizationAction(
            type=action_type,
            description=description,
            impact=impact,
            items_count=count,
            savings=savings,
            timestamp=self.now(),
            success=success,
        )

    def _verb(self) -> str:
        return "Would delete" if self.dry_run else "Deleted"

    def cleanup_workflow_runs(self, owner: str, repo: str) -> StageResult:
        """Delete old workflow runs, keeping the most recent successful ones."""
        rule = self.rules.runs
        cutoff = self._cutoff(rule.max_age_days)
        allowed = set(rule.only_workflows)

        result = StageResult()
        if allowed:
            known = {w.name for w in self.api.list_workflows(owner, repo)}
            unknown = sorted(allowed - known)
            if unknown:
                logger.warning(f"{owner}/{repo}: unknown workflows in only_workflows: {', '.join(unknown)}")
                result.notes.append(f"runs: unknown workflows {', '.join(unknown)}")

        eligible = []
        kept = 0
        for run in self.api.list_workflow_runs(owner, repo):
            if allowed and run.name not in allowed:
                continue
            # keep N latest successful
            if run.is_successful and kept < rule.keep_success_last:
                kept += 1
                continue
            # in-progress runs cannot be deleted
            if run.status != "completed":
                continue
            if cutoff is not None and (run.created_at is None or run.created_at > cutoff):
                continue
            eligible.append(run)

        failed = self._delete_all(
            "workflow run",
            [r.id for r in eligible],
            lambda run_id: self.api.delete_workflow_run(owner, repo, run_id)
        )
        minutes = sum(r.duration_minutes for r in eligible)
        logger.info(f"{owner}/{repo}: {len(eligible)} workflow runs eligible for deletion, {kept} kept")

        result.compute_minutes = minutes
        result.action = self._action(
            ActionType.WORKFLOW_RUNS,
            f"{self._verb()} {len(eligible)} workflow runs older than {rule.max_age_days} days "
            f"(kept last {kept} successful)",
            "medium" if eligible else "low",
            len(eligible),
            f"~{minutes:.0f} compute minutes of run history",
            success=not failed,
        )
        if failed:
            result.notes.append(f"runs: {len(failed)} deletions failed")
        return result

    def cleanup_artifacts(self, owner: str, repo: str) -> StageResult:
        """Delete artifacts that expired or are older than the age threshold."""
        cutoff = self._cutoff(self.rules.artifacts.max_age_days)

        eligible = [
            a for a in self.api.list_artifacts(owner, repo)
            if a.expired or (cutoff is not None and a.created_at is not None and a.created_at < cutoff)
        ]

        failed = self._delete_all(
            "artifact",
            [a.id for a in eligible],
            lambda artifact_id: self.api.delete_artifact(owner, repo, artifact_id)
        )
        size = sum(a.size_in_bytes for a in eligible)
        logger.info(f"{owner}/{repo}: {len(eligible)} artifacts eligible for deletion")

        result = StageResult(storage_bytes=size)
        result.action = self._action(
            ActionType.ARTIFACTS,
            f"{self._verb()} {len(eligible)} artifacts older than "
            f"{self.rules.artifacts.max_age_days} days or expired",
            "high" if size > 100 * 1024 * 1024 else ("medium" if eligible else "low"),
            len(eligible),
            f"{size / (1024 * 1024):.1f} MB storage",
            success=not failed,
        )
        if failed:
            result.notes.append(f"artifacts: {len(failed)} deletions failed")
        return result

    def cleanup_releases(self, owner: str, repo: str) -> StageResult:
        """Delete stale draft releases; published releases are never touched."""
        rule = self.rules.releases
        if not rule.delete_drafts:
            return StageResult(notes=["releases: draft cleanup disabled"])
        cutoff = self._cutoff(rule.max_age_days)

        eligible = [
            r for r in self.api.list_releases(owner, repo)
            if r.draft and (cutoff is None or (r.created_at is not None and r.created_at < cutoff))
        ]

        failed = self._delete_all(
            "release",
            [r.id for r in eligible],
            lambda release_id: self.api.delete_release(owner, repo, release_id)
        )
        logger.info(f"{owner}/{repo}: {len(eligible)} draft releases eligible for deletion")

        result = StageResult()
        result.action = self._action(
            ActionType.RELEASES,
            f"{self._verb()} {len(eligible)} draft releases older than {rule.max_age_days} days",
            "low",
            len(eligible),
            f"{len(eligible)} stale drafts removed from the releases page",
            success=not failed,
        )
        if failed:
            result.notes.append(f"releases: {len(failed)} deletions failed")
        return result

    def audit_security(self, owner: str, repo: str) -> StageResult:
        """Flag deploy keys older than the rotation threshold. Never deletes."""
        max_age = self.rules.security.key_max_age_days
        cutoff = self._cutoff(max_age)
        now = self.now()

        result = StageResult()
        flagged = 0
        for key in self.api.list_keys(owner, repo):
            if cutoff is None or key.created_at is None or key.created_at >= cutoff:
                continue
            flagged += 1
            age_days = (now - key.created_at).days
            result.security_impacts.append(SecurityImprovement(
                area="deploy_keys",
                description=f"Deploy key '{key.title}' is {age_days} days old",
                severity="medium" if key.read_only else "high",
                status="rotation_recommended",
            ))

        if flagged:
            result.recommendations.append(
                f"Rotate {flagged} deploy key(s) older than {max_age} days"
            )

        result.action = self._action(
            ActionType.SECURITY_AUDIT,
            f"Flagged {flagged} deploy keys older than {max_age} days for rotation",
            "high" if flagged else "low",
            flagged,
            "Rotation recommended" if flagged else "No stale keys",
        )
        return result

    def _has_file(self, owner: str, repo: str, path: str) -> bool:
        try:
            self.api.get_contents(owner, repo, path)
            return True
        except requests.HTTPError as e:
            if e.response is not None and e.response.status_code == 404:
                return False
            raise

    def recommend_optimizations(self, owner: str, repo: str) -> StageResult:
        """Suggest improvements from repository metadata and standard files."""
        metadata = self.api.get_repository(owner, repo)
        suggestions = []

        missing = 0
        for path, suggestion in STANDARD_FILES.items():
            if not self._has_file(owner, repo, path):
                missing += 1
                suggestions.append(suggestion)

        if not metadata.description:
            suggestions.append("Add a repository description")
        if not metadata.topics:
            suggestions.append("Add topics to improve discoverability")
        if metadata.open_issues_count > ISSUE_BACKLOG_LIMIT:
            suggestions.append(
                f"Triage the backlog of {metadata.open_issues_count} open issues"
            )
        last_updated = metadata.last_updated
        if (not metadata.is_archived and last_updated is not None
                and last_updated < self.now() - timedelta(days=INACTIVE_DAYS)):
            suggestions.append(
                f"No activity for over {INACTIVE_DAYS} days; consider archiving the repository"
            )

        documentation = 100.0 - missing * POINTS_PER_STANDARD_FILE
        result = StageResult(recommendations=suggestions)
        result.quality_impacts.append(QualityImprovement(
            "documentation",
            documentation,
            calculate_improvement(documentation, missing * POINTS_PER_STANDARD_FILE),
        ))
        result.action = self._action(
            ActionType.OPTIMIZATION,
            f"Generated {len(suggestions)} optimization suggestions",
            "medium" if suggestions else "low",
            len(suggestions),
            "Improved maintainability",
        )
        return result

    def _assemble(self, full_name: str, results: List[StageResult]) -> SanitizationReport:
        actions = [r.action for r in results if r.action is not None]

        def successful_count(action_type: ActionType) -> int:
            return sum(a.items_count for a in actions if a.type == action_type and a.success)

        overall = calculate_health_score(
            successful_count(ActionType.WORKFLOW_RUNS),
            successful_count(ActionType.ARTIFACTS),
            successful_count(ActionType.SECURITY_AUDIT),
        )

        release_action = next((a for a in actions if a.type == ActionType.RELEASES), None)
        release_health = calculate_release_health(
            release_action.items_count if release_action is not None else None
        )

        security_impacts = [i for r in results for i in r.security_impacts]
        if len(security_impacts) >= 3:
            risk = "high"
        elif security_impacts:
            risk = "medium"
        else:
            risk = "none"

        cleaned = sum(
            a.items_count for a in actions
            if a.type in (ActionType.WORKFLOW_RUNS, ActionType.ARTIFACTS, ActionType.RELEASES)
        )
        savings = ResourceSavings(
            storage_mb=round(sum(r.storage_bytes for r in results) / (1024 * 1024), 2),
            compute_minutes=int(round(sum(r.compute_minutes for r in results))),
            security_risk_reduction=risk,
            maintenance_hours_saved=round(cleaned * MAINTENANCE_HOURS_PER_ITEM, 2),
        )

        quality = [
            QualityImprovement("overall_health", BASE_HEALTH, overall),
            QualityImprovement("release_health", RELEASE_BASE, release_health),
        ]
        quality.extend(i for r in results for i in r.quality_impacts)

        report = SanitizationReport(
            repository=full_name,
            timestamp=self.now(),
            dry_run=self.dry_run,
            overall_health=overall,
            actions_performed=tuple(actions),
            recommendations=tuple(rec for r in results for rec in r.recommendations),
            savings=savings,
            security_impacts=tuple(security_impacts),
            quality_impacts=tuple(quality),
            notes=tuple(note for r in results for note in r.notes),
        )
        logger.info(
            f"Sanitization of {full_name} complete: {len(actions)} actions, health {overall:.1f}"
        )
        return report
