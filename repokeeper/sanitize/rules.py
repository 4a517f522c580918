"""
Cleanup rules for repository sanitization.
"""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunsRule:
    """Workflow runs older than ``max_age_days`` are deleted, except the
    ``keep_success_last`` most recent successful ones. ``only_workflows``
    limits the rule to the named workflows when non-empty."""
    max_age_days: int = 30
    keep_success_last: int = 10
    only_workflows: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ArtifactsRule:
    max_age_days: int = 90


@dataclass(frozen=True)
class ReleasesRule:
    delete_drafts: bool = True
    max_age_days: int = 30


@dataclass(frozen=True)
class SecurityRule:
    key_max_age_days: int = 365


@dataclass(frozen=True)
class Rules:
    runs: RunsRule = field(default_factory=RunsRule)
    artifacts: ArtifactsRule = field(default_factory=ArtifactsRule)
    releases: ReleasesRule = field(default_factory=ReleasesRule)
    security: SecurityRule = field(default_factory=SecurityRule)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Rules":
        data = data or {}
        return cls(
            runs=RunsRule(**(data.get('runs') or {})),
            artifacts=ArtifactsRule(**(data.get('artifacts') or {})),
            releases=ReleasesRule(**(data.get('releases') or {})),
            security=SecurityRule(**(data.get('security') or {})),
        )


@dataclass(frozen=True)
class RepoConfig:
    owner: str
    name: str
    rules: Rules = field(default_factory=Rules)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


def load_repo_configs(path: Union[str, Path]) -> List[RepoConfig]:
    """
    Load per-repository rules from a YAML file shaped like::

        github:
          repos:
            - owner: acme
              name: api
              rules:
                runs: {max_age_days: 14, keep_success_last: 5}
                artifacts: {max_age_days: 90}
                releases: {delete_drafts: true}
    """
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}

    repos = (data.get('github') or {}).get('repos') or []
    configs = []
    for entry in repos:
        try:
            configs.append(RepoConfig(
                owner=entry['owner'],
                name=entry['name'],
                rules=Rules.from_dict(entry.get('rules') or {}),
            ))
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid repository entry in {path}: {entry!r}") from e

    logger.info(f"Loaded rules for {len(configs)} repositories from {path}")
    return configs
