"""
Repository sanitization: cleanup policies and their report.
"""

from .engine import SanitizationPolicyEngine
from .models import (
    ActionType,
    QualityImprovement,
    ResourceSavings,
    SanitizationAction,
    SanitizationReport,
    SecurityImprovement,
)
from .rules import RepoConfig, Rules, load_repo_configs

__all__ = [
    'ActionType',
    'QualityImprovement',
    'RepoConfig',
    'ResourceSavings',
    'Rules',
    'SanitizationAction',
    'SanitizationPolicyEngine',
    'SanitizationReport',
    'SecurityImprovement',
    'load_repo_configs',
]
