"""
GitHub API integration for RepoKeeper.
"""

from .api import GitHubAPI
from .models import Artifact, DeployKey, Issue, Release, Repository, Workflow, WorkflowRun

__all__ = [
    'GitHubAPI',
    'Artifact',
    'DeployKey',
    'Issue',
    'Release',
    'Repository',
    'Workflow',
    'WorkflowRun',
]
