"""Shared fakes for the test suite."""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest
import requests

from repokeeper.ai_agent.providers.base import AIProvider, Capabilities, ProviderFamily
from repokeeper.github.models import (
    Artifact,
    DeployKey,
    Issue,
    Release,
    Repository,
    Workflow,
    WorkflowRun,
)

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


def days_ago(days: float) -> datetime:
    return NOW - timedelta(days=days)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeProvider(AIProvider):
    """Provider whose answers are scripted by the test."""

    def __init__(
        self,
        name: str,
        family: ProviderFamily = ProviderFamily.UNKNOWN,
        response: str = "pong",
        error: Optional[Exception] = None,
        delay: float = 0.0,
        max_tokens: int = 100_000,
        batch: bool = False,
        streaming: bool = False,
        models: Optional[List[str]] = None,
        available: bool = True,
    ):
        self.family = family
        super().__init__(
            "key" if available else "",
            "fake-model",
            Capabilities(
                max_tokens=max_tokens,
                supports_batch=batch,
                supports_streaming=streaming,
                models=models or [],
            ),
            name=name,
        )
        self.response = response
        self.error = error
        self.delay = delay
        self.calls: List[str] = []

    async def execute_prompt(self, prompt: str) -> str:
        self.calls.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.response


def http_error(status: int) -> requests.HTTPError:
    response = requests.Response()
    response.status_code = status
    return requests.HTTPError(f"{status} Error", response=response)


class FakeGitHubAPI:
    """In-memory stand-in for ``GitHubAPI`` that records deletions."""

    def __init__(self):
        self.repository = Repository(
            name="widget",
            full_name="acme/widget",
            description="Widgets as a service",
            language="Python",
            pushed_at=(NOW - timedelta(days=2)).isoformat(),
            topics=["widgets"],
        )
        self.workflows: List[Workflow] = []
        self.runs: List[WorkflowRun] = []
        self.artifacts: List[Artifact] = []
        self.releases: List[Release] = []
        self.keys: List[DeployKey] = []
        self.issues: List[Issue] = []
        self.files = {"README.md", "LICENSE", ".gitignore", "CONTRIBUTING.md"}
        # method name -> exception raised when it is called
        self.errors: Dict[str, Exception] = {}
        self.deleted: Dict[str, List[int]] = {"runs": [], "artifacts": [], "releases": []}

    def _maybe_fail(self, method: str) -> None:
        if method in self.errors:
            raise self.errors[method]

    def get_repository(self, owner, repo):
        self._maybe_fail("get_repository")
        return self.repository

    def get_contents(self, owner, repo, path):
        self._maybe_fail("get_contents")
        if path not in self.files:
            raise http_error(404)
        return {"path": path}

    def list_workflows(self, owner, repo):
        self._maybe_fail("list_workflows")
        return list(self.workflows)

    def list_workflow_runs(self, owner, repo):
        self._maybe_fail("list_workflow_runs")
        return list(self.runs)

    def delete_workflow_run(self, owner, repo, run_id):
        self._maybe_fail("delete_workflow_run")
        self.deleted["runs"].append(run_id)

    def list_artifacts(self, owner, repo):
        self._maybe_fail("list_artifacts")
        return list(self.artifacts)

    def delete_artifact(self, owner, repo, artifact_id):
        self._maybe_fail("delete_artifact")
        self.deleted["artifacts"].append(artifact_id)

    def list_releases(self, owner, repo):
        self._maybe_fail("list_releases")
        return list(self.releases)

    def delete_release(self, owner, repo, release_id):
        self._maybe_fail("delete_release")
        self.deleted["releases"].append(release_id)

    def list_keys(self, owner, repo):
        self._maybe_fail("list_keys")
        return list(self.keys)

    def list_issues(self, owner, repo, state="all", limit=10):
        self._maybe_fail("list_issues")
        return list(self.issues)

    @property
    def delete_count(self) -> int:
        return sum(len(ids) for ids in self.deleted.values())


def make_run(run_id, age_days, conclusion="success", status="completed", name="CI", minutes=5.0):
    created = days_ago(age_days)
    return WorkflowRun(
        id=run_id,
        name=name,
        status=status,
        conclusion=conclusion,
        created_at=created,
        run_started_at=created,
        updated_at=created + timedelta(minutes=minutes),
    )


def make_artifact(artifact_id, age_days, expired=False, size=1024 * 1024):
    return Artifact(
        id=artifact_id,
        name=f"build-{artifact_id}",
        size_in_bytes=size,
        expired=expired,
        created_at=days_ago(age_days),
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def api():
    return FakeGitHubAPI()
