"""
GitHub API client for RepoKeeper.
"""
import logging
import time
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .models import Artifact, DeployKey, Issue, Release, Repository, Workflow, WorkflowRun


class GitHubAPI:
    """GitHub API client with rate limiting and retry logic."""

    BASE_URL = "https://api.github.com"
    PER_PAGE = 100  # Maximum allowed by GitHub API

    def __init__(self, token: str, max_retries: int = 3, timeout: float = 30.0):
        """Initialize the GitHub API client.

        Args:
            token: GitHub personal access token
            max_retries: Maximum number of retries for failed requests
            timeout: Per-request timeout in seconds
        """
        self.token = token
        self.max_retries = max_retries
        self.timeout = timeout
        self.session = self._create_session()
        self.logger = logging.getLogger(__name__)

    def _create_session(self) -> requests.Session:
        """Create a requests session with retry logic and authentication."""
        session = requests.Session()
        retries = Retry(
            total=self.max_retries,
            backoff_factor=1,
            status_forcelist=[500, 502, 503, 504, 429],
            allowed_methods=["GET", "DELETE"]
        )
        session.mount("https://", HTTPAdapter(max_retries=retries))
        session.headers.update({
            "Authorization": f"token {self.token}",
            "Accept": "application/vnd.github+json",
            "User-Agent": "RepoKeeper/0.1.0"
        })
        return session

    def _handle_rate_limit(self, response: requests.Response) -> bool:
        """Handle GitHub API rate limiting."""
        if response.status_code == 403 and 'X-RateLimit-Remaining' in response.headers:
            remaining = int(response.headers['X-RateLimit-Remaining'])
            reset_time = int(response.headers.get('X-RateLimit-Reset', 0))

            if remaining == 0:
                sleep_time = max(0, reset_time - time.time() + 5)  # Add 5s buffer
                self.logger.warning(
                    "Rate limit reached. Sleeping for %.1f seconds until %s",
                    sleep_time,
                    time.ctime(reset_time)
                )
                time.sleep(sleep_time)
                return True
        return False

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """Make an authenticated request to the GitHub API with rate limit handling."""
        url = f"{self.BASE_URL}/{endpoint.lstrip('/')}"
        kwargs.setdefault('timeout', self.timeout)

        while True:
            response = self.session.request(method, url, **kwargs)

            if not self._handle_rate_limit(response):
                break

        response.raise_for_status()
        return response

    def _paginate(self, endpoint: str, key: Optional[str] = None,
                  params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Collect every page of a list endpoint.

        Args:
            endpoint: API path relative to the base URL
            key: Name of the list inside the JSON envelope, or None when the
                endpoint returns a bare list
            params: Extra query parameters
        """
        items: List[Dict[str, Any]] = []
        page = 1

        while True:
            query = {'per_page': self.PER_PAGE, 'page': page}
            query.update(params or {})
            response = self._make_request('GET', endpoint, params=query)

            payload = response.json()
            batch = payload.get(key, []) if key else payload
            if not batch:
                break
            items.extend(batch)

            # Check if we've reached the last page
            if 'next' not in response.links:
                break

            page += 1

        return items

    def get_repository(self, owner: str, repo: str) -> Repository:
        """Get repository metadata."""
        response = self._make_request('GET', f'repos/{owner}/{repo}')
        return Repository.from_api(response.json())

    def get_contents(self, owner: str, repo: str, path: str) -> Dict[str, Any]:
        """Get a file's metadata. Raises HTTPError (404) when the path is missing."""
        response = self._make_request('GET', f'repos/{owner}/{repo}/contents/{path}')
        return response.json()

    def list_workflows(self, owner: str, repo: str) -> List[Workflow]:
        data = self._paginate(f'repos/{owner}/{repo}/actions/workflows', key='workflows')
        return [Workflow.from_api(w) for w in data]

    def list_workflow_runs(self, owner: str, repo: str) -> List[WorkflowRun]:
        data = self._paginate(f'repos/{owner}/{repo}/actions/runs', key='workflow_runs')
        return [WorkflowRun.from_api(r) for r in data]

    def delete_workflow_run(self, owner: str, repo: str, run_id: int) -> None:
        self._make_request('DELETE', f'repos/{owner}/{repo}/actions/runs/{run_id}')

    def list_artifacts(self, owner: str, repo: str) -> List[Artifact]:
        data = self._paginate(f'repos/{owner}/{repo}/actions/artifacts', key='artifacts')
        return [Artifact.from_api(a) for a in data]

    def delete_artifact(self, owner: str, repo: str, artifact_id: int) -> None:
        self._make_request('DELETE', f'repos/{owner}/{repo}/actions/artifacts/{artifact_id}')

    def list_releases(self, owner: str, repo: str) -> List[Release]:
        data = self._paginate(f'repos/{owner}/{repo}/releases')
        return [Release.from_api(r) for r in data]

    def delete_release(self, owner: str, repo: str, release_id: int) -> None:
        self._make_request('DELETE', f'repos/{owner}/{repo}/releases/{release_id}')

    def list_keys(self, owner: str, repo: str) -> List[DeployKey]:
        data = self._paginate(f'repos/{owner}/{repo}/keys')
        return [DeployKey.from_api(k) for k in data]

    def list_issues(self, owner: str, repo: str, state: str = 'all', limit: int = 10) -> List[Issue]:
        """Get the most recent issues for a repository (single page)."""
        response = self._make_request(
            'GET',
            f'repos/{owner}/{repo}/issues',
            params={'state': state, 'per_page': limit}
        )
        return [Issue.from_api(i) for i in response.json()]
