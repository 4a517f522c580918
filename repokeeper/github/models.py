"""
Data models for GitHub API responses.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a GitHub ISO-8601 timestamp into an aware datetime."""
    if not value:
        return None
    return datetime.fromisoformat(value.replace('Z', '+00:00'))


@dataclass
class Repository:
    """Repository information from GitHub API."""
    name: str
    full_name: str
    html_url: str = ""
    description: Optional[str] = None
    language: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    pushed_at: Optional[str] = None
    size: int = 0
    stargazers_count: int = 0
    forks_count: int = 0
    open_issues_count: int = 0
    has_issues: bool = True
    is_fork: bool = False
    is_archived: bool = False
    default_branch: str = "main"
    topics: List[str] = field(default_factory=list)

    @property
    def last_updated(self) -> Optional[datetime]:
        """Get the last update time as a datetime object."""
        return parse_timestamp(self.pushed_at or self.updated_at)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Repository":
        return cls(
            name=data['name'],
            full_name=data['full_name'],
            html_url=data.get('html_url', ''),
            description=data.get('description'),
            language=data.get('language'),
            created_at=data.get('created_at'),
            updated_at=data.get('updated_at'),
            pushed_at=data.get('pushed_at'),
            size=data.get('size', 0),
            stargazers_count=data.get('stargazers_count', 0),
            forks_count=data.get('forks_count', 0),
            open_issues_count=data.get('open_issues_count', 0),
            has_issues=data.get('has_issues', True),
            is_fork=data.get('fork', False),
            is_archived=data.get('archived', False),
            default_branch=data.get('default_branch', 'main'),
            topics=list(data.get('topics') or []),
        )


@dataclass
class Workflow:
    """A workflow definition."""
    id: int
    name: str
    path: str = ""
    state: str = "active"

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Workflow":
        return cls(
            id=data['id'],
            name=data.get('name', ''),
            path=data.get('path', ''),
            state=data.get('state', 'active'),
        )


@dataclass
class WorkflowRun:
    """A single workflow run."""
    id: int
    name: str
    status: str
    conclusion: Optional[str] = None
    created_at: Optional[datetime] = None
    run_started_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_successful(self) -> bool:
        return self.status == "completed" and self.conclusion == "success"

    @property
    def duration_minutes(self) -> float:
        """Wall-clock duration of the run, 0 when timestamps are missing."""
        start = self.run_started_at or self.created_at
        if not start or not self.updated_at:
            return 0.0
        return max((self.updated_at - start).total_seconds() / 60.0, 0.0)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "WorkflowRun":
        return cls(
            id=data['id'],
            name=data.get('name') or '',
            status=data.get('status') or '',
            conclusion=data.get('conclusion'),
            created_at=parse_timestamp(data.get('created_at')),
            run_started_at=parse_timestamp(data.get('run_started_at')),
            updated_at=parse_timestamp(data.get('updated_at')),
        )


@dataclass
class Artifact:
    """A workflow artifact."""
    id: int
    name: str
    size_in_bytes: int = 0
    expired: bool = False
    created_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Artifact":
        return cls(
            id=data['id'],
            name=data.get('name', ''),
            size_in_bytes=data.get('size_in_bytes', 0),
            expired=data.get('expired', False),
            created_at=parse_timestamp(data.get('created_at')),
            expires_at=parse_timestamp(data.get('expires_at')),
        )


@dataclass
class Release:
    """A repository release."""
    id: int
    tag_name: str
    name: Optional[str] = None
    draft: bool = False
    prerelease: bool = False
    created_at: Optional[datetime] = None
    published_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Release":
        return cls(
            id=data['id'],
            tag_name=data.get('tag_name', ''),
            name=data.get('name'),
            draft=data.get('draft', False),
            prerelease=data.get('prerelease', False),
            created_at=parse_timestamp(data.get('created_at')),
            published_at=parse_timestamp(data.get('published_at')),
        )


@dataclass
class DeployKey:
    """A repository deploy key."""
    id: int
    title: str
    read_only: bool = True
    created_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "DeployKey":
        return cls(
            id=data['id'],
            title=data.get('title', ''),
            read_only=data.get('read_only', True),
            created_at=parse_timestamp(data.get('created_at')),
        )


@dataclass
class Issue:
    """Issue (or pull request) summary."""
    number: int
    title: str
    state: str = "open"
    is_pull_request: bool = False

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Issue":
        return cls(
            number=data['number'],
            title=data.get('title', ''),
            state=data.get('state', 'open'),
            is_pull_request='pull_request' in data,
        )
