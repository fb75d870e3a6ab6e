"""Data transfer objects for GitHub REST API payloads.

Only the fields the cache persists are declared; everything else in a
payload is ignored. Timestamps arrive as ISO-8601 strings and are parsed
into aware datetimes by pydantic.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class GitHubModel(BaseModel):
    """Base class for remote payloads."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RemoteUser(GitHubModel):
    """Account reference embedded in most payloads."""

    id: int
    login: str
    avatar_url: str | None = None
    type: str | None = None


class RemoteLabel(GitHubModel):
    """Issue or pull request label."""

    id: int
    name: str
    description: str | None = None
    color: str = ""
    is_default: bool = Field(default=False, alias="default")


class RemoteRepository(GitHubModel):
    """Repository payload from ``GET /repos/{owner}/{repo}``."""

    id: int
    name: str
    full_name: str
    owner: RemoteUser
    description: str | None = None
    private: bool = False
    html_url: str | None = None
    clone_url: str | None = None
    fork: bool = False
    default_branch: str | None = None
    visibility: str | None = None
    has_issues: bool = True
    updated_at: datetime | None = None
    pushed_at: datetime | None = None


class RemoteIssue(GitHubModel):
    """Issue payload, as returned by the search API."""

    id: int
    number: int
    state: str
    title: str
    body: str | None = None
    user: RemoteUser
    labels: list[RemoteLabel] = Field(default_factory=list)
    assignees: list[RemoteUser] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    closed_at: datetime | None = None
    html_url: str | None = None
    locked: bool = False
    # Present only when the search hit is a pull request.
    pull_request: dict[str, Any] | None = None

    @property
    def is_pull_request(self) -> bool:
        """Check if this search hit is actually a pull request."""
        return self.pull_request is not None


class RemoteRef(GitHubModel):
    """Branch reference of a pull request."""

    sha: str
    ref: str | None = None


class RemotePullRequest(GitHubModel):
    """Pull request payload from ``GET /repos/{owner}/{repo}/pulls``."""

    id: int
    number: int
    state: str
    title: str
    body: str | None = None
    user: RemoteUser
    labels: list[RemoteLabel] = Field(default_factory=list)
    assignees: list[RemoteUser] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    merged_at: datetime | None = None
    closed_at: datetime | None = None
    html_url: str | None = None
    locked: bool = False
    draft: bool = False
    head: RemoteRef
    merged: bool = False
    mergeable: bool | None = None
    mergeable_state: str | None = None
    commits: int = 0


class RemoteCheckOutput(GitHubModel):
    """Output section of a check run."""

    title: str | None = None
    summary: str | None = None


class RemoteApp(GitHubModel):
    """GitHub App owning a check suite."""

    id: int
    name: str = ""
    slug: str | None = None


class RemoteCheckRun(GitHubModel):
    """Check run payload."""

    id: int
    head_sha: str
    name: str
    status: str | None = None
    conclusion: str | None = None
    details_url: str | None = None
    html_url: str | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    output: RemoteCheckOutput | None = None


class RemoteCheckSuite(GitHubModel):
    """Check suite payload."""

    id: int
    head_sha: str
    status: str | None = None
    conclusion: str | None = None
    url: str | None = None
    app: RemoteApp | None = None


class RemoteCombinedStatus(GitHubModel):
    """Combined commit status payload."""

    state: str
    sha: str
    total_count: int = 0


class RemoteReview(GitHubModel):
    """Pull request review payload."""

    id: int
    user: RemoteUser | None = None
    body: str | None = None
    state: str = ""
    html_url: str | None = None
    submitted_at: datetime | None = None


class RemoteRelease(GitHubModel):
    """Release payload."""

    id: int
    name: str | None = None
    tag_name: str
    prerelease: bool = False
    html_url: str | None = None
    created_at: datetime | None = None
    published_at: datetime | None = None
