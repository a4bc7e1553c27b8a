"""Pydantic models for the parts of the GitHub REST payloads the audit reads.

Only the fields the pipeline consumes are declared; everything else in the
API response is ignored.
"""

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class GitHubModel(BaseModel):
    """Base for immutable API records."""

    model_config = ConfigDict(frozen=True, extra="ignore")


class Label(GitHubModel):
    """Issue/pull request label."""

    name: str


class PullRequestSummary(GitHubModel):
    """One entry of the pull request listing."""

    number: int
    title: str = ""
    url: str = ""
    html_url: str = ""
    state: str = ""
    labels: tuple[Label, ...] = Field(default_factory=tuple)


class ChangedFile(GitHubModel):
    """One file touched by a pull request."""

    filename: str
    raw_url: str
    sha: str = ""
    status: str = ""
    additions: int = 0
    deletions: int = 0
    changes: int = 0


class RateLimitErrorBody(GitHubModel):
    """Error document returned when the rate limit is exhausted."""

    message: str
    documentation_url: str


PULL_REQUEST_PAGE = TypeAdapter(list[PullRequestSummary])
CHANGED_FILE_LIST = TypeAdapter(list[ChangedFile])
