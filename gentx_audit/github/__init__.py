"""GitHub API client package."""

from .auth import AccessTokenAuth, AnonymousAuth, AuthProvider, AuthToken, auth_from_token
from .client import GitHubClient, GitHubClientConfig, GitHubResponse
from .exceptions import (
    GitHubAuthenticationError,
    GitHubConnectionError,
    GitHubError,
    GitHubNotFoundError,
    GitHubPageLimitError,
    GitHubRateLimitError,
    GitHubResponseShapeError,
    GitHubServerError,
    GitHubTimeoutError,
)
from .models import ChangedFile, Label, PullRequestSummary, RateLimitErrorBody
from .pagination import AsyncPaginator, LinkHeader, PaginatedResponse
from .rate_limiting import CANONICAL_RATE_LIMIT_DOCS, RateLimitSentinel

__all__ = [
    "CANONICAL_RATE_LIMIT_DOCS",
    "AccessTokenAuth",
    "AnonymousAuth",
    "AsyncPaginator",
    "AuthProvider",
    "AuthToken",
    "ChangedFile",
    "GitHubAuthenticationError",
    "GitHubClient",
    "GitHubClientConfig",
    "GitHubConnectionError",
    "GitHubError",
    "GitHubNotFoundError",
    "GitHubPageLimitError",
    "GitHubRateLimitError",
    "GitHubResponse",
    "GitHubResponseShapeError",
    "GitHubServerError",
    "GitHubTimeoutError",
    "Label",
    "LinkHeader",
    "PaginatedResponse",
    "PullRequestSummary",
    "RateLimitErrorBody",
    "RateLimitSentinel",
    "auth_from_token",
]
