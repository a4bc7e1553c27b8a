"""GitHub API client exceptions."""

from typing import Any


class GitHubError(Exception):
    """Base exception for GitHub API errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_data: dict[str, Any] | None = None,
    ):
        """Initialize GitHub error.

        Args:
            message: Error message
            status_code: HTTP status code
            response_data: Response data from GitHub API
        """
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data or {}


class GitHubAuthenticationError(GitHubError):
    """Raised when authentication fails."""

    pass


class GitHubRateLimitError(GitHubError):
    """Raised when the API reports that the rate limit is exhausted."""

    def __init__(
        self,
        message: str,
        reset_time: int | None = None,
        seconds_until_reset: float | None = None,
        documentation_url: str | None = None,
    ):
        """Initialize rate limit error.

        Args:
            message: Error message
            reset_time: Unix timestamp when rate limit resets
            seconds_until_reset: Wait left until the reset, None if unknown
            documentation_url: Documentation URL reported by the API
        """
        super().__init__(message, status_code=403)
        self.reset_time = reset_time
        self.seconds_until_reset = seconds_until_reset
        self.documentation_url = documentation_url


class GitHubResponseShapeError(GitHubError):
    """Raised when a response body does not have the expected shape."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        response_data: dict[str, Any] | None = None,
    ):
        super().__init__(message, status_code, response_data)
        self.url = url


class GitHubPageLimitError(GitHubError):
    """Raised when a listing has more pages than the configured cap."""

    def __init__(self, message: str, max_pages: int, next_url: str | None = None):
        super().__init__(message)
        self.max_pages = max_pages
        self.next_url = next_url


class GitHubNotFoundError(GitHubError):
    """Raised when resource is not found."""

    pass


class GitHubServerError(GitHubError):
    """Raised when GitHub server returns 5xx error."""

    pass


class GitHubConnectionError(GitHubError):
    """Raised when connection to GitHub fails."""

    pass


class GitHubTimeoutError(GitHubError):
    """Raised when request times out."""

    pass
