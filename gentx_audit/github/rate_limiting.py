"""GitHub API rate limit detection.

Reaching the rate limit ends the run: the sentinel turns a recognised
rate-limit error document into :class:`GitHubRateLimitError` and never waits
or retries.
"""

import logging
import time
from collections.abc import Iterable, Mapping
from typing import NoReturn

from multidict import CIMultiDict
from pydantic import ValidationError

from .exceptions import GitHubRateLimitError, GitHubResponseShapeError
from .models import RateLimitErrorBody

logger = logging.getLogger(__name__)

RATE_LIMIT_RESET_HEADER = "X-RateLimit-Reset"

CANONICAL_RATE_LIMIT_DOCS: tuple[str, ...] = (
    "https://developer.github.com/v3/#rate-limiting",
    "https://docs.github.com/rest/overview/resources-in-the-rest-api#rate-limiting",
    "https://docs.github.com/rest/using-the-rest-api/rate-limits-for-the-rest-api",
)


def seconds_until(reset_header: str | None) -> tuple[int | None, float | None]:
    """Parse a unix reset timestamp and compute the wait left.

    Returns:
        ``(reset, seconds)``; both None if the header is missing or invalid
    """
    if reset_header is None:
        return None, None
    try:
        reset = int(reset_header.strip())
    except ValueError:
        return None, None
    return reset, max(0.0, reset - time.time())


class RateLimitSentinel:
    """Recognises the rate-limit error document in place of an expected page."""

    def __init__(self, documentation_urls: Iterable[str] = CANONICAL_RATE_LIMIT_DOCS):
        """Initialize sentinel.

        Args:
            documentation_urls: ``documentation_url`` values that signal the
                rate limit
        """
        self.documentation_urls = frozenset(documentation_urls)

    def is_rate_limit(self, error: RateLimitErrorBody) -> bool:
        """Check whether an error document is the rate-limit signal."""
        return error.documentation_url in self.documentation_urls

    def inspect(
        self,
        body: bytes,
        headers: Mapping[str, str],
        original: GitHubResponseShapeError,
    ) -> NoReturn:
        """Handle a body that failed to parse as the expected shape.

        Args:
            body: Raw response body
            headers: Response headers
            original: The parse failure for the expected shape

        Raises:
            GitHubRateLimitError: The body is the rate-limit document
            GitHubResponseShapeError: Anything else
        """
        try:
            error = RateLimitErrorBody.model_validate_json(body)
        except ValidationError:
            raise original

        if not self.is_rate_limit(error):
            logger.debug(
                f"Error document is not a rate limit signal: {error.documentation_url}"
            )
            raise original

        reset, wait = seconds_until(CIMultiDict(headers).get(RATE_LIMIT_RESET_HEADER))
        logger.error(
            f"GitHub rate limit exhausted: {error.message} "
            f"(reset in {wait if wait is not None else 'unknown'} seconds)"
        )
        raise GitHubRateLimitError(
            error.message,
            reset_time=reset,
            seconds_until_reset=wait,
            documentation_url=error.documentation_url,
        )
