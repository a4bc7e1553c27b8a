"""GitHub API client with authentication, rate-limit detection, and pagination."""

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, TypeVar
from urllib.parse import parse_qsl, urlencode, urljoin, urlsplit, urlunsplit

import aiohttp
from multidict import CIMultiDict
from pydantic import TypeAdapter, ValidationError

from .auth import AuthProvider
from .exceptions import (
    GitHubAuthenticationError,
    GitHubConnectionError,
    GitHubError,
    GitHubNotFoundError,
    GitHubResponseShapeError,
    GitHubServerError,
    GitHubTimeoutError,
)
from .models import CHANGED_FILE_LIST, PULL_REQUEST_PAGE, ChangedFile, PullRequestSummary
from .pagination import AsyncPaginator, PaginatedResponse
from .rate_limiting import CANONICAL_RATE_LIMIT_DOCS, RateLimitSentinel

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class GitHubClientConfig:
    """Configuration for GitHub client."""

    base_url: str = "https://api.github.com"
    timeout: int = 30
    max_retries: int = 3
    retry_backoff_factor: float = 2.0
    user_agent: str = "gentx-audit/0.1"
    token_placement: str = "query"
    rate_limit_documentation_urls: tuple[str, ...] = field(
        default=CANONICAL_RATE_LIMIT_DOCS
    )


@dataclass(frozen=True)
class GitHubResponse:
    """Fully read HTTP response."""

    status: int
    headers: CIMultiDict[str]
    body: bytes
    url: str


def with_query(url: str, params: dict[str, Any] | None) -> str:
    """Append query parameters to a URL, keeping keys it already carries."""
    if not params:
        return url
    parts = urlsplit(url)
    query = parse_qsl(parts.query, keep_blank_values=True)
    present = {key for key, _ in query}
    query.extend(
        (key, str(value))
        for key, value in params.items()
        if value is not None and key not in present
    )
    return urlunsplit(parts._replace(query=urlencode(query)))


class GitHubClient:
    """Async GitHub REST client used by the submission pipeline.

    Every call is awaited before the next one is issued by the caller, so from
    the pipeline's point of view requests are sequential and blocking.
    """

    def __init__(
        self,
        auth: AuthProvider,
        config: GitHubClientConfig | None = None,
    ) -> None:
        """Initialize GitHub client.

        Args:
            auth: Authentication provider
            config: Client configuration
        """
        self.auth = auth
        self.config = config or GitHubClientConfig()
        self.sentinel = RateLimitSentinel(self.config.rate_limit_documentation_urls)

        # HTTP session will be initialized on first use
        self._session: aiohttp.ClientSession | None = None
        self._session_lock = asyncio.Lock()

    async def __aenter__(self) -> "GitHubClient":
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def _ensure_session(self) -> None:
        """Ensure HTTP session is initialized."""
        if self._session is None or self._session.closed:
            async with self._session_lock:
                if self._session is None or self._session.closed:
                    timeout = aiohttp.ClientTimeout(total=self.config.timeout)
                    self._session = aiohttp.ClientSession(
                        timeout=timeout,
                        headers={"User-Agent": self.config.user_agent},
                    )

    async def close(self) -> None:
        """Close HTTP session and cleanup resources."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    def _generate_correlation_id(self) -> str:
        """Generate correlation ID for request tracking."""
        return str(uuid.uuid4())[:8]

    async def _auth_components(self) -> tuple[dict[str, str], dict[str, str]]:
        """Return ``(params, headers)`` carrying the credential."""
        token = await self.auth.get_token()
        if token is None:
            return {}, {}
        if self.config.token_placement == "header":
            return {}, token.to_header()
        return token.to_params(), {}

    async def _make_request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        authenticated: bool = True,
        accept: str = "application/vnd.github.v3+json",
        correlation_id: str | None = None,
    ) -> GitHubResponse:
        """Make HTTP request, retrying transport faults.

        Connection errors, timeouts and 5xx responses are retried
        ``max_retries`` times with exponential backoff, then raised. Any other
        status is returned to the caller, which decides what the body means.

        Args:
            method: HTTP method
            url: Request URL
            params: Query parameters
            authenticated: Attach the credential to the request
            accept: Accept header value
            correlation_id: Request correlation ID

        Returns:
            Fully read response

        Raises:
            GitHubError: Transport fault after all retries
        """
        if not correlation_id:
            correlation_id = self._generate_correlation_id()

        request_params = dict(params or {})
        request_headers = {"Accept": accept}
        if authenticated:
            auth_params, auth_headers = await self._auth_components()
            request_params.update(auth_params)
            request_headers.update(auth_headers)
        request_url = with_query(url, request_params)

        await self._ensure_session()
        if not self._session:
            raise GitHubConnectionError("Failed to initialize HTTP session")

        last_exception: GitHubError | None = None
        for attempt in range(self.config.max_retries + 1):
            try:
                start_time = time.time()
                # The credential may sit in the query string, only log the bare URL
                logger.debug(
                    f"GitHub request [{correlation_id}] {method} {url} "
                    f"(attempt {attempt + 1})"
                )

                async with self._session.request(
                    method, request_url, headers=request_headers
                ) as response:
                    body = await response.read()
                    result = GitHubResponse(
                        status=response.status,
                        headers=CIMultiDict(response.headers),
                        body=body,
                        url=url,
                    )

                logger.debug(
                    f"GitHub response [{correlation_id}] {result.status} "
                    f"in {time.time() - start_time:.2f}s"
                )

                if result.status < 500:
                    return result
                last_exception = GitHubServerError(
                    f"Server error {result.status} for {method} {url}",
                    result.status,
                )

            except TimeoutError:
                last_exception = GitHubTimeoutError(
                    f"Request timeout for {method} {url}"
                )

            except aiohttp.ClientError as e:
                last_exception = GitHubConnectionError(
                    f"Connection error for {method} {url}: {e}"
                )

            if attempt < self.config.max_retries:
                backoff_time = self.config.retry_backoff_factor**attempt
                logger.warning(
                    f"Request [{correlation_id}] failed (attempt {attempt + 1}), "
                    f"retrying in {backoff_time:.1f}s: {last_exception}"
                )
                await asyncio.sleep(backoff_time)

        if last_exception:
            raise last_exception
        raise GitHubError(f"Request failed after {self.config.max_retries} retries")

    def _parse_list(
        self, response: GitHubResponse, adapter: TypeAdapter[list[T]]
    ) -> list[T]:
        """Parse a JSON array body, handing failures to the rate-limit sentinel.

        Raises:
            GitHubRateLimitError: Body is the rate-limit error document
            GitHubResponseShapeError: Body is neither shape
        """
        try:
            return adapter.validate_json(response.body)
        except ValidationError as e:
            shape_error = GitHubResponseShapeError(
                f"Unexpected response body from {response.url} "
                f"(HTTP {response.status}): {e.error_count()} validation error(s)",
                url=response.url,
                status_code=response.status,
            )
            shape_error.__cause__ = e
            self.sentinel.inspect(response.body, response.headers, shape_error)

    async def _fetch_paginated(
        self,
        url: str,
        adapter: TypeAdapter[list[T]],
        params: dict[str, Any] | None = None,
    ) -> PaginatedResponse[T]:
        """Fetch and parse one page (used by AsyncPaginator)."""
        response = await self._make_request("GET", url, params)
        items = self._parse_list(response, adapter)
        return PaginatedResponse(items, response.headers, url)

    def repo_url(self, repository: str, *parts: str) -> str:
        """Build ``{base_url}/repos/{owner}/{repo}/...``."""
        path = "/".join(("repos", repository.strip("/"), *parts))
        return urljoin(self.config.base_url.rstrip("/") + "/", path)

    def list_pulls(
        self,
        repository: str,
        state: str = "open",
        per_page: int | None = None,
        max_pages: int | None = None,
    ) -> AsyncPaginator[PullRequestSummary]:
        """List pull requests for a repository.

        Args:
            repository: ``owner/name``
            state: PR state (open, closed, all)
            per_page: Items per page, None for the API default
            max_pages: Maximum pages to fetch, None for all

        Returns:
            AsyncPaginator over pull request summaries
        """
        params: dict[str, Any] = {"state": state}
        if per_page:
            params["per_page"] = min(per_page, 100)  # GitHub max is 100
        return AsyncPaginator(
            client=self,
            initial_url=self.repo_url(repository, "pulls"),
            adapter=PULL_REQUEST_PAGE,
            params=params,
            max_pages=max_pages,
        )

    async def list_pull_files(
        self, repository: str, pull_number: int
    ) -> list[ChangedFile]:
        """List files changed by a pull request.

        Only the first page is read; a submission with more files than fit on
        one page is rejected anyway.

        Args:
            repository: ``owner/name``
            pull_number: Pull request number

        Returns:
            Changed files in API order
        """
        url = self.repo_url(repository, "pulls", str(pull_number), "files")
        response = await self._make_request("GET", url)
        return self._parse_list(response, CHANGED_FILE_LIST)

    async def get_raw(self, url: str) -> bytes:
        """Fetch the literal content behind a raw-content URL.

        Args:
            url: Raw-content URL from a changed file

        Returns:
            Response body bytes

        Raises:
            GitHubError: Non-success status
        """
        response = await self._make_request(
            "GET", url, authenticated=False, accept="*/*"
        )
        if response.status == 200:
            return response.body

        message = f"HTTP {response.status} fetching raw content {url}"
        if response.status == 404:
            raise GitHubNotFoundError(message, response.status)
        if response.status in (401, 403):
            raise GitHubAuthenticationError(message, response.status)
        raise GitHubError(message, response.status)
