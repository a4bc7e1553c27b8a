"""GitHub API pagination utilities."""

import logging
import re
from collections.abc import AsyncIterator, Mapping
from typing import Any, Generic, TypeVar

from multidict import CIMultiDict
from pydantic import TypeAdapter

from .exceptions import GitHubPageLimitError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Link header format: <url>; rel="next", <url>; rel="last"
LINK_PATTERN = re.compile(r'<([^>]+)>;\s*rel="([^"]+)"')


class LinkHeader:
    """Parser for GitHub Link headers."""

    def __init__(self, link_header: str | None = None):
        """Initialize Link header parser.

        Args:
            link_header: Raw Link header value from response
        """
        self.links: dict[str, str] = {}
        if link_header:
            self._parse(link_header)

    def _parse(self, link_header: str) -> None:
        for match in LINK_PATTERN.finditer(link_header):
            url, rels = match.groups()
            # rel may hold several space separated relation types
            for rel in rels.split():
                self.links[rel] = url

    @property
    def next_url(self) -> str | None:
        """Get URL for next page."""
        return self.links.get("next")

    @property
    def has_next(self) -> bool:
        """Check if there's a next page."""
        return "next" in self.links


class PaginatedResponse(Generic[T]):
    """One parsed page plus the headers needed to find the next one."""

    def __init__(
        self,
        items: list[T],
        headers: Mapping[str, str],
        url: str,
    ):
        """Initialize paginated response.

        Args:
            items: Records parsed from the page body
            headers: Response headers
            url: Request URL
        """
        self.items = items
        self.headers = CIMultiDict(headers)
        self.url = url
        self.link_header = LinkHeader(self.headers.get("Link"))

    @property
    def has_next_page(self) -> bool:
        """Check if there's a next page."""
        return self.link_header.has_next

    @property
    def next_page_url(self) -> str | None:
        """Get URL for next page."""
        return self.link_header.next_url


class AsyncPaginator(Generic[T]):
    """Walks a listing one page at a time following ``rel="next"`` links.

    Pages are fetched strictly in sequence because each page's URL comes from
    the previous response. Records keep API order within and across pages.
    """

    def __init__(
        self,
        client: Any,  # Avoid circular import
        initial_url: str,
        adapter: TypeAdapter[list[T]],
        params: dict[str, Any] | None = None,
        max_pages: int | None = None,
    ):
        """Initialize async paginator.

        Args:
            client: GitHub client instance
            initial_url: Initial URL to fetch
            adapter: Parser for one page body
            params: Query parameters for the first request; later pages use
                the ``next`` URL verbatim
            max_pages: Maximum number of pages to fetch; a listing still
                offering a ``next`` page after that raises
                GitHubPageLimitError
        """
        self.client = client
        self.initial_url = initial_url
        self.adapter = adapter
        self.params = params or {}
        self.max_pages = max_pages

        self.pages_fetched = 0
        self._next_url: str | None = initial_url

    async def __aiter__(self) -> AsyncIterator[T]:
        while self._next_url:
            if self.max_pages and self.pages_fetched >= self.max_pages:
                logger.error(
                    f"Listing has more than max_pages={self.max_pages} pages, "
                    f"next is {self._next_url}"
                )
                raise GitHubPageLimitError(
                    f"Listing not exhausted after max_pages={self.max_pages}",
                    max_pages=self.max_pages,
                    next_url=self._next_url,
                )

            params = self.params if self.pages_fetched == 0 else None
            response = await self._fetch_page(self._next_url, params)
            self.pages_fetched += 1

            logger.debug(
                f"Fetched page {self.pages_fetched} ({len(response.items)} items) "
                f"from {response.url}"
            )

            self._next_url = response.next_page_url if response.has_next_page else None

            for item in response.items:
                yield item

    async def _fetch_page(
        self, url: str, params: dict[str, Any] | None
    ) -> PaginatedResponse[T]:
        result: PaginatedResponse[T] = await self.client._fetch_paginated(
            url, self.adapter, params
        )
        return result

    async def collect_all(self) -> list[T]:
        """Collect all items from all pages.

        Returns:
            List of all items
        """
        items = []
        async for item in self:
            items.append(item)
        return items
