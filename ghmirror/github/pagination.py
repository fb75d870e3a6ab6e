"""GitHub API pagination utilities."""

import re
from collections.abc import AsyncIterator
from typing import Any
from urllib.parse import parse_qs, urlparse

_LINK_PATTERN = re.compile(r'<([^>]+)>;\s*rel="([^"]+)"')


class LinkHeader:
    """Parser for GitHub Link headers."""

    def __init__(self, link_header: str | None = None):
        self.links: dict[str, str] = {}
        if link_header:
            # Format: <url>; rel="next", <url>; rel="last"
            for match in _LINK_PATTERN.finditer(link_header):
                url, rel = match.groups()
                self.links[rel] = url

    @property
    def next_url(self) -> str | None:
        """Get URL for next page."""
        return self.links.get("next")

    @property
    def has_next(self) -> bool:
        """Check if there's a next page."""
        return "next" in self.links

    def get_last_page_number(self) -> int | None:
        """Extract last page number from the ``last`` URL."""
        last_url = self.links.get("last")
        if not last_url:
            return None

        page = parse_qs(urlparse(last_url).query).get("page", [None])[0]
        try:
            return int(page) if page else None
        except ValueError:
            return None


class PaginatedResponse:
    """One page of a paginated GitHub API response.

    List endpoints return a bare JSON array; search and checks endpoints wrap
    the array in an object, in which case ``items_key`` names the member.
    """

    def __init__(
        self,
        data: Any,
        headers: dict[str, str],
        url: str,
        items_key: str | None = None,
    ):
        self.data = data
        self.headers = headers
        self.url = url
        self.items_key = items_key
        self.link_header = LinkHeader(headers.get("Link"))

    @property
    def has_next_page(self) -> bool:
        """Check if there's a next page."""
        return self.link_header.has_next

    @property
    def next_page_url(self) -> str | None:
        """Get URL for next page."""
        return self.link_header.next_url

    @property
    def total_pages(self) -> int | None:
        """Get total number of pages."""
        return self.link_header.get_last_page_number()

    @property
    def items(self) -> list[dict[str, Any]]:
        """Get items from current page."""
        if self.items_key is None:
            return list(self.data or [])
        return list((self.data or {}).get(self.items_key, []))


class AsyncPaginator:
    """Async iterator for paginated GitHub API responses."""

    def __init__(
        self,
        client: Any,  # Avoid circular import
        initial_url: str,
        params: dict[str, Any] | None = None,
        max_pages: int | None = None,
        per_page: int = 100,
        items_key: str | None = None,
    ):
        """Initialize async paginator.

        Args:
            client: GitHub client instance
            initial_url: Initial URL to fetch
            params: Query parameters for the first page
            max_pages: Maximum number of pages to fetch
            per_page: Items per page (max 100 for GitHub)
            items_key: Member holding the items when the page is an object
        """
        self.client = client
        self.initial_url = initial_url
        self.params = dict(params or {})
        self.max_pages = max_pages
        self.per_page = min(per_page, 100)
        self.items_key = items_key

        self.params["per_page"] = self.per_page

        self._current_page = 0
        self._next_url: str | None = initial_url

    async def __aiter__(self) -> AsyncIterator[dict[str, Any]]:
        """Async iterator implementation."""
        while self._next_url:
            if self.max_pages and self._current_page >= self.max_pages:
                break

            # The next-page URL already carries the query string.
            params = self.params if self._current_page == 0 else None
            response: PaginatedResponse = await self.client._fetch_paginated(
                self._next_url, params, self.items_key
            )
            self._current_page += 1
            self._next_url = response.next_page_url if response.has_next_page else None

            for item in response.items:
                yield item

    async def collect_all(self) -> list[dict[str, Any]]:
        """Collect all items from all pages."""
        return [item async for item in self]
