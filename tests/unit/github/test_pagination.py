"""
Unit tests for GitHub pagination utilities.

Why: List and search endpoints return results page by page; a missed
     page silently drops data from the cache
What: Tests Link header parsing, page item extraction and AsyncPaginator
How: Drives AsyncPaginator with a stub client serving canned pages
"""

from typing import Any

from ghmirror.github.pagination import AsyncPaginator, LinkHeader, PaginatedResponse

BASE = "https://api.github.com/repos/octocat/hello-world/pulls"


class StubClient:
    """Serves pages by URL and records the params of each fetch."""

    def __init__(self, pages: dict[str, tuple[Any, dict[str, str]]]):
        self.pages = pages
        self.fetches: list[tuple[str, dict[str, Any] | None]] = []

    async def _fetch_paginated(
        self, url: str, params: dict[str, Any] | None, items_key: str | None
    ) -> PaginatedResponse:
        self.fetches.append((url, params))
        data, headers = self.pages[url]
        return PaginatedResponse(data, headers, url, items_key)


class TestLinkHeader:
    """Test Link header parsing."""

    def test_parses_relations(self) -> None:
        """Test next and last relations are extracted."""
        raw = f'<{BASE}?page=2>; rel="next", <{BASE}?page=5>; rel="last"'
        header = LinkHeader(raw)

        assert header.has_next
        assert header.next_url == f"{BASE}?page=2"
        assert header.get_last_page_number() == 5
        assert PaginatedResponse([], {"Link": raw}, BASE).total_pages == 5

    def test_empty_header(self) -> None:
        """Test a missing header means a single page."""
        header = LinkHeader(None)

        assert not header.has_next
        assert header.next_url is None
        assert header.get_last_page_number() is None


class TestPaginatedResponse:
    """Test PaginatedResponse item extraction."""

    def test_bare_list(self) -> None:
        """Test list endpoints."""
        response = PaginatedResponse([{"id": 1}], {}, BASE)

        assert response.items == [{"id": 1}]
        assert not response.has_next_page

    def test_wrapped_items(self) -> None:
        """Test search-style responses with an items member."""
        response = PaginatedResponse({"total_count": 1, "items": [{"id": 1}]}, {}, BASE, "items")

        assert response.items == [{"id": 1}]

    def test_missing_body(self) -> None:
        """Test an empty body yields no items."""
        assert PaginatedResponse(None, {}, BASE).items == []
        assert PaginatedResponse(None, {}, BASE, "items").items == []


class TestAsyncPaginator:
    """Test AsyncPaginator iteration."""

    async def test_follows_next_links(self) -> None:
        """
        Why: Later pages carry their own query string
        What: Tests every page is fetched and only the first gets params
        How: Serves two linked pages from a stub client
        """
        # Setup
        page_two = f"{BASE}?page=2"
        client = StubClient(
            {
                BASE: ([{"id": 1}, {"id": 2}], {"Link": f'<{page_two}>; rel="next"'}),
                page_two: ([{"id": 3}], {}),
            }
        )

        # Execute
        items = await AsyncPaginator(client, BASE, params={"state": "open"}).collect_all()

        # Verify
        assert [item["id"] for item in items] == [1, 2, 3]
        assert client.fetches[0] == (BASE, {"state": "open", "per_page": 100})
        assert client.fetches[1] == (page_two, None)

    async def test_max_pages(self) -> None:
        """Test iteration stops after max_pages."""
        page_two = f"{BASE}?page=2"
        client = StubClient(
            {
                BASE: ([{"id": 1}], {"Link": f'<{page_two}>; rel="next"'}),
                page_two: ([{"id": 2}], {}),
            }
        )

        items = await AsyncPaginator(client, BASE, max_pages=1).collect_all()

        assert items == [{"id": 1}]
        assert len(client.fetches) == 1

    def test_per_page_capped(self) -> None:
        """Test per_page never exceeds the API maximum."""
        paginator = AsyncPaginator(StubClient({}), BASE, per_page=500)

        assert paginator.params["per_page"] == 100
