"""Search and SearchIssue repositories."""

from datetime import datetime, timedelta

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ghmirror.models import Issue, Search, SearchIssue, utc_now

from .base import BaseRepository

# Avoid rewriting the search row for every issue in one result set.
SEARCH_UPDATE_THRESHOLD = timedelta(minutes=2)


class SearchRepository(BaseRepository[Search]):
    """Repository for saved searches."""

    def __init__(
        self,
        session: AsyncSession,
        update_threshold: timedelta = SEARCH_UPDATE_THRESHOLD,
    ):
        """Initialize with session."""
        super().__init__(session, Search)
        self.update_threshold = update_threshold

    async def get(self, query: str, repository_id: int) -> Search | None:
        """Get a saved search by its query text and repository."""
        statement = select(Search).where(
            Search.query == query, Search.repository_id == repository_id
        )
        return await self._execute_single_query(statement)

    async def get_or_create(
        self, query: str, repository_id: int, now: datetime | None = None
    ) -> Search:
        """Get or create a saved search, refreshing a stale ``time_updated``."""
        now = now or utc_now()
        existing = await self.get(query, repository_id)
        if existing is None:
            return await self.create(query=query, repository_id=repository_id, time_updated=now)

        if existing.time_updated is None or now - existing.time_updated > self.update_threshold:
            existing.time_updated = now
            await self.session.flush()
        return existing

    async def delete_before(self, before: datetime) -> int:
        """Remove searches not refreshed since ``before``."""
        return await self._execute_write(delete(Search).where(Search.time_updated < before))


class SearchIssueRepository(BaseRepository[SearchIssue]):
    """Repository for the issues currently matching a saved search."""

    def __init__(self, session: AsyncSession):
        """Initialize with session."""
        super().__init__(session, SearchIssue)

    async def add_issue_to_search(
        self, issue: Issue, search: Search, now: datetime | None = None
    ) -> SearchIssue:
        """Add an issue to a search, or mark an existing member fresh."""
        now = now or utc_now()
        query = select(SearchIssue).where(
            SearchIssue.issue_id == issue.id, SearchIssue.search_id == search.id
        )
        existing = await self._execute_single_query(query)
        if existing is None:
            return await self.create(issue_id=issue.id, search_id=search.id, time_updated=now)

        existing.time_updated = now
        await self.session.flush()
        return existing

    async def get_issues_for_search(self, search: Search) -> list[Issue]:
        """Get the issues currently matching a search."""
        query = (
            select(Issue)
            .join(SearchIssue, SearchIssue.issue_id == Issue.id)
            .where(SearchIssue.search_id == search.id)
            .order_by(Issue.time_created.desc())
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def delete_before(self, search: Search, before: datetime) -> int:
        """Drop members of ``search`` not refreshed since ``before``."""
        return await self._execute_write(
            delete(SearchIssue).where(
                SearchIssue.search_id == search.id,
                SearchIssue.time_updated < before,
            )
        )

    async def delete_unreferenced(self) -> int:
        """Remove members pointing at a missing search or issue."""
        return await self._execute_write(
            delete(SearchIssue).where(
                or_(
                    SearchIssue.search_id.not_in(select(Search.id)),
                    SearchIssue.issue_id.not_in(select(Issue.id)),
                )
            )
        )
