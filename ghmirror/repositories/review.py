"""Review repository."""

from datetime import datetime

from sqlalchemy import delete, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from ghmirror.github.models import RemoteReview
from ghmirror.models import PullRequest, Review, utc_now

from .base import BaseRepository
from .user import UserRepository


class ReviewRepository(BaseRepository[Review]):
    """Repository for pull request reviews."""

    def __init__(self, session: AsyncSession):
        """Initialize with session."""
        super().__init__(session, Review)
        self.users = UserRepository(session)

    async def from_remote(
        self, remote: RemoteReview, pull_request_id: int, now: datetime | None = None
    ) -> Review:
        """Map a remote review, resolving its author to a local user id."""
        if remote.user is None:
            raise ValueError(f"Review {remote.id} has no author")
        now = now or utc_now()
        author = await self.users.get_or_create_or_update(remote.user, now)
        return Review(
            internal_id=remote.id,
            pull_request_id=pull_request_id,
            author_id=author.id,
            body=remote.body or "",
            state=remote.state,
            html_url=remote.html_url,
            time_submitted=remote.submitted_at,
            time_last_observed=now,
        )

    async def get_or_create_or_update(
        self, remote: RemoteReview, pull_request_id: int, now: datetime | None = None
    ) -> Review:
        """Insert or refresh the review; existing rows are always rewritten."""
        review = await self.from_remote(remote, pull_request_id, now)
        existing = await self.get_by_internal_id(remote.id)
        if existing is None:
            return await self.add(review)

        self._apply(existing, review)
        await self.session.flush()
        return existing

    async def get_all_for_pull_request(self, pull_request: PullRequest) -> list[Review]:
        """Get reviews on a pull request, newest first."""
        query = (
            select(Review)
            .where(Review.pull_request_id == pull_request.id)
            .order_by(desc(Review.time_submitted))
        )
        return await self._execute_query(query)

    async def get_all_for_user(self, user_id: int) -> list[Review]:
        """Get reviews written by a local user."""
        query = select(Review).where(Review.author_id == user_id)
        return await self._execute_query(query)

    async def delete_unreferenced(self) -> int:
        """Remove reviews whose pull request is gone."""
        return await self._execute_write(
            delete(Review).where(Review.pull_request_id.not_in(select(PullRequest.id)))
        )
