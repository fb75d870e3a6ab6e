"""PullRequest repository with domain-specific operations."""

import logging
from datetime import datetime

from sqlalchemy import and_, delete, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from ghmirror.github.models import RemotePullRequest
from ghmirror.models import PullRequest, utc_now

from .associations import PullRequestAssignRepository, PullRequestLabelRepository
from .base import BaseRepository, join_ids
from .label import LabelRepository
from .user import UserRepository

logger = logging.getLogger(__name__)


class PullRequestRepository(BaseRepository[PullRequest]):
    """Repository for PullRequest operations."""

    def __init__(self, session: AsyncSession):
        """Initialize with session."""
        super().__init__(session, PullRequest)
        self.users = UserRepository(session)
        self.labels = LabelRepository(session)
        self.pull_request_labels = PullRequestLabelRepository(session)
        self.pull_request_assignees = PullRequestAssignRepository(session)

    async def from_remote(
        self, remote: RemotePullRequest, repository_id: int, now: datetime | None = None
    ) -> PullRequest:
        """Map a remote pull request, resolving its author to a local user id."""
        now = now or utc_now()
        author = await self.users.get_or_create_or_update(remote.user, now)
        return PullRequest(
            internal_id=remote.id,
            number=remote.number,
            repository_id=repository_id,
            state=remote.state,
            title=remote.title,
            body=remote.body or "",
            author_id=author.id,
            time_created=remote.created_at,
            time_updated=remote.updated_at,
            time_merged=remote.merged_at,
            time_closed=remote.closed_at,
            time_last_observed=now,
            html_url=remote.html_url,
            locked=remote.locked,
            draft=remote.draft,
            head_sha=remote.head.sha,
            merged=remote.merged,
            mergeable=bool(remote.mergeable),
            mergeable_state=remote.mergeable_state,
            commit_count=remote.commits,
            assignee_ids=join_ids(user.id for user in remote.assignees),
            label_ids=join_ids(label.id for label in remote.labels),
        )

    async def get_or_create_or_update(
        self, remote: RemotePullRequest, repository_id: int, now: datetime | None = None
    ) -> PullRequest:
        """Insert or refresh the pull request.

        Pull requests are always rewritten so ``time_last_observed`` tracks
        every sync pass that saw them.
        """
        now = now or utc_now()
        pull_request = await self.from_remote(remote, repository_id, now)
        existing = await self.get_by_internal_id(remote.id)
        if existing is None:
            pull_request = await self.add(pull_request)
            await self._add_labels(pull_request, remote, now)
            await self._add_assignees(pull_request, remote, now)
            return pull_request

        labels_changed = existing.label_ids != pull_request.label_ids
        assignees_changed = existing.assignee_ids != pull_request.assignee_ids
        self._apply(existing, pull_request)
        await self.session.flush()

        if labels_changed:
            await self.pull_request_labels.delete_for_owner(existing.id)
            await self._add_labels(existing, remote, now)
        if assignees_changed:
            await self.pull_request_assignees.delete_for_owner(existing.id)
            await self._add_assignees(existing, remote, now)

        return existing

    async def _add_labels(
        self, pull_request: PullRequest, remote: RemotePullRequest, now: datetime
    ) -> None:
        for remote_label in remote.labels:
            label = await self.labels.get_or_create_or_update(remote_label, now)
            await self.pull_request_labels.add_pair(pull_request.id, label.id)

    async def _add_assignees(
        self, pull_request: PullRequest, remote: RemotePullRequest, now: datetime
    ) -> None:
        for remote_user in remote.assignees:
            user = await self.users.get_or_create_or_update(remote_user, now)
            await self.pull_request_assignees.add_pair(pull_request.id, user.id)

    async def get_by_number(self, repository_id: int, number: int) -> PullRequest | None:
        """Get PR by repository id and PR number."""
        query = select(PullRequest).where(
            and_(PullRequest.repository_id == repository_id, PullRequest.number == number)
        )
        return await self._execute_single_query(query)

    async def get_all_for_repository(self, repository_id: int) -> list[PullRequest]:
        """Get all PRs for a repository, most recently updated first."""
        query = (
            select(PullRequest)
            .where(PullRequest.repository_id == repository_id)
            .order_by(desc(PullRequest.time_updated))
        )
        return await self._execute_query(query)

    async def get_all_for_user(self, user_id: int) -> list[PullRequest]:
        """Get all PRs authored by a local user."""
        query = (
            select(PullRequest)
            .where(PullRequest.author_id == user_id)
            .order_by(desc(PullRequest.time_updated))
        )
        return await self._execute_query(query)

    async def get_label_ids(self, pull_request: PullRequest) -> list[int]:
        """Get the local label ids applied to a pull request."""
        return await self.pull_request_labels.get_member_ids(pull_request.id)

    async def get_assignee_ids(self, pull_request: PullRequest) -> list[int]:
        """Get the local user ids assigned to a pull request."""
        return await self.pull_request_assignees.get_member_ids(pull_request.id)

    async def delete_last_observed_before(self, repository_id: int, before: datetime) -> int:
        """Remove a repository's PRs that were not observed since ``before``."""
        return await self._execute_write(
            delete(PullRequest).where(
                PullRequest.repository_id == repository_id,
                PullRequest.time_last_observed < before,
            )
        )

    async def delete_all_by_author_login_and_last_observed_before(
        self, login: str, before: datetime
    ) -> int:
        """Remove a developer's PRs that were not observed since ``before``."""
        author = await self.users.get_by_login(login)
        if author is None:
            return 0
        return await self._execute_write(
            delete(PullRequest).where(
                PullRequest.author_id == author.id,
                PullRequest.time_last_observed < before,
            )
        )
