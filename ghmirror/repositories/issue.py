"""Issue repository with domain-specific operations."""

import logging
from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import delete, desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ghmirror.github.models import RemoteIssue
from ghmirror.models import Issue, utc_now

from .associations import IssueAssignRepository, IssueLabelRepository
from .base import BaseRepository, join_ids
from .label import LabelRepository
from .user import UserRepository

logger = logging.getLogger(__name__)


def is_newer(candidate: datetime | None, stored: datetime | None) -> bool:
    """True when ``candidate`` is known and strictly later than ``stored``."""
    return candidate is not None and (stored is None or candidate > stored)


class IssueRepository(BaseRepository[Issue]):
    """Repository for Issue operations."""

    def __init__(self, session: AsyncSession):
        """Initialize with session."""
        super().__init__(session, Issue)
        self.users = UserRepository(session)
        self.labels = LabelRepository(session)
        self.issue_labels = IssueLabelRepository(session)
        self.issue_assignees = IssueAssignRepository(session)

    async def from_remote(
        self, remote: RemoteIssue, repository_id: int, now: datetime | None = None
    ) -> Issue:
        """Map a remote issue, resolving its author to a local user id."""
        now = now or utc_now()
        author = await self.users.get_or_create_or_update(remote.user, now)
        return Issue(
            internal_id=remote.id,
            number=remote.number,
            repository_id=repository_id,
            state=remote.state,
            title=remote.title,
            body=remote.body or "",
            author_id=author.id,
            time_created=remote.created_at,
            time_updated=remote.updated_at,
            time_closed=remote.closed_at,
            time_last_observed=now,
            html_url=remote.html_url,
            locked=remote.locked,
            assignee_ids=join_ids(user.id for user in remote.assignees),
            label_ids=join_ids(label.id for label in remote.labels),
        )

    async def get_or_create_or_update(
        self, remote: RemoteIssue, repository_id: int, now: datetime | None = None
    ) -> Issue:
        """Insert the issue, or refresh it if the remote copy is newer.

        Label and assignee rows are rebuilt only when their id fingerprint
        changed.
        """
        now = now or utc_now()
        issue = await self.from_remote(remote, repository_id, now)
        existing = await self.get_by_internal_id(remote.id)
        if existing is None:
            issue = await self.add(issue)
            await self._add_labels(issue, remote, now)
            await self._add_assignees(issue, remote, now)
            return issue

        if is_newer(issue.time_updated, existing.time_updated):
            labels_changed = existing.label_ids != issue.label_ids
            assignees_changed = existing.assignee_ids != issue.assignee_ids
            self._apply(existing, issue)
            await self.session.flush()

            if labels_changed:
                await self.issue_labels.delete_for_owner(existing.id)
                await self._add_labels(existing, remote, now)
            if assignees_changed:
                await self.issue_assignees.delete_for_owner(existing.id)
                await self._add_assignees(existing, remote, now)
            logger.debug(f"Updated issue #{existing.number}")

        return existing

    async def _add_labels(self, issue: Issue, remote: RemoteIssue, now: datetime) -> None:
        for remote_label in remote.labels:
            label = await self.labels.get_or_create_or_update(remote_label, now)
            await self.issue_labels.add_pair(issue.id, label.id)

    async def _add_assignees(self, issue: Issue, remote: RemoteIssue, now: datetime) -> None:
        for remote_user in remote.assignees:
            user = await self.users.get_or_create_or_update(remote_user, now)
            await self.issue_assignees.add_pair(issue.id, user.id)

    async def get_all_for_repository(self, repository_id: int) -> list[Issue]:
        """Get all issues for a repository, most recently updated first."""
        query = (
            select(Issue)
            .where(Issue.repository_id == repository_id)
            .order_by(desc(Issue.time_updated))
        )
        return await self._execute_query(query)

    async def get_label_ids(self, issue: Issue) -> list[int]:
        """Get the local label ids applied to an issue."""
        return await self.issue_labels.get_member_ids(issue.id)

    async def get_assignee_ids(self, issue: Issue) -> list[int]:
        """Get the local user ids assigned to an issue."""
        return await self.issue_assignees.get_member_ids(issue.id)

    async def mark_observed(self, issue_ids: Iterable[int], now: datetime) -> int:
        """Stamp ``time_last_observed`` on issues seen in the current pass.

        Unchanged issues are not rewritten by ``get_or_create_or_update``, so
        without this stamp they would age out of the last-observed window.
        """
        ids = list(issue_ids)
        if not ids:
            return 0
        return await self._execute_write(
            update(Issue).where(Issue.id.in_(ids)).values(time_last_observed=now)
        )

    async def delete_last_observed_before(self, repository_id: int, before: datetime) -> int:
        """Remove a repository's issues that were not observed since ``before``."""
        return await self._execute_write(
            delete(Issue).where(
                Issue.repository_id == repository_id,
                Issue.time_last_observed < before,
            )
        )
