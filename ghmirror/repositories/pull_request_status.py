"""PullRequestStatus repository: append-only status snapshots."""

import logging
from datetime import datetime

from sqlalchemy import delete, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from ghmirror.models import PullRequest, PullRequestStatus, utc_now

from .base import BaseRepository
from .check_run import CheckRunRepository, referenced_head_shas
from .check_suite import CheckSuiteRepository
from .commit_status import CommitCombinedStatusRepository

logger = logging.getLogger(__name__)

# Older snapshots are never compared against.
SNAPSHOTS_KEPT_PER_PULL_REQUEST = 2


class PullRequestStatusRepository(BaseRepository[PullRequestStatus]):
    """Repository for PullRequestStatus snapshots."""

    def __init__(self, session: AsyncSession):
        """Initialize with session."""
        super().__init__(session, PullRequestStatus)
        self.check_runs = CheckRunRepository(session)
        self.check_suites = CheckSuiteRepository(session)
        self.commit_statuses = CommitCombinedStatusRepository(session)

    async def build(
        self, pull_request: PullRequest, now: datetime | None = None
    ) -> PullRequestStatus:
        """Summarize the pull request's current checks into a transient snapshot.

        Conclusion and status come from the check suite aggregates and state
        from the combined commit status. The first failing check run (or the
        first run at all) supplies the result text, details link and time.
        """
        now = now or utc_now()
        status = PullRequestStatus(
            pull_request_id=pull_request.id,
            head_sha=pull_request.head_sha,
            conclusion=await self.check_suites.get_conclusion_for_pull_request(pull_request),
            status=await self.check_suites.get_status_for_pull_request(pull_request),
            state=await self.commit_statuses.get_state_for_pull_request(pull_request),
            result=pull_request.title,
            details_url=pull_request.html_url,
            html_url=pull_request.html_url,
            time_occurred=pull_request.time_updated,
            time_created=now,
        )

        runs = await self.check_runs.get_failed_for_pull_request(pull_request)
        if not runs:
            runs = await self.check_runs.get_all_for_pull_request(pull_request)
        if runs:
            first = runs[0]
            status.details_url = first.details_url
            status.result = first.result
            status.time_occurred = first.time_completed or now

        return status

    async def add_for_pull_request(
        self, pull_request: PullRequest, now: datetime | None = None
    ) -> PullRequestStatus:
        """Record a new snapshot and drop all but the newest ones."""
        status = await self.add(await self.build(pull_request, now))
        await self.delete_outdated_for_pull_request(pull_request)
        return status

    async def get_latest(self, pull_request: PullRequest) -> PullRequestStatus | None:
        """Get the most recent snapshot for a pull request."""
        query = (
            select(PullRequestStatus)
            .where(PullRequestStatus.pull_request_id == pull_request.id)
            .order_by(desc(PullRequestStatus.time_created), desc(PullRequestStatus.id))
            .limit(1)
        )
        return await self._execute_single_query(query)

    async def delete_outdated_for_pull_request(self, pull_request: PullRequest) -> int:
        """Keep only the newest snapshots for a pull request."""
        newest = (
            select(PullRequestStatus.id)
            .where(PullRequestStatus.pull_request_id == pull_request.id)
            .order_by(desc(PullRequestStatus.time_created), desc(PullRequestStatus.id))
            .limit(SNAPSHOTS_KEPT_PER_PULL_REQUEST)
        )
        return await self._execute_write(
            delete(PullRequestStatus).where(
                PullRequestStatus.pull_request_id == pull_request.id,
                PullRequestStatus.id.not_in(newest),
            )
        )

    async def delete_unreferenced(self) -> int:
        """Remove snapshots whose head SHA no cached pull request points at.

        That covers both deleted pull requests and force-pushed ones.
        """
        return await self._execute_write(
            delete(PullRequestStatus).where(
                PullRequestStatus.head_sha.not_in(referenced_head_shas())
            )
        )
