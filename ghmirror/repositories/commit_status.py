"""CommitCombinedStatus repository."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ghmirror.github.models import RemoteCombinedStatus
from ghmirror.models import CommitCombinedStatus, CommitState, PullRequest, parse_enum

from .base import BaseRepository
from .check_run import referenced_head_shas


class CommitCombinedStatusRepository(BaseRepository[CommitCombinedStatus]):
    """Repository for combined commit statuses, keyed by head SHA."""

    def __init__(self, session: AsyncSession):
        """Initialize with session."""
        super().__init__(session, CommitCombinedStatus)

    @staticmethod
    def from_remote(remote: RemoteCombinedStatus) -> CommitCombinedStatus:
        """Map a remote combined status.

        GitHub reports ``pending`` for a commit with no statuses at all; that
        is not an outstanding state, so it is stored as NONE.
        """
        state = CommitState.NONE if remote.total_count == 0 else parse_enum(
            CommitState, remote.state
        )
        return CommitCombinedStatus(state=state, head_sha=remote.sha)

    async def get_by_head_sha(self, head_sha: str | None) -> CommitCombinedStatus | None:
        """Get the combined status for a commit."""
        query = select(CommitCombinedStatus).where(CommitCombinedStatus.head_sha == head_sha)
        return await self._execute_single_query(query)

    async def get_or_create_or_update(
        self, remote: RemoteCombinedStatus
    ) -> CommitCombinedStatus:
        """Insert the status, or update it when the state changed."""
        status = self.from_remote(remote)
        existing = await self.get_by_head_sha(remote.sha)
        if existing is None:
            return await self.add(status)

        if existing.state != status.state:
            existing.state = status.state
            await self.session.flush()

        return existing

    async def get_state_for_pull_request(self, pull_request: PullRequest) -> CommitState:
        """Combined state of the pull request's head commit; UNKNOWN if never seen."""
        status = await self.get_by_head_sha(pull_request.head_sha)
        return status.state if status else CommitState.UNKNOWN

    async def delete_unreferenced(self) -> int:
        """Remove statuses whose head SHA no cached pull request points at."""
        return await self._execute_write(
            delete(CommitCombinedStatus).where(
                CommitCombinedStatus.head_sha.not_in(referenced_head_shas())
            )
        )
