"""CheckSuite repository with domain-specific operations."""

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ghmirror.github.models import RemoteCheckSuite
from ghmirror.models import (
    CheckConclusion,
    CheckStatus,
    CheckSuite,
    PullRequest,
    parse_enum,
)

from .base import BaseRepository
from .check_run import referenced_head_shas


class CheckSuiteRepository(BaseRepository[CheckSuite]):
    """Repository for CheckSuite operations."""

    def __init__(self, session: AsyncSession):
        """Initialize with session."""
        super().__init__(session, CheckSuite)

    @staticmethod
    def from_remote(remote: RemoteCheckSuite) -> CheckSuite:
        """Map a remote check suite; the suite is named after its app."""
        return CheckSuite(
            internal_id=remote.id,
            head_sha=remote.head_sha,
            name=remote.app.name if remote.app else "",
            conclusion=parse_enum(CheckConclusion, remote.conclusion),
            status=parse_enum(CheckStatus, remote.status),
            html_url=remote.url,
        )

    async def get_or_create_or_update(self, remote: RemoteCheckSuite) -> CheckSuite:
        """Insert the suite, or update it when its status or conclusion moved."""
        check_suite = self.from_remote(remote)
        existing = await self.get_by_internal_id(remote.id)
        if existing is None:
            return await self.add(check_suite)

        if (
            existing.status != check_suite.status
            or existing.conclusion != check_suite.conclusion
        ):
            self._apply(existing, check_suite)
            await self.session.flush()

        return existing

    async def get_all_for_pull_request(self, pull_request: PullRequest) -> list[CheckSuite]:
        """Get all check suites on the pull request's head commit."""
        query = (
            select(CheckSuite)
            .where(CheckSuite.head_sha == pull_request.head_sha)
            .order_by(CheckSuite.id)
        )
        return await self._execute_query(query)

    async def get_status_for_pull_request(self, pull_request: PullRequest) -> CheckStatus:
        """Least-advanced status across the head commit's suites."""
        query = select(func.min(CheckSuite.status)).where(
            CheckSuite.head_sha == pull_request.head_sha
        )
        value = await self._execute_scalar(query)
        return CheckStatus.NONE if value is None else CheckStatus(value)

    async def get_conclusion_for_pull_request(
        self, pull_request: PullRequest
    ) -> CheckConclusion:
        """Worst conclusion across the head commit's completed suites."""
        query = select(func.min(CheckSuite.conclusion)).where(
            CheckSuite.head_sha == pull_request.head_sha,
            CheckSuite.status == CheckStatus.COMPLETED,
        )
        value = await self._execute_scalar(query)
        return CheckConclusion.NONE if value is None else CheckConclusion(value)

    async def delete_all_for_pull_request(self, pull_request: PullRequest) -> int:
        """Remove every suite on the pull request's head commit."""
        return await self._execute_write(
            delete(CheckSuite).where(CheckSuite.head_sha == pull_request.head_sha)
        )

    async def delete_unreferenced(self) -> int:
        """Remove suites whose head SHA no cached pull request points at."""
        return await self._execute_write(
            delete(CheckSuite).where(CheckSuite.head_sha.not_in(referenced_head_shas()))
        )
