"""CheckRun repository with domain-specific operations."""

from sqlalchemy import and_, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ghmirror.github.models import RemoteCheckRun
from ghmirror.models import (
    CheckConclusion,
    CheckRun,
    CheckStatus,
    PullRequest,
    parse_enum,
)

from .base import BaseRepository


def referenced_head_shas():
    """Subquery of every head SHA a cached pull request points at."""
    return select(PullRequest.head_sha).where(PullRequest.head_sha.is_not(None))


class CheckRunRepository(BaseRepository[CheckRun]):
    """Repository for CheckRun operations."""

    def __init__(self, session: AsyncSession):
        """Initialize with session."""
        super().__init__(session, CheckRun)

    @staticmethod
    def from_remote(remote: RemoteCheckRun) -> CheckRun:
        """Map a remote check run onto a transient row."""
        return CheckRun(
            internal_id=remote.id,
            head_sha=remote.head_sha,
            name=remote.name,
            conclusion=parse_enum(CheckConclusion, remote.conclusion),
            status=parse_enum(CheckStatus, remote.status),
            result=(remote.output.summary if remote.output else None) or "",
            details_url=remote.details_url,
            html_url=remote.html_url,
            time_started=remote.started_at,
            time_completed=remote.completed_at,
        )

    async def get_or_create_or_update(self, remote: RemoteCheckRun) -> CheckRun:
        """Insert the run, or update it when its status or conclusion moved."""
        check_run = self.from_remote(remote)
        existing = await self.get_by_internal_id(remote.id)
        if existing is None:
            return await self.add(check_run)

        if existing.status != check_run.status or existing.conclusion != check_run.conclusion:
            self._apply(existing, check_run)
            await self.session.flush()

        return existing

    async def get_all_for_pull_request(self, pull_request: PullRequest) -> list[CheckRun]:
        """Get all check runs on the pull request's head commit."""
        query = (
            select(CheckRun)
            .where(CheckRun.head_sha == pull_request.head_sha)
            .order_by(CheckRun.id)
        )
        return await self._execute_query(query)

    async def get_failed_for_pull_request(self, pull_request: PullRequest) -> list[CheckRun]:
        """Get failing runs, worst conclusion first, then by completion time."""
        query = (
            select(CheckRun)
            .where(
                and_(
                    CheckRun.head_sha == pull_request.head_sha,
                    CheckRun.conclusion >= CheckConclusion.FAILURE,
                    CheckRun.conclusion <= CheckConclusion.ACTION_REQUIRED,
                )
            )
            .order_by(CheckRun.conclusion, CheckRun.time_completed)
        )
        return await self._execute_query(query)

    async def get_status_for_pull_request(self, pull_request: PullRequest) -> CheckStatus:
        """Least-advanced status across the head commit's runs."""
        query = select(func.min(CheckRun.status)).where(
            CheckRun.head_sha == pull_request.head_sha
        )
        value = await self._execute_scalar(query)
        return CheckStatus.NONE if value is None else CheckStatus(value)

    async def get_conclusion_for_pull_request(
        self, pull_request: PullRequest
    ) -> CheckConclusion:
        """Worst conclusion across the head commit's completed runs."""
        query = select(func.min(CheckRun.conclusion)).where(
            CheckRun.head_sha == pull_request.head_sha,
            CheckRun.status == CheckStatus.COMPLETED,
        )
        value = await self._execute_scalar(query)
        return CheckConclusion.NONE if value is None else CheckConclusion(value)

    async def delete_all_for_pull_request(self, pull_request: PullRequest) -> int:
        """Remove every run on the pull request's head commit."""
        return await self._execute_write(
            delete(CheckRun).where(CheckRun.head_sha == pull_request.head_sha)
        )

    async def delete_unreferenced(self) -> int:
        """Remove runs whose head SHA no cached pull request points at."""
        return await self._execute_write(
            delete(CheckRun).where(CheckRun.head_sha.not_in(referenced_head_shas()))
        )
