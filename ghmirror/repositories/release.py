"""Release repository."""

from datetime import datetime

from sqlalchemy import delete, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from ghmirror.github.models import RemoteRelease
from ghmirror.models import Release, utc_now

from .base import BaseRepository


class ReleaseRepository(BaseRepository[Release]):
    """Repository for repository releases."""

    def __init__(self, session: AsyncSession):
        """Initialize with session."""
        super().__init__(session, Release)

    @staticmethod
    def from_remote(
        remote: RemoteRelease, repository_id: int, now: datetime | None = None
    ) -> Release:
        """Map a remote release onto a transient row."""
        return Release(
            internal_id=remote.id,
            repository_id=repository_id,
            name=remote.name or remote.tag_name,
            tag_name=remote.tag_name,
            prerelease=remote.prerelease,
            html_url=remote.html_url,
            time_created=remote.created_at,
            time_published=remote.published_at,
            time_last_observed=now or utc_now(),
        )

    async def get_or_create_or_update(
        self, remote: RemoteRelease, repository_id: int, now: datetime | None = None
    ) -> Release:
        """Insert or refresh the release; existing rows are always rewritten."""
        release = self.from_remote(remote, repository_id, now)
        existing = await self.get_by_internal_id(remote.id)
        if existing is None:
            return await self.add(release)

        self._apply(existing, release)
        await self.session.flush()
        return existing

    async def get_all_for_repository(self, repository_id: int) -> list[Release]:
        """Get a repository's releases, most recently published first."""
        query = (
            select(Release)
            .where(Release.repository_id == repository_id)
            .order_by(desc(Release.time_published))
        )
        return await self._execute_query(query)

    async def delete_last_observed_before(self, repository_id: int, before: datetime) -> int:
        """Remove a repository's releases not observed since ``before``."""
        return await self._execute_write(
            delete(Release).where(
                Release.repository_id == repository_id,
                Release.time_last_observed < before,
            )
        )
