"""Repository (GitHub repository) data access."""

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ghmirror.github.models import RemoteRepository
from ghmirror.models import Repository, User, utc_now

from .base import BaseRepository
from .user import UserRepository

logger = logging.getLogger(__name__)


def split_full_name(full_name: str) -> tuple[str, str]:
    """Split ``owner/name``; anything else is rejected with ValueError."""
    parts = full_name.split("/")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise ValueError(f"Invalid repository full name: {full_name}")
    return parts[0], parts[1]


class RepositoryRepository(BaseRepository[Repository]):
    """Repository for Repository operations."""

    def __init__(self, session: AsyncSession):
        """Initialize with session."""
        super().__init__(session, Repository)
        self.users = UserRepository(session)

    async def from_remote(
        self, remote: RemoteRepository, now: datetime | None = None
    ) -> Repository:
        """Map a remote repository, resolving its owner to a local user id."""
        owner = await self.users.get_or_create_or_update(remote.owner, now)
        return Repository(
            owner_id=owner.id,
            name=remote.name,
            internal_id=remote.id,
            description=remote.description or "",
            private=remote.private,
            html_url=remote.html_url,
            clone_url=remote.clone_url,
            fork=remote.fork,
            default_branch=remote.default_branch,
            visibility=remote.visibility,
            has_issues=remote.has_issues,
            time_updated=remote.updated_at,
            time_pushed=remote.pushed_at,
        )

    async def get_or_create_or_update(
        self, remote: RemoteRepository, now: datetime | None = None
    ) -> Repository:
        """Insert the repository, or refresh it if the remote copy is newer."""
        repository = await self.from_remote(remote, now or utc_now())
        existing = await self.get_by_internal_id(remote.id)
        if existing is None:
            return await self.add(repository)

        if (
            repository.time_updated is not None
            and (existing.time_updated is None or existing.time_updated < repository.time_updated)
        ):
            self._apply(existing, repository)
            await self.session.flush()
            logger.debug(f"Updated repository {remote.full_name}")

        return existing

    async def get_all(self) -> list[Repository]:
        """Get all cached repositories ordered by name."""
        return await self._execute_query(select(Repository).order_by(Repository.name))

    async def get_by_owner_and_name(self, owner: str, name: str) -> Repository | None:
        """Get repository by owner login and name (case-insensitive)."""
        query = (
            select(Repository)
            .join(User, User.id == Repository.owner_id)
            .where(User.login == owner, Repository.name == name)
        )
        return await self._execute_single_query(query)

    async def get_by_full_name(self, full_name: str) -> Repository | None:
        """Get repository by ``owner/name``."""
        owner, name = split_full_name(full_name)
        return await self.get_by_owner_and_name(owner, name)

    async def get_full_name(self, repository: Repository) -> str:
        """Build ``owner/name`` for a cached repository."""
        owner = await self.users.get_by_id(repository.owner_id)
        owner_login = owner.login if owner else ""
        return f"{owner_login}/{repository.name}"
