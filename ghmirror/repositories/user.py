"""User repository with domain-specific operations."""

import logging
from collections.abc import Iterable
from datetime import datetime, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ghmirror.github.models import RemoteUser
from ghmirror.models import User, utc_now

from .base import BaseRepository

logger = logging.getLogger(__name__)

# Accounts are referenced constantly but rarely change.
USER_UPDATE_THRESHOLD = timedelta(hours=4)


class UserRepository(BaseRepository[User]):
    """Repository for User operations."""

    def __init__(self, session: AsyncSession):
        """Initialize with session."""
        super().__init__(session, User)

    @staticmethod
    def from_remote(remote: RemoteUser, now: datetime | None = None) -> User:
        """Map a remote account onto a transient row."""
        return User(
            login=remote.login,
            internal_id=remote.id,
            avatar_url=remote.avatar_url,
            type=remote.type,
            time_updated=now or utc_now(),
        )

    async def get_or_create_or_update(
        self, remote: RemoteUser, now: datetime | None = None
    ) -> User:
        """Insert the user, or refresh it once the update threshold has passed."""
        now = now or utc_now()
        user = self.from_remote(remote, now)
        existing = await self.get_by_internal_id(remote.id)
        if existing is None:
            return await self.add(user)

        if existing.time_updated is None or now - existing.time_updated > USER_UPDATE_THRESHOLD:
            self._apply(existing, user)
            await self.session.flush()
            logger.debug(f"Updated user {existing.login}")

        return existing

    async def get_by_login(self, login: str) -> User | None:
        """Get user by login (case-insensitive)."""
        query = select(User).where(User.login == login)
        return await self._execute_single_query(query)

    async def get_by_logins(self, logins: Iterable[str]) -> list[User]:
        """Get every cached user whose login is in ``logins``."""
        names = list(logins)
        if not names:
            return []
        query = select(User).where(User.login.in_(names)).order_by(User.login)
        return await self._execute_query(query)
