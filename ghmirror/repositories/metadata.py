"""Metadata key/value repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ghmirror.models import MetadataEntry

from .base import BaseRepository


class MetadataRepository(BaseRepository[MetadataEntry]):
    """Repository for generic key/value pairs."""

    def __init__(self, session: AsyncSession):
        """Initialize with session."""
        super().__init__(session, MetadataEntry)

    async def get(self, key: str) -> str | None:
        """Get the value stored under ``key`` (case-insensitive)."""
        query = select(MetadataEntry).where(MetadataEntry.key == key)
        entry = await self._execute_single_query(query)
        return entry.value if entry else None

    async def add_or_update(self, key: str, value: str) -> MetadataEntry:
        """Store ``value`` under ``key``, replacing any previous value."""
        query = select(MetadataEntry).where(MetadataEntry.key == key)
        entry = await self._execute_single_query(query)
        if entry is None:
            return await self.create(key=key, value=value)

        if entry.value != value:
            entry.value = value
            await self.session.flush()
        return entry
