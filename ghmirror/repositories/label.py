"""Label repository."""

from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from ghmirror.github.models import RemoteLabel
from ghmirror.models import Label, utc_now

from .base import BaseRepository

LABEL_UPDATE_THRESHOLD = timedelta(hours=4)


class LabelRepository(BaseRepository[Label]):
    """Repository for Label operations."""

    def __init__(self, session: AsyncSession):
        """Initialize with session."""
        super().__init__(session, Label)

    @staticmethod
    def from_remote(remote: RemoteLabel, now: datetime | None = None) -> Label:
        """Map a remote label onto a transient row."""
        return Label(
            internal_id=remote.id,
            is_default=remote.is_default,
            name=remote.name,
            description=remote.description or "",
            color=remote.color or "",
            time_updated=now or utc_now(),
        )

    async def get_or_create_or_update(
        self, remote: RemoteLabel, now: datetime | None = None
    ) -> Label:
        """Insert the label, or refresh it once the update threshold has passed."""
        now = now or utc_now()
        label = self.from_remote(remote, now)
        existing = await self.get_by_internal_id(remote.id)
        if existing is None:
            return await self.add(label)

        if existing.time_updated is None or now - existing.time_updated > LABEL_UPDATE_THRESHOLD:
            self._apply(existing, label)
            await self.session.flush()

        return existing
