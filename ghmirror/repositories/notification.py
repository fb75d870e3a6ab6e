"""Notification repository."""

import logging
from datetime import datetime

from sqlalchemy import delete, desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ghmirror.models import (
    EPOCH,
    Notification,
    NotificationType,
    PullRequest,
    PullRequestStatus,
    Review,
    utc_now,
)

from .base import BaseRepository

logger = logging.getLogger(__name__)


class NotificationRepository(BaseRepository[Notification]):
    """Repository for Notification operations."""

    def __init__(self, session: AsyncSession):
        """Initialize with session."""
        super().__init__(session, Notification)

    async def create_for_status(
        self,
        status: PullRequestStatus,
        pull_request: PullRequest,
        notification_type: NotificationType,
        now: datetime | None = None,
    ) -> Notification:
        """Record a check notification for the pull request's author."""
        notification = Notification(
            type=notification_type,
            user_id=pull_request.author_id,
            repository_id=pull_request.repository_id,
            title=pull_request.title,
            description=pull_request.body,
            identifier=str(pull_request.number),
            result=status.conclusion.name.lower(),
            html_url=pull_request.html_url,
            details_url=status.details_url,
            toast_state=0,
            time_occurred=status.time_occurred,
            time_created=now or utc_now(),
        )
        return await self._add_superseding(notification)

    async def create_for_review(
        self,
        review: Review,
        pull_request: PullRequest,
        notification_type: NotificationType = NotificationType.NEW_REVIEW,
        now: datetime | None = None,
    ) -> Notification:
        """Record a review notification attributed to the reviewer."""
        notification = Notification(
            type=notification_type,
            user_id=review.author_id,
            repository_id=pull_request.repository_id,
            title=pull_request.title,
            description=review.body,
            identifier=str(pull_request.number),
            result=review.state,
            html_url=review.html_url,
            details_url=review.html_url,
            toast_state=0,
            time_occurred=review.time_submitted,
            time_created=now or utc_now(),
        )
        return await self._add_superseding(notification)

    async def _add_superseding(self, notification: Notification) -> Notification:
        notification = await self.add(notification)
        superseded = await self.set_older_toasted(notification)
        logger.info(
            f"Created {notification.type.name} notification for #{notification.identifier}",
            extra={"notification_id": notification.id, "superseded": superseded},
        )
        return notification

    async def set_older_toasted(self, notification: Notification) -> int:
        """Mark older, undelivered notifications about the same thing as toasted."""
        return await self._execute_write(
            update(Notification)
            .where(
                Notification.type == notification.type,
                Notification.repository_id == notification.repository_id,
                Notification.identifier == notification.identifier,
                Notification.user_id == notification.user_id,
                Notification.time_occurred < notification.time_occurred,
                Notification.toast_state == 0,
            )
            .values(toast_state=1)
        )

    async def get(
        self, since: datetime | None = None, include_toasted: bool = False
    ) -> list[Notification]:
        """Get notifications created after ``since``, newest first."""
        query = (
            select(Notification)
            .where(
                Notification.time_created > (since or EPOCH),
                Notification.toast_state <= (1 if include_toasted else 0),
            )
            .order_by(desc(Notification.time_created), desc(Notification.id))
        )
        return await self._execute_query(query)

    async def set_toasted(self, notification: Notification, toasted: bool = True) -> None:
        """Record whether the UI has shown the notification."""
        notification.toast_state = 1 if toasted else 0
        await self.session.flush()

    async def delete_before(self, before: datetime) -> int:
        """Remove notifications created before ``before``."""
        return await self._execute_write(
            delete(Notification).where(Notification.time_created < before)
        )
