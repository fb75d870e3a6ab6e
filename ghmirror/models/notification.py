"""Notification SQLAlchemy model."""

from datetime import datetime

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, EpochMillis, IntEnumColumn
from .enums import NotificationType


class Notification(BaseModel):
    """Candidate notification; creation does not imply delivery.

    ``toast_state`` is 0 until the UI shows the notification. It is the only
    column written outside a sync pass.
    """

    __tablename__ = "notifications"

    type: Mapped[NotificationType] = mapped_column(
        "type_id", IntEnumColumn(NotificationType), nullable=False
    )
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    repository_id: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False, default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    identifier: Mapped[str | None] = mapped_column(Text, nullable=True)
    result: Mapped[str | None] = mapped_column(Text, nullable=True)
    html_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    details_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    toast_state: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    time_occurred: Mapped[datetime | None] = mapped_column(EpochMillis, nullable=False)
    time_created: Mapped[datetime | None] = mapped_column(EpochMillis, nullable=False)

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<Notification(id={self.id}, type={self.type.name}, "
            f"identifier={self.identifier}, toasted={self.toasted})>"
        )

    @property
    def toasted(self) -> bool:
        """Check if the notification has already been shown."""
        return self.toast_state != 0
