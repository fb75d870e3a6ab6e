"""User SQLAlchemy model."""

from datetime import datetime

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, EpochMillis


class User(BaseModel):
    """Cached GitHub account (person, bot or organization)."""

    __tablename__ = "users"

    login: Mapped[str] = mapped_column(Text, nullable=False)
    internal_id: Mapped[int] = mapped_column(Integer, nullable=False)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Local observation time, not the remote profile's update time.
    time_updated: Mapped[datetime | None] = mapped_column(EpochMillis, nullable=False)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<User(id={self.id}, login={self.login})>"
