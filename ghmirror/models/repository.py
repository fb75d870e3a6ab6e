"""Repository SQLAlchemy model."""

from datetime import datetime

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, BoolInt, EpochMillis


class Repository(BaseModel):
    """Cached GitHub repository, unique on (owner_id, name) and internal_id."""

    __tablename__ = "repositories"

    owner_id: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    internal_id: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    private: Mapped[bool] = mapped_column(BoolInt, nullable=False, default=False)
    html_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    clone_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    fork: Mapped[bool] = mapped_column(BoolInt, nullable=False, default=False)
    default_branch: Mapped[str | None] = mapped_column(Text, nullable=True)
    visibility: Mapped[str | None] = mapped_column(Text, nullable=True)
    has_issues: Mapped[bool] = mapped_column(BoolInt, nullable=False, default=True)
    time_updated: Mapped[datetime | None] = mapped_column(EpochMillis, nullable=False)
    time_pushed: Mapped[datetime | None] = mapped_column(EpochMillis, nullable=False)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<Repository(id={self.id}, name={self.name}, owner_id={self.owner_id})>"
