"""Search and SearchIssue SQLAlchemy models."""

from datetime import datetime

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, EpochMillis


class Search(BaseModel):
    """Saved issue query scoped to a repository."""

    __tablename__ = "searches"

    repository_id: Mapped[int] = mapped_column(Integer, nullable=False)
    time_updated: Mapped[datetime | None] = mapped_column(EpochMillis, nullable=False)
    query: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<Search(id={self.id}, query={self.query!r}, repository_id={self.repository_id})>"


class SearchIssue(BaseModel):
    """Issue currently matching a saved search."""

    __tablename__ = "search_issues"

    time_updated: Mapped[datetime | None] = mapped_column(EpochMillis, nullable=False)
    search_id: Mapped[int] = mapped_column(Integer, nullable=False)
    issue_id: Mapped[int] = mapped_column(Integer, nullable=False)
