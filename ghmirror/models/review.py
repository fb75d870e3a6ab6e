"""Review SQLAlchemy model."""

from datetime import datetime

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, EpochMillis


class Review(BaseModel):
    """Model for a pull request review."""

    __tablename__ = "reviews"

    internal_id: Mapped[int] = mapped_column(Integer, nullable=False)
    pull_request_id: Mapped[int] = mapped_column(Integer, nullable=False)
    author_id: Mapped[int] = mapped_column(Integer, nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False, default="")
    state: Mapped[str] = mapped_column(Text, nullable=False, default="")
    html_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    time_submitted: Mapped[datetime | None] = mapped_column(EpochMillis, nullable=False)
    time_last_observed: Mapped[datetime | None] = mapped_column(
        EpochMillis, nullable=False
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<Review(id={self.id}, pull_request_id={self.pull_request_id}, state={self.state})>"
