"""Release SQLAlchemy model."""

from datetime import datetime

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, BoolInt, EpochMillis


class Release(BaseModel):
    """Model for a published repository release."""

    __tablename__ = "releases"

    internal_id: Mapped[int] = mapped_column(Integer, nullable=False)
    repository_id: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    tag_name: Mapped[str] = mapped_column(Text, nullable=False)
    prerelease: Mapped[bool] = mapped_column(BoolInt, nullable=False, default=False)
    html_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    time_created: Mapped[datetime | None] = mapped_column(EpochMillis, nullable=False)
    time_published: Mapped[datetime | None] = mapped_column(EpochMillis, nullable=False)
    time_last_observed: Mapped[datetime | None] = mapped_column(
        EpochMillis, nullable=False
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<Release(id={self.id}, tag_name={self.tag_name})>"
