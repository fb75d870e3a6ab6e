"""Label SQLAlchemy model."""

from datetime import datetime

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, BoolInt, EpochMillis


class Label(BaseModel):
    """Cached issue / pull request label."""

    __tablename__ = "labels"

    internal_id: Mapped[int] = mapped_column(Integer, nullable=False)
    is_default: Mapped[bool] = mapped_column(BoolInt, nullable=False, default=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    color: Mapped[str] = mapped_column(Text, nullable=False, default="")
    time_updated: Mapped[datetime | None] = mapped_column(EpochMillis, nullable=False)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<Label(id={self.id}, name={self.name})>"
