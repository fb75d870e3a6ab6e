"""Metadata key/value SQLAlchemy model."""

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class MetadataEntry(BaseModel):
    """Generic key/value pair, e.g. the ``LastUpdated`` stamp."""

    __tablename__ = "metadata"

    key: Mapped[str] = mapped_column(Text, nullable=False)
    value: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<MetadataEntry(key={self.key}, value={self.value})>"
