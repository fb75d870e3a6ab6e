"""CommitCombinedStatus SQLAlchemy model."""

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, IntEnumColumn
from .enums import CommitState


class CommitCombinedStatus(BaseModel):
    """Aggregate commit status state, one row per head SHA."""

    __tablename__ = "commit_combined_statuses"

    state: Mapped[CommitState] = mapped_column(
        "state_id", IntEnumColumn(CommitState), nullable=False
    )
    head_sha: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<CommitCombinedStatus(head_sha={self.head_sha}, state={self.state.name})>"
