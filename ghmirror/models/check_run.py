"""CheckRun SQLAlchemy model."""

from datetime import datetime

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, EpochMillis, IntEnumColumn
from .enums import CheckConclusion, CheckStatus


class CheckRun(BaseModel):
    """Model for a single CI check run on a commit."""

    __tablename__ = "check_runs"

    internal_id: Mapped[int] = mapped_column(Integer, nullable=False)
    head_sha: Mapped[str | None] = mapped_column(Text, nullable=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    conclusion: Mapped[CheckConclusion] = mapped_column(
        "conclusion_id", IntEnumColumn(CheckConclusion), nullable=False
    )
    status: Mapped[CheckStatus] = mapped_column(
        "status_id", IntEnumColumn(CheckStatus), nullable=False
    )
    # Output summary of the run, if any.
    result: Mapped[str] = mapped_column(Text, nullable=False, default="")
    details_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    html_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    time_started: Mapped[datetime | None] = mapped_column(EpochMillis, nullable=False)
    time_completed: Mapped[datetime | None] = mapped_column(EpochMillis, nullable=False)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<CheckRun(id={self.id}, name={self.name}, status={self.status.name})>"

    @property
    def is_completed(self) -> bool:
        """Check if check run is completed."""
        return self.status == CheckStatus.COMPLETED

    @property
    def is_failed(self) -> bool:
        """Check if check run completed with a failing conclusion."""
        return CheckConclusion.NONE < self.conclusion < CheckConclusion.NEUTRAL
