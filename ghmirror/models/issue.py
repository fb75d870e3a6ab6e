"""Issue SQLAlchemy model."""

from datetime import datetime

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, BoolInt, EpochMillis


class Issue(BaseModel):
    """Cached issue.

    ``label_ids`` and ``assignee_ids`` hold comma-joined *remote* ids. They
    double as the change fingerprint for the ``issue_labels`` and
    ``issue_assignees`` association rows, which are always rebuilt together
    with them.
    """

    __tablename__ = "issues"

    internal_id: Mapped[int] = mapped_column(Integer, nullable=False)
    number: Mapped[int] = mapped_column(Integer, nullable=False)
    repository_id: Mapped[int] = mapped_column(Integer, nullable=False)
    state: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False, default="")
    author_id: Mapped[int] = mapped_column(Integer, nullable=False)
    time_created: Mapped[datetime | None] = mapped_column(EpochMillis, nullable=False)
    time_updated: Mapped[datetime | None] = mapped_column(EpochMillis, nullable=False)
    time_closed: Mapped[datetime | None] = mapped_column(EpochMillis, nullable=False)
    time_last_observed: Mapped[datetime | None] = mapped_column(
        EpochMillis, nullable=False
    )
    html_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    locked: Mapped[bool] = mapped_column(BoolInt, nullable=False, default=False)
    assignee_ids: Mapped[str | None] = mapped_column(Text, nullable=True)
    label_ids: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<Issue(id={self.id}, number={self.number}, repository_id={self.repository_id})>"

    @property
    def is_open(self) -> bool:
        """Check if issue is open."""
        return self.state.lower() == "open"
