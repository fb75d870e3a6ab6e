"""PullRequest SQLAlchemy model."""

from datetime import datetime

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, BoolInt, EpochMillis


class PullRequest(BaseModel):
    """Cached pull request.

    Check runs, check suites and combined statuses are tied to a pull request
    only through ``head_sha`` equality, so a force-push implicitly detaches
    them.
    """

    __tablename__ = "pull_requests"

    internal_id: Mapped[int] = mapped_column(Integer, nullable=False)
    number: Mapped[int] = mapped_column(Integer, nullable=False)
    repository_id: Mapped[int] = mapped_column(Integer, nullable=False)
    state: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False, default="")
    author_id: Mapped[int] = mapped_column(Integer, nullable=False)
    time_created: Mapped[datetime | None] = mapped_column(EpochMillis, nullable=False)
    time_updated: Mapped[datetime | None] = mapped_column(EpochMillis, nullable=False)
    time_merged: Mapped[datetime | None] = mapped_column(EpochMillis, nullable=False)
    time_closed: Mapped[datetime | None] = mapped_column(EpochMillis, nullable=False)
    time_last_observed: Mapped[datetime | None] = mapped_column(
        EpochMillis, nullable=False
    )
    html_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    locked: Mapped[bool] = mapped_column(BoolInt, nullable=False, default=False)
    draft: Mapped[bool] = mapped_column(BoolInt, nullable=False, default=False)
    head_sha: Mapped[str | None] = mapped_column(Text, nullable=True)
    merged: Mapped[bool] = mapped_column(BoolInt, nullable=False, default=False)
    mergeable: Mapped[bool] = mapped_column(BoolInt, nullable=False, default=False)
    mergeable_state: Mapped[str | None] = mapped_column(Text, nullable=True)
    commit_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    assignee_ids: Mapped[str | None] = mapped_column(Text, nullable=True)
    label_ids: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<PullRequest(id={self.id}, number={self.number}, "
            f"repository_id={self.repository_id})>"
        )

    @property
    def is_open(self) -> bool:
        """Check if PR is open."""
        return self.state.lower() == "open"
