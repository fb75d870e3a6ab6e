"""PullRequestStatus SQLAlchemy model."""

import logging
from datetime import datetime

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, EpochMillis, IntEnumColumn
from .enums import (
    CheckConclusion,
    CheckStatus,
    CommitState,
    PullRequestCombinedStatus,
)

logger = logging.getLogger(__name__)


class PullRequestStatus(BaseModel):
    """Point-in-time snapshot of a pull request's checks and commit state.

    Rows are append-only. The previous snapshot for a pull request is what
    notification derivation compares the newest one against.
    """

    __tablename__ = "pull_request_statuses"

    pull_request_id: Mapped[int] = mapped_column(Integer, nullable=False)
    head_sha: Mapped[str | None] = mapped_column(Text, nullable=True)
    conclusion: Mapped[CheckConclusion] = mapped_column(
        "conclusion_id", IntEnumColumn(CheckConclusion), nullable=False
    )
    status: Mapped[CheckStatus] = mapped_column(
        "status_id", IntEnumColumn(CheckStatus), nullable=False
    )
    state: Mapped[CommitState] = mapped_column(
        "state_id", IntEnumColumn(CommitState), nullable=False
    )
    result: Mapped[str] = mapped_column(Text, nullable=False, default="")
    details_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    html_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    time_occurred: Mapped[datetime | None] = mapped_column(EpochMillis, nullable=False)
    time_created: Mapped[datetime | None] = mapped_column(EpochMillis, nullable=False)

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<PullRequestStatus(pull_request_id={self.pull_request_id}, "
            f"status={self.status.name}, conclusion={self.conclusion.name})>"
        )

    @property
    def pending(self) -> bool:
        """Check if anything is still running or undetermined."""
        return (
            self.state in (CommitState.PENDING, CommitState.UNKNOWN)
            or self.status == CheckStatus.IN_PROGRESS
        )

    @property
    def completed(self) -> bool:
        """Check if all checks have completed."""
        return not self.pending and self.status == CheckStatus.COMPLETED

    @property
    def failed(self) -> bool:
        """Check if there is any indication of failure."""
        return self.state in (CommitState.FAILURE, CommitState.ERROR) or (
            CheckConclusion.NONE < self.conclusion < CheckConclusion.NEUTRAL
        )

    @property
    def succeeded(self) -> bool:
        """Check if all checks completed without failure."""
        return (
            self.completed
            and not self.failed
            and self.state in (CommitState.SUCCESS, CommitState.NONE)
        )

    @property
    def combined_status(self) -> PullRequestCombinedStatus:
        """Collapse the snapshot into a single overall status."""
        if self.failed:
            return PullRequestCombinedStatus.FAILED
        if self.pending:
            return PullRequestCombinedStatus.PENDING
        if self.succeeded:
            return PullRequestCombinedStatus.SUCCESS

        logger.warning(
            f"Unknown pull request status: state={self.state.name} "
            f"status={self.status.name} conclusion={self.conclusion.name}"
        )
        return PullRequestCombinedStatus.UNKNOWN
