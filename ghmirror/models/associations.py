"""Association table models linking issues and pull requests to labels and users."""

from sqlalchemy import Integer
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class IssueLabel(BaseModel):
    """Label applied to an issue (local ids)."""

    __tablename__ = "issue_labels"

    issue_id: Mapped[int] = mapped_column(Integer, nullable=False)
    label_id: Mapped[int] = mapped_column(Integer, nullable=False)


class IssueAssign(BaseModel):
    """User assigned to an issue (local ids)."""

    __tablename__ = "issue_assignees"

    issue_id: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)


class PullRequestLabel(BaseModel):
    """Label applied to a pull request (local ids)."""

    __tablename__ = "pull_request_labels"

    pull_request_id: Mapped[int] = mapped_column(Integer, nullable=False)
    label_id: Mapped[int] = mapped_column(Integer, nullable=False)


class PullRequestAssign(BaseModel):
    """User assigned to a pull request (local ids)."""

    __tablename__ = "pull_request_assignees"

    pull_request_id: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
