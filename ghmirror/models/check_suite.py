"""CheckSuite SQLAlchemy model."""

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, IntEnumColumn
from .enums import CheckConclusion, CheckStatus


class CheckSuite(BaseModel):
    """Model for a CI check suite on a commit; ``name`` is the owning app."""

    __tablename__ = "check_suites"

    internal_id: Mapped[int] = mapped_column(Integer, nullable=False)
    head_sha: Mapped[str | None] = mapped_column(Text, nullable=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    conclusion: Mapped[CheckConclusion] = mapped_column(
        "conclusion_id", IntEnumColumn(CheckConclusion), nullable=False
    )
    status: Mapped[CheckStatus] = mapped_column(
        "status_id", IntEnumColumn(CheckStatus), nullable=False
    )
    html_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<CheckSuite(id={self.id}, name={self.name}, status={self.status.name})>"
