"""SQLAlchemy models for the GitHub cache tables."""

from .associations import IssueAssign, IssueLabel, PullRequestAssign, PullRequestLabel
from .base import (
    EPOCH,
    Base,
    BaseModel,
    BoolInt,
    EpochMillis,
    IntEnumColumn,
    from_epoch_millis,
    to_epoch_millis,
    utc_now,
)
from .check_run import CheckRun
from .check_suite import CheckSuite
from .commit_status import CommitCombinedStatus
from .enums import (
    CheckConclusion,
    CheckStatus,
    CommitState,
    NotificationType,
    PullRequestCombinedStatus,
    parse_enum,
)
from .issue import Issue
from .label import Label
from .metadata import MetadataEntry
from .notification import Notification
from .pull_request import PullRequest
from .pull_request_status import PullRequestStatus
from .release import Release
from .repository import Repository
from .review import Review
from .search import Search, SearchIssue
from .user import User

__all__ = [
    # Base classes and column types
    "Base",
    "EPOCH",
    "BaseModel",
    "BoolInt",
    "EpochMillis",
    "IntEnumColumn",
    "from_epoch_millis",
    "to_epoch_millis",
    "utc_now",
    # Enums
    "CheckConclusion",
    "CheckStatus",
    "CommitState",
    "NotificationType",
    "PullRequestCombinedStatus",
    "parse_enum",
    # Core models
    "User",
    "Repository",
    "Label",
    "Issue",
    "PullRequest",
    "IssueLabel",
    "IssueAssign",
    "PullRequestLabel",
    "PullRequestAssign",
    # Checks and status
    "CheckRun",
    "CheckSuite",
    "CommitCombinedStatus",
    "PullRequestStatus",
    # Notifications, searches and the rest
    "Notification",
    "Search",
    "SearchIssue",
    "Review",
    "Release",
    "MetadataEntry",
]
