"""Repository implementations for the cache data access layer."""

from .associations import (
    AssociationRepository,
    IssueAssignRepository,
    IssueLabelRepository,
    PullRequestAssignRepository,
    PullRequestLabelRepository,
)
from .base import BaseRepository, join_ids
from .check_run import CheckRunRepository
from .check_suite import CheckSuiteRepository
from .commit_status import CommitCombinedStatusRepository
from .issue import IssueRepository
from .label import LabelRepository
from .metadata import MetadataRepository
from .notification import NotificationRepository
from .pull_request import PullRequestRepository
from .pull_request_status import PullRequestStatusRepository
from .release import ReleaseRepository
from .repository import RepositoryRepository, split_full_name
from .review import ReviewRepository
from .search import SearchIssueRepository, SearchRepository
from .user import UserRepository

__all__ = [
    "AssociationRepository",
    "BaseRepository",
    "CheckRunRepository",
    "CheckSuiteRepository",
    "CommitCombinedStatusRepository",
    "IssueAssignRepository",
    "IssueLabelRepository",
    "IssueRepository",
    "LabelRepository",
    "MetadataRepository",
    "NotificationRepository",
    "PullRequestAssignRepository",
    "PullRequestLabelRepository",
    "PullRequestRepository",
    "PullRequestStatusRepository",
    "ReleaseRepository",
    "RepositoryRepository",
    "ReviewRepository",
    "SearchIssueRepository",
    "SearchRepository",
    "UserRepository",
    "join_ids",
    "split_full_name",
]
