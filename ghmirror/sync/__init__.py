"""Sync orchestration: update operations, notification derivation and events."""

from .events import DataManagerUpdateEvent, UpdateKind
from .exceptions import (
    DataManagerError,
    DataStoreInaccessibleError,
    RepositoryNotFoundError,
)
from .manager import (
    LAST_UPDATED_KEY,
    CacheRepositories,
    GitHubDataManager,
    repository_full_name_from_url,
)
from .notifications import (
    is_stale,
    should_create_check_failure_notification,
    should_create_check_succeeded_notification,
    should_create_review_notification,
)
from .options import RequestOptions
from .outcome import AttemptOutcome

__all__ = [
    "LAST_UPDATED_KEY",
    "AttemptOutcome",
    "CacheRepositories",
    "DataManagerError",
    "DataManagerUpdateEvent",
    "DataStoreInaccessibleError",
    "GitHubDataManager",
    "RepositoryNotFoundError",
    "RequestOptions",
    "UpdateKind",
    "is_stale",
    "repository_full_name_from_url",
    "should_create_check_failure_notification",
    "should_create_check_succeeded_notification",
    "should_create_review_notification",
]
