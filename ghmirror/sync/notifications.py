"""Decisions about which observed transitions deserve a notification.

Every function here is pure: it looks only at the snapshots and timestamps
it is given and never touches the store.
"""

from datetime import datetime, timedelta

from ghmirror.models import PullRequestStatus, Review

DEFAULT_STALE_AFTER = timedelta(days=30)

# Draft reviews are only visible to their author.
_UNSUBMITTED_REVIEW_STATES = {"", "PENDING"}


def is_stale(
    pr_updated_at: datetime | None,
    now: datetime,
    stale_after: timedelta = DEFAULT_STALE_AFTER,
) -> bool:
    """True when the pull request has not been updated within ``stale_after``."""
    if pr_updated_at is None:
        return True
    return now - pr_updated_at > stale_after


def _head_changed(current: PullRequestStatus, previous: PullRequestStatus) -> bool:
    return previous.head_sha != current.head_sha


def should_create_check_failure_notification(
    current: PullRequestStatus,
    previous: PullRequestStatus | None,
    pr_updated_at: datetime | None,
    now: datetime,
    stale_after: timedelta = DEFAULT_STALE_AFTER,
) -> bool:
    """Decide whether ``current`` is a new failure.

    A failure already reported for the same head commit and the same
    conclusion is not reported again.
    """
    if is_stale(pr_updated_at, now, stale_after):
        return False

    if previous is None or _head_changed(current, previous):
        return current.failed

    return current.failed and (
        not previous.failed or previous.conclusion != current.conclusion
    )


def should_create_check_succeeded_notification(
    current: PullRequestStatus,
    previous: PullRequestStatus | None,
    pr_updated_at: datetime | None,
    now: datetime,
    stale_after: timedelta = DEFAULT_STALE_AFTER,
) -> bool:
    """Decide whether ``current`` is a new success."""
    if is_stale(pr_updated_at, now, stale_after):
        return False

    if previous is None or _head_changed(current, previous):
        return current.succeeded

    return current.succeeded and not previous.succeeded


def should_create_review_notification(
    review: Review, pull_request_author_id: int, is_new: bool
) -> bool:
    """A first sighting of a submitted review written by someone else."""
    if not is_new:
        return False
    if review.author_id == pull_request_author_id:
        return False
    return review.state.upper() not in _UNSUBMITTED_REVIEW_STATES
