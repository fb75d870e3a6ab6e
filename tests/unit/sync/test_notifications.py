"""
Unit tests for notification derivation.

Why: Notifications are the user-visible product of a sync pass; each
     transition must be reported exactly once
What: Tests staleness, check failure/success derivation across head
      changes and repeated observations, and review notification rules
How: Builds transient status snapshots and reviews and calls the pure
     decision functions with an explicit "now"
"""

from datetime import UTC, datetime, timedelta

import pytest

from ghmirror.models import (
    CheckConclusion,
    CheckStatus,
    CommitState,
    PullRequestStatus,
    Review,
)
from ghmirror.sync.notifications import (
    DEFAULT_STALE_AFTER,
    is_stale,
    should_create_check_failure_notification,
    should_create_check_succeeded_notification,
    should_create_review_notification,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
FRESH = NOW - timedelta(hours=2)
SHA_A = "a" * 40
SHA_B = "b" * 40


def snapshot(
    head_sha: str = SHA_A,
    conclusion: CheckConclusion = CheckConclusion.SUCCESS,
    status: CheckStatus = CheckStatus.COMPLETED,
    state: CommitState = CommitState.SUCCESS,
) -> PullRequestStatus:
    return PullRequestStatus(
        pull_request_id=1,
        head_sha=head_sha,
        conclusion=conclusion,
        status=status,
        state=state,
        result="",
    )


def failed(head_sha: str = SHA_A, conclusion: CheckConclusion = CheckConclusion.FAILURE):
    return snapshot(head_sha=head_sha, conclusion=conclusion)


def running(head_sha: str = SHA_A) -> PullRequestStatus:
    return snapshot(
        head_sha=head_sha, conclusion=CheckConclusion.NONE, status=CheckStatus.IN_PROGRESS
    )


class TestIsStale:
    """Test the staleness window."""

    def test_recent_update_is_not_stale(self) -> None:
        """Test an update inside the window."""
        assert not is_stale(FRESH, NOW)

    def test_old_update_is_stale(self) -> None:
        """
        Why: Abandoned pull requests must not generate notifications
        What: Tests an update older than the window
        How: Uses a timestamp just past the default window
        """
        assert is_stale(NOW - DEFAULT_STALE_AFTER - timedelta(seconds=1), NOW)

    def test_exact_boundary_is_not_stale(self) -> None:
        """Test that the window boundary itself still counts as fresh."""
        assert not is_stale(NOW - DEFAULT_STALE_AFTER, NOW)

    def test_unknown_update_time_is_stale(self) -> None:
        """Test that a missing update time is treated as stale."""
        assert is_stale(None, NOW)

    def test_custom_window(self) -> None:
        """Test a configured window."""
        assert is_stale(NOW - timedelta(days=2), NOW, timedelta(days=1))


class TestCheckFailureNotification:
    """Test failure notification derivation."""

    def test_first_failure_notifies(self) -> None:
        """
        Why: A failure seen for the first time must be reported
        What: Tests failure with no previous snapshot
        How: Passes previous=None
        """
        assert should_create_check_failure_notification(failed(), None, FRESH, NOW)

    def test_failure_after_success_notifies(self) -> None:
        """Test a success -> failure transition on the same head."""
        assert should_create_check_failure_notification(failed(), snapshot(), FRESH, NOW)

    def test_repeated_failure_does_not_notify(self) -> None:
        """
        Why: Re-observing the same failure must not spam the user
        What: Tests failure -> same failure on the same head
        How: Passes identical failed snapshots
        """
        assert not should_create_check_failure_notification(failed(), failed(), FRESH, NOW)

    def test_changed_failure_conclusion_notifies(self) -> None:
        """Test failure -> different failure conclusion on the same head."""
        assert should_create_check_failure_notification(
            failed(conclusion=CheckConclusion.TIMED_OUT), failed(), FRESH, NOW
        )

    def test_failure_on_new_head_notifies(self) -> None:
        """
        Why: A new push that fails again is a new failure
        What: Tests the same failure conclusion on a different head SHA
        How: Changes head_sha between snapshots
        """
        assert should_create_check_failure_notification(
            failed(head_sha=SHA_B), failed(head_sha=SHA_A), FRESH, NOW
        )

    def test_success_does_not_notify_failure(self) -> None:
        """Test that a non-failing snapshot never yields a failure."""
        assert not should_create_check_failure_notification(snapshot(), failed(), FRESH, NOW)

    def test_stale_pull_request_does_not_notify(self) -> None:
        """Test that staleness suppresses failure notifications."""
        assert not should_create_check_failure_notification(
            failed(), None, NOW - timedelta(days=31), NOW
        )

    def test_commit_state_failure_notifies(self) -> None:
        """Test that a failing combined commit state counts as a failure."""
        current = snapshot(state=CommitState.ERROR)

        assert should_create_check_failure_notification(current, None, FRESH, NOW)


class TestCheckSucceededNotification:
    """Test success notification derivation."""

    def test_first_success_notifies(self) -> None:
        """Test success with no previous snapshot."""
        assert should_create_check_succeeded_notification(snapshot(), None, FRESH, NOW)

    def test_success_after_running_notifies(self) -> None:
        """Test running -> success on the same head."""
        assert should_create_check_succeeded_notification(snapshot(), running(), FRESH, NOW)

    def test_repeated_success_does_not_notify(self) -> None:
        """Test success -> success on the same head."""
        assert not should_create_check_succeeded_notification(
            snapshot(), snapshot(), FRESH, NOW
        )

    def test_success_on_new_head_notifies(self) -> None:
        """Test success -> success across a head change."""
        assert should_create_check_succeeded_notification(
            snapshot(head_sha=SHA_B), snapshot(head_sha=SHA_A), FRESH, NOW
        )

    def test_pending_does_not_notify(self) -> None:
        """Test that a running snapshot never yields a success."""
        assert not should_create_check_succeeded_notification(running(), None, FRESH, NOW)

    def test_stale_pull_request_does_not_notify(self) -> None:
        """Test that staleness suppresses success notifications."""
        assert not should_create_check_succeeded_notification(snapshot(), None, None, NOW)


class TestTransitionSequence:
    """Test a realistic sequence of observations on one pull request."""

    def test_each_transition_reported_once(self) -> None:
        """
        Why: Over a pull request's life the user should see one notification
             per meaningful transition and nothing for re-observations
        What: Walks running -> failure -> failure -> success -> new head failure
        How: Feeds consecutive snapshot pairs through both decisions
        """
        sequence = [
            running(SHA_A),
            failed(SHA_A),
            failed(SHA_A),
            snapshot(SHA_A),
            snapshot(SHA_A),
            running(SHA_B),
            failed(SHA_B),
        ]
        expected = [
            (False, False),
            (True, False),
            (False, False),
            (False, True),
            (False, False),
            (False, False),
            (True, False),
        ]

        # Execute
        results = []
        previous = None
        for current in sequence:
            results.append(
                (
                    should_create_check_failure_notification(current, previous, FRESH, NOW),
                    should_create_check_succeeded_notification(current, previous, FRESH, NOW),
                )
            )
            previous = current

        # Verify
        assert results == expected


class TestReviewNotification:
    """Test review notification rules."""

    @staticmethod
    def review(author_id: int = 2, state: str = "APPROVED") -> Review:
        return Review(internal_id=6000, pull_request_id=1, author_id=author_id, state=state)

    def test_new_review_by_someone_else_notifies(self) -> None:
        """Test the basic case."""
        assert should_create_review_notification(self.review(), 1, is_new=True)

    def test_known_review_does_not_notify(self) -> None:
        """Test that re-observed reviews are ignored."""
        assert not should_create_review_notification(self.review(), 1, is_new=False)

    def test_own_review_does_not_notify(self) -> None:
        """
        Why: Authors replying to their own pull request create reviews too
        What: Tests that the pull request author's review is ignored
        How: Uses the same id for reviewer and author
        """
        assert not should_create_review_notification(self.review(author_id=1), 1, is_new=True)

    @pytest.mark.parametrize("state", ["PENDING", "pending", ""])
    def test_unsubmitted_review_does_not_notify(self, state: str) -> None:
        """Test that draft reviews are ignored."""
        assert not should_create_review_notification(self.review(state=state), 1, is_new=True)

    @pytest.mark.parametrize("state", ["COMMENTED", "CHANGES_REQUESTED", "DISMISSED"])
    def test_submitted_states_notify(self, state: str) -> None:
        """Test every submitted review state notifies."""
        assert should_create_review_notification(self.review(state=state), 1, is_new=True)
