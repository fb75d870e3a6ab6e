"""
Integration tests for notifications, saved searches, reviews, releases and
metadata.

Why: These tables hold what the user is told about and what the next pass
     resumes from; duplicates or leftovers show up directly in the UI
What: Tests notification supersession and filtering, search refresh
      thresholds and membership pruning, review/release upserts and
      metadata writes
How: Runs the repositories against a real SQLite store
"""

from datetime import timedelta

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from ghmirror.models import (
    CheckConclusion,
    NotificationType,
    PullRequest,
    PullRequestStatus,
    Repository,
)
from ghmirror.repositories import (
    IssueRepository,
    MetadataRepository,
    NotificationRepository,
    PullRequestRepository,
    ReleaseRepository,
    RepositoryRepository,
    ReviewRepository,
    SearchIssueRepository,
    SearchRepository,
)

from tests.conftest import WriteCounter
from tests.fixtures.remote import (
    BASE_TIME,
    make_issue,
    make_pull_request,
    make_release,
    make_repository,
    make_review,
)


@pytest_asyncio.fixture
async def repository(session: AsyncSession) -> Repository:
    """The cached ``octocat/hello-world`` repository."""
    return await RepositoryRepository(session).get_or_create_or_update(make_repository())


@pytest_asyncio.fixture
async def pull_request(session: AsyncSession, repository: Repository) -> PullRequest:
    """A cached pull request in ``repository``."""
    return await PullRequestRepository(session).get_or_create_or_update(
        make_pull_request(), repository.id, BASE_TIME
    )


def failed_status(pull_request: PullRequest, minutes: int = 0) -> PullRequestStatus:
    return PullRequestStatus(
        pull_request_id=pull_request.id,
        head_sha=pull_request.head_sha,
        conclusion=CheckConclusion.FAILURE,
        details_url="https://ci.example.com/runs/4000",
        time_occurred=BASE_TIME + timedelta(minutes=minutes),
    )


class TestNotificationRepository:
    """Test NotificationRepository."""

    async def test_create_for_status(
        self, session: AsyncSession, pull_request: PullRequest
    ) -> None:
        """Test a check notification is attributed to the pull request author."""
        notification = await NotificationRepository(session).create_for_status(
            failed_status(pull_request), pull_request, NotificationType.CHECK_RUN_FAILED, BASE_TIME
        )

        assert notification.id is not None
        assert notification.user_id == pull_request.author_id
        assert notification.repository_id == pull_request.repository_id
        assert notification.identifier == "1"
        assert notification.result == "failure"
        assert notification.details_url == "https://ci.example.com/runs/4000"
        assert notification.toast_state == 0

    async def test_newer_notification_supersedes_older(
        self, session: AsyncSession, pull_request: PullRequest
    ) -> None:
        """
        Why: The UI should only pop the latest news about a pull request
        What: Tests an older undelivered notification of the same kind is
              marked toasted when a newer one is recorded
        How: Records two failures for the same pull request a minute apart
        """
        # Setup
        notifications = NotificationRepository(session)
        older = await notifications.create_for_status(
            failed_status(pull_request, 0),
            pull_request,
            NotificationType.CHECK_RUN_FAILED,
            BASE_TIME,
        )

        # Execute
        newer = await notifications.create_for_status(
            failed_status(pull_request, 1),
            pull_request,
            NotificationType.CHECK_RUN_FAILED,
            BASE_TIME + timedelta(minutes=1),
        )

        # Verify
        await session.refresh(older)
        assert older.toast_state == 1
        assert newer.toast_state == 0
        pending = await notifications.get()
        assert [n.id for n in pending] == [newer.id]
        everything = await notifications.get(include_toasted=True)
        assert [n.id for n in everything] == [newer.id, older.id]

    async def test_other_type_is_not_superseded(
        self, session: AsyncSession, pull_request: PullRequest
    ) -> None:
        """Test a success does not hide an undelivered failure."""
        notifications = NotificationRepository(session)
        failure = await notifications.create_for_status(
            failed_status(pull_request, 0), pull_request, NotificationType.CHECK_RUN_FAILED
        )

        await notifications.create_for_status(
            failed_status(pull_request, 1), pull_request, NotificationType.CHECK_RUN_SUCCEEDED
        )

        await session.refresh(failure)
        assert failure.toast_state == 0

    async def test_get_since_and_set_toasted(
        self, session: AsyncSession, pull_request: PullRequest
    ) -> None:
        """Test ``since`` filtering and toggling delivery state."""
        notifications = NotificationRepository(session)
        early = await notifications.create_for_status(
            failed_status(pull_request, 0),
            pull_request,
            NotificationType.CHECK_RUN_FAILED,
            BASE_TIME,
        )
        late = await notifications.create_for_status(
            failed_status(pull_request, 0),
            pull_request,
            NotificationType.CHECK_RUN_SUCCEEDED,
            BASE_TIME + timedelta(hours=1),
        )

        since = await notifications.get(since=BASE_TIME + timedelta(minutes=30))
        await notifications.set_toasted(late)
        after_toast = await notifications.get()
        await notifications.set_toasted(late, toasted=False)

        assert [n.id for n in since] == [late.id]
        assert [n.id for n in after_toast] == [early.id]
        assert late.toast_state == 0

    async def test_create_for_review_and_delete_before(
        self, session: AsyncSession, pull_request: PullRequest
    ) -> None:
        """Test review notifications are attributed to the reviewer and age out."""
        notifications = NotificationRepository(session)
        review = await ReviewRepository(session).get_or_create_or_update(
            make_review(), pull_request.id, BASE_TIME
        )

        notification = await notifications.create_for_review(
            review, pull_request, now=BASE_TIME
        )
        deleted = await notifications.delete_before(BASE_TIME + timedelta(days=1))

        assert notification.type is NotificationType.NEW_REVIEW
        assert notification.user_id == review.author_id
        assert notification.result == "APPROVED"
        assert deleted == 1
        assert await notifications.get(include_toasted=True) == []


class TestSearchRepositories:
    """Test SearchRepository and SearchIssueRepository."""

    async def test_get_or_create_threshold(
        self,
        session: AsyncSession,
        repository: Repository,
        write_counter: WriteCounter,
    ) -> None:
        """
        Why: The search row is touched once per matching issue
        What: Tests time_updated is only rewritten after the threshold
        How: Calls get_or_create three times with advancing clocks
        """
        # Setup
        searches = SearchRepository(session, timedelta(minutes=2))
        search = await searches.get_or_create("label:bug", repository.id, BASE_TIME)
        write_counter.reset()

        # Execute
        await searches.get_or_create("label:bug", repository.id, BASE_TIME + timedelta(minutes=1))
        writes_inside_threshold = write_counter.count
        await searches.get_or_create("label:bug", repository.id, BASE_TIME + timedelta(minutes=3))

        # Verify
        assert writes_inside_threshold == 0
        assert write_counter.count == 1
        assert search.time_updated == BASE_TIME + timedelta(minutes=3)
        assert await searches.count_all() == 1

    async def test_membership_and_pruning(
        self, session: AsyncSession, repository: Repository
    ) -> None:
        """
        Why: A search shows exactly the issues matching it on the last pass
        What: Tests adding members, dropping members not refreshed, and
              removing members of deleted searches
        How: Adds two issues, refreshes one, then prunes
        """
        # Setup
        issues = IssueRepository(session)
        first = await issues.get_or_create_or_update(make_issue(3000, 10), repository.id)
        second = await issues.get_or_create_or_update(make_issue(3001, 11), repository.id)
        searches = SearchRepository(session)
        members = SearchIssueRepository(session)
        search = await searches.get_or_create("label:bug", repository.id, BASE_TIME)
        await members.add_issue_to_search(first, search, BASE_TIME)
        await members.add_issue_to_search(second, search, BASE_TIME)
        pass_start = BASE_TIME + timedelta(hours=1)
        await members.add_issue_to_search(first, search, pass_start)

        # Execute
        dropped = await members.delete_before(search, pass_start)
        matching = await members.get_issues_for_search(search)
        removed_searches = await searches.delete_before(pass_start)
        orphaned = await members.delete_unreferenced()

        # Verify
        assert dropped == 1
        assert [issue.id for issue in matching] == [first.id]
        assert removed_searches == 1
        assert orphaned == 1
        assert await members.count_all() == 0


class TestReviewRepository:
    """Test ReviewRepository."""

    async def test_upsert_rewrites(self, session: AsyncSession, pull_request: PullRequest) -> None:
        """Test a review seen again is updated in place."""
        reviews = ReviewRepository(session)
        review = await reviews.get_or_create_or_update(make_review(), pull_request.id, BASE_TIME)

        await reviews.get_or_create_or_update(
            make_review(state="CHANGES_REQUESTED"), pull_request.id, BASE_TIME
        )

        assert review.state == "CHANGES_REQUESTED"
        assert [r.id for r in await reviews.get_all_for_pull_request(pull_request)] == [review.id]
        assert len(await reviews.get_all_for_user(review.author_id)) == 1

    async def test_review_without_author(
        self, session: AsyncSession, pull_request: PullRequest
    ) -> None:
        """Test reviews from deleted accounts are rejected."""
        remote = make_review()
        remote.user = None

        with pytest.raises(ValueError):
            await ReviewRepository(session).get_or_create_or_update(remote, pull_request.id)

    async def test_delete_unreferenced(
        self, session: AsyncSession, pull_request: PullRequest
    ) -> None:
        """Test reviews of deleted pull requests are pruned."""
        reviews = ReviewRepository(session)
        await reviews.get_or_create_or_update(make_review(), pull_request.id)
        await session.delete(pull_request)
        await session.flush()

        assert await reviews.delete_unreferenced() == 1
        assert await reviews.count_all() == 0


class TestReleaseRepository:
    """Test ReleaseRepository."""

    async def test_upsert_and_order(self, session: AsyncSession, repository: Repository) -> None:
        """Test releases are listed newest first and an unnamed release takes its tag."""
        releases = ReleaseRepository(session)
        await releases.get_or_create_or_update(make_release(7000, "v1.0.0"), repository.id)
        await releases.get_or_create_or_update(
            make_release(7001, "v1.1.0", BASE_TIME + timedelta(days=7)), repository.id
        )

        listed = await releases.get_all_for_repository(repository.id)

        assert [release.tag_name for release in listed] == ["v1.1.0", "v1.0.0"]
        assert listed[0].name == "v1.1.0"

    async def test_prune_unobserved(self, session: AsyncSession, repository: Repository) -> None:
        """Test releases not seen since the pass started are removed."""
        releases = ReleaseRepository(session)
        await releases.get_or_create_or_update(make_release(7000), repository.id, BASE_TIME)
        await releases.get_or_create_or_update(
            make_release(7001, "v2.0.0"), repository.id, BASE_TIME + timedelta(hours=1)
        )

        deleted = await releases.delete_last_observed_before(
            repository.id, BASE_TIME + timedelta(minutes=30)
        )

        assert deleted == 1
        remaining = await releases.get_all_for_repository(repository.id)
        assert [release.tag_name for release in remaining] == ["v2.0.0"]


class TestMetadataRepository:
    """Test MetadataRepository."""

    async def test_add_or_update(
        self, session: AsyncSession, write_counter: WriteCounter
    ) -> None:
        """
        Why: LastUpdated is stamped after every pass
        What: Tests insert, case-insensitive lookup, and no write when the
              value is unchanged
        How: Stores the same key three times
        """
        # Setup
        metadata = MetadataRepository(session)

        # Execute
        await metadata.add_or_update("LastUpdated", "first")
        await metadata.add_or_update("lastupdated", "second")
        write_counter.reset()
        await metadata.add_or_update("LastUpdated", "second")

        # Verify
        assert write_counter.count == 0
        assert await metadata.get("LASTUPDATED") == "second"
        assert await metadata.get("missing") is None
        assert await metadata.count_all() == 1
