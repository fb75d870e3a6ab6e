"""
Integration tests for check runs, check suites, commit statuses and
pull request status snapshots.

Why: Notifications are derived from the aggregated check state of a pull
     request's head commit; a wrong aggregate means a wrong notification
What: Tests change-only upserts, MIN() aggregates, failing-run ordering,
      the total_count=0 status mapping, snapshot building and retention,
      and pruning of rows no pull request references
How: Stores a pull request with head SHA "a"*40 and attaches checks to it
"""

from datetime import timedelta

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from ghmirror.models import (
    CheckConclusion,
    CheckStatus,
    CommitState,
    PullRequest,
    PullRequestCombinedStatus,
)
from ghmirror.repositories import (
    CheckRunRepository,
    CheckSuiteRepository,
    CommitCombinedStatusRepository,
    PullRequestRepository,
    PullRequestStatusRepository,
    RepositoryRepository,
)

from tests.conftest import WriteCounter
from tests.fixtures.remote import (
    BASE_TIME,
    make_check_run,
    make_check_suite,
    make_combined_status,
    make_pull_request,
    make_repository,
)

OTHER_SHA = "f" * 40


@pytest_asyncio.fixture
async def pull_request(session: AsyncSession) -> PullRequest:
    """A cached pull request whose head SHA is ``"a" * 40``."""
    repository = await RepositoryRepository(session).get_or_create_or_update(make_repository())
    return await PullRequestRepository(session).get_or_create_or_update(
        make_pull_request(), repository.id, BASE_TIME
    )


class TestCheckRunRepository:
    """Test CheckRunRepository."""

    async def test_unchanged_run_writes_nothing(
        self, session: AsyncSession, write_counter: WriteCounter
    ) -> None:
        """
        Why: Check runs are re-listed on every pass
        What: Tests a run with the same status and conclusion is not rewritten
        How: Upserts the same run twice and counts writes
        """
        # Setup
        runs = CheckRunRepository(session)
        await runs.get_or_create_or_update(make_check_run())
        write_counter.reset()

        # Execute
        await runs.get_or_create_or_update(make_check_run(name="renamed"))

        # Verify
        assert write_counter.count == 0

    async def test_status_change_is_applied(self, session: AsyncSession) -> None:
        """Test a run moving from in progress to completed is updated."""
        runs = CheckRunRepository(session)
        run = await runs.get_or_create_or_update(
            make_check_run(status="in_progress", conclusion=None, completed_at=None)
        )

        await runs.get_or_create_or_update(make_check_run(conclusion="failure"))

        assert run.status is CheckStatus.COMPLETED
        assert run.conclusion is CheckConclusion.FAILURE
        assert run.time_completed == BASE_TIME
        assert run.is_completed
        assert run.is_failed

    async def test_aggregates(self, session: AsyncSession, pull_request: PullRequest) -> None:
        """
        Why: The worst outstanding state must win
        What: Tests MIN() status across all runs and MIN() conclusion
              across completed runs only
        How: Stores a success, a neutral and a queued run on the head commit
        """
        # Setup
        runs = CheckRunRepository(session)
        await runs.get_or_create_or_update(make_check_run(4000, conclusion="success"))
        await runs.get_or_create_or_update(make_check_run(4001, conclusion="neutral"))
        await runs.get_or_create_or_update(
            make_check_run(4002, status="queued", conclusion=None, completed_at=None)
        )
        await runs.get_or_create_or_update(
            make_check_run(4003, head_sha=OTHER_SHA, conclusion="failure")
        )

        # Execute
        status = await runs.get_status_for_pull_request(pull_request)
        conclusion = await runs.get_conclusion_for_pull_request(pull_request)

        # Verify
        assert status is CheckStatus.QUEUED
        assert conclusion is CheckConclusion.NEUTRAL
        assert len(await runs.get_all_for_pull_request(pull_request)) == 3

    async def test_aggregates_without_runs(
        self, session: AsyncSession, pull_request: PullRequest
    ) -> None:
        """Test a commit without runs aggregates to NONE."""
        runs = CheckRunRepository(session)

        assert await runs.get_status_for_pull_request(pull_request) is CheckStatus.NONE
        assert await runs.get_conclusion_for_pull_request(pull_request) is CheckConclusion.NONE

    async def test_failed_runs_worst_first(
        self, session: AsyncSession, pull_request: PullRequest
    ) -> None:
        """Test only failing conclusions are returned, worst first then oldest first."""
        runs = CheckRunRepository(session)
        await runs.get_or_create_or_update(make_check_run(4000, conclusion="success"))
        await runs.get_or_create_or_update(
            make_check_run(4001, name="lint", conclusion="cancelled")
        )
        await runs.get_or_create_or_update(
            make_check_run(
                4002,
                name="late",
                conclusion="failure",
                completed_at=BASE_TIME + timedelta(minutes=1),
            )
        )
        await runs.get_or_create_or_update(
            make_check_run(4003, name="early", conclusion="failure")
        )

        failed = await runs.get_failed_for_pull_request(pull_request)

        assert [run.name for run in failed] == ["early", "late", "lint"]

    async def test_delete_unreferenced(
        self, session: AsyncSession, pull_request: PullRequest
    ) -> None:
        """Test runs on commits no pull request points at are pruned."""
        runs = CheckRunRepository(session)
        await runs.get_or_create_or_update(make_check_run(4000))
        await runs.get_or_create_or_update(make_check_run(4001, head_sha=OTHER_SHA))

        deleted = await runs.delete_unreferenced()

        assert deleted == 1
        assert await runs.get_by_internal_id(4000) is not None
        assert await runs.count_all() == 1

    async def test_delete_all_for_pull_request(
        self, session: AsyncSession, pull_request: PullRequest
    ) -> None:
        """Test every run on the head commit is removed."""
        runs = CheckRunRepository(session)
        await runs.get_or_create_or_update(make_check_run(4000))
        await runs.get_or_create_or_update(make_check_run(4001))

        assert await runs.delete_all_for_pull_request(pull_request) == 2
        assert await runs.get_all_for_pull_request(pull_request) == []


class TestCheckSuiteRepository:
    """Test CheckSuiteRepository."""

    async def test_suite_named_after_app(self, session: AsyncSession) -> None:
        """Test the suite takes the name of the app that owns it."""
        suite = await CheckSuiteRepository(session).get_or_create_or_update(make_check_suite())

        assert suite.name == "GitHub Actions"
        assert suite.conclusion is CheckConclusion.SUCCESS

    async def test_aggregates_and_pruning(
        self, session: AsyncSession, pull_request: PullRequest
    ) -> None:
        """
        Why: Suite aggregates drive the snapshot conclusion
        What: Tests a failed suite beats a successful one and unreferenced
              suites are pruned
        How: Stores suites on the head commit and on an orphan commit
        """
        # Setup
        suites = CheckSuiteRepository(session)
        await suites.get_or_create_or_update(make_check_suite(5000, conclusion="success"))
        await suites.get_or_create_or_update(make_check_suite(5001, conclusion="failure"))
        await suites.get_or_create_or_update(make_check_suite(5002, head_sha=OTHER_SHA))

        # Execute
        conclusion = await suites.get_conclusion_for_pull_request(pull_request)
        status = await suites.get_status_for_pull_request(pull_request)
        deleted = await suites.delete_unreferenced()

        # Verify
        assert conclusion is CheckConclusion.FAILURE
        assert status is CheckStatus.COMPLETED
        assert deleted == 1
        assert len(await suites.get_all_for_pull_request(pull_request)) == 2

    async def test_unchanged_suite_writes_nothing(
        self, session: AsyncSession, write_counter: WriteCounter
    ) -> None:
        """Test a suite with the same status and conclusion is not rewritten."""
        suites = CheckSuiteRepository(session)
        await suites.get_or_create_or_update(make_check_suite())
        write_counter.reset()

        await suites.get_or_create_or_update(make_check_suite())

        assert write_counter.count == 0


class TestCommitCombinedStatusRepository:
    """Test CommitCombinedStatusRepository."""

    async def test_no_statuses_maps_to_none(self, session: AsyncSession) -> None:
        """
        Why: GitHub reports "pending" for a commit that has no statuses at all
        What: Tests total_count 0 is stored as NONE rather than PENDING
        How: Stores a pending status with and without contexts
        """
        statuses = CommitCombinedStatusRepository(session)

        empty = await statuses.get_or_create_or_update(
            make_combined_status("a" * 40, "pending", total_count=0)
        )
        real = await statuses.get_or_create_or_update(
            make_combined_status("b" * 40, "pending", total_count=2)
        )

        assert empty.state is CommitState.NONE
        assert real.state is CommitState.PENDING

    async def test_state_for_pull_request(
        self, session: AsyncSession, pull_request: PullRequest
    ) -> None:
        """Test the head commit's state, UNKNOWN before it was ever fetched."""
        statuses = CommitCombinedStatusRepository(session)
        assert await statuses.get_state_for_pull_request(pull_request) is CommitState.UNKNOWN

        await statuses.get_or_create_or_update(make_combined_status(state="pending", total_count=1))
        await statuses.get_or_create_or_update(make_combined_status(state="failure", total_count=1))

        assert await statuses.get_state_for_pull_request(pull_request) is CommitState.FAILURE
        assert await statuses.count_all() == 1

    async def test_delete_unreferenced(
        self, session: AsyncSession, pull_request: PullRequest
    ) -> None:
        """Test statuses of orphan commits are pruned."""
        statuses = CommitCombinedStatusRepository(session)
        await statuses.get_or_create_or_update(make_combined_status())
        await statuses.get_or_create_or_update(make_combined_status(OTHER_SHA))

        assert await statuses.delete_unreferenced() == 1
        assert await statuses.get_by_head_sha(OTHER_SHA) is None


class TestPullRequestStatusRepository:
    """Test PullRequestStatusRepository snapshots."""

    async def test_build_from_failing_checks(
        self, session: AsyncSession, pull_request: PullRequest
    ) -> None:
        """
        Why: The snapshot is what notifications compare against
        What: Tests conclusion and status come from suites, state from the
              combined status and details from the first failing run
        How: Stores a failing suite, a failing run and a failure status
        """
        # Setup
        await CheckSuiteRepository(session).get_or_create_or_update(
            make_check_suite(conclusion="failure")
        )
        runs = CheckRunRepository(session)
        await runs.get_or_create_or_update(make_check_run(4000, conclusion="success"))
        await runs.get_or_create_or_update(
            make_check_run(4001, name="tests", conclusion="failure")
        )
        await CommitCombinedStatusRepository(session).get_or_create_or_update(
            make_combined_status(state="failure", total_count=1)
        )
        now = BASE_TIME + timedelta(hours=1)

        # Execute
        status = await PullRequestStatusRepository(session).build(pull_request, now)

        # Verify
        assert status.id is None
        assert status.pull_request_id == pull_request.id
        assert status.head_sha == pull_request.head_sha
        assert status.conclusion is CheckConclusion.FAILURE
        assert status.status is CheckStatus.COMPLETED
        assert status.state is CommitState.FAILURE
        assert status.details_url == "https://ci.example.com/runs/4001"
        assert status.result == "tests failure"
        assert status.time_occurred == BASE_TIME
        assert status.time_created == now
        assert status.combined_status is PullRequestCombinedStatus.FAILED

    async def test_build_without_checks(
        self, session: AsyncSession, pull_request: PullRequest
    ) -> None:
        """Test a pull request without any checks falls back to its own fields."""
        status = await PullRequestStatusRepository(session).build(pull_request, BASE_TIME)

        assert status.conclusion is CheckConclusion.NONE
        assert status.status is CheckStatus.NONE
        assert status.state is CommitState.UNKNOWN
        assert status.result == pull_request.title
        assert status.details_url == pull_request.html_url
        assert status.time_occurred == pull_request.time_updated

    async def test_keeps_two_newest_snapshots(
        self, session: AsyncSession, pull_request: PullRequest
    ) -> None:
        """
        Why: Only the latest snapshot is ever compared against
        What: Tests older snapshots are dropped as new ones arrive
        How: Adds three snapshots a minute apart
        """
        # Setup
        statuses = PullRequestStatusRepository(session)

        # Execute
        for minute in range(3):
            await statuses.add_for_pull_request(pull_request, BASE_TIME + timedelta(minutes=minute))

        # Verify
        assert await statuses.count_all() == 2
        latest = await statuses.get_latest(pull_request)
        assert latest is not None
        assert latest.time_created == BASE_TIME + timedelta(minutes=2)

    async def test_delete_unreferenced_after_force_push(
        self, session: AsyncSession, pull_request: PullRequest
    ) -> None:
        """Test snapshots of a replaced head commit are pruned."""
        statuses = PullRequestStatusRepository(session)
        await statuses.add_for_pull_request(pull_request, BASE_TIME)
        repository_id = pull_request.repository_id

        await PullRequestRepository(session).get_or_create_or_update(
            make_pull_request(head_sha=OTHER_SHA), repository_id, BASE_TIME
        )
        deleted = await statuses.delete_unreferenced()

        assert deleted == 1
        assert await statuses.get_latest(pull_request) is None
