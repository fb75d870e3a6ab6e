"""GitHub data manager: runs sync operations against the cache store.

Every public update operation is one unit of work. It runs inside a single
store transaction, prunes obsolete rows and stamps ``LastUpdated`` in that
same transaction, commits, and only then announces a
``DataManagerUpdateEvent``. A failure anywhere rolls the whole pass back.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any
from urllib.parse import urlparse

from sqlalchemy.ext.asyncio import AsyncSession

from ghmirror.config.models import SyncSettings
from ghmirror.database import DataStore, DataStoreConfig, DataStoreInaccessibleError
from ghmirror.github.exceptions import (
    GitHubError,
    GitHubForbiddenError,
    GitHubRateLimitError,
)
from ghmirror.github.models import RemotePullRequest
from ghmirror.identity import DeveloperId, IdentityProvider
from ghmirror.models import (
    CheckRun,
    Issue,
    Notification,
    NotificationType,
    PullRequest,
    PullRequestStatus,
    Release,
    Repository,
    User,
    utc_now,
)
from ghmirror.repositories import (
    CheckRunRepository,
    CheckSuiteRepository,
    CommitCombinedStatusRepository,
    IssueAssignRepository,
    IssueLabelRepository,
    IssueRepository,
    MetadataRepository,
    NotificationRepository,
    PullRequestAssignRepository,
    PullRequestLabelRepository,
    PullRequestRepository,
    PullRequestStatusRepository,
    ReleaseRepository,
    RepositoryRepository,
    ReviewRepository,
    SearchIssueRepository,
    SearchRepository,
    UserRepository,
    split_full_name,
)

from .events import DataManagerUpdateEvent, UpdateKind
from .exceptions import RepositoryNotFoundError
from .notifications import (
    should_create_check_failure_notification,
    should_create_check_succeeded_notification,
    should_create_review_notification,
)
from .options import RequestOptions
from .outcome import AttemptOutcome

logger = logging.getLogger(__name__)

LAST_UPDATED_KEY = "LastUpdated"

UpdateListener = Callable[[DataManagerUpdateEvent], Awaitable[None] | None]
RepositoryAction = Callable[
    ["CacheRepositories", Any, str, str, RequestOptions, datetime], Awaitable[None]
]


def repository_full_name_from_url(html_url: str | None) -> str | None:
    """Extract ``owner/name`` from an issue or pull request web URL."""
    if not html_url:
        return None
    parts = [part for part in urlparse(html_url).path.split("/") if part]
    if len(parts) < 2:
        return None
    return f"{parts[0]}/{parts[1]}"


def _validate_owner_and_name(owner: str, name: str) -> None:
    if not owner or not owner.strip():
        raise ValueError("Repository owner must not be empty")
    if not name or not name.strip():
        raise ValueError("Repository name must not be empty")


class CacheRepositories:
    """Every entity repository, bound to the store's single session."""

    def __init__(self, session: AsyncSession, settings: SyncSettings):
        self.session = session
        self.metadata = MetadataRepository(session)
        self.users = UserRepository(session)
        self.repositories = RepositoryRepository(session)
        self.issues = IssueRepository(session)
        self.pull_requests = PullRequestRepository(session)
        self.check_runs = CheckRunRepository(session)
        self.check_suites = CheckSuiteRepository(session)
        self.commit_statuses = CommitCombinedStatusRepository(session)
        self.statuses = PullRequestStatusRepository(session)
        self.notifications = NotificationRepository(session)
        self.searches = SearchRepository(session, settings.search_update_threshold)
        self.search_issues = SearchIssueRepository(session)
        self.reviews = ReviewRepository(session)
        self.releases = ReleaseRepository(session)
        self.issue_labels = IssueLabelRepository(session)
        self.issue_assignees = IssueAssignRepository(session)
        self.pull_request_labels = PullRequestLabelRepository(session)
        self.pull_request_assignees = PullRequestAssignRepository(session)


class GitHubDataManager:
    """Synchronizes GitHub data into the local cache and serves it back.

    The manager owns its ``DataStore``: build it with ``create()`` and
    release it with ``close()`` or ``async with``. Sync passes are
    serialized by an ``asyncio.Lock``.
    """

    def __init__(
        self,
        identity_provider: IdentityProvider,
        store: DataStore,
        settings: SyncSettings | None = None,
    ):
        """Initialize with an already opened store.

        Args:
            identity_provider: Source of logged-in developer accounts
            store: Opened cache store
            settings: Sync windows and thresholds
        """
        self.identity_provider = identity_provider
        self.store = store
        self.settings = settings or SyncSettings()
        self._lock = asyncio.Lock()
        self._listeners: list[UpdateListener] = []

    @classmethod
    async def create(
        cls,
        identity_provider: IdentityProvider,
        store: DataStore | None = None,
        settings: SyncSettings | None = None,
        store_config: DataStoreConfig | None = None,
        delete_existing: bool = False,
    ) -> "GitHubDataManager":
        """Open (creating or rebuilding as needed) the store and build a manager.

        Raises:
            DataStoreInaccessibleError: If the store file could not be opened
        """
        if store is None:
            store = DataStore.from_config(store_config or DataStoreConfig(), "GitHubDataStore")
        await store.create(delete_existing)
        if not store.is_connected:
            raise DataStoreInaccessibleError(f"Could not open data store at {store.path}")
        logger.info(f"GitHub data manager ready, store at {store.path}")
        return cls(identity_provider, store, settings)

    async def __aenter__(self) -> "GitHubDataManager":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Release the store. Safe to call more than once."""
        await self.store.close()

    def _repositories(self) -> CacheRepositories:
        if not self.store.is_connected:
            raise DataStoreInaccessibleError(f"{self.store.name} is not open")
        return CacheRepositories(self.store.session, self.settings)

    # Update listeners

    def add_update_listener(self, listener: UpdateListener) -> None:
        """Register a callback (plain or coroutine function) for update events."""
        self._listeners.append(listener)

    def remove_update_listener(self, listener: UpdateListener) -> None:
        """Unregister a callback; unknown callbacks are ignored."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def _notify_listeners(self, event: DataManagerUpdateEvent) -> None:
        logger.info(
            f"Data updated: {event.kind.name} {event.description}",
            extra={"context": list(event.context)},
        )
        for listener in list(self._listeners):
            try:
                result = listener(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"Update listener {listener!r} failed: {e}")

    # Repository-scoped operations

    async def update_all_data_for_repository(
        self, owner: str, name: str, options: RequestOptions | None = None
    ) -> None:
        """Refresh issues and pull requests of ``owner/name``."""
        await self._run_repository_operation(
            "UpdateAllDataForRepository",
            owner,
            name,
            options,
            self._update_all_data,
            ("Issues", "PullRequests"),
        )

    async def update_all_data_for_repository_by_full_name(
        self, full_name: str, options: RequestOptions | None = None
    ) -> None:
        owner, name = split_full_name(full_name)
        await self.update_all_data_for_repository(owner, name, options)

    async def update_pull_requests_for_repository(
        self, owner: str, name: str, options: RequestOptions | None = None
    ) -> None:
        """Refresh pull requests, their checks and status of ``owner/name``."""
        await self._run_repository_operation(
            "UpdatePullRequestsForRepository",
            owner,
            name,
            options,
            self._update_pull_requests,
            ("PullRequests",),
        )

    async def update_pull_requests_for_repository_by_full_name(
        self, full_name: str, options: RequestOptions | None = None
    ) -> None:
        owner, name = split_full_name(full_name)
        await self.update_pull_requests_for_repository(owner, name, options)

    async def update_issues_for_repository(
        self, owner: str, name: str, options: RequestOptions | None = None
    ) -> None:
        """Refresh issues of ``owner/name``."""
        await self._run_repository_operation(
            "UpdateIssuesForRepository",
            owner,
            name,
            options,
            self._update_issues,
            ("Issues",),
        )

    async def update_issues_for_repository_by_full_name(
        self, full_name: str, options: RequestOptions | None = None
    ) -> None:
        owner, name = split_full_name(full_name)
        await self.update_issues_for_repository(owner, name, options)

    async def update_releases_for_repository(
        self, owner: str, name: str, options: RequestOptions | None = None
    ) -> None:
        """Refresh releases of ``owner/name``."""
        await self._run_repository_operation(
            "UpdateReleasesForRepository",
            owner,
            name,
            options,
            self._update_releases,
            ("Releases",),
        )

    async def update_releases_for_repository_by_full_name(
        self, full_name: str, options: RequestOptions | None = None
    ) -> None:
        owner, name = split_full_name(full_name)
        await self.update_releases_for_repository(owner, name, options)

    def _default_options(self) -> RequestOptions:
        options = RequestOptions.default()
        options.use_public_client_as_fallback = self.settings.use_public_client_as_fallback
        return options

    def _candidates(self, options: RequestOptions) -> list[DeveloperId]:
        """Logged-in developers in order, then the public client if requested."""
        candidates = list(self.identity_provider.get_logged_in_developer_ids())
        if options.use_public_client_as_fallback:
            public = self.identity_provider.get_public_developer_id()
            if public is not None:
                candidates.append(public)
        return candidates

    async def _run_repository_operation(
        self,
        operation: str,
        owner: str,
        name: str,
        options: RequestOptions | None,
        action: RepositoryAction,
        context: tuple[str, ...],
    ) -> None:
        """Run ``action`` with the first candidate account that can see the repository.

        Raises:
            ValueError: If owner or name is empty
            RepositoryNotFoundError: If every candidate was forbidden or got not-found
            GitHubRateLimitError: As soon as any candidate hits the rate limit
        """
        _validate_owner_and_name(owner, name)
        options = options or self._default_options()

        async with self._lock:
            repos = self._repositories()
            now = utc_now()
            logger.debug(f"{operation} started for {owner}/{name}")

            try:
                async with self.store.begin_transaction() as tx:
                    succeeded = False
                    for candidate in self._candidates(options):
                        outcome = await self._attempt(
                            action, repos, candidate, owner, name, options, now
                        )
                        if outcome.error is None:
                            succeeded = True
                            break
                        if outcome.try_next_candidate:
                            logger.debug(
                                f"{candidate.login or 'public client'} cannot access "
                                f"{owner}/{name} ({outcome.kind.name}), trying next account"
                            )
                            continue
                        raise outcome.error

                    if not succeeded:
                        raise RepositoryNotFoundError(owner, name)

                    await self._prune_obsolete_data(repos, now)
                    await self._stamp_last_updated(repos, now)
                    await tx.commit()
            except Exception as e:
                logger.error(f"{operation} failed for {owner}/{name}: {e}")
                raise

        logger.info(f"{operation} completed for {owner}/{name}")
        await self._notify_listeners(
            DataManagerUpdateEvent(UpdateKind.REPOSITORY, f"{owner}/{name}", context)
        )

    async def _attempt(
        self,
        action: RepositoryAction,
        repos: CacheRepositories,
        candidate: DeveloperId,
        owner: str,
        name: str,
        options: RequestOptions,
        now: datetime,
    ) -> AttemptOutcome:
        try:
            await action(repos, candidate.client, owner, name, options, now)
        except GitHubError as e:
            return AttemptOutcome.failure(e)
        return AttemptOutcome.success()

    async def _update_all_data(
        self,
        repos: CacheRepositories,
        client: Any,
        owner: str,
        name: str,
        options: RequestOptions,
        now: datetime,
    ) -> None:
        await self._update_pull_requests(repos, client, owner, name, options, now)
        await self._update_issues(repos, client, owner, name, options, now)

    async def _update_pull_requests(
        self,
        repos: CacheRepositories,
        client: Any,
        owner: str,
        name: str,
        options: RequestOptions,
        now: datetime,
    ) -> None:
        remote_repository = await client.get_repository(owner, name)
        repository = await repos.repositories.get_or_create_or_update(remote_repository, now)
        owner, name = remote_repository.owner.login, remote_repository.name

        pulls = await client.list_pull_requests(
            owner,
            name,
            state=options.pull_request_state,
            sort=options.pull_request_sort,
            direction=options.pull_request_direction,
            per_page=options.page_size,
            max_pages=options.max_pages,
        )
        for remote_pull_request in pulls:
            await self._refresh_pull_request(
                repos, client, owner, name, repository, remote_pull_request, now
            )

        await repos.pull_requests.delete_last_observed_before(
            repository.id, now - self.settings.last_observed_delete_span
        )

    async def _update_issues(
        self,
        repos: CacheRepositories,
        client: Any,
        owner: str,
        name: str,
        options: RequestOptions,
        now: datetime,
    ) -> None:
        remote_repository = await client.get_repository(owner, name)
        repository = await repos.repositories.get_or_create_or_update(remote_repository, now)

        query = options.issue_query(remote_repository.full_name)
        results = await client.search_issues(
            query,
            sort=options.issue_sort,
            order=options.issue_order,
            per_page=options.page_size,
            max_pages=options.max_pages,
        )

        search = None
        if options.search_term:
            search = await repos.searches.get_or_create(options.search_term, repository.id, now)

        observed: list[int] = []
        for remote_issue in results:
            if remote_issue.is_pull_request:
                continue
            issue = await repos.issues.get_or_create_or_update(remote_issue, repository.id, now)
            observed.append(issue.id)
            if search is not None:
                await repos.search_issues.add_issue_to_search(issue, search, now)

        await repos.issues.mark_observed(observed, now)

        if search is not None:
            await repos.search_issues.delete_before(
                search, now - self.settings.search_issue_refresh_window
            )

        await repos.issues.delete_last_observed_before(
            repository.id, now - self.settings.last_observed_delete_span
        )

    async def _update_releases(
        self,
        repos: CacheRepositories,
        client: Any,
        owner: str,
        name: str,
        options: RequestOptions,
        now: datetime,
    ) -> None:
        remote_repository = await client.get_repository(owner, name)
        repository = await repos.repositories.get_or_create_or_update(remote_repository, now)

        releases = await client.list_releases(
            remote_repository.owner.login,
            remote_repository.name,
            per_page=options.page_size,
            max_pages=options.max_pages,
        )
        for remote_release in releases:
            await repos.releases.get_or_create_or_update(remote_release, repository.id, now)

        await repos.releases.delete_last_observed_before(
            repository.id, now - self.settings.last_observed_delete_span
        )

    # Pull request refresh pipeline

    async def _refresh_pull_request(
        self,
        repos: CacheRepositories,
        client: Any,
        owner: str,
        name: str,
        repository: Repository,
        remote_pull_request: RemotePullRequest,
        now: datetime,
    ) -> PullRequest:
        pull_request = await repos.pull_requests.get_or_create_or_update(
            remote_pull_request, repository.id, now
        )
        if pull_request.head_sha:
            await self._refresh_check_runs(repos, client, owner, name, pull_request)
            await self._refresh_check_suites(repos, client, owner, name, pull_request)
            combined = await client.get_combined_status(owner, name, pull_request.head_sha)
            await repos.commit_statuses.get_or_create_or_update(combined)
        await self._create_pull_request_status(repos, pull_request, now)
        return pull_request

    async def _refresh_check_runs(
        self,
        repos: CacheRepositories,
        client: Any,
        owner: str,
        name: str,
        pull_request: PullRequest,
    ) -> None:
        runs = await client.list_check_runs(owner, name, pull_request.head_sha)
        await repos.check_runs.delete_all_for_pull_request(pull_request)
        for remote_run in runs:
            await repos.check_runs.get_or_create_or_update(remote_run)

    async def _refresh_check_suites(
        self,
        repos: CacheRepositories,
        client: Any,
        owner: str,
        name: str,
        pull_request: PullRequest,
    ) -> None:
        """Replace the head commit's suites; a failed listing keeps the old rows."""
        try:
            suites = await client.list_check_suites(owner, name, pull_request.head_sha)
        except GitHubRateLimitError:
            raise
        except GitHubError as e:
            logger.error(
                f"Failed fetching check suites for {owner}/{name}#{pull_request.number}: {e}"
            )
            return

        ignored = set(self.settings.ignored_check_suite_app_ids)
        await repos.check_suites.delete_all_for_pull_request(pull_request)
        for remote_suite in suites:
            if remote_suite.app is not None and remote_suite.app.id in ignored:
                continue
            await repos.check_suites.get_or_create_or_update(remote_suite)

    async def _create_pull_request_status(
        self, repos: CacheRepositories, pull_request: PullRequest, now: datetime
    ) -> PullRequestStatus:
        previous = await repos.statuses.get_latest(pull_request)
        current = await repos.statuses.add_for_pull_request(pull_request, now)
        stale_after = self.settings.pull_request_stale_time

        if should_create_check_failure_notification(
            current, previous, pull_request.time_updated, now, stale_after
        ):
            await repos.notifications.create_for_status(
                current, pull_request, NotificationType.CHECK_RUN_FAILED, now
            )
        if should_create_check_succeeded_notification(
            current, previous, pull_request.time_updated, now, stale_after
        ):
            await repos.notifications.create_for_status(
                current, pull_request, NotificationType.CHECK_RUN_SUCCEEDED, now
            )
        return current

    # Developer-scoped operations

    async def update_pull_requests_for_logged_in_developer_ids(self) -> None:
        """Refresh the open pull requests authored by every logged-in developer."""
        await self._run_developer_operation(
            "UpdatePullRequestsForLoggedInDeveloperIds",
            self._update_pull_requests_for_developer,
            ("PullRequests",),
        )

    async def update_pull_request_reviews_for_logged_in_developer_ids(self) -> None:
        """Refresh reviews on the logged-in developers' open pull requests."""
        await self._run_developer_operation(
            "UpdatePullRequestReviewsForLoggedInDeveloperIds",
            self._update_reviews_for_developer,
            ("Reviews",),
        )

    async def _run_developer_operation(
        self,
        operation: str,
        action: Callable[[CacheRepositories, DeveloperId, datetime], Awaitable[None]],
        context: tuple[str, ...],
    ) -> None:
        async with self._lock:
            repos = self._repositories()
            now = utc_now()
            developers = self.identity_provider.get_logged_in_developer_ids()

            try:
                async with self.store.begin_transaction() as tx:
                    for developer in developers:
                        await action(repos, developer, now)
                    await self._prune_obsolete_data(repos, now)
                    await self._stamp_last_updated(repos, now)
                    await tx.commit()
            except Exception as e:
                logger.error(f"{operation} failed: {e}")
                raise

        description = ", ".join(developer.login for developer in developers)
        logger.info(f"{operation} completed for {len(developers)} developer(s)")
        await self._notify_listeners(
            DataManagerUpdateEvent(UpdateKind.DEVELOPER, description, context)
        )

    async def _update_pull_requests_for_developer(
        self, repos: CacheRepositories, developer: DeveloperId, now: datetime
    ) -> None:
        client = developer.client
        results = await client.search_issues(f"author:{developer.login} is:open is:pr")

        full_names: list[str] = []
        for result in results:
            full_name = repository_full_name_from_url(result.html_url)
            if full_name and full_name not in full_names:
                full_names.append(full_name)

        for full_name in full_names:
            owner, name = split_full_name(full_name)
            try:
                remote_repository = await client.get_repository(owner, name)
                repository = await repos.repositories.get_or_create_or_update(
                    remote_repository, now
                )
                pulls = await client.list_pull_requests(owner, name, state="open")
                for remote_pull_request in pulls:
                    if remote_pull_request.user.login.lower() != developer.login.lower():
                        continue
                    await self._refresh_pull_request(
                        repos, client, owner, name, repository, remote_pull_request, now
                    )
            except GitHubForbiddenError as e:
                # Typically an organization enforcing SAML single sign-on.
                logger.warning(
                    f"{developer.login} is forbidden from {full_name}, skipping: {e}"
                )

        await repos.pull_requests.delete_all_by_author_login_and_last_observed_before(
            developer.login, now - self.settings.last_observed_delete_span
        )

    async def _update_reviews_for_developer(
        self, repos: CacheRepositories, developer: DeveloperId, now: datetime
    ) -> None:
        user = await repos.users.get_by_login(developer.login)
        if user is None:
            return

        for pull_request in await repos.pull_requests.get_all_for_user(user.id):
            if not pull_request.is_open:
                continue
            repository = await repos.repositories.get_by_id(pull_request.repository_id)
            if repository is None:
                continue
            owner, name = split_full_name(await repos.repositories.get_full_name(repository))

            try:
                remote_reviews = await developer.client.list_reviews(
                    owner, name, pull_request.number
                )
            except GitHubForbiddenError as e:
                logger.warning(
                    f"{developer.login} is forbidden from reviews of {owner}/{name}: {e}"
                )
                continue

            for remote_review in remote_reviews:
                if remote_review.user is None:
                    continue
                is_new = await repos.reviews.get_by_internal_id(remote_review.id) is None
                review = await repos.reviews.get_or_create_or_update(
                    remote_review, pull_request.id, now
                )
                if should_create_review_notification(review, pull_request.author_id, is_new):
                    await repos.notifications.create_for_review(
                        review, pull_request, NotificationType.NEW_REVIEW, now
                    )

    # Pruning

    async def _prune_obsolete_data(self, repos: CacheRepositories, now: datetime) -> None:
        """Remove rows nothing refers to any more, and expired rows."""
        await repos.check_runs.delete_unreferenced()
        await repos.check_suites.delete_unreferenced()
        await repos.commit_statuses.delete_unreferenced()
        await repos.statuses.delete_unreferenced()
        await repos.notifications.delete_before(now - self.settings.notification_retention)
        await repos.searches.delete_before(now - self.settings.search_retention)
        await repos.search_issues.delete_unreferenced()
        await repos.reviews.delete_unreferenced()
        await repos.issue_labels.delete_unreferenced(Issue)
        await repos.issue_assignees.delete_unreferenced(Issue)
        await repos.pull_request_labels.delete_unreferenced(PullRequest)
        await repos.pull_request_assignees.delete_unreferenced(PullRequest)

    async def _stamp_last_updated(self, repos: CacheRepositories, now: datetime) -> None:
        await repos.metadata.add_or_update(LAST_UPDATED_KEY, now.isoformat())

    # Query accessors

    async def _read[T](self, query: Callable[[CacheRepositories], Awaitable[T]]) -> T:
        """Run a read between sync passes and end its implicit transaction."""
        async with self._lock:
            repos = self._repositories()
            result = await query(repos)
            await repos.session.commit()
            return result

    async def get_last_updated(self) -> datetime:
        """Time of the last successful sync pass; ``datetime.min`` (UTC) if never."""
        value = await self._read(lambda repos: repos.metadata.get(LAST_UPDATED_KEY))
        if not value:
            return datetime.min.replace(tzinfo=UTC)
        return datetime.fromisoformat(value)

    async def get_repositories(self) -> list[Repository]:
        return await self._read(lambda repos: repos.repositories.get_all())

    async def get_repository(self, owner: str, name: str) -> Repository | None:
        return await self._read(
            lambda repos: repos.repositories.get_by_owner_and_name(owner, name)
        )

    async def get_repository_by_full_name(self, full_name: str) -> Repository | None:
        owner, name = split_full_name(full_name)
        return await self.get_repository(owner, name)

    async def get_developer_users(self) -> list[User]:
        """Cached users matching the currently logged-in developers."""
        logins = [dev.login for dev in self.identity_provider.get_logged_in_developer_ids()]
        return await self._read(lambda repos: repos.users.get_by_logins(logins))

    async def get_notifications(
        self, since: datetime | None = None, include_toasted: bool = False
    ) -> list[Notification]:
        return await self._read(
            lambda repos: repos.notifications.get(since, include_toasted)
        )

    async def get_pull_requests_for_repository(
        self, repository: Repository
    ) -> list[PullRequest]:
        return await self._read(
            lambda repos: repos.pull_requests.get_all_for_repository(repository.id)
        )

    async def get_issues_for_repository(self, repository: Repository) -> list[Issue]:
        return await self._read(lambda repos: repos.issues.get_all_for_repository(repository.id))

    async def get_pull_request_status(
        self, pull_request: PullRequest
    ) -> PullRequestStatus | None:
        """Latest status snapshot of a pull request."""
        return await self._read(lambda repos: repos.statuses.get_latest(pull_request))

    async def get_check_runs_for_pull_request(self, pull_request: PullRequest) -> list[CheckRun]:
        return await self._read(
            lambda repos: repos.check_runs.get_all_for_pull_request(pull_request)
        )

    async def get_releases_for_repository(self, repository: Repository) -> list[Release]:
        return await self._read(
            lambda repos: repos.releases.get_all_for_repository(repository.id)
        )

    async def mark_notification_toasted(self, notification: Notification) -> None:
        """Record that the UI has shown ``notification``."""
        async with self._lock:
            repos = self._repositories()
            async with self.store.begin_transaction() as tx:
                await repos.notifications.set_toasted(notification)
                await tx.commit()
