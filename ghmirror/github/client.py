"""GitHub API client with authentication, rate limiting, and pagination."""

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote, urljoin

import aiohttp

from .auth import AuthProvider
from .exceptions import (
    GitHubAuthenticationError,
    GitHubConnectionError,
    GitHubError,
    GitHubForbiddenError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubServerError,
    GitHubTimeoutError,
    GitHubValidationError,
)
from .models import (
    RemoteCheckRun,
    RemoteCheckSuite,
    RemoteCombinedStatus,
    RemoteIssue,
    RemotePullRequest,
    RemoteRelease,
    RemoteRepository,
    RemoteReview,
    RemoteUser,
)
from .pagination import AsyncPaginator, PaginatedResponse
from .rate_limiting import CircuitBreaker, RateLimitManager

logger = logging.getLogger(__name__)


@dataclass
class GitHubClientConfig:
    """Configuration for GitHub client."""

    base_url: str = "https://api.github.com"
    timeout: int = 30
    max_retries: int = 3
    retry_initial_delay: float = 1.0
    retry_backoff_factor: float = 2.0
    rate_limit_buffer: int = 0
    user_agent: str = "ghmirror/0.1"


class GitHubClient:
    """Async GitHub API client bound to one set of credentials.

    Transport errors and 5xx responses are retried with exponential backoff.
    Every other error status is raised immediately as the matching
    ``GitHubError`` subclass.
    """

    def __init__(
        self,
        auth: AuthProvider,
        config: GitHubClientConfig | None = None,
    ) -> None:
        """Initialize GitHub client.

        Args:
            auth: Authentication provider
            config: Client configuration
        """
        self.auth = auth
        self.config = config or GitHubClientConfig()
        self.rate_limiter = RateLimitManager(buffer=self.config.rate_limit_buffer)
        self.circuit_breaker = CircuitBreaker()

        # HTTP session will be initialized on first use
        self._session: aiohttp.ClientSession | None = None
        self._session_lock = asyncio.Lock()

    async def __aenter__(self) -> "GitHubClient":
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def _ensure_session(self) -> None:
        """Ensure HTTP session is initialized."""
        if self._session is None or self._session.closed:
            async with self._session_lock:
                if self._session is None or self._session.closed:
                    self._session = aiohttp.ClientSession(
                        timeout=aiohttp.ClientTimeout(total=self.config.timeout),
                        headers={
                            "User-Agent": self.config.user_agent,
                            "Accept": "application/vnd.github+json",
                        },
                    )

    async def close(self) -> None:
        """Close HTTP session and cleanup resources."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    def _url(self, path: str) -> str:
        return urljoin(self.config.base_url.rstrip("/") + "/", path.lstrip("/"))

    async def _make_request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> tuple[Any, dict[str, str]]:
        """Make HTTP request with retry logic and error handling.

        Args:
            method: HTTP method
            url: Request URL
            params: Query parameters

        Returns:
            Decoded JSON body (None for 204) and the response headers

        Raises:
            GitHubError: Various GitHub API errors
        """
        correlation_id = str(uuid.uuid4())[:8]

        if not self.circuit_breaker.can_attempt_request():
            wait_time = self.circuit_breaker.get_wait_time()
            raise GitHubConnectionError(
                f"Circuit breaker open. Wait {wait_time:.1f}s before retry."
            )

        self.rate_limiter.check_rate_limit()

        request_headers: dict[str, str] = {}
        auth_token = await self.auth.get_token()
        if auth_token is not None:
            request_headers.update(auth_token.to_header())

        await self._ensure_session()
        if not self._session:
            raise GitHubConnectionError("Failed to initialize HTTP session")

        last_exception: GitHubError | None = None
        for attempt in range(self.config.max_retries + 1):
            try:
                start_time = time.time()
                logger.debug(
                    f"GitHub API request [{correlation_id}] {method} {url} "
                    f"(attempt {attempt + 1})"
                )

                async with self._session.request(
                    method, url, params=params, headers=request_headers
                ) as response:
                    self.rate_limiter.update_rate_limit(dict(response.headers))
                    logger.debug(
                        f"GitHub API response [{correlation_id}] "
                        f"{response.status} in {time.time() - start_time:.2f}s"
                    )

                    if response.status in (200, 201, 204):
                        self.circuit_breaker.record_success()
                        data = None if response.status == 204 else await response.json()
                        return data, dict(response.headers)

                    await self._handle_error_response(response, correlation_id)

            except GitHubServerError as e:
                last_exception = e

            except GitHubError:
                # Client errors are final; retrying cannot change the answer.
                raise

            except TimeoutError:
                last_exception = GitHubTimeoutError(f"Request timeout for {method} {url}")
                self.circuit_breaker.record_failure()

            except aiohttp.ClientError as e:
                last_exception = GitHubConnectionError(
                    f"Connection error for {method} {url}: {e}"
                )
                self.circuit_breaker.record_failure()

            if attempt < self.config.max_retries:
                backoff_time = self.config.retry_initial_delay * (
                    self.config.retry_backoff_factor**attempt
                )
                logger.warning(
                    f"Request [{correlation_id}] failed (attempt {attempt + 1}), "
                    f"retrying in {backoff_time:.1f}s: {last_exception}"
                )
                await asyncio.sleep(backoff_time)

        if last_exception:
            raise last_exception
        raise GitHubError(f"Request failed after {self.config.max_retries} retries")

    async def _handle_error_response(
        self, response: aiohttp.ClientResponse, correlation_id: str
    ) -> None:
        """Raise the exception matching an error response.

        Raises:
            GitHubError: Appropriate error based on status code
        """
        try:
            error_data = await response.json(content_type=None)
        except (json.JSONDecodeError, aiohttp.ContentTypeError):
            error_data = None
        if not isinstance(error_data, dict):
            error_data = {"message": await response.text()}

        error_message = error_data.get("message") or f"HTTP {response.status}"
        logger.warning(
            f"GitHub API error [{correlation_id}] {response.status}: {error_message}"
        )

        status = response.status
        if status in (403, 429) and (
            "rate limit" in error_message.lower()
            or response.headers.get("X-RateLimit-Remaining") == "0"
        ):
            reset_time = response.headers.get("X-RateLimit-Reset")
            raise GitHubRateLimitError(
                error_message,
                reset_time=int(reset_time) if reset_time else None,
                remaining=int(response.headers.get("X-RateLimit-Remaining", "0")),
                limit=int(response.headers.get("X-RateLimit-Limit", "0")),
                status_code=status,
            )
        if status == 401:
            raise GitHubAuthenticationError(error_message, status, error_data)
        if status == 403:
            raise GitHubForbiddenError(error_message, status, error_data)
        if status == 404:
            raise GitHubNotFoundError(error_message, status, error_data)
        if status == 422:
            raise GitHubValidationError(error_message, status, error_data)
        if 500 <= status < 600:
            self.circuit_breaker.record_failure()
            raise GitHubServerError(error_message, status, error_data)
        raise GitHubError(error_message, status, error_data)

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Make GET request to GitHub API and return the decoded body."""
        data, _ = await self._make_request("GET", self._url(path), params)
        return data

    async def _fetch_paginated(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        items_key: str | None = None,
    ) -> PaginatedResponse:
        """Fetch one page (used by AsyncPaginator)."""
        data, headers = await self._make_request("GET", url, params)
        return PaginatedResponse(data, headers, url, items_key)

    def paginate(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        per_page: int = 100,
        max_pages: int | None = None,
        items_key: str | None = None,
    ) -> AsyncPaginator:
        """Create async paginator for GitHub API endpoint.

        Args:
            path: API path
            params: Query parameters
            per_page: Items per page (max 100)
            max_pages: Maximum pages to fetch
            items_key: Member holding the items for wrapped responses

        Returns:
            AsyncPaginator for iterating through results
        """
        return AsyncPaginator(
            client=self,
            initial_url=self._url(path),
            params=params,
            per_page=per_page,
            max_pages=max_pages,
            items_key=items_key,
        )

    @staticmethod
    def _repo_path(owner: str, name: str) -> str:
        return f"/repos/{quote(owner, safe='')}/{quote(name, safe='')}"

    # Endpoints used by the sync engine

    async def get_authenticated_user(self) -> RemoteUser:
        """Get the account the credentials belong to."""
        return RemoteUser.model_validate(await self.get("/user"))

    async def get_repository(self, owner: str, name: str) -> RemoteRepository:
        """Get repository information."""
        return RemoteRepository.model_validate(await self.get(self._repo_path(owner, name)))

    async def list_pull_requests(
        self,
        owner: str,
        name: str,
        state: str = "open",
        sort: str = "updated",
        direction: str = "desc",
        per_page: int = 100,
        max_pages: int | None = None,
    ) -> list[RemotePullRequest]:
        """List pull requests for a repository.

        Args:
            owner: Repository owner
            name: Repository name
            state: PR state (open, closed, all)
            sort: Sort field (created, updated, popularity, long-running)
            direction: Sort direction (asc, desc)
            per_page: Items per page
            max_pages: Maximum pages to fetch, None for all

        Returns:
            Pull requests in the requested order
        """
        paginator = self.paginate(
            f"{self._repo_path(owner, name)}/pulls",
            params={"state": state, "sort": sort, "direction": direction},
            per_page=per_page,
            max_pages=max_pages,
        )
        return [RemotePullRequest.model_validate(item) async for item in paginator]

    async def search_issues(
        self,
        query: str,
        sort: str | None = None,
        order: str | None = None,
        per_page: int = 100,
        max_pages: int | None = None,
    ) -> list[RemoteIssue]:
        """Run an issue search; ``query`` uses GitHub search qualifiers."""
        params: dict[str, Any] = {"q": query}
        if sort:
            params["sort"] = sort
        if order:
            params["order"] = order

        paginator = self.paginate(
            "/search/issues",
            params=params,
            per_page=per_page,
            max_pages=max_pages,
            items_key="items",
        )
        return [RemoteIssue.model_validate(item) async for item in paginator]

    async def list_check_runs(self, owner: str, name: str, ref: str) -> list[RemoteCheckRun]:
        """List check runs for a commit."""
        paginator = self.paginate(
            f"{self._repo_path(owner, name)}/commits/{ref}/check-runs",
            items_key="check_runs",
        )
        return [RemoteCheckRun.model_validate(item) async for item in paginator]

    async def list_check_suites(
        self, owner: str, name: str, ref: str
    ) -> list[RemoteCheckSuite]:
        """List check suites for a commit."""
        paginator = self.paginate(
            f"{self._repo_path(owner, name)}/commits/{ref}/check-suites",
            items_key="check_suites",
        )
        return [RemoteCheckSuite.model_validate(item) async for item in paginator]

    async def get_combined_status(
        self, owner: str, name: str, ref: str
    ) -> RemoteCombinedStatus:
        """Get the combined commit status for a reference."""
        data = await self.get(f"{self._repo_path(owner, name)}/commits/{ref}/status")
        return RemoteCombinedStatus.model_validate(data)

    async def list_reviews(self, owner: str, name: str, number: int) -> list[RemoteReview]:
        """List reviews on a pull request."""
        paginator = self.paginate(f"{self._repo_path(owner, name)}/pulls/{number}/reviews")
        return [RemoteReview.model_validate(item) async for item in paginator]

    async def list_releases(
        self,
        owner: str,
        name: str,
        per_page: int = 100,
        max_pages: int | None = None,
    ) -> list[RemoteRelease]:
        """List releases for a repository, newest first."""
        paginator = self.paginate(
            f"{self._repo_path(owner, name)}/releases",
            per_page=per_page,
            max_pages=max_pages,
        )
        return [RemoteRelease.model_validate(item) async for item in paginator]
