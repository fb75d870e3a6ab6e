"""GitHub API client package."""

from .auth import (
    AnonymousAuth,
    AuthProvider,
    AuthToken,
    PersonalAccessTokenAuth,
)
from .client import GitHubClient, GitHubClientConfig
from .exceptions import (
    ErrorKind,
    GitHubAuthenticationError,
    GitHubConnectionError,
    GitHubError,
    GitHubForbiddenError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubServerError,
    GitHubTimeoutError,
    GitHubValidationError,
    classify_error,
)
from .models import (
    RemoteApp,
    RemoteCheckOutput,
    RemoteCheckRun,
    RemoteCheckSuite,
    RemoteCombinedStatus,
    RemoteIssue,
    RemoteLabel,
    RemotePullRequest,
    RemoteRef,
    RemoteRelease,
    RemoteRepository,
    RemoteReview,
    RemoteUser,
)
from .pagination import AsyncPaginator, LinkHeader, PaginatedResponse
from .rate_limiting import CircuitBreaker, RateLimitInfo, RateLimitManager

__all__ = [
    "AnonymousAuth",
    "AsyncPaginator",
    "AuthProvider",
    "AuthToken",
    "CircuitBreaker",
    "ErrorKind",
    "GitHubAuthenticationError",
    "GitHubClient",
    "GitHubClientConfig",
    "GitHubConnectionError",
    "GitHubError",
    "GitHubForbiddenError",
    "GitHubNotFoundError",
    "GitHubRateLimitError",
    "GitHubServerError",
    "GitHubTimeoutError",
    "GitHubValidationError",
    "LinkHeader",
    "PaginatedResponse",
    "PersonalAccessTokenAuth",
    "RateLimitInfo",
    "RateLimitManager",
    "RemoteApp",
    "RemoteCheckOutput",
    "RemoteCheckRun",
    "RemoteCheckSuite",
    "RemoteCombinedStatus",
    "RemoteIssue",
    "RemoteLabel",
    "RemotePullRequest",
    "RemoteRef",
    "RemoteRelease",
    "RemoteRepository",
    "RemoteReview",
    "RemoteUser",
    "classify_error",
]
