"""GitHub API client exceptions."""

import enum
from typing import Any


class GitHubError(Exception):
    """Base exception for GitHub API errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_data: dict[str, Any] | None = None,
    ):
        """Initialize GitHub error.

        Args:
            message: Error message
            status_code: HTTP status code
            response_data: Response data from GitHub API
        """
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data or {}


class GitHubAuthenticationError(GitHubError):
    """Raised when the credentials are rejected (401)."""

    pass


class GitHubForbiddenError(GitHubError):
    """Raised when the account may not see the resource (403).

    Commonly a SAML-enforced organization the token is not authorized for.
    """

    pass


class GitHubRateLimitError(GitHubError):
    """Raised when rate limit is exceeded."""

    def __init__(
        self,
        message: str,
        reset_time: int | None = None,
        remaining: int = 0,
        limit: int = 0,
        status_code: int | None = 403,
    ):
        """Initialize rate limit error.

        Args:
            message: Error message
            reset_time: Unix timestamp when rate limit resets
            remaining: Remaining API calls
            limit: Total rate limit
            status_code: HTTP status code, if raised from a response
        """
        super().__init__(message, status_code)
        self.reset_time = reset_time
        self.remaining = remaining
        self.limit = limit


class GitHubNotFoundError(GitHubError):
    """Raised when resource is not found.

    GitHub also answers 404 for private repositories the caller cannot see.
    """

    pass


class GitHubValidationError(GitHubError):
    """Raised when request validation fails."""

    pass


class GitHubServerError(GitHubError):
    """Raised when GitHub server returns 5xx error."""

    pass


class GitHubConnectionError(GitHubError):
    """Raised when connection to GitHub fails."""

    pass


class GitHubTimeoutError(GitHubError):
    """Raised when request times out."""

    pass


class ErrorKind(enum.Enum):
    """Coarse classification of a failed remote call."""

    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    OTHER = "other"


def classify_error(error: BaseException) -> ErrorKind:
    """Map an exception raised by a remote call onto an ``ErrorKind``."""
    # Rate limiting is checked first; it can surface as a 403.
    if isinstance(error, GitHubRateLimitError):
        return ErrorKind.RATE_LIMITED
    if isinstance(error, GitHubForbiddenError):
        return ErrorKind.FORBIDDEN
    if isinstance(error, GitHubNotFoundError):
        return ErrorKind.NOT_FOUND
    return ErrorKind.OTHER
