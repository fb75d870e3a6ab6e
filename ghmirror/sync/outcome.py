"""Typed result of one credential attempt."""

from dataclasses import dataclass

from ghmirror.github.exceptions import ErrorKind, classify_error


@dataclass(frozen=True)
class AttemptOutcome:
    """Failure of a single candidate, or success when ``error`` is None."""

    kind: ErrorKind | None = None
    error: BaseException | None = None

    @classmethod
    def success(cls) -> "AttemptOutcome":
        return cls()

    @classmethod
    def failure(cls, error: BaseException) -> "AttemptOutcome":
        return cls(kind=classify_error(error), error=error)

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def try_next_candidate(self) -> bool:
        """Forbidden and not-found only mean this account cannot see the resource."""
        return self.kind in (ErrorKind.FORBIDDEN, ErrorKind.NOT_FOUND)
