"""Enums for cached data.

Integer values are persisted and double as a severity ordering: aggregate
queries take ``MIN()`` over them so the worst outstanding state wins.
Never reorder or renumber existing members.
"""

import enum
import logging
from typing import TypeVar

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=enum.IntEnum)


class CheckConclusion(enum.IntEnum):
    """Check run / check suite conclusion."""

    UNKNOWN = -1
    NONE = 0
    FAILURE = 1
    TIMED_OUT = 2
    CANCELLED = 3
    ACTION_REQUIRED = 4
    STALE = 5
    NEUTRAL = 6
    SUCCESS = 7
    SKIPPED = 8


class CheckStatus(enum.IntEnum):
    """Check run / check suite status."""

    UNKNOWN = -1
    NONE = 0
    QUEUED = 1
    IN_PROGRESS = 2
    COMPLETED = 3


class CommitState(enum.IntEnum):
    """Combined commit status state."""

    UNKNOWN = -1
    NONE = 0
    ERROR = 1
    FAILURE = 2
    PENDING = 3
    SUCCESS = 4


class NotificationType(enum.IntEnum):
    """Kind of notification record."""

    UNKNOWN = 0
    CHECK_RUN_FAILED = 1
    CHECK_RUN_SUCCEEDED = 2
    NEW_REVIEW = 3


class PullRequestCombinedStatus(enum.IntEnum):
    """Overall pull request state derived from a status snapshot."""

    UNKNOWN = -1
    PENDING = 0
    FAILED = 1
    SUCCESS = 2


def parse_enum(enum_class: type[E], raw: str | None) -> E:
    """Map a remote enum string onto a local enum by name.

    Missing values map to ``NONE`` (or ``UNKNOWN`` where the enum has no
    ``NONE`` member). Values the local model does not know are logged and
    degrade to ``UNKNOWN``; this never raises.
    """
    if raw is None or not str(raw).strip():
        # Members valued 0 are falsy, so test membership explicitly.
        fallback = "NONE" if "NONE" in enum_class.__members__ else "UNKNOWN"
        return enum_class.__members__[fallback]  # type: ignore[return-value]

    name = str(raw).strip().upper().replace("-", "_").replace(" ", "_")
    member = enum_class.__members__.get(name)
    if member is None:
        logger.error(f"Found unknown {enum_class.__name__} value: {raw}")
        return enum_class.__members__["UNKNOWN"]  # type: ignore[return-value]
    return member  # type: ignore[return-value]
