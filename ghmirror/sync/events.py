"""Update events announced after a completed sync operation."""

from dataclasses import dataclass
from enum import Enum


class UpdateKind(Enum):
    """Scope of a completed update."""

    REPOSITORY = "repository"
    DEVELOPER = "developer"
    QUERY = "query"


@dataclass(frozen=True)
class DataManagerUpdateEvent:
    """What changed in the cache.

    ``description`` names the affected repository (``owner/name``) or the
    operation; ``context`` lists the kinds of data that were refreshed, such
    as ``("Issues", "PullRequests")``.
    """

    kind: UpdateKind
    description: str
    context: tuple[str, ...] = ()

    def affects(self, data_kind: str) -> bool:
        """True when ``data_kind`` was refreshed by this update."""
        return data_kind in self.context
