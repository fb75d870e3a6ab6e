"""Developer identity interface.

The sync engine does not manage accounts itself. An ``IdentityProvider``
tells it which developers are logged in and hands out an authenticated
client for each of them.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class DeveloperId:
    """A logged-in account and the client authenticated as it.

    ``client`` is normally a ``ghmirror.github.GitHubClient``; any object
    exposing the same coroutine methods works.
    """

    login: str
    url: str
    client: Any


class IdentityProvider(ABC):
    """Source of the accounts a sync pass may use."""

    @abstractmethod
    def get_logged_in_developer_ids(self) -> list[DeveloperId]:
        """All currently logged-in developers, in preference order."""
        pass

    @abstractmethod
    def get_public_developer_id(self) -> DeveloperId | None:
        """Anonymous identity used as the optional last-resort candidate."""
        pass


class StaticIdentityProvider(IdentityProvider):
    """In-memory provider over a fixed set of identities."""

    def __init__(
        self,
        developer_ids: Iterable[DeveloperId] = (),
        public_client: Any = None,
    ):
        self._developer_ids = list(developer_ids)
        self._public_client = public_client

    def get_logged_in_developer_ids(self) -> list[DeveloperId]:
        return list(self._developer_ids)

    def get_public_developer_id(self) -> DeveloperId | None:
        if self._public_client is None:
            return None
        return DeveloperId(login="", url="", client=self._public_client)

    def add(self, developer_id: DeveloperId) -> None:
        """Log in another developer."""
        self._developer_ids.append(developer_id)

    def remove(self, login: str) -> None:
        """Log out every identity with ``login`` (case-insensitive)."""
        self._developer_ids = [
            dev for dev in self._developer_ids if dev.login.lower() != login.lower()
        ]


__all__ = ["DeveloperId", "IdentityProvider", "StaticIdentityProvider"]
