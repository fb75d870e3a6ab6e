"""Errors raised by the sync orchestrator."""

from ghmirror.database.exceptions import (
    DataStoreError,
    DataStoreInaccessibleError,
    SchemaMismatchError,
)


class DataManagerError(Exception):
    """Base exception for failed data manager operations."""

    pass


class RepositoryNotFoundError(DataManagerError):
    """No available account could read the repository."""

    def __init__(self, owner: str, name: str):
        super().__init__(
            f"The repository {owner}/{name} could not be accessed by any "
            "available developer accounts"
        )
        self.owner = owner
        self.name = name


__all__ = [
    "DataManagerError",
    "DataStoreError",
    "DataStoreInaccessibleError",
    "RepositoryNotFoundError",
    "SchemaMismatchError",
]
