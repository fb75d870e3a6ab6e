"""Data store exceptions."""


class DataStoreError(Exception):
    """Base exception for data store errors."""

    pass


class DataStoreInaccessibleError(DataStoreError):
    """Raised when the store was never opened or its connection is gone."""

    pass


class SchemaMismatchError(DataStoreError):
    """Stored schema version differs from the registry version.

    Only used for reporting; ``DataStore.create`` resolves a mismatch by
    rebuilding the cache file instead of raising.
    """

    def __init__(self, expected: int, found: int | None):
        super().__init__(f"Schema version mismatch: expected {expected}, found {found}")
        self.expected = expected
        self.found = found
