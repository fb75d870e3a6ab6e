"""Data store infrastructure module.

Provides the cache file configuration, the versioned schema registry, the
single-connection store and its explicit transaction scopes.
"""

from .config import DataStoreConfig
from .exceptions import (
    DataStoreError,
    DataStoreInaccessibleError,
    SchemaMismatchError,
)
from .schema import GITHUB_SCHEMA, SCHEMA_VERSION, DataStoreSchema
from .store import DataStore
from .transactions import DataStoreTransaction, TransactionError

__all__ = [
    "GITHUB_SCHEMA",
    "SCHEMA_VERSION",
    "DataStore",
    "DataStoreConfig",
    "DataStoreError",
    "DataStoreInaccessibleError",
    "DataStoreSchema",
    "DataStoreTransaction",
    "SchemaMismatchError",
    "TransactionError",
]
