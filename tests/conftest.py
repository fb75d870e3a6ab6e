"""
Test configuration and fixtures shared by unit and integration tests.

Provides a real SQLite data store on a temporary path, a statement counter
for write-cost assertions, and the in-memory remote fakes.
"""

from collections.abc import AsyncGenerator, Generator
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession

from ghmirror.database import DataStore, DataStoreConfig

from tests.fixtures.remote import FakeGitHubClient, FakeIdentityProvider

_WRITE_VERBS = ("INSERT", "UPDATE", "DELETE", "REPLACE")


class WriteCounter:
    """Counts data-modifying statements sent to the database."""

    def __init__(self) -> None:
        self.statements: list[str] = []

    def __call__(
        self,
        conn: Any,
        cursor: Any,
        statement: str,
        parameters: Any,
        context: Any,
        executemany: bool,
    ) -> None:
        verb = statement.lstrip().split(None, 1)[0].upper() if statement.strip() else ""
        if verb in _WRITE_VERBS:
            self.statements.append(statement)

    @property
    def count(self) -> int:
        return len(self.statements)

    def reset(self) -> None:
        self.statements.clear()


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Why: Settings classes read GHMIRROR_* variables from the environment
    What: Removes any GHMIRROR_* variables for the duration of a test
    How: Deletes matching keys through monkeypatch so they are restored afterwards
    """
    import os

    for key in list(os.environ):
        if key.startswith("GHMIRROR_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def store_config(tmp_path: Any) -> DataStoreConfig:
    """
    Why: Every integration test needs its own cache file
    What: Provides a DataStoreConfig pointing into pytest's tmp_path
    How: Builds the config directly instead of reading the environment
    """
    return DataStoreConfig(folder_path=tmp_path, file_name="test-cache.db")


@pytest_asyncio.fixture
async def store(store_config: DataStoreConfig) -> AsyncGenerator[DataStore, None]:
    """
    Why: Repository and orchestrator tests run against real SQLite
    What: Provides an opened store with the current schema
    How: Creates the file through DataStore.create and closes it afterwards
    """
    data_store = DataStore.from_config(store_config, "TestStore")
    await data_store.create()
    yield data_store
    await data_store.close()


@pytest.fixture
def session(store: DataStore) -> AsyncSession:
    """Session bound to the store's single connection."""
    return store.session


@pytest.fixture
def write_counter(store: DataStore) -> Generator[WriteCounter, None, None]:
    """
    Why: Idempotence is defined as "no writes on re-observation"
    What: Provides a counter of INSERT/UPDATE/DELETE statements
    How: Hooks before_cursor_execute on the store engine
    """
    counter = WriteCounter()
    engine = store.engine.sync_engine
    event.listen(engine, "before_cursor_execute", counter)
    yield counter
    event.remove(engine, "before_cursor_execute", counter)


@pytest.fixture
def github_client() -> FakeGitHubClient:
    """In-memory remote client logged in as ``octocat``."""
    return FakeGitHubClient(login="octocat")


@pytest.fixture
def identity_provider(github_client: FakeGitHubClient) -> FakeIdentityProvider:
    """Identity provider with a single logged-in developer."""
    return FakeIdentityProvider([github_client])
