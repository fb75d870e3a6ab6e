"""Single-connection SQLite data store.

Owns the cache database file: opening the connection, validating or
rebuilding the schema, and handing out explicit transaction scopes. The
store is a cache, not a system of record, so an incompatible schema is
resolved by deleting the file and recreating it.
"""

import logging
import re
from pathlib import Path
from typing import Any

from sqlalchemy import Result, event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from .config import DataStoreConfig
from .exceptions import DataStoreInaccessibleError, SchemaMismatchError
from .schema import GITHUB_SCHEMA, DataStoreSchema
from .transactions import DataStoreTransaction

logger = logging.getLogger(__name__)

_PRAGMA_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class DataStore:
    """File-backed store holding exactly one database connection.

    All repository operations share the single ``AsyncSession`` exposed by
    ``session``. Sync passes must be serialized by the caller; the store does
    not provide its own mutual exclusion.
    """

    def __init__(
        self,
        name: str,
        path: str | Path,
        schema: DataStoreSchema = GITHUB_SCHEMA,
        config: DataStoreConfig | None = None,
    ):
        self.name = name
        self.path = Path(path)
        self.schema = schema
        self.config = config or DataStoreConfig()
        self._engine: AsyncEngine | None = None
        self._session: AsyncSession | None = None

    @classmethod
    def from_config(
        cls, config: DataStoreConfig, name: str = "DataStore"
    ) -> "DataStore":
        """Build a store for the file described by ``config``."""
        return cls(name, config.path, config=config)

    def __repr__(self) -> str:
        return f"<DataStore(name={self.name}, path={self.path})>"

    @property
    def is_connected(self) -> bool:
        """True when the connection is open."""
        return self._session is not None

    @property
    def engine(self) -> AsyncEngine:
        """Underlying engine; raises if the store is not open."""
        if self._engine is None:
            raise DataStoreInaccessibleError(f"{self.name} is not open")
        return self._engine

    @property
    def session(self) -> AsyncSession:
        """Session bound to the single connection; raises if not open."""
        if self._session is None:
            raise DataStoreInaccessibleError(f"{self.name} is not open")
        return self._session

    async def __aenter__(self) -> "DataStore":
        await self.open()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def open(self) -> None:
        """Open the connection. Calling it on an open store is a no-op."""
        if self._session is not None:
            return

        self._engine = self._create_engine()
        session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,  # Keep entities usable after commit
        )
        self._session = session_factory()
        logger.debug("Opened data store", extra={"store": self.name, "path": str(self.path)})

    def _create_engine(self) -> AsyncEngine:
        """Create an engine pinned to a single SQLite connection."""
        engine = create_async_engine(
            self.config.get_sqlalchemy_url(self.path),
            poolclass=StaticPool,
            echo=self.config.echo_sql,
        )
        self._register_connection_events(engine)
        return engine

    def _register_connection_events(self, engine: AsyncEngine) -> None:
        """Register SQLAlchemy events for transaction control and monitoring."""

        @event.listens_for(engine.sync_engine, "connect")
        def on_connect(dbapi_connection: Any, connection_record: Any) -> None:
            """Take over transaction control and apply connection pragmas."""
            # The driver would otherwise skip BEGIN for DDL statements.
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA temp_store = MEMORY")
            cursor.close()
            logger.debug("New data store connection established")

        @event.listens_for(engine.sync_engine, "begin")
        def on_begin(conn: Any) -> None:
            """Emit an explicit BEGIN for every transaction."""
            conn.exec_driver_sql("BEGIN")

        @event.listens_for(engine.sync_engine, "invalidate")
        def on_invalidate(
            dbapi_connection: Any, connection_record: Any, exception: Exception | None
        ) -> None:
            """Handle connection invalidation."""
            logger.warning(
                "Data store connection invalidated",
                extra={"error": str(exception) if exception else None},
            )

    async def create(self, delete_existing: bool = False) -> bool:
        """Open the store, rebuilding the schema when needed.

        Args:
            delete_existing: Discard any existing cache file unconditionally

        Returns:
            True if the schema was (re)created, False if an existing valid
            file was reused or a stale file could not be removed.
        """
        recreate = delete_existing or not self.path.exists()

        if not recreate:
            try:
                await self.open()
                found = await self.get_pragma("user_version")
                await self.session.commit()
                if found != self.schema.version:
                    mismatch = SchemaMismatchError(self.schema.version, found)
                    logger.info(f"{mismatch}; rebuilding {self.path}")
                    recreate = True
            except SQLAlchemyError as e:
                logger.error(
                    f"Failed reading schema version from {self.path}, rebuilding",
                    extra={"error": str(e)},
                )
                recreate = True

            if not recreate:
                logger.debug(
                    "Reusing existing data store",
                    extra={"path": str(self.path), "version": self.schema.version},
                )
                return False

        await self.close()
        if self.path.exists():
            try:
                self.path.unlink()
            except OSError as e:
                # Usually a sharing violation or access denied; the caller
                # sees an unconnected store and reports it as inaccessible.
                logger.critical(
                    f"Failed deleting stale data store file {self.path}",
                    extra={"error": str(e)},
                )
                return False

        self.path.parent.mkdir(parents=True, exist_ok=True)
        await self.open()
        await self._create_schema()
        logger.info(
            "Created data store schema",
            extra={"path": str(self.path), "version": self.schema.version},
        )
        return True

    async def _create_schema(self) -> None:
        """Run all DDL and stamp the version inside one transaction."""
        session = self.session
        try:
            await session.execute(text('PRAGMA encoding = "UTF-8"'))
            for statement in self.schema.statements():
                await session.execute(text(statement))
            # PRAGMA values cannot be bound parameters.
            await session.execute(text(f"PRAGMA user_version = {int(self.schema.version)}"))
            await session.commit()
        except Exception:
            await session.rollback()
            raise

    async def get_pragma(self, name: str) -> Any:
        """Read a single PRAGMA value."""
        if not _PRAGMA_NAME.match(name):
            raise ValueError(f"Invalid pragma name: {name!r}")
        result = await self.session.execute(text(f"PRAGMA {name}"))
        return result.scalar()

    async def execute(self, sql: str, params: dict[str, Any] | None = None) -> Result[Any]:
        """Execute a raw SQL statement on the store connection."""
        logger.debug("Executing raw SQL", extra={"sql": sql, "params": params})
        return await self.session.execute(text(sql), params or {})

    def begin_transaction(self) -> DataStoreTransaction:
        """Return an explicit-commit transaction scope."""
        return DataStoreTransaction(self.session)

    async def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        if self._session is not None:
            await self._session.close()
            self._session = None
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            logger.debug("Data store engine disposed", extra={"store": self.name})
