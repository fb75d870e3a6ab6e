"""Abstract base repository with common cache operations."""

import logging
from typing import Any

from sqlalchemy import Delete, Select, Update, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ghmirror.models.base import BaseModel

logger = logging.getLogger(__name__)


def join_ids(ids: Any) -> str:
    """Comma-join remote ids into the fingerprint stored on issues and PRs."""
    return ",".join(str(value) for value in ids)


class BaseRepository[ModelType: BaseModel]:
    """Abstract base repository bound to the store's single session.

    Repositories never commit; the sync orchestrator owns the transaction.
    """

    def __init__(self, session: AsyncSession, model_class: type[ModelType]):
        """Initialize repository with database session and model class."""
        self.session = session
        self.model_class = model_class

    async def add(self, entity: ModelType) -> ModelType:
        """Insert a transient entity and assign its local id."""
        self.session.add(entity)
        await self.session.flush()
        logger.debug(f"Inserted {self.model_class.__name__}, id = {entity.id}")
        return entity

    async def create(self, **kwargs: Any) -> ModelType:
        """Create a new entity."""
        return await self.add(self.model_class(**kwargs))

    async def get_by_id(self, entity_id: int) -> ModelType | None:
        """Get entity by local id."""
        return await self.session.get(self.model_class, entity_id)

    async def get_by_internal_id(self, internal_id: int) -> ModelType | None:
        """Get entity by remote id through its unique index."""
        column = getattr(self.model_class, "internal_id")
        query = select(self.model_class).where(column == internal_id)
        return await self._execute_single_query(query)

    async def count_all(self) -> int:
        """Count total number of entities."""
        query = select(func.count(self.model_class.id))
        return await self._execute_count_query(query)

    def _apply(self, entity: ModelType, source: ModelType) -> None:
        """Copy every mapped column except the local id from ``source``."""
        for attr in self.model_class.__mapper__.column_attrs:
            if attr.key != "id":
                setattr(entity, attr.key, getattr(source, attr.key))

    async def _execute_query(self, query: Select[tuple[ModelType]]) -> list[ModelType]:
        """Execute query and return results."""
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def _execute_single_query(
        self, query: Select[tuple[ModelType]]
    ) -> ModelType | None:
        """Execute query and return the first result, if any."""
        result = await self.session.execute(query)
        return result.scalars().first()

    async def _execute_scalar(self, query: Select[Any]) -> Any:
        """Execute query and return a single scalar (None when no row)."""
        result = await self.session.execute(query)
        return result.scalar()

    async def _execute_count_query(self, query: Select[tuple[int]]) -> int:
        """Execute count query and return result."""
        result = await self.session.execute(query)
        return result.scalar_one()

    async def _execute_write(self, statement: Delete | Update) -> int:
        """Execute a bulk DELETE or UPDATE and return the affected row count."""
        result = await self.session.execute(statement)
        rowcount: int = result.rowcount  # type: ignore[attr-defined]
        logger.debug(
            f"{self.model_class.__name__}: {rowcount} rows affected",
            extra={"table": self.model_class.__tablename__},
        )
        return rowcount
