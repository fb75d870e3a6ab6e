"""Transaction scopes for data store operations."""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


class TransactionError(Exception):
    """Exception raised when a transaction handle is misused or fails."""

    pass


class DataStoreTransaction:
    """Explicit-commit transaction scope.

    Leaving the scope without calling ``commit()`` rolls everything back, so a
    forgotten commit can never leave half-applied changes behind.

    Usage:
        async with store.begin_transaction() as tx:
            await repo.get_or_create_or_update(remote)
            await tx.commit()
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self._committed = False
        self._rolled_back = False

    @property
    def is_active(self) -> bool:
        """True until the transaction has been committed or rolled back."""
        return not (self._committed or self._rolled_back)

    async def __aenter__(self) -> "DataStoreTransaction":
        """Enter transaction scope."""
        try:
            if not self.session.in_transaction():
                await self.session.begin()
            return self
        except Exception as e:
            logger.error(f"Failed to begin transaction: {e}")
            raise TransactionError(f"Failed to begin transaction: {e}") from e

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit transaction scope, rolling back anything not committed."""
        if exc_type is not None:
            if self.is_active:
                await self.rollback()
                logger.warning(
                    f"Transaction rolled back due to {exc_type.__name__}: {exc_val}"
                )
            return None

        if self.is_active:
            logger.warning("Transaction disposed without commit, rolling back")
            await self.rollback()

    async def commit(self) -> None:
        """Commit the transaction."""
        if self._rolled_back:
            raise TransactionError("Cannot commit after rollback")
        if self._committed:
            return

        try:
            await self.session.commit()
            self._committed = True
            logger.debug("Transaction committed successfully")
        except Exception as e:
            logger.error(f"Failed to commit transaction: {e}")
            await self.rollback()
            raise TransactionError(f"Failed to commit transaction: {e}") from e

    async def rollback(self) -> None:
        """Roll back the transaction."""
        if self._rolled_back:
            return

        try:
            await self.session.rollback()
            self._rolled_back = True
            logger.debug("Transaction rolled back successfully")
        except Exception as e:
            logger.error(f"Failed to rollback transaction: {e}")
            raise TransactionError(f"Failed to rollback transaction: {e}") from e
