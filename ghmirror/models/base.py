"""Base SQLAlchemy model and column types shared by all cache tables."""

import enum
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy import Integer
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_ONE_MS = timedelta(milliseconds=1)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime, truncated to stored precision."""
    now = datetime.now(UTC)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def to_epoch_millis(value: datetime | None) -> int:
    """Convert a datetime to integer epoch milliseconds; ``None`` becomes 0."""
    if value is None:
        return 0
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return (value - EPOCH) // _ONE_MS


def from_epoch_millis(value: int | None) -> datetime | None:
    """Convert stored epoch milliseconds back to a UTC datetime; 0 is unset."""
    if not value:
        return None
    return EPOCH + timedelta(milliseconds=value)


class EpochMillis(TypeDecorator[datetime]):
    """Datetime persisted as integer epoch milliseconds (0 means unset)."""

    impl = Integer
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Any) -> int:
        return to_epoch_millis(value)

    def process_result_value(self, value: int | None, dialect: Any) -> datetime | None:
        return from_epoch_millis(value)


class IntEnumColumn(TypeDecorator[enum.IntEnum]):
    """IntEnum persisted by its integer value."""

    impl = Integer
    cache_ok = True

    def __init__(self, enum_class: type[enum.IntEnum]):
        super().__init__()
        self.enum_class = enum_class

    def process_bind_param(self, value: Any, dialect: Any) -> int | None:
        if value is None:
            return None
        return int(value)

    def process_result_value(self, value: int | None, dialect: Any) -> Any:
        if value is None:
            return None
        return self.enum_class(value)


class BoolInt(TypeDecorator[bool]):
    """Boolean persisted as 0/1 in a NOT NULL integer column."""

    impl = Integer
    cache_ok = True

    def process_bind_param(self, value: bool | None, dialect: Any) -> int:
        return 1 if value else 0

    def process_result_value(self, value: int | None, dialect: Any) -> bool:
        return bool(value)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class BaseModel(Base):
    """Base model with the local surrogate key every cache table carries."""

    __abstract__ = True

    # Local surrogate key, distinct from the remote ``internal_id``.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    def __repr__(self) -> str:
        """Return string representation of the model."""
        return f"<{self.__class__.__name__}(id={self.id})>"

    def to_dict(self) -> dict[str, Any]:
        """Convert model instance to dictionary."""
        result = {}
        for attr in self.__mapper__.column_attrs:
            value = getattr(self, attr.key)
            if isinstance(value, datetime):
                value = value.isoformat()
            elif isinstance(value, enum.Enum):
                value = value.name
            result[attr.key] = value
        return result
