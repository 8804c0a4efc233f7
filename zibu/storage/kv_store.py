"""
Zibu - Key-Value Byte Stores
Async get/set byte stores the persistence gateway writes snapshots into.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from zibu.constants import DEFAULT_DB_FILENAME

from .models import Base, KeyValueModel

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path("~/.zibu").expanduser() / DEFAULT_DB_FILENAME


class KeyValueStore(ABC):
    """
    Base class for named byte record stores.

    Implementations may raise on I/O failure; callers that need
    fail-soft semantics (the persistence gateway) handle that themselves.
    """

    async def initialize(self) -> None:
        """Prepare the backing store. Default: nothing to do."""

    async def close(self) -> None:
        """Release the backing store. Default: nothing to do."""

    @abstractmethod
    async def get(self, key: str) -> bytes | None:
        """Return the bytes stored under key, or None if absent."""
        pass

    @abstractmethod
    async def set(self, key: str, value: bytes) -> None:
        """Store bytes under key, replacing any previous value."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove key if present."""
        pass


class MemoryKeyValueStore(KeyValueStore):
    """In-process store for tests and emulation."""

    def __init__(self) -> None:
        self._data: dict[str, bytes] = {}
        self.write_count = 0

    async def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    async def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)
        self.write_count += 1

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class SQLiteKeyValueStore(KeyValueStore):
    """
    Durable store backed by a single SQLite table.

    Usage:
        store = SQLiteKeyValueStore("~/.zibu/zibu.db")
        await store.initialize()
        await store.set("zibu.needs", b"...")
        await store.close()
    """

    def __init__(self, db_path: Path | str | None = None) -> None:
        """
        Args:
            db_path: SQLite file to use. Defaults to ~/.zibu/zibu.db
        """
        self._db_path = Path(db_path).expanduser() if db_path else DEFAULT_DB_PATH
        self._engine: AsyncEngine | None = None
        self._sessions: async_sessionmaker[AsyncSession] | None = None

    @property
    def db_path(self) -> Path:
        return self._db_path

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    async def initialize(self) -> None:
        """Open the engine and create the kv_store table if needed."""
        if self._engine is not None:
            return

        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._engine = create_async_engine(f"sqlite+aiosqlite:///{self._db_path}")
        self._sessions = async_sessionmaker(self._engine, expire_on_commit=False)

        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info(f"SQLite key-value store ready at {self._db_path}")

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._sessions = None

    def _session(self) -> AsyncSession:
        if self._sessions is None:
            raise RuntimeError("Store not initialized. Call initialize() first.")
        return self._sessions()

    async def get(self, key: str) -> bytes | None:
        async with self._session() as session:
            result = await session.execute(
                select(KeyValueModel.value).where(KeyValueModel.key == key)
            )
            return result.scalar_one_or_none()

    async def set(self, key: str, value: bytes) -> None:
        async with self._session() as session:
            await session.merge(KeyValueModel(key=key, value=value))
            await session.commit()

    async def delete(self, key: str) -> None:
        async with self._session() as session:
            await session.execute(delete(KeyValueModel).where(KeyValueModel.key == key))
            await session.commit()
