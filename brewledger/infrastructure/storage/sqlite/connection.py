"""
SQLite access for the year document store.

Each read or write opens its own aiosqlite connection, since a year is
loaded and written back as one document per command. Writers are serialised
in-process and take the database lock up front (``BEGIN IMMEDIATE``), so a
concurrent writer in another process waits ``busy_timeout`` instead of failing
mid-transaction.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from brewledger.config import get_logger, get_settings

logger = get_logger(__name__)


class LedgerDatabase:
    """Database file holding the year documents."""

    def __init__(self, db_path: Path, busy_timeout: int = 5000):
        self.db_path = db_path
        self.busy_timeout = busy_timeout
        self._write_lock = asyncio.Lock()
        self.writes = 0

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[aiosqlite.Connection]:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = await aiosqlite.connect(self.db_path)
        try:
            await conn.execute(f"PRAGMA busy_timeout={int(self.busy_timeout)}")
            conn.row_factory = aiosqlite.Row
            yield conn
        finally:
            await conn.close()

    @asynccontextmanager
    async def write(self) -> AsyncIterator[aiosqlite.Connection]:
        """Connection inside an immediate transaction; rolled back if the block raises."""
        async with self._write_lock:
            async with self.connect() as conn:
                await conn.execute("BEGIN IMMEDIATE")
                try:
                    yield conn
                except BaseException:
                    await conn.rollback()
                    raise
                await conn.commit()
                self.writes += 1

    async def close(self) -> None:
        # Waits for the write in flight, if any
        async with self._write_lock:
            logger.debug("ledger_database_closed", db_path=str(self.db_path), writes=self.writes)


_database: LedgerDatabase | None = None


def get_database() -> LedgerDatabase:
    """Database configured by ``StorageSettings``."""
    global _database
    if _database is None:
        storage = get_settings().storage
        _database = LedgerDatabase(storage.db_path, busy_timeout=storage.busy_timeout)
        logger.info("ledger_database_opened", db_path=str(storage.db_path))
    return _database


async def close_database() -> None:
    global _database
    if _database is not None:
        await _database.close()
        _database = None


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    async with get_database().connect() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncIterator[aiosqlite.Connection]:
    async with get_database().write() as conn:
        yield conn
