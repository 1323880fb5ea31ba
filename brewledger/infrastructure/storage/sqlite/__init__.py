"""SQLite storage implementations."""

from brewledger.infrastructure.storage.sqlite.connection import (
    LedgerDatabase,
    close_database,
    get_connection,
    get_database,
    get_transaction,
)
from brewledger.infrastructure.storage.sqlite.year_store import SQLiteYearStore

# Singleton instances
_year_store: SQLiteYearStore | None = None


async def get_year_store() -> SQLiteYearStore:
    """Get singleton year store instance."""
    global _year_store
    if _year_store is None:
        _year_store = SQLiteYearStore()
    return _year_store


__all__ = [
    # Connection
    "LedgerDatabase",
    "get_database",
    "close_database",
    "get_connection",
    "get_transaction",
    # Stores
    "SQLiteYearStore",
    "get_year_store",
]
