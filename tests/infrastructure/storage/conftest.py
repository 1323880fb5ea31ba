"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

import brewledger.infrastructure.storage.sqlite.connection as conn_module
from brewledger.infrastructure.storage.sqlite.connection import close_database
from brewledger.infrastructure.storage.sqlite.migrations import initialize_database
from brewledger.infrastructure.storage.sqlite.year_store import SQLiteYearStore


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    return tmp_path / "ledger.db"


@pytest.fixture
def mock_settings(temp_db_path: Path) -> MagicMock:
    """Settings pointing the ledger database at the temporary database."""
    settings = MagicMock()
    settings.storage.db_path = temp_db_path
    settings.storage.busy_timeout = 5000
    return settings


@pytest.fixture
async def sqlite_store(
    temp_db_path: Path, mock_settings: MagicMock
) -> AsyncGenerator[SQLiteYearStore, None]:
    """Year store over a migrated temporary database."""
    await initialize_database(temp_db_path, create_backup_before=False)
    conn_module._database = None
    with patch.object(conn_module, "get_settings", return_value=mock_settings):
        try:
            yield SQLiteYearStore()
        finally:
            await close_database()
