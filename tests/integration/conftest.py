"""Fixtures wiring use cases to a migrated SQLite database."""

from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

import brewledger.infrastructure.storage.sqlite.connection as conn_module
from brewledger.application.gateway import YearDatasetGateway
from brewledger.infrastructure.storage.sqlite.connection import close_database
from brewledger.infrastructure.storage.sqlite.migrations import initialize_database
from brewledger.infrastructure.storage.sqlite.year_store import SQLiteYearStore


@pytest.fixture
async def ledger_db(tmp_path: Path) -> AsyncGenerator[YearDatasetGateway, None]:
    """Gateway over a fresh database file."""
    db_path = tmp_path / "ledger.db"
    await initialize_database(db_path, create_backup_before=False)

    settings = MagicMock()
    settings.storage.db_path = db_path
    settings.storage.busy_timeout = 5000

    conn_module._database = None
    with patch.object(conn_module, "get_settings", return_value=settings):
        try:
            yield YearDatasetGateway(SQLiteYearStore())
        finally:
            await close_database()
