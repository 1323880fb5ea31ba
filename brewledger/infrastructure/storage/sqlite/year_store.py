"""SQLite implementation of year dataset storage."""

import json
from datetime import datetime

import aiosqlite
from pydantic import ValidationError as PydanticValidationError

from brewledger.config import get_logger
from brewledger.core.entities.dataset import YearDataset
from brewledger.core.exceptions import DatabaseError, InvalidYearError, StorageError
from brewledger.core.interfaces.year_store import IYearStore
from brewledger.core.values import is_year_key
from brewledger.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteYearStore(IYearStore):
    """One JSON document per year in the ``year_datasets`` table."""

    async def get(self, year: str) -> YearDataset | None:
        try:
            async with get_connection() as conn:
                cursor = await conn.execute(
                    "SELECT document FROM year_datasets WHERE year = ?", (year,)
                )
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise DatabaseError("get", str(e)) from e
        if row is None:
            return None
        return self._row_to_dataset(year, row["document"])

    async def put(self, year: str, dataset: YearDataset) -> None:
        if not is_year_key(year):
            raise InvalidYearError(year)
        document = json.dumps(dataset.to_document(), ensure_ascii=False)
        try:
            async with get_transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO year_datasets (year, document, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(year) DO UPDATE SET
                        document = excluded.document,
                        updated_at = excluded.updated_at
                    """,
                    (year, document, datetime.now().isoformat()),
                )
        except aiosqlite.Error as e:
            raise DatabaseError("put", str(e)) from e
        logger.debug("year_dataset_stored", year=year, size=len(document))

    async def list_years(self) -> list[str]:
        try:
            async with get_connection() as conn:
                cursor = await conn.execute("SELECT year FROM year_datasets ORDER BY year")
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise DatabaseError("list_years", str(e)) from e
        return [row["year"] for row in rows]

    async def clear_all(self) -> None:
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute("DELETE FROM year_datasets")
                removed = cursor.rowcount
        except aiosqlite.Error as e:
            raise DatabaseError("clear_all", str(e)) from e
        logger.warning("year_store_cleared", removed=removed)

    async def replace_all(self, datasets: dict[str, YearDataset]) -> None:
        for year in datasets:
            if not is_year_key(year):
                raise InvalidYearError(year)
        now = datetime.now().isoformat()
        rows = [
            (year, json.dumps(dataset.to_document(), ensure_ascii=False), now)
            for year, dataset in datasets.items()
        ]
        try:
            async with get_transaction() as conn:
                await conn.execute("DELETE FROM year_datasets")
                await conn.executemany(
                    "INSERT INTO year_datasets (year, document, updated_at) VALUES (?, ?, ?)",
                    rows,
                )
        except aiosqlite.Error as e:
            raise DatabaseError("replace_all", str(e)) from e
        logger.info("year_store_replaced", years=sorted(datasets))

    def _row_to_dataset(self, year: str, document: str) -> YearDataset:
        try:
            return YearDataset.model_validate(json.loads(document))
        except (json.JSONDecodeError, PydanticValidationError) as e:
            logger.error("year_dataset_corrupt", year=year, error=str(e))
            raise StorageError(
                f"Stored dataset for year {year} is unreadable: {e}",
                code="CORRUPT_DATASET",
                details={"year": year},
            ) from e
