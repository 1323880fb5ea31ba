"""
Per-year session over the year store.

Every mutation reads the whole year, changes it in memory and writes the
whole document back once. ``edit`` serialises these read-modify-write cycles
per year inside the process and writes nothing when the block raises.
"""

import asyncio
import inspect
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime

from brewledger.config import get_logger
from brewledger.core.entities.dataset import YearDataset
from brewledger.core.exceptions import YearNotFoundError
from brewledger.core.interfaces.year_store import IYearStore

logger = get_logger(__name__)

ALL_YEARS = "*"


@dataclass(frozen=True)
class DatasetSaved:
    """Emitted after a successful write; ``year`` is ``*`` for whole-store writes."""

    year: str
    operation: str
    saved_at: datetime = field(default_factory=datetime.now)


SaveListener = Callable[[DatasetSaved], Awaitable[None] | None]


class YearDatasetGateway:
    """Read-modify-write access to year datasets with save notifications."""

    def __init__(self, store: IYearStore):
        self._store = store
        self._locks: dict[str, asyncio.Lock] = {}
        self._listeners: list[SaveListener] = []

    @property
    def store(self) -> IYearStore:
        return self._store

    def _lock_for(self, year: str) -> asyncio.Lock:
        lock = self._locks.get(year)
        if lock is None:
            lock = self._locks[year] = asyncio.Lock()
        return lock

    def subscribe(self, listener: SaveListener) -> Callable[[], None]:
        """Register a listener for saves; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def _notify(self, event: DatasetSaved) -> None:
        for listener in list(self._listeners):
            try:
                result = listener(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                # The write already happened; a failing listener must not undo it
                logger.error(
                    "save_listener_failed",
                    year=event.year,
                    operation=event.operation,
                    error=str(e),
                )

    async def list_years(self) -> list[str]:
        return await self._store.list_years()

    async def exists(self, year: str) -> bool:
        return await self._store.get(year) is not None

    async def load(self, year: str) -> YearDataset:
        """Detached copy of a year; changes to it are never persisted."""
        dataset = await self._store.get(year)
        if dataset is None:
            raise YearNotFoundError(year)
        return dataset.model_copy(deep=True)

    @asynccontextmanager
    async def edit(self, year: str, operation: str = "edit") -> AsyncIterator[YearDataset]:
        """
        Mutable copy of a year, written back when the block exits cleanly.

        Usage:
            async with gateway.edit("2024") as data:
                data.movements.append(movement)
        """
        async with self._lock_for(year):
            dataset = await self._store.get(year)
            if dataset is None:
                raise YearNotFoundError(year)
            working = dataset.model_copy(deep=True)
            yield working
            await self._store.put(year, working)
            logger.debug("year_dataset_saved", year=year, operation=operation)
        await self._notify(DatasetSaved(year=year, operation=operation))

    async def create(self, year: str, dataset: YearDataset) -> bool:
        """Store a new year; False, with nothing written, if it already exists."""
        async with self._lock_for(year):
            if await self._store.get(year) is not None:
                return False
            await self._store.put(year, dataset)
        await self._notify(DatasetSaved(year=year, operation="create"))
        return True

    async def replace_all(self, datasets: dict[str, YearDataset]) -> None:
        await self._store.replace_all(datasets)
        await self._notify(DatasetSaved(year=ALL_YEARS, operation="replace_all"))

    async def clear_all(self) -> None:
        await self._store.clear_all()
        await self._notify(DatasetSaved(year=ALL_YEARS, operation="clear_all"))
