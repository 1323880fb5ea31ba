"""Abstract interface for year dataset persistence."""

from abc import ABC, abstractmethod

from brewledger.core.entities.dataset import YearDataset


class IYearStore(ABC):
    """
    Key-value store of whole year documents.

    Keys are 4-digit year strings. Each ``put`` replaces the full document;
    there are no field-level writes.
    """

    @abstractmethod
    async def get(self, year: str) -> YearDataset | None:
        """Get the dataset of a year, or None if the year does not exist."""
        pass

    @abstractmethod
    async def put(self, year: str, dataset: YearDataset) -> None:
        """Store the full dataset of a year."""
        pass

    @abstractmethod
    async def list_years(self) -> list[str]:
        """List stored years in ascending order."""
        pass

    @abstractmethod
    async def clear_all(self) -> None:
        """Delete every year, all or nothing."""
        pass

    @abstractmethod
    async def replace_all(self, datasets: dict[str, YearDataset]) -> None:
        """Replace the whole store with the given datasets, all or nothing."""
        pass
