"""Core interfaces (ports) for dependency injection."""

from brewledger.core.interfaces.year_store import IYearStore

__all__ = ["IYearStore"]
