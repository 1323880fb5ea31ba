"""Storage implementations."""

from brewledger.infrastructure.storage import sqlite

__all__ = ["sqlite"]
