"""Infrastructure layer implementations."""

from brewledger.infrastructure import storage

__all__ = ["storage"]
