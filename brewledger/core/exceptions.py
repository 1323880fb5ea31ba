"""
Domain exceptions for the brewery ledger.

Provides specific exception types for different error scenarios.
"""

from decimal import Decimal
from typing import Any


class BrewLedgerError(Exception):
    """Base exception for all ledger errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for user-facing error reporting."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(BrewLedgerError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


# Not-found Exceptions
class NotFoundError(BrewLedgerError):
    """Base exception for missing records."""

    pass


class YearNotFoundError(NotFoundError):
    """No dataset stored for the requested year."""

    def __init__(self, year: str):
        super().__init__(
            f"Year not found: {year}",
            code="YEAR_NOT_FOUND",
            details={"year": year},
        )


class BatchNotFoundError(NotFoundError):
    """Production lot has no batch header."""

    def __init__(self, lot: str, year: str | None = None):
        super().__init__(
            f"Batch not found: {lot}" + (f" (year {year})" if year else ""),
            code="BATCH_NOT_FOUND",
            details={"lot": lot, "year": year},
        )


class MovementNotFoundError(NotFoundError):
    """Movement position is outside the movement log."""

    def __init__(self, index: int, size: int):
        super().__init__(
            f"Movement not found at position {index}: the log holds {size} movements",
            code="MOVEMENT_NOT_FOUND",
            details={"index": index, "size": size},
        )


class PackagingNotFoundError(NotFoundError):
    """Packaging operation id is unknown."""

    def __init__(self, operation_id: str):
        super().__init__(
            f"Packaging operation not found: {operation_id}",
            code="PACKAGING_NOT_FOUND",
            details={"operation_id": operation_id},
        )


class RecordNotFoundError(NotFoundError):
    """No record with the given key in a collection."""

    def __init__(self, collection: str, key: str, value: Any):
        super().__init__(
            f"No record in {collection} with {key}={value!r}",
            code="RECORD_NOT_FOUND",
            details={"collection": collection, "key": key, "value": str(value)},
        )


# Validation Exceptions
class ValidationError(BrewLedgerError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class InsufficientStockError(ValidationError):
    """Requested consumption exceeds the available balance."""

    def __init__(
        self,
        product: str,
        lot: str,
        requested: Decimal,
        available: Decimal,
    ):
        where = f"lot {lot}" if lot else "product stock"
        super().__init__(
            field="quantity",
            message=(
                f"insufficient stock for {product} ({where}): "
                f"requested {requested}, available {available}"
            ),
        )
        self.code = "INSUFFICIENT_STOCK"
        self.details.update(
            {
                "product": product,
                "lot": lot,
                "requested": str(requested),
                "available": str(available),
            }
        )


class InvalidYearError(ValidationError):
    """Year key is not a 4-digit year."""

    def __init__(self, year: Any):
        super().__init__(
            field="year",
            message=f"'{year}' is not a 4-digit year",
            value=year,
        )
        self.code = "INVALID_YEAR"


class DuplicateYearError(ValidationError):
    """A dataset already exists for the year."""

    def __init__(self, year: str):
        super().__init__(
            field="year",
            message=f"year {year} already exists",
            value=year,
        )
        self.code = "DUPLICATE_YEAR"


# Guard Exceptions
class StockNotEmptyError(BrewLedgerError):
    """Destructive operation refused while stock is on hand."""

    def __init__(self, product: str, stock: Decimal):
        super().__init__(
            f"Cannot delete {product}: {stock} still in stock",
            code="STOCK_NOT_EMPTY",
            details={"product": product, "stock": str(stock)},
        )


class BatchClosedError(BrewLedgerError):
    """Batch no longer accepts changes."""

    def __init__(self, lot: str, reason: str):
        super().__init__(
            f"Batch {lot} is closed: {reason}",
            code="BATCH_CLOSED",
            details={"lot": lot, "reason": reason},
        )


class CostAnalysisClosedError(BatchClosedError):
    """Cost analysis is closed and cost inputs are frozen."""

    def __init__(self, lot: str):
        super().__init__(lot, "cost analysis has been closed")
        self.code = "COST_ANALYSIS_CLOSED"


# Import Exceptions
class ImportFormatError(BrewLedgerError):
    """Backup payload rejected before touching the store."""

    def __init__(self, reason: str, key: str | None = None):
        super().__init__(
            f"Invalid backup: {reason}",
            code="IMPORT_FORMAT_ERROR",
            details={"reason": reason, "key": key},
        )


class ConfigurationError(BrewLedgerError):
    """Configuration error."""

    pass
