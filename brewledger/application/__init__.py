"""
Application layer - Use cases, DTOs, the year gateway and service factories.

This layer orchestrates the ledger by:
1. Validating operator commands with request DTOs
2. Running each command as one read-modify-write of a year
3. Providing factory functions for dependency injection

Use cases are the only entry point for the CLI and other front ends.
"""

from brewledger.application.gateway import DatasetSaved, YearDatasetGateway
from brewledger.application.services import get_dataset_gateway, reset_services
from brewledger.application.use_cases import (
    BackupUseCase,
    BatchLifecycleUseCase,
    BeerInventoryCheckUseCase,
    CheckWarehouseStatusUseCase,
    CollectionRecordsUseCase,
    CostAnalysisUseCase,
    DeleteMovementUseCase,
    DeleteOperationMovementsUseCase,
    LedgerSnapshotUseCase,
    RecordMovementsUseCase,
    SalesOrderUseCase,
    SaveBrewBatchUseCase,
    UpdateMovementUseCase,
    WarehouseProductUseCase,
    YearLifecycleUseCase,
)

__all__ = [
    # Gateway
    "YearDatasetGateway",
    "DatasetSaved",
    # Use Cases
    "RecordMovementsUseCase",
    "UpdateMovementUseCase",
    "DeleteMovementUseCase",
    "DeleteOperationMovementsUseCase",
    "WarehouseProductUseCase",
    "SaveBrewBatchUseCase",
    "BatchLifecycleUseCase",
    "CheckWarehouseStatusUseCase",
    "BeerInventoryCheckUseCase",
    "SalesOrderUseCase",
    "YearLifecycleUseCase",
    "BackupUseCase",
    "CollectionRecordsUseCase",
    "CostAnalysisUseCase",
    "LedgerSnapshotUseCase",
    # Service factories
    "get_dataset_gateway",
    "reset_services",
]
