"""Application use cases."""

from brewledger.application.use_cases.backup import BackupUseCase, parse_backup
from brewledger.application.use_cases.batch_lifecycle import (
    BatchLifecycleUseCase,
    PackagingUndone,
)
from brewledger.application.use_cases.beer_inventory_check import (
    BeerInventoryCheckUseCase,
    check_id_for,
)
from brewledger.application.use_cases.check_warehouse_status import (
    CheckWarehouseStatusUseCase,
)
from brewledger.application.use_cases.collection_records import CollectionRecordsUseCase
from brewledger.application.use_cases.cost_analysis import CostAnalysisUseCase
from brewledger.application.use_cases.edit_movements import (
    DeleteMovementUseCase,
    DeleteOperationMovementsUseCase,
    MovementEditResult,
    UpdateMovementUseCase,
)
from brewledger.application.use_cases.ledger_snapshot import LedgerSnapshotUseCase
from brewledger.application.use_cases.record_movements import (
    RecordMovementsResult,
    RecordMovementsUseCase,
)
from brewledger.application.use_cases.sales_order import SalesOrderUseCase
from brewledger.application.use_cases.save_brew_batch import (
    SaveBrewBatchResult,
    SaveBrewBatchUseCase,
)
from brewledger.application.use_cases.warehouse_products import (
    ProductLineChange,
    WarehouseProductUseCase,
)
from brewledger.application.use_cases.year_lifecycle import (
    CreateYearResult,
    YearLifecycleUseCase,
    carry_forward,
)

__all__ = [
    "RecordMovementsUseCase",
    "RecordMovementsResult",
    "UpdateMovementUseCase",
    "DeleteMovementUseCase",
    "DeleteOperationMovementsUseCase",
    "MovementEditResult",
    "WarehouseProductUseCase",
    "ProductLineChange",
    "SaveBrewBatchUseCase",
    "SaveBrewBatchResult",
    "BatchLifecycleUseCase",
    "PackagingUndone",
    "CheckWarehouseStatusUseCase",
    "BeerInventoryCheckUseCase",
    "check_id_for",
    "SalesOrderUseCase",
    "YearLifecycleUseCase",
    "CreateYearResult",
    "carry_forward",
    "BackupUseCase",
    "parse_backup",
    "CollectionRecordsUseCase",
    "CostAnalysisUseCase",
    "LedgerSnapshotUseCase",
]
