"""Ledger entities."""

from brewledger.core.entities.base import LedgerModel
from brewledger.core.entities.batch import (
    COST_INPUT_FIELDS,
    BrewHeader,
    FermentationReading,
    PackagingEvent,
)
from brewledger.core.entities.beer import (
    BeerInventoryCheck,
    BeerInventoryCheckItem,
    BeerKey,
    BeerMovement,
    BeerMovementType,
    BeerStockItem,
    InitialBeerStock,
    SalesOrder,
    SalesOrderItem,
)
from brewledger.core.entities.costing import (
    BottleCost,
    CategoryCost,
    CostAnalysis,
    CostOptions,
    KegCost,
    OverheadCosts,
    RawMaterialCostLine,
)
from brewledger.core.entities.dataset import COLLECTIONS, CollectionDef, YearDataset
from brewledger.core.entities.master_data import (
    Beer,
    Client,
    CostCoefficients,
    FermenterConfig,
    Quote,
    QuoteIngredient,
    QuotePackaging,
    RecipeIngredient,
)
from brewledger.core.entities.movement import LotKey, Movement, PriceKey, ProductKey
from brewledger.core.entities.snapshot import LedgerSnapshot
from brewledger.core.entities.status import (
    DischargedLot,
    ExpiringBeer,
    ExpiringLot,
    OutOfStockProduct,
    WarehouseStatus,
)
from brewledger.core.entities.warehouse import (
    CatalogProduct,
    LotStock,
    PriceCatalogEntry,
    WarehouseProjection,
    WarehouseStockEntry,
)

__all__ = [
    "LedgerModel",
    # Movements
    "Movement",
    "ProductKey",
    "LotKey",
    "PriceKey",
    # Warehouse
    "WarehouseStockEntry",
    "CatalogProduct",
    "LotStock",
    "PriceCatalogEntry",
    "WarehouseProjection",
    # Batches
    "BrewHeader",
    "FermentationReading",
    "PackagingEvent",
    "COST_INPUT_FIELDS",
    # Finished beer
    "BeerKey",
    "BeerStockItem",
    "InitialBeerStock",
    "BeerMovement",
    "BeerMovementType",
    "SalesOrder",
    "SalesOrderItem",
    "BeerInventoryCheck",
    "BeerInventoryCheckItem",
    # Master data
    "Client",
    "Beer",
    "RecipeIngredient",
    "FermenterConfig",
    "CostCoefficients",
    "Quote",
    "QuoteIngredient",
    "QuotePackaging",
    # Aggregate
    "YearDataset",
    "CollectionDef",
    "COLLECTIONS",
    # Reports
    "WarehouseStatus",
    "DischargedLot",
    "ExpiringLot",
    "OutOfStockProduct",
    "ExpiringBeer",
    "CostAnalysis",
    "CostOptions",
    "CategoryCost",
    "RawMaterialCostLine",
    "OverheadCosts",
    "KegCost",
    "BottleCost",
    "LedgerSnapshot",
]
