"""Data transfer objects for ledger commands."""

from brewledger.application.dto.requests import (
    BeerInventoryCheckRequest,
    CostStateRequest,
    CreateYearRequest,
    FermentationReadingRequest,
    GenericDischargeRequest,
    IngredientConsumption,
    InventoryCount,
    ManualPriceRequest,
    PackagingRequest,
    ProductLineRef,
    RenameProductRequest,
    SalesOrderLine,
    SalesOrderRequest,
    SaveBrewBatchRequest,
)

__all__ = [
    "GenericDischargeRequest",
    "IngredientConsumption",
    "PackagingRequest",
    "SaveBrewBatchRequest",
    "FermentationReadingRequest",
    "CostStateRequest",
    "SalesOrderLine",
    "SalesOrderRequest",
    "InventoryCount",
    "BeerInventoryCheckRequest",
    "ProductLineRef",
    "RenameProductRequest",
    "ManualPriceRequest",
    "CreateYearRequest",
]
