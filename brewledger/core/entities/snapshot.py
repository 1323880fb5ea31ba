"""Detached, JSON-serialisable view of every projection of a year."""

from datetime import date

from pydantic import Field

from brewledger.core.entities.base import LedgerModel
from brewledger.core.entities.beer import BeerStockItem
from brewledger.core.entities.warehouse import (
    CatalogProduct,
    LotStock,
    PriceCatalogEntry,
    WarehouseStockEntry,
)


class LedgerSnapshot(LedgerModel):
    """Input for report and spreadsheet exporters; holds no live references."""

    year: str
    generated_on: date
    warehouse: list[WarehouseStockEntry] = Field(default_factory=list)
    catalog: list[CatalogProduct] = Field(default_factory=list)
    lots: list[LotStock] = Field(default_factory=list)
    prices: list[PriceCatalogEntry] = Field(default_factory=list)
    beer_stock: list[BeerStockItem] = Field(default_factory=list)
