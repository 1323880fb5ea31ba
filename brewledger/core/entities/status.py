"""Warehouse status report produced by the expiry reconciliation."""

from datetime import date

from pydantic import Field

from brewledger.core.entities.base import LedgerModel
from brewledger.core.values import LedgerDate, Quantity


class DischargedLot(LedgerModel):
    name: str = Field(alias="nome")
    lot: str = Field(alias="lotto")
    quantity: Quantity = Field(alias="qta")


class ExpiringLot(LedgerModel):
    name: str = Field(alias="nome")
    lot: str = Field(alias="lotto")
    expiry_date: LedgerDate = Field(alias="scadenza")
    stock: Quantity = Field(alias="giacenza")
    days_left: int = Field(alias="giorni")


class OutOfStockProduct(LedgerModel):
    """Product line with history but no stock, a candidate for manual removal."""

    category: str = Field(alias="tipologia")
    name: str = Field(alias="nome")
    brand: str = Field(alias="marca")
    supplier: str = Field(alias="fornitore")


class ExpiringBeer(LedgerModel):
    client: str = Field(alias="cliente")
    beer_name: str = Field(alias="birra")
    lot: str = Field(alias="lotto")
    format_code: str = Field(alias="formato")
    expiry_date: LedgerDate = Field(alias="scadenza")
    quantity: int = Field(alias="qta")
    days_left: int = Field(alias="giorni")


class WarehouseStatus(LedgerModel):
    """Outcome of one reconciliation run for a year."""

    year: str
    checked_on: date
    discharged: list[DischargedLot] = Field(default_factory=list, alias="dischargedItems")
    expiring_soon: list[ExpiringLot] = Field(default_factory=list, alias="expiringSoonItems")
    out_of_stock: list[OutOfStockProduct] = Field(default_factory=list, alias="outOfStockItems")
    expiring_beer: list[ExpiringBeer] = Field(default_factory=list, alias="expiringBeerItems")

    @property
    def has_warnings(self) -> bool:
        return bool(self.discharged or self.expiring_soon or self.expiring_beer)
