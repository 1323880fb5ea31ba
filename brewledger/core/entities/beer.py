"""Finished-beer stock, movements, orders and inventory checks."""

from decimal import Decimal
from enum import Enum

from pydantic import Field

from brewledger.core.entities.base import LedgerModel
from brewledger.core.values import LedgerDate, OptionalLedgerDate, Quantity

BeerKey = tuple[str, str, str, str]  # (client, beer, lot, format)


class BeerStockItem(LedgerModel):
    """Units of one (client, beer, lot, format) line."""

    client: str = Field(alias="cliente")
    beer_name: str = Field(alias="nomeBirra")
    lot: str = Field(alias="lotto")
    format_code: str = Field(alias="formato")
    quantity: int = Field(alias="quantita")
    expiry_date: OptionalLedgerDate = Field(default=None, alias="dataScadenza")

    @property
    def key(self) -> BeerKey:
        return (self.client, self.beer_name, self.lot, self.format_code)


class InitialBeerStock(BeerStockItem):
    """Manually entered or carried-forward opening balance."""


class BeerMovementType(str, Enum):
    """Kinds of finished-beer movements."""

    SALE = "SALE"
    ADJUSTMENT = "ADJUSTMENT"
    PURCHASE = "PURCHASE"


class BeerMovement(LedgerModel):
    """
    Signed finished-beer quantity event.

    SALE is negative, PURCHASE positive, ADJUSTMENT either sign.
    """

    id: str
    movement_date: LedgerDate = Field(alias="data")
    type: BeerMovementType
    client: str = Field(alias="cliente")
    beer_name: str = Field(alias="nomeBirra")
    lot: str = Field(alias="lotto")
    format_code: str = Field(alias="formato")
    quantity: int = Field(alias="quantita")
    related_doc_id: str | None = Field(default=None, alias="relatedDocId")
    recipient: str | None = Field(default=None, alias="destinatario")

    @property
    def key(self) -> BeerKey:
        return (self.client, self.beer_name, self.lot, self.format_code)


class SalesOrderItem(LedgerModel):
    beer_name: str = Field(alias="beerName")
    lot: str = Field(default="", alias="lotto")
    format_code: str = Field(alias="format")
    quantity: int = Field(gt=0)
    unit_price: Quantity = Field(default=Decimal(0), alias="price")
    total: Quantity = Decimal(0)


class SalesOrder(LedgerModel):
    """Order shipping the brewery's own beer to a client."""

    id: str
    order_date: LedgerDate = Field(alias="date")
    client: str
    items: list[SalesOrderItem] = Field(default_factory=list)
    total_net: Quantity = Field(default=Decimal(0), alias="totalNet")
    vat: Quantity = Field(default=Decimal(0), alias="iva")
    total_gross: Quantity = Field(default=Decimal(0), alias="totalGross")


class BeerInventoryCheckItem(LedgerModel):
    client: str = Field(alias="cliente")
    beer_name: str = Field(alias="nomeBirra")
    lot: str = Field(alias="lotto")
    format_code: str = Field(alias="formato")
    calculated: int = Field(alias="quantitaCalcolata")
    physical: int = Field(alias="quantitaFisica")
    discrepancy: int = Field(alias="discrepanza")


class BeerInventoryCheck(LedgerModel):
    """Monthly physical count of finished beer; id is INV_<year>_<month>."""

    id: str
    check_date: LedgerDate = Field(alias="date")
    items: list[BeerInventoryCheckItem] = Field(default_factory=list)
