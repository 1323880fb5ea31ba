"""The per-year aggregate root."""

from dataclasses import dataclass
from typing import Any

from pydantic import Field

from brewledger.core.entities.base import LedgerModel
from brewledger.core.entities.batch import BrewHeader, FermentationReading, PackagingEvent
from brewledger.core.entities.beer import (
    BeerInventoryCheck,
    BeerMovement,
    InitialBeerStock,
    SalesOrder,
)
from brewledger.core.entities.master_data import (
    Beer,
    Client,
    CostCoefficients,
    FermenterConfig,
    Quote,
)
from brewledger.core.entities.movement import Movement
from brewledger.core.entities.warehouse import PriceCatalogEntry
from brewledger.core.values import normalize


class YearDataset(LedgerModel):
    """
    Everything recorded for one fiscal year.

    Every collection defaults to empty, so documents written by older versions
    (or hand-edited backups) that lack a collection load without error. Keys the
    model does not know, such as cached product tables, are ignored.
    """

    movements: list[Movement] = Field(default_factory=list, alias="MOVIMENTAZIONE")
    brew_headers: list[BrewHeader] = Field(default_factory=list, alias="COTTE_HEAD")
    fermentation: list[FermentationReading] = Field(
        default_factory=list, alias="FERMENTAZIONE"
    )
    packaging: list[PackagingEvent] = Field(default_factory=list, alias="CONFEZIONAMENTO")
    fermenters: list[FermenterConfig] = Field(default_factory=list, alias="CANTINA_CONFIG")
    clients: list[Client] = Field(default_factory=list, alias="CLIENTI")
    beers: list[Beer] = Field(default_factory=list, alias="BIRRE")
    price_catalog: list[PriceCatalogEntry] = Field(
        default_factory=list, alias="PRICE_DATABASE"
    )
    cost_coefficients: CostCoefficients = Field(
        default_factory=CostCoefficients, alias="COST_COEFFICIENTS"
    )
    quotes: list[Quote] = Field(default_factory=list, alias="QUOTES")
    initial_beer_stock: list[InitialBeerStock] = Field(
        default_factory=list, alias="BEER_WAREHOUSE_INITIAL"
    )
    beer_movements: list[BeerMovement] = Field(default_factory=list, alias="BEER_MOVEMENTS")
    sales_orders: list[SalesOrder] = Field(default_factory=list, alias="SALES_ORDERS")
    inventory_checks: list[BeerInventoryCheck] = Field(
        default_factory=list, alias="BEER_INVENTORY_CHECKS"
    )

    def find_batch(self, lot: str) -> BrewHeader | None:
        wanted = normalize(lot)
        for header in self.brew_headers:
            if header.lot == wanted:
                return header
        return None

    def packaging_for(self, lot: str) -> list[PackagingEvent]:
        wanted = normalize(lot)
        return [p for p in self.packaging if normalize(p.production_lot) == wanted]


@dataclass(frozen=True)
class CollectionDef:
    """A named list collection and the fields that identify one of its records."""

    name: str
    attribute: str
    model: type[LedgerModel]
    key_fields: tuple[str, ...]

    def key_of(self, record: LedgerModel) -> tuple[Any, ...]:
        return tuple(
            normalize(v) if isinstance(v, str) else v
            for v in (getattr(record, f) for f in self.key_fields)
        )


# Collections editable record by record. Movement logs have their own commands.
COLLECTIONS: dict[str, CollectionDef] = {
    definition.name: definition
    for definition in (
        CollectionDef("CLIENTI", "clients", Client, ("id",)),
        CollectionDef("BIRRE", "beers", Beer, ("id",)),
        CollectionDef("CANTINA_CONFIG", "fermenters", FermenterConfig, ("id",)),
        CollectionDef("QUOTES", "quotes", Quote, ("id",)),
        CollectionDef("COTTE_HEAD", "brew_headers", BrewHeader, ("lot",)),
        CollectionDef(
            "PRICE_DATABASE", "price_catalog", PriceCatalogEntry, ("name", "brand", "supplier")
        ),
        CollectionDef(
            "BEER_WAREHOUSE_INITIAL",
            "initial_beer_stock",
            InitialBeerStock,
            ("client", "beer_name", "lot", "format_code"),
        ),
        CollectionDef("SALES_ORDERS", "sales_orders", SalesOrder, ("id",)),
        CollectionDef("BEER_INVENTORY_CHECKS", "inventory_checks", BeerInventoryCheck, ("id",)),
    )
}
