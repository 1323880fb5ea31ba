"""Warehouse projection and price catalog entities."""

from pydantic import Field

from brewledger.core.entities.base import LedgerModel
from brewledger.core.values import LedgerDate, Quantity, normalize


class PriceCatalogEntry(LedgerModel):
    """Last known unit price for a (name, brand, supplier) product."""

    name: str = Field(alias="NOME")
    brand: str = Field(default="", alias="MARCA")
    supplier: str = Field(default="", alias="FORNITORE")
    price: Quantity = Field(alias="PREZZO")
    last_loaded: LedgerDate = Field(alias="DATA_ULTIMO_CARICO")

    @property
    def key(self) -> tuple[str, str, str]:
        return (normalize(self.name), normalize(self.brand), normalize(self.supplier))


class WarehouseStockEntry(LedgerModel):
    """Derived stock on hand for one product line."""

    category: str = Field(alias="TIPOLOGIA")
    name: str = Field(alias="NOME")
    brand: str = Field(default="", alias="MARCA")
    supplier: str = Field(default="", alias="FORNITORE")
    stock: Quantity = Field(alias="GIACENZA")

    @property
    def key(self) -> tuple[str, str, str, str]:
        return (self.category, self.name, self.brand, self.supplier)


class CatalogProduct(LedgerModel):
    """Canonical descriptor of a product, taken from its first inbound movement."""

    category: str = Field(alias="TIPOLOGIA")
    name: str = Field(alias="NOME")
    brand: str = Field(default="", alias="MARCA")
    supplier: str = Field(default="", alias="FORNITORE")


class LotStock(LedgerModel):
    """Available quantity of one supplier lot."""

    name: str
    lot: str
    stock: Quantity
    brand: str
    supplier: str


class WarehouseProjection(LedgerModel):
    """Result of folding the movement log."""

    stock: list[WarehouseStockEntry] = Field(default_factory=list)
    catalog: list[CatalogProduct] = Field(default_factory=list)

    def stock_for(
        self, category: str, name: str, brand: str = "", supplier: str = ""
    ) -> WarehouseStockEntry | None:
        key = (normalize(category), normalize(name), normalize(brand), normalize(supplier))
        for entry in self.stock:
            if entry.key == key:
                return entry
        return None
