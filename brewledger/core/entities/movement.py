"""Raw-material movement log entities."""

from typing import Any

from pydantic import Field, field_validator

from brewledger.core.constants import ProductCategory
from brewledger.core.entities.base import LedgerModel
from brewledger.core.values import (
    LedgerDate,
    OptionalLedgerDate,
    OptionalQuantity,
    Quantity,
    normalize,
)

ProductKey = tuple[str, str, str, str]  # (category, name, brand, supplier)
LotKey = tuple[str, str]  # (name, supplier lot)
PriceKey = tuple[str, str, str]  # (name, brand, supplier)


class Movement(LedgerModel):
    """
    One signed quantity event on the raw-material ledger.

    Positive quantities are purchases or other inbound stock, negative ones are
    consumption. ``production_lot`` is empty for pure warehouse movements.
    """

    movement_date: LedgerDate = Field(alias="DATA")
    category: ProductCategory = Field(alias="TIPOLOGIA")
    name: str = Field(alias="NOME")
    brand: str = Field(default="", alias="MARCA")
    supplier: str = Field(default="", alias="FORNITORE")
    quantity: Quantity = Field(alias="KG_LITRI_PZ")
    reference: str = Field(default="", alias="N_FATTURA")
    supplier_lot: str = Field(default="", alias="LOTTO_FORNITORE")
    production_lot: str = Field(default="", alias="LOTTO_PRODUZIONE")
    expiry_date: OptionalLedgerDate = Field(default=None, alias="DATA_SCADENZA")
    unit_price: OptionalQuantity = Field(default=None, alias="PREZZO")

    @field_validator("category", mode="before")
    @classmethod
    def _normalize_category(cls, value: Any) -> Any:
        if isinstance(value, str):
            return normalize(value)
        return value

    @property
    def is_inbound(self) -> bool:
        return self.quantity > 0

    @property
    def is_outbound(self) -> bool:
        return self.quantity < 0

    @property
    def carries_price(self) -> bool:
        """Inbound purchase with a usable unit price."""
        return self.is_inbound and self.unit_price is not None and self.unit_price > 0

    @property
    def product_key(self) -> ProductKey:
        return (
            self.category.value,
            normalize(self.name),
            normalize(self.brand),
            normalize(self.supplier),
        )

    @property
    def lot_key(self) -> LotKey:
        return (normalize(self.name), normalize(self.supplier_lot))

    @property
    def price_key(self) -> PriceKey:
        return (normalize(self.name), normalize(self.brand), normalize(self.supplier))
