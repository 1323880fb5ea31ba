"""Cost analysis results for batches and quotes."""

from decimal import Decimal
from typing import Literal

from pydantic import Field

from brewledger.core.entities.base import LedgerModel
from brewledger.core.values import Quantity

ZERO = Decimal(0)


class RawMaterialCostLine(LedgerModel):
    """
    One consumed ingredient priced against the catalog.

    ``price_found`` is False when the catalog has no entry for the product;
    the line is then costed at zero and also listed in ``missing_prices``.
    """

    category: str
    name: str
    brand: str = ""
    supplier: str = ""
    quantity: Quantity
    unit_price: Quantity
    total: Quantity
    price_found: bool = True


class CategoryCost(LedgerModel):
    category: str
    lines: list[RawMaterialCostLine] = Field(default_factory=list)
    total: Quantity = ZERO


class OverheadCosts(LedgerModel):
    gas_used: Quantity = ZERO
    gas: Quantity = ZERO
    additional_gases: Quantity = ZERO
    excise: Quantity = ZERO
    storage: Quantity = ZERO
    pallets: Quantity = ZERO
    management: Quantity = ZERO
    total: Quantity = ZERO


class KegCost(LedgerModel):
    format_code: str
    beer_cost_per_liter: Quantity
    container_cost_per_liter: Quantity
    final_price_per_liter: Quantity
    container_price_found: bool = True


class BottleCost(LedgerModel):
    format_code: str
    total_bottles: int
    beer_cost: Quantity
    bottle_cost: Quantity
    cap_cost: Quantity
    carton_cost_per_bottle: Quantity
    label_cost: Quantity
    final_price_per_bottle: Quantity
    total_cost: Quantity


class CostAnalysis(LedgerModel):
    """Full cost rollup of a batch or of a quote."""

    subject: str
    raw_materials: list[CategoryCost] = Field(default_factory=list)
    raw_materials_total: Quantity = ZERO
    overheads: OverheadCosts = Field(default_factory=OverheadCosts)
    total_liters: Quantity = ZERO
    grand_total: Quantity = ZERO
    cost_per_liter: Quantity = ZERO
    kegs: list[KegCost] = Field(default_factory=list)
    bottles: list[BottleCost] = Field(default_factory=list)
    missing_prices: list[str] = Field(default_factory=list)
    closed: bool = False

    @property
    def complete(self) -> bool:
        return not self.missing_prices


class CostOptions(LedgerModel):
    """Operator choices for a batch analysis; stored on the batch header."""

    gas_type: Literal["gpl", "metano"] = "metano"
    use_storage: bool = False
    pallet_count: int = Field(default=0, ge=0)
    use_labels: bool = False
