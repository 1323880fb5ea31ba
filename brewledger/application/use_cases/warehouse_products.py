"""Warehouse Product Use Case: rename, delete and reprice product lines."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from brewledger.application.dto.requests import (
    ManualPriceRequest,
    ProductLineRef,
    RenameProductRequest,
)
from brewledger.application.gateway import YearDatasetGateway
from brewledger.config import LedgerSettings, get_logger, get_settings
from brewledger.core.entities.warehouse import PriceCatalogEntry
from brewledger.core.exceptions import StockNotEmptyError, ValidationError
from brewledger.core.services import price_catalog
from brewledger.core.services.warehouse_projection import product_balances
from brewledger.core.values import normalize

logger = get_logger(__name__)


@dataclass
class ProductLineChange:
    """Outcome of a product line edit."""

    year: str
    movements_changed: int
    prices_changed: int


def _line_key(line: ProductLineRef) -> tuple[str, str, str, str]:
    return (
        line.category.value,
        normalize(line.name),
        normalize(line.brand),
        normalize(line.supplier),
    )


class WarehouseProductUseCase:
    """Operator edits of product lines in the warehouse view."""

    def __init__(
        self,
        gateway: YearDatasetGateway | None = None,
        settings: LedgerSettings | None = None,
    ):
        self._gateway = gateway
        self._settings = settings

    async def _get_gateway(self) -> YearDatasetGateway:
        if self._gateway is None:
            from brewledger.application.services import get_dataset_gateway

            self._gateway = await get_dataset_gateway()
        return self._gateway

    async def rename(self, request: RenameProductRequest) -> ProductLineChange:
        """Rename a product line in every movement and in the price catalog."""
        old_key = _line_key(request.line)
        new_name = normalize(request.new_name)
        new_brand = normalize(request.new_brand)
        new_supplier = normalize(request.new_supplier)
        if (new_name, new_brand, new_supplier) == old_key[1:]:
            raise ValidationError("new_name", "new identity equals the current one", new_name)

        gateway = await self._get_gateway()
        async with gateway.edit(request.year, "rename_product") as data:
            changed = 0
            for index, movement in enumerate(data.movements):
                if movement.product_key != old_key:
                    continue
                data.movements[index] = movement.model_copy(
                    update={"name": new_name, "brand": new_brand, "supplier": new_supplier}
                )
                changed += 1

            prices = 0
            for index, entry in enumerate(data.price_catalog):
                if entry.key != old_key[1:]:
                    continue
                data.price_catalog[index] = entry.model_copy(
                    update={"name": new_name, "brand": new_brand, "supplier": new_supplier}
                )
                prices += 1
            data.price_catalog = _deduplicate(data.price_catalog)

        logger.info(
            "product_renamed",
            year=request.year,
            name=old_key[1],
            new_name=new_name,
            movements=changed,
        )
        return ProductLineChange(
            year=request.year, movements_changed=changed, prices_changed=prices
        )

    async def delete(self, year: str, line: ProductLineRef) -> ProductLineChange:
        """
        Remove a product line and its whole history.

        Refused while the line still holds ``stock_epsilon`` or more, so
        quantities are never lost silently. Its price catalog entries go with it.
        """
        key = _line_key(line)
        epsilon = (self._settings or get_settings().ledger).stock_epsilon
        gateway = await self._get_gateway()
        async with gateway.edit(year, "delete_product") as data:
            stock = product_balances(data.movements).get(key, Decimal(0))
            if abs(stock) >= epsilon:
                raise StockNotEmptyError(product=key[1], stock=stock)
            before = len(data.movements)
            data.movements = [m for m in data.movements if m.product_key != key]
            removed = before - len(data.movements)

            priced = len(data.price_catalog)
            data.price_catalog = [e for e in data.price_catalog if e.key != key[1:]]
            prices = priced - len(data.price_catalog)

        logger.info(
            "product_deleted", year=year, name=key[1], movements=removed, prices=prices
        )
        return ProductLineChange(year=year, movements_changed=removed, prices_changed=prices)

    async def set_price(self, request: ManualPriceRequest) -> PriceCatalogEntry:
        """Overwrite the catalog price of a product."""
        key = (request.name, request.brand, request.supplier)
        effective = request.effective_date or date.today()

        gateway = await self._get_gateway()
        async with gateway.edit(request.year, "set_price") as data:
            data.price_catalog = price_catalog.set_manual_price(
                data.price_catalog, key, request.price, effective
            )
            entry = price_catalog.lookup(data.price_catalog, *key)

        logger.info("price_set", year=request.year, name=normalize(request.name))
        return entry


def _deduplicate(catalog: list[PriceCatalogEntry]) -> list[PriceCatalogEntry]:
    """Keep one entry per key after a rename merged two lines; the latest load wins."""
    merged: dict[tuple[str, str, str], PriceCatalogEntry] = {}
    for entry in catalog:
        current = merged.get(entry.key)
        if current is None or current.last_loaded <= entry.last_loaded:
            merged[entry.key] = entry
    return list(merged.values())
