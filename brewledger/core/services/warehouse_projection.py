"""
Warehouse projection.

Folds the raw-material movement log into stock on hand. Every function here
is a pure fold over the list it receives: nothing is cached, so callers re-run
them after each change to the log.
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal

from brewledger.core.constants import UNKNOWN
from brewledger.core.entities.movement import LotKey, Movement, ProductKey
from brewledger.core.entities.warehouse import (
    CatalogProduct,
    LotStock,
    WarehouseProjection,
    WarehouseStockEntry,
)
from brewledger.core.exceptions import InsufficientStockError
from brewledger.core.values import normalize

DEFAULT_EPSILON = Decimal("0.01")


def product_balances(movements: Iterable[Movement]) -> dict[ProductKey, Decimal]:
    """Signed sum per (category, name, brand, supplier), unfiltered."""
    balances: dict[ProductKey, Decimal] = {}
    for movement in movements:
        key = movement.product_key
        balances[key] = balances.get(key, Decimal(0)) + movement.quantity
    return balances


def project(
    movements: Sequence[Movement], epsilon: Decimal = DEFAULT_EPSILON
) -> WarehouseProjection:
    """
    Stock per product line plus the catalog of known products.

    Lines whose balance is within ``epsilon`` of zero are treated as consumed
    and left out. The catalog keeps, per (name, brand), the category and
    supplier of the first inbound movement seen.
    """
    stock = [
        WarehouseStockEntry(
            category=category, name=name, brand=brand, supplier=supplier, stock=total
        )
        for (category, name, brand, supplier), total in product_balances(movements).items()
        if abs(total) > epsilon
    ]

    catalog: dict[tuple[str, str], CatalogProduct] = {}
    for movement in movements:
        if not movement.is_inbound:
            continue
        category, name, brand, supplier = movement.product_key
        if not name or (name, brand) in catalog:
            continue
        catalog[(name, brand)] = CatalogProduct(
            category=category, name=name, brand=brand, supplier=supplier
        )

    return WarehouseProjection(stock=stock, catalog=list(catalog.values()))


def lot_balances(movements: Iterable[Movement]) -> dict[LotKey, Decimal]:
    """Signed sum per (name, supplier lot); movements without a lot are skipped."""
    balances: dict[LotKey, Decimal] = {}
    for movement in movements:
        name, lot = movement.lot_key
        if not name or not lot:
            continue
        balances[(name, lot)] = balances.get((name, lot), Decimal(0)) + movement.quantity
    return balances


def lot_stock(
    movements: Sequence[Movement], epsilon: Decimal = DEFAULT_EPSILON
) -> list[LotStock]:
    """
    Available supplier lots.

    A lot is available while its balance is at least ``epsilon``. Brand and
    supplier come from its first inbound movement, or ``N/D`` when the lot has
    never had one.
    """
    details: dict[LotKey, tuple[str, str]] = {}
    for movement in movements:
        key = movement.lot_key
        if movement.is_inbound and key not in details:
            details[key] = (normalize(movement.brand), normalize(movement.supplier))

    lots = []
    for (name, lot), total in lot_balances(movements).items():
        if total < epsilon:
            continue
        brand, supplier = details.get((name, lot), (UNKNOWN, UNKNOWN))
        lots.append(LotStock(name=name, lot=lot, stock=total, brand=brand, supplier=supplier))
    return lots


def available_lots(
    movements: Sequence[Movement], name: str, epsilon: Decimal = DEFAULT_EPSILON
) -> list[LotStock]:
    """Available lots of one product, by name."""
    wanted = normalize(name)
    return [lot for lot in lot_stock(movements, epsilon) if lot.name == wanted]


@dataclass
class _Requirement:
    label: str
    lot: str
    requested: Decimal


def check_consumption(
    movements: Sequence[Movement],
    requested: Iterable[Movement],
) -> None:
    """
    Verify that every outbound movement in ``requested`` can be served.

    Quantities asked from the same supplier lot are added up before the
    comparison. A movement without a supplier lot draws on the whole product
    line. Raises ``InsufficientStockError`` on the first shortfall; returns
    nothing when all requests fit.
    """
    by_lot: dict[LotKey, _Requirement] = {}
    by_product: dict[ProductKey, _Requirement] = {}
    for movement in requested:
        if not movement.is_outbound:
            continue
        amount = -movement.quantity
        name, lot = movement.lot_key
        if lot:
            entry = by_lot.setdefault((name, lot), _Requirement(name, lot, Decimal(0)))
        else:
            entry = by_product.setdefault(
                movement.product_key, _Requirement(name, "", Decimal(0))
            )
        entry.requested += amount

    if by_lot:
        balances = lot_balances(movements)
        for key, need in by_lot.items():
            available = balances.get(key, Decimal(0))
            if need.requested > available:
                raise InsufficientStockError(
                    product=need.label,
                    lot=need.lot,
                    requested=need.requested,
                    available=max(available, Decimal(0)),
                )

    if by_product:
        balances = product_balances(movements)
        for key, need in by_product.items():
            available = balances.get(key, Decimal(0))
            if need.requested > available:
                raise InsufficientStockError(
                    product=need.label,
                    lot="",
                    requested=need.requested,
                    available=max(available, Decimal(0)),
                )


def _refuse_shortfall(
    after: Sequence[Movement],
    matches: Callable[[Movement], bool],
    before_total: Decimal,
    after_total: Decimal,
    product: str,
    lot: str,
) -> None:
    if after_total >= 0 or after_total >= before_total:
        return
    drawn = sum((-m.quantity for m in after if m.is_outbound and matches(m)), Decimal(0))
    raise InsufficientStockError(
        product=product,
        lot=lot,
        requested=drawn,
        available=max(drawn + after_total, Decimal(0)),
    )


def check_edit(
    before: Sequence[Movement],
    after: Sequence[Movement],
    touched: Iterable[Movement],
) -> None:
    """
    Verify that rewriting the log leaves no lot or product line overdrawn.

    ``touched`` are the movements the edit removed or added; only their lots
    and product lines are compared. A line that was already negative fails
    only when the edit takes it further down.
    """
    lots_before, lots_after = lot_balances(before), lot_balances(after)
    products_before, products_after = product_balances(before), product_balances(after)
    for movement in touched:
        name, lot = movement.lot_key
        if name and lot:
            _refuse_shortfall(
                after,
                lambda m: m.lot_key == (name, lot),
                lots_before.get((name, lot), Decimal(0)),
                lots_after.get((name, lot), Decimal(0)),
                name,
                lot,
            )
        key = movement.product_key
        _refuse_shortfall(
            after,
            lambda m: m.product_key == key,
            products_before.get(key, Decimal(0)),
            products_after.get(key, Decimal(0)),
            name,
            "",
        )
