"""
Expiry scan of raw-material lots and finished beer.

``scan`` only plans: it returns the auto-discharge movements for expired lots
without touching the dataset. Persisting them is the caller's job.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from brewledger.core.constants import AUTO_DISCHARGE_PREFIX, PAST_EXPIRY_NOTE
from brewledger.core.entities.dataset import YearDataset
from brewledger.core.entities.movement import LotKey, Movement
from brewledger.core.entities.status import (
    DischargedLot,
    ExpiringBeer,
    ExpiringLot,
    OutOfStockProduct,
)
from brewledger.core.services.beer_ledger import project_beer_stock
from brewledger.core.services.warehouse_projection import lot_balances, product_balances


@dataclass
class ExpiryScan:
    discharges: list[Movement] = field(default_factory=list)
    discharged: list[DischargedLot] = field(default_factory=list)
    expiring_soon: list[ExpiringLot] = field(default_factory=list)
    out_of_stock: list[OutOfStockProduct] = field(default_factory=list)
    expiring_beer: list[ExpiringBeer] = field(default_factory=list)


def declared_expiries(movements: list[Movement]) -> dict[LotKey, Movement]:
    """
    Inbound movement declaring the expiry of each supplier lot.

    When a lot was loaded more than once, the latest movement by date wins,
    and among movements of the same date the last one in the log.
    """
    declared: dict[LotKey, Movement] = {}
    for movement in movements:
        if not movement.is_inbound or movement.expiry_date is None:
            continue
        name, lot = movement.lot_key
        if not name or not lot:
            continue
        current = declared.get((name, lot))
        if current is None or current.movement_date <= movement.movement_date:
            declared[(name, lot)] = movement
    return declared


def discharge_reference(today: date) -> str:
    return f"{AUTO_DISCHARGE_PREFIX}{today:%Y%m%d}"


def scan(
    dataset: YearDataset,
    today: date,
    warning_days: int = 30,
    beer_warning_days: int = 90,
    epsilon: Decimal = Decimal("0.01"),
    adopt_unseeded_beer_inbound: bool = False,
) -> ExpiryScan:
    """
    Plan the reconciliation of a year as of ``today``.

    Lots past their expiry with stock above ``epsilon`` get one discharge
    movement for their whole balance. Lots expiring within ``warning_days``
    are reported. Product lines with history but no stock are listed after
    the planned discharges are taken into account. Finished beer is only
    flagged, within ``beer_warning_days``.
    """
    result = ExpiryScan()
    balances = lot_balances(dataset.movements)

    for key, declaring in declared_expiries(dataset.movements).items():
        stock = balances.get(key, Decimal(0))
        if stock <= epsilon:
            continue
        days_left = (declaring.expiry_date - today).days
        name, lot = key
        if days_left < 0:
            result.discharges.append(
                Movement(
                    movement_date=today,
                    category=declaring.category,
                    name=declaring.name,
                    brand=declaring.brand,
                    supplier=declaring.supplier,
                    quantity=-stock,
                    reference=discharge_reference(today),
                    supplier_lot=declaring.supplier_lot,
                    production_lot=PAST_EXPIRY_NOTE,
                )
            )
            result.discharged.append(DischargedLot(name=name, lot=lot, quantity=stock))
        elif days_left <= warning_days:
            result.expiring_soon.append(
                ExpiringLot(
                    name=name,
                    lot=lot,
                    expiry_date=declaring.expiry_date,
                    stock=stock,
                    days_left=days_left,
                )
            )

    after = product_balances([*dataset.movements, *result.discharges])
    for (category, name, brand, supplier), total in after.items():
        if total <= epsilon:
            result.out_of_stock.append(
                OutOfStockProduct(category=category, name=name, brand=brand, supplier=supplier)
            )

    beer_stock = project_beer_stock(
        dataset, adopt_unseeded_inbound=adopt_unseeded_beer_inbound
    )
    for item in beer_stock:
        if item.expiry_date is None:
            continue
        days_left = (item.expiry_date - today).days
        if 0 <= days_left <= beer_warning_days:
            result.expiring_beer.append(
                ExpiringBeer(
                    client=item.client,
                    beer_name=item.beer_name,
                    lot=item.lot,
                    format_code=item.format_code,
                    expiry_date=item.expiry_date,
                    quantity=item.quantity,
                    days_left=days_left,
                )
            )

    return result
