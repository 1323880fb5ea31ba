"""
Finished-beer stock ledger.

Stock per (client, beer, lot, format) is folded from three sources in order:
opening stock, packaging completions and beer movements.
"""

from dataclasses import dataclass
from datetime import date

from brewledger.core.constants import get_packaging_format
from brewledger.core.entities.beer import BeerKey, BeerStockItem
from brewledger.core.entities.dataset import YearDataset
from brewledger.core.exceptions import InsufficientStockError
from brewledger.core.values import normalize


@dataclass
class _Line:
    quantity: int
    expiry_date: date | None


def project_beer_stock(
    dataset: YearDataset,
    client: str | None = None,
    adopt_unseeded_inbound: bool = False,
    epsilon: int = 0,
) -> list[BeerStockItem]:
    """
    Current finished-beer stock.

    Packaging of a lot without a batch header is ignored. A beer movement only
    changes a line that opening stock or packaging already created; with
    ``adopt_unseeded_inbound`` a positive movement may open a new line instead,
    taking the expiry of the lot's packaging. Lines at or below ``epsilon``
    are dropped.
    """
    lines: dict[BeerKey, _Line] = {}

    for item in dataset.initial_beer_stock:
        line = lines.get(item.key)
        if line is None:
            lines[item.key] = _Line(item.quantity, item.expiry_date)
        else:
            line.quantity += item.quantity

    lot_expiry: dict[str, date | None] = {}
    for event in dataset.packaging:
        header = dataset.find_batch(event.production_lot)
        if header is None:
            continue
        key = (header.client, header.beer_name, header.lot, event.format_code)
        line = lines.get(key)
        if line is None:
            lines[key] = _Line(event.units, event.expiry_date)
        else:
            line.quantity += event.units
        lot_expiry[header.lot] = event.expiry_date

    for movement in dataset.beer_movements:
        line = lines.get(movement.key)
        if line is not None:
            line.quantity += movement.quantity
        elif adopt_unseeded_inbound and movement.quantity > 0:
            lines[movement.key] = _Line(
                movement.quantity, lot_expiry.get(normalize(movement.lot))
            )

    stock = [
        BeerStockItem(
            client=key[0],
            beer_name=key[1],
            lot=key[2],
            format_code=key[3],
            quantity=line.quantity,
            expiry_date=line.expiry_date,
        )
        for key, line in lines.items()
        if line.quantity > epsilon and (client is None or key[0] == client)
    ]
    stock.sort(key=lambda s: (s.client, s.beer_name, s.expiry_date or date.max, s.lot))
    return stock


def stock_by_key(stock: list[BeerStockItem]) -> dict[BeerKey, int]:
    return {item.key: item.quantity for item in stock}


def allocate_fifo(
    stock: list[BeerStockItem],
    client: str,
    beer_name: str,
    format_code: str,
    quantity: int,
) -> list[tuple[BeerStockItem, int]]:
    """
    Split ``quantity`` over the lots of one beer and format, earliest expiry first.

    Lots without an expiry go first. Raises ``InsufficientStockError`` when
    the lots together cannot cover the quantity.
    """
    candidates = sorted(
        (
            item
            for item in stock
            if item.client == client
            and item.beer_name == beer_name
            and item.format_code == format_code
            and item.quantity > 0
        ),
        key=lambda item: item.expiry_date or date.min,
    )
    available = sum(item.quantity for item in candidates)
    if quantity > available:
        raise InsufficientStockError(
            product=f"{beer_name} ({format_code})",
            lot="",
            requested=quantity,
            available=available,
        )

    allocation = []
    remaining = quantity
    for item in candidates:
        if remaining <= 0:
            break
        taken = min(remaining, item.quantity)
        allocation.append((item, taken))
        remaining -= taken
    return allocation


def units_from_count(format_code: str, count: int) -> int:
    """Convert a physical count to units: cartons for bottles, pieces otherwise."""
    fmt = get_packaging_format(format_code)
    if fmt is not None and fmt.is_bottle:
        return count * fmt.units_per_carton
    return count
