"""
Price catalog maintenance.

The catalog holds at most one entry per (name, brand, supplier). An inbound
movement carrying a price replaces the entry unless the entry was loaded on a
later date, so the result does not depend on the order of the movement log.
"""

from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from brewledger.core.entities.movement import Movement, PriceKey
from brewledger.core.entities.warehouse import PriceCatalogEntry
from brewledger.core.values import normalize


def _index_of(catalog: list[PriceCatalogEntry], key: PriceKey) -> int:
    for index, entry in enumerate(catalog):
        if entry.key == key:
            return index
    return -1


def apply_inbound_price(
    catalog: list[PriceCatalogEntry], movement: Movement
) -> list[PriceCatalogEntry]:
    """Return the catalog updated with the price of one movement."""
    if not movement.carries_price:
        return catalog

    name, brand, supplier = movement.price_key
    entry = PriceCatalogEntry(
        name=name,
        brand=brand,
        supplier=supplier,
        price=movement.unit_price,
        last_loaded=movement.movement_date,
    )
    updated = list(catalog)
    index = _index_of(updated, entry.key)
    if index < 0:
        updated.append(entry)
    elif updated[index].last_loaded <= entry.last_loaded:
        updated[index] = entry
    return updated


def rebuild(
    movements: Iterable[Movement],
    catalog: list[PriceCatalogEntry] | None = None,
) -> list[PriceCatalogEntry]:
    """Fold every priced movement into ``catalog`` (empty by default)."""
    result = list(catalog or [])
    for movement in movements:
        result = apply_inbound_price(result, movement)
    return result


def set_manual_price(
    catalog: list[PriceCatalogEntry], key: PriceKey, price: Decimal, on: date
) -> list[PriceCatalogEntry]:
    """Overwrite the price of a product regardless of dates."""
    name, brand, supplier = (normalize(part) for part in key)
    entry = PriceCatalogEntry(
        name=name, brand=brand, supplier=supplier, price=price, last_loaded=on
    )
    updated = list(catalog)
    index = _index_of(updated, entry.key)
    if index < 0:
        updated.append(entry)
    else:
        updated[index] = entry
    return updated


def lookup(
    catalog: Iterable[PriceCatalogEntry], name: str, brand: str = "", supplier: str = ""
) -> PriceCatalogEntry | None:
    key = (normalize(name), normalize(brand), normalize(supplier))
    for entry in catalog:
        if entry.key == key:
            return entry
    return None


def latest_by_name(
    catalog: Iterable[PriceCatalogEntry], name: str, contains: bool = False
) -> PriceCatalogEntry | None:
    """
    Most recently loaded entry for a product name, whatever its brand or supplier.

    With ``contains`` the name is matched as a substring, e.g. every crown cap.
    """
    wanted = normalize(name)
    best: PriceCatalogEntry | None = None
    for entry in catalog:
        entry_name = normalize(entry.name)
        matched = wanted in entry_name if contains else entry_name == wanted
        if matched and (best is None or entry.last_loaded > best.last_loaded):
            best = entry
    return best


def retract(
    catalog: list[PriceCatalogEntry],
    remaining: Iterable[Movement],
    removed: Movement,
) -> list[PriceCatalogEntry]:
    """
    Return the catalog without the price set by a movement that left the log.

    The entry is recomputed in place from the priced movements that remain for
    the product, or dropped when none do. An entry holding another price or
    date, such as a manual price, is kept.
    """
    if not removed.carries_price:
        return catalog
    index = _index_of(catalog, removed.price_key)
    if index < 0:
        return catalog
    entry = catalog[index]
    if entry.price != removed.unit_price or entry.last_loaded != removed.movement_date:
        return catalog
    replacement = rebuild(m for m in remaining if m.price_key == removed.price_key)
    return catalog[:index] + replacement + catalog[index + 1 :]
