"""
Core ledger services.

Pure functions over entities: no persistence, no I/O. Application use cases
load a year, call into these and write the result back.
"""

from brewledger.core.services import (
    beer_ledger,
    cellar,
    cost_rollup,
    expiry,
    price_catalog,
    warehouse_projection,
)
from brewledger.core.services.expiry import ExpiryScan

__all__ = [
    "warehouse_projection",
    "price_catalog",
    "expiry",
    "beer_ledger",
    "cost_rollup",
    "cellar",
    "ExpiryScan",
]
