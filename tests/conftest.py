"""Pytest configuration and fixtures."""

from datetime import date
from decimal import Decimal
from typing import Any

import pytest

from brewledger.application.gateway import YearDatasetGateway
from brewledger.config import LedgerSettings
from brewledger.core.entities import (
    BrewHeader,
    FermenterConfig,
    Movement,
    PackagingEvent,
    YearDataset,
)
from brewledger.core.interfaces import IYearStore


class InMemoryYearStore(IYearStore):
    """Year store keeping serialised documents, so every read is a fresh copy."""

    def __init__(self) -> None:
        self.documents: dict[str, dict[str, Any]] = {}
        self.puts = 0

    async def get(self, year: str) -> YearDataset | None:
        document = self.documents.get(year)
        if document is None:
            return None
        return YearDataset.model_validate(document)

    async def put(self, year: str, dataset: YearDataset) -> None:
        self.documents[year] = dataset.to_document()
        self.puts += 1

    async def list_years(self) -> list[str]:
        return sorted(self.documents)

    async def clear_all(self) -> None:
        self.documents.clear()

    async def replace_all(self, datasets: dict[str, YearDataset]) -> None:
        self.documents = {year: ds.to_document() for year, ds in datasets.items()}


@pytest.fixture
def store() -> InMemoryYearStore:
    return InMemoryYearStore()


@pytest.fixture
def gateway(store: InMemoryYearStore) -> YearDatasetGateway:
    return YearDatasetGateway(store)


@pytest.fixture
def ledger_settings() -> LedgerSettings:
    """Default thresholds, independent of the environment."""
    return LedgerSettings(
        stock_epsilon=Decimal("0.01"),
        beer_stock_epsilon=0,
        expiry_warning_days=30,
        beer_expiry_warning_days=90,
        own_client="ALVERESE",
        adopt_unseeded_beer_inbound=False,
        vat_rate=Decimal("0.22"),
    )


@pytest.fixture
def make_movement():
    """Factory for raw-material movements with brewery-like defaults."""

    def _make(
        quantity: str | int = "10",
        name: str = "MALTO PILS",
        lot: str = "L1",
        category: str = "MALTI",
        brand: str = "WEYERMANN",
        supplier: str = "BIRRA SRL",
        on: str | date = "05/01/2024",
        **extra: Any,
    ) -> Movement:
        return Movement(
            movement_date=on,
            category=category,
            name=name,
            brand=brand,
            supplier=supplier,
            quantity=quantity,
            supplier_lot=lot,
            **extra,
        )

    return _make


@pytest.fixture
def make_header():
    """Factory for batch headers."""

    def _make(
        lot: str = "24/001",
        fermenter: str = "F1",
        client: str = "ALVERESE",
        beer_name: str = "BIONDA",
        on: str | date = "10/01/2024",
        **extra: Any,
    ) -> BrewHeader:
        return BrewHeader(
            lot=lot,
            fermenter=fermenter,
            client=client,
            beer_name=beer_name,
            production_date=on,
            **extra,
        )

    return _make


@pytest.fixture
def make_packaging():
    def _make(
        lot: str = "24/001",
        format_code: str = "BOTT. 33CL",
        units: int = 240,
        operation_id: str = "CONF_1",
        expiry: str | None = "01/06/2025",
        on: str = "01/02/2024",
    ) -> PackagingEvent:
        from brewledger.core.constants import get_packaging_format

        fmt = get_packaging_format(format_code)
        return PackagingEvent(
            packaging_date=on,
            production_lot=lot,
            format_code=format_code,
            units=units,
            total_liters=fmt.liters_per_unit * units,
            operation_id=operation_id,
            expiry_date=expiry,
        )

    return _make


@pytest.fixture
def brewery_year(make_movement) -> YearDataset:
    """A year with malt, hops, bottles, cartons and caps in stock."""
    return YearDataset(
        movements=[
            make_movement("100", unit_price="1,20", on="05/01/2024", expiry_date="31/12/2024"),
            make_movement(
                "5", name="CASCADE", lot="H7", category="LUPPOLI", brand="YAKIMA",
                supplier="HOPS SRL", unit_price="30", expiry_date="30/06/2025",
            ),
            make_movement(
                "1000", name="BOTTIGLIA 33CL", lot="B1", category="BOTTIGLIE",
                brand="VERALLIA", supplier="VETRO SPA", unit_price="0,15",
            ),
            make_movement(
                "100", name="CARTONE X 33CL", lot="C1", category="CARTONI",
                brand="SMURFIT", supplier="CARTA SPA", unit_price="0,40",
            ),
            make_movement(
                "2000", name="TAPPO CORONA 26MM", lot="T1", category="TAPPI",
                brand="PELLICONI", supplier="TAPPI SPA", unit_price="0,02",
            ),
        ],
        fermenters=[
            FermenterConfig(id="1", name="F1", capacity="1000"),
            FermenterConfig(id="2", name="F2", capacity="1000"),
        ],
    )


@pytest.fixture
async def seeded_gateway(
    gateway: YearDatasetGateway, brewery_year: YearDataset
) -> YearDatasetGateway:
    await gateway.create("2024", brewery_year)
    return gateway
