"""Unit tests for year creation and carry-forward."""

from datetime import date
from decimal import Decimal

import pytest

from brewledger.application.dto.requests import CreateYearRequest
from brewledger.application.use_cases.year_lifecycle import YearLifecycleUseCase, carry_forward
from brewledger.core.constants import CARRY_FORWARD_INVOICE
from brewledger.core.entities import PriceCatalogEntry, Quote, YearDataset
from brewledger.core.exceptions import YearNotFoundError


@pytest.fixture
def use_case(gateway, ledger_settings) -> YearLifecycleUseCase:
    return YearLifecycleUseCase(gateway=gateway, settings=ledger_settings)


class TestCarryForward:
    def test_closing_stock_becomes_opening_movements(
        self, brewery_year, make_movement, ledger_settings
    ):
        brewery_year.movements.append(make_movement("-87,5", production_lot="24/001"))
        brewery_year.movements.append(
            make_movement(
                "-5",
                name="CASCADE",
                lot="H7",
                category="LUPPOLI",
                brand="YAKIMA",
                supplier="HOPS SRL",
            )
        )

        opening = carry_forward(brewery_year, 2025, ledger_settings)

        carried = {m.name: m for m in opening.movements}
        assert set(carried) == {
            "MALTO PILS",
            "BOTTIGLIA 33CL",
            "CARTONE X 33CL",
            "TAPPO CORONA 26MM",
        }
        malt = carried["MALTO PILS"]
        assert malt.quantity == Decimal("12.5")
        assert malt.movement_date == date(2025, 1, 1)
        assert malt.reference == CARRY_FORWARD_INVOICE
        assert malt.supplier_lot == ""
        assert malt.brand == "WEYERMANN"

    def test_residue_below_epsilon_dropped(self, brewery_year, make_movement, ledger_settings):
        brewery_year.movements.append(make_movement("-99,995"))
        opening = carry_forward(brewery_year, 2025, ledger_settings)
        assert "MALTO PILS" not in {m.name for m in opening.movements}

    def test_master_data_copied_quotes_dropped(self, brewery_year, ledger_settings):
        brewery_year.price_catalog = [
            PriceCatalogEntry(name="MALTO PILS", price="1,2", last_loaded="05/01/2024")
        ]
        brewery_year.quotes = [
            Quote(id="Q1", quote_date="01/03/2024", client="PUB", beer_name="ROSSA")
        ]

        opening = carry_forward(brewery_year, 2025, ledger_settings)

        assert [f.name for f in opening.fermenters] == ["F1", "F2"]
        assert len(opening.price_catalog) == 1
        assert opening.quotes == []
        assert opening.brew_headers == [] and opening.packaging == []

    def test_beer_stock_carried(self, brewery_year, make_header, make_packaging, ledger_settings):
        brewery_year.brew_headers.append(make_header())
        brewery_year.packaging.append(make_packaging(units=240))

        opening = carry_forward(brewery_year, 2025, ledger_settings)

        assert [(s.lot, s.quantity) for s in opening.initial_beer_stock] == [("24/001", 240)]
        assert opening.initial_beer_stock[0].expiry_date == date(2025, 6, 1)


class TestCreate:
    async def test_empty_year(self, use_case, gateway):
        result = await use_case.create(CreateYearRequest(new_year="2024"))

        assert result.created
        assert await gateway.load("2024") == YearDataset()

    async def test_import_from_previous(self, use_case, seeded_gateway):
        result = await use_case.create(CreateYearRequest(new_year="2025", import_from="2024"))

        assert result.created
        assert result.carried_movements == 5
        data = await seeded_gateway.load("2025")
        assert all(m.reference == CARRY_FORWARD_INVOICE for m in data.movements)

    async def test_existing_year_left_alone(self, use_case, seeded_gateway, store):
        result = await use_case.create(CreateYearRequest(new_year="2024", import_from="2024"))

        assert not result.created
        assert store.puts == 1

    async def test_missing_source(self, use_case):
        with pytest.raises(YearNotFoundError):
            await use_case.create(CreateYearRequest(new_year="2025", import_from="2019"))


class TestListYears:
    async def test_empty_store_bootstrapped(self, use_case, gateway):
        assert await use_case.list_years(today=date(2026, 3, 1)) == ["2026"]
        assert await gateway.exists("2026")

    async def test_newest_first(self, use_case, gateway):
        for year in ("2023", "2025", "2024"):
            await gateway.create(year, YearDataset())
        assert await use_case.list_years() == ["2025", "2024", "2023"]
