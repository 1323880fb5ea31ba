"""Unit tests for RecordMovementsUseCase."""

from datetime import date
from decimal import Decimal

import pytest

from brewledger.application.dto.requests import GenericDischargeRequest
from brewledger.application.use_cases.record_movements import RecordMovementsUseCase
from brewledger.core.exceptions import (
    BatchClosedError,
    CostAnalysisClosedError,
    InsufficientStockError,
    ValidationError,
)


@pytest.fixture
def use_case(seeded_gateway) -> RecordMovementsUseCase:
    return RecordMovementsUseCase(gateway=seeded_gateway)


class TestExecute:
    async def test_appends_and_prices(self, use_case, seeded_gateway, make_movement):
        result = await use_case.execute(
            "2024", [make_movement("20", lot="L2", unit_price="1,35", on="01/03/2024")]
        )

        assert result.prices_updated == 1
        data = await seeded_gateway.load("2024")
        assert len(data.movements) == 6
        assert data.price_catalog[0].price == Decimal("1.35")

    async def test_consumption_within_lot(self, use_case, seeded_gateway, make_movement):
        await use_case.execute("2024", [make_movement("-40", production_lot="24/001")])

        data = await seeded_gateway.load("2024")
        assert data.movements[-1].quantity == Decimal(-40)

    async def test_overdraw_rejected_without_write(
        self, use_case, seeded_gateway, store, make_movement
    ):
        with pytest.raises(InsufficientStockError):
            await use_case.execute(
                "2024",
                [make_movement("-60"), make_movement("-60", on="06/01/2024")],
            )

        assert store.puts == 1

    async def test_older_price_does_not_replace_newer(
        self, use_case, seeded_gateway, make_movement
    ):
        newer = make_movement("5", lot="L3", unit_price="2", on="01/05/2024")
        older = make_movement("5", lot="L4", unit_price="1", on="01/04/2024")
        await use_case.execute("2024", [newer])
        await use_case.execute("2024", [older])

        data = await seeded_gateway.load("2024")
        assert data.price_catalog[0].price == Decimal(2)

    async def test_empty_list_rejected(self, use_case):
        with pytest.raises(ValidationError):
            await use_case.execute("2024", [])

    async def test_cost_closed_batch_refused(
        self, use_case, seeded_gateway, store, make_movement, make_header
    ):
        async with seeded_gateway.edit("2024") as data:
            data.brew_headers.append(make_header(cost_analysis_closed=True))

        with pytest.raises(CostAnalysisClosedError):
            await use_case.execute("2024", [make_movement("-5", production_lot="24/001")])
        assert store.puts == 2

    async def test_released_batch_takes_no_consumption(
        self, use_case, seeded_gateway, make_movement, make_header
    ):
        async with seeded_gateway.edit("2024") as data:
            data.brew_headers.append(make_header(fermenter=""))

        with pytest.raises(BatchClosedError) as exc_info:
            await use_case.execute("2024", [make_movement("-5", production_lot="24/001")])
        assert exc_info.value.details["reason"] == "fermenter already released"


class TestGenericDischarge:
    async def test_discharges_from_lot(self, use_case, seeded_gateway):
        result = await use_case.discharge(
            GenericDischargeRequest(
                year="2024",
                category="MALTI",
                name="malto pils",
                supplier_lot="l1",
                quantity="2,456",
                reason="sacco rotto",
                discharge_date="15/03/2024",
            )
        )

        movement = result.movements[0]
        assert movement.quantity == Decimal("-2.46")
        assert movement.brand == "WEYERMANN"
        assert movement.supplier_lot == "L1"
        assert movement.production_lot == "sacco rotto"
        assert movement.reference.startswith("SCARICO_GENERICO_")
        assert movement.movement_date == date(2024, 3, 15)
        assert len((await seeded_gateway.load("2024")).movements) == 6

    async def test_default_reason(self, use_case):
        result = await use_case.discharge(
            GenericDischargeRequest(
                year="2024", category="MALTI", name="MALTO PILS", supplier_lot="L1", quantity="1"
            )
        )
        assert result.movements[0].production_lot == "SCARICO GENERICO"
        assert result.movements[0].movement_date == date.today()

    async def test_unknown_lot(self, use_case):
        with pytest.raises(InsufficientStockError) as exc_info:
            await use_case.discharge(
                GenericDischargeRequest(
                    year="2024",
                    category="MALTI",
                    name="MALTO PILS",
                    supplier_lot="ZZ",
                    quantity="1",
                )
            )
        assert exc_info.value.details["available"] == "0"

    async def test_more_than_lot_holds(self, use_case):
        with pytest.raises(InsufficientStockError):
            await use_case.discharge(
                GenericDischargeRequest(
                    year="2024",
                    category="MALTI",
                    name="MALTO PILS",
                    supplier_lot="L1",
                    quantity="101",
                )
            )
