"""Unit tests for the movement edit use cases."""

from decimal import Decimal

import pytest

from brewledger.application.use_cases.edit_movements import (
    DeleteMovementUseCase,
    DeleteOperationMovementsUseCase,
    UpdateMovementUseCase,
)
from brewledger.core.exceptions import (
    BatchClosedError,
    CostAnalysisClosedError,
    InsufficientStockError,
    MovementNotFoundError,
    ValidationError,
)
from brewledger.core.services import price_catalog


class TestUpdateMovement:
    async def test_replaced_movement_no_longer_counts(self, seeded_gateway, make_movement):
        use_case = UpdateMovementUseCase(gateway=seeded_gateway)
        async with seeded_gateway.edit("2024") as data:
            data.movements.append(make_movement("-90", production_lot="24/001"))

        await use_case.execute("2024", 5, make_movement("-100", production_lot="24/001"))

        data = await seeded_gateway.load("2024")
        assert data.movements[5].quantity == Decimal(-100)

    async def test_overdraw_rejected(self, seeded_gateway, make_movement):
        use_case = UpdateMovementUseCase(gateway=seeded_gateway)
        async with seeded_gateway.edit("2024") as data:
            data.movements.append(make_movement("-90"))

        with pytest.raises(InsufficientStockError):
            await use_case.execute("2024", 5, make_movement("-101"))

    async def test_price_refreshed(self, seeded_gateway, make_movement):
        use_case = UpdateMovementUseCase(gateway=seeded_gateway)

        result = await use_case.execute(
            "2024", 0, make_movement("100", unit_price="1,25", on="05/01/2024")
        )

        assert result.removed[0].unit_price == Decimal("1.2")
        data = await seeded_gateway.load("2024")
        assert data.price_catalog[0].price == Decimal("1.25")

    async def test_position_out_of_range(self, seeded_gateway, make_movement):
        with pytest.raises(MovementNotFoundError) as exc_info:
            await UpdateMovementUseCase(gateway=seeded_gateway).execute(
                "2024", 5, make_movement()
            )
        assert exc_info.value.details == {"index": 5, "size": 5}

    async def test_shrinking_consumed_inbound_rejected(
        self, seeded_gateway, store, make_movement
    ):
        async with seeded_gateway.edit("2024") as data:
            data.movements.append(make_movement("-30", production_lot="24/001"))

        with pytest.raises(InsufficientStockError) as exc_info:
            await UpdateMovementUseCase(gateway=seeded_gateway).execute(
                "2024", 0, make_movement("10", unit_price="1,20", on="05/01/2024")
            )

        assert exc_info.value.details["available"] == "10"
        assert store.puts == 2

    async def test_inbound_moved_to_other_lot_rejected(self, seeded_gateway, make_movement):
        async with seeded_gateway.edit("2024") as data:
            data.movements.append(make_movement("-30", production_lot="24/001"))

        with pytest.raises(InsufficientStockError):
            await UpdateMovementUseCase(gateway=seeded_gateway).execute(
                "2024", 0, make_movement("100", lot="L9")
            )

    async def test_cost_closed_batch_frozen(
        self, seeded_gateway, store, make_movement, make_header
    ):
        async with seeded_gateway.edit("2024") as data:
            data.brew_headers.append(make_header(cost_analysis_closed=True))
            data.movements.append(make_movement("-10", production_lot="24/001"))

        with pytest.raises(CostAnalysisClosedError):
            await UpdateMovementUseCase(gateway=seeded_gateway).execute(
                "2024", 5, make_movement("-5", production_lot="24/001")
            )
        assert store.puts == 2

    async def test_redirect_to_released_batch_rejected(
        self, seeded_gateway, make_movement, make_header
    ):
        async with seeded_gateway.edit("2024") as data:
            data.brew_headers.append(make_header(lot="24/002", fermenter=""))
            data.movements.append(make_movement("-10", production_lot="24/001"))

        with pytest.raises(BatchClosedError):
            await UpdateMovementUseCase(gateway=seeded_gateway).execute(
                "2024", 5, make_movement("-10", production_lot="24/002")
            )

    async def test_price_falls_back_when_priced_movement_edited(
        self, seeded_gateway, make_movement
    ):
        async with seeded_gateway.edit("2024") as data:
            data.movements.append(
                make_movement("50", lot="L2", unit_price="1,50", on="01/03/2024")
            )
            data.price_catalog = price_catalog.rebuild(data.movements)

        await UpdateMovementUseCase(gateway=seeded_gateway).execute(
            "2024", 5, make_movement("50", lot="L2", on="01/03/2024")
        )

        catalog = (await seeded_gateway.load("2024")).price_catalog
        entry = price_catalog.lookup(catalog, "MALTO PILS", "WEYERMANN", "BIRRA SRL")
        assert entry.price == Decimal("1.2")


class TestDeleteMovement:
    async def test_removes_by_position(self, seeded_gateway):
        result = await DeleteMovementUseCase(gateway=seeded_gateway).execute("2024", 1)

        assert result.removed[0].name == "CASCADE"
        names = [m.name for m in (await seeded_gateway.load("2024")).movements]
        assert "CASCADE" not in names

    async def test_negative_position(self, seeded_gateway):
        with pytest.raises(MovementNotFoundError):
            await DeleteMovementUseCase(gateway=seeded_gateway).execute("2024", -1)

    async def test_consumed_inbound_kept(self, seeded_gateway, store, make_movement):
        async with seeded_gateway.edit("2024") as data:
            data.movements.append(make_movement("-30", production_lot="24/001"))

        with pytest.raises(InsufficientStockError):
            await DeleteMovementUseCase(gateway=seeded_gateway).execute("2024", 0)
        assert store.puts == 2

    async def test_cost_closed_batch_frozen(self, seeded_gateway, make_movement, make_header):
        async with seeded_gateway.edit("2024") as data:
            data.brew_headers.append(make_header(cost_analysis_closed=True))
            data.movements.append(make_movement("-10", production_lot="24/001"))

        with pytest.raises(CostAnalysisClosedError):
            await DeleteMovementUseCase(gateway=seeded_gateway).execute("2024", 5)

    async def test_price_retracted(self, seeded_gateway):
        async with seeded_gateway.edit("2024") as data:
            data.price_catalog = price_catalog.rebuild(data.movements)

        await DeleteMovementUseCase(gateway=seeded_gateway).execute("2024", 1)

        catalog = (await seeded_gateway.load("2024")).price_catalog
        assert price_catalog.lookup(catalog, "CASCADE", "YAKIMA", "HOPS SRL") is None
        assert len(catalog) == 4


class TestDeleteOperationMovements:
    async def test_removes_every_movement_of_reference(self, seeded_gateway, make_movement):
        async with seeded_gateway.edit("2024") as data:
            data.movements.extend(
                [
                    make_movement("-1", reference="CONF_1"),
                    make_movement("-2", reference="CONF_1"),
                    make_movement("-3", reference="CONF_2"),
                ]
            )

        result = await DeleteOperationMovementsUseCase(gateway=seeded_gateway).execute(
            "2024", "CONF_1"
        )

        assert len(result.removed) == 2
        references = [m.reference for m in (await seeded_gateway.load("2024")).movements]
        assert "CONF_1" not in references
        assert "CONF_2" in references

    async def test_unknown_reference_removes_nothing(self, seeded_gateway):
        result = await DeleteOperationMovementsUseCase(gateway=seeded_gateway).execute(
            "2024", "CONF_404"
        )
        assert result.removed == []

    async def test_blank_reference_rejected(self, seeded_gateway):
        with pytest.raises(ValidationError):
            await DeleteOperationMovementsUseCase(gateway=seeded_gateway).execute("2024", "  ")

    async def test_cost_closed_packaging_kept(
        self, seeded_gateway, store, make_movement, make_header
    ):
        async with seeded_gateway.edit("2024") as data:
            data.brew_headers.append(make_header(cost_analysis_closed=True))
            data.movements.append(
                make_movement(
                    "-240",
                    name="BOTTIGLIA 33CL",
                    lot="B1",
                    category="BOTTIGLIE",
                    brand="VERALLIA",
                    supplier="VETRO SPA",
                    reference="CONF_1",
                    production_lot="24/001",
                )
            )

        with pytest.raises(CostAnalysisClosedError):
            await DeleteOperationMovementsUseCase(gateway=seeded_gateway).execute(
                "2024", "CONF_1"
            )

        references = [m.reference for m in (await seeded_gateway.load("2024")).movements]
        assert "CONF_1" in references
        assert store.puts == 2
