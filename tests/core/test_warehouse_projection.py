"""Tests for the warehouse projection fold."""

import random
from decimal import Decimal

import pytest

from brewledger.core.exceptions import InsufficientStockError
from brewledger.core.services.warehouse_projection import (
    available_lots,
    check_consumption,
    check_edit,
    lot_balances,
    lot_stock,
    project,
)


class TestProject:
    def test_sums_signed_quantities_per_product_line(self, make_movement):
        projection = project(
            [
                make_movement("100", lot="L1"),
                make_movement("50", lot="L2"),
                make_movement("-30", lot="L1"),
            ]
        )

        entry = projection.stock_for("MALTI", "MALTO PILS", "WEYERMANN", "BIRRA SRL")
        assert entry is not None
        assert entry.stock == Decimal(120)

    def test_brand_and_supplier_split_lines(self, make_movement):
        projection = project(
            [make_movement("10", brand="A"), make_movement("10", lot="L2", brand="B")]
        )
        assert len(projection.stock) == 2

    def test_consumed_lines_dropped(self, make_movement):
        projection = project([make_movement("10"), make_movement("-9,995")])
        assert projection.stock == []

    def test_names_matched_case_insensitively(self, make_movement):
        projection = project([make_movement("10", name="malto pils"), make_movement("-4")])
        assert projection.stock[0].stock == Decimal(6)

    def test_catalog_keeps_first_inbound_per_name_and_brand(self, make_movement):
        projection = project(
            [
                make_movement("10", supplier="FIRST"),
                make_movement("10", supplier="SECOND"),
                make_movement("-1", name="ACIDO", category="ADDITIVI"),
            ]
        )

        assert [(p.name, p.supplier) for p in projection.catalog] == [("MALTO PILS", "FIRST")]


class TestLotStock:
    def test_threshold_is_inclusive(self, make_movement):
        lots = lot_stock([make_movement("10", lot="A"), make_movement("-9,99", lot="A")])
        assert [(lot.lot, lot.stock) for lot in lots] == [("A", Decimal("0.01"))]

    def test_below_threshold_hidden(self, make_movement):
        assert lot_stock([make_movement("10", lot="A"), make_movement("-9,995", lot="A")]) == []

    def test_lotless_movements_skipped(self, make_movement):
        assert lot_balances([make_movement("10", lot="")]) == {}

    def test_details_from_first_inbound(self, make_movement):
        lots = lot_stock([make_movement("10", lot="A", brand="X", supplier="Y")])
        assert (lots[0].brand, lots[0].supplier) == ("X", "Y")

    def test_available_lots_by_name(self, make_movement):
        movements = [make_movement("10", lot="A"), make_movement("5", name="CASCADE", lot="H")]
        assert [lot.lot for lot in available_lots(movements, "cascade")] == ["H"]


class TestCheckConsumption:
    def test_within_stock_passes(self, make_movement):
        check_consumption([make_movement("100")], [make_movement("-100")])

    def test_exceeding_lot_rejected(self, make_movement):
        with pytest.raises(InsufficientStockError) as exc_info:
            check_consumption([make_movement("100")], [make_movement("-100,5")])

        assert exc_info.value.details["lot"] == "L1"
        assert exc_info.value.details["available"] == "100"

    def test_requests_on_same_lot_add_up(self, make_movement):
        with pytest.raises(InsufficientStockError):
            check_consumption(
                [make_movement("100")], [make_movement("-60"), make_movement("-50")]
            )

    def test_unknown_lot_has_nothing(self, make_movement):
        with pytest.raises(InsufficientStockError):
            check_consumption([make_movement("100")], [make_movement("-1", lot="ZZ")])

    def test_lotless_request_draws_on_product_line(self, make_movement):
        carried = make_movement("12,5", lot="")
        check_consumption([carried], [make_movement("-12,5", lot="")])
        with pytest.raises(InsufficientStockError):
            check_consumption([carried], [make_movement("-13", lot="")])

    def test_inbound_requests_ignored(self, make_movement):
        check_consumption([], [make_movement("10")])


class TestCheckEdit:
    def test_shrinking_consumed_inbound_rejected(self, make_movement):
        inbound, drawn = make_movement("100"), make_movement("-30")
        smaller = make_movement("10")

        with pytest.raises(InsufficientStockError) as exc_info:
            check_edit([inbound, drawn], [smaller, drawn], [inbound, smaller])

        assert exc_info.value.details["lot"] == "L1"
        assert exc_info.value.details["requested"] == "30"
        assert exc_info.value.details["available"] == "10"

    def test_moving_inbound_to_other_lot_rejected(self, make_movement):
        inbound, drawn = make_movement("100"), make_movement("-30")
        moved = make_movement("100", lot="L9")

        with pytest.raises(InsufficientStockError):
            check_edit([inbound, drawn], [moved, drawn], [inbound, moved])

    def test_lotless_product_line_checked(self, make_movement):
        inbound, drawn = make_movement("20", lot=""), make_movement("-15", lot="")

        with pytest.raises(InsufficientStockError) as exc_info:
            check_edit([inbound, drawn], [drawn], [inbound])

        assert exc_info.value.details["lot"] == ""

    def test_removing_unconsumed_inbound_passes(self, make_movement):
        first, second = make_movement("100"), make_movement("50", lot="L2")
        check_edit([first, second], [first], [second])

    def test_line_already_short_may_improve(self, make_movement):
        overdrawn = [make_movement("10"), make_movement("-30"), make_movement("-5")]
        check_edit(overdrawn, overdrawn[:2], [overdrawn[2]])


def test_accepted_sequences_never_go_negative(make_movement):
    rng = random.Random(7)
    log = []
    for _ in range(300):
        lot = rng.choice(["A", "B", "C"])
        amount = Decimal(rng.randint(1, 400)) / 10
        if rng.random() < 0.4:
            log.append(make_movement(amount, lot=lot))
            continue
        request = make_movement(-amount, lot=lot)
        try:
            check_consumption(log, [request])
        except InsufficientStockError:
            continue
        log.append(request)

    assert all(balance >= 0 for balance in lot_balances(log).values())
