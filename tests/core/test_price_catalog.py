"""Tests for price catalog maintenance."""

from datetime import date
from decimal import Decimal

import pytest

from brewledger.core.entities import PriceCatalogEntry
from brewledger.core.services import price_catalog


@pytest.fixture
def january(make_movement):
    return make_movement("10", unit_price="2,00", on="05/01/2024")


@pytest.fixture
def february(make_movement):
    return make_movement("10", lot="L2", unit_price="2,50", on="10/02/2024")


class TestLastWriteWins:
    def test_later_date_wins_in_log_order(self, january, february):
        catalog = price_catalog.rebuild([january, february])
        assert len(catalog) == 1
        assert catalog[0].price == Decimal("2.5")
        assert catalog[0].last_loaded == date(2024, 2, 10)

    def test_later_date_wins_in_reverse_order(self, january, february):
        catalog = price_catalog.rebuild([february, january])
        assert catalog[0].price == Decimal("2.5")
        assert catalog[0].last_loaded == date(2024, 2, 10)

    def test_same_date_later_entry_wins(self, make_movement):
        catalog = price_catalog.rebuild(
            [make_movement("1", unit_price="3"), make_movement("1", unit_price="4")]
        )
        assert catalog[0].price == Decimal(4)


def test_movements_without_price_leave_catalog_untouched(make_movement):
    catalog = [
        PriceCatalogEntry(name="MALTO PILS", price=1, last_loaded="01/01/2024"),
    ]
    assert price_catalog.apply_inbound_price(catalog, make_movement("-5")) is catalog
    assert price_catalog.apply_inbound_price(catalog, make_movement("5")) is catalog


def test_apply_returns_new_list(make_movement, january):
    catalog: list[PriceCatalogEntry] = []
    updated = price_catalog.apply_inbound_price(catalog, january)
    assert catalog == []
    assert len(updated) == 1


def test_manual_price_overrides_regardless_of_date(february):
    catalog = price_catalog.rebuild([february])
    catalog = price_catalog.set_manual_price(
        catalog, ("malto pils", "weyermann", "birra srl"), Decimal("1.9"), date(2024, 1, 1)
    )
    entry = price_catalog.lookup(catalog, "MALTO PILS", "WEYERMANN", "BIRRA SRL")
    assert entry.price == Decimal("1.9")
    assert len(catalog) == 1


def test_latest_by_name_across_suppliers(make_movement):
    catalog = price_catalog.rebuild(
        [
            make_movement("1", name="TAPPO CORONA 26MM ORO", supplier="A", unit_price="0,02",
                          on="01/01/2024", category="TAPPI"),
            make_movement("1", name="TAPPO CORONA 26MM NERO", supplier="B", unit_price="0,03",
                          on="01/03/2024", category="TAPPI"),
        ]
    )

    assert price_catalog.latest_by_name(catalog, "TAPPO CORONA") is None
    assert price_catalog.latest_by_name(catalog, "TAPPO CORONA", contains=True).price == Decimal(
        "0.03"
    )


class TestRetract:
    def test_falls_back_to_remaining_price(self, january, february):
        catalog = price_catalog.rebuild([january, february])

        catalog = price_catalog.retract(catalog, [january], february)

        assert catalog[0].price == Decimal(2)
        assert catalog[0].last_loaded == date(2024, 1, 5)

    def test_last_priced_movement_drops_entry(self, make_movement, january):
        other = make_movement("1", name="CASCADE", unit_price="30")
        catalog = price_catalog.rebuild([january, other])

        catalog = price_catalog.retract(catalog, [other], january)

        assert [entry.name for entry in catalog] == ["CASCADE"]

    def test_superseded_movement_leaves_entry(self, january, february):
        catalog = price_catalog.rebuild([january, february])
        assert price_catalog.retract(catalog, [february], january) is catalog

    def test_manual_price_kept(self, january):
        catalog = price_catalog.set_manual_price(
            price_catalog.rebuild([january]),
            ("MALTO PILS", "WEYERMANN", "BIRRA SRL"),
            Decimal("1.8"),
            date(2024, 1, 5),
        )
        assert price_catalog.retract(catalog, [], january) is catalog
