"""Tests for ledger entities and the year aggregate."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from brewledger.core.constants import ProductCategory
from brewledger.core.entities import (
    COLLECTIONS,
    BrewHeader,
    CostCoefficients,
    Movement,
    PriceCatalogEntry,
    QuoteIngredient,
    YearDataset,
)


class TestMovement:
    def test_accepts_stored_document(self):
        movement = Movement.model_validate(
            {
                "DATA": "05/01/2024",
                "TIPOLOGIA": "luppoli",
                "NOME": "Cascade",
                "MARCA": None,
                "FORNITORE": "Hops Srl",
                "KG_LITRI_PZ": "-1,5",
                "LOTTO_FORNITORE": "h7",
            }
        )

        assert movement.category is ProductCategory.LUPPOLI
        assert movement.brand == ""
        assert movement.quantity == Decimal("-1.5")
        assert movement.is_outbound
        assert movement.lot_key == ("CASCADE", "H7")
        assert movement.product_key == ("LUPPOLI", "CASCADE", "", "HOPS SRL")

    def test_unknown_category_rejected(self):
        with pytest.raises(ValidationError):
            Movement(movement_date="05/01/2024", category="VINO", name="X", quantity=1)

    def test_carries_price_only_inbound_with_positive_price(self, make_movement):
        assert make_movement("10", unit_price="1,5").carries_price
        assert not make_movement("10", unit_price="0").carries_price
        assert not make_movement("-10", unit_price="1,5").carries_price
        assert not make_movement("10").carries_price


class TestBrewHeader:
    def test_lot_normalized(self, make_header):
        assert make_header(lot=" 24/abc ").lot == "24/ABC"

    def test_closed_when_fermenter_released(self, make_header):
        assert make_header(fermenter="").is_closed
        assert not make_header(fermenter="F1").is_closed

    def test_counter_deltas_never_negative(self, make_header):
        header = make_header(gas_brew_counter_previous="100", gas_brew_counter_current="90")
        assert header.brew_gas_consumption == 0

    def test_counters_applied(self, make_header):
        header = make_header(
            gas_brew_counter_previous="1000,5",
            gas_brew_counter_current="1012",
            gas_packaging_counter_previous=None,
            gas_packaging_counter_current="3",
        ).with_counters_applied()

        assert header.brew_gas == Decimal("11.5")
        assert header.packaging_gas == Decimal(3)

    def test_blank_fields_from_old_documents(self):
        header = BrewHeader.model_validate(
            {
                "LOTTO": "24/001",
                "DATA_PROD": "10/01/2024",
                "GIORNI_FERMENTAZIONE_PREVISTI": "",
                "costAnalysisEpalCount": "",
            }
        )
        assert header.expected_fermentation_days is None
        assert header.cost_pallet_count == 0


class TestYearDataset:
    def test_empty_document_loads(self):
        dataset = YearDataset.model_validate({})
        assert dataset.movements == []
        assert dataset.cost_coefficients == CostCoefficients()

    def test_cached_tables_ignored(self):
        dataset = YearDataset.model_validate(
            {"MAGAZZINO": [{"NOME": "X"}], "DATABASE": [], "MOVIMENTAZIONE": []}
        )
        assert "MAGAZZINO" not in dataset.to_document()

    def test_find_batch_is_case_insensitive(self, make_header):
        dataset = YearDataset(brew_headers=[make_header(lot="24/001")])
        assert dataset.find_batch(" 24/001 ") is not None
        assert dataset.find_batch("24/002") is None

    def test_document_round_trip(self, brewery_year):
        restored = YearDataset.model_validate(brewery_year.to_document())
        assert restored == brewery_year


def test_collection_key_normalizes_text():
    definition = COLLECTIONS["PRICE_DATABASE"]
    entry = PriceCatalogEntry(
        name="malto pils ", brand="weyermann", price=1, last_loaded="01/01/2024"
    )
    assert definition.key_of(entry) == ("MALTO PILS", "WEYERMANN", "")


def test_quote_ingredient_price_key():
    assert QuoteIngredient(id=1, price_ref="MALTO|W|S").price_key == ("MALTO", "W", "S")
    assert QuoteIngredient(id=2, price_ref="MALTO").price_key is None


def test_cost_coefficients_missing_rate_is_zero():
    coefficients = CostCoefficients(lpg_price_m3="0,9")
    assert coefficients.gas_price("gpl") == Decimal("0.9")
    assert coefficients.gas_price("metano") == 0
