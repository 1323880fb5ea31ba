"""Brew batch, fermentation and packaging entities."""

from decimal import Decimal
from typing import Any, Literal

from pydantic import Field, field_validator

from brewledger.core.entities.base import LedgerModel
from brewledger.core.values import (
    LedgerDate,
    OptionalLedgerDate,
    OptionalQuantity,
    Quantity,
    normalize,
)


def _counter_delta(current: Decimal | None, previous: Decimal | None) -> Decimal:
    delta = (current or Decimal(0)) - (previous or Decimal(0))
    return delta if delta > 0 else Decimal(0)


class BrewHeader(LedgerModel):
    """
    Header of one production lot.

    An empty ``fermenter`` means the batch is closed and its fermenter released.
    Once ``cost_analysis_closed`` is set, inputs affecting cost are frozen.
    """

    lot: str = Field(alias="LOTTO")
    client: str = Field(default="", alias="CLIENTE")
    production_date: LedgerDate = Field(alias="DATA_PROD")
    beer_name: str = Field(default="", alias="NOME_BIRRA")
    fermenter: str = Field(default="", alias="FERMENTATORE")
    initial_plato: OptionalQuantity = Field(default=None, alias="PLATO_INIZIALE")
    final_liters: OptionalQuantity = Field(default=None, alias="LITRI_FINALI")
    brew_gas: Quantity = Field(default=Decimal(0), alias="GAS_COTTA")
    packaging_gas: Quantity = Field(default=Decimal(0), alias="GAS_CONFEZIONAMENTO")
    use_co2: bool = Field(default=False, alias="FLAG_CO2")
    use_nitrogen: bool = Field(default=False, alias="FLAG_AZOTO")
    beer_style: str = Field(default="", alias="TIPO_BIRRA")
    fermentation_type: Literal["ALTA", "BASSA", ""] = Field(
        default="", alias="TIPO_FERMENTAZIONE"
    )
    expected_fermentation_days: int | None = Field(
        default=None, alias="GIORNI_FERMENTAZIONE_PREVISTI"
    )
    notes: str = Field(default="", alias="NOTE")

    must_counter_previous: OptionalQuantity = Field(default=None, alias="mustCounterPrevious")
    must_counter_measured: OptionalQuantity = Field(default=None, alias="mustCounterMeasured")
    gas_brew_counter_previous: OptionalQuantity = Field(
        default=None, alias="gasBrewCounterPrevious"
    )
    gas_brew_counter_current: OptionalQuantity = Field(
        default=None, alias="gasBrewCounterCurrent"
    )
    gas_packaging_counter_previous: OptionalQuantity = Field(
        default=None, alias="gasPackagingCounterPrevious"
    )
    gas_packaging_counter_current: OptionalQuantity = Field(
        default=None, alias="gasPackagingCounterCurrent"
    )
    wash_water_counter_previous: OptionalQuantity = Field(
        default=None, alias="washWaterCounterPrevious"
    )
    wash_water_counter_measured: OptionalQuantity = Field(
        default=None, alias="washWaterCounterMeasured"
    )

    # Cost analysis working state
    cost_gas_type: Literal["gpl", "metano"] = Field(default="metano", alias="costAnalysisGasType")
    cost_use_storage: bool = Field(default=False, alias="costAnalysisUseStorage")
    cost_pallet_count: int = Field(default=0, alias="costAnalysisEpalCount")
    cost_use_labels: bool = Field(default=False, alias="costAnalysisUseLabels")
    cost_analysis_closed: bool = Field(default=False, alias="isCostAnalysisClosed")

    @field_validator("lot", mode="before")
    @classmethod
    def _normalize_lot(cls, value: Any) -> Any:
        if isinstance(value, str):
            return normalize(value)
        return value

    @field_validator("expected_fermentation_days", mode="before")
    @classmethod
    def _blank_days(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("cost_pallet_count", mode="before")
    @classmethod
    def _blank_pallets(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return 0
        return value

    @property
    def is_closed(self) -> bool:
        return not self.fermenter

    @property
    def brew_gas_consumption(self) -> Decimal:
        return _counter_delta(self.gas_brew_counter_current, self.gas_brew_counter_previous)

    @property
    def packaging_gas_consumption(self) -> Decimal:
        return _counter_delta(
            self.gas_packaging_counter_current, self.gas_packaging_counter_previous
        )

    @property
    def must_volume(self) -> Decimal:
        return _counter_delta(self.must_counter_measured, self.must_counter_previous)

    @property
    def wash_water(self) -> Decimal:
        return _counter_delta(self.wash_water_counter_measured, self.wash_water_counter_previous)

    def with_counters_applied(self) -> "BrewHeader":
        """Copy with the stored gas figures derived from the counters."""
        return self.model_copy(
            update={
                "brew_gas": self.brew_gas_consumption,
                "packaging_gas": self.packaging_gas_consumption,
            }
        )


# Header fields whose change alters the cost analysis
COST_INPUT_FIELDS: tuple[str, ...] = (
    "initial_plato",
    "final_liters",
    "use_co2",
    "use_nitrogen",
    "gas_brew_counter_previous",
    "gas_brew_counter_current",
    "gas_packaging_counter_previous",
    "gas_packaging_counter_current",
    "cost_gas_type",
    "cost_use_storage",
    "cost_pallet_count",
    "cost_use_labels",
)


class FermentationReading(LedgerModel):
    """Temperature and gravity of a lot on one fermentation day."""

    lot: str = Field(alias="LOTTO")
    day: int = Field(alias="GIORNO", ge=0)
    temperature: Quantity = Field(alias="TEMPERATURA")
    gravity: Quantity = Field(alias="PLATO")


class PackagingEvent(LedgerModel):
    """Packaged units of a production lot in one format."""

    packaging_date: LedgerDate = Field(alias="DATA")
    production_lot: str = Field(alias="LOTTO_PROD")
    format_code: str = Field(alias="FORMATO")
    units: int = Field(alias="QTA_UNITA")
    total_liters: Quantity = Field(alias="LITRI_TOT")
    operation_id: str = Field(alias="ID_OPERAZIONE")
    expiry_date: OptionalLedgerDate = Field(default=None, alias="DATA_SCADENZA")
