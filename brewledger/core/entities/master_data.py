"""Master data carried from year to year: clients, beers, cellar, coefficients, quotes."""

from decimal import Decimal
from typing import Any, Literal

from pydantic import Field, field_validator

from brewledger.core.entities.base import LedgerModel
from brewledger.core.values import LedgerDate, OptionalQuantity, Quantity


class Client(LedgerModel):
    id: str
    name: str = Field(alias="nome")


class RecipeIngredient(LedgerModel):
    category: str = Field(alias="tipologia")
    name: str = Field(alias="nome")
    quantity: Quantity = Field(alias="qta")


class Beer(LedgerModel):
    """A beer produced for a client, optionally with its reference recipe."""

    id: str
    client_id: str = Field(alias="clienteId")
    beer_name: str = Field(alias="nomeBirra")
    style: str = Field(default="", alias="tipologia")
    initial_plato: str = Field(default="", alias="platoIniziale")
    recipe: list[RecipeIngredient] | None = Field(default=None, alias="ricetta")


class FermenterConfig(LedgerModel):
    id: str
    name: str = Field(alias="nome")
    capacity: Quantity = Field(alias="capacita")


class CostCoefficients(LedgerModel):
    """Fixed rates used by cost analyses. Missing values count as zero."""

    lpg_price_m3: OptionalQuantity = Field(default=None, alias="prezzo_gpl_mc")
    methane_price_m3: OptionalQuantity = Field(default=None, alias="prezzo_metano_mc")
    excise_coefficient: OptionalQuantity = Field(default=None, alias="coefficiente_accise")
    storage_fee: OptionalQuantity = Field(default=None, alias="spese_stoccaggio")
    pallet_cost: OptionalQuantity = Field(default=None, alias="costo_epal")
    co2_cost: OptionalQuantity = Field(default=None, alias="costo_co2")
    nitrogen_cost: OptionalQuantity = Field(default=None, alias="costo_azoto")
    management_fee_per_liter: OptionalQuantity = Field(
        default=None, alias="spese_gestione_litro"
    )
    steel_keg_wash_cost: OptionalQuantity = Field(
        default=None, alias="costo_lavaggio_fusto_acciaio"
    )
    label_cost: OptionalQuantity = Field(default=None, alias="costo_etichetta")

    def rate(self, field_name: str) -> Decimal:
        value = getattr(self, field_name)
        return value if value is not None else Decimal(0)

    def gas_price(self, gas_type: str) -> Decimal:
        if gas_type == "gpl":
            return self.rate("lpg_price_m3")
        return self.rate("methane_price_m3")


class QuoteIngredient(LedgerModel):
    """
    Ingredient line of a quote.

    ``price_ref`` points at a price catalog entry as ``NAME|BRAND|SUPPLIER``.
    """

    id: int
    price_ref: str = Field(default="", alias="priceDbId")
    quantity: OptionalQuantity = Field(default=None, alias="qta")

    @property
    def price_key(self) -> tuple[str, str, str] | None:
        parts = self.price_ref.split("|")
        if len(parts) != 3:
            return None
        return (parts[0], parts[1], parts[2])


class QuotePackaging(LedgerModel):
    id: int
    format_code: str = Field(alias="formato")
    quantity: int = Field(default=0, alias="qta")

    @field_validator("quantity", mode="before")
    @classmethod
    def _blank_quantity(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return 0
        return value


class Quote(LedgerModel):
    """Estimated cost of a batch that has not been brewed."""

    id: str
    quote_date: LedgerDate = Field(alias="date")
    client: str = Field(alias="cliente")
    beer_name: str = Field(alias="nomeBirra")
    plato: OptionalQuantity = None
    final_liters: OptionalQuantity = Field(default=None, alias="litriFinali")
    gas_used: OptionalQuantity = Field(default=None, alias="gasConsumato")
    gas_type: Literal["gpl", "metano"] = Field(default="metano", alias="gasType")
    use_co2: bool = Field(default=False, alias="useCo2")
    use_nitrogen: bool = Field(default=False, alias="useAzoto")
    use_storage: bool = Field(default=False, alias="useStorage")
    pallet_count: int = Field(default=0, alias="epalCount")
    use_labels: bool = Field(default=False, alias="useLabels")
    ingredients: list[QuoteIngredient] = Field(default_factory=list)
    packaging: list[QuotePackaging] = Field(default_factory=list)

    @field_validator("pallet_count", mode="before")
    @classmethod
    def _blank_pallets(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return 0
        return value
