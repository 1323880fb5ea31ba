"""Request DTOs for ledger commands.

Pydantic v2 models validating operator input before a use case touches the
store. Numeric fields accept a comma as decimal separator and dates accept
dd/mm/yyyy, like the stored documents.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from brewledger.core.constants import ProductCategory
from brewledger.core.entities.batch import BrewHeader
from brewledger.core.entities.costing import CostOptions
from brewledger.core.values import LedgerDate, OptionalLedgerDate, Quantity

YEAR_PATTERN = r"^[0-9]{4}$"


class GenericDischargeRequest(BaseModel):
    """Manual write-off of part of a supplier lot (breakage, spoilage, samples)."""

    year: str = Field(..., pattern=YEAR_PATTERN, description="Fiscal year", examples=["2024"])
    category: ProductCategory = Field(..., description="Product category", examples=["MALTI"])
    name: str = Field(..., min_length=1, description="Product name", examples=["MALTO PILS"])
    supplier_lot: str = Field(
        ..., min_length=1, description="Supplier lot to draw from", examples=["L2024-118"]
    )
    quantity: Quantity = Field(..., gt=0, description="Quantity to discharge", examples=["2,5"])
    reason: str = Field(
        default="",
        description="Free-text reason written into the production lot column",
        examples=["SACCO ROTTO"],
    )
    discharge_date: LedgerDate | None = Field(
        default=None,
        description="Movement date (default today)",
    )


class IngredientConsumption(BaseModel):
    """Ingredient drawn from one supplier lot by a brew batch."""

    category: ProductCategory = Field(..., description="Ingredient category", examples=["MALTI"])
    name: str = Field(..., min_length=1, examples=["MALTO PILS"])
    supplier_lot: str = Field(..., min_length=1, examples=["L2024-118"])
    quantity: Quantity = Field(..., gt=0, description="Consumed quantity (kg, l or pieces)")


class PackagingRequest(BaseModel):
    """One packaging run of a batch and the warehouse lots it consumes."""

    packaging_date: LedgerDate = Field(..., description="Packaging date")
    format_code: str = Field(..., description="Packaging format", examples=["BOTT. 33CL"])
    units: int = Field(..., gt=0, description="Packaged units (bottles or kegs)")
    expiry_date: OptionalLedgerDate = Field(default=None, description="Best-before date")
    container_lot: str = Field(
        ..., min_length=1, description="Supplier lot of the bottles or kegs"
    )
    use_cartons: bool = Field(default=True, description="Consume cartons for bottle formats")
    carton_lot: str | None = Field(default=None, description="Supplier lot of the cartons")
    cap_name: str | None = Field(
        default=None,
        description="Crown cap product consumed by bottle formats",
        examples=["TAPPO CORONA 26MM ORO"],
    )
    cap_lot: str | None = Field(default=None, description="Supplier lot of the caps")


class SaveBrewBatchRequest(BaseModel):
    """Batch header plus the consumption it records, saved as one operation."""

    year: str = Field(..., pattern=YEAR_PATTERN, examples=["2024"])
    header: BrewHeader = Field(..., description="Batch header (new or updated)")
    ingredients: list[IngredientConsumption] = Field(
        default_factory=list,
        description="Ingredients to consume, added to what the batch already consumed",
    )
    packaging: list[PackagingRequest] = Field(
        default_factory=list,
        description="New packaging runs",
    )
    apply_counters: bool = Field(
        default=True,
        description="Derive brew and packaging gas from the meter readings",
    )


class FermentationReadingRequest(BaseModel):
    year: str = Field(..., pattern=YEAR_PATTERN)
    lot: str = Field(..., min_length=1, examples=["24/015"])
    measured_on: LedgerDate = Field(..., description="Date of the reading")
    temperature: Quantity = Field(..., description="Temperature in Celsius")
    gravity: Quantity = Field(..., description="Gravity in degrees Plato")


class CostStateRequest(BaseModel):
    """Working options of a batch cost analysis."""

    year: str = Field(..., pattern=YEAR_PATTERN)
    lot: str = Field(..., min_length=1)
    options: CostOptions


class SalesOrderLine(BaseModel):
    beer_name: str = Field(..., min_length=1, examples=["BIONDA"])
    lot: str = Field(
        default="",
        description="Production lot shipped; blank spreads the quantity over lots by expiry",
    )
    format_code: str = Field(..., examples=["BOTT. 33CL"])
    quantity: int = Field(..., gt=0, description="Units shipped")
    unit_price: Quantity = Field(default=Decimal(0), ge=0, description="Net price per unit")


class SalesOrderRequest(BaseModel):
    """Sale of the brewery's own beer to a client.

    Passing ``order_id`` of an existing order replaces it.
    """

    year: str = Field(..., pattern=YEAR_PATTERN)
    client: str = Field(..., min_length=1, description="Destination client", examples=["PUB ROMA"])
    order_date: LedgerDate = Field(..., description="Order date")
    items: list[SalesOrderLine] = Field(..., min_length=1)
    order_id: str | None = Field(default=None, description="Order to replace")


class InventoryCount(BaseModel):
    """Physical count of one stock line; cartons for bottles, pieces otherwise."""

    client: str
    beer_name: str
    lot: str
    format_code: str
    count: int | None = Field(
        default=None,
        ge=0,
        description="Counted cartons or pieces; omitted means the line matches the ledger",
    )


class BeerInventoryCheckRequest(BaseModel):
    year: str = Field(..., pattern=YEAR_PATTERN)
    check_date: date = Field(..., description="Date of the count; the month identifies the check")
    counts: list[InventoryCount] = Field(default_factory=list)


class ProductLineRef(BaseModel):
    """Identity of a warehouse product line."""

    category: ProductCategory
    name: str = Field(..., min_length=1)
    brand: str = ""
    supplier: str = ""


class RenameProductRequest(BaseModel):
    year: str = Field(..., pattern=YEAR_PATTERN)
    line: ProductLineRef
    new_name: str = Field(..., min_length=1)
    new_brand: str = ""
    new_supplier: str = ""


class ManualPriceRequest(BaseModel):
    year: str = Field(..., pattern=YEAR_PATTERN)
    name: str = Field(..., min_length=1)
    brand: str = ""
    supplier: str = ""
    price: Quantity = Field(..., ge=0, description="Unit price")
    effective_date: LedgerDate | None = Field(default=None, description="Default today")


class CreateYearRequest(BaseModel):
    new_year: str = Field(..., pattern=YEAR_PATTERN, examples=["2025"])
    import_from: str | None = Field(
        default=None,
        pattern=YEAR_PATTERN,
        description="Year whose closing stock and master data seed the new year",
        examples=["2024"],
    )
