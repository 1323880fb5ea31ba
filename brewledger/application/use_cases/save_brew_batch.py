"""Save Brew Batch Use Case: header, ingredients and packaging in one write."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from math import ceil

from brewledger.application.dto.requests import (
    IngredientConsumption,
    PackagingRequest,
    SaveBrewBatchRequest,
)
from brewledger.application.gateway import YearDatasetGateway
from brewledger.config import get_logger
from brewledger.core.constants import (
    PACKAGING_OPERATION_PREFIX,
    UNKNOWN,
    PackagingFormat,
    ProductCategory,
    get_packaging_format,
)
from brewledger.core.entities.batch import COST_INPUT_FIELDS, BrewHeader, PackagingEvent
from brewledger.core.entities.dataset import YearDataset
from brewledger.core.entities.movement import Movement
from brewledger.core.entities.warehouse import LotStock
from brewledger.core.exceptions import (
    BatchClosedError,
    CostAnalysisClosedError,
    ValidationError,
)
from brewledger.core.services.cellar import occupied_fermenters
from brewledger.core.services.warehouse_projection import check_consumption, lot_stock
from brewledger.core.values import normalize

logger = get_logger(__name__)

# Header fields owned by the cost analysis commands
_COST_STATE_FIELDS = (
    "cost_gas_type",
    "cost_use_storage",
    "cost_pallet_count",
    "cost_use_labels",
    "cost_analysis_closed",
)


@dataclass
class SaveBrewBatchResult:
    """Result of saving a batch."""

    year: str
    header: BrewHeader
    created: bool
    movements: list[Movement] = field(default_factory=list)
    packaging: list[PackagingEvent] = field(default_factory=list)


class SaveBrewBatchUseCase:
    """
    Save a batch header together with the stock it consumes.

    Ingredient consumption and the bottles, kegs, cartons and caps used by new
    packaging runs become outbound movements tagged with the production lot.
    Every requirement is checked against lot stock before anything is written.
    """

    def __init__(self, gateway: YearDatasetGateway | None = None):
        self._gateway = gateway

    async def _get_gateway(self) -> YearDatasetGateway:
        if self._gateway is None:
            from brewledger.application.services import get_dataset_gateway

            self._gateway = await get_dataset_gateway()
        return self._gateway

    async def execute(self, request: SaveBrewBatchRequest) -> SaveBrewBatchResult:
        """Execute save brew batch use case."""
        header = request.header
        if not header.lot:
            raise ValidationError("lot", "production lot is required")
        if request.apply_counters:
            header = header.with_counters_applied()

        logger.info(
            "save_brew_batch_started",
            year=request.year,
            lot=header.lot,
            ingredients=len(request.ingredients),
            packaging=len(request.packaging),
        )

        gateway = await self._get_gateway()
        async with gateway.edit(request.year, "save_brew_batch") as data:
            existing = data.find_batch(header.lot)
            if existing is None and not header.fermenter:
                raise ValidationError("fermenter", "a new batch needs a fermenter", header.lot)
            if existing is not None:
                header = self._merge_existing(existing, header, request)
            self._check_fermenter(data, header)

            lots = {(lot.name, lot.lot): lot for lot in lot_stock(data.movements)}
            movements = [
                self._ingredient_movement(header, ingredient, lots)
                for ingredient in request.ingredients
            ]
            events = []
            stamp = int(datetime.now().timestamp() * 1000)
            for position, run in enumerate(request.packaging, start=1):
                operation_id = f"{PACKAGING_OPERATION_PREFIX}{stamp}"
                if len(request.packaging) > 1:
                    operation_id = f"{operation_id}_{position}"
                event, materials = self._packaging(header, run, operation_id, lots)
                events.append(event)
                movements.extend(materials)

            check_consumption(data.movements, movements)

            if existing is None:
                data.brew_headers.append(header)
            else:
                index = data.brew_headers.index(existing)
                data.brew_headers[index] = header
            data.movements.extend(movements)
            data.packaging.extend(events)

        logger.info(
            "save_brew_batch_complete",
            year=request.year,
            lot=header.lot,
            movements=len(movements),
            packaging=len(events),
        )
        return SaveBrewBatchResult(
            year=request.year,
            header=header,
            created=existing is None,
            movements=movements,
            packaging=events,
        )

    @staticmethod
    def _merge_existing(
        existing: BrewHeader, header: BrewHeader, request: SaveBrewBatchRequest
    ) -> BrewHeader:
        if existing.is_closed:
            raise BatchClosedError(existing.lot, "fermenter already released")

        merged = header.model_copy(
            update={name: getattr(existing, name) for name in _COST_STATE_FIELDS}
        )
        if existing.cost_analysis_closed:
            changed = [
                name
                for name in COST_INPUT_FIELDS
                if getattr(existing, name) != getattr(merged, name)
            ]
            if changed or request.ingredients or request.packaging:
                raise CostAnalysisClosedError(existing.lot)
        return merged

    @staticmethod
    def _check_fermenter(data: YearDataset, header: BrewHeader) -> None:
        if not header.fermenter:
            return
        configured = {normalize(f.name) for f in data.fermenters}
        if configured and normalize(header.fermenter) not in configured:
            raise ValidationError("fermenter", "fermenter is not configured", header.fermenter)
        if header.fermenter in occupied_fermenters(data, exclude_lot=header.lot):
            raise ValidationError(
                "fermenter", "fermenter is in use by another open batch", header.fermenter
            )

    @staticmethod
    def _ingredient_movement(
        header: BrewHeader,
        ingredient: IngredientConsumption,
        lots: dict[tuple[str, str], LotStock],
    ) -> Movement:
        name = normalize(ingredient.name)
        supplier_lot = normalize(ingredient.supplier_lot)
        lot = lots.get((name, supplier_lot))
        return Movement(
            movement_date=header.production_date,
            category=ingredient.category,
            name=name,
            brand=lot.brand if lot else UNKNOWN,
            supplier=lot.supplier if lot else UNKNOWN,
            quantity=-ingredient.quantity,
            reference="",
            supplier_lot=supplier_lot,
            production_lot=header.lot,
        )

    def _packaging(
        self,
        header: BrewHeader,
        run: PackagingRequest,
        operation_id: str,
        lots: dict[tuple[str, str], LotStock],
    ) -> tuple[PackagingEvent, list[Movement]]:
        fmt = get_packaging_format(run.format_code)
        if fmt is None:
            raise ValidationError("format_code", "unknown packaging format", run.format_code)

        materials = [(fmt.container_name, fmt.container_category, run.units, run.container_lot)]
        if run.use_cartons and fmt.carton_name:
            if not run.carton_lot:
                raise ValidationError("carton_lot", f"select a lot for {fmt.carton_name}")
            materials.append(
                (
                    fmt.carton_name,
                    ProductCategory.CARTONI.value,
                    ceil(run.units / fmt.units_per_carton),
                    run.carton_lot,
                )
            )
        if fmt.is_bottle:
            if not run.cap_name or not run.cap_lot:
                raise ValidationError("cap_name", "select a cap and its lot for bottle formats")
            materials.append((run.cap_name, ProductCategory.TAPPI.value, run.units, run.cap_lot))

        movements = [
            self._material_movement(header, run, operation_id, lots, *material)
            for material in materials
        ]
        event = PackagingEvent(
            packaging_date=run.packaging_date,
            production_lot=header.lot,
            format_code=fmt.code,
            units=run.units,
            total_liters=_liters(fmt, run.units),
            operation_id=operation_id,
            expiry_date=run.expiry_date,
        )
        return event, movements

    @staticmethod
    def _material_movement(
        header: BrewHeader,
        run: PackagingRequest,
        operation_id: str,
        lots: dict[tuple[str, str], LotStock],
        name: str,
        category: str,
        quantity: int,
        supplier_lot: str,
    ) -> Movement:
        name = normalize(name)
        supplier_lot = normalize(supplier_lot)
        lot = lots.get((name, supplier_lot))
        return Movement(
            movement_date=run.packaging_date,
            category=category,
            name=name,
            brand=lot.brand if lot else UNKNOWN,
            supplier=lot.supplier if lot else UNKNOWN,
            quantity=-quantity,
            reference=operation_id,
            supplier_lot=supplier_lot,
            production_lot=header.lot,
        )


def _liters(fmt: PackagingFormat, units: int) -> Decimal:
    return fmt.liters_per_unit * units
