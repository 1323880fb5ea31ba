"""Record Movements Use Case: append raw-material movements with stock checks."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from brewledger.application.dto.requests import GenericDischargeRequest
from brewledger.application.gateway import YearDatasetGateway
from brewledger.config import get_logger
from brewledger.core.constants import GENERIC_DISCHARGE_NOTE, GENERIC_DISCHARGE_PREFIX
from brewledger.core.entities.movement import Movement
from brewledger.core.exceptions import InsufficientStockError, ValidationError
from brewledger.core.services import price_catalog
from brewledger.core.services.cellar import check_batch_inputs
from brewledger.core.services.warehouse_projection import available_lots, check_consumption
from brewledger.core.values import normalize

logger = get_logger(__name__)

CENT = Decimal("0.01")


@dataclass
class RecordMovementsResult:
    """Result of recording movements."""

    year: str
    movements: list[Movement]
    prices_updated: int = 0


class RecordMovementsUseCase:
    """
    Append movements to the log of a year.

    Every outbound movement is checked against lot stock before anything is
    written, and movements charged to a batch must find it still open.
    Inbound movements carrying a unit price refresh the price catalog.
    """

    def __init__(self, gateway: YearDatasetGateway | None = None):
        self._gateway = gateway

    async def _get_gateway(self) -> YearDatasetGateway:
        if self._gateway is None:
            from brewledger.application.services import get_dataset_gateway

            self._gateway = await get_dataset_gateway()
        return self._gateway

    async def execute(self, year: str, movements: list[Movement]) -> RecordMovementsResult:
        """Execute record movements use case."""
        if not movements:
            raise ValidationError("movements", "no movements to record")

        logger.info("record_movements_started", year=year, count=len(movements))
        gateway = await self._get_gateway()

        async with gateway.edit(year, "record_movements") as data:
            check_batch_inputs(data, movements, consumed=movements)
            check_consumption(data.movements, movements)
            data.movements.extend(movements)
            priced = [m for m in movements if m.carries_price]
            data.price_catalog = price_catalog.rebuild(priced, data.price_catalog)

        logger.info("record_movements_complete", year=year, prices_updated=len(priced))
        return RecordMovementsResult(year=year, movements=movements, prices_updated=len(priced))

    async def discharge(self, request: GenericDischargeRequest) -> RecordMovementsResult:
        """Write off part of one supplier lot outside production."""
        gateway = await self._get_gateway()
        discharge_date = request.discharge_date or date.today()

        async with gateway.edit(request.year, "generic_discharge") as data:
            wanted_lot = normalize(request.supplier_lot)
            lot = next(
                (
                    lot
                    for lot in available_lots(data.movements, request.name)
                    if lot.lot == wanted_lot
                ),
                None,
            )
            quantity = request.quantity.quantize(CENT)
            if lot is None:
                raise InsufficientStockError(
                    product=normalize(request.name),
                    lot=wanted_lot,
                    requested=quantity,
                    available=Decimal(0),
                )

            movement = Movement(
                movement_date=discharge_date,
                category=request.category,
                name=lot.name,
                brand=lot.brand,
                supplier=lot.supplier,
                quantity=-quantity,
                reference=f"{GENERIC_DISCHARGE_PREFIX}{int(datetime.now().timestamp() * 1000)}",
                supplier_lot=lot.lot,
                production_lot=request.reason.strip() or GENERIC_DISCHARGE_NOTE,
            )
            check_consumption(data.movements, [movement])
            data.movements.append(movement)

        logger.info(
            "generic_discharge_recorded",
            year=request.year,
            name=movement.name,
            lot=movement.supplier_lot,
            quantity=str(quantity),
        )
        return RecordMovementsResult(year=request.year, movements=[movement])
