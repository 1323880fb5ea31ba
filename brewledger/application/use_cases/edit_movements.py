"""Edit Movements Use Cases: change or remove logged movements."""

from dataclasses import dataclass

from brewledger.application.gateway import YearDatasetGateway
from brewledger.config import get_logger
from brewledger.core.entities.dataset import YearDataset
from brewledger.core.entities.movement import Movement
from brewledger.core.exceptions import MovementNotFoundError, ValidationError
from brewledger.core.services import price_catalog
from brewledger.core.services.cellar import check_batch_inputs
from brewledger.core.services.warehouse_projection import check_consumption, check_edit
from brewledger.core.values import normalize

logger = get_logger(__name__)


@dataclass
class MovementEditResult:
    year: str
    removed: list[Movement]
    added: list[Movement]


def _remove(data: YearDataset, remaining: list[Movement], removed: list[Movement]) -> None:
    """Swap in the log without ``removed``, refusing overdrawn lots and frozen batches."""
    check_batch_inputs(data, removed)
    check_edit(data.movements, remaining, removed)
    for movement in removed:
        data.price_catalog = price_catalog.retract(data.price_catalog, remaining, movement)
    data.movements = remaining


class _MovementLogUseCase:
    def __init__(self, gateway: YearDatasetGateway | None = None):
        self._gateway = gateway

    async def _get_gateway(self) -> YearDatasetGateway:
        if self._gateway is None:
            from brewledger.application.services import get_dataset_gateway

            self._gateway = await get_dataset_gateway()
        return self._gateway


class UpdateMovementUseCase(_MovementLogUseCase):
    """
    Replace the movement at a position of the log.

    Both the replaced movement and its replacement are checked: the edit may
    not overdraw any lot either of them touches, nor change the inputs of a
    batch whose cost analysis is closed.
    """

    async def execute(self, year: str, index: int, movement: Movement) -> MovementEditResult:
        gateway = await self._get_gateway()

        async with gateway.edit(year, "update_movement") as data:
            if not 0 <= index < len(data.movements):
                raise MovementNotFoundError(index, len(data.movements))
            previous = data.movements[index]
            others = data.movements[:index] + data.movements[index + 1 :]
            redirected = normalize(movement.production_lot) != normalize(previous.production_lot)
            check_batch_inputs(
                data, [previous, movement], consumed=[movement] if redirected else []
            )
            # The replaced movement no longer counts against the lot
            check_consumption(others, [movement])
            updated = others[:index] + [movement] + others[index:]
            check_edit(data.movements, updated, [previous, movement])

            catalog = price_catalog.retract(data.price_catalog, others, previous)
            data.price_catalog = price_catalog.apply_inbound_price(catalog, movement)
            data.movements = updated

        logger.info("movement_updated", year=year, index=index)
        return MovementEditResult(year=year, removed=[previous], added=[movement])


class DeleteMovementUseCase(_MovementLogUseCase):
    """Remove the movement at a position of the log."""

    async def execute(self, year: str, index: int) -> MovementEditResult:
        gateway = await self._get_gateway()

        async with gateway.edit(year, "delete_movement") as data:
            if not 0 <= index < len(data.movements):
                raise MovementNotFoundError(index, len(data.movements))
            removed = data.movements[index]
            _remove(data, data.movements[:index] + data.movements[index + 1 :], [removed])

        logger.info("movement_deleted", year=year, index=index, name=removed.name)
        return MovementEditResult(year=year, removed=[removed], added=[])


class DeleteOperationMovementsUseCase(_MovementLogUseCase):
    """Remove every movement sharing one operation reference."""

    async def execute(self, year: str, reference: str) -> MovementEditResult:
        if not reference.strip():
            raise ValidationError("reference", "operation reference is required")

        gateway = await self._get_gateway()
        async with gateway.edit(year, "delete_operation_movements") as data:
            removed = [m for m in data.movements if m.reference == reference]
            if removed:
                _remove(data, [m for m in data.movements if m.reference != reference], removed)

        logger.info(
            "operation_movements_deleted", year=year, reference=reference, count=len(removed)
        )
        return MovementEditResult(year=year, removed=removed, added=[])
