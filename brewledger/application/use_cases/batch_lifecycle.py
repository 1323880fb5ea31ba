"""Batch Lifecycle Use Case: readings, closure, packaging undo and cost state."""

from dataclasses import dataclass

from brewledger.application.dto.requests import CostStateRequest, FermentationReadingRequest
from brewledger.application.gateway import YearDatasetGateway
from brewledger.config import get_logger
from brewledger.core.entities.batch import BrewHeader, FermentationReading, PackagingEvent
from brewledger.core.entities.dataset import YearDataset
from brewledger.core.entities.master_data import FermenterConfig
from brewledger.core.entities.movement import Movement
from brewledger.core.exceptions import (
    BatchClosedError,
    BatchNotFoundError,
    CostAnalysisClosedError,
    PackagingNotFoundError,
    ValidationError,
)
from brewledger.core.services.cellar import available_fermenters, fermentation_day

logger = get_logger(__name__)


@dataclass
class PackagingUndone:
    """A removed packaging run and the material movements it had consumed."""

    event: PackagingEvent
    movements: list[Movement]


def _require_batch(data: YearDataset, year: str, lot: str) -> tuple[int, BrewHeader]:
    header = data.find_batch(lot)
    if header is None:
        raise BatchNotFoundError(lot, year)
    return data.brew_headers.index(header), header


class BatchLifecycleUseCase:
    """Commands on an existing batch after its first save."""

    def __init__(self, gateway: YearDatasetGateway | None = None):
        self._gateway = gateway

    async def _get_gateway(self) -> YearDatasetGateway:
        if self._gateway is None:
            from brewledger.application.services import get_dataset_gateway

            self._gateway = await get_dataset_gateway()
        return self._gateway

    async def record_reading(self, request: FermentationReadingRequest) -> FermentationReading:
        """Store a fermentation reading; a second reading on the same day replaces the first."""
        gateway = await self._get_gateway()
        async with gateway.edit(request.year, "fermentation_reading") as data:
            _, header = _require_batch(data, request.year, request.lot)
            if header.is_closed:
                raise BatchClosedError(header.lot, "fermenter already released")
            reading = FermentationReading(
                lot=header.lot,
                day=fermentation_day(header.production_date, request.measured_on),
                temperature=request.temperature,
                gravity=request.gravity,
            )
            data.fermentation = [
                r
                for r in data.fermentation
                if not (r.lot.strip().upper() == header.lot and r.day == reading.day)
            ]
            data.fermentation.append(reading)

        logger.info("fermentation_reading_recorded", lot=reading.lot, day=reading.day)
        return reading

    async def readings(self, year: str, lot: str) -> list[FermentationReading]:
        gateway = await self._get_gateway()
        data = await gateway.load(year)
        _, header = _require_batch(data, year, lot)
        found = [r for r in data.fermentation if r.lot.strip().upper() == header.lot]
        return sorted(found, key=lambda r: r.day)

    async def close(self, year: str, lot: str) -> BrewHeader:
        """Close a batch and release its fermenter."""
        gateway = await self._get_gateway()
        async with gateway.edit(year, "close_batch") as data:
            index, header = _require_batch(data, year, lot)
            if header.is_closed:
                raise ValidationError("fermenter", "no fermenter assigned to this batch", lot)
            released = header.fermenter
            header = header.model_copy(update={"fermenter": ""})
            data.brew_headers[index] = header

        logger.info("batch_closed", year=year, lot=header.lot, fermenter=released)
        return header

    async def available_fermenters(
        self, year: str, lot: str | None = None
    ) -> list[FermenterConfig]:
        """Fermenters free for ``lot``, which keeps its own fermenter."""
        gateway = await self._get_gateway()
        return available_fermenters(await gateway.load(year), exclude_lot=lot)

    async def undo_packaging(
        self, year: str, lot: str, operation_id: str | None = None
    ) -> PackagingUndone:
        """
        Remove a saved packaging run and give back its materials.

        Without ``operation_id`` the most recent run of the batch is undone.
        """
        gateway = await self._get_gateway()
        async with gateway.edit(year, "undo_packaging") as data:
            _, header = _require_batch(data, year, lot)
            if header.is_closed:
                raise BatchClosedError(header.lot, "fermenter already released")
            if header.cost_analysis_closed:
                raise CostAnalysisClosedError(header.lot)

            runs = data.packaging_for(header.lot)
            if operation_id is None:
                if not runs:
                    raise PackagingNotFoundError(f"{header.lot} (no packaging)")
                target = runs[-1]
            else:
                target = next((r for r in runs if r.operation_id == operation_id), None)
                if target is None:
                    raise PackagingNotFoundError(operation_id)

            removed = [m for m in data.movements if m.reference == target.operation_id]
            data.movements = [m for m in data.movements if m.reference != target.operation_id]
            data.packaging.remove(target)

        logger.info(
            "packaging_undone",
            year=year,
            lot=header.lot,
            operation_id=target.operation_id,
            movements=len(removed),
        )
        return PackagingUndone(event=target, movements=removed)

    async def save_cost_state(self, request: CostStateRequest) -> BrewHeader:
        """Store the working options of the batch cost analysis."""
        gateway = await self._get_gateway()
        async with gateway.edit(request.year, "save_cost_state") as data:
            index, header = _require_batch(data, request.year, request.lot)
            if header.cost_analysis_closed:
                raise CostAnalysisClosedError(header.lot)
            options = request.options
            header = header.model_copy(
                update={
                    "cost_gas_type": options.gas_type,
                    "cost_use_storage": options.use_storage,
                    "cost_pallet_count": options.pallet_count,
                    "cost_use_labels": options.use_labels,
                }
            )
            data.brew_headers[index] = header
        return header

    async def close_cost_analysis(self, year: str, lot: str) -> BrewHeader:
        """Freeze every input of the batch cost analysis. There is no reopening."""
        gateway = await self._get_gateway()
        async with gateway.edit(year, "close_cost_analysis") as data:
            index, header = _require_batch(data, year, lot)
            if header.cost_analysis_closed:
                raise CostAnalysisClosedError(header.lot)
            header = header.model_copy(update={"cost_analysis_closed": True})
            data.brew_headers[index] = header

        logger.info("cost_analysis_closed", year=year, lot=header.lot)
        return header
