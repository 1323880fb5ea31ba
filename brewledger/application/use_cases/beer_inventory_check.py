"""Beer Inventory Check Use Case: monthly physical count of finished beer."""

from brewledger.application.dto.requests import BeerInventoryCheckRequest
from brewledger.application.gateway import YearDatasetGateway
from brewledger.config import LedgerSettings, get_logger, get_settings
from brewledger.core.constants import INVENTORY_CHECK_PREFIX, INVENTORY_DOC_PREFIX
from brewledger.core.entities.beer import (
    BeerInventoryCheck,
    BeerInventoryCheckItem,
    BeerKey,
    BeerMovement,
    BeerMovementType,
)
from brewledger.core.exceptions import ValidationError
from brewledger.core.services.beer_ledger import project_beer_stock, units_from_count

logger = get_logger(__name__)


def check_id_for(year: int, month: int) -> str:
    return f"{INVENTORY_CHECK_PREFIX}{year}_{month:02d}"


class BeerInventoryCheckUseCase:
    """
    Compare physical counts with the ledger and book the differences.

    There is one check per month. Saving a check again for the same month
    first removes the previous check and its adjustments, so re-running a
    count replaces it instead of adding to it.
    """

    def __init__(
        self,
        gateway: YearDatasetGateway | None = None,
        settings: LedgerSettings | None = None,
    ):
        self._gateway = gateway
        self._settings = settings

    async def _get_gateway(self) -> YearDatasetGateway:
        if self._gateway is None:
            from brewledger.application.services import get_dataset_gateway

            self._gateway = await get_dataset_gateway()
        return self._gateway

    async def execute(self, request: BeerInventoryCheckRequest) -> BeerInventoryCheck:
        """Execute the count reconciliation."""
        settings = self._settings or get_settings().ledger
        check_id = check_id_for(request.check_date.year, request.check_date.month)
        related_doc = f"{INVENTORY_DOC_PREFIX}{check_id}"

        counts: dict[BeerKey, int | None] = {}
        for count in request.counts:
            key = (count.client, count.beer_name, count.lot, count.format_code)
            counts[key] = count.count

        logger.info("beer_inventory_check_started", year=request.year, check_id=check_id)
        gateway = await self._get_gateway()

        async with gateway.edit(request.year, "beer_inventory_check") as data:
            replaced = any(c.id == check_id for c in data.inventory_checks)
            data.inventory_checks = [c for c in data.inventory_checks if c.id != check_id]
            data.beer_movements = [
                m for m in data.beer_movements if m.related_doc_id != related_doc
            ]

            stock = project_beer_stock(
                data,
                adopt_unseeded_inbound=settings.adopt_unseeded_beer_inbound,
                epsilon=settings.beer_stock_epsilon,
            )
            unknown = set(counts) - {item.key for item in stock}
            if unknown:
                client, beer, lot, fmt = sorted(unknown)[0]
                raise ValidationError(
                    "counts", f"no stock line for {beer} lot {lot} ({fmt}) of {client}"
                )

            items = []
            adjustments = []
            for item in stock:
                counted = counts.get(item.key)
                physical = (
                    item.quantity
                    if counted is None
                    else units_from_count(item.format_code, counted)
                )
                difference = physical - item.quantity
                items.append(
                    BeerInventoryCheckItem(
                        client=item.client,
                        beer_name=item.beer_name,
                        lot=item.lot,
                        format_code=item.format_code,
                        calculated=item.quantity,
                        physical=physical,
                        discrepancy=difference,
                    )
                )
                if difference != 0:
                    adjustments.append(
                        BeerMovement(
                            id=f"ADJ_{check_id}_{len(adjustments)}",
                            movement_date=request.check_date,
                            type=BeerMovementType.ADJUSTMENT,
                            client=item.client,
                            beer_name=item.beer_name,
                            lot=item.lot,
                            format_code=item.format_code,
                            quantity=difference,
                            related_doc_id=related_doc,
                        )
                    )

            check = BeerInventoryCheck(id=check_id, check_date=request.check_date, items=items)
            data.inventory_checks.append(check)
            data.beer_movements.extend(adjustments)

        logger.info(
            "beer_inventory_check_complete",
            year=request.year,
            check_id=check_id,
            replaced=replaced,
            adjustments=len(adjustments),
        )
        return check
