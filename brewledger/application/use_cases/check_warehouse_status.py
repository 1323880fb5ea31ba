"""Check Warehouse Status Use Case: expiry reconciliation run on year load."""

from datetime import date

from brewledger.application.gateway import YearDatasetGateway
from brewledger.config import LedgerSettings, get_logger, get_settings
from brewledger.core.entities.dataset import YearDataset
from brewledger.core.entities.status import WarehouseStatus
from brewledger.core.services import expiry
from brewledger.core.services.expiry import ExpiryScan

logger = get_logger(__name__)


class CheckWarehouseStatusUseCase:
    """
    Reconcile a year against today's date.

    Despite being a status check this writes: expired lots with stock are
    discharged in full. Running it twice on the same day discharges nothing
    the second time, since the expired lots no longer hold stock.
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

    def _scan(self, data: YearDataset, today: date) -> ExpiryScan:
        settings = self._settings or get_settings().ledger
        return expiry.scan(
            data,
            today,
            warning_days=settings.expiry_warning_days,
            beer_warning_days=settings.beer_expiry_warning_days,
            epsilon=settings.stock_epsilon,
            adopt_unseeded_beer_inbound=settings.adopt_unseeded_beer_inbound,
        )

    async def execute(self, year: str, today: date | None = None) -> WarehouseStatus:
        """Execute the reconciliation and return the status report."""
        today = today or date.today()
        gateway = await self._get_gateway()

        plan = self._scan(await gateway.load(year), today)
        if plan.discharges:
            async with gateway.edit(year, "auto_discharge") as data:
                # Re-plan under the lock so a concurrent edit is not discharged twice
                plan = self._scan(data, today)
                data.movements.extend(plan.discharges)
            for lot in plan.discharged:
                logger.info(
                    "auto_discharge_applied",
                    year=year,
                    name=lot.name,
                    lot=lot.lot,
                    quantity=str(lot.quantity),
                )

        status = WarehouseStatus(
            year=year,
            checked_on=today,
            discharged=plan.discharged,
            expiring_soon=plan.expiring_soon,
            out_of_stock=plan.out_of_stock,
            expiring_beer=plan.expiring_beer,
        )
        logger.info(
            "warehouse_status_checked",
            year=year,
            discharged=len(status.discharged),
            expiring_soon=len(status.expiring_soon),
            out_of_stock=len(status.out_of_stock),
            expiring_beer=len(status.expiring_beer),
        )
        return status
