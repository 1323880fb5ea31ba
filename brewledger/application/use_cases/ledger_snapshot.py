"""Ledger Snapshot Use Case: every projection of a year in one detached document."""

from datetime import date

from brewledger.application.gateway import YearDatasetGateway
from brewledger.config import LedgerSettings, get_settings
from brewledger.core.entities.snapshot import LedgerSnapshot
from brewledger.core.services.beer_ledger import project_beer_stock
from brewledger.core.services.warehouse_projection import lot_stock, project


class LedgerSnapshotUseCase:
    """Fully computed projections for report and spreadsheet exporters."""

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

    async def execute(self, year: str, today: date | None = None) -> LedgerSnapshot:
        settings = self._settings or get_settings().ledger
        gateway = await self._get_gateway()
        data = await gateway.load(year)

        projection = project(data.movements, settings.stock_epsilon)
        return LedgerSnapshot(
            year=year,
            generated_on=today or date.today(),
            warehouse=sorted(projection.stock, key=lambda e: e.key),
            catalog=sorted(projection.catalog, key=lambda p: (p.category, p.name, p.brand)),
            lots=sorted(
                lot_stock(data.movements, settings.stock_epsilon),
                key=lambda lot: (lot.name, lot.lot),
            ),
            prices=sorted(data.price_catalog, key=lambda p: p.key),
            beer_stock=project_beer_stock(
                data,
                adopt_unseeded_inbound=settings.adopt_unseeded_beer_inbound,
                epsilon=settings.beer_stock_epsilon,
            ),
        )
