"""Year Lifecycle Use Case: create years and carry stock forward."""

from dataclasses import dataclass
from datetime import date

from brewledger.application.dto.requests import CreateYearRequest
from brewledger.application.gateway import YearDatasetGateway
from brewledger.config import LedgerSettings, get_logger, get_settings
from brewledger.core.constants import CARRY_FORWARD_INVOICE
from brewledger.core.entities.beer import InitialBeerStock
from brewledger.core.entities.dataset import YearDataset
from brewledger.core.entities.movement import Movement
from brewledger.core.services.beer_ledger import project_beer_stock
from brewledger.core.services.warehouse_projection import project

logger = get_logger(__name__)


@dataclass
class CreateYearResult:
    """Result of creating a year."""

    year: str
    created: bool
    carried_movements: int = 0
    carried_beer_lines: int = 0


def carry_forward(source: YearDataset, new_year: int, settings: LedgerSettings) -> YearDataset:
    """
    Opening dataset of ``new_year`` seeded from the closing state of ``source``.

    Every product line with stock becomes one inbound movement dated January 1
    without a supplier lot. Finished beer still in stock becomes opening beer
    stock. Master data and the price catalog are copied; quotes are not.
    """
    opening = date(new_year, 1, 1)
    movements = [
        Movement(
            movement_date=opening,
            category=entry.category,
            name=entry.name,
            brand=entry.brand,
            supplier=entry.supplier,
            quantity=entry.stock,
            reference=CARRY_FORWARD_INVOICE,
            supplier_lot="",
            production_lot="",
        )
        for entry in project(source.movements, settings.stock_epsilon).stock
        if entry.stock >= settings.stock_epsilon
    ]

    beer_stock = [
        InitialBeerStock(**item.model_dump())
        for item in project_beer_stock(
            source, adopt_unseeded_inbound=settings.adopt_unseeded_beer_inbound
        )
        if item.quantity > 0
    ]

    copied = source.model_copy(deep=True)
    return YearDataset(
        movements=movements,
        initial_beer_stock=beer_stock,
        clients=copied.clients,
        beers=copied.beers,
        fermenters=copied.fermenters,
        price_catalog=copied.price_catalog,
        cost_coefficients=copied.cost_coefficients,
    )


class YearLifecycleUseCase:
    """Create years and list the years in the store."""

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

    async def create(self, request: CreateYearRequest) -> CreateYearResult:
        """
        Create a year, optionally importing from another.

        Returns ``created=False`` and writes nothing when the year exists.
        """
        gateway = await self._get_gateway()
        if await gateway.exists(request.new_year):
            logger.info("year_already_exists", year=request.new_year)
            return CreateYearResult(year=request.new_year, created=False)

        if request.import_from:
            settings = self._settings or get_settings().ledger
            source = await gateway.load(request.import_from)
            dataset = carry_forward(source, int(request.new_year), settings)
        else:
            dataset = YearDataset()

        created = await gateway.create(request.new_year, dataset)
        result = CreateYearResult(
            year=request.new_year,
            created=created,
            carried_movements=len(dataset.movements) if created else 0,
            carried_beer_lines=len(dataset.initial_beer_stock) if created else 0,
        )
        logger.info(
            "year_created" if created else "year_already_exists",
            year=request.new_year,
            import_from=request.import_from,
            movements=result.carried_movements,
            beer_lines=result.carried_beer_lines,
        )
        return result

    async def list_years(self, today: date | None = None) -> list[str]:
        """Stored years, newest first. An empty store gets the current year."""
        gateway = await self._get_gateway()
        years = await gateway.list_years()
        if not years:
            current = str((today or date.today()).year)
            await gateway.create(current, YearDataset())
            logger.info("store_bootstrapped", year=current)
            years = [current]
        return sorted(years, reverse=True)
