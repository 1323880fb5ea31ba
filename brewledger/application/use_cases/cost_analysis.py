"""Cost Analysis Use Case: batch and quote cost rollups."""

from brewledger.application.gateway import YearDatasetGateway
from brewledger.config import get_logger
from brewledger.core.entities.costing import CostAnalysis, CostOptions
from brewledger.core.entities.master_data import Quote
from brewledger.core.exceptions import BatchNotFoundError, RecordNotFoundError
from brewledger.core.services import cost_rollup

logger = get_logger(__name__)


class CostAnalysisUseCase:
    """Read-only cost analyses over the current state of a year."""

    def __init__(self, gateway: YearDatasetGateway | None = None):
        self._gateway = gateway

    async def _get_gateway(self) -> YearDatasetGateway:
        if self._gateway is None:
            from brewledger.application.services import get_dataset_gateway

            self._gateway = await get_dataset_gateway()
        return self._gateway

    async def analyse_batch(
        self, year: str, lot: str, options: CostOptions | None = None
    ) -> CostAnalysis:
        """
        Cost of a production lot.

        ``options`` previews a variation of the saved working state; once the
        analysis is closed the saved state is always used.
        """
        gateway = await self._get_gateway()
        data = await gateway.load(year)
        header = data.find_batch(lot)
        if header is None:
            raise BatchNotFoundError(lot, year)
        if header.cost_analysis_closed:
            options = None

        analysis = cost_rollup.analyse_batch(data, lot, options)
        if analysis.missing_prices:
            logger.warning(
                "cost_analysis_missing_prices",
                year=year,
                lot=header.lot,
                missing=analysis.missing_prices,
            )
        return analysis

    async def analyse_quote(self, year: str, quote_id: str) -> CostAnalysis:
        gateway = await self._get_gateway()
        data = await gateway.load(year)
        quote = next((q for q in data.quotes if q.id == quote_id), None)
        if quote is None:
            raise RecordNotFoundError("QUOTES", "id", quote_id)
        return cost_rollup.analyse_quote(data, quote)

    async def estimate(self, year: str, quote: Quote) -> CostAnalysis:
        """Cost of a quote that has not been saved, priced with the year's catalog."""
        gateway = await self._get_gateway()
        return cost_rollup.analyse_quote(await gateway.load(year), quote)
