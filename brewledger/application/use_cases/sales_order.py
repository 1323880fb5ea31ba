"""Sales Order Use Case: ship the brewery's own beer to a client."""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from brewledger.application.dto.requests import SalesOrderLine, SalesOrderRequest
from brewledger.application.gateway import YearDatasetGateway
from brewledger.config import LedgerSettings, get_logger, get_settings
from brewledger.core.constants import SALES_ORDER_PREFIX
from brewledger.core.entities.beer import (
    BeerKey,
    BeerMovement,
    BeerMovementType,
    BeerStockItem,
    SalesOrder,
    SalesOrderItem,
)
from brewledger.core.exceptions import InsufficientStockError, RecordNotFoundError, ValidationError
from brewledger.core.services.beer_ledger import allocate_fifo, project_beer_stock

logger = get_logger(__name__)

CENT = Decimal("0.01")


class SalesOrderUseCase:
    """
    Create, edit and delete sales orders.

    Each shipped line is a SALE out of the brewery's own stock and a PURCHASE
    into the client's stock, both tagged with the order id. Editing an order
    drops its previous movements first, so its old quantities are available
    again to the new version.
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

    async def save(self, request: SalesOrderRequest) -> SalesOrder:
        """Create an order, or replace the one named by ``request.order_id``."""
        settings = self._settings or get_settings().ledger
        own = settings.own_client
        if request.client == own:
            raise ValidationError("client", "cannot sell to the own warehouse", request.client)

        stamp = int(datetime.now().timestamp() * 1000)
        order_id = request.order_id or f"{SALES_ORDER_PREFIX}VEND_{stamp}"

        logger.info(
            "sales_order_started", year=request.year, order_id=order_id, lines=len(request.items)
        )
        gateway = await self._get_gateway()

        async with gateway.edit(request.year, "sales_order") as data:
            if request.order_id is not None:
                if not any(o.id == order_id for o in data.sales_orders):
                    raise RecordNotFoundError("SALES_ORDERS", "id", order_id)
                data.sales_orders = [o for o in data.sales_orders if o.id != order_id]
                data.beer_movements = [
                    m for m in data.beer_movements if m.related_doc_id != order_id
                ]

            stock = project_beer_stock(
                data,
                client=own,
                adopt_unseeded_inbound=settings.adopt_unseeded_beer_inbound,
                epsilon=settings.beer_stock_epsilon,
            )
            remaining: dict[BeerKey, int] = {item.key: item.quantity for item in stock}
            items: list[SalesOrderItem] = []
            for line in request.items:
                items.extend(_allocate(line, own, stock, remaining))

            movements = []
            for index, item in enumerate(items):
                common = {
                    "movement_date": request.order_date,
                    "beer_name": item.beer_name,
                    "lot": item.lot,
                    "format_code": item.format_code,
                    "related_doc_id": order_id,
                }
                movements.append(
                    BeerMovement(
                        id=f"MOV_VEND_{stamp}_{index}_OUT",
                        type=BeerMovementType.SALE,
                        client=own,
                        quantity=-item.quantity,
                        recipient=request.client,
                        **common,
                    )
                )
                movements.append(
                    BeerMovement(
                        id=f"MOV_VEND_{stamp}_{index}_IN",
                        type=BeerMovementType.PURCHASE,
                        client=request.client,
                        quantity=item.quantity,
                        **common,
                    )
                )

            total_net = sum((item.total for item in items), Decimal(0))
            vat = (total_net * settings.vat_rate).quantize(CENT, rounding=ROUND_HALF_UP)
            order = SalesOrder(
                id=order_id,
                order_date=request.order_date,
                client=request.client,
                items=items,
                total_net=total_net,
                vat=vat,
                total_gross=total_net + vat,
            )
            data.sales_orders.append(order)
            data.beer_movements.extend(movements)

        logger.info(
            "sales_order_saved",
            year=request.year,
            order_id=order_id,
            client=request.client,
            total_gross=str(order.total_gross),
        )
        return order

    async def delete(self, year: str, order_id: str) -> SalesOrder:
        """Remove an order and give its beer back to the own warehouse."""
        gateway = await self._get_gateway()
        async with gateway.edit(year, "delete_sales_order") as data:
            order = next((o for o in data.sales_orders if o.id == order_id), None)
            if order is None:
                raise RecordNotFoundError("SALES_ORDERS", "id", order_id)
            data.sales_orders.remove(order)
            data.beer_movements = [m for m in data.beer_movements if m.related_doc_id != order_id]

        logger.info("sales_order_deleted", year=year, order_id=order_id)
        return order


def _allocate(
    line: SalesOrderLine,
    own: str,
    stock: list[BeerStockItem],
    remaining: dict[BeerKey, int],
) -> list[SalesOrderItem]:
    if line.lot:
        key = (own, line.beer_name, line.lot, line.format_code)
        available = remaining.get(key, 0)
        if line.quantity > available:
            raise InsufficientStockError(
                product=f"{line.beer_name} ({line.format_code})",
                lot=line.lot,
                requested=line.quantity,
                available=available,
            )
        remaining[key] = available - line.quantity
        splits = [(line.lot, line.quantity)]
    else:
        current = [item.model_copy(update={"quantity": remaining[item.key]}) for item in stock]
        allocation = allocate_fifo(current, own, line.beer_name, line.format_code, line.quantity)
        splits = []
        for item, taken in allocation:
            remaining[item.key] -= taken
            splits.append((item.lot, taken))

    return [
        SalesOrderItem(
            beer_name=line.beer_name,
            lot=lot,
            format_code=line.format_code,
            quantity=quantity,
            unit_price=line.unit_price,
            total=line.unit_price * quantity,
        )
        for lot, quantity in splits
    ]
