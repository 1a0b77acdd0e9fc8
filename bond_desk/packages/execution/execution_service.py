"""
Execution Service - routes algo orders to their market and books the fills
Fills are booked back into trade booking as trades on the execution book
"""

import logging

from ...engine.dto.core_dtos import AlgoExecution, ExecutionOrder, Market, Trade
from ..booking.trade_booking import TradeBookingService
from ..soa.service import Service, ServiceListener

logger = logging.getLogger(__name__)

EXECUTION_TRADE_PREFIX = "EXEC_"


class ExecutionService(Service[str, ExecutionOrder]):
    """Keyed on order id"""

    name = "ExecutionService"

    def __init__(self):
        super().__init__()
        self.stats.update({
            'orders_executed': 0,
            'by_market': {m.value: 0 for m in Market},
        })

    def execute_order(self, order: ExecutionOrder, market: Market) -> None:
        if order.order_id in self._store:
            logger.warning(f"[{self.name}] order id {order.order_id} executed again, replacing")
        self._store[order.order_id] = order
        self.stats['orders_executed'] += 1
        self.stats['by_market'][market.value] += 1

        logger.debug(
            f"[{self.name}] {order.order_id} {order.order_type.display_name} "
            f"{order.side.value} {order.total_quantity} {order.product.product_id} on {market.value}"
        )
        self.notify(order)

    def on_message(self, data: AlgoExecution) -> None:
        super().on_message(data)
        self.execute_order(data.execution_order, data.market)


class ExecutionServiceListener(ServiceListener[AlgoExecution]):
    """AlgoExecutionService -> ExecutionService"""

    def __init__(self, execution_service: ExecutionService):
        self.execution_service = execution_service

    def process_add(self, data: AlgoExecution) -> None:
        self.execution_service.execute_order(data.execution_order, data.market)

    def __repr__(self) -> str:
        return "ExecutionServiceListener"


def execution_to_trade(order: ExecutionOrder, book: str) -> Trade:
    """
    Treat an executed order as fully filled

    Quantity is visible + hidden; a BID order is a BUY.
    """
    return Trade(
        product=order.product,
        trade_id=f"{EXECUTION_TRADE_PREFIX}{order.order_id}",
        price=order.price,
        book=book,
        quantity=order.total_quantity,
        side=order.side.trade_side,
    )


class ExecutionTradeListener(ServiceListener[ExecutionOrder]):
    """ExecutionService -> TradeBookingService (execution pipeline)"""

    def __init__(self, trade_booking_service: TradeBookingService, book: str = "TRSY1"):
        self.trade_booking_service = trade_booking_service
        self.book = book

    def process_add(self, data: ExecutionOrder) -> None:
        self.trade_booking_service.book_trade(execution_to_trade(data, self.book))

    def __repr__(self) -> str:
        return f"ExecutionTradeListener({self.book})"
