"""
Algo Execution - crosses the spread when the book is at its tightest
Emits an execution order only when best offer - best bid <= tolerance
"""

import logging
from abc import ABC, abstractmethod
from decimal import Decimal, ROUND_FLOOR
from typing import Callable, Optional

from ...engine.dto.core_dtos import (
    AlgoExecution,
    ExecutionOrder,
    Market,
    OrderBook,
    OrderType,
    PricingSide,
)
from ..soa.service import Service, ServiceListener
from ..utils.sequence import SequenceGenerator

logger = logging.getLogger(__name__)

# tightest observed tick is 1/128; anything up to 1/127 counts as tight
DEFAULT_TOLERANCE = 1.0 / 127.0


class SidePolicy(ABC):
    """Chooses the side of the next execution order"""

    @abstractmethod
    def choose(self, book: OrderBook, sequence_number: int) -> PricingSide:
        pass


class AlternatingSidePolicy(SidePolicy):
    """Even sequence numbers buy, odd ones sell"""

    def choose(self, book: OrderBook, sequence_number: int) -> PricingSide:
        return PricingSide.BID if sequence_number % 2 == 0 else PricingSide.OFFER


class InventorySidePolicy(SidePolicy):
    """Buy while flat or short in the product, sell while long"""

    def __init__(self, position_lookup: Callable[[str], int]):
        """
        Args:
            position_lookup: product id -> current aggregate position
        """
        self.position_lookup = position_lookup

    def choose(self, book: OrderBook, sequence_number: int) -> PricingSide:
        aggregate = self.position_lookup(book.product.product_id)
        return PricingSide.BID if aggregate <= 0 else PricingSide.OFFER


class FixedSidePolicy(SidePolicy):
    def __init__(self, side: PricingSide):
        self.side = side

    def choose(self, book: OrderBook, sequence_number: int) -> PricingSide:
        return self.side


def hidden_quantity(visible: int, ratio: float) -> int:
    """floor(visible * ratio) without float drift"""
    q = Decimal(visible) * Decimal(str(ratio))
    return int(q.to_integral_value(rounding=ROUND_FLOOR))


class AlgoExecutionService(Service[str, AlgoExecution]):
    """
    Keyed on product id; stores the last algo execution per product
    """

    name = "AlgoExecutionService"

    def __init__(self,
                 side_policy: Optional[SidePolicy] = None,
                 sequence: Optional[SequenceGenerator] = None,
                 tolerance: float = DEFAULT_TOLERANCE,
                 hidden_ratio: float = 0.9,
                 market: Market = Market.CME):
        """
        Args:
            side_policy: side chooser, alternating by default
            sequence: order id source, advanced once per emitted order
            tolerance: maximum spread that triggers an order
            hidden_ratio: hidden = floor(visible * hidden_ratio)
            market: venue the orders are routed to
        """
        super().__init__()
        self.side_policy = side_policy or AlternatingSidePolicy()
        self.sequence = sequence or SequenceGenerator()
        self.tolerance = tolerance
        self.hidden_ratio = hidden_ratio
        self.market = market
        self.stats.update({
            'books_seen': 0,
            'orders_emitted': 0,
            'orders_suppressed': 0,
        })

    def execute(self, book: OrderBook) -> Optional[AlgoExecution]:
        """
        Decide on one book

        Returns:
            the emitted AlgoExecution, or None when the spread is too wide
        """
        self.stats['books_seen'] += 1
        spread = book.best_offer.price - book.best_bid.price
        if spread > self.tolerance:
            self.stats['orders_suppressed'] += 1
            logger.debug(f"[{self.name}] {book.product.product_id} spread={spread:.6f} > tol, no order")
            return None

        seq = self.sequence.next()
        side = self.side_policy.choose(book, seq)
        # buy lifts the offer price for the bid-side size, sell hits the bid for the offer-side size
        if side is PricingSide.BID:
            price = book.best_offer.price
            visible = book.best_bid.quantity
        else:
            price = book.best_bid.price
            visible = book.best_offer.quantity

        order_id = str(seq)
        order = ExecutionOrder(
            product=book.product,
            side=side,
            order_id=order_id,
            order_type=OrderType.MARKET,
            price=price,
            visible_quantity=visible,
            hidden_quantity=hidden_quantity(visible, self.hidden_ratio),
            parent_order_id=order_id,
            is_child_order=False,
        )
        algo = AlgoExecution(order, self.market)
        self._store[book.product.product_id] = algo
        self.stats['orders_emitted'] += 1

        logger.info(
            f"[{self.name}] order {order_id}: {side.trade_side.value} {visible}+{order.hidden_quantity} "
            f"{book.product.product_id} @ {price:.6f} on {self.market.value}"
        )
        self.notify(algo)
        return algo

    def on_message(self, data: OrderBook) -> None:
        super().on_message(data)
        self.execute(data)


class AlgoExecutionListener(ServiceListener[OrderBook]):
    """MarketDataService -> AlgoExecutionService"""

    def __init__(self, algo_execution_service: AlgoExecutionService):
        self.algo_execution_service = algo_execution_service

    def process_add(self, data: OrderBook) -> None:
        self.algo_execution_service.execute(data)

    def __repr__(self) -> str:
        return "AlgoExecutionListener"
