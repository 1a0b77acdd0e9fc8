"""
Position Service - per-product position across the configured books
Positions exist for every reference product from startup; trades only move them
"""

import logging
from typing import Iterable, Sequence

from ...engine.dto.core_dtos import Position, Product, Trade
from ..soa.errors import BookNotFoundError, KeyNotFoundError, ProductNotFoundError
from ..soa.service import Service, ServiceListener

logger = logging.getLogger(__name__)


class PositionService(Service[str, Position]):
    """
    Position book keyed on product id
    """

    name = "PositionService"

    def __init__(self, products: Iterable[Product], books: Sequence[str], name: str = None):
        """
        Args:
            products: reference products, each starts flat
            books: ordered book names, fixed for the life of the service
        """
        super().__init__()
        if name:
            self.name = name
        self.books = tuple(books)
        for product in products:
            self._store[product.product_id] = Position.flat(product, self.books)

        self.stats.update({
            'trades_applied': 0,
            'lookup_misses': 0,
            'max_abs_aggregate': 0,
        })
        logger.info(f"[{self.name}] {len(self._store)} positions over books {','.join(self.books)}")

    def add_trade(self, trade: Trade) -> Position:
        """
        Apply a trade to its product/book and publish the new position

        Raises:
            ProductNotFoundError: product has no position
            BookNotFoundError: book is not configured
        """
        product_id = trade.product.product_id
        position = self._store.get(product_id)
        if position is None:
            raise ProductNotFoundError(self.name, product_id)
        if trade.book not in self.books:
            raise BookNotFoundError(self.name, trade.book)

        updated = position.with_trade(trade.book, trade.quantity, trade.side)
        self._store[product_id] = updated

        self.stats['trades_applied'] += 1
        self.stats['max_abs_aggregate'] = max(self.stats['max_abs_aggregate'], abs(updated.aggregate))

        logger.debug(
            f"[{self.name}] {product_id} {trade.book} {trade.signed_quantity:+d} "
            f"-> book={updated.get_position(trade.book)} aggregate={updated.aggregate}"
        )
        self.notify(updated)
        return updated

    def get_aggregate_position(self, product_id: str) -> int:
        return self.get_data(product_id).aggregate


class PositionServiceListener(ServiceListener[Trade]):
    """TradeBooking -> PositionService"""

    def __init__(self, position_service: PositionService):
        self.position_service = position_service

    def process_add(self, data: Trade) -> None:
        try:
            self.position_service.add_trade(data)
        except KeyNotFoundError as e:
            self.position_service.stats['lookup_misses'] += 1
            logger.warning(f"[{self.position_service.name}] trade {data.trade_id} not applied: {e}")

    def __repr__(self) -> str:
        return f"PositionServiceListener({self.position_service.name})"
