"""
Market Data Service - latest full-depth order book per product
Each record replaces the whole book for its product
"""

import logging
from collections import OrderedDict
from typing import Sequence, Tuple

from ...engine.dto.core_dtos import BidOffer, Order, OrderBook, PricingSide, Product
from ..soa.service import Service

logger = logging.getLogger(__name__)

BOOK_DEPTH = 5


def build_order_book(product: Product, prices: Sequence[float],
                     level_size_multiplier: int = 1_000_000) -> OrderBook:
    """
    Build a book from interleaved level prices bid1, ask1, ..., bid5, ask5

    Level i (1-based) carries level_size_multiplier * i on both sides.
    """
    if len(prices) != 2 * BOOK_DEPTH:
        raise ValueError(f"expected {2 * BOOK_DEPTH} level prices, got {len(prices)}")
    bids = []
    offers = []
    for level in range(BOOK_DEPTH):
        size = level_size_multiplier * (level + 1)
        bids.append(Order(prices[2 * level], size, PricingSide.BID))
        offers.append(Order(prices[2 * level + 1], size, PricingSide.OFFER))
    return OrderBook(product, tuple(bids), tuple(offers))


def _sorted_stacks(book: OrderBook) -> Tuple[Tuple[Order, ...], Tuple[Order, ...]]:
    # stable sort keeps arrival order among equal prices
    bids = tuple(sorted(book.bid_stack, key=lambda o: -o.price))
    offers = tuple(sorted(book.offer_stack, key=lambda o: o.price))
    return bids, offers


class MarketDataService(Service[str, OrderBook]):
    """Keyed on product id"""

    name = "MarketDataService"

    def __init__(self):
        super().__init__()
        self.stats.update({
            'books_processed': 0,
            'crossed_books': 0,
        })

    def process_order_book(self, book: OrderBook) -> OrderBook:
        bids, offers = _sorted_stacks(book)
        if bids != book.bid_stack or offers != book.offer_stack:
            book = OrderBook(book.product, bids, offers)

        self._store[book.product.product_id] = book
        self.stats['books_processed'] += 1
        if book.spread < 0:
            self.stats['crossed_books'] += 1
            logger.debug(f"[{self.name}] crossed book on {book.product.product_id}: spread={book.spread:.6f}")

        self.notify(book)
        return book

    def on_message(self, data: OrderBook) -> None:
        super().on_message(data)
        self.process_order_book(data)

    def get_best_bid_offer(self, product_id: str) -> BidOffer:
        return self.get_data(product_id).best_bid_offer

    def aggregate_depth(self, product_id: str) -> OrderBook:
        """Book for product_id with equal-price levels merged, sizes summed"""
        book = self.get_data(product_id)
        return OrderBook(
            book.product,
            self._merge(book.bid_stack, PricingSide.BID),
            self._merge(book.offer_stack, PricingSide.OFFER),
        )

    @staticmethod
    def _merge(stack: Sequence[Order], side: PricingSide) -> Tuple[Order, ...]:
        merged = OrderedDict()
        for order in stack:
            merged[order.price] = merged.get(order.price, 0) + order.quantity
        return tuple(Order(price, qty, side) for price, qty in merged.items())
