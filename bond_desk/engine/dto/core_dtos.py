"""
Core data transfer objects
Contracts exchanged between the desk services; every published value is frozen
"""

from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Dict, Optional, Tuple

from ...packages.soa.errors import BookNotFoundError


class Side(Enum):
    """Trade / inquiry side"""
    BUY = "BUY"
    SELL = "SELL"


class PricingSide(Enum):
    """Side of a quote or book level"""
    BID = "BID"
    OFFER = "OFFER"

    @property
    def trade_side(self) -> Side:
        return Side.BUY if self is PricingSide.BID else Side.SELL


class OrderType(Enum):
    FOK = "FOK"
    IOC = "IOC"
    MARKET = "MARKET"
    LIMIT = "LIMIT"
    STOP = "STOP"

    @property
    def display_name(self) -> str:
        """Name written to the execution sink, e.g. MarketOrder"""
        if self in (OrderType.FOK, OrderType.IOC):
            return f"{self.value}Order"
        return f"{self.value.capitalize()}Order"


class Market(Enum):
    """Execution venue"""
    BROKERTEC = "BROKERTEC"
    ESPEED = "ESPEED"
    CME = "CME"


class InquiryState(Enum):
    RECEIVED = "RECEIVED"
    QUOTED = "QUOTED"
    DONE = "DONE"
    REJECTED = "REJECTED"

    @property
    def is_terminal(self) -> bool:
        return self in (InquiryState.DONE, InquiryState.REJECTED)


# =============================================================================
# Reference data
# =============================================================================

@dataclass(frozen=True)
class Product:
    """Bond reference record"""
    product_id: str
    ticker: str
    coupon: float
    maturity: date


# =============================================================================
# Trades / positions / risk
# =============================================================================

@dataclass(frozen=True)
class Trade:
    """Booked trade"""
    product: Product
    trade_id: str
    price: float
    book: str
    quantity: int
    side: Side

    def __post_init__(self):
        if self.quantity <= 0:
            raise ValueError(f"trade {self.trade_id}: quantity must be positive, got {self.quantity}")

    @property
    def signed_quantity(self) -> int:
        return self.quantity if self.side is Side.BUY else -self.quantity


@dataclass(frozen=True)
class Position:
    """
    Per-book position in one product

    books and quantities are parallel tuples in configured book order.
    Updates return a new Position so listeners never share mutable state.
    """
    product: Product
    books: Tuple[str, ...]
    quantities: Tuple[int, ...]

    @classmethod
    def flat(cls, product: Product, books: Tuple[str, ...]) -> 'Position':
        return cls(product=product, books=tuple(books), quantities=(0,) * len(books))

    def get_position(self, book: str) -> int:
        try:
            return self.quantities[self.books.index(book)]
        except ValueError:
            raise BookNotFoundError("Position", book) from None

    @property
    def aggregate(self) -> int:
        """Sum over all books, computed on demand"""
        return sum(self.quantities)

    def with_trade(self, book: str, quantity: int, side: Side) -> 'Position':
        try:
            idx = self.books.index(book)
        except ValueError:
            raise BookNotFoundError("Position", book) from None
        delta = quantity if side is Side.BUY else -quantity
        updated = list(self.quantities)
        updated[idx] += delta
        return replace(self, quantities=tuple(updated))

    def as_dict(self) -> Dict[str, int]:
        return dict(zip(self.books, self.quantities))


@dataclass(frozen=True)
class PV01:
    """PV01 risk of a quantity of one product"""
    product: Product
    pv01: float
    quantity: int

    @property
    def value(self) -> float:
        return self.pv01 * self.quantity


@dataclass(frozen=True)
class BucketedSector:
    """Named group of products for risk aggregation"""
    name: str
    products: Tuple[Product, ...]


@dataclass(frozen=True)
class BucketedRisk:
    """Aggregated PV01 over a sector"""
    sector: BucketedSector
    value: float
    quantity: int


# =============================================================================
# Prices / streams
# =============================================================================

@dataclass(frozen=True)
class Price:
    """Mid price and bid-offer spread"""
    product: Product
    mid: float
    bid_offer_spread: float

    def __post_init__(self):
        if self.bid_offer_spread < 0:
            raise ValueError(f"{self.product.product_id}: negative spread {self.bid_offer_spread}")

    @property
    def bid(self) -> float:
        return self.mid - self.bid_offer_spread / 2

    @property
    def offer(self) -> float:
        return self.mid + self.bid_offer_spread / 2


@dataclass(frozen=True)
class PriceStreamOrder:
    """One leg of a two-sided quote"""
    price: float
    visible_quantity: int
    hidden_quantity: int
    side: PricingSide


@dataclass(frozen=True)
class PriceStream:
    """Two-way quote on a product"""
    product: Product
    bid_order: PriceStreamOrder
    offer_order: PriceStreamOrder


@dataclass(frozen=True)
class AlgoStream:
    """Price stream produced by the quoting algo"""
    price_stream: PriceStream

    @property
    def product(self) -> Product:
        return self.price_stream.product


# =============================================================================
# Market data / execution
# =============================================================================

@dataclass(frozen=True)
class Order:
    """One level of an order book stack"""
    price: float
    quantity: int
    side: PricingSide


@dataclass(frozen=True)
class BidOffer:
    bid_order: Order
    offer_order: Order

    @property
    def spread(self) -> float:
        return self.offer_order.price - self.bid_order.price


@dataclass(frozen=True)
class OrderBook:
    """Full depth for one product, best price at index 0 on each side"""
    product: Product
    bid_stack: Tuple[Order, ...]
    offer_stack: Tuple[Order, ...]

    def __post_init__(self):
        if not self.bid_stack or not self.offer_stack:
            raise ValueError(f"{self.product.product_id}: order book sides must be non-empty")

    @property
    def best_bid(self) -> Order:
        return self.bid_stack[0]

    @property
    def best_offer(self) -> Order:
        return self.offer_stack[0]

    @property
    def best_bid_offer(self) -> BidOffer:
        return BidOffer(self.best_bid, self.best_offer)

    @property
    def spread(self) -> float:
        return self.best_offer.price - self.best_bid.price


@dataclass(frozen=True)
class ExecutionOrder:
    """Order sent to an execution venue"""
    product: Product
    side: PricingSide
    order_id: str
    order_type: OrderType
    price: float
    visible_quantity: int
    hidden_quantity: int
    parent_order_id: str
    is_child_order: bool = False

    @property
    def total_quantity(self) -> int:
        return self.visible_quantity + self.hidden_quantity


@dataclass(frozen=True)
class AlgoExecution:
    """Execution order plus the market it targets"""
    execution_order: ExecutionOrder
    market: Market


# =============================================================================
# Inquiries
# =============================================================================

@dataclass(frozen=True)
class Inquiry:
    """Customer inquiry; price None means no quote yet"""
    inquiry_id: str
    product: Product
    side: Side
    quantity: int
    price: Optional[float] = None
    state: InquiryState = InquiryState.RECEIVED

    def transitioned(self, state: InquiryState, price: Optional[float] = None) -> 'Inquiry':
        return replace(self, state=state, price=self.price if price is None else price)
