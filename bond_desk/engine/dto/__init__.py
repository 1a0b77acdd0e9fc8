"""
Desk DTOs
"""

from .core_dtos import (
    Side,
    PricingSide,
    OrderType,
    Market,
    InquiryState,
    Product,
    Trade,
    Position,
    PV01,
    BucketedSector,
    BucketedRisk,
    Price,
    PriceStreamOrder,
    PriceStream,
    AlgoStream,
    Order,
    BidOffer,
    OrderBook,
    ExecutionOrder,
    AlgoExecution,
    Inquiry,
)

__all__ = [
    'Side',
    'PricingSide',
    'OrderType',
    'Market',
    'InquiryState',
    'Product',
    'Trade',
    'Position',
    'PV01',
    'BucketedSector',
    'BucketedRisk',
    'Price',
    'PriceStreamOrder',
    'PriceStream',
    'AlgoStream',
    'Order',
    'BidOffer',
    'OrderBook',
    'ExecutionOrder',
    'AlgoExecution',
    'Inquiry',
]
