"""
InstrumentMaster - bond reference data
Static product table and risk sectors loaded at startup
"""

import logging
from datetime import date
from typing import Dict, Iterable, List, Optional

from ..engine.dto.core_dtos import BucketedSector, Product
from ..packages.soa.errors import KeyNotFoundError, ProductNotFoundError

logger = logging.getLogger(__name__)

# ticker, coupon, maturity
DEFAULT_BONDS = (
    ('B02y', 0.020, date(2026, 12, 31)),
    ('B03y', 0.025, date(2027, 12, 31)),
    ('B05y', 0.030, date(2029, 12, 31)),
    ('B07y', 0.035, date(2031, 12, 31)),
    ('B10y', 0.040, date(2034, 12, 31)),
    ('B20y', 0.045, date(2044, 12, 31)),
    ('B30y', 0.050, date(2054, 12, 31)),
)

DEFAULT_SECTORS = {
    'FrontEnd': ('B02y', 'B03y'),
    'Belly': ('B05y', 'B07y', 'B10y'),
    'LongEnd': ('B20y', 'B30y'),
}


class InstrumentMaster:
    """Holds every tradable product and the named risk sectors"""

    def __init__(self, products: Optional[Iterable[Product]] = None,
                 sectors: Optional[Dict[str, Iterable[str]]] = None):
        if products is None:
            products = [Product(ticker, ticker, coupon, maturity)
                        for ticker, coupon, maturity in DEFAULT_BONDS]
        self.instruments: Dict[str, Product] = {}
        for product in products:
            if product.product_id in self.instruments:
                raise ValueError(f"duplicate product id {product.product_id}")
            self.instruments[product.product_id] = product

        self.sectors: Dict[str, BucketedSector] = {}
        for name, ids in (DEFAULT_SECTORS if sectors is None else sectors).items():
            self.sectors[name] = BucketedSector(name, tuple(self.get_instrument(i) for i in ids))

        logger.debug(f"[InstrumentMaster] {len(self.instruments)} products, {len(self.sectors)} sectors")

    def get_instrument(self, product_id: str) -> Product:
        try:
            return self.instruments[product_id]
        except KeyError:
            raise ProductNotFoundError("InstrumentMaster", product_id) from None

    def find(self, product_id: str) -> Optional[Product]:
        return self.instruments.get(product_id)

    def get_products(self) -> List[Product]:
        return list(self.instruments.values())

    def get_tickers(self) -> List[str]:
        return [p.ticker for p in self.instruments.values()]

    def get_sector(self, name: str) -> BucketedSector:
        try:
            return self.sectors[name]
        except KeyError:
            raise KeyNotFoundError("InstrumentMaster.sectors", name) from None

    def __contains__(self, product_id: str) -> bool:
        return product_id in self.instruments

    def __len__(self) -> int:
        return len(self.instruments)
