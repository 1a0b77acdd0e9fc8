"""
Pricing Service - republishes internal prices
"""

import logging

from ...engine.dto.core_dtos import Price
from ..soa.service import Service

logger = logging.getLogger(__name__)


class PricingService(Service[str, Price]):
    """Keyed on product id; keeps the latest price and fans it out"""

    name = "PricingService"

    def on_message(self, data: Price) -> None:
        super().on_message(data)
        self._store[data.product.product_id] = data
        logger.debug(
            f"[{self.name}] {data.product.product_id} mid={data.mid:.6f} spread={data.bid_offer_spread:.6f}"
        )
        self.notify(data)
