"""
Trade Booking Service - books trades and hands them to position keeping
Keyed on trade id
"""

import logging

from ...engine.dto.core_dtos import Trade
from ..soa.service import Service

logger = logging.getLogger(__name__)


class TradeBookingService(Service[str, Trade]):
    """Stores every booked trade and publishes it"""

    name = "TradeBookingService"

    def __init__(self, name: str = None):
        super().__init__()
        if name:
            self.name = name
        self.stats['trades_booked'] = 0
        self.stats['buy_volume'] = 0
        self.stats['sell_volume'] = 0

    def on_message(self, data: Trade) -> None:
        super().on_message(data)
        self.book_trade(data)

    def book_trade(self, trade: Trade) -> None:
        if trade.trade_id in self._store:
            logger.warning(f"[{self.name}] trade id {trade.trade_id} booked again, replacing")
        self._store[trade.trade_id] = trade

        self.stats['trades_booked'] += 1
        if trade.signed_quantity > 0:
            self.stats['buy_volume'] += trade.quantity
        else:
            self.stats['sell_volume'] += trade.quantity

        logger.debug(
            f"[{self.name}] booked {trade.trade_id}: {trade.side.value} {trade.quantity} "
            f"{trade.product.product_id} @ {trade.price} in {trade.book}"
        )
        self.notify(trade)
