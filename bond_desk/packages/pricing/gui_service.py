"""
GUI Service - throttled price feed to the GUI sink
At most one price per throttle window reaches the connector; anything arriving
inside the window is dropped, not queued
"""

import logging
from typing import Optional

from ...engine.dto.core_dtos import Price
from ..soa.service import Connector, Service, ServiceListener
from ..utils.clock import Clock

logger = logging.getLogger(__name__)


class GUIService(Service[str, Price]):
    """Keyed on product id; stores the last price forwarded per product"""

    name = "GUIService"

    def __init__(self, connector: Connector[Price], clock: Clock, throttle_ms: float = 300.0):
        """
        Args:
            connector: GUI sink
            clock: shared clock, monotonic reading decides the window
            throttle_ms: minimum gap between two forwarded prices
        """
        super().__init__()
        self.connector = connector
        self.clock = clock
        self.throttle_ms = throttle_ms
        self.last_publish_ms: Optional[float] = None
        self.stats.update({
            'prices_forwarded': 0,
            'prices_dropped': 0,
        })

    def provide_data(self, price: Price) -> bool:
        """
        Forward price if the throttle window has elapsed

        Returns:
            True when the price went to the connector
        """
        now = self.clock.monotonic_ms()
        if self.last_publish_ms is not None and now - self.last_publish_ms < self.throttle_ms:
            self.stats['prices_dropped'] += 1
            logger.debug(
                f"[{self.name}] drop {price.product.product_id}, "
                f"{now - self.last_publish_ms:.1f}ms since last publish"
            )
            return False

        self.last_publish_ms = now
        self._store[price.product.product_id] = price
        self.connector.publish(price)
        self.stats['prices_forwarded'] += 1
        return True

    def on_message(self, data: Price) -> None:
        super().on_message(data)
        self.provide_data(data)


class GUIListener(ServiceListener[Price]):
    """PricingService -> GUIService"""

    def __init__(self, gui_service: GUIService):
        self.gui_service = gui_service

    def process_add(self, data: Price) -> None:
        self.gui_service.provide_data(data)

    def __repr__(self) -> str:
        return "GUIListener"
