"""
Algo streaming - two-way quotes derived from internal prices, then streamed out
"""

import logging

from ...engine.dto.core_dtos import AlgoStream, Price, PriceStream, PriceStreamOrder, PricingSide
from ..soa.service import Service, ServiceListener

logger = logging.getLogger(__name__)


class AlgoStreamingService(Service[str, AlgoStream]):
    """
    Builds a PriceStream around the mid of each Price

    bid = mid - spread/2, offer = mid + spread/2, both legs with the
    configured visible/hidden size.
    """

    name = "AlgoStreamingService"

    def __init__(self, visible_size: int = 1_000_000, hidden_size: int = 1_000_000):
        super().__init__()
        self.visible_size = visible_size
        self.hidden_size = hidden_size
        self.stats['streams_built'] = 0

    def publish_price(self, price: Price) -> AlgoStream:
        half = price.bid_offer_spread / 2
        stream = PriceStream(
            product=price.product,
            bid_order=PriceStreamOrder(price.mid - half, self.visible_size, self.hidden_size, PricingSide.BID),
            offer_order=PriceStreamOrder(price.mid + half, self.visible_size, self.hidden_size, PricingSide.OFFER),
        )
        algo_stream = AlgoStream(stream)
        self._store[price.product.product_id] = algo_stream
        self.stats['streams_built'] += 1
        self.notify(algo_stream)
        return algo_stream

    def on_message(self, data: Price) -> None:
        super().on_message(data)
        self.publish_price(data)


class StreamingService(Service[str, PriceStream]):
    """Republishes quotes to its listeners (sink recorder among them)"""

    name = "StreamingService"

    def publish_price(self, stream: PriceStream) -> None:
        self._store[stream.product.product_id] = stream
        logger.debug(
            f"[{self.name}] {stream.product.product_id} "
            f"{stream.bid_order.price:.6f}/{stream.offer_order.price:.6f}"
        )
        self.notify(stream)

    def on_message(self, data: PriceStream) -> None:
        super().on_message(data)
        self.publish_price(data)


class AlgoStreamingListener(ServiceListener[Price]):
    """PricingService -> AlgoStreamingService"""

    def __init__(self, algo_streaming_service: AlgoStreamingService):
        self.algo_streaming_service = algo_streaming_service

    def process_add(self, data: Price) -> None:
        self.algo_streaming_service.publish_price(data)

    def __repr__(self) -> str:
        return "AlgoStreamingListener"


class StreamingListener(ServiceListener[AlgoStream]):
    """AlgoStreamingService -> StreamingService"""

    def __init__(self, streaming_service: StreamingService):
        self.streaming_service = streaming_service

    def process_add(self, data: AlgoStream) -> None:
        self.streaming_service.publish_price(data.price_stream)

    def __repr__(self) -> str:
        return "StreamingListener"
