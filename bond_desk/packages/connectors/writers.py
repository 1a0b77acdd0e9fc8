"""
File sinks - append one formatted, timestamp-prefixed line per published value

The destination is truncated when the sink opens. Floats are written with six
significant digits.
"""

import logging
import os
from typing import Callable, Dict, Optional, Sequence

from ...engine.dto.core_dtos import (
    ExecutionOrder,
    Inquiry,
    Position,
    PriceStream,
    Price,
    PV01,
)
from ..soa.errors import SinkUnavailableError
from ..soa.service import Connector, V
from ..utils.clock import Clock

logger = logging.getLogger(__name__)


def fmt_float(value: float) -> str:
    return '%g' % value


def format_position(position: Position, books: Optional[Sequence[str]] = None) -> str:
    """ticker,book1,...,bookN,aggregate"""
    books = position.books if books is None else books
    fields = [position.product.ticker]
    fields.extend(str(position.get_position(b)) for b in books)
    fields.append(str(position.aggregate))
    return ','.join(fields)


def format_risk(pv01: PV01) -> str:
    return f"{pv01.product.ticker},{fmt_float(pv01.value)}"


def format_gui_price(price: Price) -> str:
    return f"{price.product.ticker},{fmt_float(price.mid)},{fmt_float(price.bid_offer_spread)}"


def format_stream(stream: PriceStream) -> str:
    return f"{stream.product.ticker},{fmt_float(stream.bid_order.price)},{fmt_float(stream.offer_order.price)}"


def format_execution(order: ExecutionOrder) -> str:
    return ','.join((
        order.product.ticker,
        f"TID_{order.order_id}",
        order.order_type.display_name,
        order.side.trade_side.value,
        fmt_float(order.price),
        str(order.visible_quantity),
        str(order.hidden_quantity),
    ))


def format_inquiry(inquiry: Inquiry) -> str:
    """An unquoted inquiry has an empty price field"""
    price = '' if inquiry.price is None else fmt_float(inquiry.price)
    return ','.join((
        f"TID_{inquiry.inquiry_id}",
        inquiry.product.ticker,
        inquiry.side.value,
        price,
        inquiry.state.value,
    ))


class FileSink(Connector[V]):
    """
    Append-only text sink

    Raises:
        SinkUnavailableError: at construction, when path cannot be opened
    """

    def __init__(self, path: str, formatter: Callable[[V], str], clock: Clock, name: str = None):
        self.path = path
        self.formatter = formatter
        self.clock = clock
        self.name = name or os.path.basename(path)
        self.stats = {
            'records_written': 0,
        }

        try:
            directory = os.path.dirname(path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            self._file = open(path, 'w')
        except OSError as e:
            raise SinkUnavailableError(f"[{self.name}] cannot open {path}: {e}") from e
        logger.debug(f"[{self.name}] opened {path}")

    def publish(self, data: V) -> None:
        self._file.write(f"{self.clock.epoch_ms()},{self.formatter(data)}\n")
        self.stats['records_written'] += 1

    def flush(self) -> None:
        if not self._file.closed:
            self._file.flush()

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()
            logger.debug(f"[{self.name}] closed {self.path}, {self.stats['records_written']} records")

    @property
    def closed(self) -> bool:
        return self._file.closed

    def __enter__(self) -> 'FileSink[V]':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def get_stats(self) -> Dict[str, int]:
        return dict(self.stats)
