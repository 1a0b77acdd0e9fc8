"""
File readers - decode comma-separated input records into desk events

A line that cannot be decoded is skipped with a warning and counted in
records_skipped; it never aborts the rest of the file.
"""

import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterator, List

from ...engine.dto.core_dtos import Inquiry, InquiryState, Price, Product, Side, Trade
from ...services.instrument_master import InstrumentMaster
from ..execution.market_data_service import BOOK_DEPTH, build_order_book
from ..soa.errors import MalformedRecordError
from .price_format import parse_fractional

logger = logging.getLogger(__name__)


class RecordReader(ABC):
    """
    Base reader

    Subclasses implement parse(); iter_records() and read() handle files,
    progress logging and skip accounting.
    """

    name = "RecordReader"

    def __init__(self, instrument_master: InstrumentMaster, progress_interval: int = 100_000):
        self.instrument_master = instrument_master
        self.progress_interval = progress_interval
        self.stats = {
            'lines_read': 0,
            'records_emitted': 0,
            'records_skipped': 0,
        }

    @abstractmethod
    def parse(self, line: str) -> Any:
        """
        Decode one non-empty line

        Raises:
            MalformedRecordError: line cannot be decoded
        """

    def iter_records(self, path: str) -> Iterator[Any]:
        """Yield one event per decodable line of path"""
        if not os.path.exists(path):
            logger.error(f"[{self.name}] input file not found: {path}")
            return

        logger.info(f"[{self.name}] reading {path}")
        with open(path, 'r') as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                self.stats['lines_read'] += 1
                if self.stats['lines_read'] % self.progress_interval == 0:
                    logger.info(f"[{self.name}] processed {self.stats['lines_read']} lines")

                try:
                    record = self.parse(line)
                except MalformedRecordError as e:
                    self.stats['records_skipped'] += 1
                    logger.warning(f"[{self.name}] skipping line {self.stats['lines_read']}: {e}")
                    continue

                self.stats['records_emitted'] += 1
                yield record

        logger.info(
            f"[{self.name}] finished {path}: {self.stats['records_emitted']} records, "
            f"{self.stats['records_skipped']} skipped"
        )

    def read(self, path: str, on_message: Callable[[Any], None]) -> int:
        """
        Feed every record of path to on_message

        Returns:
            number of records delivered
        """
        count = 0
        for record in self.iter_records(path):
            on_message(record)
            count += 1
        return count

    def _fields(self, line: str, minimum: int) -> List[str]:
        fields = [f.strip() for f in line.split(',')]
        if len(fields) < minimum:
            raise MalformedRecordError(f"expected at least {minimum} fields, got {len(fields)}", line)
        return fields

    def _product(self, ticker: str, line: str) -> Product:
        product = self.instrument_master.find(ticker)
        if product is None:
            raise MalformedRecordError(f"unknown ticker {ticker}", line)
        return product

    @staticmethod
    def _side(value: str, line: str) -> Side:
        try:
            return Side[value.upper()]
        except KeyError:
            raise MalformedRecordError(f"bad side {value!r}", line) from None

    def get_stats(self) -> Dict[str, int]:
        return dict(self.stats)


class TradeFileReader(RecordReader):
    """ticker,tradeId,book,quantity,price,side"""

    name = "TradeReader"

    def parse(self, line: str) -> Trade:
        ticker, trade_id, book, quantity, price, side = self._fields(line, 6)[:6]
        product = self._product(ticker, line)
        trade_side = self._side(side, line)
        px = parse_fractional(price) if '-' in price else self._number(price, line)
        try:
            return Trade(product, trade_id, px, book, int(quantity), trade_side)
        except ValueError as e:
            raise MalformedRecordError(str(e), line) from None

    @staticmethod
    def _number(value: str, line: str) -> float:
        try:
            return float(value)
        except ValueError:
            raise MalformedRecordError(f"bad price {value!r}", line) from None


class PriceFileReader(RecordReader):
    """ticker,bid,ask with fractional prices; mid and spread are derived"""

    name = "PriceReader"

    def parse(self, line: str) -> Price:
        ticker, bid_text, ask_text = self._fields(line, 3)[:3]
        product = self._product(ticker, line)
        bid = parse_fractional(bid_text)
        ask = parse_fractional(ask_text)
        try:
            return Price(product, (bid + ask) / 2.0, ask - bid)
        except ValueError as e:
            raise MalformedRecordError(str(e), line) from None


class MarketDataFileReader(RecordReader):
    """ticker,bid1,ask1,...,bid5,ask5"""

    name = "MarketDataReader"

    def __init__(self, instrument_master: InstrumentMaster, level_size_multiplier: int = 1_000_000,
                 progress_interval: int = 100_000):
        super().__init__(instrument_master, progress_interval)
        self.level_size_multiplier = level_size_multiplier

    def parse(self, line: str):
        fields = self._fields(line, 1 + 2 * BOOK_DEPTH)
        product = self._product(fields[0], line)
        prices = [parse_fractional(p) for p in fields[1:1 + 2 * BOOK_DEPTH]]
        return build_order_book(product, prices, self.level_size_multiplier)


class InquiryFileReader(RecordReader):
    """inquiryId,ticker,side[,status]; a trailing status column is ignored"""

    name = "InquiryReader"

    def __init__(self, instrument_master: InstrumentMaster, quantity: int = 1_000_000,
                 progress_interval: int = 100_000):
        super().__init__(instrument_master, progress_interval)
        self.quantity = quantity

    def parse(self, line: str) -> Inquiry:
        inquiry_id, ticker, side = self._fields(line, 3)[:3]
        product = self._product(ticker, line)
        return Inquiry(
            inquiry_id=inquiry_id,
            product=product,
            side=self._side(side, line),
            quantity=self.quantity,
            price=None,
            state=InquiryState.RECEIVED,
        )
