"""
Sample data generator - random input files for the four desk pipelines
Prices stay on the 99/100 handles so they round-trip through the fractional format
"""

import logging
import os
from typing import Dict, Optional, Sequence

import numpy as np

from ..connectors.price_format import format_fractional

logger = logging.getLogger(__name__)

TICKERS = ('B02y', 'B03y', 'B05y', 'B07y', 'B10y', 'B20y', 'B30y')
BOOKS = ('TRSY1', 'TRSY2', 'TRSY3')
SIDES = ('BUY', 'SELL')

BASE_HANDLE = 99
TICKS_PER_POINT = 256
MAX_TICKS = 2 * TICKS_PER_POINT          # 99-00 .. 100-31+7
STREAM_SPREAD_TICKS = (2, 4, 8, 16, 32)  # 1/128 .. 1/8
TOP_SPREAD_TICKS = (2, 4, 8)             # 1/128 .. 1/32
LEVEL_STEP_TICKS = 4                     # 1/64 per level


def _price(ticks: int) -> str:
    return format_fractional(BASE_HANDLE + ticks / TICKS_PER_POINT)


class DataGenerator:
    """Seeded generator; the same seed writes the same files"""

    def __init__(self, seed: Optional[int] = None, tickers: Sequence[str] = TICKERS,
                 books: Sequence[str] = BOOKS):
        self.rng = np.random.default_rng(seed)
        self.tickers = tuple(tickers)
        self.books = tuple(books)

    def _pick(self, values: Sequence):
        return values[int(self.rng.integers(len(values)))]

    def trade_lines(self, count: int):
        for i in range(1, count + 1):
            quantity = int(self.rng.integers(1, 6)) * 1_000_000
            # whole 64ths, as booked trades are quoted
            ticks = int(self.rng.integers(0, MAX_TICKS // 4)) * 4
            yield ','.join((
                self._pick(self.tickers),
                f"TradeId{i}",
                self._pick(self.books),
                str(quantity),
                _price(ticks),
                self._pick(SIDES),
            ))

    def price_lines(self, count: int):
        for _ in range(count):
            spread = int(self.rng.choice(STREAM_SPREAD_TICKS))
            bid = int(self.rng.integers(0, MAX_TICKS - spread))
            yield f"{self._pick(self.tickers)},{_price(bid)},{_price(bid + spread)}"

    def market_data_lines(self, count: int):
        depth_ticks = 4 * LEVEL_STEP_TICKS
        for _ in range(count):
            top_spread = int(self.rng.choice(TOP_SPREAD_TICKS))
            best_bid = int(self.rng.integers(depth_ticks, MAX_TICKS - top_spread - depth_ticks))
            levels = []
            for level in range(5):
                levels.append(_price(best_bid - level * LEVEL_STEP_TICKS))
                levels.append(_price(best_bid + top_spread + level * LEVEL_STEP_TICKS))
            yield ','.join([self._pick(self.tickers)] + levels)

    def inquiry_lines(self, count: int):
        for i in range(1, count + 1):
            yield f"{i},{self._pick(self.tickers)},{self._pick(SIDES)},RECEIVED"

    def write(self, output_dir: str, count: int = 60) -> Dict[str, str]:
        """
        Write trades.txt, prices.txt, marketdata.txt and inquiries.txt

        Args:
            output_dir: target directory, created if missing
            count: records per file

        Returns:
            file name -> path written
        """
        os.makedirs(output_dir, exist_ok=True)
        files = {
            'trades.txt': self.trade_lines,
            'prices.txt': self.price_lines,
            'marketdata.txt': self.market_data_lines,
            'inquiries.txt': self.inquiry_lines,
        }
        written = {}
        for name, lines in files.items():
            path = os.path.join(output_dir, name)
            with open(path, 'w') as f:
                for line in lines(count):
                    f.write(line + '\n')
            written[name] = path
            logger.info(f"[DataGenerator] wrote {count} records to {path}")
        return written


def generate_data(output_dir: str, count: int = 60, seed: Optional[int] = None) -> Dict[str, str]:
    return DataGenerator(seed).write(output_dir, count)
