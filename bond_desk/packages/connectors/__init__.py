"""
File connectors - input readers, output sinks and the fractional price codec
"""

from .price_format import parse_fractional, format_fractional
from .readers import (
    RecordReader,
    TradeFileReader,
    PriceFileReader,
    MarketDataFileReader,
    InquiryFileReader,
)
from .writers import (
    FileSink,
    fmt_float,
    format_position,
    format_risk,
    format_gui_price,
    format_stream,
    format_execution,
    format_inquiry,
)

__all__ = [
    'parse_fractional',
    'format_fractional',
    'RecordReader',
    'TradeFileReader',
    'PriceFileReader',
    'MarketDataFileReader',
    'InquiryFileReader',
    'FileSink',
    'fmt_float',
    'format_position',
    'format_risk',
    'format_gui_price',
    'format_stream',
    'format_execution',
    'format_inquiry',
]
