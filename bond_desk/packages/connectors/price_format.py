"""
Fractional Treasury price format

    "99-16"   -> 99 + 16/32          = 99.5
    "100-08+" -> 100 + 8/32 + 1/64   = 100.265625
    "99-163"  -> 99 + 16/32 + 3/256  = 99.51171875

The handle follows the legacy feed rule: 99 when the string starts with '9',
100 otherwise.
"""

import math
import re

from ..soa.errors import MalformedRecordError

_FRACTIONAL_RE = re.compile(r'^(\d{2,3})-(\d{2})([0-7+]?)$')


def parse_fractional(text: str) -> float:
    """
    Decode a fractional price string

    Raises:
        MalformedRecordError: text is not handle-32nds[+|d]
    """
    text = text.strip()
    match = _FRACTIONAL_RE.match(text)
    if match is None:
        raise MalformedRecordError("bad fractional price", text)

    _, thirty_seconds, tick = match.groups()
    thirty_seconds = int(thirty_seconds)
    if thirty_seconds > 31:
        raise MalformedRecordError("32nds out of range", text)

    whole = 99 if text[0] == '9' else 100
    value = whole + thirty_seconds / 32.0
    if tick == '+':
        value += 1 / 64.0
    elif tick:
        value += int(tick) / 256.0
    return value


def format_fractional(price: float) -> str:
    """
    Encode a price to the nearest 1/256 in fractional form

    A half 32nd is written as '+', other 256ths as a trailing digit.
    """
    whole = math.floor(price)
    ticks = int(round((price - whole) * 256))
    if ticks == 256:
        whole += 1
        ticks = 0

    thirty_seconds, eighths = divmod(ticks, 8)
    if eighths == 0:
        suffix = ''
    elif eighths == 4:
        suffix = '+'
    else:
        suffix = str(eighths)
    return f"{whole}-{thirty_seconds:02d}{suffix}"
