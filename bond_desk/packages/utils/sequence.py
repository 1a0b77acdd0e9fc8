"""
Sequence generator - explicit counter owned by the component that uses it
"""

import itertools
from typing import Iterator


class SequenceGenerator:
    """Monotonically increasing integer ids starting at `start`"""

    def __init__(self, start: int = 1):
        self._counter: Iterator[int] = itertools.count(start)
        self.last = start - 1

    def next(self) -> int:
        self.last = next(self._counter)
        return self.last

    def __repr__(self) -> str:
        return f"SequenceGenerator(last={self.last})"
