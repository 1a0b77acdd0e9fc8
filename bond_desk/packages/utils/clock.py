"""
Clock sources
One clock instance is shared by every component of a run: the GUI throttle
reads monotonic time, the sinks stamp records with epoch milliseconds
"""

import time


class Clock:
    """Wall/monotonic clock used by the running desk"""

    def monotonic_ms(self) -> float:
        return time.monotonic() * 1000

    def epoch_ms(self) -> int:
        return int(time.time() * 1000)


class ManualClock(Clock):
    """Clock advanced explicitly; for replays and tests"""

    def __init__(self, start_ms: float = 0.0, epoch_start_ms: int = 0):
        self.now_ms = float(start_ms)
        self.epoch_start_ms = epoch_start_ms
        self._start_ms = float(start_ms)

    def advance(self, ms: float) -> None:
        self.now_ms += ms

    def set(self, ms: float) -> None:
        self.now_ms = float(ms)

    def monotonic_ms(self) -> float:
        return self.now_ms

    def epoch_ms(self) -> int:
        return int(self.epoch_start_ms + (self.now_ms - self._start_ms))
