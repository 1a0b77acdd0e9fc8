"""
Shared utilities: clocks and sequence ids
"""

from .clock import Clock, ManualClock
from .sequence import SequenceGenerator

__all__ = [
    'Clock',
    'ManualClock',
    'SequenceGenerator',
]
