"""
Pricing, GUI throttle and quote streaming
"""

from .pricing_service import PricingService
from .gui_service import GUIService, GUIListener
from .streaming import (
    AlgoStreamingService,
    StreamingService,
    AlgoStreamingListener,
    StreamingListener,
)

__all__ = [
    'PricingService',
    'GUIService',
    'GUIListener',
    'AlgoStreamingService',
    'StreamingService',
    'AlgoStreamingListener',
    'StreamingListener',
]
