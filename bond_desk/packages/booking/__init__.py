"""
Trade booking, positions and risk
"""

from .trade_booking import TradeBookingService
from .position_service import PositionService, PositionServiceListener
from .risk_service import RiskService, RiskServiceListener

__all__ = [
    'TradeBookingService',
    'PositionService',
    'PositionServiceListener',
    'RiskService',
    'RiskServiceListener',
]
