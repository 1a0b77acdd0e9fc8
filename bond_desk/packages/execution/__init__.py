"""
Market data, algo execution and execution routing
"""

from .market_data_service import MarketDataService, build_order_book
from .algo_execution import (
    AlgoExecutionService,
    AlgoExecutionListener,
    SidePolicy,
    AlternatingSidePolicy,
    InventorySidePolicy,
    FixedSidePolicy,
    hidden_quantity,
)
from .execution_service import (
    ExecutionService,
    ExecutionServiceListener,
    ExecutionTradeListener,
    execution_to_trade,
)

__all__ = [
    'MarketDataService',
    'build_order_book',
    'AlgoExecutionService',
    'AlgoExecutionListener',
    'SidePolicy',
    'AlternatingSidePolicy',
    'InventorySidePolicy',
    'FixedSidePolicy',
    'hidden_quantity',
    'ExecutionService',
    'ExecutionServiceListener',
    'ExecutionTradeListener',
    'execution_to_trade',
]
