"""
Historical recording of published values
"""

from .historical_data_service import HistoricalDataService, HistoricalDataListener

__all__ = [
    'HistoricalDataService',
    'HistoricalDataListener',
]
