"""
Historical Data Service - recorder that keeps the latest value per key and
persists every update through its connector
"""

import logging
from typing import Any, Callable, Dict, Hashable

from ..soa.service import Connector, Service, ServiceListener, V

logger = logging.getLogger(__name__)


class HistoricalDataService(Service[Hashable, V]):
    """
    Generic recorder

    Every persist_data call reaches the connector, so publishing the same value
    twice yields two identical records.
    """

    name = "HistoricalDataService"

    def __init__(self, connector: Connector[V], name: str = None):
        """
        Args:
            connector: sink receiving each persisted value
            name: recorder name used in logs and stats, e.g. "PositionHistory"
        """
        super().__init__()
        if name:
            self.name = name
        self.connector = connector
        self.stats['records_persisted'] = 0

    def persist_data(self, key: Hashable, value: V) -> None:
        self._store[key] = value
        self.connector.publish(value)
        self.stats['records_persisted'] += 1
        logger.debug(f"[{self.name}] persisted {key}")

    def get_stats(self) -> Dict[str, Any]:
        stats = super().get_stats()
        connector_stats = getattr(self.connector, 'get_stats', None)
        if connector_stats is not None:
            stats['sink'] = connector_stats()
        return stats


class HistoricalDataListener(ServiceListener[V]):
    """Connects any service to a recorder; key_fn extracts the record key"""

    def __init__(self, historical_service: HistoricalDataService, key_fn: Callable[[V], Hashable]):
        self.historical_service = historical_service
        self.key_fn = key_fn

    def process_add(self, data: V) -> None:
        self.historical_service.persist_data(self.key_fn(data), data)

    def __repr__(self) -> str:
        return f"HistoricalDataListener({self.historical_service.name})"
