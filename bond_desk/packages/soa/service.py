"""
Service framework - keyed state plus listener fan-out
Every desk service owns one store and notifies its listeners after each mutation
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Generic, List, TypeVar

from .errors import KeyNotFoundError

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")


class ServiceListener(ABC, Generic[V]):
    """
    Listener registered on a Service

    Only process_add carries behaviour in this system; remove/update are
    accepted for interface completeness and ignored by default.
    """

    @abstractmethod
    def process_add(self, data: V) -> None:
        """Handle a new or changed value"""

    def process_remove(self, data: V) -> None:
        pass

    def process_update(self, data: V) -> None:
        pass


class FunctionListener(ServiceListener[V]):
    """Adapts a plain callable to the listener interface"""

    def __init__(self, callback: Callable[[V], Any], name: str = ""):
        self.callback = callback
        self.name = name or getattr(callback, "__name__", "callback")

    def process_add(self, data: V) -> None:
        self.callback(data)

    def __repr__(self) -> str:
        return f"FunctionListener({self.name})"


class Connector(ABC, Generic[V]):
    """Outbound side of an adapter: accepts a typed value for an external sink"""

    @abstractmethod
    def publish(self, data: V) -> None:
        """Write data to the sink"""


class Service(Generic[K, V]):
    """
    Base service

    Subclasses keep their state in self._store and call notify() only after
    the store has been updated.
    """

    name = "Service"

    def __init__(self):
        self._store: Dict[K, V] = {}
        self._listeners: List[ServiceListener[V]] = []
        self.stats: Dict[str, Any] = {
            'messages_received': 0,
            'notifications_sent': 0,
        }

    def on_message(self, data: V) -> None:
        """Inbound entry point used by connectors; default stores nothing"""
        self.stats['messages_received'] += 1

    def get_data(self, key: K) -> V:
        """
        Look up the latest value for key

        Raises:
            KeyNotFoundError: key is not in the store
        """
        try:
            return self._store[key]
        except KeyError:
            raise KeyNotFoundError(self.name, key) from None

    def has_data(self, key: K) -> bool:
        return key in self._store

    def keys(self) -> List[K]:
        return list(self._store)

    def add_listener(self, listener: ServiceListener[V]) -> None:
        self._listeners.append(listener)
        logger.debug(f"[{self.name}] listener added: {listener!r}, total={len(self._listeners)}")

    def get_listeners(self) -> List[ServiceListener[V]]:
        return list(self._listeners)

    def notify(self, data: V) -> None:
        """Synchronously hand data to every listener in registration order"""
        try:
            for listener in self._listeners:
                listener.process_add(data)
        finally:
            self.stats['notifications_sent'] += 1

    def get_stats(self) -> Dict[str, Any]:
        return {
            **self.stats,
            'store_size': len(self._store),
            'listeners': len(self._listeners),
        }
