"""
SOA framework
Service base class, listener capability set, connectors, actors and errors
"""

from .errors import (
    DeskError,
    KeyNotFoundError,
    ProductNotFoundError,
    BookNotFoundError,
    MalformedRecordError,
    SinkUnavailableError,
    InvalidTransitionError,
    ConfigError,
)
from .service import Service, ServiceListener, FunctionListener, Connector
from .actor import ServiceActor, ActorListener

__all__ = [
    # Errors
    'DeskError',
    'KeyNotFoundError',
    'ProductNotFoundError',
    'BookNotFoundError',
    'MalformedRecordError',
    'SinkUnavailableError',
    'InvalidTransitionError',
    'ConfigError',

    # Framework
    'Service',
    'ServiceListener',
    'FunctionListener',
    'Connector',

    # Concurrency
    'ServiceActor',
    'ActorListener',
]
