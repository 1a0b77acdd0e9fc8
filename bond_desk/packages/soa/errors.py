"""
Desk error taxonomy
Lookup misses, malformed records, unreachable sinks, illegal state transitions
"""


class DeskError(Exception):
    """Base class for every error raised by the desk services"""


class KeyNotFoundError(DeskError, KeyError):
    """Key absent from a service's state store"""

    def __init__(self, service: str, key):
        self.service = service
        self.key = key
        super().__init__(f"{service}: key not found: {key!r}")

    def __str__(self) -> str:
        # KeyError quotes its argument otherwise
        return self.args[0]


class ProductNotFoundError(KeyNotFoundError):
    """Product id not present in the reference table or the position store"""


class BookNotFoundError(KeyNotFoundError):
    """Book name not part of the configured book list"""


class MalformedRecordError(DeskError, ValueError):
    """A reader could not decode an input line"""

    def __init__(self, reason: str, line: str = ""):
        self.reason = reason
        self.line = line
        super().__init__(f"{reason}: {line!r}" if line else reason)


class SinkUnavailableError(DeskError, RuntimeError):
    """An output sink could not open its destination"""


class InvalidTransitionError(DeskError, ValueError):
    """Inquiry state change not allowed by the state machine"""

    def __init__(self, inquiry_id: str, current, requested):
        self.inquiry_id = inquiry_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"inquiry {inquiry_id}: cannot move from {current.value} to {requested.value}"
        )


class ConfigError(DeskError, ValueError):
    """Invalid configuration value"""
