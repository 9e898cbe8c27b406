"""Broker exceptions.

All broker adapters translate their client library errors into these, so
callers never depend on a specific transport.
"""


class BrokerError(Exception):
    """Base exception for message broker operations."""

    pass


class BrokerConnectionError(BrokerError):
    """Raised when the broker cannot be reached or the adapter is not connected."""

    pass


class BrokerPublishError(BrokerError):
    """Raised when a message could not be handed to the broker."""

    def __init__(self, event_kind: str, message: str):
        super().__init__(f"Failed to publish {event_kind}: {message}")
        self.event_kind = event_kind
