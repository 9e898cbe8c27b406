"""Observability probes for message broker adapters."""

from __future__ import annotations

from typing import Protocol

import structlog


logger = structlog.get_logger()


class BrokerProbe(Protocol):
    """Protocol for broker observability.

    Implementations can log, emit metrics, or send traces for connection
    lifecycle, publishing, and consumer dispatch.
    """

    def connected(self, backend: str) -> None:
        """Called when the adapter is connected and the topology declared."""
        ...

    def connection_failed(self, backend: str, error: str) -> None:
        """Called when the broker cannot be reached."""
        ...

    def closed(self, backend: str) -> None:
        """Called when the adapter is closed."""
        ...

    def message_published(self, event_kind: str) -> None:
        """Called when the broker accepted a message."""
        ...

    def handler_subscribed(self, event_kind: str, handler_name: str) -> None:
        """Called when a handler is registered for an event kind."""
        ...

    def consuming_started(self, event_kinds: list[str]) -> None:
        """Called when delivery to handlers begins."""
        ...

    def message_dispatched(self, event_kind: str, handler_count: int) -> None:
        """Called when a delivery was handled by every handler."""
        ...

    def message_without_handler(self, event_kind: str) -> None:
        """Called when a delivery has no registered handler."""
        ...

    def malformed_message_dropped(self, event_kind: str, error: str) -> None:
        """Called when a message body is not a JSON object."""
        ...

    def handler_failed(self, event_kind: str, error: str, redelivery: bool) -> None:
        """Called when a handler raised; the message may be redelivered."""
        ...


class DefaultBrokerProbe:
    """Default implementation using structlog."""

    def __init__(self) -> None:
        """Initialize the probe with a logger."""
        self._log = logger.bind(component="message_broker")

    def connected(self, backend: str) -> None:
        """Log a successful connection."""
        self._log.info("broker_connected", backend=backend)

    def connection_failed(self, backend: str, error: str) -> None:
        """Log a failed connection."""
        self._log.error("broker_connection_failed", backend=backend, error=error)

    def closed(self, backend: str) -> None:
        """Log adapter shutdown."""
        self._log.info("broker_closed", backend=backend)

    def message_published(self, event_kind: str) -> None:
        """Log a published message."""
        self._log.debug("broker_message_published", event_kind=event_kind)

    def handler_subscribed(self, event_kind: str, handler_name: str) -> None:
        """Log handler registration."""
        self._log.info(
            "broker_handler_subscribed",
            event_kind=event_kind,
            handler=handler_name,
        )

    def consuming_started(self, event_kinds: list[str]) -> None:
        """Log consumer start."""
        self._log.info("broker_consuming_started", event_kinds=sorted(event_kinds))

    def message_dispatched(self, event_kind: str, handler_count: int) -> None:
        """Log a handled delivery."""
        self._log.debug(
            "broker_message_dispatched",
            event_kind=event_kind,
            handler_count=handler_count,
        )

    def message_without_handler(self, event_kind: str) -> None:
        """Log a delivery nobody handles."""
        self._log.warning("broker_message_without_handler", event_kind=event_kind)

    def malformed_message_dropped(self, event_kind: str, error: str) -> None:
        """Log a dropped malformed message."""
        self._log.error(
            "broker_malformed_message_dropped",
            event_kind=event_kind,
            error=error,
        )

    def handler_failed(self, event_kind: str, error: str, redelivery: bool) -> None:
        """Log a handler failure."""
        self._log.error(
            "broker_handler_failed",
            event_kind=event_kind,
            error=error,
            redelivery=redelivery,
        )
