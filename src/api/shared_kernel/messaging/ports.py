"""Protocols (ports) for the message broker.

The broker is an at-least-once publish/subscribe transport. Publishing is
fire-and-forget from the caller's point of view: ``emit`` returns once the
broker accepted the message, never waiting for a consumer. Subscribers
may see a message more than once and in any order across event kinds.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, runtime_checkable

# Handler receives the event kind (routing key) and the decoded JSON payload.
EventHandler = Callable[[str, dict[str, Any]], Awaitable[None]]


@runtime_checkable
class MessageBroker(Protocol):
    """Publish/subscribe transport between the outbox relay and subscribers."""

    async def connect(self) -> None:
        """Open the connection and declare the topology.

        Raises:
            BrokerConnectionError: If the broker is unreachable
        """
        ...

    async def close(self) -> None:
        """Stop consuming and close the connection."""
        ...

    async def emit(self, event_kind: str, payload: dict[str, Any]) -> None:
        """Publish an event without waiting for any consumer.

        Args:
            event_kind: Event kind, used as the routing key
            payload: JSON-serializable event data

        Raises:
            BrokerPublishError: If the broker did not accept the message
        """
        ...

    def subscribe(self, event_kind: str, handler: EventHandler) -> None:
        """Register a handler for one event kind.

        Must be called before ``start_consuming``. Several handlers may be
        registered for the same kind; each receives every delivery.
        """
        ...

    async def start_consuming(self) -> None:
        """Begin delivering messages to the registered handlers.

        A handler that raises causes the message to be redelivered.
        """
        ...
