"""Ordering event serializer for outbox persistence.

Turns Ordering domain events into the saga wire contract:

    {"orderId": ..., "userId": ...,
     "items": [{"productId": ..., "quantity": ..., "price": ...}],
     "total": ...}

Money is written as a decimal string so no precision is lost on the way
through JSON. Every saga event kind uses this same shape.
"""

from __future__ import annotations

from typing import Any, get_args

from ordering.domain.events import DomainEvent

# Derive supported events from the DomainEvent type alias
_SUPPORTED_EVENTS: frozenset[str] = frozenset(
    cls.__name__ for cls in get_args(DomainEvent)
)


class OrderEventSerializer:
    """Serializes Ordering domain events to outbox payloads.

    The event type stored with each payload is the event class name, which
    is also the broker routing key.
    """

    def supported_event_types(self) -> frozenset[str]:
        """Return the event type names this serializer handles."""
        return _SUPPORTED_EVENTS

    def event_type(self, event: DomainEvent) -> str:
        """Return the wire name of an event.

        Raises:
            ValueError: If the event type is not supported
        """
        event_type = type(event).__name__
        if event_type not in _SUPPORTED_EVENTS:
            raise ValueError(f"Unsupported event type: {event_type}")
        return event_type

    def serialize(self, event: DomainEvent) -> dict[str, Any]:
        """Convert an event to its JSON-compatible wire payload.

        Raises:
            ValueError: If the event type is not supported
        """
        self.event_type(event)

        return {
            "orderId": event.order_id,
            "userId": event.user_id,
            "items": [
                {
                    "productId": item.product_id,
                    "quantity": item.quantity,
                    "price": str(item.price),
                }
                for item in event.items
            ],
            "total": str(event.total),
        }
