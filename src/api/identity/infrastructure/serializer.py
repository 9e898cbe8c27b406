"""Identity event serializer for outbox persistence.

The ``user_created`` wire contract is ``{"id": ..., "email": ...}``.
"""

from __future__ import annotations

from typing import Any

from identity.domain.events import DomainEvent, UserCreated

_EVENT_TYPES: dict[type, str] = {UserCreated: "user_created"}


class IdentityEventSerializer:
    """Serializes Identity domain events to outbox payloads."""

    def supported_event_types(self) -> frozenset[str]:
        """Return the event type names this serializer handles."""
        return frozenset(_EVENT_TYPES.values())

    def event_type(self, event: DomainEvent) -> str:
        """Return the wire name of an event.

        Raises:
            ValueError: If the event type is not supported
        """
        try:
            return _EVENT_TYPES[type(event)]
        except KeyError:
            raise ValueError(f"Unsupported event type: {type(event).__name__}") from None

    def serialize(self, event: DomainEvent) -> dict[str, Any]:
        """Convert an event to its JSON-compatible wire payload."""
        self.event_type(event)
        return {"id": event.user_id, "email": event.email}
