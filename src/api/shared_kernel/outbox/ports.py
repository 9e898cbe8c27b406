"""Outbox ports shared by the ordering and identity contexts.

Contexts hand the outbox already serialized payloads; the outbox table and
the relay never import a context's event classes.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable
from uuid import UUID

if TYPE_CHECKING:
    from shared_kernel.outbox.value_objects import OutboxEntry


@runtime_checkable
class IOutboxRepository(Protocol):
    """Outbox rows written and read on a caller-owned session.

    Implementations never commit. Checkout and registration append inside
    their own transaction; the relay marks rows inside one per row.
    """

    async def append(
        self,
        event_type: str,
        payload: dict[str, Any],
        occurred_at: datetime,
        aggregate_type: str,
        aggregate_id: str,
    ) -> None:
        """Stage one event on the session, after the aggregate rows were flushed.

        Args:
            event_type: Routing key on the broker, e.g. "OrderCreatedEvent"
            payload: Wire payload, JSON compatible
            occurred_at: Time recorded on the domain event
            aggregate_type: "order" or "user"
            aggregate_id: ULID of the order or user
        """
        ...

    async def fetch_unprocessed(self, limit: int = 10) -> list["OutboxEntry"]:
        """Return at most ``limit`` pending rows, oldest ``created_at`` first."""
        ...

    async def mark_processed(self, entry_id: UUID) -> bool:
        """Stamp ``processed_at`` unless another mark already did.

        Returns:
            False when the row was already processed (or does not exist)
        """
        ...


@runtime_checkable
class EventSerializer(Protocol):
    """Turns one context's domain events into broker payloads."""

    def supported_event_types(self) -> frozenset[str]:
        ...

    def event_type(self, event: Any) -> str:
        """Wire name of ``event``; ValueError for events of another context."""
        ...

    def serialize(self, event: Any) -> dict[str, Any]:
        """Payload for ``event``; ValueError for events of another context."""
        ...
