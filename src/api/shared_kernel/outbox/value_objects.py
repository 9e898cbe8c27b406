"""Value objects for the outbox pattern.

Value objects are immutable descriptors that provide type safety and
domain semantics for outbox entries.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID


@dataclass(frozen=True)
class OutboxEntry:
    """Represents a single entry in the outbox table.

    This is an immutable value object that captures the state of an outbox
    entry as it was read in one relay poll cycle. The relay holds no other
    copy; the next cycle reads the table again.

    Attributes:
        id: Unique identifier for the entry (UUID)
        aggregate_type: Type of aggregate that generated the event (e.g., "order")
        aggregate_id: ULID of the aggregate
        event_type: Name of the event kind (e.g., "OrderCreatedEvent")
        payload: Serialized event data as a dictionary
        occurred_at: When the domain event occurred
        processed_at: When the entry was published (None if pending)
        created_at: When the entry was created in the outbox
    """

    id: UUID
    aggregate_type: str
    aggregate_id: str
    event_type: str
    payload: dict[str, Any]
    occurred_at: datetime
    processed_at: datetime | None
    created_at: datetime

    @property
    def is_processed(self) -> bool:
        """Check if this entry has been published.

        Returns:
            True if processed_at is set, False otherwise
        """
        return self.processed_at is not None


@dataclass(frozen=True)
class RelayCycleResult:
    """Outcome of one relay poll cycle.

    Attributes:
        fetched: Pending entries read in this cycle (at most the batch size)
        published: Entries published and marked processed
        failed: Entries left pending because publish or marking failed
    """

    fetched: int
    published: int
    failed: int
