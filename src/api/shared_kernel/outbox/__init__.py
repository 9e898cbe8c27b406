"""Outbox pattern primitives shared by every bounded context.

The transactional outbox writes domain events in the same transaction as
the business mutation; a relay publishes them to the message broker later.
"""

from shared_kernel.outbox.ports import EventSerializer, IOutboxRepository
from shared_kernel.outbox.value_objects import OutboxEntry, RelayCycleResult

__all__ = ["EventSerializer", "IOutboxRepository", "OutboxEntry", "RelayCycleResult"]
