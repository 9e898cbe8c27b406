"""Idempotency ledger for event subscribers.

Every subscriber records the event it handles in ``processed_events``
inside its own transaction. The unique primary key turns a second
delivery of the same event into a ``DuplicateEventError``.
"""

from infrastructure.idempotency.ledger import (
    DuplicateEventError,
    ProcessedEventLedger,
    idempotency_key,
)
from infrastructure.idempotency.models import ProcessedEventModel

__all__ = [
    "DuplicateEventError",
    "ProcessedEventLedger",
    "ProcessedEventModel",
    "idempotency_key",
]
