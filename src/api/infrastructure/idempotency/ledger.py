"""Ledger gating subscriber side effects on first delivery."""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.idempotency.models import ProcessedEventModel


class DuplicateEventError(Exception):
    """Raised when an event was already recorded by an earlier delivery."""

    def __init__(self, key: str):
        super().__init__(f"Event {key} was already processed")
        self.key = key


def idempotency_key(event_kind: str, correlation_id: str) -> str:
    """Build the ledger key for one step of one correlated flow.

    The event kind is part of the key so that different saga steps for the
    same order never collide.
    """
    return f"{event_kind}:{correlation_id}"


class ProcessedEventLedger:
    """Insert-first idempotency gate.

    ``record`` must run inside the subscriber's transaction, before any
    side effect. The ledger row then commits together with the effect, and
    a handler that crashes leaves no row behind, so the redelivery runs
    normally.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def record(self, key: str, event_type: str) -> None:
        """Record an event as processed.

        Args:
            key: Idempotency key (see ``idempotency_key``)
            event_type: Event kind, stored for diagnostics

        Raises:
            DuplicateEventError: If the key is already in the ledger
        """
        self._session.add(ProcessedEventModel(id=key, event_type=event_type))
        try:
            await self._session.flush()
        except IntegrityError as e:
            raise DuplicateEventError(key) from e
