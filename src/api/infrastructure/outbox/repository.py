"""Outbox repository implementation.

This module provides the SQLAlchemy implementation of the outbox repository.
It persists domain events to the outbox table and lets the relay read and
mark them.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.outbox.models import OutboxModel
from shared_kernel.outbox.ports import IOutboxRepository
from shared_kernel.outbox.value_objects import OutboxEntry


class OutboxRepository(IOutboxRepository):
    """SQLAlchemy implementation of the outbox repository.

    This repository shares the same database session as the calling service,
    ensuring that event appends happen within the same transaction as the
    aggregate changes. This is critical for the atomicity guarantee of the
    outbox pattern.

    The repository only calls session.add() and session.execute() - it never
    calls session.commit(). The calling service owns the transaction boundary.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository with a session.

        Args:
            session: The SQLAlchemy async session (shared with calling service)
        """
        self._session = session

    async def append(
        self,
        event_type: str,
        payload: dict[str, Any],
        occurred_at: datetime,
        aggregate_type: str,
        aggregate_id: str,
    ) -> None:
        """Append a pre-serialized event to the outbox within the current transaction.

        The transaction is not committed - that is the responsibility of
        the calling service.

        Args:
            event_type: Name of the event kind (e.g., "OrderCreatedEvent")
            payload: Pre-serialized event data
            occurred_at: When the domain event occurred
            aggregate_type: Type of aggregate (e.g., "order")
            aggregate_id: ULID of the aggregate
        """
        model = OutboxModel(
            aggregate_type=aggregate_type,
            aggregate_id=aggregate_id,
            event_type=event_type,
            payload=payload,
            occurred_at=occurred_at,
            processed_at=None,
        )

        self._session.add(model)

    async def fetch_unprocessed(self, limit: int = 10) -> list[OutboxEntry]:
        """Fetch unprocessed entries ordered by creation time.

        The id is a tie-breaker so rows created in the same instant come
        back in a stable order.

        Args:
            limit: Maximum number of entries to fetch

        Returns:
            List of unprocessed OutboxEntry value objects
        """
        stmt = (
            select(OutboxModel)
            .where(OutboxModel.processed_at.is_(None))
            .order_by(OutboxModel.created_at, OutboxModel.id)
            .limit(limit)
        )

        result = await self._session.execute(stmt)
        models = result.scalars().all()

        return [model.to_value_object() for model in models]

    async def mark_processed(self, entry_id: UUID) -> bool:
        """Mark an entry as processed.

        Sets the processed_at timestamp to the current UTC time, only if it
        is still unset, so the timestamp is written at most once.

        Args:
            entry_id: The UUID of the entry to mark as processed

        Returns:
            True if the timestamp was set by this call
        """
        stmt = (
            update(OutboxModel)
            .where(OutboxModel.id == entry_id)
            .where(OutboxModel.processed_at.is_(None))
            .values(processed_at=datetime.now(UTC))
        )

        result = await self._session.execute(stmt)
        return result.rowcount == 1
