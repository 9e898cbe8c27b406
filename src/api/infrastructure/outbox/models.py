"""SQLAlchemy ORM models for the outbox pattern.

This module provides the database model for the outbox table used in
the transactional outbox pattern.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Index, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, JSONType, utc_now
from shared_kernel.outbox.value_objects import OutboxEntry


class OutboxModel(Base):
    """ORM model for the outbox table.

    Stores domain events written in the same transaction as the business
    mutation they announce, until the relay publishes them to the broker.
    Rows are append-only: the only update ever made sets processed_at.

    The table uses a partial index for efficient polling:
    - idx_outbox_unprocessed: For fetching pending entries oldest first
    """

    __tablename__ = "outbox"
    __table_args__ = (
        Index(
            "idx_outbox_unprocessed",
            "created_at",
            postgresql_where=text("processed_at IS NULL"),
            sqlite_where=text("processed_at IS NULL"),
        ),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    aggregate_type: Mapped[str] = mapped_column(String(255), nullable=False)
    aggregate_id: Mapped[str] = mapped_column(String(26), nullable=False)
    event_type: Mapped[str] = mapped_column(String(255), nullable=False)
    payload: Mapped[dict] = mapped_column(JSONType, nullable=False)
    occurred_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    processed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        insert_default=utc_now,
    )

    @property
    def is_processed(self) -> bool:
        """Check if this entry has been published."""
        return self.processed_at is not None

    def to_value_object(self) -> OutboxEntry:
        """Convert this ORM model to an OutboxEntry value object.

        Returns:
            An immutable OutboxEntry with all fields copied from this model.
        """
        return OutboxEntry(
            id=self.id,
            aggregate_type=self.aggregate_type,
            aggregate_id=self.aggregate_id,
            event_type=self.event_type,
            payload=self.payload,
            occurred_at=self.occurred_at,
            processed_at=self.processed_at,
            created_at=self.created_at,
        )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<OutboxModel("
            f"id={self.id}, "
            f"aggregate_type={self.aggregate_type}, "
            f"event_type={self.event_type}, "
            f"processed_at={self.processed_at}"
            f")>"
        )
