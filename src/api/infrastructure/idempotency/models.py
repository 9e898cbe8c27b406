"""SQLAlchemy ORM model for the idempotency ledger."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, utc_now


class ProcessedEventModel(Base):
    """One row per event a subscriber has already handled.

    The primary key is the idempotency key itself; there is no separate
    unique index and no prior read. Rows are never updated or deleted.
    """

    __tablename__ = "processed_events"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    event_type: Mapped[str] = mapped_column(String(255), nullable=False)
    processed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        insert_default=utc_now,
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<ProcessedEventModel(id={self.id}, event_type={self.event_type})>"
