"""ORM base shared by every ShopSphere table.

Column types are chosen so the same models run on PostgreSQL (asyncpg) and
on the SQLite files used by the integration tests.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    """Timezone-aware now, evaluated per INSERT/UPDATE by SQLAlchemy."""
    return datetime.now(timezone.utc)


# Event payloads: JSONB on PostgreSQL, plain JSON elsewhere
JSONType = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Declarative base for orders, inventory, users, outbox and ledger rows."""

    type_annotation_map: dict[type, Any] = {}


class TimestampMixin:
    """Adds ``created_at`` and ``updated_at`` to orders and users.

    ``updated_at`` moves on every UPDATE issued through the ORM, so saga
    transitions stamp the order row.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=utc_now,
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )
