"""create_outbox_and_processed_events

Create the outbox table for the transactional outbox pattern and the
processed_events ledger used by event subscribers for idempotency.

Revision ID: 8e27b5c40f6a
Revises: 3c1f0a9d2b41
Create Date: 2026-03-02 09:40:03.551870

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "8e27b5c40f6a"
down_revision: Union[str, Sequence[str], None] = "3c1f0a9d2b41"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "outbox",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "aggregate_type", sa.String(length=255), nullable=False
        ),  # e.g., "order"
        sa.Column(
            "aggregate_id", sa.String(length=26), nullable=False
        ),  # ULID of aggregate
        sa.Column(
            "event_type", sa.String(length=255), nullable=False
        ),  # e.g., "OrderCreatedEvent"
        sa.Column(
            "payload",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=False,
        ),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "processed_at", sa.DateTime(timezone=True), nullable=True
        ),  # NULL until published
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    # Index for efficiently fetching unprocessed entries ordered by creation time
    op.create_index(
        "idx_outbox_unprocessed",
        "outbox",
        ["created_at"],
        unique=False,
        postgresql_where=sa.text("processed_at IS NULL"),
        sqlite_where=sa.text("processed_at IS NULL"),
    )

    op.create_table(
        "processed_events",
        sa.Column("id", sa.String(length=255), nullable=False),  # idempotency key
        sa.Column("event_type", sa.String(length=255), nullable=False),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("processed_events")
    op.drop_index("idx_outbox_unprocessed", table_name="outbox")
    op.drop_table("outbox")
