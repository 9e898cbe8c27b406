"""Unit test fixtures with mocked dependencies."""

from datetime import UTC, datetime
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from shared_kernel.outbox.value_objects import OutboxEntry

ORDER_ID = "01ARZCX0P0HZGQP3MZXQQ0NNZZ"


@pytest.fixture
def mock_session():
    """Provide a mocked AsyncSession usable with ``async with session.begin()``."""
    return MagicMock()


@pytest.fixture
def mock_session_factory(mock_session):
    """Provide a mocked session factory yielding ``mock_session``."""
    factory = MagicMock()
    factory.return_value.__aenter__.return_value = mock_session
    return factory


@pytest.fixture
def make_outbox_entry():
    """Build pending outbox entries for relay tests."""

    def _make(event_type: str = "OrderCreatedEvent", **payload) -> OutboxEntry:
        return OutboxEntry(
            id=uuid4(),
            aggregate_type="order",
            aggregate_id=ORDER_ID,
            event_type=event_type,
            payload=payload or {"orderId": ORDER_ID},
            occurred_at=datetime(2026, 1, 8, 12, 0, 0, tzinfo=UTC),
            processed_at=None,
            created_at=datetime(2026, 1, 8, 12, 0, 1, tzinfo=UTC),
        )

    return _make
