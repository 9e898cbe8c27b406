"""Unit tests for OrderSagaHandlers outside of the store.

Store-backed behaviour (ledger, reservation, compensation) is covered
by the integration tests.
"""

from unittest.mock import MagicMock

import pytest

from ordering.application.saga_handlers import OrderSagaHandlers
from ordering.infrastructure.payment_gateway import SimulatedPaymentGateway


@pytest.fixture
def mock_probe():
    return MagicMock()


@pytest.fixture
def handlers(mock_session_factory, mock_probe):
    return OrderSagaHandlers(
        session_factory=mock_session_factory,
        payment_gateway=SimulatedPaymentGateway(success_rate=1.0),
        probe=mock_probe,
    )


class TestRegister:
    """Tests for OrderSagaHandlers.register()."""

    def test_subscribes_every_saga_event_kind(self, handlers):
        broker = MagicMock()

        kinds = handlers.register(broker)

        assert kinds == [
            "OrderCreatedEvent",
            "InventoryReservedEvent",
            "InventoryFailedEvent",
            "PaymentCompletedEvent",
            "PaymentFailedEvent",
        ]
        assert [c.args[0] for c in broker.subscribe.call_args_list] == kinds
        assert all(c.args[1] == handlers.handle for c in broker.subscribe.call_args_list)


class TestHandleInvalidPayload:
    """Tests for deliveries that fail validation."""

    @pytest.mark.asyncio
    async def test_invalid_payload_is_dropped_without_a_session(
        self, handlers, mock_session_factory, mock_probe
    ):
        result = await handlers.handle("OrderCreatedEvent", {"orderId": "nope"})

        assert result is None
        mock_probe.invalid_payload.assert_called_once()
        mock_session_factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_kind_is_dropped(self, handlers, mock_probe):
        result = await handlers.handle("OrderShippedEvent", {})

        assert result is None
        assert mock_probe.invalid_payload.call_args.args[0] == "OrderShippedEvent"
