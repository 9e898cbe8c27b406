"""Integration tests for the order fulfilment saga.

Orders go through the whole pipeline: checkout writes OrderCreatedEvent
to the outbox, the relay publishes it, the saga handlers consume it and
write the next event to the outbox, and so on until the order is
COMPLETED or CANCELLED.
"""

import asyncio

import pytest
from sqlalchemy import select

from infrastructure.idempotency import ProcessedEventModel, idempotency_key
from ordering.application.saga_handlers import OrderSagaHandlers
from ordering.application.value_objects import CheckoutLine
from ordering.domain.saga import SagaAction, SagaEventKind, SagaState
from ordering.domain.value_objects import OrderId, OrderStatus
from ordering.infrastructure.payment_gateway import SimulatedPaymentGateway

pytestmark = [pytest.mark.integration]


class _FlakyPaymentGateway:
    """Fails with a connection error on the first call only."""

    def __init__(self) -> None:
        self.calls = 0

    async def capture(self, order_id, amount) -> bool:
        self.calls += 1
        if self.calls == 1:
            raise ConnectionError("payment provider unreachable")
        return True


@pytest.fixture
def make_saga(session_factory, broker):
    """Build saga handlers subscribed to the test broker."""

    def _make(
        success_rate: float = 1.0,
        release_inventory_on_payment_failure: bool = False,
        payment_gateway=None,
    ) -> OrderSagaHandlers:
        handlers = OrderSagaHandlers(
            session_factory=session_factory,
            payment_gateway=payment_gateway or SimulatedPaymentGateway(success_rate),
            release_inventory_on_payment_failure=release_inventory_on_payment_failure,
        )
        handlers.register(broker)
        return handlers

    return _make


@pytest.fixture
def event_payload(outbox_rows):
    """Return the outbox payload of one event kind for one order."""

    async def _payload(event_type: str, order_id: OrderId) -> dict:
        rows = [
            row
            for row in await outbox_rows()
            if row.event_type == event_type and row.aggregate_id == order_id.value
        ]
        assert len(rows) == 1, f"expected one {event_type} for {order_id}"
        return rows[0].payload

    return _payload


@pytest.fixture
def ledger_keys(session_factory):
    async def _keys() -> set[str]:
        async with session_factory() as session:
            result = await session.execute(select(ProcessedEventModel.id))
            return set(result.scalars().all())

    return _keys


class TestSagaScenarios:
    """End-to-end scenarios through relay, broker and saga handlers."""

    @pytest.mark.asyncio
    async def test_happy_path_completes_order(
        self,
        make_saga,
        seed_product,
        place_order,
        run_pipeline,
        load_order,
        stock_of,
        outbox_rows,
    ):
        make_saga(success_rate=1.0)
        keyboard = await seed_product("49.99", stock=10)
        mouse = await seed_product("19.50", stock=10)

        order = await place_order(
            "user-1", [CheckoutLine(keyboard, 2), CheckoutLine(mouse, 1)]
        )
        await run_pipeline()

        stored = await load_order(order.id)
        assert stored.status is OrderStatus.COMPLETED
        assert stored.saga_state is SagaState.COMPLETED
        assert await stock_of(keyboard) == 8
        assert await stock_of(mouse) == 9
        rows = await outbox_rows()
        assert [row.event_type for row in rows] == [
            "OrderCreatedEvent",
            "InventoryReservedEvent",
            "PaymentCompletedEvent",
        ]
        assert all(row.processed_at is not None for row in rows)
        assert {row.payload["total"] for row in rows} == {"119.48"}

    @pytest.mark.asyncio
    async def test_insufficient_stock_cancels_order(
        self,
        make_saga,
        seed_product,
        place_order,
        run_pipeline,
        load_order,
        stock_of,
        outbox_rows,
    ):
        make_saga(success_rate=1.0)
        keyboard = await seed_product("49.99", stock=1)

        order = await place_order("user-1", [CheckoutLine(keyboard, 2)])
        await run_pipeline()

        stored = await load_order(order.id)
        assert stored.status is OrderStatus.CANCELLED
        assert await stock_of(keyboard) == 1
        assert [row.event_type for row in await outbox_rows()] == [
            "OrderCreatedEvent",
            "InventoryFailedEvent",
        ]

    @pytest.mark.asyncio
    async def test_partial_reservation_is_undone(
        self, make_saga, seed_product, place_order, run_pipeline, load_order, stock_of
    ):
        """If any line lacks stock, no line keeps its reservation."""
        make_saga(success_rate=1.0)
        plenty = await seed_product("5.00", stock=10)
        scarce = await seed_product("7.00", stock=1)

        order = await place_order(
            "user-1", [CheckoutLine(plenty, 3), CheckoutLine(scarce, 2)]
        )
        await run_pipeline()

        assert (await load_order(order.id)).status is OrderStatus.CANCELLED
        assert await stock_of(plenty) == 10
        assert await stock_of(scarce) == 1

    @pytest.mark.asyncio
    async def test_repeated_product_lines_are_reserved_together(
        self, make_saga, seed_product, place_order, run_pipeline, load_order, stock_of
    ):
        make_saga(success_rate=1.0)
        keyboard = await seed_product("49.99", stock=3)

        order = await place_order(
            "user-1", [CheckoutLine(keyboard, 2), CheckoutLine(keyboard, 2)]
        )
        await run_pipeline()

        assert (await load_order(order.id)).status is OrderStatus.CANCELLED
        assert await stock_of(keyboard) == 3

    @pytest.mark.asyncio
    async def test_payment_failure_cancels_and_keeps_reservation(
        self,
        make_saga,
        seed_product,
        place_order,
        run_pipeline,
        load_order,
        stock_of,
        outbox_rows,
    ):
        make_saga(success_rate=0.0)
        keyboard = await seed_product("49.99", stock=5)

        order = await place_order("user-1", [CheckoutLine(keyboard, 2)])
        await run_pipeline()

        stored = await load_order(order.id)
        assert stored.status is OrderStatus.CANCELLED
        assert await stock_of(keyboard) == 3
        assert [row.event_type for row in await outbox_rows()] == [
            "OrderCreatedEvent",
            "InventoryReservedEvent",
            "PaymentFailedEvent",
        ]

    @pytest.mark.asyncio
    async def test_payment_failure_releases_stock_when_enabled(
        self, make_saga, seed_product, place_order, run_pipeline, load_order, stock_of
    ):
        make_saga(success_rate=0.0, release_inventory_on_payment_failure=True)
        keyboard = await seed_product("49.99", stock=5)

        order = await place_order("user-1", [CheckoutLine(keyboard, 2)])
        await run_pipeline()

        assert (await load_order(order.id)).status is OrderStatus.CANCELLED
        assert await stock_of(keyboard) == 5

    @pytest.mark.asyncio
    async def test_inventory_failure_never_releases_stock(
        self, make_saga, seed_product, place_order, run_pipeline, stock_of
    ):
        """Nothing was reserved, so cancelling must not add stock."""
        make_saga(success_rate=1.0, release_inventory_on_payment_failure=True)
        keyboard = await seed_product("49.99", stock=1)

        await place_order("user-1", [CheckoutLine(keyboard, 2)])
        await run_pipeline()

        assert await stock_of(keyboard) == 1


class TestSagaDeliveryGuarantees:
    """Redelivery, out-of-order delivery and concurrent delivery."""

    @pytest.mark.asyncio
    async def test_duplicate_delivery_has_no_effect(
        self,
        make_saga,
        seed_product,
        place_order,
        event_payload,
        stock_of,
        outbox_rows,
        ledger_keys,
    ):
        saga = make_saga()
        keyboard = await seed_product("49.99", stock=5)
        order = await place_order("user-1", [CheckoutLine(keyboard, 2)])
        payload = await event_payload("OrderCreatedEvent", order.id)

        first = await saga.handle("OrderCreatedEvent", payload)
        second = await saga.handle("OrderCreatedEvent", payload)

        assert first.action is SagaAction.RESERVE_INVENTORY
        assert first.follow_up is SagaEventKind.INVENTORY_RESERVED
        assert second is None
        assert await stock_of(keyboard) == 3
        kinds = [row.event_type for row in await outbox_rows()]
        assert kinds.count("InventoryReservedEvent") == 1
        assert await ledger_keys() == {
            idempotency_key("OrderCreatedEvent", order.id.value)
        }

    @pytest.mark.asyncio
    async def test_illegal_transition_is_rejected_without_ledger_row(
        self,
        make_saga,
        seed_product,
        place_order,
        run_pipeline,
        event_payload,
        load_order,
        ledger_keys,
    ):
        """A late PaymentCompletedEvent must not revive a cancelled order."""
        saga = make_saga(success_rate=1.0)
        keyboard = await seed_product("49.99", stock=1)
        order = await place_order("user-1", [CheckoutLine(keyboard, 2)])
        await run_pipeline()
        payload = await event_payload("OrderCreatedEvent", order.id)
        keys_before = await ledger_keys()

        result = await saga.handle("PaymentCompletedEvent", payload)

        assert result is None
        assert (await load_order(order.id)).status is OrderStatus.CANCELLED
        assert await ledger_keys() == keys_before

    @pytest.mark.asyncio
    async def test_unknown_order_is_acknowledged(
        self, make_saga, seed_product, place_order, event_payload, ledger_keys
    ):
        saga = make_saga()
        keyboard = await seed_product("49.99", stock=5)
        order = await place_order("user-1", [CheckoutLine(keyboard, 1)])
        payload = dict(await event_payload("OrderCreatedEvent", order.id))
        payload["orderId"] = OrderId.generate().value

        result = await saga.handle("OrderCreatedEvent", payload)

        assert result is None
        assert await ledger_keys() == set()

    @pytest.mark.asyncio
    async def test_crashed_step_leaves_no_ledger_row_and_reruns(
        self,
        make_saga,
        seed_product,
        place_order,
        event_payload,
        load_order,
        ledger_keys,
    ):
        """An infrastructure error rolls back the ledger row with the step."""
        gateway = _FlakyPaymentGateway()
        saga = make_saga(payment_gateway=gateway)
        keyboard = await seed_product("49.99", stock=5)
        order = await place_order("user-1", [CheckoutLine(keyboard, 1)])
        await saga.handle(
            "OrderCreatedEvent", await event_payload("OrderCreatedEvent", order.id)
        )
        payload = await event_payload("InventoryReservedEvent", order.id)
        key = idempotency_key("InventoryReservedEvent", order.id.value)

        with pytest.raises(ConnectionError):
            await saga.handle("InventoryReservedEvent", payload)

        assert key not in await ledger_keys()
        assert (await load_order(order.id)).saga_state is SagaState.INVENTORY_RESERVED

        result = await saga.handle("InventoryReservedEvent", payload)

        assert result.succeeded is True
        assert result.next_state is SagaState.PAYMENT_CAPTURED
        assert key in await ledger_keys()
        assert gateway.calls == 2

    @pytest.mark.asyncio
    async def test_concurrent_reservations_never_oversell(
        self,
        make_saga,
        seed_product,
        place_order,
        event_payload,
        load_order,
        stock_of,
        outbox_rows,
    ):
        """Six orders race for three units: three win, three fail."""
        saga = make_saga()
        keyboard = await seed_product("49.99", stock=3)
        orders = [
            await place_order(f"user-{i}", [CheckoutLine(keyboard, 1)])
            for i in range(6)
        ]
        payloads = [
            await event_payload("OrderCreatedEvent", order.id) for order in orders
        ]

        results = await asyncio.gather(
            *(saga.handle("OrderCreatedEvent", payload) for payload in payloads)
        )

        assert sum(result.succeeded for result in results) == 3
        assert await stock_of(keyboard) == 0
        states = [(await load_order(order.id)).saga_state for order in orders]
        assert states.count(SagaState.INVENTORY_RESERVED) == 3
        assert states.count(SagaState.INVENTORY_FAILED) == 3
        kinds = [row.event_type for row in await outbox_rows()]
        assert kinds.count("InventoryReservedEvent") == 3
        assert kinds.count("InventoryFailedEvent") == 3
