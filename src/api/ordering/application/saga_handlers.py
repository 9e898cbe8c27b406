"""Broker subscribers that drive the order fulfilment saga.

One handler serves every saga event kind. Each invocation runs in a
transaction of its own:

    ledger insert -> load order -> look up transition -> perform action
    -> update order -> append follow-up event to the outbox -> commit

The follow-up event is therefore published by the outbox relay only
after the step it announces has committed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from infrastructure.idempotency import (
    DuplicateEventError,
    ProcessedEventLedger,
    idempotency_key,
)
from infrastructure.outbox.repository import OutboxRepository
from ordering.application.observability import DefaultSagaProbe, SagaProbe
from ordering.application.payloads import SagaEvent, parse_saga_event
from ordering.application.value_objects import SagaStepResult
from ordering.domain.aggregates import Order
from ordering.domain.exceptions import IllegalSagaTransitionError
from ordering.domain.saga import SagaAction, SagaEventKind
from ordering.infrastructure.inventory_repository import InventoryRepository
from ordering.infrastructure.order_repository import OrderRepository
from ordering.ports.exceptions import InvalidEventPayloadError, OrderNotFoundError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from ordering.ports.payments import PaymentGateway
    from ordering.ports.repositories import IInventoryRepository
    from shared_kernel.messaging.ports import MessageBroker


class OrderSagaHandlers:
    """Saga orchestrator and compensation handler.

    Business outcomes (insufficient stock, declined payment) become
    failure events and are never retried. Duplicate deliveries, illegal
    transitions, unknown orders and invalid payloads are acknowledged
    without effect. Anything else (store or gateway errors) propagates so
    the broker redelivers the message.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        payment_gateway: PaymentGateway,
        release_inventory_on_payment_failure: bool = False,
        probe: SagaProbe | None = None,
    ) -> None:
        """Initialize the handlers.

        Args:
            session_factory: Factory for one session per delivery
            payment_gateway: Gateway used by the payment step
            release_inventory_on_payment_failure: Give reserved stock back
                when an order is cancelled after a declined payment
            probe: Optional domain probe for observability
        """
        self._session_factory = session_factory
        self._payment_gateway = payment_gateway
        self._release_on_payment_failure = release_inventory_on_payment_failure
        self._probe = probe or DefaultSagaProbe()

    def register(self, broker: MessageBroker) -> list[str]:
        """Subscribe to every saga event kind.

        Returns:
            The subscribed event kinds
        """
        kinds = [kind.value for kind in SagaEventKind]
        for kind in kinds:
            broker.subscribe(kind, self.handle)
        return kinds

    async def handle(
        self, event_kind: str, payload: dict[str, Any]
    ) -> SagaStepResult | None:
        """Handle one delivery of a saga event.

        Returns:
            The committed step, or None if the delivery had no effect
        """
        try:
            event = parse_saga_event(event_kind, payload)
        except InvalidEventPayloadError as e:
            self._probe.invalid_payload(event_kind, str(e))
            return None

        order_id = event.order_id.value
        key = idempotency_key(event.kind.value, order_id)
        self._probe.event_received(event.kind.value, order_id)

        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await ProcessedEventLedger(session).record(key, event.kind.value)
                    result = await self._run_step(session, event)
        except DuplicateEventError:
            self._probe.duplicate_event_skipped(event.kind.value, order_id, key)
            return None
        except IllegalSagaTransitionError as e:
            self._probe.transition_rejected(order_id, e.state.value, event.kind.value)
            return None
        except OrderNotFoundError:
            self._probe.order_not_found(event.kind.value, order_id)
            return None

        self._probe.step_completed(
            order_id=order_id,
            action=result.action.value,
            succeeded=result.succeeded,
            next_state=result.next_state.value,
            follow_up=result.follow_up.value if result.follow_up else None,
        )
        return result

    async def _run_step(self, session: AsyncSession, event: SagaEvent) -> SagaStepResult:
        orders = OrderRepository(session=session, outbox=OutboxRepository(session))
        inventory = InventoryRepository(session=session)

        order = await orders.get_by_id(event.order_id)
        if order is None:
            raise OrderNotFoundError(f"Order {event.order_id} not found")

        transition = order.begin_step(event.kind)
        succeeded = await self._perform(transition.action, event.kind, order, inventory)
        follow_up = order.complete_step(transition, succeeded)
        await orders.save(order)

        return SagaStepResult(
            order_id=order.id.value,
            action=transition.action,
            succeeded=succeeded,
            next_state=order.saga_state,
            follow_up=follow_up,
        )

    async def _perform(
        self,
        action: SagaAction,
        event_kind: SagaEventKind,
        order: Order,
        inventory: IInventoryRepository,
    ) -> bool:
        match action:
            case SagaAction.RESERVE_INVENTORY:
                return await inventory.reserve(order.items)

            case SagaAction.CAPTURE_PAYMENT:
                return await self._payment_gateway.capture(order.id.value, order.total)

            case SagaAction.COMPLETE_ORDER:
                return True

            case SagaAction.CANCEL_ORDER:
                if (
                    event_kind is SagaEventKind.PAYMENT_FAILED
                    and self._release_on_payment_failure
                ):
                    await inventory.release(order.items)
                    self._probe.inventory_released(order.id.value)
                return True
