"""Order aggregate for the Ordering context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from ordering.domain.events import (
    DomainEvent,
    InventoryFailedEvent,
    InventoryReservedEvent,
    ItemSnapshot,
    OrderCreatedEvent,
    PaymentCompletedEvent,
    PaymentFailedEvent,
)
from ordering.domain.exceptions import EmptyOrderError
from ordering.domain.saga import SagaEventKind, SagaState, SagaTransition, transition_for
from ordering.domain.value_objects import LineItem, OrderId, OrderStatus

_FOLLOW_UP_EVENTS: dict[SagaEventKind, type[DomainEvent]] = {
    SagaEventKind.INVENTORY_RESERVED: InventoryReservedEvent,
    SagaEventKind.INVENTORY_FAILED: InventoryFailedEvent,
    SagaEventKind.PAYMENT_COMPLETED: PaymentCompletedEvent,
    SagaEventKind.PAYMENT_FAILED: PaymentFailedEvent,
}


@dataclass
class Order:
    """Order aggregate and subject of the fulfilment saga.

    Business rules:
    - An order has at least one line item
    - Line item prices are snapshots taken at creation
    - Status moves from PENDING to COMPLETED or CANCELLED, never back
    - Saga progress only follows the transition table in ordering.domain.saga

    Event collection:
    - Creation records OrderCreatedEvent
    - Every saga step that announces a follow-up records it here
    - Events can be collected via collect_events() for the outbox pattern
    """

    id: OrderId
    user_id: str
    items: tuple[LineItem, ...]
    status: OrderStatus = OrderStatus.PENDING
    saga_state: SagaState = SagaState.AWAITING_INVENTORY
    created_at: datetime | None = None
    _pending_events: list[DomainEvent] = field(default_factory=list, repr=False)

    @property
    def total(self) -> Decimal:
        """Sum of all line item subtotals."""
        return sum((item.subtotal for item in self.items), Decimal("0"))

    @classmethod
    def create(cls, user_id: str, items: list[LineItem]) -> Order:
        """Factory method for creating a new pending order.

        Args:
            user_id: The user placing the order
            items: Line items with prices already snapshotted

        Returns:
            A new Order aggregate with OrderCreatedEvent recorded

        Raises:
            EmptyOrderError: If no line items are given
        """
        if not items:
            raise EmptyOrderError("An order needs at least one line item")

        order = cls(
            id=OrderId.generate(),
            user_id=user_id,
            items=tuple(items),
        )
        order._record(OrderCreatedEvent)
        return order

    def begin_step(self, event_kind: SagaEventKind) -> SagaTransition:
        """Resolve the saga step for an incoming event.

        Raises:
            IllegalSagaTransitionError: If the current saga state does not
                accept this event kind
        """
        return transition_for(self.id.value, self.saga_state, event_kind)

    def complete_step(
        self, transition: SagaTransition, succeeded: bool
    ) -> SagaEventKind | None:
        """Apply the outcome of a saga step.

        Moves the saga state, derives the order status from it and records
        the follow-up event, if the step announces one.

        Returns:
            The follow-up event kind that was recorded, or None
        """
        next_state, follow_up = transition.outcome(succeeded)
        self.saga_state = next_state
        self.status = next_state.order_status

        if follow_up is not None:
            self._record(_FOLLOW_UP_EVENTS[follow_up])
        return follow_up

    def _record(self, event_class: type[DomainEvent]) -> None:
        self._pending_events.append(
            event_class(**self._snapshot(), occurred_at=datetime.now(UTC))
        )

    def _snapshot(self) -> dict[str, Any]:
        return {
            "order_id": self.id.value,
            "user_id": self.user_id,
            "items": tuple(
                ItemSnapshot(
                    product_id=item.product_id.value,
                    quantity=item.quantity,
                    price=item.price,
                )
                for item in self.items
            ),
            "total": self.total,
        }

    def collect_events(self) -> list[DomainEvent]:
        """Return and clear pending domain events.

        Returns:
            List of pending domain events
        """
        events = self._pending_events.copy()
        self._pending_events.clear()
        return events
