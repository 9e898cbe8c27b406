"""Domain exceptions for the Ordering context."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ordering.domain.saga import SagaEventKind, SagaState


class EmptyOrderError(Exception):
    """Raised when an order is created without line items."""

    pass


class IllegalSagaTransitionError(Exception):
    """Raised when an event arrives that the order's saga state does not accept.

    For example a PaymentCompletedEvent for an order that is already
    CANCELLED. The event must be rejected rather than re-applied.
    """

    def __init__(self, order_id: str, state: SagaState, event_kind: SagaEventKind):
        super().__init__(
            f"Order {order_id} in saga state {state} cannot handle {event_kind}"
        )
        self.order_id = order_id
        self.state = state
        self.event_kind = event_kind
