"""Order fulfilment saga as an explicit state machine.

Each order carries its saga state. An incoming event is looked up
together with that state in ``TRANSITIONS``; the entry names the action
to perform and where the saga goes on success or on failure, and which
follow-up event to announce. Any pair missing from the table is illegal.

    AWAITING_INVENTORY --OrderCreatedEvent--> reserve inventory
        ok   -> INVENTORY_RESERVED, emit InventoryReservedEvent
        fail -> INVENTORY_FAILED,   emit InventoryFailedEvent
    INVENTORY_RESERVED --InventoryReservedEvent--> capture payment
        ok   -> PAYMENT_CAPTURED,   emit PaymentCompletedEvent
        fail -> PAYMENT_FAILED,     emit PaymentFailedEvent
    PAYMENT_CAPTURED --PaymentCompletedEvent--> COMPLETED
    INVENTORY_FAILED --InventoryFailedEvent--> CANCELLED
    PAYMENT_FAILED   --PaymentFailedEvent-->   CANCELLED
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from ordering.domain.exceptions import IllegalSagaTransitionError
from ordering.domain.value_objects import OrderStatus


class SagaState(StrEnum):
    """Position of one order in the fulfilment saga."""

    AWAITING_INVENTORY = "AWAITING_INVENTORY"
    INVENTORY_RESERVED = "INVENTORY_RESERVED"
    INVENTORY_FAILED = "INVENTORY_FAILED"
    PAYMENT_CAPTURED = "PAYMENT_CAPTURED"
    PAYMENT_FAILED = "PAYMENT_FAILED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @property
    def order_status(self) -> OrderStatus:
        """Customer-visible status for this saga state."""
        if self is SagaState.COMPLETED:
            return OrderStatus.COMPLETED
        if self is SagaState.CANCELLED:
            return OrderStatus.CANCELLED
        return OrderStatus.PENDING


class SagaEventKind(StrEnum):
    """Event kinds driving the saga. Values are the broker routing keys."""

    ORDER_CREATED = "OrderCreatedEvent"
    INVENTORY_RESERVED = "InventoryReservedEvent"
    INVENTORY_FAILED = "InventoryFailedEvent"
    PAYMENT_COMPLETED = "PaymentCompletedEvent"
    PAYMENT_FAILED = "PaymentFailedEvent"


class SagaAction(StrEnum):
    """Local work a saga step performs before changing state."""

    RESERVE_INVENTORY = "reserve_inventory"
    CAPTURE_PAYMENT = "capture_payment"
    COMPLETE_ORDER = "complete_order"
    CANCEL_ORDER = "cancel_order"


@dataclass(frozen=True)
class SagaTransition:
    """One row of the transition table.

    Actions that cannot fail (completing, cancelling) have no failure
    branch and announce nothing.
    """

    action: SagaAction
    on_success: SagaState
    emit_on_success: SagaEventKind | None = None
    on_failure: SagaState | None = None
    emit_on_failure: SagaEventKind | None = None

    def outcome(self, succeeded: bool) -> tuple[SagaState, SagaEventKind | None]:
        """Return the next state and the follow-up event for an outcome.

        Raises:
            ValueError: If a failure is reported for an action that cannot fail
        """
        if succeeded:
            return self.on_success, self.emit_on_success
        if self.on_failure is None:
            raise ValueError(f"Action {self.action} has no failure outcome")
        return self.on_failure, self.emit_on_failure


TRANSITIONS: dict[tuple[SagaState, SagaEventKind], SagaTransition] = {
    (SagaState.AWAITING_INVENTORY, SagaEventKind.ORDER_CREATED): SagaTransition(
        action=SagaAction.RESERVE_INVENTORY,
        on_success=SagaState.INVENTORY_RESERVED,
        emit_on_success=SagaEventKind.INVENTORY_RESERVED,
        on_failure=SagaState.INVENTORY_FAILED,
        emit_on_failure=SagaEventKind.INVENTORY_FAILED,
    ),
    (SagaState.INVENTORY_RESERVED, SagaEventKind.INVENTORY_RESERVED): SagaTransition(
        action=SagaAction.CAPTURE_PAYMENT,
        on_success=SagaState.PAYMENT_CAPTURED,
        emit_on_success=SagaEventKind.PAYMENT_COMPLETED,
        on_failure=SagaState.PAYMENT_FAILED,
        emit_on_failure=SagaEventKind.PAYMENT_FAILED,
    ),
    (SagaState.PAYMENT_CAPTURED, SagaEventKind.PAYMENT_COMPLETED): SagaTransition(
        action=SagaAction.COMPLETE_ORDER,
        on_success=SagaState.COMPLETED,
    ),
    (SagaState.INVENTORY_FAILED, SagaEventKind.INVENTORY_FAILED): SagaTransition(
        action=SagaAction.CANCEL_ORDER,
        on_success=SagaState.CANCELLED,
    ),
    (SagaState.PAYMENT_FAILED, SagaEventKind.PAYMENT_FAILED): SagaTransition(
        action=SagaAction.CANCEL_ORDER,
        on_success=SagaState.CANCELLED,
    ),
}


def transition_for(
    order_id: str, state: SagaState, event_kind: SagaEventKind
) -> SagaTransition:
    """Look up the transition for an incoming event.

    Raises:
        IllegalSagaTransitionError: If the state does not accept the event
    """
    try:
        return TRANSITIONS[(state, event_kind)]
    except KeyError:
        raise IllegalSagaTransitionError(order_id, state, event_kind) from None
