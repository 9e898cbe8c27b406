"""Application-layer value objects for the Ordering context."""

from __future__ import annotations

from dataclasses import dataclass

from ordering.domain.saga import SagaAction, SagaEventKind, SagaState
from ordering.domain.value_objects import ProductId


@dataclass(frozen=True)
class CheckoutLine:
    """A product and quantity requested at checkout, before pricing."""

    product_id: ProductId
    quantity: int


@dataclass(frozen=True)
class SagaStepResult:
    """What one saga handler invocation did.

    Attributes:
        order_id: The order the step ran for
        action: The action that was performed
        succeeded: Business outcome of the action
        next_state: Saga state the order moved to
        follow_up: Event kind appended to the outbox, if any
    """

    order_id: str
    action: SagaAction
    succeeded: bool
    next_state: SagaState
    follow_up: SagaEventKind | None
