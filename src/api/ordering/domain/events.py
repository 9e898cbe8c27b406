"""Domain events for the Ordering bounded context.

Every saga event describes the same order: its id, owner, line items with
their price snapshots, and total. Follow-up events therefore carry the
payload of the event that triggered them unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class ItemSnapshot:
    """Line item as announced in an event."""

    product_id: str
    quantity: int
    price: Decimal


@dataclass(frozen=True)
class OrderEvent:
    """Fields shared by every order saga event.

    Attributes:
        order_id: The ULID of the order
        user_id: The user who placed the order
        items: Line items with the unit price taken at checkout
        total: Order total
        occurred_at: When the event occurred (UTC)
    """

    order_id: str
    user_id: str
    items: tuple[ItemSnapshot, ...]
    total: Decimal
    occurred_at: datetime


@dataclass(frozen=True)
class OrderCreatedEvent(OrderEvent):
    """Raised at checkout, in the transaction that creates the order."""


@dataclass(frozen=True)
class InventoryReservedEvent(OrderEvent):
    """Raised when stock for every line item was reserved."""


@dataclass(frozen=True)
class InventoryFailedEvent(OrderEvent):
    """Raised when at least one line item could not be reserved."""


@dataclass(frozen=True)
class PaymentCompletedEvent(OrderEvent):
    """Raised when the payment for the order was captured."""


@dataclass(frozen=True)
class PaymentFailedEvent(OrderEvent):
    """Raised when the payment for the order was declined."""


DomainEvent = (
    OrderCreatedEvent
    | InventoryReservedEvent
    | InventoryFailedEvent
    | PaymentCompletedEvent
    | PaymentFailedEvent
)
