"""Ports (interfaces) for the Ordering bounded context.

Ports define the contracts for repositories and the payment gateway
without specifying implementation details.
"""

from ordering.ports.exceptions import (
    InvalidEventPayloadError,
    OrderCreationConflictError,
    OrderNotFoundError,
    ProductNotFoundError,
)
from ordering.ports.payments import PaymentGateway
from ordering.ports.repositories import (
    IInventoryRepository,
    IOrderRepository,
    IProductRepository,
)

__all__ = [
    "IInventoryRepository",
    "IOrderRepository",
    "IProductRepository",
    "InvalidEventPayloadError",
    "OrderCreationConflictError",
    "OrderNotFoundError",
    "PaymentGateway",
    "ProductNotFoundError",
]
