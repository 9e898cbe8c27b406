"""Repository protocols (ports) for the Ordering bounded context.

Repositories share the session of the calling service or saga handler
and never commit; the caller owns the transaction boundary.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Protocol, runtime_checkable

from ordering.domain.aggregates import Order
from ordering.domain.value_objects import LineItem, OrderId, ProductId


@runtime_checkable
class IOrderRepository(Protocol):
    """Repository for Order aggregate persistence."""

    async def save(self, order: Order) -> None:
        """Persist an order and append its pending events to the outbox.

        Creates the order and its line items, or updates status and saga
        state of an existing order, within the current transaction.

        Args:
            order: The Order aggregate to persist

        Raises:
            OrderCreationConflictError: If the store rejects the order
        """
        ...

    async def get_by_id(self, order_id: OrderId) -> Order | None:
        """Retrieve an order with its line items.

        Args:
            order_id: The unique identifier of the order

        Returns:
            The Order aggregate, or None if not found
        """
        ...


@runtime_checkable
class IProductRepository(Protocol):
    """Read access to catalogue prices."""

    async def get_prices(self, product_ids: list[ProductId]) -> dict[ProductId, Decimal]:
        """Return the current unit price of every product that exists.

        Products that do not exist are absent from the result.
        """
        ...


@runtime_checkable
class IInventoryRepository(Protocol):
    """Stock levels with atomic conditional reservation."""

    async def reserve(self, items: tuple[LineItem, ...]) -> bool:
        """Decrement stock for every line item, or for none of them.

        Returns:
            True if every line was reserved, False if any line lacked stock
        """
        ...

    async def release(self, items: tuple[LineItem, ...]) -> None:
        """Give the quantities of the line items back to stock."""
        ...

    async def get_quantity(self, product_id: ProductId) -> int | None:
        """Return the stock level of a product, or None if it has no stock row."""
        ...
