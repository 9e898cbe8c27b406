"""Order application service.

Handles checkout and order lookup. Checkout is the first half of the
transactional outbox: the order and its OrderCreatedEvent commit together
or not at all, and no broker is involved.
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ordering.application.observability import (
    DefaultOrderServiceProbe,
    OrderServiceProbe,
)
from ordering.application.value_objects import CheckoutLine
from ordering.domain.aggregates import Order
from ordering.domain.value_objects import LineItem, OrderId
from ordering.ports.exceptions import OrderCreationConflictError, ProductNotFoundError
from ordering.ports.repositories import IOrderRepository, IProductRepository


class OrderService:
    """Application service for orders."""

    def __init__(
        self,
        session: AsyncSession,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
        probe: OrderServiceProbe | None = None,
    ):
        """Initialize OrderService with dependencies.

        Args:
            session: Database session for transaction management
            order_repository: Repository for order persistence
            product_repository: Repository for catalogue prices
            probe: Optional domain probe for observability
        """
        self._session = session
        self._orders = order_repository
        self._products = product_repository
        self._probe = probe or DefaultOrderServiceProbe()

    async def create_order(self, user_id: str, lines: list[CheckoutLine]) -> Order:
        """Create a pending order and its OrderCreatedEvent atomically.

        Unit prices are read from the catalogue and snapshotted into the
        line items.

        Args:
            user_id: The user placing the order
            lines: Requested products and quantities

        Returns:
            The created Order aggregate

        Raises:
            ProductNotFoundError: If any product does not exist
            OrderCreationConflictError: If the store rejects the order
            EmptyOrderError: If no lines are given
        """
        try:
            async with self._session.begin():
                prices = await self._products.get_prices(
                    [line.product_id for line in lines]
                )
                missing = sorted(
                    {line.product_id.value for line in lines if line.product_id not in prices}
                )
                if missing:
                    self._probe.products_not_found(missing)
                    raise ProductNotFoundError(missing)

                order = Order.create(
                    user_id=user_id,
                    items=[
                        LineItem(
                            product_id=line.product_id,
                            quantity=line.quantity,
                            price=prices[line.product_id],
                        )
                        for line in lines
                    ],
                )
                await self._orders.save(order)

        except OrderCreationConflictError as e:
            self._probe.order_creation_conflict(user_id, str(e))
            raise
        except IntegrityError as e:
            self._probe.order_creation_conflict(user_id, str(e.orig))
            raise OrderCreationConflictError("Failed to create order") from e

        self._probe.order_created(
            order_id=order.id.value,
            user_id=user_id,
            total=order.total,
            item_count=len(order.items),
        )
        return order

    async def get_order(self, order_id: OrderId) -> Order | None:
        """Retrieve an order with its status and saga state.

        Args:
            order_id: The unique identifier of the order

        Returns:
            The Order aggregate, or None if not found
        """
        order = await self._orders.get_by_id(order_id)
        if order is None:
            self._probe.order_not_found(order_id.value)
        return order
