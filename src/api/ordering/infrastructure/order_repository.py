"""SQLAlchemy implementation of IOrderRepository.

Write operations use the transactional outbox pattern - domain events are
collected from the aggregate and appended to the outbox table in the same
transaction as the order rows.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ordering.domain.aggregates import Order
from ordering.domain.saga import SagaState
from ordering.domain.value_objects import LineItem, OrderId, OrderStatus, ProductId
from ordering.infrastructure.models import OrderItemModel, OrderModel
from ordering.infrastructure.observability import (
    DefaultOrderRepositoryProbe,
    OrderRepositoryProbe,
)
from ordering.infrastructure.outbox import OrderEventSerializer
from ordering.ports.exceptions import OrderCreationConflictError
from ordering.ports.repositories import IOrderRepository

if TYPE_CHECKING:
    from shared_kernel.outbox.ports import IOutboxRepository


class OrderRepository(IOrderRepository):
    """Repository managing storage for Order aggregates.

    Write operations use the transactional outbox pattern:
    - Order rows are written and flushed first, so constraint violations
      surface before any event is written
    - Domain events are collected from the aggregate
    - Events are appended to the outbox table (same transaction)
    - The outbox relay publishes them after commit
    """

    def __init__(
        self,
        session: AsyncSession,
        outbox: IOutboxRepository,
        probe: OrderRepositoryProbe | None = None,
        serializer: OrderEventSerializer | None = None,
    ) -> None:
        """Initialize repository with database session and outbox.

        Args:
            session: AsyncSession shared with the calling service
            outbox: Outbox repository for the transactional outbox pattern
            probe: Optional domain probe for observability
            serializer: Optional event serializer for testability
        """
        self._session = session
        self._outbox = outbox
        self._probe = probe or DefaultOrderRepositoryProbe()
        self._serializer = serializer or OrderEventSerializer()

    async def save(self, order: Order) -> None:
        """Persist the order, then its pending events to the outbox.

        Args:
            order: The Order aggregate to persist

        Raises:
            OrderCreationConflictError: If the store rejects the order rows
        """
        model = await self._session.get(OrderModel, order.id.value)

        if model:
            model.status = order.status.value
            model.saga_state = order.saga_state.value
        else:
            model = OrderModel(
                id=order.id.value,
                user_id=order.user_id,
                total=order.total,
                status=order.status.value,
                saga_state=order.saga_state.value,
                items=[
                    OrderItemModel(
                        product_id=item.product_id.value,
                        quantity=item.quantity,
                        price=item.price,
                    )
                    for item in order.items
                ],
            )
            self._session.add(model)

        try:
            # Flush to catch integrity errors before outbox writes
            await self._session.flush()
        except IntegrityError as e:
            self._probe.order_conflict(order.id.value, str(e.orig))
            raise OrderCreationConflictError(
                f"Order {order.id.value} conflicts with existing data"
            ) from e

        order.created_at = model.created_at

        events = order.collect_events()
        for event in events:
            await self._outbox.append(
                event_type=self._serializer.event_type(event),
                payload=self._serializer.serialize(event),
                occurred_at=event.occurred_at,
                aggregate_type="order",
                aggregate_id=order.id.value,
            )

        self._probe.order_saved(order.id.value, order.saga_state.value, len(events))

    async def get_by_id(self, order_id: OrderId) -> Order | None:
        """Fetch an order with its line items.

        Args:
            order_id: The unique identifier of the order

        Returns:
            The Order aggregate, or None if not found
        """
        model = await self._session.get(OrderModel, order_id.value)
        if model is None:
            return None

        self._probe.order_retrieved(order_id.value)
        return self._to_domain(model)

    def _to_domain(self, model: OrderModel) -> Order:
        return Order(
            id=OrderId(value=model.id),
            user_id=model.user_id,
            items=tuple(
                LineItem(
                    product_id=ProductId(value=item.product_id),
                    quantity=item.quantity,
                    price=Decimal(item.price),
                )
                for item in model.items
            ),
            status=OrderStatus(model.status),
            saga_state=SagaState(model.saga_state),
            created_at=model.created_at,
        )
