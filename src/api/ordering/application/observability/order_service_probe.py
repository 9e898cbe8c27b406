"""Protocol for order application service observability."""

from __future__ import annotations

from decimal import Decimal
from typing import Protocol

import structlog


class OrderServiceProbe(Protocol):
    """Domain probe for checkout and order queries."""

    def order_created(
        self, order_id: str, user_id: str, total: Decimal, item_count: int
    ) -> None:
        """Record that an order and its OrderCreatedEvent were committed."""
        ...

    def products_not_found(self, product_ids: list[str]) -> None:
        """Record that checkout referenced unknown products."""
        ...

    def order_creation_conflict(self, user_id: str, error: str) -> None:
        """Record that the store rejected a new order."""
        ...

    def order_not_found(self, order_id: str) -> None:
        """Record that an order was not found."""
        ...


class DefaultOrderServiceProbe:
    """Default implementation of OrderServiceProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def order_created(
        self, order_id: str, user_id: str, total: Decimal, item_count: int
    ) -> None:
        """Record that an order and its OrderCreatedEvent were committed."""
        self._logger.info(
            "order_created",
            order_id=order_id,
            user_id=user_id,
            total=str(total),
            item_count=item_count,
        )

    def products_not_found(self, product_ids: list[str]) -> None:
        """Record that checkout referenced unknown products."""
        self._logger.info("order_products_not_found", product_ids=product_ids)

    def order_creation_conflict(self, user_id: str, error: str) -> None:
        """Record that the store rejected a new order."""
        self._logger.warning("order_creation_conflict", user_id=user_id, error=error)

    def order_not_found(self, order_id: str) -> None:
        """Record that an order was not found."""
        self._logger.debug("order_not_found", order_id=order_id)
