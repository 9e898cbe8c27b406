"""Application services for the Ordering bounded context."""

from ordering.application.services.order_service import OrderService

__all__ = ["OrderService"]
