"""Pydantic models for order API requests and responses."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from ordering.application.value_objects import CheckoutLine
from ordering.domain.aggregates import Order
from ordering.domain.value_objects import ProductId


class OrderLineRequest(BaseModel):
    """One requested product."""

    product_id: str = Field(..., description="Product ID", min_length=1, max_length=26)
    quantity: int = Field(..., description="Quantity to order", ge=1)

    def to_checkout_line(self) -> CheckoutLine:
        """Convert to the application checkout line."""
        return CheckoutLine(
            product_id=ProductId(value=self.product_id), quantity=self.quantity
        )


class CreateOrderRequest(BaseModel):
    """Request model for creating an order."""

    user_id: str = Field(..., description="User placing the order", min_length=1)
    items: list[OrderLineRequest] = Field(..., min_length=1)


class OrderItemResponse(BaseModel):
    """Response model for an order line item."""

    product_id: str
    quantity: int
    price: Decimal = Field(..., description="Unit price at checkout")


class OrderResponse(BaseModel):
    """Response model for an order."""

    id: str = Field(..., description="Order ID (ULID format)")
    user_id: str
    status: str = Field(..., description="PENDING, COMPLETED or CANCELLED")
    saga_state: str = Field(..., description="Position in the fulfilment saga")
    total: Decimal
    items: list[OrderItemResponse]
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, order: Order) -> OrderResponse:
        """Convert domain Order aggregate to API response.

        Args:
            order: Order domain aggregate

        Returns:
            OrderResponse
        """
        return cls(
            id=order.id.value,
            user_id=order.user_id,
            status=order.status.value,
            saga_state=order.saga_state.value,
            total=order.total,
            items=[
                OrderItemResponse(
                    product_id=item.product_id.value,
                    quantity=item.quantity,
                    price=item.price,
                )
                for item in order.items
            ],
            created_at=order.created_at,
        )
