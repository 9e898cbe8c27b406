"""HTTP routes for orders."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from ordering.application.services import OrderService
from ordering.dependencies import get_order_service
from ordering.domain.value_objects import OrderId
from ordering.ports.exceptions import OrderCreationConflictError, ProductNotFoundError
from ordering.presentation.models import CreateOrderRequest, OrderResponse

router = APIRouter(
    prefix="/orders",
    tags=["orders"],
)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
)
async def create_order(
    request: CreateOrderRequest,
    service: Annotated[OrderService, Depends(get_order_service)],
) -> OrderResponse:
    """Place an order.

    The order is returned PENDING; the saga moves it to COMPLETED or
    CANCELLED asynchronously.

    Raises:
        HTTPException: 404 if a product does not exist
        HTTPException: 409 if the store rejected the order
    """
    try:
        order = await service.create_order(
            user_id=request.user_id,
            lines=[line.to_checkout_line() for line in request.items],
        )
        return OrderResponse.from_domain(order)

    except ProductNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Products not found: {', '.join(e.product_ids)}",
        ) from e
    except OrderCreationConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Failed to create order due to a conflict",
        ) from e


@router.get("/{order_id}")
async def get_order(
    order_id: str,
    service: Annotated[OrderService, Depends(get_order_service)],
) -> OrderResponse:
    """Get an order with its status and saga state.

    Raises:
        HTTPException: 400 if the order ID is invalid
        HTTPException: 404 if the order does not exist
    """
    try:
        order_id_obj = OrderId.from_string(order_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid order ID format: {e}",
        ) from e

    order = await service.get_order(order_id_obj)
    if order is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Order {order_id} not found",
        )
    return OrderResponse.from_domain(order)
