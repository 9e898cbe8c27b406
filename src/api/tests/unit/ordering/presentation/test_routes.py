"""Unit tests for order HTTP routes."""

from decimal import Decimal
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from ordering.domain.aggregates import Order
from ordering.domain.value_objects import LineItem, ProductId
from ordering.ports.exceptions import OrderCreationConflictError, ProductNotFoundError

KEYBOARD = "01ARZCX0P0HZGQP3MZXQQ0PR01"


@pytest.fixture
def mock_order_service():
    """Mock OrderService for testing."""
    service = Mock()
    service.create_order = AsyncMock()
    service.get_order = AsyncMock(return_value=None)
    return service


@pytest.fixture
def test_client(mock_order_service):
    """Create TestClient with mocked dependencies."""
    from fastapi import FastAPI

    from ordering import dependencies
    from ordering.presentation import routes

    app = FastAPI()
    app.dependency_overrides[dependencies.get_order_service] = (
        lambda: mock_order_service
    )
    app.include_router(routes.router)

    return TestClient(app)


@pytest.fixture
def pending_order():
    order = Order.create(
        user_id="user-1",
        items=[
            LineItem(
                product_id=ProductId(value=KEYBOARD),
                quantity=2,
                price=Decimal("49.99"),
            )
        ],
    )
    order.collect_events()
    return order


class TestCreateOrderRoute:
    """Tests for POST /orders."""

    def test_returns_pending_order(self, test_client, mock_order_service, pending_order):
        mock_order_service.create_order.return_value = pending_order

        response = test_client.post(
            "/orders",
            json={"user_id": "user-1", "items": [{"product_id": KEYBOARD, "quantity": 2}]},
        )

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["id"] == pending_order.id.value
        assert body["status"] == "PENDING"
        assert body["saga_state"] == "AWAITING_INVENTORY"
        assert Decimal(body["total"]) == Decimal("99.98")
        lines = mock_order_service.create_order.call_args.kwargs["lines"]
        assert lines[0].product_id == ProductId(value=KEYBOARD)
        assert lines[0].quantity == 2

    def test_unknown_product_returns_404(self, test_client, mock_order_service):
        mock_order_service.create_order.side_effect = ProductNotFoundError([KEYBOARD])

        response = test_client.post(
            "/orders",
            json={"user_id": "user-1", "items": [{"product_id": KEYBOARD, "quantity": 1}]},
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert KEYBOARD in response.json()["detail"]

    def test_conflict_returns_409(self, test_client, mock_order_service):
        mock_order_service.create_order.side_effect = OrderCreationConflictError("x")

        response = test_client.post(
            "/orders",
            json={"user_id": "user-1", "items": [{"product_id": KEYBOARD, "quantity": 1}]},
        )

        assert response.status_code == status.HTTP_409_CONFLICT

    @pytest.mark.parametrize(
        "body",
        [
            {"user_id": "user-1", "items": []},
            {"user_id": "user-1", "items": [{"product_id": KEYBOARD, "quantity": 0}]},
            {"items": [{"product_id": KEYBOARD, "quantity": 1}]},
        ],
    )
    def test_invalid_body_returns_422(self, test_client, mock_order_service, body):
        response = test_client.post("/orders", json=body)

        assert response.status_code == 422
        mock_order_service.create_order.assert_not_called()


class TestGetOrderRoute:
    """Tests for GET /orders/{order_id}."""

    def test_returns_order(self, test_client, mock_order_service, pending_order):
        mock_order_service.get_order.return_value = pending_order

        response = test_client.get(f"/orders/{pending_order.id.value}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["items"][0]["product_id"] == KEYBOARD

    def test_invalid_id_returns_400(self, test_client, mock_order_service):
        response = test_client.get("/orders/not-a-ulid")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        mock_order_service.get_order.assert_not_called()

    def test_missing_order_returns_404(self, test_client):
        response = test_client.get("/orders/01ARZCX0P0HZGQP3MZXQQ0NNZZ")

        assert response.status_code == status.HTTP_404_NOT_FOUND
