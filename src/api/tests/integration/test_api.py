"""Integration tests for the HTTP API with the full application lifespan.

The application runs against a temporary SQLite file with the in-memory
broker consuming in the background. The relay poll loop is disabled;
tests run relay cycles themselves through ``app.state.relay``.
"""

import asyncio
from decimal import Decimal

import httpx
import pytest
import pytest_asyncio
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient

from infrastructure import settings as settings_module
from ordering.infrastructure.models import InventoryModel, ProductModel

pytestmark = [pytest.mark.integration]

_CACHED_SETTINGS = (
    settings_module.get_settings,
    settings_module.get_database_settings,
    settings_module.get_broker_settings,
    settings_module.get_outbox_settings,
    settings_module.get_saga_settings,
)


def _clear_settings_cache() -> None:
    for getter in _CACHED_SETTINGS:
        getter.cache_clear()


@pytest.fixture
def app_environment(monkeypatch, tmp_path):
    """Point the application at a temporary SQLite store and in-memory broker."""
    monkeypatch.setenv("SHOPSPHERE_DB_URL", f"sqlite+aiosqlite:///{tmp_path / 'api.db'}")
    monkeypatch.setenv("SHOPSPHERE_DB_CREATE_SCHEMA", "true")
    monkeypatch.setenv("SHOPSPHERE_BROKER_BACKEND", "memory")
    monkeypatch.setenv("SHOPSPHERE_OUTBOX_RELAY_ENABLED", "false")
    monkeypatch.setenv("SHOPSPHERE_SAGA_PAYMENT_SUCCESS_RATE", "1.0")
    _clear_settings_cache()
    yield
    _clear_settings_cache()


@pytest_asyncio.fixture
async def app(app_environment):
    from main import app

    async with LifespanManager(app):
        yield app


@pytest_asyncio.fixture
async def async_client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def keyboard_id(app) -> str:
    product_id = "01ARZCX0P0HZGQP3MZXQQ0PR01"
    async with app.state.database.session_factory() as session:
        async with session.begin():
            session.add(
                ProductModel(id=product_id, name="Keyboard", price=Decimal("49.99"))
            )
            await session.flush()
            session.add(InventoryModel(product_id=product_id, quantity=5))
    return product_id


async def _wait_for_status(app, client: AsyncClient, order_id: str, expected: str):
    """Run relay cycles until the consuming broker moved the order on."""
    for _ in range(100):
        await app.state.relay.run_once()
        response = await client.get(f"/orders/{order_id}")
        if response.json()["status"] == expected:
            return response
        await asyncio.sleep(0.02)
    raise AssertionError(f"Order {order_id} never reached {expected}")


class TestOrderApi:
    """Checkout over HTTP followed by the saga."""

    @pytest.mark.asyncio
    async def test_health(self, async_client: AsyncClient):
        response = await async_client.get("/health")

        assert response.status_code == httpx.codes.OK
        assert response.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_order_is_pending_then_completed(
        self, app, async_client: AsyncClient, keyboard_id: str
    ):
        response = await async_client.post(
            "/orders",
            json={"user_id": "user-1", "items": [{"product_id": keyboard_id, "quantity": 2}]},
        )

        assert response.status_code == httpx.codes.CREATED
        created = response.json()
        assert created["status"] == "PENDING"
        assert Decimal(created["total"]) == Decimal("99.98")

        response = await _wait_for_status(app, async_client, created["id"], "COMPLETED")
        assert response.json()["saga_state"] == "COMPLETED"

    @pytest.mark.asyncio
    async def test_unknown_product_returns_404(
        self, async_client: AsyncClient, keyboard_id: str
    ):
        response = await async_client.post(
            "/orders",
            json={
                "user_id": "user-1",
                "items": [{"product_id": "01ARZCX0P0HZGQP3MZXQQ0PR99", "quantity": 1}],
            },
        )

        assert response.status_code == httpx.codes.NOT_FOUND


class TestUserApi:
    """Registration over HTTP."""

    @pytest.mark.asyncio
    async def test_register_and_reject_duplicate(self, async_client: AsyncClient):
        first = await async_client.post("/users", json={"email": "alice@example.com"})
        second = await async_client.post("/users", json={"email": "ALICE@example.com"})

        assert first.status_code == httpx.codes.CREATED
        assert first.json()["email"] == "alice@example.com"
        assert second.status_code == httpx.codes.CONFLICT
