"""API test fixtures — FastAPI client with every service replaced by a recording fake.

Invariants:
    - No database: service providers are overridden, so get_db never runs
    - Every fake records (method, args, kwargs) so tests can assert zero calls
    - Tokens are signed with the test secret from the root conftest

Design Decisions:
    - One generic FakeService over per-Protocol fakes: routes only care about
      the returned DTO and whether the call happened
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from httpx import ASGITransport, AsyncClient

from app.api.dependencies import (
    get_admin_service, get_invoice_service, get_menu_service,
    get_offer_service, get_order_service, get_user_service,
)
from app.config import get_settings
from app.main import app


class FakeService:
    """Records every awaited call; returns results[name] or raises errors[name]."""

    def __init__(self):
        self.calls = []
        self.results = {}
        self.errors = {}

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)

        async def method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            if name in self.errors:
                raise self.errors[name]
            return self.results.get(name)

        return method


@pytest.fixture
def menu_service():
    return FakeService()


@pytest.fixture
def offer_service():
    return FakeService()


@pytest.fixture
def order_service():
    return FakeService()


@pytest.fixture
def admin_service():
    return FakeService()


@pytest.fixture
def invoice_service():
    return FakeService()


@pytest.fixture
def user_service():
    return FakeService()


@pytest.fixture
async def client(
    menu_service, offer_service, order_service,
    admin_service, invoice_service, user_service,
):
    app.dependency_overrides[get_menu_service] = lambda: menu_service
    app.dependency_overrides[get_offer_service] = lambda: offer_service
    app.dependency_overrides[get_order_service] = lambda: order_service
    app.dependency_overrides[get_admin_service] = lambda: admin_service
    app.dependency_overrides[get_invoice_service] = lambda: invoice_service
    app.dependency_overrides[get_user_service] = lambda: user_service

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def make_token():
    """Sign an identity token; pass secret/ttl to produce bad ones."""
    settings = get_settings()

    def _make(
        sub: str = "user_123",
        role: str | None = None,
        ttl: timedelta = timedelta(hours=1),
        secret: str | None = None,
        **claims,
    ) -> str:
        payload = {"sub": sub, "exp": datetime.now(timezone.utc) + ttl, **claims}
        if role:
            payload["role"] = role
        return jwt.encode(
            payload, secret or settings.auth_jwt_secret,
            algorithm=settings.auth_jwt_algorithm,
        )

    return _make


@pytest.fixture
def customer_headers(make_token):
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def admin_headers(make_token):
    return {"Authorization": f"Bearer {make_token(sub='admin_1', role='admin')}"}
