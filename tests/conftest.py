from __future__ import annotations

from decimal import Decimal

import pytest
from django.apps import apps
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

from modules.accounts.models import UserRole
from modules.payments.config import PaymentSettings
from modules.payments.gateway import FakeGateway
from modules.products.models import Product

User = get_user_model()

KEY_SECRET = "test-key-secret"
WEBHOOK_SECRET = "test-webhook-secret"


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters live in the cache; start every test from zero."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


@pytest.fixture()
def user():
    return User.objects.create_user("shopper@example.com", password="Shopper@123", name="Asha")


@pytest.fixture()
def other_user():
    return User.objects.create_user("other@example.com", password="Other@1234", name="Ravi")


@pytest.fixture()
def admin_user():
    return User.objects.create_user(
        "admin@example.com", password="Admin@1234", name="Admin", role=UserRole.ADMIN
    )


@pytest.fixture()
def auth_client(user):
    """APIClient force-authenticated as a regular shopper."""
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@pytest.fixture()
def product():
    return Product.objects.create(
        name="Cotton Kurta",
        price=Decimal("100.00"),
        image_url="https://cdn.example.com/kurta.png",
    )


@pytest.fixture()
def second_product():
    return Product.objects.create(name="Copper Bottle", price=Decimal("25.50"))


@pytest.fixture()
def inactive_product():
    return Product.objects.create(name="Retired Lamp", price=Decimal("10.00"), is_active=False)


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------


@pytest.fixture()
def payments_app(monkeypatch):
    """The payments app config, with a fresh fake gateway installed."""
    app_config = apps.get_app_config("payments")
    monkeypatch.setattr(
        app_config,
        "payment_settings",
        PaymentSettings(
            gateway="fake",
            key_id="rzp_test_key",
            key_secret=KEY_SECRET,
            webhook_secret=WEBHOOK_SECRET,
        ),
    )
    monkeypatch.setattr(app_config, "gateway", FakeGateway())
    return app_config


@pytest.fixture()
def fake_gateway(payments_app) -> FakeGateway:
    return payments_app.gateway


@pytest.fixture()
def payments_disabled(monkeypatch):
    app_config = apps.get_app_config("payments")
    monkeypatch.setattr(app_config, "payment_settings", PaymentSettings())
    monkeypatch.setattr(app_config, "gateway", None)
    return app_config


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_order(product):
    """Factory persisting an order for *owner* without going through HTTP."""
    from modules.orders.builder import build_order_draft
    from modules.orders.constants import PaymentMethod
    from modules.orders.pricing import ResolvedLineItem
    from modules.orders.repositories import OrderDjangoRepository

    def _make(owner, *, payment_method=PaymentMethod.ONLINE, gateway_order_ref=None, quantity=1):
        draft = build_order_draft(
            customer={"name": owner.name, "email": owner.email, "phone": "", "address": {}},
            lines=[
                ResolvedLineItem(
                    product_ref=str(product.id),
                    name=product.name,
                    unit_price=product.price,
                    quantity=quantity,
                )
            ],
            payment_method=payment_method,
            shipping=Decimal("10.00"),
        )
        if payment_method == PaymentMethod.ONLINE and gateway_order_ref is None:
            gateway_order_ref = f"order_{draft.order_id[-12:]}"
        return OrderDjangoRepository().create_from_draft(
            draft, owner, gateway_order_ref=gateway_order_ref
        )

    return _make


@pytest.fixture()
def key_secret(payments_app) -> str:
    return payments_app.payment_settings.key_secret


@pytest.fixture()
def webhook_secret(payments_app) -> str:
    return payments_app.payment_settings.webhook_secret
