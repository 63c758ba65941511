"""Integration tests for checkout throttling."""

from __future__ import annotations

import pytest
from rest_framework.throttling import ScopedRateThrottle

pytestmark = pytest.mark.integration


@pytest.fixture()
def tight_checkout_rate(monkeypatch):
    monkeypatch.setitem(ScopedRateThrottle.THROTTLE_RATES, "checkout", "2/minute")


def _payload(product) -> dict:
    return {
        "customer": {"name": "Asha", "email": "asha@example.com"},
        "payment_method": "COD",
        "items": [{"id": str(product.id), "quantity": 1}],
    }


def test_checkout_is_throttled(auth_client, product, tight_checkout_rate):
    for _ in range(2):
        response = auth_client.post("/api/v1/orders/", _payload(product), format="json")
        assert response.status_code == 201

    response = auth_client.post("/api/v1/orders/", _payload(product), format="json")
    assert response.status_code == 429


def test_listing_is_not_checkout_throttled(auth_client, tight_checkout_rate):
    for _ in range(5):
        assert auth_client.get("/api/v1/orders/").status_code == 200
