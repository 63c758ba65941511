"""Integration tests for the checkout endpoint.

Covers:
- COD orders are created PAID with catalog prices and derived totals.
- Online orders open a gateway transaction and return client parameters.
- Invalid items, unknown products and gateway failures persist nothing.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.orders.constants import PaymentStatus
from modules.orders.models import Order, OrderItem
from modules.payments.gateway.fake_adapter import FAILURE_REJECTED, FAILURE_UNAVAILABLE

pytestmark = pytest.mark.integration

URL = "/api/v1/orders/"


def _payload(items, payment_method="COD", shipping="50.00", **extra):
    payload = {
        "customer": {
            "name": "Asha Verma",
            "email": "asha@example.com",
            "phone": "9876543210",
            "address": {"city": "Pune", "pincode": "411001"},
        },
        "payment_method": payment_method,
        "items": items,
        "notes": "Leave at the door",
        "shipping": shipping,
    }
    payload.update(extra)
    return payload


class TestCashOnDelivery:
    def test_creates_paid_order_with_server_prices(self, auth_client, user, product):
        response = auth_client.post(
            URL,
            _payload([{"id": str(product.id), "quantity": 2, "price": "1.00"}]),
            format="json",
        )

        assert response.status_code == 201
        body = response.json()
        assert "gateway" not in body
        order = body["order"]
        assert order["order_id"].startswith("ORD-")
        assert order["payment_method"] == "COD"
        assert order["payment_status"] == "PAID"
        assert order["gateway_order_ref"] is None
        assert Decimal(order["subtotal"]) == Decimal("200.00")
        assert Decimal(order["tax"]) == Decimal("14.00")
        assert Decimal(order["total"]) == Decimal("264.00")
        assert order["items"][0]["unit_price"] == "100.00"
        assert order["items"][0]["name"] == "Cotton Kurta"

        saved = Order.objects.get(order_id=order["order_id"])
        assert saved.owner == user
        assert saved.customer["address"]["city"] == "Pune"
        assert saved.items.count() == 1

    def test_quantity_as_numeric_string(self, auth_client, product):
        response = auth_client.post(
            URL, _payload([{"id": str(product.id), "quantity": "3"}]), format="json"
        )
        assert response.status_code == 201
        assert response.json()["order"]["items"][0]["quantity"] == 3

    def test_later_price_change_does_not_touch_placed_order(self, auth_client, product):
        response = auth_client.post(
            URL, _payload([{"id": str(product.id), "quantity": 1}]), format="json"
        )
        product.price = Decimal("999.00")
        product.save()

        item = OrderItem.objects.get(order__order_id=response.json()["order"]["order_id"])
        assert item.unit_price == Decimal("100.00")


class TestOnlinePayment:
    def test_returns_gateway_parameters(self, auth_client, product, fake_gateway):
        response = auth_client.post(
            URL,
            _payload([{"id": str(product.id), "quantity": 2}], payment_method="ONLINE", shipping="0"),
            format="json",
        )

        assert response.status_code == 201
        body = response.json()
        order = body["order"]
        gateway = body["gateway"]
        assert order["payment_status"] == PaymentStatus.UNPAID
        assert gateway["transaction_ref"] == order["gateway_order_ref"]
        assert gateway["amount"] == 21400
        assert gateway["currency"] == "INR"
        assert gateway["key"] == "rzp_test_key"
        assert gateway["description"] == f"Payment for {order['order_id']}"
        assert gateway["prefill"] == {
            "name": "Asha Verma",
            "email": "asha@example.com",
            "contact": "9876543210",
        }
        assert gateway["notes"] == {"order_id": order["order_id"]}

        assert len(fake_gateway.calls) == 1
        call = fake_gateway.calls[0]
        assert call["receipt"] == order["order_id"]
        assert call["notes"]["customer_email"] == "asha@example.com"

    @pytest.mark.parametrize("failure", [FAILURE_UNAVAILABLE, FAILURE_REJECTED])
    def test_gateway_failure_persists_nothing(self, auth_client, product, fake_gateway, failure):
        fake_gateway.configure(failure=failure)

        response = auth_client.post(
            URL, _payload([{"id": str(product.id), "quantity": 1}], payment_method="ONLINE"), format="json"
        )

        assert response.status_code == 502
        assert response.json()["type"] == "server_error"
        assert not Order.objects.exists()
        assert not OrderItem.objects.exists()

    def test_payments_not_configured(self, auth_client, product, payments_disabled):
        response = auth_client.post(
            URL, _payload([{"id": str(product.id), "quantity": 1}], payment_method="ONLINE"), format="json"
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "not_configured"
        assert not Order.objects.exists()

    def test_cod_still_works_without_payments(self, auth_client, product, payments_disabled):
        response = auth_client.post(
            URL, _payload([{"id": str(product.id), "quantity": 1}]), format="json"
        )
        assert response.status_code == 201


class TestInvalidCheckout:
    def test_unknown_product_persists_nothing(self, auth_client, product, fake_gateway):
        response = auth_client.post(
            URL,
            _payload(
                [{"id": str(product.id), "quantity": 1}, {"id": str(uuid4()), "quantity": 1}],
                payment_method="ONLINE",
            ),
            format="json",
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "unknown_product"
        assert not Order.objects.exists()
        assert fake_gateway.calls == []

    def test_empty_items(self, auth_client):
        response = auth_client.post(URL, _payload([]), format="json")
        assert response.status_code == 400
        assert not Order.objects.exists()

    @pytest.mark.parametrize("quantity", [0, -2, "abc", 1.5, None])
    def test_invalid_quantity(self, auth_client, product, quantity):
        response = auth_client.post(
            URL, _payload([{"id": str(product.id), "quantity": quantity}]), format="json"
        )
        assert response.status_code == 400
        assert not Order.objects.exists()

    def test_negative_shipping(self, auth_client, product):
        response = auth_client.post(
            URL, _payload([{"id": str(product.id), "quantity": 1}], shipping="-5"), format="json"
        )
        assert response.status_code == 400

    def test_unknown_payment_method(self, auth_client, product):
        response = auth_client.post(
            URL, _payload([{"id": str(product.id), "quantity": 1}], payment_method="CARD"), format="json"
        )
        assert response.status_code == 400

    def test_requires_authentication(self, api_client, product):
        response = api_client.post(
            URL, _payload([{"id": str(product.id), "quantity": 1}]), format="json"
        )
        assert response.status_code == 401

    @pytest.mark.parametrize("quantity", [10**11, 10**20, 10**30, "1e30"])
    def test_oversized_quantity_is_client_error(self, auth_client, product, fake_gateway, quantity):
        response = auth_client.post(
            URL,
            _payload([{"id": str(product.id), "quantity": quantity}], payment_method="ONLINE"),
            format="json",
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "invalid_quantity"
        assert fake_gateway.calls == []
        assert not Order.objects.exists()

    def test_total_beyond_storable_amount(self, auth_client, product):
        response = auth_client.post(
            URL,
            _payload([{"id": str(product.id), "quantity": 1}], shipping="9999999999.99"),
            format="json",
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "order_total_too_large"
        assert not Order.objects.exists()
