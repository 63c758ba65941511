"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from modules.orders.constants import OrderStatus, PaymentMethod, PaymentStatus
from modules.orders.models import Order, OrderItem

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CustomerSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=30, required=False, allow_blank=True, default="")
    address = serializers.DictField(required=False, default=dict)


class CheckoutItemSerializer(serializers.Serializer):
    """A requested line.

    ``quantity`` is passed through untouched; the pricing resolver owns
    its coercion.  Undeclared keys such as ``price`` are dropped here.
    """

    id = serializers.CharField(max_length=64)
    quantity = serializers.JSONField()


class CheckoutSerializer(serializers.Serializer):
    """Validates the checkout request payload."""

    customer = CustomerSerializer()
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices)
    # Emptiness is reported by the pricing resolver.
    items = CheckoutItemSerializer(many=True, allow_empty=True)
    notes = serializers.CharField(required=False, default="", allow_blank=True)
    shipping = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal("0.00"),
        required=False,
        default=Decimal("0.00"),
    )


class PaymentConfirmationSerializer(serializers.Serializer):
    gateway_order_ref = serializers.CharField(max_length=64)
    gateway_payment_ref = serializers.CharField(max_length=64)
    signature = serializers.CharField(max_length=128)


class UpdateOrderSerializer(serializers.Serializer):
    """Allow-listed update fields.  Anything else in the body is ignored."""

    status = serializers.ChoiceField(choices=OrderStatus.choices, required=False)
    payment_status = serializers.ChoiceField(choices=PaymentStatus.choices, required=False)
    delivery_date = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True)
    shipping = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal("0.00"),
        required=False,
    )


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.ModelSerializer):
    """Read serializer for the line-item price snapshot."""

    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "product_ref",
            "name",
            "unit_price",
            "quantity",
            "line_total",
            "image_url",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with nested items."""

    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_id",
            "owner",
            "customer",
            "items",
            "subtotal",
            "tax",
            "shipping",
            "total",
            "payment_method",
            "payment_status",
            "gateway_order_ref",
            "gateway_payment_ref",
            "status",
            "delivery_date",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for order list (no nested relations)."""

    class Meta:
        model = Order
        fields = [
            "id",
            "order_id",
            "total",
            "payment_method",
            "payment_status",
            "status",
            "created_at",
        ]
        read_only_fields = fields
