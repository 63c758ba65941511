"""Order and OrderItem models.

Rules carried by the schema:
- ``order_id`` is the human-shareable identifier (``ORD-<uuid4>``); the
  UUIDv7 ``id`` is only a storage key.
- ``gateway_order_ref`` is UNIQUE: at most one order per gateway
  transaction, which is what makes it a safe reconciliation key.
- Cash-on-delivery orders are never ``UNPAID``; online orders always carry
  a gateway reference (both enforced by CHECK constraints).
- ``OrderItem`` rows are price snapshots taken at checkout and are never
  re-derived from the catalog.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.orders.constants import (
    ORDER_ID_PREFIX,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)


def generate_order_id() -> str:
    return f"{ORDER_ID_PREFIX}{uuid.uuid4()}"


class Order(BaseModel):
    """Order aggregate root."""

    order_id: models.CharField = models.CharField(
        max_length=40,
        unique=True,
        editable=False,
        default=generate_order_id,
    )
    owner: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders",
    )
    customer: models.JSONField = models.JSONField(default=dict, blank=True)

    subtotal: models.DecimalField = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    tax: models.DecimalField = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    shipping: models.DecimalField = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    total: models.DecimalField = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    payment_method: models.CharField = models.CharField(
        max_length=10,
        choices=PaymentMethod.choices,
        editable=False,
    )
    payment_status: models.CharField = models.CharField(
        max_length=10,
        choices=PaymentStatus.choices,
        default=PaymentStatus.UNPAID,
    )
    gateway_order_ref: models.CharField = models.CharField(  # noqa: DJ01
        max_length=64,
        unique=True,
        null=True,
        blank=True,
        editable=False,
    )
    gateway_payment_ref: models.CharField = models.CharField(  # noqa: DJ01
        max_length=64,
        null=True,
        blank=True,
    )
    gateway_signature: models.CharField = models.CharField(  # noqa: DJ01
        max_length=128,
        null=True,
        blank=True,
    )

    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PROCESSING,
    )
    delivery_date: models.DateField = models.DateField(null=True, blank=True)
    notes: models.TextField = models.TextField(blank=True, default="")

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["owner", "-created_at"], name="orders_owner_created_idx"),
            models.Index(fields=["payment_status"], name="orders_payment_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(shipping__gte=0),
                name="orders_shipping_non_negative",
            ),
            models.CheckConstraint(
                condition=~models.Q(
                    payment_method=PaymentMethod.CASH_ON_DELIVERY,
                    payment_status=PaymentStatus.UNPAID,
                ),
                name="orders_cod_never_unpaid",
            ),
            models.CheckConstraint(
                condition=models.Q(payment_method=PaymentMethod.CASH_ON_DELIVERY)
                | models.Q(gateway_order_ref__isnull=False),
                name="orders_online_has_gateway_ref",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order_id} ({self.payment_status}/{self.status})"


class OrderItem(BaseModel):
    """Line item snapshot.

    ``product_ref`` is a plain string copy of the catalog id rather than a
    foreign key: removing a product from the catalog must not touch orders
    that already reference it.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    position: models.PositiveIntegerField = models.PositiveIntegerField()
    product_ref: models.CharField = models.CharField(max_length=64)
    name: models.CharField = models.CharField(max_length=255)
    unit_price: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
    )
    quantity: models.PositiveIntegerField = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
    )
    image_url: models.URLField = models.URLField(max_length=500, blank=True, default="")

    class Meta:
        db_table = "order_items"
        ordering = ["position"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
            models.UniqueConstraint(
                fields=["order", "position"],
                name="order_items_unique_position",
            ),
        ]

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    def __str__(self) -> str:
        return f"{self.name} x{self.quantity} ({self.unit_price})"
