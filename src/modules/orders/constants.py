"""Order domain constants.

Payment state and fulfillment state are independent axes: the reconciler
only ever touches ``PaymentStatus``; administrators move ``OrderStatus``.
"""

from decimal import Decimal

from django.db import models


class PaymentMethod(models.TextChoices):
    CASH_ON_DELIVERY = "COD", "Cash on Delivery"
    ONLINE = "ONLINE", "Online Payment"


class PaymentStatus(models.TextChoices):
    UNPAID = "UNPAID", "Unpaid"
    PAID = "PAID", "Paid"


class OrderStatus(models.TextChoices):
    PROCESSING = "PROCESSING", "Processing"
    SHIPPED = "SHIPPED", "Shipped"
    DELIVERED = "DELIVERED", "Delivered"
    CANCELLED = "CANCELLED", "Cancelled"


TAX_RATE = Decimal("0.07")

MONEY_QUANTUM = Decimal("0.01")

ORDER_ID_PREFIX = "ORD-"

# Fields an authorized update may touch; anything else in the payload is ignored.
UPDATABLE_FIELDS: tuple[str, ...] = (
    "status",
    "payment_status",
    "delivery_date",
    "notes",
    "shipping",
)

# Subset the order owner may change without administrator privileges.
OWNER_UPDATABLE_FIELDS: frozenset[str] = frozenset({"notes"})

# Upper bound for a single line's quantity.
MAX_QUANTITY = 10_000

# Largest amount that fits the order money columns (12 digits, 2 decimal places).
MAX_ORDER_AMOUNT = Decimal("9999999999.99")
