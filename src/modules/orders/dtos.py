"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CheckoutDTO`` / ``CheckoutItemDTO`` / ``CustomerDTO``: checkout input.
- ``PaymentConfirmationDTO``: client-side payment confirmation.
- ``UpdateOrderDTO``: authorized partial update (allow-listed fields).
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from modules.orders.constants import OrderStatus, PaymentMethod, PaymentStatus

# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------


class CheckoutItemDTO(BaseModel):
    """A single requested line.

    ``quantity`` is kept exactly as the client sent it: coercion and its
    failure mode (``InvalidQuantity``) belong to the pricing resolver.
    Any client-side price is not part of the contract and never reaches
    the service.
    """

    model_config = ConfigDict(frozen=True)

    product_ref: str
    quantity: Any = None


class CustomerDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    email: str
    phone: str = ""
    address: Dict[str, Any] = {}

    def as_snapshot(self) -> Dict[str, Any]:
        return self.model_dump()


class CheckoutDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    customer: CustomerDTO
    payment_method: PaymentMethod
    items: List[CheckoutItemDTO]
    notes: str = ""
    shipping: Decimal = Decimal("0.00")

    @field_validator("shipping")
    @classmethod
    def shipping_must_not_be_negative(cls, v: Decimal) -> Decimal:
        if not v.is_finite() or v < 0:
            raise ValueError("Shipping must be a non-negative amount.")
        return v


# ---------------------------------------------------------------------------
# Payment confirmation
# ---------------------------------------------------------------------------


class PaymentConfirmationDTO(BaseModel):
    """Fields posted back by the client after the gateway checkout widget."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    gateway_order_ref: str
    gateway_payment_ref: str
    signature: str

    @field_validator("gateway_order_ref", "gateway_payment_ref", "signature")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        if not v:
            raise ValueError("Missing payment verification fields.")
        return v


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------


class UpdateOrderDTO(BaseModel):
    """Partial update restricted to ``UPDATABLE_FIELDS``.

    Only fields present in ``model_fields_set`` are applied, so an explicit
    ``null`` (e.g. clearing ``delivery_date``) differs from an omitted field.
    """

    model_config = ConfigDict(frozen=True)

    status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = None
    delivery_date: Optional[date] = None
    notes: Optional[str] = None
    shipping: Optional[Decimal] = None

    @field_validator("shipping")
    @classmethod
    def shipping_must_not_be_negative(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and (not v.is_finite() or v < 0):
            raise ValueError("Shipping must be a non-negative amount.")
        return v

    def changes(self) -> Dict[str, Any]:
        """Return ``{field: value}`` for every field the caller supplied."""
        return {name: getattr(self, name) for name in self.model_fields_set}
