"""Order builder: pure arithmetic from priced lines to an order draft.

Nothing here touches the database or the gateway. All amounts are
``Decimal`` quantized to two places, so ``total == subtotal + tax + shipping``
holds exactly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Sequence

from modules.orders.constants import (
    MAX_ORDER_AMOUNT,
    MONEY_QUANTUM,
    TAX_RATE,
    PaymentMethod,
    PaymentStatus,
)
from modules.orders.exceptions import InvalidShipping, OrderTotalTooLarge
from modules.orders.models import generate_order_id
from modules.orders.pricing import ResolvedLineItem


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def ensure_fits(amount: Decimal) -> None:
    if amount > MAX_ORDER_AMOUNT:
        raise OrderTotalTooLarge()


def to_minor_units(amount: Decimal) -> int:
    """Express *amount* in the currency's smallest unit (e.g. paise)."""
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal

    @property
    def amount_minor(self) -> int:
        return to_minor_units(self.total)


def compute_totals(lines: Sequence[ResolvedLineItem], shipping: Any = 0) -> OrderTotals:
    """Derive subtotal, tax and total.

    Raises:
        InvalidShipping: shipping is negative or not a number.
        OrderTotalTooLarge: an amount does not fit ``MAX_ORDER_AMOUNT``.
    """
    try:
        shipping_amount = Decimal(str(shipping if shipping is not None else 0))
    except ArithmeticError:
        raise InvalidShipping() from None
    if not shipping_amount.is_finite() or shipping_amount < 0:
        raise InvalidShipping()

    raw_subtotal = sum((line.line_total for line in lines), Decimal("0"))
    ensure_fits(raw_subtotal)
    ensure_fits(shipping_amount)

    subtotal = quantize_money(raw_subtotal)
    tax = quantize_money(subtotal * TAX_RATE)
    shipping_amount = quantize_money(shipping_amount)
    total = subtotal + tax + shipping_amount
    ensure_fits(total)
    return OrderTotals(
        subtotal=subtotal,
        tax=tax,
        shipping=shipping_amount,
        total=total,
    )


@dataclass(frozen=True)
class OrderDraft:
    """Everything needed to persist an order, minus the gateway reference."""

    order_id: str
    customer: Dict[str, Any]
    lines: List[ResolvedLineItem]
    totals: OrderTotals
    payment_method: PaymentMethod
    notes: str = ""
    payment_status: PaymentStatus = field(default=PaymentStatus.UNPAID)

    @property
    def is_online(self) -> bool:
        return self.payment_method == PaymentMethod.ONLINE


def build_order_draft(
    *,
    customer: Dict[str, Any],
    lines: Sequence[ResolvedLineItem],
    payment_method: PaymentMethod,
    shipping: Any = 0,
    notes: str = "",
) -> OrderDraft:
    """Assemble a draft with a fresh ``order_id`` and the derived totals.

    Cash-on-delivery orders are recorded as ``PAID`` from creation (payment
    is settled outside the system); online orders start ``UNPAID``.
    """
    payment_method = PaymentMethod(payment_method)
    payment_status = (
        PaymentStatus.PAID
        if payment_method == PaymentMethod.CASH_ON_DELIVERY
        else PaymentStatus.UNPAID
    )
    return OrderDraft(
        order_id=generate_order_id(),
        customer=dict(customer),
        lines=list(lines),
        totals=compute_totals(lines, shipping),
        payment_method=payment_method,
        notes=notes or "",
        payment_status=payment_status,
    )
