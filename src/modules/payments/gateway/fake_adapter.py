"""Configurable fake payment gateway for development and testing.

No external calls.  Can be told to fail the way the real gateway does
(unreachable or refusing) and records every call for assertions.
"""

from __future__ import annotations

from typing import Dict, List
from uuid import uuid4

from modules.payments.exceptions import GatewayRejected, GatewayUnavailable
from modules.payments.gateway.port import GatewayOrder, PaymentGateway

FAILURE_UNAVAILABLE = "unavailable"
FAILURE_REJECTED = "rejected"


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.failure: str | None = None
        self.calls: List[dict] = []

    def configure(self, failure: str | None = None) -> None:
        """``None`` succeeds; ``"unavailable"`` / ``"rejected"`` fail."""
        self.failure = failure

    def create_order(
        self,
        *,
        amount: int,
        currency: str,
        receipt: str,
        notes: Dict[str, str],
    ) -> GatewayOrder:
        self.calls.append(
            {
                "method": "create_order",
                "amount": amount,
                "currency": currency,
                "receipt": receipt,
                "notes": dict(notes),
            }
        )

        if self.failure == FAILURE_UNAVAILABLE:
            raise GatewayUnavailable()
        if self.failure == FAILURE_REJECTED:
            raise GatewayRejected()

        return GatewayOrder(
            id=f"order_fake{uuid4().hex[:14]}",
            amount=amount,
            currency=currency,
            receipt=receipt,
            notes=dict(notes),
        )
