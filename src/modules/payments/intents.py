"""Payment intent initiation.

Opens the gateway transaction for an online order before anything is
persisted.  The returned ``PaymentIntent`` carries the gateway reference
the order is stored with, plus the parameters the client checkout widget
needs.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog

from modules.orders.builder import to_minor_units
from modules.payments.exceptions import PaymentsNotConfigured

if TYPE_CHECKING:
    from modules.payments.config import PaymentSettings
    from modules.payments.gateway.port import PaymentGateway

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PaymentIntent:
    transaction_ref: str
    amount: int
    currency: str
    order_id: str

    def client_parameters(
        self,
        payment_settings: PaymentSettings,
        customer: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Parameters for the gateway's client-side checkout widget."""
        return {
            "key": payment_settings.key_id,
            "amount": self.amount,
            "currency": self.currency,
            "transaction_ref": self.transaction_ref,
            "name": payment_settings.merchant_name,
            "description": f"Payment for {self.order_id}",
            "prefill": {
                "name": customer.get("name", ""),
                "email": customer.get("email", ""),
                "contact": customer.get("phone", ""),
            },
            "notes": {"order_id": self.order_id},
        }


class PaymentIntentInitiator:
    def __init__(
        self,
        gateway: Optional[PaymentGateway],
        payment_settings: PaymentSettings,
    ) -> None:
        self._gateway = gateway
        self._settings = payment_settings

    @property
    def enabled(self) -> bool:
        return self._gateway is not None and self._settings.online_payments_enabled

    def initiate(self, *, total: Decimal, order_id: str, customer_email: str) -> PaymentIntent:
        """Open a gateway transaction for ``round(total * 100)`` minor units.

        Raises:
            PaymentsNotConfigured: no gateway or credentials.
            GatewayUnavailable / GatewayRejected: propagated from the adapter.
        """
        if not self.enabled:
            raise PaymentsNotConfigured()

        amount = to_minor_units(total)
        log = logger.bind(order_id=order_id, amount=amount, currency=self._settings.currency)
        log.info("payment.intent_requested")

        gateway_order = self._gateway.create_order(
            amount=amount,
            currency=self._settings.currency,
            receipt=order_id,
            notes={"order_id": order_id, "customer_email": customer_email},
        )

        log.info("payment.intent_created", gateway_order_ref=gateway_order.id)
        return PaymentIntent(
            transaction_ref=gateway_order.id,
            amount=amount,
            currency=self._settings.currency,
            order_id=order_id,
        )
