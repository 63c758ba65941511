"""Immutable payment configuration.

Built once from ``settings.PAYMENTS`` when the app registry is ready and
handed to the components that need it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

GATEWAY_RAZORPAY = "razorpay"
GATEWAY_FAKE = "fake"


@dataclass(frozen=True)
class PaymentSettings:
    gateway: str = GATEWAY_RAZORPAY
    key_id: str = ""
    key_secret: str = ""
    webhook_secret: str = ""
    api_base_url: str = "https://api.razorpay.com/v1"
    timeout: float = 10.0
    currency: str = "INR"
    merchant_name: str = "Order Payment"

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> PaymentSettings:
        return cls(
            gateway=str(values.get("GATEWAY") or GATEWAY_RAZORPAY).lower(),
            key_id=values.get("KEY_ID") or "",
            key_secret=values.get("KEY_SECRET") or "",
            webhook_secret=values.get("WEBHOOK_SECRET") or "",
            api_base_url=(values.get("API_BASE_URL") or cls.api_base_url).rstrip("/"),
            timeout=float(values.get("TIMEOUT") or cls.timeout),
            currency=values.get("CURRENCY") or cls.currency,
            merchant_name=values.get("MERCHANT_NAME") or cls.merchant_name,
        )

    @property
    def online_payments_enabled(self) -> bool:
        """Key id and secret are both required: one opens orders, the other
        verifies client confirmations."""
        return bool(self.key_id and self.key_secret)

    @property
    def webhooks_enabled(self) -> bool:
        return bool(self.webhook_secret)
