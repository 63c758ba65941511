"""Payment gateway factory.

``build_gateway()`` picks the adapter named by ``PaymentSettings.gateway``:
- ``fake``: ``FakeGateway`` for development and testing;
- ``razorpay``: ``RazorpayGateway``, only when credentials are present.

Returns ``None`` when online payments are not configured.
"""

from __future__ import annotations

from typing import Optional

from modules.payments.config import GATEWAY_FAKE, PaymentSettings
from modules.payments.gateway.fake_adapter import FakeGateway
from modules.payments.gateway.port import GatewayOrder, PaymentGateway
from modules.payments.gateway.razorpay_adapter import RazorpayGateway

__all__ = [
    "FakeGateway",
    "GatewayOrder",
    "PaymentGateway",
    "RazorpayGateway",
    "build_gateway",
]


def build_gateway(payment_settings: PaymentSettings) -> Optional[PaymentGateway]:
    if payment_settings.gateway == GATEWAY_FAKE:
        return FakeGateway()
    if not payment_settings.online_payments_enabled:
        return None
    return RazorpayGateway(
        payment_settings.key_id,
        payment_settings.key_secret,
        base_url=payment_settings.api_base_url,
        timeout=payment_settings.timeout,
    )
