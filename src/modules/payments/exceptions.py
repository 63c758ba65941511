"""Payment domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import (
    GatewayError,
    NotConfiguredError,
    SignatureMismatchError,
    ValidationError,
)


class GatewayUnavailable(GatewayError):
    """Network failure, timeout or 5xx reply from the gateway."""

    default_code = "gateway_unavailable"
    default_detail = "Payment gateway is unavailable."


class GatewayRejected(GatewayError):
    """The gateway refused the request or replied with an unusable body."""

    default_code = "gateway_rejected"
    default_detail = "Payment gateway rejected the request."


class PaymentsNotConfigured(NotConfiguredError):
    default_detail = "Online payments are not configured."


class WebhooksNotConfigured(NotConfiguredError):
    default_detail = "Webhook secret not configured."


class InvalidSignature(SignatureMismatchError):
    default_detail = "Invalid signature"


class InvalidWebhookPayload(ValidationError):
    default_detail = "Invalid JSON payload."
