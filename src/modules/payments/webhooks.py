"""Gateway webhook ingestion.

One delivery is handled in a single pass:

1. the webhook secret must be configured;
2. the signature header is checked against the raw body bytes;
3. the body is parsed and dispatched on its ``event`` tag;
4. recognised events are reduced to ``(gateway_order_ref,
   gateway_payment_ref)`` and handed to the reconciler.

Unknown event types are accepted and ignored.  A recognised type whose
nested shape does not match is logged and skipped rather than guessed at.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Literal, Optional, Type, Union

import structlog
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from modules.payments import signatures
from modules.payments.exceptions import (
    InvalidSignature,
    InvalidWebhookPayload,
    WebhooksNotConfigured,
)

if TYPE_CHECKING:
    from modules.orders.reconciliation import OrderReconciler
    from modules.payments.config import PaymentSettings

logger = structlog.get_logger(__name__)

SIGNATURE_HEADER = "X-Razorpay-Signature"

OUTCOME_RECONCILED = "reconciled"
OUTCOME_UNMATCHED = "unmatched"
OUTCOME_IGNORED = "ignored"
OUTCOME_MALFORMED = "malformed"


# ---------------------------------------------------------------------------
# Event variants
# ---------------------------------------------------------------------------


class _Model(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", str_min_length=1)


class PaymentEntity(_Model):
    id: str
    order_id: str


class OrderEntity(_Model):
    id: str


class PaymentRef(_Model):
    id: str


class _PaymentEnvelope(_Model):
    entity: PaymentEntity


class _OrderEnvelope(_Model):
    entity: OrderEntity


class _PaymentRefEnvelope(_Model):
    entity: PaymentRef


@dataclass(frozen=True)
class PaymentReferences:
    gateway_order_ref: str
    gateway_payment_ref: Optional[str]


class PaymentCapturedPayload(_Model):
    payment: _PaymentEnvelope


class OrderPaidPayload(_Model):
    order: _OrderEnvelope
    payment: Optional[_PaymentRefEnvelope] = None


class PaymentCapturedEvent(_Model):
    event: Literal["payment.captured"]
    payload: PaymentCapturedPayload

    def references(self) -> PaymentReferences:
        entity = self.payload.payment.entity
        return PaymentReferences(gateway_order_ref=entity.order_id, gateway_payment_ref=entity.id)


class OrderPaidEvent(_Model):
    event: Literal["order.paid"]
    payload: OrderPaidPayload

    def references(self) -> PaymentReferences:
        payment = self.payload.payment
        return PaymentReferences(
            gateway_order_ref=self.payload.order.entity.id,
            gateway_payment_ref=payment.entity.id if payment else None,
        )


WebhookEvent = Union[PaymentCapturedEvent, OrderPaidEvent]

EVENT_TYPES: Dict[str, Type[WebhookEvent]] = {
    "payment.captured": PaymentCapturedEvent,
    "order.paid": OrderPaidEvent,
}


class MalformedEvent(Exception):
    """A recognised event type whose payload shape is not understood."""


def parse_event(data: Dict[str, Any]) -> Optional[WebhookEvent]:
    """Return the typed event, or ``None`` for event types we do not handle.

    Raises:
        MalformedEvent: the type is recognised but the payload is not.
    """
    event_type = data.get("event")
    model = EVENT_TYPES.get(event_type) if isinstance(event_type, str) else None
    if model is None:
        return None
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise MalformedEvent(str(exc)) from exc


# ---------------------------------------------------------------------------
# Ingestion
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WebhookOutcome:
    event_type: Optional[str]
    outcome: str
    order_id: Optional[str] = None


class WebhookIngestor:
    def __init__(self, reconciler: OrderReconciler, payment_settings: PaymentSettings) -> None:
        self._reconciler = reconciler
        self._settings = payment_settings

    def ingest(self, raw_body: bytes, signature: Optional[str]) -> WebhookOutcome:
        """Authenticate and apply one webhook delivery.

        Raises:
            WebhooksNotConfigured: no webhook secret.
            InvalidSignature: header missing or wrong.
            InvalidWebhookPayload: authenticated body is not a JSON object.
        """
        if not self._settings.webhooks_enabled:
            logger.error("webhook.not_configured")
            raise WebhooksNotConfigured()

        if not signatures.verify(self._settings.webhook_secret, raw_body, signature):
            logger.warning(
                "webhook.signature_mismatch",
                signature_present=bool(signature),
                body_size=len(raw_body),
            )
            raise InvalidSignature()

        try:
            data = json.loads(raw_body)
        except (ValueError, UnicodeDecodeError) as exc:
            logger.warning("webhook.invalid_json")
            raise InvalidWebhookPayload() from exc
        if not isinstance(data, dict):
            raise InvalidWebhookPayload()

        event_type = data.get("event") if isinstance(data.get("event"), str) else None
        log = logger.bind(event_type=event_type)

        try:
            event = parse_event(data)
        except MalformedEvent as exc:
            log.warning("webhook.malformed_event", error=str(exc))
            return WebhookOutcome(event_type=event_type, outcome=OUTCOME_MALFORMED)

        if event is None:
            log.info("webhook.ignored")
            return WebhookOutcome(event_type=event_type, outcome=OUTCOME_IGNORED)

        refs = event.references()
        result = self._reconciler.reconcile(
            refs.gateway_order_ref,
            refs.gateway_payment_ref,
            source="webhook",
        )
        if not result.matched:
            return WebhookOutcome(event_type=event_type, outcome=OUTCOME_UNMATCHED)

        log.info("webhook.processed", order_id=result.order.order_id)
        return WebhookOutcome(
            event_type=event_type,
            outcome=OUTCOME_RECONCILED,
            order_id=result.order.order_id,
        )
