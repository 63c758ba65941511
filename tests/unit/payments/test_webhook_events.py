"""Unit tests for webhook event parsing and ingestion."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from modules.orders.reconciliation import ReconcileResult
from modules.payments.config import PaymentSettings
from modules.payments.exceptions import (
    InvalidSignature,
    InvalidWebhookPayload,
    WebhooksNotConfigured,
)
from modules.payments.signatures import sign
from modules.payments.webhooks import (
    OUTCOME_IGNORED,
    OUTCOME_MALFORMED,
    OUTCOME_RECONCILED,
    OUTCOME_UNMATCHED,
    MalformedEvent,
    OrderPaidEvent,
    PaymentCapturedEvent,
    WebhookIngestor,
    parse_event,
)

pytestmark = pytest.mark.unit

SECRET = "whsec"


def captured(order_ref="order_1", payment_ref="pay_1"):
    return {
        "event": "payment.captured",
        "payload": {"payment": {"entity": {"id": payment_ref, "order_id": order_ref}}},
    }


def order_paid(order_ref="order_1", payment_ref="pay_1"):
    payload = {"order": {"entity": {"id": order_ref, "status": "paid"}}}
    if payment_ref:
        payload["payment"] = {"entity": {"id": payment_ref}}
    return {"event": "order.paid", "payload": payload}


class TestParseEvent:
    def test_payment_captured(self):
        event = parse_event(captured())
        assert isinstance(event, PaymentCapturedEvent)
        refs = event.references()
        assert refs.gateway_order_ref == "order_1"
        assert refs.gateway_payment_ref == "pay_1"

    def test_order_paid(self):
        event = parse_event(order_paid())
        assert isinstance(event, OrderPaidEvent)
        assert event.references().gateway_order_ref == "order_1"
        assert event.references().gateway_payment_ref == "pay_1"

    def test_order_paid_without_payment_entity(self):
        refs = parse_event(order_paid(payment_ref=None)).references()
        assert refs.gateway_order_ref == "order_1"
        assert refs.gateway_payment_ref is None

    @pytest.mark.parametrize("data", [{"event": "refund.created"}, {}, {"event": 42}])
    def test_unhandled_types_return_none(self, data):
        assert parse_event(data) is None

    @pytest.mark.parametrize(
        "data",
        [
            {"event": "payment.captured"},
            {"event": "payment.captured", "payload": {"payment": {}}},
            {"event": "payment.captured", "payload": {"payment": {"entity": {"id": "pay_1"}}}},
            {"event": "order.paid", "payload": {"order": {"entity": {"id": 7}}}},
            {"event": "order.paid", "payload": {"order": {"entity": {"id": ""}}}},
        ],
    )
    def test_recognised_type_with_bad_shape(self, data):
        with pytest.raises(MalformedEvent):
            parse_event(data)


class TestWebhookIngestor:
    @pytest.fixture()
    def reconciler(self):
        reconciler = MagicMock()
        reconciler.reconcile.return_value = ReconcileResult(order=MagicMock(order_id="ORD-1"))
        return reconciler

    @pytest.fixture()
    def ingestor(self, reconciler):
        return WebhookIngestor(reconciler, PaymentSettings(webhook_secret=SECRET))

    def _body(self, data) -> bytes:
        return json.dumps(data).encode()

    def test_reconciles_payment_captured(self, ingestor, reconciler):
        body = self._body(captured())
        outcome = ingestor.ingest(body, sign(SECRET, body))

        assert outcome.outcome == OUTCOME_RECONCILED
        assert outcome.order_id == "ORD-1"
        reconciler.reconcile.assert_called_once_with("order_1", "pay_1", source="webhook")

    def test_unmatched_order_is_not_an_error(self, ingestor, reconciler):
        reconciler.reconcile.return_value = ReconcileResult(order=None)
        body = self._body(order_paid())
        outcome = ingestor.ingest(body, sign(SECRET, body))
        assert outcome.outcome == OUTCOME_UNMATCHED

    def test_unknown_event_is_ignored(self, ingestor, reconciler):
        body = self._body({"event": "payment.failed", "payload": {}})
        outcome = ingestor.ingest(body, sign(SECRET, body))

        assert outcome.outcome == OUTCOME_IGNORED
        reconciler.reconcile.assert_not_called()

    def test_malformed_event_is_skipped(self, ingestor, reconciler):
        body = self._body({"event": "payment.captured", "payload": {}})
        outcome = ingestor.ingest(body, sign(SECRET, body))

        assert outcome.outcome == OUTCOME_MALFORMED
        reconciler.reconcile.assert_not_called()

    @pytest.mark.parametrize("signature", [None, "", "deadbeef"])
    def test_bad_signature_rejected(self, ingestor, reconciler, signature):
        with pytest.raises(InvalidSignature):
            ingestor.ingest(self._body(captured()), signature)
        reconciler.reconcile.assert_not_called()

    def test_signature_checked_before_parsing(self, ingestor):
        with pytest.raises(InvalidSignature):
            ingestor.ingest(b"not json", "deadbeef")

    @pytest.mark.parametrize("body", [b"not json", b"[1, 2]", b"\xff\xfe"])
    def test_signed_garbage_rejected(self, ingestor, body):
        with pytest.raises(InvalidWebhookPayload):
            ingestor.ingest(body, sign(SECRET, body))

    def test_requires_webhook_secret(self, reconciler):
        ingestor = WebhookIngestor(reconciler, PaymentSettings(webhook_secret=""))
        body = self._body(captured())
        with pytest.raises(WebhooksNotConfigured):
            ingestor.ingest(body, sign("", body))
