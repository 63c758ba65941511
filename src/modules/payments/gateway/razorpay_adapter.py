"""Razorpay REST adapter.

Talks to ``POST /v1/orders`` with HTTP basic auth (key id / key secret).
Only the request timeout is handled here; retries are left to the caller,
which is safe because a failed call never persists anything.
"""

from __future__ import annotations

from typing import Dict

import requests
import structlog

from modules.payments.exceptions import GatewayRejected, GatewayUnavailable
from modules.payments.gateway.port import GatewayOrder, PaymentGateway

logger = structlog.get_logger(__name__)


class RazorpayGateway(PaymentGateway):
    def __init__(
        self,
        key_id: str,
        key_secret: str,
        *,
        base_url: str = "https://api.razorpay.com/v1",
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.key_id = key_id
        self._key_secret = key_secret
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def create_order(
        self,
        *,
        amount: int,
        currency: str,
        receipt: str,
        notes: Dict[str, str],
    ) -> GatewayOrder:
        log = logger.bind(receipt=receipt, amount=amount, currency=currency)
        payload = {
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "notes": notes,
        }

        try:
            response = self._session.post(
                f"{self.base_url}/orders",
                json=payload,
                auth=(self.key_id, self._key_secret),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            log.error("gateway.request_failed", error=str(exc))
            raise GatewayUnavailable() from exc

        if response.status_code >= 500:
            log.error("gateway.server_error", status_code=response.status_code)
            raise GatewayUnavailable()
        if response.status_code >= 400:
            log.warning(
                "gateway.request_rejected",
                status_code=response.status_code,
                body=response.text[:500],
            )
            raise GatewayRejected()

        try:
            body = response.json()
        except ValueError as exc:
            log.error("gateway.malformed_response")
            raise GatewayRejected() from exc

        if not isinstance(body, dict) or not body.get("id"):
            log.error("gateway.malformed_response")
            raise GatewayRejected()

        log.info("gateway.order_created", gateway_order_ref=body["id"])
        return GatewayOrder(
            id=body["id"],
            amount=int(body.get("amount", amount)),
            currency=body.get("currency", currency),
            receipt=body.get("receipt") or receipt,
            status=body.get("status", "created"),
            notes=body.get("notes") or dict(notes),
        )
