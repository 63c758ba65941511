"""HMAC-SHA256 signatures shared by payment confirmation and webhooks.

Both callers sign an exact byte sequence: the client confirmation signs
``"<gateway_order_ref>|<gateway_payment_ref>"``, the webhook signs the raw
request body as received.  Never re-serialize a payload before verifying.
"""

from __future__ import annotations

import hashlib
import hmac
from typing import Union

Payload = Union[bytes, str]


def _to_bytes(value: Payload) -> bytes:
    return value if isinstance(value, bytes) else value.encode("utf-8")


def confirmation_payload(gateway_order_ref: str, gateway_payment_ref: str) -> str:
    return f"{gateway_order_ref}|{gateway_payment_ref}"


def sign(secret: str, payload: Payload) -> str:
    """Hex-encoded HMAC-SHA256 of *payload* keyed with *secret*."""
    return hmac.new(_to_bytes(secret), _to_bytes(payload), hashlib.sha256).hexdigest()


def verify(secret: str, payload: Payload, signature: str | None) -> bool:
    """Constant-time comparison of *signature* against ``sign(secret, payload)``.

    An empty secret or signature never verifies.
    """
    if not secret or not signature:
        return False
    try:
        supplied = signature.encode("ascii")
    except (AttributeError, UnicodeEncodeError):
        return False
    return hmac.compare_digest(sign(secret, payload).encode("ascii"), supplied)
