"""Unit tests for HMAC-SHA256 signing and verification."""

from __future__ import annotations

import hashlib
import hmac

import pytest

from modules.payments.signatures import confirmation_payload, sign, verify

pytestmark = pytest.mark.unit

SECRET = "s3cr3t"
PAYLOAD = b'{"event":"payment.captured","payload":{}}'


def _flip(data: bytes, index: int) -> bytes:
    mutated = bytearray(data)
    mutated[index] ^= 0x01
    return bytes(mutated)


class TestSign:
    def test_matches_reference_hmac(self):
        expected = hmac.new(SECRET.encode(), PAYLOAD, hashlib.sha256).hexdigest()
        assert sign(SECRET, PAYLOAD) == expected

    def test_str_and_bytes_payloads_agree(self):
        assert sign(SECRET, "order_1|pay_1") == sign(SECRET, b"order_1|pay_1")

    def test_confirmation_payload_format(self):
        assert confirmation_payload("order_1", "pay_1") == "order_1|pay_1"


class TestVerify:
    def test_accepts_own_signature(self):
        assert verify(SECRET, PAYLOAD, sign(SECRET, PAYLOAD))

    def test_any_payload_byte_flip_fails(self):
        signature = sign(SECRET, PAYLOAD)
        for index in range(len(PAYLOAD)):
            assert not verify(SECRET, _flip(PAYLOAD, index), signature)

    def test_any_signature_byte_flip_fails(self):
        signature = sign(SECRET, PAYLOAD).encode()
        for index in range(len(signature)):
            assert not verify(SECRET, PAYLOAD, _flip(signature, index).decode("latin-1"))

    def test_wrong_secret_fails(self):
        assert not verify("other", PAYLOAD, sign(SECRET, PAYLOAD))

    def test_reserialized_body_fails(self):
        spaced = b'{"event": "payment.captured", "payload": {}}'
        assert not verify(SECRET, spaced, sign(SECRET, PAYLOAD))

    @pytest.mark.parametrize("signature", [None, "", "zz", "é" * 64])
    def test_missing_or_garbage_signature_fails(self, signature):
        assert not verify(SECRET, PAYLOAD, signature)

    def test_empty_secret_never_verifies(self):
        assert not verify("", PAYLOAD, sign("", PAYLOAD))
