from __future__ import annotations

import hashlib
import hmac
import logging
import time

from cpr_booking.application.exceptions import WebhookVerificationError

logger = logging.getLogger(__name__)

TEST_SIGNATURE = "test_signature"


def is_test_mode(signature_header: str | None, env: str) -> bool:
    """Dev/local runs accept unsigned payloads (or the literal test signature) for manual testing."""
    return env.lower() in {"dev", "local"} and (not signature_header or signature_header == TEST_SIGNATURE)


def parse_signature_header(signature_header: str) -> tuple[int | None, list[str]]:
    timestamp: int | None = None
    signatures: list[str] = []
    for item in signature_header.split(","):
        key, _, value = item.strip().partition("=")
        if key == "t":
            try:
                timestamp = int(value)
            except ValueError:
                return None, []
        elif key == "v1" and value:
            signatures.append(value)
    return timestamp, signatures


def compute_signature(body: bytes, timestamp: int, secret: str) -> str:
    signed_payload = f"{timestamp}.".encode("utf-8") + body
    return hmac.new(secret.encode("utf-8"), signed_payload, hashlib.sha256).hexdigest()


def verify_stripe_signature(
    body: bytes,
    signature_header: str | None,
    secret: str | None,
    tolerance_seconds: int = 300,
    now: float | None = None,
) -> bool:
    if not signature_header:
        logger.warning("Missing Stripe-Signature header")
        return False

    if not secret:
        logger.error("Missing Stripe webhook secret for signature verification")
        return False

    timestamp, signatures = parse_signature_header(signature_header)
    if timestamp is None or not signatures:
        return False

    current = time.time() if now is None else now
    if tolerance_seconds > 0 and abs(current - timestamp) > tolerance_seconds:
        logger.warning("Stripe webhook timestamp outside tolerance", extra={"reason": f"t={timestamp}"})
        return False

    expected = compute_signature(body, timestamp, secret)
    return any(hmac.compare_digest(expected, candidate) for candidate in signatures)


def require_valid_signature(
    body: bytes,
    signature_header: str | None,
    secret: str | None,
    tolerance_seconds: int = 300,
) -> None:
    if not verify_stripe_signature(body, signature_header, secret, tolerance_seconds=tolerance_seconds):
        raise WebhookVerificationError("Webhook signature verification failed")
