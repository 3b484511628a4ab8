"""
Webhook Security Module

Signature verification for the payment gateway callback:
- Constant-time signature comparison
- Timestamp validation against replays
- Signature computed over the raw request body
"""

import hashlib
import hmac
import logging
import time
from typing import Optional

from fastapi import HTTPException, Request

logger = logging.getLogger(__name__)

# Maximum age of webhook in seconds (5 minutes)
MAX_WEBHOOK_AGE_SECONDS = 300

SIGNATURE_HEADER = "X-Payment-Signature"
TIMESTAMP_HEADER = "X-Payment-Timestamp"


def constant_time_compare(a: str, b: str) -> bool:
    """
    Compare two strings in constant time to prevent timing attacks.
    Uses hmac.compare_digest which is designed for this purpose.
    """
    if not a or not b:
        return False
    return hmac.compare_digest(a, b)


def compute_hmac_sha256(secret: str, payload: bytes) -> str:
    """Compute HMAC-SHA256 signature of payload"""
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def verify_timestamp(timestamp: Optional[str], max_age: int = MAX_WEBHOOK_AGE_SECONDS) -> bool:
    """
    Verify webhook timestamp is within acceptable range.

    Args:
        timestamp: Unix timestamp as string
        max_age: Maximum age in seconds

    Returns:
        True if timestamp is valid, False otherwise
    """
    if not timestamp:
        return False

    try:
        webhook_time = int(timestamp)
    except (ValueError, TypeError):
        logger.warning(f"🚫 Invalid webhook timestamp format: {timestamp}")
        return False

    age = abs(int(time.time()) - webhook_time)
    if age > max_age:
        logger.warning(f"🚫 Webhook timestamp too old: {age}s (max: {max_age}s)")
        return False

    return True


async def verify_payment_webhook(request: Request, secret: Optional[str]) -> bytes:
    """
    Verify the payment gateway webhook signature.

    The gateway signs "<timestamp>.<raw body>" with HMAC-SHA256 and sends the hex
    digest in X-Payment-Signature and the timestamp in X-Payment-Timestamp.

    Returns:
        The raw request body once verified
    """
    if not secret:
        logger.error("❌ PAYMENT_WEBHOOK_SECRET not configured")
        raise HTTPException(status_code=500, detail="Webhook secret not configured")

    raw_body = await request.body()
    signature = request.headers.get(SIGNATURE_HEADER, "")
    timestamp = request.headers.get(TIMESTAMP_HEADER, "")

    logger.debug("📥 Payment webhook received")

    if not signature:
        logger.warning("🚫 Payment webhook missing signature header")
        raise HTTPException(status_code=401, detail="Missing webhook signature")

    if not verify_timestamp(timestamp):
        raise HTTPException(status_code=401, detail="Webhook timestamp expired or missing")

    signed_payload = f"{timestamp}.".encode() + raw_body
    expected_signature = compute_hmac_sha256(secret, signed_payload)

    if not constant_time_compare(expected_signature, signature):
        logger.warning("🚫 Payment webhook signature mismatch")
        raise HTTPException(status_code=401, detail="Invalid webhook signature")

    logger.debug("✅ Payment webhook signature verified")
    return raw_body


def create_webhook_signature(secret: str, payload: bytes, timestamp: Optional[int] = None) -> tuple[str, str]:
    """
    Create a webhook signature for testing or replaying gateway callbacks.

    Returns:
        Tuple of (signature, timestamp) header values
    """
    ts = str(timestamp if timestamp is not None else int(time.time()))
    return compute_hmac_sha256(secret, f"{ts}.".encode() + payload), ts
