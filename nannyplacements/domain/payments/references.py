"""Transaction references shared with the payment gateway"""

import time
from typing import Optional

from ...shared.validators import validate_uuid

NANNY_PREFIX = "nanny-int-"
CLEANER_PREFIX = "cleaner-"


def generate_tx_ref(interest_id: str, service_type: str = "nanny", now_ms: Optional[int] = None) -> str:
    """
    Build the reference sent to the gateway at checkout.

    Format: nanny-int-<interest_id>-<ms> or cleaner-<interest_id>-<ms>
    """
    prefix = CLEANER_PREFIX if service_type == "cleaning" else NANNY_PREFIX
    millis = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{prefix}{interest_id}-{millis}"


def extract_interest_id(tx_ref: Optional[str]) -> Optional[str]:
    """Recover the interest UUID from a tx_ref, or None when it is not one of ours"""
    if not tx_ref:
        return None

    for prefix in (NANNY_PREFIX, CLEANER_PREFIX):
        if tx_ref.startswith(prefix):
            remainder = tx_ref[len(prefix):]
            break
    else:
        return None

    # A UUID is five dash-separated groups
    parts = remainder.split("-")
    if len(parts) < 5:
        return None
    candidate = "-".join(parts[:5])
    return candidate if len(candidate) == 36 and validate_uuid(candidate) else None
