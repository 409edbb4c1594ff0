"""Webhook authentication for the Twilio SMS callback.

Twilio signs each request: HMAC-SHA1 (keyed with the account auth token) over
the full request URL followed by every POST parameter name and value, sorted
by name, then base64-encoded into the X-Twilio-Signature header.
"""

import base64
import hashlib
import hmac
from typing import Mapping, Optional


def compute_signature(auth_token: str, url: str, params: Mapping[str, str]) -> str:
    """Compute the expected X-Twilio-Signature for a request."""
    payload = url + "".join(f"{key}{params[key]}" for key in sorted(params))
    mac = hmac.new(auth_token.encode("utf-8"), payload.encode("utf-8"), hashlib.sha1)
    return base64.b64encode(mac.digest()).decode("ascii")


def is_valid_signature(
    auth_token: str,
    url: str,
    params: Mapping[str, str],
    signature: Optional[str],
) -> bool:
    """Check a request signature in constant time."""
    if not signature:
        return False
    expected = compute_signature(auth_token, url, params)
    return hmac.compare_digest(expected, signature)


def is_allowed_sender(sender: Optional[str], allowed: Optional[str]) -> bool:
    """Only the configured phone number may create tasks. No number configured allows all."""
    if not allowed:
        return True
    return (sender or "").strip() == allowed.strip()
