"""
HMAC signing utilities for Stripe webhook payloads.

Stripe sends a ``stripe-signature`` header of the form ``t=<unix>,v1=<hex>``
where the digest is HMAC-SHA256 over ``"<t>." + raw_body`` keyed by the
endpoint's signing secret.
"""
import hashlib
import hmac
import re
import time
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

from ..constants import (
    SIGNATURE_HEADER,
    SIGNATURE_SCHEME,
    TIMESTAMP_KEY,
    VALID_PERIOD_SECONDS,
    VerificationError,
)

_TIMESTAMP_RE = re.compile(r'[+-]?[0-9]+')


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of a signature check. Truthy only when the signature is valid."""
    error: Optional[VerificationError] = None

    @property
    def ok(self):
        return self.error is None

    @property
    def message(self):
        return 'ok' if self.error is None else self.error.value

    def __bool__(self):
        return self.ok


VERIFIED = VerificationResult()


def _to_bytes(payload: Union[bytes, str]) -> bytes:
    if isinstance(payload, str):
        return payload.encode('utf-8')
    return bytes(payload)


def compute_digest(payload: Union[bytes, str], timestamp: int, secret: str) -> str:
    """Lowercase hex HMAC-SHA256 of ``"<timestamp>." + payload``."""
    message = f"{timestamp}.".encode('utf-8') + _to_bytes(payload)
    return hmac.new(secret.encode('utf-8'), message, hashlib.sha256).hexdigest()


def sign(payload: Union[bytes, str], timestamp: int, secret: str) -> str:
    """
    Build a signature header value for a payload.

    Args:
        payload: Raw request body
        timestamp: Unix time in seconds
        secret: Webhook signing secret

    Returns:
        str: ``t=<timestamp>,v1=<hex digest>``
    """
    digest = compute_digest(payload, timestamp, secret)
    return f"{TIMESTAMP_KEY}={timestamp},{SIGNATURE_SCHEME}={digest}"


def parse_signature_header(header: str) -> Optional[Tuple[int, str]]:
    """
    Split a signature header into its timestamp and v1 digest.

    Exactly one ``t`` and exactly one ``v1`` entry are required and ``t`` must
    be a base-10 integer with nothing else in the value. Every entry must be a
    bare ``key=value`` pair; repeated headers folded into one value (``", "``
    separated) or garbled entries make the whole header malformed.

    Returns:
        (timestamp, digest) or None when the header is malformed
    """
    if not isinstance(header, str):
        return None

    entries: Dict[str, list] = {}
    for pair in header.split(','):
        if '=' not in pair:
            return None
        key, value = pair.split('=', 1)
        if not key or key != key.strip():
            return None
        entries.setdefault(key, []).append(value)

    timestamps = entries.get(TIMESTAMP_KEY, [])
    digests = entries.get(SIGNATURE_SCHEME, [])
    if len(timestamps) != 1 or len(digests) != 1:
        return None

    if not _TIMESTAMP_RE.fullmatch(timestamps[0]):
        return None

    return int(timestamps[0]), digests[0]


def verify(payload: Union[bytes, str], header: str, secret: str,
           tolerance: int = VALID_PERIOD_SECONDS, now: Optional[int] = None) -> VerificationResult:
    """
    Verify a webhook payload against its signature header.

    Args:
        payload: Raw request body exactly as received
        header: Value of the stripe-signature header
        secret: Webhook signing secret
        tolerance: Maximum signature age in seconds (inclusive)
        now: Current unix time; sampled once from the clock when omitted

    Returns:
        VerificationResult: truthy on success, otherwise carries the reason
    """
    parsed = parse_signature_header(header)
    if parsed is None:
        return VerificationResult(VerificationError.MALFORMED_HEADER)
    timestamp, provided = parsed

    if now is None:
        now = int(time.time())

    if timestamp + tolerance < now:
        return VerificationResult(VerificationError.EXPIRED)

    expected = compute_digest(payload, timestamp, secret)
    if not hmac.compare_digest(expected.encode('utf-8'), provided.encode('utf-8')):
        return VerificationResult(VerificationError.INCORRECT_SIGNATURE)

    return VERIFIED


def signature_headers(payload: Union[bytes, str], secret: str, timestamp: Optional[int] = None,
                      header: str = SIGNATURE_HEADER) -> Dict[str, str]:
    """
    Generate headers for a signed webhook request.

    Args:
        payload: Body that will be sent verbatim
        secret: Webhook signing secret
        timestamp: Unix time to sign with (defaults to now)
        header: Signature header name

    Returns:
        dict: Content-Type and signature headers
    """
    if timestamp is None:
        timestamp = int(time.time())
    return {
        'Content-Type': 'application/json',
        header: sign(payload, timestamp, secret),
    }
