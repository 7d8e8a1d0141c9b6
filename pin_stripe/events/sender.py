"""
Deliver signed test events to a webhook endpoint.

Used during development to exercise a local receiver the same way Stripe
would: the payload is serialised once, signed, and sent byte-for-byte.
"""
import json
import logging
import time

import requests

from ..constants import SIGNATURE_HEADER
from .signing import signature_headers

logger = logging.getLogger(__name__)


def encode_payload(payload):
    """Serialise a payload mapping to the exact bytes that will be signed."""
    if isinstance(payload, bytes):
        return payload
    if isinstance(payload, str):
        return payload.encode('utf-8')
    return json.dumps(payload, separators=(',', ':')).encode('utf-8')


def send_signed_event(url, payload, secret, timeout=10, timestamp=None,
                      header=SIGNATURE_HEADER, session=None):
    """
    POST a signed webhook event.

    Args:
        url (str): Receiver endpoint
        payload (dict | str | bytes): Event body
        secret (str): Webhook signing secret
        timeout (int): HTTP request timeout in seconds
        timestamp (int, optional): Unix time to sign with
        header (str): Signature header name
        session (requests.Session, optional): Session to send with

    Returns:
        requests.Response

    Raises:
        requests.exceptions.RequestException: On transport failure
    """
    body = encode_payload(payload)
    if timestamp is None:
        timestamp = int(time.time())
    headers = signature_headers(body, secret, timestamp=timestamp, header=header)

    sender = session or requests
    try:
        response = sender.post(url, data=body, headers=headers, timeout=timeout)
    except requests.exceptions.Timeout:
        logger.error(f"Webhook delivery to {url} timed out after {timeout}s")
        raise
    except requests.exceptions.RequestException as e:
        logger.error(f"Webhook delivery to {url} failed: {str(e)[:200]}")
        raise

    if 200 <= response.status_code < 300:
        logger.info(f"Webhook delivered to {url}: HTTP {response.status_code}")
    else:
        logger.warning(f"Webhook rejected by {url}: HTTP {response.status_code} {response.text[:200]}")
    return response
