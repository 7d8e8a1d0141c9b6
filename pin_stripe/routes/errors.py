"""
Plain-text responses returned to webhook senders.

Bodies are short fixed reasons; internal details never reach the sender.
"""
from flask import Response

from ..constants import WebhookResponse


def text_response(message, status_code):
    """
    Build a plain-text response.

    Args:
        message (str): Response body
        status_code (int): HTTP status code

    Returns:
        flask.Response
    """
    return Response(message, status=status_code, mimetype='text/plain')


def accepted_response():
    """Event handled (200, empty body)."""
    return text_response('', 200)


def invalid_signature_response():
    """Signature missing, malformed, expired or incorrect (400)."""
    return text_response(WebhookResponse.INVALID_SIGNATURE, 400)


def missing_event_type_response():
    """Verified body without a string type field (400)."""
    return text_response(WebhookResponse.MISSING_EVENT_TYPE, 400)
