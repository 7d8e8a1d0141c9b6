"""
Stripe webhook endpoint.

Verifies the stripe-signature header against the raw request body, then
forwards the parsed event to the handler table. The sender sees 200 once the
signature is valid and the event has a type, or a 400 with a short reason.
"""
import json
import logging

from flask import Blueprint, request

from ..config import validate_webhook_secret
from ..constants import DEFAULT_WEBHOOK_PATH, SIGNATURE_HEADER, VerificationError
from ..events.dispatcher import HandlerResult, as_handler_table, dispatch
from ..events.signing import VerificationResult, verify
from ..middleware.raw_body import get_raw_body
from ..utils.flow_logging import (
    log_handler_failure,
    log_missing_event_type,
    log_signature_rejected,
    log_webhook_received,
)
from .errors import accepted_response, invalid_signature_response, missing_event_type_response

logger = logging.getLogger(__name__)


def get_signature(signature_header=SIGNATURE_HEADER):
    """
    Read the single signature header from the current request.

    Repeated headers usually arrive folded into one value; verify rejects
    those as malformed.

    Returns:
        (signature, None) on success, (None, VerificationResult) otherwise
    """
    values = request.headers.getlist(signature_header)
    if not values:
        return None, VerificationResult(VerificationError.NO_SIGNATURE)
    if len(values) > 1:
        return None, VerificationResult(VerificationError.MALFORMED_HEADER)
    return values[0], None


def parse_event(raw_body):
    """
    Decode a webhook body.

    Returns:
        (event, event_type, None) when the body is a JSON object with a string
        type, otherwise (None, None, detail)
    """
    try:
        event = json.loads(raw_body.decode('utf-8'))
    except (UnicodeDecodeError, ValueError):
        return None, None, 'body is not valid JSON'

    if not isinstance(event, dict):
        return None, None, 'body is not a JSON object'

    event_type = event.get('type')
    if not isinstance(event_type, str):
        return None, None, None
    return event, event_type, None


def create_webhook_blueprint(handlers, webhook_secret, path=DEFAULT_WEBHOOK_PATH,
                             signature_header=SIGNATURE_HEADER, name='stripe_webhooks'):
    """
    Build a blueprint serving one webhook endpoint.

    Args:
        handlers: HandlerTable, mapping, or iterable of (event_type, handler) pairs
        webhook_secret (str): Endpoint signing secret (must start with whsec_)
        path (str): URL path of the endpoint
        signature_header (str): Header carrying the signature
        name (str): Blueprint name, unique per app

    Returns:
        flask.Blueprint

    Raises:
        ConfigurationError: If the secret is missing or malformed
        DuplicateHandlerError: If handler pairs repeat an event type
    """
    secret = validate_webhook_secret(webhook_secret)
    table = as_handler_table(handlers)
    bp = Blueprint(name, __name__)

    @bp.route(path, methods=['POST'])
    def receive_webhook():
        signature, rejection = get_signature(signature_header)
        if rejection is None:
            raw_body = get_raw_body(request)
            rejection = verify(raw_body, signature, secret)

        if not rejection:
            log_signature_rejected(rejection.message, path=request.path)
            return invalid_signature_response()

        event, event_type, detail = parse_event(raw_body)
        if event is None:
            log_missing_event_type(detail, path=request.path)
            return missing_event_type_response()

        log_webhook_received(event_type, event.get('id'))
        result = dispatch(table, event_type, event)

        if isinstance(result, HandlerResult) and not result.ok:
            log_handler_failure(event_type, result.reason, event_id=event.get('id'))

        return accepted_response()

    bp.handler_table = table
    return bp
