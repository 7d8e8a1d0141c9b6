"""
Structured logging for the webhook receive flow.
"""
import logging
from flask import g, has_app_context

logger = logging.getLogger(__name__)


def _request_id():
    if has_app_context():
        return getattr(g, 'request_id', 'background')
    return 'background'


def log_webhook_received(event_type, event_id=None, **kwargs):
    """
    Log a verified webhook that is about to be dispatched.

    Args:
        event_type (str): Event type (e.g. 'customer.created')
        event_id (str, optional): Stripe event id
        **kwargs: Additional context
    """
    request_id = _request_id()

    log_data = {
        'request_id': request_id,
        'event': 'webhook.received',
        'event_type': event_type,
        'event_id': event_id,
    }
    log_data.update(kwargs)

    logger.info(
        f"[{request_id}] webhook.received: type={event_type} id={event_id}",
        extra=log_data
    )


def log_signature_rejected(reason, **kwargs):
    """
    Log a rejected signature. This is a security event and is logged at error level.

    Args:
        reason (str): Short rejection reason (never the secret or header value)
        **kwargs: Additional context
    """
    request_id = _request_id()

    log_data = {
        'request_id': request_id,
        'event': 'webhook.signature_rejected',
        'reason': reason,
    }
    log_data.update(kwargs)

    logger.error(
        f"[{request_id}] webhook.signature_rejected: Invalid signature: {reason}",
        extra=log_data
    )


def log_missing_event_type(detail=None, **kwargs):
    """Log a verified webhook whose body has no usable type field."""
    request_id = _request_id()

    log_data = {
        'request_id': request_id,
        'event': 'webhook.missing_event_type',
        'detail': detail,
    }
    log_data.update(kwargs)

    logger.warning(
        f"[{request_id}] webhook.missing_event_type: Received webhook without type field"
        + (f" ({detail})" if detail else ''),
        extra=log_data
    )


def log_handler_failure(event_type, reason, **kwargs):
    """Log a handler that reported a business failure."""
    request_id = _request_id()

    log_data = {
        'request_id': request_id,
        'event': 'webhook.handler_failure',
        'event_type': event_type,
        'reason': str(reason),
    }
    log_data.update(kwargs)

    logger.warning(
        f"[{request_id}] webhook.handler_failure: type={event_type} reason={reason}",
        extra=log_data
    )
