"""
Stripe API client and webhook receiver for Flask applications.
"""
import logging

from flask import Flask

from .client import (
    StripeAPIError,
    StripeClient,
    StripeConnectionError,
    StripeError,
    UnrecognizedEntityType,
)
from .config import ConfigurationError, StripeConfig, validate_webhook_secret
from .constants import MAX_WEBHOOK_BODY_SIZE
from .events import (
    HANDLED,
    DuplicateHandlerError,
    HandlerResult,
    HandlerTable,
    as_handler_table,
    dispatch,
    register,
    sign,
    verify,
)
from .middleware import init_raw_body, init_request_tracking
from .routes import create_webhook_blueprint

__version__ = '0.3.0'

logger = logging.getLogger(__name__)


def create_app(config=None, handlers=()):
    """
    Build a Flask app serving the configured webhook endpoints.

    Args:
        config (StripeConfig, optional): Settings; read from the environment when omitted
        handlers: HandlerTable or (event_type, handler) pairs shared by every endpoint

    Returns:
        flask.Flask

    Raises:
        ConfigurationError: If the webhook secret is missing or malformed
    """
    if config is None:
        config = StripeConfig.from_env()

    secret = config.require_webhook_secret()
    table = as_handler_table(handlers)

    app = Flask(__name__)
    app.config['STRIPE_CONFIG'] = config
    app.config['MAX_CONTENT_LENGTH'] = MAX_WEBHOOK_BODY_SIZE

    init_request_tracking(app)
    init_raw_body(app, config.webhook_paths)

    for index, path in enumerate(config.webhook_paths):
        name = 'stripe_webhooks' if index == 0 else f'stripe_webhooks_{index}'
        app.register_blueprint(create_webhook_blueprint(
            table,
            secret,
            path=path,
            signature_header=config.signature_header,
            name=name,
        ))
        logger.info(f"Stripe webhook endpoint registered at {path}")

    return app


__all__ = [
    'create_app',
    'create_webhook_blueprint',
    'ConfigurationError',
    'StripeConfig',
    'validate_webhook_secret',
    'StripeClient',
    'StripeError',
    'StripeAPIError',
    'StripeConnectionError',
    'UnrecognizedEntityType',
    'HANDLED',
    'DuplicateHandlerError',
    'HandlerResult',
    'HandlerTable',
    'dispatch',
    'register',
    'sign',
    'verify',
]
