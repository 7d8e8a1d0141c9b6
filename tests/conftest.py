"""
Pytest configuration and fixtures.
"""
import json
import time

import pytest

from pin_stripe import create_app
from pin_stripe.config import StripeConfig
from pin_stripe.events.dispatcher import HandlerResult
from pin_stripe.events.signing import sign

WEBHOOK_SECRET = 'whsec_test_secret_key'


class RecordingHandler:
    """Handler component that remembers every event it receives."""

    def __init__(self, result=None):
        self.events = []
        self.result = result if result is not None else HandlerResult.success()

    def handle(self, event):
        self.events.append(event)
        return self.result


@pytest.fixture
def webhook_secret():
    return WEBHOOK_SECRET


@pytest.fixture
def stripe_config():
    return StripeConfig(
        api_key='sk_test_123',
        webhook_secret=WEBHOOK_SECRET,
        webhook_paths=('/webhooks/stripe',),
    )


@pytest.fixture
def customer_handler():
    return RecordingHandler()


@pytest.fixture
def invoice_calls():
    return []


@pytest.fixture
def app(stripe_config, customer_handler, invoice_calls):
    """Create application for testing."""
    def invoice_paid(event):
        invoice_calls.append(event)
        return HandlerResult.failure('ledger unavailable')

    def boom(event):
        raise RuntimeError('handler exploded')

    app = create_app(stripe_config, handlers=[
        ('customer.created', customer_handler),
        ('invoice.paid', invoice_paid),
        ('charge.failed', boom),
    ])
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def signed_post(client):
    """POST a body signed with the test secret (or an explicit header)."""
    def post(payload, timestamp=None, secret=WEBHOOK_SECRET, signature=None, path='/webhooks/stripe'):
        body = payload if isinstance(payload, (bytes, str)) else json.dumps(payload)
        if signature is None:
            ts = int(time.time()) if timestamp is None else timestamp
            signature = sign(body, ts, secret)
        headers = {'Content-Type': 'application/json'}
        if signature is not False:
            headers['stripe-signature'] = signature
        return client.post(path, data=body, headers=headers)
    return post
