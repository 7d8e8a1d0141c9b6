"""
Stripe constants shared by the client and the webhook receiver.
"""
from enum import Enum


DEFAULT_API_BASE = 'https://api.stripe.com/v1'
DEFAULT_WEBHOOK_PATH = '/webhooks/stripe'
DEFAULT_TIMEOUT = 30
MAX_WEBHOOK_BODY_SIZE = 1024 * 1024

# Webhook signature scheme
SIGNATURE_HEADER = 'stripe-signature'
SIGNATURE_SCHEME = 'v1'
TIMESTAMP_KEY = 't'
VALID_PERIOD_SECONDS = 300
WEBHOOK_SECRET_PREFIX = 'whsec_'

# WSGI environ key holding cached raw body chunks
RAW_BODY_ENVIRON_KEY = 'pin_stripe.raw_body'


class VerificationError(Enum):
    """Reasons a webhook signature is rejected."""
    NO_SIGNATURE = 'no signature'
    MALFORMED_HEADER = f'signature is in a wrong format or is missing {SIGNATURE_SCHEME} schema'
    EXPIRED = 'signature is expired'
    INCORRECT_SIGNATURE = 'signature is incorrect'


class WebhookResponse:
    """Plain-text bodies returned to the webhook sender."""
    INVALID_SIGNATURE = 'invalid signature'
    MISSING_EVENT_TYPE = 'missing event type'


# Entity name -> collection path
ENTITY_PATHS = {
    'customers': '/customers',
    'products': '/products',
    'prices': '/prices',
    'subscriptions': '/subscriptions',
    'invoices': '/invoices',
    'events': '/events',
    'checkout_sessions': '/checkout/sessions',
}

# Resource ID prefix -> collection path
ID_PREFIXES = (
    ('product_', '/products'),
    ('prod_', '/products'),
    ('price_', '/prices'),
    ('sub_', '/subscriptions'),
    ('cus_', '/customers'),
    ('cs_', '/checkout/sessions'),
    ('inv_', '/invoices'),
    ('in_', '/invoices'),
    ('evt_', '/events'),
)
