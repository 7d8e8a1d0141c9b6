"""
Offline Stripe-shaped fixtures for tests.

    customer = fixtures.load('customer', email='alice@example.com')
    event = fixtures.load('customer.created', data={'object': {'email': 'alice@example.com'}})
    error = fixtures.load('error_404')

Resource and event fixtures follow the shape of real API objects closely
enough for handler and client tests; they are not generated against a live
account. Overrides are deep-merged into the base fixture.
"""
import copy

API_VERSION = '2024-06-20'
FIXTURE_CREATED = 1700000000
FIXTURE_DESCRIPTION = 'PinStripe Test Fixture'

_METADATA = {'pinstripe_fixture': 'true'}

RESOURCES = {
    'customer': {
        'id': 'cus_fixture',
        'object': 'customer',
        'created': FIXTURE_CREATED,
        'description': FIXTURE_DESCRIPTION,
        'email': 'customer@example.com',
        'name': 'Fixture Customer',
        'livemode': False,
        'metadata': _METADATA,
    },
    'product': {
        'id': 'prod_fixture',
        'object': 'product',
        'active': True,
        'created': FIXTURE_CREATED,
        'description': FIXTURE_DESCRIPTION,
        'name': 'Fixture Product',
        'livemode': False,
        'metadata': _METADATA,
    },
    'price': {
        'id': 'price_fixture',
        'object': 'price',
        'active': True,
        'currency': 'usd',
        'product': 'prod_fixture',
        'recurring': {'interval': 'month', 'interval_count': 1},
        'type': 'recurring',
        'unit_amount': 1000,
        'livemode': False,
        'metadata': _METADATA,
    },
    'subscription': {
        'id': 'sub_fixture',
        'object': 'subscription',
        'customer': 'cus_fixture',
        'status': 'active',
        'items': {
            'object': 'list',
            'data': [{'id': 'si_fixture', 'object': 'subscription_item', 'price': {'id': 'price_fixture'}}],
        },
        'livemode': False,
        'metadata': _METADATA,
    },
    'invoice': {
        'id': 'in_fixture',
        'object': 'invoice',
        'customer': 'cus_fixture',
        'subscription': 'sub_fixture',
        'amount_due': 1000,
        'amount_paid': 1000,
        'currency': 'usd',
        'status': 'paid',
        'livemode': False,
        'metadata': _METADATA,
    },
    'charge': {
        'id': 'ch_fixture',
        'object': 'charge',
        'amount': 2000,
        'currency': 'usd',
        'customer': 'cus_fixture',
        'paid': True,
        'status': 'succeeded',
        'livemode': False,
        'metadata': _METADATA,
    },
    'payment_intent': {
        'id': 'pi_fixture',
        'object': 'payment_intent',
        'amount': 2000,
        'currency': 'usd',
        'customer': 'cus_fixture',
        'status': 'succeeded',
        'livemode': False,
        'metadata': _METADATA,
    },
    'refund': {
        'id': 're_fixture',
        'object': 'refund',
        'amount': 2000,
        'charge': 'ch_fixture',
        'currency': 'usd',
        'status': 'succeeded',
        'metadata': _METADATA,
    },
}

_API_ERROR = {'message': 'An error occurred with our API', 'type': 'api_error'}

ERRORS = {
    'error_400': {
        'code': 'parameter_invalid_empty',
        'doc_url': 'https://stripe.com/docs/error-codes/parameter-invalid-empty',
        'message': 'Invalid request: missing required parameter',
        'type': 'invalid_request_error',
    },
    'error_401': {'message': 'Invalid API Key provided', 'type': 'invalid_request_error'},
    'error_402': {
        'code': 'card_declined',
        'doc_url': 'https://stripe.com/docs/error-codes/card-declined',
        'message': 'Your card was declined',
        'type': 'card_error',
    },
    'error_403': {
        'code': 'account_invalid',
        'message': "The API key doesn't have permissions to perform the request",
        'type': 'invalid_request_error',
    },
    'error_404': {
        'code': 'resource_missing',
        'doc_url': 'https://stripe.com/docs/error-codes/resource-missing',
        'message': 'No such resource',
        'type': 'invalid_request_error',
    },
    'error_409': {
        'code': 'idempotency_key_in_use',
        'message': 'The idempotency key provided is currently being used in another request',
        'type': 'idempotency_error',
    },
    'error_424': {
        'message': "The request couldn't be completed due to a failure in a dependency external to Stripe",
        'type': 'api_error',
    },
    'error_429': {'code': 'rate_limit', 'message': 'Too many requests', 'type': 'rate_limit_error'},
    'error_500': _API_ERROR,
    'error_502': _API_ERROR,
    'error_503': _API_ERROR,
    'error_504': _API_ERROR,
}

# Longest prefix first
_EVENT_OBJECTS = (
    ('customer.subscription.', 'subscription'),
    ('checkout.session.', None),
    ('payment_intent.', 'payment_intent'),
    ('customer.', 'customer'),
    ('invoice.', 'invoice'),
    ('product.', 'product'),
    ('price.', 'price'),
    ('charge.', 'charge'),
    ('refund.', 'refund'),
)


def deep_merge(base, override):
    """Recursively merge ``override`` into a copy of ``base``."""
    if not isinstance(base, dict) or not isinstance(override, dict):
        return copy.deepcopy(override)
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _event_object(event_type):
    for prefix, resource in _EVENT_OBJECTS:
        if event_type.startswith(prefix):
            if resource is None:
                return {'id': 'cs_fixture', 'object': 'checkout.session', 'status': 'complete'}
            return copy.deepcopy(RESOURCES[resource])
    return {}


def build_event(event_type, **overrides):
    """Webhook event envelope for ``event_type``."""
    event = {
        'id': 'evt_fixture',
        'object': 'event',
        'api_version': API_VERSION,
        'created': FIXTURE_CREATED,
        'livemode': False,
        'pending_webhooks': 1,
        'type': event_type,
        'data': {'object': _event_object(event_type)},
    }
    return deep_merge(event, overrides) if overrides else event


def load(name, **overrides):
    """
    Load a fixture by name.

    Args:
        name (str): Resource name ('customer'), dotted event type
            ('invoice.paid') or error name ('error_404')
        **overrides: Values deep-merged into the fixture

    Raises:
        KeyError: If the name is not a known fixture
    """
    if name in RESOURCES:
        fixture = copy.deepcopy(RESOURCES[name])
    elif name in ERRORS:
        fixture = {'error': copy.deepcopy(ERRORS[name])}
    elif isinstance(name, str) and '.' in name:
        return build_event(name, **overrides)
    else:
        raise KeyError(
            f"Unknown fixture: {name!r}. Supported: {', '.join(list_fixtures())} "
            "or any dotted webhook event type"
        )
    return deep_merge(fixture, overrides) if overrides else fixture


def list_fixtures():
    """Names of the resource and error fixtures."""
    return sorted(RESOURCES) + sorted(ERRORS)
