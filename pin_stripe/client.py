"""
Minimal Stripe API client.

Usage:
    from pin_stripe import StripeClient

    client = StripeClient(api_key='sk_test_...')

    # Fetch a customer by id
    customer = client.read('cus_123')

    # List customers
    customers = client.read('customers', limit=10)

    # Create, update, delete
    customer = client.create('customers', {'email': 'jane@example.com', 'metadata': {'user_id': '42'}})
    customer = client.update('cus_123', {'name': 'Jane Doe'})
    client.delete('cus_123')
"""
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

import requests

from .config import ConfigurationError, StripeConfig
from .constants import DEFAULT_API_BASE, DEFAULT_TIMEOUT, ENTITY_PATHS, ID_PREFIXES

logger = logging.getLogger(__name__)


class StripeError(Exception):
    """Base exception for the Stripe client"""
    pass


class UnrecognizedEntityType(StripeError, ValueError):
    """Entity name or resource id the client cannot route"""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Unrecognized entity type: {value!r}")


class StripeConnectionError(StripeError):
    """Network failure talking to Stripe"""
    pass


class StripeAPIError(StripeError):
    """Stripe answered with a 4xx/5xx status"""

    def __init__(self, status_code, body=None, response=None):
        self.status_code = status_code
        self.body = body
        self.response = response
        error = body.get('error') if isinstance(body, dict) else None
        error = error if isinstance(error, dict) else {}
        self.code = error.get('code')
        self.type = error.get('type')
        self.message = error.get('message')
        super().__init__(f"Request failed with status {status_code}: {self.message or body}")


def encode_form(params: Mapping[str, Any], prefix: Optional[str] = None) -> List[Tuple[str, str]]:
    """
    Flatten nested params into Stripe's bracketed form encoding.

    {'metadata': {'user_id': '1'}} -> [('metadata[user_id]', '1')]
    {'items': [{'price': 'p'}]}   -> [('items[0][price]', 'p')]
    """
    pairs = []
    for key, value in params.items():
        name = f"{prefix}[{key}]" if prefix else str(key)
        pairs.extend(_encode_value(name, value))
    return pairs


def _encode_value(name, value):
    if value is None:
        return []
    if isinstance(value, Mapping):
        return encode_form(value, name)
    if isinstance(value, (list, tuple)):
        pairs = []
        for index, item in enumerate(value):
            pairs.extend(_encode_value(f"{name}[{index}]", item))
        return pairs
    if isinstance(value, bool):
        return [(name, 'true' if value else 'false')]
    return [(name, str(value))]


def resource_path(id_or_path: str) -> str:
    """
    Map a resource id (or raw API path) to its URL path.

    Raises:
        UnrecognizedEntityType: If the id prefix is unknown
    """
    if not isinstance(id_or_path, str) or not id_or_path:
        raise UnrecognizedEntityType(id_or_path)
    if id_or_path.startswith('/'):
        return id_or_path
    for prefix, collection in ID_PREFIXES:
        if id_or_path.startswith(prefix):
            return f"{collection}/{id_or_path}"
    raise UnrecognizedEntityType(id_or_path)


def entity_path(entity: str) -> str:
    """Collection path for an entity name such as 'customers'."""
    try:
        return ENTITY_PATHS[entity]
    except (KeyError, TypeError):
        raise UnrecognizedEntityType(entity)


class StripeClient:
    """Stripe REST API client"""

    def __init__(self,
                 api_key: str,
                 api_base: str = DEFAULT_API_BASE,
                 timeout: float = DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None):
        """
        Initialize the client

        Args:
            api_key: Secret API key (sk_test_... / sk_live_...)
            api_base: Base URL including the API version segment
            timeout: Request timeout in seconds
            session: Session to send requests with (a MockStripe in tests)
        """
        if not api_key:
            raise ConfigurationError("Stripe API key is not configured (set STRIPE_API_KEY)")
        self.api_key = api_key
        self.api_base = api_base.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config: StripeConfig, session: Optional[requests.Session] = None):
        return cls(
            api_key=config.require_api_key(),
            api_base=config.api_base,
            timeout=config.timeout,
            session=session,
        )

    def _headers(self) -> Dict[str, str]:
        return {
            'Authorization': f"Bearer {self.api_key}",
            'Accept': 'application/json',
        }

    def _send(self, method: str, path: str, params=None, data=None) -> Dict[str, Any]:
        url = f"{self.api_base}{path}"
        form = encode_form(data) if data else None

        try:
            response = self.session.request(
                method,
                url,
                headers=self._headers(),
                params=encode_form(params) if params else None,
                data=form,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout:
            raise StripeConnectionError(f"Request timeout after {self.timeout}s: {method} {path}")
        except requests.exceptions.RequestException as e:
            raise StripeConnectionError(f"Request error: {str(e)[:200]}")

        try:
            body = response.json() if response.content else {}
        except ValueError:
            body = response.text

        if not 200 <= response.status_code < 300:
            logger.warning(f"Stripe {method} {path} -> {response.status_code}")
            raise StripeAPIError(response.status_code, body, response)

        logger.debug(f"Stripe {method} {path} -> {response.status_code}")
        return body

    # CRUD

    def read(self, id_or_entity: str, **params) -> Dict[str, Any]:
        """
        Fetch a resource by id, or list resources by entity name

        Args:
            id_or_entity: 'cus_123' style id, or entity name such as 'customers'
            **params: Query parameters (limit, starting_after, ...)
        """
        if id_or_entity in ENTITY_PATHS:
            return self._send('GET', ENTITY_PATHS[id_or_entity], params=params)
        return self._send('GET', resource_path(id_or_entity), params=params)

    def create(self, entity: str, params: Mapping[str, Any]) -> Dict[str, Any]:
        """Create a resource of the given entity type"""
        return self._send('POST', entity_path(entity), data=params)

    def update(self, id: str, params: Mapping[str, Any]) -> Dict[str, Any]:
        """Update a resource by id"""
        return self._send('POST', resource_path(id), data=params)

    def delete(self, id: str) -> Dict[str, Any]:
        """Delete a resource by id"""
        return self._send('DELETE', resource_path(id))

    def request(self, method: str, url: str, params=None, data=None) -> Dict[str, Any]:
        """Send an arbitrary request; url is a resource id or an API path"""
        return self._send(method.upper(), resource_path(url), params=params, data=data)
