"""
Configuration for the Stripe client and webhook endpoints.

Values are read once at startup (from the environment, optionally populated
from a .env file) and passed explicitly to the client and the webhook
blueprint.
"""
import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

from dotenv import load_dotenv

from .constants import (
    DEFAULT_API_BASE,
    DEFAULT_TIMEOUT,
    DEFAULT_WEBHOOK_PATH,
    SIGNATURE_HEADER,
    WEBHOOK_SECRET_PREFIX,
)


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


def validate_webhook_secret(secret):
    """
    Sanity-check a webhook signing secret.

    Args:
        secret (str): Secret from the Stripe dashboard

    Returns:
        str: The secret, unchanged

    Raises:
        ConfigurationError: If the secret is empty or lacks the whsec_ prefix
    """
    if not secret:
        raise ConfigurationError("Webhook secret is not configured (set STRIPE_WEBHOOK_SECRET)")
    if not isinstance(secret, str) or not secret.startswith(WEBHOOK_SECRET_PREFIX):
        raise ConfigurationError(f"Webhook secret must start with '{WEBHOOK_SECRET_PREFIX}'")
    return secret


def normalize_path(path):
    """Return a webhook path with a single leading slash and no trailing slash."""
    parts = [part for part in path.split('/') if part]
    return '/' + '/'.join(parts)


def _parse_paths(value):
    if not value:
        return (DEFAULT_WEBHOOK_PATH,)
    paths = tuple(normalize_path(p) for p in value.split(',') if p.strip())
    return paths or (DEFAULT_WEBHOOK_PATH,)


@dataclass(frozen=True)
class StripeConfig:
    """Immutable settings shared by the client and webhook endpoints."""
    api_key: Optional[str] = None
    webhook_secret: Optional[str] = None
    api_base: str = DEFAULT_API_BASE
    webhook_paths: Tuple[str, ...] = field(default=(DEFAULT_WEBHOOK_PATH,))
    signature_header: str = SIGNATURE_HEADER
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self):
        # Accept a plain string or list for convenience
        paths = self.webhook_paths
        if isinstance(paths, str):
            paths = (paths,)
        object.__setattr__(self, 'webhook_paths', tuple(normalize_path(p) for p in paths))

    @classmethod
    def from_env(cls, env=None, dotenv=True):
        """
        Build configuration from environment variables.

        Args:
            env (dict, optional): Mapping to read instead of os.environ
            dotenv (bool): Load a .env file first (only when reading os.environ)

        Returns:
            StripeConfig
        """
        if env is None:
            if dotenv:
                load_dotenv()
            env = os.environ

        timeout = env.get('STRIPE_TIMEOUT')
        try:
            timeout = float(timeout) if timeout else DEFAULT_TIMEOUT
        except ValueError:
            raise ConfigurationError(f"STRIPE_TIMEOUT must be a number, got {timeout!r}")

        return cls(
            api_key=env.get('STRIPE_API_KEY') or None,
            webhook_secret=env.get('STRIPE_WEBHOOK_SECRET') or None,
            api_base=(env.get('STRIPE_API_BASE') or DEFAULT_API_BASE).rstrip('/'),
            webhook_paths=_parse_paths(env.get('STRIPE_WEBHOOK_PATHS')),
            signature_header=env.get('STRIPE_SIGNATURE_HEADER') or SIGNATURE_HEADER,
            timeout=timeout,
        )

    def require_api_key(self):
        if not self.api_key:
            raise ConfigurationError("Stripe API key is not configured (set STRIPE_API_KEY)")
        return self.api_key

    def require_webhook_secret(self):
        return validate_webhook_secret(self.webhook_secret)
