"""Webhook routes."""
from .webhooks import create_webhook_blueprint

__all__ = ['create_webhook_blueprint']
