"""Test helpers for applications using pin_stripe."""
from . import fixtures
from .mock import MockCall, MockStripe, build_response

__all__ = ['fixtures', 'MockCall', 'MockStripe', 'build_response']
