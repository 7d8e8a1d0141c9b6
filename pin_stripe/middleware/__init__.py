"""
Middleware Package
Contains raw body caching and request tracking for webhook endpoints
"""

from .raw_body import (
    RawBodyMiddleware,
    get_raw_body,
    init_raw_body
)

from .request_tracking import init_request_tracking

__all__ = [
    'RawBodyMiddleware',
    'get_raw_body',
    'init_raw_body',
    'init_request_tracking'
]
