"""Webhook signature verification and event dispatch."""
from .dispatcher import (
    HANDLED,
    Callback,
    Component,
    DuplicateHandlerError,
    HandlerResult,
    HandlerTable,
    as_handler_table,
    dispatch,
    handler_unit,
    register,
)
from .signing import (
    VERIFIED,
    VerificationResult,
    compute_digest,
    parse_signature_header,
    sign,
    signature_headers,
    verify,
)

__all__ = [
    'HANDLED',
    'Callback',
    'Component',
    'DuplicateHandlerError',
    'HandlerResult',
    'HandlerTable',
    'as_handler_table',
    'dispatch',
    'handler_unit',
    'register',
    'VERIFIED',
    'VerificationResult',
    'compute_digest',
    'parse_signature_header',
    'sign',
    'signature_headers',
    'verify',
]
