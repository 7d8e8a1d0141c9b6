"""
Webhook event dispatcher.

Routes a verified event to the handler registered for its type. The handler
table is built once during setup and is read-only afterwards, so concurrent
requests can share it without locking.
"""
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, Tuple, Union

logger = logging.getLogger(__name__)


class DuplicateHandlerError(ValueError):
    """Raised when an event type is registered more than once."""
    pass


@dataclass(frozen=True)
class HandlerResult:
    """
    Success or failure signal returned by a handler.

    Handlers may return any value; dispatch hands it back untouched. This
    type exists so handlers have a conventional way to report a business
    failure without raising.
    """
    ok: bool = True
    value: Any = None
    reason: Any = None

    @classmethod
    def success(cls, value=None):
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, reason):
        return cls(ok=False, reason=reason)


# Returned for event types nobody registered
HANDLED = HandlerResult()


@dataclass(frozen=True)
class Callback:
    """A one-argument callable taking the event."""
    fn: Callable[[Mapping], Any]

    def __call__(self, event):
        return self.fn(event)


@dataclass(frozen=True)
class Component:
    """An object (often a class with a static method) exposing ``handle(event)``."""
    target: Any

    def __call__(self, event):
        return self.target.handle(event)


HandlerUnit = Union[Callback, Component]


def handler_unit(handler) -> HandlerUnit:
    """
    Wrap a user handler in its variant.

    Objects with a callable ``handle`` attribute become a Component, any other
    callable becomes a Callback.
    """
    if isinstance(handler, (Callback, Component)):
        return handler
    if callable(getattr(handler, 'handle', None)):
        return Component(handler)
    if callable(handler):
        return Callback(handler)
    raise TypeError(f"Handler must be callable or expose handle(event), got {type(handler).__name__}")


class HandlerTable:
    """Immutable mapping from event type to handler unit.

    Handlers passed to the constructor are wrapped with handler_unit and the
    same event type checks as register apply.
    """

    __slots__ = ('_handlers',)

    def __init__(self, handlers: Mapping[str, Any] = None):
        units = {}
        for event_type, handler in (handlers or {}).items():
            if not isinstance(event_type, str) or not event_type:
                raise ValueError("Event type must be a non-empty string")
            units[event_type] = handler_unit(handler)
        self._handlers = MappingProxyType(units)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, Any]]) -> 'HandlerTable':
        """
        Build a table from ``(event_type, handler)`` pairs.

        Raises:
            DuplicateHandlerError: If an event type appears twice
        """
        table = cls()
        for event_type, handler in pairs:
            table = register(table, event_type, handler)
        return table

    def get(self, event_type):
        return self._handlers.get(event_type)

    @property
    def event_types(self):
        return tuple(self._handlers)

    def __contains__(self, event_type):
        return event_type in self._handlers

    def __len__(self):
        return len(self._handlers)

    def __iter__(self):
        return iter(self._handlers)

    def __repr__(self):
        return f"HandlerTable({sorted(self._handlers)!r})"


def register(table: HandlerTable, event_type: str, handler) -> HandlerTable:
    """
    Return a new table with ``event_type`` mapped to ``handler``.

    Args:
        table: Existing table (left unchanged)
        event_type: Dotted event name, e.g. 'customer.created'
        handler: Callable or object exposing handle(event)

    Raises:
        DuplicateHandlerError: If the event type already has a handler
    """
    if not isinstance(event_type, str) or not event_type:
        raise ValueError("Event type must be a non-empty string")
    if event_type in table:
        raise DuplicateHandlerError(f"Handler already registered for '{event_type}'")

    handlers = dict(table._handlers)
    handlers[event_type] = handler_unit(handler)
    logger.debug(f"Registered webhook handler for {event_type}")
    return HandlerTable(handlers)


def dispatch(table: HandlerTable, event_type: str, event: Mapping):
    """
    Invoke the handler registered for ``event_type``.

    Unregistered event types are accepted as a no-op and return HANDLED.
    Whatever the handler returns is passed back unchanged and exceptions
    raised by the handler propagate to the caller.
    """
    handler = table.get(event_type)
    if handler is None:
        logger.debug(f"No handler registered for {event_type}, ignoring")
        return HANDLED
    return handler(event)


def as_handler_table(handlers) -> HandlerTable:
    """Accept a HandlerTable, a mapping, or an iterable of pairs."""
    if isinstance(handlers, HandlerTable):
        return handlers
    if handlers is None:
        return HandlerTable()
    if isinstance(handlers, Mapping):
        handlers = handlers.items()
    return HandlerTable.from_pairs(handlers)
