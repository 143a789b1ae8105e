"""
Handler infrastructure.

- HandlerAdapter: Normalizes sync/async handlers to ``async handle(envelope)``
- HandlerRegistry: Typed and catch-all handler registrations
- HandlerLifetime: Singleton, scoped or transient instances
- HandlerScope: Per-dispatch resolution and disposal

Example:
    >>> from wuzevents.handlers import HandlerLifetime, HandlerRegistry
    >>>
    >>> registry = HandlerRegistry()
    >>> registry.register(ReceiptEvent, ReceiptTracker, HandlerLifetime.SCOPED)
"""

from wuzevents.handlers.adapter import HandlerAdapter, get_handler_name
from wuzevents.handlers.protocols import EventHandler, SyncEventHandler
from wuzevents.handlers.registry import (
    HandlerLifetime,
    HandlerRegistration,
    HandlerRegistry,
)
from wuzevents.handlers.scope import HandlerScope

__all__ = [
    "EventHandler",
    "HandlerAdapter",
    "HandlerLifetime",
    "HandlerRegistration",
    "HandlerRegistry",
    "HandlerScope",
    "SyncEventHandler",
    "get_handler_name",
]
