"""
Adapter that gives every kind of handler the same async interface.

Handlers may be objects with an async or sync ``handle()`` method, or plain
async or sync callables.
"""

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import Any

from wuzevents.events.envelope import EventEnvelope

AsyncHandlerFunc = Callable[[EventEnvelope[Any]], Awaitable[None]]


def get_handler_name(handler: Any) -> str:
    """
    Get a descriptive name for a handler for logging.

    Args:
        handler: Any handler object (class instance, function, lambda)

    Returns:
        String name for the handler
    """
    if isinstance(handler, HandlerAdapter):
        return handler.name
    if hasattr(handler, "__class__") and handler.__class__.__name__ not in (
        "function",
        "method",
    ):
        return str(handler.__class__.__name__)
    elif hasattr(handler, "__qualname__"):
        return str(handler.__qualname__)
    elif hasattr(handler, "__name__"):
        return str(handler.__name__)
    else:
        return repr(handler)


class HandlerAdapter:
    """
    Normalizes an event handler to ``async handle(envelope)``.

    Example:
        >>> def log_receipt(envelope: EventEnvelope[ReceiptEvent]) -> None:
        ...     print(envelope.event.message_ids)
        >>> adapter = HandlerAdapter(log_receipt)
        >>> await adapter.handle(envelope)

    Attributes:
        original: The original unwrapped handler
        name: Descriptive name for logging
    """

    def __init__(self, handler: Any) -> None:
        """
        Args:
            handler: Object with handle() method or callable

        Raises:
            TypeError: If handler doesn't have handle() method and isn't callable
        """
        self._original = handler
        self._name = get_handler_name(handler)
        self._async_handler = self._normalize(handler)

    def _normalize(self, handler: Any) -> AsyncHandlerFunc:
        if hasattr(handler, "handle"):
            target = handler.handle
        elif callable(handler):
            target = handler
        else:
            raise TypeError(
                f"Handler must have a handle() method or be callable, got {type(handler)}"
            )

        if inspect.iscoroutinefunction(target):
            return target  # type: ignore[no-any-return]

        async def async_wrapper(envelope: EventEnvelope[Any]) -> None:
            result = target(envelope)
            # A sync callable may still hand back an awaitable
            if asyncio.iscoroutine(result):
                await result

        return async_wrapper

    @property
    def original(self) -> Any:
        return self._original

    @property
    def name(self) -> str:
        return self._name

    async def handle(self, envelope: EventEnvelope[Any]) -> None:
        await self._async_handler(envelope)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, HandlerAdapter):
            return self._original is other._original
        return self._original is other

    def __hash__(self) -> int:
        return id(self._original)

    def __repr__(self) -> str:
        return f"HandlerAdapter({self._name})"


__all__ = [
    "AsyncHandlerFunc",
    "HandlerAdapter",
    "get_handler_name",
]
