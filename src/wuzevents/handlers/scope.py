"""
Per-dispatch handler resolution scope.
"""

from __future__ import annotations

import inspect
import logging
from types import TracebackType
from typing import TYPE_CHECKING, Any, Self

from wuzevents.events.base import WhatsAppEvent
from wuzevents.handlers.adapter import HandlerAdapter
from wuzevents.handlers.registry import HandlerLifetime, HandlerRegistration

if TYPE_CHECKING:
    from wuzevents.handlers.registry import HandlerRegistry

logger = logging.getLogger(__name__)


class HandlerScope:
    """
    Resolves handler instances for one dispatch.

    Scoped handlers are created once per scope; transient handlers on every
    resolution. Instances the scope created are disposed when it closes:
    an ``aclose()`` or ``close()`` method is called if present. Singletons
    belong to the registry and are never disposed here.

    Example:
        >>> async with registry.create_scope() as scope:
        ...     for handler in scope.resolve(MessageEvent):
        ...         await handler.handle(envelope)
    """

    def __init__(self, registry: HandlerRegistry) -> None:
        self._registry = registry
        self._scoped: dict[HandlerRegistration, HandlerAdapter] = {}
        self._owned: list[HandlerAdapter] = []
        self._closed = False

    def resolve(self, event_model: type[WhatsAppEvent]) -> list[HandlerAdapter]:
        """Resolve typed handlers registered for exactly this payload model."""
        return [self._instance(r) for r in self._registry.typed_registrations(event_model)]

    def resolve_catch_all(self, event_type: str) -> list[HandlerAdapter]:
        """Resolve catch-all handlers that accept this type tag."""
        return [self._instance(r) for r in self._registry.catch_all_registrations(event_type)]

    def _instance(self, registration: HandlerRegistration) -> HandlerAdapter:
        if self._closed:
            raise RuntimeError("HandlerScope is closed")

        if registration.lifetime is HandlerLifetime.SINGLETON:
            return self._registry.get_singleton(registration)

        if registration.lifetime is HandlerLifetime.SCOPED:
            adapter = self._scoped.get(registration)
            if adapter is None:
                adapter = HandlerAdapter(registration.factory())
                self._scoped[registration] = adapter
                self._owned.append(adapter)
            return adapter

        adapter = HandlerAdapter(registration.factory())
        self._owned.append(adapter)
        return adapter

    @property
    def closed(self) -> bool:
        return self._closed

    async def aclose(self) -> None:
        """Dispose every instance this scope created. Safe to call twice."""
        if self._closed:
            return
        self._closed = True

        owned, self._owned = self._owned, []
        self._scoped.clear()
        for adapter in reversed(owned):
            await _dispose(adapter)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()


async def _dispose(adapter: HandlerAdapter) -> None:
    instance: Any = adapter.original
    closer = getattr(instance, "aclose", None) or getattr(instance, "close", None)
    if closer is None or not callable(closer):
        return
    try:
        result = closer()
        if inspect.isawaitable(result):
            await result
    except Exception as e:
        logger.warning(
            f"Error disposing handler {adapter.name}: {e}",
            extra={"handler": adapter.name},
            exc_info=True,
        )


__all__ = ["HandlerScope"]
