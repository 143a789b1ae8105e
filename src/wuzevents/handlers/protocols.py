"""
Handler protocols.

Handlers receive the whole :class:`~wuzevents.events.EventEnvelope`, not
just the payload, so routing metadata (user, instance) is always at hand.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from wuzevents.events.envelope import EventEnvelope


@runtime_checkable
class EventHandler(Protocol):
    """
    Protocol for async event handlers.

    Example:
        >>> class GreetNewContacts:
        ...     async def handle(self, envelope: EventEnvelope[MessageEvent]) -> None:
        ...         await reply(envelope.event.info.chat, "Hi!")
    """

    async def handle(self, envelope: EventEnvelope[Any]) -> None: ...


@runtime_checkable
class SyncEventHandler(Protocol):
    """
    Protocol for synchronous event handlers.

    Sync handlers run on the event loop; keep them short.
    """

    def handle(self, envelope: EventEnvelope[Any]) -> None: ...


__all__ = ["EventHandler", "SyncEventHandler"]
