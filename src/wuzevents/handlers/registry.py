"""
Handler registry.

Handlers are registered against a payload model (typed handlers) or against
an optional set of wire type tags (catch-all handlers). The registry is built
once at startup; each dispatch resolves handlers through a fresh
:class:`~wuzevents.handlers.scope.HandlerScope`.

Example:
    >>> registry = HandlerRegistry()
    >>> registry.register(MessageEvent, AutoReplyHandler, HandlerLifetime.SCOPED)
    >>> registry.register_catch_all(audit_log)
    >>>
    >>> async with registry.create_scope() as scope:
    ...     handlers = scope.resolve(MessageEvent)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from wuzevents.events.base import WhatsAppEvent
from wuzevents.handlers.adapter import HandlerAdapter, get_handler_name

if TYPE_CHECKING:
    from wuzevents.handlers.scope import HandlerScope

logger = logging.getLogger(__name__)


class HandlerLifetime(Enum):
    """
    How long a resolved handler instance lives.

    SINGLETON: one instance shared by every dispatch
    SCOPED: one instance per dispatch, disposed when the dispatch ends
    TRANSIENT: a new instance every time the handler is resolved
    """

    SINGLETON = "singleton"
    SCOPED = "scoped"
    TRANSIENT = "transient"


@dataclass(eq=False)
class HandlerRegistration:
    """
    A single handler registration.

    Attributes:
        factory: Zero-argument callable producing the handler instance
        lifetime: Instance lifetime
        name: Handler name used in logs
        event_model: Payload model for typed handlers; None for catch-all
        event_types: Type tags a catch-all handler accepts (empty = all)
    """

    factory: Callable[[], Any]
    lifetime: HandlerLifetime
    name: str
    event_model: type[WhatsAppEvent] | None = None
    event_types: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_catch_all(self) -> bool:
        return self.event_model is None

    def accepts_type(self, event_type: str) -> bool:
        """Check whether a catch-all registration accepts a type tag."""
        return not self.event_types or event_type in self.event_types


class HandlerRegistry:
    """
    Collects handler registrations and owns singleton instances.

    Registration order is preserved and is the order handlers are invoked.
    """

    def __init__(self) -> None:
        self._registrations: list[HandlerRegistration] = []
        self._singletons: dict[HandlerRegistration, HandlerAdapter] = {}

    def register(
        self,
        event_model: type[WhatsAppEvent],
        handler: Any,
        lifetime: HandlerLifetime = HandlerLifetime.SINGLETON,
    ) -> HandlerRegistration:
        """
        Register a typed handler for a payload model.

        Args:
            event_model: The payload model the handler receives
            handler: A handler class (instantiated per lifetime), or a handler
                instance or callable (always a singleton)
            lifetime: Instance lifetime for handler classes

        Returns:
            The new registration

        Raises:
            TypeError: If event_model is not a WhatsAppEvent subclass
            ValueError: If a non-class handler is given a non-singleton lifetime
        """
        if not (isinstance(event_model, type) and issubclass(event_model, WhatsAppEvent)):
            raise TypeError(f"event_model must be a WhatsAppEvent subclass, got {event_model!r}")
        registration = self._make_registration(handler, lifetime, event_model=event_model)
        self._registrations.append(registration)
        logger.debug(
            f"Registered handler {registration.name} for {event_model.__name__} "
            f"({lifetime.value})",
            extra={
                "handler": registration.name,
                "event_model": event_model.__name__,
                "lifetime": lifetime.value,
            },
        )
        return registration

    def register_catch_all(
        self,
        handler: Any,
        event_types: Iterable[str] = (),
        lifetime: HandlerLifetime = HandlerLifetime.SINGLETON,
    ) -> HandlerRegistration:
        """
        Register a handler that receives events of any payload model.

        Args:
            handler: Handler class, instance or callable
            event_types: Type tags to accept; empty accepts every event,
                including unknown ones
            lifetime: Instance lifetime for handler classes

        Returns:
            The new registration
        """
        registration = self._make_registration(
            handler, lifetime, event_types=frozenset(event_types)
        )
        self._registrations.append(registration)
        logger.debug(
            f"Registered catch-all handler {registration.name}",
            extra={
                "handler": registration.name,
                "event_types": sorted(registration.event_types),
                "lifetime": lifetime.value,
            },
        )
        return registration

    @staticmethod
    def _make_registration(
        handler: Any,
        lifetime: HandlerLifetime,
        event_model: type[WhatsAppEvent] | None = None,
        event_types: frozenset[str] = frozenset(),
    ) -> HandlerRegistration:
        if isinstance(handler, type):
            return HandlerRegistration(
                factory=handler,
                lifetime=lifetime,
                name=handler.__name__,
                event_model=event_model,
                event_types=event_types,
            )

        if not (hasattr(handler, "handle") or callable(handler)):
            raise TypeError(
                f"Handler must have a handle() method or be callable, got {type(handler)}"
            )
        if lifetime is not HandlerLifetime.SINGLETON:
            raise ValueError(
                f"Handler instance {get_handler_name(handler)} can only be registered "
                f"as a singleton; register its class for {lifetime.value} lifetime"
            )
        return HandlerRegistration(
            factory=lambda: handler,
            lifetime=lifetime,
            name=get_handler_name(handler),
            event_model=event_model,
            event_types=event_types,
        )

    @property
    def registrations(self) -> tuple[HandlerRegistration, ...]:
        return tuple(self._registrations)

    def typed_registrations(self, event_model: type[WhatsAppEvent]) -> list[HandlerRegistration]:
        """Get typed registrations for exactly this payload model, in order."""
        return [r for r in self._registrations if r.event_model is event_model]

    def catch_all_registrations(self, event_type: str) -> list[HandlerRegistration]:
        """Get catch-all registrations accepting this type tag, in order."""
        return [r for r in self._registrations if r.is_catch_all and r.accepts_type(event_type)]

    def get_singleton(self, registration: HandlerRegistration) -> HandlerAdapter:
        """Get (creating on first use) the shared instance of a singleton."""
        adapter = self._singletons.get(registration)
        if adapter is None:
            adapter = HandlerAdapter(registration.factory())
            self._singletons[registration] = adapter
        return adapter

    def create_scope(self) -> HandlerScope:
        """Create a resolution scope for a single dispatch."""
        from wuzevents.handlers.scope import HandlerScope

        return HandlerScope(self)

    def __len__(self) -> int:
        return len(self._registrations)

    def __repr__(self) -> str:
        return f"HandlerRegistry(registrations={len(self._registrations)})"


__all__ = [
    "HandlerLifetime",
    "HandlerRegistration",
    "HandlerRegistry",
]
