"""
Event dispatcher: parse, filter, route, delegate.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from wuzevents.dispatch.envelope import parse_envelope
from wuzevents.dispatch.registry import TypedDispatcherRegistry
from wuzevents.dispatch.result import DispatchResult
from wuzevents.exceptions import EnvelopeParseError, RoutingError
from wuzevents.handlers.registry import HandlerRegistry
from wuzevents.observability import (
    ATTR_ERROR_TYPE,
    ATTR_EVENT_TYPE,
    ATTR_INSTANCE_NAME,
    ATTR_USER_ID,
    Tracer,
    create_tracer,
)

if TYPE_CHECKING:
    from wuzevents.filters import EventFilter

logger = logging.getLogger(__name__)


class EventDispatcher:
    """
    Turns one message body into one DispatchResult.

    The body is parsed once. Malformed bodies and envelopes without a usable
    ``type`` produce failure results without any strategy running. Filters
    run next in ascending ``order``. The strategy for the type tag then runs
    inside a fresh handler scope that is disposed afterwards.

    Errors are returned, not raised; only cancellation propagates.

    Example:
        >>> dispatcher = EventDispatcher(TypedDispatcherRegistry(), handlers)
        >>> result = await dispatcher.dispatch(b'{"type":"Connected"}')
        >>> result.success
        True
    """

    def __init__(
        self,
        registry: TypedDispatcherRegistry,
        handlers: HandlerRegistry,
        filters: Iterable[EventFilter] = (),
        *,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        self._registry = registry
        self._handlers = handlers
        self._filters = sorted(filters, key=lambda f: f.order)
        self._tracer = tracer or create_tracer(__name__, enable_tracing)

    @property
    def registry(self) -> TypedDispatcherRegistry:
        return self._registry

    @property
    def filters(self) -> list[EventFilter]:
        return list(self._filters)

    async def dispatch(self, body: bytes | str) -> DispatchResult:
        """
        Dispatch one message body.

        Args:
            body: Raw message body (UTF-8 JSON)

        Returns:
            The dispatch outcome
        """
        try:
            parsed = parse_envelope(body)
        except EnvelopeParseError as e:
            logger.error(
                f"Failed to parse event envelope: {e}. Raw message: {e.raw}",
                extra={"raw_message": e.raw},
            )
            return DispatchResult.failed(e)
        except RoutingError as e:
            logger.warning(f"Rejecting event: {e}")
            return DispatchResult.failed(e)
        except Exception as e:
            logger.exception(f"Unexpected error parsing event envelope: {e}")
            return DispatchResult.failed(e)

        routing = parsed.routing
        with self._tracer.span(
            "wuzevents.dispatch",
            {
                ATTR_EVENT_TYPE: routing.event_type,
                ATTR_USER_ID: routing.user_id,
                ATTR_INSTANCE_NAME: routing.instance_name,
            },
        ) as span:
            try:
                for event_filter in self._filters:
                    if not event_filter.should_process(routing):
                        logger.debug(
                            f"Event {routing.event_type} filtered out by "
                            f"{type(event_filter).__name__}",
                            extra={
                                "event_type": routing.event_type,
                                "user_id": routing.user_id,
                                "filter": type(event_filter).__name__,
                            },
                        )
                        return DispatchResult.filtered_out(routing.event_type)

                strategy = self._registry.get_dispatcher(routing.event_type)
                async with self._handlers.create_scope() as scope:
                    result = await strategy.dispatch(parsed.event, parsed.root, routing, scope)
            except Exception as e:
                logger.exception(
                    f"Unexpected error dispatching event {routing.event_type}: {e}",
                    extra={"event_type": routing.event_type},
                )
                result = DispatchResult.failed(e, event_type=routing.event_type)

            if span is not None and result.error is not None:
                span.set_attribute(ATTR_ERROR_TYPE, type(result.error).__name__)
            return result


__all__ = ["EventDispatcher"]
