"""
Typed dispatch strategy.

One ``TypedEventDispatcher`` exists per wire type tag. It decodes the
payload into its model, wraps it in an :class:`EventEnvelope`, and invokes
typed handlers followed by catch-all handlers.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Generic

from pydantic import ValidationError

from wuzevents.config import DeserializationFailurePolicy, HandlerFailurePolicy
from wuzevents.dispatch.envelope import EventRouting, merge_payload, truncate_for_logging
from wuzevents.dispatch.result import DispatchResult
from wuzevents.errors import EventErrorHandler, LoggingEventErrorHandler
from wuzevents.events.envelope import EventEnvelope, TEvent
from wuzevents.events.models import UnknownEvent
from wuzevents.exceptions import HandlerError, PayloadDeserializationError
from wuzevents.handlers.adapter import HandlerAdapter
from wuzevents.handlers.scope import HandlerScope
from wuzevents.observability import (
    ATTR_EVENT_TYPE,
    ATTR_HANDLER_COUNT,
    ATTR_HANDLER_NAME,
    ATTR_HANDLER_SUCCESS,
    ATTR_PAYLOAD_TYPE,
    Tracer,
    create_tracer,
)

logger = logging.getLogger(__name__)


class TypedEventDispatcher(Generic[TEvent]):
    """
    Dispatch strategy for one payload model.

    Handlers run sequentially in registration order: typed handlers for the
    model first, then catch-all handlers accepting the type tag. A failing
    handler is logged and passed to the error handler; its siblings still
    run.

    Args:
        event_model: The payload model to decode into
        error_handler: Receives each handler failure (default: logs it)
        deserialization_failure_policy: "ack" treats an undecodable payload as
            handled by zero handlers; "reject" fails the dispatch
        handler_failure_policy: "fail" fails the dispatch if any handler
            raised; "isolate" only logs
        tracer: Optional tracer
        enable_tracing: Create a tracer when none is given

    Example:
        >>> strategy = TypedEventDispatcher(MessageEvent)
        >>> async with handlers.create_scope() as scope:
        ...     result = await strategy.dispatch(event, root, routing, scope)
    """

    def __init__(
        self,
        event_model: type[TEvent],
        *,
        error_handler: EventErrorHandler | None = None,
        deserialization_failure_policy: DeserializationFailurePolicy = "ack",
        handler_failure_policy: HandlerFailurePolicy = "fail",
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        self._event_model = event_model
        self._envelope_type = EventEnvelope[event_model]  # type: ignore[valid-type]
        self._error_handler = error_handler or LoggingEventErrorHandler()
        self._deserialization_failure_policy = deserialization_failure_policy
        self._handler_failure_policy = handler_failure_policy
        self._tracer = tracer or create_tracer(__name__, enable_tracing)

    @property
    def event_model(self) -> type[TEvent]:
        return self._event_model

    def decode(self, event: Any, root: dict[str, Any], routing: EventRouting) -> TEvent:
        """
        Decode the payload for this strategy's model.

        Raises:
            PayloadDeserializationError: If the payload does not fit the model
        """
        payload = merge_payload(event, root)
        try:
            return self._event_model.model_validate(payload)
        except ValidationError as e:
            raise PayloadDeserializationError(
                routing.event_type,
                str(e),
                raw_json=json.dumps(payload, default=str),
            ) from e

    async def dispatch(
        self,
        event: Any,
        root: dict[str, Any],
        routing: EventRouting,
        scope: HandlerScope,
    ) -> DispatchResult:
        """
        Decode the payload and invoke matching handlers.

        Args:
            event: The envelope's ``event`` sub-tree (may be None)
            root: The whole parsed envelope
            routing: Routing fields
            scope: Scope handlers are resolved from

        Returns:
            DispatchResult for the consumer to ack or reject on
        """
        event_type = routing.event_type
        raw_json = json.dumps(root, default=str)

        try:
            payload = self.decode(event, root, routing)
        except PayloadDeserializationError as e:
            logger.error(
                f"Failed to deserialize event type '{event_type}' "
                f"into {self._event_model.__name__}: {e}",
                extra={
                    "event_type": event_type,
                    "payload_type": self._event_model.__name__,
                    "raw_json": truncate_for_logging(raw_json),
                },
            )
            if self._deserialization_failure_policy == "reject":
                return DispatchResult.failed(e, event_type=event_type)
            return DispatchResult.ok(0, event_type=event_type)

        envelope = self._envelope_type(
            event_type=event_type,
            user_id=routing.user_id,
            instance_name=routing.instance_name,
            event=payload,
            raw_json=raw_json,
        )

        handlers = scope.resolve(self._event_model) + scope.resolve_catch_all(event_type)
        if not handlers:
            logger.warning(
                f"No handlers registered for event type {event_type}",
                extra={"event_type": event_type},
            )
            return DispatchResult.ok(0, event_type=event_type)

        failures: list[tuple[str, Exception]] = []
        for handler in handlers:
            error = await self._invoke(handler, envelope, len(handlers))
            if error is not None:
                failures.append((handler.name, error))

        if failures:
            aggregated = HandlerError(event_type, failures)
            if self._handler_failure_policy == "fail":
                return DispatchResult.failed(
                    aggregated, handlers_invoked=len(handlers), event_type=event_type
                )
            logger.warning(
                f"{aggregated} (isolated, delivery will be acknowledged)",
                extra={"event_type": event_type, "failure_count": len(failures)},
            )

        logger.debug(
            f"Event {event_type} dispatched to {len(handlers)} handler(s)",
            extra={"event_type": event_type, "handler_count": len(handlers)},
        )
        return DispatchResult.ok(len(handlers), event_type=event_type)

    async def _invoke(
        self, handler: HandlerAdapter, envelope: EventEnvelope[Any], handler_count: int
    ) -> Exception | None:
        """Run one handler. Returns its exception instead of raising it."""
        with self._tracer.span(
            "wuzevents.handle",
            {
                ATTR_EVENT_TYPE: envelope.event_type,
                ATTR_PAYLOAD_TYPE: self._event_model.__name__,
                ATTR_HANDLER_NAME: handler.name,
                ATTR_HANDLER_COUNT: handler_count,
            },
        ) as span:
            try:
                logger.debug(
                    f"Invoking handler {handler.name} for event {envelope.event_type}",
                    extra={"handler": handler.name, "event_type": envelope.event_type},
                )
                await handler.handle(envelope)
                if span is not None:
                    span.set_attribute(ATTR_HANDLER_SUCCESS, True)
                return None
            except Exception as e:
                logger.error(
                    f"Error in handler {handler.name} for event {envelope.event_type}: {e}",
                    exc_info=True,
                    extra={"handler": handler.name, "event_type": envelope.event_type},
                )
                if span is not None:
                    span.set_attribute(ATTR_HANDLER_SUCCESS, False)
                await self._report(envelope, e)
                return e

    async def _report(self, envelope: EventEnvelope[Any], exception: Exception) -> None:
        try:
            await self._error_handler.handle_error(envelope, exception)
        except Exception as e:
            logger.error(
                f"Error handler failed for event {envelope.event_type}: {e}",
                exc_info=True,
                extra={"event_type": envelope.event_type},
            )

    def __repr__(self) -> str:
        return f"TypedEventDispatcher({self._event_model.__name__})"


class UnknownEventDispatcher(TypedEventDispatcher[UnknownEvent]):
    """
    Fallback strategy for unrecognised type tags.

    Never fails to decode: the payload is the whole envelope plus the tag.
    """

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(UnknownEvent, **kwargs)

    def decode(self, event: Any, root: dict[str, Any], routing: EventRouting) -> UnknownEvent:
        return UnknownEvent(raw=root, original_type=routing.event_type)


__all__ = [
    "TypedEventDispatcher",
    "UnknownEventDispatcher",
]
