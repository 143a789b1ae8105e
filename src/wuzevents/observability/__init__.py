"""
Tracing utilities for wuzevents.

OpenTelemetry is optional. Without it every tracer is a ``NullTracer``.

Example:
    >>> from wuzevents.observability import create_tracer, ATTR_EVENT_TYPE
    >>>
    >>> tracer = create_tracer(__name__)
    >>> with tracer.span("wuzevents.dispatch", {ATTR_EVENT_TYPE: "Message"}):
    ...     pass
"""

from wuzevents.observability.attributes import (
    ATTR_ERROR_TYPE,
    ATTR_EVENT_TYPE,
    ATTR_HANDLER_COUNT,
    ATTR_HANDLER_NAME,
    ATTR_HANDLER_SUCCESS,
    ATTR_INSTANCE_NAME,
    ATTR_MESSAGING_CONSUMER_TAG,
    ATTR_MESSAGING_DELIVERY_TAG,
    ATTR_MESSAGING_DESTINATION,
    ATTR_MESSAGING_OPERATION,
    ATTR_MESSAGING_SYSTEM,
    ATTR_PAYLOAD_TYPE,
    ATTR_USER_ID,
)
from wuzevents.observability.tracer import (
    MockTracer,
    NullTracer,
    OpenTelemetryTracer,
    SpanKindEnum,
    Tracer,
    create_tracer,
)
from wuzevents.observability.tracing import OTEL_AVAILABLE, should_trace

__all__ = [
    # Availability
    "OTEL_AVAILABLE",
    "should_trace",
    # Tracers
    "MockTracer",
    "NullTracer",
    "OpenTelemetryTracer",
    "SpanKindEnum",
    "Tracer",
    "create_tracer",
    # Attributes
    "ATTR_ERROR_TYPE",
    "ATTR_EVENT_TYPE",
    "ATTR_HANDLER_COUNT",
    "ATTR_HANDLER_NAME",
    "ATTR_HANDLER_SUCCESS",
    "ATTR_INSTANCE_NAME",
    "ATTR_MESSAGING_CONSUMER_TAG",
    "ATTR_MESSAGING_DELIVERY_TAG",
    "ATTR_MESSAGING_DESTINATION",
    "ATTR_MESSAGING_OPERATION",
    "ATTR_MESSAGING_SYSTEM",
    "ATTR_PAYLOAD_TYPE",
    "ATTR_USER_ID",
]
