"""
Span attribute names used across wuzevents.

Messaging attributes follow the OpenTelemetry semantic conventions; the rest
live under the ``wuzevents.`` namespace.

Example:
    >>> from wuzevents.observability.attributes import ATTR_EVENT_TYPE
    >>>
    >>> with tracer.span("wuzevents.dispatch", {ATTR_EVENT_TYPE: "Message"}):
    ...     pass
"""

# =============================================================================
# Envelope Attributes
# =============================================================================

ATTR_EVENT_TYPE = "wuzevents.event.type"
"""Wire type tag from the envelope (e.g., 'Message', 'Receipt')."""

ATTR_USER_ID = "wuzevents.user.id"
"""Gateway user the event belongs to (string)."""

ATTR_INSTANCE_NAME = "wuzevents.instance.name"
"""Gateway instance that published the event (string)."""

ATTR_PAYLOAD_TYPE = "wuzevents.payload.type"
"""Name of the payload model the event was decoded into."""

# =============================================================================
# Handler Attributes
# =============================================================================

ATTR_HANDLER_NAME = "wuzevents.handler.name"
"""Name of the event handler being invoked (string)."""

ATTR_HANDLER_COUNT = "wuzevents.handler.count"
"""Number of handlers resolved for an event (integer)."""

ATTR_HANDLER_SUCCESS = "wuzevents.handler.success"
"""Whether the handler completed without raising (boolean)."""

ATTR_ERROR_TYPE = "wuzevents.error.type"
"""Exception class name for a failed operation (string)."""

# =============================================================================
# Messaging Attributes (OTEL semantic conventions)
# =============================================================================

ATTR_MESSAGING_SYSTEM = "messaging.system"
"""Messaging system identifier (always 'rabbitmq')."""

ATTR_MESSAGING_DESTINATION = "messaging.destination.name"
"""Queue the delivery was consumed from."""

ATTR_MESSAGING_OPERATION = "messaging.operation"
"""Messaging operation ('receive' or 'process')."""

ATTR_MESSAGING_CONSUMER_TAG = "messaging.rabbitmq.consumer_tag"
"""Consumer tag of the subscription."""

ATTR_MESSAGING_DELIVERY_TAG = "messaging.rabbitmq.delivery_tag"
"""Broker delivery tag of the message (integer)."""

__all__ = [
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
