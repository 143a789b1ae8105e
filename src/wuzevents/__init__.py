"""
wuzevents - Consume WhatsApp gateway (wuzapi) events from RabbitMQ.

This library provides:
- A lazily connected, reconnecting RabbitMQ connection manager
- A bounded-concurrency consumer with ack/nack/requeue semantics
- Envelope routing to typed pydantic payload models
- Typed and catch-all handlers with singleton/scoped/transient lifetimes
- Filters, an error handler hook, health checks and a signal-aware host
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("wuzevents")
except PackageNotFoundError:
    # Package not installed (running from source without install)
    __version__ = "0.0.0.dev0"

# Configuration and exceptions
from wuzevents.config import (
    DeserializationFailurePolicy,
    HandlerFailurePolicy,
    WuzEventsConfig,
)
from wuzevents.exceptions import (
    BrokerConnectionError,
    ConfigurationError,
    ConnectionDisposedError,
    EnvelopeParseError,
    HandlerError,
    PayloadDeserializationError,
    RoutingError,
    WuzEventsError,
)

# Events
from wuzevents.event_types import ALL_EVENT_TYPES, WhatsAppEventType, is_known_event_type
from wuzevents.events import (
    CallOfferEvent,
    ChatPresenceEvent,
    ConnectedEvent,
    DisconnectedEvent,
    EventEnvelope,
    LoggedOutEvent,
    MessageEvent,
    MessageInfo,
    PictureEvent,
    PresenceEvent,
    QrCodeEvent,
    ReceiptEvent,
    UnknownEvent,
    WhatsAppEvent,
)

# Handlers, filters, errors
from wuzevents.handlers import (
    EventHandler,
    HandlerAdapter,
    HandlerLifetime,
    HandlerRegistry,
    HandlerScope,
)
from wuzevents.filters import (
    EventFilter,
    EventTypeFilter,
    InstanceNameFilter,
    UserIdFilter,
)
from wuzevents.errors import EventErrorHandler, LoggingEventErrorHandler

# Dispatch
from wuzevents.dispatch import (
    DispatchResult,
    EventDispatcher,
    EventRouting,
    TypedDispatcherRegistry,
    TypedEventDispatcher,
)

# Broker
from wuzevents.connection import RabbitMQConnection
from wuzevents.consumer import (
    ConnectionStateChanged,
    ConsumerState,
    ConsumerStats,
    DeliveryOutcome,
    EventConsumer,
)

# Hosting
from wuzevents.builder import WuzEventsBuilder
from wuzevents.health import HealthCheckResult, HealthStatus, check_connection_health
from wuzevents.host import ConsumerHost

__all__ = [
    "__version__",
    # Configuration
    "DeserializationFailurePolicy",
    "HandlerFailurePolicy",
    "WuzEventsConfig",
    # Exceptions
    "BrokerConnectionError",
    "ConfigurationError",
    "ConnectionDisposedError",
    "EnvelopeParseError",
    "HandlerError",
    "PayloadDeserializationError",
    "RoutingError",
    "WuzEventsError",
    # Events
    "ALL_EVENT_TYPES",
    "CallOfferEvent",
    "ChatPresenceEvent",
    "ConnectedEvent",
    "DisconnectedEvent",
    "EventEnvelope",
    "LoggedOutEvent",
    "MessageEvent",
    "MessageInfo",
    "PictureEvent",
    "PresenceEvent",
    "QrCodeEvent",
    "ReceiptEvent",
    "UnknownEvent",
    "WhatsAppEvent",
    "WhatsAppEventType",
    "is_known_event_type",
    # Handlers
    "EventHandler",
    "HandlerAdapter",
    "HandlerLifetime",
    "HandlerRegistry",
    "HandlerScope",
    # Filters and errors
    "EventErrorHandler",
    "EventFilter",
    "EventTypeFilter",
    "InstanceNameFilter",
    "LoggingEventErrorHandler",
    "UserIdFilter",
    # Dispatch
    "DispatchResult",
    "EventDispatcher",
    "EventRouting",
    "TypedDispatcherRegistry",
    "TypedEventDispatcher",
    # Broker
    "ConnectionStateChanged",
    "ConsumerState",
    "ConsumerStats",
    "DeliveryOutcome",
    "EventConsumer",
    "RabbitMQConnection",
    # Hosting
    "ConsumerHost",
    "HealthCheckResult",
    "HealthStatus",
    "WuzEventsBuilder",
    "check_connection_health",
]
