"""Library exceptions for the wuzevents package."""

from __future__ import annotations


class WuzEventsError(Exception):
    """Base exception for wuzevents library."""

    pass


class ConfigurationError(WuzEventsError):
    """Raised when consumer configuration is invalid.

    Configuration is validated once at startup so that a misconfigured
    consumer fails fast instead of failing on the first delivery.
    """

    pass


class BrokerConnectionError(WuzEventsError):
    """Raised when a connection to the broker cannot be opened."""

    def __init__(self, url: str, message: str) -> None:
        self.url = url
        super().__init__(f"Failed to connect to RabbitMQ at {url}: {message}")


class ConnectionDisposedError(WuzEventsError, RuntimeError):
    """Raised when a disposed connection manager is used again."""

    def __init__(self, name: str = "RabbitMQConnection") -> None:
        self.name = name
        super().__init__(f"{name} has been disposed")


class EnvelopeParseError(WuzEventsError):
    """Raised when a message body is not a JSON object envelope.

    Such messages are poison: redelivery would fail identically, so they are
    rejected without requeue.

    Attributes:
        raw: The (possibly truncated) message body that failed to parse
    """

    def __init__(self, message: str, raw: str = "") -> None:
        self.raw = raw
        super().__init__(f"Malformed event envelope: {message}")


class RoutingError(WuzEventsError):
    """Raised when an envelope carries no usable ``type`` routing field."""

    def __init__(self, message: str = "Envelope is missing the required 'type' field") -> None:
        super().__init__(message)


class PayloadDeserializationError(WuzEventsError):
    """Raised when an event payload does not fit its typed model.

    Attributes:
        event_type: The wire type tag of the event
        raw_json: The payload JSON that failed to validate
    """

    def __init__(self, event_type: str, message: str, raw_json: str = "") -> None:
        self.event_type = event_type
        self.raw_json = raw_json
        super().__init__(f"Failed to deserialize event type '{event_type}': {message}")


class HandlerError(WuzEventsError):
    """Raised when one or more handlers failed for a single event.

    Sibling handlers still run; this error aggregates every failure so the
    consumer can reject the delivery.

    Attributes:
        event_type: The wire type tag of the event
        failures: List of (handler name, exception) pairs
    """

    def __init__(self, event_type: str, failures: list[tuple[str, Exception]]) -> None:
        self.event_type = event_type
        self.failures = failures
        details = "; ".join(f"Handler {name} failed: {exc}" for name, exc in failures)
        super().__init__(
            f"Event {event_type} processing failed with {len(failures)} error(s): {details}"
        )


__all__ = [
    "BrokerConnectionError",
    "ConfigurationError",
    "ConnectionDisposedError",
    "EnvelopeParseError",
    "HandlerError",
    "PayloadDeserializationError",
    "RoutingError",
    "WuzEventsError",
]
