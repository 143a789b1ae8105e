"""
Error handler hook for handler failures.

The typed dispatcher passes every exception raised by a handler to an
``EventErrorHandler`` before deciding the delivery's fate. Errors raised by
the error handler itself are logged and otherwise ignored.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

from wuzevents.events.envelope import EventEnvelope

logger = logging.getLogger(__name__)


@runtime_checkable
class EventErrorHandler(Protocol):
    """
    Protocol for error handlers.

    Example:
        >>> class AlertOnFailure:
        ...     async def handle_error(self, envelope, exception) -> None:
        ...         await pager.send(f"{envelope.event_type} failed: {exception}")
    """

    async def handle_error(self, envelope: EventEnvelope[Any], exception: Exception) -> None: ...


class LoggingEventErrorHandler:
    """Default error handler: logs the failure at ERROR level."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._logger = log or logger

    async def handle_error(self, envelope: EventEnvelope[Any], exception: Exception) -> None:
        self._logger.error(
            f"Error handling event {envelope.event_type} for user "
            f"{envelope.user_id}/{envelope.instance_name}: {exception}",
            exc_info=exception,
            extra={
                "event_type": envelope.event_type,
                "user_id": envelope.user_id,
                "instance_name": envelope.instance_name,
                "error_type": type(exception).__name__,
            },
        )


__all__ = [
    "EventErrorHandler",
    "LoggingEventErrorHandler",
]
