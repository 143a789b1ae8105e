"""
Outcome of dispatching one message.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DispatchResult:
    """
    Outcome of dispatching one message body.

    The consumer acknowledges a delivery when ``success`` is True and rejects
    it (without requeue) otherwise.

    Attributes:
        success: Whether the delivery should be acknowledged
        error: The failure, when ``success`` is False
        handlers_invoked: Number of handlers that were called
        filtered: True when a filter rejected the event
        event_type: The routed type tag, when one was read
    """

    success: bool
    error: Exception | None = None
    handlers_invoked: int = 0
    filtered: bool = False
    event_type: str | None = None

    @classmethod
    def ok(cls, handlers_invoked: int = 0, event_type: str | None = None) -> DispatchResult:
        return cls(success=True, handlers_invoked=handlers_invoked, event_type=event_type)

    @classmethod
    def filtered_out(cls, event_type: str | None = None) -> DispatchResult:
        return cls(success=True, filtered=True, event_type=event_type)

    @classmethod
    def failed(
        cls,
        error: Exception,
        handlers_invoked: int = 0,
        event_type: str | None = None,
    ) -> DispatchResult:
        return cls(
            success=False,
            error=error,
            handlers_invoked=handlers_invoked,
            event_type=event_type,
        )


__all__ = ["DispatchResult"]
