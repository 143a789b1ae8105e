"""
Typed envelope handed to event handlers.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from wuzevents.events.base import WhatsAppEvent

TEvent = TypeVar("TEvent", bound=WhatsAppEvent)


class EventEnvelope(BaseModel, Generic[TEvent]):
    """
    A decoded event together with its routing metadata.

    Attributes:
        event_type: Wire type tag (e.g., "Message"); for unknown events this
            is the unrecognised tag as received
        user_id: Gateway user the event belongs to ("" when absent)
        instance_name: Gateway instance that published it ("" when absent)
        received_at: When the consumer decoded the event (UTC)
        event: The typed payload
        raw_json: The JSON the payload was decoded from

    Example:
        >>> async def on_message(envelope: EventEnvelope[MessageEvent]) -> None:
        ...     print(envelope.user_id, envelope.event.info.id)
    """

    model_config = ConfigDict(frozen=True)

    event_type: str
    user_id: str = ""
    instance_name: str = ""
    received_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    event: TEvent
    raw_json: str = ""

    def __str__(self) -> str:
        return (
            f"{self.event_type}(user_id={self.user_id!r}, "
            f"instance_name={self.instance_name!r})"
        )


__all__ = ["EventEnvelope", "TEvent"]
