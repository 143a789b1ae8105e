"""
Shared test helpers for the wuzevents test suite.

- make_envelope: Build a wire envelope body
- make_message: Build a mock aio-pika incoming message
- RecordingHandler / FailingHandler: Handlers that record what they see
"""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock


def make_envelope(
    event_type: str | None = "Message",
    user_id: str | None = "u1",
    instance_name: str | None = "i1",
    event: Any = None,
    **extra: Any,
) -> bytes:
    """Build a JSON envelope body. Pass None to omit a routing field."""
    root: dict[str, Any] = {}
    if event_type is not None:
        root["type"] = event_type
    if user_id is not None:
        root["userID"] = user_id
    if instance_name is not None:
        root["instanceName"] = instance_name
    root["event"] = event if event is not None else {}
    root.update(extra)
    return json.dumps(root).encode("utf-8")


def make_message(body: bytes, delivery_tag: int = 1) -> MagicMock:
    """Create a mock incoming message with async ack/nack."""
    message = MagicMock()
    message.body = body
    message.delivery_tag = delivery_tag
    message.ack = AsyncMock()
    message.nack = AsyncMock()
    return message


class RecordingHandler:
    """Handler that records every envelope it receives."""

    def __init__(self, name: str = "recording") -> None:
        self.name = name
        self.received: list[Any] = []

    async def handle(self, envelope: Any) -> None:
        self.received.append(envelope)


class FailingHandler:
    """Handler that always raises."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error or RuntimeError("handler exploded")
        self.calls = 0

    async def handle(self, envelope: Any) -> None:
        self.calls += 1
        raise self.error


__all__ = [
    "FailingHandler",
    "RecordingHandler",
    "make_envelope",
    "make_message",
]
