"""
Envelope parsing and payload merging.

The gateway publishes every event as a JSON object:

    {"type": "Message", "userID": "...", "instanceName": "...",
     "event": {...}, "<extra>": ...}

The body is parsed exactly once; the resulting tree is shared by routing,
filtering and payload decoding.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from wuzevents.exceptions import EnvelopeParseError, RoutingError

ENVELOPE_KEYS = frozenset({"type", "userID", "instanceName", "event"})

LOG_BODY_LIMIT = 500


@dataclass(frozen=True)
class EventRouting:
    """
    Routing fields read from an envelope.

    Attributes:
        event_type: The ``type`` tag, used to select a dispatch strategy
        user_id: The ``userID`` field ("" when absent)
        instance_name: The ``instanceName`` field ("" when absent)
    """

    event_type: str
    user_id: str = ""
    instance_name: str = ""


@dataclass(frozen=True)
class ParsedEnvelope:
    """
    A parsed envelope.

    Attributes:
        root: The whole JSON object
        routing: Routing fields
        event: The ``event`` sub-tree, or None when absent or null
    """

    root: dict[str, Any]
    routing: EventRouting
    event: Any


def truncate_for_logging(value: str, max_length: int = LOG_BODY_LIMIT) -> str:
    """Truncate a message body for log output."""
    if len(value) <= max_length:
        return value
    return value[:max_length] + "... [TRUNCATED]"


def decode_body(body: bytes | str) -> str:
    """Decode a message body as UTF-8 text."""
    if isinstance(body, str):
        return body
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise EnvelopeParseError(
            f"body is not valid UTF-8: {e}",
            raw=truncate_for_logging(body.decode("utf-8", errors="replace")),
        ) from e


def parse_envelope(body: bytes | str) -> ParsedEnvelope:
    """
    Parse a message body into an envelope.

    Args:
        body: Raw message body

    Returns:
        The parsed envelope

    Raises:
        EnvelopeParseError: If the body is not a JSON object
        RoutingError: If ``type`` is missing, empty or not a string
    """
    text = decode_body(body)
    try:
        root = json.loads(text)
    except (json.JSONDecodeError, RecursionError) as e:
        raise EnvelopeParseError(str(e), raw=truncate_for_logging(text)) from e

    if not isinstance(root, dict):
        raise EnvelopeParseError(
            f"expected a JSON object, got {type(root).__name__}",
            raw=truncate_for_logging(text),
        )

    event_type = root.get("type")
    if not isinstance(event_type, str) or not event_type:
        raise RoutingError()

    routing = EventRouting(
        event_type=event_type,
        user_id=_as_str(root.get("userID")),
        instance_name=_as_str(root.get("instanceName")),
    )
    return ParsedEnvelope(root=root, routing=routing, event=root.get("event"))


def merge_payload(event: Any, root: dict[str, Any]) -> dict[str, Any]:
    """
    Build the payload object for typed decoding.

    Fields of the ``event`` sub-tree come first, then root-level fields the
    gateway adds next to it (``state``, ``base64``, ...) excluding the
    envelope keys. Root fields win on conflicts.

    Example:
        >>> merge_payload({"Chat": "c"}, {"type": "Receipt", "event": {}, "state": "Read"})
        {'Chat': 'c', 'state': 'Read'}
    """
    merged: dict[str, Any] = dict(event) if isinstance(event, dict) else {}
    for key, value in root.items():
        if key in ENVELOPE_KEYS:
            continue
        merged[key] = value
    return merged


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


__all__ = [
    "ENVELOPE_KEYS",
    "EventRouting",
    "LOG_BODY_LIMIT",
    "ParsedEnvelope",
    "decode_body",
    "merge_payload",
    "parse_envelope",
    "truncate_for_logging",
]
