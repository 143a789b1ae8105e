"""
Dispatch pipeline: envelope parsing, strategy registry and typed strategies.
"""

from wuzevents.dispatch.dispatcher import EventDispatcher
from wuzevents.dispatch.envelope import (
    EventRouting,
    ParsedEnvelope,
    merge_payload,
    parse_envelope,
    truncate_for_logging,
)
from wuzevents.dispatch.registry import EVENT_MODELS, TypedDispatcherRegistry
from wuzevents.dispatch.result import DispatchResult
from wuzevents.dispatch.typed import TypedEventDispatcher, UnknownEventDispatcher

__all__ = [
    "DispatchResult",
    "EVENT_MODELS",
    "EventDispatcher",
    "EventRouting",
    "ParsedEnvelope",
    "TypedDispatcherRegistry",
    "TypedEventDispatcher",
    "UnknownEventDispatcher",
    "merge_payload",
    "parse_envelope",
    "truncate_for_logging",
]
