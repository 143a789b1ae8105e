"""
Event filters applied before any handler runs.

Filters see only the routing fields of an envelope. They run in ascending
``order``; the first filter that rejects an event stops dispatch, and the
delivery is acknowledged without invoking handlers.

Example:
    >>> class IgnoreGroups:
    ...     order = 200
    ...
    ...     def should_process(self, routing: EventRouting) -> bool:
    ...         return not routing.user_id.endswith("@g.us")
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from wuzevents.config import WuzEventsConfig
from wuzevents.dispatch.envelope import EventRouting


@runtime_checkable
class EventFilter(Protocol):
    """Protocol for event filters. Lower ``order`` runs first."""

    order: int

    def should_process(self, routing: EventRouting) -> bool: ...


class EventTypeFilter:
    """Accepts only the configured type tags. An empty set accepts everything."""

    order = 100

    def __init__(self, event_types: Iterable[str] = ()) -> None:
        self._event_types = frozenset(event_types)

    def should_process(self, routing: EventRouting) -> bool:
        if not self._event_types:
            return True
        return routing.event_type in self._event_types

    def __repr__(self) -> str:
        return f"EventTypeFilter({sorted(self._event_types)})"


class UserIdFilter:
    """Accepts only events for the configured users. An empty set accepts everything."""

    order = 101

    def __init__(self, user_ids: Iterable[str] = ()) -> None:
        self._user_ids = frozenset(user_ids)

    def should_process(self, routing: EventRouting) -> bool:
        if not self._user_ids:
            return True
        return routing.user_id in self._user_ids

    def __repr__(self) -> str:
        return f"UserIdFilter({sorted(self._user_ids)})"


class InstanceNameFilter:
    """Accepts only events from the configured gateway instances."""

    order = 102

    def __init__(self, instance_names: Iterable[str] = ()) -> None:
        self._instance_names = frozenset(instance_names)

    def should_process(self, routing: EventRouting) -> bool:
        if not self._instance_names:
            return True
        return routing.instance_name in self._instance_names

    def __repr__(self) -> str:
        return f"InstanceNameFilter({sorted(self._instance_names)})"


def default_filters(config: WuzEventsConfig) -> list[EventFilter]:
    """Create the built-in filters for the filter sets in a configuration."""
    return [
        EventTypeFilter(config.subscribed_event_types),
        UserIdFilter(config.filter_user_ids),
        InstanceNameFilter(config.filter_instance_names),
    ]


__all__ = [
    "EventFilter",
    "EventTypeFilter",
    "InstanceNameFilter",
    "UserIdFilter",
    "default_filters",
]
