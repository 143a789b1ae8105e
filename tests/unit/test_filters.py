"""Unit tests for the built-in event filters."""

from wuzevents.config import WuzEventsConfig
from wuzevents.dispatch import EventRouting
from wuzevents.filters import (
    EventFilter,
    EventTypeFilter,
    InstanceNameFilter,
    UserIdFilter,
    default_filters,
)

ROUTING = EventRouting(event_type="Message", user_id="u1", instance_name="i1")


class TestEventTypeFilter:
    def test_empty_accepts_everything(self):
        assert EventTypeFilter().should_process(ROUTING)

    def test_accepts_listed_type(self):
        assert EventTypeFilter({"Message", "Receipt"}).should_process(ROUTING)

    def test_rejects_other_types(self):
        assert not EventTypeFilter({"Receipt"}).should_process(ROUTING)

    def test_match_is_case_sensitive(self):
        assert not EventTypeFilter({"message"}).should_process(ROUTING)


class TestUserIdFilter:
    def test_empty_accepts_everything(self):
        assert UserIdFilter().should_process(ROUTING)

    def test_accepts_listed_user(self):
        assert UserIdFilter({"u1"}).should_process(ROUTING)

    def test_rejects_other_users(self):
        assert not UserIdFilter({"u2"}).should_process(ROUTING)


class TestInstanceNameFilter:
    def test_empty_accepts_everything(self):
        assert InstanceNameFilter().should_process(ROUTING)

    def test_rejects_other_instances(self):
        assert not InstanceNameFilter({"i2"}).should_process(ROUTING)

    def test_rejects_missing_instance(self):
        routing = EventRouting(event_type="Message")

        assert not InstanceNameFilter({"i1"}).should_process(routing)


class TestDefaultFilters:
    """Tests for filters built from configuration."""

    def test_order(self):
        filters = default_filters(WuzEventsConfig())

        assert [f.order for f in filters] == [100, 101, 102]
        assert all(isinstance(f, EventFilter) for f in filters)

    def test_uses_configured_sets(self):
        config = WuzEventsConfig(
            subscribed_event_types=["Receipt"],
            filter_user_ids=["u1"],
        )

        type_filter, user_filter, instance_filter = default_filters(config)

        assert not type_filter.should_process(ROUTING)
        assert user_filter.should_process(ROUTING)
        assert instance_filter.should_process(ROUTING)
