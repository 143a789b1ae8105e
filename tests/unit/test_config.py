"""Unit tests for WuzEventsConfig."""

import pytest

from wuzevents.config import MAX_RECONNECT_DELAY, WuzEventsConfig
from wuzevents.exceptions import ConfigurationError


def valid_config(**overrides):
    return WuzEventsConfig(connection_string="amqp://localhost/", **overrides)


class TestDefaults:
    """Tests for default configuration values."""

    def test_defaults(self):
        """Defaults should match the gateway's conventions."""
        config = WuzEventsConfig()

        assert config.queue_name == "whatsapp_events"
        assert config.consumer_tag_prefix == "wuzapi-consumer"
        assert config.prefetch_count == 10
        assert config.auto_ack is False
        assert config.max_reconnect_attempts == 10
        assert config.reconnect_delay == 3.0
        assert config.max_concurrent_messages >= 1
        assert config.subscribed_event_types == frozenset()
        assert config.deserialization_failure_policy == "ack"
        assert config.handler_failure_policy == "fail"

    def test_filter_sets_are_frozen(self):
        """Filter fields given as lists should become frozensets."""
        config = valid_config(filter_user_ids=["a", "b", "a"])

        assert config.filter_user_ids == frozenset({"a", "b"})


class TestValidate:
    """Tests for configuration validation."""

    def test_valid_config_passes(self):
        valid_config().validate()

    @pytest.mark.parametrize("connection_string", ["", "   "])
    def test_blank_connection_string_rejected(self, connection_string):
        with pytest.raises(ConfigurationError, match="connection_string"):
            WuzEventsConfig(connection_string=connection_string).validate()

    def test_blank_queue_name_rejected(self):
        with pytest.raises(ConfigurationError, match="queue_name"):
            valid_config(queue_name=" ").validate()

    def test_zero_prefetch_rejected(self):
        with pytest.raises(ConfigurationError, match="prefetch_count"):
            valid_config(prefetch_count=0).validate()

    def test_negative_reconnect_attempts_rejected(self):
        with pytest.raises(ConfigurationError, match="max_reconnect_attempts"):
            valid_config(max_reconnect_attempts=-1).validate()

    def test_zero_reconnect_attempts_allowed(self):
        valid_config(max_reconnect_attempts=0).validate()

    def test_negative_reconnect_delay_rejected(self):
        with pytest.raises(ConfigurationError, match="reconnect_delay"):
            valid_config(reconnect_delay=-0.5).validate()

    def test_zero_concurrency_rejected(self):
        with pytest.raises(ConfigurationError, match="max_concurrent_messages"):
            valid_config(max_concurrent_messages=0).validate()

    def test_unknown_policies_rejected(self):
        with pytest.raises(ConfigurationError, match="deserialization_failure_policy"):
            valid_config(deserialization_failure_policy="drop").validate()
        with pytest.raises(ConfigurationError, match="handler_failure_policy"):
            valid_config(handler_failure_policy="retry").validate()


class TestReconnectBackoff:
    """Tests for reconnect backoff calculation."""

    def test_exponential_growth(self):
        config = valid_config(reconnect_delay=3.0)

        assert config.reconnect_backoff(0) == 3.0
        assert config.reconnect_backoff(1) == 6.0
        assert config.reconnect_backoff(2) == 12.0

    def test_capped_at_sixty_seconds(self):
        config = valid_config(reconnect_delay=3.0)

        assert config.reconnect_backoff(10) == MAX_RECONNECT_DELAY == 60.0


class TestFromMapping:
    """Tests for binding configuration from a settings section."""

    def test_pascal_case_keys(self):
        config = WuzEventsConfig.from_mapping(
            {
                "ConnectionString": "amqp://localhost/",
                "QueueName": "events",
                "PrefetchCount": 5,
                "MaxConcurrentMessages": 2,
                "FilterUserIds": ["u1", "u2"],
            }
        )

        assert config.connection_string == "amqp://localhost/"
        assert config.queue_name == "events"
        assert config.prefetch_count == 5
        assert config.max_concurrent_messages == 2
        assert config.filter_user_ids == frozenset({"u1", "u2"})

    def test_snake_case_keys_and_comma_separated_sets(self):
        config = WuzEventsConfig.from_mapping(
            {
                "connection_string": "amqp://localhost/",
                "subscribed_event_types": "Message, Receipt",
            }
        )

        assert config.subscribed_event_types == frozenset({"Message", "Receipt"})

    def test_unknown_key_rejected(self):
        with pytest.raises(ConfigurationError, match="Unknown configuration key"):
            WuzEventsConfig.from_mapping({"QueueNmae": "typo"})
