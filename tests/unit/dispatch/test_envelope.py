"""Unit tests for envelope parsing and payload merging."""

import pytest

from tests.fixtures import make_envelope
from wuzevents.dispatch.envelope import (
    LOG_BODY_LIMIT,
    merge_payload,
    parse_envelope,
    truncate_for_logging,
)
from wuzevents.exceptions import EnvelopeParseError, RoutingError


class TestParseEnvelope:
    """Tests for parse_envelope."""

    def test_reads_routing_fields(self):
        parsed = parse_envelope(make_envelope("Receipt", "u1", "i1", {"Chat": "c1"}))

        assert parsed.routing.event_type == "Receipt"
        assert parsed.routing.user_id == "u1"
        assert parsed.routing.instance_name == "i1"
        assert parsed.event == {"Chat": "c1"}

    def test_missing_user_and_instance_default_to_empty(self):
        parsed = parse_envelope(make_envelope("Connected", user_id=None, instance_name=None))

        assert parsed.routing.user_id == ""
        assert parsed.routing.instance_name == ""

    def test_accepts_str_body(self):
        parsed = parse_envelope('{"type": "Connected"}')

        assert parsed.routing.event_type == "Connected"
        assert parsed.event is None

    def test_non_string_user_id_converted(self):
        parsed = parse_envelope('{"type": "Connected", "userID": 42}')

        assert parsed.routing.user_id == "42"

    def test_invalid_json_raises_parse_error(self):
        with pytest.raises(EnvelopeParseError) as exc_info:
            parse_envelope(b"{not json")

        assert exc_info.value.raw == "{not json"

    @pytest.mark.parametrize("body", [b"[]", b'"Message"', b"42", b"null"])
    def test_non_object_root_raises_parse_error(self, body):
        with pytest.raises(EnvelopeParseError, match="expected a JSON object"):
            parse_envelope(body)

    def test_invalid_utf8_raises_parse_error(self):
        with pytest.raises(EnvelopeParseError, match="UTF-8"):
            parse_envelope(b'{"type": "\xff"}')

    def test_missing_type_raises_routing_error(self):
        with pytest.raises(RoutingError):
            parse_envelope(make_envelope(event_type=None))

    def test_deeply_nested_json_raises_parse_error(self):
        body = b'{"type":"Message","event":' + b"[" * 200000 + b"]" * 200000 + b"}"

        with pytest.raises(EnvelopeParseError):
            parse_envelope(body)

    def test_identical_bodies_parse_equal(self):
        body = make_envelope("Message", "u1", "i1", {"Info": {"ID": "m1"}})

        first = parse_envelope(body)
        second = parse_envelope(body)

        assert first.routing == second.routing
        assert first.event == second.event

    @pytest.mark.parametrize("type_value", ['""', "null", "7", '["Message"]'])
    def test_unusable_type_raises_routing_error(self, type_value):
        with pytest.raises(RoutingError):
            parse_envelope(f'{{"type": {type_value}}}')


class TestMergePayload:
    """Tests for merge_payload."""

    def test_event_fields_then_root_extras(self):
        root = {
            "type": "Message",
            "userID": "u1",
            "instanceName": "i1",
            "event": {"Info": {"ID": "m1"}},
            "base64": "AAAA",
        }

        merged = merge_payload(root["event"], root)

        assert merged == {"Info": {"ID": "m1"}, "base64": "AAAA"}

    def test_root_wins_on_conflict(self):
        root = {"type": "Receipt", "event": {"state": "Delivered"}, "state": "Read"}

        assert merge_payload(root["event"], root)["state"] == "Read"

    def test_missing_event_yields_root_extras_only(self):
        root = {"type": "QR", "qrCodeBase64": "data:image/png;base64,xyz"}

        assert merge_payload(None, root) == {"qrCodeBase64": "data:image/png;base64,xyz"}

    def test_non_object_event_ignored(self):
        assert merge_payload("text", {"type": "Message", "event": "text"}) == {}

    def test_does_not_mutate_event(self):
        event = {"Chat": "c1"}
        merge_payload(event, {"type": "Receipt", "event": event, "state": "Read"})

        assert event == {"Chat": "c1"}


class TestTruncateForLogging:
    """Tests for truncate_for_logging."""

    def test_short_value_unchanged(self):
        assert truncate_for_logging("abc") == "abc"

    def test_long_value_truncated(self):
        value = "x" * (LOG_BODY_LIMIT + 10)

        truncated = truncate_for_logging(value)

        assert truncated == "x" * LOG_BODY_LIMIT + "... [TRUNCATED]"
