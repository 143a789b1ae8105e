"""
Unit tests for tracer protocol and implementations.

Tests for:
- Tracer Protocol (runtime_checkable)
- NullTracer class
- OpenTelemetryTracer class
- MockTracer class
- create_tracer() factory function
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from wuzevents.observability import (
    OTEL_AVAILABLE,
    MockTracer,
    NullTracer,
    OpenTelemetryTracer,
    SpanKindEnum,
    Tracer,
    create_tracer,
    should_trace,
)


class TestTracerProtocol:
    """Tests for Tracer protocol."""

    def test_null_tracer_implements_protocol(self):
        assert isinstance(NullTracer(), Tracer)

    def test_mock_tracer_implements_protocol(self):
        assert isinstance(MockTracer(), Tracer)

    @pytest.mark.skipif(not OTEL_AVAILABLE, reason="OTEL not installed")
    def test_otel_tracer_implements_protocol(self):
        assert isinstance(OpenTelemetryTracer(__name__), Tracer)


class TestNullTracer:
    """Tests for NullTracer."""

    def test_spans_yield_none(self):
        tracer = NullTracer()

        with tracer.span("wuzevents.dispatch", {"k": "v"}) as span:
            assert span is None
        with tracer.span_with_kind("wuzevents.consume", SpanKindEnum.CONSUMER) as span:
            assert span is None

    def test_not_enabled(self):
        assert NullTracer().enabled is False


class TestMockTracer:
    """Tests for MockTracer."""

    def test_records_spans_in_order(self):
        tracer = MockTracer()

        with tracer.span_with_kind("wuzevents.consume", SpanKindEnum.CONSUMER):
            with tracer.span("wuzevents.dispatch", {"wuzevents.event.type": "Message"}):
                pass

        assert tracer.span_names == ["wuzevents.consume", "wuzevents.dispatch"]
        assert tracer.spans[1][1] == {"wuzevents.event.type": "Message"}

    def test_clear(self):
        tracer = MockTracer()
        with tracer.span("wuzevents.handle"):
            pass

        tracer.clear()

        assert tracer.spans == []


@pytest.mark.skipif(not OTEL_AVAILABLE, reason="OTEL not installed")
class TestOpenTelemetryTracer:
    """Tests for OpenTelemetryTracer."""

    def test_enabled(self):
        assert OpenTelemetryTracer(__name__).enabled is True

    def test_span_context_manager(self):
        tracer = OpenTelemetryTracer(__name__)

        with tracer.span("wuzevents.dispatch", {"wuzevents.event.type": "Message"}) as span:
            assert span is not None

    def test_consumer_span(self):
        tracer = OpenTelemetryTracer(__name__)

        with tracer.span_with_kind("wuzevents.consume", SpanKindEnum.CONSUMER) as span:
            assert span is not None


class TestCreateTracer:
    """Tests for create_tracer()."""

    def test_disabled_returns_null_tracer(self):
        assert isinstance(create_tracer(__name__, enable_tracing=False), NullTracer)

    def test_without_otel_returns_null_tracer(self):
        with patch("wuzevents.observability.tracing.OTEL_AVAILABLE", False):
            tracer = create_tracer(__name__, enable_tracing=True)

        assert isinstance(tracer, NullTracer)

    @pytest.mark.skipif(not OTEL_AVAILABLE, reason="OTEL not installed")
    def test_enabled_with_otel_returns_otel_tracer(self):
        assert isinstance(create_tracer(__name__, enable_tracing=True), OpenTelemetryTracer)


class TestShouldTrace:
    """Tests for should_trace()."""

    def test_disabled(self):
        assert should_trace(False) is False

    def test_follows_availability(self):
        assert should_trace(True) is OTEL_AVAILABLE
