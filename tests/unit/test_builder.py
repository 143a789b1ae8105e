"""Unit tests for WuzEventsBuilder."""

import asyncio

import pytest

from tests.fixtures import RecordingHandler, make_envelope, make_message
from wuzevents.builder import WuzEventsBuilder
from wuzevents.consumer import EventConsumer
from wuzevents.events import CallOfferEvent, MessageEvent, ReceiptEvent
from wuzevents.exceptions import ConfigurationError
from wuzevents.filters import EventTypeFilter, InstanceNameFilter, UserIdFilter
from wuzevents.handlers import HandlerLifetime
from wuzevents.observability import MockTracer


@pytest.fixture
def builder(config, connection_factory) -> WuzEventsBuilder:
    return WuzEventsBuilder(config).with_connection_factory(connection_factory)


class TestConfigure:
    """Tests for configuration overrides."""

    def test_configure_overrides_fields(self, builder):
        builder.configure(queue_name="events", prefetch_count=3)

        assert builder.config.queue_name == "events"
        assert builder.config.prefetch_count == 3

    def test_unknown_field_rejected(self, builder):
        with pytest.raises(TypeError):
            builder.configure(queue_nmae="events")

    def test_build_validates(self):
        with pytest.raises(ConfigurationError, match="connection_string"):
            WuzEventsBuilder().build()


class TestRegistration:
    """Tests for handler registration shortcuts."""

    def test_shortcuts_register_models(self, builder):
        handler = RecordingHandler()

        builder.on_message(handler).on_receipt(handler).on_call_offer(handler)

        models = [r.event_model for r in builder.handlers.registrations]
        assert models == [MessageEvent, ReceiptEvent, CallOfferEvent]

    def test_on_any_registers_catch_all(self, builder):
        builder.on_any(RecordingHandler(), event_types=["Receipt"])

        (registration,) = builder.handlers.registrations
        assert registration.is_catch_all
        assert registration.event_types == frozenset({"Receipt"})

    def test_lifetime_passed_through(self, builder):
        builder.on(MessageEvent, RecordingHandler, HandlerLifetime.TRANSIENT)

        assert builder.handlers.registrations[0].lifetime is HandlerLifetime.TRANSIENT


class TestBuild:
    """Tests for build()."""

    def test_builds_consumer_with_default_filters(self, builder):
        consumer = builder.build()

        assert isinstance(consumer, EventConsumer)
        filter_types = [type(f) for f in consumer.dispatcher.filters]
        assert filter_types == [EventTypeFilter, UserIdFilter, InstanceNameFilter]

    def test_custom_filters_sorted_with_builtins(self, builder):
        class EarlyFilter:
            order = 1

            def should_process(self, routing):
                return True

        consumer = builder.with_filter(EarlyFilter()).build()

        assert isinstance(consumer.dispatcher.filters[0], EarlyFilter)

    @pytest.mark.asyncio
    async def test_built_consumer_dispatches_to_handlers(self, builder):
        recorder = RecordingHandler()
        tracer = MockTracer()
        consumer = (
            builder.configure(filter_user_ids=["u1"])
            .on_message(recorder)
            .with_tracer(tracer)
            .build()
        )
        await consumer.start()
        accepted = make_message(make_envelope("Message", user_id="u1"), delivery_tag=1)
        filtered = make_message(make_envelope("Message", user_id="u2"), delivery_tag=2)

        await consumer._on_message(accepted)
        await consumer._on_message(filtered)
        await asyncio.gather(*list(consumer._tasks))

        assert len(recorder.received) == 1
        accepted.ack.assert_awaited_once()
        filtered.ack.assert_awaited_once()
        assert "wuzevents.consume" in tracer.span_names
        assert "wuzevents.handle" in tracer.span_names
        await consumer.stop()
