"""Unit tests for TypedDispatcherRegistry."""

import pytest

from wuzevents.dispatch import TypedDispatcherRegistry, UnknownEventDispatcher
from wuzevents.dispatch.registry import EVENT_MODELS
from wuzevents.event_types import WhatsAppEventType
from wuzevents.events import (
    CallOfferEvent,
    ConnectedEvent,
    MessageEvent,
    QrCodeEvent,
    ReceiptEvent,
    UnknownEvent,
)


@pytest.fixture
def registry() -> TypedDispatcherRegistry:
    return TypedDispatcherRegistry(enable_tracing=False)


class TestEventModels:
    """Tests for the type tag to model table."""

    def test_every_tag_has_a_model(self):
        assert set(EVENT_MODELS) == set(WhatsAppEventType)

    def test_receipt_tags_share_model(self):
        assert EVENT_MODELS[WhatsAppEventType.RECEIPT] is ReceiptEvent
        assert EVENT_MODELS[WhatsAppEventType.READ_RECEIPT] is ReceiptEvent

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            EVENT_MODELS[WhatsAppEventType.MESSAGE] = ConnectedEvent  # type: ignore[index]


class TestGetDispatcher:
    """Tests for strategy lookup."""

    @pytest.mark.parametrize(
        ("event_type", "model"),
        [
            ("Message", MessageEvent),
            ("Receipt", ReceiptEvent),
            ("ReadReceipt", ReceiptEvent),
            ("Connected", ConnectedEvent),
            ("QR", QrCodeEvent),
            ("CallOffer", CallOfferEvent),
        ],
    )
    def test_known_tag_maps_to_model(self, registry, event_type, model):
        assert registry.get_dispatcher(event_type).event_model is model

    def test_every_registered_tag_has_own_strategy(self, registry):
        strategies = [registry.get_dispatcher(t) for t in registry.registered_types]

        assert len({id(s) for s in strategies}) == len(WhatsAppEventType) == 47

    def test_receipt_tags_get_distinct_strategies(self, registry):
        assert registry.get_dispatcher("Receipt") is not registry.get_dispatcher("ReadReceipt")

    @pytest.mark.parametrize("event_type", ["", "message", "MESSAGE", "Brand", "Mensagem✓"])
    def test_unknown_tags_share_fallback(self, registry, event_type):
        strategy = registry.get_dispatcher(event_type)

        assert strategy is registry.fallback
        assert isinstance(strategy, UnknownEventDispatcher)
        assert strategy.event_model is UnknownEvent

    def test_registered_types(self, registry):
        assert len(registry) == 47
        assert registry.registered_types == frozenset(t.value for t in WhatsAppEventType)
