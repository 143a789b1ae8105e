"""
Unit tests for HandlerRegistry and HandlerScope.

Tests cover:
- Typed and catch-all registration
- Singleton, scoped and transient lifetimes
- Scope disposal
"""

import pytest

from tests.fixtures import RecordingHandler
from wuzevents.events import MessageEvent, ReceiptEvent
from wuzevents.handlers import HandlerLifetime, HandlerRegistry


class Counted:
    """Handler class that counts instances and disposals."""

    created = 0

    def __init__(self):
        type(self).created += 1
        self.disposed = False

    async def handle(self, envelope):
        pass

    async def aclose(self):
        self.disposed = True


@pytest.fixture(autouse=True)
def reset_counter():
    Counted.created = 0


class TestRegister:
    """Tests for registration."""

    def test_typed_registration(self):
        registry = HandlerRegistry()

        registration = registry.register(MessageEvent, RecordingHandler())

        assert registration.event_model is MessageEvent
        assert not registration.is_catch_all
        assert registration.name == "RecordingHandler"
        assert registry.typed_registrations(MessageEvent) == [registration]
        assert registry.typed_registrations(ReceiptEvent) == []
        assert len(registry) == 1

    def test_non_event_model_rejected(self):
        with pytest.raises(TypeError, match="WhatsAppEvent subclass"):
            HandlerRegistry().register(dict, RecordingHandler())  # type: ignore[arg-type]

    def test_instance_cannot_be_scoped(self):
        with pytest.raises(ValueError, match="singleton"):
            HandlerRegistry().register(
                MessageEvent, RecordingHandler(), HandlerLifetime.SCOPED
            )

    def test_invalid_handler_rejected(self):
        with pytest.raises(TypeError):
            HandlerRegistry().register(MessageEvent, 42)

    def test_catch_all_registration(self):
        registry = HandlerRegistry()

        everything = registry.register_catch_all(RecordingHandler())
        receipts_only = registry.register_catch_all(
            RecordingHandler(), event_types=["Receipt", "ReadReceipt"]
        )

        assert everything.is_catch_all
        assert registry.catch_all_registrations("Message") == [everything]
        assert registry.catch_all_registrations("ReadReceipt") == [everything, receipts_only]

    def test_registration_order_preserved(self):
        registry = HandlerRegistry()
        first = registry.register(MessageEvent, RecordingHandler("a"))
        second = registry.register(MessageEvent, RecordingHandler("b"))

        assert registry.registrations == (first, second)


class TestLifetimes:
    """Tests for handler lifetimes."""

    @pytest.mark.asyncio
    async def test_singleton_shared_across_scopes(self):
        registry = HandlerRegistry()
        registry.register(MessageEvent, Counted)

        async with registry.create_scope() as scope:
            first = scope.resolve(MessageEvent)[0]
        async with registry.create_scope() as scope:
            second = scope.resolve(MessageEvent)[0]

        assert first is second
        assert Counted.created == 1
        assert not first.original.disposed

    @pytest.mark.asyncio
    async def test_scoped_once_per_scope(self):
        registry = HandlerRegistry()
        registry.register(MessageEvent, Counted, HandlerLifetime.SCOPED)

        async with registry.create_scope() as scope:
            first = scope.resolve(MessageEvent)[0]
            again = scope.resolve(MessageEvent)[0]
        async with registry.create_scope() as scope:
            other = scope.resolve(MessageEvent)[0]

        assert first is again
        assert first is not other
        assert Counted.created == 2

    @pytest.mark.asyncio
    async def test_transient_per_resolution(self):
        registry = HandlerRegistry()
        registry.register(MessageEvent, Counted, HandlerLifetime.TRANSIENT)

        async with registry.create_scope() as scope:
            first = scope.resolve(MessageEvent)[0]
            second = scope.resolve(MessageEvent)[0]

        assert first is not second
        assert Counted.created == 2


class TestScopeDisposal:
    """Tests for scope disposal."""

    @pytest.mark.asyncio
    async def test_owned_instances_disposed(self):
        registry = HandlerRegistry()
        registry.register(MessageEvent, Counted, HandlerLifetime.SCOPED)
        registry.register_catch_all(Counted, lifetime=HandlerLifetime.TRANSIENT)

        async with registry.create_scope() as scope:
            handlers = scope.resolve(MessageEvent) + scope.resolve_catch_all("Message")

        assert scope.closed
        assert all(h.original.disposed for h in handlers)

    @pytest.mark.asyncio
    async def test_sync_close_called(self):
        closed = []

        class SyncClosing:
            def handle(self, envelope):
                pass

            def close(self):
                closed.append(self)

        registry = HandlerRegistry()
        registry.register(MessageEvent, SyncClosing, HandlerLifetime.SCOPED)

        async with registry.create_scope() as scope:
            scope.resolve(MessageEvent)

        assert len(closed) == 1

    @pytest.mark.asyncio
    async def test_disposal_error_does_not_stop_others(self):
        class BrokenClose(Counted):
            async def aclose(self):
                raise RuntimeError("close failed")

        registry = HandlerRegistry()
        registry.register(MessageEvent, Counted, HandlerLifetime.SCOPED)
        registry.register(MessageEvent, BrokenClose, HandlerLifetime.SCOPED)

        scope = registry.create_scope()
        healthy, _ = scope.resolve(MessageEvent)
        await scope.aclose()

        assert healthy.original.disposed

    @pytest.mark.asyncio
    async def test_aclose_is_idempotent(self):
        registry = HandlerRegistry()
        scope = registry.create_scope()

        await scope.aclose()
        await scope.aclose()

        assert scope.closed

    @pytest.mark.asyncio
    async def test_resolve_after_close_raises(self):
        registry = HandlerRegistry()
        registry.register(MessageEvent, Counted, HandlerLifetime.SCOPED)
        scope = registry.create_scope()
        await scope.aclose()

        with pytest.raises(RuntimeError, match="closed"):
            scope.resolve(MessageEvent)
