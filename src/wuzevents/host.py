"""
Long-running host for an EventConsumer.

Starts the consumer, installs SIGTERM/SIGINT handlers, and supervises
reconnection: when the consumer reports an unexpected disconnect, the host
asks the connection manager to reconnect and re-subscribes. If reconnection
is exhausted the host stops.

Example:
    >>> consumer = WuzEventsBuilder().configure(connection_string=url).on_message(h).build()
    >>> await ConsumerHost(consumer).run()
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal

from wuzevents.consumer import ConnectionStateChanged, EventConsumer
from wuzevents.exceptions import ConnectionDisposedError

logger = logging.getLogger(__name__)

# Notifications that do not call for reconnection
_EXPECTED_REASONS = frozenset({"Consumer started", "Consumer stopped"})


class ConsumerHost:
    """
    Runs a consumer until stopped, reconnecting on connection loss.

    Args:
        consumer: The consumer to run
        handle_signals: Install SIGTERM/SIGINT handlers in run()
    """

    def __init__(self, consumer: EventConsumer, *, handle_signals: bool = True) -> None:
        self._consumer = consumer
        self._handle_signals = handle_signals
        self._stop_event = asyncio.Event()
        self._supervisor: asyncio.Task[None] | None = None
        self._signals_registered = False
        self._stopping = False

    @property
    def consumer(self) -> EventConsumer:
        return self._consumer

    @property
    def is_stop_requested(self) -> bool:
        return self._stop_event.is_set()

    @property
    def is_reconnecting(self) -> bool:
        return self._supervisor is not None and not self._supervisor.done()

    def request_stop(self) -> None:
        """Ask run() to stop. Idempotent."""
        if not self._stop_event.is_set():
            logger.info("Consumer host stop requested")
            self._stop_event.set()

    async def run(self) -> None:
        """Start the consumer and block until stop is requested."""
        self._consumer.add_connection_state_listener(self._on_connection_state_changed)
        if self._handle_signals:
            self._register_signals()
        try:
            await self._consumer.start()
            await self._stop_event.wait()
        finally:
            await self._shutdown()

    async def _shutdown(self) -> None:
        self._stopping = True
        if self._supervisor is not None and not self._supervisor.done():
            self._supervisor.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._supervisor
        self._supervisor = None

        if self._handle_signals:
            self._unregister_signals()
        try:
            await self._consumer.stop()
        finally:
            self._consumer.remove_connection_state_listener(self._on_connection_state_changed)

    def _on_connection_state_changed(self, change: ConnectionStateChanged) -> None:
        if change.is_connected or change.reason in _EXPECTED_REASONS or self._stopping:
            return
        if self._stop_event.is_set() or self.is_reconnecting:
            return

        logger.warning(
            f"Consumer disconnected ({change.reason}); starting reconnection",
            extra={"reason": change.reason},
        )
        self._supervisor = asyncio.create_task(self._reconnect(), name="wuzevents-reconnect")

    async def _reconnect(self) -> None:
        """Reconnect, then re-subscribe. Stops the host if either fails."""
        try:
            reconnected = await self._consumer.connection.try_reconnect()
        except ConnectionDisposedError:
            logger.info("Connection disposed; not reconnecting")
            return

        if not reconnected:
            logger.error("Reconnection exhausted; stopping consumer host")
            self.request_stop()
            return

        try:
            await self._consumer.restart()
        except Exception as e:
            logger.error(
                f"Failed to resubscribe after reconnection: {e}",
                exc_info=True,
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            self.request_stop()
            return

        logger.info("Consumer resubscribed after reconnection")

    def _register_signals(self) -> None:
        if self._signals_registered:
            return
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            try:
                loop.add_signal_handler(sig, self._on_signal, sig)
            except NotImplementedError:
                # Windows event loops do not support add_signal_handler
                logger.warning(
                    "Signal handling not supported on this platform",
                    extra={"signal": sig.name},
                )
        self._signals_registered = True

    def _unregister_signals(self) -> None:
        if not self._signals_registered:
            return
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            with contextlib.suppress(NotImplementedError, ValueError):
                loop.remove_signal_handler(sig)
        self._signals_registered = False

    def _on_signal(self, sig: signal.Signals) -> None:
        logger.info(
            "Received shutdown signal, stopping consumer",
            extra={"signal": sig.name},
        )
        self.request_stop()


__all__ = ["ConsumerHost"]
