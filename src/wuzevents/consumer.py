"""
RabbitMQ event consumer.

Subscribes to the events queue, processes each delivery in its own task
behind a concurrency gate, and acknowledges or rejects it according to the
dispatch result.

Delivery outcomes:
- dispatch succeeded (including filtered and zero-handler events): ack
- dispatch failed (malformed body, missing type, handler error): nack
  without requeue
- processing cancelled by stop(): nack with requeue
- with ``auto_ack=True`` the broker settles deliveries and nothing is sent

Example:
    >>> consumer = EventConsumer(config, connection, dispatcher)
    >>> consumer.add_connection_state_listener(print)
    >>> async with consumer:
    ...     await asyncio.Event().wait()
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

import aio_pika.exceptions
from aio_pika.abc import AbstractChannel, AbstractIncomingMessage, AbstractQueue

from wuzevents.config import WuzEventsConfig
from wuzevents.connection import RabbitMQConnection
from wuzevents.dispatch.dispatcher import EventDispatcher
from wuzevents.dispatch.envelope import truncate_for_logging
from wuzevents.exceptions import EnvelopeParseError
from wuzevents.observability import (
    ATTR_EVENT_TYPE,
    ATTR_MESSAGING_CONSUMER_TAG,
    ATTR_MESSAGING_DELIVERY_TAG,
    ATTR_MESSAGING_DESTINATION,
    ATTR_MESSAGING_OPERATION,
    ATTR_MESSAGING_SYSTEM,
    SpanKindEnum,
    Tracer,
    create_tracer,
)

logger = logging.getLogger(__name__)

# Errors that mean the broker connection or channel went away mid-delivery
CONNECTION_LOST_ERRORS: tuple[type[BaseException], ...] = (
    aio_pika.exceptions.AMQPConnectionError,
    aio_pika.exceptions.ChannelClosed,
    aio_pika.exceptions.ChannelInvalidStateError,
    ConnectionError,
)


class ConsumerState(Enum):
    """Lifecycle states of an EventConsumer."""

    STOPPED = "stopped"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"


class DeliveryOutcome(Enum):
    """How a delivery was settled."""

    ACK = "ack"
    REJECT = "reject"
    REQUEUE = "requeue"


@dataclass(frozen=True)
class ConnectionStateChanged:
    """
    Notification sent to connection-state listeners.

    Attributes:
        is_connected: Whether the consumer is connected and subscribed
        reason: Short description ("Consumer started", "Channel closed", ...)
        exception: The error behind the change, if any
    """

    is_connected: bool
    reason: str | None = None
    exception: BaseException | None = None


ConnectionStateListener = Callable[[ConnectionStateChanged], Any]


@dataclass
class ConsumerStats:
    """Counters for consumer activity."""

    messages_received: int = 0
    messages_acked: int = 0
    messages_rejected: int = 0
    messages_requeued: int = 0
    dispatch_failures: int = 0
    parse_failures: int = 0
    started_at: datetime | None = None
    last_message_at: datetime | None = None
    last_error_at: datetime | None = None
    outcomes: dict[DeliveryOutcome, int] = field(default_factory=dict)

    def record(self, outcome: DeliveryOutcome) -> None:
        self.outcomes[outcome] = self.outcomes.get(outcome, 0) + 1
        if outcome is DeliveryOutcome.ACK:
            self.messages_acked += 1
        elif outcome is DeliveryOutcome.REJECT:
            self.messages_rejected += 1
        else:
            self.messages_requeued += 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "messages_received": self.messages_received,
            "messages_acked": self.messages_acked,
            "messages_rejected": self.messages_rejected,
            "messages_requeued": self.messages_requeued,
            "dispatch_failures": self.dispatch_failures,
            "parse_failures": self.parse_failures,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "last_message_at": (
                self.last_message_at.isoformat() if self.last_message_at else None
            ),
            "last_error_at": self.last_error_at.isoformat() if self.last_error_at else None,
        }


class EventConsumer:
    """
    Consumes wuzapi events from RabbitMQ and dispatches them.

    Each delivery runs in its own task; at most ``max_concurrent_messages``
    are processed at once, independent of the broker prefetch. With a gate
    above 1, deliveries complete (and are acknowledged) out of order.

    Args:
        config: Consumer configuration
        connection: Connection manager; disposed by stop()
        dispatcher: Dispatcher turning bodies into results
        tracer: Optional tracer
    """

    def __init__(
        self,
        config: WuzEventsConfig,
        connection: RabbitMQConnection,
        dispatcher: EventDispatcher,
        *,
        tracer: Tracer | None = None,
    ) -> None:
        self._config = config
        self._connection = connection
        self._dispatcher = dispatcher
        self._tracer = tracer or create_tracer(__name__, config.enable_tracing)

        self._state = ConsumerState.STOPPED
        self._semaphore = asyncio.Semaphore(config.max_concurrent_messages)
        self._tasks: set[asyncio.Task[None]] = set()
        self._settling: set[AbstractIncomingMessage] = set()
        self._in_flight = 0
        self._channel: AbstractChannel | None = None
        self._queue: AbstractQueue | None = None
        self._consumer_tag: str | None = None
        self._listeners: list[ConnectionStateListener] = []
        self._stats = ConsumerStats()

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def config(self) -> WuzEventsConfig:
        return self._config

    @property
    def connection(self) -> RabbitMQConnection:
        return self._connection

    @property
    def dispatcher(self) -> EventDispatcher:
        return self._dispatcher

    @property
    def state(self) -> ConsumerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is ConsumerState.RUNNING

    @property
    def is_connected(self) -> bool:
        """True while subscribed on an open channel over a live connection."""
        channel = self._channel
        return (
            self.is_running
            and channel is not None
            and not channel.is_closed
            and self._connection.is_connected
        )

    @property
    def consumer_tag(self) -> str | None:
        return self._consumer_tag

    @property
    def in_flight(self) -> int:
        """Number of deliveries currently inside the concurrency gate."""
        return self._in_flight

    @property
    def stats(self) -> ConsumerStats:
        return self._stats

    # =========================================================================
    # Listeners
    # =========================================================================

    def add_connection_state_listener(self, listener: ConnectionStateListener) -> None:
        """Register a callable receiving ConnectionStateChanged notifications."""
        self._listeners.append(listener)

    def remove_connection_state_listener(self, listener: ConnectionStateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(
        self,
        is_connected: bool,
        reason: str | None = None,
        exception: BaseException | None = None,
    ) -> None:
        change = ConnectionStateChanged(is_connected, reason, exception)
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception as e:
                logger.error(
                    f"Error in connection state listener: {e}",
                    exc_info=True,
                    extra={"reason": reason},
                )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def start(self) -> None:
        """
        Subscribe to the events queue.

        Raises:
            RuntimeError: If the consumer is not stopped
            Exception: Whatever prevented the subscription; the consumer is
                back in STOPPED and listeners were notified
        """
        if self._state is not ConsumerState.STOPPED:
            raise RuntimeError(f"Cannot start consumer in state {self._state.value}")

        self._state = ConsumerState.STARTING
        queue_name = self._config.queue_name
        logger.info(
            f"Starting event consumer for queue '{queue_name}'",
            extra={"queue": queue_name},
        )

        try:
            channel = await self._connection.create_channel()
            self._channel = channel
            channel.close_callbacks.add(self._on_channel_close)  # type: ignore[arg-type]

            queue = await channel.declare_queue(queue_name, durable=True)
            await channel.set_qos(prefetch_count=self._config.prefetch_count)

            consumer_tag = f"{self._config.consumer_tag_prefix}-{uuid.uuid4().hex}"
            self._queue = queue
            self._state = ConsumerState.RUNNING
            self._consumer_tag = await queue.consume(
                self._on_message,
                no_ack=self._config.auto_ack,
                consumer_tag=consumer_tag,
            )
        except Exception as e:
            logger.error(
                f"Failed to start event consumer: {e}",
                exc_info=True,
                extra={
                    "queue": queue_name,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            await self._close_channel()
            self._queue = None
            self._consumer_tag = None
            self._state = ConsumerState.STOPPED
            self._notify(False, "Failed to start consumer", e)
            raise

        self._stats.started_at = datetime.now(UTC)
        logger.info(
            f"Event consumer started with tag '{self._consumer_tag}' "
            f"(prefetch: {self._config.prefetch_count}, "
            f"maxConcurrency: {self._config.max_concurrent_messages})",
            extra={
                "queue": queue_name,
                "consumer_tag": self._consumer_tag,
                "prefetch_count": self._config.prefetch_count,
                "max_concurrent_messages": self._config.max_concurrent_messages,
                "auto_ack": self._config.auto_ack,
            },
        )
        self._notify(True, "Consumer started")

    async def stop(self) -> None:
        """
        Stop consuming and dispose the connection.

        In-flight deliveries are cancelled and requeued. Safe to call when
        start() never ran or failed, and safe to call twice.
        """
        if self._state is ConsumerState.STOPPING:
            return
        if (
            self._state is ConsumerState.STOPPED
            and self._channel is None
            and self._connection.is_disposed
        ):
            return

        logger.info("Stopping event consumer", extra={"queue": self._config.queue_name})
        self._state = ConsumerState.STOPPING
        try:
            await self._teardown()
            await self._connection.close()
        finally:
            self._state = ConsumerState.STOPPED

        logger.info(
            "Event consumer stopped",
            extra={"queue": self._config.queue_name, **self._stats.to_dict()},
        )
        self._notify(False, "Consumer stopped")

    async def restart(self) -> None:
        """
        Re-subscribe on a fresh channel, keeping the connection manager.

        Used after the connection has been re-established.
        """
        logger.info("Restarting event consumer", extra={"queue": self._config.queue_name})
        if self._state is not ConsumerState.STOPPED:
            self._state = ConsumerState.STOPPING
            try:
                await self._teardown()
            finally:
                self._state = ConsumerState.STOPPED
        await self.start()

    async def _teardown(self) -> None:
        await self._cancel_in_flight()

        queue, tag = self._queue, self._consumer_tag
        self._queue = None
        self._consumer_tag = None
        channel = self._channel
        if queue is not None and tag is not None and channel is not None and not channel.is_closed:
            try:
                await queue.cancel(tag)
            except Exception as e:
                logger.warning(
                    f"Error cancelling consumer tag '{tag}': {e}",
                    extra={"consumer_tag": tag, "error": str(e)},
                )

        await self._close_channel()

    async def _cancel_in_flight(self) -> None:
        tasks = list(self._tasks)
        if not tasks:
            return

        logger.info(
            f"Cancelling {len(tasks)} in-flight message(s)",
            extra={"in_flight": len(tasks)},
        )
        for task in tasks:
            task.cancel()
        _, pending = await asyncio.wait(tasks, timeout=self._config.shutdown_timeout)
        if pending:
            logger.warning(
                f"{len(pending)} message(s) did not finish within "
                f"{self._config.shutdown_timeout}s of cancellation",
                extra={"pending": len(pending)},
            )

    async def _close_channel(self) -> None:
        channel, self._channel = self._channel, None
        if channel is None:
            return
        channel.close_callbacks.discard(self._on_channel_close)  # type: ignore[arg-type]
        if channel.is_closed:
            return
        try:
            await channel.close()
        except Exception as e:
            logger.warning(f"Error closing channel: {e}", extra={"error": str(e)})

    def _on_channel_close(self, channel: Any, exception: BaseException | None) -> None:
        if exception is None or self._state is not ConsumerState.RUNNING:
            logger.debug("RabbitMQ channel closed")
            return
        logger.warning(
            f"RabbitMQ channel closed: {exception}",
            extra={"error": str(exception), "error_type": type(exception).__name__},
        )
        self._notify(False, "Channel closed", exception)

    async def __aenter__(self) -> EventConsumer:
        await self.start()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.stop()

    # =========================================================================
    # Message processing
    # =========================================================================

    async def _on_message(self, message: AbstractIncomingMessage) -> None:
        """Broker delivery callback. Hands the delivery to its own task."""
        self._stats.messages_received += 1
        self._stats.last_message_at = datetime.now(UTC)

        if self._state is not ConsumerState.RUNNING:
            logger.debug(
                f"Consumer is {self._state.value}; requeueing message {message.delivery_tag}",
                extra={"delivery_tag": message.delivery_tag},
            )
            await self._nack(message, requeue=True)
            self._settling.discard(message)
            return

        task = asyncio.create_task(
            self._handle_delivery(message),
            name=f"wuzevents-delivery-{message.delivery_tag}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _handle_delivery(self, message: AbstractIncomingMessage) -> None:
        try:
            async with self._semaphore:
                self._in_flight += 1
                try:
                    await self._process_message(message)
                finally:
                    self._in_flight -= 1
        except asyncio.CancelledError:
            if message in self._settling:
                logger.info(
                    f"Message processing cancelled while settling delivery tag "
                    f"{message.delivery_tag}; not requeueing",
                    extra={"delivery_tag": message.delivery_tag},
                )
                raise
            logger.info(
                f"Message processing cancelled for delivery tag {message.delivery_tag}",
                extra={"delivery_tag": message.delivery_tag},
            )
            await self._nack(message, requeue=True)
            raise
        finally:
            self._settling.discard(message)

    async def _process_message(self, message: AbstractIncomingMessage) -> None:
        delivery_tag = message.delivery_tag
        logger.debug(
            f"Received message with delivery tag {delivery_tag}",
            extra={"delivery_tag": delivery_tag},
        )

        with self._tracer.span_with_kind(
            "wuzevents.consume",
            kind=SpanKindEnum.CONSUMER,
            attributes={
                ATTR_MESSAGING_SYSTEM: "rabbitmq",
                ATTR_MESSAGING_DESTINATION: self._config.queue_name,
                ATTR_MESSAGING_OPERATION: "process",
                ATTR_MESSAGING_CONSUMER_TAG: self._consumer_tag or "",
                ATTR_MESSAGING_DELIVERY_TAG: delivery_tag or 0,
            },
        ) as span:
            try:
                result = await self._dispatcher.dispatch(message.body)
            except Exception as e:
                self._stats.dispatch_failures += 1
                self._stats.last_error_at = datetime.now(UTC)
                logger.error(
                    f"Unexpected error processing message with delivery tag {delivery_tag}: {e}",
                    exc_info=True,
                    extra={
                        "delivery_tag": delivery_tag,
                        "error": str(e),
                        "error_type": type(e).__name__,
                    },
                )
                await self._nack(message, requeue=False)
                if isinstance(e, CONNECTION_LOST_ERRORS):
                    self._notify(False, "Connection lost during message processing", e)
                return

            if span is not None and result.event_type:
                span.set_attribute(ATTR_EVENT_TYPE, result.event_type)

            if result.success:
                await self._ack(message)
                return

            self._stats.dispatch_failures += 1
            self._stats.last_error_at = datetime.now(UTC)
            if isinstance(result.error, EnvelopeParseError):
                self._stats.parse_failures += 1
                logger.warning(
                    f"Failed to deserialize message with delivery tag {delivery_tag}. "
                    f"Raw message (truncated): {_raw_body(message.body)}",
                    extra={"delivery_tag": delivery_tag},
                )
            else:
                logger.error(
                    f"Failed to dispatch event of type '{result.event_type}': {result.error}",
                    extra={
                        "delivery_tag": delivery_tag,
                        "event_type": result.event_type,
                        "error_type": type(result.error).__name__,
                    },
                )
            await self._nack(message, requeue=False)

    async def _ack(self, message: AbstractIncomingMessage) -> None:
        if self._config.auto_ack:
            return
        if self._channel is None or self._channel.is_closed:
            logger.warning(
                f"Cannot acknowledge message {message.delivery_tag}: channel is not open",
                extra={"delivery_tag": message.delivery_tag},
            )
            return
        self._settling.add(message)
        try:
            await message.ack()
        except Exception as e:
            logger.error(
                f"Error acknowledging message {message.delivery_tag}: {e}",
                exc_info=True,
                extra={"delivery_tag": message.delivery_tag},
            )
            return
        self._stats.record(DeliveryOutcome.ACK)
        logger.debug(
            f"Acknowledged message {message.delivery_tag}",
            extra={"delivery_tag": message.delivery_tag},
        )

    async def _nack(self, message: AbstractIncomingMessage, requeue: bool) -> None:
        if self._config.auto_ack:
            return
        if self._channel is None or self._channel.is_closed:
            logger.warning(
                f"Cannot nack message {message.delivery_tag}: channel is not open",
                extra={"delivery_tag": message.delivery_tag},
            )
            return
        self._settling.add(message)
        try:
            await message.nack(requeue=requeue)
        except Exception as e:
            logger.error(
                f"Error nacking message {message.delivery_tag}: {e}",
                exc_info=True,
                extra={"delivery_tag": message.delivery_tag},
            )
            return
        self._stats.record(DeliveryOutcome.REQUEUE if requeue else DeliveryOutcome.REJECT)
        logger.debug(
            f"Nacked message {message.delivery_tag} (requeue: {requeue})",
            extra={"delivery_tag": message.delivery_tag, "requeue": requeue},
        )

    def __repr__(self) -> str:
        return (
            f"EventConsumer(queue={self._config.queue_name!r}, "
            f"state={self._state.value}, in_flight={self._in_flight})"
        )


def _raw_body(body: bytes) -> str:
    return truncate_for_logging(body.decode("utf-8", errors="replace"))


__all__ = [
    "CONNECTION_LOST_ERRORS",
    "ConnectionStateChanged",
    "ConnectionStateListener",
    "ConsumerState",
    "ConsumerStats",
    "DeliveryOutcome",
    "EventConsumer",
]
