"""
Registry mapping wire type tags to dispatch strategies.

The table is built once and never changes, so lookups need no locking.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from wuzevents.config import DeserializationFailurePolicy, HandlerFailurePolicy
from wuzevents.dispatch.typed import TypedEventDispatcher, UnknownEventDispatcher
from wuzevents.errors import EventErrorHandler
from wuzevents.event_types import WhatsAppEventType
from wuzevents.events import models
from wuzevents.events.base import WhatsAppEvent
from wuzevents.observability import Tracer, create_tracer

logger = logging.getLogger(__name__)

EVENT_MODELS: Mapping[WhatsAppEventType, type[WhatsAppEvent]] = MappingProxyType(
    {
        WhatsAppEventType.MESSAGE: models.MessageEvent,
        WhatsAppEventType.UNDECRYPTABLE_MESSAGE: models.UndecryptableMessageEvent,
        WhatsAppEventType.RECEIPT: models.ReceiptEvent,
        WhatsAppEventType.READ_RECEIPT: models.ReceiptEvent,
        WhatsAppEventType.PRESENCE: models.PresenceEvent,
        WhatsAppEventType.CHAT_PRESENCE: models.ChatPresenceEvent,
        WhatsAppEventType.CONNECTED: models.ConnectedEvent,
        WhatsAppEventType.DISCONNECTED: models.DisconnectedEvent,
        WhatsAppEventType.QR: models.QrCodeEvent,
        WhatsAppEventType.QR_TIMEOUT: models.QrTimeoutEvent,
        WhatsAppEventType.QR_SCANNED_WITHOUT_MULTIDEVICE: models.QrScannedWithoutMultideviceEvent,
        WhatsAppEventType.PAIR_SUCCESS: models.PairSuccessEvent,
        WhatsAppEventType.PAIR_ERROR: models.PairErrorEvent,
        WhatsAppEventType.LOGGED_OUT: models.LoggedOutEvent,
        WhatsAppEventType.CONNECT_FAILURE: models.ConnectFailureEvent,
        WhatsAppEventType.CLIENT_OUTDATED: models.ClientOutdatedEvent,
        WhatsAppEventType.TEMPORARY_BAN: models.TemporaryBanEvent,
        WhatsAppEventType.STREAM_ERROR: models.StreamErrorEvent,
        WhatsAppEventType.STREAM_REPLACED: models.StreamReplacedEvent,
        WhatsAppEventType.KEEP_ALIVE_TIMEOUT: models.KeepAliveTimeoutEvent,
        WhatsAppEventType.KEEP_ALIVE_RESTORED: models.KeepAliveRestoredEvent,
        WhatsAppEventType.CALL_OFFER: models.CallOfferEvent,
        WhatsAppEventType.CALL_ACCEPT: models.CallAcceptEvent,
        WhatsAppEventType.CALL_TERMINATE: models.CallTerminateEvent,
        WhatsAppEventType.CALL_OFFER_NOTICE: models.CallOfferNoticeEvent,
        WhatsAppEventType.CALL_RELAY_LATENCY: models.CallRelayLatencyEvent,
        WhatsAppEventType.GROUP_INFO: models.GroupInfoEvent,
        WhatsAppEventType.JOINED_GROUP: models.JoinedGroupEvent,
        WhatsAppEventType.PICTURE: models.PictureEvent,
        WhatsAppEventType.HISTORY_SYNC: models.HistorySyncEvent,
        WhatsAppEventType.APP_STATE: models.AppStateEvent,
        WhatsAppEventType.APP_STATE_SYNC_COMPLETE: models.AppStateSyncCompleteEvent,
        WhatsAppEventType.OFFLINE_SYNC_COMPLETED: models.OfflineSyncCompletedEvent,
        WhatsAppEventType.OFFLINE_SYNC_PREVIEW: models.OfflineSyncPreviewEvent,
        WhatsAppEventType.PRIVACY_SETTINGS: models.PrivacySettingsEvent,
        WhatsAppEventType.PUSH_NAME_SETTING: models.PushNameSettingEvent,
        WhatsAppEventType.BLOCKLIST_CHANGE: models.BlocklistChangeEvent,
        WhatsAppEventType.BLOCKLIST: models.BlocklistEvent,
        WhatsAppEventType.IDENTITY_CHANGE: models.IdentityChangeEvent,
        WhatsAppEventType.NEWSLETTER_JOIN: models.NewsletterJoinEvent,
        WhatsAppEventType.NEWSLETTER_LEAVE: models.NewsletterLeaveEvent,
        WhatsAppEventType.NEWSLETTER_MUTE_CHANGE: models.NewsletterMuteChangeEvent,
        WhatsAppEventType.NEWSLETTER_LIVE_UPDATE: models.NewsletterLiveUpdateEvent,
        WhatsAppEventType.MEDIA_RETRY: models.MediaRetryEvent,
        WhatsAppEventType.USER_ABOUT: models.UserAboutEvent,
        WhatsAppEventType.FB_MESSAGE: models.FBMessageEvent,
        WhatsAppEventType.CAT_REFRESH_ERROR: models.CATRefreshErrorEvent,
    }
)


class TypedDispatcherRegistry:
    """
    Looks up the dispatch strategy for a type tag.

    Every known tag gets its own strategy instance (``Receipt`` and
    ``ReadReceipt`` share a payload model but not a strategy). Lookup is
    exact and case-sensitive; any other tag, including ``""``, gets the one
    shared fallback strategy.

    Example:
        >>> registry = TypedDispatcherRegistry()
        >>> registry.get_dispatcher("Message").event_model
        <class 'wuzevents.events.models.MessageEvent'>
        >>> registry.get_dispatcher("message") is registry.fallback
        True
    """

    def __init__(
        self,
        *,
        error_handler: EventErrorHandler | None = None,
        deserialization_failure_policy: DeserializationFailurePolicy = "ack",
        handler_failure_policy: HandlerFailurePolicy = "fail",
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        options: dict[str, Any] = {
            "error_handler": error_handler,
            "deserialization_failure_policy": deserialization_failure_policy,
            "handler_failure_policy": handler_failure_policy,
            "tracer": tracer or create_tracer(__name__, enable_tracing),
        }
        self._dispatchers: Mapping[str, TypedEventDispatcher[Any]] = MappingProxyType(
            {
                event_type.value: TypedEventDispatcher(model, **options)
                for event_type, model in EVENT_MODELS.items()
            }
        )
        self._fallback = UnknownEventDispatcher(**options)
        logger.debug(
            f"Built dispatcher registry with {len(self._dispatchers)} event types",
            extra={"event_type_count": len(self._dispatchers)},
        )

    def get_dispatcher(self, event_type: str) -> TypedEventDispatcher[Any]:
        """Get the strategy for a type tag. Never fails."""
        return self._dispatchers.get(event_type, self._fallback)

    @property
    def fallback(self) -> UnknownEventDispatcher:
        return self._fallback

    @property
    def registered_types(self) -> frozenset[str]:
        return frozenset(self._dispatchers)

    def __len__(self) -> int:
        return len(self._dispatchers)


__all__ = [
    "EVENT_MODELS",
    "TypedDispatcherRegistry",
]
