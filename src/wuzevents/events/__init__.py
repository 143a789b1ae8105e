"""
Event payload models and the typed envelope.

Example:
    >>> from wuzevents.events import EventEnvelope, MessageEvent
    >>>
    >>> async def handle(envelope: EventEnvelope[MessageEvent]) -> None:
    ...     print(envelope.event.info.chat)
"""

from wuzevents.events.base import WhatsAppEvent, WuzModel
from wuzevents.events.envelope import EventEnvelope, TEvent
from wuzevents.events.models import (
    AppStateEvent,
    AppStateSyncCompleteEvent,
    BlocklistChangeEvent,
    BlocklistEvent,
    CallAcceptEvent,
    CallOfferEvent,
    CallOfferNoticeEvent,
    CallRelayLatencyEvent,
    CallTerminateEvent,
    CATRefreshErrorEvent,
    ChatPresenceEvent,
    ClientOutdatedEvent,
    ConnectedEvent,
    ConnectFailureEvent,
    DisconnectedEvent,
    FBMessageEvent,
    GroupInfoEvent,
    HistorySyncEvent,
    IdentityChangeEvent,
    JoinedGroupEvent,
    KeepAliveRestoredEvent,
    KeepAliveTimeoutEvent,
    LoggedOutEvent,
    MediaRetryEvent,
    MessageEvent,
    MessageInfo,
    NewsletterJoinEvent,
    NewsletterLeaveEvent,
    NewsletterLiveUpdateEvent,
    NewsletterMuteChangeEvent,
    OfflineSyncCompletedEvent,
    OfflineSyncPreviewEvent,
    PairErrorEvent,
    PairSuccessEvent,
    PictureEvent,
    PresenceEvent,
    PrivacySettingsEvent,
    PushNameSettingEvent,
    QrCodeEvent,
    QrScannedWithoutMultideviceEvent,
    QrTimeoutEvent,
    ReceiptEvent,
    S3MediaInfo,
    StreamErrorEvent,
    StreamReplacedEvent,
    TemporaryBanEvent,
    UndecryptableMessageEvent,
    UnknownEvent,
    UserAboutEvent,
)

__all__ = [
    "EventEnvelope",
    "TEvent",
    "WhatsAppEvent",
    "WuzModel",
    "AppStateEvent",
    "AppStateSyncCompleteEvent",
    "BlocklistChangeEvent",
    "BlocklistEvent",
    "CATRefreshErrorEvent",
    "CallAcceptEvent",
    "CallOfferEvent",
    "CallOfferNoticeEvent",
    "CallRelayLatencyEvent",
    "CallTerminateEvent",
    "ChatPresenceEvent",
    "ClientOutdatedEvent",
    "ConnectFailureEvent",
    "ConnectedEvent",
    "DisconnectedEvent",
    "FBMessageEvent",
    "GroupInfoEvent",
    "HistorySyncEvent",
    "IdentityChangeEvent",
    "JoinedGroupEvent",
    "KeepAliveRestoredEvent",
    "KeepAliveTimeoutEvent",
    "LoggedOutEvent",
    "MediaRetryEvent",
    "MessageEvent",
    "MessageInfo",
    "NewsletterJoinEvent",
    "NewsletterLeaveEvent",
    "NewsletterLiveUpdateEvent",
    "NewsletterMuteChangeEvent",
    "OfflineSyncCompletedEvent",
    "OfflineSyncPreviewEvent",
    "PairErrorEvent",
    "PairSuccessEvent",
    "PictureEvent",
    "PresenceEvent",
    "PrivacySettingsEvent",
    "PushNameSettingEvent",
    "QrCodeEvent",
    "QrScannedWithoutMultideviceEvent",
    "QrTimeoutEvent",
    "ReceiptEvent",
    "S3MediaInfo",
    "StreamErrorEvent",
    "StreamReplacedEvent",
    "TemporaryBanEvent",
    "UndecryptableMessageEvent",
    "UnknownEvent",
    "UserAboutEvent",
]
