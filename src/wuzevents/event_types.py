"""Wire-level event type tags published by the wuzapi gateway.

The ``type`` field of every envelope carries one of these tags. The set is
closed: adding a new kind of event requires a code change here and in the
dispatcher registry.
"""

from enum import Enum


class WhatsAppEventType(str, Enum):
    """Event type tags as they appear in the envelope ``type`` field."""

    MESSAGE = "Message"
    UNDECRYPTABLE_MESSAGE = "UndecryptableMessage"
    RECEIPT = "Receipt"
    READ_RECEIPT = "ReadReceipt"
    PRESENCE = "Presence"
    CHAT_PRESENCE = "ChatPresence"
    CONNECTED = "Connected"
    DISCONNECTED = "Disconnected"
    QR = "QR"
    QR_TIMEOUT = "QRTimeout"
    QR_SCANNED_WITHOUT_MULTIDEVICE = "QRScannedWithoutMultidevice"
    PAIR_SUCCESS = "PairSuccess"
    PAIR_ERROR = "PairError"
    LOGGED_OUT = "LoggedOut"
    CONNECT_FAILURE = "ConnectFailure"
    CLIENT_OUTDATED = "ClientOutdated"
    TEMPORARY_BAN = "TemporaryBan"
    STREAM_ERROR = "StreamError"
    STREAM_REPLACED = "StreamReplaced"
    KEEP_ALIVE_TIMEOUT = "KeepAliveTimeout"
    KEEP_ALIVE_RESTORED = "KeepAliveRestored"
    CALL_OFFER = "CallOffer"
    CALL_ACCEPT = "CallAccept"
    CALL_TERMINATE = "CallTerminate"
    CALL_OFFER_NOTICE = "CallOfferNotice"
    CALL_RELAY_LATENCY = "CallRelayLatency"
    GROUP_INFO = "GroupInfo"
    JOINED_GROUP = "JoinedGroup"
    PICTURE = "Picture"
    HISTORY_SYNC = "HistorySync"
    APP_STATE = "AppState"
    APP_STATE_SYNC_COMPLETE = "AppStateSyncComplete"
    OFFLINE_SYNC_COMPLETED = "OfflineSyncCompleted"
    OFFLINE_SYNC_PREVIEW = "OfflineSyncPreview"
    PRIVACY_SETTINGS = "PrivacySettings"
    PUSH_NAME_SETTING = "PushNameSetting"
    BLOCKLIST_CHANGE = "BlocklistChange"
    BLOCKLIST = "Blocklist"
    IDENTITY_CHANGE = "IdentityChange"
    NEWSLETTER_JOIN = "NewsletterJoin"
    NEWSLETTER_LEAVE = "NewsletterLeave"
    NEWSLETTER_MUTE_CHANGE = "NewsletterMuteChange"
    NEWSLETTER_LIVE_UPDATE = "NewsletterLiveUpdate"
    MEDIA_RETRY = "MediaRetry"
    USER_ABOUT = "UserAbout"
    FB_MESSAGE = "FBMessage"
    CAT_REFRESH_ERROR = "CATRefreshError"


ALL_EVENT_TYPES: frozenset[str] = frozenset(t.value for t in WhatsAppEventType)


def is_known_event_type(event_type: str) -> bool:
    """Check whether a tag is one of the known wire types (case-sensitive)."""
    return event_type in ALL_EVENT_TYPES


__all__ = [
    "ALL_EVENT_TYPES",
    "WhatsAppEventType",
    "is_known_event_type",
]
