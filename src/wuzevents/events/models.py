"""
Typed payload models for wuzapi events.

Only the fields handlers commonly need are declared. Everything else the
gateway publishes is preserved in ``model_extra``. Signal-only events (those
published with an empty or absent ``event`` object) are plain subclasses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from wuzevents.events.base import WhatsAppEvent, WuzModel

# =============================================================================
# Messages
# =============================================================================


class MessageInfo(WuzModel):
    """Source and metadata of a message."""

    chat: str | None = Field(default=None, alias="Chat")
    sender: str | None = Field(default=None, alias="Sender")
    is_from_me: bool = Field(default=False, alias="IsFromMe")
    is_group: bool = Field(default=False, alias="IsGroup")
    id: str | None = Field(default=None, alias="ID")
    server_id: int = Field(default=0, alias="ServerID")
    type: str | None = Field(default=None, alias="Type")
    push_name: str | None = Field(default=None, alias="PushName")
    timestamp: datetime | None = Field(default=None, alias="Timestamp")
    category: str | None = Field(default=None, alias="Category")
    media_type: str | None = Field(default=None, alias="MediaType")
    edit: str | None = Field(default=None, alias="Edit")


class S3MediaInfo(WuzModel):
    """Location of media the gateway uploaded to S3."""

    url: str | None = Field(default=None, alias="url")
    key: str | None = Field(default=None, alias="key")
    bucket: str | None = Field(default=None, alias="bucket")
    size: int | None = Field(default=None, alias="size")
    mimetype: str | None = Field(default=None, alias="mimetype")
    file_name: str | None = Field(default=None, alias="fileName")


class MessageEvent(WhatsAppEvent):
    """A message was received or sent from another device."""

    info: MessageInfo | None = Field(default=None, alias="Info")
    message: dict[str, Any] | None = Field(default=None, alias="Message")
    base64: str | None = Field(default=None, alias="Base64")
    mime_type: str | None = Field(default=None, alias="MimeType")
    file_name: str | None = Field(default=None, alias="FileName")
    s3: S3MediaInfo | None = Field(default=None, alias="S3")
    is_sticker: bool = Field(default=False, alias="IsSticker")
    sticker_animated: bool = Field(default=False, alias="StickerAnimated")
    is_view_once: bool = Field(default=False, alias="IsViewOnce")
    is_ephemeral: bool = Field(default=False, alias="IsEphemeral")


class UndecryptableMessageEvent(WhatsAppEvent):
    """A message arrived that could not be decrypted."""

    info: MessageInfo | None = Field(default=None, alias="Info")
    is_unavailable: bool = Field(default=False, alias="IsUnavailable")
    decrypt_fail_mode: str | None = Field(default=None, alias="DecryptFailMode")


class FBMessageEvent(WhatsAppEvent):
    """A message from a Meta-bridged (Facebook/Instagram) chat."""

    info: MessageInfo | None = Field(default=None, alias="Info")
    message: dict[str, Any] | None = Field(default=None, alias="Message")


# =============================================================================
# Receipts and presence
# =============================================================================


class ReceiptEvent(WhatsAppEvent):
    """Delivery or read receipt for one or more messages."""

    chat: str | None = Field(default=None, alias="Chat")
    sender: str | None = Field(default=None, alias="Sender")
    is_from_me: bool = Field(default=False, alias="IsFromMe")
    is_group: bool = Field(default=False, alias="IsGroup")
    message_ids: list[str] | None = Field(default=None, alias="MessageIDs")
    timestamp: datetime | None = Field(default=None, alias="Timestamp")
    receipt_type: str | None = Field(default=None, alias="Type")
    message_sender: str | None = Field(default=None, alias="MessageSender")
    state: str | None = Field(default=None, alias="state")


class PresenceEvent(WhatsAppEvent):
    """A contact came online or went offline."""

    from_: str | None = Field(default=None, alias="From")
    unavailable: bool = Field(default=False, alias="Unavailable")
    last_seen: datetime | None = Field(default=None, alias="LastSeen")
    state: str | None = Field(default=None, alias="state")


class ChatPresenceEvent(WhatsAppEvent):
    """A contact started or stopped typing or recording in a chat."""

    chat: str | None = Field(default=None, alias="Chat")
    sender: str | None = Field(default=None, alias="Sender")
    is_from_me: bool = Field(default=False, alias="IsFromMe")
    is_group: bool = Field(default=False, alias="IsGroup")
    state: str | None = Field(default=None, alias="State")
    media: str | None = Field(default=None, alias="Media")


# =============================================================================
# Session lifecycle
# =============================================================================


class ConnectedEvent(WhatsAppEvent):
    """The gateway session connected to WhatsApp."""


class DisconnectedEvent(WhatsAppEvent):
    """The gateway session disconnected from WhatsApp."""


class QrCodeEvent(WhatsAppEvent):
    """A new pairing QR code is available."""

    qr_code_base64: str | None = Field(default=None, alias="qrCodeBase64")


class QrTimeoutEvent(WhatsAppEvent):
    """The pairing QR code expired without being scanned."""


class QrScannedWithoutMultideviceEvent(WhatsAppEvent):
    """The QR code was scanned by a phone without multi-device support."""


class PairSuccessEvent(WhatsAppEvent):
    """Pairing with a phone succeeded."""

    id: str | None = Field(default=None, alias="ID")
    business_name: str | None = Field(default=None, alias="BusinessName")
    platform: str | None = Field(default=None, alias="Platform")


class PairErrorEvent(WhatsAppEvent):
    """Pairing with a phone failed."""

    id: str | None = Field(default=None, alias="ID")
    error: str | None = Field(default=None, alias="Error")


class LoggedOutEvent(WhatsAppEvent):
    """The session was logged out from the phone or by the server."""

    on_connect: bool = Field(default=False, alias="OnConnect")
    reason: Any = Field(default=None, alias="Reason")


class ConnectFailureEvent(WhatsAppEvent):
    """The server refused the connection."""

    reason: Any = Field(default=None, alias="Reason")
    message: str | None = Field(default=None, alias="Message")


class ClientOutdatedEvent(WhatsAppEvent):
    """The server reports the client version as outdated."""


class TemporaryBanEvent(WhatsAppEvent):
    """The account is temporarily banned."""

    code: Any = Field(default=None, alias="Code")
    expire: Any = Field(default=None, alias="Expire")


class StreamErrorEvent(WhatsAppEvent):
    """The server sent an unrecognised stream error."""

    code: str | None = Field(default=None, alias="Code")


class StreamReplacedEvent(WhatsAppEvent):
    """Another client connected with the same keys."""


class KeepAliveTimeoutEvent(WhatsAppEvent):
    """Keepalive pings are not being answered."""

    error_count: int = Field(default=0, alias="ErrorCount")
    last_success: datetime | None = Field(default=None, alias="LastSuccess")


class KeepAliveRestoredEvent(WhatsAppEvent):
    """Keepalive pings are answered again."""


class CATRefreshErrorEvent(WhatsAppEvent):
    """Refreshing the client access token failed."""

    error: str | None = Field(default=None, alias="Error")


# =============================================================================
# Calls
# =============================================================================


class CallOfferEvent(WhatsAppEvent):
    """An incoming call offer."""

    call_id: str | None = Field(default=None, alias="callId")
    from_: str | None = Field(default=None, alias="from")
    is_video: bool = Field(default=False, alias="isVideo")


class CallAcceptEvent(WhatsAppEvent):
    """A call was accepted."""

    call_id: str | None = Field(default=None, alias="CallID")
    from_: str | None = Field(default=None, alias="From")


class CallTerminateEvent(WhatsAppEvent):
    """A call ended."""

    call_id: str | None = Field(default=None, alias="CallID")
    from_: str | None = Field(default=None, alias="From")
    reason: str | None = Field(default=None, alias="Reason")


class CallOfferNoticeEvent(WhatsAppEvent):
    """A call offer notice, usually for group calls."""

    call_id: str | None = Field(default=None, alias="CallID")
    from_: str | None = Field(default=None, alias="From")
    media: str | None = Field(default=None, alias="Media")
    type: str | None = Field(default=None, alias="Type")


class CallRelayLatencyEvent(WhatsAppEvent):
    """Relay latency measurements for an ongoing call."""

    call_id: str | None = Field(default=None, alias="CallID")
    from_: str | None = Field(default=None, alias="From")


# =============================================================================
# Groups, contacts and profile
# =============================================================================


class GroupInfoEvent(WhatsAppEvent):
    """Group metadata or membership changed."""

    jid: str | None = Field(default=None, alias="JID")
    notify: str | None = Field(default=None, alias="Notify")
    sender: str | None = Field(default=None, alias="Sender")
    timestamp: datetime | None = Field(default=None, alias="Timestamp")
    join: list[str] | None = Field(default=None, alias="Join")
    leave: list[str] | None = Field(default=None, alias="Leave")
    promote: list[str] | None = Field(default=None, alias="Promote")
    demote: list[str] | None = Field(default=None, alias="Demote")


class JoinedGroupEvent(WhatsAppEvent):
    """The account was added to a group."""

    reason: str | None = Field(default=None, alias="Reason")
    type: str | None = Field(default=None, alias="Type")


class PictureEvent(WhatsAppEvent):
    """A contact or group changed or removed its picture."""

    jid: str | None = Field(default=None, alias="JID")
    author: str | None = Field(default=None, alias="Author")
    timestamp: datetime | None = Field(default=None, alias="Timestamp")
    remove: bool = Field(default=False, alias="Remove")
    picture_id: str | None = Field(default=None, alias="PictureID")


class IdentityChangeEvent(WhatsAppEvent):
    """A contact's identity key changed."""

    jid: str | None = Field(default=None, alias="JID")
    timestamp: datetime | None = Field(default=None, alias="Timestamp")
    implicit: bool = Field(default=False, alias="Implicit")


class UserAboutEvent(WhatsAppEvent):
    """A contact changed their about text."""

    jid: str | None = Field(default=None, alias="JID")
    status: str | None = Field(default=None, alias="Status")
    timestamp: datetime | None = Field(default=None, alias="Timestamp")


class PushNameSettingEvent(WhatsAppEvent):
    """The account's own push name changed."""

    timestamp: datetime | None = Field(default=None, alias="Timestamp")


class PrivacySettingsEvent(WhatsAppEvent):
    """Privacy settings changed."""


class BlocklistChangeEvent(WhatsAppEvent):
    """A single contact was blocked or unblocked."""

    jid: str | None = Field(default=None, alias="JID")
    action: str | None = Field(default=None, alias="Action")


class BlocklistEvent(WhatsAppEvent):
    """The blocklist was replaced or modified."""

    action: str | None = Field(default=None, alias="Action")
    dhash: str | None = Field(default=None, alias="DHash")
    changes: list[dict[str, Any]] | None = Field(default=None, alias="Changes")


# =============================================================================
# Synchronisation
# =============================================================================


class HistorySyncEvent(WhatsAppEvent):
    """A history sync blob was received."""

    data: dict[str, Any] | None = Field(default=None, alias="Data")


class AppStateEvent(WhatsAppEvent):
    """An app state mutation was received."""

    index: list[str] | None = Field(default=None, alias="Index")


class AppStateSyncCompleteEvent(WhatsAppEvent):
    """An app state collection finished syncing."""

    name: str | None = Field(default=None, alias="Name")


class OfflineSyncCompletedEvent(WhatsAppEvent):
    """All events queued while offline were delivered."""

    count: int = Field(default=0, alias="Count")


class OfflineSyncPreviewEvent(WhatsAppEvent):
    """Preview counts of events queued while offline."""

    total: int = Field(default=0, alias="Total")
    app_data_changes: int = Field(default=0, alias="AppDataChanges")
    messages: int = Field(default=0, alias="Messages")
    notifications: int = Field(default=0, alias="Notifications")
    receipts: int = Field(default=0, alias="Receipts")


class MediaRetryEvent(WhatsAppEvent):
    """The phone answered a media re-upload request."""

    message_id: str | None = Field(default=None, alias="MessageID")
    chat_id: str | None = Field(default=None, alias="ChatID")
    sender_id: str | None = Field(default=None, alias="SenderID")
    from_me: bool = Field(default=False, alias="FromMe")
    timestamp: datetime | None = Field(default=None, alias="Timestamp")


# =============================================================================
# Newsletters
# =============================================================================


class NewsletterJoinEvent(WhatsAppEvent):
    """The account joined a newsletter channel."""

    id: str | None = Field(default=None, alias="id")


class NewsletterLeaveEvent(WhatsAppEvent):
    """The account left a newsletter channel."""

    id: str | None = Field(default=None, alias="id")
    role: str | None = Field(default=None, alias="role")


class NewsletterMuteChangeEvent(WhatsAppEvent):
    """A newsletter channel was muted or unmuted."""

    id: str | None = Field(default=None, alias="id")
    mute: str | None = Field(default=None, alias="mute")


class NewsletterLiveUpdateEvent(WhatsAppEvent):
    """Live updates (reactions, views) for newsletter messages."""

    jid: str | None = Field(default=None, alias="JID")
    time: datetime | None = Field(default=None, alias="Time")
    messages: list[dict[str, Any]] | None = Field(default=None, alias="Messages")


# =============================================================================
# Fallback
# =============================================================================


class UnknownEvent(WhatsAppEvent):
    """
    Payload for events whose type tag is not recognised.

    Carries the whole parsed envelope so catch-all handlers can still inspect
    it, plus the tag that failed to route.
    """

    raw: dict[str, Any] = Field(default_factory=dict)
    original_type: str = ""
    error: str | None = None


__all__ = [
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
