"""Hydrated property batch for a single mail-store item."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional, Tuple


class BodyType(Enum):
    """Flavor of the structured message body."""

    TEXT = "text"
    HTML = "html"


@dataclass(frozen=True)
class Mailbox:
    """A participant: display name plus address."""

    name: Optional[str] = None
    address: Optional[str] = None


@dataclass(frozen=True)
class MessageBody:
    """Structured body as returned by the store."""

    text: Optional[str] = None
    body_type: BodyType = BodyType.TEXT


@dataclass(frozen=True)
class MeetingFields:
    """Meeting-request facet. Present only for meeting requests."""

    location: str
    start: datetime
    end: datetime

    def __post_init__(self):
        """Validate fields after initialization."""
        if self.end < self.start:
            raise ValueError("Meeting end must not precede its start")


@dataclass(frozen=True)
class FetchedItem:
    """
    Immutable snapshot of the fields loaded from a store item in one batch.

    Attributes:
        subject: Subject line
        body: Structured body (text or HTML flavor)
        extended_properties: Binary extended properties keyed by numeric tag
        conversation_index: Raw conversation index bytes
        sender: Sender mailbox
        from_: From mailbox
        to_recipients: Ordered To mailboxes
        cc_recipients: Ordered Cc mailboxes
        mime_content: Complete MIME serialization of the item
        sent_on: When the item was sent
        received_on: When the item was received
        conversation_topic: Normalized conversation subject
        attachments: Raw store attachments, in store order
        meeting: Meeting facet, None when the item is not a meeting request
    """

    subject: str
    body: MessageBody
    sent_on: datetime
    received_on: datetime
    sender: Mailbox = field(default_factory=Mailbox)
    from_: Mailbox = field(default_factory=Mailbox)
    to_recipients: Tuple[Mailbox, ...] = ()
    cc_recipients: Tuple[Mailbox, ...] = ()
    extended_properties: Mapping[int, bytes] = field(default_factory=dict)
    conversation_index: Optional[bytes] = None
    mime_content: bytes = b""
    conversation_topic: str = ""
    attachments: Tuple[Any, ...] = ()
    meeting: Optional[MeetingFields] = None

    def __post_init__(self):
        """Validate fields after initialization."""
        if self.sent_on is None:
            raise ValueError("sent_on is required")
        if self.received_on is None:
            raise ValueError("received_on is required")

    def get_extended_property(self, tag: int) -> Optional[bytes]:
        """Return the binary extended property for tag, or None when absent."""
        return self.extended_properties.get(tag)
