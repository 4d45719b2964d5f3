"""Data models for inbound message normalization"""

from .attachment import FileAttachment, IncomingAttachment, ItemAttachment
from .fetched_item import BodyType, FetchedItem, Mailbox, MeetingFields, MessageBody
from .incoming_message import IncomingMessage

__all__ = [
    "BodyType",
    "FetchedItem",
    "Mailbox",
    "MeetingFields",
    "MessageBody",
    "IncomingAttachment",
    "FileAttachment",
    "ItemAttachment",
    "IncomingMessage",
]
