"""Business logic services"""

from .attachments import AttachmentClassifier
from .body import BodyNormalizer, Html2TextConverter
from .conversation import ConversationIdMode, resolve_conversation_id
from .mail_store import EmlStoreItem, StoreItem
from .message import MessageAdapter
from .reporting import MessageFormatter

__all__ = [
    "AttachmentClassifier",
    "BodyNormalizer",
    "Html2TextConverter",
    "ConversationIdMode",
    "resolve_conversation_id",
    "EmlStoreItem",
    "StoreItem",
    "MessageAdapter",
    "MessageFormatter",
]
