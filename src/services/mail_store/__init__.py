"""Mail-store collaborator interface and implementations."""

from .base import (
    PID_TAG_BODY_HTML,
    PID_TAG_CONVERSATION_ID,
    REQUIRED_FIELDS,
    MailStoreError,
    ReplyDraft,
    StaleMessageError,
    StoreAttachment,
    StoreFetchFailure,
    StoreFileAttachment,
    StoreItem,
    StoreItemAttachment,
    StoreOperationFailure,
)
from .eml_store import EmlStoreItem

__all__ = [
    "PID_TAG_BODY_HTML",
    "PID_TAG_CONVERSATION_ID",
    "REQUIRED_FIELDS",
    "MailStoreError",
    "ReplyDraft",
    "StaleMessageError",
    "StoreAttachment",
    "StoreFetchFailure",
    "StoreFileAttachment",
    "StoreItem",
    "StoreItemAttachment",
    "StoreOperationFailure",
    "EmlStoreItem",
]
