"""Conversation identity services."""

from .identity import (
    ConversationIdMode,
    MalformedConversationIndexError,
    guid_from_index,
    hex_upper,
    resolve_conversation_id,
)

__all__ = [
    "ConversationIdMode",
    "MalformedConversationIndexError",
    "guid_from_index",
    "hex_upper",
    "resolve_conversation_id",
]
