"""Conversation (thread) identity resolution."""

from enum import Enum
from typing import Optional

GUID_LENGTH = 16
# The GUID sits after the 6-byte header of the conversation index.
INDEX_HEADER_LENGTH = 6
MIN_INDEX_LENGTH = INDEX_HEADER_LENGTH + GUID_LENGTH


class MalformedConversationIndexError(ValueError):
    """Raised when a conversation id cannot be derived from the available bytes."""

    pass


class ConversationIdMode(Enum):
    """How the conversation id is presented to callers."""

    INDEX = "index"
    GUID_ONLY = "guid_only"


def hex_upper(data: bytes) -> str:
    """
    Encode bytes as uppercase hex, two digits per byte, no separators.

    Examples:
        >>> hex_upper(bytes([0x01, 0xAB]))
        '01AB'
    """
    return bytes(data).hex().upper()


def guid_from_index(index_hex: str) -> str:
    """
    Extract the conversation GUID from a hex-encoded conversation index.

    Args:
        index_hex: Output of hex_upper() on the conversation index

    Returns:
        The 32 hex digits that follow the index header

    Raises:
        MalformedConversationIndexError: If the index is shorter than 22 bytes
    """
    start = INDEX_HEADER_LENGTH * 2
    end = start + GUID_LENGTH * 2
    if len(index_hex) < end:
        raise MalformedConversationIndexError(
            f"Conversation index is {len(index_hex) // 2} bytes long, "
            f"at least {MIN_INDEX_LENGTH} are needed to extract the conversation GUID"
        )
    return index_hex[start:end]


def resolve_conversation_id(
    mode: ConversationIdMode,
    native_guid: Optional[bytes],
    conversation_index: Optional[bytes],
) -> str:
    """
    Resolve the externally visible conversation id.

    Args:
        mode: INDEX returns the whole conversation index; GUID_ONLY returns
            only the thread GUID
        native_guid: The store's binary conversation id property, if present
        conversation_index: Raw conversation index bytes (None is treated as empty)

    Returns:
        Uppercase hex string without separators

    Raises:
        MalformedConversationIndexError: If GUID_ONLY is requested and neither
            a 16-byte native GUID nor a long enough index is available

    Notes:
        - GUID_ONLY prefers native_guid; otherwise it falls back to the
          16 bytes starting at offset 6 of the conversation index
    """
    index_hex = hex_upper(conversation_index or b"")

    if mode is ConversationIdMode.INDEX:
        return index_hex

    if native_guid is not None:
        if len(native_guid) != GUID_LENGTH:
            raise MalformedConversationIndexError(
                f"Native conversation id must be {GUID_LENGTH} bytes, got {len(native_guid)}"
            )
        return hex_upper(native_guid)

    return guid_from_index(index_hex)
