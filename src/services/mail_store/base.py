"""Abstract interface for the mail-store collaborator."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from src.models.fetched_item import FetchedItem

# MAPI property tag of the HTML body (PidTagBodyHtml), binary.
PID_TAG_BODY_HTML = 0x1013
# MAPI property tag of the conversation GUID (PidTagConversationId), binary.
PID_TAG_CONVERSATION_ID = 0x3013

REQUIRED_FIELDS = frozenset(
    {
        "subject",
        "body",
        f"extended:{PID_TAG_BODY_HTML:#06x}",
        "conversation_index",
        f"extended:{PID_TAG_CONVERSATION_ID:#06x}",
        "sender",
        "from",
        "to_recipients",
        "cc_recipients",
        "mime_content",
        "date_time_received",
        "date_time_sent",
        "conversation_topic",
        "attachments",
        "has_attachments",
        "meeting_location",
        "meeting_start",
        "meeting_end",
    }
)


class MailStoreError(Exception):
    """Base exception for mail-store errors."""

    pass


class StoreFetchFailure(MailStoreError):
    """Raised when the required field batch cannot be loaded."""

    pass


class StoreOperationFailure(MailStoreError):
    """Raised when delete, move, reply or send fails."""

    pass


class StaleMessageError(MailStoreError):
    """Raised when a message view is used after it was deleted or moved."""

    pass


class StoreAttachment:
    """
    Attachment as exposed by a store.

    Stores subclass StoreFileAttachment or StoreItemAttachment for the
    kinds they understand. Any other subclass is an unsupported kind.
    """

    def __init__(self, name: Optional[str] = None):
        self.name = name

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class StoreFileAttachment(StoreAttachment, ABC):
    """File payload attachment."""

    def __init__(
        self,
        name: Optional[str] = None,
        content_type: Optional[str] = None,
        content_id: Optional[str] = None,
        is_inline: bool = False,
    ):
        super().__init__(name)
        self.content_type = content_type
        self.content_id = content_id
        self.is_inline = is_inline

    @abstractmethod
    def load_content(self) -> bytes:
        """Fetch the attachment bytes."""
        pass


class StoreItemAttachment(StoreAttachment, ABC):
    """Embedded store item attachment."""

    def __init__(self, name: Optional[str] = None, subject: Optional[str] = None):
        super().__init__(name)
        self.subject = subject

    @abstractmethod
    def load_mime(self) -> bytes:
        """Fetch the MIME serialization of the embedded item."""
        pass


class ReplyDraft(ABC):
    """Reply created by a store item, sent with send()."""

    body_prefix_html: str = ""

    @abstractmethod
    def send(self) -> None:
        """
        Send the reply.

        Raises:
            StoreOperationFailure: If the store rejects the reply
        """
        pass


class StoreItem(ABC):
    """
    Abstract interface for one item in a remote mail store.

    All operations are blocking. Retries, timeouts and connection
    handling belong to the implementation.
    """

    @abstractmethod
    def load(self, fields: frozenset) -> FetchedItem:
        """
        Load the requested fields in one batch.

        Args:
            fields: Field names to fetch (see REQUIRED_FIELDS)

        Returns:
            FetchedItem with every requested field populated

        Raises:
            StoreFetchFailure: If the batch cannot be loaded
        """
        pass

    @abstractmethod
    def delete(self, move_to_trash: bool = True) -> None:
        """Delete the item, moving it to the deleted-items folder when requested."""
        pass

    @abstractmethod
    def move(self, destination: Any) -> "StoreItem":
        """
        Move the item to destination.

        Returns:
            Handle of the item at its new location
        """
        pass

    @abstractmethod
    def create_reply(self, reply_all: bool) -> ReplyDraft:
        """Create a reply (or reply-all) draft for the item."""
        pass
