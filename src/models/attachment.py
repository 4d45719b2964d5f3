"""Typed attachment wrappers exposed on an incoming message."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional


class IncomingAttachment(ABC):
    """
    Attachment of an incoming message.

    Closed set of variants: FileAttachment and ItemAttachment. Store
    attachments of any other kind never become an IncomingAttachment.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name of the attachment."""
        pass

    @abstractmethod
    def content(self) -> bytes:
        """
        Retrieve the attachment payload.

        Returns:
            Raw bytes of the attachment
        """
        pass

    def save_to_file(self, path: Path) -> Path:
        """
        Write the attachment payload to path, overwriting any existing file.

        Args:
            path: Destination file path

        Returns:
            The path written
        """
        data = self.content()
        with open(path, "wb") as f:
            f.write(data)
        return path


class FileAttachment(IncomingAttachment):
    """A file payload attached to the message."""

    def __init__(self, store_attachment):
        self._attachment = store_attachment
        self._content: Optional[bytes] = None

    @property
    def name(self) -> str:
        return self._attachment.name or ""

    @property
    def content_type(self) -> str:
        return self._attachment.content_type or "application/octet-stream"

    @property
    def content_id(self) -> Optional[str]:
        return self._attachment.content_id

    @property
    def is_inline(self) -> bool:
        return bool(self._attachment.is_inline)

    def content(self) -> bytes:
        if self._content is None:
            self._content = self._attachment.load_content()
        return self._content

    def __repr__(self) -> str:
        return f"FileAttachment(name={self.name!r}, content_type={self.content_type!r})"


class ItemAttachment(IncomingAttachment):
    """An embedded store item (message, meeting, ...) attached to the message."""

    def __init__(self, store_attachment):
        self._attachment = store_attachment
        self._content: Optional[bytes] = None

    @property
    def name(self) -> str:
        return self._attachment.name or self.subject

    @property
    def subject(self) -> str:
        return self._attachment.subject or ""

    def content(self) -> bytes:
        """MIME serialization of the embedded item."""
        if self._content is None:
            self._content = self._attachment.load_mime()
        return self._content

    def __repr__(self) -> str:
        return f"ItemAttachment(name={self.name!r})"
