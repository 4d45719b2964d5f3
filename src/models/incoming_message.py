"""Canonical, store-agnostic view of an inbound email or meeting request."""

from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Tuple

from .attachment import IncomingAttachment


class IncomingMessage(ABC):
    """
    Abstract view of one inbound message.

    Every accessor is a pure read. save_to_file, delete, move and reply
    are the only operations with side effects; after delete or move the
    view is stale and must not be read further.
    """

    @property
    @abstractmethod
    def subject(self) -> str:
        pass

    @property
    @abstractmethod
    def conversation_topic(self) -> str:
        pass

    @property
    @abstractmethod
    def conversation_id(self) -> str:
        """32+ character uppercase hex key grouping the message's thread."""
        pass

    @property
    @abstractmethod
    def raw_body(self) -> str:
        pass

    @property
    @abstractmethod
    def plain_text_body(self) -> str:
        pass

    @property
    @abstractmethod
    def is_html_body(self) -> bool:
        pass

    @property
    @abstractmethod
    def last_message_text(self) -> str:
        """Plain-text body without the quoted thread history."""
        pass

    @property
    @abstractmethod
    def sender_name(self) -> Optional[str]:
        pass

    @property
    @abstractmethod
    def sender_alias(self) -> str:
        pass

    @property
    @abstractmethod
    def sender_address(self) -> Optional[str]:
        pass

    @property
    @abstractmethod
    def to_addresses(self) -> Tuple[Optional[str], ...]:
        pass

    @property
    @abstractmethod
    def cc_addresses(self) -> Tuple[Optional[str], ...]:
        pass

    @property
    @abstractmethod
    def to_names(self) -> Tuple[Optional[str], ...]:
        pass

    @property
    @abstractmethod
    def cc_names(self) -> Tuple[Optional[str], ...]:
        pass

    @property
    @abstractmethod
    def sent_on(self) -> datetime:
        pass

    @property
    @abstractmethod
    def received_on(self) -> datetime:
        pass

    @property
    @abstractmethod
    def location(self) -> str:
        """Meeting location, empty string when not a meeting request."""
        pass

    @property
    @abstractmethod
    def start_time(self) -> Optional[datetime]:
        pass

    @property
    @abstractmethod
    def end_time(self) -> Optional[datetime]:
        pass

    @property
    @abstractmethod
    def attachments(self) -> Tuple[IncomingAttachment, ...]:
        pass

    @abstractmethod
    def save_to_file(self, path: Optional[Path] = None) -> Path:
        """
        Write the MIME blob of the message to disk.

        Args:
            path: Destination file; a default temp location when omitted

        Returns:
            The path written
        """
        pass

    @abstractmethod
    def delete(self) -> None:
        pass

    @abstractmethod
    def move(self, destination: Any) -> Any:
        pass

    @abstractmethod
    def reply(self, html_body: str, reply_all: bool) -> None:
        pass
