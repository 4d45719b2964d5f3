"""Canonical message view over a mail-store item."""

import logging
from datetime import datetime
from functools import cached_property
from pathlib import Path
from typing import Any, Optional, Tuple

from src.config.adapter_config import AppConfig
from src.models.attachment import IncomingAttachment
from src.models.fetched_item import FetchedItem
from src.models.incoming_message import IncomingMessage
from src.services.attachments.classifier import AttachmentClassifier
from src.services.body.html_converter import Html2TextConverter, HtmlConverter
from src.services.body.normalizer import BodyNormalizer
from src.services.conversation.identity import ConversationIdMode, resolve_conversation_id
from src.services.mail_store.base import (
    PID_TAG_BODY_HTML,
    PID_TAG_CONVERSATION_ID,
    REQUIRED_FIELDS,
    StaleMessageError,
    StoreFetchFailure,
    StoreItem,
    StoreOperationFailure,
)
from src.storage.audit_log import AuditLog
from src.utils.address_utils import alias_from_address

logger = logging.getLogger(__name__)


def hydrate(item: StoreItem) -> FetchedItem:
    """
    Load the required field set from a store item in one batch.

    Args:
        item: Store item to load

    Returns:
        Fully populated FetchedItem

    Raises:
        StoreFetchFailure: If the store fails to deliver the batch
    """
    try:
        return item.load(REQUIRED_FIELDS)
    except StoreFetchFailure:
        raise
    except Exception as e:
        raise StoreFetchFailure(f"Failed to load message fields: {e}") from e


class MessageAdapter(IncomingMessage):
    """
    IncomingMessage backed by a StoreItem.

    The required fields are fetched once at construction, the native
    conversation id is captured and attachments are classified. Body and
    alias values are derived lazily and cached. delete() and move() make
    the adapter stale; any further read raises StaleMessageError.
    """

    def __init__(
        self,
        item: StoreItem,
        conversation_id_mode: Optional[ConversationIdMode] = None,
        converter: Optional[HtmlConverter] = None,
        config: Optional[AppConfig] = None,
        audit_log: Optional[AuditLog] = None,
    ):
        """
        Initialize adapter.

        Args:
            item: Store item to wrap
            conversation_id_mode: INDEX or GUID_ONLY (default from config)
            converter: HTML to plain-text converter (default: html2text)
            config: Application configuration (default: AppConfig())
            audit_log: Optional audit log for diagnostics and side effects

        Raises:
            StoreFetchFailure: If the required fields cannot be loaded
        """
        self._config = config or AppConfig()
        self._item = item
        self._audit_log = audit_log
        self._stale = False

        if conversation_id_mode is None:
            conversation_id_mode = (
                ConversationIdMode.GUID_ONLY
                if self._config.adapter.use_conversation_guid_only
                else ConversationIdMode.INDEX
            )
        self._conversation_id_mode = conversation_id_mode

        self._fetched = hydrate(item)
        self._native_conversation_id = self._fetched.get_extended_property(PID_TAG_CONVERSATION_ID)
        self._attachments: Tuple[IncomingAttachment, ...] = tuple(
            AttachmentClassifier(audit_log).classify(self._fetched.attachments, self._fetched.subject)
        )
        self._body = BodyNormalizer(
            self._fetched.body,
            self._fetched.get_extended_property(PID_TAG_BODY_HTML),
            converter or Html2TextConverter.from_config(self._config.html_conversion),
            self._config.adapter.html_body_encoding,
        )

    @property
    def fetched(self) -> FetchedItem:
        self._ensure_fresh()
        return self._fetched

    @property
    def is_stale(self) -> bool:
        return self._stale

    @property
    def conversation_id_mode(self) -> ConversationIdMode:
        return self._conversation_id_mode

    @property
    def subject(self) -> str:
        return self.fetched.subject

    @property
    def conversation_topic(self) -> str:
        return self.fetched.conversation_topic

    @cached_property
    def _conversation_id(self) -> str:
        return resolve_conversation_id(
            self._conversation_id_mode,
            self._native_conversation_id,
            self._fetched.conversation_index,
        )

    @property
    def conversation_id(self) -> str:
        self._ensure_fresh()
        return self._conversation_id

    @property
    def raw_body(self) -> str:
        self._ensure_fresh()
        return self._body.raw_body

    @property
    def plain_text_body(self) -> str:
        self._ensure_fresh()
        return self._body.plain_text_body

    @property
    def is_html_body(self) -> bool:
        self._ensure_fresh()
        return self._body.is_html_body

    @property
    def last_message_text(self) -> str:
        self._ensure_fresh()
        return self._body.last_message_text

    @property
    def sender_name(self) -> Optional[str]:
        return self.fetched.sender.name

    @cached_property
    def _sender_alias(self) -> str:
        return alias_from_address(self._fetched.sender.address)

    @property
    def sender_alias(self) -> str:
        self._ensure_fresh()
        return self._sender_alias

    @property
    def sender_address(self) -> Optional[str]:
        return self.fetched.sender.address

    @property
    def to_addresses(self) -> Tuple[Optional[str], ...]:
        return tuple(m.address for m in self.fetched.to_recipients)

    @property
    def cc_addresses(self) -> Tuple[Optional[str], ...]:
        return tuple(m.address for m in self.fetched.cc_recipients)

    @property
    def to_names(self) -> Tuple[Optional[str], ...]:
        return tuple(m.name for m in self.fetched.to_recipients)

    @property
    def cc_names(self) -> Tuple[Optional[str], ...]:
        return tuple(m.name for m in self.fetched.cc_recipients)

    @property
    def sent_on(self) -> datetime:
        return self.fetched.sent_on

    @property
    def received_on(self) -> datetime:
        return self.fetched.received_on

    @property
    def is_meeting_request(self) -> bool:
        return self.fetched.meeting is not None

    @property
    def location(self) -> str:
        meeting = self.fetched.meeting
        return meeting.location if meeting is not None else ""

    @property
    def start_time(self) -> Optional[datetime]:
        meeting = self.fetched.meeting
        return meeting.start if meeting is not None else None

    @property
    def end_time(self) -> Optional[datetime]:
        meeting = self.fetched.meeting
        return meeting.end if meeting is not None else None

    @property
    def attachments(self) -> Tuple[IncomingAttachment, ...]:
        self._ensure_fresh()
        return self._attachments

    def save_to_file(self, path: Optional[Path] = None) -> Path:
        self._ensure_fresh()
        if path is None:
            path = self._config.adapter.get_default_save_path()
        path = Path(path)

        contents = self._fetched.mime_content or b""
        logger.debug("Message '%s' is %d bytes long", self._fetched.subject, len(contents))
        with open(path, "wb") as f:
            f.write(contents)

        self._audit("message_saved", {"path": str(path), "size": len(contents)})
        return path

    def delete(self) -> None:
        self._ensure_fresh()
        try:
            self._item.delete(move_to_trash=True)
        except StoreOperationFailure:
            raise
        except Exception as e:
            raise StoreOperationFailure(f"Failed to delete message '{self._fetched.subject}': {e}") from e

        self._audit("message_deleted", {})
        self._stale = True

    def move(self, destination: Any) -> Any:
        self._ensure_fresh()
        try:
            moved = self._item.move(destination)
        except StoreOperationFailure:
            raise
        except Exception as e:
            raise StoreOperationFailure(f"Failed to move message '{self._fetched.subject}': {e}") from e

        self._audit("message_moved", {"destination": str(destination)})
        self._stale = True
        return moved

    def reply(self, html_body: str, reply_all: bool) -> None:
        """
        Send a reply over the original message.

        Args:
            html_body: HTML of the reply contents
            reply_all: True replies to all recipients, False only to the sender

        Raises:
            StoreOperationFailure: If the reply cannot be created or sent
        """
        self._ensure_fresh()
        try:
            draft = self._item.create_reply(reply_all)
            draft.body_prefix_html = html_body
            draft.send()
        except StoreOperationFailure:
            raise
        except Exception as e:
            raise StoreOperationFailure(f"Failed to reply to message '{self._fetched.subject}': {e}") from e

        self._audit("reply_sent", {"reply_all": reply_all})

    def _ensure_fresh(self) -> None:
        if self._stale:
            raise StaleMessageError("Message was deleted or moved and can no longer be read")

    def _audit(self, event_type: str, metadata: dict) -> None:
        if self._audit_log is None:
            return
        try:
            conversation_id = self._conversation_id
        except ValueError:
            conversation_id = ""
        self._audit_log.log_message_event(event_type, conversation_id, self._fetched.subject, metadata)

    def __repr__(self) -> str:
        state = "stale" if self._stale else "constructed"
        return f"MessageAdapter(subject={self._fetched.subject!r}, state={state})"
