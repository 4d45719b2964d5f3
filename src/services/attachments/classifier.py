"""Classification of store attachments into typed variants."""

import logging
from typing import Iterable, List, Optional

from src.models.attachment import FileAttachment, IncomingAttachment, ItemAttachment
from src.services.mail_store.base import StoreFileAttachment, StoreItemAttachment
from src.storage.audit_log import AuditLog

logger = logging.getLogger(__name__)


class AttachmentClassifier:
    """
    Wraps store attachments as FileAttachment or ItemAttachment.

    Classification is total: unsupported kinds are skipped with a
    diagnostic and never raise.
    """

    def __init__(self, audit_log: Optional[AuditLog] = None):
        """
        Initialize classifier.

        Args:
            audit_log: Optional audit log receiving attachment_skipped events
        """
        self.audit_log = audit_log

    def classify(self, raw_attachments: Iterable, message_subject: str = "") -> List[IncomingAttachment]:
        """
        Classify attachments, preserving input order.

        Args:
            raw_attachments: Store attachments in store order
            message_subject: Subject of the owning message, for diagnostics

        Returns:
            Typed attachments; skipped entries leave no gap
        """
        attachments: List[IncomingAttachment] = []
        for position, attachment in enumerate(raw_attachments or ()):
            wrapped = self._classify_one(attachment)
            if wrapped is None:
                self._record_skipped(attachment, position, message_subject)
                continue
            attachments.append(wrapped)

        return attachments

    def _classify_one(self, attachment) -> Optional[IncomingAttachment]:
        if isinstance(attachment, StoreFileAttachment):
            logger.debug("Loading file attachment")
            return FileAttachment(attachment)
        if isinstance(attachment, StoreItemAttachment):
            logger.debug("Loading item attachment")
            return ItemAttachment(attachment)
        return None

    def _record_skipped(self, attachment, position: int, message_subject: str) -> None:
        name = getattr(attachment, "name", None)
        logger.error(
            "Skipping attachment because it's not a file or item attachment (%s, %s)",
            name,
            type(attachment).__name__,
        )
        if self.audit_log is not None:
            self.audit_log.log_attachment_skipped(
                attachment_name=name,
                attachment_kind=type(attachment).__name__,
                position=position,
                message_subject=message_subject,
            )
