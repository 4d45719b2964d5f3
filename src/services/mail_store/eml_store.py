"""Mail store backed by RFC 5322 (.eml) files on disk."""

import base64
import binascii
import logging
import shutil
from datetime import date, datetime, time
from email import message_from_bytes
from email.message import EmailMessage
from email.policy import default
from email.utils import parsedate_to_datetime
from pathlib import Path
from typing import List, Optional, Tuple
from uuid import uuid4

from icalendar import Calendar

from src.models.fetched_item import BodyType, FetchedItem, Mailbox, MeetingFields, MessageBody
from src.services.body.normalizer import default_encoding

from .base import (
    PID_TAG_BODY_HTML,
    ReplyDraft,
    StoreAttachment,
    StoreFetchFailure,
    StoreFileAttachment,
    StoreItem,
    StoreItemAttachment,
    StoreOperationFailure,
)

logger = logging.getLogger(__name__)


def _read_message(path: Path) -> Tuple[bytes, EmailMessage]:
    with open(path, "rb") as f:
        raw = f.read()
    return raw, message_from_bytes(raw, policy=default)


def _header_text(message: EmailMessage, name: str) -> str:
    value = message.get(name)
    return str(value).strip() if value is not None else ""


def _addresses(header) -> tuple:
    return getattr(header, "addresses", ()) if header is not None else ()


def _mailbox(header) -> Mailbox:
    addresses = _addresses(header)
    if not addresses:
        return Mailbox(name=None, address=None)
    first = addresses[0]
    return Mailbox(name=first.display_name or None, address=first.addr_spec or None)


def _mailboxes(message: EmailMessage, header: str) -> Tuple[Mailbox, ...]:
    return tuple(
        Mailbox(name=address.display_name or None, address=address.addr_spec)
        for value in message.get_all(header, [])
        for address in _addresses(value)
        if address.addr_spec
    )


def _received_date(message: EmailMessage) -> Optional[datetime]:
    # Received headers are prepended, so the first one is the final hop
    for header in message.get_all("Received", []):
        _, _, date_part = str(header).rpartition(";")
        try:
            return parsedate_to_datetime(date_part.strip())
        except (TypeError, ValueError):
            continue
    return None


def _conversation_index(message: EmailMessage) -> Optional[bytes]:
    value = message.get("Thread-Index")
    if not value:
        return None
    try:
        return base64.b64decode(str(value).strip(), validate=True)
    except (binascii.Error, ValueError):
        logger.warning("Ignoring malformed Thread-Index header %r", str(value))
        return None


def _as_datetime(value) -> datetime:
    # all-day events carry a plain date
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    raise ValueError(f"Unsupported iCalendar date value: {value!r}")


def parse_meeting_request(calendar_text: str) -> Optional[MeetingFields]:
    """
    Extract the meeting facet from an iCalendar REQUEST.

    The end time is DTEND, or DTSTART + DURATION, or DTSTART. A floating
    end paired with a zoned start is read in the start's timezone.

    Args:
        calendar_text: Content of a text/calendar part

    Returns:
        MeetingFields, or None if the calendar is not a meeting request
        or has no start time
    """
    try:
        calendar = Calendar.from_ical(calendar_text or "")
    except ValueError as e:
        logger.warning("Ignoring unparseable calendar part: %s", e)
        return None

    if str(calendar.get("METHOD", "")).strip().upper() != "REQUEST":
        return None

    events = calendar.walk("VEVENT")
    if not events:
        return None
    event = events[0]

    dtstart = event.get("DTSTART")
    if dtstart is None:
        return None
    start = _as_datetime(dtstart.dt)

    if event.get("DTEND") is not None:
        end = _as_datetime(event.get("DTEND").dt)
    elif event.get("DURATION") is not None:
        end = start + event.get("DURATION").dt
    else:
        end = start

    if end.tzinfo is None and start.tzinfo is not None:
        end = end.replace(tzinfo=start.tzinfo)
    elif start.tzinfo is None and end.tzinfo is not None:
        end = end.replace(tzinfo=None)

    if end < start:
        logger.warning("Meeting ends before it starts (%s < %s), using start time", end, start)
        end = start

    return MeetingFields(location=str(event.get("LOCATION", "")).strip(), start=start, end=end)


class EmlFileAttachment(StoreFileAttachment):
    """File attachment held in a MIME part."""

    def __init__(self, part: EmailMessage):
        super().__init__(
            name=part.get_filename(),
            content_type=part.get_content_type(),
            content_id=str(part.get("Content-ID")) if part.get("Content-ID") else None,
            is_inline=part.get_content_disposition() == "inline",
        )
        self._part = part

    def load_content(self) -> bytes:
        return self._part.get_payload(decode=True) or b""


class EmlItemAttachment(StoreItemAttachment):
    """Attached message (message/rfc822 part)."""

    def __init__(self, part: EmailMessage):
        self._embedded = part.get_content()
        subject = _header_text(self._embedded, "Subject")
        super().__init__(name=part.get_filename() or subject, subject=subject)

    def load_mime(self) -> bytes:
        return self._embedded.as_bytes()


class EmlReplyDraft(ReplyDraft):
    """Reply written as an .eml file into an outbox directory on send()."""

    def __init__(self, original_path: Path, reply_all: bool, outbox_dir: Path):
        self.original_path = original_path
        self.reply_all = reply_all
        self.outbox_dir = outbox_dir
        self.body_prefix_html = ""
        self.sent_path: Optional[Path] = None

    def build(self) -> EmailMessage:
        """
        Build the reply message from the original.

        Returns:
            EmailMessage addressed to the sender (and all recipients for
            reply-all), threaded with In-Reply-To/References
        """
        _, original = _read_message(self.original_path)

        subject = _header_text(original, "Subject")
        reply = EmailMessage()
        reply["Subject"] = subject if subject.lower().startswith("re:") else f"RE: {subject}"

        to: List[str] = [str(original.get("Reply-To") or original.get("From") or "")]
        cc: List[str] = []
        if self.reply_all:
            to.extend(str(v) for v in original.get_all("To", []))
            cc.extend(str(v) for v in original.get_all("Cc", []))

        to = [v for v in to if v]
        if to:
            reply["To"] = ", ".join(to)
        if cc:
            reply["Cc"] = ", ".join(cc)

        message_id = original.get("Message-ID")
        if message_id:
            reply["In-Reply-To"] = str(message_id)
            references = str(original.get("References", "") or "")
            reply["References"] = f"{references} {message_id}".strip()

        reply.set_content(self.body_prefix_html or "", subtype="html")
        return reply

    def send(self) -> None:
        try:
            reply = self.build()
            self.outbox_dir.mkdir(parents=True, exist_ok=True)
            target = self.outbox_dir / f"reply-{uuid4().hex}.eml"
            with open(target, "wb") as f:
                f.write(reply.as_bytes())
        except OSError as e:
            raise StoreOperationFailure(f"Failed to send reply to {self.original_path}: {e}") from e

        self.sent_path = target
        logger.info("Reply to %s written to %s", self.original_path, target)


class EmlStoreItem(StoreItem):
    """
    StoreItem over a single .eml file.

    Mapping to store fields:
        - structured body: text/plain part, else text/html part
        - binary HTML property: text/html part re-encoded in html_encoding
        - conversation index: base64 Thread-Index header
        - meeting facet: text/calendar part with METHOD:REQUEST
    """

    def __init__(
        self,
        path: Path,
        trash_dir: Optional[Path] = None,
        outbox_dir: Optional[Path] = None,
        html_encoding: Optional[str] = None,
    ):
        """
        Initialize store item.

        Args:
            path: Path to the .eml file
            trash_dir: Directory receiving deleted messages (unlink when None)
            outbox_dir: Directory receiving sent replies
            html_encoding: Encoding of the binary HTML property (platform
                default when None); must match the adapter's decoding
        """
        self.path = Path(path)
        self.trash_dir = trash_dir
        self.outbox_dir = outbox_dir
        self.html_encoding = html_encoding or default_encoding()

    def load(self, fields: frozenset) -> FetchedItem:
        try:
            raw, message = _read_message(self.path)
        except OSError as e:
            raise StoreFetchFailure(f"Cannot read email file {self.path}: {e}") from e

        date_header = message.get("Date")
        if not date_header:
            raise StoreFetchFailure(f"Date header is missing in {self.path}")
        try:
            sent_on = parsedate_to_datetime(str(date_header))
        except (TypeError, ValueError) as e:
            raise StoreFetchFailure(f"Invalid Date header in {self.path}: {e}") from e

        subject = _header_text(message, "Subject")
        body, extended_properties = self._extract_body(message)
        sender_header = message.get("Sender") or message.get("From")

        return FetchedItem(
            subject=subject,
            body=body,
            sent_on=sent_on,
            received_on=_received_date(message) or sent_on,
            sender=_mailbox(sender_header),
            from_=_mailbox(message.get("From")),
            to_recipients=_mailboxes(message, "To"),
            cc_recipients=_mailboxes(message, "Cc"),
            extended_properties=extended_properties,
            conversation_index=_conversation_index(message),
            mime_content=raw,
            conversation_topic=_header_text(message, "Thread-Topic") or subject,
            attachments=tuple(self._extract_attachments(message)),
            meeting=self._extract_meeting(message),
        )

    def delete(self, move_to_trash: bool = True) -> None:
        try:
            if move_to_trash and self.trash_dir is not None:
                self.trash_dir.mkdir(parents=True, exist_ok=True)
                shutil.move(str(self.path), str(self.trash_dir / self.path.name))
            else:
                self.path.unlink()
        except OSError as e:
            raise StoreOperationFailure(f"Failed to delete {self.path}: {e}") from e

    def move(self, destination) -> "EmlStoreItem":
        destination = Path(destination)
        try:
            destination.mkdir(parents=True, exist_ok=True)
            new_path = shutil.move(str(self.path), str(destination / self.path.name))
        except OSError as e:
            raise StoreOperationFailure(f"Failed to move {self.path} to {destination}: {e}") from e

        return EmlStoreItem(Path(new_path), self.trash_dir, self.outbox_dir, self.html_encoding)

    def create_reply(self, reply_all: bool) -> EmlReplyDraft:
        if self.outbox_dir is None:
            raise StoreOperationFailure("No outbox directory configured for replies")
        return EmlReplyDraft(self.path, reply_all, self.outbox_dir)

    def _extract_body(self, message: EmailMessage):
        plain_part = message.get_body(preferencelist=("plain",))
        html_part = message.get_body(preferencelist=("html",))
        extended_properties = {}

        if html_part is not None:
            # decoded with the part charset, re-encoded for the adapter
            extended_properties[PID_TAG_BODY_HTML] = html_part.get_content().encode(
                self.html_encoding, errors="replace"
            )

        if plain_part is not None:
            body = MessageBody(plain_part.get_content(), BodyType.TEXT)
        elif html_part is not None:
            body = MessageBody(html_part.get_content(), BodyType.HTML)
        else:
            body = MessageBody(None, BodyType.TEXT)

        return body, extended_properties

    @staticmethod
    def _extract_attachments(message: EmailMessage) -> List[StoreAttachment]:
        attachments: List[StoreAttachment] = []
        for part in message.iter_attachments():
            content_type = part.get_content_type()
            if content_type == "text/calendar":
                continue
            if content_type == "message/rfc822":
                attachments.append(EmlItemAttachment(part))
            elif part.get_content_maintype() == "multipart":
                attachments.append(StoreAttachment(name=part.get_filename()))
            else:
                attachments.append(EmlFileAttachment(part))
        return attachments

    @staticmethod
    def _extract_meeting(message: EmailMessage) -> Optional[MeetingFields]:
        for part in message.walk():
            if part.get_content_type() == "text/calendar":
                meeting = parse_meeting_request(part.get_content())
                if meeting is not None:
                    return meeting
        return None

    def __repr__(self) -> str:
        return f"EmlStoreItem(path={str(self.path)!r})"
