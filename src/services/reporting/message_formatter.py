"""Summary formatting for incoming messages."""

from typing import List

from src.models.incoming_message import IncomingMessage
from src.utils.text_utils import truncate_subject


class MessageFormatter:
    """Format an IncomingMessage as a short human-readable summary."""

    def __init__(self, subject_length: int = 50, date_format: str = "%Y-%m-%d %H:%M"):
        """
        Initialize formatter.

        Args:
            subject_length: Subjects longer than this are truncated
            date_format: strftime format for timestamps
        """
        self.subject_length = subject_length
        self.date_format = date_format

    def format_sender(self, message: IncomingMessage) -> str:
        """Sender as "Name <address>", or just the address without a name."""
        address = message.sender_address or ""
        return f"{message.sender_name} <{address}>" if message.sender_name else address

    def format_summary(self, message: IncomingMessage) -> str:
        """
        Format a multi-line summary of the message.

        Args:
            message: Message to summarize

        Returns:
            Summary text: header line, conversation id, recipients,
            attachments and (for meeting requests) the meeting slot
        """
        lines: List[str] = [
            "{sender} | {date} | {subject}".format(
                sender=self.format_sender(message),
                date=message.sent_on.strftime(self.date_format),
                subject=truncate_subject(message.subject, max_length=self.subject_length),
            ),
            f"Conversation: {message.conversation_id}",
        ]

        recipients = [a for a in message.to_addresses if a]
        if recipients:
            lines.append(f"To: {', '.join(recipients)}")

        if message.attachments:
            names = ", ".join(a.name or "(unnamed)" for a in message.attachments)
            lines.append(f"Attachments: {names}")

        if message.start_time is not None:
            end = message.end_time.strftime(self.date_format) if message.end_time else "?"
            lines.append(
                f"Meeting: {message.start_time.strftime(self.date_format)} - {end} @ {message.location or '(no location)'}"
            )

        return "\n".join(lines)
