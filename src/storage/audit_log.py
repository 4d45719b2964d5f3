"""Audit logging for message handling events."""

import json
from datetime import datetime
from pathlib import Path
from typing import Optional


class AuditLog:
    """Audit logger for attachment diagnostics and message side effects."""

    def __init__(self, log_path: Optional[Path] = None):
        """
        Initialize audit logger.

        Args:
            log_path: Path to audit log file (default: ~/.mail2ticket/logs/audit.log)
        """
        if log_path is None:
            log_path = Path("~/.mail2ticket/logs/audit.log").expanduser()

        self.log_path = log_path
        self.log_path.parent.mkdir(parents=True, exist_ok=True)

    def log_attachment_skipped(
        self,
        attachment_name: Optional[str],
        attachment_kind: str,
        position: int,
        message_subject: str,
    ) -> None:
        """
        Log an attachment dropped during classification.

        Args:
            attachment_name: Name of the attachment (if any)
            attachment_kind: Store type name of the attachment
            position: Index of the attachment in the store collection
            message_subject: Subject of the owning message
        """
        event = {
            "timestamp": datetime.now().isoformat(),
            "event_type": "attachment_skipped",
            "attachment_name": attachment_name,
            "attachment_kind": attachment_kind,
            "position": position,
            "message_subject": message_subject,
        }

        self._write_event(event)

    def log_message_event(
        self,
        event_type: str,
        conversation_id: str,
        subject: str,
        metadata: dict,
    ) -> None:
        """
        Log a side effect performed on a message.

        Args:
            event_type: Type of event (e.g., "message_saved", "reply_sent")
            conversation_id: Conversation id of the message
            subject: Message subject
            metadata: Additional event metadata
        """
        event = {
            "timestamp": datetime.now().isoformat(),
            "event_type": event_type,
            "conversation_id": conversation_id,
            "subject": subject,
            **metadata,
        }

        self._write_event(event)

    def read_events(self) -> list:
        """
        Read all events recorded so far.

        Returns:
            List of event dictionaries, skipping unreadable lines
        """
        events = []

        if self.log_path.exists():
            with open(self.log_path, "r", encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    if line:
                        try:
                            events.append(json.loads(line))
                        except json.JSONDecodeError:
                            continue

        return events

    def export_events(self, output_path: Path) -> None:
        """
        Export all events to a JSON file.

        Args:
            output_path: Path to output JSON file
        """
        events = self.read_events()

        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(events, f, indent=2, ensure_ascii=False)

    def _write_event(self, event: dict) -> None:
        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(event, ensure_ascii=False, default=str) + "\n")
