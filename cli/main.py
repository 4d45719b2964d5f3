"""Main CLI entry point for mail2ticket."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from src.config.config_loader import ConfigLoader
from src.services.conversation.identity import ConversationIdMode
from src.services.mail_store.base import MailStoreError
from src.services.mail_store.eml_store import EmlStoreItem
from src.services.message.adapter import MessageAdapter
from src.services.reporting.message_formatter import MessageFormatter
from src.storage.audit_log import AuditLog


def inspect_emails(
    email_paths: list[Path],
    config_path: Optional[Path] = None,
    guid_only: bool = False,
    verbose: bool = False,
) -> tuple[int, int]:
    """
    Normalize .eml files and print a summary for each.

    Args:
        email_paths: List of email file paths to inspect
        config_path: Optional custom config file path
        guid_only: Present conversation ids as the thread GUID only
        verbose: Print error details for failed messages

    Returns:
        Tuple of (total_emails, failed_emails)
    """
    config = ConfigLoader(config_path).load_app_config()
    audit_log = AuditLog(config.storage.get_audit_log_path())
    formatter = MessageFormatter()

    mode = None
    if guid_only:
        mode = ConversationIdMode.GUID_ONLY

    total_emails = 0
    failed_emails = 0

    for email_path in email_paths:
        total_emails += 1
        item = EmlStoreItem(
            email_path,
            trash_dir=config.storage.get_trash_path(),
            outbox_dir=config.storage.get_outbox_path(),
            html_encoding=config.adapter.html_body_encoding,
        )

        print(f"\n## {email_path.name}")
        try:
            message = MessageAdapter(item, conversation_id_mode=mode, config=config, audit_log=audit_log)
            summary = formatter.format_summary(message)
        except (MailStoreError, ValueError) as e:
            failed_emails += 1
            print(f"Error: {e}" if verbose else "Error: message could not be normalized")
            continue
        print(summary)

    print("---")
    print(f"\nInspected {total_emails} emails, {failed_emails} failed")

    return total_emails, failed_emails


def cmd_save(args) -> int:
    """Save the MIME blob of one message."""
    config = ConfigLoader(args.config).load_app_config()
    audit_log = AuditLog(config.storage.get_audit_log_path())

    try:
        message = MessageAdapter(
            EmlStoreItem(Path(args.email), html_encoding=config.adapter.html_body_encoding),
            config=config,
            audit_log=audit_log,
        )
        written = message.save_to_file(args.output)
    except (MailStoreError, OSError) as e:
        print(f"Error: {e}")
        return 1

    print(f"Message saved to: {written}")
    return 0


def cmd_export(args) -> int:
    """Export audit events command."""
    config = ConfigLoader(args.config).load_app_config()

    audit_log = AuditLog(config.storage.get_audit_log_path())

    output_path = Path(args.output) if args.output else Path("audit_export.json")

    audit_log.export_events(output_path)

    print(f"Audit events exported to: {output_path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="mail2ticket - Inbound message normalization")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    inspect_parser = subparsers.add_parser("inspect", help="Normalize emails and print summaries")
    inspect_parser.add_argument("emails", nargs="+", help="Email file(s) to inspect")
    inspect_parser.add_argument("--config", type=Path, help="Custom config file path")
    inspect_parser.add_argument("--guid-only", action="store_true", help="Show conversation GUIDs only")
    inspect_parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    save_parser = subparsers.add_parser("save", help="Save the raw MIME content of an email")
    save_parser.add_argument("email", help="Email file to save")
    save_parser.add_argument("--output", type=Path, help="Output file path (default: temp directory)")
    save_parser.add_argument("--config", type=Path, help="Custom config file path")

    export_parser = subparsers.add_parser("export", help="Export audit events")
    export_parser.add_argument("--config", type=Path, help="Custom config file path")
    export_parser.add_argument("--output", type=Path, help="Output file path")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 1
    if args.command == "inspect":
        _, failed = inspect_emails([Path(p) for p in args.emails], args.config, args.guid_only, args.verbose)
        return 1 if failed else 0
    if args.command == "save":
        return cmd_save(args)
    if args.command == "export":
        return cmd_export(args)

    return 1


if __name__ == "__main__":
    sys.exit(main())
