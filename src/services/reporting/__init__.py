"""Reporting services."""

from .message_formatter import MessageFormatter

__all__ = ["MessageFormatter"]
