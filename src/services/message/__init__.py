"""Message adapter services."""

from .adapter import MessageAdapter, hydrate

__all__ = ["MessageAdapter", "hydrate"]
