"""Message body normalization."""

import locale
import re
from functools import cached_property
from typing import Optional

from src.models.fetched_item import BodyType, MessageBody

from .html_converter import HtmlConverter

# Lines that open a quoted reply or forward in common mail clients.
_REPLY_SEPARATORS = [
    re.compile(r"^\s*-{2,}\s*Original Message\s*-{2,}\s*$", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^\s*-{2,}\s*Forwarded message\s*-{2,}\s*$", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^\s*_{10,}\s*$", re.MULTILINE),
    re.compile(r"^\s*On .{1,200}wrote:\s*$", re.MULTILINE),
    re.compile(r"\n\s*\n\s*From:\s.+\n\s*(Sent|Date):\s", re.IGNORECASE),
]


def default_encoding() -> str:
    """Platform preferred encoding used for the binary HTML property."""
    return locale.getpreferredencoding(False) or "utf-8"


def strip_quoted_history(text: str) -> str:
    """
    Cut a plain-text body at the first reply/forward separator.

    Args:
        text: Plain-text body

    Returns:
        Text preceding the earliest separator, stripped
    """
    if not text:
        return ""

    cut = len(text)
    for pattern in _REPLY_SEPARATORS:
        match = pattern.search(text)
        if match and match.start() < cut:
            cut = match.start()

    return text[:cut].strip()


class BodyNormalizer:
    """
    Picks the authoritative raw body and derives the plain-text body.

    Precedence for raw_body:
        1. the binary HTML extended property, decoded
        2. the structured body text
        3. empty string

    plain_text_body is always derived from the structured body, converting
    it with the HTML converter unless it is already plain text.
    """

    def __init__(
        self,
        body: Optional[MessageBody],
        html_property: Optional[bytes],
        converter: HtmlConverter,
        encoding: Optional[str] = None,
    ):
        """
        Initialize normalizer.

        Args:
            body: Structured body from the store (None when absent)
            html_property: Binary HTML extended property (None when absent)
            converter: HTML to plain-text converter
            encoding: Encoding of html_property (default: platform preferred)
        """
        self._body = body or MessageBody()
        self._html_property = html_property
        self._converter = converter
        self._encoding = encoding or default_encoding()

    @property
    def is_html_body(self) -> bool:
        return self._body.body_type == BodyType.HTML

    @cached_property
    def raw_body(self) -> str:
        if self._html_property is not None:
            return bytes(self._html_property).decode(self._encoding, errors="replace")

        return self._body.text or ""

    @cached_property
    def plain_text_body(self) -> str:
        # The store may return None for an empty body; treat it as ""
        text = self._body.text or ""
        if self._body.body_type == BodyType.TEXT:
            return text

        return self._converter(text)

    @cached_property
    def last_message_text(self) -> str:
        return strip_quoted_history(self.plain_text_body)
