"""Message body services."""

from .html_converter import Html2TextConverter, HtmlConverter
from .normalizer import BodyNormalizer, default_encoding, strip_quoted_history

__all__ = [
    "BodyNormalizer",
    "Html2TextConverter",
    "HtmlConverter",
    "default_encoding",
    "strip_quoted_history",
]
