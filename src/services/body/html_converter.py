"""HTML to plain-text conversion."""

from typing import Protocol

import html2text


class HtmlConverter(Protocol):
    """Pure function turning an HTML document into plain text."""

    def __call__(self, html: str) -> str: ...


class Html2TextConverter:
    """HtmlConverter backed by html2text."""

    def __init__(self, body_width: int = 0, ignore_links: bool = False, ignore_images: bool = True):
        """
        Initialize converter.

        Args:
            body_width: Wrap column, 0 disables wrapping
            ignore_links: Drop link targets from the output
            ignore_images: Drop image references from the output
        """
        self.body_width = body_width
        self.ignore_links = ignore_links
        self.ignore_images = ignore_images

    @classmethod
    def from_config(cls, config) -> "Html2TextConverter":
        """Build a converter from an HtmlConversionConfig."""
        return cls(
            body_width=config.body_width,
            ignore_links=config.ignore_links,
            ignore_images=config.ignore_images,
        )

    def __call__(self, html: str) -> str:
        if not html:
            return ""

        # HTML2Text keeps state between handle() calls
        h = html2text.HTML2Text()
        h.body_width = self.body_width
        h.ignore_links = self.ignore_links
        h.ignore_images = self.ignore_images
        return h.handle(html).strip()
