"""Attachment services."""

from .classifier import AttachmentClassifier

__all__ = ["AttachmentClassifier"]
