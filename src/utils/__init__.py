"""Utility functions"""

from .address_utils import InvalidArgumentError, alias_from_address
from .text_utils import truncate_subject

__all__ = ["InvalidArgumentError", "alias_from_address", "truncate_subject"]
