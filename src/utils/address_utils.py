"""Email address helpers."""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class InvalidArgumentError(ValueError):
    """Raised when an address argument is empty or missing."""

    pass


def alias_from_address(address: Optional[str]) -> str:
    """
    Extract the alias (local part) from an email address.

    Args:
        address: Email address such as "jdoe@example.com"

    Returns:
        Text before the first "@", or the address unchanged when that
        text is empty or the address has no "@" at all

    Raises:
        InvalidArgumentError: If address is None or empty

    Examples:
        >>> alias_from_address("jdoe@example.com")
        'jdoe'
        >>> alias_from_address("@example.com")
        '@example.com'
    """
    if not address:
        logger.error("Can't get alias from empty address")
        raise InvalidArgumentError("Can't extract alias from empty address")

    logger.debug("address=%s", address)
    alias, sep, _ = address.partition("@")

    if not sep or not alias:
        logger.warning("Address %r has no usable local part, using it as alias", address)
        return address

    return alias
