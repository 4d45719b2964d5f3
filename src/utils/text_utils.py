"""Text helpers for message summaries."""


def truncate_subject(subject: str | None, max_length: int = 50) -> str:
    """
    Truncate subject to max_length with '...' if needed.

    Args:
        subject: Subject line text
        max_length: Maximum length (default 50)

    Returns:
        Truncated subject with ellipsis if needed
    """
    if not subject:
        return ""

    if len(subject) <= max_length:
        return subject

    return subject[: max_length - 3] + "..."
