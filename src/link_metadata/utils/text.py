"""Text shaping helpers for titles and descriptions."""

ELLIPSIS = "..."


def clip(text: str | None, max_length: int) -> str:
    """
    Trim surrounding whitespace, then hard-truncate.

    Args:
        text: Text to clip (None is treated as empty)
        max_length: Maximum characters to keep

    Returns:
        At most ``max_length`` characters
    """
    if not text:
        return ""
    return text.strip()[:max_length]


def short_title(title: str | None, length: int = 50) -> str:
    """Shorten a title to ``length`` characters, ellipsis included."""
    if not title:
        return ""
    if len(title) <= length:
        return title
    return title[: max(0, length - len(ELLIPSIS))] + ELLIPSIS


def short_description(description: str | None, length: int = 100) -> str:
    """Trimmed description cut to ``length`` characters plus an ellipsis."""
    if not description:
        return ""
    desc = description.strip()
    if len(desc) <= length:
        return desc
    return desc[:length] + ELLIPSIS
