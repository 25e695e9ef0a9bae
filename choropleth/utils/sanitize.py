"""Utilities for sanitizing user-supplied data in logs."""

from typing import Optional


def sanitize_for_logging(value: Optional[str], max_length: int = 200) -> str:
    """
    Sanitize any string value for logging.

    Args:
        value: Value to sanitize
        max_length: Maximum length to return

    Returns:
        Sanitized string with control characters replaced by spaces
    """
    if value is None:
        return ""

    value_str = "".join(c if c.isprintable() else " " for c in str(value))
    if len(value_str) > max_length:
        return value_str[:max_length] + "..."

    return value_str


def sanitize_names(values, max_items: int = 5, max_length: int = 50) -> str:
    """
    Render a short, log-safe preview of a list of names.

    Args:
        values: Iterable of names
        max_items: Maximum number of names to include
        max_length: Maximum length of each name

    Returns:
        Comma-separated preview, suffixed with the number of omitted items
    """
    items = list(values)
    preview = ", ".join(sanitize_for_logging(v, max_length) for v in items[:max_items])
    if len(items) > max_items:
        preview += f" (+{len(items) - max_items} more)"
    return preview
