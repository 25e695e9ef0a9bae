"""Shared validation functions for request models."""

from typing import Dict, List

from choropleth.colors.schemes import normalize_color
from choropleth.exceptions import InvalidColorError


def validate_column_name(name: str) -> str:
    """
    Validate and normalize a selected column name.

    Args:
        name: Column name string

    Returns:
        Trimmed column name

    Raises:
        ValueError: If name is empty or too long
    """
    if not name or not name.strip():
        raise ValueError("Column name cannot be empty")

    normalized = name.strip()
    if len(normalized) > 255:
        raise ValueError("Column name too long (max 255 characters)")

    return normalized


def validate_color_list(colors: List[str]) -> List[str]:
    """
    Validate and normalize a list of anchor colors.

    Args:
        colors: Color strings in any CSS syntax

    Returns:
        Colors as ``#rrggbb`` hex

    Raises:
        ValueError: If there are fewer than 2 colors or any color is invalid
    """
    if len(colors) < 2:
        raise ValueError("At least 2 colors are required")

    if len(colors) > 32:
        raise ValueError("Too many colors (max 32)")

    normalized = []
    for color in colors:
        try:
            normalized.append(normalize_color(color))
        except InvalidColorError as e:
            raise ValueError(str(e)) from e
    return normalized


def validate_breaks(breaks: List[float]) -> List[float]:
    """
    Validate manual break points.

    Raises:
        ValueError: If there are fewer than 2 breaks or they decrease
    """
    if len(breaks) < 2:
        raise ValueError("At least 2 break points are required")

    if any(later < earlier for earlier, later in zip(breaks, breaks[1:])):
        raise ValueError("Break points must be non-decreasing")

    return breaks


def validate_aliases(aliases: Dict[str, str]) -> Dict[str, str]:
    """
    Validate and normalize an alias table.

    Raises:
        ValueError: If an alias or target is empty
    """
    normalized = {}
    for alias, target in aliases.items():
        if not alias or not alias.strip() or not target or not target.strip():
            raise ValueError("Aliases and their targets cannot be empty")
        normalized[alias.strip()] = target.strip()
    return normalized
