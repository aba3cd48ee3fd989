"""
Type coercion utilities for fleet-grid.

Used where values come from settings, query strings or spreadsheet cells
and must be read as a specific type without raising.
"""

from typing import Any


def coerce_int(value: Any, default: int = 0) -> int:
    """
    Coerce a value to an integer.

    Args:
        value: The value to coerce.
        default: Default value if coercion fails.

    Returns:
        The coerced integer or default.

    Examples:
        >>> coerce_int("42")
        42
        >>> coerce_int(None, default=10)
        10
        >>> coerce_int("invalid", default=0)
        0
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (ValueError, TypeError):
        return default


def coerce_positive_int(value: Any, default: int) -> int:
    """Like ``coerce_int`` but falls back to ``default`` for values below 1."""
    coerced = coerce_int(value, default=default)
    return coerced if coerced >= 1 else default


def coerce_bool(value: Any, default: bool = False) -> bool:
    """
    Coerce a value to a boolean.

    Spreadsheet cells arrive as real booleans, numbers or text such as
    ``"yes"``/``"oui"``.

    Examples:
        >>> coerce_bool("true")
        True
        >>> coerce_bool(1)
        True
        >>> coerce_bool(None, default=False)
        False
    """
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in ("true", "1", "yes", "y", "on", "oui", "vrai"):
            return True
        if normalized in ("false", "0", "no", "n", "off", "non", "faux"):
            return False
    return default
