"""Text helpers applied to operator-entered values before they reach SQL."""

from typing import Optional


def trim_whitespace(value: str) -> str:
    """Strip leading and trailing whitespace."""
    return value.strip()


def blank_to_none(value: Optional[str]) -> Optional[str]:
    """
    Normalise an optional field.

    Returns the trimmed text, or None when the value is missing or only
    whitespace. An empty string is never returned.
    """
    if value is None:
        return None
    value = trim_whitespace(value)
    return value or None
