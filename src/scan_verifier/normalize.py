"""Client identifier normalization."""
from typing import Optional

from form_schemas.enums import DEFAULT_ID_WIDTH


def normalize_identifier(raw: Optional[str]) -> Optional[str]:
    """Canonicalize a raw client identifier for keying.

    Strips surrounding whitespace and leading zeroes, so "00123" and "123"
    key the same record. An all-zero identifier collapses to "0".

    Examples:
        "  00123 " -> "123"
        "000"      -> "0"
        None       -> None
    """
    if raw is None:
        return None
    value = raw.strip()
    if value and set(value) == {"0"}:
        return "0"
    return value.lstrip("0")


def pad_to_width(raw: Optional[str], width: int = DEFAULT_ID_WIDTH) -> Optional[str]:
    """Zero-fill a fixed-width numeric code.

    Internal spaces become zeroes and short values are left-padded. Values
    already at or above ``width`` are returned as-is, never truncated.
    """
    if raw is None:
        return None
    value = raw.strip().replace(" ", "0")
    if len(value) >= width:
        return value
    return "0" * (width - len(value)) + value
