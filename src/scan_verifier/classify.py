"""Choose and apply the comparison rule for one field value."""
import logging
from typing import Optional

from form_schemas.enums import DEGENERATE_VALUES, FieldKind
from form_schemas.form_config import FieldSpec

from .compare import (
    SKIPPED,
    ComparisonResult,
    compare_bubbles,
    compare_categorical,
    compare_dates,
    compare_digits,
    is_date,
)
from .normalize import pad_to_width

logger = logging.getLogger(__name__)


def is_degenerate(value: Optional[str]) -> bool:
    """True for values recorded as absent or not applicable."""
    if value is None:
        return True
    return value.strip().lower() in DEGENERATE_VALUES


def has_digit(value: str) -> bool:
    return any("0" <= ch <= "9" for ch in value)


def resolve_kind(expected: str, field_spec: Optional[FieldSpec] = None) -> FieldKind:
    """Pick the comparison rule for a field.

    A kind declared in configuration wins, except that a digits field whose
    expected value holds no digit ("no", "unknown") is scored as a
    categorical answer. Otherwise the expected value is inspected: date
    shape first, then bubble options, then any digit, falling back to a
    categorical answer.
    """
    if field_spec is not None and field_spec.kind is not None:
        if field_spec.kind == FieldKind.DIGITS and not has_digit(expected):
            return FieldKind.CATEGORICAL
        return field_spec.kind
    if is_date(expected):
        return FieldKind.DATE
    if field_spec is not None and field_spec.is_bubble:
        return FieldKind.BUBBLE
    if has_digit(expected):
        return FieldKind.DIGITS
    return FieldKind.CATEGORICAL


def classify_and_score(
    actual: Optional[str],
    expected: Optional[str],
    field_spec: Optional[FieldSpec] = None,
) -> ComparisonResult:
    """Compare one actual value against its expected value.

    Args:
        actual: Value read by the scanner
        expected: Ground truth value
        field_spec: Field metadata, or None to decide purely from the value

    Returns:
        ComparisonResult; (0, 0) when the expected value is degenerate
    """
    if actual is None or is_degenerate(expected):
        return SKIPPED

    actual = actual.strip()
    expected = expected.strip()

    # Kind is decided before padding, which would add zeros to any value
    kind = resolve_kind(expected, field_spec)

    if field_spec is not None and field_spec.pad_width:
        actual = pad_to_width(actual, field_spec.pad_width)
        expected = pad_to_width(expected, field_spec.pad_width)

    if kind == FieldKind.DATE:
        if not is_date(expected):
            logger.debug(f"Expected value {expected!r} is not a date; skipping")
            return SKIPPED
        if not is_date(actual):
            logger.debug(f"Actual value {actual!r} is not a date; skipping")
        return compare_dates(actual, expected)
    if kind == FieldKind.BUBBLE:
        return compare_bubbles(actual, expected, field_spec.options)
    if kind == FieldKind.DIGITS:
        return compare_digits(actual, expected)
    return compare_categorical(actual, expected)
