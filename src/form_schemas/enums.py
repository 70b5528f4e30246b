"""Shared enums and constants for form field configuration."""
from enum import Enum


class FieldKind(str, Enum):
    """Comparison rule applied to a form field."""
    DIGITS = "digits"
    DATE = "date"
    BUBBLE = "bubble"          # multi-select, scored per option
    CATEGORICAL = "categorical"  # yes/no and other short answers


class FieldCategory(str, Enum):
    """Report grouping for field subtotals."""
    DIGIT = "digit"
    BUBBLE = "bubble"


# Expected values that mean "not applicable" and are never scored
DEGENERATE_VALUES = ("", "null", "inconclusive")

# Weight of a categorical answer, comparable to a two-digit field
CATEGORICAL_WEIGHT = 2

DEFAULT_ID_WIDTH = 5
