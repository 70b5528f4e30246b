"""Unit comparators for scanned form fields.

Each comparator returns a ComparisonResult counting how many comparable
units (digits, bubbles, answers) matched and how many were compared. A
result with ``total == 0`` means nothing was scorable; it is neither right
nor wrong.
"""
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from form_schemas.enums import CATEGORICAL_WEIGHT
from form_schemas.form_config import BubbleOption


@dataclass(frozen=True)
class ComparisonResult:
    """Correct/total units for one field (or a sum of many)."""
    correct: int = 0
    total: int = 0

    def __add__(self, other: "ComparisonResult") -> "ComparisonResult":
        return ComparisonResult(self.correct + other.correct, self.total + other.total)

    @property
    def skipped(self) -> bool:
        return self.total == 0

    @property
    def is_perfect(self) -> bool:
        return self.correct == self.total

    @property
    def percentage(self) -> Optional[float]:
        if self.total == 0:
            return None
        return self.correct * 100.0 / self.total

    def to_dict(self) -> dict:
        return {"correct": self.correct, "total": self.total}

    @classmethod
    def combine(cls, results: Iterable["ComparisonResult"]) -> "ComparisonResult":
        """Component-wise sum of any number of results."""
        combined = cls()
        for result in results:
            combined = combined + result
        return combined


SKIPPED = ComparisonResult(0, 0)


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def compare_digits(actual: str, expected: str) -> ComparisonResult:
    """Compare two digit strings aligned on their right ends.

    Positions where the expected string holds a non-digit (separators,
    spaces) are skipped on both sides. Extra characters on the left of the
    longer string are never visited, so a misread leading digit does not
    shift every other digit into a mismatch.

    Examples:
        compare_digits("1/2/345", "1-2-345")  -> 5/5 (separators not counted)
        compare_digits("12345", "1-2-345")    -> 3/4 (actual exhausted first)
        compare_digits("9912345", "12345")    -> 5/5
        compare_digits("12045", "12345")      -> 4/5
    """
    correct = 0
    total = 0
    a = len(actual) - 1
    e = len(expected) - 1
    while a >= 0 and e >= 0:
        if _is_digit(expected[e]):
            total += 1
            if actual[a] == expected[e]:
                correct += 1
        a -= 1
        e -= 1
    return ComparisonResult(correct, total)


def is_date(value: Optional[str]) -> bool:
    """True if value looks like d/m/y with 1-4 digits (or spaces) per part."""
    if value is None or len(value) <= 2:
        return False
    parts = value.split("/")
    if len(parts) != 3:
        return False
    for part in parts:
        if not 1 <= len(part) <= 4:
            return False
        if any(ch != " " and not _is_digit(ch) for ch in part):
            return False
    return True


def _year_tail(segment: str) -> str:
    # Years were recorded as both "15" and "2015"
    return segment[2:] if len(segment) == 4 else segment


def compare_dates(actual: str, expected: str) -> ComparisonResult:
    """Compare day, month and year segments digit by digit.

    An actual value that is not a date is left unscored rather than
    penalized.
    """
    if not (is_date(actual) and is_date(expected)):
        return SKIPPED
    actual_parts = actual.split("/")
    expected_parts = expected.split("/")
    actual_parts[2] = _year_tail(actual_parts[2])
    expected_parts[2] = _year_tail(expected_parts[2])
    return ComparisonResult.combine(
        compare_digits(a, e) for a, e in zip(actual_parts, expected_parts)
    )


def compare_bubbles(actual: str, expected: str, options: Sequence[BubbleOption]) -> ComparisonResult:
    """Score a multi-select field one bubble at a time.

    The ground truth lists selected codes ("3,6"); the scanner emits the
    concatenated labels of the bubbles it saw filled. Every option counts,
    so a missed bubble and a spurious one cost the same.
    """
    selected_codes = [code.strip() for code in expected.split(",")]
    correct = 0
    for option in options:
        expected_selected = option.code in selected_codes
        actual_selected = option.label in actual
        if expected_selected == actual_selected:
            correct += 1
    return ComparisonResult(correct, len(options))


def compare_categorical(actual: str, expected: str) -> ComparisonResult:
    """Exact match on a short answer such as yes/no."""
    if actual.strip() == expected.strip():
        return ComparisonResult(CATEGORICAL_WEIGHT, CATEGORICAL_WEIGHT)
    return ComparisonResult(0, CATEGORICAL_WEIGHT)
