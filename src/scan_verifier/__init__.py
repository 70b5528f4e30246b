"""Scan Verifier - Measure scanned form accuracy against verified ground truth."""
from .normalize import normalize_identifier, pad_to_width
from .compare import (
    ComparisonResult,
    compare_digits,
    compare_dates,
    compare_bubbles,
    compare_categorical,
    is_date,
)
from .classify import classify_and_score, resolve_kind
from .scoring import score_form, RecordLengthMismatch
from .reconcile import AccuracyTally, ReconciliationResult, build_dataset, reconcile
from .metrics import compute_field_accuracy, compute_category_accuracy, build_summary
from .report import AccuracyReport

__all__ = [
    "normalize_identifier",
    "pad_to_width",
    "ComparisonResult",
    "compare_digits",
    "compare_dates",
    "compare_bubbles",
    "compare_categorical",
    "is_date",
    "classify_and_score",
    "resolve_kind",
    "score_form",
    "RecordLengthMismatch",
    "AccuracyTally",
    "ReconciliationResult",
    "build_dataset",
    "reconcile",
    "compute_field_accuracy",
    "compute_category_accuracy",
    "build_summary",
    "AccuracyReport",
]
