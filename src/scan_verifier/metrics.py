"""Per-field, per-category and overall accuracy from a tally."""
from typing import Any, Dict, List, Optional, Sequence

from form_schemas.enums import FieldCategory
from form_schemas.form_config import FieldSpec

from .compare import ComparisonResult
from .reconcile import AccuracyTally, ReconciliationResult


def _entry(result: ComparisonResult) -> Dict[str, Any]:
    return {
        "correct": result.correct,
        "total": result.total,
        "percentage": result.percentage,
    }


def compute_field_accuracy(tally: AccuracyTally, field_specs: Sequence[FieldSpec]) -> List[Dict[str, Any]]:
    """
    Compute accuracy for every configured field.

    Args:
        tally: Accumulated results
        field_specs: Field metadata in report order

    Returns:
        List of dicts with index, name, category, correct, total and
        percentage (None when nothing was scored for the field)
    """
    rows = []
    for index, spec in enumerate(field_specs):
        row = {"index": index, "name": spec.name, "category": spec.report_category.value}
        row.update(_entry(tally.get(spec.name)))
        rows.append(row)
    return rows


def compute_category_accuracy(tally: AccuracyTally, field_specs: Sequence[FieldSpec]) -> Dict[str, Dict[str, Any]]:
    """
    Sum fields by report category (digit vs. bubble).

    Returns:
        Dict mapping category name to correct, total, percentage and the
        names of its fields. Every category appears, even when empty.
    """
    sums = {category.value: ComparisonResult() for category in FieldCategory}
    members: Dict[str, List[str]] = {category.value: [] for category in FieldCategory}

    for spec in field_specs:
        category = spec.report_category.value
        sums[category] = sums[category] + tally.get(spec.name)
        members[category].append(spec.name)

    result = {}
    for category, total in sums.items():
        entry = _entry(total)
        entry["fields"] = members[category]
        result[category] = entry
    return result


def compute_overall_accuracy(tally: AccuracyTally, field_specs: Optional[Sequence[FieldSpec]] = None) -> Dict[str, Any]:
    """Accuracy over all fields (restricted to field_specs when given)."""
    if field_specs is None:
        return _entry(tally.overall)
    return _entry(ComparisonResult.combine(tally.get(spec.name) for spec in field_specs))


def build_summary(result: ReconciliationResult, field_specs: Sequence[FieldSpec]) -> Dict[str, Any]:
    """
    Assemble a JSON-serializable summary of one run.

    Returns:
        Dict with fields, categories, overall accuracy, forms scored and
        reconciliation counts and identifiers
    """
    return {
        "fields": compute_field_accuracy(result.tally, field_specs),
        "categories": compute_category_accuracy(result.tally, field_specs),
        "overall": compute_overall_accuracy(result.tally, field_specs),
        "forms_scored": result.tally.forms_scored,
        "reconciliation": {
            "counts": result.counts(),
            "matching": sorted(result.matching),
            "only_expected": sorted(result.only_expected),
            "only_actual": sorted(result.only_actual),
        },
    }
