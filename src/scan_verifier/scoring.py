"""Form-level scoring: every field of one scanned form."""
import logging
from typing import List, Optional, Sequence

from form_schemas.form_config import FieldSpec

from .classify import classify_and_score
from .compare import SKIPPED, ComparisonResult

logger = logging.getLogger(__name__)


class RecordLengthMismatch(ValueError):
    """Actual, expected and field spec sequences do not line up."""


def score_form(
    actual_record: Sequence[Optional[str]],
    expected_record: Sequence[Optional[str]],
    field_specs: Sequence[FieldSpec],
    client_id: Optional[str] = None,
) -> List[ComparisonResult]:
    """
    Score each field of one form.

    Index i of each sequence must describe the same field. A field whose
    actual or expected value is missing scores (0, 0).

    Args:
        actual_record: Values the scanner produced
        expected_record: Verified values from the ground truth
        field_specs: Metadata for every field, in record order
        client_id: Optional identifier used in log messages

    Returns:
        One ComparisonResult per field

    Raises:
        RecordLengthMismatch: if the three sequences differ in length
    """
    if not (len(actual_record) == len(expected_record) == len(field_specs)):
        raise RecordLengthMismatch(
            f"client {client_id}: {len(actual_record)} actual values, "
            f"{len(expected_record)} expected values, {len(field_specs)} fields"
        )

    results = []
    for spec, actual, expected in zip(field_specs, actual_record, expected_record):
        if actual is None or expected is None:
            results.append(SKIPPED)
            continue

        result = classify_and_score(actual, expected, spec)
        if not result.is_perfect:
            prefix = f"Client {client_id} " if client_id is not None else ""
            logger.info(
                f"{prefix}{spec.name}: actual = {actual!r}, expected = {expected!r} "
                f"({result.correct}/{result.total} correct)"
            )
        results.append(result)

    return results
