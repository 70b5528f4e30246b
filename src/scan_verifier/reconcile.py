"""Match ground truth to scanner output by client identifier and tally accuracy."""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from form_schemas.form_config import FieldSpec

from .compare import ComparisonResult
from .normalize import normalize_identifier
from .scoring import score_form

logger = logging.getLogger(__name__)

FormRecord = List[Optional[str]]
Dataset = Dict[str, FormRecord]


def build_dataset(
    rows: Iterable[Tuple[Optional[str], FormRecord]],
    source: str = "dataset",
) -> Dataset:
    """
    Key records by normalized client identifier.

    Identifiers seen more than once are dropped entirely, including the
    first occurrence, so an ambiguous form is never scored against the
    wrong record. Rows without an identifier are ignored.

    Args:
        rows: (raw identifier, record) pairs
        source: Name used in log messages

    Returns:
        Dict mapping identifier to record
    """
    data: Dataset = {}
    duplicates: Set[str] = set()

    for raw_id, record in rows:
        client_id = normalize_identifier(raw_id)
        if not client_id:
            logger.debug(f"{source}: skipping record without a client ID")
            continue
        if client_id in duplicates:
            continue
        if client_id in data:
            logger.warning(f"{source}: duplicate client ID {client_id}, dropping all records for it")
            del data[client_id]
            duplicates.add(client_id)
            continue
        data[client_id] = list(record)

    return data


@dataclass
class AccuracyTally:
    """Per-field correct/total sums across every scored form.

    ``fields`` maps field name to its running ComparisonResult, in field
    order. Tallies from independent runs combine with ``merge``.
    """
    fields: Dict[str, ComparisonResult] = field(default_factory=dict)
    forms_scored: int = 0

    @classmethod
    def empty(cls, field_specs: Sequence[FieldSpec]) -> "AccuracyTally":
        return cls(fields={spec.name: ComparisonResult() for spec in field_specs})

    def add_form(self, field_specs: Sequence[FieldSpec], results: Sequence[ComparisonResult]) -> None:
        """Fold one form's per-field results into the tally."""
        for spec, result in zip(field_specs, results):
            self.fields[spec.name] = self.fields.get(spec.name, ComparisonResult()) + result
        self.forms_scored += 1

    def merge(self, other: "AccuracyTally") -> "AccuracyTally":
        """Return a new tally holding the component-wise sum of both."""
        merged = dict(self.fields)
        for name, result in other.fields.items():
            merged[name] = merged.get(name, ComparisonResult()) + result
        return AccuracyTally(fields=merged, forms_scored=self.forms_scored + other.forms_scored)

    def get(self, name: str) -> ComparisonResult:
        return self.fields.get(name, ComparisonResult())

    @property
    def overall(self) -> ComparisonResult:
        return ComparisonResult.combine(self.fields.values())

    def to_dict(self) -> Dict[str, Dict[str, int]]:
        return {name: result.to_dict() for name, result in self.fields.items()}


@dataclass
class ReconciliationResult:
    """Outcome of one reconciliation sweep."""
    tally: AccuracyTally
    matching: Set[str] = field(default_factory=set)
    only_expected: Set[str] = field(default_factory=set)
    only_actual: Set[str] = field(default_factory=set)

    def counts(self) -> Dict[str, int]:
        return {
            "matching": len(self.matching),
            "only_expected": len(self.only_expected),
            "only_actual": len(self.only_actual),
        }


def reconcile(
    actual_dataset: Mapping[str, FormRecord],
    expected_dataset: Mapping[str, FormRecord],
    field_specs: Sequence[FieldSpec],
) -> ReconciliationResult:
    """
    Score every form present in both datasets.

    Each matched identifier is scored exactly once. Identifiers found on only
    one side are reported, not scored.

    Args:
        actual_dataset: Scanner output keyed by client identifier
        expected_dataset: Ground truth keyed by client identifier
        field_specs: Field metadata in record order

    Returns:
        ReconciliationResult with the accuracy tally and identifier sets
    """
    tally = AccuracyTally.empty(field_specs)
    matching: Set[str] = set()
    only_expected: Set[str] = set()

    for client_id in sorted(expected_dataset):
        actual_record = actual_dataset.get(client_id)
        if actual_record is None:
            logger.debug(f"Client ID {client_id} only found in ground truth")
            only_expected.add(client_id)
            continue
        results = score_form(actual_record, expected_dataset[client_id], field_specs, client_id=client_id)
        tally.add_form(field_specs, results)
        matching.add(client_id)

    only_actual = set(actual_dataset) - set(expected_dataset)
    for client_id in sorted(only_actual):
        logger.debug(f"Client ID {client_id} only found in scan output")

    return ReconciliationResult(
        tally=tally,
        matching=matching,
        only_expected=only_expected,
        only_actual=only_actual,
    )
