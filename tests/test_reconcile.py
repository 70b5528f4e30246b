"""Tests for dataset building and reconciliation."""
import logging

import pytest
from form_schemas import FieldKind, FieldSpec
from scan_verifier.compare import ComparisonResult
from scan_verifier.reconcile import AccuracyTally, build_dataset, reconcile
from scan_verifier.scoring import RecordLengthMismatch


@pytest.fixture
def specs():
    return [
        FieldSpec(name="age", kind=FieldKind.DIGITS),
        FieldSpec(name="regCCPF", kind=FieldKind.CATEGORICAL),
    ]


class TestBuildDataset:
    def test_keys_normalized(self):
        data = build_dataset([("00123", ["a"]), (" 456 ", ["b"])])
        assert data == {"123": ["a"], "456": ["b"]}

    def test_duplicates_dropped_entirely(self):
        data = build_dataset([("00123", ["a"]), ("456", ["b"]), ("123", ["c"])])
        assert "123" not in data
        assert "00123" not in data
        assert data == {"456": ["b"]}

    def test_third_occurrence_still_dropped(self):
        data = build_dataset([("7", ["a"]), ("7", ["b"]), ("7", ["c"])])
        assert data == {}

    def test_records_without_id_ignored(self):
        data = build_dataset([(None, ["a"]), ("  ", ["b"]), ("9", ["c"])])
        assert data == {"9": ["c"]}

    def test_duplicate_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="scan_verifier.reconcile"):
            build_dataset([("5", ["a"]), ("5", ["b"])], source="ground truth")
        assert "duplicate client ID 5" in caplog.text
        assert "ground truth" in caplog.text


class TestAccuracyTally:
    def test_empty_has_every_field(self, specs):
        tally = AccuracyTally.empty(specs)
        assert list(tally.fields) == ["age", "regCCPF"]
        assert tally.overall == ComparisonResult(0, 0)

    def test_add_form(self, specs):
        tally = AccuracyTally.empty(specs)
        tally.add_form(specs, [ComparisonResult(1, 2), ComparisonResult(2, 2)])
        tally.add_form(specs, [ComparisonResult(2, 2), ComparisonResult(0, 2)])
        assert tally.get("age") == ComparisonResult(3, 4)
        assert tally.get("regCCPF") == ComparisonResult(2, 4)
        assert tally.forms_scored == 2

    def test_merge_sums_without_mutating(self):
        a = AccuracyTally(fields={"age": ComparisonResult(1, 2)}, forms_scored=1)
        b = AccuracyTally(fields={"age": ComparisonResult(2, 2), "EDD": ComparisonResult(4, 4)}, forms_scored=2)
        merged = a.merge(b)
        assert merged.fields == {"age": ComparisonResult(3, 4), "EDD": ComparisonResult(4, 4)}
        assert merged.forms_scored == 3
        assert a.fields == {"age": ComparisonResult(1, 2)}

    def test_merge_is_associative(self):
        a = AccuracyTally(fields={"age": ComparisonResult(1, 2)}, forms_scored=1)
        b = AccuracyTally(fields={"age": ComparisonResult(0, 2)}, forms_scored=1)
        c = AccuracyTally(fields={"age": ComparisonResult(2, 2)}, forms_scored=1)
        assert a.merge(b).merge(c) == a.merge(b.merge(c))

    def test_merge_with_empty_is_identity(self, specs):
        a = AccuracyTally(fields={"age": ComparisonResult(1, 2), "regCCPF": ComparisonResult(0, 0)}, forms_scored=1)
        assert a.merge(AccuracyTally.empty(specs)) == a


class TestReconcile:
    def test_identifier_sets(self, specs):
        expected = {"1": ["25", "yes"], "2": ["30", "no"]}
        actual = {"1": ["25", "yes"], "3": ["40", "no"]}
        result = reconcile(actual, expected, specs)
        assert result.matching == {"1"}
        assert result.only_expected == {"2"}
        assert result.only_actual == {"3"}
        assert result.counts() == {"matching": 1, "only_expected": 1, "only_actual": 1}

    def test_tally_sums_matched_forms(self, specs):
        expected = {"1": ["25", "yes"], "2": ["30", "no"]}
        actual = {"1": ["25", "yes"], "2": ["31", "yes"]}
        result = reconcile(actual, expected, specs)
        assert result.tally.get("age") == ComparisonResult(3, 4)
        assert result.tally.get("regCCPF") == ComparisonResult(2, 4)
        assert result.tally.forms_scored == 2

    def test_idempotent(self, specs):
        expected = {"1": ["25", "yes"], "2": ["30", "no"]}
        actual = {"1": ["26", "yes"], "2": ["30", "yes"]}
        first = reconcile(actual, expected, specs)
        second = reconcile(actual, expected, specs)
        assert first.tally == second.tally
        assert first.tally.to_dict() == second.tally.to_dict()

    def test_duplicate_ground_truth_never_matches(self, specs):
        expected = build_dataset([("00123", ["25", "yes"]), ("00123", ["26", "no"]), ("5", ["30", "no"])])
        actual = build_dataset([("123", ["25", "yes"]), ("5", ["30", "no"])])
        result = reconcile(actual, expected, specs)
        assert "123" not in result.matching
        assert "123" in result.only_actual
        assert result.matching == {"5"}
        assert result.tally.forms_scored == 1

    def test_mismatched_record_lengths_halt(self, specs):
        with pytest.raises(RecordLengthMismatch):
            reconcile({"1": ["25"]}, {"1": ["25", "yes"]}, specs)

    def test_empty_datasets(self, specs):
        result = reconcile({}, {}, specs)
        assert result.matching == set()
        assert result.tally.overall == ComparisonResult(0, 0)
