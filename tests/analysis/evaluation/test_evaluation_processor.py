"""Tests for the evaluation engine."""

import math

import pytest

from fieldscore.analysis.evaluation import evaluate
from fieldscore.core.errors import AlignmentViolation
from fieldscore.sources.records import RecordSource


def _pairs(make_record, labels: list[tuple[str, str]], file_name: str = "f1", **kwargs):
    reference = [make_record(file_name, i, ref, **kwargs) for i, (ref, _) in enumerate(labels)]
    current = [make_record(file_name, i, cur, **kwargs) for i, (_, cur) in enumerate(labels)]
    return reference, current


class TestEvaluate:
    """Tests for bucket assignment."""

    def test_shifted_label(self, make_record):
        reference, current = _pairs(make_record, [("A", "A"), ("B", ""), ("", "B")])

        report = evaluate(reference, current)

        a, b = report.buckets["A"], report.buckets["B"]
        assert a.true_positives == ("f1,0",)
        assert b.true_positives == ()
        assert b.false_negatives == ("f1,1",)
        assert b.false_positives == ("f1,2",)
        assert b.precision == 0.0
        assert b.recall == 0.0
        assert math.isnan(b.f1_score)
        assert report.imperfect == ("B",)
        assert report.perfect == ("A",)
        assert report.not_detected == ()

    def test_mismatch_counts_in_two_buckets(self, make_record):
        reference, current = _pairs(make_record, [("EMAIL", "PHONE")])

        report = evaluate(reference, current)

        assert report.buckets["EMAIL"].false_negatives == ("f1,0",)
        assert report.buckets["PHONE"].false_positives == ("f1,0",)
        assert report.not_detected == ("EMAIL",)
        assert report.imperfect == ("PHONE",)

    def test_unscored_base_type_is_counted_not_scored(self, make_record):
        reference, current = _pairs(
            make_record, [("DATE.ISO", "DATE.ISO")], base_type="LocalDate"
        )

        report = evaluate(reference, current)

        assert report.buckets == {}
        assert report.total_records == 1
        assert report.total_data_records == 1

    def test_blank_fields_are_not_data_records(self, make_record):
        reference = [
            make_record("f1", 0, type_modifier="BLANK"),
            make_record("f1", 1, type_modifier="NULL"),
            make_record("f1", 2, "EMAIL"),
        ]
        current = [make_record("f1", 0), make_record("f1", 1), make_record("f1", 2, "EMAIL")]

        report = evaluate(reference, current)

        assert report.total_records == 3
        assert report.total_data_records == 1
        assert report.identified_percentage == 100.0

    def test_key_order_within_bucket(self, make_record):
        reference, current = _pairs(make_record, [("A", ""), ("A", "A"), ("A", "")])

        report = evaluate(reference, current)

        assert report.buckets["A"].false_negatives == ("f1,0", "f1,2")

    def test_bucket_accounts_for_every_touching_pair(self, make_record):
        labels = [("A", "A"), ("A", "B"), ("B", "A"), ("", "A"), ("A", ""), ("C", "C")]
        reference, current = _pairs(make_record, labels)

        report = evaluate(reference, current)

        a = report.buckets["A"]
        touching = sum(1 for ref, cur in labels if "A" in (ref, cur))
        assert len(a.true_positives) + len(a.false_positives) + len(a.false_negatives) == touching
        assert report.true_positives == sum(1 for ref, cur in labels if ref and ref == cur)

    def test_empty_streams(self):
        report = evaluate([], [])

        assert report.buckets == {}
        assert math.isnan(report.precision)
        assert math.isnan(report.identified_percentage)


class TestOrdering:
    """Tests for report ordering."""

    def test_imperfect_worst_first(self, make_record):
        labels = [
            # GOOD: TP 3, FN 1 -> F1 0.857
            ("GOOD", "GOOD"), ("GOOD", "GOOD"), ("GOOD", "GOOD"), ("GOOD", ""),
            # BAD: TP 1, FN 2 -> F1 0.5
            ("BAD", "BAD"), ("BAD", ""), ("BAD", ""),
            # ZERO: FP only -> F1 undefined
            ("", "ZERO"),
        ]
        reference, current = _pairs(make_record, labels)

        report = evaluate(reference, current)

        assert report.imperfect == ("ZERO", "BAD", "GOOD")

    def test_ties_keep_discovery_order(self, make_record):
        reference, current = _pairs(
            make_record, [("M", "M"), ("M", ""), ("C", "C"), ("C", "")]
        )

        report = evaluate(reference, current)

        assert report.imperfect == ("M", "C")

    def test_perfect_and_not_detected_by_name(self, make_record):
        reference, current = _pairs(
            make_record, [("Z", "Z"), ("Y", ""), ("B", "B"), ("A", "")]
        )

        report = evaluate(reference, current)

        assert report.perfect == ("B", "Z")
        assert report.not_detected == ("A", "Y")


class TestAggregates:
    """Tests for report-level totals."""

    def test_not_detected_excluded_from_totals(self, make_record):
        reference, current = _pairs(
            make_record, [("A", "A"), ("A", ""), ("B", ""), ("B", ""), ("", "C")]
        )

        report = evaluate(reference, current)

        assert report.true_positives == 1
        assert report.false_positives == 1
        assert report.false_negatives == 1
        assert report.not_detected_count == 2
        assert report.precision == 0.5
        assert report.recall == 0.5
        assert report.f1_score == 0.5
        assert report.detected_types == 2

    def test_base_type_counts_and_errors(self, make_record):
        reference = [
            make_record("f1", 0, base_type="Long"),
            make_record("f1", 1, base_type="String"),
            make_record("f1", 2, base_type="Double"),
        ]
        current = [
            make_record("f1", 0, base_type="Long"),
            make_record("f1", 1, base_type="String"),
            make_record("f1", 2, base_type="Long"),
        ]

        report = evaluate(reference, current)

        assert report.base_type_counts == {"Long": 2, "String": 1}
        assert report.base_type_errors == 1
        assert report.base_type_error_percentage == pytest.approx(100 / 3)


class TestAlignment:
    """Tests for lockstep alignment checks."""

    def test_file_name_mismatch(self, make_record):
        reference = [make_record("f1", 0, "A")]
        current = [make_record("f2", 0, "A")]

        with pytest.raises(AlignmentViolation, match="FileName") as exc_info:
            evaluate(reference, current)

        assert exc_info.value.position == 1

    def test_field_offset_mismatch(self, make_record):
        reference = [make_record("f1", 0, "A"), make_record("f1", 1, "A")]
        current = [make_record("f1", 0, "A"), make_record("f1", 2, "A")]

        with pytest.raises(AlignmentViolation, match="FieldOffset") as exc_info:
            evaluate(reference, current)

        assert exc_info.value.position == 2

    def test_current_ends_early(self, make_record):
        reference, current = _pairs(make_record, [("A", "A"), ("B", "B")])

        with pytest.raises(AlignmentViolation, match="short read on current"):
            evaluate(reference, current[:1])

    def test_reference_ends_early(self, make_record):
        reference, current = _pairs(make_record, [("A", "A"), ("B", "B")])

        with pytest.raises(AlignmentViolation, match="short read on reference"):
            evaluate(reference[:1], current)

    def test_alignment_checked_outside_locale(self, make_record):
        reference = [make_record("f1", 0, "A", locale="de-DE")]
        current = [make_record("f9", 0, "A", locale="de-DE")]

        with pytest.raises(AlignmentViolation):
            evaluate(reference, current, locale="en-US")


class TestLocale:
    """Tests for locale restriction."""

    def test_only_reference_locale_is_scored(self, make_record):
        reference = [
            make_record("f1", 0, "A", locale="en-US"),
            make_record("f2", 0, "B", locale="de-DE"),
        ]
        current = [
            make_record("f1", 0, "A", locale="en-US"),
            make_record("f2", 0, "", locale="en-US"),
        ]

        report = evaluate(reference, current, locale="en-US")

        assert set(report.buckets) == {"A"}
        assert report.total_records == 1

    def test_from_files(self, write_csv, make_record):
        reference_path = write_csv(
            "reference.csv", [make_record("f1", 0, "A"), make_record("f1", 1, "B")]
        )
        current_path = write_csv(
            "current.csv", [make_record("f1", 0, "A"), make_record("f1", 1, "A")]
        )

        report = evaluate(RecordSource(reference_path), RecordSource(current_path))

        assert report.buckets["A"].false_positives == ("f1,1",)
        assert report.not_detected == ("B",)
