"""Tests for the correlation engine."""

import math

import numpy as np
import pytest

from fieldscore.analysis.correlation import (
    CorrelationAccumulator,
    CorrelationModel,
    build_correlation_model,
    discover_semantic_types,
)
from fieldscore.sources.records import RecordSource


def _model(names, totals, co_occurrence) -> CorrelationModel:
    n = len(names)
    return CorrelationModel(
        semantic_types=tuple(names),
        total_matches=np.array(totals, dtype=np.int64),
        co_occurrence=np.array(co_occurrence, dtype=np.int64),
        total_distance=np.zeros((n, n), dtype=np.int64),
        direction=np.zeros((n, n), dtype=np.int64),
    )


class TestDiscovery:
    """Tests for the discovery pass."""

    def test_sorted_distinct_scored_types(self, make_record):
        records = [
            make_record("a.csv", 0, "PHONE"),
            make_record("a.csv", 1, "EMAIL"),
            make_record("b.csv", 0, "PHONE", base_type="Long"),
            make_record("b.csv", 1, ""),
            make_record("b.csv", 2, "DATE.ISO", base_type="LocalDate"),
        ]

        assert discover_semantic_types(records) == ["EMAIL", "PHONE"]

    def test_empty_stream(self):
        assert discover_semantic_types([]) == []


class TestAccumulator:
    """Tests for per-group accumulation."""

    def test_repeated_type_in_group(self):
        accumulator = CorrelationAccumulator(["X", "Y"])

        accumulator.add_group(["X", "Y", "X"])
        model = accumulator.snapshot()
        x, y = model.index_of("X"), model.index_of("Y")

        assert model.total_matches.tolist() == [2, 1]
        # X@0 sees Y@1 after it; X@2 sees Y@1 before it
        assert model.co_occurrence[x, y] == 2
        assert model.total_distance[x, y] == 2
        assert model.direction[x, y] == 0
        # Y@1 counts X once although X occurs twice
        assert model.co_occurrence[y, x] == 1
        assert model.total_distance[y, x] == 1
        assert model.direction[y, x] == 1
        # Same-type pairs are never counted
        assert model.co_occurrence[x, x] == 0

    def test_first_occurrence_sets_distance(self):
        accumulator = CorrelationAccumulator(["X", "Y"])

        accumulator.add_group(["X", "", "Y", "Y"])
        model = accumulator.snapshot()

        assert model.co_occurrence[0, 1] == 1
        assert model.total_distance[0, 1] == 2
        assert model.direction[0, 1] == -1

    def test_unlabeled_fields_only_shift_positions(self):
        accumulator = CorrelationAccumulator(["X", "Y"])

        accumulator.add_group(["", "", "Y", "", "X"])
        model = accumulator.snapshot()

        assert model.total_matches.tolist() == [1, 1]
        assert model.total_distance[0, 1] == 2
        assert model.direction[0, 1] == 1
        assert model.direction[1, 0] == -1

    def test_snapshot_is_independent(self):
        accumulator = CorrelationAccumulator(["X", "Y"])
        accumulator.add_group(["X", "Y"])
        model = accumulator.snapshot()

        accumulator.add_group(["X", "Y"])

        assert model.total_matches.tolist() == [1, 1]


class TestBuildCorrelationModel:
    """Tests for the two-pass build over a record source."""

    @pytest.fixture
    def reference(self, write_csv, make_record):
        return write_csv(
            "reference.csv",
            [
                make_record("a.csv", 0, "X"),
                make_record("a.csv", 1, "Y"),
                make_record("a.csv", 2, "X"),
                make_record("b.csv", 0, "X"),
                make_record("b.csv", 1, "Z"),
            ],
        )

    def test_trailing_group_not_accumulated_by_default(self, reference):
        model = build_correlation_model(RecordSource(reference))

        assert model.semantic_types == ("X", "Y", "Z")
        assert model.total_matches.tolist() == [2, 1, 0]
        assert model.co_occurrence[model.index_of("X"), model.index_of("Z")] == 0

    def test_trailing_group_flushed(self, reference):
        model = build_correlation_model(RecordSource(reference), flush_trailing_group=True)

        assert model.total_matches.tolist() == [3, 1, 1]
        x, y, z = (model.index_of(name) for name in ("X", "Y", "Z"))
        assert model.co_occurrence[x, y] == 2
        assert model.co_occurrence[x, z] == 1
        assert model.co_occurrence[z, x] == 1
        assert model.correlation[x, y] == pytest.approx(2 / 3)

    def test_type_never_accumulated_has_nan_correlation(self, reference):
        model = build_correlation_model(RecordSource(reference))
        z = model.index_of("Z")

        assert all(math.isnan(v) for v in model.correlation[z])
        assert model.node("Z").correlation == [None, None, None]

    def test_co_occurrence_bounded_by_total_matches(self, reference):
        model = build_correlation_model(RecordSource(reference), flush_trailing_group=True)

        assert np.all(model.co_occurrence <= model.total_matches[:, np.newaxis])
        assert np.all(np.abs(model.direction) <= model.co_occurrence)

    def test_deterministic(self, reference):
        first = build_correlation_model(RecordSource(reference), flush_trailing_group=True)
        second = build_correlation_model(RecordSource(reference), flush_trailing_group=True)

        assert first.semantic_types == second.semantic_types
        assert np.array_equal(first.co_occurrence, second.co_occurrence)
        assert np.array_equal(first.total_distance, second.total_distance)
        assert np.array_equal(first.direction, second.direction)

    def test_locale_restricts_records(self, write_csv, make_record):
        path = write_csv(
            "reference.csv",
            [
                make_record("a.csv", 0, "X"),
                make_record("a.csv", 1, "Y"),
                make_record("b.csv", 0, "W", locale="de-DE"),
            ],
        )

        model = build_correlation_model(
            RecordSource(path, locale="en-US"), flush_trailing_group=True, locale="en-US"
        )

        assert model.semantic_types == ("X", "Y")
        assert model.locale == "en-US"

    def test_empty_source(self, write_csv):
        model = build_correlation_model(RecordSource(write_csv("empty.csv", [])))

        assert model.size == 0
        assert model.nodes() == []

    def test_rejects_one_shot_iterator(self, make_record):
        records = iter([make_record("a.csv", 0, "X")])

        with pytest.raises(TypeError, match="re-iterable"):
            build_correlation_model(records)

    def test_accepts_list(self, make_record):
        records = [make_record("a.csv", 0, "X"), make_record("a.csv", 1, "Y")]

        model = build_correlation_model(records, flush_trailing_group=True)

        assert model.co_occurrence.tolist() == [[0, 1], [1, 0]]


class TestSignificance:
    """Tests for the significance gate."""

    def test_needs_min_matches_on_both_sides(self):
        # A correlates with C (both frequent); C correlates only with rare B
        model = _model(
            ["A", "B", "C"],
            totals=[20, 5, 10],
            co_occurrence=[[0, 0, 10], [0, 0, 5], [0, 6, 0]],
        )

        assert model.is_significant("A")
        assert not model.is_significant("B")
        assert not model.is_significant("C")
        assert model.significant_types() == ["A"]

    def test_thresholds(self):
        model = _model(["A", "B"], totals=[10, 10], co_occurrence=[[0, 1], [0, 0]])

        # 10 matches is enough; a correlation of exactly 0.1 is not
        assert not model.is_significant("A")
        assert model.is_significant("A", min_correlation=0.05)
        assert not model.is_significant("A", min_matches=11, min_correlation=0.05)

    def test_unmatched_type_is_not_significant(self):
        model = _model(["A", "B"], totals=[0, 12], co_occurrence=[[0, 0], [0, 0]])

        assert not model.is_significant("A", min_matches=0)

    def test_unknown_type(self):
        model = _model(["A"], totals=[1], co_occurrence=[[0]])

        with pytest.raises(KeyError):
            model.is_significant("B")


class TestNodes:
    """Tests for the node table view."""

    def test_node_fields(self):
        accumulator = CorrelationAccumulator(["X", "Y"])
        accumulator.add_group(["X", "Y", "X"])
        node = accumulator.snapshot().node("Y")

        assert node.index == 1
        assert node.total_matches == 1
        assert node.correlation_count == [1, 0]
        assert node.correlation == [1.0, 0.0]
        assert node.direction == [1, 0]
        assert node.total_distance == [1, 0]

    def test_serialized_with_camel_case_keys(self):
        accumulator = CorrelationAccumulator(["X"])
        accumulator.add_group(["X"])

        payload = accumulator.snapshot().node("X").model_dump(by_alias=True)

        assert set(payload) == {
            "semanticType",
            "index",
            "totalMatches",
            "correlationCount",
            "correlation",
            "direction",
            "totalDistance",
        }
