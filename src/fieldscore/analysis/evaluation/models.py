"""Result models for detection-quality evaluation.

Ratios follow IEEE semantics: 0/0 is NaN, never an exception.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum


class BucketCategory(str, Enum):
    """How well the detector handled a semantic type."""

    PERFECT = "perfect"  # precision = recall = 1
    IMPERFECT = "imperfect"
    NOT_DETECTED = "not_detected"  # never predicted: no TP, no FP


def ratio(numerator: int, denominator: int) -> float:
    """numerator / denominator, NaN when the denominator is zero."""
    if denominator == 0:
        return math.nan
    return numerator / denominator


def f1_score(precision: float, recall: float) -> float:
    """Harmonic mean of precision and recall, NaN when undefined."""
    denominator = precision + recall
    if math.isnan(denominator) or denominator == 0:
        return math.nan
    return 2 * precision * recall / denominator


@dataclass(frozen=True)
class EvaluationBucket:
    """Outcome keys and scores for one semantic type.

    Keys are "<file name>,<field offset>" in stream order.
    """

    semantic_type: str
    true_positives: tuple[str, ...] = ()
    false_positives: tuple[str, ...] = ()
    false_negatives: tuple[str, ...] = ()
    true_negatives: tuple[str, ...] = ()

    @property
    def precision(self) -> float:
        tp = len(self.true_positives)
        return ratio(tp, tp + len(self.false_positives))

    @property
    def recall(self) -> float:
        tp = len(self.true_positives)
        return ratio(tp, tp + len(self.false_negatives))

    @property
    def f1_score(self) -> float:
        return f1_score(self.precision, self.recall)

    @property
    def category(self) -> BucketCategory:
        if not self.true_positives and not self.false_positives:
            return BucketCategory.NOT_DETECTED
        if self.precision == 1.0 and self.recall == 1.0:
            return BucketCategory.PERFECT
        return BucketCategory.IMPERFECT

    def to_dict(self) -> dict[str, object]:
        """Serialize with NaN as None."""
        return {
            "semantic_type": self.semantic_type,
            "category": self.category.value,
            "precision": _finite(self.precision),
            "recall": _finite(self.recall),
            "f1_score": _finite(self.f1_score),
            "true_positives": list(self.true_positives),
            "false_positives": list(self.false_positives),
            "false_negatives": list(self.false_negatives),
        }


def _finite(value: float) -> float | None:
    return None if math.isnan(value) else value


@dataclass(frozen=True)
class EvaluationReport:
    """Scorecard for one synchronized pass over reference and current streams."""

    buckets: dict[str, EvaluationBucket]
    imperfect: tuple[str, ...]  # worst F1 first
    perfect: tuple[str, ...]  # by name
    not_detected: tuple[str, ...]  # by name

    total_records: int = 0
    total_data_records: int = 0
    base_type_counts: dict[str, int] = field(default_factory=dict)
    base_type_errors: int = 0

    def _scored(self) -> list[EvaluationBucket]:
        return [self.buckets[name] for name in (*self.imperfect, *self.perfect)]

    @property
    def true_positives(self) -> int:
        return sum(len(b.true_positives) for b in self._scored())

    @property
    def false_positives(self) -> int:
        return sum(len(b.false_positives) for b in self._scored())

    @property
    def false_negatives(self) -> int:
        return sum(len(b.false_negatives) for b in self._scored())

    @property
    def not_detected_count(self) -> int:
        """False negatives of types the detector never predicted."""
        return sum(len(self.buckets[name].false_negatives) for name in self.not_detected)

    @property
    def detected_types(self) -> int:
        return len(self.buckets) - len(self.not_detected)

    @property
    def precision(self) -> float:
        return ratio(self.true_positives, self.true_positives + self.false_positives)

    @property
    def recall(self) -> float:
        return ratio(self.true_positives, self.true_positives + self.false_negatives)

    @property
    def f1_score(self) -> float:
        return f1_score(self.precision, self.recall)

    @property
    def identified_percentage(self) -> float:
        """Share of data-bearing fields carrying a reference semantic type, in percent."""
        return ratio((self.true_positives + self.false_negatives) * 100, self.total_data_records)

    @property
    def base_type_error_percentage(self) -> float:
        return ratio(self.base_type_errors * 100, sum(self.base_type_counts.values()))

    def to_dict(self, semantic_type: str | None = None) -> dict[str, object]:
        """Serialize for JSON output.

        Args:
            semantic_type: Keep only this type's bucket and drop the summary
        """

        def selected(names: tuple[str, ...]) -> list[dict[str, object]]:
            return [
                self.buckets[name].to_dict()
                for name in names
                if not semantic_type or name == semantic_type
            ]

        data: dict[str, object] = {
            "imperfect": selected(self.imperfect),
            "perfect": selected(self.perfect),
            "not_detected": selected(self.not_detected),
        }
        if not semantic_type:
            data["summary"] = {
                "semantic_types": self.detected_types,
                "precision": _finite(self.precision),
                "recall": _finite(self.recall),
                "f1_score": _finite(self.f1_score),
                "true_positives": self.true_positives,
                "false_positives": self.false_positives,
                "false_negatives": self.false_negatives,
                "not_detected": self.not_detected_count,
                "total_records": self.total_records,
                "total_data_records": self.total_data_records,
                "identified_percentage": _finite(self.identified_percentage),
            }
        data["base_types"] = {
            "counts": dict(self.base_type_counts),
            "errors": self.base_type_errors,
        }
        return data
