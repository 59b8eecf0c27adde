"""Evaluation Engine - one lockstep pass over reference and current streams.

The two streams are two labelings of the same ordered field list. Pairs are
matched by position and checked by key; they are never joined.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from itertools import zip_longest

from fieldscore.analysis.evaluation.models import (
    BucketCategory,
    EvaluationBucket,
    EvaluationReport,
)
from fieldscore.core.errors import AlignmentViolation
from fieldscore.core.logging import ScanMetrics, get_logger, log_context
from fieldscore.core.models import ClassificationRecord

logger = get_logger(__name__)


@dataclass
class _Tally:
    """Mutable outcome lists for one semantic type while scanning."""

    semantic_type: str
    true_positives: list[str] = field(default_factory=list)
    false_positives: list[str] = field(default_factory=list)
    false_negatives: list[str] = field(default_factory=list)
    true_negatives: list[str] = field(default_factory=list)

    def freeze(self) -> EvaluationBucket:
        return EvaluationBucket(
            semantic_type=self.semantic_type,
            true_positives=tuple(self.true_positives),
            false_positives=tuple(self.false_positives),
            false_negatives=tuple(self.false_negatives),
            true_negatives=tuple(self.true_negatives),
        )


class _Scorecard:
    """Owns the per-type tallies and counters of one run."""

    def __init__(self) -> None:
        self.tallies: dict[str, _Tally] = {}
        self.total_records = 0
        self.total_data_records = 0
        self.base_type_counts: dict[str, int] = {}
        self.base_type_errors = 0

    def _tally(self, semantic_type: str) -> _Tally:
        if semantic_type not in self.tallies:
            self.tallies[semantic_type] = _Tally(semantic_type)
        return self.tallies[semantic_type]

    def add_pair(self, ref: ClassificationRecord, cur: ClassificationRecord) -> None:
        self.total_records += 1
        if ref.has_data:
            self.total_data_records += 1

        self.base_type_counts[cur.base_type] = self.base_type_counts.get(cur.base_type, 0) + 1
        if ref.base_type != cur.base_type:
            self.base_type_errors += 1
            logger.debug(
                "base_type_mismatch",
                key=ref.key,
                field_name=ref.field_name,
                reference=ref.base_type,
                current=cur.base_type,
            )

        expected, detected = ref.semantic_type, cur.semantic_type
        if not ref.is_scored or not (expected or detected):
            return

        key = ref.key
        if expected == detected:
            self._tally(expected).true_positives.append(key)
        elif not detected:
            self._tally(expected).false_negatives.append(key)
        elif not expected:
            self._tally(detected).false_positives.append(key)
        else:
            self._tally(expected).false_negatives.append(key)
            self._tally(detected).false_positives.append(key)

    def finalize(self) -> EvaluationReport:
        buckets = {name: tally.freeze() for name, tally in self.tallies.items()}

        imperfect: list[str] = []
        perfect: list[str] = []
        not_detected: list[str] = []
        for name, bucket in buckets.items():
            category = bucket.category
            if category is BucketCategory.NOT_DETECTED:
                not_detected.append(name)
            elif category is BucketCategory.PERFECT:
                perfect.append(name)
            else:
                imperfect.append(name)

        return EvaluationReport(
            buckets=buckets,
            imperfect=tuple(sorted(imperfect, key=lambda name: _worst_first(buckets[name]))),
            perfect=tuple(sorted(perfect)),
            not_detected=tuple(sorted(not_detected)),
            total_records=self.total_records,
            total_data_records=self.total_data_records,
            base_type_counts=dict(self.base_type_counts),
            base_type_errors=self.base_type_errors,
        )


def _worst_first(bucket: EvaluationBucket) -> tuple[int, float]:
    # An undefined F1 ranks below every defined one
    f1 = bucket.f1_score
    if math.isnan(f1):
        return (0, 0.0)
    return (1, f1)


_END = object()


def evaluate(
    reference: Iterable[ClassificationRecord],
    current: Iterable[ClassificationRecord],
    *,
    locale: str = "",
) -> EvaluationReport:
    """Score the current labeling against the reference labeling.

    Args:
        reference: Trusted classifications, unfiltered
        current: Classifications under test, same rows in the same order
        locale: Only score pairs whose reference locale matches ("" = all)

    Returns:
        EvaluationReport with per-type buckets and aggregate totals

    Raises:
        AlignmentViolation: If the streams differ in length or row keys
    """
    scorecard = _Scorecard()
    metrics = ScanMetrics("evaluation")

    with log_context(engine="evaluation", locale=locale):
        for position, (ref, cur) in enumerate(
            zip_longest(reference, current, fillvalue=_END), start=1
        ):
            if cur is _END:
                raise AlignmentViolation(position, "short read on current stream")
            if ref is _END:
                raise AlignmentViolation(position, "short read on reference stream")
            metrics.records_read += 1

            if ref.file_name != cur.file_name:
                raise AlignmentViolation(
                    position,
                    f"FileName key does not match: {ref.file_name!r} != {cur.file_name!r}",
                )
            if ref.field_offset != cur.field_offset:
                raise AlignmentViolation(
                    position,
                    f"FieldOffset key does not match for {ref.file_name}: "
                    f"{ref.field_offset} != {cur.field_offset}",
                )

            if locale and ref.locale != locale:
                continue
            metrics.records_used += 1
            scorecard.add_pair(ref, cur)

        report = scorecard.finalize()
        logger.info(
            "evaluation_pass_complete",
            semantic_types=len(report.buckets),
            **metrics.finish().to_dict(),
        )
        return report
