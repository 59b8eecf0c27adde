"""Correlation Engine - two passes over a reference stream.

Pass 1 discovers the semantic types and fixes their matrix order (ascending
by name). Pass 2 splits the stream into per-file groups and accumulates, for
every labeled field, which other types share its file, how far away they are
and on which side.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import numpy as np

from fieldscore.analysis.correlation.grouping import iter_file_groups
from fieldscore.analysis.correlation.models import CorrelationModel
from fieldscore.core.logging import ScanMetrics, get_logger, log_context
from fieldscore.core.models import ClassificationRecord

logger = get_logger(__name__)


def discover_semantic_types(records: Iterable[ClassificationRecord]) -> list[str]:
    """Collect the distinct semantic types of scored fields, sorted by name."""
    metrics = ScanMetrics("discovery")
    names: set[str] = set()
    for record in records:
        metrics.records_read += 1
        if record.is_scored and record.semantic_type:
            metrics.records_used += 1
            names.add(record.semantic_type)

    ordered = sorted(names)
    logger.info("discovery_pass_complete", semantic_types=len(ordered), **metrics.finish().to_dict())
    return ordered


class CorrelationAccumulator:
    """Accumulates co-occurrence statistics for a fixed set of semantic types."""

    def __init__(self, semantic_types: Sequence[str]):
        self.semantic_types = tuple(semantic_types)
        self._index = {name: i for i, name in enumerate(self.semantic_types)}

        n = len(self.semantic_types)
        self.total_matches = np.zeros(n, dtype=np.int64)
        self.co_occurrence = np.zeros((n, n), dtype=np.int64)
        self.total_distance = np.zeros((n, n), dtype=np.int64)
        self.direction = np.zeros((n, n), dtype=np.int64)

    def add_group(self, labels: Sequence[str]) -> None:
        """Accumulate one file's labels ("" = unlabeled field).

        Each distinct other type counts at most once per occurrence, at the
        first position it is found.
        """
        for i, label in enumerate(labels):
            if not label:
                continue
            t = self._index[label]
            self.total_matches[t] += 1

            seen: set[str] = set()
            for j, other in enumerate(labels):
                if not other or j == i or other == label or other in seen:
                    continue
                seen.add(other)
                u = self._index[other]
                self.co_occurrence[t, u] += 1
                self.total_distance[t, u] += abs(j - i)
                self.direction[t, u] += 1 if j < i else -1

    def snapshot(self, locale: str = "") -> CorrelationModel:
        """Freeze the accumulated counts into a model."""
        return CorrelationModel(
            semantic_types=self.semantic_types,
            total_matches=self.total_matches.copy(),
            co_occurrence=self.co_occurrence.copy(),
            total_distance=self.total_distance.copy(),
            direction=self.direction.copy(),
            locale=locale,
        )


def build_correlation_model(
    source: Iterable[ClassificationRecord],
    *,
    flush_trailing_group: bool = False,
    locale: str = "",
) -> CorrelationModel:
    """Run both passes over a replayable record source.

    Args:
        source: Re-iterable stream (e.g. RecordSource); iterated twice
        flush_trailing_group: Accumulate the last file group as well
        locale: Locale label recorded on the model

    Returns:
        CorrelationModel covering every discovered semantic type
    """
    if iter(source) is source:
        raise TypeError("source must be re-iterable; pass a RecordSource, not an iterator")

    with log_context(engine="correlation", locale=locale):
        semantic_types = discover_semantic_types(source)
        accumulator = CorrelationAccumulator(semantic_types)

        metrics = ScanMetrics("accumulation")
        for group in iter_file_groups(
            source, flush_trailing=flush_trailing_group, metrics=metrics
        ):
            accumulator.add_group(group.labels)
        logger.info("accumulation_pass_complete", **metrics.finish().to_dict())

        return accumulator.snapshot(locale=locale)
