"""Result models for semantic-type correlation.

`CorrelationModel` is the immutable snapshot produced by one engine run. All
matrices are indexed [t, u]: row t is the semantic type whose occurrences were
counted, column u the type observed alongside it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import cached_property

import numpy as np
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SemanticTypeNode(BaseModel):
    """One semantic type with its statistics against every other type."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    semantic_type: str
    index: int
    total_matches: int
    correlation_count: list[int]
    correlation: list[float | None]  # None where total_matches == 0
    direction: list[int]
    total_distance: list[int]


def _normalize(matrix: np.ndarray, totals: np.ndarray) -> np.ndarray:
    # Rows with no matches become NaN (0/0)
    with np.errstate(divide="ignore", invalid="ignore"):
        return matrix / totals[:, np.newaxis].astype(np.float64)


@dataclass(frozen=True, eq=False)
class CorrelationModel:
    """Co-occurrence statistics for every semantic type in a reference stream."""

    semantic_types: tuple[str, ...]
    total_matches: np.ndarray  # (n,)
    co_occurrence: np.ndarray  # (n, n)
    total_distance: np.ndarray  # (n, n)
    direction: np.ndarray  # (n, n)
    locale: str = ""

    @property
    def size(self) -> int:
        return len(self.semantic_types)

    @cached_property
    def _index(self) -> dict[str, int]:
        return {name: i for i, name in enumerate(self.semantic_types)}

    def index_of(self, semantic_type: str) -> int:
        """Matrix index of a semantic type.

        Raises:
            KeyError: If the type was never observed
        """
        return self._index[semantic_type]

    @cached_property
    def correlation(self) -> np.ndarray:
        """co_occurrence[t, u] / total_matches[t], NaN where t never matched."""
        return _normalize(self.co_occurrence, self.total_matches)

    @cached_property
    def average_distance(self) -> np.ndarray:
        """Mean positional distance from t to u per occurrence of t."""
        return _normalize(self.total_distance, self.total_matches)

    @cached_property
    def average_direction(self) -> np.ndarray:
        """Mean direction bias; positive means u tends to precede t."""
        return _normalize(self.direction, self.total_matches)

    def is_significant(
        self,
        semantic_type: str,
        min_matches: int = 10,
        min_correlation: float = 0.1,
    ) -> bool:
        """Whether a type has enough evidence to appear in the rendered matrix.

        A type t qualifies when it matched at least min_matches times and
        correlates above min_correlation with some type u that itself matched
        at least min_matches times. The relation is not symmetric.
        """
        t = self.index_of(semantic_type)
        if self.total_matches[t] < min_matches:
            return False
        with np.errstate(invalid="ignore"):
            strong = self.correlation[t] > min_correlation
        return bool(np.any(strong & (self.total_matches >= min_matches)))

    def significant_types(
        self, min_matches: int = 10, min_correlation: float = 0.1
    ) -> list[str]:
        """Significant types in index order."""
        return [
            name
            for name in self.semantic_types
            if self.is_significant(name, min_matches, min_correlation)
        ]

    def node(self, semantic_type: str) -> SemanticTypeNode:
        """Full statistics row for one semantic type."""
        t = self.index_of(semantic_type)
        return SemanticTypeNode(
            semantic_type=semantic_type,
            index=t,
            total_matches=int(self.total_matches[t]),
            correlation_count=[int(v) for v in self.co_occurrence[t]],
            correlation=[None if math.isnan(v) else float(v) for v in self.correlation[t]],
            direction=[int(v) for v in self.direction[t]],
            total_distance=[int(v) for v in self.total_distance[t]],
        )

    def nodes(self) -> list[SemanticTypeNode]:
        """All nodes in index order."""
        return [self.node(name) for name in self.semantic_types]
