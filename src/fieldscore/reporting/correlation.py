"""Correlation matrix renderers.

Matrices are emitted as comma-separated text: a header row of type names
preceded by an empty cell, then one row per type. Cell (row u, column t)
holds the statistic of t's occurrences against u.
"""

from __future__ import annotations

import json
from pathlib import Path

import numpy as np

from fieldscore.analysis.correlation.models import CorrelationModel
from fieldscore.core.logging import get_logger

logger = get_logger(__name__)


def _header(columns: list[str]) -> str:
    return "".join(f",{name}" for name in columns)


def render_correlation_matrix(
    model: CorrelationModel,
    min_matches: int = 10,
    min_correlation: float = 0.1,
) -> str:
    """Correlation ratios between significant types only, "%.2f" formatted."""
    significant = model.significant_types(min_matches, min_correlation)
    columns = [model.index_of(name) for name in significant]

    lines = [_header(significant)]
    for name, u in zip(significant, columns):
        cells = "".join(f",{model.correlation[t, u]:.2f}" for t in columns)
        lines.append(f"{name}{cells}")
    return "\n".join(lines) + "\n"


def _render_averages(model: CorrelationModel, averages: np.ndarray) -> str:
    names = list(model.semantic_types)
    lines = [_header(names)]
    for u, name in enumerate(names):
        cells = []
        for t in range(model.size):
            # Blank, not zero, when t never matched
            cells.append(f"{averages[t, u]:.2f}" if model.total_matches[t] > 0 else "")
        lines.append(name + "".join(f",{cell}" for cell in cells))
    return "\n".join(lines) + "\n"


def render_distance_matrix(model: CorrelationModel) -> str:
    """Average positional distance for every pair of types."""
    return _render_averages(model, model.average_distance)


def render_direction_matrix(model: CorrelationModel) -> str:
    """Average signed direction for every pair of types."""
    return _render_averages(model, model.average_direction)


def render_totals(model: CorrelationModel) -> str:
    """One "type: count" line per type, then a blank line."""
    lines = [
        f"{name}: {int(model.total_matches[i])}" for i, name in enumerate(model.semantic_types)
    ]
    return "\n".join(lines) + "\n\n"


def semantic_types_filename(locale: str) -> str:
    """SemanticTypes__en_US.json for locale en-US."""
    return f"SemanticTypes__{locale.replace('-', '_')}.json"


def dump_semantic_types(model: CorrelationModel, directory: Path, locale: str) -> Path:
    """Write the full node table as JSON, nodes in index order.

    Returns:
        Path of the written file
    """
    path = Path(directory) / semantic_types_filename(locale)
    payload = [node.model_dump(by_alias=True) for node in model.nodes()]
    path.write_text(json.dumps(payload), encoding="utf-8")
    logger.info("semantic_types_dumped", path=str(path), nodes=len(payload))
    return path
