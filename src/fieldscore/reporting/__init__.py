"""Text and structured renderings of engine results."""

from fieldscore.reporting.correlation import (
    dump_semantic_types,
    render_correlation_matrix,
    render_direction_matrix,
    render_distance_matrix,
    render_totals,
    semantic_types_filename,
)
from fieldscore.reporting.evaluation import format_ratio, render_evaluation_report

__all__ = [
    # Correlation
    "dump_semantic_types",
    "render_correlation_matrix",
    "render_direction_matrix",
    "render_distance_matrix",
    "render_totals",
    "semantic_types_filename",
    # Evaluation
    "format_ratio",
    "render_evaluation_report",
]
