"""Semantic-type correlation analysis.

Main entry point:
- build_correlation_model: discovery + accumulation over a reference stream
"""

from fieldscore.analysis.correlation.grouping import FileGroup, iter_file_groups
from fieldscore.analysis.correlation.models import CorrelationModel, SemanticTypeNode
from fieldscore.analysis.correlation.processor import (
    CorrelationAccumulator,
    build_correlation_model,
    discover_semantic_types,
)

__all__ = [
    "build_correlation_model",
    "discover_semantic_types",
    "iter_file_groups",
    "CorrelationAccumulator",
    "CorrelationModel",
    "FileGroup",
    "SemanticTypeNode",
]
