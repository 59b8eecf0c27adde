"""fieldscore - quality metrics for field type detection.

Compares a type detector's per-field classifications against a trusted
reference labeling and mines co-occurrence statistics between semantic types.

Example:
    from fieldscore import RecordSource, build_correlation_model, evaluate

    model = build_correlation_model(RecordSource("reference.csv", locale="en-US"))
    report = evaluate(RecordSource("reference.csv"), RecordSource("current.csv"))
"""

__version__ = "0.1.0"

from fieldscore.analysis.correlation import CorrelationModel, build_correlation_model
from fieldscore.analysis.evaluation import EvaluationReport, evaluate
from fieldscore.core.models import ClassificationRecord
from fieldscore.sources.records import RecordSource

__all__ = [
    "ClassificationRecord",
    "CorrelationModel",
    "EvaluationReport",
    "RecordSource",
    "build_correlation_model",
    "evaluate",
    "__version__",
]
