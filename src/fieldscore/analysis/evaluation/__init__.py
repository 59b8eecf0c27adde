"""Detection-quality evaluation.

Main entry point:
- evaluate: lockstep scoring of a current labeling against a reference
"""

from fieldscore.analysis.evaluation.models import (
    BucketCategory,
    EvaluationBucket,
    EvaluationReport,
    f1_score,
    ratio,
)
from fieldscore.analysis.evaluation.processor import evaluate

__all__ = [
    "evaluate",
    "f1_score",
    "ratio",
    "BucketCategory",
    "EvaluationBucket",
    "EvaluationReport",
]
