"""Evaluation scorecard renderer."""

from __future__ import annotations

import math

from fieldscore.analysis.evaluation.models import EvaluationReport


def format_ratio(value: float, digits: int = 4) -> str:
    """Fixed-point ratio, "NaN" when undefined."""
    if math.isnan(value):
        return "NaN"
    return f"{value:.{digits}f}"


def render_evaluation_report(
    report: EvaluationReport,
    *,
    semantic_type: str | None = None,
    list_keys: bool = False,
    base_types: bool = False,
) -> str:
    """Render the scorecard as text.

    Args:
        report: Finalized evaluation report
        semantic_type: Restrict bucket lines to this type; also drops the summary
        list_keys: Print the false-positive / false-negative keys of imperfect types
        base_types: Append base-type counts and the mismatch rate
    """

    def selected(name: str) -> bool:
        return not semantic_type or semantic_type == name

    lines: list[str] = []

    for name in report.imperfect:
        if not selected(name):
            continue
        bucket = report.buckets[name]
        lines.append(
            f"SemanticType: {name}, Precision: {format_ratio(bucket.precision)}, "
            f"Recall: {format_ratio(bucket.recall)}, F1 Score: {format_ratio(bucket.f1_score)} "
            f"(TP: {len(bucket.true_positives)}, FP: {len(bucket.false_positives)}, "
            f"FN: {len(bucket.false_negatives)})"
        )
        if list_keys:
            lines.extend(f"FP\t{key}" for key in bucket.false_positives)
            lines.extend(f"FN\t{key}" for key in bucket.false_negatives)

    lines.append("")

    for name in report.perfect:
        if selected(name):
            tp = len(report.buckets[name].true_positives)
            lines.append(
                f"SemanticType: {name}, Precision: 1.0000, Recall: 1.0000, "
                f"F1 Score: 1.0000 (TP: {tp})"
            )

    lines.append("")

    for name in report.not_detected:
        if selected(name):
            fn = len(report.buckets[name].false_negatives)
            lines.append(
                f"SemanticType: {name}, Precision: 0.0000, Recall: NaN, F1 Score: NaN (FN: {fn})"
            )

    if not semantic_type:
        lines.append("")
        lines.append(
            f"Semantic Types: {report.detected_types}, "
            f"TotalPrecision: {format_ratio(report.precision)}, "
            f"TotalRecall: {format_ratio(report.recall)}, "
            f"F1 Score: {format_ratio(report.f1_score)} "
            f"(TP: {report.true_positives}, FP: {report.false_positives}, "
            f"FN: {report.false_negatives}), NotDetected: {report.not_detected_count}, "
            f"Record# (Non-null/blank): {report.total_records} ({report.total_data_records}) "
            f"(ID%: {format_ratio(report.identified_percentage, 2)})"
        )

    if base_types:
        counts = ", ".join(f"{name}: {count}" for name, count in report.base_type_counts.items())
        lines.append(
            f"Base Types: {counts} "
            f"(Errors: {format_ratio(report.base_type_error_percentage)}% "
            f"({report.base_type_errors}))"
        )

    return "\n".join(lines) + "\n"
