"""Evaluate command - precision/recall/F1 of the current classifications."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer

from fieldscore.cli.common import (
    LocaleOption,
    LogFormatOption,
    ReferenceOption,
    VerboseOption,
    emit,
    fail,
    setup,
)
from fieldscore.core.errors import FieldscoreError


def evaluate(
    reference: ReferenceOption = None,
    current: Annotated[
        Path | None,
        typer.Option(
            "--current",
            "-c",
            help="Current classifications CSV (default: $FIELDSCORE_CURRENT_PATH or current.csv)",
            dir_okay=False,
        ),
    ] = None,
    locale: LocaleOption = None,
    semantic_type: Annotated[
        str | None,
        typer.Option(
            "--semantic-type",
            "-s",
            help="Only report this semantic type",
        ),
    ] = None,
    list_keys: Annotated[
        bool,
        typer.Option(
            "--list-keys",
            "-k",
            help="List the false-positive and false-negative keys of imperfect types",
        ),
    ] = False,
    base_type: Annotated[
        bool,
        typer.Option(
            "--base-type",
            help="Report base type counts and reference/current base type mismatches",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON for scripting",
        ),
    ] = False,
    verbose: VerboseOption = 0,
    log_format: LogFormatOption = None,
) -> None:
    """Score current classifications against the reference classifications.

    Both files must list the same fields in the same order.

    Examples:

        fieldscore evaluate

        fieldscore evaluate --locale en-US --semantic-type EMAIL --list-keys

        fieldscore evaluate --json > scorecard.json
    """
    settings = setup(verbose, log_format)

    from fieldscore.analysis.evaluation import evaluate as run_evaluation
    from fieldscore.reporting.evaluation import render_evaluation_report
    from fieldscore.sources.records import RecordSource

    locale = settings.evaluation_locale if locale is None else locale

    try:
        report = run_evaluation(
            RecordSource(reference or settings.reference_path),
            RecordSource(current or settings.current_path),
            locale=locale,
        )
    except FieldscoreError as e:
        fail(e)

    if json_output:
        emit(json.dumps(report.to_dict(semantic_type=semantic_type), indent=2) + "\n")
        return

    emit(
        render_evaluation_report(
            report,
            semantic_type=semantic_type,
            list_keys=list_keys,
            base_types=base_type,
        )
    )
