"""Correlation command - semantic-type co-occurrence matrices."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from fieldscore.cli.common import (
    LocaleOption,
    LogFormatOption,
    ReferenceOption,
    VerboseOption,
    emit,
    err_console,
    fail,
    setup,
)
from fieldscore.core.errors import FatalIOError, FieldscoreError


class OutputFormat(str, Enum):
    HUMAN = "human"
    DATA = "data"


def correlation(
    reference: ReferenceOption = None,
    locale: LocaleOption = None,
    show_correlation: Annotated[
        bool,
        typer.Option(
            "--correlation/--no-correlation",
            help="Output the correlation matrix",
        ),
    ] = True,
    distance: Annotated[
        bool,
        typer.Option("--distance", help="Output the distance matrix"),
    ] = False,
    direction: Annotated[
        bool,
        typer.Option("--direction", help="Output the direction matrix"),
    ] = False,
    totals: Annotated[
        bool,
        typer.Option("--totals", help="Output the per-type match totals"),
    ] = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="human: print the significant correlation matrix; data: write the full node table as JSON",
        ),
    ] = OutputFormat.HUMAN,
    output_dir: Annotated[
        Path | None,
        typer.Option(
            "--output-dir",
            "-o",
            help="Directory for the JSON node table (data format)",
            file_okay=False,
        ),
    ] = None,
    flush_last_group: Annotated[
        bool | None,
        typer.Option(
            "--flush-last-group/--drop-last-group",
            help="Whether the final file group of the reference stream is accumulated",
        ),
    ] = None,
    verbose: VerboseOption = 0,
    log_format: LogFormatOption = None,
) -> None:
    """Compute semantic-type correlations from the reference classifications.

    Examples:

        fieldscore correlation

        fieldscore correlation --locale de-DE --distance --direction --no-correlation

        fieldscore correlation --format data --output-dir ./out
    """
    settings = setup(verbose, log_format)

    from fieldscore.analysis.correlation import build_correlation_model
    from fieldscore.reporting.correlation import (
        dump_semantic_types,
        render_correlation_matrix,
        render_direction_matrix,
        render_distance_matrix,
        render_totals,
    )
    from fieldscore.sources.records import RecordSource

    locale = settings.correlation_locale if locale is None else locale
    source = RecordSource(reference or settings.reference_path, locale=locale)
    flush = settings.flush_trailing_group if flush_last_group is None else flush_last_group

    try:
        model = build_correlation_model(source, flush_trailing_group=flush, locale=locale)

        if show_correlation:
            if output_format is OutputFormat.HUMAN:
                emit(
                    render_correlation_matrix(
                        model,
                        settings.significance_min_matches,
                        settings.significance_min_correlation,
                    )
                )
            else:
                directory = output_dir or settings.output_dir
                directory.mkdir(parents=True, exist_ok=True)
                path = dump_semantic_types(model, directory, locale)
                err_console.print(
                    f"Wrote {model.size} semantic types to {path}", style="green", markup=False
                )
    except FieldscoreError as e:
        fail(e)
    except OSError as e:
        fail(FatalIOError(f"Cannot write node table: {e}"))

    if distance:
        emit(render_distance_matrix(model))
    if direction:
        emit(render_direction_matrix(model))
    if totals:
        emit(render_totals(model))
