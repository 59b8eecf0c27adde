"""Extract command - print selected columns of the reference classifications."""

from __future__ import annotations

from typing import Annotated

import typer

from fieldscore.cli.common import ReferenceOption, VerboseOption, fail, setup
from fieldscore.core.errors import FieldscoreError


def extract(
    reference: ReferenceOption = None,
    column: Annotated[
        str,
        typer.Option(
            "--column",
            "-c",
            help="Comma-separated column indices to print (default: whole row)",
        ),
    ] = "",
    field_offset: Annotated[
        str,
        typer.Option(
            "--field-offset",
            help="Only rows with this field offset (-1 = any)",
        ),
    ] = "-1",
    file_name: Annotated[
        str,
        typer.Option(
            "--file-name",
            help="Only rows describing this data file",
        ),
    ] = "",
    verbose: VerboseOption = 0,
) -> None:
    """Print columns of the reference classifications.

    Examples:

        fieldscore extract --column 0,7

        fieldscore extract --file-name data/orders.csv --field-offset 3
    """
    settings = setup(verbose)

    from fieldscore.sources.extract import (
        ExtractFilter,
        extract_columns,
        parse_columns,
        parse_field_offset,
    )

    try:
        columns = parse_columns(column)
        row_filter = ExtractFilter(
            file_name=file_name or None,
            field_offset=parse_field_offset(field_offset),
        )
        for line in extract_columns(reference or settings.reference_path, columns, row_filter):
            typer.echo(line)
    except FieldscoreError as e:
        fail(e)
