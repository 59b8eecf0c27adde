"""Convert command - detector analysis JSON to classification CSV."""

from __future__ import annotations

import sys
from itertools import chain
from pathlib import Path
from typing import Annotated

import typer

from fieldscore.cli.common import VerboseOption, err_console, fail, setup
from fieldscore.core.errors import FatalIOError, FieldscoreError


def convert(
    files: Annotated[
        list[Path],
        typer.Argument(
            help="Analysis files (JSON arrays of per-field results)",
            exists=True,
            dir_okay=False,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Write CSV here instead of stdout",
            dir_okay=False,
        ),
    ] = None,
    header: Annotated[
        bool,
        typer.Option(
            "--header/--no-header",
            help="Start the output with the column header row",
        ),
    ] = True,
    verbose: VerboseOption = 0,
) -> None:
    """Flatten detector analyses into the 9-column classification schema.

    Examples:

        fieldscore convert data/*.csv.out > current.csv

        fieldscore convert a.out b.out --output reference.csv --no-header
    """
    setup(verbose)

    from fieldscore.sources.converter import convert_analysis, write_records

    try:
        # Every input is parsed before any output is written
        records = list(chain.from_iterable(convert_analysis(path) for path in files))
        if output is None:
            write_records(records, sys.stdout, header=header)
            return
        with output.open("w", newline="", encoding="utf-8") as handle:
            count = write_records(records, handle, header=header)
    except FieldscoreError as e:
        fail(e)
    except OSError as e:
        fail(FatalIOError(f"Cannot write {output}: {e}"))

    err_console.print(f"Wrote {count} records to {output}", style="green", markup=False)
