"""Discover command - find and download candidate datasets."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table as RichTable

from fieldscore.cli.common import VerboseOption, console, fail, setup
from fieldscore.core.errors import FieldscoreError


def discover(
    source: Annotated[
        str,
        typer.Option(
            "--source",
            help="Catalog to crawl (socrata, data.sfgov.org)",
        ),
    ] = "socrata",
    column: Annotated[
        str | None,
        typer.Option(
            "--column",
            help="Only datasets with a column of this name",
        ),
    ] = None,
    download: Annotated[
        bool,
        typer.Option(
            "--download",
            help="Download files after discovery",
        ),
    ] = False,
    max_columns: Annotated[
        int,
        typer.Option(
            "--max-columns",
            help="Maximum number of columns (-1 for unlimited)",
        ),
    ] = 40,
    max_downloads: Annotated[
        int,
        typer.Option(
            "--max-downloads",
            help="Maximum number of files to download (-1 for unlimited)",
        ),
    ] = 10,
    min_lines: Annotated[
        int,
        typer.Option(
            "--min-lines",
            help="Minimum number of data lines in a file to be interesting",
        ),
    ] = 20,
    data_dir: Annotated[
        Path | None,
        typer.Option(
            "--data-dir",
            help="Root directory for downloads (default depends on source)",
            file_okay=False,
        ),
    ] = None,
    verbose: VerboseOption = 0,
) -> None:
    """Crawl an open-data catalog for CSV datasets to profile.

    Examples:

        fieldscore discover --column zip

        fieldscore discover --source data.sfgov.org --download --max-downloads 5
    """
    settings = setup(verbose)

    from fieldscore.sources.catalog import CatalogClient, DownloadStatus, get_catalog_source

    try:
        catalog = get_catalog_source(source)
        with CatalogClient(catalog, timeout=settings.catalog_timeout_seconds) as client:
            datasets = client.discover(column=column)
            console.print(f"Located {len(datasets)} items", markup=False)

            if not download:
                return

            table = RichTable(show_header=True, header_style="bold")
            table.add_column("Dataset")
            table.add_column("Status")
            table.add_column("Detail")

            saved = 0
            for dataset in datasets:
                if max_downloads != -1 and saved >= max_downloads:
                    break
                outcome = client.download(
                    dataset,
                    max_columns=max_columns,
                    min_lines=min_lines,
                    data_directory=data_dir,
                )
                if outcome.status is DownloadStatus.SAVED:
                    saved += 1
                table.add_row(str(outcome.path), outcome.status.value, outcome.reason or "-")
    except FieldscoreError as e:
        fail(e)

    console.print(table)
    console.print(f"\n[green]Downloaded {saved} files[/green]")
