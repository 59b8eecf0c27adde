"""Shared CLI utilities and constants."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, NoReturn

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from fieldscore.core.config import Settings, load_settings
from fieldscore.core.errors import FieldscoreError
from fieldscore.core.logging import configure_logging, get_logger

load_dotenv()

# Reports go to stdout, diagnostics to stderr
console = Console()
err_console = Console(stderr=True)

logger = get_logger(__name__)

ReferenceOption = Annotated[
    Path | None,
    typer.Option(
        "--reference",
        "-r",
        help="Reference classifications CSV (default: $FIELDSCORE_REFERENCE_PATH or reference.csv)",
        dir_okay=False,
    ),
]

LocaleOption = Annotated[
    str | None,
    typer.Option(
        "--locale",
        "-l",
        help="Only consider records of this locale (empty string = all locales)",
    ),
]

VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-v=INFO, -vv=DEBUG)",
    ),
]

LogFormatOption = Annotated[
    str | None,
    typer.Option(
        "--log-format",
        help="Log output format (console or json)",
    ),
]


def setup(verbosity: int = 0, log_format: str | None = None) -> Settings:
    """Load settings and configure logging for a command.

    Args:
        verbosity: 0=settings level, 1=INFO, 2+=DEBUG
        log_format: Overrides the configured log format
    """
    try:
        settings = load_settings()
    except FieldscoreError as e:
        fail(e)

    if verbosity >= 2:
        level = "DEBUG"
    elif verbosity >= 1:
        level = "INFO"
    else:
        level = settings.log_level

    fmt = log_format or settings.log_format
    configure_logging(
        log_level=level,
        log_format=fmt,
        show_timestamps=verbosity >= 1,
        color=fmt == "console",
    )
    return settings


def fail(error: FieldscoreError) -> NoReturn:
    """Report a fatal error and exit with status 1."""
    logger.error("run_failed", error_type=type(error).__name__, error=str(error))
    err_console.print(f"[red]{type(error).__name__}: {escape(str(error))}[/red]", highlight=False)
    raise typer.Exit(1)


def emit(text: str) -> None:
    """Write report text to stdout verbatim."""
    typer.echo(text, nl=False)
