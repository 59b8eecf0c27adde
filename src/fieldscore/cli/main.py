"""Main CLI application entry point."""

from __future__ import annotations

import typer

from fieldscore.cli.commands import convert, correlation, discover, evaluate, extract

app = typer.Typer(
    name="fieldscore",
    help="Measure field type detection quality against a reference labeling.",
    no_args_is_help=True,
)

app.command()(correlation.correlation)
app.command()(evaluate.evaluate)
app.command()(extract.extract)
app.command()(convert.convert)
app.command()(discover.discover)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
