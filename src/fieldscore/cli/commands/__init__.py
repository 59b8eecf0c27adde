"""CLI command implementations."""

from fieldscore.cli.commands import (
    convert,
    correlation,
    discover,
    evaluate,
    extract,
)

__all__ = [
    "convert",
    "correlation",
    "discover",
    "evaluate",
    "extract",
]
