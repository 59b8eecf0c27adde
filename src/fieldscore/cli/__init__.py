"""CLI for fieldscore.

Usage:
    fieldscore correlation --reference reference.csv --distance
    fieldscore evaluate --reference reference.csv --current current.csv
    fieldscore extract --column 0,7 --file-name data.csv
    fieldscore convert analysis/*.out > reference.csv
    fieldscore discover --source socrata --download

Environment:
    Loads .env file from current directory if present.
    Settings use the FIELDSCORE_ prefix.
"""

from fieldscore.cli.main import app, main

__all__ = ["app", "main"]
