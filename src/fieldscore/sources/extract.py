"""Column extraction over the raw classification CSV."""

from __future__ import annotations

import csv
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from fieldscore.core.errors import ConfigError, FatalIOError, SchemaViolation


def parse_columns(spec: str) -> list[int]:
    """Parse "0,5,7" into column indices ("" = whole row).

    Raises:
        ConfigError: If an entry is not a non-negative integer
    """
    if not spec.strip():
        return []
    columns = []
    for token in spec.split(","):
        try:
            column = int(token)
        except ValueError:
            raise ConfigError(f"Invalid column index '{token}'") from None
        if column < 0:
            raise ConfigError(f"Invalid column index '{token}'")
        columns.append(column)
    return columns


def parse_field_offset(value: str) -> int | None:
    """Parse a field offset filter; -1 disables it.

    Raises:
        ConfigError: If the value is not an integer
    """
    try:
        offset = int(value)
    except ValueError:
        raise ConfigError(f"Invalid field offset '{value}'") from None
    return None if offset == -1 else offset


@dataclass(frozen=True)
class ExtractFilter:
    """Row filter for extraction."""

    file_name: str | None = None
    field_offset: int | None = None

    def matches(self, row: list[str]) -> bool:
        if not row:
            return False
        if self.file_name and row[0] != self.file_name:
            return False
        if self.field_offset is not None and (len(row) < 2 or row[1] != str(self.field_offset)):
            return False
        return True


def extract_columns(
    path: Path,
    columns: list[int],
    row_filter: ExtractFilter | None = None,
) -> Iterator[str]:
    """Yield the selected columns of every matching row, comma-joined.

    With no columns the whole row is yielded.

    Raises:
        FatalIOError: If the file cannot be read
        SchemaViolation: If a column index is beyond the row width
    """
    row_filter = row_filter or ExtractFilter()
    try:
        with Path(path).open(newline="", encoding="utf-8") as handle:
            reader = csv.reader(handle)
            rows = (row for row in reader if row)
            next(rows, None)
            for row in rows:
                if not row_filter.matches(row):
                    continue
                if not columns:
                    yield ",".join(row)
                    continue
                try:
                    yield ",".join(row[column] for column in columns)
                except IndexError:
                    raise SchemaViolation(
                        str(path), reader.line_num, f"row has only {len(row)} columns"
                    ) from None
    except csv.Error as e:
        raise SchemaViolation(str(path), 0, str(e)) from e
    except (OSError, UnicodeDecodeError) as e:
        raise FatalIOError(f"Cannot read {path}: {e}") from e
