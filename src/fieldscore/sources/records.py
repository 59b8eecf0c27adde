"""Record Source - streams classification records from the flat CSV schema.

Reading is lazy and forward-only. A `RecordSource` reopens its file on every
iteration, which is how multi-pass consumers replay the stream.
"""

from __future__ import annotations

import csv
from collections.abc import Iterator
from pathlib import Path
from typing import TextIO

from fieldscore.core.errors import FatalIOError, SchemaViolation
from fieldscore.core.logging import get_logger
from fieldscore.core.models import CSV_HEADER, ClassificationRecord

logger = get_logger(__name__)


def read_records(
    handle: TextIO,
    locale: str = "",
    *,
    source: str = "<stream>",
) -> Iterator[ClassificationRecord]:
    """Yield classification records from an open CSV handle.

    The first row is a header and is discarded. Blank lines are skipped.

    Args:
        handle: Text handle opened with newline=""
        locale: Only yield records with this locale ("" = all)
        source: Name used in error messages

    Raises:
        SchemaViolation: On a malformed row
        FatalIOError: If the underlying read fails
    """
    reader = csv.reader(handle)
    rows = (row for row in reader if row)
    try:
        if next(rows, None) is None:
            return
        for row in rows:
            record = _parse_row(row, source, reader.line_num)
            if locale and record.locale != locale:
                continue
            yield record
    except csv.Error as e:
        raise SchemaViolation(source, reader.line_num, str(e)) from e
    except (OSError, UnicodeDecodeError) as e:
        raise FatalIOError(f"Failed reading {source}: {e}") from e


def _parse_row(row: list[str], source: str, line: int) -> ClassificationRecord:
    if len(row) != len(CSV_HEADER):
        raise SchemaViolation(
            source, line, f"expected {len(CSV_HEADER)} columns, found {len(row)}"
        )

    try:
        field_offset = int(row[1])
    except ValueError:
        raise SchemaViolation(source, line, f"non-numeric FieldOffset '{row[1]}'") from None
    try:
        record_count = int(row[3])
    except ValueError:
        raise SchemaViolation(source, line, f"non-numeric RecordCount '{row[3]}'") from None

    return ClassificationRecord(
        file_name=row[0],
        field_offset=field_offset,
        locale=row[2],
        record_count=record_count,
        field_name=row[4],
        base_type=row[5],
        type_modifier=row[6],
        semantic_type=row[7],
        notes=row[8],
    )


class RecordSource:
    """A replayable stream of classification records backed by a CSV file."""

    def __init__(self, path: Path | str, locale: str = ""):
        """Initialize the source.

        Args:
            path: CSV file in the 9-column classification schema
            locale: Only yield records with this locale ("" = all)
        """
        self.path = Path(path)
        self.locale = locale

    def __iter__(self) -> Iterator[ClassificationRecord]:
        try:
            handle = self.path.open(newline="", encoding="utf-8")
        except OSError as e:
            raise FatalIOError(f"Cannot open {self.path}: {e}") from e

        logger.debug("record_source_opened", path=str(self.path), locale=self.locale)
        with handle:
            yield from read_records(handle, self.locale, source=str(self.path))

    def __repr__(self) -> str:
        return f"RecordSource({str(self.path)!r}, locale={self.locale!r})"
