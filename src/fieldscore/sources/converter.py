"""Convert a type detector's per-field analysis JSON into classification records.

Each input file holds a JSON array with one analysis object per column, in
column order. Only the attributes needed for the flat schema are modelled.
"""

from __future__ import annotations

import csv
import json
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import TextIO

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from fieldscore.core.errors import FatalIOError, SchemaViolation
from fieldscore.core.logging import get_logger
from fieldscore.core.models import CSV_HEADER, ClassificationRecord

logger = get_logger(__name__)

# Detector releases from this major version on report semantic types directly
SEMANTIC_TYPE_MAJOR_VERSION = 12


class FieldAnalysis(BaseModel):
    """Subset of the detector's per-field analysis."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    field_name: str = ""
    sample_count: int = 0
    type: str = ""
    type_modifier: str = ""
    semantic_type: str = ""
    is_semantic_type: bool = False
    logical_type: bool = False
    type_qualifier: str = ""
    detection_locale: str = ""
    fta_version: str = ""

    @property
    def major_version(self) -> int:
        if not self.fta_version:
            return SEMANTIC_TYPE_MAJOR_VERSION
        head = self.fta_version.split(".")[0]
        return int(head) if head.isdigit() else 0

    def labels(self) -> tuple[str, str]:
        """(type_modifier, semantic_type) for this detector version."""
        if self.major_version >= SEMANTIC_TYPE_MAJOR_VERSION:
            return self.type_modifier, self.semantic_type
        if self.logical_type:
            return "", self.type_qualifier
        return self.type_qualifier, ""


def output_name(path: Path) -> str:
    """Data file name an analysis file describes ("x.csv.out" -> "x.csv")."""
    name = str(path)
    return name[: -len(".out")] if name.endswith(".out") else name


def load_analysis(path: Path) -> list[FieldAnalysis]:
    """Parse one analysis file.

    Raises:
        FatalIOError: If the file cannot be read
        SchemaViolation: If it is not an array of analysis objects
    """
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise FatalIOError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise SchemaViolation(str(path), e.lineno, f"invalid JSON: {e.msg}") from e

    if not isinstance(payload, list):
        raise SchemaViolation(str(path), 1, "expected a JSON array of field analyses")
    try:
        return [FieldAnalysis.model_validate(item) for item in payload]
    except ValidationError as e:
        raise SchemaViolation(str(path), 1, f"invalid field analysis: {e}") from e


def convert_analysis(path: Path) -> Iterator[ClassificationRecord]:
    """Yield one classification record per analysed field."""
    name = output_name(path)
    for offset, analysis in enumerate(load_analysis(path)):
        if not analysis.fta_version:
            logger.warning("missing_detector_version", file_name=name, field_offset=offset)
        type_modifier, semantic_type = analysis.labels()
        yield ClassificationRecord(
            file_name=name,
            field_offset=offset,
            locale=analysis.detection_locale,
            record_count=analysis.sample_count,
            field_name=analysis.field_name,
            base_type=analysis.type,
            type_modifier=type_modifier,
            semantic_type=semantic_type,
            notes="",
        )


def write_records(
    records: Iterable[ClassificationRecord],
    handle: TextIO,
    *,
    header: bool = True,
) -> int:
    """Write records in the flat CSV schema.

    Returns:
        Number of records written
    """
    writer = csv.writer(handle, lineterminator="\n")
    if header:
        writer.writerow(CSV_HEADER)
    count = 0
    for record in records:
        writer.writerow(record.to_row())
        count += 1
    return count
