"""Shared record types and classification vocabularies."""

from __future__ import annotations

from dataclasses import dataclass

# Only fields with these base types carry semantic types worth scoring
SCORED_BASE_TYPES: frozenset[str] = frozenset({"String", "Boolean", "Long", "Double"})

# Type modifiers describing a column with no data in it
NON_DATA_TYPE_MODIFIERS: frozenset[str] = frozenset({"NULL", "BLANK", "BLANKORNULL"})

# Column order of the flat classification CSV
CSV_HEADER: tuple[str, ...] = (
    "FileName",
    "FieldOffset",
    "Locale",
    "RecordCount",
    "FieldName",
    "BaseType",
    "TypeModifier",
    "SemanticType",
    "Notes",
)


@dataclass(frozen=True)
class ClassificationRecord:
    """Classification of one column of one data file.

    An empty semantic_type means the column carries no semantic label.
    """

    file_name: str
    field_offset: int
    locale: str
    record_count: int
    field_name: str
    base_type: str
    type_modifier: str
    semantic_type: str
    notes: str

    @property
    def key(self) -> str:
        """Row key shared by the reference and current streams."""
        return f"{self.file_name},{self.field_offset}"

    @property
    def is_scored(self) -> bool:
        return self.base_type in SCORED_BASE_TYPES

    @property
    def has_data(self) -> bool:
        return self.type_modifier not in NON_DATA_TYPE_MODIFIERS

    def to_row(self) -> list[str]:
        """Render in CSV column order."""
        return [
            self.file_name,
            str(self.field_offset),
            self.locale,
            str(self.record_count),
            self.field_name,
            self.base_type,
            self.type_modifier,
            self.semantic_type,
            self.notes,
        ]
