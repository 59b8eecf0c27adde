"""Shared pytest fixtures for all tests."""

import csv
import os
from pathlib import Path

import pytest

from fieldscore.core.config import load_settings
from fieldscore.core.logging import configure_logging
from fieldscore.core.models import CSV_HEADER, ClassificationRecord


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Fresh settings and default logging for every test.

    Runs from an empty directory so a developer's .env is never picked up.
    """
    monkeypatch.chdir(tmp_path)
    for name in list(os.environ):
        if name.startswith("FIELDSCORE_"):
            monkeypatch.delenv(name)
    load_settings.cache_clear()
    configure_logging()
    yield
    load_settings.cache_clear()


@pytest.fixture
def make_record():
    """Factory for classification records with sensible defaults."""

    def _make(
        file_name: str,
        field_offset: int,
        semantic_type: str = "",
        *,
        base_type: str = "String",
        locale: str = "en-US",
        type_modifier: str = "",
        record_count: int = 100,
        field_name: str | None = None,
    ) -> ClassificationRecord:
        return ClassificationRecord(
            file_name=file_name,
            field_offset=field_offset,
            locale=locale,
            record_count=record_count,
            field_name=field_name if field_name is not None else f"field{field_offset}",
            base_type=base_type,
            type_modifier=type_modifier,
            semantic_type=semantic_type,
            notes="",
        )

    return _make


@pytest.fixture
def write_csv(tmp_path):
    """Write classification records (or raw rows) to a CSV with the standard header."""

    def _write(name: str, rows: list) -> Path:
        path = tmp_path / name
        with path.open("w", newline="", encoding="utf-8") as handle:
            writer = csv.writer(handle)
            writer.writerow(CSV_HEADER)
            for row in rows:
                writer.writerow(row.to_row() if isinstance(row, ClassificationRecord) else row)
        return path

    return _write
