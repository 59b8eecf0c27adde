"""Producers of classification record streams.

- records: the 9-column CSV Record Source
- extract: column extraction over the raw CSV
- converter: detector analysis JSON to flat records
- catalog: open-data catalog discovery and download
"""

from fieldscore.sources.records import RecordSource, read_records

__all__ = [
    "RecordSource",
    "read_records",
]
