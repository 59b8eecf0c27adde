"""Partition a record stream into per-file label groups."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from fieldscore.core.logging import ScanMetrics, get_logger
from fieldscore.core.models import ClassificationRecord

logger = get_logger(__name__)


@dataclass(frozen=True)
class FileGroup:
    """Semantic-type labels of one file's fields, in stream order.

    Unlabeled fields and fields with unscored base types hold "".
    """

    file_name: str
    labels: tuple[str, ...]


def _label(record: ClassificationRecord) -> str:
    return record.semantic_type if record.is_scored else ""


def iter_file_groups(
    records: Iterable[ClassificationRecord],
    *,
    flush_trailing: bool = False,
    metrics: ScanMetrics | None = None,
) -> Iterator[FileGroup]:
    """Yield one group per contiguous run of records sharing a file name.

    The stream must already be contiguous by file; a file whose records are
    split across runs yields several groups. A group is emitted when the next
    file starts, so the final group is only emitted when flush_trailing is set.

    Args:
        records: Classification records, grouped by file
        flush_trailing: Also emit the group still open at end of stream
        metrics: Optional pass counters to update
    """
    current_file: str | None = None
    labels: list[str] = []

    for record in records:
        if metrics is not None:
            metrics.records_read += 1
        if current_file is not None and record.file_name != current_file:
            if metrics is not None:
                metrics.groups += 1
            yield FileGroup(current_file, tuple(labels))
            labels = []
        current_file = record.file_name
        labels.append(_label(record))

    if current_file is None:
        return

    if flush_trailing:
        if metrics is not None:
            metrics.groups += 1
        yield FileGroup(current_file, tuple(labels))
    else:
        logger.warning(
            "trailing_group_dropped",
            file_name=current_file,
            fields=len(labels),
            labeled=sum(1 for label in labels if label),
        )
