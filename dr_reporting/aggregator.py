"""
Classifier & Aggregator Module

This module computes status counts and builds the folder-grouped, status-partitioned
view of a record set that the report renderer consumes.

Logic:
- Classifies every record by its status (Success / Warning / Failed / unrecognized)
- Sorts once by the composite key (status rank, folder path, asset name)
- Splits the sorted sequence into contiguous status buckets and folder groups

Ordering is ordinal (plain string comparison, case-sensitive) so identical input
always yields identical output regardless of the input order.

This module is pure data processing - no I/O, no rendering.
"""

import logging
from dataclasses import dataclass
from itertools import groupby
from typing import Dict, Iterable, List, Tuple

from dr_reporting.models import (
    AssetRecord,
    BackupStatus,
    FolderGroup,
    RECOGNIZED_STATUSES,
    RECORD_FIELDS,
    ReportSummary,
    StatusBucket,
)

logger = logging.getLogger(__name__)

_STATUS_RANK = {
    BackupStatus.FAILED: 0,
    BackupStatus.WARNING: 1,
    BackupStatus.SUCCESS: 2,
    BackupStatus.UNRECOGNIZED: 3,
}


@dataclass(frozen=True)
class ClassifiedRecords:
    """Result of one classification pass."""
    summary: ReportSummary
    buckets: Dict[BackupStatus, StatusBucket]
    unclassified: Tuple[AssetRecord, ...] = ()

    def bucket(self, status: BackupStatus) -> StatusBucket:
        return self.buckets.get(status, StatusBucket(status=status))


def _sort_key(record: AssetRecord) -> tuple:
    # Remaining fields break ties between rows sharing folder and name
    return (
        _STATUS_RANK[record.status_kind],
        record.folder_path or "",
        record.asset_name or "",
        tuple(str(getattr(record, name)) for name in RECORD_FIELDS),
    )


def summarize_records(records: Iterable[AssetRecord]) -> ReportSummary:
    """
    Count records per status.

    Returns:
        ReportSummary where total == number of records
    """
    counts = {status: 0 for status in _STATUS_RANK}
    for record in records:
        counts[record.status_kind] += 1
    return ReportSummary(
        success=counts[BackupStatus.SUCCESS],
        warning=counts[BackupStatus.WARNING],
        failed=counts[BackupStatus.FAILED],
        unclassified=counts[BackupStatus.UNRECOGNIZED],
    )


def classify_records(records: Iterable[AssetRecord]) -> ClassifiedRecords:
    """
    Partition records into status buckets grouped by folder.

    Args:
        records: Finite sequence of AssetRecord (any order)

    Returns:
        ClassifiedRecords with the summary, one StatusBucket per recognized status
        (always present, possibly empty) and the unrecognized records in sorted order
    """
    ordered: List[AssetRecord] = sorted(records, key=_sort_key)

    buckets: Dict[BackupStatus, StatusBucket] = {
        status: StatusBucket(status=status) for status in RECOGNIZED_STATUSES
    }
    unclassified: Tuple[AssetRecord, ...] = ()

    for status, status_records in groupby(ordered, key=lambda r: r.status_kind):
        status_records = list(status_records)
        if status is BackupStatus.UNRECOGNIZED:
            unclassified = tuple(status_records)
            continue
        groups = tuple(
            FolderGroup(folder_path=folder, records=tuple(folder_records))
            for folder, folder_records in groupby(status_records, key=lambda r: r.folder_path or "")
        )
        buckets[status] = StatusBucket(status=status, groups=groups)

    summary = ReportSummary(
        success=buckets[BackupStatus.SUCCESS].count,
        warning=buckets[BackupStatus.WARNING].count,
        failed=buckets[BackupStatus.FAILED].count,
        unclassified=len(unclassified),
    )

    logger.debug(
        f"Classified {summary.total} records: failed={summary.failed}, warning={summary.warning}, "
        f"success={summary.success}, unclassified={summary.unclassified}"
    )
    if unclassified:
        unknown = sorted({(r.status or "").strip() for r in unclassified})
        logger.warning(f"{len(unclassified)} record(s) with unrecognized status: {unknown}")

    return ClassifiedRecords(summary=summary, buckets=buckets, unclassified=unclassified)


def group_records(records: Iterable[AssetRecord]) -> Dict[BackupStatus, StatusBucket]:
    """Return only the three recognized status buckets."""
    return classify_records(records).buckets
