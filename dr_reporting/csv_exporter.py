"""
Tabular Exporter Module

Serializes the full, unfiltered record set to a CSV file for attachment to the
report email. Render options never apply here: every status is exported, in the
original input order.

Format:
- Header row naming every AssetRecord field (see models.RECORD_COLUMNS)
- UTF-8, CRLF line endings
- Minimal quoting: a field is quoted when it contains the delimiter, a quote
  character or a line break; embedded quotes are doubled
"""

import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Union

import pandas as pd

from dr_reporting.config import DATE_FORMAT_FILENAME, DATE_FORMAT_GENERATED, REPORT_FILENAME_PREFIX
from dr_reporting.errors import ExportError, SerializationError
from dr_reporting.models import AssetRecord, FIELD_COLUMNS, RECORD_COLUMNS, RECORD_FIELDS

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = list(RECORD_COLUMNS)


def _format_cell(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        try:
            return value.strftime(DATE_FORMAT_GENERATED)
        except ValueError:
            return ""
    return str(value)


def records_to_dataframe(records: Iterable[AssetRecord]) -> pd.DataFrame:
    """
    Build a string-typed DataFrame with one row per record in input order.

    Raises:
        SerializationError: An item in the sequence is not an AssetRecord
    """
    rows: List[dict] = []
    for index, record in enumerate(records):
        if not isinstance(record, AssetRecord):
            raise SerializationError(
                f"Row {index}: expected AssetRecord, got {type(record).__name__}"
            )
        rows.append({FIELD_COLUMNS[name]: _format_cell(getattr(record, name)) for name in RECORD_FIELDS})

    return pd.DataFrame(rows, columns=EXPORT_COLUMNS, dtype=object)


def build_export_filename(generated_at: Optional[datetime] = None, extension: str = ".csv") -> str:
    """Example: "DR_Report_20240115_060000.csv" """
    if generated_at is None:
        generated_at = datetime.now()
    return f"{REPORT_FILENAME_PREFIX}{generated_at.strftime(DATE_FORMAT_FILENAME)}{extension}"


def export_records_csv(records: Iterable[AssetRecord], path: Union[str, Path]) -> Path:
    """
    Write all records to a CSV file.

    Args:
        records: Full record sequence (not the grouped buckets)
        path: Destination file; parent directories are created

    Returns:
        Path of the written file

    Raises:
        ExportError: Destination cannot be created or written
        SerializationError: Sequence contains something other than AssetRecord
    """
    output_path = Path(path)
    df = records_to_dataframe(records)

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(
            output_path,
            index=False,
            encoding="utf-8",
            quoting=csv.QUOTE_MINIMAL,
            lineterminator="\r\n",
        )
    except OSError as e:
        error_msg = f"Failed to write CSV export to {output_path}: {str(e)}"
        logger.error(error_msg)
        raise ExportError(error_msg) from e

    logger.info(f"CSV export written: {output_path} ({len(df)} rows)")
    return output_path
