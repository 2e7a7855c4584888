"""
Record Source Module

This module fetches the latest backup status per asset from the asset management
SQL Server database and turns the result table into AssetRecord objects.

CRITICAL SAFETY:
- READ-ONLY database access only (single SELECT against the status view)
- Parameterized folder filter
- Credentials come from the environment, never from the settings document or logs

It also loads a previously exported CSV snapshot, which lets the report be
previewed without database access.
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple, Union

import pandas as pd
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, URL

from dr_reporting.config import (
    STATUS_VIEW_NAME,
    DB_ODBC_DRIVER,
    DB_USER_ENV,
    DB_PASSWORD_ENV,
    DB_CONNECT_TIMEOUT,
)
from dr_reporting.errors import ValidationError
from dr_reporting.models import AssetRecord, FIELD_COLUMNS, RECORD_COLUMNS

logger = logging.getLogger(__name__)

SOURCE_COLUMNS = list(RECORD_COLUMNS)

_BOOL_COLUMNS = ("BackupEnabled", "Retry")
_TRUE_VALUES = {"true", "1", "yes", "y", "-1"}


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_status_query(folder_filter: Optional[str] = None):
    """
    Build the parameterized status query.

    Args:
        folder_filter: Folder path ("Plant/Line1"); matches the folder itself and
                       every folder below it. None or blank selects all folders.

    Returns:
        Tuple of (SQLAlchemy text clause, parameter dict)
    """
    column_list = ", ".join(SOURCE_COLUMNS)
    query = f"SELECT {column_list} FROM {STATUS_VIEW_NAME}"
    params = {}

    folder = (folder_filter or "").strip().strip("/")
    if folder:
        query += " WHERE FolderPath = :folder OR FolderPath LIKE :folder_prefix ESCAPE '\\'"
        params = {"folder": folder, "folder_prefix": _escape_like(folder) + "/%"}

    query += " ORDER BY FolderPath, AssetName"
    return text(query), params


def create_db_engine(database_settings: dict) -> Engine:
    """
    Create a SQLAlchemy engine for the SQL Server status database.

    Args:
        database_settings: database{} group of the settings document
                           (server, database, useWindowsAuth)

    Raises:
        ValidationError: server or database name missing
    """
    database_settings = database_settings or {}
    server = (database_settings.get("server") or "").strip()
    database = (database_settings.get("database") or "").strip()
    if not server or not database:
        raise ValidationError("Database settings require both 'server' and 'database'")

    query = {"driver": DB_ODBC_DRIVER}
    username = None
    password = None
    if database_settings.get("useWindowsAuth", True):
        query["Trusted_Connection"] = "yes"
    else:
        username = os.getenv(DB_USER_ENV)
        password = os.getenv(DB_PASSWORD_ENV)
        if not username:
            logger.warning(f"{DB_USER_ENV} is not set; connecting without a SQL login")

    url = URL.create(
        "mssql+pyodbc",
        username=username,
        password=password,
        host=server,
        database=database,
        query=query,
    )
    logger.info(f"Database engine created for {server}/{database}")
    return create_engine(url, connect_args={"timeout": DB_CONNECT_TIMEOUT})


def _to_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return False
    return str(value).strip().lower() in _TRUE_VALUES


def _to_datetime(value: object) -> Optional[datetime]:
    if value is None or pd.isna(value):
        return None
    return value.to_pydatetime()


def records_from_dataframe(df: pd.DataFrame) -> List[AssetRecord]:
    """
    Normalize a status table and convert each row to an AssetRecord.

    Missing columns are added empty, NaN text becomes "", unparseable timestamps
    become None and flag columns are coerced to bool. Row order is preserved.
    """
    df = df.copy()

    missing_columns = [col for col in SOURCE_COLUMNS if col not in df.columns]
    if missing_columns:
        logger.warning(f"Status table missing columns (filled empty): {missing_columns}")
        for col in missing_columns:
            df[col] = ""

    df["LastExecution"] = pd.to_datetime(df["LastExecution"], errors="coerce")
    for col in _BOOL_COLUMNS:
        df[col] = df[col].apply(_to_bool)

    text_columns = [col for col in SOURCE_COLUMNS if col not in _BOOL_COLUMNS and col != "LastExecution"]
    for col in text_columns:
        df[col] = df[col].fillna("").astype(str)

    # Folder paths are compared exactly; only trailing separators are normalized
    df["FolderPath"] = df["FolderPath"].str.strip().str.strip("/")

    records = []
    for row in df[SOURCE_COLUMNS].itertuples(index=False, name=None):
        values = dict(zip(SOURCE_COLUMNS, row))
        kwargs = {name: values[column] for name, column in FIELD_COLUMNS.items()}
        kwargs["last_execution"] = _to_datetime(values["LastExecution"])
        records.append(AssetRecord(**kwargs))

    logger.debug(f"Converted {len(records)} status rows to records")
    return records


def fetch_asset_records(
    engine: Engine,
    folder_filter: Optional[str] = None
) -> Tuple[bool, List[AssetRecord], Optional[str]]:
    """
    Run the status query and return the records.

    Returns:
        Tuple of (success: bool, records: List[AssetRecord], error_message: Optional[str])
    """
    try:
        query, params = build_status_query(folder_filter)
        logger.info(f"Fetching backup status records (folder filter: {folder_filter or 'all folders'})")

        with engine.connect() as connection:
            df = pd.read_sql_query(query, connection, params=params)

        records = records_from_dataframe(df)
        logger.info(f"Fetched {len(records)} backup status record(s)")
        return True, records, None

    except Exception as e:
        error_msg = f"Error fetching backup status records: {str(e)}"
        logger.error(error_msg, exc_info=True)
        return False, [], error_msg


def fetch_records_from_database(
    database_settings: dict,
    folder_filter: Optional[str] = None
) -> Tuple[bool, List[AssetRecord], Optional[str]]:
    """Create an engine from settings, fetch the records and dispose of the engine."""
    try:
        engine = create_db_engine(database_settings)
    except Exception as e:
        error_msg = f"Failed to create database engine: {str(e)}"
        logger.error(error_msg, exc_info=True)
        return False, [], error_msg

    try:
        return fetch_asset_records(engine, folder_filter)
    finally:
        engine.dispose()
        logger.debug("Database engine disposed")


def load_records_csv(path: Union[str, Path]) -> Tuple[bool, List[AssetRecord], Optional[str]]:
    """
    Load records from a CSV export (same columns as the status view).

    Returns:
        Tuple of (success: bool, records: List[AssetRecord], error_message: Optional[str])
    """
    csv_path = Path(path)
    if not csv_path.is_file():
        error_msg = f"Records CSV not found: {csv_path}"
        logger.error(error_msg)
        return False, [], error_msg

    try:
        df = pd.read_csv(csv_path, dtype=str, keep_default_na=False, encoding="utf-8")
    except Exception as e:
        error_msg = f"Failed to read records CSV {csv_path}: {str(e)}"
        logger.error(error_msg, exc_info=True)
        return False, [], error_msg

    records = records_from_dataframe(df)
    logger.info(f"Loaded {len(records)} record(s) from {csv_path}")
    return True, records, None
