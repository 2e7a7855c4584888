from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pandas as pd
import pytest
from sqlalchemy import create_engine

from conftest import make_record

from dr_reporting.config import STATUS_VIEW_NAME
from dr_reporting.csv_exporter import export_records_csv
from dr_reporting.errors import ValidationError
from dr_reporting.record_source import (
    SOURCE_COLUMNS,
    build_status_query,
    create_db_engine,
    fetch_asset_records,
    fetch_records_from_database,
    load_records_csv,
    records_from_dataframe,
)


def _row(folder: str, name: str, status: str = "Success", **extra) -> dict:
    row = {col: "" for col in SOURCE_COLUMNS}
    row.update({
        "FolderPath": folder,
        "AssetName": name,
        "Status": status,
        "StatusText": status,
        "BackupEnabled": 1,
        "Retry": 0,
        "LastExecution": "2024-01-15 06:00:00",
    })
    row.update(extra)
    return row


@pytest.fixture
def status_engine():
    engine = create_engine("sqlite://")
    rows = [
        _row("Plant", "P-0"),
        _row("Plant/Line1", "L1-A", "Failed", ErrorMessage="Timeout"),
        _row("Plant/Line1/Cell", "C-1", "Warning"),
        _row("Plant2", "P2-A"),
        _row("Plant_X", "PX-A"),
        _row("", "Root-A", LastExecution=None),
    ]
    pd.DataFrame(rows).to_sql(STATUS_VIEW_NAME, engine, index=False)
    yield engine
    engine.dispose()


def test_fetch_all_records(status_engine) -> None:
    success, records, error = fetch_asset_records(status_engine)

    assert success is True and error is None
    assert len(records) == 6
    failed = next(r for r in records if r.asset_name == "L1-A")
    assert failed.error_message == "Timeout"
    assert failed.backup_enabled is True and failed.retry is False
    assert failed.last_execution == datetime(2024, 1, 15, 6, 0)
    root = next(r for r in records if r.asset_name == "Root-A")
    assert root.folder_path == "" and root.last_execution is None


def test_folder_filter_matches_folder_and_descendants_only(status_engine) -> None:
    success, records, _ = fetch_asset_records(status_engine, folder_filter="Plant/")
    assert success is True
    assert sorted(r.asset_name for r in records) == ["C-1", "L1-A", "P-0"]

    _, records, _ = fetch_asset_records(status_engine, folder_filter="Plant/Line1")
    assert sorted(r.asset_name for r in records) == ["C-1", "L1-A"]


def test_folder_filter_treats_like_wildcards_literally(status_engine) -> None:
    _, records, _ = fetch_asset_records(status_engine, folder_filter="Plant_X")
    assert [r.asset_name for r in records] == ["PX-A"]


def test_query_without_filter_has_no_parameters() -> None:
    query, params = build_status_query(None)
    assert params == {}
    assert "WHERE" not in str(query)
    assert str(query).startswith("SELECT FolderPath, AssetName")


def test_fetch_failure_is_returned_not_raised() -> None:
    engine = create_engine("sqlite://")
    success, records, error = fetch_asset_records(engine)
    assert success is False
    assert records == []
    assert "Error fetching backup status records" in error


def test_database_settings_validated() -> None:
    with pytest.raises(ValidationError):
        create_db_engine({"server": "", "database": "AssetCentre"})

    success, records, error = fetch_records_from_database({"server": "sql01"})
    assert success is False and records == []
    assert "server" in error


def test_records_from_dataframe_degrades_gracefully() -> None:
    df = pd.DataFrame({
        "FolderPath": ["Plant/", None],
        "AssetName": ["A", "B"],
        "Status": ["Success", float("nan")],
        "LastExecution": ["not a date", None],
        "BackupEnabled": ["yes", None],
    })
    records = records_from_dataframe(df)

    assert [r.folder_path for r in records] == ["Plant", ""]
    assert records[1].status == ""
    assert records[0].last_execution is None
    assert records[0].backup_enabled is True and records[1].backup_enabled is False
    assert records[0].full_message == ""


def test_csv_export_loads_back(five_records, tmp_path: Path) -> None:
    path = export_records_csv(five_records, tmp_path / "snapshot.csv")
    success, records, error = load_records_csv(path)

    assert success is True and error is None
    assert records == five_records


def test_load_missing_csv(tmp_path: Path) -> None:
    success, records, error = load_records_csv(tmp_path / "missing.csv")
    assert success is False and records == []
    assert "not found" in error


def test_unicode_round_trip(tmp_path: Path) -> None:
    record = make_record(asset_name="Presse №4 – Ölpumpe", error_message='a,"b"\nc')
    path = export_records_csv([record], tmp_path / "u.csv")
    _, records, _ = load_records_csv(path)
    assert records == [record]
