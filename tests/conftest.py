from __future__ import annotations

import os
import sys
import tempfile
from datetime import datetime
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parents[1].as_posix()
if _ROOT not in sys.path:
    sys.path.insert(0, _ROOT)

# Keep test logs out of the working tree (read when dr_reporting.config is imported)
os.environ.setdefault("DR_REPORT_LOGS_DIR", tempfile.mkdtemp(prefix="dr_report_logs_"))

from dr_reporting.models import AssetRecord  # noqa: E402


def make_record(**overrides) -> AssetRecord:
    values = {
        "folder_path": "Plant/Line1",
        "asset_name": "PLC-01",
        "asset_type": "ControlLogix",
        "address": "10.0.0.1",
        "status": "Success",
        "status_text": "Backup OK",
        "last_execution": datetime(2024, 1, 15, 6, 0),
    }
    values.update(overrides)
    return AssetRecord(**values)


@pytest.fixture
def five_records() -> list[AssetRecord]:
    """2 Success, 1 Warning, 2 Failed spread over two folders."""
    return [
        make_record(folder_path="Plant/Line2", asset_name="PLC-B", status="Failed", status_text="Backup Failed",
                    error_message="Device not responding"),
        make_record(folder_path="Plant/Line1", asset_name="HMI-1", status="Success", status_text="Backup OK"),
        make_record(folder_path="Plant/Line1", asset_name="PLC-A", status="Failed", status_text="Backup Failed",
                    error_message="Timeout, retry limit \"3\" reached"),
        make_record(folder_path="Plant/Line2", asset_name="Drive-7", status="Warning", status_text="Compare differs"),
        make_record(folder_path="Plant/Line2", asset_name="HMI-2", status="Success", status_text="Backup OK",
                    last_execution=None),
    ]


@pytest.fixture
def generated_at() -> datetime:
    return datetime(2024, 1, 15, 6, 30, 0)
