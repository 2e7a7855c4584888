from __future__ import annotations

import json
from pathlib import Path

import pytest

from dr_reporting.errors import ValidationError
from dr_reporting.settings import (
    default_settings,
    folder_filter_for,
    load_settings,
    merge_settings,
    save_settings,
    schedule_label_for,
    validate_settings,
)


def test_partial_file_merges_over_defaults(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({
        "report": {"includeSuccess": True},
        "email": {"to": ["ops@example.com"]},
        "unknown": {"x": 1},
    }), encoding="utf-8")

    success, settings, error = load_settings(path)

    assert success is True and error is None
    assert settings["report"]["includeSuccess"] is True
    assert settings["report"]["includeWarnings"] is True
    assert settings["email"]["subjectTemplate"] == "DR Report - {Date} - {Summary}"
    assert "unknown" not in settings


def test_missing_and_malformed_files(tmp_path: Path) -> None:
    success, settings, error = load_settings(tmp_path / "nope.json")
    assert success is False and "not found" in error
    assert settings == default_settings()

    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    success, _, error = load_settings(bad)
    assert success is False and "Failed to read" in error

    array = tmp_path / "array.json"
    array.write_text("[]", encoding="utf-8")
    success, _, error = load_settings(array)
    assert success is False and "JSON object" in error


def test_save_then_load(tmp_path: Path) -> None:
    settings = merge_settings({"database": {"server": "sql01", "database": "AssetCentre"}})
    path = tmp_path / "conf" / "settings.json"

    assert save_settings(settings, path) == (True, None)
    success, loaded, _ = load_settings(path)
    assert success is True
    assert loaded == settings


def test_folder_filter_only_for_folder_scope() -> None:
    settings = merge_settings({"report": {"scope": "all", "folderFilter": "Plant"}})
    assert folder_filter_for(settings) is None

    settings = merge_settings({"report": {"scope": "folder", "folderFilter": " Plant/Line1 "}})
    assert folder_filter_for(settings) == "Plant/Line1"


def test_validate_settings() -> None:
    good = merge_settings({"email": {"to": ["ops@example.com"]}})
    validate_settings(good)

    with pytest.raises(ValidationError, match="recipients"):
        validate_settings(default_settings())
    validate_settings(default_settings(), require_recipients=False)

    with pytest.raises(ValidationError, match="scope"):
        validate_settings(merge_settings({"report": {"scope": "site"}}), require_recipients=False)

    with pytest.raises(ValidationError, match="folderFilter"):
        validate_settings(merge_settings({"report": {"scope": "folder"}}), require_recipients=False)

    with pytest.raises(ValidationError, match="email.cc"):
        validate_settings(merge_settings({"email": {"to": ["a@b.c"], "cc": "x@y.z"}}))


def test_schedule_label() -> None:
    assert schedule_label_for(default_settings()) == "Scheduled Report"
    settings = merge_settings({"schedule": {"enabled": True, "frequency": "weekly", "dayOfWeek": "Monday",
                                            "time": "06:00"}})
    assert schedule_label_for(settings) == "Weekly run - Monday 06:00"
