"""
Settings Module

Loads and saves the per-installation settings document (JSON). The document has
four groups:

    {
      "database": {"server": "...", "database": "...", "useWindowsAuth": true},
      "report":   {"scope": "all", "folderFilter": "", "failedOnly": false,
                   "includeWarnings": true, "includeSuccess": false,
                   "includeFullMessage": false, "attachCsv": true},
      "email":    {"to": ["ops@company.com"], "cc": [], "subjectTemplate": "DR Report - {Date} - {Summary}"},
      "schedule": {"enabled": false, "frequency": "weekly", "dayOfWeek": "Monday", "time": "06:00"}
    }

Values missing from the file fall back to default_settings(). The schedule group is
persisted for the task scheduler integration only; nothing in this package reads it
to decide when to run.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Optional, Tuple, Union

from dr_reporting.config import DEFAULT_SCHEDULE_LABEL, DEFAULT_SUBJECT_TEMPLATE
from dr_reporting.errors import ValidationError

logger = logging.getLogger(__name__)

SCOPE_ALL = "all"
SCOPE_FOLDER = "folder"

_DEFAULT_SETTINGS = {
    "database": {
        "server": "",
        "database": "",
        "useWindowsAuth": True,
    },
    "report": {
        "scope": SCOPE_ALL,
        "folderFilter": "",
        "failedOnly": False,
        "includeWarnings": True,
        "includeSuccess": False,
        "includeFullMessage": False,
        "attachCsv": True,
    },
    "email": {
        "to": [],
        "cc": [],
        "subjectTemplate": DEFAULT_SUBJECT_TEMPLATE,
    },
    "schedule": {
        "enabled": False,
        "frequency": "weekly",
        "dayOfWeek": "Monday",
        "time": "06:00",
    },
}


def default_settings() -> dict:
    return copy.deepcopy(_DEFAULT_SETTINGS)


def merge_settings(overrides: dict) -> dict:
    """Overlay a (possibly partial) settings document on the defaults, group by group."""
    settings = default_settings()
    for group, values in (overrides or {}).items():
        if group not in settings:
            logger.warning(f"Ignoring unknown settings group: {group}")
            continue
        if not isinstance(values, dict):
            logger.warning(f"Ignoring settings group '{group}': expected an object")
            continue
        settings[group].update(values)
    return settings


def folder_filter_for(settings: dict) -> Optional[str]:
    """Folder filter to pass to the record source, or None for all folders."""
    report = settings.get("report", {})
    if report.get("scope") == SCOPE_FOLDER:
        return (report.get("folderFilter") or "").strip() or None
    return None


def schedule_label_for(settings: dict) -> str:
    """
    Header subtitle describing the configured schedule.

    Example: "Weekly run - Monday 06:00"; a disabled schedule gives DEFAULT_SCHEDULE_LABEL.
    """
    schedule = settings.get("schedule", {})
    if not schedule.get("enabled"):
        return DEFAULT_SCHEDULE_LABEL
    frequency = str(schedule.get("frequency") or "").strip().capitalize() or "Scheduled"
    when = " ".join(str(schedule.get(key) or "").strip() for key in ("dayOfWeek", "time")).strip()
    return f"{frequency} run - {when}" if when else f"{frequency} run"


def validate_settings(settings: dict, require_recipients: bool = True) -> None:
    """
    Check the settings needed for a run.

    Args:
        settings: Merged settings document
        require_recipients: False for preview runs that never send mail

    Raises:
        ValidationError: Bad scope, folder scope without a folder, or no recipients
    """
    report = settings.get("report", {})
    scope = report.get("scope", SCOPE_ALL)
    if scope not in (SCOPE_ALL, SCOPE_FOLDER):
        raise ValidationError(f"Invalid report scope '{scope}'. Expected '{SCOPE_ALL}' or '{SCOPE_FOLDER}'")
    if scope == SCOPE_FOLDER and not (report.get("folderFilter") or "").strip():
        raise ValidationError("Report scope is 'folder' but no folderFilter is set")

    email = settings.get("email", {})
    for key in ("to", "cc"):
        if not isinstance(email.get(key, []), list):
            raise ValidationError(f"email.{key} must be a list of addresses")
    if require_recipients and not email.get("to"):
        raise ValidationError("No email recipients configured (email.to is empty)")


def load_settings(path: Union[str, Path]) -> Tuple[bool, dict, Optional[str]]:
    """
    Load the settings document and merge it over the defaults.

    Returns:
        Tuple of (success: bool, settings: dict, error_message: Optional[str])
        On failure the defaults are returned alongside the error.
    """
    settings_path = Path(path)
    if not settings_path.is_file():
        error_msg = f"Settings file not found: {settings_path}"
        logger.error(error_msg)
        return False, default_settings(), error_msg

    try:
        with settings_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        error_msg = f"Failed to read settings file {settings_path}: {str(e)}"
        logger.error(error_msg)
        return False, default_settings(), error_msg

    if not isinstance(data, dict):
        error_msg = f"Settings file {settings_path} must contain a JSON object"
        logger.error(error_msg)
        return False, default_settings(), error_msg

    logger.info(f"Loaded settings from {settings_path}")
    return True, merge_settings(data), None


def save_settings(settings: dict, path: Union[str, Path]) -> Tuple[bool, Optional[str]]:
    """
    Write the settings document as indented JSON.

    Returns:
        Tuple of (success: bool, error_message: Optional[str])
    """
    settings_path = Path(path)
    try:
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        with settings_path.open("w", encoding="utf-8") as f:
            json.dump(merge_settings(settings), f, indent=2)
            f.write("\n")
    except OSError as e:
        error_msg = f"Failed to save settings to {settings_path}: {str(e)}"
        logger.error(error_msg)
        return False, error_msg

    logger.info(f"Settings saved to {settings_path}")
    return True, None
