"""
Record Model

Typed representation of the asset backup status rows and of the structures
derived from them during a single report generation:

- AssetRecord: one asset's most recent backup status row
- BackupStatus: closed set of recognized statuses (plus UNRECOGNIZED)
- FolderGroup / StatusBucket: grouped, ordered view used by the renderer
- ReportSummary: status counts
- RenderOptions: section toggles for one render

All types are immutable; nothing here is shared between invocations.
"""

from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from dr_reporting.config import (
    STATUS_SUCCESS,
    STATUS_WARNING,
    STATUS_FAILED,
    ROOT_FOLDER_LABEL,
    DEFAULT_SCHEDULE_LABEL,
)
from dr_reporting.errors import ValidationError


class BackupStatus(Enum):
    SUCCESS = STATUS_SUCCESS
    WARNING = STATUS_WARNING
    FAILED = STATUS_FAILED
    UNRECOGNIZED = "Unrecognized"

    @classmethod
    def classify(cls, status: Optional[str]) -> "BackupStatus":
        """
        Map a raw status string onto a recognized status.

        Matching is exact and case-sensitive after trimming whitespace.
        Anything else (including None and the literal "Unrecognized") is UNRECOGNIZED.
        """
        text = (status or "").strip()
        for member in (cls.FAILED, cls.WARNING, cls.SUCCESS):
            if text == member.value:
                return member
        return cls.UNRECOGNIZED

    @property
    def css_class(self) -> str:
        return self.name.lower()


# Order in which recognized sections appear in the document
RECOGNIZED_STATUSES = (BackupStatus.FAILED, BackupStatus.WARNING, BackupStatus.SUCCESS)


@dataclass(frozen=True)
class AssetRecord:
    """One row of the backup status view. Field order is the export column order."""
    folder_path: str = ""
    asset_name: str = ""
    description: str = ""
    asset_type: str = ""
    address: str = ""
    catalog_number: str = ""
    hardware_revision: str = ""
    firmware_revision: str = ""
    serial_number: str = ""
    backup_enabled: bool = False
    schedule_name: str = ""
    last_execution: Optional[datetime] = None
    status: str = ""
    status_text: str = ""
    error_message: str = ""
    extended_error: str = ""
    retry: bool = False
    route: str = ""
    message_type: str = ""
    full_message: str = ""

    @property
    def status_kind(self) -> BackupStatus:
        return BackupStatus.classify(self.status)

    @property
    def folder_label(self) -> str:
        return self.folder_path or ROOT_FOLDER_LABEL


# Field names in declaration order
RECORD_FIELDS = tuple(f.name for f in fields(AssetRecord))

# Column names used by the status view and the CSV export, keyed by field name
FIELD_COLUMNS = {
    "folder_path": "FolderPath",
    "asset_name": "AssetName",
    "description": "Description",
    "asset_type": "AssetType",
    "address": "Address",
    "catalog_number": "CatalogNumber",
    "hardware_revision": "HardwareRevision",
    "firmware_revision": "FirmwareRevision",
    "serial_number": "SerialNumber",
    "backup_enabled": "BackupEnabled",
    "schedule_name": "ScheduleName",
    "last_execution": "LastExecution",
    "status": "Status",
    "status_text": "StatusText",
    "error_message": "ErrorMessage",
    "extended_error": "ExtendedError",
    "retry": "Retry",
    "route": "Route",
    "message_type": "MessageType",
    "full_message": "FullMessage",
}

# Column order of the export and of the source query
RECORD_COLUMNS = tuple(FIELD_COLUMNS[name] for name in RECORD_FIELDS)


@dataclass(frozen=True)
class FolderGroup:
    """Records of one status bucket that share an exact folder path."""
    folder_path: str
    records: Tuple[AssetRecord, ...] = ()

    @property
    def label(self) -> str:
        return self.folder_path or ROOT_FOLDER_LABEL


@dataclass(frozen=True)
class StatusBucket:
    """All records with one recognized status, grouped by folder in ordinal order."""
    status: BackupStatus
    groups: Tuple[FolderGroup, ...] = ()

    @property
    def count(self) -> int:
        return sum(len(group.records) for group in self.groups)

    def records(self) -> Tuple[AssetRecord, ...]:
        return tuple(record for group in self.groups for record in group.records)


@dataclass(frozen=True)
class ReportSummary:
    success: int = 0
    warning: int = 0
    failed: int = 0
    unclassified: int = 0

    @property
    def total(self) -> int:
        return self.success + self.warning + self.failed + self.unclassified

    def count_for(self, status: BackupStatus) -> int:
        return {
            BackupStatus.SUCCESS: self.success,
            BackupStatus.WARNING: self.warning,
            BackupStatus.FAILED: self.failed,
            BackupStatus.UNRECOGNIZED: self.unclassified,
        }[status]


# Keys accepted from the report{} group of the settings document
_OPTION_KEYS = {
    "failedOnly": "failed_only",
    "includeWarnings": "include_warnings",
    "includeSuccess": "include_success",
    "includeFullMessage": "include_full_message",
}

# report{} keys that belong to the caller, not to rendering
_NON_RENDER_KEYS = {"scope", "folderFilter", "attachCsv"}


@dataclass(frozen=True)
class RenderOptions:
    """Section toggles for one render. Constructed per invocation, never mutated."""
    failed_only: bool = False
    include_warnings: bool = True
    include_success: bool = False
    include_full_message: bool = False
    schedule_label: str = field(default=DEFAULT_SCHEDULE_LABEL)

    def validate(self) -> None:
        """
        Raise ValidationError when any option has the wrong type.

        Flags must be real booleans: a string such as "false" would otherwise
        silently enable a section.
        """
        for name in ("failed_only", "include_warnings", "include_success", "include_full_message"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ValidationError(f"Render option '{name}' must be a boolean, got {value!r}")
        if not isinstance(self.schedule_label, str):
            raise ValidationError(f"Render option 'schedule_label' must be a string, got {self.schedule_label!r}")

    @classmethod
    def from_settings(cls, report_settings: dict, schedule_label: Optional[str] = None) -> "RenderOptions":
        """
        Build options from the report{} group of the settings document.

        Args:
            report_settings: Dictionary such as {"includeWarnings": true, "includeSuccess": false}
            schedule_label: Header subtitle (defaults to DEFAULT_SCHEDULE_LABEL)

        Raises:
            ValidationError: Unknown key or non-boolean flag value
        """
        kwargs = {}
        for key, value in (report_settings or {}).items():
            if key in _NON_RENDER_KEYS:
                continue
            if key not in _OPTION_KEYS:
                raise ValidationError(f"Unrecognized report option: {key}")
            kwargs[_OPTION_KEYS[key]] = value
        if schedule_label is not None:
            kwargs["schedule_label"] = schedule_label
        options = cls(**kwargs)
        options.validate()
        return options
