"""
Configuration file for the DR backup status report.

All configurable values are defined here - no hardcoded values in logic files.
Per-installation preferences (recipients, folder scope, section toggles) live in
the JSON settings document handled by dr_reporting.settings; this module only
holds constants and values read from environment variables.

IMPORTANT: Credentials (SMTP password, SQL login) are read from environment variables.
Set these in your .env file or system environment before running the pipeline.
"""

import os

# ============================================================================
# Status Values
# ============================================================================

# Status strings written by the backup engine into the status view.
# Matching is exact and case-sensitive after trimming surrounding whitespace.
STATUS_SUCCESS = "Success"
STATUS_WARNING = "Warning"
STATUS_FAILED = "Failed"

# Label used for records stored at the top of the folder tree (empty path)
ROOT_FOLDER_LABEL = "Root"

# Placeholder for a missing or unparseable last execution timestamp
MISSING_TIMESTAMP_LABEL = "N/A"

# ============================================================================
# Report Defaults
# ============================================================================

# Subtitle shown under the report heading when no schedule label is configured
DEFAULT_SCHEDULE_LABEL = "Scheduled Report"

# Default email subject template (see dr_reporting.subject_formatter for tokens)
DEFAULT_SUBJECT_TEMPLATE = "DR Report - {Date} - {Summary}"

# Report title displayed in the document header
REPORT_TITLE = "Disaster Recovery Backup Status"

# ============================================================================
# Date Format Configuration
# ============================================================================

# Header timestamp in the HTML document (e.g., "2024-01-15 06:00:00")
DATE_FORMAT_GENERATED = "%Y-%m-%d %H:%M:%S"

# Last execution column in report rows (e.g., "2024-01-15 06:00")
DATE_FORMAT_ROW = "%Y-%m-%d %H:%M"

# Subject tokens {Date} and {DateTime}
DATE_FORMAT_SUBJECT = "%Y-%m-%d"
DATETIME_FORMAT_SUBJECT = "%Y-%m-%d %H:%M"

# Export and preview filenames (e.g., "20240115_060000")
DATE_FORMAT_FILENAME = "%Y%m%d_%H%M%S"

# ============================================================================
# Database Configuration
# ============================================================================

# View exposing the latest backup status per asset
STATUS_VIEW_NAME = os.getenv("DR_STATUS_VIEW", "vw_AssetBackupStatus")

# ODBC driver used for the SQL Server connection
DB_ODBC_DRIVER = os.getenv("DR_DB_ODBC_DRIVER", "ODBC Driver 17 for SQL Server")

# SQL login (only used when useWindowsAuth is false in the settings document)
DB_USER_ENV = "DR_DB_USER"
DB_PASSWORD_ENV = "DR_DB_PASSWORD"

# Seconds to wait for the database connection
DB_CONNECT_TIMEOUT = 30

# ============================================================================
# SMTP Configuration
# ============================================================================

# SMTP settings are read from environment variables for security:
# - SMTP_SERVER: SMTP server address (e.g., 'smtp.company.local')
# - SMTP_PORT: SMTP port (default: 587 for TLS)
# - SMTP_USER: SMTP username / sender address
# - SMTP_PASSWORD: SMTP password (optional for anonymous internal relays)
# - SMTP_FROM: Sender address (defaults to SMTP_USER)
DEFAULT_SMTP_PORT = 587

# Seconds to wait for the SMTP server before giving up
SMTP_TIMEOUT_SECONDS = 30

# ============================================================================
# File Paths and Directories
# ============================================================================

# Directory for generated HTML previews and CSV exports (relative to project root)
REPORTS_DIR = os.getenv("DR_REPORTS_DIR", "reports")

# Directory for log files
LOGS_DIR = os.getenv("DR_REPORT_LOGS_DIR", "logs")

# Log file name
LOG_FILENAME = "dr_report.log"

# Default settings document location
SETTINGS_FILENAME = "dr_report_settings.json"

# Export / preview filename prefix
REPORT_FILENAME_PREFIX = "DR_Report_"
