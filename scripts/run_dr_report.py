#!/usr/bin/env python3
"""
Runner Script for the DR Backup Status Report

Modes:
    Unattended:    run_dr_report.py --config /path/to/dr_report_settings.json
    Preview only:  run_dr_report.py --config settings.json --preview
    Offline:       run_dr_report.py --config settings.json --preview --records-csv DR_Report_x.csv
    Interactive:   run_dr_report.py   (prompts for the settings file and whether to send)

Unattended mode exits with status 0 on success and 1 on failure.

CRON CONFIGURATION:
-------------------
# Run every Monday at 06:00 server time
0 6 * * 1 /usr/bin/python3 /path/to/project/scripts/run_dr_report.py --config /path/to/dr_report_settings.json >> /path/to/project/logs/cron.log 2>&1

CRON EXPRESSION BREAKDOWN:
- 0: Minute
- 6: Hour (06:00)
- *: Day of month (any)
- *: Month (any)
- 1: Day of week (Monday)

Only weekly and daily cadences are expressed here. A "monthly" schedule in the
settings document has no exact cron counterpart in this setup (it was historically
approximated by a weekly trigger); pick the cadence explicitly when registering.

ENVIRONMENT VARIABLES:
----------------------
Cron does NOT load .env files. Make these available to the cron environment:
- SMTP_SERVER, SMTP_PORT (optional), SMTP_USER, SMTP_PASSWORD (optional), SMTP_FROM (optional)
- DR_DB_USER, DR_DB_PASSWORD (only when useWindowsAuth is false)
- DR_REPORTS_DIR, DR_REPORT_LOGS_DIR (optional)

LOGGING:
--------
- Cron output: logs/cron.log (stdout/stderr from this script)
- Application logs: logs/dr_report.log (from dr_reporting modules)
"""

import argparse
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dr_reporting.config import SETTINGS_FILENAME
from dr_reporting.logger import configure_logging
from dr_reporting.orchestrator import run_dr_reporting_pipeline
from dr_reporting.record_source import load_records_csv
from dr_reporting.settings import load_settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate and send the DR backup status report.")
    parser.add_argument("--config", help="Path to the settings JSON document (unattended mode)")
    parser.add_argument("--preview", action="store_true", help="Write the report files only; do not send email")
    parser.add_argument("--records-csv", help="Read records from a CSV export instead of the database")
    parser.add_argument("--output-dir", help="Directory for the HTML document and CSV export")
    return parser


def _prompt_interactive() -> tuple:
    """Ask for the settings file and whether to send. Returns (config_path, preview_only)."""
    config_path = input(f"Settings file [{SETTINGS_FILENAME}]: ").strip() or SETTINGS_FILENAME
    answer = input("Send the report by email? [y/N]: ").strip().lower()
    return config_path, answer not in ("y", "yes")


def main(argv=None) -> int:
    """
    Main entry point.

    Returns:
        Process exit code (0 success, 1 failure)
    """
    args = build_parser().parse_args(argv)

    try:
        if args.config:
            config_path, preview_only = args.config, args.preview
        else:
            config_path, preview_only = _prompt_interactive()
            preview_only = preview_only or args.preview

        print("=" * 70)
        print("DR REPORT: Starting")
        print("=" * 70)
        print(f"Log file: {configure_logging()}")

        success, settings, error = load_settings(config_path)
        if not success:
            print(f"DR REPORT: Could not load settings: {error}")
            return 1

        records = None
        if args.records_csv:
            success, records, error = load_records_csv(args.records_csv)
            if not success:
                print(f"DR REPORT: Could not load records: {error}")
                return 1

        success, result = run_dr_reporting_pipeline(
            settings,
            preview_only=preview_only,
            records=records,
            output_dir=args.output_dir,
        )

        print("=" * 70)
        if success:
            print("DR REPORT: Completed successfully")
            print(f"Report document: {result}")
            print("=" * 70)
            return 0

        print("DR REPORT: Failed")
        print(f"Error: {result}")
        print("=" * 70)
        return 1

    except (KeyboardInterrupt, EOFError):
        print()
        print("DR REPORT: Cancelled")
        return 1
    except Exception as e:
        print()
        print("=" * 70)
        print("DR REPORT: Unexpected error")
        print(f"Error: {str(e)}")
        print("=" * 70)
        return 1


if __name__ == "__main__":
    sys.exit(main())
