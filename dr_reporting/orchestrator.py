"""
Main Orchestrator Module

build_report() is the single pure entry point of the report core: records and
options in, document / subject / summary out, no I/O.

run_dr_reporting_pipeline() is the glue used by the command-line runner:
1. Validate settings
2. Fetch backup status records (database or supplied records)
3. Build the report (document, subject, summary)
4. Write the HTML document and, when enabled, the CSV export
5. Send the email (skipped in preview mode)

On failure it sends a best-effort failure notification to the same recipients.
All business logic lives in the individual modules.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from dr_reporting.aggregator import classify_records
from dr_reporting.config import DEFAULT_SUBJECT_TEMPLATE, REPORTS_DIR
from dr_reporting.csv_exporter import build_export_filename, export_records_csv
from dr_reporting.email_sender import send_email
from dr_reporting.models import AssetRecord, RenderOptions, ReportSummary
from dr_reporting.record_source import fetch_records_from_database
from dr_reporting.report_body_generator import generate_failure_document, generate_report_document
from dr_reporting.settings import folder_filter_for, schedule_label_for, validate_settings
from dr_reporting.subject_formatter import format_subject

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportResult:
    document: str
    subject: str
    summary: ReportSummary
    export_filename: str
    generated_at: datetime


def build_report(
    records: Sequence[AssetRecord],
    options: RenderOptions,
    subject_template: Optional[str] = DEFAULT_SUBJECT_TEMPLATE,
    generated_at: Optional[datetime] = None
) -> ReportResult:
    """
    Classify the records and render the document and subject.

    Calling this twice with identical inputs yields identical output apart from
    the generation timestamp (fix generated_at to make it byte-identical).

    Args:
        records: Fully materialized record sequence
        options: Section toggles
        subject_template: Subject template with {Token} placeholders
        generated_at: Timestamp for the header, subject and export filename (default: now)

    Raises:
        ValidationError: Malformed options; nothing is rendered
    """
    options.validate()

    if generated_at is None:
        generated_at = datetime.now()

    classified = classify_records(records)
    document = generate_report_document(classified, options, generated_at)
    subject = format_subject(subject_template, classified.summary, generated_at)

    return ReportResult(
        document=document,
        subject=subject,
        summary=classified.summary,
        export_filename=build_export_filename(generated_at),
        generated_at=generated_at,
    )


def send_failure_notification(settings: dict, error_message: str) -> Tuple[bool, Optional[str]]:
    """Best-effort failure email to the configured recipients."""
    email = settings.get("email", {})
    recipients = email.get("to") or []
    if not recipients:
        logger.warning("No recipients configured. Failure notification not sent.")
        return False, "No recipients configured"

    try:
        html_body = generate_failure_document(
            error_message,
            schedule_label=schedule_label_for(settings),
        )
        subject = email.get("subjectTemplate") or DEFAULT_SUBJECT_TEMPLATE
        subject = subject.replace("{Summary}", "REPORT FAILED")
        subject = format_subject(subject, ReportSummary())
    except Exception as e:
        error_msg = f"Could not build failure notification: {str(e)}"
        logger.error(error_msg, exc_info=True)
        return False, error_msg

    return send_email(
        to_emails=recipients,
        subject=subject,
        html_body=html_body,
        cc_emails=email.get("cc") or [],
    )


def run_dr_reporting_pipeline(
    settings: dict,
    preview_only: bool = False,
    records: Optional[List[AssetRecord]] = None,
    output_dir: Optional[str] = None,
    generated_at: Optional[datetime] = None
) -> Tuple[bool, Optional[str]]:
    """
    Run the DR report end-to-end.

    Args:
        settings: Merged settings document (see dr_reporting.settings)
        preview_only: Write the document (and CSV) but never send email
        records: Records to report on. If None, they are fetched from the database.
        output_dir: Directory for the HTML document and CSV export (default: REPORTS_DIR)
        generated_at: Report timestamp (default: now)

    Returns:
        Tuple of (success: bool, result: Optional[str])
        - result: HTML document path on success, error message on failure
    """
    try:
        result = _run_pipeline_steps(settings, preview_only, records, output_dir, generated_at)
    except Exception as e:
        error_msg = f"Unexpected error in reporting pipeline: {str(e)}"
        logger.error(error_msg, exc_info=True)
        result = (False, error_msg)

    success, detail = result
    if not success and not preview_only:
        logger.info("Sending failure notification...")
        sent, send_error = send_failure_notification(settings, detail or "Unknown error")
        if not sent:
            logger.warning(f"Failure notification not sent: {send_error}")
    return result


def _run_pipeline_steps(
    settings: dict,
    preview_only: bool,
    records: Optional[List[AssetRecord]],
    output_dir: Optional[str],
    generated_at: Optional[datetime]
) -> Tuple[bool, Optional[str]]:
    logger.info("=" * 70)
    logger.info("Starting DR Backup Status Report")
    logger.info("=" * 70)
    logger.info(f"Preview only: {preview_only}")
    logger.info("")

    report_settings = settings.get("report", {})
    email_settings = settings.get("email", {})
    out_dir = Path(output_dir or REPORTS_DIR)

    # Step 1: Validate settings and build render options
    logger.info("STEP 1: Validating settings...")
    try:
        validate_settings(settings, require_recipients=not preview_only)
        options = RenderOptions.from_settings(report_settings, schedule_label=schedule_label_for(settings))
    except Exception as e:
        error_msg = f"Invalid settings: {str(e)}"
        logger.error(error_msg)
        return False, error_msg
    logger.info("✓ Step 1 completed: Settings valid")
    logger.info("")

    # Step 2: Resolve records
    logger.info("STEP 2: Fetching backup status records...")
    if records is None:
        success, records, error = fetch_records_from_database(
            settings.get("database", {}),
            folder_filter=folder_filter_for(settings),
        )
        if not success:
            error_msg = f"Failed to fetch backup status records: {error}"
            logger.error(error_msg)
            return False, error_msg
    else:
        logger.info(f"Using {len(records)} supplied record(s)")

    if not records:
        logger.warning("Record set is empty. The report will contain no sections.")
    logger.info("✓ Step 2 completed: Records resolved")
    logger.info("")

    # Step 3: Build report
    logger.info("STEP 3: Building report...")
    report = build_report(
        records,
        options,
        subject_template=email_settings.get("subjectTemplate") or DEFAULT_SUBJECT_TEMPLATE,
        generated_at=generated_at,
    )
    summary = report.summary
    logger.info(f"Summary: total={summary.total}, failed={summary.failed}, "
                f"warning={summary.warning}, success={summary.success}, other={summary.unclassified}")
    logger.info(f"Subject: {report.subject}")
    logger.info("✓ Step 3 completed: Report built")
    logger.info("")

    # Step 4: Write document and export
    logger.info("STEP 4: Writing report files...")
    document_path = out_dir / build_export_filename(report.generated_at, extension=".html")
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        document_path.write_text(report.document, encoding="utf-8")
    except OSError as e:
        error_msg = f"Failed to write report document {document_path}: {str(e)}"
        logger.error(error_msg)
        return False, error_msg
    logger.info(f"Report document written: {document_path}")

    attachments = []
    if report_settings.get("attachCsv", True):
        try:
            csv_path = export_records_csv(records, out_dir / report.export_filename)
        except Exception as e:
            error_msg = f"Failed to export CSV: {str(e)}"
            logger.error(error_msg)
            return False, error_msg
        attachments.append(str(csv_path))
    logger.info("✓ Step 4 completed: Report files written")
    logger.info("")

    # Step 5: Send email (if not preview)
    logger.info("STEP 5: Sending email...")
    if preview_only:
        logger.info("PREVIEW MODE: Email sending skipped")
        logger.info(f"Would send to {len(email_settings.get('to') or [])} recipient(s)")
    else:
        success, error = send_email(
            to_emails=email_settings.get("to") or [],
            subject=report.subject,
            html_body=report.document,
            cc_emails=email_settings.get("cc") or [],
            attachments=attachments or None,
        )
        if not success:
            error_msg = f"Failed to send email: {error}"
            logger.error(error_msg)
            return False, error_msg
    logger.info("✓ Step 5 completed: Email sent (or skipped in preview)")
    logger.info("")

    logger.info("=" * 70)
    logger.info("DR report completed successfully")
    logger.info(f"Report document: {document_path}")
    logger.info("=" * 70)
    return True, str(document_path)
