"""
Subject Formatter Module

Substitutes a fixed set of braced tokens into the user-provided email subject.

Supported tokens:
    {Date}          current date (YYYY-MM-DD)
    {DateTime}      current date and time (YYYY-MM-DD HH:MM)
    {SuccessCount}  number of successful backups
    {WarningCount}  number of backups with warnings
    {FailedCount}   number of failed backups
    {TotalCount}    number of assets in the report
    {Summary}       FAILED (n) / WARNINGS (n) / ALL OK

Any other text, including unknown {Tokens}, is left unchanged.
"""

from datetime import datetime
from typing import Dict, Optional

from dr_reporting.config import DATE_FORMAT_SUBJECT, DATETIME_FORMAT_SUBJECT
from dr_reporting.models import ReportSummary


def summary_label(summary: ReportSummary) -> str:
    if summary.failed > 0:
        return f"FAILED ({summary.failed})"
    if summary.warning > 0:
        return f"WARNINGS ({summary.warning})"
    return "ALL OK"


def subject_tokens(summary: ReportSummary, now: datetime) -> Dict[str, str]:
    return {
        "{Date}": now.strftime(DATE_FORMAT_SUBJECT),
        "{DateTime}": now.strftime(DATETIME_FORMAT_SUBJECT),
        "{SuccessCount}": str(summary.success),
        "{WarningCount}": str(summary.warning),
        "{FailedCount}": str(summary.failed),
        "{TotalCount}": str(summary.total),
        "{Summary}": summary_label(summary),
    }


def format_subject(template: Optional[str], summary: ReportSummary, now: Optional[datetime] = None) -> str:
    """
    Generate the email subject line from a template.

    Example:
        format_subject("DR Report - {Date} - {Summary}", ReportSummary(success=3, warning=1))
        -> "DR Report - 2024-01-15 - WARNINGS (1)"

    Args:
        template: Subject template (None is treated as empty)
        summary: Status counts of the report
        now: Date used for {Date}/{DateTime} (default: current time)

    Returns:
        Formatted subject string
    """
    if now is None:
        now = datetime.now()

    subject = template or ""
    for literal, value in subject_tokens(summary, now).items():
        subject = subject.replace(literal, value)
    return subject
