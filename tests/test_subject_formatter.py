from __future__ import annotations

from datetime import datetime

from dr_reporting.models import ReportSummary
from dr_reporting.subject_formatter import format_subject, summary_label

NOW = datetime(2024, 3, 5, 7, 45)


def test_warning_summary_example() -> None:
    subject = format_subject("DR Report - {Date} - {Summary}", ReportSummary(success=3, warning=1, failed=0), NOW)
    assert subject == "DR Report - 2024-03-05 - WARNINGS (1)"


def test_date_defaults_to_today() -> None:
    subject = format_subject("{Date}", ReportSummary())
    assert subject == datetime.now().strftime("%Y-%m-%d")


def test_summary_label_precedence() -> None:
    assert summary_label(ReportSummary(failed=2, warning=5)) == "FAILED (2)"
    assert summary_label(ReportSummary(warning=5, success=1)) == "WARNINGS (5)"
    assert summary_label(ReportSummary(success=9)) == "ALL OK"
    assert summary_label(ReportSummary()) == "ALL OK"


def test_all_tokens() -> None:
    summary = ReportSummary(success=4, warning=2, failed=1, unclassified=3)
    template = "{DateTime}|{SuccessCount}|{WarningCount}|{FailedCount}|{TotalCount}|{Summary}"
    assert format_subject(template, summary, NOW) == "2024-03-05 07:45|4|2|1|10|FAILED (1)"


def test_date_and_datetime_do_not_collide() -> None:
    assert format_subject("{Date} {DateTime} {Date}", ReportSummary(), NOW) == (
        "2024-03-05 2024-03-05 07:45 2024-03-05"
    )


def test_unknown_tokens_left_unchanged() -> None:
    assert format_subject("{Site} {date} {Summary}", ReportSummary(), NOW) == "{Site} {date} ALL OK"


def test_empty_template() -> None:
    assert format_subject(None, ReportSummary(), NOW) == ""
