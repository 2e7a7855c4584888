"""
Report Body Generator Module

This module generates the HTML document for the DR backup status report.
The document includes:
- Header (title, generation timestamp, schedule label)
- Summary cards (success / warning / failed counts, "other" when present)
- Failed, Warning and Success sections (per folder, per asset rows)
- Footer

The skeleton is fixed; the only variable points are {{Token}} placeholders resolved
through a TokenTable. Every value taken from the records is HTML-escaped before it
is inserted. All HTML is email-client safe (inline-friendly, no scripts).
"""

import logging
from datetime import datetime
from typing import List, Optional

from dr_reporting.aggregator import ClassifiedRecords
from dr_reporting.config import (
    DATE_FORMAT_GENERATED,
    DATE_FORMAT_ROW,
    MISSING_TIMESTAMP_LABEL,
    REPORT_TITLE,
)
from dr_reporting.models import AssetRecord, BackupStatus, RenderOptions, StatusBucket
from dr_reporting.templating import TokenTable, escape_html

logger = logging.getLogger(__name__)

_STYLE_BLOCK = """
    <style>
        body { font-family: Arial, sans-serif; font-size: 14px; line-height: 1.5; color: #333; margin: 0; padding: 20px; }
        .header { border-bottom: 3px solid #2c3e50; margin-bottom: 20px; padding-bottom: 10px; }
        .header h1 { color: #2c3e50; margin: 0 0 5px 0; font-size: 22px; }
        .header .meta { color: #666; font-size: 12px; }
        .cards { margin-bottom: 25px; }
        .card { display: inline-block; width: 150px; padding: 12px; margin-right: 10px; border-radius: 4px; text-align: center; color: #fff; }
        .card .count { font-size: 28px; font-weight: bold; }
        .card.success { background-color: #27ae60; }
        .card.warning { background-color: #f39c12; }
        .card.failed { background-color: #c0392b; }
        .card.other { background-color: #7f8c8d; }
        .section h2 { font-size: 18px; margin: 25px 0 10px 0; padding-bottom: 5px; border-bottom: 1px solid #ddd; }
        .section.failed h2 { color: #c0392b; }
        .section.warning h2 { color: #d35400; }
        .section.success h2 { color: #27ae60; }
        .folder { background-color: #ecf0f1; padding: 6px 10px; font-weight: bold; margin-top: 10px; }
        table { width: 100%; border-collapse: collapse; margin-bottom: 10px; }
        th { background-color: #333; color: #fff; padding: 8px; text-align: left; border: 1px solid #ddd; }
        td { padding: 8px; border: 1px solid #ddd; vertical-align: top; }
        .status { padding: 2px 8px; border-radius: 3px; font-weight: bold; }
        .status-success { background-color: #d4efdf; color: #1e8449; }
        .status-warning { background-color: #fdebd0; color: #b9770e; }
        .status-failed { background-color: #f5b7b1; color: #922b21; }
        .error { color: #922b21; font-size: 12px; margin-top: 4px; }
        .full-message { font-family: Consolas, monospace; font-size: 11px; background-color: #f8f9f9; padding: 6px; margin-top: 4px; white-space: pre-wrap; }
        .success-summary { color: #1e8449; margin-top: 20px; }
        .footer { margin-top: 30px; padding-top: 15px; border-top: 1px solid #eee; color: #666; font-size: 12px; }
    </style>"""

REPORT_SKELETON = """<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{{ReportTitle}}</title>""" + _STYLE_BLOCK + """
</head>
<body>
    <div class="header">
        <h1>{{ReportTitle}}</h1>
        <div class="meta">Generated: {{GeneratedDate}} &middot; {{ScheduleName}}</div>
    </div>

    <div class="cards">
        <div class="card success"><div class="count">{{SuccessCount}}</div>Success</div>
        <div class="card warning"><div class="count">{{WarningCount}}</div>Warning</div>
        <div class="card failed"><div class="count">{{FailedCount}}</div>Failed</div>{{OtherCard}}
    </div>
{{FailedSection}}{{WarningSection}}{{SuccessSection}}
    <div class="footer">
        <em>This is a system-generated report covering {{TotalCount}} asset(s).
        Status reflects the most recent backup execution of each asset.</em>
    </div>
</body>
</html>
"""

FAILURE_SKELETON = """<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>{{ReportTitle}}</title>""" + _STYLE_BLOCK + """
</head>
<body>
    <div class="header">
        <h1>{{ReportTitle}}</h1>
        <div class="meta">Generated: {{GeneratedDate}} &middot; {{ScheduleName}}</div>
    </div>

    <div class="section failed">
        <h2>Report generation failed</h2>
        <p>The scheduled DR backup status report could not be produced.</p>
        <div class="full-message">{{ErrorMessage}}</div>
    </div>

    <div class="footer">
        <em>This is a system-generated notification. Check the report log on the reporting host for details.</em>
    </div>
</body>
</html>
"""

_SECTION_TITLES = {
    BackupStatus.FAILED: "Failed Backups",
    BackupStatus.WARNING: "Backups with Warnings",
    BackupStatus.SUCCESS: "Successful Backups",
}


def format_timestamp(value: Optional[datetime]) -> str:
    """
    Format last execution timestamp for a report row.

    Example: "2024-01-15 06:00"; None or an unparseable value -> "N/A"
    """
    if isinstance(value, datetime):
        try:
            return value.strftime(DATE_FORMAT_ROW)
        except ValueError:
            # pandas NaT is a datetime subclass that cannot be formatted
            return MISSING_TIMESTAMP_LABEL
    return MISSING_TIMESTAMP_LABEL


def _pluralize_assets(count: int) -> str:
    return f"{count} asset" if count == 1 else f"{count} assets"


def render_record_row(record: AssetRecord, options: RenderOptions) -> str:
    """Render one <tr> for a record. Error and full message blocks are appended under the name."""
    name_cell = f'<div class="asset-name"><strong>{escape_html(record.asset_name)}</strong></div>'

    error_message = (record.error_message or "").strip()
    if error_message:
        name_cell += f'\n                    <div class="error">{escape_html(error_message)}</div>'
        extended = (record.extended_error or "").strip()
        if extended:
            name_cell += f'\n                    <div class="error">{escape_html(extended)}</div>'

    full_message = (record.full_message or "").strip()
    if options.include_full_message and full_message:
        name_cell += f'\n                    <div class="full-message">{escape_html(full_message)}</div>'

    status_class = record.status_kind.css_class
    return f"""
                <tr>
                    <td>{name_cell}</td>
                    <td>{escape_html(record.asset_type)}</td>
                    <td>{escape_html(record.address)}</td>
                    <td><span class="status status-{status_class}">{escape_html(record.status_text)}</span></td>
                    <td>{format_timestamp(record.last_execution)}</td>
                </tr>"""


def render_status_section(bucket: StatusBucket, options: RenderOptions) -> str:
    """
    Render a full section: heading, then one folder header and table per FolderGroup.

    Folder groups and their records are emitted in the bucket's fixed order.
    """
    parts: List[str] = [
        f'\n    <div class="section {bucket.status.css_class}">',
        f"\n        <h2>{_SECTION_TITLES[bucket.status]} ({bucket.count})</h2>",
    ]
    for group in bucket.groups:
        rows = "".join(render_record_row(record, options) for record in group.records)
        parts.append(f"""
        <div class="folder">{escape_html(group.label)}</div>
        <table>
            <thead>
                <tr>
                    <th>Asset</th>
                    <th>Type</th>
                    <th>Address</th>
                    <th>Status</th>
                    <th>Last Execution</th>
                </tr>
            </thead>
            <tbody>{rows}
            </tbody>
        </table>""")
    parts.append("\n    </div>\n")
    return "".join(parts)


def render_success_summary(count: int) -> str:
    return (
        '\n    <div class="section success">\n'
        f'        <p class="success-summary">Backups completed successfully ({_pluralize_assets(count)}).</p>\n'
        "    </div>\n"
    )


def _render_other_card(count: int) -> str:
    if count <= 0:
        return ""
    return f'\n        <div class="card other"><div class="count">{count}</div>Other</div>'


def build_section_html(classified: ClassifiedRecords, options: RenderOptions) -> dict:
    """
    Decide and render the three section slots.

    failed_only suppresses the warning and success slots entirely; otherwise
    include_warnings toggles the warning section and include_success chooses
    between full success detail and the one-line summary.

    Returns:
        Dictionary with keys FailedSection, WarningSection, SuccessSection.
        A slot that does not qualify is an empty string.
    """
    summary = classified.summary

    failed_html = ""
    if summary.failed > 0:
        failed_html = render_status_section(classified.bucket(BackupStatus.FAILED), options)

    warning_html = ""
    if summary.warning > 0 and not options.failed_only and options.include_warnings:
        warning_html = render_status_section(classified.bucket(BackupStatus.WARNING), options)

    success_html = ""
    if summary.success > 0 and not options.failed_only:
        if options.include_success:
            success_html = render_status_section(classified.bucket(BackupStatus.SUCCESS), options)
        else:
            success_html = render_success_summary(summary.success)

    return {
        "FailedSection": failed_html,
        "WarningSection": warning_html,
        "SuccessSection": success_html,
    }


def generate_report_document(
    classified: ClassifiedRecords,
    options: RenderOptions,
    generated_at: Optional[datetime] = None
) -> str:
    """
    Generate the HTML report document.

    Args:
        classified: Output of aggregator.classify_records
        options: Validated RenderOptions
        generated_at: Timestamp shown in the header (default: now)

    Returns:
        HTML string with every placeholder resolved
    """
    if generated_at is None:
        generated_at = datetime.now()

    summary = classified.summary
    sections = build_section_html(classified, options)

    table = TokenTable({
        "ReportTitle": escape_html(REPORT_TITLE),
        "GeneratedDate": generated_at.strftime(DATE_FORMAT_GENERATED),
        "ScheduleName": escape_html(options.schedule_label),
        "SuccessCount": summary.success,
        "WarningCount": summary.warning,
        "FailedCount": summary.failed,
        "TotalCount": summary.total,
        "OtherCard": _render_other_card(summary.unclassified),
    })
    for name, section_html in sections.items():
        table.set(name, section_html)

    document = table.apply(REPORT_SKELETON, strict=True)

    logger.info(f"Generated HTML report document ({len(document)} characters)")
    logger.debug(
        "Sections rendered: "
        + ", ".join(f"{name}={'yes' if html_text else 'no'}" for name, html_text in sections.items())
    )
    return document


def generate_failure_document(
    error_message: str,
    generated_at: Optional[datetime] = None,
    schedule_label: str = ""
) -> str:
    """Render the failure notification sent when the pipeline cannot produce a report."""
    if generated_at is None:
        generated_at = datetime.now()

    table = TokenTable({
        "ReportTitle": escape_html(REPORT_TITLE),
        "GeneratedDate": generated_at.strftime(DATE_FORMAT_GENERATED),
        "ScheduleName": escape_html(schedule_label),
        "ErrorMessage": escape_html(error_message),
    })
    return table.apply(FAILURE_SKELETON, strict=True)
