"""
Email Sender Module

This module sends the HTML report with optional attachments (CSV export).
This is a pure infrastructure module - no report content generation logic.

Uses SMTP for email delivery with support for:
- HTML email body
- To and Cc recipient lists in a single message
- Optional file attachments
- Environment variable-based configuration
"""

import logging
import os
import smtplib
from email import encoders
from email.mime.base import MIMEBase
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import List, Optional, Tuple

from dr_reporting.config import DEFAULT_SMTP_PORT, SMTP_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


def _invalid_addresses(addresses: List[str]) -> List[str]:
    return [address for address in addresses if not address or '@' not in address]


def build_message(
    sender: str,
    to_emails: List[str],
    subject: str,
    html_body: str,
    cc_emails: Optional[List[str]] = None,
    attachments: Optional[List[str]] = None
) -> MIMEMultipart:
    """
    Build the RFC-compliant MIME structure:

    multipart/mixed (root)
    ├── multipart/alternative (body container)
    │   └── text/html
    └── application/octet-stream (each attachment)
    """
    mixed_msg = MIMEMultipart('mixed')
    mixed_msg['From'] = sender
    mixed_msg['To'] = ", ".join(to_emails)
    if cc_emails:
        mixed_msg['Cc'] = ", ".join(cc_emails)
    mixed_msg['Subject'] = subject

    alternative_part = MIMEMultipart('alternative')
    alternative_part.attach(MIMEText(html_body, 'html', 'utf-8'))
    mixed_msg.attach(alternative_part)

    for attachment_path in attachments or []:
        with open(attachment_path, 'rb') as f:
            attachment = MIMEBase('application', 'octet-stream')
            attachment.set_payload(f.read())
        encoders.encode_base64(attachment)
        filename = os.path.basename(attachment_path)
        attachment.add_header('Content-Disposition', f'attachment; filename="{filename}"')
        mixed_msg.attach(attachment)
        logger.debug(f"Attached file: {filename}")

    return mixed_msg


def send_email(
    to_emails: List[str],
    subject: str,
    html_body: str,
    cc_emails: Optional[List[str]] = None,
    attachments: Optional[List[str]] = None
) -> Tuple[bool, Optional[str]]:
    """
    Send an HTML email with optional attachments.

    Args:
        to_emails: Recipient addresses
        subject: Email subject line
        html_body: HTML content for email body
        cc_emails: Optional Cc addresses
        attachments: Optional list of file paths to attach

    Returns:
        Tuple of (success: bool, error_msg: Optional[str])

    Environment Variables:
        - SMTP_SERVER: SMTP server address (required)
        - SMTP_PORT: SMTP port (optional, defaults to 587)
        - SMTP_USER: SMTP username; also the sender unless SMTP_FROM is set
        - SMTP_PASSWORD: SMTP password (login is skipped when empty)
        - SMTP_FROM: Sender address (optional)
    """
    cc_emails = cc_emails or []
    try:
        logger.info(f"Preparing to send email to {len(to_emails)} recipient(s), {len(cc_emails)} cc")
        logger.info(f"Subject: {subject}")
        if attachments:
            logger.info(f"Attachments: {', '.join(os.path.basename(a) for a in attachments)}")

        if not to_emails:
            error_msg = "Email recipient list is empty"
            logger.warning(error_msg)
            return False, error_msg

        invalid = _invalid_addresses(list(to_emails) + list(cc_emails))
        if invalid:
            error_msg = f"Invalid email address(es): {', '.join(repr(a) for a in invalid)}"
            logger.error(error_msg)
            return False, error_msg

        for attachment_path in attachments or []:
            if not os.path.isfile(attachment_path):
                error_msg = f"Attachment file not found: {attachment_path}"
                logger.error(error_msg)
                return False, error_msg

        smtp_server = os.getenv('SMTP_SERVER')
        smtp_user = os.getenv('SMTP_USER')
        smtp_password = os.getenv('SMTP_PASSWORD')
        smtp_port = int(os.getenv('SMTP_PORT', DEFAULT_SMTP_PORT))
        sender = os.getenv('SMTP_FROM') or smtp_user

        if not smtp_server:
            error_msg = "SMTP_SERVER environment variable is not set"
            logger.error(error_msg)
            return False, error_msg

        if not sender:
            error_msg = "SMTP_FROM or SMTP_USER environment variable must be set"
            logger.error(error_msg)
            return False, error_msg

        logger.info(f"SMTP Configuration: {smtp_server}:{smtp_port}")

        message = build_message(sender, to_emails, subject, html_body, cc_emails, attachments)

        with smtplib.SMTP(smtp_server, smtp_port, timeout=SMTP_TIMEOUT_SECONDS) as server:
            server.starttls()
            if smtp_user and smtp_password:
                server.login(smtp_user, smtp_password)
            server.send_message(message, from_addr=sender, to_addrs=list(to_emails) + list(cc_emails))

        logger.info(f"Email sent successfully to {len(to_emails) + len(cc_emails)} recipient(s)")
        return True, None

    except Exception as e:
        error_msg = f"Failed to send email: {str(e)}"
        logger.error(error_msg, exc_info=True)
        return False, error_msg
