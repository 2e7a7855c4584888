"""
DR Backup Status Reporting

This package builds the disaster recovery backup status report: an HTML document,
a CSV export of every asset and a templated email subject, plus the plumbing that
fetches the records and mails the result.
"""

__version__ = "1.0.0"
