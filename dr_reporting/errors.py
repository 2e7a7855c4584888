"""
Error types raised by the report core.

Collaborator modules (record source, email sender, settings) do not raise these;
they return (success, ..., error_message) tuples like the rest of the pipeline.
"""


class ReportingError(Exception):
    """Base class for all report generation errors."""


class ValidationError(ReportingError):
    """Render options, settings or a template skeleton are malformed."""


class SerializationError(ReportingError):
    """A record could not be turned into an export row."""


class ExportError(ReportingError):
    """The export destination could not be created or written."""
