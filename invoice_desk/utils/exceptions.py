"""
Custom Exceptions Module.

This module defines all custom exceptions used throughout the invoice
desk. Field-level misses during extraction are never exceptions; an
absent value simply stays None. The classes below cover the
collaborators around the extractor: input files, datastore records,
the AI re-extraction service and ledger output.

Exception Hierarchy:
    InvoiceDeskError (base)
    ├── InputError
    │   ├── InputFileNotFoundError
    │   └── InvalidRecordError
    ├── ReExtractionError
    │   └── ReExtractionConfigError
    └── OutputError
        └── LedgerExportError
"""


class InvoiceDeskError(Exception):
    """
    Base exception for all invoice desk errors.

    Attributes:
        message: Human-readable error message.
        details: Optional dictionary with additional error details.
    """

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# INPUT ERRORS
# =============================================================================

class InputError(InvoiceDeskError):
    """Base exception for input handling errors."""
    pass


class InputFileNotFoundError(InputError):
    """Raised when an OCR text file or records file cannot be found."""

    def __init__(self, filepath: str):
        message = f"File not found: {filepath}"
        details = {"filepath": filepath}
        super().__init__(message, details)


class InvalidRecordError(InputError):
    """
    Raised when a stored invoice row cannot be turned into a record.

    Example:
        >>> raise InvalidRecordError("organization", "iskola")
    """

    def __init__(self, field: str, value, reason: str = None):
        message = f"Invalid invoice record field '{field}'"
        details = {"field": field, "value": value, "reason": reason}
        super().__init__(message, details)


# =============================================================================
# RE-EXTRACTION ERRORS
# =============================================================================

class ReExtractionError(InvoiceDeskError):
    """Raised when the generative re-extraction pass fails."""

    def __init__(self, reason: str = None, status_code: int = None):
        message = "AI re-extraction failed"
        details = {"reason": reason}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details)


class ReExtractionConfigError(ReExtractionError):
    """Raised when the re-extraction service is not configured."""

    def __init__(self, env_var: str):
        super().__init__(f"API key not found in environment variable {env_var}")
        self.details["env_var"] = env_var


# =============================================================================
# OUTPUT ERRORS
# =============================================================================

class OutputError(InvoiceDeskError):
    """Base exception for output handling errors."""
    pass


class LedgerExportError(OutputError):
    """Raised when the spreadsheet ledger cannot be written."""

    def __init__(self, filepath: str, reason: str = None):
        message = f"Failed to export ledger workbook: {filepath}"
        details = {"filepath": filepath, "reason": reason}
        super().__init__(message, details)


# Export all exceptions
__all__ = [
    'InvoiceDeskError',
    'InputError',
    'InputFileNotFoundError',
    'InvalidRecordError',
    'ReExtractionError',
    'ReExtractionConfigError',
    'OutputError',
    'LedgerExportError',
]
