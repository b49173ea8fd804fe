"""Exception taxonomy for statement ingestion.

Structural errors are fatal to the current upload. Each carries a short
``user_message`` that hosts may show verbatim; the exception text itself is
meant for logs and may include internal detail.
"""

from __future__ import annotations


class StatementError(Exception):
    """Base class for errors that abort processing of an uploaded statement."""

    user_message: str = "Could not extract transactions: invalid file format."

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.user_message)


class UnsupportedFormatError(StatementError):
    user_message = "Unsupported file format. Use Excel (.xlsx, .xls) or CSV (.csv)."


class EmptyFileError(StatementError):
    user_message = "The file is empty."


class NoHeadersError(StatementError):
    user_message = "No valid headers were found in the first row."


class NoDataError(StatementError):
    user_message = "No transactions could be extracted from the file."


__all__ = [
    "StatementError",
    "UnsupportedFormatError",
    "EmptyFileError",
    "NoHeadersError",
    "NoDataError",
]
