"""
Exceptions raised while reading statement documents.

Row-level problems never raise: canonicalizers return ``None`` instead.
These exceptions cover failures that end a whole run.
"""

from typing import Optional


class StatementError(Exception):
    """Base class for document-level statement failures."""

    def __init__(self, message: str, file_name: Optional[str] = None):
        self.file_name = file_name
        super().__init__(message)


class DocumentError(StatementError):
    """
    Raised when a document cannot be read.

    Covers corrupt or truncated files, encrypted documents opened without the
    right password, and container formats the extractors do not handle.
    """


class NoSheetsError(DocumentError):
    """Raised when a workbook has no sheets, or lacks the requested sheet."""

    def __init__(self, message: str, sheet_name: Optional[str] = None, file_name: Optional[str] = None):
        self.sheet_name = sheet_name
        super().__init__(message, file_name=file_name)


class UnsupportedBankError(StatementError):
    """Raised when no dialect is registered for the requested institution."""

    def __init__(self, bank: str):
        self.bank = bank
        super().__init__(f"Unsupported bank: {bank}")
