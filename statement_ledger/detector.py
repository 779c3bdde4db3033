"""
Source format detection.

Uses a hierarchy of detection strategies:
1. Magic bytes (PDF header, ZIP container, legacy OLE2 container)
2. File extension hint
3. Fallback to delimited text
"""

from enum import Enum
from pathlib import PurePath

from statement_ledger.exceptions import DocumentError


class SourceFormat(Enum):
    """Container formats the extractors can read."""
    PDF = "pdf"                  # Page-oriented documents
    SPREADSHEET = "spreadsheet"  # XLSX workbooks
    DELIMITED = "delimited"      # CSV and other delimited text


_PDF_MAGIC = b'%PDF'
_ZIP_MAGIC = b'PK\x03\x04'
_OLE2_MAGIC = b'\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1'

_EXTENSIONS = {
    '.pdf': SourceFormat.PDF,
    '.xlsx': SourceFormat.SPREADSHEET,
    '.xlsm': SourceFormat.SPREADSHEET,
    '.xls': SourceFormat.SPREADSHEET,
    '.csv': SourceFormat.DELIMITED,
    '.txt': SourceFormat.DELIMITED,
}


def detect_source_format(data: bytes, file_name: str = "") -> SourceFormat:
    """
    Detect how a statement document should be read.

    Args:
        data: Raw document bytes
        file_name: Original file name, used as a hint when the content is
            not conclusive

    Returns:
        Detected SourceFormat

    Raises:
        DocumentError: For legacy binary workbooks and other OLE2 containers
    """
    head = data[:1024].lstrip()

    if head.startswith(_PDF_MAGIC):
        return SourceFormat.PDF
    if data.startswith(_OLE2_MAGIC):
        raise DocumentError(
            "Legacy .xls workbooks and password-protected workbooks are not supported; "
            "save the statement as .xlsx or CSV",
            file_name=file_name or None,
        )
    if data.startswith(_ZIP_MAGIC):
        return SourceFormat.SPREADSHEET

    suffix = PurePath(file_name).suffix.lower() if file_name else ''
    return _EXTENSIONS.get(suffix, SourceFormat.DELIMITED)
