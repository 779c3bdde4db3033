"""
Workbook row extraction using openpyxl.
"""

import io
import zipfile
from datetime import date, datetime, time
from typing import Optional, List, Any

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from statement_ledger.exceptions import DocumentError, NoSheetsError
from statement_ledger.logging_setup import get_logger
from statement_ledger.models import RawRow

logger = get_logger(__name__)


def _cell_to_text(value: Any) -> Optional[str]:
    """Render a cell value as text; empty cells stay ``None``."""
    if value is None:
        return None
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def extract_rows_from_workbook(data: bytes, sheet_name: Optional[str] = None) -> List[RawRow]:
    """
    Read one worksheet into raw rows.

    Args:
        data: Raw XLSX bytes
        sheet_name: Worksheet to read; the first sheet when omitted

    Returns:
        One RawRow per non-blank row, in sheet order

    Raises:
        NoSheetsError: If the workbook has no sheets or lacks ``sheet_name``
        DocumentError: If the bytes are not a readable workbook
    """
    try:
        wb = openpyxl.load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as exc:
        raise DocumentError(f"Could not read workbook: {exc}") from exc

    try:
        if not wb.sheetnames:
            raise NoSheetsError("No sheets found in Excel file")

        if sheet_name is None:
            ws = wb[wb.sheetnames[0]]
        elif sheet_name in wb.sheetnames:
            ws = wb[sheet_name]
        else:
            raise NoSheetsError(f'Sheet "{sheet_name}" not found', sheet_name=sheet_name)

        rows = []
        for values in ws.iter_rows(values_only=True):
            row = [_cell_to_text(value) for value in values]
            if all(cell is None for cell in row):
                continue
            rows.append(row)
    finally:
        wb.close()

    logger.debug("Read %d row(s) from sheet %r", len(rows), ws.title)
    return rows
