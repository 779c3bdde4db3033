"""
PalmPay statement patterns.

PDF format: MM/DD/YYYY HH:MM:SS AM|PM DESCRIPTION +/-AMOUNT TRANSACTION_ID
Example: 12/29/2025 06:19:00 AM CashBox Interest +12.50 cb_2025122906190001

Spreadsheet and CSV exports wrap long descriptions onto extra rows that hold
only the wrapped text; ``preprocess_rows`` folds those back into their
transaction rows.
"""

import re
from typing import List

from statement_ledger.logging_setup import get_logger
from statement_ledger.models import RawRow
from statement_ledger.patterns.common import split_on_dates

logger = get_logger(__name__)

PALMPAY_TIMESTAMP = re.compile(
    r'(\d{2}/\d{2}/\d{4}\s+\d{2}:\d{2}:\d{2}\s+(?:AM|PM))',
    re.IGNORECASE
)

PALMPAY_SIGNED_AMOUNT = re.compile(r'([+-]\d+(?:,\d{3})*\.\d{2})')

_HEADER_WORDS = ('Transaction Date', 'Transaction Detail')

# Cell-shape checks used when folding wrapped rows
_ROW_DATE = re.compile(r'^\d{2}/\d{2}/\d{4}')
_AMOUNT_CELL = re.compile(r'^[+-]?[\d,.]+$')
_TX_ID_CELL = re.compile(r'^[a-z0-9_]+$', re.IGNORECASE)
_DIGITS_CELL = re.compile(r'^\d+$')

_FORWARD_PREFIXES = ('send to ', 'received from ')


def segment_palmpay(text: str) -> List[RawRow]:
    """
    Extract rows from PalmPay statement text.

    Returns:
        Rows of ["<timestamp> <description>", signed_amount, transaction_id]
    """
    rows = []
    for segment in split_on_dates(text, PALMPAY_TIMESTAMP):
        timestamp = segment.dates[0].strip()
        rest = segment.content
        if not rest or any(word in rest for word in _HEADER_WORDS):
            continue

        match = PALMPAY_SIGNED_AMOUNT.search(rest)
        if not match:
            continue

        description = rest[:match.start()].strip()
        transaction_id = rest[match.end():].strip()
        rows.append([f"{timestamp} {description}".strip(), match.group(1), transaction_id or None])

    logger.debug("PalmPay: segmented %d row(s)", len(rows))
    return rows


def _is_description_fragment(text: str) -> bool:
    """Check if a lone cell holds wrapped description text."""
    text = text.strip()
    if not text:
        return False
    if _AMOUNT_CELL.match(text) or _TX_ID_CELL.match(text) or _DIGITS_CELL.match(text):
        return False
    return True


def _is_forward_fragment(text: str) -> bool:
    """"Send to" / "Received from" fragments belong to the next dated row."""
    return text.lower().strip().startswith(_FORWARD_PREFIXES)


def preprocess_rows(rows: List[RawRow]) -> List[RawRow]:
    """
    Fold wrapped description rows back into their transaction rows.

    A row holding a single description fragment is merged into the
    description column of the previous row, except counterparty fragments
    ("Send to ...", "Received from ..."), which are prepended to the next
    dated row. Input rows are not modified.

    Args:
        rows: Raw rows from a spreadsheet or CSV export

    Returns:
        Merged rows
    """
    result: List[RawRow] = []
    pending: List[str] = []

    for original in rows:
        row = list(original)
        first_cell = (row[0] or '') if row else ''
        starts_with_date = bool(_ROW_DATE.match(first_cell))
        filled = [cell for cell in row if cell is not None and cell != '']
        fragment = filled[0] if len(filled) == 1 else ''

        if starts_with_date:
            if pending:
                col = 1 if len(row) > 1 else 0
                row[col] = ' '.join(part for part in pending + [row[col] or ''] if part)
                pending = []
            result.append(row)
        elif fragment and _is_description_fragment(fragment):
            if _is_forward_fragment(fragment):
                pending.append(fragment)
            elif result:
                previous = result[-1]
                col = 1 if len(previous) > 1 else 0
                if previous[col] is not None:
                    previous[col] = f"{previous[col]} {fragment}"
        else:
            result.append(row)

    return result
