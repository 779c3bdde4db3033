"""
Access Bank statement patterns.

Format: POSTED_DATE VALUE_DATE DESCRIPTION DEBIT CREDIT BALANCE
Example: 01-JAN-25 01-JAN-25 NIP TFR FROM JOHN DOE 1,000.00 - 100,000.00

Empty debit or credit columns are printed as "-".
"""

import re
from typing import List

from statement_ledger.logging_setup import get_logger
from statement_ledger.models import RawRow
from statement_ledger.patterns.common import AMOUNT

logger = get_logger(__name__)

ACCESS_TX_PATTERN = re.compile(
    r'(\d{2}-[A-Z]{3}-\d{2})\s+'          # Posted date
    r'(\d{2}-[A-Z]{3}-\d{2})\s+'          # Value date
    r'(.+?)\s+'                           # Description (non-greedy)
    rf'({AMOUNT}|-)\s+'                   # Debit or "-"
    rf'({AMOUNT}|-)\s+'                   # Credit or "-"
    rf'({AMOUNT})',                       # Balance
    re.IGNORECASE
)

# Column headers that the pattern can pick up as a description
_HEADER_WORDS = ('posted date', 'value date', 'description')


def _column(value: str):
    return None if value == '-' else value


def segment_access(text: str) -> List[RawRow]:
    """
    Extract rows from Access Bank statement text.

    Returns:
        Rows of [posted_date, value_date, description, debit, credit, balance]
    """
    rows = []
    for match in ACCESS_TX_PATTERN.finditer(text):
        posted, value_date, description, debit, credit, balance = match.groups()
        description = description.strip()
        lowered = description.lower()

        if any(word in lowered for word in _HEADER_WORDS) or lowered == 'opening balance':
            continue

        rows.append([posted, value_date, description, _column(debit), _column(credit), balance])

    logger.debug("Access: segmented %d row(s)", len(rows))
    return rows
