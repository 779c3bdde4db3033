"""
Zenith Bank statement patterns.

Format: DATE DESCRIPTION DEBIT CREDIT VALUE_DATE BALANCE
Example: 01/01/2025 NIP/ACCESS/JOHN DOE/Lunch 1,000.00 0.00 01/01/2025 99,000.00
"""

import re
from typing import List

from statement_ledger.logging_setup import get_logger
from statement_ledger.models import RawRow
from statement_ledger.patterns.common import AMOUNT

logger = get_logger(__name__)

ZENITH_PERIOD = re.compile(r'Period:\s*\d{2}/\d{2}/\d{4}\s+TO\s+\d{2}/\d{2}/\d{4}', re.IGNORECASE)

ZENITH_TX_PATTERN = re.compile(
    r'(\d{2}/\d{2}/\d{4})\s+'             # Date
    r'(.+?)\s+'                           # Description
    rf'({AMOUNT})\s+'                     # Debit
    rf'({AMOUNT})\s+'                     # Credit
    r'(\d{2}/\d{2}/\d{4})\s+'             # Value date
    rf'({AMOUNT})'                        # Balance
)

# Header captions the pattern can pick up as a description
_HEADER_WORDS = ('CURRENCY', 'ACCOUNT No', 'VALUE DATE')


def segment_zenith(text: str) -> List[RawRow]:
    """
    Extract rows from Zenith Bank statement text.

    Returns:
        Rows of [date, description, debit, credit, value_date, balance]
    """
    clean_text = ZENITH_PERIOD.sub('', text)
    rows = []

    for match in ZENITH_TX_PATTERN.finditer(clean_text):
        date, description, debit, credit, value_date, balance = match.groups()
        if any(word in description for word in _HEADER_WORDS):
            continue
        rows.append([date, description.strip(), debit, credit, value_date, balance])

    logger.debug("Zenith: segmented %d row(s)", len(rows))
    return rows
