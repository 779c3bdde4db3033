"""
Wema Bank (ALAT) statement patterns.

Format: DATE REFERENCE DESCRIPTION AMOUNT BALANCE
Example: 15-Nov-2025 M123456 NIP:JOHN DOE-Payment for lunch 2,500.00 47,500.00

PDF extraction sometimes breaks the date across a line ("15-Nov-\\n2025"),
so the date pattern allows a missing hyphen and whitespace before the year.
"""

import re
from typing import List

from statement_ledger.logging_setup import get_logger
from statement_ledger.models import RawRow
from statement_ledger.patterns.common import AMOUNT, BalanceTracker, split_on_dates

logger = get_logger(__name__)

WEMA_OPENING_BALANCE = re.compile(r'Opening Balance\s*₦?([\d,]+\.?\d*)', re.IGNORECASE)
WEMA_DATE = re.compile(r'(\d{2}-[A-Za-z]{3}-?\s*\d{4})')
WEMA_REFERENCE = re.compile(r'^([A-Z]\d+|M\d+)\s+', re.IGNORECASE)
WEMA_AMOUNTS = re.compile(rf'({AMOUNT})\s+({AMOUNT})\s*$')

_HEADER_WORDS = ('R e f e r e n c e', 'Transaction Details')


def segment_wema(text: str) -> List[RawRow]:
    """
    Extract rows from Wema Bank statement text.

    Returns:
        Rows of [date, reference, description, debit, credit, balance]
    """
    tracker = BalanceTracker.from_text(text, WEMA_OPENING_BALANCE)
    rows = []

    for segment in split_on_dates(text, WEMA_DATE):
        date = re.sub(r'\s+', '', segment.dates[0])
        rest = segment.content
        if not rest or any(word in rest for word in _HEADER_WORDS):
            continue

        ref_match = WEMA_REFERENCE.match(rest)
        if not ref_match:
            continue

        after_ref = rest[ref_match.end():]
        amounts = WEMA_AMOUNTS.search(after_ref)
        if not amounts:
            continue

        amount, balance = amounts.groups()
        description = after_ref[:amounts.start()].strip()
        debit, credit = tracker.place(amount, balance)

        rows.append([date, ref_match.group(1), description, debit, credit, balance])

    logger.debug("Wema: segmented %d row(s)", len(rows))
    return rows
