"""
UBA (United Bank for Africa) statement patterns.

Columns: Trans Date, Value Date, Narration, Chq. No, Debit, Credit, Balance.
Page letterheads and footers are stripped before the text is cut at each
trans-date/value-date pair; the running balance decides debit or credit.
"""

import re
from typing import List

from statement_ledger.logging_setup import get_logger
from statement_ledger.models import RawRow
from statement_ledger.patterns.common import (
    AMOUNT,
    LOOSE_AMOUNT,
    BalanceTracker,
    collapse_whitespace,
    split_on_dates,
    strip_noise,
)

logger = get_logger(__name__)

UBA_NOISE = [
    re.compile(
        r'Bank Statement [A-Z\s]+ \d+[A-Za-z\s,]+Address Line2 [A-Za-z]+ \d{2}, \d{4} '
        r'to [A-Za-z]+ \d{2}, \d{4}'
    ),
    re.compile(r'Download App \| Chat with Leo \| Our Website'),
    re.compile(r'Head Office: 57 Marina.*?cfc@ubagroup\.com \| Privacy Policy', re.DOTALL),
    re.compile(r"Africa's global bank"),
    re.compile(r'\d{2}-[A-Za-z]{3}-\d{4} to \d{2}-[A-Za-z]{3}-\d{4} Bank Statement \d+'),
    re.compile(r'TRANS DATE VALUE DATE NARRATION CHQ\.? NO DEBIT CREDIT BALANCE', re.IGNORECASE),
]

UBA_OPENING_BALANCE = re.compile(rf'Opening Balance[:\s]*({LOOSE_AMOUNT})', re.IGNORECASE)
UBA_DATE_PAIR = re.compile(r'(\d{2}-[A-Za-z]{3}-\d{4})\s+(\d{2}-[A-Za-z]{3}-\d{4})')
UBA_AMOUNT = re.compile(AMOUNT)
# Cheque/session numbers printed between narration and amount
UBA_TRAILING_NUMBER = re.compile(r'\s+\d{12,}\s*$')


def segment_uba(text: str) -> List[RawRow]:
    """
    Extract rows from UBA statement text.

    Returns:
        Rows of [trans_date, value_date, narration, debit, credit, balance]
    """
    clean_text = collapse_whitespace(strip_noise(text, UBA_NOISE))
    tracker = BalanceTracker.from_text(clean_text, UBA_OPENING_BALANCE)
    rows = []

    for segment in split_on_dates(clean_text, UBA_DATE_PAIR):
        trans_date, value_date = segment.dates
        if segment.content.lower().startswith('opening balance'):
            continue

        amounts = list(UBA_AMOUNT.finditer(segment.content))
        if len(amounts) < 2:
            continue

        amount, balance = amounts[-2], amounts[-1]
        narration = UBA_TRAILING_NUMBER.sub('', segment.content[:amount.start()]).strip()
        debit, credit = tracker.place(amount.group(0), balance.group(0))

        rows.append([trans_date, value_date, narration, debit, credit, balance.group(0)])

    logger.debug("UBA: segmented %d row(s)", len(rows))
    return rows
