"""
Standard Chartered statement patterns.

Columns: Date, Description, Deposit, Withdrawal, Balance. Only one of the
deposit and withdrawal columns carries a value per line, and the text does not
say which, so the running balance decides.
"""

import re
from typing import List

from statement_ledger.logging_setup import get_logger
from statement_ledger.models import RawRow
from statement_ledger.patterns.common import (
    LOOSE_AMOUNT,
    BalanceTracker,
    split_on_dates,
    strip_noise,
)
from statement_ledger.utils.formatting import parse_balance

logger = get_logger(__name__)

SC_NOISE = [
    re.compile(r'Page of\d+ \d+'),
    re.compile(r'Date Description Deposit Withdrawal Balance'),
]

SC_DATE = re.compile(r'(\d{2} [A-Z][a-z]{2} \d{4})')

SC_AMOUNT = re.compile(LOOSE_AMOUNT)
SC_TRAILING_AMOUNT = re.compile(rf'({LOOSE_AMOUNT})\s*$')

# Shortest content that can hold a description, an amount and a balance
_MIN_CONTENT_LENGTH = 10


def segment_standard_chartered(text: str) -> List[RawRow]:
    """
    Extract rows from Standard Chartered statement text.

    The "BALANCE FROM PREVIOUS STATEMENT" line seeds the running balance and
    "CLOSING BALANCE" lines are dropped.

    Returns:
        Rows of [date, description, debit, credit, balance]
    """
    clean_text = strip_noise(text, SC_NOISE)
    tracker = BalanceTracker()
    rows = []

    for segment in split_on_dates(clean_text, SC_DATE):
        date = segment.dates[0]
        content = segment.content

        if 'BALANCE FROM PREVIOUS STATEMENT' in content:
            match = SC_TRAILING_AMOUNT.search(content)
            if match:
                tracker.previous_balance = parse_balance(match.group(1)) or 0
            continue

        if 'CLOSING BALANCE' in content or len(content) < _MIN_CONTENT_LENGTH:
            continue

        amounts = list(SC_AMOUNT.finditer(content))
        if len(amounts) < 2:
            continue

        amount, balance = amounts[-2], amounts[-1]
        description = content[:amount.start()].strip()
        debit, credit = tracker.place(amount.group(0), balance.group(0))

        rows.append([date, description, debit, credit, balance.group(0)])

    logger.debug("Standard Chartered: segmented %d row(s)", len(rows))
    return rows
