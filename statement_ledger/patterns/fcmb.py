"""
FCMB statement patterns.

Format: TXN_DATE VAL_DATE DESCRIPTION AMOUNT BALANCE
Example: 02-Jan-2025 02-Jan-2025 NIP FRM John Doe 5,000.00 105,000.00

FCMB prints a single unsigned amount per line, so debit or credit is worked
out from the running balance.
"""

import re
from typing import List

from statement_ledger.logging_setup import get_logger
from statement_ledger.models import RawRow
from statement_ledger.patterns.common import AMOUNT, LOOSE_AMOUNT, BalanceTracker

logger = get_logger(__name__)

FCMB_OPENING_BALANCE = re.compile(rf'OPENING BALANCE\s+({LOOSE_AMOUNT})', re.IGNORECASE)

FCMB_TX_PATTERN = re.compile(
    r'(\d{2}-[A-Za-z]{3}-\d{4})\s+'       # Transaction date
    r'(\d{2}-[A-Za-z]{3}-\d{4})\s+'       # Value date
    r'(.+?)\s+'                           # Description
    rf'({AMOUNT})\s+'                     # Amount
    rf'({AMOUNT})'                        # Balance
)


def segment_fcmb(text: str) -> List[RawRow]:
    """
    Extract rows from FCMB statement text.

    Returns:
        Rows of [txn_date, value_date, description, debit, credit, balance]
    """
    tracker = BalanceTracker.from_text(text, FCMB_OPENING_BALANCE)
    rows = []

    for match in FCMB_TX_PATTERN.finditer(text):
        txn_date, value_date, description, amount, balance = match.groups()
        if 'opening balance' in description.lower():
            continue

        debit, credit = tracker.place(amount, balance)
        rows.append([txn_date, value_date, description.strip(), debit, credit, balance])

    logger.debug("FCMB: segmented %d row(s)", len(rows))
    return rows
