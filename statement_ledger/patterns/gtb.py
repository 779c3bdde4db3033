"""
GTBank (Guaranty Trust) statement patterns.

Columns: Trans. Date, Value Date, Reference, Debits, Credits, Balance,
Originating Branch, Remarks.

Lines are cut at each trans-date/value-date pair. Only one amount column is
filled per line, so the running balance decides debit or credit.
"""

import re
from typing import List, Tuple

from statement_ledger.logging_setup import get_logger
from statement_ledger.models import RawRow
from statement_ledger.patterns.common import (
    LOOSE_AMOUNT,
    BalanceTracker,
    split_on_dates,
    strip_noise,
)

logger = get_logger(__name__)

GTB_OPENING_BALANCE = re.compile(rf'Opening Balance\s+({LOOSE_AMOUNT})', re.IGNORECASE)

GTB_NOISE = [
    # Page footer disclaimer
    re.compile(r'This is a computer generated Email\..*?local branch\.\d+\.', re.DOTALL),
    # Repeated column header
    re.compile(
        r'Trans\.\s*Date\s+Value\.?\s*Date\s+Reference\s+Debits\s+Credits\s+Balance\s+'
        r'Originating\s*Branch\s+Remarks',
        re.IGNORECASE
    ),
]

GTB_DATE_PAIR = re.compile(r'(\d{2}-[A-Za-z]{3}-\d{4})\s+(\d{2}-[A-Za-z]{3}-\d{4})')

# Reference token, optionally followed by a "15JAN" style suffix
GTB_REFERENCE = re.compile(r"^'?([^\s]*(?:\s+\d{2}[A-Z]{3})?)\s+")

GTB_AMOUNT = re.compile(LOOSE_AMOUNT)

# Words that open a remarks column after the branch name
DESCRIPTION_STARTERS = [
    'NIBSS', 'NIP', 'NEFT', 'POSWEB', 'POS/WEB', 'Airtime', 'Electronic',
    'TRANSFER', 'COMMISSION', 'VALUE ADDED TAX', 'SMS ALERT', 'INTEREST',
    'CASH WITHDRAWAL',
]

_E_CHANNELS = re.compile(r'^(E-\s*CHANNELS)\s+(.+)', re.IGNORECASE | re.DOTALL)
_BRANCH_CODE = re.compile(r'^(\d{3})\s+')
_STARTER = re.compile(
    '(' + '|'.join(re.escape(s) for s in DESCRIPTION_STARTERS) + r'|\d{12,})',
    re.IGNORECASE
)
_BRANCH_FALLBACK = re.compile(r'^([A-Z][A-Z0-9\s-]+?)(?=\s+[a-z]|\s+\d{6,})')


def extract_branch_and_remarks(text: str) -> Tuple[str, str]:
    """
    Split the trailing columns into originating branch and remarks.

    Returns:
        Tuple of (branch_name, remarks)
    """
    match = _E_CHANNELS.match(text)
    if match:
        return 'E-CHANNELS', match.group(2).strip()

    match = _BRANCH_CODE.match(text)
    if not match:
        return '', text

    after_code = text[match.end():]

    starter = _STARTER.search(after_code)
    if starter and starter.start() > 0:
        return after_code[:starter.start()].strip(), after_code[starter.start():].strip()

    fallback = _BRANCH_FALLBACK.match(after_code)
    if fallback:
        return fallback.group(1).strip(), after_code[fallback.end():].strip()

    return '', after_code


def segment_gtb(text: str) -> List[RawRow]:
    """
    Extract rows from GTBank statement text.

    Returns:
        Rows of [trans_date, value_date, reference, debit, credit, balance, remarks]
    """
    tracker = BalanceTracker.from_text(text, GTB_OPENING_BALANCE)
    clean_text = strip_noise(text, GTB_NOISE)
    rows = []

    for segment in split_on_dates(clean_text, GTB_DATE_PAIR):
        trans_date, value_date = segment.dates

        ref_match = GTB_REFERENCE.match(segment.content)
        if not ref_match:
            continue

        reference = ref_match.group(1)
        remaining = segment.content[ref_match.end():]

        amounts = list(GTB_AMOUNT.finditer(remaining))
        if len(amounts) < 2:
            continue

        amount, balance = amounts[-2], amounts[-1]
        debit, credit = tracker.place(amount.group(0), balance.group(0))

        _, remarks = extract_branch_and_remarks(remaining[balance.end():].strip())

        rows.append([
            trans_date, value_date, reference or None,
            debit, credit, balance.group(0), remarks,
        ])

    logger.debug("GTB: segmented %d row(s)", len(rows))
    return rows
