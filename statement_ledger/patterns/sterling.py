"""
Sterling Bank statement patterns.

Two layouts are in circulation:

Format A (numeric dates):
    DATE REFERENCE NARRATION MONEY_IN MONEY_OUT BALANCE
    01-02-2025 1234567890 OneBank Transfer from ... 5,000.00 - 25,000.00

Format B (month-name dates, after a "Trans Date ... Balance" header):
    TRANS_DATE NARRATION VALUE_DATE DEBIT CREDIT BALANCE
    01-Feb-2025 BANKNIP From ... Ref: 1234567890 01-Feb-2025 0.00 5000.00 25000.00

Both are emitted in the Format A row layout with numeric dates.
"""

import re
from typing import List

from statement_ledger.logging_setup import get_logger
from statement_ledger.models import RawRow
from statement_ledger.patterns.common import (
    LOOSE_AMOUNT,
    collapse_whitespace,
    strip_noise,
)
from statement_ledger.utils.formatting import MONTHS, parse_balance

logger = get_logger(__name__)

STERLING_MONTH_DATE = re.compile(r'\d{2}-[A-Za-z]{3}-\d{4}')

# Format A
STERLING_A_NOISE = [
    re.compile(r'Page \d+ of \d+', re.IGNORECASE),
    re.compile(r'Date\s+Reference\s+Narration\s+Money\s*In\s+Money\s*Out\s+Balance', re.IGNORECASE),
]
STERLING_A_DATE = re.compile(r'\d{2}-\d{2}-\d{4}')
STERLING_A_DATE_RANGE = re.compile(r'^\d{2}-\d{2}-\d{4}\s+to\s+\d{2}-\d{2}-\d{4}', re.IGNORECASE)
STERLING_A_DATE_RANGE_LABEL = re.compile(r'date\s*range', re.IGNORECASE)
STERLING_A_AMOUNT = re.compile(rf'{LOOSE_AMOUNT}|-')
STERLING_A_PREFIX = re.compile(r'^(\d{2}-\d{2}-\d{4})\s+(\d{10})?')

# Format B
STERLING_B_HEADER = re.compile(
    r'Trans\s*Date\s+Narration\s+Value\s*Date\s+Debit\s+Credit\s+Balance',
    re.IGNORECASE
)
STERLING_B_TX_PATTERN = re.compile(
    r'(\d{2}-[A-Za-z]{3}-\d{4})\s+'       # Transaction date
    r'(.+?)\s+'                           # Narration
    r'(\d{2}-[A-Za-z]{3}-\d{4})\s+'       # Value date
    r'(\d+\.\d{2})\s+'                    # Debit
    r'(\d+\.\d{2})\s+'                    # Credit
    r'(\d+\.\d{2})'                       # Balance
)
STERLING_B_NARRATION_TAIL = [
    re.compile(r'\s+[A-Z][A-Z\s]+[A-Z]\s+Ref:\s*\S+\s*$'),
    re.compile(r'\s+Ref:\s*\S+\s*$'),
]
STERLING_B_REFERENCE = re.compile(r'Ref:\s*(\d{10})')


def _to_numeric_date(date_str: str) -> str:
    """Convert "01-Feb-2025" to "01-02-2025"."""
    day, month_name, year = date_str.split('-')
    month = MONTHS.get(month_name.lower())
    if month is None:
        return date_str
    return f"{day}-{month:02d}-{year}"


def _segment_format_a(text: str) -> List[RawRow]:
    clean_text = collapse_whitespace(strip_noise(text, STERLING_A_NOISE))
    starts = [m.start() for m in STERLING_A_DATE.finditer(clean_text)]
    rows = []

    for i, start in enumerate(starts):
        end = starts[i + 1] if i + 1 < len(starts) else len(clean_text)
        chunk = clean_text[start:end].strip()

        if STERLING_A_DATE_RANGE.match(chunk) or STERLING_A_DATE_RANGE_LABEL.search(chunk):
            continue

        amounts = list(STERLING_A_AMOUNT.finditer(chunk))
        if len(amounts) < 3:
            continue

        money_in, money_out, balance = amounts[-3], amounts[-2], amounts[-1]
        if balance.group(0) == '-':
            continue

        prefix = STERLING_A_PREFIX.match(chunk)
        if not prefix:
            continue

        narration = chunk[prefix.end():money_in.start()].strip()
        rows.append([
            prefix.group(1),
            prefix.group(2),
            narration,
            money_in.group(0),
            money_out.group(0),
            balance.group(0),
        ])

    return rows


def _segment_format_b(text: str) -> List[RawRow]:
    header = STERLING_B_HEADER.search(text)
    if not header:
        return []

    section = collapse_whitespace(text[header.end():])
    rows = []

    for match in STERLING_B_TX_PATTERN.finditer(section):
        trans_date, raw_narration, _value_date, debit, credit, balance = match.groups()

        narration = strip_noise(raw_narration, STERLING_B_NARRATION_TAIL).strip()
        reference = STERLING_B_REFERENCE.search(raw_narration)

        rows.append([
            _to_numeric_date(trans_date),
            reference.group(1) if reference else None,
            narration,
            credit if parse_balance(credit) else '-',
            debit if parse_balance(debit) else '-',
            balance,
        ])

    return rows


def segment_sterling(text: str) -> List[RawRow]:
    """
    Extract rows from Sterling Bank statement text.

    Returns:
        Rows of [date(DD-MM-YYYY), reference, narration, money_in, money_out, balance]
    """
    if STERLING_MONTH_DATE.search(text):
        rows = _segment_format_b(text)
    else:
        rows = _segment_format_a(text)

    logger.debug("Sterling: segmented %d row(s)", len(rows))
    return rows
