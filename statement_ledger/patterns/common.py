"""
Helpers shared by the per-bank statement segmenters.

Segmenters turn the flattened text of a PDF statement into raw rows. Several
dialects print one unsigned amount per line next to a running balance; the
``BalanceTracker`` here recovers the sign for those.
"""

import re
from dataclasses import dataclass
from typing import Optional, List, Tuple, Iterable

from statement_ledger.utils.formatting import parse_balance


# Money with thousands separators, e.g. "1,234.56"
AMOUNT = r'\d{1,3}(?:,\d{3})*\.\d{2}'
# Looser money, e.g. "1234.56" or "1,234.56"
LOOSE_AMOUNT = r'[\d,]+\.\d{2}'

_WHITESPACE = re.compile(r'\s+')


@dataclass
class BalanceTracker:
    """
    Running-balance accumulator for one segmenter call.

    For an unsigned amount ``a`` and a reported balance ``b`` the line is a
    credit when ``|previous + a - b| < |previous - a - b|`` and a debit
    otherwise (equal errors count as a debit). The previous balance always
    moves to ``b`` afterwards, whatever the outcome.
    """
    previous_balance: int = 0

    @classmethod
    def from_text(cls, text: str, pattern: re.Pattern) -> 'BalanceTracker':
        """Seed from an opening-balance match in the text, or start at zero."""
        match = pattern.search(text)
        opening = parse_balance(match.group(1)) if match else None
        return cls(opening or 0)

    def classify(self, amount: int, balance: int) -> bool:
        """Return True when the line is a credit."""
        credit_error = abs(self.previous_balance + amount - balance)
        debit_error = abs(self.previous_balance - amount - balance)
        self.previous_balance = balance
        return credit_error < debit_error

    def place(self, amount_text: str, balance_text: str) -> Tuple[Optional[str], Optional[str]]:
        """
        Put an unsigned amount into the debit or credit column.

        Returns:
            Tuple of (debit, credit); the unused column is ``None``
        """
        amount = parse_balance(amount_text) or 0
        balance = parse_balance(balance_text) or 0
        if self.classify(amount, balance):
            return None, amount_text
        return amount_text, None


@dataclass
class Segment:
    """Text between one date marker and the next."""
    dates: Tuple[str, ...]
    content: str


def strip_noise(text: str, patterns: Iterable[re.Pattern]) -> str:
    """Replace every match of the given patterns with a single space."""
    for pattern in patterns:
        text = pattern.sub(' ', text)
    return text


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(' ', text).strip()


def split_on_dates(text: str, pattern: re.Pattern) -> List[Segment]:
    """
    Cut text into segments, each starting at a date marker.

    The captured groups of ``pattern`` become the segment's dates and the
    text up to the next marker becomes its content. Anything before the first
    marker is dropped.
    """
    matches = list(pattern.finditer(text))
    segments = []
    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        segments.append(Segment(match.groups(), text[match.end():end].strip()))
    return segments
