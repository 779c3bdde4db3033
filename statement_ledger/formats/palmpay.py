"""
PalmPay canonicalizer.

Two row layouts reach this canonicalizer:

- Spreadsheet/CSV: [date_time, description, money_in, money_out, transaction_id]
- PDF segmenter:   ["<date_time> <description>", signed_amount, transaction_id]

Timestamps are month-first with a 12-hour clock: 12/29/2025 06:19:00 AM.
"""

import re

from statement_ledger.formats.base import (
    BaseCanonicalizer,
    CounterpartyRule,
    KeywordRule,
    RowFields,
    cell,
)
from statement_ledger.models import BankType, RawRow, TransactionType
from statement_ledger.utils.formatting import DateFormat

_TIMESTAMP_PREFIX = re.compile(
    r'^(\d{2}/\d{2}/\d{4}\s+\d{2}:\d{2}:\d{2}\s+(?:AM|PM))\s*(.*)$',
    re.IGNORECASE | re.DOTALL
)


class PalmPayCanonicalizer(BaseCanonicalizer):
    """Handles both PalmPay row layouts."""

    bank = BankType.PALMPAY
    label = "PalmPay"
    min_columns = 3
    date_formats = (DateFormat.MDY_TIME_MERIDIEM, DateFormat.ISO)

    type_rules = (
        KeywordRule(TransactionType.AIRTIME, contains=('airtime', 'recharge')),
        KeywordRule(TransactionType.BILL_PAYMENT, contains=('bill', 'electricity', 'dstv', 'gotv')),
        KeywordRule(TransactionType.CARD_PAYMENT, contains=('card', 'pos')),
        KeywordRule(TransactionType.ATM_WITHDRAWAL, contains=('atm', 'withdrawal')),
        KeywordRule(TransactionType.BANK_CHARGE, contains=('levy', 'charge', 'fee', 'vat')),
        KeywordRule(TransactionType.INTEREST, contains=('interest', 'cashbox')),
        KeywordRule(TransactionType.REVERSAL, contains=('reversal', 'refund')),
        KeywordRule(TransactionType.TRANSFER, contains=('send to', 'received from', 'transfer')),
    )

    counterparty_rules = (
        CounterpartyRule(re.compile(r'Received from\s+(.+)', re.IGNORECASE), fields={'counterparty_name': 1}),
        CounterpartyRule(re.compile(r'Send to\s+(.+)', re.IGNORECASE), fields={'counterparty_name': 1}),
    )

    def extract_fields(self, row: RawRow) -> RowFields:
        if len(row) >= 4:
            return RowFields(
                date=cell(row, 0),
                description=cell(row, 1),
                credit=cell(row, 2),
                debit=cell(row, 3),
                reference=cell(row, 4),
            )

        first = cell(row, 0)
        match = _TIMESTAMP_PREFIX.match(first)
        if not match:
            return RowFields(date='', description=first)

        return RowFields(
            date=match.group(1),
            description=match.group(2),
            signed_amount=cell(row, 1),
            reference=cell(row, 2),
        )
