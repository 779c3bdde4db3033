"""
Kuda canonicalizer.

Kuda exports are spreadsheets (or CSV) with blank spacer columns:

    [Date/Time, -, Money In, -, Money Out, -, Category, -, To/From, -, Description, -, Balance]
     0             2           4            6            8           10              12

The To/From column reads "Name/AccountNumber/BankName".
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

_REFERENCE_STRIP = re.compile(r'[^a-zA-Z0-9-]')


def kuda_reference(date_time: str, to_from: str, description: str) -> str:
    """Kuda rows carry no reference; build one from the timestamp and parties."""
    parts = [date_time[:8], to_from[:10], description[:10]]
    return _REFERENCE_STRIP.sub('', '-'.join(p for p in parts if p)).upper()


class KudaCanonicalizer(BaseCanonicalizer):
    """Spreadsheet rows in the layout described above."""

    bank = BankType.KUDA
    label = "Kuda"
    min_columns = 6
    date_formats = (DateFormat.DMY_SHORT_TIME, DateFormat.DMY_SLASH, DateFormat.ISO)

    type_rules = (
        KeywordRule(TransactionType.AIRTIME, contains=('airtime', 'recharge')),
        KeywordRule(TransactionType.BILL_PAYMENT, contains=('bill', 'electricity', 'dstv', 'gotv')),
        KeywordRule(TransactionType.CARD_PAYMENT, contains=('card', 'pos')),
        KeywordRule(TransactionType.ATM_WITHDRAWAL, contains=('atm', 'withdrawal')),
        KeywordRule(TransactionType.BANK_CHARGE, contains=('charge', 'fee', 'vat')),
        KeywordRule(TransactionType.INTEREST, contains=('interest',)),
        KeywordRule(TransactionType.REVERSAL, contains=('reversal', 'refund')),
        KeywordRule(TransactionType.TRANSFER, contains=('transfer', 'sent', 'received')),
    )

    counterparty_rules = (
        CounterpartyRule(re.compile(r'^([^/]*)(?:/([^/]*))?(?:/([^/]*))?'),
                         fields={'counterparty_name': 1, 'counterparty_account': 2, 'counterparty_bank': 3}),
    )

    def extract_fields(self, row: RawRow) -> RowFields:
        date_time = cell(row, 0)
        category = cell(row, 6)
        to_from = cell(row, 8)
        description = cell(row, 10)

        return RowFields(
            date=date_time,
            credit=cell(row, 2),
            debit=cell(row, 4),
            balance=cell(row, 12),
            description=description or category,
            reference=kuda_reference(date_time, to_from, description) if date_time else '',
            raw_category=category,
            narration=' - '.join(p for p in (description, to_from, category) if p),
            classify_text=f"{category} {description}",
            counterparty_text=to_from,
        )
