"""
OPay canonicalizer.

OPay exports are workbooks; transactions live on the "Wallet Account
Transactions" sheet. Descriptions are pipe-delimited, e.g.
"Transfer to JOHN DOE | Access Bank | 0123456789 | lunch".

Automatic sweeps between the wallet and OWealth savings are internal moves,
not transactions, and are dropped.
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

OPAY_SHEET_NAME = "Wallet Account Transactions"


class OpayCanonicalizer(BaseCanonicalizer):
    """Rows of [date_time, date, description, debit, credit, balance, channel, reference]."""

    bank = BankType.OPAY
    label = "OPay"
    min_columns = 5
    date_formats = (DateFormat.DAY_MON_YEAR_TIME, DateFormat.DAY_MON_YEAR_SPACED, DateFormat.ISO)
    exclude_keywords = ('owealth withdrawal', 'auto-save to owealth')

    type_rules = (
        KeywordRule(TransactionType.TRANSFER, contains=('transfer to', 'transfer from')),
        KeywordRule(TransactionType.AIRTIME, prefixes=('airtime',)),
        KeywordRule(TransactionType.BANK_CHARGE, contains=('levy', 'charge', 'fee')),
        KeywordRule(TransactionType.BILL_PAYMENT, contains=('third-party merchant order',)),
        KeywordRule(TransactionType.REVERSAL, contains=('reversal', 'refund')),
    )

    counterparty_rules = (
        CounterpartyRule(re.compile(
            r'Transfer\s+(?:to|from)\s+([^|]+)\s*\|\s*([^|]+)\s*\|\s*([^|]+)(?:\s*\|\s*(.+))?', re.IGNORECASE),
            fields={'counterparty_name': 1, 'counterparty_bank': 2, 'counterparty_account': 3}),
        CounterpartyRule(re.compile(r'Third-Party Merchant Order\s*\|\s*(.+)', re.IGNORECASE),
                         fields={'counterparty_name': 1}),
        # Airtime | PHONE | CARRIER
        CounterpartyRule(re.compile(r'Airtime\s*\|\s*([^|]+)\s*\|\s*(.+)', re.IGNORECASE),
                         fields={'counterparty_name': 2}),
    )

    def extract_fields(self, row: RawRow) -> RowFields:
        return RowFields(
            date=cell(row, 0),
            description=cell(row, 2),
            debit=cell(row, 3),
            credit=cell(row, 4),
            balance=cell(row, 5),
            raw_category=cell(row, 6),
            reference=cell(row, 7),
        )
