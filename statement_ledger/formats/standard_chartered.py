"""
Standard Chartered canonicalizer.
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


class StandardCharteredCanonicalizer(BaseCanonicalizer):
    """Rows of [date, description, debit, credit, balance]."""

    bank = BankType.STANDARD_CHARTERED
    label = "Standard Chartered"
    min_columns = 5
    date_formats = (DateFormat.DAY_MON_YEAR_SPACED,)
    reference_length = 15

    type_rules = (
        KeywordRule(TransactionType.TRANSFER, contains=('nip', 'transfer')),
        KeywordRule(TransactionType.CARD_PAYMENT, contains=('pos', 'cash adv')),
        KeywordRule(TransactionType.AIRTIME, contains=('airtime', 'top-up', 'mtn', 'airtel')),
        KeywordRule(TransactionType.BANK_CHARGE, contains=('stampdutycharg', 'levy')),
        KeywordRule(TransactionType.CARD_PAYMENT, contains=('debit card txn', 'remita')),
        KeywordRule(TransactionType.INTEREST, contains=('cash back', 'reward')),
        KeywordRule(TransactionType.TRANSFER, contains=('ibk', 'ibanking')),
    )

    counterparty_rules = (
        # Sender name ahead of a transfer code: "JOHN DOE 100004..." / "JANE DOE NIP ..."
        CounterpartyRule(re.compile(
            r'^([A-Z][A-Z\s,\-.]+?)(?:\s+(?:V\.\d+|\d{5,}|IL\d+|NG-|NIP|IBK|POS|CASH|100\d{3}))',
            re.IGNORECASE),
            fields={'counterparty_name': 1}),
        CounterpartyRule(re.compile(r'(?:POS|CASH ADV)[^A-Z]*T?\s*([A-Z][A-Z\s]+?)(?:\s+\d)', re.IGNORECASE),
                         fields={'counterparty_name': 1}),
        CounterpartyRule(re.compile(r'^IBKG\s+([A-Z]+\s+[A-Z]+)', re.IGNORECASE),
                         fields={'counterparty_name': 1}),
    )

    def extract_fields(self, row: RawRow) -> RowFields:
        return RowFields(
            date=cell(row, 0),
            description=cell(row, 1),
            debit=cell(row, 2),
            credit=cell(row, 3),
            balance=cell(row, 4),
        )
