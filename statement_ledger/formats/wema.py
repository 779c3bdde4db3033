"""
Wema Bank (ALAT) canonicalizer.
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


class WemaCanonicalizer(BaseCanonicalizer):
    """Rows of [date, reference, description, debit, credit, balance]."""

    bank = BankType.WEMA
    label = "Wema Bank"
    min_columns = 5
    date_formats = (DateFormat.DAY_MON_YEAR_LOOSE,)

    type_rules = (
        KeywordRule(TransactionType.BANK_CHARGE, contains=('vat ', 'comm ', 'sms alert', 'levy')),
        KeywordRule(TransactionType.CARD_PAYMENT, contains=('pos buy', 'web buy')),
        KeywordRule(TransactionType.TRANSFER, contains=('nip:', 'nip transfer', 'alat nip')),
        KeywordRule(TransactionType.AIRTIME, contains=('airtime', 'recharge')),
        KeywordRule(TransactionType.REVERSAL, contains=('reversal', 'refund')),
    )

    counterparty_rules = (
        CounterpartyRule(re.compile(r'NIP:([^-]+)-(.+)', re.IGNORECASE),
                         fields={'counterparty_name': 1}),
        CounterpartyRule(re.compile(r'TRANSFER TO\s+(.+?)(?:\s+FROM|\s*$)', re.IGNORECASE),
                         fields={'counterparty_name': 1}),
    )

    def extract_fields(self, row: RawRow) -> RowFields:
        return RowFields(
            date=cell(row, 0),
            reference=cell(row, 1),
            description=cell(row, 2),
            debit=cell(row, 3),
            credit=cell(row, 4),
            balance=cell(row, 5),
        )
