"""
Zenith Bank canonicalizer.
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


class ZenithCanonicalizer(BaseCanonicalizer):
    """Rows of [date, description, debit, credit, value_date, balance]."""

    bank = BankType.ZENITH
    label = "Zenith Bank"
    min_columns = 4
    date_formats = (DateFormat.DMY_SLASH,)

    type_rules = (
        KeywordRule(TransactionType.TRANSFER,
                    contains=('etz inflow',),
                    prefixes=('nip cr/mob', 'nip/', 'cip/', 'trf to', 'trf from')),
        KeywordRule(TransactionType.CARD_PAYMENT, contains=('pos prch', 'pos pyt')),
        KeywordRule(TransactionType.ATM_WITHDRAWAL, contains=('atm wdl', 'agency cashout')),
        KeywordRule(TransactionType.AIRTIME, prefixes=('airtime',)),
        KeywordRule(TransactionType.BANK_CHARGE,
                    contains=('nip charge', '+ vat', 'sms charge', 'maintenance fee',
                              'fgn electronic money transfer levy')),
        KeywordRule(TransactionType.REVERSAL, prefixes=('rvsl',)),
    )

    counterparty_rules = (
        # Outgoing: NIP CR/MOB/NAME/BANK/narration
        CounterpartyRule(re.compile(r'NIP\s+CR/MOB/([^/]+)/([^/]+)\s*/?\s*(.*)', re.IGNORECASE),
                         fields={'counterparty_name': 1, 'counterparty_bank': 2, 'narration': 3}),
        # Incoming: NIP/BANK/NAME/narration
        CounterpartyRule(re.compile(r'NIP/([^/]+)/([^/]+)/?(.*)$', re.IGNORECASE),
                         fields={'counterparty_bank': 1, 'counterparty_name': 2, 'narration': 3}),
        CounterpartyRule(re.compile(r'NIP//Paystack/([^/]+)/(.*)$', re.IGNORECASE),
                         fields={'counterparty_name': 1, 'narration': 2}),
        CounterpartyRule(re.compile(r':ETZ INFLOW\s+([^:]+):(.+)', re.IGNORECASE),
                         fields={'narration': 2}),
        CounterpartyRule(re.compile(r'CIP/CR//Transfer from\s+(.+)', re.IGNORECASE),
                         fields={'counterparty_name': 1}),
        CounterpartyRule(re.compile(r'Airtime//(\d+)//(.+)', re.IGNORECASE),
                         fields={'counterparty_name': 2}, narration=r'Airtime for \1'),
    )

    def extract_fields(self, row: RawRow) -> RowFields:
        return RowFields(
            date=cell(row, 0),
            description=cell(row, 1),
            debit=cell(row, 2),
            credit=cell(row, 3),
            session_id=cell(row, 4),
            balance=cell(row, 5),
        )
