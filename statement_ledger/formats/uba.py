"""
UBA canonicalizer.
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


class UbaCanonicalizer(BaseCanonicalizer):
    """Rows of [trans_date, value_date, narration, debit, credit, balance]."""

    bank = BankType.UBA
    label = "UBA"
    min_columns = 6
    date_formats = (DateFormat.DAY_MON_YEAR,)
    reference_length = 15

    type_rules = (
        KeywordRule(TransactionType.TRANSFER, contains=('mob/uto', 'mob/satu', 'tnf-', 'transfer from')),
        KeywordRule(TransactionType.CARD_PAYMENT, contains=('pos pur', 'pos trf')),
        KeywordRule(TransactionType.ATM_WITHDRAWAL, contains=('atm wd',)),
        KeywordRule(TransactionType.AIRTIME, contains=('ussd topup', 'mob topup')),
        KeywordRule(TransactionType.BANK_CHARGE,
                    contains=('stamp duty', 'sms', 'card maint', 'glo charge', 'wtax', 'charge')),
        KeywordRule(TransactionType.INTEREST, contains=('int. pd', 'interest')),
        KeywordRule(TransactionType.REVERSAL, contains=('reversal',), prefixes=('rev/',)),
        KeywordRule(TransactionType.BILL_PAYMENT, contains=('pstkdirectdebit', 'directdebit')),
    )

    counterparty_rules = (
        CounterpartyRule(re.compile(r'MOB/UTO/([^/]+)/([^/]+)/\d+'),
                         fields={'counterparty_name': 1, 'narration': 2}),
        CounterpartyRule(re.compile(r'MOB/SATU/(\d+)/(.+)'),
                         fields={'counterparty_account': 1}),
        CounterpartyRule(re.compile(r'TNF-([^/]+)/(.+)'),
                         fields={'counterparty_name': 1, 'narration': 2}),
        CounterpartyRule(re.compile(r'\./Transfer from ([^\d]+)', re.IGNORECASE),
                         fields={'counterparty_name': 1}),
        CounterpartyRule(re.compile(r'POS (?:Pur|Trf) @ (\S+)\s+(.+?)(?:\s+\d{6,}|$)'),
                         fields={'counterparty_name': 2}),
        CounterpartyRule(re.compile(r'ATM WD @ (\S+)-(.+)'),
                         fields={'counterparty_name': 2}),
        CounterpartyRule(re.compile(r'(?:USSD|MOB) TOPUP (\d+)'),
                         narration=r'Airtime for \1'),
    )

    def extract_fields(self, row: RawRow) -> RowFields:
        return RowFields(
            date=cell(row, 0),
            session_id=cell(row, 1),
            description=cell(row, 2),
            debit=cell(row, 3),
            credit=cell(row, 4),
            balance=cell(row, 5),
        )
