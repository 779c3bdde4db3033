"""
Access Bank canonicalizer.
"""

import re
from typing import Dict

from statement_ledger.formats.base import (
    BaseCanonicalizer,
    CounterpartyRule,
    KeywordRule,
    RowFields,
    cell,
)
from statement_ledger.models import BankType, RawRow, TransactionType
from statement_ledger.utils.formatting import DateFormat

# Three-letter institution codes used in "MOBILE TRF" narrations
ACCESS_BANK_CODES = {
    'GTB': 'GTB',
    'PAY': 'OPay',
    'FBN': 'First Bank',
    'MMF': 'Moniepoint',
    'WBP': 'Wema Bank',
    'SPB': 'Sterling Bank',
    'STL': 'Sterling Bank',
    'PPL': 'PalmPay',
    'FMO': 'FCMB',
    'KMF': 'Kuda',
    'ACCESS': 'Access Bank',
}


def _mobile_transfer(match: re.Match) -> Dict[str, str]:
    """MOBILE TRF TO PAY/ 8012345678/JOHN DOE -> bank OPay, name JOHN DOE."""
    code, rest = match.groups()
    parts = rest.split('/')
    return {
        'counterparty_bank': ACCESS_BANK_CODES.get(code.upper(), code),
        'counterparty_name': parts[-1].strip() or parts[0].strip(),
    }


class AccessCanonicalizer(BaseCanonicalizer):
    """Rows of [posted_date, value_date, description, debit, credit, balance]."""

    bank = BankType.ACCESS
    label = "Access Bank"
    min_columns = 6
    date_formats = (DateFormat.DAY_MON_SHORT_YEAR, DateFormat.DAY_MON_YEAR)
    reference_length = 15

    type_rules = (
        KeywordRule(TransactionType.TRANSFER,
                    contains=('mobile trf to', 'mobile trf from', 'nip tfr', 'nip transfer', 'trf//frm')),
        KeywordRule(TransactionType.CARD_PAYMENT, contains=('web pymt', 'pos pymt')),
        KeywordRule(TransactionType.ATM_WITHDRAWAL, contains=('atm cash wdl',)),
        KeywordRule(TransactionType.BILL_PAYMENT, contains=('bills pymt', 'airtime')),
        KeywordRule(TransactionType.BANK_CHARGE, contains=('commission', 'vat ', 'sms alert fee', 'levy')),
        KeywordRule(TransactionType.REVERSAL, contains=('reversal', 'refund')),
    )

    counterparty_rules = (
        CounterpartyRule(re.compile(r'MOBILE TRF (?:TO|FROM) ([A-Z]{3})/ (.+)', re.IGNORECASE),
                         extract=_mobile_transfer),
        CounterpartyRule(re.compile(r'NIP (?:TFR FROM|Transfer to) ([^.]+)', re.IGNORECASE),
                         fields={'counterparty_name': 1}),
        CounterpartyRule(re.compile(r'TRF//FRM (.+?) TO (.+)', re.IGNORECASE),
                         fields={'counterparty_name': 2}),
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
