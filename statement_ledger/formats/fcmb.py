"""
FCMB canonicalizer.
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

# Wallets and banks that appear after "App To" in transfer narrations
FCMB_APP_BANKS = ['Opay', 'Palmpay', 'Kuda', 'MONIEPOINT', 'GTB', 'Wema', 'VFD', 'POCKETAPP']


def _app_transfer(match: re.Match) -> Dict[str, str]:
    """App To Opay Jane Smith -> bank Opay, name Jane Smith."""
    target = match.group(1).strip()
    words = target.split()
    lowered = target.lower()

    for bank in FCMB_APP_BANKS:
        start = lowered.find(bank.lower())
        if start >= 0:
            name = target[start + len(bank):].strip()
            return {
                'counterparty_bank': bank,
                'counterparty_name': name or ' '.join(words[-2:]),
            }

    return {'counterparty_name': ' '.join(words[-2:])}


class FcmbCanonicalizer(BaseCanonicalizer):
    """Rows of [txn_date, value_date, description, debit, credit, balance]."""

    bank = BankType.FCMB
    label = "FCMB"
    min_columns = 6
    date_formats = (DateFormat.DAY_MON_YEAR,)

    type_rules = (
        KeywordRule(TransactionType.TRANSFER,
                    contains=('app to', 'app:', 'nip frm', 'trf from', 'trf to', 'cop frm')),
        KeywordRule(TransactionType.CARD_PAYMENT, contains=('pos purchase', 'pos pymnt', '/t ')),
        KeywordRule(TransactionType.AIRTIME, contains=('airtime',)),
        KeywordRule(TransactionType.BANK_CHARGE, contains=('emt levy', 'sms alert', 'transaction charge')),
        KeywordRule(TransactionType.REVERSAL, contains=('reversal', 'refund')),
    )

    counterparty_rules = (
        CounterpartyRule(re.compile(r'App(?:\s*:?\s*\w*)?\s+To\s+([^\d]+)', re.IGNORECASE),
                         extract=_app_transfer),
        CounterpartyRule(re.compile(r'NIP FRM\s+([^-]+)', re.IGNORECASE),
                         fields={'counterparty_name': 1}),
        CounterpartyRule(re.compile(r'TRF From\s+(?:App:\s*)?To\s+(\w+)\s+([^/]+)', re.IGNORECASE),
                         fields={'counterparty_bank': 1, 'counterparty_name': 2}),
        CounterpartyRule(re.compile(r'TRF to\s+(?:App:\s*)?To\s+(\w+)\s+([^/]+)', re.IGNORECASE),
                         fields={'counterparty_bank': 1, 'counterparty_name': 2}),
        CounterpartyRule(re.compile(r'COP FRM\s+(.+)', re.IGNORECASE),
                         fields={'counterparty_name': 1}),
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
