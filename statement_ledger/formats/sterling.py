"""
Sterling Bank canonicalizer.
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


def _onebank_transfer(match: re.Match) -> Dict[str, str]:
    """Transfers between two Sterling accounts."""
    return {'counterparty_name': match.group(2).strip(), 'counterparty_bank': 'Sterling Bank'}


class SterlingCanonicalizer(BaseCanonicalizer):
    """Rows of [date(DD-MM-YYYY), reference, narration, money_in, money_out, balance]."""

    bank = BankType.STERLING
    label = "Sterling Bank"
    min_columns = 6
    date_formats = (DateFormat.DMY_DASH,)
    reference_length = 15

    type_rules = (
        KeywordRule(TransactionType.REVERSAL, contains=('reversal', 'refund')),
        KeywordRule(TransactionType.INTEREST, contains=('interest',)),
        KeywordRule(TransactionType.TRANSFER,
                    contains=('onebank transfer', 'banknip', 'nip ', 'remitastp', 'remita')),
        KeywordRule(TransactionType.AIRTIME, contains=('airtime', 'data purchase', 'ussdairtime')),
        KeywordRule(TransactionType.CARD_PAYMENT, contains=('pos purchase', 'pos ', 'web purchase')),
        KeywordRule(TransactionType.BILL_PAYMENT, contains=('bill payment',)),
        KeywordRule(TransactionType.BANK_CHARGE,
                    contains=('sms notification charge', 'govt levy', 'emt ', 'charge')),
        KeywordRule(TransactionType.TRANSFER, contains=('transfer',)),
    )

    counterparty_rules = (
        CounterpartyRule(re.compile(r'OneBank Transfer from ([A-Z\s]+) to ([A-Z\s]+)', re.IGNORECASE),
                         extract=_onebank_transfer),
        CounterpartyRule(re.compile(r'BANKNIP From .+? SENDER:\s*([A-Z\s]+?)(?:\s+REMARK:|$)', re.IGNORECASE),
                         fields={'counterparty_name': 1}),
        CounterpartyRule(re.compile(r'(?:POS Purchase|Bill Payment).+?(?:from|to)\s+([A-Z0-9\s]+)', re.IGNORECASE),
                         fields={'counterparty_name': 1}),
        CounterpartyRule(re.compile(r'Data purchase for (\d{11})', re.IGNORECASE),
                         narration=r'Data purchase for \1'),
        CounterpartyRule(re.compile(r'USSDAirtime .+? to Mobile (\d{11})', re.IGNORECASE),
                         narration=r'Airtime for \1'),
    )

    def extract_fields(self, row: RawRow) -> RowFields:
        reference = cell(row, 1)
        return RowFields(
            date=cell(row, 0),
            reference=reference,
            session_id=reference,
            description=cell(row, 2),
            credit=cell(row, 3),
            debit=cell(row, 4),
            balance=cell(row, 5),
        )
