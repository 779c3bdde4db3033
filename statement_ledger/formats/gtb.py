"""
GTBank canonicalizer.

Descriptions come from the remarks column; the originating branch is split
off by the segmenter.
"""

import re

from statement_ledger.formats.base import (
    BaseCanonicalizer,
    CounterpartyRule,
    KeywordRule,
    RowFields,
    cell,
    clean_name,
)
from statement_ledger.models import BankType, RawRow, TransactionType
from statement_ledger.utils.formatting import DateFormat

GTB_BANK_NAMES = {
    'OPAY': 'OPay',
    'MONIEMFB': 'Moniepoint',
    'MONIEPOINT': 'Moniepoint',
    'PALMPAY': 'PalmPay',
    'WEMA': 'Wema Bank',
    'UBA': 'UBA',
    'GTB': 'GTB',
    'ACCESS': 'Access Bank',
    'ZENITH': 'Zenith Bank',
    'KUDA': 'Kuda',
    'FIRSTBANK': 'First Bank',
    'PIGGYVEST': 'PiggyVest',
}


class GtbCanonicalizer(BaseCanonicalizer):
    """Rows of [trans_date, value_date, reference, debit, credit, balance, remarks]."""

    bank = BankType.GTB
    label = "GTB"
    min_columns = 7
    date_formats = (DateFormat.DAY_MON_YEAR,)
    reference_length = 15

    type_rules = (
        KeywordRule(TransactionType.TRANSFER,
                    contains=('nibss instant payment', 'nip transfer', 'transfer between customers',
                              'transfer from', 'neft transfer')),
        KeywordRule(TransactionType.AIRTIME, contains=('airtime',)),
        KeywordRule(TransactionType.BANK_CHARGE,
                    contains=('electronic money transfer levy', 'emt levy', 'stamp duty', 'sms alert',
                              'commission', 'value added tax', 'maintenance fee')),
        KeywordRule(TransactionType.CARD_PAYMENT,
                    contains=('posweb purchase', 'pos/web purchase', 'pos pur', 'web pur')),
        KeywordRule(TransactionType.ATM_WITHDRAWAL, contains=('atm', 'cash withdrawal')),
        KeywordRule(TransactionType.REVERSAL, contains=('reversal', 'refund')),
        KeywordRule(TransactionType.INTEREST, contains=('interest',)),
    )

    counterparty_rules = (
        CounterpartyRule(re.compile(r'NIP TRANSFER TO\s+(\w+)\s+-\s+(.+?)\s*$', re.IGNORECASE),
                         fields={'counterparty_bank': 1, 'counterparty_name': 2}, banks=GTB_BANK_NAMES),
        CounterpartyRule(re.compile(
            r'(?:TO|FROM)\s+(OPAY|MONIEMFB|PALMPAY|WEMA|UBA|GTB|ACCESS|ZENITH|KUDA|FIRSTBANK|MONIEPOINT)'
            r'\s+-\s+(.+?)\s*$', re.IGNORECASE),
            fields={'counterparty_bank': 1, 'counterparty_name': 2}, banks=GTB_BANK_NAMES),
        CounterpartyRule(re.compile(r'Trf to\s+\d+\|(\d+)/\d+\|(\w+)\|([A-Z\s]+)\s+REF:', re.IGNORECASE),
                         fields={'counterparty_account': 1, 'counterparty_bank': 2, 'counterparty_name': 3},
                         banks=GTB_BANK_NAMES),
        CounterpartyRule(re.compile(r'TRANSFER FROM\s+([A-Z][A-Z\s]+?)[-–]([A-Z]+)[-–]', re.IGNORECASE),
                         fields={'counterparty_name': 1, 'counterparty_bank': 2}, banks=GTB_BANK_NAMES),
        CounterpartyRule(re.compile(r'NEFT TRANSFER.+?/([^/]+?)/Being', re.IGNORECASE),
                         fields={'counterparty_name': 1}),
        CounterpartyRule(re.compile(r'Airtime.+?-(\d{11,13})', re.IGNORECASE),
                         narration=r'Airtime for \1'),
        CounterpartyRule(re.compile(r'(?:POS|WEB)[^-]*-\d+-[^-]+-([A-Z][A-Z\s]+)', re.IGNORECASE),
                         fields={'counterparty_name': 1}),
    )

    def extract_fields(self, row: RawRow) -> RowFields:
        return RowFields(
            date=cell(row, 0),
            session_id=cell(row, 1),
            reference=cell(row, 2),
            debit=cell(row, 3),
            credit=cell(row, 4),
            balance=cell(row, 5),
            description=cell(row, 6),
        )

    def clean_counterparty_name(self, name: str) -> str:
        return clean_name(name)
