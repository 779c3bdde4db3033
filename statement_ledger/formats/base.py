"""
Base canonicalizer shared by all bank dialects.

A canonicalizer turns one raw row into one ``Transaction``, or ``None`` when
the row is not a transaction. The algorithm is the same for every bank; the
subclasses supply the row layout (``extract_fields``) and declarative rule
tables for exclusions, type inference and counterparty extraction.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Dict, Tuple, Mapping, Callable, Sequence

from statement_ledger.logging_setup import get_logger
from statement_ledger.models import (
    BankType,
    RawRow,
    Transaction,
    TransactionMeta,
    TransactionType,
)
from statement_ledger.utils.formatting import (
    DateFormat,
    generate_id,
    generate_reference,
    normalize_description,
    parse_amount,
    parse_balance,
    parse_date,
)

logger = get_logger(__name__)

DEFAULT_DESCRIPTION = "Transaction"

# Counterparty fields a rule may fill
COUNTERPARTY_FIELDS = ('counterparty_name', 'counterparty_account', 'counterparty_bank', 'narration')

_NAME_TRAILING_DIGITS = re.compile(r'\s*\d{6,}.*$')
_NAME_TRAILING_SLASHES = re.compile(r'/+$')
_WHITESPACE = re.compile(r'\s+')


@dataclass(frozen=True)
class KeywordRule:
    """
    Maps description keywords to a transaction type.

    The rule matches when the lower-cased text contains any of ``contains``
    or starts with any of ``prefixes``.
    """
    type: TransactionType
    contains: Tuple[str, ...] = ()
    prefixes: Tuple[str, ...] = ()

    def matches(self, text: str) -> bool:
        return any(kw in text for kw in self.contains) or text.startswith(self.prefixes)


@dataclass(frozen=True)
class CounterpartyRule:
    """
    Structural pattern that recovers counterparty details from a description.

    Attributes:
        pattern: Compiled pattern, searched against the description
        fields: Counterparty field name -> capture group number
        narration: Optional replacement narration, expanded from the match
            (e.g. r"Airtime for \\1")
        banks: Optional alias table for the captured bank (upper-cased key)
        extract: Optional callable taking the match and returning the fields,
            for layouts a group mapping cannot express
    """
    pattern: re.Pattern
    fields: Mapping[str, int] = field(default_factory=dict)
    narration: Optional[str] = None
    banks: Optional[Mapping[str, str]] = None
    extract: Optional[Callable[[re.Match], Dict[str, str]]] = None

    def apply(self, match: re.Match) -> Dict[str, str]:
        if self.extract is not None:
            return {k: v for k, v in self.extract(match).items() if v}

        result = {}
        for name, group in self.fields.items():
            value = match.group(group)
            if value and value.strip():
                result[name] = value.strip()

        if self.banks is not None and 'counterparty_bank' in result:
            bank = result['counterparty_bank']
            result['counterparty_bank'] = self.banks.get(bank.upper(), bank)

        if self.narration is not None:
            result['narration'] = match.expand(self.narration).strip()

        return result


@dataclass
class RowFields:
    """Dialect-independent view of one raw row."""
    date: str = ''
    description: str = ''
    debit: str = ''
    credit: str = ''
    signed_amount: str = ''
    balance: str = ''
    reference: str = ''
    session_id: str = ''
    raw_category: str = ''
    narration: str = ''
    # Text for type inference when it differs from the description
    classify_text: str = ''
    # Text for counterparty rules when it is not the description
    counterparty_text: Optional[str] = None


def cell(row: RawRow, index: int) -> str:
    """Return a trimmed cell, or "" when the cell is absent."""
    if index >= len(row) or row[index] is None:
        return ''
    return str(row[index]).strip()


def clean_name(name: str) -> str:
    """Drop trailing account numbers and slashes, and collapse whitespace."""
    name = _NAME_TRAILING_DIGITS.sub('', name)
    name = _NAME_TRAILING_SLASHES.sub('', name)
    return _WHITESPACE.sub(' ', name).strip()


class BaseCanonicalizer(ABC):
    """
    Abstract base class for bank dialect canonicalizers.

    Subclasses set the class attributes below and implement
    ``extract_fields``.
    """

    bank: BankType
    label: str = "base"
    min_columns: int = 1
    date_formats: Tuple[DateFormat, ...] = ()
    exclude_keywords: Tuple[str, ...] = ()
    type_rules: Sequence[KeywordRule] = ()
    counterparty_rules: Sequence[CounterpartyRule] = ()
    reference_length: int = 10

    def __init__(self, default_description: str = DEFAULT_DESCRIPTION):
        """
        Initialize the canonicalizer.

        Args:
            default_description: Placeholder for rows without a description
        """
        self.default_description = default_description

    @abstractmethod
    def extract_fields(self, row: RawRow) -> RowFields:
        """Map the dialect's positional columns onto ``RowFields``."""
        pass

    def canonicalize(self, row: RawRow) -> Optional[Transaction]:
        """
        Convert one raw row into a transaction.

        Returns:
            Transaction, or None when the row is too short, excluded, has no
            parseable date or has no usable amount. Never raises.
        """
        if not row or len(row) < self.min_columns:
            return None
        try:
            return self._build(self.extract_fields(row))
        except Exception:
            logger.warning("%s: could not canonicalize row %r", self.label, row, exc_info=True)
            return None

    def _build(self, fields: RowFields) -> Optional[Transaction]:
        description = normalize_description(fields.description)

        if self.is_excluded(description):
            logger.debug("%s: excluded row %r", self.label, description)
            return None

        date = parse_date(fields.date, self.date_formats)
        if date is None:
            return None

        amount = self.resolve_amount(fields)
        if amount is None:
            return None

        meta = TransactionMeta(
            type=self.infer_type(fields.classify_text or description),
            narration=fields.narration or description or None,
            raw_category=fields.raw_category or None,
            session_id=fields.session_id or None,
            balance_after=parse_balance(fields.balance) if fields.balance else None,
        )
        counterparty_text = description if fields.counterparty_text is None else fields.counterparty_text
        for name, value in self.extract_counterparty(counterparty_text).items():
            setattr(meta, name, value)

        description = description or self.default_description
        reference = fields.reference or generate_reference(date, description, self.reference_length)

        return Transaction(
            id=generate_id(self.bank.value, date, amount, description, fields.reference),
            date=date,
            amount=amount,
            bank_source=self.bank,
            reference=reference,
            description=description,
            meta=meta,
        )

    def is_excluded(self, description: str) -> bool:
        """Check if a description marks an internal, non-transaction line."""
        lowered = description.lower()
        return any(keyword in lowered for keyword in self.exclude_keywords)

    def resolve_amount(self, fields: RowFields) -> Optional[int]:
        """
        Determine the signed amount in minor units.

        A signed amount column wins when the dialect has one. Otherwise a
        nonzero credit is an inflow and a nonzero debit an outflow.
        """
        if fields.signed_amount:
            return parse_amount(fields.signed_amount)

        credit = parse_amount(fields.credit)
        if credit:
            return abs(credit)

        debit = parse_amount(fields.debit)
        if debit:
            return -abs(debit)

        return None

    def infer_type(self, text: str) -> TransactionType:
        """First keyword rule that matches wins; no match gives OTHER."""
        lowered = text.lower()
        for rule in self.type_rules:
            if rule.matches(lowered):
                return rule.type
        return TransactionType.OTHER

    def extract_counterparty(self, description: str) -> Dict[str, str]:
        """Apply counterparty rules in order; the first matching pattern wins."""
        for rule in self.counterparty_rules:
            match = rule.pattern.search(description)
            if match:
                result = rule.apply(match)
                if 'counterparty_name' in result:
                    result['counterparty_name'] = self.clean_counterparty_name(result['counterparty_name'])
                return {k: v for k, v in result.items() if k in COUNTERPARTY_FIELDS and v}
        return {}

    def clean_counterparty_name(self, name: str) -> str:
        return _WHITESPACE.sub(' ', name).strip()
