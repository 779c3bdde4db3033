"""
Core data model for canonical ledger transactions.

Amounts are integer minor units (kobo for NGN): positive values are inflows,
negative values are outflows. A transaction's category is always derived from
the sign of its amount and is never stored on its own.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any


# One raw row from an extractor or segmenter. ``None`` marks an absent cell,
# which is distinct from an empty string.
RawRow = List[Optional[str]]


class BankType(Enum):
    """Institutions with a supported statement dialect."""
    ACCESS = "access"
    FCMB = "fcmb"
    GTB = "gtb"
    KUDA = "kuda"
    OPAY = "opay"
    PALMPAY = "palmpay"
    STANDARD_CHARTERED = "standardchartered"
    STERLING = "sterling"
    UBA = "uba"
    WEMA = "wema"
    ZENITH = "zenith"


class TransactionType(Enum):
    """Inferred kind of a transaction."""
    TRANSFER = "transfer"
    AIRTIME = "airtime"
    CARD_PAYMENT = "card_payment"
    ATM_WITHDRAWAL = "atm_withdrawal"
    BILL_PAYMENT = "bill_payment"
    BANK_CHARGE = "bank_charge"
    REVERSAL = "reversal"
    INTEREST = "interest"
    OTHER = "other"


class TransactionCategory(Enum):
    """Direction of money movement."""
    INFLOW = "inflow"
    OUTFLOW = "outflow"


@dataclass
class TransactionMeta:
    """Optional structured extras recovered from a statement line."""
    type: Optional[TransactionType] = None
    counterparty_name: Optional[str] = None
    counterparty_account: Optional[str] = None
    counterparty_bank: Optional[str] = None
    narration: Optional[str] = None
    session_id: Optional[str] = None
    balance_after: Optional[int] = None
    raw_category: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dictionary, leaving out unset fields."""
        data = {}
        for key, value in asdict(self).items():
            if value is None:
                continue
            data[key] = value.value if isinstance(value, Enum) else value
        return data


@dataclass(frozen=True)
class Transaction:
    """A single canonical ledger entry."""
    id: str
    date: datetime
    amount: int
    bank_source: BankType
    reference: str
    description: str
    meta: TransactionMeta = field(default_factory=TransactionMeta)

    @property
    def category(self) -> TransactionCategory:
        if self.amount > 0:
            return TransactionCategory.INFLOW
        return TransactionCategory.OUTFLOW

    @property
    def is_inflow(self) -> bool:
        return self.category is TransactionCategory.INFLOW

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-ready dictionary."""
        return {
            'id': self.id,
            'date': self.date.isoformat(),
            'amount': self.amount,
            'category': self.category.value,
            'bank_source': self.bank_source.value,
            'reference': self.reference,
            'description': self.description,
            'meta': self.meta.to_dict(),
        }
