"""
Bank dialect registry.

Each supported institution has one ``DialectProfile`` tying together its
canonicalizer, the PDF segmenter that rebuilds rows from statement text (for
PDF dialects), the workbook sheet to read and an optional row preprocessor.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Type, Union

from statement_ledger.exceptions import UnsupportedBankError
from statement_ledger.models import BankType, RawRow
from statement_ledger.patterns.access import segment_access
from statement_ledger.patterns.fcmb import segment_fcmb
from statement_ledger.patterns.gtb import segment_gtb
from statement_ledger.patterns.palmpay import preprocess_rows, segment_palmpay
from statement_ledger.patterns.standard_chartered import segment_standard_chartered
from statement_ledger.patterns.sterling import segment_sterling
from statement_ledger.patterns.uba import segment_uba
from statement_ledger.patterns.wema import segment_wema
from statement_ledger.patterns.zenith import segment_zenith

from .base import BaseCanonicalizer, CounterpartyRule, KeywordRule, RowFields, DEFAULT_DESCRIPTION
from .access import AccessCanonicalizer
from .fcmb import FcmbCanonicalizer
from .gtb import GtbCanonicalizer
from .kuda import KudaCanonicalizer
from .opay import OpayCanonicalizer, OPAY_SHEET_NAME
from .palmpay import PalmPayCanonicalizer
from .standard_chartered import StandardCharteredCanonicalizer
from .sterling import SterlingCanonicalizer
from .uba import UbaCanonicalizer
from .wema import WemaCanonicalizer
from .zenith import ZenithCanonicalizer

Segmenter = Callable[[str], List[RawRow]]
Preprocessor = Callable[[List[RawRow]], List[RawRow]]


@dataclass(frozen=True)
class DialectProfile:
    """
    Everything the pipeline needs to know about one bank's statements.

    Attributes:
        bank: Institution this profile handles
        canonicalizer: Canonicalizer class, instantiated once per run
        segmenter: Rebuilds rows from PDF text; None for dialects that only
            ship spreadsheets or delimited exports
        sheet_name: Workbook sheet to read; None reads the first sheet
        preprocessor: Repairs rows from non-PDF sources before canonicalizing
    """
    bank: BankType
    canonicalizer: Type[BaseCanonicalizer]
    segmenter: Optional[Segmenter] = None
    sheet_name: Optional[str] = None
    preprocessor: Optional[Preprocessor] = None

    @property
    def label(self) -> str:
        return self.canonicalizer.label

    @property
    def reads_pdf(self) -> bool:
        return self.segmenter is not None

    def build_canonicalizer(self, default_description: str = DEFAULT_DESCRIPTION) -> BaseCanonicalizer:
        return self.canonicalizer(default_description)


_PROFILES = [
    DialectProfile(BankType.ACCESS, AccessCanonicalizer, segmenter=segment_access),
    DialectProfile(BankType.FCMB, FcmbCanonicalizer, segmenter=segment_fcmb),
    DialectProfile(BankType.GTB, GtbCanonicalizer, segmenter=segment_gtb),
    DialectProfile(BankType.KUDA, KudaCanonicalizer),
    DialectProfile(BankType.OPAY, OpayCanonicalizer, sheet_name=OPAY_SHEET_NAME),
    DialectProfile(BankType.PALMPAY, PalmPayCanonicalizer, segmenter=segment_palmpay,
                   preprocessor=preprocess_rows),
    DialectProfile(BankType.STANDARD_CHARTERED, StandardCharteredCanonicalizer,
                   segmenter=segment_standard_chartered),
    DialectProfile(BankType.STERLING, SterlingCanonicalizer, segmenter=segment_sterling),
    DialectProfile(BankType.UBA, UbaCanonicalizer, segmenter=segment_uba),
    DialectProfile(BankType.WEMA, WemaCanonicalizer, segmenter=segment_wema),
    DialectProfile(BankType.ZENITH, ZenithCanonicalizer, segmenter=segment_zenith),
]

PROFILES: Mapping[BankType, DialectProfile] = MappingProxyType({p.bank: p for p in _PROFILES})


def get_profile(bank: Union[BankType, str]) -> DialectProfile:
    """
    Look up the dialect profile for a bank.

    Args:
        bank: BankType member or its string value (e.g. "gtb")

    Returns:
        The registered DialectProfile

    Raises:
        UnsupportedBankError: If no dialect is registered for the bank
    """
    if not isinstance(bank, BankType):
        try:
            bank = BankType(str(bank).strip().lower())
        except ValueError:
            raise UnsupportedBankError(str(bank)) from None

    profile = PROFILES.get(bank)
    if profile is None:
        raise UnsupportedBankError(bank.value)
    return profile


def build_canonicalizers(default_description: str = DEFAULT_DESCRIPTION) -> Dict[BankType, BaseCanonicalizer]:
    """Construct a fresh canonicalizer for every registered bank."""
    return {bank: profile.build_canonicalizer(default_description) for bank, profile in PROFILES.items()}


__all__ = [
    'BaseCanonicalizer',
    'CounterpartyRule',
    'KeywordRule',
    'RowFields',
    'DialectProfile',
    'PROFILES',
    'get_profile',
    'build_canonicalizers',
    'AccessCanonicalizer',
    'FcmbCanonicalizer',
    'GtbCanonicalizer',
    'KudaCanonicalizer',
    'OpayCanonicalizer',
    'PalmPayCanonicalizer',
    'StandardCharteredCanonicalizer',
    'SterlingCanonicalizer',
    'UbaCanonicalizer',
    'WemaCanonicalizer',
    'ZenithCanonicalizer',
]
