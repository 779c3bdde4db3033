"""
Statement Ledger Library

Parses bank statements from Nigerian banks and wallets (PDF, XLSX, CSV) and
normalizes them into one canonical ledger of signed, minor-unit transactions.

Usage:
    from statement_ledger import StatementParser

    parser = StatementParser()
    result = parser.parse_file("statement.pdf", bank="gtb")
    result.to_excel("output.xlsx")
"""

from .parser import StatementParser, ParseOptions, ParseResult, FailureKind
from .detector import SourceFormat, detect_source_format
from .exceptions import StatementError, DocumentError, NoSheetsError, UnsupportedBankError
from .formats import get_profile
from .models import BankType, Transaction, TransactionMeta, TransactionType, TransactionCategory

__version__ = "0.1.0"
__all__ = [
    "StatementParser",
    "ParseOptions",
    "ParseResult",
    "FailureKind",
    "SourceFormat",
    "detect_source_format",
    "StatementError",
    "DocumentError",
    "NoSheetsError",
    "UnsupportedBankError",
    "get_profile",
    "BankType",
    "Transaction",
    "TransactionMeta",
    "TransactionType",
    "TransactionCategory",
]
