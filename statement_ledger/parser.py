"""
Main StatementParser class - the primary entry point for normalizing statements.

This class orchestrates the parsing pipeline:
1. Resolves the bank's dialect profile
2. Detects the document container and extracts raw rows
3. Canonicalizes rows in bounded chunks, reporting progress
4. Validates, sorts and returns the ledger slice, or a terminal failure
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, List, Dict, Any, Callable, Iterator, Tuple, Union

from statement_ledger.detector import SourceFormat, detect_source_format
from statement_ledger.exceptions import StatementError, UnsupportedBankError
from statement_ledger.formats import DialectProfile, get_profile
from statement_ledger.formats.base import BaseCanonicalizer, DEFAULT_DESCRIPTION
from statement_ledger.logging_setup import get_logger
from statement_ledger.models import BankType, RawRow, Transaction
from statement_ledger.output import OutputGenerator
from statement_ledger.utils.delimited import extract_rows_from_text
from statement_ledger.utils.pdf import extract_text_from_pdf
from statement_ledger.utils.spreadsheet import extract_rows_from_workbook
from statement_ledger.utils.validation import validate_transactions

logger = get_logger(__name__)

ProgressCallback = Callable[[int, str], None]

NO_TRANSACTIONS_MESSAGE = "No transactions found in file"
GENERIC_FAILURE_MESSAGE = "Failed to parse file"


@dataclass
class ParseOptions:
    """Options for a pipeline run."""
    chunk_size: int = 1000                       # Rows canonicalized between progress reports
    validate: bool = True                        # Drop transactions that fail validation
    default_description: str = DEFAULT_DESCRIPTION

    def __post_init__(self):
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")


class FailureKind(Enum):
    """Why a run ended without a ledger slice."""
    DOCUMENT = "document"          # Unreadable, encrypted or missing sheet
    EMPTY = "empty"                # Read fine, no transactions in it
    UNSUPPORTED = "unsupported"    # No dialect for the requested bank
    INTERNAL = "internal"          # Anything else


@dataclass
class ParseResult:
    """Result of one pipeline run."""
    transactions: List[Transaction] = field(default_factory=list)
    error: Optional[str] = None
    failure: Optional[FailureKind] = None
    bank: Optional[BankType] = None
    source_format: Optional[SourceFormat] = None
    row_count: int = 0

    @classmethod
    def failed(cls, kind: FailureKind, message: str, **kwargs) -> 'ParseResult':
        return cls(error=message, failure=kind, **kwargs)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = {
            'transactions': [tx.to_dict() for tx in self.transactions],
            'bank': self.bank.value if self.bank else None,
            'source_format': self.source_format.value if self.source_format else None,
            'row_count': self.row_count,
            'transaction_count': len(self.transactions),
        }
        if self.error is not None:
            data['error'] = self.error
            data['failure'] = self.failure.value if self.failure else None
        return data

    def get_summary(self) -> Dict[str, Any]:
        """Get a summary of the ledger slice, amounts in minor units."""
        total_inflow = sum(tx.amount for tx in self.transactions if tx.amount > 0)
        total_outflow = -sum(tx.amount for tx in self.transactions if tx.amount < 0)
        dates = [tx.date for tx in self.transactions]

        return {
            'total_transactions': len(self.transactions),
            'total_inflow': total_inflow,
            'total_outflow': total_outflow,
            'net_amount': total_inflow - total_outflow,
            'first_date': min(dates).isoformat() if dates else None,
            'last_date': max(dates).isoformat() if dates else None,
            'bank': self.bank.value if self.bank else None,
            'error': self.error,
        }

    def to_excel(self, filepath: str, include_summary: bool = True) -> bool:
        """
        Export to Excel format.

        Args:
            filepath: Output file path
            include_summary: Include summary sheet

        Returns:
            True if successful
        """
        return self._generator().to_excel(filepath, include_summary)

    def to_csv(self, filepath: str, delimiter: str = ',') -> bool:
        """Export to CSV format."""
        return self._generator().to_csv(filepath, delimiter)

    def to_json(self, filepath: str, indent: int = 2) -> bool:
        """Export to JSON format."""
        return self._generator().to_json(filepath, indent)

    def _generator(self) -> OutputGenerator:
        return OutputGenerator(self.transactions, self.bank)


class _Progress:
    """Forwards progress to a callback, never letting the percentage go down."""

    def __init__(self, callback: Optional[ProgressCallback]):
        self.callback = callback
        self.last = 0

    def report(self, percent: int, message: str):
        percent = max(self.last, min(100, percent))
        self.last = percent
        if self.callback is not None:
            self.callback(percent, message)


def chunk_progress(done: int, total: int) -> int:
    """Percentage reported after a chunk: 20..90 across the row set."""
    if total <= 0:
        return 90
    return min(90, 20 + round(done / total * 70))


class StatementParser:
    """
    Main parser class for bank statements.

    Usage:
        from statement_ledger import StatementParser

        parser = StatementParser()
        result = parser.parse_file("statement.pdf", bank="gtb")

        if result.ok:
            result.to_excel("output.xlsx")
            for tx in result.transactions:
                print(tx.date, tx.description, tx.amount)
    """

    def __init__(self, options: Optional[ParseOptions] = None):
        """
        Initialize the parser.

        Args:
            options: ParseOptions for customizing the pipeline
        """
        self.options = options or ParseOptions()

    def parse_file(self, filepath: Union[str, Path], bank: Union[BankType, str],
                   password: Optional[str] = None,
                   on_progress: Optional[ProgressCallback] = None) -> ParseResult:
        """
        Parse a statement file from disk.

        Args:
            filepath: Path to the statement (PDF, XLSX or CSV)
            bank: Institution that issued the statement
            password: Optional password for encrypted PDFs
            on_progress: Optional (percent, message) callback

        Returns:
            ParseResult with the ledger slice or a terminal failure
        """
        filepath = Path(filepath)
        return self.run(filepath.read_bytes(), bank, file_name=filepath.name,
                        password=password, on_progress=on_progress)

    def run(self, document: bytes, bank: Union[BankType, str], file_name: str = "",
            password: Optional[str] = None, on_progress: Optional[ProgressCallback] = None,
            options: Optional[ParseOptions] = None) -> ParseResult:
        """
        Run the whole pipeline over one document.

        Args:
            document: Raw file bytes
            bank: BankType or its string value
            file_name: Original file name, used as a format hint
            password: Optional password for encrypted PDFs
            on_progress: Optional (percent, message) callback
            options: Override options for this run

        Returns:
            ParseResult. Never raises for document or row problems.
        """
        options = options or self.options
        progress = _Progress(on_progress)
        state = _RunState(bank)
        try:
            progress.report(5, "Reading file...")
            profile = state.resolve()
            rows, state.source_format = self._extract(document, profile, file_name, password)
            state.row_count = len(rows)
            progress.report(20, f"Found {len(rows)} rows...")

            canonicalizer = profile.build_canonicalizer(options.default_description)
            transactions = []
            for done, batch in self._chunks(canonicalizer, rows, options.chunk_size):
                transactions.extend(batch)
                progress.report(chunk_progress(done, len(rows)), f"Processing {done} of {len(rows)} rows...")

            return self._finish(transactions, state, options, progress)
        except Exception as e:
            return self._fail(e, state)

    async def run_async(self, document: bytes, bank: Union[BankType, str], file_name: str = "",
                        password: Optional[str] = None, on_progress: Optional[ProgressCallback] = None,
                        options: Optional[ParseOptions] = None) -> ParseResult:
        """
        Async variant of ``run``.

        Extraction runs in a worker thread, and control is handed back to the
        event loop between chunks.
        """
        options = options or self.options
        progress = _Progress(on_progress)
        state = _RunState(bank)
        try:
            progress.report(5, "Reading file...")
            profile = state.resolve()
            rows, state.source_format = await asyncio.to_thread(
                self._extract, document, profile, file_name, password)
            state.row_count = len(rows)
            progress.report(20, f"Found {len(rows)} rows...")

            canonicalizer = profile.build_canonicalizer(options.default_description)
            transactions = []
            for done, batch in self._chunks(canonicalizer, rows, options.chunk_size):
                transactions.extend(batch)
                progress.report(chunk_progress(done, len(rows)), f"Processing {done} of {len(rows)} rows...")
                await asyncio.sleep(0)

            return self._finish(transactions, state, options, progress)
        except Exception as e:
            return self._fail(e, state)

    def _extract(self, document: bytes, profile: DialectProfile, file_name: str,
                 password: Optional[str]) -> Tuple[List[RawRow], SourceFormat]:
        """Turn document bytes into raw rows for the profile's dialect."""
        source_format = detect_source_format(document, file_name)

        if source_format is SourceFormat.PDF:
            if not profile.reads_pdf:
                raise StatementError(f"{profile.label} statements are not supported as PDF",
                                     file_name=file_name)
            text = extract_text_from_pdf(document, password)
            rows = profile.segmenter(text)
        else:
            if source_format is SourceFormat.SPREADSHEET:
                rows = extract_rows_from_workbook(document, profile.sheet_name)
            else:
                rows = extract_rows_from_text(document)
            if profile.preprocessor is not None:
                rows = profile.preprocessor(rows)

        logger.debug("%s: %d raw rows from %s source", profile.label, len(rows), source_format.value)
        return rows, source_format

    @staticmethod
    def _chunks(canonicalizer: BaseCanonicalizer, rows: List[RawRow],
                chunk_size: int) -> Iterator[Tuple[int, List[Transaction]]]:
        """Yield (rows done so far, transactions from this chunk)."""
        for start in range(0, len(rows), chunk_size):
            chunk = rows[start:start + chunk_size]
            batch = [tx for tx in map(canonicalizer.canonicalize, chunk) if tx is not None]
            yield start + len(chunk), batch

    def _finish(self, transactions: List[Transaction], state: '_RunState',
                options: ParseOptions, progress: _Progress) -> ParseResult:
        if options.validate:
            transactions, report = validate_transactions(transactions)
            for entry in report['invalid_transactions']:
                logger.warning("Dropped invalid transaction %s: %s", entry['id'], "; ".join(entry['errors']))

        if not transactions:
            logger.info("%s: no transactions in %d rows", state.bank_label, state.row_count)
            return ParseResult.failed(FailureKind.EMPTY, NO_TRANSACTIONS_MESSAGE, **state.fields())

        progress.report(95, "Finalizing...")
        transactions = sorted(transactions, key=lambda tx: tx.date, reverse=True)
        progress.report(100, "Done")

        logger.info("%s: %d transactions from %d rows", state.bank_label, len(transactions), state.row_count)
        return ParseResult(transactions=transactions, **state.fields())

    @staticmethod
    def _fail(error: Exception, state: '_RunState') -> ParseResult:
        if isinstance(error, UnsupportedBankError):
            kind = FailureKind.UNSUPPORTED
        elif isinstance(error, StatementError):
            kind = FailureKind.DOCUMENT
        else:
            kind = FailureKind.INTERNAL

        message = str(error) or GENERIC_FAILURE_MESSAGE
        if kind is FailureKind.INTERNAL:
            logger.exception("Pipeline failed for %s", state.bank_label)
        else:
            logger.info("Pipeline stopped for %s: %s", state.bank_label, message)
        return ParseResult.failed(kind, message, **state.fields())


class _RunState:
    """What a run has learned so far, carried into its result."""

    def __init__(self, bank: Union[BankType, str]):
        self.requested = bank
        self.bank: Optional[BankType] = None
        self.source_format: Optional[SourceFormat] = None
        self.row_count = 0

    def resolve(self) -> DialectProfile:
        profile = get_profile(self.requested)
        self.bank = profile.bank
        return profile

    @property
    def bank_label(self) -> str:
        if self.bank is not None:
            return self.bank.value
        return str(self.requested)

    def fields(self) -> Dict[str, Any]:
        return {'bank': self.bank, 'source_format': self.source_format, 'row_count': self.row_count}
