"""
Tests for the StatementParser pipeline.
"""

import asyncio
import io
from datetime import datetime, timezone
from pathlib import Path

import openpyxl
import pytest

# Add parent directory to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from statement_ledger import StatementParser
from statement_ledger.detector import SourceFormat
from statement_ledger.exceptions import DocumentError
from statement_ledger.models import BankType, Transaction, TransactionMeta
from statement_ledger.parser import FailureKind, ParseOptions, ParseResult, chunk_progress
from statement_ledger.utils.validation import validate_transaction, validate_transactions


FAKE_PDF = b"%PDF-1.4 fake"

FCMB_TEXT = """
OPENING BALANCE 100,000.00
02-Jan-2025 02-Jan-2025 NIP FRM John Doe-Salary 50,000.00 150,000.00
03-Jan-2025 03-Jan-2025 App To Opay Jane Smith 20,000.00 130,000.00
"""

FCMB_FALLING_TEXT = """
OPENING BALANCE 100,000.00
02-Jan-2025 02-Jan-2025 NIP FRM John Doe-Salary 50,000.00 50,000.00
03-Jan-2025 03-Jan-2025 App To Opay Jane Smith 20,000.00 70,000.00
"""

KUDA_CSV = (
    b"Date/Time,,Money In,,Money Out,,Category,,To / From,,Description,,Balance\n"
    b'22/01/23 12:46:35,,"5,000.00",,,,Inward Transfer,,JOHN DOE/0123456789/GTBank,,rent,,"15,000.00"\n'
    b'23/01/23 09:10:00,,,,"2,000.00",,Airtime,,MTN/08012345678/,,airtime,,"13,000.00"\n'
)


def make_workbook(sheets):
    """Build XLSX bytes from {sheet_name: [rows]}."""
    wb = openpyxl.Workbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(name)
        for r, row in enumerate(rows, 1):
            for c, value in enumerate(row, 1):
                if value is not None:
                    ws.cell(row=r, column=c, value=value)
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def fcmb_pdf(monkeypatch):
    """Serve FCMB statement text in place of real PDF extraction."""
    monkeypatch.setattr("statement_ledger.parser.extract_text_from_pdf",
                        lambda data, password=None: FCMB_TEXT)
    return FAKE_PDF


class ProgressLog:
    """Collects progress callbacks."""

    def __init__(self):
        self.events = []

    def __call__(self, percent, message):
        self.events.append((percent, message))

    @property
    def percents(self):
        return [p for p, _ in self.events]


class TestPipeline:
    """End-to-end runs over each source format."""

    def test_pdf_statement(self, fcmb_pdf):
        """Test a PDF run from text to sorted ledger."""
        progress = ProgressLog()
        result = StatementParser().run(fcmb_pdf, "fcmb", file_name="statement.pdf", on_progress=progress)

        assert result.ok
        assert result.error is None
        assert result.bank is BankType.FCMB
        assert result.source_format is SourceFormat.PDF
        assert result.row_count == 2
        assert [tx.amount for tx in result.transactions] == [-2000000, 5000000]
        assert result.transactions[0].date > result.transactions[1].date

    def test_progress_sequence(self, fcmb_pdf):
        """Test progress milestones with one row per chunk."""
        progress = ProgressLog()
        parser = StatementParser(ParseOptions(chunk_size=1))
        parser.run(fcmb_pdf, BankType.FCMB, on_progress=progress)

        assert progress.percents == [5, 20, 55, 90, 95, 100]
        assert progress.events[0] == (5, "Reading file...")
        assert progress.events[1] == (20, "Found 2 rows...")
        assert progress.events[2] == (55, "Processing 1 of 2 rows...")
        assert progress.events[-2] == (95, "Finalizing...")
        assert progress.events[-1] == (100, "Done")

    def test_progress_never_decreases(self, fcmb_pdf):
        """Test that reported percentages are monotonic."""
        progress = ProgressLog()
        StatementParser().run(fcmb_pdf, "fcmb", on_progress=progress)
        assert progress.percents == sorted(progress.percents)
        assert progress.percents[-1] == 100

    def test_options_override(self, fcmb_pdf):
        """Test per-run options."""
        progress = ProgressLog()
        StatementParser().run(fcmb_pdf, "fcmb", on_progress=progress, options=ParseOptions(chunk_size=1))
        assert 55 in progress.percents

    def test_workbook_statement(self):
        """Test an OPay workbook with an internal sweep on a named sheet."""
        document = make_workbook({
            "Summary": [["Opening Balance", "50,000.00"]],
            "Wallet Account Transactions": [
                ["Trans. Time", "Value Date", "Description", "Debit", "Credit", "Balance", "Channel", "Reference"],
                ["29 Nov 2025 08:12:51", "29 Nov 2025", "Transfer to JOHN DOE | Access Bank | 0123456789 | lunch",
                 "5,000.00", "--", "45,000.00", "Mobile", "250112345678"],
                ["29 Nov 2025 09:00:00", "29 Nov 2025", "OWealth Withdrawal", "--", "1,000.00",
                 "46,000.00", "Mobile", "250112345679"],
            ],
        })
        result = StatementParser().run(document, "opay", file_name="opay.xlsx")

        assert result.ok
        assert result.source_format is SourceFormat.SPREADSHEET
        assert result.row_count == 3
        assert len(result.transactions) == 1
        tx = result.transactions[0]
        assert tx.amount == -500000
        assert tx.reference == "250112345678"
        assert tx.meta.counterparty_name == "JOHN DOE"

    def test_delimited_statement(self):
        """Test a Kuda CSV export."""
        result = StatementParser().run(KUDA_CSV, "kuda", file_name="kuda.csv")

        assert result.ok
        assert result.source_format is SourceFormat.DELIMITED
        assert [tx.amount for tx in result.transactions] == [-200000, 500000]
        assert result.transactions[1].meta.counterparty_bank == "GTBank"

    def test_deterministic(self, fcmb_pdf):
        """Test that the same document gives the same ledger."""
        first = StatementParser().run(fcmb_pdf, "fcmb")
        second = StatementParser().run(fcmb_pdf, "fcmb")
        assert [tx.id for tx in first.transactions] == [tx.id for tx in second.transactions]
        assert first.transactions == second.transactions

    def test_stable_sort_on_equal_dates(self):
        """Test that rows on the same date keep their document order."""
        document = (
            b"Date/Time,,Money In,,Money Out,,Category,,To / From,,Description,,Balance\n"
            b'22/01/23 12:00:00,,"1,000.00",,,,Inward Transfer,,A/1/B,,first,,"1,000.00"\n'
            b'22/01/23 12:00:00,,"2,000.00",,,,Inward Transfer,,A/1/B,,second,,"3,000.00"\n'
        )
        result = StatementParser().run(document, "kuda", file_name="kuda.csv")
        assert [tx.description for tx in result.transactions] == ["first", "second"]

    def test_parse_file(self, tmp_path):
        """Test reading a statement from disk."""
        path = tmp_path / "kuda.csv"
        path.write_bytes(KUDA_CSV)
        result = StatementParser().parse_file(path, "kuda")
        assert result.ok
        assert len(result.transactions) == 2

    def test_real_pdf_document(self, make_pdf):
        """Test a run over an actual PDF document."""
        document = make_pdf(FCMB_TEXT.strip().splitlines())
        result = StatementParser().run(document, "fcmb", file_name="fcmb.pdf")

        assert result.ok
        assert result.source_format is SourceFormat.PDF
        assert [tx.amount for tx in result.transactions] == [-2000000, 5000000]

    def test_concurrent_runs_keep_balances_apart(self, monkeypatch):
        """Test that interleaved async runs infer signs from their own balances."""
        texts = {b"%PDF-1.4 rising": FCMB_TEXT, b"%PDF-1.4 falling": FCMB_FALLING_TEXT}
        monkeypatch.setattr("statement_ledger.parser.extract_text_from_pdf",
                            lambda data, password=None: texts[data])
        parser = StatementParser(ParseOptions(chunk_size=1))

        async def run_both():
            return await asyncio.gather(
                parser.run_async(b"%PDF-1.4 rising", "fcmb"),
                parser.run_async(b"%PDF-1.4 falling", "fcmb"),
            )

        rising, falling = asyncio.run(run_both())
        assert [tx.amount for tx in rising.transactions] == [-2000000, 5000000]
        assert [tx.amount for tx in falling.transactions] == [2000000, -5000000]

    def test_run_async(self, fcmb_pdf):
        """Test that the async run matches the sync one."""
        progress = ProgressLog()
        parser = StatementParser(ParseOptions(chunk_size=1))
        result = asyncio.run(parser.run_async(fcmb_pdf, "fcmb", on_progress=progress))
        expected = parser.run(fcmb_pdf, "fcmb")

        assert result.ok
        assert result.transactions == expected.transactions
        assert progress.percents == [5, 20, 55, 90, 95, 100]


class TestFailures:
    """Tests for terminal failures."""

    def test_unsupported_bank(self):
        """Test that an unknown bank is reported, not raised."""
        progress = ProgressLog()
        result = StatementParser().run(KUDA_CSV, "monzo", on_progress=progress)

        assert not result.ok
        assert result.failure is FailureKind.UNSUPPORTED
        assert result.error == "Unsupported bank: monzo"
        assert result.transactions == []
        assert progress.percents == [5]

    def test_no_transactions(self):
        """Test a readable document with nothing in it."""
        result = StatementParser().run(b"Date,Description\n", "kuda", file_name="empty.csv")
        assert result.failure is FailureKind.EMPTY
        assert result.error == "No transactions found in file"
        assert result.bank is BankType.KUDA

    def test_empty_pdf_text(self, monkeypatch):
        """Test a PDF with no statement lines."""
        monkeypatch.setattr("statement_ledger.parser.extract_text_from_pdf", lambda data, password=None: "")
        progress = ProgressLog()
        result = StatementParser().run(FAKE_PDF, "gtb", on_progress=progress)

        assert result.failure is FailureKind.EMPTY
        assert progress.percents == [5, 20]
        assert progress.events[1] == (20, "Found 0 rows...")

    def test_missing_sheet(self):
        """Test that a workbook without the expected sheet is a document failure."""
        document = make_workbook({"Sheet1": [["a", "b"]]})
        result = StatementParser().run(document, "opay", file_name="opay.xlsx")
        assert result.failure is FailureKind.DOCUMENT
        assert "Wallet Account Transactions" in result.error

    def test_unreadable_pdf(self, monkeypatch):
        """Test that extractor errors become document failures."""
        def fail(data, password=None):
            raise DocumentError("PDF is encrypted and no password was given")

        monkeypatch.setattr("statement_ledger.parser.extract_text_from_pdf", fail)
        result = StatementParser().run(FAKE_PDF, "gtb")
        assert result.failure is FailureKind.DOCUMENT
        assert result.error == "PDF is encrypted and no password was given"

    def test_pdf_for_spreadsheet_dialect(self):
        """Test that a PDF for a spreadsheet-only bank is rejected."""
        result = StatementParser().run(FAKE_PDF, "kuda", file_name="kuda.pdf")
        assert result.failure is FailureKind.DOCUMENT
        assert result.error == "Kuda statements are not supported as PDF"
        assert result.source_format is None

    def test_unexpected_error(self, monkeypatch):
        """Test that anything else is reported as an internal failure."""
        def boom(data, password=None):
            raise RuntimeError("boom")

        monkeypatch.setattr("statement_ledger.parser.extract_text_from_pdf", boom)
        result = StatementParser().run(FAKE_PDF, "gtb")
        assert result.failure is FailureKind.INTERNAL
        assert result.error == "boom"

    def test_unexpected_error_without_message(self, monkeypatch):
        """Test the generic message for errors with no text."""
        def boom(data, password=None):
            raise RuntimeError()

        monkeypatch.setattr("statement_ledger.parser.extract_text_from_pdf", boom)
        result = StatementParser().run(FAKE_PDF, "gtb")
        assert result.failure is FailureKind.INTERNAL
        assert result.error == "Failed to parse file"

    def test_async_failure(self):
        """Test that async runs report failures the same way."""
        result = asyncio.run(StatementParser().run_async(KUDA_CSV, "monzo"))
        assert result.failure is FailureKind.UNSUPPORTED


class TestParseResult:
    """Tests for ParseResult helpers."""

    def test_summary(self, fcmb_pdf):
        """Test summary totals in minor units."""
        summary = StatementParser().run(fcmb_pdf, "fcmb").get_summary()

        assert summary['total_transactions'] == 2
        assert summary['total_inflow'] == 5000000
        assert summary['total_outflow'] == 2000000
        assert summary['net_amount'] == 3000000
        assert summary['first_date'] == "2025-01-02T00:00:00+00:00"
        assert summary['last_date'] == "2025-01-03T00:00:00+00:00"
        assert summary['bank'] == "fcmb"
        assert summary['error'] is None

    def test_to_dict(self, fcmb_pdf):
        """Test dictionary conversion of a successful run."""
        data = StatementParser().run(fcmb_pdf, "fcmb").to_dict()
        assert data['transaction_count'] == 2
        assert data['source_format'] == "pdf"
        assert 'error' not in data

    def test_failed_to_dict(self):
        """Test dictionary conversion of a failed run."""
        data = ParseResult.failed(FailureKind.EMPTY, "No transactions found in file").to_dict()
        assert data['error'] == "No transactions found in file"
        assert data['failure'] == "empty"
        assert data['transactions'] == []

    def test_empty_summary(self):
        """Test the summary of an empty result."""
        summary = ParseResult().get_summary()
        assert summary['total_transactions'] == 0
        assert summary['first_date'] is None


class TestOptionsAndHelpers:
    """Tests for options, progress and validation helpers."""

    def test_chunk_size_must_be_positive(self):
        """Test that a zero chunk size is rejected."""
        with pytest.raises(ValueError):
            ParseOptions(chunk_size=0)

    def test_chunk_progress(self):
        """Test the 20..90 progress band."""
        assert chunk_progress(0, 10) == 20
        assert chunk_progress(5, 10) == 55
        assert chunk_progress(10, 10) == 90
        assert chunk_progress(0, 0) == 90

    def test_naive_date_is_invalid(self):
        """Test that a transaction without a timezone fails validation."""
        tx = Transaction(id="gtb-1", date=datetime(2025, 1, 15), amount=-100, bank_source=BankType.GTB,
                         reference="r", description="d")
        result = validate_transaction(tx)
        assert not result.is_valid
        assert "Date has no timezone" in result.errors

    def test_invalid_transactions_dropped(self):
        """Test the validation report."""
        good = Transaction(id="gtb-1", date=datetime(2025, 1, 15, tzinfo=timezone.utc), amount=100,
                           bank_source=BankType.GTB, reference="r", description="",
                           meta=TransactionMeta(balance_after=-5))
        bad = Transaction(id="", date=datetime(2025, 1, 15, tzinfo=timezone.utc), amount=0,
                          bank_source=BankType.GTB, reference="", description="d")
        valid, report = validate_transactions([good, bad])

        assert valid == [good]
        assert report['summary'] == {'total': 2, 'valid': 1, 'invalid': 1, 'total_warnings': 2}
        assert report['invalid_transactions'][0]['index'] == 1
        assert "Amount is zero" in report['invalid_transactions'][0]['errors']
