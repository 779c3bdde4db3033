"""
Output generation module for normalized ledgers.

Supports multiple output formats:
- Excel (XLSX)
- CSV
- JSON

Amounts are stored on transactions in minor units and exported in major units.
"""

import csv
import json
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Dict, Any, Optional

import openpyxl
from openpyxl.styles import Font, Alignment, PatternFill
from openpyxl.utils import get_column_letter

from statement_ledger.models import BankType, Transaction

COLUMNS = [
    'date', 'description', 'amount', 'category', 'type', 'counterparty_name',
    'counterparty_account', 'counterparty_bank', 'balance_after', 'reference', 'id',
]

_MONEY_COLUMNS = ('amount', 'balance_after')


def to_major_units(minor_units: Optional[int]) -> Optional[Decimal]:
    """Convert kobo to naira (e.g. 5000000 -> Decimal('50000.00'))."""
    if minor_units is None:
        return None
    return (Decimal(minor_units) / 100).quantize(Decimal('0.01'))


def flatten_transaction(tx: Transaction) -> Dict[str, Any]:
    """Flatten a transaction into one export row keyed by COLUMNS."""
    meta = tx.meta
    return {
        'date': tx.date,
        'description': tx.description,
        'amount': to_major_units(tx.amount),
        'category': tx.category.value,
        'type': meta.type.value if meta.type else '',
        'counterparty_name': meta.counterparty_name or '',
        'counterparty_account': meta.counterparty_account or '',
        'counterparty_bank': meta.counterparty_bank or '',
        'balance_after': to_major_units(meta.balance_after),
        'reference': tx.reference,
        'id': tx.id,
    }


class OutputGenerator:
    """Generate output in various formats from canonical transactions."""

    def __init__(self, transactions: List[Transaction], bank: Optional[BankType] = None):
        """
        Initialize the output generator.

        Args:
            transactions: Canonical transactions, in the order to export
            bank: Source institution, recorded in JSON output
        """
        self.transactions = transactions
        self.bank = bank

    def rows(self) -> List[Dict[str, Any]]:
        return [flatten_transaction(tx) for tx in self.transactions]

    def to_excel(self, filepath: str, include_summary: bool = True) -> bool:
        """
        Export transactions to Excel format.

        Args:
            filepath: Output file path
            include_summary: Whether to include summary sheet

        Returns:
            True if successful
        """
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = "Transactions"

        header_style = Font(bold=True, color="FFFFFF")
        header_fill = PatternFill(start_color="4472C4", fill_type="solid")

        for col_idx, column in enumerate(COLUMNS, 1):
            cell = ws.cell(row=1, column=col_idx, value=column)
            cell.font = header_style
            cell.fill = header_fill
            cell.alignment = Alignment(horizontal="center")

        for row_idx, row in enumerate(self.rows(), 2):
            for col_idx, column in enumerate(COLUMNS, 1):
                value = row[column]
                cell = ws.cell(row=row_idx, column=col_idx)

                if column in _MONEY_COLUMNS:
                    cell.value = float(value) if value is not None else None
                    cell.number_format = '#,##0.00'
                elif column == 'date':
                    # Excel has no timezone support
                    cell.value = value.astimezone(timezone.utc).replace(tzinfo=None)
                    cell.number_format = "dd/mm/yyyy hh:mm"
                else:
                    cell.value = value

        for col_idx, column in enumerate(COLUMNS, 1):
            max_width = len(column) + 2
            for row in ws.iter_rows(min_row=2, min_col=col_idx, max_col=col_idx):
                for cell in row:
                    if cell.value is not None:
                        max_width = max(max_width, len(str(cell.value)) + 2)
            ws.column_dimensions[get_column_letter(col_idx)].width = min(max_width, 50)

        if include_summary:
            self._add_summary_sheet(wb)

        wb.save(filepath)
        return True

    def to_csv(self, filepath: str, delimiter: str = ',') -> bool:
        """
        Export transactions to CSV format.

        Args:
            filepath: Output file path
            delimiter: CSV delimiter (default: comma)

        Returns:
            True if successful
        """
        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=COLUMNS, delimiter=delimiter)
            writer.writeheader()
            for row in self.rows():
                row['date'] = row['date'].isoformat()
                writer.writerow({k: '' if v is None else v for k, v in row.items()})

        return True

    def to_json(self, filepath: str, indent: int = 2) -> bool:
        """
        Export transactions to JSON format.

        Transactions keep their minor-unit amounts here, as in
        ``Transaction.to_dict``.
        """
        data = {
            'generated_at': datetime.now(timezone.utc).isoformat(),
            'bank': self.bank.value if self.bank else None,
            'transaction_count': len(self.transactions),
            'transactions': [tx.to_dict() for tx in self.transactions],
        }

        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)

        return True

    def _add_summary_sheet(self, wb):
        """Add a summary sheet to the workbook."""
        summary = wb.create_sheet("Summary")

        total_inflow = sum(tx.amount for tx in self.transactions if tx.amount > 0)
        total_outflow = -sum(tx.amount for tx in self.transactions if tx.amount < 0)
        net_amount = total_inflow - total_outflow

        summary.cell(row=1, column=1, value="Summary")
        summary.cell(row=1, column=1).font = Font(bold=True, size=14)

        stats = [
            ("Total Transactions", len(self.transactions), None),
            ("Total Inflow", float(to_major_units(total_inflow)), '#,##0.00'),
            ("Total Outflow", float(to_major_units(total_outflow)), '#,##0.00'),
            ("Net Amount", float(to_major_units(net_amount)), '#,##0.00'),
        ]
        for offset, (label, value, number_format) in enumerate(stats):
            summary.cell(row=3 + offset, column=1, value=label)
            value_cell = summary.cell(row=3 + offset, column=2, value=value)
            if number_format:
                value_cell.number_format = number_format

        net_cell = summary.cell(row=6, column=2)
        if net_amount > 0:
            net_cell.fill = PatternFill(start_color="C6EFCE", fill_type="solid")
        elif net_amount < 0:
            net_cell.fill = PatternFill(start_color="FFC7CE", fill_type="solid")

        for col in [1, 2]:
            summary.column_dimensions[get_column_letter(col)].width = 20


def generate_output(transactions: List[Transaction], format: str = "excel",
                    filepath: str = None, bank: Optional[BankType] = None) -> Optional[str]:
    """
    Generate output in the specified format.

    Args:
        transactions: Canonical transactions
        format: Output format ('excel', 'csv', 'json')
        filepath: Output file path (required for file outputs)
        bank: Source institution

    Returns:
        JSON string for json format without a filepath, None otherwise
    """
    generator = OutputGenerator(transactions, bank)

    if format == 'excel':
        if not filepath:
            raise ValueError("filepath is required for Excel output")
        generator.to_excel(filepath)
        return None
    elif format == 'csv':
        if not filepath:
            raise ValueError("filepath is required for CSV output")
        generator.to_csv(filepath)
        return None
    elif format == 'json':
        if not filepath:
            return json.dumps({
                'bank': bank.value if bank else None,
                'count': len(transactions),
                'transactions': [tx.to_dict() for tx in transactions],
            }, ensure_ascii=False)
        generator.to_json(filepath)
        return None
    else:
        raise ValueError(f"Unknown format: {format}. Use 'excel', 'csv', or 'json'.")
