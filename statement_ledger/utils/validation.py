"""
Validation utilities for canonical transactions.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Tuple

from statement_ledger.models import Transaction, TransactionCategory


@dataclass
class ValidationResult:
    """Result of validating a transaction."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def validate_transaction(transaction: Transaction) -> ValidationResult:
    """
    Validate a single canonical transaction.

    Checks:
    - Amount is a nonzero integer
    - Date is timezone-aware
    - Category agrees with the amount sign
    - Id and reference are present

    Args:
        transaction: Transaction to validate

    Returns:
        ValidationResult with validation status and messages
    """
    errors = []
    warnings = []

    if not isinstance(transaction.amount, int) or isinstance(transaction.amount, bool):
        errors.append(f"Amount is not an integer: {transaction.amount!r}")
    elif transaction.amount == 0:
        errors.append("Amount is zero")

    if transaction.date.tzinfo is None or transaction.date.utcoffset() is None:
        errors.append("Date has no timezone")

    if isinstance(transaction.amount, int) and transaction.amount != 0:
        expected = TransactionCategory.INFLOW if transaction.amount > 0 else TransactionCategory.OUTFLOW
        if transaction.category is not expected:
            errors.append(f"Category {transaction.category.value} does not match amount sign")

    if not transaction.id:
        errors.append("Missing id")
    if not transaction.reference:
        errors.append("Missing reference")

    if not transaction.description:
        warnings.append("Description is empty")
    if transaction.meta.balance_after is not None and transaction.meta.balance_after < 0:
        warnings.append("Negative running balance")

    return ValidationResult(len(errors) == 0, errors, warnings)


def validate_transactions(transactions: List[Transaction]) -> Tuple[List[Transaction], Dict[str, Any]]:
    """
    Validate a list of transactions and drop the invalid ones.

    Args:
        transactions: Canonical transactions

    Returns:
        Tuple of (valid transactions, report dict with summary stats and
        the invalid entries)
    """
    valid = []
    invalid = []
    total_warnings = 0

    for i, tx in enumerate(transactions):
        result = validate_transaction(tx)
        total_warnings += len(result.warnings)
        if result.is_valid:
            valid.append(tx)
        else:
            invalid.append({'index': i, 'id': tx.id, 'errors': result.errors})

    report = {
        'summary': {
            'total': len(transactions),
            'valid': len(valid),
            'invalid': len(invalid),
            'total_warnings': total_warnings,
        },
        'invalid_transactions': invalid,
    }
    return valid, report
