#!/usr/bin/env python3
"""
Command-line interface for Statement Ledger.

Usage:
    python examples/cli.py --help
    python examples/cli.py --bank gtb statement.pdf
    python examples/cli.py --bank opay --format csv statement.xlsx
    python examples/cli.py --bank access --password 1234 --output-dir ./output *.pdf
"""

import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from statement_ledger import BankType, StatementParser
from statement_ledger.logging_setup import configure_logging, get_logger
from statement_ledger.utils.formatting import format_amount

logger = get_logger("statement_ledger.cli")

_SUFFIXES = {'excel': '.xlsx', 'csv': '.csv', 'json': '.json'}


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog='statement-ledger',
        description='Normalize Nigerian bank statements to Excel/CSV/JSON'
    )

    parser.add_argument(
        'files',
        nargs='+',
        help='Statement files to parse (PDF, XLSX or CSV)'
    )

    parser.add_argument(
        '-b', '--bank',
        required=True,
        choices=[bank.value for bank in BankType],
        help='Bank that issued the statements'
    )

    parser.add_argument(
        '-p', '--password',
        default=None,
        help='Password for encrypted PDF statements'
    )

    parser.add_argument(
        '-f', '--format',
        choices=sorted(_SUFFIXES),
        default='excel',
        help='Output format (default: excel)'
    )

    parser.add_argument(
        '-o', '--output-dir',
        default='.',
        help='Output directory (default: current directory)'
    )

    parser.add_argument(
        '-q', '--quiet',
        action='store_true',
        help='Suppress output messages'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Show verbose output'
    )

    return parser.parse_args(argv)


def expand_files(patterns):
    """Expand glob patterns, keeping literal paths that match nothing."""
    files = []
    for pattern in patterns:
        p = Path(pattern)
        if p.is_absolute():
            files.append(p)
            continue
        matches = sorted(Path('.').glob(pattern))
        files.extend(matches or [p])
    return files


def export(result, output_path: Path, fmt: str):
    if fmt == 'excel':
        result.to_excel(str(output_path))
    elif fmt == 'csv':
        result.to_csv(str(output_path))
    else:
        result.to_json(str(output_path))


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    if args.verbose:
        configure_logging(logging.DEBUG)
    elif args.quiet:
        configure_logging(logging.ERROR)
    else:
        configure_logging(logging.WARNING)

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    parser = StatementParser()
    success_count = 0
    error_count = 0

    for filepath in expand_files(args.files):
        if not filepath.exists():
            if not args.quiet:
                print(f"Error: File not found: {filepath}")
            error_count += 1
            continue

        def on_progress(percent, message, name=filepath.name):
            logger.debug("%s: %3d%% %s", name, percent, message)

        result = parser.parse_file(filepath, args.bank, password=args.password, on_progress=on_progress)

        if not result.ok:
            error_count += 1
            if not args.quiet:
                print(f"✗ {filepath.name}: {result.error}")
            continue

        output_path = output_dir / f"{filepath.stem}_ledger{_SUFFIXES[args.format]}"
        export(result, output_path, args.format)
        success_count += 1

        if not args.quiet:
            summary = result.get_summary()
            print(f"✓ {filepath.name}: {summary['total_transactions']} transactions")
            print(f"  Bank: {summary['bank']}, "
                  f" Inflow: {format_amount(summary['total_inflow'])}, "
                  f" Outflow: {format_amount(summary['total_outflow'])}")
            print(f"  Output: {output_path}")

    if not args.quiet and success_count:
        print(f"\nProcessed {success_count} file(s) successfully")
        if error_count > 0:
            print(f"Encountered {error_count} error(s)")

    return 0 if error_count == 0 else 1


if __name__ == '__main__':
    sys.exit(main())
