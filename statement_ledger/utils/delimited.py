"""
Delimited-text (CSV) row extraction.

Splitting is line oriented: a quote toggles "inside quotes" for the rest of
the line, and a delimiter inside quotes is kept as part of the field.
"""

import re
from typing import Optional, List

from statement_ledger.exceptions import DocumentError
from statement_ledger.models import RawRow

_LINE_BREAK = re.compile(r'\r?\n')

_ENCODINGS = ['utf-8-sig', 'cp1252', 'latin-1']


def decode_text(data: bytes) -> str:
    """Decode document bytes, trying UTF-8 first."""
    for encoding in _ENCODINGS:
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue

    raise DocumentError("Could not decode file with any known encoding")


def _clean_field(field: str) -> Optional[str]:
    field = field.strip()
    if len(field) >= 2 and field.startswith('"') and field.endswith('"'):
        field = field[1:-1]
    return field or None


def split_line(line: str, delimiter: str = ',') -> RawRow:
    """Split one line into fields, honouring quoted delimiters."""
    fields = []
    current = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            fields.append(_clean_field(''.join(current)))
            current = []
        else:
            current.append(char)

    fields.append(_clean_field(''.join(current)))
    return fields


def extract_rows_from_text(data: bytes, delimiter: str = ',') -> List[RawRow]:
    """
    Parse delimited text into raw rows.

    Args:
        data: Raw file bytes
        delimiter: Field delimiter (default: comma)

    Returns:
        One RawRow per non-blank line; empty fields are ``None``
    """
    text = decode_text(data)
    return [split_line(line, delimiter) for line in _LINE_BREAK.split(text) if line.strip()]
