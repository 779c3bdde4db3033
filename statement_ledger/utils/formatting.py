"""
Formatting utilities for amount and date normalization.

Amounts are converted to integer minor units and dates to timezone-aware UTC
datetimes. None of the parsers here raise on bad input: unusable text gives
``None``.
"""

import hashlib
import re
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from enum import Enum
from typing import Optional, Dict, Iterable

from dateutil import parser as date_parser


# Pre-compiled regex patterns (compiled once at module load)
_CURRENCY_PATTERN = re.compile(r'NGN|[₦$£€,\s]', re.IGNORECASE)
_REFERENCE_STRIP = re.compile(r'[^a-zA-Z0-9-]')
_WHITESPACE = re.compile(r'\s+')

_EMPTY_AMOUNTS = ('', '-', '--')
_PLAIN_DECIMAL = re.compile(r'-?(?:\d+\.?\d*|\.\d+)')

# Month abbreviation to number mapping
MONTHS = {
    'jan': 1, 'feb': 2, 'mar': 3, 'apr': 4, 'may': 5, 'jun': 6,
    'jul': 7, 'aug': 8, 'sep': 9, 'oct': 10, 'nov': 11, 'dec': 12,
}


class DateFormat(Enum):
    """Date layouts seen across statement dialects."""
    DAY_MON_YEAR = "dd-Mon-yyyy"                 # 15-Nov-2025
    DAY_MON_SHORT_YEAR = "dd-MON-yy"             # 01-JAN-25
    DAY_MON_YEAR_LOOSE = "dd-Mon-? yyyy"         # 15-Nov- 2025
    DAY_MON_YEAR_SPACED = "dd Mon yyyy"          # 15 Nov 2025
    DAY_MON_YEAR_TIME = "dd Mon yyyy HH:MM:SS"   # 29 Nov 2025 08:12:51
    DMY_SLASH = "dd/mm/yyyy"                     # 15/11/2025
    DMY_DASH = "dd-mm-yyyy"                      # 15-11-2025
    DMY_SHORT_TIME = "dd/mm/yy HH:MM:SS"         # 22/01/23 12:46:35
    MDY_TIME_MERIDIEM = "mm/dd/yyyy hh:MM:SS AM" # 12/29/2025 06:19:00 AM
    ISO = "yyyy-mm-dd[ HH:MM:SS]"                # 2025-11-29 08:12:51


_TIME = r'\s+(?P<hour>\d{1,2}):(?P<minute>\d{2}):(?P<second>\d{2})'

_DATE_PATTERNS: Dict[DateFormat, re.Pattern] = {
    DateFormat.DAY_MON_YEAR: re.compile(
        r'(?<!\d)(?P<day>\d{1,2})-(?P<mon>[A-Za-z]{3})-(?P<year>\d{4})(?!\d)'),
    DateFormat.DAY_MON_SHORT_YEAR: re.compile(
        r'(?<!\d)(?P<day>\d{1,2})-(?P<mon>[A-Za-z]{3})-(?P<year>\d{2})(?!\d)'),
    DateFormat.DAY_MON_YEAR_LOOSE: re.compile(
        r'(?<!\d)(?P<day>\d{1,2})-(?P<mon>[A-Za-z]{3})-?\s*(?P<year>\d{4})(?!\d)'),
    DateFormat.DAY_MON_YEAR_SPACED: re.compile(
        r'(?<!\d)(?P<day>\d{1,2})\s+(?P<mon>[A-Za-z]{3})\s+(?P<year>\d{4})(?!\d)'),
    DateFormat.DAY_MON_YEAR_TIME: re.compile(
        r'(?<!\d)(?P<day>\d{1,2})\s+(?P<mon>[A-Za-z]{3})\s+(?P<year>\d{4})' + _TIME),
    DateFormat.DMY_SLASH: re.compile(
        r'(?<!\d)(?P<day>\d{1,2})/(?P<month>\d{1,2})/(?P<year>\d{4})(?!\d)'),
    DateFormat.DMY_DASH: re.compile(
        r'(?<!\d)(?P<day>\d{1,2})-(?P<month>\d{1,2})-(?P<year>\d{4})(?!\d)'),
    DateFormat.DMY_SHORT_TIME: re.compile(
        r'(?<!\d)(?P<day>\d{1,2})/(?P<month>\d{1,2})/(?P<year>\d{2})' + _TIME),
    DateFormat.MDY_TIME_MERIDIEM: re.compile(
        r'(?<!\d)(?P<month>\d{1,2})/(?P<day>\d{1,2})/(?P<year>\d{4})' + _TIME
        + r'\s*(?P<meridiem>AM|PM)', re.IGNORECASE),
    DateFormat.ISO: re.compile(
        r'(?<!\d)\d{4}-\d{2}-\d{2}(?:[T ]\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?)?(?:Z|[+-]\d{2}:?\d{2})?'),
}


def _to_minor_units(cleaned: str) -> Optional[int]:
    """Plain decimal text to minor units; exponents and other forms give None."""
    if not _PLAIN_DECIMAL.fullmatch(cleaned):
        return None
    try:
        return int((Decimal(cleaned) * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return None


def parse_amount(text: Optional[str]) -> Optional[int]:
    """
    Parse a money string into signed integer minor units.

    Handles formats:
    - 1,234.56 (standard)
    - ₦1,234.56 / NGN 1,234.56 (with currency)
    - +1,000.00 / -1,000.00 (explicit sign)

    Args:
        text: Amount string to parse

    Returns:
        Amount in minor units, or None for empty, placeholder ("-", "--"),
        unparseable or zero amounts
    """
    if text is None:
        return None

    cleaned = _CURRENCY_PATTERN.sub('', str(text).strip())
    if cleaned in _EMPTY_AMOUNTS:
        return None
    if cleaned.startswith('+'):
        cleaned = cleaned[1:]

    minor_units = _to_minor_units(cleaned)
    return minor_units or None


def parse_balance(text: Optional[str]) -> Optional[int]:
    """Parse a running balance into unsigned minor units; zero is a valid balance."""
    if text is None:
        return None

    cleaned = _CURRENCY_PATTERN.sub('', str(text).strip()).lstrip('+')
    if cleaned in _EMPTY_AMOUNTS:
        return None

    minor_units = _to_minor_units(cleaned)
    return abs(minor_units) if minor_units is not None else None


def format_amount(minor_units: int, currency: str = "NGN") -> str:
    """
    Format minor units with a currency symbol and thousands separators.

    Args:
        minor_units: Signed amount in minor units
        currency: Currency code (default: NGN)

    Returns:
        Formatted amount string, e.g. "-₦1,234.56"
    """
    symbols = {'NGN': '₦', 'USD': '$', 'GBP': '£', 'EUR': '€'}
    sign = "-" if minor_units < 0 else ""
    major, minor = divmod(abs(minor_units), 100)
    return f"{sign}{symbols.get(currency, currency + ' ')}{major:,}.{minor:02d}"


def _build_datetime(parts: Dict[str, Optional[str]]) -> Optional[datetime]:
    if parts.get('mon'):
        month = MONTHS.get(parts['mon'].lower())
        if month is None:
            return None
    else:
        month = int(parts['month'])

    year = int(parts['year'])
    if len(parts['year']) == 2:
        year += 2000

    hour = int(parts.get('hour') or 0)
    meridiem = (parts.get('meridiem') or '').upper()
    if meridiem and 1 <= hour <= 12:
        if meridiem == 'AM' and hour == 12:
            hour = 0
        elif meridiem == 'PM' and hour != 12:
            hour += 12

    try:
        return datetime(
            year, month, int(parts['day']),
            hour, int(parts.get('minute') or 0), int(parts.get('second') or 0),
            tzinfo=timezone.utc,
        )
    except ValueError:
        return None


def _parse_iso(token: str) -> Optional[datetime]:
    try:
        parsed = date_parser.isoparse(token)
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_date(text: Optional[str], formats: Iterable[DateFormat]) -> Optional[datetime]:
    """
    Parse a dialect date string into a UTC datetime.

    Each requested format is tried in order; the first one that finds a valid
    calendar date wins. Date-only formats give midnight UTC and wall-clock
    times are taken as UTC.

    Args:
        text: Text containing the date
        formats: Candidate formats for the dialect, in priority order

    Returns:
        Timezone-aware datetime, or None when no format matches
    """
    if not text or not isinstance(text, str):
        return None

    for fmt in formats:
        match = _DATE_PATTERNS[fmt].search(text)
        if not match:
            continue
        if fmt is DateFormat.ISO:
            parsed = _parse_iso(match.group(0).replace(' ', 'T', 1))
        else:
            parsed = _build_datetime(match.groupdict())
        if parsed is not None:
            return parsed

    return None


def normalize_description(description: Optional[str]) -> str:
    """Collapse runs of whitespace and trim."""
    if not description:
        return ""
    return _WHITESPACE.sub(' ', description).strip()


def generate_reference(date: datetime, description: str, max_length: int = 10) -> str:
    """
    Build a fallback reference from a date and description.

    Example: (2025-01-15, "POS Purchase") -> "20250115-POSPURCHA"
    """
    raw = f"{date:%Y%m%d}-{(description or '')[:max_length]}"
    return _REFERENCE_STRIP.sub('', raw).upper()


def generate_id(prefix: str, date: datetime, amount: int, description: str, reference: str) -> str:
    """Build a content-derived identifier that is stable across re-imports."""
    payload = f"{date.isoformat()}|{amount}|{description}|{reference}"
    digest = hashlib.sha256(payload.encode('utf-8')).hexdigest()
    return f"{prefix}-{digest[:16]}"
