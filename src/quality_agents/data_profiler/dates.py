"""
Date heuristics.

Turns a single raw cell into a concrete UTC datetime by trying, in order:
epoch numbers (unix seconds, unix milliseconds, Excel serials), generic
calendar strings, then day-first slash/dash layouts. First hit wins.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple

from dateutil import parser as date_parser

from .values import is_missing, to_finite_number

logger = logging.getLogger(__name__)


class DateKind(Enum):
    """Which rule recognised the value."""
    UNIX_SECONDS = "unix-seconds"
    UNIX_MS = "unix-ms"
    EXCEL = "excel"
    ISO = "iso"
    SLASH = "slash"              # D/M/Y
    YYYY_SLASH = "yyyy-slash"    # Y/M/D
    DASH = "dash"                # D-M-Y


@dataclass(frozen=True)
class DateParseResult:
    kind: DateKind
    value: datetime  # always tz-aware UTC


UNIX_SECONDS_RANGE = (1_000_000_000, 2_000_000_000)
UNIX_MS_RANGE = (1_000_000_000_000, 2 * 10 ** 16)
EXCEL_SERIAL_RANGE = (59, 60_000)
EXCEL_EPOCH = datetime(1899, 12, 30, tzinfo=timezone.utc)
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# (regex, kind, field order) tried in this order
_DATE_PATTERNS = [
    (re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{2,4})$"), DateKind.SLASH, ("day", "month", "year")),
    (re.compile(r"^(\d{4})/(\d{1,2})/(\d{1,2})$"), DateKind.YYYY_SLASH, ("year", "month", "day")),
    (re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{2,4})$"), DateKind.DASH, ("day", "month", "year")),
]

_HAS_LETTER = re.compile(r"[A-Za-z]")
_HAS_DIGIT = re.compile(r"\d")
_PARSE_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _from_epoch_ms(ms: float) -> Optional[datetime]:
    try:
        return _EPOCH + timedelta(milliseconds=ms)
    except OverflowError:
        # beyond datetime's year 9999 ceiling
        return None


def _parse_epoch_number(num: float) -> Optional[DateParseResult]:
    low, high = UNIX_SECONDS_RANGE
    if low < num < high:
        parsed = _from_epoch_ms(num * 1000)
        return DateParseResult(DateKind.UNIX_SECONDS, parsed) if parsed else None

    low, high = UNIX_MS_RANGE
    if low < num < high:
        parsed = _from_epoch_ms(num)
        return DateParseResult(DateKind.UNIX_MS, parsed) if parsed else None

    low, high = EXCEL_SERIAL_RANGE
    if low < num < high:
        return DateParseResult(DateKind.EXCEL, EXCEL_EPOCH + timedelta(days=num))

    return None


def _parse_generic(text: str) -> Optional[datetime]:
    """ISO 8601 first, then free-form text dates such as 'March 7, 2021'."""
    try:
        return _as_utc(date_parser.isoparse(text))
    except (ValueError, OverflowError):
        pass

    # free-form parsing needs a month/day name and a number, otherwise plain
    # words ("May") and day-first layouts would be misread
    if not (_HAS_LETTER.search(text) and _HAS_DIGIT.search(text)):
        return None
    # dateutil fills absent fields from the default; two defaults that differ
    # in year, month and day expose text that does not carry a full date
    try:
        first = date_parser.parse(text, default=_PARSE_DEFAULTS[0])
        second = date_parser.parse(text, default=_PARSE_DEFAULTS[1])
    except (ValueError, OverflowError):
        return None
    if first != second:
        return None
    return _as_utc(first)


def _expand_year(raw: str) -> int:
    year = int(raw)
    if len(raw) == 2:
        # same pivot as strptime's %y
        return 2000 + year if year < 69 else 1900 + year
    return year


def _parse_pattern(text: str) -> Optional[DateParseResult]:
    for regex, kind, order in _DATE_PATTERNS:
        match = regex.match(text)
        if not match:
            continue
        parts = dict(zip(order, match.groups()))
        try:
            parsed = datetime(
                _expand_year(parts["year"]),
                int(parts["month"]),
                int(parts["day"]),
                tzinfo=timezone.utc,
            )
        except ValueError:
            # 31/02/2020 etc; a later layout may still fit
            continue
        return DateParseResult(kind, parsed)
    return None


def detect_date_format(value: Any) -> Optional[DateParseResult]:
    """
    Parse one raw value into a date.

    Args:
        value: any cell value

    Returns:
        DateParseResult, or None when no rule recognises the value
    """
    if is_missing(value):
        return None

    # already a date object (xlsx decoders produce these)
    if isinstance(value, datetime):
        return DateParseResult(DateKind.ISO, _as_utc(value))
    if isinstance(value, date):
        return DateParseResult(DateKind.ISO, datetime(value.year, value.month, value.day, tzinfo=timezone.utc))

    num = to_finite_number(value)
    if num is not None:
        # numbers outside the epoch windows are plain numbers, not dates
        return _parse_epoch_number(num)

    if not isinstance(value, str):
        return None
    text = value.strip()

    parsed = _parse_generic(text)
    if parsed is not None:
        return DateParseResult(DateKind.ISO, parsed)

    return _parse_pattern(text)


def is_date_like(value: Any) -> bool:
    return detect_date_format(value) is not None


def parse_dates(values: Iterable[Any]) -> List[datetime]:
    """Every value that parses, in input order."""
    parsed = []
    for value in values:
        result = detect_date_format(value)
        if result is not None:
            parsed.append(result.value)
    return parsed


def date_range(values: Iterable[Any]) -> Optional[Tuple[datetime, datetime]]:
    """(min, max) over the parseable values, None if nothing parses."""
    parsed = parse_dates(values)
    if not parsed:
        return None
    return min(parsed), max(parsed)


def looks_like_birthday(values: Iterable[Any], today: Optional[date] = None) -> bool:
    """All parsed dates fall strictly between 1900 and the current year."""
    current_year = (today or date.today()).year
    parsed = parse_dates(values)
    if not parsed:
        return False
    return all(1900 < d.year < current_year for d in parsed)
