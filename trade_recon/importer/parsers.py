"""
Primitive field parsers

Export fields arrive as loosely formatted text. None of these parsers
raise: blank or unparsable input maps to a neutral value (zero, or the
sentinel minimum date-time).
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

# strptime accepts one- or two-digit month, day and hour for these
# directives, so "1/5/2024 9:30:05 AM" and "01/05/2024 09:30:05 AM" both
# match the first pattern.
DATETIME_FORMATS: Tuple[str, ...] = (
    "%m/%d/%Y %I:%M:%S %p",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %I:%M %p",
    "%m/%d/%Y %H:%M",
    "%Y-%m-%d %H:%M:%S",
)

UNPARSED_DATETIME = datetime.min

_CURRENCY_CHARS = re.compile(r"[$€£¥,\s]")

# Relative words the general parser would resolve against the clock
_RELATIVE_DATE_WORDS = frozenset({"now", "today", "tomorrow", "yesterday"})


@dataclass(frozen=True)
class DateTimeParse:
    """Outcome of a date-time parse: the value plus whether parsing succeeded"""
    value: datetime
    parsed: bool

    @property
    def is_sentinel(self) -> bool:
        return not self.parsed


def parse_datetime_result(text: Optional[str],
                          extra_formats: Iterable[str] = ()) -> DateTimeParse:
    """
    Parse an export Date/Time value

    Tries the explicit patterns in order, then a general parse. When both
    fail the result holds the sentinel minimum date-time with parsed=False.

    Args:
        text: Raw field value
        extra_formats: Additional strptime patterns tried after the built-ins

    Returns:
        DateTimeParse
    """
    if text is None or not text.strip():
        return DateTimeParse(UNPARSED_DATETIME, False)

    text = text.strip()
    for fmt in (*DATETIME_FORMATS, *extra_formats):
        try:
            return DateTimeParse(datetime.strptime(text, fmt), True)
        except ValueError:
            continue

    if text.casefold() in _RELATIVE_DATE_WORDS:
        return DateTimeParse(UNPARSED_DATETIME, False)

    try:
        timestamp = pd.to_datetime(text, errors='coerce')
    except (ValueError, TypeError, OverflowError) as e:
        logger.debug(f"General date-time parse failed for {text!r}: {e}")
        timestamp = pd.NaT

    if pd.isna(timestamp):
        return DateTimeParse(UNPARSED_DATETIME, False)

    if timestamp.tzinfo is not None:
        timestamp = timestamp.tz_localize(None)
    return DateTimeParse(timestamp.to_pydatetime(), True)


def parse_datetime(text: Optional[str], extra_formats: Iterable[str] = ()) -> datetime:
    """Parse a Date/Time value, returning the sentinel minimum on failure"""
    return parse_datetime_result(text, extra_formats).value


def parse_decimal(text: Optional[str]) -> Decimal:
    """
    Parse a money or price field

    Currency symbols and thousands separators are stripped. Accounting
    style parentheses mark a negative amount. Blank, unparsable and
    non-finite input yields Decimal("0").
    """
    if text is None:
        return Decimal("0")

    value = _CURRENCY_CHARS.sub("", text)
    if not value:
        return Decimal("0")

    negative = value.startswith("(") and value.endswith(")")
    if negative:
        value = value[1:-1]

    try:
        result = Decimal(value)
    except InvalidOperation:
        return Decimal("0")

    if not result.is_finite():
        return Decimal("0")
    return -result if negative else result


def parse_int(text: Optional[str]) -> int:
    """
    Parse a quantity field

    Thousands separators are stripped. Integral decimals such as "2.0"
    are accepted; anything else unparsable yields 0.
    """
    if text is None:
        return 0

    value = text.replace(",", "").strip()
    if not value:
        return 0

    try:
        return int(value)
    except ValueError:
        pass

    try:
        number = Decimal(value)
    except InvalidOperation:
        return 0

    if not number.is_finite() or number != number.to_integral_value():
        return 0
    return int(number)


def format_time_of_day(value: datetime) -> str:
    """Format as h:mm:ss AM/PM with an unpadded hour, e.g. "9:30:05 AM" """
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d}:{value.second:02d} {suffix}"
