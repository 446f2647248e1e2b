"""
Date pattern formatting for versioned upload prefixes.

A valid pattern is built only from the tokens YYYY, YY, MM, DD, HH, hh, mm,
SS and ss, so the resolved value is an integer version id. Every token is
replaced by a fixed-width, zero-padded number; format_date passes any other
text through unchanged.
"""

import re
from datetime import datetime

TOKENS = ("YYYY", "YY", "MM", "DD", "HH", "hh", "mm", "SS", "ss")

# Longest alternative first so YYYY is never read as YY + YY
TOKEN_RE = re.compile("|".join(TOKENS))
DATE_PATTERN_RE = re.compile(r"(?:%s)+" % "|".join(TOKENS))
NUMERIC_RE = re.compile(r"[0-9]+")


def _twelve_hour(hour: int) -> int:
    return hour % 12 or 12


def _token_value(now: datetime, token: str) -> str:
    if token == "YYYY":
        return f"{now.year:04d}"
    if token == "YY":
        return f"{now.year % 100:02d}"
    if token == "MM":
        return f"{now.month:02d}"
    if token == "DD":
        return f"{now.day:02d}"
    if token == "HH":
        return f"{now.hour:02d}"
    if token == "hh":
        return f"{_twelve_hour(now.hour):02d}"
    if token == "mm":
        return f"{now.minute:02d}"
    # SS / ss
    return f"{now.second:02d}"


def format_date(now: datetime, pattern: str) -> str:
    """
    Replace every date token in `pattern` with the matching part of `now`.

    Args:
        now: The instant to format. Nothing else reads the clock.
        pattern: e.g. "YYYYMMDDHHmm" or "YY-MM-DD"

    Returns:
        The literal string, e.g. "202610172005"
    """
    return TOKEN_RE.sub(lambda match: _token_value(now, match.group(0)), pattern)


def is_date_pattern(value: str) -> bool:
    """True if `value` consists only of date tokens."""
    return bool(DATE_PATTERN_RE.fullmatch(value))


def is_numeric_format(value: str) -> bool:
    """True if `value` is a literal, non-negative integer version id."""
    return bool(NUMERIC_RE.fullmatch(value))
