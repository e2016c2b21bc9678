"""
Date normalisation and calendar-week utilities.

Match records arrive with dates in whatever shape the store holds them
("2023-09-16", "2023/09/16", "16/09/2023", datetimes). Everything here
converts to YYYY-MM-DD strings, which sort chronologically as plain text.
"""

import logging
import re
from datetime import date, datetime
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_YEAR_FIRST_RE = re.compile(r"^(\d{4})[/-](\d{1,2})[/-](\d{1,2})$")
_DAY_FIRST_RE = re.compile(r"^(\d{1,2})[/-](\d{1,2})[/-](\d{2}|\d{4})$")


def _valid(year: int, month: int, day: int) -> Optional[date]:
    if not 1900 <= year <= 2100:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def normalize_date(value: Any) -> str:
    """
    Normalise a date-like value to YYYY-MM-DD.

    Handles:
    - date / datetime objects
    - "YYYY-MM-DD" (returned as-is)
    - "YYYY/MM/DD"
    - "DD/MM/YYYY", "DD-MM-YY" (two-digit years are taken as 20YY)
    - ISO-8601 datetimes ("2023-09-16T15:00:00Z")

    Anything unparseable normalises to the empty string so callers can
    filter it out before streak math runs.

    Examples:
        >>> normalize_date("16/09/2023")
        '2023-09-16'
        >>> normalize_date("not a date")
        ''
    """
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    text = str(value).strip()
    if not text:
        return ""

    if _ISO_DATE_RE.match(text):
        parsed = _valid(int(text[:4]), int(text[5:7]), int(text[8:10]))
        return parsed.isoformat() if parsed else ""

    match = _YEAR_FIRST_RE.match(text)
    if match:
        parsed = _valid(int(match.group(1)), int(match.group(2)), int(match.group(3)))
        return parsed.isoformat() if parsed else ""

    match = _DAY_FIRST_RE.match(text)
    if match:
        year = int(match.group(3))
        if len(match.group(3)) == 2:
            year += 2000
        parsed = _valid(year, int(match.group(2)), int(match.group(1)))
        return parsed.isoformat() if parsed else ""

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        logger.debug(f"[date_utils] Could not normalise date: {text!r}")
        return ""


def since_year_start(year: int) -> str:
    """
    First date after a "since YEAR" mention.

    Examples:
        >>> since_year_start(2020)
        '2021-01-01'
    """
    return f"{year + 1}-01-01"


# ============================================================================
# CALENDAR WEEKS
# ============================================================================


def week_number(day: date) -> Tuple[int, int]:
    """
    Monday-based week number of a date, as ``(year, week)``.

    Week 1 is the Monday-start week containing 1 January, so the first
    week of a year may be partial.

    Examples:
        >>> week_number(date(2023, 1, 1))   # a Sunday
        (2023, 1)
        >>> week_number(date(2023, 1, 2))   # the following Monday
        (2023, 2)
    """
    jan1 = date(day.year, 1, 1)
    # date.weekday() is already Mon=0..Sun=6
    monday_offset = jan1.weekday()
    days_since_jan1 = (day - jan1).days
    return day.year, (days_since_jan1 + monday_offset) // 7 + 1


def calendar_highlight_range(
    start_date: Optional[str], end_date: Optional[str]
) -> Optional[Dict[str, int]]:
    """
    Map a streak's start/end dates to a calendar highlight range.

    Returns ``{start_week, start_year, end_week, end_year}``, or None if
    either date cannot be resolved.
    """
    start = normalize_date(start_date)
    end = normalize_date(end_date)
    if not start or not end:
        return None

    start_year, start_week = week_number(date.fromisoformat(start))
    end_year, end_week = week_number(date.fromisoformat(end))
    return {
        "start_week": start_week,
        "start_year": start_year,
        "end_week": end_week,
        "end_year": end_year,
    }
