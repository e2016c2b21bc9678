"""
Season Utilities

Parsing and validation for football seasons ("2023/24") and season-week
identifiers ("2023/24-38").

Seasons are always normalised to the canonical "YYYY/YY" form. Free text may
spell a season several ways; find_season_token() recognises all of them.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

# Last week number of a season; week 1 of the next season follows it
SEASON_FINAL_WEEK = 52

_CANONICAL_SEASON_RE = re.compile(r"^(\d{4})/(\d{2})$")
_SEASON_WEEK_RE = re.compile(r"^(\d{4}/\d{2})-(\d+)$")

# Order matters: the four-digit pair must be tried before "YYYY/YY"
_SEASON_TOKEN_PATTERNS = [
    ("YYYY/YYYY", re.compile(r"\b(\d{4})/(\d{4})\b")),
    ("YYYY to YYYY", re.compile(r"\b(\d{4})\s+to\s+(\d{4})\b")),
    ("YYYY/YY", re.compile(r"\b(\d{4})/(\d{2})\b")),
    ("YYYY-YY", re.compile(r"\b(\d{4})-(\d{2})\b")),
    ("YY/YY", re.compile(r"(?<![\d/])(\d{2})/(\d{2})(?![\d/])")),
]


# ============================================================================
# SEASONS
# ============================================================================


def format_season(start_year: int) -> str:
    """
    Build the canonical season string for a starting year.

    Examples:
        >>> format_season(2023)
        '2023/24'
    """
    return f"{start_year}/{str(start_year + 1)[-2:]}"


def validate_season_format(season: str) -> None:
    """
    Validate season format is YYYY/YY with consecutive years.

    Raises:
        ValueError: If season format is invalid

    Examples:
        >>> validate_season_format("2023/24")  # OK
        >>> validate_season_format("2023/25")  # Raises ValueError
    """
    match = _CANONICAL_SEASON_RE.match(season or "")
    if not match:
        raise ValueError(f"Season must have format 'YYYY/YY', got: {season}")

    year1 = int(match.group(1))
    year2 = int(match.group(2))
    if year1 < 1900 or year1 > 2100:
        raise ValueError(f"Invalid start year: {year1}")

    expected_year2 = (year1 + 1) % 100
    if year2 != expected_year2:
        raise ValueError(
            f"Season format error: {season} (expected {year1}/{expected_year2:02d})"
        )


def season_to_year(season: str) -> int:
    """
    Convert season string to starting year.

    Examples:
        >>> season_to_year("2023/24")
        2023
    """
    validate_season_format(season)
    return int(season.split("/")[0])


def are_seasons_consecutive(earlier: str, later: str) -> bool:
    """True when ``later`` is the season straight after ``earlier``."""
    match1 = _CANONICAL_SEASON_RE.match(earlier or "")
    match2 = _CANONICAL_SEASON_RE.match(later or "")
    if not match1 or not match2:
        return False
    return int(match2.group(1)) == int(match1.group(1)) + 1


def season_start_date(season: str) -> Optional[str]:
    """
    First day of a season (seasons start on 1 September).

    Accepts "2020/21" or "2020-21"; returns None for anything else.

    Examples:
        >>> season_start_date("2020/21")
        '2020-09-01'
    """
    match = re.match(r"^(\d{4})[/-]\d{2}$", (season or "").strip())
    if not match:
        return None
    return f"{match.group(1)}-09-01"


def _normalise_pair(kind: str, first: str, second: str) -> Optional[str]:
    if kind == "YY/YY":
        start_year = 2000 + int(first)
        end_two = int(second)
    else:
        start_year = int(first)
        end_two = int(second) % 100

    if (start_year + 1) % 100 != end_two:
        return None
    if kind in ("YYYY/YYYY", "YYYY to YYYY") and int(second) != start_year + 1:
        return None
    return format_season(start_year)


def normalize_season(text: str) -> Optional[str]:
    """
    Normalise a single season spelling to "YYYY/YY".

    Supports "2017/18", "2017-18", "2017 to 2018", "17/18" and "2017/2018".
    Returns None when the text is not a season (including non-consecutive
    year pairs such as "2017/19").

    Examples:
        >>> normalize_season("2017 to 2018")
        '2017/18'
        >>> normalize_season("17/18")
        '2017/18'
    """
    candidate = (text or "").strip().lower()
    for kind, pattern in _SEASON_TOKEN_PATTERNS:
        match = pattern.fullmatch(candidate)
        if match:
            return _normalise_pair(kind, match.group(1), match.group(2))
    return None


def find_season_token(text: str) -> Optional[str]:
    """
    Find the first season mentioned anywhere in free text.

    Returns the canonical "YYYY/YY" form, or None.

    Examples:
        >>> find_season_token("How many goals did I score in 2019-20?")
        '2019/20'
    """
    lowered = (text or "").lower()
    found = []
    for kind, pattern in _SEASON_TOKEN_PATTERNS:
        for match in pattern.finditer(lowered):
            season = _normalise_pair(kind, match.group(1), match.group(2))
            if season:
                found.append((match.start(), season))
    if not found:
        return None
    # Leftmost mention wins when the question names several seasons
    found.sort(key=lambda item: item[0])
    return found[0][1]


# ============================================================================
# SEASON WEEKS
# ============================================================================


@dataclass(frozen=True)
class SeasonWeek:
    """A season-week identifier such as "2023/24-38"."""

    season: str
    week: int
    original: str

    @property
    def start_year(self) -> int:
        return int(self.season[:4])

    @property
    def sort_key(self):
        return (self.start_year, self.week)


def parse_season_week(token: str) -> Optional[SeasonWeek]:
    """
    Parse "YYYY/YY-W" into a SeasonWeek.

    Malformed tokens return None instead of raising.

    Examples:
        >>> parse_season_week("2023/24-38")
        SeasonWeek(season='2023/24', week=38, original='2023/24-38')
        >>> parse_season_week("week 38") is None
        True
    """
    if not isinstance(token, str):
        logger.warning(f"Invalid seasonWeek value: {token!r}")
        return None

    match = _SEASON_WEEK_RE.match(token.strip())
    if not match:
        logger.warning(f"Invalid seasonWeek format: {token}")
        return None

    week = int(match.group(2))
    if week < 1:
        logger.warning(f"Invalid seasonWeek week number: {token}")
        return None

    return SeasonWeek(season=match.group(1), week=week, original=token)


def is_adjacent(earlier, later) -> bool:
    """
    True when ``later`` is the week straight after ``earlier``.

    Accepts SeasonWeek values or raw "YYYY/YY-W" strings. Weeks are adjacent
    within a season when they differ by one, and across a season boundary
    only from week 52 into week 1 of the following season.

    Examples:
        >>> is_adjacent("2023/24-52", "2024/25-1")
        True
        >>> is_adjacent("2023/24-51", "2024/25-1")
        False
    """
    if isinstance(earlier, str):
        earlier = parse_season_week(earlier)
    if isinstance(later, str):
        later = parse_season_week(later)
    if earlier is None or later is None:
        return False

    if earlier.season == later.season:
        return later.week == earlier.week + 1

    return (
        are_seasons_consecutive(earlier.season, later.season)
        and earlier.week == SEASON_FINAL_WEEK
        and later.week == 1
    )


def parse_season_weeks(tokens: Iterable[str]) -> List[SeasonWeek]:
    """Parse many tokens, dropping the malformed ones."""
    parsed = []
    for token in tokens:
        season_week = parse_season_week(token)
        if season_week is not None:
            parsed.append(season_week)
    return parsed
