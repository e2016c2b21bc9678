# club_nlq/api/team_names.py
"""
Team-name normalisation with memoisation.

The club fields eight sides. Questions refer to them as "3s", "3rd",
"third team", "thirds" or "3rd XI"; everything normalises to "3rd XI".
Metric keys use the short form ("3s") instead.
"""

import logging
import re
import threading
from typing import Dict, Optional

logger = logging.getLogger(__name__)

MAX_TEAM_NUMBER = 8

ORDINAL_SUFFIXES = {1: "st", 2: "nd", 3: "rd"}

WORD_ORDINALS = {
    "first": 1,
    "second": 2,
    "third": 3,
    "fourth": 4,
    "fifth": 5,
    "sixth": 6,
    "seventh": 7,
    "eighth": 8,
}

_NUMERIC_TEAM_RE = re.compile(r"^([1-8])(?:s|st|nd|rd|th)(?:\s+xi)?$")
_WORD_TEAM_RE = re.compile(
    r"^(first|second|third|fourth|fifth|sixth|seventh|eighth)s?(?:\s+(?:team|teams|xi))?$"
)
_DISPLAY_TEAM_RE = re.compile(r"^([1-8])(?:st|nd|rd|th) XI$")


def ordinal(number: int) -> str:
    """
    English ordinal for a team number.

    Examples:
        >>> ordinal(3)
        '3rd'
    """
    return f"{number}{ORDINAL_SUFFIXES.get(number, 'th')}"


def team_display_name(number: int) -> str:
    """'3' → '3rd XI'."""
    return f"{ordinal(number)} XI"


def team_number(display_name: str) -> Optional[int]:
    """'3rd XI' → 3; None for anything that is not a team display name."""
    match = _DISPLAY_TEAM_RE.match(display_name or "")
    return int(match.group(1)) if match else None


def team_short_key(display_name: str) -> Optional[str]:
    """
    Short metric-key form of a team display name.

    Examples:
        >>> team_short_key("3rd XI")
        '3s'
    """
    number = team_number(display_name)
    return f"{number}s" if number is not None else None


def _parse_team_token(token: str) -> Optional[str]:
    match = _NUMERIC_TEAM_RE.match(token)
    if match:
        return team_display_name(int(match.group(1)))

    match = _WORD_TEAM_RE.match(token)
    if match:
        return team_display_name(WORD_ORDINALS[match.group(1)])

    return None


# ============================================================================
# MEMOISING MAPPER
# ============================================================================


class TeamNameMapper:
    """
    Normalises team tokens to "Nth XI" display names.

    Results are memoised in a plain dict guarded by a lock. The mapping is a
    pure function of the token, so concurrent writers always store the same
    value and the last write wins harmlessly.

    A mapper can be injected wherever team tokens are parsed; tests that need
    a cold cache create their own instance.
    """

    def __init__(self, cache: Optional[Dict[str, Optional[str]]] = None):
        self._cache: Dict[str, Optional[str]] = cache if cache is not None else {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def normalize(self, token: str) -> Optional[str]:
        """
        Map a team token to its display name.

        Examples:
            >>> TeamNameMapper().normalize("3s")
            '3rd XI'
            >>> TeamNameMapper().normalize("Seconds")
            '2nd XI'
            >>> TeamNameMapper().normalize("9s") is None
            True
        """
        key = " ".join((token or "").lower().split())
        with self._lock:
            if key in self._cache:
                self.hits += 1
                return self._cache[key]

        value = _parse_team_token(key)

        with self._lock:
            self.misses += 1
            self._cache[key] = value
        if value is None:
            logger.debug(f"Unrecognised team token: {token!r}")
        return value

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)


_default_mapper = TeamNameMapper()


def get_team_name_mapper() -> TeamNameMapper:
    """Process-wide mapper used when none is injected."""
    return _default_mapper
