# club_nlq/api/streak_calculators.py
"""
Longest-run calculators for streak questions.

Two adjacency definitions are supported:

1. Season weeks: "2022/23-4" → "2022/23-5" are consecutive, and so are
   "2022/23-52" → "2023/24-1" across a season boundary.
2. Game history: qualifying games are consecutive when no non-qualifying
   appearance sits between them in the subject's own appearance list.
   Calendar gaps do not matter, only the appearance index does.

Both calculators are pure O(n) scans over sortable input.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..utils.season_utils import SeasonWeek, is_adjacent, parse_season_weeks

logger = logging.getLogger(__name__)


# ============================================================================
# RESULTS
# ============================================================================


@dataclass
class SeasonWeekStreak:
    """Longest run of consecutive season weeks."""

    count: int = 0
    sequence: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"count": self.count, "sequence": list(self.sequence)}


@dataclass
class GameHistoryStreak:
    """Longest run of qualifying games within an appearance history."""

    count: int = 0
    sequence: List[str] = field(default_factory=list)
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "sequence": list(self.sequence),
            "start_date": self.start_date,
            "end_date": self.end_date,
        }


# ============================================================================
# SEASON-WEEK STREAKS
# ============================================================================


def _sorted_unique(season_weeks: List[SeasonWeek]) -> List[SeasonWeek]:
    ordered = sorted(season_weeks, key=lambda sw: sw.sort_key)
    unique: List[SeasonWeek] = []
    seen = set()
    for sw in ordered:
        key = (sw.season, sw.week)
        if key not in seen:
            seen.add(key)
            unique.append(sw)
    return unique


def calculate_consecutive_weeks(season_weeks: Iterable[str]) -> SeasonWeekStreak:
    """
    Find the longest run of consecutive season weeks.

    Malformed identifiers are dropped. Input order does not matter; ties go
    to the earliest run.

    Args:
        season_weeks: Identifiers like "2023/24-38"

    Returns:
        SeasonWeekStreak with the run length and its original tokens in order

    Examples:
        >>> calculate_consecutive_weeks(
        ...     ["2022/23-1", "2022/23-2", "2022/23-4", "2022/23-5", "2022/23-6"]
        ... ).sequence
        ['2022/23-4', '2022/23-5', '2022/23-6']
    """
    unique = _sorted_unique(parse_season_weeks(season_weeks))
    if not unique:
        return SeasonWeekStreak()

    longest: List[SeasonWeek] = [unique[0]]
    current: List[SeasonWeek] = [unique[0]]

    for prev, curr in zip(unique, unique[1:]):
        if is_adjacent(prev, curr):
            current.append(curr)
            if len(current) > len(longest):
                longest = list(current)
        else:
            current = [curr]

    logger.debug(
        f"Longest week streak: {len(longest)} ({' → '.join(sw.original for sw in longest)})"
    )
    return SeasonWeekStreak(
        count=len(longest), sequence=[sw.original for sw in longest]
    )


# ============================================================================
# GAME-HISTORY STREAKS
# ============================================================================


def calculate_consecutive_games_in_history(
    qualifying_dates: Iterable[str], all_dates: Sequence[str]
) -> GameHistoryStreak:
    """
    Find the longest run of qualifying games in a subject's appearance history.

    A non-qualifying appearance breaks the run even if the qualifying dates
    themselves look consecutive.

    Args:
        qualifying_dates: Dates (YYYY-MM-DD) of games meeting the condition
        all_dates: Every appearance date for the subject, chronological

    Returns:
        GameHistoryStreak with count, qualifying dates in the winning run,
        and its first/last date

    Examples:
        >>> calculate_consecutive_games_in_history(
        ...     ["2023-09-02", "2023-09-09", "2023-09-23"],
        ...     ["2023-09-02", "2023-09-09", "2023-09-16", "2023-09-23", "2023-09-30"],
        ... ).count
        2
    """
    qualifying = set(qualifying_dates)
    if not qualifying or not all_dates:
        return GameHistoryStreak()

    longest = 0
    longest_start = -1
    longest_end = -1
    current = 0
    current_start = -1

    for index, game_date in enumerate(all_dates):
        if game_date in qualifying:
            if current == 0:
                current_start = index
            current += 1
            if current > longest:
                longest = current
                longest_start = current_start
                longest_end = index
        else:
            current = 0

    if longest == 0:
        return GameHistoryStreak()

    sequence = [
        d for d in all_dates[longest_start : longest_end + 1] if d in qualifying
    ]
    return GameHistoryStreak(
        count=longest,
        sequence=sequence,
        start_date=sequence[0],
        end_date=sequence[-1],
    )
