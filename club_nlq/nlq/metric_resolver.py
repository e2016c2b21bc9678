# club_nlq/nlq/metric_resolver.py
"""
Metric resolution: collapse stat-type candidates to one canonical key.

After the correction cascade, a question may still carry several candidates
("Home" picked up from "at home", "Penalties Scored" from the corrections).
The priority table lists every known display name from most to least
specific; the first one present wins and is mapped to its metric key.
"""

import logging
import re
from typing import Dict, List, Optional, Pattern, Sequence, Union

from ..api.team_names import team_short_key

logger = logging.getLogger(__name__)


# ============================================================================
# DISPLAY NAME → METRIC KEY
# ============================================================================

STAT_KEY_MAP: Dict[str, str] = {
    "Apps": "APP",
    "Appearances": "APP",
    "Minutes": "MIN",
    "Man of the Match": "MOM",
    "Goals": "G",
    "Score": "G",
    "Assists": "A",
    "Yellow Cards": "Y",
    "Red Cards": "R",
    "Saves": "SAVES",
    "Own Goals": "OG",
    "Goals Conceded": "C",
    "Clean Sheets": "CLS",
    "Penalties Scored": "PSC",
    "Penalties Missed": "PM",
    "Penalties Conceded": "PCO",
    "Penalties Saved": "PSV",
    "Penalty record": "PENALTY_CONVERSION_RATE",
    "Fantasy Points": "FTP",
    "Goal Involvements": "GI",
    "Open Play Goals": "OPENPLAYGOALS",
    "Goals Per Appearance": "GperAPP",
    "Conceded Per Appearance": "CperAPP",
    "Minutes Per Goal": "MperG",
    "Team of the Week": "TOTW",
    "Season Team of the Week": "SEASON_TOTW",
    "Player of the Month": "POTM",
    "Captain Awards": "CAPTAIN",
    "Co Players": "CO_PLAYERS",
    "Opponents": "OPPONENTS",
    "Most Prolific Season": "MOST_PROLIFIC_SEASON",
    "Team Analysis": "TEAM_ANALYSIS",
    "Season Analysis": "SEASON_ANALYSIS",
    "Double Game Weeks": "DGW",
    "Awards": "AWARDS",
    "Leagues": "LEAGUES",
    "Home": "HOME",
    "Away": "AWAY",
}

_KEY_LOOKUP = {name.lower(): key for name, key in STAT_KEY_MAP.items()}

TEAM_QUALIFIED = re.compile(r"^([1-8](?:st|nd|rd|th) XI) (Goals|Apps)$", re.IGNORECASE)
SEASON_QUALIFIED = re.compile(r"^(\d{4}/\d{2}) (Goals|Apps)$", re.IGNORECASE)


def metric_key(display_name: str) -> str:
    """
    Map a display name to its metric key.

    Season- and team-qualified names are spliced rather than looked up.
    Unknown names pass through unchanged.

    Examples:
        >>> metric_key("Penalties Scored")
        'PSC'
        >>> metric_key("2017/18 Goals")
        '2017/18GOALS'
        >>> metric_key("3rd XI Apps")
        '3sApps'
    """
    match = SEASON_QUALIFIED.match(display_name)
    if match:
        return f"{match.group(1)}{match.group(2).upper()}"

    match = TEAM_QUALIFIED.match(display_name)
    if match:
        team = match.group(1)[:-3].lower() + " XI"
        return f"{team_short_key(team)}{match.group(2).capitalize()}"

    return _KEY_LOOKUP.get(display_name.lower(), display_name)


# ============================================================================
# PRIORITY TABLE
# ============================================================================

PriorityEntry = Union[str, Pattern]

# Most specific first. Every STAT_KEY_MAP name appears exactly once. Team and
# season qualified counts outrank only the plain goals/apps they qualify.
METRIC_PRIORITY: Sequence[PriorityEntry] = (
    # Per-appearance ratios
    "Goals Per Appearance",
    "Conceded Per Appearance",
    "Minutes Per Goal",
    # Penalty sub-types
    "Penalty record",
    "Penalties Scored",
    "Penalties Missed",
    "Penalties Saved",
    "Penalties Conceded",
    # Specific goal kinds
    "Open Play Goals",
    "Own Goals",
    "Goal Involvements",
    # Awards and analysis
    "Most Prolific Season",
    "Double Game Weeks",
    "Season Team of the Week",
    "Team of the Week",
    "Player of the Month",
    "Captain Awards",
    "Man of the Match",
    "Co Players",
    "Opponents",
    "Team Analysis",
    "Season Analysis",
    # Discipline and raw counts
    "Clean Sheets",
    "Goals Conceded",
    "Saves",
    "Fantasy Points",
    "Yellow Cards",
    "Red Cards",
    "Assists",
    "Minutes",
    # Qualified counts (team beats season), then generic
    TEAM_QUALIFIED,
    SEASON_QUALIFIED,
    "Goals",
    "Score",
    "Apps",
    "Appearances",
    "Awards",
    "Leagues",
    "Home",
    "Away",
)


def _entry_matches(entry: PriorityEntry, candidate: str) -> bool:
    if isinstance(entry, str):
        return entry.lower() == candidate.lower()
    return bool(entry.match(candidate))


def select_by_priority(
    candidates: Sequence[str], priority: Sequence[PriorityEntry] = METRIC_PRIORITY
) -> Optional[str]:
    """
    The highest-priority candidate, or None if no entry matches any of them.

    Within one entry, candidate order breaks ties.
    """
    for entry in priority:
        for candidate in candidates:
            if _entry_matches(entry, candidate):
                return candidate
    return None


# ============================================================================
# BARE GAMES FILTER
# ============================================================================

_BARE_GAMES_RE = re.compile(r"\bhow many (?:games|appearances|apps|matches)\b")
_HOME_AWAY_RE = re.compile(r"\b(?:home|away)\b")


def filter_home_away(question: str, candidates: Sequence[str]) -> List[str]:
    """
    Drop Home/Away candidates from a bare "how many games" question.

    Examples:
        >>> filter_home_away("How many games have I played?", ["Apps", "Home"])
        ['Apps']
        >>> filter_home_away("How many home games have I played?", ["Apps", "Home"])
        ['Apps', 'Home']
    """
    text = (question or "").lower()
    if not _BARE_GAMES_RE.search(text) or _HOME_AWAY_RE.search(text):
        return list(candidates)
    kept = [c for c in candidates if c.lower() not in ("home", "away")]
    if candidates and not kept:
        # the question still asks for a count of games
        return ["Apps"]
    return kept


# ============================================================================
# RESOLUTION
# ============================================================================


def resolve_metrics(question: str, candidates: Sequence[str]) -> List[str]:
    """
    Resolve corrected candidates to metric keys.

    Returns a single key when any priority entry matches; otherwise every
    remaining candidate, mapped. An empty candidate list resolves to [].
    """
    remaining = filter_home_away(question, candidates)
    if not remaining:
        return []

    chosen = select_by_priority(remaining)
    if chosen is None:
        logger.debug(f"No priority entry for candidates {remaining}, returning all")
        return [metric_key(c) for c in remaining]

    logger.debug(f"Resolved {list(candidates)} → {chosen!r}")
    return [metric_key(chosen)]
