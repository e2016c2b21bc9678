# club_nlq/api/streaks.py
"""
Temporal streak engine.

Answers "longest run" questions for one subject (a player name) by querying
the match data store and running the calculators in streak_calculators:

1. consecutive_weekends      - season weeks with an appearance
2. consecutive_clean_sheets  - appearances where the side conceded nothing
3. consecutive_goal_involvement - appearances with a goal, penalty or assist
4. custom                    - appearances where one metric field is positive

Store failures come back as a StreakError; a subject with no qualifying games
gets a zero-length StreakResult.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .errors import (
    ClubNLQError,
    DataStoreError,
    InvalidParameterError,
    describe_error,
)
from .interfaces import DataStore
from .models import HighlightRange, StreakError, StreakResult
from .streak_calculators import (
    calculate_consecutive_games_in_history,
    calculate_consecutive_weeks,
)
from ..observability.metrics import record_safely, track_stage
from ..utils.date_utils import calendar_highlight_range, normalize_date

logger = logging.getLogger(__name__)

StreakOutcome = Union[StreakResult, StreakError]


# ============================================================================
# QUERIES
# ============================================================================

ALL_APPEARANCES_QUERY = """
MATCH (p:Player {playerName: $playerName})-[:PLAYED_IN]->(md:MatchDetail)
WHERE md.minutes > 0
RETURN md.date as date
ORDER BY md.date ASC
"""

SEASON_WEEKS_QUERY = """
MATCH (p:Player {playerName: $playerName})-[:PLAYED_IN]->(md:MatchDetail)
WHERE md.minutes > 0 AND md.seasonWeek IS NOT NULL AND md.seasonWeek <> ""
WITH md.seasonWeek as seasonWeek, md.season as season, md.week as week, md.date as date
ORDER BY season ASC, week ASC, date ASC
WITH seasonWeek, season, week, collect(date)[0] as firstDate
RETURN seasonWeek, season, week, firstDate as date
ORDER BY season ASC, week ASC
"""

CLEAN_SHEETS_QUERY = """
MATCH (p:Player {playerName: $playerName})-[:PLAYED_IN]->(md:MatchDetail)
MATCH (f:Fixture)-[:HAS_MATCH_DETAILS]->(md)
WHERE md.minutes > 0 AND f.conceded = 0
RETURN md.date as date, f.conceded as conceded, md.team as team, md.opposition as opposition
ORDER BY md.date ASC
"""

GOAL_INVOLVEMENT_QUERY = """
MATCH (p:Player {playerName: $playerName})-[:PLAYED_IN]->(md:MatchDetail)
WHERE md.minutes > 0 AND (md.goals > 0 OR md.penaltiesScored > 0 OR md.assists > 0)
RETURN md.date as date, md.goals as goals, md.penaltiesScored as penaltiesScored,
       md.assists as assists, md.team as team, md.opposition as opposition
ORDER BY md.date ASC
"""

CUSTOM_CONDITION_QUERY = """
MATCH (p:Player {{playerName: $playerName}})-[:PLAYED_IN]->(md:MatchDetail)
WHERE md.minutes > 0 AND md.{field} > 0
RETURN md.date as date, md.{field} as {field}, md.team as team, md.opposition as opposition
ORDER BY md.date ASC
"""

# Metric key → (MatchDetail field, streak label) for custom streaks
CUSTOM_CONDITIONS: Dict[str, Tuple[str, str]] = {
    "G": ("goals", "consecutive_goals"),
    "A": ("assists", "consecutive_assists"),
    "CLS": ("cleanSheets", "consecutive_clean_sheets"),
    "APP": ("minutes", "consecutive_appearances"),
    "MOM": ("mom", "consecutive_mom"),
}
DEFAULT_CUSTOM_METRIC = "G"

STREAK_WEEKENDS = "consecutive_weekends"
STREAK_CLEAN_SHEETS = "consecutive_clean_sheets"
STREAK_GOAL_INVOLVEMENT = "consecutive_goal_involvement"

_CONSECUTIVE_RE = re.compile(r"\b(in a row|consecutive|straight|running)\b")
_WEEKEND_RE = re.compile(r"\bweekends?\b")
_CLEAN_SHEET_RE = re.compile(r"\bclean\s*sheets?\b")
_GOAL_INVOLVEMENT_RE = re.compile(r"\bgoal\s+involvements?\b")
_SCORED_OR_ASSISTED_RE = re.compile(r"\b(scored?|scoring|assist(ed|s)?)\b")


def custom_condition(metric: Optional[str]) -> Tuple[str, str]:
    """
    Field and label for a custom streak metric.

    Unknown or missing metrics fall back to goals.

    Examples:
        >>> custom_condition("A")
        ('assists', 'consecutive_assists')
        >>> custom_condition(None)
        ('goals', 'consecutive_goals')
    """
    return CUSTOM_CONDITIONS.get(
        (metric or "").upper(), CUSTOM_CONDITIONS[DEFAULT_CUSTOM_METRIC]
    )


def detect_streak_flavour(question: str, metrics: Sequence[str] = ()) -> str:
    """
    Decide which streak flavour a question asks for.

    Returns one of "season_week", "clean_sheet", "goal_involvement", "custom".

    Examples:
        >>> detect_streak_flavour("How many weekends in a row have I played?")
        'season_week'
        >>> detect_streak_flavour("Most consecutive clean sheets?")
        'clean_sheet'
    """
    text = (question or "").lower()
    metrics_upper = [m.upper() for m in metrics]

    if _WEEKEND_RE.search(text):
        return "season_week"
    if _CLEAN_SHEET_RE.search(text) and (
        _CONSECUTIVE_RE.search(text) or "CLS" in metrics_upper
    ):
        return "clean_sheet"
    if _GOAL_INVOLVEMENT_RE.search(text) or (
        _SCORED_OR_ASSISTED_RE.search(text) and _CONSECUTIVE_RE.search(text)
    ):
        return "goal_involvement"
    return "custom"


# ============================================================================
# ENGINE
# ============================================================================


class TemporalStreakEngine:
    """
    Computes streaks for a subject against an injected data store.

    Each computation awaits one to two store queries in sequence; nothing is
    cached between calls.
    """

    def __init__(self, store: DataStore):
        self.store = store

    async def _query(
        self, name: str, query: str, subject: str
    ) -> List[Dict[str, Any]]:
        try:
            records = await self.store.execute_query(query, {"playerName": subject})
        except ClubNLQError:
            raise
        except Exception as e:
            raise DataStoreError(name, f"{type(e).__name__}: {e}") from e
        logger.debug(f"[{name}] {len(records or [])} records for {subject!r}")
        return list(records or [])

    @staticmethod
    def _to_error(error: Exception, streak_type: str, subject: str) -> StreakError:
        info = describe_error(error)
        if isinstance(error, ClubNLQError):
            logger.error(f"Streak {streak_type} failed for {subject!r}: {error.message}")
        else:
            logger.exception(f"Unexpected error computing {streak_type} for {subject!r}")
        record_safely(lambda m: m.record_streak(streak_type, "error"))
        return StreakError(code=info["code"], message=info["message"])

    @staticmethod
    def _highlight(
        start_date: Optional[str], end_date: Optional[str]
    ) -> Optional[HighlightRange]:
        highlight = calendar_highlight_range(start_date, end_date)
        return HighlightRange(**highlight) if highlight else None

    @staticmethod
    def _record_outcome(result: StreakResult) -> StreakResult:
        status = "success" if result.count else "empty"
        record_safely(lambda m: m.record_streak(result.streak_type, status))
        logger.info(
            f"Streak {result.streak_type} for {result.subject!r}: {result.count}"
        )
        return result

    # ────────────────────────────────────────────────────────────────────
    # Season-week streaks
    # ────────────────────────────────────────────────────────────────────

    @track_stage("streak")
    async def compute_season_week_streak(self, subject: str) -> StreakOutcome:
        """
        Longest run of consecutive season weeks in which the subject played.

        Args:
            subject: Player name as stored

        Returns:
            StreakResult labelled "consecutive_weekends", or StreakError
        """
        try:
            records = await self._query("season_weeks", SEASON_WEEKS_QUERY, subject)
        except Exception as e:
            return self._to_error(e, STREAK_WEEKENDS, subject)

        week_dates: Dict[str, str] = {}
        data: List[Dict[str, Any]] = []
        for record in records:
            season_week = record.get("seasonWeek")
            first_date = normalize_date(record.get("date"))
            if not season_week or not first_date:
                continue
            week_dates.setdefault(season_week, first_date)
            data.append({"seasonWeek": season_week, "date": first_date})

        if not week_dates:
            logger.warning(f"No seasonWeek data found for {subject!r}")
            return self._record_outcome(StreakResult.empty(STREAK_WEEKENDS, subject))

        streak = calculate_consecutive_weeks(list(week_dates))
        if streak.count == 0:
            return self._record_outcome(StreakResult.empty(STREAK_WEEKENDS, subject))

        start_date = week_dates.get(streak.sequence[0])
        end_date = week_dates.get(streak.sequence[-1])
        return self._record_outcome(
            StreakResult(
                streak_type=STREAK_WEEKENDS,
                subject=subject,
                count=streak.count,
                sequence=streak.sequence,
                start_date=start_date,
                end_date=end_date,
                highlight_range=self._highlight(start_date, end_date),
                data=data,
            )
        )

    # ────────────────────────────────────────────────────────────────────
    # Game-history streaks
    # ────────────────────────────────────────────────────────────────────

    def _qualifying_query(
        self, condition_kind: str, metric: Optional[str]
    ) -> Tuple[str, str, str]:
        """(query name, query, streak label) for a condition kind."""
        if condition_kind == "clean_sheet":
            return "clean_sheets", CLEAN_SHEETS_QUERY, STREAK_CLEAN_SHEETS
        if condition_kind == "goal_involvement":
            return "goal_involvement", GOAL_INVOLVEMENT_QUERY, STREAK_GOAL_INVOLVEMENT
        if condition_kind == "custom":
            field, label = custom_condition(metric)
            return f"custom_{field}", CUSTOM_CONDITION_QUERY.format(field=field), label
        raise InvalidParameterError(
            "condition_kind", condition_kind, "clean_sheet, goal_involvement or custom"
        )

    @track_stage("streak")
    async def compute_game_history_streak(
        self, subject: str, condition_kind: str, metric: Optional[str] = None
    ) -> StreakOutcome:
        """
        Longest run of qualifying games within the subject's appearances.

        Args:
            subject: Player name as stored
            condition_kind: "clean_sheet", "goal_involvement" or "custom"
            metric: Metric key for custom streaks (G, A, CLS, APP, MOM)

        Returns:
            StreakResult, or StreakError if the store fails or the condition
            kind is unknown
        """
        try:
            name, query, streak_type = self._qualifying_query(condition_kind, metric)
        except InvalidParameterError as e:
            return self._to_error(e, str(condition_kind), subject)

        try:
            appearances = await self._query("all_appearances", ALL_APPEARANCES_QUERY, subject)
            qualifying = await self._query(name, query, subject)
        except Exception as e:
            return self._to_error(e, streak_type, subject)

        all_dates = sorted(
            d for d in (normalize_date(r.get("date")) for r in appearances) if d
        )
        qualifying_dates = [
            d for d in (normalize_date(r.get("date")) for r in qualifying) if d
        ]

        streak = calculate_consecutive_games_in_history(qualifying_dates, all_dates)
        if streak.count == 0:
            return self._record_outcome(StreakResult.empty(streak_type, subject))

        return self._record_outcome(
            StreakResult(
                streak_type=streak_type,
                subject=subject,
                count=streak.count,
                sequence=streak.sequence,
                start_date=streak.start_date,
                end_date=streak.end_date,
                highlight_range=self._highlight(streak.start_date, streak.end_date),
                data=qualifying,
            )
        )

    # ────────────────────────────────────────────────────────────────────
    # Routing
    # ────────────────────────────────────────────────────────────────────

    async def compute_streak(
        self, subject: str, question: str, metrics: Sequence[str] = ()
    ) -> StreakOutcome:
        """Route a streak question to the matching flavour and compute it."""
        flavour = detect_streak_flavour(question, metrics)
        logger.debug(f"Streak question routed to {flavour}: {question!r}")
        if flavour == "season_week":
            return await self.compute_season_week_streak(subject)
        metric = metrics[0] if metrics else None
        return await self.compute_game_history_streak(subject, flavour, metric)


__all__ = [
    "ALL_APPEARANCES_QUERY",
    "CLEAN_SHEETS_QUERY",
    "CUSTOM_CONDITIONS",
    "GOAL_INVOLVEMENT_QUERY",
    "SEASON_WEEKS_QUERY",
    "TemporalStreakEngine",
    "custom_condition",
    "detect_streak_flavour",
]
