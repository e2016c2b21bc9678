"""club_nlq: natural-language statistics front end for a football club archive."""

from club_nlq.api.models import (
    AnalysisError,
    ExtractionResult,
    QueryIntent,
    StreakError,
    StreakResult,
)
from club_nlq.api.streaks import TemporalStreakEngine
from club_nlq.nlq.engine import QuestionUnderstandingEngine
from club_nlq.nlq.pipeline import (
    analyze,
    compute_game_history_streak,
    compute_season_week_streak,
)

__all__ = [
    "AnalysisError",
    "ExtractionResult",
    "QueryIntent",
    "QuestionUnderstandingEngine",
    "StreakError",
    "StreakResult",
    "TemporalStreakEngine",
    "analyze",
    "compute_game_history_streak",
    "compute_season_week_streak",
]

__version__ = "0.1.0"
