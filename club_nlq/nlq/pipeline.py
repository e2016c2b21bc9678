# club_nlq/nlq/pipeline.py
"""
Caller-facing surface.

Simple async functions for the request-handling layer. Failures of the
external collaborators never propagate past here: they come back as typed
error values (``type == "error"``) so the caller can degrade gracefully.
"""

import asyncio
import logging
from typing import List, Optional, Sequence, Union

from ..api.errors import ClubNLQError, describe_error
from ..api.interfaces import DataStore, EntityExtractor
from ..api.models import AnalysisError, QueryIntent, StreakConditionKind
from ..api.streaks import StreakOutcome, TemporalStreakEngine
from ..observability.metrics import record_safely, track_stage
from .engine import QuestionUnderstandingEngine

logger = logging.getLogger(__name__)

AnalysisOutcome = Union[QueryIntent, AnalysisError]


# ============================================================================
# QUESTION UNDERSTANDING
# ============================================================================


@track_stage("analyze")
async def analyze(
    text: str,
    caller_identity: Optional[str] = None,
    *,
    extractor: EntityExtractor,
) -> AnalysisOutcome:
    """
    Turn a free-text question into a QueryIntent.

    Args:
        text: The user's question
        caller_identity: Display name of the logged-in user; replaces "I"
        extractor: External entity extractor

    Returns:
        QueryIntent, or AnalysisError if the extractor fails

    Examples:
        >>> await analyze("How many goals have I scored for the 3s?", "Luke Bangs",
        ...               extractor=my_extractor)
        QueryIntent(type='player', entities=['Luke Bangs'], metrics=['3sGoals'], ...)
    """
    logger.info(f"Analysing question: '{text}'")

    try:
        engine = QuestionUnderstandingEngine(extractor)
        intent = await engine.analyze(text, caller_identity)
    except ClubNLQError as e:
        logger.error(f"Analysis failed: {e.message}")
        record_safely(lambda m: m.record_question("unknown", "error"))
        return AnalysisError(**e.to_dict())
    except Exception as e:
        logger.exception("Unexpected error while analysing question")
        record_safely(lambda m: m.record_question("unknown", "error"))
        return AnalysisError(**describe_error(e))

    record_safely(lambda m: m.record_question(intent.type, "success"))
    logger.info(
        f"Analysed: type={intent.type}, metrics={intent.metrics}, "
        f"clarify={intent.requires_clarification}"
    )
    return intent


async def analyze_many(
    texts: Sequence[str],
    caller_identity: Optional[str] = None,
    *,
    extractor: EntityExtractor,
) -> List[AnalysisOutcome]:
    """Analyse several questions concurrently (results in input order)."""
    tasks = [analyze(t, caller_identity, extractor=extractor) for t in texts]
    return await asyncio.gather(*tasks)


# ============================================================================
# STREAKS
# ============================================================================


async def compute_season_week_streak(
    subject: str, *, store: DataStore
) -> StreakOutcome:
    """Longest run of consecutive season weeks with an appearance."""
    return await TemporalStreakEngine(store).compute_season_week_streak(subject)


async def compute_game_history_streak(
    subject: str,
    condition_kind: StreakConditionKind,
    metric: Optional[str] = None,
    *,
    store: DataStore,
) -> StreakOutcome:
    """
    Longest run of qualifying games in the subject's appearance history.

    Args:
        subject: Player name as stored
        condition_kind: "clean_sheet", "goal_involvement" or "custom"
        metric: Metric key for custom streaks (defaults to goals)
        store: External data store
    """
    return await TemporalStreakEngine(store).compute_game_history_streak(
        subject, condition_kind, metric
    )


async def compute_streak_for_intent(
    text: str, intent: QueryIntent, *, store: DataStore
) -> Optional[StreakOutcome]:
    """
    Compute the streak a question asks about, using its analysed intent.

    Returns None when the intent names no subject.
    """
    if not intent.entities:
        logger.warning(f"No subject for streak question: '{text}'")
        return None
    engine = TemporalStreakEngine(store)
    return await engine.compute_streak(intent.entities[0], text, intent.metrics)


# ============================================================================
# PIPELINE STATUS
# ============================================================================


def get_pipeline_status() -> dict:
    """Current pipeline configuration, for health endpoints."""
    from ..config import get_config

    config = get_config()
    return {
        "status": "ready",
        "max_entities_per_type": config.max_entities_per_type,
        "max_stat_types": config.max_stat_types,
        "metrics_enabled": config.enable_metrics,
        "streak_flavours": [
            "season_week",
            "clean_sheet",
            "goal_involvement",
            "custom",
        ],
    }
