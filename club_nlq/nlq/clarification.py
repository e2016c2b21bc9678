# club_nlq/nlq/clarification.py
"""
Complexity assessment and clarification policy.

Rather than guessing, the engine asks the user to narrow a question when it
names too many things, asks for a ranking without saying what to rank by, or
carries no usable signal at all. Every message is a pure function of the
extraction result so repeated questions get identical replies.
"""

import logging
import re
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..api.models import Complexity, ExtractionResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTITIES_PER_TYPE = 3
DEFAULT_MAX_STAT_TYPES = 3

SUPERLATIVES = (
    "most",
    "least",
    "highest",
    "lowest",
    "best",
    "worst",
    "top",
    "fewest",
    "biggest",
)
_SUPERLATIVE_RE = re.compile(r"\b(?:" + "|".join(SUPERLATIVES) + r")\b")
_RANKING_RE = re.compile(
    r"\b(?:which|who)\b.*\b(?:" + "|".join(SUPERLATIVES) + r")\b"
)

# Entity type → (plural label, example question) used in limit messages
_ENTITY_LABELS: Dict[str, tuple] = {
    "player": ("players", "How many goals have Luke Bangs and Oli Goddard scored?"),
    "team": ("teams", "How many goals have the 1s and 2s scored?"),
    "opposition": ("opposition teams", "What is my record against Old Hamptonians?"),
    "league": ("leagues", "Where did the 3s finish in the league?"),
}
_ENTITY_TYPE_ORDER = ("player", "team", "opposition", "league")

EXAMPLE_QUESTION = "How many goals has Luke Bangs scored?"


@dataclass(frozen=True)
class ComplexityLimits:
    """Per-question limits before a question counts as complex."""

    max_entities_per_type: int = DEFAULT_MAX_ENTITIES_PER_TYPE
    max_stat_types: int = DEFAULT_MAX_STAT_TYPES


@dataclass(frozen=True)
class ClarificationDecision:
    required: bool
    message: Optional[str] = None
    reason: Optional[str] = None


NO_CLARIFICATION = ClarificationDecision(required=False)


def is_superlative_ranking(question: str) -> bool:
    """'Which player has scored the most goals?' style questions."""
    return bool(_RANKING_RE.search((question or "").lower()))


def has_superlative(question: str) -> bool:
    return bool(_SUPERLATIVE_RE.search((question or "").lower()))


def _entity_type_counts(extraction: ExtractionResult) -> Counter:
    return Counter(entity.type for entity in extraction.entities)


def _over_limit_type(
    extraction: ExtractionResult, limits: ComplexityLimits
) -> Optional[str]:
    counts = _entity_type_counts(extraction)
    for entity_type in _ENTITY_TYPE_ORDER:
        if counts.get(entity_type, 0) > limits.max_entities_per_type:
            return entity_type
    return None


# ============================================================================
# COMPLEXITY
# ============================================================================


def assess_complexity(
    extraction: ExtractionResult, limits: Optional[ComplexityLimits] = None
) -> Complexity:
    """
    Classify a question as simple, moderate or complex.

    complex:  any one entity type or the stat types exceed their limits
    moderate: more than one entity, stat type, time frame or location, or
              any negative clause
    simple:   everything else
    """
    limits = limits or ComplexityLimits()

    if _over_limit_type(extraction, limits) is not None:
        return "complex"
    if len(extraction.stat_types) > limits.max_stat_types:
        return "complex"

    if (
        len(extraction.entities) > 1
        or len(extraction.stat_types) > 1
        or len(extraction.time_frames) > 1
        or len(extraction.negative_clauses) > 0
        or len(extraction.locations) > 1
    ):
        return "moderate"

    return "simple"


# ============================================================================
# CLARIFICATION
# ============================================================================


def _entity_limit_message(entity_type: str, count: int, limit: int) -> str:
    label, example = _ENTITY_LABELS[entity_type]
    return (
        f"Your question mentions {count} {label}, but I can only handle up to "
        f"{limit} at once. Please narrow it down, for example: \"{example}\""
    )


def _stat_limit_message(count: int, limit: int) -> str:
    return (
        f"Your question asks about {count} different statistics, but I can only "
        f"handle up to {limit} at once. Please focus on fewer, for example: "
        f"\"{EXAMPLE_QUESTION}\""
    )


def _missing_signal_message(entities: List[str], stat_types: List[str]) -> str:
    if not entities and not stat_types:
        return (
            "I couldn't tell who or what you're asking about. Please name a player "
            f"or team and a statistic, for example: \"{EXAMPLE_QUESTION}\""
        )
    if entities and not stat_types:
        names = ", ".join(entities)
        return (
            f"I found {names}, but not which statistic you want. Please add one, "
            f"for example: \"How many goals has {entities[0]} scored?\""
        )
    if stat_types and not entities:
        stats = ", ".join(s.lower() for s in stat_types)
        return (
            f"I found {stats}, but not which player or team you mean. Please add "
            f"a name, for example: \"{EXAMPLE_QUESTION}\""
        )
    return (
        "Please clarify your question so I can give a better answer, for example: "
        f"\"{EXAMPLE_QUESTION}\""
    )


def decide_clarification(
    question: str,
    extraction: ExtractionResult,
    limits: Optional[ComplexityLimits] = None,
    caller_identity: Optional[str] = None,
) -> ClarificationDecision:
    """
    Decide whether to ask the user to clarify.

    A caller identity counts as an entity when checking for missing signals.

    Args:
        question: Raw question text
        extraction: Extractor output
        limits: Per-question limits (defaults to 3 per entity type, 3 stat types)
        caller_identity: Display name of the logged-in user, if any

    Returns:
        ClarificationDecision with a deterministic message when required
    """
    limits = limits or ComplexityLimits()

    over_type = _over_limit_type(extraction, limits)
    if over_type is not None:
        count = _entity_type_counts(extraction)[over_type]
        return ClarificationDecision(
            required=True,
            message=_entity_limit_message(over_type, count, limits.max_entities_per_type),
            reason="entity_limit",
        )

    if len(extraction.stat_types) > limits.max_stat_types:
        return ClarificationDecision(
            required=True,
            message=_stat_limit_message(len(extraction.stat_types), limits.max_stat_types),
            reason="stat_limit",
        )

    entities = [
        caller_identity if (e.value == "I" and caller_identity) else e.value
        for e in extraction.entities
    ]
    if not entities and caller_identity:
        entities = [caller_identity]
    stat_types = [s.value for s in extraction.stat_types]
    ranking = is_superlative_ranking(question)

    if ranking and not stat_types:
        return ClarificationDecision(
            required=True,
            message=_missing_signal_message(entities, stat_types),
            reason="ranking_without_stat",
        )

    if not entities and not stat_types and not ranking:
        return ClarificationDecision(
            required=True,
            message=_missing_signal_message(entities, stat_types),
            reason="missing_signals",
        )

    return NO_CLARIFICATION
