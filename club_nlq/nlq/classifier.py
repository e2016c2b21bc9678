# club_nlq/nlq/classifier.py
"""
Question-type classification and result quantity.

Types are assigned first-match-wins over the checks in QUESTION_TYPE_RULES,
mirroring how the downstream query handlers are chosen. Each check sees the
lower-cased question and the extractor output.
"""

import logging
import re
from typing import Callable, List, Sequence, Tuple

from ..api.models import ExtractionResult, QuestionType, ResultQuantity
from .clarification import has_superlative, is_superlative_ranking

logger = logging.getLogger(__name__)


# ============================================================================
# KEYWORD PATTERNS
# ============================================================================

RELATIVE_TIME = re.compile(
    r"\b(?:since|before|after|between|during|until)\b"
    r"|\b(?:last|this|previous|next) (?:season|year|month|week)\b"
    r"|\bago\b"
)
PERCENTAGE = re.compile(r"\bpercent(?:age)?\b|%|\bwin rate\b")
STREAK = re.compile(r"\bstreak\b|\bconsecutive\b|\bin a row\b|\brun of\b")
DOUBLE_GAME = re.compile(r"\bdouble game\s*weeks?\b|\bdouble game\b|\bdgws?\b")
COMPARISON = re.compile(r"\bwho has\b|\bpenalty record\b|\bconversion rate\b")
TEAM_TABLE = re.compile(r"\btable\b|\bposition\b|\bfinish(?:ed)?\b|\bstandings?\b")
CLUB = re.compile(r"\bclub\b|\bcaptains?\b|\bawards?\b")
FIXTURE = re.compile(r"\bfixtures?\b|\bmatch(?:es)?\b|\bgames?\b")
PLAYER_VOCABULARY = re.compile(
    r"\bscored\b|\bgoals?\b|\bassists?\b|\bappearances?\b|\bminutes\b"
    r"|\bman of the match\b|\byellow\b|\bred\b|\bsaves\b|\bown goals?\b"
    r"|\bconceded\b|\bclean sheets?\b|\bpenalt(?:y|ies)\b|\bfantasy\b"
    r"|\bmost prolific season\b|\bplayed\b|\bwon\b|\breceived\b|\bkept\b|\bmissed\b"
)

# ============================================================================
# QUESTION TYPE
# ============================================================================

TypeCheck = Callable[[str, ExtractionResult], bool]


def _has_entity(entity_type: str) -> TypeCheck:
    return lambda text, extraction: bool(extraction.entities_of_type(entity_type))


def _text(pattern) -> TypeCheck:
    return lambda text, extraction: bool(pattern.search(text))


QUESTION_TYPE_RULES: Sequence[Tuple[QuestionType, TypeCheck]] = (
    ("player", _has_entity("player")),
    ("temporal", lambda t, x: bool(x.time_frames) or bool(RELATIVE_TIME.search(t))),
    ("player", _text(PERCENTAGE)),
    ("streak", _text(STREAK)),
    ("double_game", _text(DOUBLE_GAME)),
    ("ranking", lambda t, x: is_superlative_ranking(t)),
    ("comparison", lambda t, x: has_superlative(t) or bool(COMPARISON.search(t))),
    ("team", lambda t, x: bool(x.entities_of_type("team")) and bool(TEAM_TABLE.search(t))),
    ("club", _text(CLUB)),
    ("fixture", _text(FIXTURE)),
    ("player", _text(PLAYER_VOCABULARY)),
)


def classify_question(question: str, extraction: ExtractionResult) -> QuestionType:
    """
    Assign the question type (first matching rule wins, else "general").

    Examples:
        >>> classify_question("Which player has the most assists?", ExtractionResult())
        'ranking'
    """
    text = (question or "").lower()
    for question_type, check in QUESTION_TYPE_RULES:
        if check(text, extraction):
            logger.debug(f"Classified as {question_type}: {question!r}")
            return question_type
    return "general"


# ============================================================================
# RESULT QUANTITY
# ============================================================================

SINGULAR_PATTERNS: List[re.Pattern] = [
    re.compile(r"\bwhich (?:team|season|opposition|player|month|year)\b"),
    re.compile(r"\bwhat (?:team|season|opposition|month|year)\b"),
    re.compile(r"\bwho\b.*\bmost\b"),
    re.compile(r"\bwhat (?:is|was) (?:my|his|her|their) (?:longest|best|highest|most)\b"),
    re.compile(r"\bwhat was the\b"),
    re.compile(r"\bwhat is the (?:longest|best|highest|most)\b"),
]


def detect_result_quantity(question: str) -> ResultQuantity:
    """
    Whether the phrasing asks for one item or a list.

    Examples:
        >>> detect_result_quantity("Which team have I scored the most goals for?")
        'singular'
        >>> detect_result_quantity("How many goals have I scored?")
        'plural'
    """
    text = (question or "").lower()
    if any(p.search(text) for p in SINGULAR_PATTERNS):
        return "singular"
    return "plural"
