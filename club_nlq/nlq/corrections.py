# club_nlq/nlq/corrections.py
"""
Correction cascade over stat-type candidates.

The extractor guesses stat types independently per phrase, so "How many
penalties has X scored?" arrives with both "Goals" and "Penalties Scored".
Each CorrectionRule below recognises one metric concept in the question
text, drops the candidates that conflict with it, and adds the canonical
candidate. Rules run in table order; the whole cascade is a single fold.

Team qualifiers beat season qualifiers: the team rule runs last and removes
season-qualified candidates of the same relation.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Pattern, Sequence, Tuple

from ..api.team_names import TeamNameMapper, get_team_name_mapper
from ..utils.season_utils import find_season_token

logger = logging.getLogger(__name__)


# ============================================================================
# SHARED PATTERNS
# ============================================================================

PENALTY = re.compile(r"\bpenalt(?:y|ies)\b|\bpens?\b")
GOAL = re.compile(r"\bgoals?\b")
GOAL_OR_SCORED = re.compile(r"\bgoals?\b|\bscor(?:e|ed|es|ing)\b|\bnetted\b")
APPEARANCES = re.compile(
    r"\bappearances?\b|\bapps\b|\bgames\b|\bmatches\b|\bplayed\b|\bplay(?:s|ing)?\s+for\b"
)
CONCEDED = re.compile(r"\bconced(?:e|ed|es|ing)\b|\blet in\b")
PER_GAME = re.compile(r"\b(?:per|a|each|every)\s+(?:appearance|app|game|match)\b")
RECORD = re.compile(r"\brecord\b|\bconversion\b|\bsuccess rate\b")

# Goal kinds more specific than "goals in season X" / "goals for team X"
SPECIFIC_GOAL_KIND = re.compile(
    r"\bpenalt(?:y|ies)\b|\bpens?\b|\bown[\s-]goals?\b|\bopen[\s-]play\b"
    r"|\bconced|\bper\s+(?:appearance|app|game|match)\b|\binvolvements?\b"
    r"|\bmost prolific\b|\bminutes?\s+(?:per|a|each|for every)\s+goal\b|\bminutes to score\b"
)

# Statistics other than goals and appearances; a team or season qualifier
# never replaces these.
OTHER_STAT = re.compile(
    r"\bminutes?\b|\bcards?\b|\byellows?\b|\breds\b|\bbookings?\b|\bassists?\b"
    r"|\bsaves\b|\bman of the match\b|\bmom\b|\bclean\s*sheets?\b|\bfantasy\b"
)

# Candidates a qualified "... Goals" / "... Apps" candidate may replace
_GENERIC_CANDIDATES = {"goals", "score", "apps", "appearances", "home", "away"}
_QUALIFIED_CANDIDATE = re.compile(
    r"^(?:\d{4}/\d{2}|[1-8](?:st|nd|rd|th) xi) (?:goals|apps)$", re.IGNORECASE
)

# "3s" stands alone; "3rd" needs "xi"/"team" after it ("my 3rd goal" is not a team)
_NUMERIC_TEAM_TOKEN = re.compile(
    r"\b([1-8]s)(?:\s+xi)?\b|\b([1-8](?:st|nd|rd|th))\s+(?:xi|teams?)\b"
)
_WORD_TEAM_TOKEN = re.compile(
    r"\b(?:(first|second|third|fourth|fifth|sixth|seventh|eighth)\s+(?:team|teams|xi)"
    r"|(firsts|seconds|thirds|fourths|fifths|sixths|sevenths|eighths))\b"
)


# ============================================================================
# RULE TABLE
# ============================================================================


@dataclass(frozen=True)
class CorrectionRule:
    """
    One metric concept recognised in question text.

    A static rule fires when every ``require`` pattern matches and no
    ``exclude`` pattern does. A dynamic rule supplies ``detector`` instead,
    which returns the canonical candidate (or None) for the text. A rule with
    ``yields_to`` leaves the candidates alone when that check holds for them.
    """

    name: str
    canonical: Optional[str] = None
    require: Tuple[Pattern, ...] = ()
    exclude: Tuple[Pattern, ...] = ()
    conflicts: Tuple[str, ...] = ()
    conflicts_with: Optional[Callable[[str, str], bool]] = None
    detector: Optional[Callable[[str], Optional[str]]] = None
    yields_to: Optional[Callable[[Sequence[str]], bool]] = None

    def match(self, text: str) -> Optional[str]:
        """Canonical candidate this rule injects for ``text``, or None."""
        if self.detector is not None:
            return self.detector(text)
        if not all(p.search(text) for p in self.require):
            return None
        if any(p.search(text) for p in self.exclude):
            return None
        return self.canonical

    def apply(self, text: str, candidates: List[str]) -> List[str]:
        canonical = self.match(text)
        if canonical is None:
            return candidates
        if self.yields_to is not None and self.yields_to(candidates):
            logger.debug(f"[corrections] {self.name}: kept {candidates}, more specific")
            return candidates

        conflicts = {c.lower() for c in self.conflicts}
        kept = []
        for candidate in candidates:
            lowered = candidate.lower()
            if lowered == canonical.lower():
                kept.append(candidate)
            elif lowered in conflicts:
                continue
            elif self.conflicts_with is not None and self.conflicts_with(canonical, candidate):
                continue
            else:
                kept.append(candidate)

        if not any(c.lower() == canonical.lower() for c in kept):
            kept.append(canonical)

        removed = [c for c in candidates if c not in kept]
        logger.debug(f"[corrections] {self.name}: +{canonical!r} -{removed}")
        return kept


def _rule(name: str, canonical: str, require, exclude=(), conflicts=()) -> CorrectionRule:
    return CorrectionRule(
        name=name,
        canonical=canonical,
        require=tuple(require),
        exclude=tuple(exclude),
        conflicts=tuple(conflicts),
    )


# ────────────────────────────────────────────────────────────────────
# Dynamic detectors
# ────────────────────────────────────────────────────────────────────


def detect_season_goals(text: str) -> Optional[str]:
    """'How many goals did I score in 2017/18?' → '2017/18 Goals'."""
    season = find_season_token(text)
    if season is None or not GOAL_OR_SCORED.search(text):
        return None
    if SPECIFIC_GOAL_KIND.search(text) or OTHER_STAT.search(text):
        return None
    return f"{season} Goals"


def detect_season_apps(text: str) -> Optional[str]:
    """'How many apps did I make in 17/18?' → '2017/18 Apps'."""
    season = find_season_token(text)
    if season is None or not APPEARANCES.search(text):
        return None
    if GOAL_OR_SCORED.search(text) or OTHER_STAT.search(text):
        return None
    return f"{season} Apps"


def find_team_token(text: str, mapper: Optional[TeamNameMapper] = None) -> Optional[str]:
    """
    First team mentioned in the text, as an "Nth XI" display name.

    Recognises "3s", "3rd XI", "3rd team", "third team" and "thirds". A bare
    ordinal ("the first time", "my 1st goal") is not a team.

    Examples:
        >>> find_team_token("how many goals for the 3s")
        '3rd XI'
        >>> find_team_token("my first goal") is None
        True
    """
    mapper = mapper or get_team_name_mapper()
    found = []
    for match in _NUMERIC_TEAM_TOKEN.finditer(text):
        found.append((match.start(), match.group(1) or match.group(2)))
    for match in _WORD_TEAM_TOKEN.finditer(text):
        found.append((match.start(), match.group(1) or match.group(2)))
    for _, token in sorted(found, key=lambda item: item[0]):
        team = mapper.normalize(token)
        if team is not None:
            return team
    return None


def team_relation(text: str) -> Optional[str]:
    """'Goals' when the text is about scoring, 'Apps' when about playing."""
    if GOAL_OR_SCORED.search(text):
        return "Goals"
    if APPEARANCES.search(text):
        return "Apps"
    return None


def detect_team_stat(text: str) -> Optional[str]:
    """'How many apps for the 2nd XI?' → '2nd XI Apps'."""
    if is_team_count_question(text) or OTHER_STAT.search(text):
        return None
    team = find_team_token(text)
    if team is None:
        return None
    relation = team_relation(text)
    if relation is None:
        return None
    if relation == "Goals" and SPECIFIC_GOAL_KIND.search(text):
        return None
    return f"{team} {relation}"


_TEAM_GOALS_CONFLICTS = re.compile(r"^(?:goals|score|\d{4}/\d{2} goals)$", re.IGNORECASE)
_TEAM_APPS_CONFLICTS = re.compile(
    r"^(?:apps|appearances|home|away|\d{4}/\d{2} apps)$", re.IGNORECASE
)


def has_specific_candidate(candidates: Sequence[str]) -> bool:
    """True when a candidate names a stat more specific than plain goals or apps."""
    return any(
        c.lower() not in _GENERIC_CANDIDATES and not _QUALIFIED_CANDIDATE.match(c)
        for c in candidates
    )


def team_stat_conflicts(canonical: str, candidate: str) -> bool:
    """Generic and season-qualified candidates of the same relation give way."""
    if canonical.endswith(" Goals"):
        return bool(_TEAM_GOALS_CONFLICTS.match(candidate))
    return bool(_TEAM_APPS_CONFLICTS.match(candidate))


# ────────────────────────────────────────────────────────────────────
# The table (order matters)
# ────────────────────────────────────────────────────────────────────

CORRECTION_RULES: Sequence[CorrectionRule] = (
    _rule(
        "penalty_record",
        "Penalty record",
        require=[PENALTY, RECORD],
        conflicts=["Penalties Scored", "Penalties Missed", "Penalties Saved", "Goals", "Score"],
    ),
    _rule(
        "penalties_scored",
        "Penalties Scored",
        require=[PENALTY, re.compile(r"\bscor(?:e|ed|es|ing)\b|\bconverted\b|\bnetted\b")],
        exclude=[RECORD, re.compile(r"\bmiss(?:ed|es)?\b|\bsaved?\b"), CONCEDED],
        conflicts=["Goals", "Score", "Open Play Goals", "Penalties Missed", "Penalties Saved"],
    ),
    _rule(
        "penalties_missed",
        "Penalties Missed",
        require=[PENALTY, re.compile(r"\bmiss(?:ed|es)?\b")],
        exclude=[RECORD],
        conflicts=["Goals", "Score", "Penalties Scored"],
    ),
    _rule(
        "penalties_saved",
        "Penalties Saved",
        require=[PENALTY, re.compile(r"\bsaved?\b|\bsaves\b")],
        exclude=[RECORD],
        conflicts=["Saves", "Goals", "Penalties Scored", "Penalties Conceded"],
    ),
    _rule(
        "penalties_conceded",
        "Penalties Conceded",
        require=[PENALTY, re.compile(r"\bconced(?:e|ed|es|ing)\b|\bg[ai]ve(?:n)? away\b")],
        exclude=[RECORD, re.compile(r"\bsaved?\b")],
        conflicts=["Goals Conceded", "Goals", "Penalties Scored"],
    ),
    _rule(
        "goals_per_appearance",
        "Goals Per Appearance",
        require=[GOAL, PER_GAME],
        exclude=[CONCEDED],
        conflicts=["Goals", "Score", "Apps", "Minutes Per Goal"],
    ),
    _rule(
        "conceded_per_appearance",
        "Conceded Per Appearance",
        require=[CONCEDED, PER_GAME],
        conflicts=["Goals Conceded", "Goals", "Apps", "Goals Per Appearance"],
    ),
    _rule(
        "minutes_per_goal",
        "Minutes Per Goal",
        require=[re.compile(r"\bminutes?\s+(?:per|a|each|for every)\s+goal\b|\bminutes to score\b")],
        conflicts=["Minutes", "Goals", "Goals Per Appearance"],
    ),
    _rule(
        "open_play_goals",
        "Open Play Goals",
        require=[re.compile(r"\bopen[\s-]play\b")],
        conflicts=["Goals", "Score", "Penalties Scored"],
    ),
    _rule(
        "own_goals",
        "Own Goals",
        require=[re.compile(r"\bown[\s-]goals?\b")],
        conflicts=["Goals", "Score"],
    ),
    _rule(
        "goal_involvements",
        "Goal Involvements",
        require=[
            re.compile(
                r"\bgoal\s+involvements?\b|\bgoals?\s+(?:and|\+|&)\s+assists?\b|\bgoal contributions?\b"
            )
        ],
        conflicts=["Goals", "Assists", "Score"],
    ),
    _rule(
        "clean_sheets",
        "Clean Sheets",
        require=[re.compile(r"\bclean\s*sheets?\b")],
        conflicts=["Goals Conceded", "Goals", "Saves"],
    ),
    _rule(
        "goals_conceded",
        "Goals Conceded",
        require=[CONCEDED],
        exclude=[PENALTY, PER_GAME, re.compile(r"\bclean\s*sheets?\b")],
        conflicts=["Goals", "Score"],
    ),
    _rule(
        "most_prolific_season",
        "Most Prolific Season",
        require=[
            re.compile(
                r"\bmost prolific\b|\b(?:which|what) (?:season|year)\b.*\bmost goals\b"
                r"|\bbest season\b.*\bgoals?\b"
            )
        ],
        conflicts=["Goals", "Score", "Season Analysis"],
    ),
    CorrectionRule(
        name="season_goals",
        detector=detect_season_goals,
        yields_to=has_specific_candidate,
        conflicts=("Goals", "Score"),
    ),
    CorrectionRule(
        name="season_apps",
        detector=detect_season_apps,
        yields_to=has_specific_candidate,
        conflicts=("Apps", "Appearances", "Home", "Away"),
    ),
    CorrectionRule(
        name="team_stat",
        detector=detect_team_stat,
        yields_to=has_specific_candidate,
        conflicts_with=team_stat_conflicts,
    ),
)


def apply_corrections(
    question: str,
    candidates: Sequence[str],
    rules: Sequence[CorrectionRule] = CORRECTION_RULES,
) -> List[str]:
    """
    Run every correction rule over the candidates, in order.

    Args:
        question: Raw question text
        candidates: Stat-type display names from the extractor
        rules: Rule table (defaults to CORRECTION_RULES)

    Returns:
        Corrected candidate list; order of surviving candidates is preserved
        and injected candidates are appended

    Examples:
        >>> apply_corrections("How many penalties has Luke scored?", ["Goals"])
        ['Penalties Scored']
    """
    text = (question or "").lower()
    corrected = list(candidates)
    for rule in rules:
        corrected = rule.apply(text, corrected)
    return corrected


# ============================================================================
# SPECIAL QUESTION SHAPES
# ============================================================================

_TEAM_COUNT_PATTERNS = [
    re.compile(r"\bhow many of the (?:club'?s? )?teams?\b"),
    re.compile(r"\bhow many (?:different )?teams\b.*\bplayed (?:for|in)\b"),
    re.compile(r"\bhow many (?:different )?teams\b.*\bhave i played\b"),
]


def is_team_count_question(question: str) -> bool:
    """
    True for "how many of the club's teams has X played for?" style questions.

    These ask for a count of distinct teams, not a team-qualified stat, so
    the team-stat rule never fires on them.
    """
    text = (question or "").lower()
    return any(p.search(text) for p in _TEAM_COUNT_PATTERNS)
