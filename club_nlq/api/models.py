# club_nlq/api/models.py
"""
Data models for club_nlq.

Every value crossing the library boundary is a Pydantic model so that:
1. Extractor output is validated before the rule cascade sees it
2. Results serialise deterministically (stable key order) for caching and tests
3. Success and error results are distinguishable by their ``type`` field
"""

import json
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

EntityType = Literal["player", "team", "opposition", "league"]
TimeFrameType = Literal["since", "before", "between", "range"]

QuestionType = Literal[
    "player",
    "team",
    "club",
    "fixture",
    "comparison",
    "streak",
    "double_game",
    "temporal",
    "ranking",
    "general",
]
Complexity = Literal["simple", "moderate", "complex"]
ResultQuantity = Literal["singular", "plural"]
StreakConditionKind = Literal["clean_sheet", "goal_involvement", "custom"]


# ============================================================================
# EXTRACTION RESULT (external input)
# ============================================================================


class _ExtractorModel(BaseModel):
    # Extractors may emit camelCase keys ("statTypes", "originalText")
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EntityInfo(_ExtractorModel):
    """A named thing recognised in the question text."""

    type: EntityType = Field(..., description="Entity kind")
    value: str = Field(..., min_length=1, description="Resolved entity value ('I' for the caller)")
    original_text: str = Field("", description="Surface text the entity came from")
    position: int = Field(0, ge=0, description="Character offset in the question")


class StatTypeInfo(_ExtractorModel):
    """A provisional guess at the statistic a question asks about."""

    value: str = Field(..., min_length=1, description="Stat display name, e.g. 'Goals'")
    original_text: str = Field("", description="Surface text the guess came from")
    position: int = Field(0, ge=0, description="Character offset in the question")


class TimeFrameInfo(_ExtractorModel):
    """A time window mentioned in the question."""

    type: TimeFrameType
    value: str = Field(..., min_length=1, description="Time frame text, e.g. 'since 2020'")
    original_text: str = ""
    position: int = Field(0, ge=0)


class SignalInfo(_ExtractorModel):
    """Generic extracted signal (location, negative clause, competition, result)."""

    value: str
    original_text: str = ""
    position: int = Field(0, ge=0)


class ExtractionResult(_ExtractorModel):
    """Output of the external entity extractor."""

    entities: List[EntityInfo] = Field(default_factory=list)
    stat_types: List[StatTypeInfo] = Field(default_factory=list)
    time_frames: List[TimeFrameInfo] = Field(default_factory=list)
    locations: List[SignalInfo] = Field(default_factory=list)
    negative_clauses: List[SignalInfo] = Field(default_factory=list)
    competition_types: List[SignalInfo] = Field(default_factory=list)
    competitions: List[SignalInfo] = Field(default_factory=list)
    results: List[SignalInfo] = Field(default_factory=list)
    opponent_own_goals: bool = False

    @field_validator("entities")
    @classmethod
    def _unique_entities(cls, entities: List[EntityInfo]) -> List[EntityInfo]:
        # Keep the first occurrence of each (type, value) pair, preserving order
        seen = set()
        unique = []
        for entity in entities:
            key = (entity.type, entity.value.lower())
            if key not in seen:
                seen.add(key)
                unique.append(entity)
        return unique

    def entities_of_type(self, entity_type: str) -> List[EntityInfo]:
        return [e for e in self.entities if e.type == entity_type]


# ============================================================================
# QUERY INTENT (output)
# ============================================================================


class QueryIntent(BaseModel):
    """
    Single, disambiguated description of what a question asks for.

    ``metrics`` holds exactly one canonical key whenever the extractor found
    any stat-type signal and a priority entry matched.
    """

    type: QuestionType = Field(..., description="Question classification")
    entities: List[str] = Field(default_factory=list, description="Resolved display names")
    metrics: List[str] = Field(default_factory=list, description="Canonical metric keys")
    time_range: Optional[str] = Field(None, description="First time frame, if any")
    team_entities: List[str] = Field(default_factory=list)
    opposition_entities: List[str] = Field(default_factory=list)
    complexity: Complexity = "simple"
    confidence: float = Field(..., ge=0.0, le=1.0)
    requires_clarification: bool = False
    clarification_message: Optional[str] = None
    result_quantity: ResultQuantity = "plural"

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "type": "player",
                "entities": ["Luke Bangs"],
                "metrics": ["3sGoals"],
                "time_range": None,
                "team_entities": ["3s"],
                "opposition_entities": [],
                "complexity": "moderate",
                "confidence": 0.95,
                "requires_clarification": False,
                "clarification_message": None,
                "result_quantity": "plural",
            }
        }
    )

    @model_validator(mode="after")
    def _clarification_consistent(self) -> "QueryIntent":
        if self.requires_clarification != (self.clarification_message is not None):
            raise ValueError(
                "requires_clarification must be True exactly when clarification_message is set"
            )
        return self

    def to_json_string(self, **kwargs) -> str:
        """Serialise with deterministic key ordering."""
        return json.dumps(self.model_dump(mode="json"), sort_keys=True, **kwargs)


class AnalysisError(BaseModel):
    """Typed failure returned by analyze() when the extractor fails."""

    type: Literal["error"] = "error"
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


# ============================================================================
# STREAK RESULTS
# ============================================================================


class HighlightRange(BaseModel):
    """(week, year) start/end pair marking a streak on a calendar."""

    start_week: int = Field(..., ge=1, le=54)
    start_year: int
    end_week: int = Field(..., ge=1, le=54)
    end_year: int


class StreakResult(BaseModel):
    """Longest contiguous run for a subject."""

    type: Literal["streak"] = "streak"
    streak_type: str = Field(..., description="Streak flavour, e.g. 'consecutive_clean_sheets'")
    subject: str
    count: int = Field(0, ge=0)
    sequence: List[str] = Field(default_factory=list)
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    highlight_range: Optional[HighlightRange] = None
    data: List[Dict[str, Any]] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "type": "streak",
                "streak_type": "consecutive_weekends",
                "subject": "Luke Bangs",
                "count": 3,
                "sequence": ["2022/23-4", "2022/23-5", "2022/23-6"],
                "start_date": "2022-09-24",
                "end_date": "2022-10-08",
                "highlight_range": {
                    "start_week": 39,
                    "start_year": 2022,
                    "end_week": 41,
                    "end_year": 2022,
                },
                "data": [],
            }
        }
    )

    @model_validator(mode="after")
    def _empty_iff_zero(self) -> "StreakResult":
        if (self.count == 0) != (not self.sequence):
            raise ValueError("count must be 0 exactly when sequence is empty")
        return self

    @classmethod
    def empty(cls, streak_type: str, subject: str) -> "StreakResult":
        return cls(streak_type=streak_type, subject=subject)


class StreakError(BaseModel):
    """Typed failure returned when a streak computation cannot reach the store."""

    type: Literal["error"] = "error"
    code: str
    message: str
    data: List[Dict[str, Any]] = Field(default_factory=list)
