# club_nlq/nlq/engine.py
"""
Question understanding engine.

Composes the extractor, the correction cascade, metric resolution, the
clarification policy and classification into a single QueryIntent:

    text ─► EntityExtractor ─► ExtractionResult ─► understand() ─► QueryIntent

understand() is synchronous and pure; analyze() adds the one awaited
extractor call in front of it.
"""

import logging
import time
from typing import List, Optional

from pydantic import ValidationError

from ..api.errors import ClubNLQError, ExtractionError
from ..api.interfaces import EntityExtractor
from ..api.models import Complexity, ExtractionResult, QueryIntent
from ..config import get_config
from ..observability.metrics import record_safely
from .clarification import (
    ClarificationDecision,
    ComplexityLimits,
    assess_complexity,
    decide_clarification,
)
from .classifier import classify_question, detect_result_quantity
from .corrections import apply_corrections
from .metric_resolver import resolve_metrics

logger = logging.getLogger(__name__)

CLARIFICATION_CONFIDENCE = 0.2


def compute_confidence(
    extraction: ExtractionResult,
    complexity: Complexity,
    requires_clarification: bool,
    caller_identity: Optional[str] = None,
) -> float:
    """
    Confidence score for an intent.

    0.2 when clarification is required; otherwise 0.5, plus 0.2 for entities
    (a caller identity counts as one, as it does for clarification),
    0.2 for stat types and 0.1 (simple) or 0.05 (moderate), capped at 1.0.
    """
    if requires_clarification:
        return CLARIFICATION_CONFIDENCE

    confidence = 0.5
    if extraction.entities or caller_identity:
        confidence += 0.2
    if extraction.stat_types:
        confidence += 0.2
    if complexity == "simple":
        confidence += 0.1
    elif complexity == "moderate":
        confidence += 0.05
    return round(min(confidence, 1.0), 2)


def display_entities(
    extraction: ExtractionResult, caller_identity: Optional[str] = None
) -> List[str]:
    """Entity values with "I" replaced by the caller, or the caller alone."""
    entities = []
    for entity in extraction.entities:
        if entity.type == "player" and entity.value == "I" and caller_identity:
            entities.append(caller_identity)
        else:
            entities.append(entity.value)
    if not entities and caller_identity:
        entities.append(caller_identity)
    return entities


class QuestionUnderstandingEngine:
    """
    Turns questions into QueryIntents.

    Args:
        extractor: External entity extractor (awaited once per question)
        limits: Complexity limits; defaults come from ClubNLQConfig
    """

    def __init__(
        self,
        extractor: Optional[EntityExtractor] = None,
        limits: Optional[ComplexityLimits] = None,
    ):
        self.extractor = extractor
        if limits is None:
            config = get_config()
            limits = ComplexityLimits(
                max_entities_per_type=config.max_entities_per_type,
                max_stat_types=config.max_stat_types,
            )
        self.limits = limits

    def understand(
        self,
        question: str,
        extraction: ExtractionResult,
        caller_identity: Optional[str] = None,
    ) -> QueryIntent:
        """Build the intent for an already-extracted question."""
        candidates = [s.value for s in extraction.stat_types]
        corrected = apply_corrections(question, candidates)
        metrics = resolve_metrics(question, corrected) if candidates else []

        complexity = assess_complexity(extraction, self.limits)
        decision: ClarificationDecision = decide_clarification(
            question, extraction, self.limits, caller_identity
        )
        question_type = classify_question(question, extraction)

        intent = QueryIntent(
            type=question_type,
            entities=display_entities(extraction, caller_identity),
            metrics=metrics,
            time_range=extraction.time_frames[0].value if extraction.time_frames else None,
            team_entities=[e.value for e in extraction.entities_of_type("team")],
            opposition_entities=[e.value for e in extraction.entities_of_type("opposition")],
            complexity=complexity,
            confidence=compute_confidence(
                extraction, complexity, decision.required, caller_identity
            ),
            requires_clarification=decision.required,
            clarification_message=decision.message,
            result_quantity=detect_result_quantity(question),
        )

        if decision.required:
            logger.info(f"Clarification needed ({decision.reason}): {question!r}")
            record_safely(lambda m: m.record_clarification(decision.reason))
        logger.debug(
            f"Intent: type={intent.type}, metrics={intent.metrics}, "
            f"complexity={intent.complexity}, confidence={intent.confidence:.2f}"
        )
        return intent

    async def analyze(
        self, question: str, caller_identity: Optional[str] = None
    ) -> QueryIntent:
        """
        Extract entities for a question and build its intent.

        Raises:
            ExtractionError: If no extractor is configured or it fails
        """
        if self.extractor is None:
            raise ExtractionError(question, "no entity extractor configured")

        start_time = time.time()
        try:
            extraction = await self.extractor.resolve_entities(question)
        except ClubNLQError:
            raise
        except Exception as e:
            raise ExtractionError(question, f"{type(e).__name__}: {e}") from e
        finally:
            duration = time.time() - start_time
            record_safely(lambda m: m.record_stage("extract", duration))

        if not isinstance(extraction, ExtractionResult):
            try:
                extraction = ExtractionResult.model_validate(extraction)
            except ValidationError as e:
                raise ExtractionError(question, f"malformed extraction result: {e}") from e

        return self.understand(question, extraction, caller_identity)
