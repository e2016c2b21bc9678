# club_nlq/nlq/mock_tools.py
"""
Mock collaborators for testing the pipeline without a real extractor or
graph database.
"""

import asyncio
from typing import Any, Dict, List, Optional

from ..api.models import ExtractionResult


class StaticEntityExtractor:
    """Returns canned extraction results keyed by question text."""

    def __init__(
        self,
        results: Optional[Dict[str, Any]] = None,
        default: Optional[ExtractionResult] = None,
    ):
        self.results = dict(results or {})
        self.default = default or ExtractionResult()
        self.calls: List[str] = []

    async def resolve_entities(self, text: str) -> ExtractionResult:
        self.calls.append(text)
        await asyncio.sleep(0)  # Yield like a real extractor
        result = self.results.get(text, self.default)
        if isinstance(result, ExtractionResult):
            return result
        return ExtractionResult.model_validate(result)


class FailingEntityExtractor:
    """Extractor that always raises."""

    def __init__(self, error: Optional[Exception] = None):
        self.error = error or ConnectionError("extractor unavailable")

    async def resolve_entities(self, text: str) -> ExtractionResult:
        raise self.error


class InMemoryDataStore:
    """
    Data store answering queries from canned records.

    Records are registered per query string (use the constants in
    club_nlq.api.streaks); unknown queries return no records. Every call is
    logged in ``calls`` as ``(query, params)``.
    """

    def __init__(
        self,
        responses: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        error: Optional[Exception] = None,
    ):
        self.responses = dict(responses or {})
        self.error = error
        self.calls: List[tuple] = []

    async def execute_query(
        self, query: str, params: Optional[Dict[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        self.calls.append((query, dict(params or {})))
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return list(self.responses.get(query, []))


def player_extraction(
    player: str = "I",
    stat_types: Optional[List[str]] = None,
    **extra: Any,
) -> ExtractionResult:
    """Shorthand for a one-player extraction result."""
    return ExtractionResult(
        entities=[{"type": "player", "value": player, "original_text": player}],
        stat_types=[{"value": s, "original_text": s.lower()} for s in (stat_types or [])],
        **extra,
    )
