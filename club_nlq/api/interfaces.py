# club_nlq/api/interfaces.py
"""
Protocols for the external collaborators.

club_nlq never implements these itself: the fuzzy entity extractor and the
graph data store live in the surrounding application. Test doubles are in
club_nlq.nlq.mock_tools.
"""

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from .models import ExtractionResult


@runtime_checkable
class EntityExtractor(Protocol):
    """Turns raw question text into entities and stat-type candidates."""

    async def resolve_entities(self, text: str) -> ExtractionResult:
        ...


@runtime_checkable
class DataStore(Protocol):
    """Executes a Cypher query and returns its records as dicts."""

    async def execute_query(
        self, query: str, params: Optional[Dict[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        ...
