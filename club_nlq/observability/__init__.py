"""
Observability module for club_nlq.

Provides Prometheus metrics for question analysis and streak computations.
"""

from club_nlq.observability.metrics import (  # Prometheus metrics
    CLARIFICATIONS_REQUESTED,
    QUESTIONS_ANALYSED,
    STAGE_DURATION,
    STREAK_COMPUTATIONS,
    MetricsManager,
    get_metrics_manager,
    initialize_metrics,
    record_safely,
    track_stage,
)

__all__ = [
    "CLARIFICATIONS_REQUESTED",
    "QUESTIONS_ANALYSED",
    "STAGE_DURATION",
    "STREAK_COMPUTATIONS",
    "MetricsManager",
    "get_metrics_manager",
    "initialize_metrics",
    "record_safely",
    "track_stage",
]
