"""
Prometheus metrics for club_nlq.
This module provides metrics tracking for:
- Questions analysed, by question type
- Clarifications requested
- Streak computations, by flavour and status
- Per-stage durations of the understanding and streak pipelines
"""

import functools
import inspect
import logging
import time
from typing import Callable, Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    Counter,
    Histogram,
    generate_latest,
)

from ..config import get_config

logger = logging.getLogger(__name__)

# METRIC DEFINITIONS

QUESTIONS_ANALYSED = Counter(
    "club_nlq_questions_total",
    "Total number of questions analysed",
    ["question_type", "status"],  # status: success, error
)

CLARIFICATIONS_REQUESTED = Counter(
    "club_nlq_clarifications_total",
    "Questions answered with a clarification request",
    ["reason"],  # reason: entity_limit, stat_limit, ranking_without_stat, missing_signals
)

STREAK_COMPUTATIONS = Counter(
    "club_nlq_streak_computations_total",
    "Streak computations by flavour",
    ["streak_type", "status"],  # status: success, empty, error
)

STAGE_DURATION = Histogram(
    "club_nlq_stage_duration_seconds",
    "Pipeline stage duration",
    ["stage"],  # stage: analyze, extract, streak
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)

# METRICS MANAGER


class MetricsManager:
    """
    Centralized metrics management.

    Recording never raises into the caller: a failed metric update is logged
    and the request carries on.
    """

    def __init__(self):
        self.start_time = time.time()
        logger.info("Metrics manager initialized")

    def record_question(self, question_type: str, status: str = "success"):
        QUESTIONS_ANALYSED.labels(question_type=question_type, status=status).inc()

    def record_clarification(self, reason: str):
        CLARIFICATIONS_REQUESTED.labels(reason=reason).inc()

    def record_streak(self, streak_type: str, status: str = "success"):
        """
        Record a streak computation.

        Args:
            streak_type: Flavour label, e.g. "consecutive_clean_sheets"
            status: success (non-zero run), empty (zero run) or error
        """
        STREAK_COMPUTATIONS.labels(streak_type=streak_type, status=status).inc()

    def record_stage(self, stage: str, duration: float):
        """
        Record pipeline stage duration.

        Args:
            stage: Pipeline stage (analyze, extract, streak)
            duration: Stage duration in seconds
        """
        STAGE_DURATION.labels(stage=stage).observe(duration)

    # ────────────────────────────────────────────────────────────────────
    # Export
    # ────────────────────────────────────────────────────────────────────

    def get_metrics(self) -> bytes:
        """Metrics in Prometheus text format."""
        return generate_latest(REGISTRY)

    def get_content_type(self) -> str:
        return CONTENT_TYPE_LATEST


# GLOBAL METRICS MANAGER

_metrics_manager: Optional[MetricsManager] = None


def initialize_metrics() -> MetricsManager:
    """
    Initialize global metrics manager.

    Returns:
        Initialized metrics manager
    """
    global _metrics_manager
    _metrics_manager = MetricsManager()
    return _metrics_manager


def get_metrics_manager() -> Optional[MetricsManager]:
    """
    Get the global metrics manager, creating it on first use.

    Returns None when metrics are disabled via CLUB_NLQ_ENABLE_METRICS.
    """
    if not get_config().enable_metrics:
        return None
    if _metrics_manager is None:
        return initialize_metrics()
    return _metrics_manager


def record_safely(action: Callable[[MetricsManager], None]) -> None:
    """Run a metric update, logging instead of raising on failure."""
    try:
        metrics = get_metrics_manager()
        if metrics is not None:
            action(metrics)
    except Exception as e:
        logger.warning(f"Failed to record metrics: {e}")


# DECORATORS


def track_stage(stage: str):
    """
    Decorator to record the duration of a pipeline stage.

    Works on both coroutine functions and plain functions. Exceptions from the
    wrapped function propagate unchanged.
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                return await func(*args, **kwargs)
            finally:
                duration = time.time() - start_time
                record_safely(lambda m: m.record_stage(stage, duration))

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                return func(*args, **kwargs)
            finally:
                duration = time.time() - start_time
                record_safely(lambda m: m.record_stage(stage, duration))

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator
