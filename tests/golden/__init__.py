"""
Golden tests for club_nlq.

This module provides regression cases for the most common club questions
to ensure intent stability across updates.
"""

from .queries import (
    GoldenQuestion,
    GOLDEN_QUESTIONS,
    get_question_by_id,
    get_questions_by_category,
    get_all_categories,
    get_question_statistics,
)

__all__ = [
    "GoldenQuestion",
    "GOLDEN_QUESTIONS",
    "get_question_by_id",
    "get_questions_by_category",
    "get_all_categories",
    "get_question_statistics",
]
