"""
Unit tests for question-type classification and result quantity.
"""

import pytest

from club_nlq.api.models import ExtractionResult
from club_nlq.nlq.classifier import classify_question, detect_result_quantity

NO_SIGNALS = ExtractionResult()
LUKE = ExtractionResult(entities=[{"type": "player", "value": "Luke Bangs"}])
SECONDS = ExtractionResult(entities=[{"type": "team", "value": "2s"}])
SINCE_2020 = ExtractionResult(time_frames=[{"type": "since", "value": "since 2020"}])


@pytest.mark.parametrize(
    "question,extraction,expected",
    [
        # player entity comes first, even over a time frame
        ("How many goals has Luke Bangs scored since 2020?", LUKE, "player"),
        ("How many goals have been scored?", SINCE_2020, "temporal"),
        ("Who scored the most goals last season?", NO_SIGNALS, "temporal"),
        ("What percentage of games did the 2s win?", SECONDS, "player"),
        ("What is the longest clean sheet streak?", NO_SIGNALS, "streak"),
        ("How many double game weeks have there been?", NO_SIGNALS, "double_game"),
        ("Which player has the most assists?", NO_SIGNALS, "ranking"),
        ("Top scorer at the club?", NO_SIGNALS, "comparison"),
        ("What is the penalty conversion rate?", NO_SIGNALS, "comparison"),
        ("Where did the 2s finish in the league?", SECONDS, "team"),
        ("Who is the club captain?", NO_SIGNALS, "club"),
        ("When is the next match?", NO_SIGNALS, "fixture"),
        ("How many assists are recorded?", NO_SIGNALS, "player"),
        ("Hello there", NO_SIGNALS, "general"),
    ],
)
def test_classify_question(question, extraction, expected):
    assert classify_question(question, extraction) == expected


def test_team_keyword_without_team_entity_is_not_team():
    assert classify_question("Where did we finish in the table?", NO_SIGNALS) == "general"


@pytest.mark.parametrize(
    "question,expected",
    [
        ("Which team have I scored the most goals for?", "singular"),
        ("Who has scored the most goals?", "singular"),
        ("What is my longest run of clean sheets?", "singular"),
        ("What was the score against Old Hamptonians?", "singular"),
        ("Which season did I score the most?", "singular"),
        ("How many goals have I scored?", "plural"),
        ("Which players have scored hat-tricks?", "plural"),
        ("Show me my goals by season", "plural"),
    ],
)
def test_detect_result_quantity(question, expected):
    assert detect_result_quantity(question) == expected
