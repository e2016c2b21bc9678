"""
Tests for the temporal streak engine against an in-memory data store.
"""

import pytest

from club_nlq.api.errors import ErrorCode
from club_nlq.api.models import StreakError, StreakResult
from club_nlq.api.streaks import (
    ALL_APPEARANCES_QUERY,
    CLEAN_SHEETS_QUERY,
    CUSTOM_CONDITION_QUERY,
    GOAL_INVOLVEMENT_QUERY,
    SEASON_WEEKS_QUERY,
    TemporalStreakEngine,
    custom_condition,
    detect_streak_flavour,
)
from club_nlq.nlq.mock_tools import InMemoryDataStore

LUKE = "Luke Bangs"

SEASON_WEEK_RECORDS = [
    {"seasonWeek": "2022/23-1", "date": "2022-09-03"},
    {"seasonWeek": "2022/23-2", "date": "2022-09-10"},
    {"seasonWeek": "2022/23-4", "date": "2022-09-24"},
    {"seasonWeek": "2022/23-5", "date": "2022-10-01"},
    {"seasonWeek": "2022/23-6", "date": "2022-10-08"},
]

# Mixed formats and an unusable date, as they come out of the store
APPEARANCES = [
    {"date": "2023-09-02"},
    {"date": "09/09/2023"},
    {"date": "2023-09-16"},
    {"date": "2023-09-23T00:00:00Z"},
    {"date": "2023-09-30"},
    {"date": "TBC"},
]


# ============================================================================
# SEASON-WEEK STREAKS
# ============================================================================


@pytest.mark.asyncio
async def test_weekend_streak():
    store = InMemoryDataStore({SEASON_WEEKS_QUERY: SEASON_WEEK_RECORDS})
    result = await TemporalStreakEngine(store).compute_season_week_streak(LUKE)

    assert isinstance(result, StreakResult)
    assert result.streak_type == "consecutive_weekends"
    assert result.count == 3
    assert result.sequence == ["2022/23-4", "2022/23-5", "2022/23-6"]
    assert result.start_date == "2022-09-24"
    assert result.end_date == "2022-10-08"
    assert result.highlight_range.start_week == 39
    assert result.highlight_range.end_week == 41
    assert result.highlight_range.start_year == 2022
    assert len(result.data) == 5
    assert store.calls == [(SEASON_WEEKS_QUERY, {"playerName": LUKE})]


@pytest.mark.asyncio
async def test_weekend_streak_across_season_boundary():
    store = InMemoryDataStore(
        {
            SEASON_WEEKS_QUERY: [
                {"seasonWeek": "2022/23-51", "date": "2023-06-17"},
                {"seasonWeek": "2022/23-52", "date": "2023-06-24"},
                {"seasonWeek": "2023/24-1", "date": "2023-07-01"},
            ]
        }
    )
    result = await TemporalStreakEngine(store).compute_season_week_streak(LUKE)
    assert result.count == 3
    assert result.sequence[-1] == "2023/24-1"


@pytest.mark.asyncio
async def test_weekend_streak_with_no_data():
    result = await TemporalStreakEngine(InMemoryDataStore()).compute_season_week_streak(LUKE)
    assert result.type == "streak"
    assert result.count == 0
    assert result.sequence == []
    assert result.highlight_range is None


@pytest.mark.asyncio
async def test_weekend_streak_skips_records_without_week():
    store = InMemoryDataStore(
        {SEASON_WEEKS_QUERY: [{"seasonWeek": "", "date": "2022-09-03"}, {"seasonWeek": "2022/23-1"}]}
    )
    result = await TemporalStreakEngine(store).compute_season_week_streak(LUKE)
    assert result.count == 0


# ============================================================================
# GAME-HISTORY STREAKS
# ============================================================================


@pytest.mark.asyncio
async def test_clean_sheet_streak_broken_by_appearance():
    store = InMemoryDataStore(
        {
            ALL_APPEARANCES_QUERY: APPEARANCES,
            CLEAN_SHEETS_QUERY: [
                {"date": "2023-09-02", "conceded": 0},
                {"date": "2023-09-09", "conceded": 0},
                {"date": "2023-09-23", "conceded": 0},
            ],
        }
    )
    result = await TemporalStreakEngine(store).compute_game_history_streak(LUKE, "clean_sheet")

    assert result.streak_type == "consecutive_clean_sheets"
    assert result.count == 2
    assert result.sequence == ["2023-09-02", "2023-09-09"]
    assert result.start_date == "2023-09-02"
    assert result.end_date == "2023-09-09"
    assert result.highlight_range is not None
    assert len(result.data) == 3
    assert [call[0] for call in store.calls] == [ALL_APPEARANCES_QUERY, CLEAN_SHEETS_QUERY]


@pytest.mark.asyncio
async def test_goal_involvement_streak():
    store = InMemoryDataStore(
        {
            ALL_APPEARANCES_QUERY: APPEARANCES,
            GOAL_INVOLVEMENT_QUERY: [
                {"date": "2023-09-16", "goals": 1},
                {"date": "2023-09-23", "assists": 1},
                {"date": "30/09/2023", "penaltiesScored": 1},
            ],
        }
    )
    result = await TemporalStreakEngine(store).compute_game_history_streak(LUKE, "goal_involvement")
    assert result.streak_type == "consecutive_goal_involvement"
    assert result.count == 3
    assert result.end_date == "2023-09-30"


@pytest.mark.asyncio
async def test_custom_streak_uses_metric_field():
    store = InMemoryDataStore(
        {
            ALL_APPEARANCES_QUERY: APPEARANCES,
            CUSTOM_CONDITION_QUERY.format(field="assists"): [{"date": "2023-09-30"}],
        }
    )
    result = await TemporalStreakEngine(store).compute_game_history_streak(LUKE, "custom", "A")
    assert result.streak_type == "consecutive_assists"
    assert result.count == 1
    assert "md.assists > 0" in store.calls[1][0]


@pytest.mark.asyncio
async def test_custom_streak_defaults_to_goals():
    store = InMemoryDataStore()
    result = await TemporalStreakEngine(store).compute_game_history_streak(LUKE, "custom")
    assert result.streak_type == "consecutive_goals"
    assert result.count == 0
    assert "md.goals > 0" in store.calls[1][0]


@pytest.mark.asyncio
async def test_no_qualifying_games():
    store = InMemoryDataStore({ALL_APPEARANCES_QUERY: APPEARANCES})
    result = await TemporalStreakEngine(store).compute_game_history_streak(LUKE, "clean_sheet")
    assert isinstance(result, StreakResult)
    assert result.count == 0
    assert result.start_date is None


# ============================================================================
# FAILURES
# ============================================================================


@pytest.mark.asyncio
async def test_store_failure_becomes_streak_error():
    store = InMemoryDataStore(error=ConnectionError("graph unavailable"))
    engine = TemporalStreakEngine(store)

    for outcome in (
        await engine.compute_season_week_streak(LUKE),
        await engine.compute_game_history_streak(LUKE, "goal_involvement"),
    ):
        assert isinstance(outcome, StreakError)
        assert outcome.type == "error"
        assert outcome.code == ErrorCode.DATA_STORE_ERROR
        assert "graph unavailable" in outcome.message
        assert outcome.data == []


@pytest.mark.asyncio
async def test_unknown_condition_kind():
    store = InMemoryDataStore()
    result = await TemporalStreakEngine(store).compute_game_history_streak(LUKE, "hat_tricks")
    assert isinstance(result, StreakError)
    assert result.code == ErrorCode.INVALID_PARAMETER
    assert store.calls == []


# ============================================================================
# ROUTING
# ============================================================================


@pytest.mark.parametrize(
    "question,metrics,expected",
    [
        ("How many weekends in a row have I played?", [], "season_week"),
        ("What is my longest run of consecutive clean sheets?", [], "clean_sheet"),
        ("Longest clean sheet run?", ["CLS"], "clean_sheet"),
        ("What is my longest goal involvement streak?", [], "goal_involvement"),
        ("How many games in a row have I scored or assisted?", [], "goal_involvement"),
        ("What is my longest assist streak?", ["A"], "custom"),
    ],
)
def test_detect_streak_flavour(question, metrics, expected):
    assert detect_streak_flavour(question, metrics) == expected


def test_custom_condition_lookup():
    assert custom_condition("mom") == ("mom", "consecutive_mom")
    assert custom_condition("XYZ") == ("goals", "consecutive_goals")


@pytest.mark.asyncio
async def test_compute_streak_routes_weekend_question():
    store = InMemoryDataStore({SEASON_WEEKS_QUERY: SEASON_WEEK_RECORDS})
    result = await TemporalStreakEngine(store).compute_streak(
        LUKE, "How many weekends in a row have I played?"
    )
    assert result.streak_type == "consecutive_weekends"
    assert result.count == 3


@pytest.mark.asyncio
async def test_compute_streak_passes_metric_to_custom():
    store = InMemoryDataStore()
    result = await TemporalStreakEngine(store).compute_streak(
        LUKE, "What is my longest man of the match streak?", ["MOM"]
    )
    assert result.streak_type == "consecutive_mom"
