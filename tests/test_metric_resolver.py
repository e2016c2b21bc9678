"""
Unit tests for metric resolution: priority table, key mapping and the
bare-games filter.
"""

import pytest

from club_nlq.nlq.corrections import apply_corrections
from club_nlq.nlq.metric_resolver import (
    METRIC_PRIORITY,
    STAT_KEY_MAP,
    filter_home_away,
    metric_key,
    resolve_metrics,
    select_by_priority,
)


class TestMetricKey:
    @pytest.mark.parametrize(
        "display,key",
        [
            ("Apps", "APP"),
            ("Goals", "G"),
            ("Penalties Scored", "PSC"),
            ("Goals Per Appearance", "GperAPP"),
            ("Conceded Per Appearance", "CperAPP"),
            ("Minutes Per Goal", "MperG"),
            ("Season Team of the Week", "SEASON_TOTW"),
            ("Home", "HOME"),
        ],
    )
    def test_lookup(self, display, key):
        assert metric_key(display) == key

    def test_lookup_is_case_insensitive(self):
        assert metric_key("penalties scored") == "PSC"

    def test_season_keys_are_spliced(self):
        assert metric_key("2017/18 Goals") == "2017/18GOALS"
        assert metric_key("2017/18 Apps") == "2017/18APPS"

    def test_team_keys_are_spliced(self):
        assert metric_key("3rd XI Apps") == "3sApps"
        assert metric_key("3rd XI Goals") == "3sGoals"
        assert metric_key("1st XI Goals") == "1sGoals"

    def test_unknown_passes_through(self):
        assert metric_key("Tackles") == "Tackles"


class TestPriority:
    def test_penalties_scored_beats_home(self):
        assert select_by_priority(["Home", "Penalties Scored"]) == "Penalties Scored"

    def test_ratio_beats_raw_count(self):
        assert select_by_priority(["Goals", "Goals Per Appearance"]) == "Goals Per Appearance"

    def test_qualified_beats_unqualified(self):
        assert select_by_priority(["Goals", "2019/20 Goals"]) == "2019/20 Goals"

    def test_team_beats_season(self):
        assert select_by_priority(["2019/20 Goals", "3rd XI Goals"]) == "3rd XI Goals"

    def test_named_stat_beats_qualified_count(self):
        assert select_by_priority(["2019/20 Goals", "Minutes Per Goal"]) == "Minutes Per Goal"
        assert select_by_priority(["3rd XI Apps", "Minutes"]) == "Minutes"
        assert select_by_priority(["4th XI Apps", "Assists"]) == "Assists"

    def test_penalty_subtype_beats_goals(self):
        assert select_by_priority(["Goals", "Penalties Missed"]) == "Penalties Missed"

    def test_no_match(self):
        assert select_by_priority(["Tackles"]) is None

    def test_every_mapped_name_has_a_priority(self):
        literal_entries = {e.lower() for e in METRIC_PRIORITY if isinstance(e, str)}
        assert {name.lower() for name in STAT_KEY_MAP} == literal_entries


class TestBareGamesFilter:
    def test_filters_home_and_away(self):
        assert filter_home_away("How many games have I played?", ["Apps", "Home", "Away"]) == ["Apps"]

    def test_explicit_home_kept(self):
        assert filter_home_away("How many home games have I played?", ["Home"]) == ["Home"]

    def test_only_home_falls_back_to_apps(self):
        assert filter_home_away("How many games have I played?", ["Home"]) == ["Apps"]

    def test_other_questions_untouched(self):
        assert filter_home_away("What is my record at home?", ["Home"]) == ["Home"]


class TestResolveMetrics:
    def test_spurious_home_never_wins(self):
        assert resolve_metrics("How many penalties have I scored?", ["Home", "Penalties Scored"]) == ["PSC"]

    def test_bare_games_never_home_or_away(self):
        metrics = resolve_metrics("How many games have I played?", ["Home", "Away"])
        assert metrics == ["APP"]

    def test_single_key(self):
        assert resolve_metrics("q", ["Goals", "Assists", "Minutes"]) == ["A"]

    def test_unmatched_returns_all_mapped(self):
        assert resolve_metrics("q", ["Tackles", "Headers"]) == ["Tackles", "Headers"]

    def test_empty(self):
        assert resolve_metrics("q", []) == []


@pytest.mark.parametrize(
    "question,candidates,expected",
    [
        ("How many minutes have I played for the 3s?", ["Minutes"], ["MIN"]),
        ("How many minutes have I played in 2019/20?", ["Minutes"], ["MIN"]),
        ("How many yellow cards have I received playing for the 2s?", ["Yellow Cards"], ["Y"]),
        ("What is my minutes per goal in 2019/20?", ["Minutes Per Goal"], ["MperG"]),
        ("What is my minutes per goal for the 3s?", ["Minutes Per Goal"], ["MperG"]),
        ("How many assists have I got in games for the 4th XI?", ["Assists"], ["A"]),
        ("When did I score my 1st goal?", ["Goals"], ["G"]),
        ("How many goals have I scored for the 3s?", ["Goals"], ["3sGoals"]),
    ],
)
def test_corrected_metrics_keep_named_stat(question, candidates, expected):
    assert resolve_metrics(question, apply_corrections(question, candidates)) == expected
