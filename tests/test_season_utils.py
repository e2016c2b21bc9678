"""
Unit tests for season and season-week parsing.
"""

import logging

import pytest

from club_nlq.utils.season_utils import (
    SeasonWeek,
    are_seasons_consecutive,
    find_season_token,
    format_season,
    is_adjacent,
    normalize_season,
    parse_season_week,
    parse_season_weeks,
    season_start_date,
    season_to_year,
    validate_season_format,
)


class TestSeasonFormat:
    def test_format_season(self):
        assert format_season(2023) == "2023/24"
        assert format_season(1999) == "1999/00"

    def test_validate_accepts_canonical(self):
        validate_season_format("2023/24")
        validate_season_format("1999/00")

    @pytest.mark.parametrize("season", ["2023/25", "2023-24", "23/24", "", "abcd/ef"])
    def test_validate_rejects(self, season):
        with pytest.raises(ValueError):
            validate_season_format(season)

    def test_season_to_year(self):
        assert season_to_year("2017/18") == 2017

    def test_are_seasons_consecutive(self):
        assert are_seasons_consecutive("2023/24", "2024/25")
        assert not are_seasons_consecutive("2023/24", "2025/26")
        assert not are_seasons_consecutive("2023/24", "garbage")

    def test_season_start_date(self):
        assert season_start_date("2020/21") == "2020-09-01"
        assert season_start_date("2020-21") == "2020-09-01"
        assert season_start_date("next season") is None


class TestSeasonTokens:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("2017/18", "2017/18"),
            ("2017-18", "2017/18"),
            ("2017 to 2018", "2017/18"),
            ("17/18", "2017/18"),
            ("2017/2018", "2017/18"),
        ],
    )
    def test_all_encodings_normalise(self, text, expected):
        assert normalize_season(text) == expected

    def test_non_consecutive_years_rejected(self):
        assert normalize_season("2017/19") is None
        assert normalize_season("2017 to 2019") is None

    def test_find_in_free_text(self):
        assert find_season_token("How many goals did I score in 2019-20?") == "2019/20"
        assert find_season_token("apps in the 21/22 season") == "2021/22"

    def test_leftmost_season_wins(self):
        assert find_season_token("between 2018/19 and 2020/21") == "2018/19"

    def test_dates_are_not_seasons(self):
        assert find_season_token("the game on 05/06/2021") is None

    def test_no_season(self):
        assert find_season_token("How many goals have I scored?") is None


class TestSeasonWeek:
    def test_parse(self):
        sw = parse_season_week("2023/24-38")
        assert sw == SeasonWeek(season="2023/24", week=38, original="2023/24-38")
        assert sw.start_year == 2023

    @pytest.mark.parametrize("token", ["week 38", "2023/24", "2023-24-1", "2023/24-0", "", None])
    def test_malformed_returns_none(self, token, caplog):
        with caplog.at_level(logging.WARNING):
            assert parse_season_week(token) is None

    def test_parse_many_drops_malformed(self):
        parsed = parse_season_weeks(["2023/24-1", "bad", "2023/24-2"])
        assert [sw.original for sw in parsed] == ["2023/24-1", "2023/24-2"]


class TestAdjacency:
    def test_same_season_next_week(self):
        assert is_adjacent("2023/24-10", "2023/24-11") is True

    def test_season_wraparound_from_week_52(self):
        assert is_adjacent("2023/24-52", "2024/25-1") is True

    def test_wraparound_requires_week_52(self):
        assert is_adjacent("2023/24-51", "2024/25-1") is False

    def test_wraparound_requires_next_season(self):
        assert is_adjacent("2022/23-52", "2024/25-1") is False

    def test_gap_within_season(self):
        assert is_adjacent("2023/24-10", "2023/24-12") is False

    def test_malformed_never_adjacent(self):
        assert is_adjacent("nonsense", "2023/24-1") is False

    def test_accepts_season_week_values(self):
        assert is_adjacent(parse_season_week("2023/24-3"), parse_season_week("2023/24-4"))
