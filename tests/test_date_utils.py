"""
Unit tests for date normalisation and calendar-week mapping.
"""

from datetime import date, datetime

import pytest

from club_nlq.utils.date_utils import (
    calendar_highlight_range,
    normalize_date,
    since_year_start,
    week_number,
)


class TestNormalizeDate:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2023-09-16", "2023-09-16"),
            ("2023/09/16", "2023-09-16"),
            ("16/09/2023", "2023-09-16"),
            ("16-09-23", "2023-09-16"),
            ("2023-09-16T15:00:00Z", "2023-09-16"),
            (date(2023, 9, 16), "2023-09-16"),
            (datetime(2023, 9, 16, 15, 0), "2023-09-16"),
        ],
    )
    def test_supported_shapes(self, value, expected):
        assert normalize_date(value) == expected

    @pytest.mark.parametrize("value", [None, "", "not a date", "2023-02-30", "32/01/2023"])
    def test_unparseable_is_empty(self, value):
        assert normalize_date(value) == ""

    def test_since_year_start(self):
        assert since_year_start(2020) == "2021-01-01"


class TestWeekNumber:
    def test_sunday_jan_first_is_week_one(self):
        # 1 Jan 2023 was a Sunday
        assert week_number(date(2023, 1, 1)) == (2023, 1)
        assert week_number(date(2023, 1, 2)) == (2023, 2)

    def test_monday_jan_first(self):
        # 1 Jan 2024 was a Monday
        assert week_number(date(2024, 1, 1)) == (2024, 1)
        assert week_number(date(2024, 1, 7)) == (2024, 1)
        assert week_number(date(2024, 1, 8)) == (2024, 2)

    def test_mid_year(self):
        # 2022-01-01 was a Saturday (offset 5): (267 + 5) // 7 + 1 = 39
        assert week_number(date(2022, 9, 25)) == (2022, 39)


class TestHighlightRange:
    def test_range_across_year_end(self):
        # 2023 starts on a Sunday, so late December falls in week 53
        highlight = calendar_highlight_range("2023-12-30", "2024-01-06")
        assert highlight == {
            "start_week": 53,
            "start_year": 2023,
            "end_week": 1,
            "end_year": 2024,
        }

    def test_unresolvable_date_gives_none(self):
        assert calendar_highlight_range("2023-12-30", None) is None
        assert calendar_highlight_range("garbage", "2024-01-06") is None
